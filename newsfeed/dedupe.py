# newsfeed/dedupe.py

import logging
from typing import AbstractSet, List

from newsfeed.models import NormalizedFeedRecord

logger = logging.getLogger(__name__)


def dedupe(
    incoming: List[NormalizedFeedRecord],
    existing_links: AbstractSet[str],
    within_batch: bool = False,
) -> List[NormalizedFeedRecord]:
    """
    Returns the records that should be inserted, in input order.

    A record is dropped when its title is empty or its link is already
    in ``existing_links``. Two records sharing a link inside ``incoming``
    both survive unless ``within_batch`` is set, in which case only the
    first one does.
    """
    selected = []
    seen = set()

    for record in incoming:
        if not record.title:
            continue

        if record.link in existing_links:
            continue

        if within_batch:
            if record.link in seen:
                continue
            seen.add(record.link)

        selected.append(record)

    dropped = len(incoming) - len(selected)
    if dropped:
        logger.info("Dropped %d duplicate or untitled records", dropped)

    return selected
