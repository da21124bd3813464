# newsfeed/normalize.py

import logging
import re
from datetime import datetime, timezone
from typing import Iterable, List, Optional

from newsfeed.models import NormalizedFeedRecord, RawFeedEntry

logger = logging.getLogger(__name__)

# A tag runs from "<" to the first ">" that is not inside a quoted
# attribute value.
TAG_RE = re.compile(r"""<(?:"[^"]*"|'[^']*'|[^'">])*>""")

# Applied in this order; "&amp;" comes late so "&amp;#039;" decodes to
# "&#039;" and not to "'".
ENTITY_REPLACEMENTS = (
    ("&#039;", "'"),
    ("&#8216;", "'"),
    ("&#8217;", "'"),
    ("&#46;", "."),
    ("&amp;", "&"),
    ("&quot;", '"'),
    ("&#8220;", '"'),
)

AD_SNIPPET = "(adsbygoogle = window.adsbygoogle || []).push({});"

ISO_LIKE_FORMAT = "%Y-%m-%d %H:%M:%S"
ISO_LIKE_RE = re.compile(r"\d{4}-\d{1,2}-\d{1,2} \d{1,2}:\d{1,2}:\d{1,2}")
RFC822_FORMAT = "%a, %d %b %Y %H:%M:%S %z"


class DateResolutionError(ValueError):
    pass


def normalize_text(text: Optional[str]) -> Optional[str]:
    """
    Strip markup from a free-text field and decode the handful of
    entities feeds actually emit.
    """
    if text is None:
        return None

    text = TAG_RE.sub("", text)
    for entity, replacement in ENTITY_REPLACEMENTS:
        text = text.replace(entity, replacement)
    text = text.replace("\n\n", "\n")
    text = text.replace(AD_SNIPPET, "")

    return text


def resolve_date(raw: str) -> datetime:
    """
    Convert a feed timestamp into a naive UTC datetime.

    ``YYYY-MM-DD HH:MM:SS`` is tried first (anything after the seconds is
    ignored and the value is taken as-is), then RFC 822
    (``Tue, 02 Jan 2024 15:04:05 +0000``). Anything else raises
    DateResolutionError.
    """
    match = ISO_LIKE_RE.match(raw)
    if match:
        try:
            return datetime.strptime(match.group(0), ISO_LIKE_FORMAT)
        except ValueError:
            pass  # out-of-range field, fall through to RFC 822

    try:
        parsed = datetime.strptime(raw.strip(), RFC822_FORMAT)
    except ValueError as e:
        raise DateResolutionError(f"Unrecognized date format: {raw!r}") from e

    return parsed.astimezone(timezone.utc).replace(tzinfo=None)


def normalize_entry(raw: RawFeedEntry) -> NormalizedFeedRecord:
    return NormalizedFeedRecord(
        title=raw.title,
        link=raw.link or None,
        description=normalize_text(raw.description),
        content=normalize_text(raw.content),
        author=raw.author or None,
        image=raw.images,
        published=resolve_date(raw.published) if raw.published else None,
    )


def normalize_entries(entries: Iterable[RawFeedEntry]) -> List[NormalizedFeedRecord]:
    """
    Normalize entries in order, discarding the ones without a title first.
    A DateResolutionError is not caught here.
    """
    records = []
    skipped = 0

    for entry in entries:
        if not entry.title:
            skipped += 1
            continue
        records.append(normalize_entry(entry))

    if skipped:
        logger.info("Skipped %d entries without a title", skipped)

    return records
