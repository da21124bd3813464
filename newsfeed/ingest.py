# newsfeed/ingest.py

import logging
from dataclasses import dataclass, field
from typing import Callable, List, Optional

from newsfeed.batch import BatchReport, write_batches
from newsfeed.dedupe import dedupe
from newsfeed.fetch import FeedFetchError, fetch_feed
from newsfeed.normalize import normalize_entries
from newsfeed.parse import parse_feed

logger = logging.getLogger(__name__)


@dataclass
class IngestionResult:
    fetched: int = 0
    normalized: int = 0
    new: int = 0
    sources_failed: List[str] = field(default_factory=list)
    report: Optional[BatchReport] = None


def run_ingestion(
    store,
    feed_urls: List[str],
    fetcher: Callable = fetch_feed,
    within_batch: bool = False,
) -> IngestionResult:
    """
    One ingestion pass over every source: fetch, parse, normalize,
    drop what the store already has and write the rest.

    A source that cannot be fetched contributes nothing and the run goes
    on. An unresolvable date or a failed existing-link lookup aborts the
    run before anything is written.
    """
    result = IngestionResult()
    entries = []

    # Step 1: Fetch and parse every source
    for url in feed_urls:
        try:
            parsed = fetcher(url)
        except FeedFetchError as e:
            logger.error("Failed to fetch %s: %s", url, e)
            result.sources_failed.append(url)
            continue

        source_entries = parse_feed(parsed)
        entries.extend(source_entries)
        logger.info("Fetched %d entries from %s", len(source_entries), url)

    result.fetched = len(entries)

    # Step 2: Normalize text and dates
    records = normalize_entries(entries)
    result.normalized = len(records)

    # Step 3: Dedupe against what is already stored
    existing = store.existing_links(r.link for r in records if r.link)
    new_records = dedupe(records, existing, within_batch=within_batch)
    result.new = len(new_records)
    logger.info("New records after dedup: %d", result.new)

    # Step 4: Persist
    result.report = write_batches(store, new_records)
    return result
