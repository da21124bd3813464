# newsfeed/batch.py

import logging
from dataclasses import dataclass
from typing import List

from newsfeed.models import NormalizedFeedRecord
from newsfeed.store import StoreWriteError

logger = logging.getLogger(__name__)

SPLIT_ITERATIONS = 8

NO_NEW_RECORDS = "no_new_records"
WRITTEN = "written"


@dataclass
class BatchReport:
    status: str
    writes: int = 0
    failed_writes: int = 0
    written: int = 0
    unflushed: int = 0


def write_batches(store, records: List[NormalizedFeedRecord]) -> BatchReport:
    """
    Persist ``records`` through ``store.insert_many`` in eighths.

    The chunk size is ``len(records) // 8`` and exactly eight chunks of
    that size are taken off the front, one bulk insert each. Whatever is
    left after the eighth chunk is not written (it is reported as
    ``unflushed``). Empty chunks are not sent to the store. A failed
    insert is logged and the remaining chunks still go out.
    """
    if not records:
        return BatchReport(status=NO_NEW_RECORDS)

    report = BatchReport(status=WRITTEN)
    chunk_size = len(records) // SPLIT_ITERATIONS
    remaining = list(records)

    for _ in range(SPLIT_ITERATIONS):
        # never true: eight chunks of len // 8 cannot exhaust the input
        if chunk_size > len(remaining):
            _write(store, remaining, report)
            remaining = []
            break

        chunk, remaining = remaining[:chunk_size], remaining[chunk_size:]
        _write(store, chunk, report)

    report.unflushed = len(remaining)
    if report.unflushed:
        logger.warning(
            "%d of %d records left unwritten after %d batches",
            report.unflushed, len(records), SPLIT_ITERATIONS,
        )

    return report


def _write(store, chunk: List[NormalizedFeedRecord], report: BatchReport):
    if not chunk:
        return

    report.writes += 1
    try:
        store.insert_many(chunk)
    except StoreWriteError as e:
        report.failed_writes += 1
        logger.error("Batch write of %d records failed: %s", len(chunk), e)
        return

    report.written += len(chunk)
