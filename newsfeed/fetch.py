# newsfeed/fetch.py

import logging

import requests
import feedparser

DEFAULT_TIMEOUT = 10

logger = logging.getLogger(__name__)


class FeedFetchError(Exception):
    pass


def fetch_feed(url: str, timeout: int = DEFAULT_TIMEOUT):
    try:
        resp = requests.get(
            url,
            timeout=timeout,
            headers={
                "User-Agent": "newsfeed-ingest/0.1"
            },
        )
        resp.raise_for_status()
    except requests.RequestException as e:
        raise FeedFetchError(f"HTTP error fetching {url}: {e}") from e

    parsed = feedparser.parse(resp.content)

    # feedparser sets bozo for recoverable problems too; only an
    # undecodable document with nothing in it is a failure
    if parsed.bozo:
        if not parsed.entries:
            raise FeedFetchError(
                f"Failed to parse feed {url}: {parsed.bozo_exception}"
            )
        logger.warning("Feed %s is malformed, keeping %d decoded entries: %s",
                       url, len(parsed.entries), parsed.bozo_exception)

    return parsed
