# newsfeed/main.py

import logging
from typing import List

import uvicorn
import yaml

from newsfeed.api import create_app
from newsfeed.config import configure_logging, load_settings
from newsfeed.store import FeedStore

FEEDS_FILE_DEFAULT = "feeds.yaml"

logger = logging.getLogger(__name__)


def load_feeds(feeds_file=FEEDS_FILE_DEFAULT) -> List[str]:
    """Parse the YAML source list and return the feed URLs in file order.

    Expected structure::

        feeds:
          - https://example.com/feed
          - url: https://another.example/feed

    Repeated URLs are kept once, at their first position.
    """
    with open(feeds_file, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f)

    if not isinstance(data, dict) or "feeds" not in data:
        raise ValueError("feeds.yaml must be a mapping with a top-level 'feeds' key")

    feeds = data["feeds"]
    if not isinstance(feeds, list):
        raise ValueError("'feeds' value in feeds.yaml must be a list")

    result = []
    for feed in feeds:
        if isinstance(feed, str):
            feed_url = feed.strip()
        elif isinstance(feed, dict):
            feed_url = feed.get("url")
            if not isinstance(feed_url, str):
                raise ValueError("Feed mapping in feeds.yaml missing 'url'")
            feed_url = feed_url.strip()
        else:
            raise ValueError("Feed entry in feeds.yaml must be a string or mapping")

        if feed_url and feed_url not in result:
            result.append(feed_url)

    if not result:
        raise ValueError("feeds.yaml must define at least one feed")
    return result


def main():
    settings = load_settings()
    configure_logging(settings.log_level)

    feeds = load_feeds(settings.feeds_file)
    logger.info("Loaded %d feed sources from %s", len(feeds), settings.feeds_file)

    store = FeedStore(
        settings.database_url,
        min_conn=settings.db_pool_min,
        max_conn=settings.db_pool_max,
    )
    store.init_schema()

    app = create_app(store, feeds, settings)
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    main()
