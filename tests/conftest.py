"""
Pytest configuration and fixtures for newsfeed tests.

This conftest.py file is automatically loaded by pytest and provides:
- Validation of feeds.yaml configuration before tests run
- An in-memory stand-in for the PostgreSQL feed store
"""

import pytest
import yaml
from pathlib import Path

from newsfeed.models import StoredFeedItem
from newsfeed.store import StoreWriteError


@pytest.fixture(scope="session", autouse=True)
def validate_feeds_yaml_on_startup():
    """
    Validate feeds.yaml configuration before any tests run.
    """
    feeds_path = Path("feeds.yaml")

    assert feeds_path.exists(), "feeds.yaml file must exist in project root"

    try:
        with open(feeds_path, 'r') as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        pytest.fail(f"feeds.yaml contains invalid YAML: {e}")

    assert isinstance(data, dict), f"feeds.yaml root element must be a mapping, got {type(data).__name__}"
    assert 'feeds' in data, "feeds.yaml must contain a 'feeds' key"
    assert isinstance(data['feeds'], list), "'feeds' value must be a list"
    assert data['feeds'], "'feeds' list cannot be empty"

    for i, feed in enumerate(data['feeds'], 1):
        if isinstance(feed, str):
            feed_url = feed
        elif isinstance(feed, dict):
            assert 'url' in feed and isinstance(feed['url'], str), \
                f"Feed #{i} must have a 'url' string"
            feed_url = feed['url']
        else:
            pytest.fail(f"Feed entry #{i} must be string or mapping")
        assert feed_url.startswith(('http://', 'https://')), \
            f"Feed URL must start with http:// or https://: {feed_url}"


class InMemoryStore:
    """Feed store double with the same ordering rules as the SQL one."""

    def __init__(self):
        self.items = []
        self.insert_calls = []
        self.fail_inserts = set()  # 1-based insert call numbers that raise
        self.closed = False

    def insert_many(self, records):
        self.insert_calls.append(list(records))
        if len(self.insert_calls) in self.fail_inserts:
            raise StoreWriteError("simulated failure")
        for record in records:
            self.items.append(StoredFeedItem(id=len(self.items) + 1, **record.model_dump()))

    def existing_links(self, links):
        stored = {item.link for item in self.items}
        return {link for link in links if link in stored}

    def select_by_id(self, item_id, limit):
        return [item for item in self.items if item.id == item_id][:limit]

    def select_all(self, limit):
        dated = sorted((i for i in self.items if i.published), key=lambda i: i.published, reverse=True)
        undated = [i for i in self.items if not i.published]
        return (dated + undated)[:limit]

    def search(self, query, limit):
        q = query.lower()
        hits = [
            i for i in self.items
            if q in i.title.lower() or q in (i.description or "").lower()
        ]
        return sorted(hits, key=lambda i: i.id, reverse=True)[:limit]

    def close(self):
        self.closed = True


@pytest.fixture
def memory_store():
    return InMemoryStore()
