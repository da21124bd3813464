# newsfeed/query.py

from typing import List

from newsfeed.models import StoredFeedItem

DEFAULT_LIMIT = 10


class QueryService:
    """Read side of the API; everything is delegated to the store."""

    def __init__(self, store):
        self.store = store

    def get_by_id(self, item_id: int, limit: int = DEFAULT_LIMIT) -> List[StoredFeedItem]:
        return self.store.select_by_id(item_id, limit)

    def get_all(self, limit: int = DEFAULT_LIMIT) -> List[StoredFeedItem]:
        """Most recently published first, undated items last."""
        return self.store.select_all(limit)

    def search(self, query: str, limit: int = DEFAULT_LIMIT) -> List[StoredFeedItem]:
        return self.store.search(query, limit)
