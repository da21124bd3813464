"""
PostgreSQL-backed feed store.
Every operation borrows its own connection from a thread-safe pool, so
query traffic and ingestion runs never wait on each other in-process.
"""
import logging
from contextlib import contextmanager
from typing import Iterable, List, Optional, Set

import psycopg2
from psycopg2.extras import RealDictCursor, execute_values
from psycopg2.pool import ThreadedConnectionPool

from newsfeed.models import NormalizedFeedRecord, StoredFeedItem

logger = logging.getLogger(__name__)

COLUMNS = ("title", "link", "description", "content", "author", "image", "published")

SCHEMA_SQL = """
    CREATE TABLE IF NOT EXISTS feed_items (
        id BIGSERIAL PRIMARY KEY,
        title TEXT NOT NULL,
        link TEXT,
        description TEXT,
        content TEXT,
        author TEXT,
        image TEXT,
        published TIMESTAMP
    );
    CREATE INDEX IF NOT EXISTS feed_items_link_idx ON feed_items (link);
"""

SELECT_SQL = "SELECT id, " + ", ".join(COLUMNS) + " FROM feed_items"


class StoreError(Exception):
    pass


class StoreReadError(StoreError):
    pass


class StoreWriteError(StoreError):
    pass


def _like_pattern(query: str) -> str:
    escaped = query.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


class FeedStore:
    """Read/write access to the feed_items table"""

    def __init__(self, dsn: str, min_conn: int = 1, max_conn: int = 10,
                 pool: Optional[ThreadedConnectionPool] = None):
        """
        Args:
            dsn: libpq connection string
            min_conn: Minimum connections in pool
            max_conn: Maximum connections in pool
            pool: Pre-built pool (the dsn is then ignored)
        """
        if pool is None:
            try:
                pool = ThreadedConnectionPool(min_conn, max_conn, dsn=dsn)
            except psycopg2.Error as e:
                raise StoreError(f"Could not create connection pool: {e}") from e
        self.pool = pool

    @contextmanager
    def get_connection(self):
        """Get connection from pool (context manager)"""
        conn = self.pool.getconn()
        try:
            yield conn
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            self.pool.putconn(conn)

    def close(self):
        self.pool.closeall()

    def init_schema(self) -> None:
        with self.get_connection() as conn:
            with conn.cursor() as cur:
                cur.execute(SCHEMA_SQL)

    # --- Writes ---

    def insert_many(self, records: List[NormalizedFeedRecord]) -> None:
        """Insert all records with a single statement."""
        rows = [tuple(getattr(r, col) for col in COLUMNS) for r in records]
        try:
            with self.get_connection() as conn:
                with conn.cursor() as cur:
                    execute_values(
                        cur,
                        f"INSERT INTO feed_items ({', '.join(COLUMNS)}) VALUES %s",
                        rows,
                        page_size=max(len(rows), 1),
                    )
        except psycopg2.Error as e:
            raise StoreWriteError(f"Failed to insert {len(rows)} records: {e}") from e

    # --- Reads ---

    def existing_links(self, links: Iterable[str]) -> Set[str]:
        """
        Return the subset of ``links`` already stored.
        Raises StoreReadError instead of answering empty on failure.
        """
        links = list(set(links))
        if not links:
            return set()

        try:
            with self.get_connection() as conn:
                with conn.cursor() as cur:
                    cur.execute(
                        "SELECT DISTINCT link FROM feed_items WHERE link = ANY(%s)",
                        (links,),
                    )
                    return {row[0] for row in cur.fetchall()}
        except psycopg2.Error as e:
            raise StoreReadError(f"Failed to look up existing links: {e}") from e

    def select_by_id(self, item_id: int, limit: int) -> List[StoredFeedItem]:
        return self._select(f"{SELECT_SQL} WHERE id = %s LIMIT %s", (item_id, limit))

    def select_all(self, limit: int) -> List[StoredFeedItem]:
        return self._select(
            f"{SELECT_SQL} ORDER BY published DESC NULLS LAST LIMIT %s", (limit,)
        )

    def search(self, query: str, limit: int) -> List[StoredFeedItem]:
        pattern = _like_pattern(query)
        return self._select(
            f"{SELECT_SQL} WHERE title ILIKE %s OR description ILIKE %s"
            " ORDER BY id DESC LIMIT %s",
            (pattern, pattern, limit),
        )

    def _select(self, sql: str, params: tuple) -> List[StoredFeedItem]:
        try:
            with self.get_connection() as conn:
                with conn.cursor(cursor_factory=RealDictCursor) as cur:
                    cur.execute(sql, params)
                    return [StoredFeedItem(**row) for row in cur.fetchall()]
        except psycopg2.Error as e:
            logger.error("Feed store read failed: %s", e)
            return []
