"""
FastAPI routes for the news feed service
"""
import logging
from contextlib import asynccontextmanager
from typing import Callable, List, Optional

from fastapi import FastAPI, Query

from newsfeed.batch import WRITTEN
from newsfeed.config import Settings
from newsfeed.fetch import fetch_feed
from newsfeed.ingest import run_ingestion
from newsfeed.models import StoredFeedItem
from newsfeed.query import DEFAULT_LIMIT, QueryService
from newsfeed.scheduler import IngestionScheduler
from newsfeed.store import StoreReadError

logger = logging.getLogger(__name__)


def create_app(store, feed_urls: List[str], settings: Settings,
               fetcher: Callable = fetch_feed) -> FastAPI:
    """Build the API around an already constructed store."""
    queries = QueryService(store)

    def ingest():
        return run_ingestion(
            store, feed_urls, fetcher=fetcher,
            within_batch=settings.dedupe_within_batch,
        )

    scheduler = IngestionScheduler(ingest, settings.ingest_interval_minutes)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if settings.scheduler_enabled:
            scheduler.start()
        yield
        scheduler.stop()
        store.close()

    app = FastAPI(
        title="newsfeed",
        description="Syndicated news ingestion and query API",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.scheduler = scheduler

    @app.get("/")
    def root():
        return {"name": "newsfeed", "status": "running"}

    @app.get("/news", response_model=List[StoredFeedItem])
    def get_news(
        id: Optional[int] = None,
        query: Optional[str] = None,
        limit: int = Query(DEFAULT_LIMIT, ge=1),
    ):
        if id is not None:
            return queries.get_by_id(id, limit)
        if query:
            return queries.search(query, limit)
        return queries.get_all(limit)

    @app.get("/news/create")
    def create_news():
        logger.info("Ingestion triggered over HTTP")
        try:
            result = ingest()
        except StoreReadError as e:
            logger.error("Ingestion aborted, existing links unavailable: %s", e)
            return {
                "status": "not_ingested",
                "message": "Feed store unavailable, nothing was ingested",
            }

        report = result.report
        if report.status == WRITTEN:
            message = f"Found {result.new} new records, inserted {report.written}"
            if report.unflushed:
                message += f", {report.unflushed} left unwritten"
            return {"status": "created", "message": message}
        return {"status": "no_new_records", "message": "No new records found"}

    return app
