# newsfeed/scheduler.py

import logging
import threading
from typing import Callable, Optional

DEFAULT_INTERVAL_MINUTES = 60

logger = logging.getLogger(__name__)


class IngestionScheduler:
    """
    Calls ``job`` every ``interval_minutes`` on a background thread.
    The first call happens one interval after ``start()``. A failing run
    is logged and the schedule carries on.
    """

    def __init__(self, job: Callable[[], object],
                 interval_minutes: float = DEFAULT_INTERVAL_MINUTES):
        self.job = job
        self.interval = interval_minutes * 60
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self):
        if self.running:
            return
        self._stop.clear()
        self._thread = threading.Thread(
            target=self._loop, name="ingestion-scheduler", daemon=True
        )
        self._thread.start()
        logger.info("Ingestion scheduled every %s seconds", self.interval)

    def stop(self, timeout: Optional[float] = None):
        if self._thread is None:
            return
        self._stop.set()
        self._thread.join(timeout)
        if self._thread.is_alive():
            # a run is still in flight; it exits once the job returns
            logger.warning("Ingestion scheduler still finishing a run")
            return
        self._thread = None

    def run_once(self):
        try:
            self.job()
        except Exception:
            logger.exception("Scheduled ingestion run failed")

    def _loop(self):
        while not self._stop.wait(self.interval):
            self.run_once()
