"""
Notification Scheduler - Fixed-interval background delivery of notifications.

Owned by the application lifecycle: started on startup, stopped on shutdown.
A failing run is logged and never stops the loop. Runs do not overlap because
the next sleep only starts after the previous run returns.
"""

import asyncio
import logging
from typing import Callable, Optional

from fastapi.concurrency import run_in_threadpool

logger = logging.getLogger(__name__)


class NotificationScheduler:
    def __init__(self, job: Callable[[], object], interval_seconds: float):
        self.job = job
        self.interval_seconds = interval_seconds
        self.runs = 0
        self._task: Optional[asyncio.Task] = None

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self.is_running:
            return
        self._task = asyncio.create_task(self._loop())
        logger.info(f"Notification scheduler started (every {self.interval_seconds}s)")

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
        logger.info("Notification scheduler stopped")

    async def run_once(self) -> None:
        """Run the job once, logging instead of raising on failure."""
        logger.info("Running pending report notification task...")
        try:
            await run_in_threadpool(self.job)
            logger.info("Notification task completed successfully.")
        except Exception as e:
            logger.error(f"Error during notification task: {e}", exc_info=True)
        finally:
            self.runs += 1

    async def _loop(self) -> None:
        while True:
            await asyncio.sleep(self.interval_seconds)
            await self.run_once()
