"""Refresh scheduler: asyncio daemon that rebuilds the index every midnight."""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from datetime import datetime, timedelta

from resource_search.application.services.index_refresh_service import IndexRefreshService
from resource_search.domain.exceptions import BuildInProgressError

logger = logging.getLogger(__name__)


def _local_now() -> datetime:
    return datetime.now().astimezone()


def next_midnight(now: datetime) -> datetime:
    """Start of the day after ``now``, in ``now``'s timezone."""
    tomorrow = (now + timedelta(days=1)).date()
    return datetime.combine(tomorrow, datetime.min.time(), tzinfo=now.tzinfo)


def seconds_until_next_midnight(now: datetime) -> float:
    return (next_midnight(now) - now).total_seconds()


class RefreshScheduler:
    """Runs a forced refresh at every local midnight.

    Runs as an asyncio.Task inside FastAPI's lifespan. A failed refresh is
    logged and the previously served index stays in place; either way the
    next run is scheduled for the following midnight. Manual refreshes go
    straight to IndexRefreshService and do not move the schedule.
    """

    def __init__(
        self,
        refresh_service: IndexRefreshService,
        *,
        clock: Callable[[], datetime] = _local_now,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self._refresh_service = refresh_service
        self._clock = clock
        self._sleep = sleep
        self._running = False
        self._task: asyncio.Task | None = None
        self.next_run_at: datetime | None = None

    @property
    def is_running(self) -> bool:
        return self._running

    async def start(self) -> None:
        """Start the scheduling loop."""
        self._running = True
        self._task = asyncio.create_task(self._loop())
        logger.info("RefreshScheduler started")

    async def stop(self) -> None:
        """Cancel the scheduling loop; an in-flight build is cancelled with it."""
        self._running = False
        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None
        logger.info("RefreshScheduler stopped")

    async def _loop(self) -> None:
        while self._running:
            now = self._clock()
            self.next_run_at = next_midnight(now)
            logger.info(
                "Next embedding refresh scheduled for %s", self.next_run_at.isoformat()
            )
            await self._sleep(seconds_until_next_midnight(now))
            await self.run_once()

    async def run_once(self) -> bool:
        """Run one scheduled refresh; returns True when a new index was published."""
        logger.info("Starting daily embedding refresh...")
        try:
            records = await self._refresh_service.refresh(force=True)
        except BuildInProgressError:
            logger.warning("Daily refresh skipped: a build is already in progress")
            return False
        except Exception:
            logger.exception("Daily refresh failed")
            return False

        logger.info("Daily refresh completed successfully (%d resources).", len(records))
        return True
