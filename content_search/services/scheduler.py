"""Interval and manual triggering of refresh cycles."""

import asyncio
import logging
import random
from datetime import datetime
from typing import Awaitable, Callable, Optional

from ..config.base import RefreshConfig
from ..monitoring.events import Event, EventManager, EventType
from .base import RefreshInProgressError

logger = logging.getLogger(__name__)

Cycle = Callable[[], Awaitable[None]]


def resolve_startup_delay(refresh_config: RefreshConfig) -> float:
    """Get the delay in seconds before the first refresh cycle.

    Either the fixed ``startup_delay`` or, with ``randomize_startup_delay``, a random
    delay up to ``max_startup_delay``.
    """
    if refresh_config.randomize_startup_delay:
        return random.uniform(0, refresh_config.max_startup_delay)
    return refresh_config.startup_delay or 0.0


class RefreshScheduler:
    """Runs a refresh cycle on a fixed interval and on demand.

    At most one cycle runs at a time. Interval ticks wait for a running cycle to finish;
    manual triggers arriving while a cycle runs are skipped.
    """

    def __init__(
        self,
        cycle: Cycle,
        interval: float,
        service_name: str = "content-search",
        startup_delay: float = 0.0,
        events: Optional[EventManager] = None,
    ) -> None:
        """Initialize refresh scheduler.

        Args:
            cycle: Coroutine function running one refresh cycle
            interval: Seconds between cycles
            service_name: Service name used in logs
            startup_delay: Seconds to wait before the first cycle
            events: Event manager
        """
        self.cycle = cycle
        self.interval = interval
        self.service_name = service_name
        self.startup_delay = startup_delay
        self.events = events
        self._lock = asyncio.Lock()
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        """Whether the interval loop is active."""
        return self._task is not None and not self._task.done()

    @property
    def lock(self) -> asyncio.Lock:
        """Lock held while a cycle runs; hold it to exclude cycles."""
        return self._lock

    @property
    def in_flight(self) -> bool:
        """Whether a cycle is currently running."""
        return self._lock.locked()

    def start(self) -> None:
        """Start the interval loop."""
        if self.running:
            return
        logger.info(
            f"{self.service_name} will update the cache every {self.interval / 60:g} minutes"
        )
        self._task = asyncio.create_task(self._loop())

    async def stop(self) -> None:
        """Stop the interval loop."""
        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None

    async def trigger(self) -> bool:
        """Run one cycle out of band.

        Returns:
            Whether a cycle ran; False if another cycle was already running
        """
        try:
            await self.run_cycle(wait=False)
        except RefreshInProgressError:
            logger.info(f"{self.service_name} refresh already in progress, trigger skipped")
            if self.events:
                self.events.emit(
                    Event(
                        type=EventType.REFRESH_SKIPPED,
                        timestamp=datetime.now(),
                        component="scheduler",
                        description="Refresh already in progress",
                    )
                )
            return False
        return True

    async def run_cycle(self, wait: bool = True) -> None:
        """Run one cycle.

        Errors escaping the cycle are logged and never propagate.

        Args:
            wait: Wait for a running cycle instead of failing

        Raises:
            RefreshInProgressError: If ``wait`` is False and a cycle is running
        """
        if not wait and self._lock.locked():
            raise RefreshInProgressError(self.service_name)

        async with self._lock:
            try:
                await self.cycle()
            except Exception:
                logger.exception(f"{self.service_name} - refresh cycle failed")

    async def _loop(self) -> None:
        if self.startup_delay:
            logger.info(
                f"{self.service_name} will start fetching with a delay of "
                f"{self.startup_delay:.1f} seconds"
            )
            await asyncio.sleep(self.startup_delay)
        else:
            logger.info(f"{self.service_name} will start now.")

        while True:
            await self.run_cycle()
            await asyncio.sleep(self.interval)
