import asyncio
import logging
from abc import ABC, abstractmethod
from contextvars import ContextVar
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from nightswatch.core.exceptions import ListingError
from nightswatch.models import WatcherState

from .notification_handler import NotificationHandler
from .retry_policy import ListingRetryPolicy
from .watch_state import WatchState

# Loop whose task (or a task spawned from it, e.g. an event handler) is running
_active_loop: ContextVar[Optional["BaseWatchLoop"]] = ContextVar("active_watch_loop", default=None)


@dataclass
class WatchLoopStats:
    """Counters kept by a watch loop for observability."""

    cycles: int = 0
    emissions: int = 0
    failures: int = 0
    last_emission_at: Optional[datetime] = None


class BaseWatchLoop(ABC):
    """
    Periodic poll task: read, diff, conditionally emit, sleep.

    Each start creates a fresh stop event that acts as the cancellation token.
    The loop checks it at the top of every cycle and sleeps by waiting on it,
    so a stop request wakes the loop immediately instead of after the interval.
    Listing failures never end the loop; they back off via the retry policy.
    """

    name = "Watcher"

    def __init__(
        self,
        state: WatchState,
        notifier: NotificationHandler,
        retry_policy: ListingRetryPolicy,
    ):
        self._state = state
        self._notifier = notifier
        self._retry_policy = retry_policy

        self._task: Optional[asyncio.Task] = None
        self._stop_event: Optional[asyncio.Event] = None
        self._consecutive_failures = 0
        self._stats = WatchLoopStats()

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    @property
    def watcher_state(self) -> WatcherState:
        return WatcherState.RUNNING if self.is_running else WatcherState.STOPPED

    @property
    def stats(self) -> WatchLoopStats:
        return self._stats

    @property
    def consecutive_failures(self) -> int:
        return self._consecutive_failures

    async def start(self) -> bool:
        if self.is_running:
            logging.warning(f"{self.name} already running")
            return False

        self._stop_event = asyncio.Event()
        self._consecutive_failures = 0
        self._task = asyncio.create_task(self._run(self._stop_event))
        logging.info(f"{self.name} started")
        return True

    async def stop(self) -> None:
        """Signal the loop to stop and wait until it has exited."""
        task = self._task
        if task is None:
            return

        if self._stop_event is not None:
            self._stop_event.set()

        if _active_loop.get() is self:
            # Stop requested from inside the loop (e.g. by an event handler);
            # the loop exits when the current cycle returns.
            return

        try:
            await task
        except asyncio.CancelledError:
            if not task.cancelled():
                raise
        finally:
            if self._task is task:
                self._task = None

        logging.info(f"{self.name} stopped")

    async def run_cycle(self) -> bool:
        """Run one poll cycle. Returns True if a notification was emitted."""
        self._stats.cycles += 1
        if not self._is_enabled():
            logging.debug(f"{self.name} disabled - skipping poll")
            return False

        emitted = await self._poll()
        if emitted:
            self._stats.emissions += 1
            self._stats.last_emission_at = datetime.now()
        return emitted

    @abstractmethod
    def _is_enabled(self) -> bool:
        ...

    @abstractmethod
    async def _poll(self) -> bool:
        ...

    async def _run(self, stop_event: asyncio.Event) -> None:
        _active_loop.set(self)
        logging.info(
            f"{self.name} loop starting - polling every {self._state.poll_interval_ms}ms"
        )
        try:
            while not stop_event.is_set():
                delay = await self._cycle_with_recovery()
                if await self._wait_for_stop(stop_event, delay):
                    break
        except asyncio.CancelledError:
            logging.debug(f"{self.name} loop cancelled")
            raise
        finally:
            logging.info(
                f"{self.name} loop stopped after {self._stats.cycles} cycles, "
                f"{self._stats.emissions} emissions"
            )

    async def _cycle_with_recovery(self) -> float:
        """Run a cycle and return how long to sleep before the next one."""
        try:
            await self.run_cycle()
        except ListingError as e:
            delay = self._record_failure()
            logging.warning(
                f"{self.name} listing failed ({self._consecutive_failures} consecutive): "
                f"{e} - retrying in {delay:.1f}s"
            )
            return delay
        except Exception as e:
            delay = self._record_failure()
            logging.error(
                f"Unexpected error in {self.name} cycle: {e} - retrying in {delay:.1f}s",
                exc_info=True,
            )
            return delay

        self._consecutive_failures = 0
        return self._state.poll_interval_seconds

    def _record_failure(self) -> float:
        self._consecutive_failures += 1
        self._stats.failures += 1
        return self._retry_policy.next_delay_seconds(self._consecutive_failures)

    @staticmethod
    async def _wait_for_stop(stop_event: asyncio.Event, delay: float) -> bool:
        """Sleep for ``delay`` seconds. Returns True if a stop was requested meanwhile."""
        try:
            await asyncio.wait_for(stop_event.wait(), timeout=delay)
            return True
        except asyncio.TimeoutError:
            return False
