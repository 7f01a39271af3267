import asyncio
import logging
import os
from typing import Optional

from nightswatch.config import Settings
from nightswatch.core.events.event_bus import DomainEventBus
from nightswatch.core.exceptions import ListingError, WatchControllerDisposedError
from nightswatch.models import WatchStatus
from nightswatch.services.listing import BaseVolumeLister, DirectoryLister, ListerFactory
from nightswatch.services.snapshot_builder import SnapshotBuilder
from nightswatch.utils.path_utils import normalize_directory, parent_directory

from .directory_watcher import DirectoryWatchLoop
from .drive_watcher import DriveWatchLoop
from .notification_handler import NotificationHandler
from .retry_policy import ListingRetryPolicy
from .watch_state import WatchState


class WatchController:
    """
    Owns both watch loops and the mutable watch configuration.

    Commands (change directory, start/stop, configuration setters) are routed
    from here to the loops. Every setting change is published as a
    ConfigChangedEvent on the same bus as the watch notifications.
    """

    def __init__(
        self,
        volume_lister: BaseVolumeLister,
        directory_lister: DirectoryLister,
        event_bus: DomainEventBus,
        initial_directory: str = "",
        poll_interval_ms: int = 1000,
        drive_watcher_enabled: bool = True,
        directory_watcher_enabled: bool = True,
        listing_retry_max_backoff_ms: int = 30000,
        sep: str = os.sep,
    ):
        _validate_poll_interval(poll_interval_ms)
        self._sep = sep
        self._directory_lister = directory_lister
        self._state = WatchState(
            monitored_directory=normalize_directory(initial_directory, sep),
            poll_interval_ms=poll_interval_ms,
            drive_watcher_enabled=drive_watcher_enabled,
            directory_watcher_enabled=directory_watcher_enabled,
        )
        self._notifier = NotificationHandler(event_bus)

        snapshot_builder = SnapshotBuilder(volume_lister, directory_lister, sep=sep)
        retry_policy = ListingRetryPolicy(
            base_interval_ms=lambda: self._state.poll_interval_ms,
            max_backoff_ms=listing_retry_max_backoff_ms,
        )
        self._drive_loop = DriveWatchLoop(
            volume_lister, snapshot_builder, self._notifier, self._state, retry_policy
        )
        self._directory_loop = DirectoryWatchLoop(
            directory_lister, snapshot_builder, self._notifier, self._state, retry_policy
        )

        self._command_lock = asyncio.Lock()
        self._disposed = False

        logging.info(
            f"WatchController initialized - directory: {self._state.monitored_directory or '<none>'}, "
            f"interval: {poll_interval_ms}ms"
        )

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        event_bus: DomainEventBus,
        lister_factory: Optional[ListerFactory] = None,
    ) -> "WatchController":
        factory = lister_factory or ListerFactory()
        return cls(
            volume_lister=factory.create_volume_lister(),
            directory_lister=factory.create_directory_lister(),
            event_bus=event_bus,
            initial_directory=settings.initial_directory,
            poll_interval_ms=settings.poll_interval_ms,
            drive_watcher_enabled=settings.drive_watcher_enabled,
            directory_watcher_enabled=settings.directory_watcher_enabled,
            listing_retry_max_backoff_ms=settings.listing_retry_max_backoff_ms,
        )

    # -- state -------------------------------------------------------------

    @property
    def monitored_directory(self) -> str:
        return self._state.monitored_directory

    @property
    def poll_interval_ms(self) -> int:
        return self._state.poll_interval_ms

    @property
    def drive_watcher_enabled(self) -> bool:
        return self._state.drive_watcher_enabled

    @property
    def directory_watcher_enabled(self) -> bool:
        return self._state.directory_watcher_enabled

    @property
    def is_drive_watcher_running(self) -> bool:
        return self._drive_loop.is_running

    @property
    def is_directory_watcher_running(self) -> bool:
        return self._directory_loop.is_running

    @property
    def is_disposed(self) -> bool:
        return self._disposed

    @property
    def drive_loop(self) -> DriveWatchLoop:
        return self._drive_loop

    @property
    def directory_loop(self) -> DirectoryWatchLoop:
        return self._directory_loop

    def get_status(self) -> WatchStatus:
        drive_stats = self._drive_loop.stats
        directory_stats = self._directory_loop.stats
        return WatchStatus(
            monitored_directory=self._state.monitored_directory,
            poll_interval_ms=self._state.poll_interval_ms,
            drive_watcher_enabled=self._state.drive_watcher_enabled,
            directory_watcher_enabled=self._state.directory_watcher_enabled,
            drive_watcher_state=self._drive_loop.watcher_state,
            directory_watcher_state=self._directory_loop.watcher_state,
            drive_cycles=drive_stats.cycles,
            drive_emissions=drive_stats.emissions,
            drive_failures=drive_stats.failures,
            directory_cycles=directory_stats.cycles,
            directory_emissions=directory_stats.emissions,
            directory_failures=directory_stats.failures,
            is_disposed=self._disposed,
        )

    # -- directory commands ------------------------------------------------

    async def change_directory(self, path: str) -> None:
        """
        Switch the monitored directory and emit a DirectorySwitchedEvent for it.

        Empty input, a path that is not a directory, or the directory already
        being monitored are silent no-ops.
        """
        self._ensure_not_disposed("change directory")

        if not path or not path.strip():
            logging.debug("Ignoring change directory request with empty path")
            return

        normalized = normalize_directory(path, self._sep)
        if not await self._directory_lister.is_directory(normalized):
            logging.debug(f"Ignoring change directory request - not a directory: {path!r}")
            return

        snapshot = None
        # Only state changes happen under the lock; handlers may issue commands
        async with self._command_lock:
            old_directory = self._state.monitored_directory
            if normalized == old_directory:
                logging.debug(f"Already monitoring {normalized}")
                return

            self._state.request_suppression()
            generation = await self._state.switch_monitored_directory(normalized)

            try:
                snapshot = await self._directory_loop.capture_switch(normalized, generation)
            except ListingError as e:
                logging.warning(f"Could not snapshot new directory {normalized}: {e}")

        await self._notifier.config_changed("monitored_directory", old_directory, normalized)
        if snapshot is not None:
            await self._notifier.directory_switched(snapshot)

    async def change_directory_up(self) -> None:
        self._ensure_not_disposed("change directory")

        current = self._state.monitored_directory
        if not current:
            return

        await self.change_directory(parent_directory(current, self._sep))

    # -- lifecycle ---------------------------------------------------------

    async def start(self) -> None:
        await self.start_drive_watcher()
        await self.start_directory_watcher()

    async def stop(self) -> None:
        await self.stop_drive_watcher()
        await self.stop_directory_watcher()

    async def start_drive_watcher(self) -> bool:
        self._ensure_not_disposed("start drive watcher")
        if not self._state.drive_watcher_enabled:
            logging.debug("Drive watcher disabled - not starting")
            return False
        return await self._drive_loop.start()

    async def stop_drive_watcher(self) -> None:
        await self._drive_loop.stop()

    async def start_directory_watcher(self) -> bool:
        self._ensure_not_disposed("start directory watcher")
        if not self._state.directory_watcher_enabled:
            logging.debug("Directory watcher disabled - not starting")
            return False
        return await self._directory_loop.start()

    async def stop_directory_watcher(self) -> None:
        await self._directory_loop.stop()

    async def dispose(self) -> None:
        if self._disposed:
            return
        self._disposed = True
        await self.stop()
        logging.info("WatchController disposed")

    async def __aenter__(self) -> "WatchController":
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.dispose()

    # -- configuration -----------------------------------------------------

    async def set_poll_interval(self, interval_ms: int) -> None:
        _validate_poll_interval(interval_ms)
        old_value = self._state.poll_interval_ms
        if old_value == interval_ms:
            return
        self._state.poll_interval_ms = interval_ms
        await self._notifier.config_changed("poll_interval_ms", old_value, interval_ms)

    async def enable_drive_watcher(self, enabled: bool) -> None:
        enabled = bool(enabled)
        old_value = self._state.drive_watcher_enabled
        if old_value == enabled:
            return
        self._state.drive_watcher_enabled = enabled
        await self._notifier.config_changed("drive_watcher_enabled", old_value, enabled)

        if not enabled and self._drive_loop.is_running:
            await self._drive_loop.stop()

    async def enable_directory_watcher(self, enabled: bool) -> None:
        enabled = bool(enabled)
        old_value = self._state.directory_watcher_enabled
        if old_value == enabled:
            return
        self._state.directory_watcher_enabled = enabled
        await self._notifier.config_changed("directory_watcher_enabled", old_value, enabled)

        if not enabled and self._directory_loop.is_running:
            await self._directory_loop.stop()

    def _ensure_not_disposed(self, operation: str) -> None:
        if self._disposed:
            raise WatchControllerDisposedError(operation)


def _validate_poll_interval(interval_ms: int) -> None:
    if isinstance(interval_ms, bool) or not isinstance(interval_ms, int) or interval_ms < 1:
        raise ValueError(f"Poll interval must be a positive number of milliseconds, got {interval_ms!r}")
