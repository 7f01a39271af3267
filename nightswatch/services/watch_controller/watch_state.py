import asyncio
from typing import Tuple


class WatchState:
    """
    Mutable configuration shared by the controller and both watch loops.

    The monitored directory is written by the controller and read by the
    directory loop, so it is guarded by a lock and carries a generation
    counter that increases on every switch.
    """

    def __init__(
        self,
        monitored_directory: str = "",
        poll_interval_ms: int = 1000,
        drive_watcher_enabled: bool = True,
        directory_watcher_enabled: bool = True,
    ):
        self._lock = asyncio.Lock()
        self._monitored_directory = monitored_directory
        self._directory_generation = 0
        self._suppress_directory_poll = False

        self.poll_interval_ms = poll_interval_ms
        self.drive_watcher_enabled = drive_watcher_enabled
        self.directory_watcher_enabled = directory_watcher_enabled

    @property
    def monitored_directory(self) -> str:
        return self._monitored_directory

    @property
    def directory_generation(self) -> int:
        return self._directory_generation

    @property
    def poll_interval_seconds(self) -> float:
        return self.poll_interval_ms / 1000.0

    async def read_monitored_directory(self) -> Tuple[str, int]:
        """Return the monitored directory together with its generation."""
        async with self._lock:
            return self._monitored_directory, self._directory_generation

    async def switch_monitored_directory(self, path: str) -> int:
        async with self._lock:
            self._monitored_directory = path
            self._directory_generation += 1
            return self._directory_generation

    def request_suppression(self) -> None:
        self._suppress_directory_poll = True

    def consume_suppression(self) -> bool:
        """Clear the suppression flag, returning whether it was set."""
        suppressed = self._suppress_directory_poll
        self._suppress_directory_poll = False
        return suppressed

    @property
    def suppress_directory_poll(self) -> bool:
        return self._suppress_directory_poll
