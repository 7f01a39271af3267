import logging
from typing import FrozenSet

from nightswatch.models import DirectorySnapshot
from nightswatch.services.listing import DirectoryLister
from nightswatch.services.snapshot_builder import SnapshotBuilder
from nightswatch.services.snapshot_differ import has_changed

from .notification_handler import NotificationHandler
from .retry_policy import ListingRetryPolicy
from .watch_loop import BaseWatchLoop
from .watch_state import WatchState


class DirectoryWatchLoop(BaseWatchLoop):
    """
    Polls the immediate children of the monitored directory.

    One cycle is skipped after every directory switch (suppression), and a
    poll whose directory was switched while it was listing is discarded,
    since its results belong to the old directory.
    """

    name = "Directory watcher"

    def __init__(
        self,
        directory_lister: DirectoryLister,
        snapshot_builder: SnapshotBuilder,
        notifier: NotificationHandler,
        state: WatchState,
        retry_policy: ListingRetryPolicy,
    ):
        super().__init__(state, notifier, retry_policy)
        self._directory_lister = directory_lister
        self._snapshot_builder = snapshot_builder
        self._baseline: FrozenSet[str] = frozenset()
        # Directory generation the baseline was listed under
        self._baseline_generation = state.directory_generation

    @property
    def baseline(self) -> FrozenSet[str]:
        return self._baseline

    def _is_enabled(self) -> bool:
        return self._state.directory_watcher_enabled

    async def capture_switch(self, directory: str, generation: int) -> DirectorySnapshot:
        """
        Snapshot ``directory`` for a directory switch and adopt it as baseline.

        Polling resumes against the new directory's contents, so only changes
        made after the switch produce a contents-changed notification.
        """
        entries = await self._directory_lister.list_entries(directory)
        self._adopt_baseline(frozenset(entries), generation)
        return await self._snapshot_builder.build_directory_snapshot(directory, entries)

    def _adopt_baseline(self, entries: FrozenSet[str], generation: int) -> None:
        self._baseline = entries
        self._baseline_generation = generation

    async def _poll(self) -> bool:
        if self._state.consume_suppression():
            logging.debug("Directory poll suppressed after directory switch")
            return False

        directory, generation = await self._state.read_monitored_directory()
        if not directory:
            logging.debug("No monitored directory - nothing to poll")
            return False

        entries = await self._directory_lister.list_entries(directory)
        if self._is_stale(generation):
            return False

        current = frozenset(entries)
        if self._baseline_generation != generation:
            # Switch snapshot not captured yet (or failed): the first listing
            # of the new directory becomes the baseline
            logging.debug(f"Adopting {directory} listing as baseline ({len(current)} entries)")
            self._adopt_baseline(current, generation)
            return False

        if not has_changed(self._baseline, current):
            logging.debug(f"No changes in {directory} ({len(current)} entries)")
            return False

        snapshot = await self._snapshot_builder.build_directory_snapshot(directory, entries)
        if self._is_stale(generation):
            return False

        await self._notifier.directory_contents_changed(snapshot)
        self._adopt_baseline(current, generation)
        return True

    def _is_stale(self, generation: int) -> bool:
        if generation != self._state.directory_generation:
            logging.debug("Monitored directory switched during poll - discarding results")
            return True
        return False
