import logging
from typing import FrozenSet, Iterable

from nightswatch.services.listing import BaseVolumeLister
from nightswatch.services.snapshot_builder import SnapshotBuilder
from nightswatch.services.snapshot_differ import has_changed

from .notification_handler import NotificationHandler
from .retry_policy import ListingRetryPolicy
from .watch_loop import BaseWatchLoop
from .watch_state import WatchState


class DriveWatchLoop(BaseWatchLoop):
    """Polls the mounted volume roots and emits a VolumeSnapshot when they change."""

    name = "Drive watcher"

    def __init__(
        self,
        volume_lister: BaseVolumeLister,
        snapshot_builder: SnapshotBuilder,
        notifier: NotificationHandler,
        state: WatchState,
        retry_policy: ListingRetryPolicy,
    ):
        super().__init__(state, notifier, retry_policy)
        self._volume_lister = volume_lister
        self._snapshot_builder = snapshot_builder
        self._baseline: FrozenSet[str] = frozenset()

    @property
    def baseline(self) -> FrozenSet[str]:
        return self._baseline

    def prime_baseline(self, volume_paths: Iterable[str]) -> None:
        """Treat ``volume_paths`` as already reported."""
        self._baseline = frozenset(volume_paths)

    def _is_enabled(self) -> bool:
        return self._state.drive_watcher_enabled

    async def _poll(self) -> bool:
        current = frozenset(await self._volume_lister.list_volumes())

        if not has_changed(self._baseline, current):
            logging.debug(f"No volume changes ({len(current)} volumes)")
            return False

        snapshot = await self._snapshot_builder.build_volume_snapshot(sorted(current))
        await self._notifier.volumes_changed(snapshot)
        self._baseline = current
        return True
