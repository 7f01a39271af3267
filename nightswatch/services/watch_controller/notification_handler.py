import logging

from nightswatch.core.events.event_bus import DomainEventBus
from nightswatch.core.events.watch_events import (
    ConfigChangedEvent,
    DirectoryContentsChangedEvent,
    DirectorySwitchedEvent,
    VolumesChangedEvent,
    WatchEvent,
)
from nightswatch.models import DirectorySnapshot, VolumeSnapshot


class NotificationHandler:
    """
    Delivers watcher notifications to the event bus.

    Delivery failures are logged and swallowed so they never terminate a
    poll loop or a controller command. Returns whether delivery succeeded.
    """

    def __init__(self, event_bus: DomainEventBus):
        self._event_bus = event_bus

    async def volumes_changed(self, snapshot: VolumeSnapshot) -> bool:
        logging.info(
            f"Volumes changed: {sorted(snapshot.volumes)} "
            f"(system volume: {snapshot.system_volume_id})",
            extra={
                "operation": "volumes_changed",
                "volume_count": snapshot.volume_count,
            },
        )
        return await self._publish(VolumesChangedEvent(snapshot=snapshot))

    async def directory_contents_changed(self, snapshot: DirectorySnapshot) -> bool:
        logging.info(
            f"Directory contents changed: {snapshot.root_path} "
            f"({snapshot.directory_count} dirs, {snapshot.file_count} files, "
            f"{snapshot.total_size_bytes} bytes)",
            extra={"operation": "directory_contents_changed", "path": snapshot.root_path},
        )
        return await self._publish(DirectoryContentsChangedEvent(snapshot=snapshot))

    async def directory_switched(self, snapshot: DirectorySnapshot) -> bool:
        logging.info(
            f"Directory switched to {snapshot.root_path} "
            f"({snapshot.directory_count} dirs, {snapshot.file_count} files)",
            extra={"operation": "directory_switched", "path": snapshot.root_path},
        )
        return await self._publish(DirectorySwitchedEvent(snapshot=snapshot))

    async def config_changed(self, setting: str, old_value, new_value) -> bool:
        logging.info(f"Setting {setting} changed: {old_value!r} -> {new_value!r}")
        return await self._publish(
            ConfigChangedEvent(setting=setting, old_value=old_value, new_value=new_value)
        )

    async def _publish(self, event: WatchEvent) -> bool:
        try:
            await self._event_bus.publish(event)
            return True
        except Exception as e:
            logging.error(f"Error publishing {event.event_name}: {e}", exc_info=True)
            return False
