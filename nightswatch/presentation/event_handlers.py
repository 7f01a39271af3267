import logging
from typing import Any, Dict

from nightswatch.core.events.event_bus import DomainEventBus
from nightswatch.core.events.watch_events import (
    ConfigChangedEvent,
    DirectoryContentsChangedEvent,
    DirectorySwitchedEvent,
    VolumesChangedEvent,
    WatchEvent,
)
from nightswatch.presentation.websocket_manager import WebSocketManager

_MESSAGE_TYPES = {
    VolumesChangedEvent: "volumes_changed",
    DirectoryContentsChangedEvent: "directory_contents_changed",
    DirectorySwitchedEvent: "directory_switched",
    ConfigChangedEvent: "config_changed",
}


def serialize_event(event: WatchEvent) -> Dict[str, Any]:
    """Turn a watcher event into the JSON message sent to websocket clients."""
    if isinstance(event, ConfigChangedEvent):
        data: Dict[str, Any] = {
            "setting": event.setting,
            "old_value": event.old_value,
            "new_value": event.new_value,
        }
    else:
        snapshot = event.snapshot
        data = snapshot.model_dump(mode="json")
        if isinstance(event, VolumesChangedEvent):
            data["system_volume_root"] = snapshot.system_volume_root
        else:
            data["directory_count"] = snapshot.directory_count
            data["file_count"] = snapshot.file_count

    data["event_id"] = event.event_id
    data["timestamp"] = event.timestamp.isoformat()
    return {"type": _MESSAGE_TYPES.get(type(event), "watch_event"), "data": data}


class PresentationEventHandlers:
    def __init__(self, websocket_manager: WebSocketManager):
        self.websocket_manager = websocket_manager

    async def register(self, event_bus: DomainEventBus) -> None:
        await event_bus.subscribe(WatchEvent, self.handle_watch_event)
        logging.info("Presentation handlers subscribed to watch events")

    async def handle_watch_event(self, event: WatchEvent) -> None:
        self.websocket_manager.broadcast_message(serialize_event(event))
