"""
Tests for pushing watcher events to websocket clients.
"""

import json
from unittest.mock import AsyncMock, Mock

import pytest
from fastapi import WebSocketDisconnect

from conftest import wait_until
from nightswatch.api.websockets import live_watch_events
from nightswatch.core.events.watch_events import (
    ConfigChangedEvent,
    DirectoryContentsChangedEvent,
    DirectorySwitchedEvent,
    VolumesChangedEvent,
)
from nightswatch.models import DirectorySnapshot, FileEntry, VolumeInfo, VolumeSnapshot
from nightswatch.presentation.event_handlers import PresentationEventHandlers, serialize_event
from nightswatch.presentation.websocket_manager import WebSocketManager


@pytest.fixture
def volume_snapshot():
    return VolumeSnapshot(
        system_volume_id="C",
        volumes={"C": VolumeInfo(volume_id="C", root_path="C:\\", total_bytes=100)},
    )


@pytest.fixture
def directory_snapshot():
    return DirectorySnapshot(
        root_volume_id="/",
        root_path="/a/",
        files={"/a/x.txt": FileEntry(path="/a/x.txt", name="x.txt", size_bytes=100)},
        total_size_bytes=100,
    )


def _websocket():
    websocket = Mock()
    websocket.accept = AsyncMock()
    websocket.send_text = AsyncMock()
    return websocket


class TestSerializeEvent:
    def test_volumes_changed(self, volume_snapshot):
        message = serialize_event(VolumesChangedEvent(snapshot=volume_snapshot))

        assert message["type"] == "volumes_changed"
        assert message["data"]["system_volume_root"] == "C:\\"
        assert message["data"]["volumes"]["C"]["total_bytes"] == 100
        json.dumps(message)

    def test_directory_events(self, directory_snapshot):
        changed = serialize_event(DirectoryContentsChangedEvent(snapshot=directory_snapshot))
        switched = serialize_event(DirectorySwitchedEvent(snapshot=directory_snapshot))

        assert changed["type"] == "directory_contents_changed"
        assert switched["type"] == "directory_switched"
        assert changed["data"]["file_count"] == 1
        assert changed["data"]["directory_count"] == 0
        assert changed["data"]["total_size_bytes"] == 100
        json.dumps(changed)

    def test_config_changed(self):
        message = serialize_event(
            ConfigChangedEvent(setting="poll_interval_ms", old_value=1000, new_value=250)
        )

        assert message["type"] == "config_changed"
        assert message["data"]["setting"] == "poll_interval_ms"
        assert message["data"]["old_value"] == 1000
        assert message["data"]["new_value"] == 250
        assert "timestamp" in message["data"]
        assert len(message["data"]["event_id"]) == 32


class TestWebSocketManager:
    @pytest.mark.asyncio
    async def test_broadcast_reaches_connected_clients(self):
        manager = WebSocketManager()
        first, second = _websocket(), _websocket()
        await manager.connect(first)
        await manager.connect(second)

        manager.start_sender_task()
        manager.broadcast_message({"type": "ping"})
        await wait_until(lambda: second.send_text.await_count == 1)
        await manager.stop_sender_task()

        first.send_text.assert_awaited_once_with(json.dumps({"type": "ping"}))
        assert manager.connection_count == 2

    @pytest.mark.asyncio
    async def test_failing_client_is_dropped(self):
        manager = WebSocketManager()
        healthy, broken = _websocket(), _websocket()
        broken.send_text.side_effect = WebSocketDisconnect()
        await manager.connect(healthy)
        await manager.connect(broken)

        await manager._broadcast_to_connections({"type": "ping"})

        assert manager.connection_count == 1
        healthy.send_text.assert_awaited_once()


class TestPresentationEventHandlers:
    @pytest.mark.asyncio
    async def test_watch_events_are_broadcast(self, event_bus, directory_snapshot):
        manager = Mock(spec=WebSocketManager)
        handlers = PresentationEventHandlers(manager)
        await handlers.register(event_bus)

        await event_bus.publish(DirectorySwitchedEvent(snapshot=directory_snapshot))
        await event_bus.publish(ConfigChangedEvent(setting="drive_watcher_enabled", old_value=True, new_value=False))

        assert manager.broadcast_message.call_count == 2
        types = [call.args[0]["type"] for call in manager.broadcast_message.call_args_list]
        assert types == ["directory_switched", "config_changed"]


class TestLiveWebSocketRoute:
    @pytest.mark.asyncio
    async def test_sends_status_and_answers_requests(self, controller):
        manager = WebSocketManager()
        websocket = _websocket()
        websocket.send_json = AsyncMock()
        websocket.receive_text = AsyncMock(
            side_effect=["ping", " STATUS ", "hello", WebSocketDisconnect()]
        )

        await live_watch_events(websocket, ws_manager=manager, controller=controller)

        websocket.send_text.assert_awaited_once_with("pong")
        assert websocket.send_json.await_count == 2
        first_message = websocket.send_json.await_args_list[0].args[0]
        assert first_message["type"] == "watch_status"
        assert first_message["data"]["monitored_directory"] == "/a/"
        assert manager.connection_count == 0
