"""
Pytest configuration, shared fixtures and in-memory fake listers.
"""

import asyncio
from typing import Awaitable, Callable, Dict, List, Optional

import pytest

from nightswatch.core.events.event_bus import DomainEventBus
from nightswatch.core.events.watch_events import WatchEvent
from nightswatch.core.exceptions import EntryVanishedError, ListingError
from nightswatch.dependencies import reset_singletons
from nightswatch.models import EntryMetadata, VolumeInfo
from nightswatch.services.listing import BaseVolumeLister, DirectoryLister, volume_id_for
from nightswatch.services.watch_controller import WatchController


class FakeVolumeLister(BaseVolumeLister):
    """Volume lister backed by a plain list of root paths."""

    def __init__(self, volumes: Optional[List[str]] = None, system_volume: str = "C"):
        self.volumes: List[str] = list(volumes or [])
        self.system_volume = system_volume
        self.error: Optional[Exception] = None
        self.calls = 0

    async def list_volumes(self) -> List[str]:
        self.calls += 1
        if self.error:
            raise self.error
        return list(self.volumes)

    def system_volume_id(self) -> str:
        return self.system_volume

    async def get_volume_info(self, root_path: str) -> VolumeInfo:
        return VolumeInfo(
            volume_id=volume_id_for(root_path),
            root_path=root_path,
            label=f"Disk {root_path[0]}",
            total_bytes=1000,
            free_bytes=400,
            used_bytes=600,
        )


class FakeDirectoryLister(DirectoryLister):
    """
    In-memory directory tree using "/" as separator.

    Directories are keyed with a trailing "/" (as the controller stores them);
    entries are full paths without one.
    """

    def __init__(self):
        self.directories: Dict[str, Dict[str, EntryMetadata]] = {}
        self.error: Optional[Exception] = None
        self.list_calls: List[str] = []
        self.on_list: Optional[Callable[[str], Awaitable[None]]] = None
        self.metadata_delay = 0.0

    def add_directory(self, path: str) -> str:
        key = path if path.endswith("/") else path + "/"
        self.directories.setdefault(key, {})
        parent, _, name = key.rstrip("/").rpartition("/")
        if name:
            parent_key = (parent or "") + "/"
            if parent_key in self.directories:
                self.directories[parent_key][key.rstrip("/")] = EntryMetadata(is_directory=True)
        return key

    def add_file(self, directory: str, name: str, size: int = 0) -> str:
        key = self.add_directory(directory)
        path = key + name
        self.directories[key][path] = EntryMetadata(is_directory=False, size_bytes=size)
        return path

    def remove(self, path: str) -> None:
        for entries in self.directories.values():
            entries.pop(path, None)

    async def list_entries(self, directory_path: str) -> List[str]:
        self.list_calls.append(directory_path)
        if self.error:
            raise self.error
        if directory_path not in self.directories:
            raise ListingError(directory_path, "No such directory")
        entries = list(self.directories[directory_path])
        if self.on_list is not None:
            await self.on_list(directory_path)
        return entries

    async def get_metadata(self, entry_path: str) -> EntryMetadata:
        if self.metadata_delay:
            await asyncio.sleep(self.metadata_delay)
        for entries in self.directories.values():
            if entry_path in entries:
                return entries[entry_path]
        raise EntryVanishedError(entry_path, "entry no longer exists")

    async def is_directory(self, path: str) -> bool:
        key = path if path.endswith("/") else path + "/"
        return key in self.directories


class EventRecorder:
    """Collects every watch event published on a bus."""

    def __init__(self):
        self.events: List[WatchEvent] = []

    async def handle(self, event: WatchEvent) -> None:
        self.events.append(event)

    def of_type(self, event_type) -> list:
        return [event for event in self.events if isinstance(event, event_type)]

    def clear(self) -> None:
        self.events.clear()


async def wait_until(predicate: Callable[[], bool], timeout: float = 2.0) -> None:
    """Poll ``predicate`` until it holds or fail the test after ``timeout`` seconds."""
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    while not predicate():
        if loop.time() > deadline:
            pytest.fail("Condition not met before timeout")
        await asyncio.sleep(0.005)


@pytest.fixture(autouse=True)
def clean_singletons():
    """Automatically reset singletons before each test."""
    reset_singletons()
    yield
    reset_singletons()


@pytest.fixture
def event_bus():
    return DomainEventBus()


@pytest.fixture
def recorder():
    return EventRecorder()


@pytest.fixture
def volume_lister():
    return FakeVolumeLister(["C:\\", "D:\\"])


@pytest.fixture
def directory_lister():
    lister = FakeDirectoryLister()
    lister.add_directory("/")
    lister.add_file("/a", "x.txt", size=100)
    lister.add_directory("/a/y")
    lister.add_file("/b", "one.bin", size=10)
    lister.add_file("/b", "two.bin", size=20)
    lister.add_file("/b", "three.bin", size=30)
    return lister


@pytest.fixture
def controller(volume_lister, directory_lister, event_bus):
    return WatchController(
        volume_lister=volume_lister,
        directory_lister=directory_lister,
        event_bus=event_bus,
        initial_directory="/a",
        poll_interval_ms=10,
        listing_retry_max_backoff_ms=40,
        sep="/",
    )
