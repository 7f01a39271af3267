import ntpath
from datetime import datetime
from enum import Enum
from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, field_serializer, model_validator


class WatcherState(str, Enum):
    """Lifecycle of a single watch loop."""

    STOPPED = "Stopped"
    RUNNING = "Running"


class VolumeInfo(BaseModel):
    """Metadata for one mounted logical volume."""

    model_config = ConfigDict(frozen=True)

    volume_id: str = Field(..., description="Single-character volume identifier")
    root_path: str = Field(..., description="Root path the volume was listed under")
    label: Optional[str] = Field(default=None, description="Volume label if known")
    total_bytes: int = Field(default=0, ge=0, description="Capacity in bytes")
    free_bytes: int = Field(default=0, ge=0, description="Free space in bytes")
    used_bytes: int = Field(default=0, ge=0, description="Used space in bytes")
    is_ready: bool = Field(
        default=True, description="False when the volume could not be queried"
    )


class VolumeSnapshot(BaseModel):
    """
    Immutable view of the mounted volumes at one point in time.

    Produced by the drive watch loop every time the set of volume roots changes.
    Keys in ``volumes`` are derived from the first character of each root path.
    """

    model_config = ConfigDict(frozen=True)

    system_volume_id: str = Field(..., description="Volume hosting the OS installation")
    volumes: Dict[str, VolumeInfo] = Field(default_factory=dict)
    captured_at: datetime = Field(default_factory=datetime.now)

    @property
    def system_volume_root(self) -> str:
        if self.system_volume_id.isalpha():
            return f"{self.system_volume_id}:{ntpath.sep}"
        return self.system_volume_id

    @property
    def volume_count(self) -> int:
        return len(self.volumes)

    @field_serializer("captured_at", when_used="json")
    def serialize_captured_at(self, value: datetime) -> str:
        return value.isoformat()


class EntryMetadata(BaseModel):
    """Raw metadata returned by a directory lister for one entry."""

    model_config = ConfigDict(frozen=True)

    is_directory: bool
    size_bytes: int = Field(default=0, ge=0)
    modified_time: Optional[datetime] = None


class DirectoryEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    path: str = Field(..., description="Full path to the directory")
    name: str = Field(..., description="Directory name")
    modified_time: Optional[datetime] = Field(None, description="Last modification time")

    @field_serializer("modified_time", when_used="json")
    def serialize_datetime(self, value: Optional[datetime]) -> Optional[str]:
        return value.isoformat() if value else None


class FileEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    path: str = Field(..., description="Full path to the file")
    name: str = Field(..., description="File name")
    size_bytes: int = Field(default=0, ge=0, description="File size in bytes")
    modified_time: Optional[datetime] = Field(None, description="Last modification time")

    @field_serializer("modified_time", when_used="json")
    def serialize_datetime(self, value: Optional[datetime]) -> Optional[str]:
        return value.isoformat() if value else None


class DirectorySnapshot(BaseModel):
    """
    Immutable view of the immediate children of the monitored directory.

    Every entry is classified as exactly one of directory or file, and
    ``total_size_bytes`` always equals the sum of the file sizes.
    """

    model_config = ConfigDict(frozen=True)

    root_volume_id: str = Field(..., description="Volume the monitored directory lives on")
    root_path: str = Field(..., description="Monitored directory at capture time")
    directories: Dict[str, DirectoryEntry] = Field(default_factory=dict)
    files: Dict[str, FileEntry] = Field(default_factory=dict)
    total_size_bytes: int = Field(default=0, ge=0)
    captured_at: datetime = Field(default_factory=datetime.now)

    @model_validator(mode="after")
    def _check_invariants(self) -> "DirectorySnapshot":
        overlap = self.directories.keys() & self.files.keys()
        if overlap:
            raise ValueError(
                f"Entries classified as both directory and file: {sorted(overlap)}"
            )
        file_total = sum(entry.size_bytes for entry in self.files.values())
        if file_total != self.total_size_bytes:
            raise ValueError(
                f"total_size_bytes {self.total_size_bytes} does not match "
                f"sum of file sizes {file_total}"
            )
        return self

    @property
    def directory_count(self) -> int:
        return len(self.directories)

    @property
    def file_count(self) -> int:
        return len(self.files)

    @property
    def entry_count(self) -> int:
        return self.directory_count + self.file_count

    @property
    def entries(self) -> Dict[str, DirectoryEntry | FileEntry]:
        """All entries keyed by path, directories first."""
        merged: Dict[str, DirectoryEntry | FileEntry] = dict(self.directories)
        merged.update(self.files)
        return merged

    @field_serializer("captured_at", when_used="json")
    def serialize_captured_at(self, value: datetime) -> str:
        return value.isoformat()


class WatchStatus(BaseModel):
    """Snapshot of the controller configuration and loop activity."""

    monitored_directory: str
    poll_interval_ms: int
    drive_watcher_enabled: bool
    directory_watcher_enabled: bool
    drive_watcher_state: WatcherState
    directory_watcher_state: WatcherState
    drive_cycles: int = 0
    drive_emissions: int = 0
    drive_failures: int = 0
    directory_cycles: int = 0
    directory_emissions: int = 0
    directory_failures: int = 0
    is_disposed: bool = False
