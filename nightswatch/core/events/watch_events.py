"""
Notifications emitted by the watch loops and the watch controller.

Subscribing to ``WatchEvent`` on the event bus receives every one of them,
which makes the bus a single typed channel for hosts that want it.
"""

from dataclasses import dataclass
from typing import Any

from nightswatch.core.events.domain_event import DomainEvent
from nightswatch.models import DirectorySnapshot, VolumeSnapshot


@dataclass(frozen=True)
class WatchEvent(DomainEvent):
    """Base class for all watcher notifications."""


@dataclass(frozen=True)
class VolumesChangedEvent(WatchEvent):
    """Published by the drive loop when the set of mounted volumes changed."""
    snapshot: VolumeSnapshot


@dataclass(frozen=True)
class DirectoryContentsChangedEvent(WatchEvent):
    """Published by the directory loop when the monitored directory changed."""
    snapshot: DirectorySnapshot


@dataclass(frozen=True)
class DirectorySwitchedEvent(WatchEvent):
    """Published when a change-directory command switched the monitored directory."""
    snapshot: DirectorySnapshot


@dataclass(frozen=True)
class ConfigChangedEvent(WatchEvent):
    """Published whenever a mutable watch setting changes value."""
    setting: str
    old_value: Any
    new_value: Any
