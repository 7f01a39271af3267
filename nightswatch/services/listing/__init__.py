"""
Listing Module - OS capabilities the watch loops poll.

Components:
- DirectoryLister: immediate children of a directory plus per-entry metadata
- BaseVolumeLister: mounted volume roots, volume metadata, system volume id
- ListerFactory: picks the volume lister for the running platform
"""

from .directory_lister import DirectoryLister
from .platform_factory import ListerFactory
from .volume_lister import (
    BaseVolumeLister,
    PosixVolumeLister,
    WindowsVolumeLister,
    volume_id_for,
)

__all__ = [
    "DirectoryLister",
    "ListerFactory",
    "BaseVolumeLister",
    "PosixVolumeLister",
    "WindowsVolumeLister",
    "volume_id_for",
]
