"""Volume Listers - enumerate mounted logical volumes and query their metadata."""

import asyncio
import logging
import os
import shutil
import string
from abc import ABC, abstractmethod
from pathlib import Path
from typing import List, Optional

from nightswatch.core.exceptions import ListingError
from nightswatch.models import VolumeInfo

# Filesystem types that never represent user-visible storage
_PSEUDO_FILESYSTEMS = {
    "autofs", "binfmt_misc", "bpf", "cgroup", "cgroup2", "configfs", "debugfs",
    "devpts", "devtmpfs", "fusectl", "hugetlbfs", "mqueue", "nsfs", "overlay",
    "proc", "pstore", "securityfs", "squashfs", "sysfs", "tmpfs", "tracefs",
}


def volume_id_for(root_path: str) -> str:
    """Volume identifier of a root path: its first character, exactly as listed."""
    if not root_path:
        raise ValueError("Cannot derive a volume id from an empty path")
    return root_path[0]


class BaseVolumeLister(ABC):
    """Abstract base class for platform-specific volume enumeration."""

    @abstractmethod
    async def list_volumes(self) -> List[str]:
        """Return the root path of every mounted volume."""

    @abstractmethod
    def system_volume_id(self) -> str:
        """Return the id of the volume hosting the OS installation."""

    async def get_volume_info(self, root_path: str) -> VolumeInfo:
        """Query capacity and label. A volume that cannot be queried is reported as not ready."""
        volume_id = volume_id_for(root_path)
        label = self._volume_label(root_path)
        try:
            total, used, free = await asyncio.to_thread(shutil.disk_usage, root_path)
        except OSError as e:
            logging.debug(f"Volume {root_path} not ready: {e}")
            return VolumeInfo(
                volume_id=volume_id, root_path=root_path, label=label, is_ready=False
            )

        return VolumeInfo(
            volume_id=volume_id,
            root_path=root_path,
            label=label,
            total_bytes=total,
            free_bytes=free,
            used_bytes=used,
        )

    def _volume_label(self, root_path: str) -> Optional[str]:
        return None


class WindowsVolumeLister(BaseVolumeLister):
    """Drive letters A-Z that currently resolve to a mounted drive."""

    async def list_volumes(self) -> List[str]:
        def _existing_drives() -> List[str]:
            return [
                f"{letter}:\\"
                for letter in string.ascii_uppercase
                if os.path.exists(f"{letter}:\\")
            ]

        try:
            return await asyncio.to_thread(_existing_drives)
        except OSError as e:
            raise ListingError("logical drives", str(e)) from e

    def system_volume_id(self) -> str:
        system_root = os.environ.get("SystemRoot", "C:\\Windows")
        # Drive letters are enumerated upper-case, so match that spelling
        return volume_id_for(system_root.upper())

    def _volume_label(self, root_path: str) -> Optional[str]:
        import ctypes

        buffer = ctypes.create_unicode_buffer(261)
        ok = ctypes.windll.kernel32.GetVolumeInformationW(
            ctypes.c_wchar_p(root_path), buffer, len(buffer), None, None, None, None, 0
        )
        return buffer.value if ok and buffer.value else None


class PosixVolumeLister(BaseVolumeLister):
    """
    Mount points read from the kernel mount table (Linux) or /Volumes (macOS).

    Every POSIX mount point starts with "/", so they all share the volume id "/".
    """

    def __init__(self, mounts_file: str = "/proc/self/mounts", volumes_dir: str = "/Volumes"):
        self._mounts_file = Path(mounts_file)
        self._volumes_dir = Path(volumes_dir)

    async def list_volumes(self) -> List[str]:
        try:
            return await asyncio.to_thread(self._read_mount_points)
        except OSError as e:
            raise ListingError(str(self._mounts_file), str(e)) from e

    def _read_mount_points(self) -> List[str]:
        if self._mounts_file.exists():
            mount_points: List[str] = []
            for line in self._mounts_file.read_text(encoding="utf-8").splitlines():
                fields = line.split()
                if len(fields) < 3 or fields[2] in _PSEUDO_FILESYSTEMS:
                    continue
                # The mount table escapes whitespace as octal (\040)
                mount_point = fields[1].replace("\\040", " ").replace("\\011", "\t")
                if mount_point not in mount_points:
                    mount_points.append(mount_point)
            return mount_points or ["/"]

        mount_points = ["/"]
        if self._volumes_dir.is_dir():
            mount_points.extend(
                str(entry) for entry in sorted(self._volumes_dir.iterdir()) if entry.is_dir()
            )
        return mount_points

    def system_volume_id(self) -> str:
        return "/"

    def _volume_label(self, root_path: str) -> Optional[str]:
        name = Path(root_path).name
        return name or root_path
