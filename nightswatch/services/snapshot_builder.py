"""
Snapshot Builder - turns raw listings into immutable VolumeSnapshot and
DirectorySnapshot values using the OS listers for per-entry metadata.
"""

import logging
import os
from typing import Dict, Iterable

from nightswatch.core.exceptions import EntryVanishedError
from nightswatch.models import (
    DirectoryEntry,
    DirectorySnapshot,
    FileEntry,
    VolumeInfo,
    VolumeSnapshot,
)
from nightswatch.services.listing import BaseVolumeLister, DirectoryLister, volume_id_for
from nightswatch.utils.path_utils import entry_name


def derive_volume_ids(volume_paths: Iterable[str]) -> Dict[str, str]:
    """Map volume id -> root path. The first path seen wins for duplicate ids."""
    derived: Dict[str, str] = {}
    for root_path in volume_paths:
        volume_id = volume_id_for(root_path)
        if volume_id not in derived:
            derived[volume_id] = root_path
    return derived


class SnapshotBuilder:
    def __init__(
        self,
        volume_lister: BaseVolumeLister,
        directory_lister: DirectoryLister,
        sep: str = os.sep,
    ):
        self._volume_lister = volume_lister
        self._directory_lister = directory_lister
        self._sep = sep
        self._system_volume_id = volume_lister.system_volume_id()

    @property
    def system_volume_id(self) -> str:
        return self._system_volume_id

    async def build_volume_snapshot(self, volume_paths: Iterable[str]) -> VolumeSnapshot:
        volumes: Dict[str, VolumeInfo] = {}
        for volume_id, root_path in derive_volume_ids(volume_paths).items():
            volumes[volume_id] = await self._volume_lister.get_volume_info(root_path)

        return VolumeSnapshot(system_volume_id=self._system_volume_id, volumes=volumes)

    async def build_directory_snapshot(
        self, root_path: str, entry_paths: Iterable[str]
    ) -> DirectorySnapshot:
        """
        Classify every entry as directory or file and sum the file sizes.

        Entries that vanish between listing and metadata lookup are skipped;
        any other listing error propagates to the caller.
        """
        directories: Dict[str, DirectoryEntry] = {}
        files: Dict[str, FileEntry] = {}
        total_size = 0

        for path in entry_paths:
            if path in directories or path in files:
                continue
            try:
                metadata = await self._directory_lister.get_metadata(path)
            except EntryVanishedError:
                logging.debug(f"Entry vanished before metadata lookup: {path}")
                continue

            name = entry_name(path, self._sep)
            if metadata.is_directory:
                directories[path] = DirectoryEntry(
                    path=path, name=name, modified_time=metadata.modified_time
                )
            else:
                files[path] = FileEntry(
                    path=path,
                    name=name,
                    size_bytes=metadata.size_bytes,
                    modified_time=metadata.modified_time,
                )
                total_size += metadata.size_bytes

        return DirectorySnapshot(
            root_volume_id=volume_id_for(root_path),
            root_path=root_path,
            directories=directories,
            files=files,
            total_size_bytes=total_size,
        )
