"""
Directory Lister - SRP compliant wrapper around the OS directory listing calls.

Responsibilities:
- List the immediate children (files + subdirectories) of a directory
- Fetch per-entry metadata (kind, size, modification time)
- Validate that a path is a directory

All calls go through aiofiles.os so the event loop is never blocked.
OS failures are re-raised as ListingError.
"""

import logging
import os
import stat
from datetime import datetime
from typing import List

import aiofiles.os

from nightswatch.core.exceptions import EntryVanishedError, ListingError
from nightswatch.models import EntryMetadata


class DirectoryLister:
    """Async directory lister. Not recursive: only immediate children are returned."""

    async def list_entries(self, directory_path: str) -> List[str]:
        """Return full paths of every immediate child of ``directory_path``."""
        try:
            names = await aiofiles.os.listdir(directory_path)
        except OSError as e:
            raise ListingError(directory_path, str(e)) from e

        return [os.path.join(directory_path, name) for name in names]

    async def get_metadata(self, entry_path: str) -> EntryMetadata:
        try:
            stat_result = await aiofiles.os.stat(entry_path)
        except FileNotFoundError:
            # Dangling symlink: report the link itself as a file
            stat_result = await self._lstat(entry_path)
        except OSError as e:
            raise ListingError(entry_path, str(e)) from e

        is_directory = stat.S_ISDIR(stat_result.st_mode)
        return EntryMetadata(
            is_directory=is_directory,
            size_bytes=0 if is_directory else stat_result.st_size,
            modified_time=datetime.fromtimestamp(stat_result.st_mtime),
        )

    async def _lstat(self, entry_path: str) -> os.stat_result:
        try:
            return await aiofiles.os.stat(entry_path, follow_symlinks=False)
        except FileNotFoundError as e:
            raise EntryVanishedError(entry_path, "entry no longer exists") from e
        except OSError as e:
            raise ListingError(entry_path, str(e)) from e

    async def is_directory(self, path: str) -> bool:
        try:
            return await aiofiles.os.path.isdir(path)
        except (OSError, ValueError) as e:
            logging.debug(f"Directory validation failed for {path!r}: {e}")
            return False
