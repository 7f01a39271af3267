"""
Path helpers for the monitored directory.

Monitored directories are stored with a trailing separator so a bare drive
("C:") and its root ("C:\\") are the same directory.
"""

import os


def normalize_directory(path: str, sep: str = os.sep) -> str:
    """Return ``path`` with exactly one trailing separator appended if missing."""
    if not path:
        return path
    if path.endswith(sep):
        return path
    return path + sep


def parent_directory(path: str, sep: str = os.sep) -> str:
    """
    Strip the last segment of ``path``.

    The root of a drive or filesystem is its own parent:
    ``C:\\`` stays ``C:\\`` and ``/`` stays ``/``.
    """
    if not path:
        return path

    stripped = path.rstrip(sep)
    if not stripped:
        # Filesystem root ("/")
        return sep

    segments = stripped.split(sep)
    if len(segments) == 1:
        # Drive root ("C:") or a relative single segment
        return normalize_directory(stripped, sep)

    parent = sep.join(segments[:-1])
    if not parent:
        return sep
    return normalize_directory(parent, sep)


def entry_name(path: str, sep: str = os.sep) -> str:
    return path.rstrip(sep).split(sep)[-1]
