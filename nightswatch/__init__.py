"""Polling drive and directory watcher."""

__version__ = "0.1.0"
