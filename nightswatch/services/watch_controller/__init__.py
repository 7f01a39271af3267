"""
Watch Controller Module

Two independent poll loops plus the controller that owns their lifecycle:

- WatchController: lifecycle, commands and configuration
- WatchState: shared mutable configuration (monitored directory, interval, flags)
- DriveWatchLoop: polls mounted volumes
- DirectoryWatchLoop: polls the monitored directory
- NotificationHandler: delivers notifications to the event bus, logging failures
- ListingRetryPolicy: backoff after failed listings
"""

from .directory_watcher import DirectoryWatchLoop
from .drive_watcher import DriveWatchLoop
from .notification_handler import NotificationHandler
from .retry_policy import ListingRetryPolicy
from .watch_controller import WatchController
from .watch_loop import BaseWatchLoop, WatchLoopStats
from .watch_state import WatchState

__all__ = [
    "WatchController",
    "WatchState",
    "DriveWatchLoop",
    "DirectoryWatchLoop",
    "BaseWatchLoop",
    "WatchLoopStats",
    "NotificationHandler",
    "ListingRetryPolicy",
]
