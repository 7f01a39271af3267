# nightswatch/core/exceptions.py


class ListingError(Exception):
    """Raised when a volume or directory listing fails at the OS level."""
    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Listing failed for {path}: {reason}")


class EntryVanishedError(ListingError):
    """Raised when an entry disappeared between listing and metadata lookup."""


class WatchControllerDisposedError(RuntimeError):
    """Raised when a disposed watch controller is asked to do work."""
    def __init__(self, operation: str):
        self.operation = operation
        super().__init__(f"Cannot {operation}: watch controller has been disposed")
