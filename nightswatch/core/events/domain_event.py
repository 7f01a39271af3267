"""
Base type for everything published on the DomainEventBus.
"""

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone


def _new_event_id() -> str:
    return uuid.uuid4().hex


@dataclass(frozen=True, kw_only=True)
class DomainEvent:
    """
    An immutable record of something the watcher observed or changed.

    ``timestamp`` is when the event object was created (UTC), which for watch
    events is the moment the poll cycle decided to emit.
    """

    event_id: str = field(default_factory=_new_event_id)
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def event_name(self) -> str:
        return type(self).__name__
