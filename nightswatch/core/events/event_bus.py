"""
Central domain event bus (Mediator Pattern).
"""
import asyncio
import logging
from collections import defaultdict
from typing import Awaitable, Callable, Dict, List, Type

from nightswatch.core.events.domain_event import DomainEvent

# An event handler is an async function that takes a DomainEvent and returns None
EventHandler = Callable[[DomainEvent], Awaitable[None]]


class DomainEventBus:
    """
    Asynchronous event bus used as the watcher's notification sink.

    Handlers subscribed to a base event class also receive every subclass
    event, so subscribing to ``WatchEvent`` yields all watcher notifications.
    A failing handler is logged and never prevents the other handlers from
    running, nor does it propagate to the publisher.
    """

    def __init__(self) -> None:
        self._handlers: Dict[Type[DomainEvent], List[EventHandler]] = defaultdict(list)
        self._lock = asyncio.Lock()

    async def subscribe(self, event_type: Type[DomainEvent], handler: EventHandler) -> None:
        """
        Subscribes a handler to an event type and all of its subclasses.

        Args:
            event_type: The class of the domain event to subscribe to.
            handler: The asynchronous function to call when the event is published.
        """
        async with self._lock:
            self._handlers[event_type].append(handler)
            logging.debug(f"Handler {_handler_name(handler)} subscribed to {event_type.__name__}")

    async def unsubscribe(self, event_type: Type[DomainEvent], handler: EventHandler) -> bool:
        """Removes a handler. Returns False if it was not subscribed."""
        async with self._lock:
            handlers = self._handlers.get(event_type, [])
            if handler not in handlers:
                return False
            handlers.remove(handler)
            logging.debug(f"Handler {_handler_name(handler)} unsubscribed from {event_type.__name__}")
            return True

    def handler_count(self, event_type: Type[DomainEvent]) -> int:
        return len(self._collect_handlers(event_type))

    async def publish(self, event: DomainEvent) -> None:
        """
        Publishes a domain event to every handler subscribed to its type or a base type.

        Handlers run concurrently; exceptions are logged per handler.
        """
        event_type = type(event)
        handlers = self._collect_handlers(event_type)

        if not handlers:
            logging.debug(f"No handlers for event {event_type.__name__}")
            return

        logging.debug(f"Publishing {event_type.__name__} to {len(handlers)} handler(s)")

        tasks = [self._safe_execute(handler, event) for handler in handlers]
        await asyncio.gather(*tasks)

    def _collect_handlers(self, event_type: Type[DomainEvent]) -> List[EventHandler]:
        collected: List[EventHandler] = []
        for klass in event_type.__mro__:
            for handler in self._handlers.get(klass, []):
                if handler not in collected:
                    collected.append(handler)
        return collected

    async def _safe_execute(self, handler: EventHandler, event: DomainEvent) -> None:
        """
        Executes a single event handler safely, catching and logging any exceptions.
        """
        try:
            await handler(event)
        except Exception as e:
            logging.error(
                f"Unhandled exception in handler '{_handler_name(handler)}' for event "
                f"'{event.event_name}': {e}",
                exc_info=True,
            )


def _handler_name(handler: EventHandler) -> str:
    return getattr(handler, "__name__", repr(handler))
