from functools import lru_cache
from typing import Any, Dict

from nightswatch.core.events.event_bus import DomainEventBus
from nightswatch.presentation.event_handlers import PresentationEventHandlers
from nightswatch.presentation.websocket_manager import WebSocketManager
from nightswatch.services.listing import ListerFactory
from nightswatch.services.watch_controller import WatchController

from .config import Settings

# Global singleton instances
_singletons: Dict[str, Any] = {}


@lru_cache
def get_settings() -> Settings:
    """Hent Settings singleton instance."""
    return Settings()


def get_event_bus() -> DomainEventBus:
    if "event_bus" not in _singletons:
        _singletons["event_bus"] = DomainEventBus()
    return _singletons["event_bus"]


def get_lister_factory() -> ListerFactory:
    if "lister_factory" not in _singletons:
        _singletons["lister_factory"] = ListerFactory()
    return _singletons["lister_factory"]


def get_watch_controller() -> WatchController:
    if "watch_controller" not in _singletons:
        _singletons["watch_controller"] = WatchController.from_settings(
            settings=get_settings(),
            event_bus=get_event_bus(),
            lister_factory=get_lister_factory(),
        )
    return _singletons["watch_controller"]


def get_websocket_manager() -> WebSocketManager:
    if "websocket_manager" not in _singletons:
        _singletons["websocket_manager"] = WebSocketManager()
    return _singletons["websocket_manager"]


def get_presentation_event_handlers() -> PresentationEventHandlers:
    if "presentation_event_handlers" not in _singletons:
        _singletons["presentation_event_handlers"] = PresentationEventHandlers(
            websocket_manager=get_websocket_manager()
        )
    return _singletons["presentation_event_handlers"]


def reset_singletons() -> None:
    _singletons.clear()
    get_settings.cache_clear()
