"""
FastHTML Web Adapter

Provides a simple configure_app function to set up FastHTML with ReelCart
entities. Uses FastHTMLDispatcher internally.
"""

import logging
from typing import Type, Callable, List, Optional

from ..app.bus import activity_log_handler
from ..app.dispatcher import Dispatcher
from ..core.entity import Entity
from ..core.events import EventInfo
from ..persistence import register_store

logger = logging.getLogger(__name__)


class FastHTMLDispatcher(Dispatcher):
    """FastHTML-specific dispatcher that only overrides what's needed."""

    def _register_route(self, router, path: str, handler: Callable, event_info: EventInfo):
        """Register route using FastHTML's decorator pattern."""
        router(path, methods=[event_info.method])(handler)

    def _create_route_handler(self, entity_class: Type[Entity], event_name: str, event_info: EventInfo) -> Callable:
        handler = super()._create_route_handler(entity_class, event_name, event_info)
        # FastHTML names routes after the endpoint function
        handler.__name__ = f"{entity_class.signal_namespace().lower()}_{event_name}"
        return handler


def configure_app(app, rt, entity_classes: Optional[List[Type[Entity]]] = None) -> FastHTMLDispatcher:
    """
    Configure FastHTML app with ReelCart entities.

    ```python
    app, rt = fast_app()
    configure_app(app, rt, [VideoFeed, Cart, Navigation])
    ```

    Args:
        app: FastHTML app instance
        rt: FastHTML router instance
        entity_classes: Optional list of specific entities to register.
                       If None, registers all Entity subclasses.

    Returns:
        The dispatcher, whose bus accepts extra subscribers
    """
    dispatcher = FastHTMLDispatcher()
    dispatcher.bus.subscribe(activity_log_handler)
    dispatcher.include_entities(rt, entity_classes)
    for entity_class in entity_classes or Entity.__subclasses__():
        register_store(entity_class.store_class())
    app.state.dispatcher = dispatcher
    logger.info("Registered %d event routes", len(dispatcher.namespace_routes))
    return dispatcher
