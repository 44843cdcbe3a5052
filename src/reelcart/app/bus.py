"""
Event Bus

Publishes command records after each committed event. Subscribers are
in-process callbacks (activity logging, tests).
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Callable, Awaitable, List, Dict, Any

logger = logging.getLogger(__name__)

Handler = Callable[[Dict[str, Any]], Awaitable[None]]


class EventBus(ABC):
    """Abstract base class for event buses."""

    @abstractmethod
    async def publish(self, event: Dict[str, Any]) -> None:
        """Publish an event to all subscribers."""

    @abstractmethod
    def subscribe(self, handler: Handler) -> None:
        """Subscribe a handler to receive events."""


class InProcessBus(EventBus):
    """
    Simple in-process event bus for single-instance applications.

    Subscribing the same handler twice is a no-op, so a page that wires its
    listeners on every render never receives duplicate notifications.
    """

    def __init__(self):
        self._subscribers: List[Handler] = []

    def subscribe(self, handler: Handler) -> None:
        """
        Subscribe a handler to receive all events.

        Args:
            handler: Async function that accepts event data
        """
        if handler in self._subscribers:
            return
        self._subscribers.append(handler)

    async def publish(self, event: Dict[str, Any]) -> None:
        """
        Publish an event to all subscribers concurrently.

        A failing handler is logged and does not affect the others.
        """
        if not self._subscribers:
            return

        handlers = list(self._subscribers)
        results = await asyncio.gather(*(handler(event) for handler in handlers), return_exceptions=True)

        for handler, result in zip(handlers, results):
            if isinstance(result, Exception):
                logger.error("Event handler %r raised: %s", handler, result, exc_info=result)

    def unsubscribe(self, handler: Handler) -> None:
        """Unsubscribe a handler from receiving events."""
        if handler in self._subscribers:
            self._subscribers.remove(handler)

    def clear_subscribers(self) -> None:
        """Remove all subscribers."""
        self._subscribers.clear()

    @property
    def subscriber_count(self) -> int:
        """Get the number of active subscribers."""
        return len(self._subscribers)


async def activity_log_handler(event: Dict[str, Any]) -> None:
    """Log every committed command at debug level."""
    logger.debug("%s.%s args=%s", event.get('entity'), event.get('event'), event.get('args'))
