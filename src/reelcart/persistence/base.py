"""
Entity stores

A store keeps session-scoped entities between requests, keyed by entity id
(``cart_<sid>``, ``videofeed_<sid>``). Entries may carry a time-to-live; a
background sweeper purges the expired ones while the server runs.
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from ..core.entity import Entity

logger = logging.getLogger(__name__)


class EntityStore(ABC):
    """Where entities live between requests."""

    sweep_interval: float = 300.0

    def __init__(self):
        self._sweeper: Optional[asyncio.Task] = None

    @abstractmethod
    def put(self, entity: 'Entity', ttl: Optional[int] = None) -> None:
        """Store `entity` under its id, expiring after `ttl` seconds if given."""

    @abstractmethod
    def get(self, key: str) -> Optional['Entity']:
        """The live entity stored under `key`, or None."""

    @abstractmethod
    def discard(self, key: str) -> bool:
        """Remove `key`; True if something was stored there."""

    @abstractmethod
    def purge_expired(self) -> int:
        """Drop expired entries and return how many went."""

    def __contains__(self, key: str) -> bool:
        return self.get(key) is not None

    @property
    def sweeping(self) -> bool:
        return self._sweeper is not None and not self._sweeper.done()

    def start_sweeper(self, interval: Optional[float] = None) -> None:
        """Purge expired entries every `interval` seconds on the running loop."""
        if interval:
            self.sweep_interval = interval
        if self.sweeping:
            return
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.debug("%s: no running event loop, sweeper not started", type(self).__name__)
            return
        self._sweeper = loop.create_task(self._sweep())

    def stop_sweeper(self) -> None:
        if self._sweeper is not None:
            self._sweeper.cancel()
            self._sweeper = None

    async def _sweep(self) -> None:
        while True:
            await asyncio.sleep(self.sweep_interval)
            try:
                purged = self.purge_expired()
            except Exception:
                logger.exception("%s: sweep failed", type(self).__name__)
                continue
            if purged:
                logger.info("%s: purged %d expired entities", type(self).__name__, purged)
