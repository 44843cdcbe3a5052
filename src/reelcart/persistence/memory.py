"""
In-memory entity store

Each session's feed, cart and navigation live here for the lifetime of the
process. Nothing survives a restart.
"""

import time
from typing import Optional, TYPE_CHECKING

from .base import EntityStore

if TYPE_CHECKING:
    from ..core.entity import Entity


class MemoryStore(EntityStore):
    """
    Process-wide dict of entities.

    Every ``MemoryStore()`` returns the same instance, so entity classes can
    name the class instead of passing a store around.
    """

    _shared: Optional['MemoryStore'] = None

    def __new__(cls):
        if cls._shared is None:
            store = super().__new__(cls)
            EntityStore.__init__(store)
            store._entries = {}
            cls._shared = store
        return cls._shared

    def __init__(self):
        # State is created once in __new__
        pass

    def put(self, entity: 'Entity', ttl: Optional[int] = None) -> None:
        expires_at = time.time() + ttl if ttl else None
        self._entries[entity.id] = (entity, expires_at)

    def get(self, key: str) -> Optional['Entity']:
        entry = self._entries.get(key)
        if entry is None:
            return None
        entity, expires_at = entry
        if expires_at is not None and expires_at < time.time():
            del self._entries[key]
            return None
        return entity

    def discard(self, key: str) -> bool:
        return self._entries.pop(key, None) is not None

    def purge_expired(self) -> int:
        now = time.time()
        stale = [key for key, (_, expires_at) in self._entries.items()
                 if expires_at is not None and expires_at < now]
        for key in stale:
            del self._entries[key]
        return len(stale)

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)
