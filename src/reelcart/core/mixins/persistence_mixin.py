"""
PersistenceMixin: store-backed lifecycle for entities.

Works with any ``EntityStore``; the concrete store comes from the entity's
``store_class``. Entries expire after the session TTL unless an entity sets
its own ``ttl``; every save or lookup restarts the clock.
"""

from typing import Optional

from ...config import get_config


class PersistenceMixin:
    """Save, delete, existence checks and get-or-create."""

    def save(self, ttl: Optional[int] = None) -> None:
        self.store.put(self, ttl or self.ttl or get_config().session.ttl)

    def delete(self) -> bool:
        return self.store.discard(self.id)

    def exists(self) -> bool:
        return self.id in self.store

    @classmethod
    def get(cls, req, **kwargs):
        """The session's stored entity, created (and stored) on first use."""
        entity_id = cls._get_id(req, **kwargs)
        stored = cls.store_class().get(entity_id)
        if isinstance(stored, cls):
            if stored.auto_persist:
                stored.save()
            return stored
        return cls(req, id=entity_id, **kwargs)
