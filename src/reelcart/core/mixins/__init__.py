"""Building blocks of ``Entity``: identity and signals, and store-backed persistence."""

from .entity_mixin import EntityMixin
from .persistence_mixin import PersistenceMixin

__all__ = ["EntityMixin", "PersistenceMixin"]
