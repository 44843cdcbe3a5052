"""
EntityMixin: Core entity functionality without base model dependencies.

This mixin provides namespacing, signals and identity for reactive
entities. It can be mixed into any pydantic base model class.
"""

import json
import uuid
from typing import Any, ClassVar, Dict, Optional

from fasthtml.common import Div

from ...persistence import MemoryStore


class EntityMixin:
    """
    Core entity functionality mixin.

    Provides configuration, Datastar signals and session-scoped identity
    without depending on any specific base model class.
    """

    # ClassVar keeps these out of the pydantic field set
    namespace: ClassVar[Optional[str]] = None
    use_namespace: ClassVar[bool] = True
    auto_persist: ClassVar[bool] = True
    ttl: ClassVar[Optional[int]] = None
    store_class: ClassVar[type] = MemoryStore

    @classmethod
    def signal_namespace(cls) -> str:
        """Namespace used for signals and routes (defaults to the class name)."""
        return cls.__dict__.get('namespace') or cls.__name__

    @property
    def store(self):
        return self.store_class()

    @property
    def signals(self) -> Dict[str, Any]:
        """Get signals for this entity."""
        data = self.model_dump(mode="json")
        if self.use_namespace:
            return {self.signal_namespace(): data}
        return data

    @classmethod
    def get_session_id(cls, req, **kwargs) -> str:
        """Generate deterministic entity ID from the request session."""
        session = req.scope.get('session') if req is not None and hasattr(req, 'scope') else None
        if session is None:
            sid = 'default'
        else:
            sid = session.setdefault('sid', uuid.uuid4().hex)
        return f"{cls.__name__.lower()}_{sid}"

    @classmethod
    def _get_id(cls, req, **kwargs) -> str:
        """Get entity ID from the field default or the request session."""
        default = cls.model_fields['id'].get_default(call_default_factory=True)
        if default:
            return default
        return cls.get_session_id(req, **kwargs)

    def on_init(self) -> None:
        """Called once when a new entity instance is created."""

    def __ft__(self):
        """Render with data-signals attributes."""
        signals = json.dumps(self.signals)
        return Div({"data-signals": signals}, id=f"{self.signal_namespace()}-signals")
