import inspect
from typing import Any

from fastcore.xml import Script
from pydantic import BaseModel, ConfigDict

from .signals import SignalDescriptor, EventMethodDescriptor
from .mixins import EntityMixin, PersistenceMixin

datastar_script = Script(src="https://cdn.jsdelivr.net/gh/starfederation/datastar@1.0.0-RC.5/bundles/datastar.js", type="module")


class Entity(EntityMixin, PersistenceMixin, BaseModel):
    """Base class for all reactive entities (the app's controllers)."""
    model_config = ConfigDict(arbitrary_types_allowed=True)

    id: str = ""

    # EntityMixin provides: configuration, signals, identity
    # PersistenceMixin provides: save, delete, exists, get

    def __init__(self, req=None, **kwargs):
        super().__init__(**kwargs)
        if not self.id:
            self.id = self._get_id(req, **kwargs)

        self.on_init()

        if self.auto_persist:
            self.save()

    @classmethod
    def __pydantic_init_subclass__(cls, **kwargs: Any) -> None:
        super().__pydantic_init_subclass__(**kwargs)

        # Create signal descriptors for all model fields
        for field_name in cls.model_fields:
            setattr(cls, f"S{field_name}", SignalDescriptor(field_name))
        for field_name in cls.model_computed_fields:
            setattr(cls, f"S{field_name}", SignalDescriptor(field_name))

        # Replace @event methods with descriptors that also build Datastar actions
        seen = set()
        for klass in cls.__mro__:
            if not issubclass(klass, Entity):
                continue
            for attr_name, attr in list(vars(klass).items()):
                if attr_name in seen:
                    continue
                if isinstance(attr, EventMethodDescriptor):
                    original = attr.original_method
                elif inspect.isfunction(attr) and hasattr(attr, '_event_info'):
                    original = attr
                else:
                    continue
                seen.add(attr_name)
                setattr(cls, attr_name, EventMethodDescriptor(attr_name, cls, original))
