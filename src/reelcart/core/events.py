"""
Event declarations

``@event`` only records how a method is exposed (verb, route, default patch
target). Routes are built later by the dispatcher from that record.
"""

import inspect
from dataclasses import dataclass, field
from typing import Any, Optional

VERBS = {"GET", "POST", "PUT", "PATCH", "DELETE"}


@dataclass
class EventInfo:
    name: str
    method: str
    selector: Optional[str]
    merge_mode: str
    signature: inspect.Signature
    path: Optional[str] = None
    kwargs: dict = field(default_factory=dict)


@dataclass
class ElementPatch:
    """
    An HTML fragment with an explicit Datastar target.

    Events yield this when a fragment must go somewhere other than the
    event's default selector, e.g. appending new reels to ``#feed``.
    """
    content: Any
    selector: Optional[str] = None
    mode: str = "outer"


class DatastarPayload(dict):
    """Signals sent by the Datastar client; keys are also readable as attributes."""

    def __getattr__(self, name: str) -> Any:
        if name.startswith('_'):
            raise AttributeError(name)
        return self.get(name)


def event(
    fn=None,
    *,
    method: str = "GET",
    selector: Optional[str] = None,
    merge_mode: str = "outer",
    path: Optional[str] = None,
    **kwargs
):
    """
    Mark an entity method as a client-callable event.

    Usable bare (``@event``) or with options::

        @event(method="POST", selector="#cart-panel", merge_mode="inner")
        def clear(self): ...

    Args:
        method: HTTP verb of the generated route
        selector: default CSS target for returned fragments
        merge_mode: default Datastar patch mode (outer, inner, append, ...)
        path: route path overriding ``/{namespace}/{name}``
    """
    verb = method.upper()
    if verb not in VERBS:
        raise ValueError(f"Unsupported HTTP verb: {method!r}")

    def mark(func):
        func._event_info = EventInfo(
            name=func.__name__,
            method=verb,
            selector=selector,
            merge_mode=merge_mode,
            signature=inspect.signature(func),
            path=path,
            kwargs=kwargs,
        )
        return func

    return mark(fn) if fn is not None else mark
