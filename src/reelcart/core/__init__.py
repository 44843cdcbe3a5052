"""
ReelCart Core Module

Domain layer - reactive entities, events and signals.
"""

from .entity import Entity, datastar_script
from .events import event, EventInfo, ElementPatch, DatastarPayload
from .signals import SignalDescriptor, EventMethodDescriptor, event_path

__all__ = [
    "Entity",
    "datastar_script",
    "event",
    "EventInfo",
    "ElementPatch",
    "DatastarPayload",
    "SignalDescriptor",
    "EventMethodDescriptor",
    "event_path",
]
