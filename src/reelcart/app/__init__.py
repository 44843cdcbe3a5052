"""
Application Service Layer

Bridges the FastHTML routes and the reactive entities.

Key components:
- dispatcher: Request → Event binding and command execution
- uow: Unit-of-Work pattern for persistence and domain events
- bus: in-process event bus for command records
"""

from .dispatcher import Dispatcher, diff_signals
from .uow import UnitOfWork
from .bus import EventBus, InProcessBus

__all__ = [
    'Dispatcher',
    'diff_signals',
    'UnitOfWork',
    'EventBus',
    'InProcessBus',
]
