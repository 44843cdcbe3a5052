"""
Unit of Work

Saves the entity an event touched, then publishes the command record on the
bus. Nothing is published when the save fails.
"""

from typing import Any, Dict, List, TYPE_CHECKING

if TYPE_CHECKING:
    from ..core.entity import Entity
    from .bus import EventBus


class UnitOfWork:

    def __init__(self, bus: 'EventBus'):
        self.bus = bus
        self._pending: List[Dict[str, Any]] = []

    async def commit(self, entity: 'Entity', command_record: Dict[str, Any]) -> None:
        self._pending.append(command_record)
        try:
            if entity.auto_persist:
                entity.save()
        except Exception:
            self.rollback()
            raise

        pending, self._pending = self._pending, []
        for record in pending:
            await self.bus.publish(record)

    def rollback(self) -> None:
        """Forget records that were never published."""
        self._pending.clear()
