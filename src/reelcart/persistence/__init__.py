"""
ReelCart Persistence

Session-scoped entity stores and the sweepers that expire them.
"""

from typing import List, Optional

from .base import EntityStore
from .memory import MemoryStore

# Stores whose sweepers follow the app lifespan
_stores: List[EntityStore] = []


def register_store(store: EntityStore) -> None:
    if store not in _stores:
        _stores.append(store)


async def start_sweepers(interval: Optional[float] = None) -> None:
    """Startup hook; a coroutine so the sweepers land on the server's loop."""
    for store in _stores:
        store.start_sweeper(interval)


async def stop_sweepers() -> None:
    for store in _stores:
        store.stop_sweeper()


__all__ = [
    "EntityStore",
    "MemoryStore",
    "register_store",
    "start_sweepers",
    "stop_sweepers",
]
