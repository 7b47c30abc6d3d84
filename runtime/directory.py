# ============================================================================
# ENTITY DIRECTORY
# ============================================================================
# EPOCH: 1 - CONTROL FLOW
# STATUS: Runtime - Cross-entity lookup
# PURPOSE: Resolve entity identifiers to live entities
# CREATED: 18 OCT 2026
# ============================================================================
"""
Entity Directory

Index of managed entities keyed by runtime entity_id and by blueprint
plan id. Script bindings that name another entity are weak references
resolved here at evaluation time; nothing is cached by the caller.

The lookup is a coroutine so it can stand in for a remote directory; it
runs on the TaskRunner's loop thread, hence the lock.
"""

import asyncio
import logging
import threading
from typing import Dict, List, Optional, Protocol, TYPE_CHECKING, runtime_checkable

if TYPE_CHECKING:
    from entities.base import Entity

logger = logging.getLogger(__name__)


@runtime_checkable
class EntityLookup(Protocol):
    """Asynchronous resolution of an entity reference."""

    async def lookup(self, reference: str) -> "Entity":
        ...


class EntityDirectory:
    """Thread-safe in-memory entity index."""

    def __init__(self):
        self._by_id: Dict[str, "Entity"] = {}
        self._by_plan_id: Dict[str, "Entity"] = {}
        self._lock = threading.RLock()

    def register(self, entity: "Entity") -> None:
        """
        Register an entity.

        Raises:
            ValueError: If another entity already uses the same plan id
        """
        with self._lock:
            if entity.plan_id:
                existing = self._by_plan_id.get(entity.plan_id)
                if existing is not None and existing is not entity:
                    raise ValueError(f"Duplicate entity id: {entity.plan_id}")
                self._by_plan_id[entity.plan_id] = entity
            self._by_id[entity.id] = entity
        logger.debug(f"Registered entity {entity.id} (plan id={entity.plan_id})")

    def unregister(self, entity: "Entity") -> None:
        with self._lock:
            self._by_id.pop(entity.id, None)
            if entity.plan_id and self._by_plan_id.get(entity.plan_id) is entity:
                del self._by_plan_id[entity.plan_id]

    def get(self, reference: str) -> Optional["Entity"]:
        """Find an entity by plan id first, then by runtime id."""
        with self._lock:
            return self._by_plan_id.get(reference) or self._by_id.get(reference)

    def all(self) -> List["Entity"]:
        with self._lock:
            return list(self._by_id.values())

    async def lookup(self, reference: str) -> "Entity":
        """
        Resolve a reference to a live entity.

        Raises:
            KeyError: If no entity matches
        """
        # Yield once so callers always see a real suspension point
        await asyncio.sleep(0)
        entity = self.get(reference)
        if entity is None:
            raise KeyError(f"No entity found with id [{reference}]")
        logger.debug(f"Found entity by id {reference}")
        return entity

    def __contains__(self, reference: str) -> bool:
        return self.get(reference) is not None

    def __len__(self) -> int:
        with self._lock:
            return len(self._by_id)


__all__ = ["EntityLookup", "EntityDirectory"]
