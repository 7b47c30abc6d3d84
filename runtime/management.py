# ============================================================================
# MANAGEMENT CONTEXT
# ============================================================================
# EPOCH: 1 - CONTROL FLOW
# STATUS: Runtime - In-process stand-in for the management plane
# PURPOSE: Track managed entities and resolve cross-entity references
# CREATED: 18 OCT 2026
# ============================================================================
"""
Management Context

Ties together the collaborators an entity tree needs at runtime:

- an EntityLookup (by default an EntityDirectory) for bindings
- a TaskRunner that blocks synchronous callers on asynchronous lookups
- process defaults (lookup timeout)

Usage:
    with ManagementContext() as mgmt:
        app = mgmt.manage(Application({"name": "demo"}))
        app.add_child(...)
        app.start([])
"""

import logging
from typing import Iterable, Optional, TYPE_CHECKING

from core.config import get_defaults
from runtime.directory import EntityDirectory, EntityLookup
from runtime.tasks import TaskRunner

if TYPE_CHECKING:
    from entities.base import Entity

logger = logging.getLogger(__name__)


class ManagementContext:
    """Registry of managed entities plus the execution context they share."""

    def __init__(
        self,
        directory: Optional[EntityDirectory] = None,
        lookup: Optional[EntityLookup] = None,
        task_runner: Optional[TaskRunner] = None,
        lookup_timeout: Optional[float] = None,
    ):
        """
        Args:
            directory: Index that managed entities are registered in
            lookup: Resolver used for bindings (defaults to the directory)
            task_runner: Background loop for asynchronous lookups
            lookup_timeout: Seconds before a binding lookup is cancelled
        """
        self.directory = directory or EntityDirectory()
        self.lookup = lookup or self.directory
        self.task_runner = task_runner or TaskRunner(name="entity-lookup")
        if lookup_timeout is None:
            lookup_timeout = get_defaults().script.binding_timeout_seconds
        self.lookup_timeout = lookup_timeout

    def manage(self, entity: "Entity") -> "Entity":
        """
        Register an entity and its current descendants.

        Nothing stays registered when any member is rejected.

        Raises:
            ValueError: If a member's plan id is already in use
        """
        registered = []
        try:
            for member in _walk(entity):
                if self.directory.get(member.id) is not member:
                    self.directory.register(member)
                    registered.append(member)
        except ValueError:
            for member in registered:
                self.directory.unregister(member)
            raise

        for member in _walk(entity):
            member.attach_management(self)
        return entity

    def unmanage(self, entity: "Entity") -> None:
        for member in _walk(entity):
            self.directory.unregister(member)

    def resolve_entity(self, reference: str, timeout: Optional[float] = None) -> "Entity":
        """
        Resolve an entity reference, blocking until the lookup completes.

        Raises:
            KeyError: No entity matches
            TimeoutError: The lookup was cancelled after the timeout
            concurrent.futures.CancelledError: The lookup was cancelled
        """
        return self.task_runner.run(
            self.lookup.lookup(reference),
            timeout=self.lookup_timeout if timeout is None else timeout,
            description=f"Finding entity {reference}",
        )

    def close(self) -> None:
        self.task_runner.close()

    def __enter__(self) -> "ManagementContext":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


def _walk(entity: "Entity") -> Iterable["Entity"]:
    yield entity
    for child in entity.children:
        yield from _walk(child)


__all__ = ["ManagementContext"]
