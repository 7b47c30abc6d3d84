# ============================================================================
# APPLICATION ENTITY
# ============================================================================
# EPOCH: 1 - CONTROL FLOW
# STATUS: Core - Root of an entity tree
# PURPOSE: Start children in order, stopping at the first failure
# CREATED: 18 OCT 2026
# ============================================================================
"""
Application Entity

The root a blueprint builds. start() runs its startable children in
declared order and aborts on the first failure, so a blueprint reads
like a sequential test case. stop() attempts every child and aggregates.
"""

import logging
from typing import Tuple

from entities.base import ManagedEntity
from entities.registry import register_entity_type

logger = logging.getLogger(__name__)


@register_entity_type("application")
class Application(ManagedEntity):
    """Root entity; children run sequentially."""
    entity_type = "application"

    def do_start(self, locations: Tuple[str, ...]) -> None:
        for child in self.startable_children():
            logger.debug(f"Starting child {child.display_name}")
            child.start(locations)


__all__ = ["Application"]
