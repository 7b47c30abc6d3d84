# ============================================================================
# RUNTIME MODULE
# ============================================================================
# EPOCH: 1 - CONTROL FLOW
# STATUS: Runtime - Collaborators of the entity tree
# PURPOSE: Entity lookup, asynchronous task execution, management context
# CREATED: 18 OCT 2026
# ============================================================================
"""
Runtime Module

- directory: entity index and asynchronous lookup
- tasks: background event loop for blocking callers
- management: the context an entity tree is managed in
"""

from runtime.directory import EntityDirectory, EntityLookup
from runtime.tasks import TaskRunner
from runtime.management import ManagementContext

__all__ = [
    "EntityDirectory",
    "EntityLookup",
    "TaskRunner",
    "ManagementContext",
]
