# ============================================================================
# ENTITIES MODULE
# ============================================================================
# EPOCH: 1 - CONTROL FLOW
# STATUS: Core - Entity tree and control entities
# PURPOSE: Lifecycle base classes plus conditional, loop, pause and script entities
# CREATED: 18 OCT 2026
# ============================================================================
"""
Entities Module

Importing this package registers every built-in entity type.

Usage:
    from entities import Application, Loop, CountingEntity

    app = Application({"name": "demo"})
    loop = Loop({"count": 3}, parent=app)
    CountingEntity(parent=loop)
    app.start([])
"""

from entities.base import Startable, SensorStore, Entity, ManagedEntity
from entities.failures import ChildFailure, FailureCollector
from entities.registry import (
    register_entity_type,
    get_entity_type,
    get_entity_type_or_raise,
    create_entity,
    list_entity_types,
)
from entities.run_script import ScriptedEntity, RunScript
from entities.conditions import ConditionalEntity, IfCondition, IfElseCondition
from entities.loop import Loop
from entities.pause import Pause
from entities.application import Application
from entities.examples import ScriptedFailure, CountingEntity, BasicEntity

__all__ = [
    # Base
    "Startable",
    "SensorStore",
    "Entity",
    "ManagedEntity",
    # Failures
    "ChildFailure",
    "FailureCollector",
    # Registry
    "register_entity_type",
    "get_entity_type",
    "get_entity_type_or_raise",
    "create_entity",
    "list_entity_types",
    # Control entities
    "ScriptedEntity",
    "RunScript",
    "ConditionalEntity",
    "IfCondition",
    "IfElseCondition",
    "Loop",
    "Pause",
    "Application",
    # Examples
    "ScriptedFailure",
    "CountingEntity",
    "BasicEntity",
]
