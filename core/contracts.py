# ============================================================================
# BASE CONTRACTS & ENUMS
# ============================================================================
# EPOCH: 1 - CONTROL FLOW
# STATUS: Foundation - Lifecycle enum and sensor names
# PURPOSE: Define the lifecycle states and published sensors of every entity
# LAST_REVIEWED: 18 OCT 2026
# EXPORTS: Lifecycle, Sensors, EntityRef, EntityData
# DEPENDENCIES: enum, pydantic
# ============================================================================
"""
Base contracts for the control flow entities.

Every managed entity publishes two sensors that external observers read:

- service.isUp   True only while the entity is RUNNING
- service.state  the current Lifecycle value

Both are written exclusively by the entity's own lifecycle methods.
"""

from enum import Enum
from typing import FrozenSet, Optional, Protocol, runtime_checkable
from pydantic import BaseModel, Field


# ============================================================================
# LIFECYCLE
# ============================================================================

class Lifecycle(str, Enum):
    """
    Entity lifecycle states.

    State transitions (within one lifecycle call):
        STARTING -> RUNNING
                 -> ON_FIRE   (failed while starting)
        STOPPING -> STOPPED
                 -> ON_FIRE   (failed while stopping)

    A new call may begin from any state: start() enters STARTING,
    stop() enters STOPPING (or STOPPED directly for entities with
    nothing to stop).
    """
    CREATED = "created"          # Constructed, no lifecycle call yet
    STARTING = "starting"        # start() in progress
    RUNNING = "running"          # start() completed
    STOPPING = "stopping"        # stop() in progress
    STOPPED = "stopped"          # stop() completed
    ON_FIRE = "on_fire"          # Unrecovered failure

    def is_transitional(self) -> bool:
        """Check if a lifecycle call is still in progress in this state."""
        return self in (Lifecycle.STARTING, Lifecycle.STOPPING)

    def is_service_up(self) -> bool:
        """The service.isUp flag is only ever true while RUNNING."""
        return self is Lifecycle.RUNNING

    def allowed_next(self) -> FrozenSet["Lifecycle"]:
        """States reachable from this one."""
        if self is Lifecycle.STARTING:
            return frozenset({Lifecycle.RUNNING, Lifecycle.ON_FIRE})
        if self is Lifecycle.STOPPING:
            return frozenset({Lifecycle.STOPPED, Lifecycle.ON_FIRE})
        # Settled states: only a new lifecycle call may move them
        return frozenset({Lifecycle.STARTING, Lifecycle.STOPPING, Lifecycle.STOPPED})

    def can_transition_to(self, target: "Lifecycle") -> bool:
        return target in self.allowed_next()


# ============================================================================
# SENSOR NAMES
# ============================================================================

class Sensors:
    """Names of the sensors published by entities."""
    SERVICE_UP = "service.isUp"
    SERVICE_STATE = "service.state"

    # Control entity extras
    SCRIPT_RESULT = "script.result"
    CONDITION_RESULT = "condition.result"
    LOOP_ITERATION = "loop.iteration"
    LOOP_IGNORED_FAILURES = "loop.failures.ignored"


# ============================================================================
# BASE DATA CONTRACTS
# ============================================================================

class EntityData(BaseModel):
    """
    Essential entity identity, as reported to observers.
    """
    entity_id: str = Field(..., max_length=64, description="Runtime identifier")
    entity_type: str = Field(..., max_length=64)
    display_name: str = Field(..., max_length=256)
    plan_id: Optional[str] = Field(
        default=None,
        max_length=128,
        description="Identifier from the blueprint, used by binding lookups"
    )
    state: Lifecycle = Field(default=Lifecycle.CREATED)
    service_up: bool = False

    model_config = {"frozen": True}


# ============================================================================
# ENTITY REFERENCE
# ============================================================================

@runtime_checkable
class EntityRef(Protocol):
    """
    A live entity, as seen by code that must not depend on the entity
    package (script bindings).
    """
    id: str
    plan_id: Optional[str]
    display_name: str
