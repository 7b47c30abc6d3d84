# ============================================================================
# EXAMPLE ENTITIES
# ============================================================================
# EPOCH: 1 - CONTROL FLOW
# STATUS: Examples - Sample leaf entities
# PURPOSE: Observable children for control entities, tests and blueprints
# CREATED: 18 OCT 2026
# ============================================================================
"""
Example Entities

- CountingEntity: counts start/stop/restart calls, holds a test value
  that scripts can read through a binding, and can be told to fail on
  chosen calls
- BasicEntity: has no lifecycle methods; control entities skip it
"""

import logging
from typing import Any, List, Mapping, Optional, Tuple

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from core.contracts import Lifecycle
from entities.base import Entity, ManagedEntity
from entities.registry import register_entity_type

logger = logging.getLogger(__name__)


class ScriptedFailure(RuntimeError):
    """Raised by CountingEntity on a call it was configured to fail."""
    pass


class CountingConfig(BaseModel):
    """
    Configuration for CountingEntity.

    fail.on.* lists hold 1-based call numbers: [2] fails the second call.
    """
    model_config = ConfigDict(extra="ignore", frozen=True)

    value: Any = None
    fail_on_start: List[int] = Field(
        default_factory=list,
        validation_alias=AliasChoices("fail.on.start", "fail_on_start"),
    )
    fail_on_restart: List[int] = Field(
        default_factory=list,
        validation_alias=AliasChoices("fail.on.restart", "fail_on_restart"),
    )
    fail_on_stop: List[int] = Field(
        default_factory=list,
        validation_alias=AliasChoices("fail.on.stop", "fail_on_stop"),
    )


@register_entity_type("counting")
class CountingEntity(ManagedEntity):
    """
    Leaf entity recording how it was driven.

    restart() is counted on its own and does not go through stop() and
    start(), so a loop of N passes shows 1 start, N-1 restarts, 0 stops.
    """
    entity_type = "counting"

    def __init__(self, config: Optional[Mapping[str, Any]] = None, parent: Optional[Entity] = None):
        super().__init__(config, parent)
        counting = self._resolve_config(CountingConfig)
        self.value: Any = counting.value
        self.fail_on_start = set(counting.fail_on_start)
        self.fail_on_restart = set(counting.fail_on_restart)
        self.fail_on_stop = set(counting.fail_on_stop)

        self.start_count = 0
        self.stop_count = 0
        self.restart_count = 0
        self.last_locations: Tuple[str, ...] = ()

    def do_start(self, locations: Tuple[str, ...]) -> None:
        self.start_count += 1
        self.last_locations = locations
        if self.start_count in self.fail_on_start:
            raise ScriptedFailure(f"{self.display_name}: start #{self.start_count} failed")

    def do_stop(self) -> None:
        self.stop_count += 1
        if self.stop_count in self.fail_on_stop:
            raise ScriptedFailure(f"{self.display_name}: stop #{self.stop_count} failed")

    def restart(self) -> None:
        self.restart_count += 1
        self._transition("restart", Lifecycle.STARTING, Lifecycle.RUNNING, self._do_restart)

    def _do_restart(self) -> None:
        if self.restart_count in self.fail_on_restart:
            raise ScriptedFailure(f"{self.display_name}: restart #{self.restart_count} failed")


@register_entity_type("basic")
class BasicEntity(Entity):
    """Entity without lifecycle methods."""
    entity_type = "basic"

    @property
    def value(self) -> Any:
        return self.config.get("value")


__all__ = ["ScriptedFailure", "CountingConfig", "CountingEntity", "BasicEntity"]
