# ============================================================================
# CONDITIONAL ENTITIES
# ============================================================================
# EPOCH: 1 - CONTROL FLOW
# STATUS: Core - Conditional branch controllers
# PURPOSE: Start children selected by a boolean script result
# CREATED: 18 OCT 2026
# ============================================================================
"""
Conditional Entities

Both entities evaluate their script on start and require a boolean
result (anything else raises ConditionTypeMismatch, no child is started).

- IfCondition: true starts every startable child in order, false none
- IfElseCondition: true starts only children[0], false only
  children[1]; later children are never started

Child start failures are aggregated: every selected child is attempted,
then one AggregatedChildFailure is raised. restart() re-evaluates.
"""

import logging
from abc import ABC, abstractmethod
from typing import List, Tuple

from core.contracts import Sensors
from core.errors import ConditionTypeMismatch
from entities.base import Entity, Startable
from entities.registry import register_entity_type
from entities.run_script import ScriptedEntity

logger = logging.getLogger(__name__)


class ConditionalEntity(ScriptedEntity, ABC):
    """Evaluates a condition, then starts the children it selects."""

    def evaluate_condition(self) -> bool:
        result = self.process_script()
        if not isinstance(result, bool):
            logger.error(f"{self.display_name}: condition returned {type(result).__name__}")
            raise ConditionTypeMismatch(result)
        self.sensors.set(Sensors.CONDITION_RESULT, result)
        return result

    @abstractmethod
    def select_children(self, condition: bool) -> List[Entity]:
        """Children to start for this condition value, in order."""

    def do_start(self, locations: Tuple[str, ...]) -> None:
        condition = self.evaluate_condition()
        selected = self.select_children(condition)
        logger.info(f"{self.display_name}: condition is {condition}, starting {len(selected)} child(ren)")
        self.start_children(selected, locations)


@register_entity_type("if")
class IfCondition(ConditionalEntity):
    """Starts all children when the condition holds."""
    entity_type = "if"

    def select_children(self, condition: bool) -> List[Entity]:
        if not condition:
            return []
        return self.startable_children()


@register_entity_type("if_else")
class IfElseCondition(ConditionalEntity):
    """Starts the first child when the condition holds, else the second."""
    entity_type = "if_else"

    def select_children(self, condition: bool) -> List[Entity]:
        index = 0 if condition else 1
        children = self.children
        if index >= len(children):
            logger.debug(f"{self.display_name}: no child at position {index}")
            return []

        child = children[index]
        if not isinstance(child, Startable):
            logger.debug(f"Skipping non-startable child {child.display_name}")
            return []
        return [child]


__all__ = ["ConditionalEntity", "IfCondition", "IfElseCondition"]
