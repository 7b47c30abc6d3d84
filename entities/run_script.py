# ============================================================================
# SCRIPTED ENTITIES
# ============================================================================
# EPOCH: 1 - CONTROL FLOW
# STATUS: Core - Entities driven by a configured script
# PURPOSE: Shared script evaluation plus the RunScript entity
# CREATED: 18 OCT 2026
# ============================================================================
"""
Scripted Entities

ScriptedEntity resolves the script configuration keys (language, script,
file, invoke, args, bindings) once at construction and evaluates them on
demand with process_script(). Binding references are resolved through the
entity's management context at evaluation time.

RunScript evaluates its script on every start and publishes the result
as the script.result sensor.

Example config:
    {"language": "python", "script": "1 + 1"}
    {"language": "python", "file": "scripts/check.py", "invoke": "check",
     "args": ["(10 - 1)", "ONE"], "bindings": {"db": "db-1"}}
"""

import logging
from typing import Any, Mapping, Optional, Tuple

from core.contracts import Sensors
from core.logging import log_context
from core.models import ScriptConfig, ScriptContext
from entities.base import Entity, ManagedEntity
from entities.registry import register_entity_type
from orchestrator.engine import ScriptEvaluator

logger = logging.getLogger(__name__)


class ScriptedEntity(ManagedEntity):
    """Managed entity carrying a script configuration."""

    def __init__(self, config: Optional[Mapping[str, Any]] = None, parent: Optional[Entity] = None):
        super().__init__(config, parent)
        self.script_config: ScriptConfig = self._resolve_config(ScriptConfig)

    def process_script(self) -> Any:
        """Evaluate the configured script once, with a fresh context."""
        context = ScriptContext.from_config(self.script_config)
        evaluator = ScriptEvaluator(resolver=self._resolve_reference)
        with log_context(language=context.language):
            logger.debug(f"{self.display_name}: evaluating {context.source.describe()}")
            return evaluator.evaluate(context)

    def _resolve_reference(self, reference: str) -> Entity:
        management = self.management
        if management is None:
            raise LookupError(f"{self.display_name} is not managed; cannot look up [{reference}]")
        return management.resolve_entity(reference)


@register_entity_type("run_script")
class RunScript(ScriptedEntity):
    """Evaluates a script each time it starts."""
    entity_type = "run_script"

    def do_start(self, locations: Tuple[str, ...]) -> None:
        result = self.process_script()
        self.sensors.set(Sensors.SCRIPT_RESULT, result)

    def do_stop(self) -> None:
        pass


__all__ = ["ScriptedEntity", "RunScript"]
