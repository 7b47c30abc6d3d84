# ============================================================================
# SCRIPT EXECUTION CONTEXT
# ============================================================================
# EPOCH: 1 - CONTROL FLOW
# STATUS: Core model - Per-evaluation script context
# PURPOSE: Carry everything one script evaluation needs
# LAST_REVIEWED: 18 OCT 2026
# EXPORTS: ScriptSource, ScriptContext
# DEPENDENCIES: dataclasses
# ============================================================================
"""
Script Execution Context

Key concept:
- ScriptConfig = TEMPLATE (validated once per entity)
- ScriptContext = INSTANCE (built fresh for every evaluation, discarded
  once the evaluation returns or raises)
"""

from dataclasses import dataclass, field
from typing import Any, Mapping, Optional, Tuple

from core.models.entity_config import ScriptConfig


@dataclass(frozen=True)
class ScriptSource:
    """
    Exactly one script source: a location or inline text.

    When both are configured the location wins and the text is dropped.
    """
    text: Optional[str] = None
    location: Optional[str] = None

    @property
    def is_file(self) -> bool:
        return self.location is not None

    def describe(self) -> str:
        if self.is_file:
            return f"file {self.location}"
        return "inline script"

    @classmethod
    def select(cls, script: Optional[str], location: Optional[str]) -> "ScriptSource":
        if location:
            return cls(location=location)
        return cls(text=script or "")


@dataclass(frozen=True)
class ScriptContext:
    """Everything one evaluation needs."""
    language: str
    source: ScriptSource
    invoke: Optional[str] = None
    args: Tuple[str, ...] = ()
    bindings: Mapping[str, Any] = field(default_factory=dict)

    @property
    def invokes_function(self) -> bool:
        return bool(self.invoke)

    @classmethod
    def from_config(cls, config: ScriptConfig) -> "ScriptContext":
        """Build a fresh context from an entity's script configuration."""
        return cls(
            language=config.language,
            source=ScriptSource.select(config.script, config.file),
            invoke=config.invoke,
            args=tuple(config.args),
            bindings=dict(config.bindings),
        )
