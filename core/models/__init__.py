# ============================================================================
# MODELS MODULE
# ============================================================================
# EPOCH: 1 - CONTROL FLOW
# STATUS: Model exports
# PURPOSE: Central export point for configuration and blueprint models
# LAST_REVIEWED: 18 OCT 2026
# ============================================================================
"""
Models Module - Central Export Point

- entity_config: typed configuration of control entities (pydantic)
- script: per-evaluation script context
- blueprint: entity tree definitions loaded from YAML (pydantic)
"""

from core.models.entity_config import ScriptConfig, LoopConfig, PauseConfig, parse_duration
from core.models.script import ScriptSource, ScriptContext
from core.models.blueprint import EntityDefinition, Blueprint

__all__ = [
    # Entity configuration
    "ScriptConfig",
    "LoopConfig",
    "PauseConfig",
    "parse_duration",
    # Script
    "ScriptSource",
    "ScriptContext",
    # Blueprint
    "EntityDefinition",
    "Blueprint",
]
