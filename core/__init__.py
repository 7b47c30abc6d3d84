# ============================================================================
# CORE MODULE
# ============================================================================
# EPOCH: 1 - CONTROL FLOW
# STATUS: Core module initialization
# PURPOSE: Export contracts, errors and models
# LAST_REVIEWED: 18 OCT 2026
# ============================================================================

from core.contracts import Lifecycle, Sensors, EntityRef, EntityData
from core.models import (
    ScriptConfig,
    LoopConfig,
    PauseConfig,
    ScriptContext,
    ScriptSource,
    EntityDefinition,
    Blueprint,
)

__all__ = [
    # Enums / names
    "Lifecycle",
    "Sensors",
    "EntityRef",
    # Models
    "EntityData",
    "ScriptConfig",
    "LoopConfig",
    "PauseConfig",
    "ScriptContext",
    "ScriptSource",
    "EntityDefinition",
    "Blueprint",
]
