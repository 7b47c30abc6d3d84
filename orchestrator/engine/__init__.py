# ============================================================================
# SCRIPT ENGINE MODULE
# ============================================================================
# EPOCH: 1 - CONTROL FLOW
# STATUS: Core - Script evaluation components
# PURPOSE: Language engines, engine registry, source reading, evaluation
# CREATED: 18 OCT 2026
# ============================================================================
"""
Script Engine Components

- engines: python and jinja2 engines
- registry: language identifier lookup
- sources: script file / URL reading
- evaluator: the shared bind/evaluate/invoke algorithm
"""

from orchestrator.engine.engines import (
    EvaluationAttempt,
    ScriptEngine,
    PythonScriptEngine,
    Jinja2ScriptEngine,
)
from orchestrator.engine.registry import (
    EngineRegistry,
    get_registry,
    reset_registry,
    register_engine,
)
from orchestrator.engine.sources import ScriptLoader
from orchestrator.engine.evaluator import EntityResolver, ScriptEvaluator

__all__ = [
    # Engines
    "EvaluationAttempt",
    "ScriptEngine",
    "PythonScriptEngine",
    "Jinja2ScriptEngine",
    # Registry
    "EngineRegistry",
    "get_registry",
    "reset_registry",
    "register_engine",
    # Sources
    "ScriptLoader",
    # Evaluation
    "EntityResolver",
    "ScriptEvaluator",
]
