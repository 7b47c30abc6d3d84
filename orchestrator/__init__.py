# ============================================================================
# ORCHESTRATOR MODULE
# ============================================================================
# EPOCH: 1 - CONTROL FLOW
# STATUS: Core - Script orchestration
# PURPOSE: Evaluate configured scripts on behalf of control entities
# CREATED: 18 OCT 2026
# ============================================================================
"""
Orchestrator Module

Usage:
    from orchestrator import ScriptEvaluator
    from core.models import ScriptContext

    evaluator = ScriptEvaluator(resolver=mgmt.resolve_entity)
    result = evaluator.evaluate(ScriptContext.from_config(config))
"""

from orchestrator.engine import ScriptEvaluator, get_registry, register_engine

__all__ = ["ScriptEvaluator", "get_registry", "register_engine"]
