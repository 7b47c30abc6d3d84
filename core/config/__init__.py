# ============================================================================
# CONFIGURATION MODULE
# ============================================================================
# EPOCH: 1 - CONTROL FLOW
# STATUS: Core - Configuration and defaults
# PURPOSE: Centralized configuration management
# CREATED: 18 OCT 2026
# ============================================================================
"""
Configuration Module

Provides process-wide defaults for the control flow entities.
"""

from core.config.defaults import (
    ScriptDefaults,
    LoggingDefaults,
    Defaults,
    get_defaults,
    reset_defaults,
)

__all__ = [
    "ScriptDefaults",
    "LoggingDefaults",
    "Defaults",
    "get_defaults",
    "reset_defaults",
]
