# ============================================================================
# CONFIGURATION DEFAULTS
# ============================================================================
# EPOCH: 1 - CONTROL FLOW
# STATUS: Core - Default configuration values
# PURPOSE: Centralized defaults for script evaluation, lookups and logging
# CREATED: 18 OCT 2026
# ============================================================================
"""
Configuration Defaults

Process-wide defaults that are not part of any single entity's
configuration. Entity configuration keys (language, count, duration...)
live in core.models.entity_config.

Design:
- Immutable dataclasses for defaults
- Environment variable overrides
- Type-safe access
"""

import os
from dataclasses import dataclass, field
from typing import Optional


@dataclass(frozen=True)
class ScriptDefaults:
    """
    Defaults for script evaluation.

    Controls how long binding lookups and remote script fetches may
    block before they are cancelled.
    """
    # Seconds to wait for a binding lookup before cancelling it
    binding_timeout_seconds: float = 30.0

    # Seconds allowed for fetching an http(s) script location
    fetch_timeout_seconds: float = 30.0

    # Encoding used when reading script files
    file_encoding: str = "utf-8"

    @classmethod
    def from_env(cls) -> "ScriptDefaults":
        """Create from environment variables."""
        return cls(
            binding_timeout_seconds=float(os.getenv("SCRIPT_BINDING_TIMEOUT_SECONDS", 30.0)),
            fetch_timeout_seconds=float(os.getenv("SCRIPT_FETCH_TIMEOUT_SECONDS", 30.0)),
            file_encoding=os.getenv("SCRIPT_FILE_ENCODING", "utf-8"),
        )


@dataclass(frozen=True)
class LoggingDefaults:
    """Defaults for log output."""
    level: str = "INFO"
    json_output: bool = False

    @classmethod
    def from_env(cls) -> "LoggingDefaults":
        """Create from environment variables."""
        return cls(
            level=os.getenv("LOG_LEVEL", "INFO").upper(),
            json_output=os.getenv("LOG_FORMAT", "").lower() == "json",
        )


# ============================================================================
# GLOBAL DEFAULTS INSTANCE
# ============================================================================

@dataclass
class Defaults:
    """Container for all default configurations."""
    script: ScriptDefaults = field(default_factory=ScriptDefaults)
    logging: LoggingDefaults = field(default_factory=LoggingDefaults)

    @classmethod
    def from_env(cls) -> "Defaults":
        """Create all defaults from environment variables."""
        return cls(
            script=ScriptDefaults.from_env(),
            logging=LoggingDefaults.from_env(),
        )


_defaults: Optional[Defaults] = None


def get_defaults() -> Defaults:
    """Get global defaults instance."""
    global _defaults
    if _defaults is None:
        _defaults = Defaults.from_env()
    return _defaults


def reset_defaults() -> None:
    """Reset defaults (for testing)."""
    global _defaults
    _defaults = None
