# ============================================================================
# SCRIPT ENGINE REGISTRY
# ============================================================================
# EPOCH: 1 - CONTROL FLOW
# STATUS: Core - Engine registration and lookup
# PURPOSE: Resolve a language identifier to a fresh engine instance
# CREATED: 18 OCT 2026
# ============================================================================
"""
Script Engine Registry

Maps language identifiers (and aliases) to engine factories. Lookups are
exact and case-sensitive: "python" and "Python" are different names.

Design:
- Built-in engines (python, jinja2) are registered when the default
  registry is created
- Additional engines register via the register_engine decorator
- Fail-fast on duplicate registration
- create() returns a new engine per call; scopes are never shared
"""

import logging
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional, Sequence

from core.errors import DuplicateEngineError, EngineNotFound
from orchestrator.engine.engines import Jinja2ScriptEngine, PythonScriptEngine, ScriptEngine

logger = logging.getLogger(__name__)

EngineFactory = Callable[[], ScriptEngine]


# ============================================================================
# REGISTRY
# ============================================================================

class EngineRegistry:
    """Language identifier to engine factory map."""

    def __init__(self):
        self._engines: Dict[str, EngineFactory] = {}
        self._metadata: Dict[str, Dict[str, Any]] = {}

    def register(
        self,
        language: str,
        factory: EngineFactory,
        *,
        aliases: Sequence[str] = (),
        description: str = "",
    ) -> None:
        """
        Register an engine factory under a language identifier.

        Args:
            language: Primary identifier
            factory: Zero-argument callable returning a new ScriptEngine
            aliases: Extra identifiers resolving to the same factory
            description: Human-readable description

        Raises:
            DuplicateEngineError: If any name is already taken
        """
        names = [language, *aliases]
        for name in names:
            if name in self._engines:
                raise DuplicateEngineError(name)

        for name in names:
            self._engines[name] = factory
        self._metadata[language] = {
            "language": language,
            "aliases": list(aliases),
            "description": description,
            "factory": getattr(factory, "__name__", repr(factory)),
            "supports_invocation": bool(getattr(factory, "supports_invocation", False)),
            "registered_at": datetime.now(timezone.utc).isoformat(),
        }
        logger.debug(f"Registered script engine: {language} (aliases={list(aliases)})")

    def get(self, language: str) -> Optional[EngineFactory]:
        return self._engines.get(language)

    def create(self, language: str) -> ScriptEngine:
        """
        Create a fresh engine for a language.

        Raises:
            EngineNotFound: If nothing is registered under the identifier
        """
        factory = self._engines.get(language)
        if factory is None:
            raise EngineNotFound(language)
        return factory()

    def list_engines(self) -> List[Dict[str, Any]]:
        return list(self._metadata.values())

    def clear(self) -> None:
        """Remove every engine. Primarily for testing."""
        self._engines.clear()
        self._metadata.clear()

    def __contains__(self, language: str) -> bool:
        return language in self._engines


def _register_builtin_engines(registry: EngineRegistry) -> EngineRegistry:
    registry.register(
        PythonScriptEngine.language,
        PythonScriptEngine,
        aliases=("py",),
        description="Python source; trailing expression is the result",
    )
    registry.register(
        Jinja2ScriptEngine.language,
        Jinja2ScriptEngine,
        aliases=("jinja",),
        description="Jinja2 expressions and templates",
    )
    return registry


_default_registry = _register_builtin_engines(EngineRegistry())


def get_registry() -> EngineRegistry:
    """Get the process-wide engine registry."""
    return _default_registry


def reset_registry() -> EngineRegistry:
    """Restore the default registry to the built-in engines only."""
    _default_registry.clear()
    return _register_builtin_engines(_default_registry)


def register_engine(
    language: str,
    *,
    aliases: Sequence[str] = (),
    description: str = "",
) -> Callable[[type], type]:
    """
    Decorator to register an engine class in the default registry.

    Example:
        @register_engine("upper")
        class UpperEngine(ScriptEngine):
            language = "upper"

            def evaluate(self, source, filename="<script>"):
                return source.upper()
    """
    def decorator(cls: type) -> type:
        _default_registry.register(language, cls, aliases=aliases, description=description)
        return cls

    return decorator


__all__ = [
    "EngineFactory",
    "EngineRegistry",
    "get_registry",
    "reset_registry",
    "register_engine",
]
