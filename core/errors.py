# ============================================================================
# ERROR TAXONOMY
# ============================================================================
# EPOCH: 1 - CONTROL FLOW
# STATUS: Foundation - Exceptions raised by engines and control entities
# PURPOSE: One place for every failure a caller can observe
# CREATED: 18 OCT 2026
# ============================================================================
"""
Error Taxonomy

    ControlFlowError
    ├── ScriptError
    │   ├── EngineNotFound
    │   ├── DuplicateEngineError
    │   ├── BindingResolutionError
    │   ├── ScriptSourceError
    │   │   ├── ScriptFileNotFound
    │   │   └── ScriptIoError
    │   ├── ScriptEvaluationError
    │   ├── InvocationUnsupported
    │   ├── FunctionNotFound
    │   └── FunctionInvocationError
    ├── ConditionTypeMismatch
    ├── AggregatedChildFailure
    ├── InterruptedWait
    ├── EntityConfigurationError
    ├── UnknownEntityTypeError
    └── BlueprintError

Wrapped errors are chained with ``raise ... from err`` so the underlying
engine or I/O error is available as ``__cause__``.
"""

from typing import Any, List, Optional, Sequence


class ControlFlowError(Exception):
    """Base exception for control flow failures."""
    pass


# ============================================================================
# SCRIPT ENGINE ERRORS
# ============================================================================

class ScriptError(ControlFlowError):
    """Base exception for script evaluation failures."""
    pass


class EngineNotFound(ScriptError):
    """Raised when no engine is registered for a language identifier."""
    def __init__(self, language: str):
        self.language = language
        super().__init__(f"Cannot find the script engine for [{language}].")


class DuplicateEngineError(ScriptError):
    """Raised when a language identifier is already registered."""
    def __init__(self, language: str):
        self.language = language
        super().__init__(f"Script engine already registered: {language}")


class BindingResolutionError(ScriptError):
    """Raised when a binding value cannot be resolved to an entity."""
    def __init__(self, binding: str, reference: Any, reason: str = ""):
        self.binding = binding
        self.reference = reference
        detail = f": {reason}" if reason else ""
        super().__init__(
            f"Cannot resolve binding [{binding}] to entity [{reference}]{detail}"
        )


class ScriptSourceError(ScriptError):
    """Base exception for failures reading a script location."""
    def __init__(self, location: str, message: str):
        self.location = location
        super().__init__(message)


class ScriptFileNotFound(ScriptSourceError):
    """Raised when the configured script file does not exist."""
    def __init__(self, location: str):
        super().__init__(location, f"Cannot find script file [{location}].")


class ScriptIoError(ScriptSourceError):
    """Raised when the configured script file cannot be read."""
    def __init__(self, location: str, reason: str = ""):
        detail = f": {reason}" if reason else ""
        super().__init__(location, f"Error while reading script file [{location}]{detail}")


class ScriptEvaluationError(ScriptError):
    """Raised when the engine fails to evaluate a script."""
    def __init__(self, language: str, reason: str = ""):
        self.language = language
        detail = f": {reason}" if reason else ""
        super().__init__(f"Failure while evaluating [{language}] script{detail}")


class InvocationUnsupported(ScriptError):
    """Raised when a function is requested from an engine that cannot invoke."""
    def __init__(self, language: str):
        self.language = language
        super().__init__(
            f"Script engine for [{language}] does not support invokable functions."
        )


class FunctionNotFound(ScriptError):
    """Raised when the requested function is not defined by the script."""
    def __init__(self, function_name: str, language: str):
        self.function_name = function_name
        self.language = language
        super().__init__(f"Function [{function_name}] not found in [{language}] script.")


class FunctionInvocationError(ScriptError):
    """Raised when invoking a script function fails."""
    def __init__(self, function_name: str, reason: str = ""):
        self.function_name = function_name
        detail = f": {reason}" if reason else ""
        super().__init__(f"Error invoking function [{function_name}]{detail}")


# ============================================================================
# CONTROL ENTITY ERRORS
# ============================================================================

class ConditionTypeMismatch(ControlFlowError):
    """Raised when a condition script does not evaluate to a boolean."""
    def __init__(self, result: Any):
        self.result = result
        super().__init__(
            f"Incorrect return type for script evaluation result [{result}]. "
            f"Expected boolean."
        )


class AggregatedChildFailure(ControlFlowError):
    """
    One failure standing for every child failure of a pass.

    ``failures`` holds the underlying exceptions in the order they
    occurred; ``__cause__`` is set to the first of them.
    """
    def __init__(
        self,
        message: str,
        failures: Sequence[BaseException],
        child_names: Optional[Sequence[str]] = None,
    ):
        self.failures: List[BaseException] = list(failures)
        self.child_names: List[str] = list(child_names or [])
        super().__init__(message)

    @property
    def exceptions(self) -> tuple:
        return tuple(self.failures)

    def __str__(self) -> str:
        base = super().__str__()
        details = "; ".join(
            f"{name}: {type(err).__name__}: {err}" if name else f"{type(err).__name__}: {err}"
            for name, err in zip(self._padded_names(), self.failures)
        )
        return f"{base} [{details}]" if details else base

    def _padded_names(self) -> List[str]:
        names = list(self.child_names)
        names.extend([""] * (len(self.failures) - len(names)))
        return names


class InterruptedWait(ControlFlowError):
    """Raised when a blocking wait is cancelled before it completes."""
    pass


# ============================================================================
# CONFIGURATION / BLUEPRINT ERRORS
# ============================================================================

class EntityConfigurationError(ControlFlowError, ValueError):
    """Raised when an entity's configuration fails validation."""
    def __init__(self, entity_type: str, reason: str):
        self.entity_type = entity_type
        super().__init__(f"Invalid configuration for {entity_type}: {reason}")


class UnknownEntityTypeError(ControlFlowError):
    """Raised when a blueprint names an entity type that is not registered."""
    def __init__(self, type_name: str):
        self.type_name = type_name
        super().__init__(f"Entity type not registered: {type_name}")


class BlueprintError(ControlFlowError):
    """Raised when a blueprint document cannot be loaded or built."""
    pass


__all__ = [
    "ControlFlowError",
    "ScriptError",
    "EngineNotFound",
    "DuplicateEngineError",
    "BindingResolutionError",
    "ScriptSourceError",
    "ScriptFileNotFound",
    "ScriptIoError",
    "ScriptEvaluationError",
    "InvocationUnsupported",
    "FunctionNotFound",
    "FunctionInvocationError",
    "ConditionTypeMismatch",
    "AggregatedChildFailure",
    "InterruptedWait",
    "EntityConfigurationError",
    "UnknownEntityTypeError",
    "BlueprintError",
]
