# ============================================================================
# SCRIPT EVALUATOR
# ============================================================================
# EPOCH: 1 - CONTROL FLOW
# STATUS: Core - Shared script evaluation
# PURPOSE: Bind, evaluate and optionally invoke a script for any entity
# CREATED: 18 OCT 2026
# ============================================================================
"""
Script Evaluator

One evaluation, start to finish:

1. Create a fresh engine for the context's language (EngineNotFound)
2. Bind every configured binding into the engine scope. A binding
   whose value is already an entity is bound as-is, None binds None,
   anything else is a reference resolved through the entity resolver
   (BindingResolutionError)
3. Evaluate the source: the file location if one is set, else the
   inline text (ScriptFileNotFound / ScriptIoError / ScriptEvaluationError)
4. If a function name is configured, check the engine can invoke,
   resolve each argument (see resolve_arguments) and call it
   (InvocationUnsupported / FunctionNotFound / FunctionInvocationError)

The evaluator is stateless apart from its collaborators; the engine and
its scope are dropped when evaluate() returns or raises.
"""

import logging
from typing import Any, Callable, List, Mapping, Optional, Sequence

from core.contracts import EntityRef
from core.errors import (
    BindingResolutionError,
    FunctionInvocationError,
    FunctionNotFound,
    InvocationUnsupported,
    ScriptError,
    ScriptEvaluationError,
)
from core.models.script import ScriptContext
from orchestrator.engine.engines import ScriptEngine
from orchestrator.engine.registry import EngineRegistry, get_registry
from orchestrator.engine.sources import ScriptLoader

logger = logging.getLogger(__name__)

EntityResolver = Callable[[str], Any]


class ScriptEvaluator:
    """
    Evaluates script contexts.

    Args:
        registry: Engine registry (defaults to the process registry)
        resolver: Turns a binding reference into a live entity; None
            makes every reference binding fail
        loader: Reads script locations
    """

    def __init__(
        self,
        registry: Optional[EngineRegistry] = None,
        resolver: Optional[EntityResolver] = None,
        loader: Optional[ScriptLoader] = None,
    ):
        self.registry = registry or get_registry()
        self.resolver = resolver
        self.loader = loader or ScriptLoader()

    def evaluate(self, context: ScriptContext) -> Any:
        """
        Run one evaluation.

        Returns:
            The invoked function's return value when a function is
            configured, otherwise the value of the script itself

        Raises:
            ScriptError: Any of the failures listed in the module docstring
        """
        engine = self.registry.create(context.language)
        self.bind_all(engine, context.bindings)

        result = self._evaluate_source(engine, context)
        if not context.invokes_function:
            logger.debug(f"Script evaluated to {result!r}")
            return result

        return self._invoke(engine, context)

    # ------------------------------------------------------------------
    # Bindings
    # ------------------------------------------------------------------

    def bind_all(self, engine: ScriptEngine, bindings: Mapping[str, Any]) -> None:
        for name, value in bindings.items():
            engine.bind(name, self.resolve_binding(name, value))

    def resolve_binding(self, name: str, value: Any) -> Any:
        """
        Resolve one binding value.

        Raises:
            BindingResolutionError: The reference could not be resolved
        """
        if value is None or isinstance(value, EntityRef):
            return value

        reference = str(value)
        if self.resolver is None:
            raise BindingResolutionError(name, reference, "no entity resolver available")

        try:
            return self.resolver(reference)
        except Exception as e:
            reason = str(e) or type(e).__name__
            logger.warning(f"Binding {name} -> {reference} failed: {reason}")
            raise BindingResolutionError(name, reference, reason) from e

    # ------------------------------------------------------------------
    # Evaluation
    # ------------------------------------------------------------------

    def _evaluate_source(self, engine: ScriptEngine, context: ScriptContext) -> Any:
        source = context.source
        if source.is_file:
            logger.debug(f"About to run script file {source.location}")
            text = self.loader.load(source.location)
            filename = source.location
        else:
            logger.debug("About to run inline script")
            text = source.text or ""
            filename = "<script>"

        try:
            return engine.evaluate(text, filename)
        except ScriptError:
            raise
        except Exception as e:
            logger.error(f"Failure while evaluating {context.language} {source.describe()}: {e}")
            raise ScriptEvaluationError(context.language, str(e)) from e

    def resolve_arguments(self, engine: ScriptEngine, args: Sequence[str]) -> List[Any]:
        """
        Evaluate each raw argument as an expression in the engine scope.

        An argument that evaluates cleanly is passed as its value; one
        that fails is passed as the raw string. "(10 - 1)" becomes 9,
        an undefined name like "ONE" stays "ONE".
        """
        resolved = []
        for raw in args:
            attempt = engine.try_evaluate(raw)
            if attempt.succeeded:
                resolved.append(attempt.value)
            else:
                logger.debug(f"Argument {raw!r} passed as string ({attempt.error})")
                resolved.append(raw)
        return resolved

    def _invoke(self, engine: ScriptEngine, context: ScriptContext) -> Any:
        name = context.invoke
        if not engine.supports_invocation:
            raise InvocationUnsupported(context.language)

        args = self.resolve_arguments(engine, context.args)
        if not engine.has_function(name):
            raise FunctionNotFound(name, context.language)

        logger.debug(f"Invoking {name} with {len(args)} argument(s)")
        try:
            result = engine.invoke(name, args)
        except Exception as e:
            logger.error(f"Error invoking function {name}: {e}")
            raise FunctionInvocationError(name, str(e)) from e

        logger.debug(f"Function {name} returned {result!r}")
        return result


__all__ = ["EntityResolver", "ScriptEvaluator"]
