# ============================================================================
# SCRIPT ENGINES
# ============================================================================
# EPOCH: 1 - CONTROL FLOW
# STATUS: Core - Language engines for script evaluation
# PURPOSE: Evaluate sources, expressions and functions in one scope
# CREATED: 18 OCT 2026
# ============================================================================
"""
Script Engines

An engine instance is created fresh for every evaluation and owns the
evaluation scope (bindings plus anything the script defines). Engines
are looked up by language identifier in the EngineRegistry.

Shipped engines:
- python (alias py): runs the source as a module; the value of a
  trailing bare expression is the result. Functions defined by the
  script can be invoked.
- jinja2 (alias jinja): a bare expression returns a native value; a
  source with {{ }} / {% %} markers is rendered and the text coerced
  back to a literal where possible. No function invocation.

Invocation support is a class-level flag (supports_invocation) so the
evaluator can check it before asking for a function.
"""

import ast
import builtins
import logging
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, ClassVar, Dict, Optional, Sequence

from jinja2 import BaseLoader, Environment, StrictUndefined, Undefined, UndefinedError

from core.errors import InvocationUnsupported

logger = logging.getLogger(__name__)


# ============================================================================
# ENGINE CONTRACT
# ============================================================================

@dataclass(frozen=True)
class EvaluationAttempt:
    """Outcome of trying to evaluate a source without failing the caller."""
    succeeded: bool
    value: Any = None
    error: Optional[BaseException] = None

    @classmethod
    def ok(cls, value: Any) -> "EvaluationAttempt":
        return cls(succeeded=True, value=value)

    @classmethod
    def failed(cls, error: BaseException) -> "EvaluationAttempt":
        return cls(succeeded=False, error=error)


class ScriptEngine(ABC):
    """
    Base class for language engines.

    Subclasses set ``language`` and implement ``evaluate``. Engines that
    can call functions defined by a script set ``supports_invocation``
    and implement ``has_function`` / ``invoke``.
    """
    language: ClassVar[str] = ""
    supports_invocation: ClassVar[bool] = False

    def __init__(self):
        self.scope: Dict[str, Any] = {}

    def bind(self, name: str, value: Any) -> None:
        """Inject a value into the evaluation scope."""
        self.scope[name] = value

    @abstractmethod
    def evaluate(self, source: str, filename: str = "<script>") -> Any:
        """Evaluate a source in this engine's scope and return its result."""

    def try_evaluate(self, source: str) -> EvaluationAttempt:
        """Evaluate a source, reporting failure instead of raising it."""
        try:
            return EvaluationAttempt.ok(self.evaluate(source, "<argument>"))
        except Exception as e:
            return EvaluationAttempt.failed(e)

    def has_function(self, name: str) -> bool:
        return False

    def invoke(self, name: str, args: Sequence[Any]) -> Any:
        raise InvocationUnsupported(self.language)


# ============================================================================
# PYTHON
# ============================================================================

class PythonScriptEngine(ScriptEngine):
    """
    Runs Python source in a private namespace.

    Example:
        engine = PythonScriptEngine()
        engine.bind("target", entity)
        engine.evaluate("def check(n):\\n    return n > 3\\ncheck(5)")  # True
    """
    language = "python"
    supports_invocation = True

    def __init__(self):
        super().__init__()
        self.scope.update({"__name__": "__script__", "__builtins__": builtins})

    def evaluate(self, source: str, filename: str = "<script>") -> Any:
        tree = ast.parse(source, filename=filename, mode="exec")

        # REPL semantics: a trailing bare expression is the result
        tail = None
        if tree.body and isinstance(tree.body[-1], ast.Expr):
            tail = ast.Expression(body=tree.body.pop().value)

        exec(compile(tree, filename, "exec"), self.scope)
        if tail is None:
            return None
        return eval(compile(tail, filename, "eval"), self.scope)

    def try_evaluate(self, source: str) -> EvaluationAttempt:
        # Arguments are expressions only; statements are never executed
        try:
            code = compile(source, "<argument>", "eval")
        except SyntaxError as e:
            return EvaluationAttempt.failed(e)
        try:
            return EvaluationAttempt.ok(eval(code, self.scope))
        except Exception as e:
            return EvaluationAttempt.failed(e)

    def has_function(self, name: str) -> bool:
        if name.startswith("__"):
            return False
        return callable(self.scope.get(name))

    def invoke(self, name: str, args: Sequence[Any]) -> Any:
        return self.scope[name](*args)


# ============================================================================
# JINJA2
# ============================================================================

_TEMPLATE_PATTERN = re.compile(r"\{\{.*?\}\}|\{%.*?%\}", re.DOTALL)


class Jinja2ScriptEngine(ScriptEngine):
    """
    Jinja2 expressions and templates.

    Unknown names fail (StrictUndefined) rather than rendering empty.
    """
    language = "jinja2"

    def __init__(self):
        super().__init__()
        self._env = Environment(
            loader=BaseLoader(),
            autoescape=False,
            undefined=StrictUndefined,
        )

    def evaluate(self, source: str, filename: str = "<script>") -> Any:
        if _TEMPLATE_PATTERN.search(source):
            rendered = self._env.from_string(source).render(self.scope)
            return _maybe_parse_result(rendered)
        if not source.strip():
            return ""

        expression = self._env.compile_expression(source.strip(), undefined_to_none=False)
        result = expression(**self.scope)
        if isinstance(result, Undefined):
            raise UndefinedError(f"'{source.strip()}' is undefined")
        return result


def _maybe_parse_result(result: str) -> Any:
    """Try to parse rendered text as a Python literal."""
    result = result.strip()
    if not result:
        return result

    if result in ("True", "true"):
        return True
    if result in ("False", "false"):
        return False

    if (result.startswith('[') and result.endswith(']')) or \
       (result.startswith('{') and result.endswith('}')):
        try:
            return ast.literal_eval(result)
        except (ValueError, SyntaxError):
            pass

    try:
        if '.' in result:
            return float(result)
        return int(result)
    except ValueError:
        pass

    return result


__all__ = [
    "EvaluationAttempt",
    "ScriptEngine",
    "PythonScriptEngine",
    "Jinja2ScriptEngine",
]
