# ============================================================================
# SCRIPT EVALUATOR TESTS
# ============================================================================
# EPOCH: 1 - CONTROL FLOW
# STATUS: Tests - Shared evaluation algorithm
# PURPOSE: Verify binding, source selection, invocation and error mapping
# CREATED: 18 OCT 2026
# ============================================================================
"""
Script Evaluator Tests

Covers:
1. Inline and file sources (file wins)
2. Binding resolution: entities, None, references, failures, no caching
3. Function invocation and two-step argument resolution
4. Error mapping to the script error taxonomy
5. Fresh engine scope per evaluation

Run with:
    pytest tests/test_script_evaluator.py -v
"""

from unittest.mock import MagicMock

import pytest

from core.errors import (
    BindingResolutionError,
    EngineNotFound,
    FunctionInvocationError,
    FunctionNotFound,
    InvocationUnsupported,
    ScriptEvaluationError,
    ScriptFileNotFound,
)
from core.models import ScriptContext, ScriptSource
from entities import CountingEntity
from orchestrator.engine import ScriptEvaluator


# ============================================================================
# FIXTURES
# ============================================================================

@pytest.fixture
def evaluator():
    """Evaluator without an entity resolver."""
    return ScriptEvaluator()


@pytest.fixture
def make_context():
    """Factory for ScriptContext instances."""
    def _make(script=None, language="python", location=None, invoke=None, args=(), bindings=None):
        return ScriptContext(
            language=language,
            source=ScriptSource.select(script, location),
            invoke=invoke,
            args=tuple(args),
            bindings=bindings or {},
        )
    return _make


ECHO_ARGS = "def echo(*args):\n    return list(args)\n"


# ============================================================================
# SOURCES
# ============================================================================

class TestSourceSelection:
    """Test inline versus file sources."""

    def test_inline_result(self, evaluator, make_context):
        assert evaluator.evaluate(make_context("6 * 7")) == 42

    def test_missing_source_evaluates_empty(self, evaluator, make_context):
        assert evaluator.evaluate(make_context(None)) is None

    def test_file_wins_over_inline(self, evaluator, make_context, tmp_path):
        script = tmp_path / "result.py"
        script.write_text("'from file'", encoding="utf-8")

        context = make_context("'inline'", location=str(script))

        assert evaluator.evaluate(context) == "from file"

    def test_missing_file(self, evaluator, make_context, tmp_path):
        location = str(tmp_path / "absent.py")

        with pytest.raises(ScriptFileNotFound, match="absent.py"):
            evaluator.evaluate(make_context("True", location=location))

    def test_file_reread_each_evaluation(self, evaluator, make_context, tmp_path):
        script = tmp_path / "value.py"
        script.write_text("1", encoding="utf-8")
        context = make_context(location=str(script))

        first = evaluator.evaluate(context)
        script.write_text("2", encoding="utf-8")

        assert (first, evaluator.evaluate(context)) == (1, 2)


# ============================================================================
# BINDINGS
# ============================================================================

class TestBindings:
    """Test binding resolution."""

    def test_entity_bound_directly(self, make_context):
        resolver = MagicMock()
        target = CountingEntity({"value": 5})
        evaluator = ScriptEvaluator(resolver=resolver)

        result = evaluator.evaluate(make_context("target.value + 1", bindings={"target": target}))

        assert result == 6
        resolver.assert_not_called()

    def test_none_bound_as_none(self, evaluator, make_context):
        assert evaluator.evaluate(make_context("nothing is None", bindings={"nothing": None})) is True

    def test_reference_resolved_through_resolver(self, make_context):
        target = CountingEntity({"id": "db", "value": "up"})
        resolver = MagicMock(return_value=target)
        evaluator = ScriptEvaluator(resolver=resolver)

        result = evaluator.evaluate(make_context("db.value", bindings={"db": "db"}))

        assert result == "up"
        resolver.assert_called_once_with("db")

    def test_non_string_reference_stringified(self, make_context):
        resolver = MagicMock(return_value=CountingEntity())
        evaluator = ScriptEvaluator(resolver=resolver)

        evaluator.evaluate(make_context("1", bindings={"node": 17}))

        resolver.assert_called_once_with("17")

    def test_lookup_failure_wrapped(self, make_context):
        resolver = MagicMock(side_effect=KeyError("No entity found with id [db]"))
        evaluator = ScriptEvaluator(resolver=resolver)

        with pytest.raises(BindingResolutionError) as exc_info:
            evaluator.evaluate(make_context("db", bindings={"db": "db"}))

        assert exc_info.value.binding == "db"
        assert isinstance(exc_info.value.__cause__, KeyError)

    def test_timeout_wrapped(self, make_context):
        evaluator = ScriptEvaluator(resolver=MagicMock(side_effect=TimeoutError("too slow")))

        with pytest.raises(BindingResolutionError, match="too slow"):
            evaluator.evaluate(make_context("db", bindings={"db": "db"}))

    def test_no_resolver(self, evaluator, make_context):
        with pytest.raises(BindingResolutionError, match="no entity resolver"):
            evaluator.evaluate(make_context("db", bindings={"db": "db"}))

    def test_no_caching_between_evaluations(self, make_context):
        resolver = MagicMock(return_value=CountingEntity())
        evaluator = ScriptEvaluator(resolver=resolver)
        context = make_context("1", bindings={"db": "db"})

        evaluator.evaluate(context)
        evaluator.evaluate(context)

        assert resolver.call_count == 2


# ============================================================================
# INVOCATION
# ============================================================================

class TestInvocation:
    """Test function invocation."""

    def test_invocation_result_is_final(self, evaluator, make_context):
        context = make_context(ECHO_ARGS + "'ignored'", invoke="echo", args=["1", "2"])

        assert evaluator.evaluate(context) == [1, 2]

    def test_expression_argument_evaluated(self, evaluator, make_context):
        context = make_context(ECHO_ARGS, invoke="echo", args=["(10 - 1)"])

        assert evaluator.evaluate(context) == [9]

    def test_unresolvable_argument_passed_raw(self, evaluator, make_context):
        context = make_context(ECHO_ARGS, invoke="echo", args=["ONE"])

        assert evaluator.evaluate(context) == ["ONE"]

    def test_arguments_see_script_scope(self, evaluator, make_context):
        context = make_context(ECHO_ARGS + "ONE = 1\n", invoke="echo", args=["ONE", "ONE + 1"])

        assert evaluator.evaluate(context) == [1, 2]

    def test_arguments_see_bindings(self, evaluator, make_context):
        target = CountingEntity({"value": 3})
        context = make_context(
            ECHO_ARGS, invoke="echo", args=["target.value"], bindings={"target": target}
        )

        assert evaluator.evaluate(context) == [3]

    def test_engine_without_invocation(self, evaluator, make_context):
        context = make_context("1", language="jinja2", invoke="anything")

        with pytest.raises(InvocationUnsupported, match=r"\[jinja2\]"):
            evaluator.evaluate(context)

    def test_missing_function(self, evaluator, make_context):
        with pytest.raises(FunctionNotFound) as exc_info:
            evaluator.evaluate(make_context("x = 1", invoke="check"))

        assert exc_info.value.function_name == "check"

    def test_function_raising_wrapped(self, evaluator, make_context):
        script = "def check():\n    raise ValueError('bad input')\n"

        with pytest.raises(FunctionInvocationError, match="bad input") as exc_info:
            evaluator.evaluate(make_context(script, invoke="check"))

        assert isinstance(exc_info.value.__cause__, ValueError)


# ============================================================================
# ERRORS
# ============================================================================

class TestEvaluationErrors:
    """Test error mapping."""

    def test_unknown_language(self, evaluator, make_context):
        with pytest.raises(EngineNotFound, match=r"\[cobol\]"):
            evaluator.evaluate(make_context("1", language="cobol"))

    def test_runtime_error_wrapped(self, evaluator, make_context):
        with pytest.raises(ScriptEvaluationError) as exc_info:
            evaluator.evaluate(make_context("1 / 0"))

        assert isinstance(exc_info.value.__cause__, ZeroDivisionError)
        assert exc_info.value.language == "python"

    def test_syntax_error_wrapped(self, evaluator, make_context):
        with pytest.raises(ScriptEvaluationError):
            evaluator.evaluate(make_context("def (:"))

    def test_scope_not_shared_between_evaluations(self, evaluator, make_context):
        evaluator.evaluate(make_context("leftover = 1"))

        with pytest.raises(ScriptEvaluationError, match="leftover"):
            evaluator.evaluate(make_context("leftover"))
