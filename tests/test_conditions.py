# ============================================================================
# CONDITIONAL ENTITY TESTS
# ============================================================================
# EPOCH: 1 - CONTROL FLOW
# STATUS: Tests - IfCondition and IfElseCondition
# PURPOSE: Verify branch selection, type checking and failure handling
# CREATED: 18 OCT 2026
# ============================================================================
"""
Conditional Entity Tests

Covers:
1. IfCondition true/false/non-boolean
2. IfElseCondition with four children only ever starts child[0] or child[1]
3. Missing or non-startable branch children
4. stop stops every startable child; restart re-evaluates
5. Jinja2 conditions
6. Branch selection is an abstract hook

Run with:
    pytest tests/test_conditions.py -v
"""

import pytest

from core.contracts import Lifecycle, Sensors
from core.errors import AggregatedChildFailure, ConditionTypeMismatch
from entities import (
    Application,
    BasicEntity,
    ConditionalEntity,
    CountingEntity,
    IfCondition,
    IfElseCondition,
)
from runtime import ManagementContext


# ============================================================================
# FIXTURES
# ============================================================================

@pytest.fixture
def if_with_children():
    """IfCondition factory with two counting children and one basic child."""
    def _make(script, language="python"):
        condition = IfCondition({"language": language, "script": script})
        children = [
            CountingEntity({"name": "a"}, parent=condition),
            BasicEntity({"name": "plain"}, parent=condition),
            CountingEntity({"name": "b"}, parent=condition),
        ]
        return condition, children
    return _make


@pytest.fixture
def if_else_four():
    """IfElseCondition factory with four counting children."""
    def _make(script):
        condition = IfElseCondition({"language": "python", "script": script})
        children = [CountingEntity({"name": f"child-{i}"}, parent=condition) for i in range(4)]
        return condition, children
    return _make


def _start_counts(children):
    return [getattr(c, "start_count", None) for c in children]


# ============================================================================
# IF
# ============================================================================

class TestIfCondition:
    """Test the one-armed conditional."""

    def test_true_starts_every_startable_child(self, if_with_children):
        condition, children = if_with_children("1 < 2")

        condition.start(["loc"])

        assert _start_counts(children) == [1, None, 1]
        assert children[0].last_locations == ("loc",)
        assert condition.state is Lifecycle.RUNNING
        assert condition.sensors.get(Sensors.CONDITION_RESULT) is True

    def test_false_starts_nothing(self, if_with_children):
        condition, children = if_with_children("1 > 2")

        condition.start([])

        assert _start_counts(children) == [0, None, 0]
        assert condition.state is Lifecycle.RUNNING
        assert condition.service_up is True
        assert condition.sensors.get(Sensors.CONDITION_RESULT) is False

    def test_non_boolean_result(self, if_with_children):
        condition, children = if_with_children("1")

        with pytest.raises(ConditionTypeMismatch) as exc_info:
            condition.start([])

        message = str(exc_info.value)
        assert "[1]" in message
        assert "Expected boolean" in message
        assert exc_info.value.result == 1
        assert _start_counts(children) == [0, None, 0]
        assert condition.state is Lifecycle.ON_FIRE

    def test_string_true_is_not_boolean(self, if_with_children):
        condition, _ = if_with_children("'true'")

        with pytest.raises(ConditionTypeMismatch, match=r"\[true\]"):
            condition.start([])

    def test_jinja2_condition(self, if_with_children):
        condition, children = if_with_children("3 in [1, 2, 3]", language="jinja2")

        condition.start([])

        assert _start_counts(children) == [1, None, 1]

    def test_stop_stops_startable_children(self, if_with_children):
        condition, children = if_with_children("False")
        condition.start([])

        condition.stop()

        assert [children[0].stop_count, children[2].stop_count] == [1, 1]
        assert condition.state is Lifecycle.STOPPED


# ============================================================================
# IF / ELSE
# ============================================================================

class TestIfElseCondition:
    """Test the two-armed conditional."""

    def test_true_starts_only_first_child(self, if_else_four):
        condition, children = if_else_four("True")

        condition.start([])

        assert _start_counts(children) == [1, 0, 0, 0]
        assert condition.state is Lifecycle.RUNNING

    def test_false_starts_only_second_child(self, if_else_four):
        condition, children = if_else_four("False")

        condition.start([])

        assert _start_counts(children) == [0, 1, 0, 0]

    def test_non_boolean_starts_nothing(self, if_else_four):
        condition, children = if_else_four("None")

        with pytest.raises(ConditionTypeMismatch, match=r"\[None\]"):
            condition.start([])

        assert _start_counts(children) == [0, 0, 0, 0]
        assert condition.state is Lifecycle.ON_FIRE

    def test_missing_else_child(self):
        condition = IfElseCondition({"language": "python", "script": "False"})
        only = CountingEntity(parent=condition)

        condition.start([])

        assert only.start_count == 0
        assert condition.state is Lifecycle.RUNNING

    def test_non_startable_branch_skipped(self):
        condition = IfElseCondition({"language": "python", "script": "True"})
        BasicEntity(parent=condition)
        second = CountingEntity(parent=condition)

        condition.start([])

        assert second.start_count == 0
        assert condition.state is Lifecycle.RUNNING

    def test_branch_failure_goes_on_fire(self):
        condition = IfElseCondition({"language": "python", "script": "True"})
        CountingEntity({"fail.on.start": [1]}, parent=condition)

        with pytest.raises(AggregatedChildFailure):
            condition.start([])

        assert condition.state is Lifecycle.ON_FIRE

    def test_restart_re_evaluates(self):
        with ManagementContext() as mgmt:
            app = mgmt.manage(Application())
            switch = app.add_child(CountingEntity({"id": "switch", "value": True}))
            condition = app.add_child(IfElseCondition({
                "language": "python",
                "script": "switch.value",
                "bindings": {"switch": "switch"},
            }))
            then_child = CountingEntity(parent=condition)
            else_child = CountingEntity(parent=condition)

            condition.start([])
            switch.value = False
            condition.restart()

        assert then_child.start_count == 1
        assert else_child.start_count == 1
        assert then_child.stop_count == 1
        assert condition.sensors.get(Sensors.CONDITION_RESULT) is False


# ============================================================================
# BASE CLASS
# ============================================================================

class TestConditionalEntity:
    """Test the shared conditional base."""

    def test_branch_selection_required(self):
        with pytest.raises(TypeError, match="select_children"):
            ConditionalEntity({"language": "python", "script": "True"})

    def test_subclass_selects_children(self):
        class LastChildOnTrue(ConditionalEntity):
            def select_children(self, condition):
                return list(self.children[-1:]) if condition else []

        condition = LastChildOnTrue({"language": "python", "script": "1 < 2"})
        skipped = CountingEntity(parent=condition)
        chosen = CountingEntity(parent=condition)

        condition.start([])

        assert (skipped.start_count, chosen.start_count) == (0, 1)
        assert condition.state is Lifecycle.RUNNING
