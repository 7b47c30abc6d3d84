# ============================================================================
# FAILURE AGGREGATION TESTS
# ============================================================================
# EPOCH: 1 - CONTROL FLOW
# STATUS: Tests - Child failure collection
# PURPOSE: Verify every child is attempted and failures surface together
# CREATED: 18 OCT 2026
# ============================================================================
"""
Failure Aggregation Tests

Covers:
1. FailureCollector records in order and raises one aggregate
2. Empty collector is a success
3. Interrupts are not collected
4. Owners go ON_FIRE before the aggregate propagates
5. Application start aborts, stop aggregates

Run with:
    pytest tests/test_failures.py -v
"""

import pytest

from core.contracts import Lifecycle
from core.errors import AggregatedChildFailure
from entities import Application, CountingEntity, FailureCollector, IfCondition
from entities.examples import ScriptedFailure


# ============================================================================
# FIXTURES
# ============================================================================

@pytest.fixture
def owner():
    return CountingEntity({"name": "owner"})


def _raise(error):
    raise error


# ============================================================================
# COLLECTOR
# ============================================================================

class TestFailureCollector:
    """Test the collector on its own."""

    def test_empty_collector_is_success(self, owner):
        collector = FailureCollector(owner, "start")

        collector.raise_if_any()

        assert not collector
        assert len(collector) == 0

    def test_successful_action_returns_true(self, owner):
        collector = FailureCollector(owner, "start")
        calls = []

        assert collector.run(owner, calls.append, "x") is True
        assert calls == ["x"]

    def test_failures_kept_in_order(self, owner):
        first = CountingEntity({"name": "first"})
        second = CountingEntity({"name": "second"})
        err_one = ValueError("one")
        err_two = KeyError("two")
        collector = FailureCollector(owner, "stop")

        assert collector.run(first, _raise, err_one) is False
        assert collector.run(second, _raise, err_two) is False

        with pytest.raises(AggregatedChildFailure) as exc_info:
            collector.raise_if_any()

        aggregate = exc_info.value
        assert aggregate.failures == [err_one, err_two]
        assert aggregate.exceptions == (err_one, err_two)
        assert aggregate.child_names == ["first", "second"]
        assert aggregate.__cause__ is err_one
        assert "2 child failure(s) during stop of owner" in str(aggregate)
        assert "first: ValueError: one" in str(aggregate)

    def test_failure_records_operation(self, owner):
        child = CountingEntity()
        collector = FailureCollector(owner, "start")

        collector.record(child, RuntimeError("bad"))

        [failure] = collector.failures
        assert failure.child is child
        assert failure.operation == "start"
        assert str(failure.error) == "bad"

    def test_keyboard_interrupt_not_collected(self, owner):
        collector = FailureCollector(owner, "start")

        with pytest.raises(KeyboardInterrupt):
            collector.run(owner, _raise, KeyboardInterrupt())

        assert len(collector) == 0


# ============================================================================
# OWNERS
# ============================================================================

class TestOwnerAggregation:
    """Test aggregation through real control entities."""

    def test_one_armed_start_attempts_every_child(self):
        condition = IfCondition({"language": "python", "script": "True"})
        failing = CountingEntity({"fail.on.start": [1]}, parent=condition)
        healthy = CountingEntity(parent=condition)

        with pytest.raises(AggregatedChildFailure) as exc_info:
            condition.start([])

        assert failing.start_count == 1
        assert healthy.start_count == 1
        assert healthy.state is Lifecycle.RUNNING
        assert isinstance(exc_info.value.__cause__, ScriptedFailure)
        assert condition.state is Lifecycle.ON_FIRE

    def test_stop_attempts_every_child(self):
        app = Application()
        failing = CountingEntity({"fail.on.stop": [1]}, parent=app)
        healthy = CountingEntity(parent=app)
        app.start([])

        with pytest.raises(AggregatedChildFailure) as exc_info:
            app.stop()

        assert len(exc_info.value.failures) == 1
        assert failing.state is Lifecycle.ON_FIRE
        assert healthy.state is Lifecycle.STOPPED
        assert app.state is Lifecycle.ON_FIRE

    def test_application_start_aborts_on_first_failure(self):
        app = Application()
        CountingEntity({"fail.on.start": [1]}, parent=app)
        never = CountingEntity(parent=app)

        with pytest.raises(ScriptedFailure):
            app.start([])

        assert never.start_count == 0
        assert app.state is Lifecycle.ON_FIRE
