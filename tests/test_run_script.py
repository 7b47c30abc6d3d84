# ============================================================================
# RUN SCRIPT TESTS
# ============================================================================
# EPOCH: 1 - CONTROL FLOW
# STATUS: Tests - RunScript entity
# PURPOSE: Verify script evaluation through the entity lifecycle
# CREATED: 18 OCT 2026
# ============================================================================
"""
RunScript Tests

Covers:
1. Result published as script.result
2. Unknown language, missing file, file beats script
3. http(s) script locations (httpx mocked)
4. Bindings resolved through the management context, with timeouts
5. Restart re-evaluates; stop is immediate

Run with:
    pytest tests/test_run_script.py -v
"""

import asyncio
from unittest.mock import MagicMock, patch

import pytest

from core.contracts import Lifecycle, Sensors
from core.errors import (
    BindingResolutionError,
    EngineNotFound,
    EntityConfigurationError,
    ScriptFileNotFound,
)
from entities import Application, CountingEntity, RunScript
from runtime import ManagementContext


# ============================================================================
# FIXTURES
# ============================================================================

@pytest.fixture
def mgmt():
    with ManagementContext(lookup_timeout=2.0) as context:
        yield context


class SlowLookup:
    """Lookup that never answers in time."""

    def __init__(self):
        self.cancelled = False

    async def lookup(self, reference):
        try:
            await asyncio.sleep(10)
        except asyncio.CancelledError:
            self.cancelled = True
            raise


# ============================================================================
# EVALUATION
# ============================================================================

class TestRunScript:
    """Test RunScript start/stop."""

    def test_result_published(self):
        entity = RunScript({"language": "python", "script": "sum([1, 2, 3])"})

        entity.start([])

        assert entity.sensors.get(Sensors.SCRIPT_RESULT) == 6
        assert entity.state is Lifecycle.RUNNING
        assert entity.service_up is True

    def test_jinja2_script(self):
        entity = RunScript({"language": "jinja2", "script": "'ab' ~ 'cd'"})

        entity.start([])

        assert entity.sensors.get(Sensors.SCRIPT_RESULT) == "abcd"

    def test_unknown_language(self):
        entity = RunScript({"language": "cobol", "script": "DISPLAY 'HI'"})

        with pytest.raises(EngineNotFound) as exc_info:
            entity.start([])

        assert "cobol" in str(exc_info.value)
        assert entity.state is Lifecycle.ON_FIRE
        assert entity.service_up is False

    def test_missing_file(self, tmp_path):
        location = str(tmp_path / "missing.py")
        entity = RunScript({"language": "python", "file": location})

        with pytest.raises(ScriptFileNotFound) as exc_info:
            entity.start([])

        assert location in str(exc_info.value)
        assert entity.state is Lifecycle.ON_FIRE

    def test_file_beats_script(self, tmp_path):
        script = tmp_path / "result.py"
        script.write_text("'from file'", encoding="utf-8")
        entity = RunScript({"language": "python", "script": "'inline'", "file": str(script)})

        entity.start([])

        assert entity.sensors.get(Sensors.SCRIPT_RESULT) == "from file"

    def test_script_url_key(self, tmp_path):
        script = tmp_path / "result.py"
        script.write_text("7", encoding="utf-8")
        entity = RunScript({"language": "python", "script.url": script.as_uri()})

        entity.start([])

        assert entity.sensors.get(Sensors.SCRIPT_RESULT) == 7

    def test_http_location(self):
        with patch("orchestrator.engine.sources.httpx.Client") as client_cls:
            client = MagicMock()
            client.get.return_value = MagicMock(status_code=200, text="def go(n):\n    return n * 2\n")
            client_cls.return_value.__enter__.return_value = client

            entity = RunScript({
                "language": "python",
                "file": "https://scripts.example.com/go.py",
                "invoke": "go",
                "args": [21],
            })
            entity.start([])

        assert entity.sensors.get(Sensors.SCRIPT_RESULT) == 42

    def test_stop_is_immediate(self):
        entity = RunScript({"language": "python", "script": "1"})
        entity.start([])

        entity.stop()

        assert entity.state is Lifecycle.STOPPED
        assert entity.service_up is False

    def test_language_required(self):
        with pytest.raises(EntityConfigurationError, match="language"):
            RunScript({"script": "1"})


# ============================================================================
# BINDINGS
# ============================================================================

class TestRunScriptBindings:
    """Test binding lookups through the management context."""

    def test_binding_by_plan_id(self, mgmt):
        app = mgmt.manage(Application())
        app.add_child(CountingEntity({"id": "target", "value": 7}))
        script = app.add_child(RunScript({
            "language": "python",
            "script": "target.value * 2",
            "bindings": {"target": "target"},
        }))

        script.start([])

        assert script.sensors.get(Sensors.SCRIPT_RESULT) == 14

    def test_binding_by_runtime_id(self, mgmt):
        app = mgmt.manage(Application())
        target = app.add_child(CountingEntity({"value": "ok"}))
        script = app.add_child(RunScript({
            "language": "python",
            "script": "target.value",
            "bindings": {"target": target.id},
        }))

        script.start([])

        assert script.sensors.get(Sensors.SCRIPT_RESULT) == "ok"

    def test_restart_re_evaluates(self, mgmt):
        app = mgmt.manage(Application())
        target = app.add_child(CountingEntity({"id": "target", "value": 0}))
        script = app.add_child(RunScript({
            "language": "python",
            "script": "target.value = target.value + 1\ntarget.value",
            "bindings": {"target": "target"},
        }))

        script.start([])
        script.restart()

        assert script.sensors.get(Sensors.SCRIPT_RESULT) == 2
        assert target.value == 2

    def test_unknown_reference(self, mgmt):
        app = mgmt.manage(Application())
        script = app.add_child(RunScript({
            "language": "python",
            "script": "db",
            "bindings": {"db": "no-such-entity"},
        }))

        with pytest.raises(BindingResolutionError, match="no-such-entity"):
            script.start([])

        assert script.state is Lifecycle.ON_FIRE

    def test_unmanaged_entity_cannot_resolve(self):
        script = RunScript({"language": "python", "script": "db", "bindings": {"db": "db"}})

        with pytest.raises(BindingResolutionError, match="not managed"):
            script.start([])

    def test_lookup_timeout_cancels(self):
        lookup = SlowLookup()
        with ManagementContext(lookup=lookup, lookup_timeout=0.1) as context:
            script = context.manage(RunScript({
                "language": "python",
                "script": "db",
                "bindings": {"db": "db"},
            }))

            with pytest.raises(BindingResolutionError) as exc_info:
                script.start([])

            assert isinstance(exc_info.value.__cause__, TimeoutError)
            assert script.state is Lifecycle.ON_FIRE
