"""
Tests for the pytest plugin hooks.
"""
import logging
import textwrap
from types import SimpleNamespace
from unittest.mock import MagicMock, patch

import pytest

from teammates_e2e import plugin
from teammates_e2e.cases import BaseE2ETestCase
from teammates_e2e.config import Config


class _TrackedCase(BaseE2ETestCase):
    @classmethod
    def prepare_test_data(cls):
        pass

    def test_all(self):
        pass


def _run_makereport(item, report):
    """Drive the new-style hook wrapper the way pluggy does."""
    hook = plugin.pytest_runtest_makereport(item, call=None)
    next(hook)
    try:
        hook.send(report)
    except StopIteration as stop:
        return stop.value
    raise AssertionError("hook wrapper did not return")


class TestMakeReport:
    """Failures are reported back to the E2E class."""

    def setup_method(self):
        _TrackedCase._failed_tests = []

    def test_failure_recorded_on_class(self):
        item = SimpleNamespace(cls=_TrackedCase, name="test_all", nodeid="x::test_all")
        report = SimpleNamespace(failed=True, when="call")

        assert _run_makereport(item, report) is report
        assert _TrackedCase.has_failed_tests()

    def test_passing_report_not_recorded(self):
        item = SimpleNamespace(cls=_TrackedCase, name="test_all", nodeid="x::test_all")

        _run_makereport(item, SimpleNamespace(failed=False, when="call"))

        assert not _TrackedCase.has_failed_tests()

    def test_other_classes_and_functions_ignored(self):
        report = SimpleNamespace(failed=True, when="call")

        _run_makereport(SimpleNamespace(cls=dict, name="t", nodeid="t"), report)
        _run_makereport(SimpleNamespace(cls=None, name="t", nodeid="t"), report)

        assert not _TrackedCase.has_failed_tests()


class TestConfigure:
    """Marker registration, logging setup and config errors."""

    def test_registers_marker(self, harness_logger):
        config = MagicMock()

        with patch.object(plugin, "get_config", return_value=Config()):
            plugin.pytest_configure(config)

        config.addinivalue_line.assert_called_once()
        assert config.addinivalue_line.call_args.args[0] == "markers"

    def test_plain_logs_left_to_pytest_capture(self, harness_logger):
        with patch.object(plugin, "get_config", return_value=Config(log_level="DEBUG")):
            plugin.pytest_configure(MagicMock())

        assert harness_logger.handlers == []
        assert harness_logger.propagate
        assert harness_logger.level == logging.DEBUG

    def test_json_logs_get_their_own_stream(self, harness_logger):
        with patch.object(plugin, "get_config", return_value=Config(log_json=True)):
            plugin.pytest_configure(MagicMock())

        assert len(harness_logger.handlers) == 1
        assert not harness_logger.propagate

    def test_bad_environment_reported_as_usage_error(self, harness_logger):
        def broken_config():
            return Config.from_env({"E2E_BROWSER": "netscape"})

        with patch.object(plugin, "get_config", broken_config):
            with pytest.raises(pytest.UsageError, match="Unsupported browser: netscape"):
                plugin.pytest_configure(MagicMock())


# ============================================================
# Class teardown, driven through a real pytest session
# ============================================================

SCENARIO_BASE = textwrap.dedent(
    """
    from teammates_e2e.cases import BaseE2ETestCase
    from teammates_e2e.config import Config


    class RecordingBrowser:
        def __init__(self):
            self.closed = False

        def close(self):
            self.closed = True


    class _Scenario(BaseE2ETestCase):
        config = Config()

        @classmethod
        def prepare_test_data(cls):
            pass

        @classmethod
        def prepare_browser(cls):
            cls.browser = RecordingBrowser()
    """
)


def _run_scenarios(pytester, scenarios):
    pytester.makepyfile(SCENARIO_BASE + textwrap.dedent(scenarios))
    return pytester.runpytest("-p", "teammates_e2e")


class TestTeardownInSession:
    """The browser is released according to how the class's tests went."""

    def test_failing_class_keeps_browser_open(self, pytester):
        result = _run_scenarios(
            pytester,
            """

            class TestFailingScenario(_Scenario):
                def test_all(self):
                    assert False, "scenario failed"


            class TestAfterFailingScenario:
                def test_browser_left_open(self):
                    assert TestFailingScenario.browser.closed is False
            """,
        )

        result.assert_outcomes(passed=1, failed=1)

    def test_passing_class_closes_browser(self, pytester):
        result = _run_scenarios(
            pytester,
            """

            class TestPassingScenario(_Scenario):
                def test_all(self):
                    pass

                def test_more(self):
                    pass


            class TestAfterPassingScenario:
                def test_browser_closed(self):
                    assert TestPassingScenario.browser.closed is True
            """,
        )

        result.assert_outcomes(passed=3)

    def test_one_failure_among_passes_keeps_browser_open(self, pytester):
        result = _run_scenarios(
            pytester,
            """

            class TestMixedScenario(_Scenario):
                def test_all(self):
                    pass

                def test_broken_step(self):
                    assert False, "step failed"


            class TestAfterMixedScenario:
                def test_browser_left_open(self):
                    assert TestMixedScenario.browser.closed is False
            """,
        )

        result.assert_outcomes(passed=2, failed=1)

    def test_close_on_failure_setting_closes_browser(self, pytester):
        result = _run_scenarios(
            pytester,
            """

            class TestFailingScenario(_Scenario):
                config = Config(close_browser_on_failure=True)

                def test_all(self):
                    assert False, "scenario failed"


            class TestAfterFailingScenario:
                def test_browser_closed(self):
                    assert TestFailingScenario.browser.closed is True
            """,
        )

        result.assert_outcomes(passed=1, failed=1)
