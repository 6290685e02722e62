"""
pytest plugin for E2E test classes.

Registered through the ``pytest11`` entry point. Reports failures back to
their ``BaseE2ETestCase`` subclass so that class teardown knows whether
to keep the browser open, and configures harness logging.
"""

import logging

import pytest

from .cases.base_e2e_test_case import BaseE2ETestCase
from .config import get_config
from .logging_config import setup_logging

logger = logging.getLogger(__name__)


def pytest_configure(config):
    config.addinivalue_line("markers", "e2e: browser test against a running application")
    try:
        e2e_config = get_config()
    except ValueError as e:
        raise pytest.UsageError(f"Invalid E2E_* environment setting: {e}") from e
    # Plain records go through pytest's own log capture; JSON gets a dedicated stream
    setup_logging(e2e_config.log_level, e2e_config.log_json, stream=e2e_config.log_json)


@pytest.hookimpl(wrapper=True)
def pytest_runtest_makereport(item, call):
    report = yield
    test_class = getattr(item, "cls", None)
    if report.failed and test_class is not None and issubclass(test_class, BaseE2ETestCase):
        test_class.record_test_failure(item.name)
        logger.debug("Recorded %s failure of %s", report.when, item.nodeid)
    return report
