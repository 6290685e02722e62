"""
E2E Harness Test Fixtures
Shared fixtures for all test modules.
"""
import logging
from dataclasses import replace
from pathlib import Path

import pytest

from teammates_e2e.config import Config
from teammates_e2e.models import DataBundle

pytest_plugins = ["pytester"]

DATA_DIR = Path(__file__).parent / "data"

# 128-bit key, hex encoded, shared with the sample server config
TEST_ENCRYPTION_KEY = "000102030405060708090A0B0C0D0E0F"


# ============================================================
# Configuration fixtures
# ============================================================

@pytest.fixture
def e2e_config(tmp_path: Path) -> Config:
    """Config for a deployed (non dev server) app with isolated folders."""
    return Config(
        app_url="https://teammates-e2e.example.com",
        backdoor_key="test-backdoor-key",
        csrf_key="test-csrf-key",
        encryption_key=TEST_ENCRYPTION_KEY,
        test_admin="tm.e2e.admin",
        test_email="tm.e2e.inbox@gmail.com",
        test_sender_email="noreply@teammates-e2e.example.com",
        include_email_verification=True,
        email_credentials_folder=str(tmp_path / "credentials"),
        test_data_folder=str(DATA_DIR),
        test_downloads_folder=str(tmp_path / "downloads"),
        test_timeout=3,
    )


@pytest.fixture
def dev_server_config(e2e_config: Config) -> Config:
    """Same settings, pointed at a local dev server."""
    return replace(e2e_config, app_url="http://localhost:8080")


# ============================================================
# Data fixtures
# ============================================================

@pytest.fixture
def sample_bundle() -> DataBundle:
    """The sample bundle shipped with the tests."""
    return DataBundle.model_validate_json((DATA_DIR / "SampleE2ETest.json").read_text())


# ============================================================
# Logging fixtures
# ============================================================

@pytest.fixture
def harness_logger():
    """The harness logger, restored after the test reconfigures it."""
    harness = logging.getLogger("teammates_e2e")
    saved = (harness.handlers[:], harness.propagate, harness.level)
    yield harness
    harness.handlers, harness.propagate, harness.level = saved
