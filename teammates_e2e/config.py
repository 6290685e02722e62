"""
Configuration for E2E Tests
============================
Centralized configuration for URLs, credentials, timeouts, and browser settings.

Every value can be overridden through an ``E2E_*`` environment variable.
"""

import logging
import os
import re
from dataclasses import dataclass, fields
from functools import lru_cache
from typing import Mapping, Optional

logger = logging.getLogger(__name__)

ENV_PREFIX = "E2E_"

_DEV_SERVER_PATTERN = re.compile(r"^https?://localhost:[0-9]+(/.*)?$")

_BROWSER_ALIASES = {
    "chrome": "chromium",
    "chromium": "chromium",
    "firefox": "firefox",
    "webkit": "webkit",
}


def _parse_bool(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass
class Config:
    """Test configuration settings"""

    # Application under test
    app_url: str = "http://localhost:8080"
    backdoor_key: str = "samplebackdoorkey"
    csrf_key: str = "samplecsrfkey"

    # Hex-encoded AES key shared with the server, used to forge auth cookies
    encryption_key: str = ""

    # Browser settings
    browser: str = "chromium"
    headless: bool = True
    slow_mo: int = 0  # Slow down operations (ms)
    close_browser_on_failure: bool = False

    # Timeouts (seconds)
    test_timeout: int = 15
    backdoor_timeout: float = 30.0

    # Accounts
    test_admin: str = "app.admin"
    test_email: str = ""
    test_sender_email: str = ""
    include_email_verification: bool = False
    email_credentials_folder: str = ".credentials"

    # Folders
    test_data_folder: str = "tests/data"
    test_downloads_folder: str = "downloads"

    # Logging
    log_level: str = "INFO"
    log_json: bool = False

    def __post_init__(self):
        self.app_url = self.app_url.rstrip("/")
        browser = _BROWSER_ALIASES.get(self.browser.lower())
        if browser is None:
            raise ValueError(f"Unsupported browser: {self.browser}")
        self.browser = browser

    @property
    def is_dev_server(self) -> bool:
        """True when the app under test is a local development server"""
        return bool(_DEV_SERVER_PATTERN.match(self.app_url))

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Config":
        """Build a config from ``E2E_*`` environment variables, falling back to defaults"""
        environ = os.environ if environ is None else environ
        values = {}
        for f in fields(cls):
            raw = environ.get(ENV_PREFIX + f.name.upper())
            if raw is None:
                continue
            if f.type in (bool, "bool"):
                values[f.name] = _parse_bool(raw)
            elif f.type in (int, "int"):
                values[f.name] = int(raw)
            elif f.type in (float, "float"):
                values[f.name] = float(raw)
            else:
                values[f.name] = raw
        config = cls(**values)
        logger.debug("Loaded E2E config for %s (dev server: %s)", config.app_url, config.is_dev_server)
        return config


@lru_cache(maxsize=1)
def get_config() -> Config:
    """Process-wide configuration, read once from the environment"""
    return Config.from_env()
