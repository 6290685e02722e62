"""
E2E Test Harness
================
Browser-driven end-to-end testing of the course feedback web application:
Playwright page objects, backdoor data fixtures, and email verification.
"""

from .app_url import AppUrl, create_url
from .backdoor import BackDoor, get_backdoor
from .cases import BaseE2ETestCase, BaseTestCaseWithBackDoorAccess
from .config import Config, get_config
from .errors import HttpRequestFailedError, IncorrectPageError
from .models import DataBundle

__all__ = [
    'AppUrl',
    'BackDoor',
    'BaseE2ETestCase',
    'BaseTestCaseWithBackDoorAccess',
    'Config',
    'DataBundle',
    'HttpRequestFailedError',
    'IncorrectPageError',
    'create_url',
    'get_backdoor',
    'get_config',
]
