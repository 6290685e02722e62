from .base_e2e_test_case import BaseE2ETestCase
from .base_test_case import BaseTestCaseWithBackDoorAccess

__all__ = ['BaseE2ETestCase', 'BaseTestCaseWithBackDoorAccess']
