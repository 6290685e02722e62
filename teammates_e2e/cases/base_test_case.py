"""
Base class for tests that reach application data through the backdoor.

Subclasses supply how bundles are persisted and how a single entity is
fetched; this class adds fixture loading, retries, and datastore verification.
"""

import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Callable, Optional

import pytest

from ..backdoor import list_entities
from ..file_helper import read_file, wait_for
from ..models import DataBundle, EntityAttributes, StudentProfileAttributes

logger = logging.getLogger(__name__)


class BaseTestCaseWithBackDoorAccess(ABC):
    """Data-fixture lifecycle and datastore assertions shared by backdoor-driven tests."""

    OPERATION_RETRY_COUNT = 5
    OPERATION_RETRY_DELAY_MS = 1000
    VERIFICATION_RETRY_COUNT = 5
    VERIFICATION_RETRY_DELAY_MS = 1000

    @classmethod
    @abstractmethod
    def get_test_data_folder(cls) -> str:
        """Folder holding the JSON data bundles for this kind of test."""

    @classmethod
    def load_data_bundle(cls, file_name: str) -> DataBundle:
        path = Path(cls.get_test_data_folder()) / file_name.lstrip("/")
        return DataBundle.model_validate_json(read_file(path))

    # =========================================================================
    # BUNDLE OPERATIONS
    # =========================================================================

    @classmethod
    @abstractmethod
    def do_remove_and_restore_data_bundle(cls, test_data: DataBundle) -> bool:
        """Single attempt; True on success."""

    @classmethod
    @abstractmethod
    def do_put_documents(cls, test_data: DataBundle) -> bool:
        """Single attempt; True on success."""

    @classmethod
    def remove_and_restore_data_bundle(cls, test_data: DataBundle) -> None:
        cls._retry_operation("remove_and_restore_data_bundle", lambda: cls.do_remove_and_restore_data_bundle(test_data))

    @classmethod
    def put_documents(cls, test_data: DataBundle) -> None:
        cls._retry_operation("put_documents", lambda: cls.do_put_documents(test_data))

    @classmethod
    def _retry_operation(cls, name: str, operation: Callable[[], bool]) -> None:
        retry_limit = cls.OPERATION_RETRY_COUNT
        is_success = operation()
        while not is_success and retry_limit > 0:
            retry_limit -= 1
            logger.info("Re-trying %s", name, extra={"test_class": cls.__name__})
            wait_for(cls.OPERATION_RETRY_DELAY_MS)
            is_success = operation()
        if not is_success:
            pytest.fail(f"{name} failed after {cls.OPERATION_RETRY_COUNT} retries")

    # =========================================================================
    # DATASTORE VERIFICATION
    # =========================================================================

    @abstractmethod
    def get_entity(self, entity: EntityAttributes) -> Optional[EntityAttributes]:
        """Fetch the persisted counterpart of ``entity``, or None."""

    def verify_present_in_datastore(self, expected: EntityAttributes) -> None:
        retry_limit = self.VERIFICATION_RETRY_COUNT
        actual = self.get_entity(expected)
        while actual is None and retry_limit > 0:
            retry_limit -= 1
            wait_for(self.VERIFICATION_RETRY_DELAY_MS)
            actual = self.get_entity(expected)
        self.verify_equals(expected, actual)

    def verify_absent_in_datastore(self, entity: EntityAttributes) -> None:
        retry_limit = self.VERIFICATION_RETRY_COUNT
        actual = self.get_entity(entity)
        while actual is not None and retry_limit > 0:
            retry_limit -= 1
            wait_for(self.VERIFICATION_RETRY_DELAY_MS)
            actual = self.get_entity(entity)
        assert actual is None, f"{entity.identity()} is still present in the datastore"

    def verify_bundle_present_in_datastore(self, test_data: DataBundle) -> None:
        # Profiles are not readable through the backdoor
        for entity in list_entities(test_data):
            if isinstance(entity, StudentProfileAttributes):
                continue
            self.verify_present_in_datastore(entity)

    @staticmethod
    def verify_equals(expected: EntityAttributes, actual: Optional[EntityAttributes]) -> None:
        assert actual is not None, f"{expected.identity()} not found in the datastore"
        assert type(actual) is type(expected), (
            f"Expected {type(expected).__name__}, got {type(actual).__name__}"
        )
        assert expected.comparable() == actual.comparable(), f"{expected.identity()} differs from the persisted copy"
