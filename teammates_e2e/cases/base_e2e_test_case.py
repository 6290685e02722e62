"""
Base E2E Test Case
==================
Base class for all browser tests.

Tests of this type have no knowledge of the workings of the application and
can only communicate via the UI or via the backdoor to obtain/transmit data.

Lifecycle per test class: ``prepare_test_data`` -> ``prepare_browser`` ->
tests -> ``release_browser``. The browser is kept open after a failure
(for inspection) unless ``close_browser_on_failure`` is set.
"""

import logging
from abc import abstractmethod
from pathlib import Path
from typing import ClassVar, Iterable, List, Optional, Type, TypeVar

import httpx
import pytest

from ..app_url import AppUrl, create_url
from ..backdoor import BackDoor, get_backdoor
from ..config import Config, get_config
from ..const import AUTH_COOKIE_NAME, WebPageURIs
from ..email_account import EmailAccount
from ..errors import HttpRequestFailedError
from ..file_helper import delete_file, read_file, wait_for
from ..models import (
    AccountAttributes,
    CourseAttributes,
    DataBundle,
    EntityAttributes,
    FeedbackQuestionAttributes,
    FeedbackResponseAttributes,
    FeedbackResponseCommentAttributes,
    FeedbackSessionAttributes,
    InstructorAttributes,
    StudentAttributes,
)
from ..pageobjects import AppPage, Browser, DevServerLoginPage, HomePage
from ..security import encrypted_auth_cookie
from .base_test_case import BaseTestCaseWithBackDoorAccess

logger = logging.getLogger(__name__)

P = TypeVar("P", bound=AppPage)

EMAIL_RETRY_COUNT = 5
POLL_INTERVAL_MS = 1000


class BaseE2ETestCase(BaseTestCaseWithBackDoorAccess):
    """
    Base class for browser-driven tests.

    Subclasses implement ``prepare_test_data`` (a classmethod, run once per
    class) and ``test_all``. State shared across a class's tests lives on
    the class, since pytest creates a fresh instance for every test.
    """

    config: ClassVar[Optional[Config]] = None
    test_data: ClassVar[Optional[DataBundle]] = None
    browser: ClassVar[Optional[Browser]] = None
    _failed_tests: ClassVar[List[str]]

    # =========================================================================
    # LIFECYCLE
    # =========================================================================

    @classmethod
    def setup_class(cls) -> None:
        cls._failed_tests = []
        cls.prepare_test_data()
        cls.prepare_browser()

    @classmethod
    def teardown_class(cls) -> None:
        cls.release_browser(not cls.has_failed_tests())

    @classmethod
    @abstractmethod
    def prepare_test_data(cls) -> None:
        """Load and persist the data this class's tests rely on."""

    @abstractmethod
    def test_all(self) -> None:
        """The end-to-end scenario."""

    @classmethod
    def prepare_browser(cls) -> None:
        cls.browser = Browser(cls.get_properties())

    @classmethod
    def release_browser(cls, is_success: bool) -> None:
        if cls.browser is None:
            return
        if is_success or cls.get_properties().close_browser_on_failure:
            cls.browser.close()
        else:
            logger.info("Leaving browser open after failure", extra={"test_class": cls.__name__})

    @classmethod
    def record_test_failure(cls, test_name: str) -> None:
        """Called by the pytest plugin for each failed report of this class."""
        if "_failed_tests" not in cls.__dict__:
            cls._failed_tests = []
        cls._failed_tests.append(test_name)

    @classmethod
    def has_failed_tests(cls) -> bool:
        return bool(cls.__dict__.get("_failed_tests"))

    # =========================================================================
    # CONFIGURATION
    # =========================================================================

    @classmethod
    def get_properties(cls) -> Config:
        return cls.config or get_config()

    @classmethod
    def get_test_data_folder(cls) -> str:
        return cls.get_properties().test_data_folder

    @classmethod
    def get_test_downloads_folder(cls) -> str:
        return cls.get_properties().test_downloads_folder

    @classmethod
    def backdoor(cls) -> BackDoor:
        """Backdoor client for the same server the browser is driven against."""
        return get_backdoor(cls.get_properties())

    @classmethod
    def create_url(cls, relative_url: str) -> AppUrl:
        """``AppUrl`` under the configured app URL. ``relative_url`` must start with "/"."""
        return create_url(relative_url, cls.get_properties())

    # =========================================================================
    # NAVIGATION & LOGIN
    # =========================================================================

    def login_to_page(self, url: AppUrl, page_type: Type[P], user_id: str) -> P:
        """Logs in to a page using the given credentials."""
        config = self.get_properties()

        # Outside the dev server the identity provider blocks automated logins,
        # so the auth cookie is injected directly into the browser session.
        if not config.is_dev_server:
            # Cookies can only be set for the domain currently loaded
            self.browser.go_to_url(config.app_url)
            self.browser.add_cookie(
                AUTH_COOKIE_NAME,
                encrypted_auth_cookie(user_id, config.encryption_key),
                True,
                True,
            )
            return self.get_new_page_instance(url, page_type)

        # Redirects to the dev server login page
        self.browser.go_to_url(url.to_absolute_string())
        login_page = AppPage.get_new_page_instance(self.browser, DevServerLoginPage)
        login_page.login_as_user(user_id)

        return self.get_new_page_instance(url, page_type)

    def login_admin_to_page(self, url: AppUrl, page_type: Type[P]) -> P:
        return self.login_to_page(url, page_type, self.get_properties().test_admin)

    def logout(self) -> None:
        """Equivalent to clicking the 'logout' link in the top menu of the page."""
        self.browser.go_to_url(self.create_url(WebPageURIs.LOGOUT).to_absolute_string())
        AppPage.get_new_page_instance(self.browser, HomePage).wait_for_page_to_load()

    def get_new_page_instance(self, url: AppUrl, page_type: Type[P]) -> P:
        self.browser.go_to_url(url.to_absolute_string())
        return AppPage.get_new_page_instance(self.browser, page_type)

    # =========================================================================
    # DOWNLOADS
    # =========================================================================

    def delete_downloads_file(self, file_name: str) -> None:
        delete_file(Path(self.get_test_downloads_folder()) / file_name)

    def verify_downloaded_file(self, expected_file_name: str, expected_content: Iterable[str]) -> None:
        """Waits for the download to land, then checks it contains every expected string."""
        file_path = Path(self.get_test_downloads_folder()) / expected_file_name
        retry_limit = self.get_properties().test_timeout
        is_present = file_path.exists()
        while not is_present and retry_limit > 0:
            retry_limit -= 1
            wait_for(POLL_INTERVAL_MS)
            is_present = file_path.exists()
        assert is_present, f"Downloaded file {file_path} not found"

        actual_content = read_file(file_path)
        for content in expected_content:
            assert content in actual_content, f"{expected_file_name} does not contain {content!r}"

    # =========================================================================
    # EMAIL
    # =========================================================================

    def verify_email_sent(self, email: str, subject: str) -> None:
        """
        Verifies that an email with ``subject`` reached ``email``'s inbox.

        Only the preset test inbox can be checked, and only against a
        deployed server; on the dev server this is a no-op.
        """
        config = self.get_properties()
        if config.is_dev_server or not config.include_email_verification:
            return
        if email != config.test_email:
            pytest.fail("Email verification is allowed only on preset test email.")

        email_account = EmailAccount(email, config)
        try:
            email_account.get_user_authenticated()
            retry_limit = EMAIL_RETRY_COUNT
            is_present = email_account.is_recent_email_with_subject_present(subject, config.test_sender_email)
            while not is_present and retry_limit > 0:
                retry_limit -= 1
                wait_for(POLL_INTERVAL_MS)
                is_present = email_account.is_recent_email_with_subject_present(subject, config.test_sender_email)
        except Exception as e:
            pytest.fail(f"Failed to verify email sent:{e}")

        assert is_present, f"Email '{subject}' was not delivered to {email}"

    # =========================================================================
    # BACKDOOR DELEGATION
    # =========================================================================

    def get_account(self, google_id: str) -> Optional[AccountAttributes]:
        return self.backdoor().get_account(google_id)

    def get_course(self, course_id: str) -> Optional[CourseAttributes]:
        return self.backdoor().get_course(course_id)

    def get_archived_course(self, instructor_id: str, course_id: str) -> Optional[CourseAttributes]:
        return self.backdoor().get_archived_course(instructor_id, course_id)

    def get_feedback_question(
        self, course_id: str, feedback_session_name: str, question_number: int
    ) -> Optional[FeedbackQuestionAttributes]:
        return self.backdoor().get_feedback_question(course_id, feedback_session_name, question_number)

    def get_feedback_response_comment(self, feedback_response_id: str) -> Optional[FeedbackResponseCommentAttributes]:
        return self.backdoor().get_feedback_response_comment(feedback_response_id)

    def get_feedback_response(
        self, feedback_question_id: str, giver: str, recipient: str
    ) -> Optional[FeedbackResponseAttributes]:
        return self.backdoor().get_feedback_response(feedback_question_id, giver, recipient)

    def get_feedback_session(self, course_id: str, feedback_session_name: str) -> Optional[FeedbackSessionAttributes]:
        return self.backdoor().get_feedback_session(course_id, feedback_session_name)

    def get_soft_deleted_session(
        self, feedback_session_name: str, instructor_id: str
    ) -> Optional[FeedbackSessionAttributes]:
        return self.backdoor().get_soft_deleted_session(feedback_session_name, instructor_id)

    def get_instructor(self, course_id: str, instructor_email: str) -> Optional[InstructorAttributes]:
        return self.backdoor().get_instructor(course_id, instructor_email)

    def get_key_for_instructor(self, course_id: str, instructor_email: str) -> str:
        instructor = self.get_instructor(course_id, instructor_email)
        assert instructor is not None, f"Instructor {instructor_email} not found in {course_id}"
        return instructor.key

    def get_student(self, course_id: str, student_email: str) -> Optional[StudentAttributes]:
        return self.backdoor().get_student(course_id, student_email)

    def get_key_for_student(self, student: StudentAttributes) -> str:
        actual = self.get_student(student.course, student.email)
        assert actual is not None, f"Student {student.email} not found in {student.course}"
        return actual.key

    def get_entity(self, entity: EntityAttributes) -> Optional[EntityAttributes]:
        if isinstance(entity, AccountAttributes):
            return self.get_account(entity.google_id)
        if isinstance(entity, CourseAttributes):
            return self.get_course(entity.id)
        if isinstance(entity, FeedbackSessionAttributes):
            return self.get_feedback_session(entity.course_id, entity.feedback_session_name)
        if isinstance(entity, FeedbackQuestionAttributes):
            return self.get_feedback_question(entity.course_id, entity.feedback_session_name, entity.question_number)
        if isinstance(entity, FeedbackResponseAttributes):
            return self.get_feedback_response(entity.feedback_question_id, entity.giver, entity.recipient)
        if isinstance(entity, FeedbackResponseCommentAttributes):
            return self.get_feedback_response_comment(entity.feedback_response_id)
        if isinstance(entity, InstructorAttributes):
            return self.get_instructor(entity.course_id, entity.email)
        if isinstance(entity, StudentAttributes):
            return self.get_student(entity.course, entity.email)
        raise TypeError(f"{type(entity).__name__} cannot be fetched through the backdoor")

    @classmethod
    def do_remove_and_restore_data_bundle(cls, test_data: DataBundle) -> bool:
        try:
            cls.backdoor().remove_and_restore_data_bundle(test_data)
            return True
        except (HttpRequestFailedError, httpx.TransportError):
            logger.exception("remove_and_restore_data_bundle failed", extra={"test_class": cls.__name__})
            return False

    @classmethod
    def do_put_documents(cls, test_data: DataBundle) -> bool:
        try:
            cls.backdoor().put_documents(test_data)
            return True
        except (HttpRequestFailedError, httpx.TransportError):
            logger.exception("put_documents failed", extra={"test_class": cls.__name__})
            return False
