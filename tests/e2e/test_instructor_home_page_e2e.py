"""
Instructor Home Page E2E Test

Runs against a live deployment; enable with E2E_RUN_LIVE=true and the
E2E_* settings for the target server.
"""

import os

import pytest

from teammates_e2e.cases import BaseE2ETestCase
from teammates_e2e.const import WebPageURIs
from teammates_e2e.pageobjects import AppPage

RUN_LIVE = os.environ.get("E2E_RUN_LIVE", "false").lower() == "true"

pytestmark = [
    pytest.mark.e2e,
    pytest.mark.skipif(not RUN_LIVE, reason="live E2E runs disabled (set E2E_RUN_LIVE=true)"),
]


class InstructorHomePage(AppPage):
    """Landing page for a logged-in instructor."""

    def is_correct_page(self) -> bool:
        return self.is_element_present("#instructor-home-page, tm-instructor-home-page")

    def has_course(self, course_id: str) -> bool:
        return self.page.get_by_text(course_id).count() > 0


class TestInstructorHomePageE2E(BaseE2ETestCase):
    """Instructor sees their courses after logging in."""

    @classmethod
    def prepare_test_data(cls):
        cls.test_data = cls.load_data_bundle("/SampleE2ETest.json")
        cls.remove_and_restore_data_bundle(cls.test_data)

    def test_all(self):
        instructor = self.test_data.instructors["instructor1"]
        course = self.test_data.courses["course1"]

        url = self.create_url(WebPageURIs.INSTRUCTOR_HOME_PAGE).with_user_id(instructor.google_id)
        home_page = self.login_to_page(url, InstructorHomePage, instructor.google_id)

        assert home_page.has_course(course.id)
        self.verify_present_in_datastore(course)

        self.logout()
