"""
Tests for the backdoor data-transfer objects.
"""
from datetime import datetime, timezone

from teammates_e2e.backdoor import list_entities
from teammates_e2e.models import (
    CourseAttributes,
    DataBundle,
    InstructorAttributes,
    StudentAttributes,
)


class TestDataBundle:
    """Parsing the camelCase fixture files."""

    def test_sample_bundle_parses_every_section(self, sample_bundle: DataBundle):
        assert sample_bundle.accounts["instructor1"].is_instructor is True
        assert sample_bundle.courses["course1"].time_zone == "Asia/Singapore"
        assert sample_bundle.students["alice"].team == "Team 1"
        assert sample_bundle.profiles["alice"].short_name == "Alice"
        assert sample_bundle.feedback_sessions["session1"].grace_period == 10
        assert sample_bundle.feedback_questions["qn1"].question_number == 1
        assert sample_bundle.feedback_responses["response1"].giver == "alice.b.tmms@gmail.tmt"
        assert sample_bundle.feedback_response_comments["comment1"].comment_text == "Good answer."

    def test_timestamps_are_parsed(self, sample_bundle: DataBundle):
        session = sample_bundle.feedback_sessions["session1"]

        assert session.start_time == datetime(2026, 4, 1, 22, 0, tzinfo=timezone.utc)

    def test_to_wire_uses_camel_case_and_drops_nulls(self, sample_bundle: DataBundle):
        wire = sample_bundle.to_wire()

        assert "feedbackSessions" in wire
        assert wire["students"]["alice"]["googleId"] == "tm.e2e.alice"
        assert "key" not in wire["students"]["alice"]

    def test_list_entities_flattens_all_sections(self, sample_bundle: DataBundle):
        assert len(list_entities(sample_bundle)) == 9


class TestComparable:
    """Volatile fields are excluded from comparisons."""

    def test_registration_key_ignored(self):
        expected = StudentAttributes(email="a@x.tmt", course="C1", name="A")
        actual = StudentAttributes(email="a@x.tmt", course="C1", name="A", key="GENERATED")

        assert expected.comparable() == actual.comparable()

    def test_timestamps_ignored(self):
        expected = CourseAttributes(id="C1", name="Course")
        actual = CourseAttributes(id="C1", name="Course", created_at=datetime.now(timezone.utc))

        assert expected.comparable() == actual.comparable()

    def test_meaningful_fields_compared(self):
        expected = InstructorAttributes(course_id="C1", email="i@x.tmt", name="Old")
        actual = InstructorAttributes(course_id="C1", email="i@x.tmt", name="New")

        assert expected.comparable() != actual.comparable()

    def test_snake_case_input_accepted(self):
        course = CourseAttributes.model_validate({"id": "C1", "time_zone": "UTC"})

        assert course.identity() == "Course[C1]"
