"""
Data-transfer objects exchanged with the backdoor API.

The server speaks camelCase JSON; models accept either camelCase or
snake_case on input and dump camelCase with ``to_wire()``.
Each model lists its ``VOLATILE_FIELDS``: server-assigned ids, keys and
timestamps that are ignored when comparing expected and actual entities.
"""

from datetime import datetime
from typing import Any, ClassVar, Dict, FrozenSet, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class EntityAttributes(BaseModel):
    """Base for all entities stored by the application."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    VOLATILE_FIELDS: ClassVar[FrozenSet[str]] = frozenset()

    def to_wire(self) -> Dict[str, Any]:
        """JSON-ready dict in the server's camelCase format."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)

    def comparable(self) -> Dict[str, Any]:
        """Field values that must match between an expected and a persisted entity."""
        return self.model_dump(mode="json", exclude=set(self.VOLATILE_FIELDS))

    def identity(self) -> str:
        """Short human-readable identifier used in log and failure messages."""
        return type(self).__name__


class AccountAttributes(EntityAttributes):
    google_id: str
    name: str = ""
    email: str = ""
    institute: str = ""
    is_instructor: bool = False
    created_at: Optional[datetime] = None

    VOLATILE_FIELDS: ClassVar[FrozenSet[str]] = frozenset({"created_at"})

    def identity(self) -> str:
        return f"Account[{self.google_id}]"


class CourseAttributes(EntityAttributes):
    id: str
    name: str = ""
    institute: str = ""
    time_zone: str = "UTC"
    created_at: Optional[datetime] = None
    deleted_at: Optional[datetime] = None

    VOLATILE_FIELDS: ClassVar[FrozenSet[str]] = frozenset({"created_at", "deleted_at"})

    def identity(self) -> str:
        return f"Course[{self.id}]"


class FeedbackSessionAttributes(EntityAttributes):
    feedback_session_name: str
    course_id: str
    creator_email: str = ""
    instructions: str = ""
    time_zone: str = "UTC"
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    session_visible_from_time: Optional[datetime] = None
    results_visible_from_time: Optional[datetime] = None
    grace_period: int = 0
    is_opening_email_enabled: bool = True
    is_closing_email_enabled: bool = True
    is_published_email_enabled: bool = True
    created_time: Optional[datetime] = None
    deleted_time: Optional[datetime] = None

    VOLATILE_FIELDS: ClassVar[FrozenSet[str]] = frozenset({"created_time", "deleted_time"})

    def identity(self) -> str:
        return f"FeedbackSession[{self.course_id}/{self.feedback_session_name}]"


class FeedbackQuestionAttributes(EntityAttributes):
    feedback_question_id: Optional[str] = None
    feedback_session_name: str
    course_id: str
    question_number: int
    question_brief: str = ""
    question_description: str = ""
    question_type: str = "TEXT"
    question_details: Dict[str, Any] = Field(default_factory=dict)
    giver_type: str = ""
    recipient_type: str = ""
    number_of_entities_to_give_feedback_to: int = -100
    show_response_to: List[str] = Field(default_factory=list)
    show_giver_name_to: List[str] = Field(default_factory=list)
    show_recipient_name_to: List[str] = Field(default_factory=list)

    VOLATILE_FIELDS: ClassVar[FrozenSet[str]] = frozenset({"feedback_question_id"})

    def identity(self) -> str:
        return f"FeedbackQuestion[{self.course_id}/{self.feedback_session_name}/Q{self.question_number}]"


class FeedbackResponseAttributes(EntityAttributes):
    feedback_response_id: Optional[str] = None
    feedback_session_name: str = ""
    course_id: str = ""
    feedback_question_id: str
    giver: str
    giver_section: str = "None"
    recipient: str
    recipient_section: str = "None"
    response_details: Dict[str, Any] = Field(default_factory=dict)

    VOLATILE_FIELDS: ClassVar[FrozenSet[str]] = frozenset({"feedback_response_id"})

    def identity(self) -> str:
        return f"FeedbackResponse[{self.feedback_question_id}:{self.giver}->{self.recipient}]"


class FeedbackResponseCommentAttributes(EntityAttributes):
    feedback_response_comment_id: Optional[int] = None
    course_id: str = ""
    feedback_session_name: str = ""
    feedback_question_id: str = ""
    feedback_response_id: str
    comment_giver: str = ""
    comment_text: str = ""
    show_comment_to: List[str] = Field(default_factory=list)
    show_giver_name_to: List[str] = Field(default_factory=list)
    is_visibility_following_feedback_question: bool = True
    comment_from_feedback_participant: bool = False
    created_at: Optional[datetime] = None
    last_edited_at: Optional[datetime] = None

    VOLATILE_FIELDS: ClassVar[FrozenSet[str]] = frozenset(
        {"feedback_response_comment_id", "created_at", "last_edited_at"}
    )

    def identity(self) -> str:
        return f"FeedbackResponseComment[{self.feedback_response_id}]"


class InstructorAttributes(EntityAttributes):
    google_id: Optional[str] = None
    course_id: str
    name: str = ""
    email: str
    role: str = "Co-owner"
    display_name: str = "Instructor"
    is_displayed_to_students: bool = True
    privileges: Dict[str, Any] = Field(default_factory=dict)
    key: Optional[str] = None

    VOLATILE_FIELDS: ClassVar[FrozenSet[str]] = frozenset({"key", "privileges"})

    def identity(self) -> str:
        return f"Instructor[{self.course_id}/{self.email}]"


class StudentAttributes(EntityAttributes):
    google_id: Optional[str] = None
    email: str
    course: str
    name: str = ""
    comments: str = ""
    team: str = ""
    section: str = "None"
    key: Optional[str] = None

    VOLATILE_FIELDS: ClassVar[FrozenSet[str]] = frozenset({"key"})

    def identity(self) -> str:
        return f"Student[{self.course}/{self.email}]"


class StudentProfileAttributes(EntityAttributes):
    google_id: str
    short_name: str = ""
    email: str = ""
    institute: str = ""
    nationality: str = ""
    gender: str = "other"
    more_info: str = ""

    def identity(self) -> str:
        return f"StudentProfile[{self.google_id}]"


class DataBundle(BaseModel):
    """A named set of fixtures persisted together through the backdoor."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    accounts: Dict[str, AccountAttributes] = Field(default_factory=dict)
    courses: Dict[str, CourseAttributes] = Field(default_factory=dict)
    instructors: Dict[str, InstructorAttributes] = Field(default_factory=dict)
    students: Dict[str, StudentAttributes] = Field(default_factory=dict)
    profiles: Dict[str, StudentProfileAttributes] = Field(default_factory=dict)
    feedback_sessions: Dict[str, FeedbackSessionAttributes] = Field(default_factory=dict)
    feedback_questions: Dict[str, FeedbackQuestionAttributes] = Field(default_factory=dict)
    feedback_responses: Dict[str, FeedbackResponseAttributes] = Field(default_factory=dict)
    feedback_response_comments: Dict[str, FeedbackResponseCommentAttributes] = Field(default_factory=dict)

    def to_wire(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
