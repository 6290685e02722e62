"""
Backdoor REST client.

Lets tests read and write application data directly, bypassing the UI.
Every request is authenticated with the backdoor and CSRF keys from the
config. Transport errors are retried with exponential backoff; HTTP error
statuses are not retried.
"""

import logging
from dataclasses import astuple
from typing import Any, Callable, Dict, List, Optional, Tuple, Type, TypeVar

import httpx

from .config import Config, get_config
from .const import EntityType, HeaderNames, ParamsNames, ResourceURIs
from .errors import HttpRequestFailedError
from .file_helper import wait_for
from .models import (
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

logger = logging.getLogger(__name__)

E = TypeVar("E", bound=EntityAttributes)


class BackDoor:
    """
    HTTP client for the backdoor API.

    Features:
    - Backdoor/CSRF key headers on every request
    - Automatic retry with exponential backoff on transport errors
    - Getters return None when the entity does not exist
    """

    def __init__(
        self,
        config: Optional[Config] = None,
        max_retries: int = 3,
        retry_delay: float = 0.5,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.config = config or get_config()
        self.max_retries = max_retries
        self.retry_delay = retry_delay
        self._transport = transport
        self._client: Optional[httpx.Client] = None

    def _get_client(self) -> httpx.Client:
        """Get or create HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.Client(
                base_url=self.config.app_url,
                timeout=self.config.backdoor_timeout,
                headers={
                    HeaderNames.BACKDOOR_KEY: self.config.backdoor_key,
                    HeaderNames.CSRF_KEY: self.config.csrf_key,
                },
                transport=self._transport,
            )
        return self._client

    def request(self, method: str, path: str, **kwargs) -> httpx.Response:
        """
        Make HTTP request, retrying transport failures.

        Args:
            method: HTTP method (GET, POST, etc.)
            path: Request path under the app URL
            **kwargs: Additional arguments for httpx

        Returns:
            httpx.Response, whatever its status code

        Raises:
            httpx.TransportError: If every attempt failed to reach the server
        """
        client = self._get_client()
        last_error: Optional[Exception] = None

        for attempt in range(self.max_retries):
            try:
                response = client.request(method, path, **kwargs)
                logger.debug("%s %s -> %d", method, path, response.status_code)
                return response
            except httpx.TransportError as e:
                last_error = e
                if attempt < self.max_retries - 1:
                    delay = self.retry_delay * (2**attempt)
                    logger.warning(
                        "Backdoor %s %s failed (attempt %d/%d): %s. Retrying in %.1fs",
                        method,
                        path,
                        attempt + 1,
                        self.max_retries,
                        e,
                        delay,
                    )
                    wait_for(delay * 1000)

        logger.error("Backdoor %s %s failed after %d attempts: %s", method, path, self.max_retries, last_error)
        raise last_error or RuntimeError("Request failed")

    def _execute_or_raise(self, method: str, path: str, **kwargs) -> httpx.Response:
        response = self.request(method, path, **kwargs)
        if not response.is_success:
            raise HttpRequestFailedError(response.status_code, response.text, method, path)
        return response

    def _get_json(self, path: str, params: Dict[str, str]) -> Optional[Any]:
        """GET returning parsed JSON, or None if the entity is absent."""
        response = self.request("GET", path, params=params)
        if response.status_code == httpx.codes.NOT_FOUND:
            return None
        if not response.is_success:
            logger.warning("Backdoor GET %s %s returned HTTP %d", path, params, response.status_code)
            return None
        return response.json()

    def _get_entity(self, model: Type[E], path: str, params: Dict[str, str]) -> Optional[E]:
        data = self._get_json(path, params)
        return None if data is None else model.model_validate(data)

    def _find_in_list(
        self, model: Type[E], path: str, params: Dict[str, str], key: str, predicate: Callable[[E], bool]
    ) -> Optional[E]:
        data = self._get_json(path, params)
        if data is None:
            return None
        for item in data.get(key, []):
            entity = model.model_validate(item)
            if predicate(entity):
                return entity
        return None

    # =========================================================================
    # DATA BUNDLES
    # =========================================================================

    def remove_and_restore_data_bundle(self, data_bundle: DataBundle) -> DataBundle:
        """Replace any existing copies of the bundle's entities with fresh ones.

        Returns the bundle as persisted, with server-assigned ids filled in.
        """
        response = self._execute_or_raise("POST", ResourceURIs.DATABUNDLE, json=data_bundle.to_wire())
        return DataBundle.model_validate(response.json())

    def remove_data_bundle(self, data_bundle: DataBundle) -> None:
        self._execute_or_raise("PUT", ResourceURIs.DATABUNDLE, json=data_bundle.to_wire())

    def put_documents(self, data_bundle: DataBundle) -> None:
        """Index the bundle's entities in the search service."""
        self._execute_or_raise("PUT", ResourceURIs.DATABUNDLE_DOCUMENTS, json=data_bundle.to_wire())

    # =========================================================================
    # GETTERS
    # =========================================================================

    def get_account(self, google_id: str) -> Optional[AccountAttributes]:
        return self._get_entity(AccountAttributes, ResourceURIs.ACCOUNT, {ParamsNames.INSTRUCTOR_ID: google_id})

    def get_course(self, course_id: str) -> Optional[CourseAttributes]:
        return self._get_entity(CourseAttributes, ResourceURIs.COURSE, {ParamsNames.COURSE_ID: course_id})

    def get_archived_course(self, instructor_id: str, course_id: str) -> Optional[CourseAttributes]:
        """The course if ``instructor_id`` has archived it, else None."""
        data = self._get_json(
            ResourceURIs.COURSE,
            {
                ParamsNames.COURSE_ID: course_id,
                ParamsNames.ENTITY_TYPE: EntityType.INSTRUCTOR,
                ParamsNames.USER_ID: instructor_id,
            },
        )
        if data is None or not data.get("isArchived"):
            return None
        return CourseAttributes.model_validate(data)

    def get_feedback_session(self, course_id: str, feedback_session_name: str) -> Optional[FeedbackSessionAttributes]:
        return self._get_entity(
            FeedbackSessionAttributes,
            ResourceURIs.SESSION,
            {ParamsNames.COURSE_ID: course_id, ParamsNames.FEEDBACK_SESSION_NAME: feedback_session_name},
        )

    def get_soft_deleted_session(
        self, feedback_session_name: str, instructor_id: str
    ) -> Optional[FeedbackSessionAttributes]:
        """A session in ``instructor_id``'s recycle bin with the given name, else None."""
        return self._find_in_list(
            FeedbackSessionAttributes,
            ResourceURIs.BIN_SESSIONS,
            {ParamsNames.ENTITY_TYPE: EntityType.INSTRUCTOR, ParamsNames.USER_ID: instructor_id},
            "feedbackSessions",
            lambda s: s.feedback_session_name == feedback_session_name,
        )

    def get_feedback_question(
        self, course_id: str, feedback_session_name: str, question_number: int
    ) -> Optional[FeedbackQuestionAttributes]:
        return self._find_in_list(
            FeedbackQuestionAttributes,
            ResourceURIs.QUESTIONS,
            {ParamsNames.COURSE_ID: course_id, ParamsNames.FEEDBACK_SESSION_NAME: feedback_session_name},
            "questions",
            lambda q: q.question_number == question_number,
        )

    def get_feedback_response(
        self, feedback_question_id: str, giver: str, recipient: str
    ) -> Optional[FeedbackResponseAttributes]:
        return self._find_in_list(
            FeedbackResponseAttributes,
            ResourceURIs.RESPONSES,
            {ParamsNames.FEEDBACK_QUESTION_ID: feedback_question_id},
            "responses",
            lambda r: r.giver == giver and r.recipient == recipient,
        )

    def get_feedback_response_comment(self, feedback_response_id: str) -> Optional[FeedbackResponseCommentAttributes]:
        return self._get_entity(
            FeedbackResponseCommentAttributes,
            ResourceURIs.RESPONSE_COMMENT,
            {ParamsNames.FEEDBACK_RESPONSE_ID: feedback_response_id},
        )

    def get_instructor(self, course_id: str, instructor_email: str) -> Optional[InstructorAttributes]:
        return self._get_entity(
            InstructorAttributes,
            ResourceURIs.INSTRUCTOR,
            {ParamsNames.COURSE_ID: course_id, ParamsNames.INSTRUCTOR_EMAIL: instructor_email},
        )

    def get_student(self, course_id: str, student_email: str) -> Optional[StudentAttributes]:
        return self._get_entity(
            StudentAttributes,
            ResourceURIs.STUDENT,
            {ParamsNames.COURSE_ID: course_id, ParamsNames.STUDENT_EMAIL: student_email},
        )

    # =========================================================================
    # REMOVALS
    # =========================================================================

    def delete_account(self, google_id: str) -> None:
        self._execute_or_raise("DELETE", ResourceURIs.ACCOUNT, params={ParamsNames.INSTRUCTOR_ID: google_id})

    def delete_course(self, course_id: str) -> None:
        self._execute_or_raise("DELETE", ResourceURIs.COURSE, params={ParamsNames.COURSE_ID: course_id})

    def delete_feedback_session(self, course_id: str, feedback_session_name: str) -> None:
        self._execute_or_raise(
            "DELETE",
            ResourceURIs.SESSION,
            params={ParamsNames.COURSE_ID: course_id, ParamsNames.FEEDBACK_SESSION_NAME: feedback_session_name},
        )

    def delete_instructor(self, course_id: str, instructor_email: str) -> None:
        self._execute_or_raise(
            "DELETE",
            ResourceURIs.INSTRUCTOR,
            params={ParamsNames.COURSE_ID: course_id, ParamsNames.INSTRUCTOR_EMAIL: instructor_email},
        )

    def delete_student(self, course_id: str, student_email: str) -> None:
        self._execute_or_raise(
            "DELETE",
            ResourceURIs.STUDENT,
            params={ParamsNames.COURSE_ID: course_id, ParamsNames.STUDENT_EMAIL: student_email},
        )

    def close(self) -> None:
        """Close HTTP client."""
        if self._client and not self._client.is_closed:
            self._client.close()
            self._client = None


_backdoors: Dict[Tuple[Any, ...], BackDoor] = {}


def get_backdoor(config: Optional[Config] = None) -> BackDoor:
    """Shared backdoor client for ``config`` (the environment config by default).

    One client is kept per distinct set of settings, so test classes that
    override their config talk to their own server.
    """
    config = config or get_config()
    key = astuple(config)
    if key not in _backdoors:
        _backdoors[key] = BackDoor(config)
    return _backdoors[key]


def list_entities(bundle: DataBundle) -> List[EntityAttributes]:
    """Every entity in ``bundle``, in insertion order per type."""
    entities: List[EntityAttributes] = []
    for name in type(bundle).model_fields:
        entities.extend(getattr(bundle, name).values())
    return entities
