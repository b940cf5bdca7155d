"""
Platform Errors

Error taxonomy for the assessment platform:
- validation: malformed input, bad assessment configuration
- not found: unknown session, assessment or question
- state conflict: operation not allowed in the session's current state
- upstream failure: question provider failed after its retry
"""

from __future__ import annotations

from typing import Any


class AssessmentPlatformError(Exception):
    """Base class for errors surfaced to API callers."""

    status_code: int = 500
    code: str = "INTERNAL_ERROR"

    def __init__(self, message: str = "An unexpected error occurred"):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict[str, Any]:
        """Error body for API responses."""
        return {"error": {"code": self.code, "message": self.message}}


class ValidationError(AssessmentPlatformError):
    """Raised when input fails validation."""

    status_code = 400
    code = "VALIDATION_ERROR"

    def __init__(self, message: str = "Validation failed"):
        super().__init__(message)


class NotFoundError(AssessmentPlatformError):
    """Raised when a resource does not exist for the tenant."""

    status_code = 404
    code = "NOT_FOUND"

    def __init__(self, resource: str = "Resource"):
        super().__init__(f"{resource} not found")
        self.resource = resource


class StateConflictError(AssessmentPlatformError):
    """Operation conflicts with current state. Callers may re-fetch and decide."""

    status_code = 409
    code = "STATE_CONFLICT"


class SessionNotActiveError(StateConflictError):
    code = "SESSION_NOT_ACTIVE"

    def __init__(self, session_id: str, status: str):
        super().__init__(f"Session {session_id} is {status}, not IN_PROGRESS")
        self.session_id = session_id
        self.status = status


class DuplicateAnswerError(StateConflictError):
    code = "DUPLICATE_ANSWER"

    def __init__(self, question_id: str):
        super().__init__(f"Question {question_id} already answered")
        self.question_id = question_id


class ConcurrentModificationError(StateConflictError):
    code = "CONCURRENT_MODIFICATION"

    def __init__(self, key: str, expected_version: int):
        super().__init__(f"{key} was modified concurrently (expected version {expected_version})")
        self.expected_version = expected_version


class UpstreamError(AssessmentPlatformError):
    """An external collaborator failed."""

    status_code = 502
    code = "UPSTREAM_FAILURE"


class QuestionGenerationError(UpstreamError):
    code = "QUESTION_GENERATION_FAILED"


class ContentFilteredError(UpstreamError):
    """Generated question was rejected by the content filter."""

    code = "CONTENT_FILTERED"
