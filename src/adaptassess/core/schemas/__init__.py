"""Pydantic schemas for API validation."""

from .assessments import (
    AssessmentActiveUpdate,
    AssessmentCreate,
    AssessmentSchema,
    KnowledgeAreaConfigSchema,
    TargetRoleSchema,
)
from .sessions import (
    AnswerResponse,
    AnswerSubmit,
    CandidateQuestionSchema,
    NextQuestionResponse,
    SessionResultsResponse,
    SessionSchema,
    SessionStart,
    SessionStartResponse,
    SubmitResponse,
)

__all__ = [
    # Assessments
    "AssessmentCreate",
    "AssessmentActiveUpdate",
    "AssessmentSchema",
    "KnowledgeAreaConfigSchema",
    "TargetRoleSchema",
    # Sessions
    "SessionStart",
    "SessionStartResponse",
    "AnswerSubmit",
    "AnswerResponse",
    "CandidateQuestionSchema",
    "NextQuestionResponse",
    "SubmitResponse",
    "SessionSchema",
    "SessionResultsResponse",
]
