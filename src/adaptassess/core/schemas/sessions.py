"""
Session Pydantic Schemas

Request/response models for candidate session endpoints.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from adaptassess.assessment.types import (
    AIInsight,
    KnowledgeArea,
    PerformanceMetrics,
    QuestionResponse,
    QuestionType,
    SessionStatus,
)


# Request schemas
class SessionStart(BaseModel):
    """Request schema for starting a candidate session."""

    assessment_id: str
    candidate_email: str | None = None
    candidate_name: str | None = None


class AnswerSubmit(BaseModel):
    """Request schema for answering the held question."""

    question_id: str
    answer: str | list[str]
    time_spent_seconds: float = Field(ge=0)


# Response schemas
class SessionStartResponse(BaseModel):
    session_id: str
    assessment_id: str
    started_at: datetime


class CandidateQuestionSchema(BaseModel):
    """Question as shown to the candidate (no answer key)."""

    question_id: str
    knowledge_area: KnowledgeArea
    question_text: str
    question_type: QuestionType
    difficulty: int
    options: list[str] | None = None


class NextQuestionResponse(BaseModel):
    session_id: str
    question: CandidateQuestionSchema
    questions_answered: int
    max_questions: int
    duration_minutes: int | None = None
    started_at: datetime


class AnswerResponse(BaseModel):
    is_correct: bool
    explanation: str
    next_question_available: bool
    questions_answered: int
    max_questions: int


class SubmitResponse(BaseModel):
    session_id: str
    status: SessionStatus
    overall_score: float
    role_fit_score: int
    passed: bool
    insights_available: bool


class SessionSchema(BaseModel):
    """Candidate session response schema (held question and version omitted)."""

    model_config = ConfigDict(from_attributes=True)

    session_id: str
    tenant_id: str
    assessment_id: str
    candidate_email: str | None = None
    candidate_name: str | None = None
    status: SessionStatus
    current_difficulty: dict[KnowledgeArea, int]
    questions_answered: list[QuestionResponse]
    started_at: datetime
    submitted_at: datetime | None = None


class SessionResultsResponse(BaseModel):
    session: SessionSchema
    metrics: PerformanceMetrics | None = None
    insights: AIInsight | None = None

    @classmethod
    def from_results(cls, results: Any) -> "SessionResultsResponse":
        return cls(
            session=SessionSchema.model_validate(results.session.model_dump()),
            metrics=results.metrics,
            insights=results.insights,
        )
