"""
Assessment Domain Types

Enums, constants, and immutable models shared by the adaptive session engine.
Session documents are persisted as the JSON dump of these models.
"""

from __future__ import annotations

from datetime import UTC, datetime
from enum import Enum
from typing import Any
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field

MIN_DIFFICULTY = 1
MAX_DIFFICULTY = 5


class KnowledgeArea(str, Enum):
    """Skill dimension probed by an assessment."""

    PROGRAMMING_LANGUAGE = "PROGRAMMING_LANGUAGE"
    ALGORITHMS_DATA_STRUCTURES = "ALGORITHMS_DATA_STRUCTURES"
    ANALYTICAL_REASONING = "ANALYTICAL_REASONING"
    QUANTITATIVE_MATH = "QUANTITATIVE_MATH"
    SYSTEM_SCENARIO_DESIGN = "SYSTEM_SCENARIO_DESIGN"
    PSYCHOMETRIC_BEHAVIORAL = "PSYCHOMETRIC_BEHAVIORAL"


class SeniorityLevel(str, Enum):
    JUNIOR = "JUNIOR"
    MID = "MID"
    SENIOR = "SENIOR"
    LEAD = "LEAD"


class QuestionType(str, Enum):
    """Closed set of question formats accepted from a question provider."""

    MCQ = "MCQ"
    CODING = "CODING"
    PROBLEM_SOLVING = "PROBLEM_SOLVING"
    NUMERICAL = "NUMERICAL"
    SCENARIO_BASED = "SCENARIO_BASED"


class SessionStatus(str, Enum):
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"
    ABANDONED = "ABANDONED"

    @property
    def is_terminal(self) -> bool:
        return self is not SessionStatus.IN_PROGRESS


KNOWLEDGE_AREA_DESCRIPTIONS: dict[KnowledgeArea, str] = {
    KnowledgeArea.PROGRAMMING_LANGUAGE: "Language-specific coding & syntax",
    KnowledgeArea.ALGORITHMS_DATA_STRUCTURES: (
        "Algorithms, data structures, problem-solving, implementation, optimization"
    ),
    KnowledgeArea.ANALYTICAL_REASONING: "Pattern recognition, logical thinking",
    KnowledgeArea.QUANTITATIVE_MATH: "Numerical reasoning, calculations",
    KnowledgeArea.SYSTEM_SCENARIO_DESIGN: "Real-world problem solving",
    KnowledgeArea.PSYCHOMETRIC_BEHAVIORAL: "Cognitive ability, decision making",
}

KNOWLEDGE_AREA_QUESTION_TYPES: dict[KnowledgeArea, list[QuestionType]] = {
    KnowledgeArea.PROGRAMMING_LANGUAGE: [QuestionType.MCQ, QuestionType.CODING],
    KnowledgeArea.ALGORITHMS_DATA_STRUCTURES: [QuestionType.PROBLEM_SOLVING, QuestionType.MCQ],
    KnowledgeArea.ANALYTICAL_REASONING: [QuestionType.MCQ, QuestionType.SCENARIO_BASED],
    KnowledgeArea.QUANTITATIVE_MATH: [QuestionType.NUMERICAL, QuestionType.MCQ],
    KnowledgeArea.SYSTEM_SCENARIO_DESIGN: [
        QuestionType.SCENARIO_BASED,
        QuestionType.PROBLEM_SOLVING,
    ],
    KnowledgeArea.PSYCHOMETRIC_BEHAVIORAL: [QuestionType.SCENARIO_BASED, QuestionType.MCQ],
}

DIFFICULTY_DESCRIPTIONS: dict[int, str] = {
    1: "Basic concepts, entry-level knowledge",
    2: "Fundamental understanding, some experience required",
    3: "Intermediate level, solid practical knowledge",
    4: "Advanced concepts, deep expertise needed",
    5: "Expert level, complex problem-solving required",
}

Answer = str | list[str]


def utcnow() -> datetime:
    return datetime.now(UTC)


def new_id() -> str:
    return str(uuid4())


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


# ============================================================================
# Assessment configuration
# ============================================================================


class KnowledgeAreaConfig(_Frozen):
    """One entry of an assessment's knowledge-area mix."""

    area: KnowledgeArea
    percentage: float
    programming_language: str | None = None


class TargetRole(_Frozen):
    name: str
    seniority_level: SeniorityLevel


class AssessmentConfig(_Frozen):
    """Validated, immutable assessment definition (only ``is_active`` may change)."""

    assessment_id: str = Field(default_factory=new_id)
    tenant_id: str
    title: str
    description: str | None = None
    target_role: TargetRole
    knowledge_area_mix: tuple[KnowledgeAreaConfig, ...]
    initial_difficulty: int = 3
    max_questions: int = 10
    duration_minutes: int | None = None
    pass_threshold: float | None = None
    is_active: bool = True
    created_by: str | None = None
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    @property
    def areas(self) -> list[KnowledgeArea]:
        return [config.area for config in self.knowledge_area_mix]

    @property
    def programming_language(self) -> str | None:
        """Language tag attached to the PROGRAMMING_LANGUAGE area, if any."""
        for config in self.knowledge_area_mix:
            if config.area is KnowledgeArea.PROGRAMMING_LANGUAGE:
                return config.programming_language
        return None


# ============================================================================
# Questions and responses
# ============================================================================


class Question(_Frozen):
    """A generated question, including its answer key."""

    question_id: str = Field(default_factory=new_id)
    knowledge_area: KnowledgeArea
    question_text: str
    question_type: QuestionType
    difficulty: int
    options: tuple[str, ...] | None = None
    correct_answer: Answer
    explanation: str = ""
    metadata: dict[str, Any] = Field(default_factory=dict)

    def for_candidate(self) -> dict[str, Any]:
        """Question payload with the answer key removed."""
        return self.model_dump(mode="json", exclude={"correct_answer", "explanation", "metadata"})


class RecentPerformance(_Frozen):
    correct: int
    total: int


class QuestionResponse(_Frozen):
    """Answer log entry. Area and difficulty are those the question was asked at."""

    question_id: str
    knowledge_area: KnowledgeArea
    difficulty: int
    answer: Answer
    is_correct: bool
    time_spent_seconds: float
    answered_at: datetime = Field(default_factory=utcnow)

    # Kept for result viewing
    question_text: str | None = None
    question_type: QuestionType | None = None
    options: tuple[str, ...] | None = None
    correct_answer: Answer | None = None
    explanation: str | None = None


# ============================================================================
# Sessions
# ============================================================================


class CandidateSession(_Frozen):
    """Session document as persisted in the session store.

    ``version`` increments on every accepted write and guards
    read-modify-write cycles against concurrent updates.
    """

    session_id: str = Field(default_factory=new_id)
    tenant_id: str
    assessment_id: str
    candidate_email: str | None = None
    candidate_name: str | None = None
    status: SessionStatus = SessionStatus.IN_PROGRESS
    current_difficulty: dict[KnowledgeArea, int] = Field(default_factory=dict)
    questions_answered: tuple[QuestionResponse, ...] = ()
    current_question: Question | None = None
    started_at: datetime = Field(default_factory=utcnow)
    submitted_at: datetime | None = None
    version: int = 0

    def has_answered(self, question_id: str) -> bool:
        return any(r.question_id == question_id for r in self.questions_answered)


# ============================================================================
# Scoring output
# ============================================================================


class AreaScore(_Frozen):
    score: float
    questions_answered: int
    correct_answers: int
    avg_difficulty_reached: float
    avg_time_per_question: float


class PerformanceMetrics(_Frozen):
    session_id: str
    assessment_id: str
    tenant_id: str
    overall_score: float
    role_fit_score: int
    passed: bool
    pass_threshold: float
    knowledge_area_scores: dict[KnowledgeArea, AreaScore]
    strengths: tuple[KnowledgeArea, ...]
    weaknesses: tuple[KnowledgeArea, ...]
    completed_at: datetime


class AreaInsight(_Frozen):
    area: KnowledgeArea
    explanation: str
    root_cause: str | None = None


class AIInsight(_Frozen):
    session_id: str
    assessment_id: str
    tenant_id: str
    role_fit_assessment: str
    strength_areas: tuple[AreaInsight, ...] = ()
    weak_areas: tuple[AreaInsight, ...] = ()
    training_recommendations: tuple[str, ...] = ()
    role_readiness_score: int = 0
    follow_up_suggestions: tuple[str, ...] = ()
    generated_at: datetime = Field(default_factory=utcnow)
