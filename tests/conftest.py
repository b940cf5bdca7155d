"""
Pytest Configuration and Fixtures

Shared test fixtures for unit, integration and API tests.
"""

import os

# Settings are read at import time; point the app at SQLite before importing it
TEST_DATABASE_URL = os.getenv("TEST_DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("DATABASE_URL", TEST_DATABASE_URL)
os.environ.setdefault("QUESTION_PROVIDER", "template")

import pytest  # noqa: E402
from sqlalchemy.ext.asyncio import (  # noqa: E402
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import configure_mappers  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from adaptassess.assessment.questions import TemplateQuestionProvider  # noqa: E402
from adaptassess.assessment.selector import KnowledgeAreaSelector  # noqa: E402
from adaptassess.assessment.session import AssessmentSessionEngine  # noqa: E402
from adaptassess.assessment.types import (  # noqa: E402
    AssessmentConfig,
    KnowledgeArea,
    KnowledgeAreaConfig,
    Question,
    QuestionResponse,
    QuestionType,
    SeniorityLevel,
    TargetRole,
)
from adaptassess.core.models import Base  # noqa: E402
from adaptassess.store import (  # noqa: E402
    InMemoryAssessmentStore,
    InMemoryMetricsStore,
    InMemorySessionStore,
)

# Ensure all mappers are configured
configure_mappers()

TENANT = "tenant-acme"


# ============================================================================
# Database
# ============================================================================


@pytest.fixture
async def async_engine():
    """Create async engine for testing with a fresh schema."""
    if TEST_DATABASE_URL.startswith("sqlite"):
        # One shared connection so the in-memory database survives across sessions
        engine = create_async_engine(
            TEST_DATABASE_URL,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    else:
        engine = create_async_engine(TEST_DATABASE_URL, echo=False)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
async def db_session(async_engine) -> AsyncSession:
    """Create database session for testing."""
    session_maker = async_sessionmaker(async_engine, class_=AsyncSession, expire_on_commit=False)
    async with session_maker() as session:
        yield session


# ============================================================================
# Domain builders
# ============================================================================


def make_assessment(
    mix: dict[KnowledgeArea, float] | None = None,
    *,
    seniority: SeniorityLevel = SeniorityLevel.MID,
    tenant_id: str = TENANT,
    **overrides,
) -> AssessmentConfig:
    """Build an assessment; defaults to a 60/40 language/algorithms mix."""
    mix = mix or {
        KnowledgeArea.PROGRAMMING_LANGUAGE: 60,
        KnowledgeArea.ALGORITHMS_DATA_STRUCTURES: 40,
    }
    return AssessmentConfig(
        tenant_id=tenant_id,
        title="Backend Engineer Screen",
        target_role=TargetRole(name="Backend Engineer", seniority_level=seniority),
        knowledge_area_mix=tuple(
            KnowledgeAreaConfig(area=area, percentage=percentage) for area, percentage in mix.items()
        ),
        **overrides,
    )


def make_response(
    area: KnowledgeArea,
    is_correct: bool,
    *,
    difficulty: int = 3,
    question_id: str | None = None,
    time_spent: float = 30.0,
) -> QuestionResponse:
    return QuestionResponse(
        question_id=question_id or f"q-{area.value}-{os.urandom(4).hex()}",
        knowledge_area=area,
        difficulty=difficulty,
        answer="x",
        is_correct=is_correct,
        time_spent_seconds=time_spent,
    )


def make_question(
    area: KnowledgeArea = KnowledgeArea.PROGRAMMING_LANGUAGE,
    *,
    difficulty: int = 3,
    correct_answer: str | list[str] = "B",
    question_text: str = "Pick B",
) -> Question:
    return Question(
        knowledge_area=area,
        question_text=question_text,
        question_type=QuestionType.MCQ,
        difficulty=difficulty,
        options=("A", "B", "C", "D"),
        correct_answer=correct_answer,
        explanation="B is correct.",
    )


class FixedAnswerProvider:
    """Question provider whose every question has the answer ``"B"``."""

    def __init__(self) -> None:
        self.calls: list[tuple[KnowledgeArea, int, bool]] = []

    async def generate_question(
        self, assessment, area, difficulty, recent_performance=None, *, strict=False
    ) -> Question:
        self.calls.append((area, difficulty, strict))
        return make_question(area, difficulty=difficulty)


# ============================================================================
# Engine fixtures
# ============================================================================


@pytest.fixture
def session_store() -> InMemorySessionStore:
    return InMemorySessionStore()


@pytest.fixture
def assessment_store() -> InMemoryAssessmentStore:
    return InMemoryAssessmentStore()


@pytest.fixture
def metrics_store() -> InMemoryMetricsStore:
    return InMemoryMetricsStore()


@pytest.fixture
def provider() -> FixedAnswerProvider:
    return FixedAnswerProvider()


@pytest.fixture
def template_provider() -> TemplateQuestionProvider:
    return TemplateQuestionProvider()


@pytest.fixture
def engine(session_store, assessment_store, metrics_store, provider) -> AssessmentSessionEngine:
    """Session engine over in-memory stores with a seeded selector."""
    import random

    return AssessmentSessionEngine(
        session_store,
        assessment_store,
        metrics_store,
        provider,
        selector=KnowledgeAreaSelector(random.Random(7)),
    )


@pytest.fixture
async def stored_assessment(assessment_store) -> AssessmentConfig:
    assessment = make_assessment(max_questions=5)
    await assessment_store.put(assessment)
    return assessment
