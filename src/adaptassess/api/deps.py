"""
API Dependencies

Builds stores, providers and services for request handlers. Tests replace
these through ``app.dependency_overrides``.
"""
# ruff: noqa: B008 - FastAPI Depends in function defaults is standard pattern

from functools import lru_cache

from fastapi import Depends, Header
from sqlalchemy.ext.asyncio import AsyncSession

from adaptassess.ai import get_ai_client, get_prompt_library
from adaptassess.assessment import (
    AIQuestionProvider,
    InsightsGenerator,
    QuestionProvider,
    TemplateQuestionProvider,
)
from adaptassess.assessment.service import AssessmentService
from adaptassess.assessment.session import AssessmentSessionEngine
from adaptassess.config import settings
from adaptassess.core.database import get_db
from adaptassess.core.validation import validate_tenant_id
from adaptassess.store import SqlAssessmentStore, SqlMetricsStore, SqlSessionStore
from adaptassess.store.base import AssessmentStore, MetricsStore, SessionStore


async def get_tenant_id(x_tenant_id: str | None = Header(default=None)) -> str:
    """Tenant from the ``X-Tenant-ID`` header (identity is verified upstream)."""
    return validate_tenant_id(x_tenant_id)


# ============================================================================
# Stores
# ============================================================================


async def get_assessment_store(db: AsyncSession = Depends(get_db)) -> AssessmentStore:
    return SqlAssessmentStore(db)


async def get_session_store(db: AsyncSession = Depends(get_db)) -> SessionStore:
    return SqlSessionStore(db)


async def get_metrics_store(db: AsyncSession = Depends(get_db)) -> MetricsStore:
    return SqlMetricsStore(db)


# ============================================================================
# AI collaborators
# ============================================================================


@lru_cache(maxsize=1)
def get_question_provider() -> QuestionProvider:
    """AI provider when a key is configured, else the built-in template bank."""
    if settings.QUESTION_PROVIDER == "template" or not settings.has_ai_provider:
        return TemplateQuestionProvider()

    return AIQuestionProvider(
        get_ai_client(), get_prompt_library(), model=settings.QUESTION_MODEL
    )


def get_insights_generator() -> InsightsGenerator | None:
    if not settings.has_ai_provider:
        return None
    return InsightsGenerator(get_ai_client(), get_prompt_library(), model=settings.INSIGHTS_MODEL)


# ============================================================================
# Services
# ============================================================================


async def get_assessment_service(
    assessments: AssessmentStore = Depends(get_assessment_store),
) -> AssessmentService:
    return AssessmentService(assessments, default_max_questions=settings.DEFAULT_MAX_QUESTIONS)


async def get_session_engine(
    sessions: SessionStore = Depends(get_session_store),
    assessments: AssessmentStore = Depends(get_assessment_store),
    metrics: MetricsStore = Depends(get_metrics_store),
    provider: QuestionProvider = Depends(get_question_provider),
    insights: InsightsGenerator | None = Depends(get_insights_generator),
) -> AssessmentSessionEngine:
    return AssessmentSessionEngine(
        sessions,
        assessments,
        metrics,
        provider,
        adaptive_config=settings.adaptive_config,
        scoring_config=settings.scoring_config,
        insights=insights,
        recent_window=settings.RECENT_PERFORMANCE_WINDOW,
    )
