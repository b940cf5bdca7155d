"""
Integration Tests for SQL Stores

Exercises the SQLAlchemy-backed stores against a real database session:
document round trips, version-checked updates and tenant isolation.
"""

from datetime import UTC, datetime
from unittest.mock import AsyncMock, patch

import pytest
from conftest import TENANT, make_assessment, make_question, make_response

from adaptassess.assessment.types import (
    AIInsight,
    AreaScore,
    CandidateSession,
    KnowledgeArea,
    PerformanceMetrics,
    SessionStatus,
)
from adaptassess.core.errors import ConcurrentModificationError, NotFoundError, StateConflictError
from adaptassess.store import SqlAssessmentStore, SqlMetricsStore, SqlSessionStore

LANG = KnowledgeArea.PROGRAMMING_LANGUAGE
ALGO = KnowledgeArea.ALGORITHMS_DATA_STRUCTURES


@pytest.fixture
def sql_sessions(db_session):
    return SqlSessionStore(db_session)


@pytest.fixture
def sql_assessments(db_session):
    return SqlAssessmentStore(db_session)


@pytest.fixture
def sql_metrics(db_session):
    return SqlMetricsStore(db_session)


def new_session(assessment_id="assessment-1", tenant_id=TENANT):
    return CandidateSession(
        tenant_id=tenant_id,
        assessment_id=assessment_id,
        candidate_email="dev@example.com",
        current_difficulty={LANG: 3, ALGO: 3},
    )


def metrics_for(session_id, tenant_id=TENANT, overall=70.0):
    return PerformanceMetrics(
        session_id=session_id,
        assessment_id="assessment-1",
        tenant_id=tenant_id,
        overall_score=overall,
        role_fit_score=round(overall),
        passed=overall >= 70,
        pass_threshold=70.0,
        knowledge_area_scores={
            LANG: AreaScore(
                score=overall,
                questions_answered=2,
                correct_answers=1,
                avg_difficulty_reached=3.0,
                avg_time_per_question=30.0,
            )
        },
        strengths=(),
        weaknesses=(),
        completed_at=datetime(2026, 3, 1, tzinfo=UTC),
    )


class TestSqlSessionStore:
    async def test_round_trip(self, sql_sessions):
        session = new_session()
        await sql_sessions.put(TENANT, session)

        loaded = await sql_sessions.get(TENANT, session.session_id)

        assert loaded == session
        assert loaded.current_difficulty == {LANG: 3, ALGO: 3}

    async def test_duplicate_put(self, sql_sessions):
        session = new_session()
        await sql_sessions.put(TENANT, session)

        with pytest.raises(StateConflictError):
            await sql_sessions.put(TENANT, session)

    async def test_update_increments_version(self, sql_sessions):
        session = new_session()
        await sql_sessions.put(TENANT, session)
        question = make_question(LANG)
        response = make_response(LANG, True, question_id=question.question_id)

        await sql_sessions.update(
            TENANT, session.session_id, {"current_question": question}, expected_version=0
        )
        updated = await sql_sessions.update(
            TENANT,
            session.session_id,
            {"questions_answered": (response,), "current_question": None},
            expected_version=1,
        )

        loaded = await sql_sessions.get(TENANT, session.session_id)
        assert updated.version == 2
        assert loaded.version == 2
        assert loaded.questions_answered == (response,)
        assert loaded.current_question is None

    async def test_status_update(self, sql_sessions):
        session = new_session()
        await sql_sessions.put(TENANT, session)

        await sql_sessions.update(
            TENANT,
            session.session_id,
            {"status": SessionStatus.COMPLETED, "submitted_at": datetime(2026, 3, 1, tzinfo=UTC)},
            expected_version=0,
        )

        loaded = await sql_sessions.get(TENANT, session.session_id)
        assert loaded.status == SessionStatus.COMPLETED
        assert loaded.submitted_at == datetime(2026, 3, 1, tzinfo=UTC)

    async def test_stale_version(self, sql_sessions):
        session = new_session()
        await sql_sessions.put(TENANT, session)
        await sql_sessions.update(TENANT, session.session_id, {}, expected_version=0)

        with pytest.raises(ConcurrentModificationError):
            await sql_sessions.update(TENANT, session.session_id, {}, expected_version=0)

    async def test_lost_race_is_detected_by_conditional_update(self, sql_sessions):
        session = new_session()
        await sql_sessions.put(TENANT, session)
        stale = await sql_sessions.get(TENANT, session.session_id)
        await sql_sessions.update(TENANT, session.session_id, {}, expected_version=0)

        # Both writers read version 0; the second one's UPDATE matches no row
        with patch.object(sql_sessions, "get", AsyncMock(return_value=stale)):
            with pytest.raises(ConcurrentModificationError):
                await sql_sessions.update(
                    TENANT,
                    session.session_id,
                    {"status": SessionStatus.ABANDONED},
                    expected_version=0,
                )

        loaded = await sql_sessions.get(TENANT, session.session_id)
        assert loaded.version == 1
        assert loaded.status == SessionStatus.IN_PROGRESS

    async def test_update_missing_session(self, sql_sessions):
        with pytest.raises(NotFoundError):
            await sql_sessions.update(TENANT, "missing", {}, expected_version=0)

    async def test_tenant_isolation(self, sql_sessions):
        session = new_session()
        await sql_sessions.put(TENANT, session)

        assert await sql_sessions.get("tenant-other", session.session_id) is None
        with pytest.raises(NotFoundError):
            await sql_sessions.update("tenant-other", session.session_id, {}, expected_version=0)


class TestSqlAssessmentStore:
    async def test_round_trip(self, sql_assessments):
        assessment = make_assessment(duration_minutes=45)
        await sql_assessments.put(assessment)

        loaded = await sql_assessments.get(TENANT, assessment.assessment_id)

        assert loaded == assessment
        assert loaded.areas == [LANG, ALGO]

    async def test_list_is_tenant_scoped(self, sql_assessments):
        first = make_assessment()
        second = make_assessment()
        other = make_assessment(tenant_id="tenant-other")
        for assessment in (first, second, other):
            await sql_assessments.put(assessment)

        listed = await sql_assessments.list(TENANT)

        assert {a.assessment_id for a in listed} == {first.assessment_id, second.assessment_id}

    async def test_set_active(self, sql_assessments):
        assessment = make_assessment()
        await sql_assessments.put(assessment)

        updated = await sql_assessments.set_active(TENANT, assessment.assessment_id, False)

        assert updated.is_active is False
        assert updated.updated_at >= assessment.updated_at
        loaded = await sql_assessments.get(TENANT, assessment.assessment_id)
        assert loaded.is_active is False
        assert loaded.knowledge_area_mix == assessment.knowledge_area_mix

    async def test_set_active_unknown(self, sql_assessments):
        with pytest.raises(NotFoundError):
            await sql_assessments.set_active(TENANT, "missing", True)


class TestSqlMetricsStore:
    async def test_round_trip(self, sql_metrics):
        metrics = metrics_for("session-1")
        await sql_metrics.put(metrics)

        assert await sql_metrics.get(TENANT, "session-1") == metrics
        assert await sql_metrics.get("tenant-other", "session-1") is None

    async def test_put_overwrites(self, sql_metrics):
        await sql_metrics.put(metrics_for("session-1", overall=40.0))
        await sql_metrics.put(metrics_for("session-1", overall=85.0))

        loaded = await sql_metrics.get(TENANT, "session-1")
        assert loaded.overall_score == 85.0

    async def test_lost_insert_race_is_a_conflict(self, sql_metrics, db_session):
        await sql_metrics.put(metrics_for("session-1", overall=40.0))
        db_session.expunge_all()

        # Both writers saw no row; the second INSERT hits the primary key
        with patch.object(sql_metrics, "_record", AsyncMock(return_value=None)):
            with pytest.raises(StateConflictError):
                await sql_metrics.put(metrics_for("session-1", overall=85.0))

        loaded = await sql_metrics.get(TENANT, "session-1")
        assert loaded.overall_score == 40.0

    async def test_insights(self, sql_metrics):
        await sql_metrics.put(metrics_for("session-1"))
        insight = AIInsight(
            session_id="session-1",
            assessment_id="assessment-1",
            tenant_id=TENANT,
            role_fit_assessment="Ready",
            training_recommendations=("Practice system design",),
            role_readiness_score=72,
        )

        assert await sql_metrics.get_insights(TENANT, "session-1") is None
        await sql_metrics.put_insights(insight)

        assert await sql_metrics.get_insights(TENANT, "session-1") == insight

    async def test_insights_require_metrics(self, sql_metrics):
        insight = AIInsight(
            session_id="session-9",
            assessment_id="assessment-1",
            tenant_id=TENANT,
            role_fit_assessment="Ready",
        )

        with pytest.raises(NotFoundError):
            await sql_metrics.put_insights(insight)
