"""
In-Memory Stores

Dict-backed stores keyed by (tenant_id, id) for local runs and tests.
Version checks mirror the SQL stores so engine behaviour is identical.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from adaptassess.assessment.types import utcnow
from adaptassess.core.errors import ConcurrentModificationError, NotFoundError, StateConflictError

if TYPE_CHECKING:
    from adaptassess.assessment.types import (
        AIInsight,
        AssessmentConfig,
        CandidateSession,
        PerformanceMetrics,
    )


class InMemorySessionStore:
    def __init__(self) -> None:
        self._sessions: dict[tuple[str, str], CandidateSession] = {}

    async def get(self, tenant_id: str, session_id: str) -> CandidateSession | None:
        return self._sessions.get((tenant_id, session_id))

    async def put(self, tenant_id: str, session: CandidateSession) -> CandidateSession:
        key = (tenant_id, session.session_id)
        if key in self._sessions:
            raise StateConflictError(f"Session {session.session_id} already exists")
        self._sessions[key] = session
        return session

    async def update(
        self,
        tenant_id: str,
        session_id: str,
        fields: dict[str, Any],
        *,
        expected_version: int,
    ) -> CandidateSession:
        key = (tenant_id, session_id)
        current = self._sessions.get(key)
        if current is None:
            raise NotFoundError("Session")
        if current.version != expected_version:
            raise ConcurrentModificationError(f"Session {session_id}", expected_version)

        updated = current.model_copy(update={**fields, "version": expected_version + 1})
        self._sessions[key] = updated
        return updated


class InMemoryAssessmentStore:
    def __init__(self) -> None:
        self._assessments: dict[tuple[str, str], AssessmentConfig] = {}

    async def get(self, tenant_id: str, assessment_id: str) -> AssessmentConfig | None:
        return self._assessments.get((tenant_id, assessment_id))

    async def put(self, assessment: AssessmentConfig) -> AssessmentConfig:
        key = (assessment.tenant_id, assessment.assessment_id)
        if key in self._assessments:
            raise StateConflictError(f"Assessment {assessment.assessment_id} already exists")
        self._assessments[key] = assessment
        return assessment

    async def list(self, tenant_id: str) -> list[AssessmentConfig]:
        return sorted(
            (a for (tenant, _), a in self._assessments.items() if tenant == tenant_id),
            key=lambda a: a.created_at,
            reverse=True,
        )

    async def set_active(
        self, tenant_id: str, assessment_id: str, is_active: bool
    ) -> AssessmentConfig:
        key = (tenant_id, assessment_id)
        current = self._assessments.get(key)
        if current is None:
            raise NotFoundError("Assessment")
        updated = current.model_copy(update={"is_active": is_active, "updated_at": utcnow()})
        self._assessments[key] = updated
        return updated


class InMemoryMetricsStore:
    def __init__(self) -> None:
        self._metrics: dict[tuple[str, str], PerformanceMetrics] = {}
        self._insights: dict[tuple[str, str], AIInsight] = {}

    async def get(self, tenant_id: str, session_id: str) -> PerformanceMetrics | None:
        return self._metrics.get((tenant_id, session_id))

    async def put(self, metrics: PerformanceMetrics) -> None:
        self._metrics[(metrics.tenant_id, metrics.session_id)] = metrics

    async def get_insights(self, tenant_id: str, session_id: str) -> AIInsight | None:
        return self._insights.get((tenant_id, session_id))

    async def put_insights(self, insight: AIInsight) -> None:
        self._insights[(insight.tenant_id, insight.session_id)] = insight
