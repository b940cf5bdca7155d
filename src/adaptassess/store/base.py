"""
Store Interfaces

Durable per-tenant persistence consumed by the session engine. Every method is
keyed by tenant; no store scans across tenants.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from adaptassess.assessment.types import (
        AIInsight,
        AssessmentConfig,
        CandidateSession,
        PerformanceMetrics,
    )


class SessionStore(Protocol):
    async def get(self, tenant_id: str, session_id: str) -> CandidateSession | None:
        """Return the session, or None if absent."""
        ...

    async def put(self, tenant_id: str, session: CandidateSession) -> CandidateSession:
        """Insert a new session.

        Raises:
            StateConflictError: If the session id already exists for the tenant
        """
        ...

    async def update(
        self,
        tenant_id: str,
        session_id: str,
        fields: dict[str, Any],
        *,
        expected_version: int,
    ) -> CandidateSession:
        """Apply ``fields`` if the stored version equals ``expected_version``.

        Returns:
            Updated session with ``version`` incremented

        Raises:
            NotFoundError: If the session does not exist
            ConcurrentModificationError: If the stored version differs
        """
        ...


class AssessmentStore(Protocol):
    async def get(self, tenant_id: str, assessment_id: str) -> AssessmentConfig | None: ...

    async def put(self, assessment: AssessmentConfig) -> AssessmentConfig: ...

    async def list(self, tenant_id: str) -> list[AssessmentConfig]: ...

    async def set_active(
        self, tenant_id: str, assessment_id: str, is_active: bool
    ) -> AssessmentConfig:
        """Toggle the only mutable assessment attribute.

        Raises:
            NotFoundError: If the assessment does not exist
        """
        ...


class MetricsStore(Protocol):
    async def get(self, tenant_id: str, session_id: str) -> PerformanceMetrics | None: ...

    async def put(self, metrics: PerformanceMetrics) -> None: ...

    async def get_insights(self, tenant_id: str, session_id: str) -> AIInsight | None: ...

    async def put_insights(self, insight: AIInsight) -> None: ...
