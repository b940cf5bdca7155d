"""
SQL Stores

SQLAlchemy-backed stores over an ``AsyncSession``. Each store commits its own
writes. Session updates are conditional on the stored version so that two
concurrent read-modify-write cycles cannot both succeed.
"""

from __future__ import annotations

import logging
from typing import Any

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from adaptassess.assessment.types import (
    AIInsight,
    AssessmentConfig,
    CandidateSession,
    PerformanceMetrics,
    utcnow,
)
from adaptassess.core.errors import ConcurrentModificationError, NotFoundError, StateConflictError
from adaptassess.core.models import (
    AssessmentRecord,
    CandidateSessionRecord,
    PerformanceMetricsRecord,
)

logger = logging.getLogger(__name__)


class SqlSessionStore:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def _record(self, tenant_id: str, session_id: str) -> CandidateSessionRecord | None:
        result = await self.db.execute(
            select(CandidateSessionRecord).where(
                CandidateSessionRecord.tenant_id == tenant_id,
                CandidateSessionRecord.id == session_id,
            )
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def get(self, tenant_id: str, session_id: str) -> CandidateSession | None:
        record = await self._record(tenant_id, session_id)
        if record is None:
            return None
        return CandidateSession.model_validate({**record.document, "version": record.version})

    async def put(self, tenant_id: str, session: CandidateSession) -> CandidateSession:
        record = CandidateSessionRecord(
            tenant_id=tenant_id,
            id=session.session_id,
            assessment_id=session.assessment_id,
            status=session.status.value,
            version=session.version,
            document=session.model_dump(mode="json"),
        )
        self.db.add(record)
        try:
            await self.db.commit()
        except IntegrityError as e:
            await self.db.rollback()
            raise StateConflictError(f"Session {session.session_id} already exists") from e
        return session

    async def update(
        self,
        tenant_id: str,
        session_id: str,
        fields: dict[str, Any],
        *,
        expected_version: int,
    ) -> CandidateSession:
        current = await self.get(tenant_id, session_id)
        if current is None:
            raise NotFoundError("Session")
        if current.version != expected_version:
            raise ConcurrentModificationError(f"Session {session_id}", expected_version)

        updated = current.model_copy(update={**fields, "version": expected_version + 1})
        result = await self.db.execute(
            update(CandidateSessionRecord)
            .where(
                CandidateSessionRecord.tenant_id == tenant_id,
                CandidateSessionRecord.id == session_id,
                CandidateSessionRecord.version == expected_version,
            )
            .values(
                status=updated.status.value,
                version=updated.version,
                document=updated.model_dump(mode="json"),
                updated_at=utcnow(),
            )
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            await self.db.rollback()
            logger.warning(f"Lost update race on session {session_id} (version {expected_version})")
            raise ConcurrentModificationError(f"Session {session_id}", expected_version)

        await self.db.commit()
        return updated


class SqlAssessmentStore:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def _record(self, tenant_id: str, assessment_id: str) -> AssessmentRecord | None:
        result = await self.db.execute(
            select(AssessmentRecord).where(
                AssessmentRecord.tenant_id == tenant_id,
                AssessmentRecord.id == assessment_id,
            )
        )
        return result.scalar_one_or_none()

    @staticmethod
    def _to_config(record: AssessmentRecord) -> AssessmentConfig:
        return AssessmentConfig.model_validate({**record.document, "is_active": record.is_active})

    async def get(self, tenant_id: str, assessment_id: str) -> AssessmentConfig | None:
        record = await self._record(tenant_id, assessment_id)
        return self._to_config(record) if record else None

    async def put(self, assessment: AssessmentConfig) -> AssessmentConfig:
        self.db.add(
            AssessmentRecord(
                tenant_id=assessment.tenant_id,
                id=assessment.assessment_id,
                title=assessment.title,
                is_active=assessment.is_active,
                document=assessment.model_dump(mode="json"),
            )
        )
        try:
            await self.db.commit()
        except IntegrityError as e:
            await self.db.rollback()
            raise StateConflictError(f"Assessment {assessment.assessment_id} already exists") from e
        return assessment

    async def list(self, tenant_id: str) -> list[AssessmentConfig]:
        result = await self.db.execute(
            select(AssessmentRecord)
            .where(AssessmentRecord.tenant_id == tenant_id)
            .order_by(AssessmentRecord.created_at.desc())
        )
        return [self._to_config(record) for record in result.scalars().all()]

    async def set_active(
        self, tenant_id: str, assessment_id: str, is_active: bool
    ) -> AssessmentConfig:
        record = await self._record(tenant_id, assessment_id)
        if record is None:
            raise NotFoundError("Assessment")

        now = utcnow()
        record.is_active = is_active
        record.document = {
            **record.document,
            "is_active": is_active,
            "updated_at": now.isoformat(),
        }
        await self.db.commit()
        await self.db.refresh(record)
        return self._to_config(record)


class SqlMetricsStore:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def _record(self, tenant_id: str, session_id: str) -> PerformanceMetricsRecord | None:
        result = await self.db.execute(
            select(PerformanceMetricsRecord).where(
                PerformanceMetricsRecord.tenant_id == tenant_id,
                PerformanceMetricsRecord.id == session_id,
            )
        )
        return result.scalar_one_or_none()

    async def get(self, tenant_id: str, session_id: str) -> PerformanceMetrics | None:
        record = await self._record(tenant_id, session_id)
        return PerformanceMetrics.model_validate(record.document) if record else None

    async def put(self, metrics: PerformanceMetrics) -> None:
        record = await self._record(metrics.tenant_id, metrics.session_id)
        document = metrics.model_dump(mode="json")
        if record is None:
            self.db.add(
                PerformanceMetricsRecord(
                    tenant_id=metrics.tenant_id,
                    id=metrics.session_id,
                    assessment_id=metrics.assessment_id,
                    overall_score=metrics.overall_score,
                    role_fit_score=metrics.role_fit_score,
                    passed=metrics.passed,
                    document=document,
                )
            )
        else:
            record.overall_score = metrics.overall_score
            record.role_fit_score = metrics.role_fit_score
            record.passed = metrics.passed
            record.document = document
        try:
            await self.db.commit()
        except IntegrityError as e:
            # Another writer inserted metrics for this session after our read
            await self.db.rollback()
            raise StateConflictError(
                f"Metrics for session {metrics.session_id} already exist"
            ) from e

    async def get_insights(self, tenant_id: str, session_id: str) -> AIInsight | None:
        record = await self._record(tenant_id, session_id)
        if record is None or record.insights is None:
            return None
        return AIInsight.model_validate(record.insights)

    async def put_insights(self, insight: AIInsight) -> None:
        record = await self._record(insight.tenant_id, insight.session_id)
        if record is None:
            raise NotFoundError("Performance metrics")
        record.insights = insight.model_dump(mode="json")
        await self.db.commit()
