"""
Assessment and Session Models

Persisted documents for assessments, candidate sessions and performance metrics.
Each row carries a handful of queryable key columns plus the full document
as JSON (the pydantic model dump).
"""

from __future__ import annotations

from typing import Any

from sqlalchemy import Boolean, CheckConstraint, Float, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, JSONDocument, TenantKeyMixin, TimestampMixin


class AssessmentRecord(Base, TenantKeyMixin, TimestampMixin):
    """Assessment definition. Immutable apart from ``is_active``."""

    __tablename__ = "assessments"
    __table_args__ = (Index("idx_assessments_tenant_active", "tenant_id", "is_active"),)

    title: Mapped[str] = mapped_column(String(200), nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    document: Mapped[dict[str, Any]] = mapped_column(
        JSONDocument, nullable=False, comment="AssessmentConfig JSON"
    )


class CandidateSessionRecord(Base, TenantKeyMixin, TimestampMixin):
    """Candidate session document.

    ``version`` is bumped on every write; updates are conditional on it.
    """

    __tablename__ = "candidate_sessions"
    __table_args__ = (
        CheckConstraint(
            "status IN ('IN_PROGRESS', 'COMPLETED', 'ABANDONED')",
            name="check_session_status",
        ),
        Index("idx_sessions_assessment", "tenant_id", "assessment_id"),
        Index("idx_sessions_status", "status"),
    )

    assessment_id: Mapped[str] = mapped_column(String(64), nullable=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="IN_PROGRESS")
    version: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    document: Mapped[dict[str, Any]] = mapped_column(
        JSONDocument, nullable=False, comment="CandidateSession JSON"
    )


class PerformanceMetricsRecord(Base, TenantKeyMixin, TimestampMixin):
    """Scoring output for a completed session (id = session id)."""

    __tablename__ = "performance_metrics"
    __table_args__ = (Index("idx_metrics_assessment", "tenant_id", "assessment_id"),)

    assessment_id: Mapped[str] = mapped_column(String(64), nullable=False)
    overall_score: Mapped[float] = mapped_column(Float, nullable=False)
    role_fit_score: Mapped[int] = mapped_column(Integer, nullable=False)
    passed: Mapped[bool] = mapped_column(Boolean, nullable=False)
    document: Mapped[dict[str, Any]] = mapped_column(
        JSONDocument, nullable=False, comment="PerformanceMetrics JSON"
    )
    insights: Mapped[dict[str, Any] | None] = mapped_column(
        JSONDocument, nullable=True, comment="AIInsight JSON (best-effort)"
    )
