"""
AdaptAssess SQLAlchemy Models
"""

from .assessments import AssessmentRecord, CandidateSessionRecord, PerformanceMetricsRecord
from .base import Base, TenantKeyMixin, TimestampMixin

__all__ = [
    # Base
    "Base",
    "TenantKeyMixin",
    "TimestampMixin",
    # Documents
    "AssessmentRecord",
    "CandidateSessionRecord",
    "PerformanceMetricsRecord",
]
