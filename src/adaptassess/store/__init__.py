"""
Persistence for assessments, candidate sessions and performance metrics.
"""

from .base import AssessmentStore, MetricsStore, SessionStore
from .memory import InMemoryAssessmentStore, InMemoryMetricsStore, InMemorySessionStore
from .sql import SqlAssessmentStore, SqlMetricsStore, SqlSessionStore

__all__ = [
    "AssessmentStore",
    "InMemoryAssessmentStore",
    "InMemoryMetricsStore",
    "InMemorySessionStore",
    "MetricsStore",
    "SessionStore",
    "SqlAssessmentStore",
    "SqlMetricsStore",
    "SqlSessionStore",
]
