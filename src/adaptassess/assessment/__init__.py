"""
Assessment Module

Adaptive session core: knowledge-area selection, difficulty adjustment,
scoring, grading and question generation.

The session engine (``assessment.session``) and assessment service
(``assessment.service``) depend on ``core.validation`` and are imported
from their modules directly.
"""

from .difficulty import AdaptiveConfig, DifficultyAdjuster
from .grading import grade_answer
from .insights import InsightsGenerator
from .questions import (
    AIQuestionProvider,
    QuestionProvider,
    TemplateQuestionProvider,
    generate_with_retry,
)
from .scoring import ScoringConfig, ScoringEngine
from .selector import KnowledgeAreaSelector

__all__ = [
    "AIQuestionProvider",
    "AdaptiveConfig",
    "DifficultyAdjuster",
    "InsightsGenerator",
    "KnowledgeAreaSelector",
    "QuestionProvider",
    "ScoringConfig",
    "ScoringEngine",
    "TemplateQuestionProvider",
    "generate_with_retry",
    "grade_answer",
]
