"""
Scoring Engine

Converts a completed answer log into weighted overall and role-fit scores,
strength/weakness classification and a pass/fail decision.

Pure and deterministic: the same log and assessment always produce
identical PerformanceMetrics.
"""

from __future__ import annotations

import logging
import math
from collections import defaultdict
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from .types import AreaScore, KnowledgeArea, PerformanceMetrics, SeniorityLevel

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence
    from datetime import datetime

    from .types import AssessmentConfig, KnowledgeAreaConfig, QuestionResponse

logger = logging.getLogger(__name__)


def _default_role_multipliers() -> dict[SeniorityLevel, dict[KnowledgeArea, float]]:
    senior = {
        KnowledgeArea.SYSTEM_SCENARIO_DESIGN: 1.5,
        KnowledgeArea.ALGORITHMS_DATA_STRUCTURES: 1.3,
    }
    junior = {
        KnowledgeArea.PROGRAMMING_LANGUAGE: 1.5,
        KnowledgeArea.ANALYTICAL_REASONING: 1.3,
    }
    return {
        SeniorityLevel.JUNIOR: junior,
        SeniorityLevel.MID: junior,
        SeniorityLevel.SENIOR: senior,
        SeniorityLevel.LEAD: senior,
    }


def _default_pass_thresholds() -> dict[SeniorityLevel, float]:
    return {
        SeniorityLevel.JUNIOR: 50.0,
        SeniorityLevel.MID: 60.0,
        SeniorityLevel.SENIOR: 70.0,
        SeniorityLevel.LEAD: 75.0,
    }


@dataclass(frozen=True)
class ScoringConfig:
    """Tunables for scoring.

    Attributes:
        strength_offset: Points above the mean area score that mark a strength
        weakness_offset: Points below the mean area score that mark a weakness
        role_multipliers: Weight boosts for role-critical areas per seniority tier
        pass_thresholds: Default pass mark per seniority tier
        fallback_pass_threshold: Pass mark when the tier has no default
    """

    strength_offset: float = 10.0
    weakness_offset: float = 15.0
    role_multipliers: Mapping[SeniorityLevel, Mapping[KnowledgeArea, float]] = field(
        default_factory=_default_role_multipliers
    )
    pass_thresholds: Mapping[SeniorityLevel, float] = field(
        default_factory=_default_pass_thresholds
    )
    fallback_pass_threshold: float = 60.0


class ScoringEngine:
    """Produces PerformanceMetrics for a finished session.

    Steps:
    1. Per-area score, average difficulty and average time (answered areas only)
    2. Overall score: percentage-weighted mean over answered areas
    3. Role-fit score: same mean with role-critical areas boosted, rounded
    4. Strengths/weaknesses relative to the mean area score
    5. Pass/fail against the assessment or seniority threshold
    """

    def __init__(self, config: ScoringConfig | None = None):
        self.config = config or ScoringConfig()

    def score(
        self,
        *,
        session_id: str,
        assessment: AssessmentConfig,
        responses: Sequence[QuestionResponse],
        completed_at: datetime,
    ) -> PerformanceMetrics:
        """Score a completed answer log.

        Args:
            session_id: Session being scored
            assessment: Assessment the session was taken against
            responses: Full, ordered answer log
            completed_at: Completion timestamp recorded on the metrics

        Returns:
            PerformanceMetrics (immutable)
        """
        mix = assessment.knowledge_area_mix
        area_scores = self.area_scores(mix, responses)

        overall = self.overall_score(area_scores, mix)
        role_fit = self.role_fit_score(area_scores, mix, assessment.target_role.seniority_level)
        strengths, weaknesses = self.strengths_and_weaknesses(area_scores, mix)
        threshold = self.pass_threshold(assessment)

        breakdown = {area.value: round(s.score, 2) for area, s in area_scores.items()}
        logger.debug(
            f"Scored session {session_id}: overall={overall:.2f} "
            f"role_fit={role_fit} areas={breakdown}"
        )

        return PerformanceMetrics(
            session_id=session_id,
            assessment_id=assessment.assessment_id,
            tenant_id=assessment.tenant_id,
            overall_score=overall,
            role_fit_score=role_fit,
            passed=role_fit >= threshold,
            pass_threshold=threshold,
            knowledge_area_scores=area_scores,
            strengths=tuple(strengths),
            weaknesses=tuple(weaknesses),
            completed_at=completed_at,
        )

    def area_scores(
        self,
        knowledge_area_mix: Sequence[KnowledgeAreaConfig],
        responses: Sequence[QuestionResponse],
    ) -> dict[KnowledgeArea, AreaScore]:
        """Per-area breakdown for configured areas with at least one answer."""
        groups: dict[KnowledgeArea, list[QuestionResponse]] = defaultdict(list)
        for response in responses:
            groups[response.knowledge_area].append(response)

        scores: dict[KnowledgeArea, AreaScore] = {}
        for config in knowledge_area_mix:
            area_responses = groups.get(config.area)
            if not area_responses:
                continue

            answered = len(area_responses)
            correct = sum(1 for r in area_responses if r.is_correct)
            scores[config.area] = AreaScore(
                score=correct / answered * 100,
                questions_answered=answered,
                correct_answers=correct,
                avg_difficulty_reached=sum(r.difficulty for r in area_responses) / answered,
                avg_time_per_question=sum(r.time_spent_seconds for r in area_responses) / answered,
            )
        return scores

    def overall_score(
        self,
        area_scores: Mapping[KnowledgeArea, AreaScore],
        knowledge_area_mix: Sequence[KnowledgeAreaConfig],
    ) -> float:
        """Percentage-weighted mean, normalized over answered areas. Unrounded."""
        weights = {config.area: config.percentage / 100 for config in knowledge_area_mix}
        return self._weighted_mean(area_scores, weights)

    def role_fit_score(
        self,
        area_scores: Mapping[KnowledgeArea, AreaScore],
        knowledge_area_mix: Sequence[KnowledgeAreaConfig],
        seniority: SeniorityLevel,
    ) -> int:
        """Weighted mean with role-critical areas boosted, rounded half up to 0-100."""
        multipliers = self.config.role_multipliers.get(seniority, {})
        weights = {
            config.area: config.percentage / 100 * multipliers.get(config.area, 1.0)
            for config in knowledge_area_mix
        }
        score = self._weighted_mean(area_scores, weights)
        # Half-up: 72.5 scores 73, not the even neighbour
        return math.floor(min(100.0, max(0.0, score)) + 0.5)

    def strengths_and_weaknesses(
        self,
        area_scores: Mapping[KnowledgeArea, AreaScore],
        knowledge_area_mix: Sequence[KnowledgeAreaConfig],
    ) -> tuple[list[KnowledgeArea], list[KnowledgeArea]]:
        """Classify areas against the mean of answered-area scores.

        Returns:
            (strengths, weaknesses), each in configuration order
        """
        if not area_scores:
            return [], []

        mean = sum(s.score for s in area_scores.values()) / len(area_scores)
        strength_threshold = mean + self.config.strength_offset
        weakness_threshold = mean - self.config.weakness_offset

        strengths: list[KnowledgeArea] = []
        weaknesses: list[KnowledgeArea] = []
        for config in knowledge_area_mix:
            area_score = area_scores.get(config.area)
            if area_score is None:
                continue
            if area_score.score >= strength_threshold:
                strengths.append(config.area)
            elif area_score.score <= weakness_threshold:
                weaknesses.append(config.area)
        return strengths, weaknesses

    def pass_threshold(self, assessment: AssessmentConfig) -> float:
        """Assessment-specified pass mark, else the seniority-tier default."""
        if assessment.pass_threshold is not None:
            return assessment.pass_threshold
        return self.config.pass_thresholds.get(
            assessment.target_role.seniority_level, self.config.fallback_pass_threshold
        )

    @staticmethod
    def _weighted_mean(
        area_scores: Mapping[KnowledgeArea, AreaScore],
        weights: Mapping[KnowledgeArea, float],
    ) -> float:
        total_weighted = 0.0
        total_weight = 0.0
        for area, weight in weights.items():
            area_score = area_scores.get(area)
            if area_score is None or area_score.questions_answered == 0:
                continue
            total_weighted += area_score.score * weight
            total_weight += weight

        return total_weighted / total_weight if total_weight > 0 else 0.0
