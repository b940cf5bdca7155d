"""
Role-Fit Insights Generator

Turns PerformanceMetrics into a narrative role-fit analysis via the AI client
(INSIGHT-001 prompt). Callers treat this as best-effort: a failure here must
never fail a submission.
"""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any

from adaptassess.core.errors import UpstreamError

from .questions import strip_code_fence
from .types import KNOWLEDGE_AREA_DESCRIPTIONS, AIInsight, AreaInsight, KnowledgeArea

if TYPE_CHECKING:
    from adaptassess.ai.client import AIClient
    from adaptassess.ai.prompt_loader import PromptLibrary

    from .types import AssessmentConfig, PerformanceMetrics

logger = logging.getLogger(__name__)


class InsightsGenerator:
    """Generates AIInsight for a scored session."""

    PROMPT_ID = "INSIGHT-001"

    def __init__(self, client: AIClient, prompts: PromptLibrary, *, model: str):
        """Initialize generator.

        Args:
            client: AI client with provider fallback
            prompts: Prompt library holding INSIGHT-001
            model: Model identifier for analysis
        """
        self.client = client
        self.prompts = prompts
        self.model = model

    async def generate(
        self, metrics: PerformanceMetrics, assessment: AssessmentConfig
    ) -> AIInsight:
        """Generate insights for one session.

        Args:
            metrics: Final scoring output
            assessment: Assessment the session was taken against

        Returns:
            AIInsight

        Raises:
            UpstreamError: If no provider answered or the answer is not JSON
        """
        system, user_message = self.prompts.render(
            self.PROMPT_ID, self._build_context(metrics, assessment)
        )
        config = self.prompts.get_prompt_config(self.PROMPT_ID)

        content = await self.client.generate_completion(
            model=self.model,
            system=system,
            messages=[{"role": "user", "content": user_message}],
            max_tokens=config["max_tokens"],
            temperature=config["temperature"],
        )
        if content is None:
            raise UpstreamError("No response from AI providers")

        try:
            parsed = json.loads(strip_code_fence(content))
        except json.JSONDecodeError as e:
            raise UpstreamError(f"Insights response was not valid JSON: {e}") from e
        if not isinstance(parsed, dict):
            raise UpstreamError("Insights response was not a JSON object")

        return self.parse(parsed, metrics)

    @staticmethod
    def _build_context(metrics: PerformanceMetrics, assessment: AssessmentConfig) -> dict[str, Any]:
        breakdown = "\n".join(
            f"- {area.value}: {score.score:.0f}% "
            f"({score.correct_answers}/{score.questions_answered} correct, "
            f"avg difficulty: {score.avg_difficulty_reached:.1f}) - "
            f"{KNOWLEDGE_AREA_DESCRIPTIONS[area]}"
            for area, score in metrics.knowledge_area_scores.items()
        )
        return {
            "seniority": assessment.target_role.seniority_level.value,
            "role": assessment.target_role.name,
            "overall_score": f"{metrics.overall_score:.1f}",
            "role_fit_score": metrics.role_fit_score,
            "passed": "yes" if metrics.passed else "no",
            "area_breakdown": breakdown or "- (no answers)",
            "strengths": ", ".join(a.value for a in metrics.strengths) or "none",
            "weaknesses": ", ".join(a.value for a in metrics.weaknesses) or "none",
        }

    @staticmethod
    def parse(parsed: dict[str, Any], metrics: PerformanceMetrics) -> AIInsight:
        """Build AIInsight from the model's JSON, tolerating missing keys.

        Area entries naming an unknown knowledge area are dropped.
        """

        def areas(items: Any) -> tuple[AreaInsight, ...]:
            result = []
            for item in items or []:
                try:
                    area = KnowledgeArea(str(item.get("area")).strip().upper())
                except (AttributeError, ValueError):
                    logger.debug(f"Dropping insight entry with unknown area: {item!r}")
                    continue
                result.append(
                    AreaInsight(
                        area=area,
                        explanation=str(item.get("explanation", "")),
                        root_cause=item.get("rootCause"),
                    )
                )
            return tuple(result)

        try:
            readiness = int(parsed.get("roleReadinessScore") or 0)
        except (TypeError, ValueError):
            readiness = 0

        return AIInsight(
            session_id=metrics.session_id,
            assessment_id=metrics.assessment_id,
            tenant_id=metrics.tenant_id,
            role_fit_assessment=parsed.get("roleFitAssessment") or "Assessment pending",
            strength_areas=areas(parsed.get("strengthAreas")),
            weak_areas=areas(parsed.get("weakAreas")),
            training_recommendations=tuple(
                str(r) for r in parsed.get("trainingRecommendations") or []
            ),
            role_readiness_score=max(0, min(100, readiness)),
            follow_up_suggestions=tuple(str(s) for s in parsed.get("followUpSuggestions") or []),
        )
