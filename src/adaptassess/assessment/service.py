"""
Assessment Service

Creates and manages assessment definitions. All configuration rules are
checked here, once, at creation; stored assessments are trusted afterwards.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import TYPE_CHECKING

from adaptassess.core.errors import NotFoundError, ValidationError
from adaptassess.core.validation import (
    validate_difficulty,
    validate_knowledge_area_mix,
    validate_max_questions,
    validate_pass_threshold,
    validate_required_text,
    validate_tenant_id,
)

from .types import AssessmentConfig, KnowledgeAreaConfig, TargetRole

if TYPE_CHECKING:
    from adaptassess.store.base import AssessmentStore

logger = logging.getLogger(__name__)


class AssessmentService:
    def __init__(
        self,
        assessments: AssessmentStore,
        *,
        default_difficulty: int = 3,
        default_max_questions: int = 10,
    ):
        self.assessments = assessments
        self.default_difficulty = default_difficulty
        self.default_max_questions = default_max_questions

    async def create(
        self,
        tenant_id: str,
        *,
        title: str,
        target_role: TargetRole,
        knowledge_area_mix: Sequence[KnowledgeAreaConfig],
        description: str | None = None,
        initial_difficulty: int | None = None,
        max_questions: int | None = None,
        duration_minutes: int | None = None,
        pass_threshold: float | None = None,
        created_by: str | None = None,
    ) -> AssessmentConfig:
        """Validate and store a new assessment.

        Raises:
            ValidationError: If any configuration rule is violated
        """
        if duration_minutes is not None and duration_minutes <= 0:
            raise ValidationError("duration_minutes must be positive")

        assessment = AssessmentConfig(
            tenant_id=validate_tenant_id(tenant_id),
            title=validate_required_text(title, "Title"),
            description=description,
            target_role=TargetRole(
                name=validate_required_text(target_role.name, "Role name"),
                seniority_level=target_role.seniority_level,
            ),
            knowledge_area_mix=validate_knowledge_area_mix(knowledge_area_mix),
            initial_difficulty=validate_difficulty(
                self.default_difficulty if initial_difficulty is None else initial_difficulty
            ),
            max_questions=validate_max_questions(max_questions, default=self.default_max_questions),
            duration_minutes=duration_minutes,
            pass_threshold=validate_pass_threshold(pass_threshold),
            created_by=created_by,
        )
        await self.assessments.put(assessment)

        logger.info(
            f"Created assessment {assessment.assessment_id} for tenant {assessment.tenant_id} "
            f"({len(assessment.knowledge_area_mix)} areas, {assessment.max_questions} questions)"
        )
        return assessment

    async def get(self, tenant_id: str, assessment_id: str) -> AssessmentConfig:
        assessment = await self.assessments.get(tenant_id, assessment_id)
        if assessment is None:
            raise NotFoundError("Assessment")
        return assessment

    async def list(self, tenant_id: str) -> list[AssessmentConfig]:
        return await self.assessments.list(tenant_id)

    async def set_active(
        self, tenant_id: str, assessment_id: str, is_active: bool
    ) -> AssessmentConfig:
        assessment = await self.assessments.set_active(tenant_id, assessment_id, is_active)
        logger.info(f"Assessment {assessment_id} is_active={is_active}")
        return assessment
