"""
Assessment Pydantic Schemas

Request/response models for assessment API endpoints.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from adaptassess.assessment.types import KnowledgeArea, SeniorityLevel


# Request schemas
class TargetRoleSchema(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    seniority_level: SeniorityLevel


class KnowledgeAreaConfigSchema(BaseModel):
    area: KnowledgeArea
    percentage: float = Field(ge=0, le=100)
    programming_language: str | None = None


class AssessmentCreate(BaseModel):
    """Request schema for creating an assessment.

    Mix totals, difficulty and question-cap ranges are checked by the
    assessment service so every caller gets the same rules.
    """

    title: str
    description: str | None = None
    target_role: TargetRoleSchema
    knowledge_area_mix: list[KnowledgeAreaConfigSchema]
    initial_difficulty: int | None = None
    max_questions: int | None = None
    duration_minutes: int | None = None
    pass_threshold: float | None = None
    created_by: str | None = None


class AssessmentActiveUpdate(BaseModel):
    is_active: bool


# Response schemas
class AssessmentSchema(BaseModel):
    """Assessment response schema."""

    model_config = ConfigDict(from_attributes=True)

    assessment_id: str
    tenant_id: str
    title: str
    description: str | None = None
    target_role: TargetRoleSchema
    knowledge_area_mix: list[KnowledgeAreaConfigSchema]
    initial_difficulty: int
    max_questions: int
    duration_minutes: int | None = None
    pass_threshold: float | None = None
    is_active: bool
    created_by: str | None = None
    created_at: datetime
    updated_at: datetime
