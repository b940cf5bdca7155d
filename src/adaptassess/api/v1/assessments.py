"""
Assessment API Endpoints

Create, list and activate/deactivate assessments for a tenant.
"""
# ruff: noqa: B008 - FastAPI Depends in function defaults is standard pattern

from fastapi import APIRouter, Depends, status

from adaptassess.api.deps import get_assessment_service, get_tenant_id
from adaptassess.assessment.service import AssessmentService
from adaptassess.assessment.types import AssessmentConfig, KnowledgeAreaConfig, TargetRole
from adaptassess.core.schemas.assessments import (
    AssessmentActiveUpdate,
    AssessmentCreate,
    AssessmentSchema,
)

router = APIRouter()


def _to_schema(assessment: AssessmentConfig) -> AssessmentSchema:
    return AssessmentSchema.model_validate(assessment.model_dump())


@router.post("", response_model=AssessmentSchema, status_code=status.HTTP_201_CREATED)
async def create_assessment(
    data: AssessmentCreate,
    tenant_id: str = Depends(get_tenant_id),
    service: AssessmentService = Depends(get_assessment_service),
) -> AssessmentSchema:
    """Create an assessment. The knowledge-area mix must total 100%."""
    assessment = await service.create(
        tenant_id,
        title=data.title,
        description=data.description,
        target_role=TargetRole(**data.target_role.model_dump()),
        knowledge_area_mix=[KnowledgeAreaConfig(**c.model_dump()) for c in data.knowledge_area_mix],
        initial_difficulty=data.initial_difficulty,
        max_questions=data.max_questions,
        duration_minutes=data.duration_minutes,
        pass_threshold=data.pass_threshold,
        created_by=data.created_by,
    )
    return _to_schema(assessment)


@router.get("", response_model=list[AssessmentSchema])
async def list_assessments(
    tenant_id: str = Depends(get_tenant_id),
    service: AssessmentService = Depends(get_assessment_service),
) -> list[AssessmentSchema]:
    """List the tenant's assessments, newest first."""
    return [_to_schema(a) for a in await service.list(tenant_id)]


@router.get("/{assessment_id}", response_model=AssessmentSchema)
async def get_assessment(
    assessment_id: str,
    tenant_id: str = Depends(get_tenant_id),
    service: AssessmentService = Depends(get_assessment_service),
) -> AssessmentSchema:
    return _to_schema(await service.get(tenant_id, assessment_id))


@router.patch("/{assessment_id}/active", response_model=AssessmentSchema)
async def set_assessment_active(
    assessment_id: str,
    data: AssessmentActiveUpdate,
    tenant_id: str = Depends(get_tenant_id),
    service: AssessmentService = Depends(get_assessment_service),
) -> AssessmentSchema:
    """Activate or deactivate an assessment (its only mutable attribute)."""
    return _to_schema(await service.set_active(tenant_id, assessment_id, data.is_active))
