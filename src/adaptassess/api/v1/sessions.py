"""
Candidate Session API Endpoints

Start a session, fetch adaptive questions, answer, submit and view results.
"""
# ruff: noqa: B008 - FastAPI Depends in function defaults is standard pattern

from fastapi import APIRouter, Depends, status

from adaptassess.api.deps import get_session_engine, get_tenant_id
from adaptassess.assessment.session import AssessmentSessionEngine
from adaptassess.core.schemas.sessions import (
    AnswerResponse,
    AnswerSubmit,
    CandidateQuestionSchema,
    NextQuestionResponse,
    SessionResultsResponse,
    SessionSchema,
    SessionStart,
    SessionStartResponse,
    SubmitResponse,
)

router = APIRouter()


@router.post("/start", response_model=SessionStartResponse, status_code=status.HTTP_201_CREATED)
async def start_session(
    data: SessionStart,
    tenant_id: str = Depends(get_tenant_id),
    engine: AssessmentSessionEngine = Depends(get_session_engine),
) -> SessionStartResponse:
    """Start a candidate session against an active assessment."""
    session = await engine.start(
        tenant_id,
        data.assessment_id,
        candidate_email=data.candidate_email,
        candidate_name=data.candidate_name,
    )
    return SessionStartResponse(
        session_id=session.session_id,
        assessment_id=session.assessment_id,
        started_at=session.started_at,
    )


@router.get("/{session_id}/next-question", response_model=NextQuestionResponse)
async def get_next_question(
    session_id: str,
    tenant_id: str = Depends(get_tenant_id),
    engine: AssessmentSessionEngine = Depends(get_session_engine),
) -> NextQuestionResponse:
    """Generate the next adaptive question. The answer key is never returned."""
    result = await engine.next_question(tenant_id, session_id)
    return NextQuestionResponse(
        session_id=result.session_id,
        question=CandidateQuestionSchema.model_validate(result.question.for_candidate()),
        questions_answered=result.questions_answered,
        max_questions=result.max_questions,
        duration_minutes=result.duration_minutes,
        started_at=result.started_at,
    )


@router.post("/{session_id}/answer", response_model=AnswerResponse)
async def submit_answer(
    session_id: str,
    data: AnswerSubmit,
    tenant_id: str = Depends(get_tenant_id),
    engine: AssessmentSessionEngine = Depends(get_session_engine),
) -> AnswerResponse:
    """Answer the question currently held by the session."""
    result = await engine.answer(
        tenant_id, session_id, data.question_id, data.answer, data.time_spent_seconds
    )
    return AnswerResponse(
        is_correct=result.is_correct,
        explanation=result.explanation,
        next_question_available=result.next_question_available,
        questions_answered=result.questions_answered,
        max_questions=result.max_questions,
    )


@router.post("/{session_id}/submit", response_model=SubmitResponse)
async def submit_session(
    session_id: str,
    tenant_id: str = Depends(get_tenant_id),
    engine: AssessmentSessionEngine = Depends(get_session_engine),
) -> SubmitResponse:
    """Score and complete the session."""
    results = await engine.submit(tenant_id, session_id)
    metrics = results.metrics
    return SubmitResponse(
        session_id=session_id,
        status=results.session.status,
        overall_score=metrics.overall_score,
        role_fit_score=metrics.role_fit_score,
        passed=metrics.passed,
        insights_available=results.insights is not None,
    )


@router.post("/{session_id}/abandon", response_model=SessionSchema)
async def abandon_session(
    session_id: str,
    tenant_id: str = Depends(get_tenant_id),
    engine: AssessmentSessionEngine = Depends(get_session_engine),
) -> SessionSchema:
    session = await engine.abandon(tenant_id, session_id)
    return SessionSchema.model_validate(session.model_dump())


@router.get("/{session_id}", response_model=SessionResultsResponse)
async def get_session_results(
    session_id: str,
    tenant_id: str = Depends(get_tenant_id),
    engine: AssessmentSessionEngine = Depends(get_session_engine),
) -> SessionResultsResponse:
    """Session with its answer log, metrics and insights (when available)."""
    return SessionResultsResponse.from_results(await engine.get_results(tenant_id, session_id))
