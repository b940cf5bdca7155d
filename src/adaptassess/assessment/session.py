"""
Assessment Session Engine

Owns the candidate session lifecycle:

    IN_PROGRESS --submit--> COMPLETED
    IN_PROGRESS --abandon--> ABANDONED

Every operation reads the session document fresh from the session store,
computes the new state, and writes it back once with a version check.
Terminal sessions accept no further writes.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING

from adaptassess.core.errors import (
    DuplicateAnswerError,
    NotFoundError,
    SessionNotActiveError,
    StateConflictError,
    ValidationError,
)
from adaptassess.core.validation import validate_answer, validate_tenant_id

from .difficulty import AdaptiveConfig, DifficultyAdjuster
from .grading import grade_answer
from .questions import generate_with_retry
from .scoring import ScoringConfig, ScoringEngine
from .selector import KnowledgeAreaSelector
from .types import (
    CandidateSession,
    QuestionResponse,
    RecentPerformance,
    SessionStatus,
    utcnow,
)

if TYPE_CHECKING:
    from adaptassess.store.base import AssessmentStore, MetricsStore, SessionStore

    from .insights import InsightsGenerator
    from .questions import QuestionProvider
    from .types import AIInsight, Answer, AssessmentConfig, PerformanceMetrics, Question

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NextQuestionResult:
    session_id: str
    question: Question
    questions_answered: int
    max_questions: int
    duration_minutes: int | None
    started_at: datetime


@dataclass(frozen=True)
class AnswerResult:
    is_correct: bool
    explanation: str
    next_question_available: bool
    questions_answered: int
    max_questions: int


@dataclass(frozen=True)
class SessionResults:
    session: CandidateSession
    metrics: PerformanceMetrics | None
    insights: AIInsight | None = None


def recent_performance(
    responses: Sequence[QuestionResponse], window: int
) -> RecentPerformance | None:
    """Accuracy over the last ``window`` responses, across all areas."""
    recent = responses[-window:] if window > 0 else ()
    if not recent:
        return None
    return RecentPerformance(correct=sum(1 for r in recent if r.is_correct), total=len(recent))


class AssessmentSessionEngine:
    """Drives one candidate session from start to scored completion.

    Collaborators:
    - sessions / assessments / metrics: tenant-keyed stores
    - provider: question source (retried once with a strict directive)
    - selector, adjuster, scorer: pure adaptive components
    - insights: optional, best-effort role-fit analysis on submit
    """

    def __init__(
        self,
        sessions: SessionStore,
        assessments: AssessmentStore,
        metrics: MetricsStore,
        provider: QuestionProvider,
        *,
        adaptive_config: AdaptiveConfig | None = None,
        scoring_config: ScoringConfig | None = None,
        selector: KnowledgeAreaSelector | None = None,
        insights: InsightsGenerator | None = None,
        recent_window: int = 10,
        clock: Callable[[], datetime] | None = None,
    ):
        self.sessions = sessions
        self.assessments = assessments
        self.metrics = metrics
        self.provider = provider
        self.selector = selector or KnowledgeAreaSelector()
        self.adjuster = DifficultyAdjuster(adaptive_config)
        self.scorer = ScoringEngine(scoring_config)
        self.insights = insights
        self.recent_window = recent_window
        self.clock = clock or utcnow

    # ========================================================================
    # Lifecycle
    # ========================================================================

    async def start(
        self,
        tenant_id: str,
        assessment_id: str,
        candidate_email: str | None = None,
        candidate_name: str | None = None,
    ) -> CandidateSession:
        """Create an IN_PROGRESS session with every area seeded at the initial difficulty.

        Raises:
            NotFoundError: Unknown assessment
            ValidationError: Assessment is inactive
        """
        tenant_id = validate_tenant_id(tenant_id)
        assessment = await self._get_assessment(tenant_id, assessment_id)
        if not assessment.is_active:
            raise ValidationError("Assessment is not active")

        session = CandidateSession(
            tenant_id=tenant_id,
            assessment_id=assessment.assessment_id,
            candidate_email=candidate_email,
            candidate_name=candidate_name,
            current_difficulty={area: assessment.initial_difficulty for area in assessment.areas},
            started_at=self.clock(),
        )
        await self.sessions.put(tenant_id, session)

        logger.info(
            f"Started session {session.session_id} for assessment {assessment_id} "
            f"(tenant {tenant_id})"
        )
        return session

    async def next_question(self, tenant_id: str, session_id: str) -> NextQuestionResult:
        """Select an area, generate a question at its current difficulty and hold it.

        The held question supersedes any earlier unanswered one.

        Raises:
            NotFoundError: Unknown session or assessment
            SessionNotActiveError: Session is terminal
            StateConflictError: Question cap already reached
            QuestionGenerationError: Provider failed after its retry
        """
        session = await self._get_active_session(tenant_id, session_id)
        assessment = await self._get_assessment(tenant_id, session.assessment_id)

        answered = len(session.questions_answered)
        if answered >= assessment.max_questions:
            raise StateConflictError(
                f"Session {session_id} already has {assessment.max_questions} answers (the cap)"
            )

        area = self.selector.select(assessment.knowledge_area_mix, session.questions_answered)
        difficulty = session.current_difficulty.get(area, assessment.initial_difficulty)
        performance = recent_performance(session.questions_answered, self.recent_window)

        question = await generate_with_retry(
            self.provider, assessment, area, difficulty, performance
        )
        await self.sessions.update(
            tenant_id,
            session_id,
            {"current_question": question},
            expected_version=session.version,
        )

        logger.info(
            f"Session {session_id}: question {answered + 1}/{assessment.max_questions} "
            f"from {area.value} at difficulty {difficulty}"
        )
        return NextQuestionResult(
            session_id=session_id,
            question=question,
            questions_answered=answered,
            max_questions=assessment.max_questions,
            duration_minutes=assessment.duration_minutes,
            started_at=session.started_at,
        )

    async def answer(
        self,
        tenant_id: str,
        session_id: str,
        question_id: str,
        raw_answer: Answer | None,
        time_spent_seconds: float,
    ) -> AnswerResult:
        """Grade an answer to the held question and re-evaluate that area's difficulty.

        Raises:
            ValidationError: Missing answer or negative time
            NotFoundError: Unknown session, or question is not the one held
            SessionNotActiveError: Session is terminal
            DuplicateAnswerError: Question already answered in this session
            ConcurrentModificationError: Session changed since it was read
        """
        answer = validate_answer(raw_answer)
        if time_spent_seconds is None or time_spent_seconds < 0:
            raise ValidationError("time_spent_seconds must be zero or positive")

        session = await self._get_active_session(tenant_id, session_id)
        if session.has_answered(question_id):
            raise DuplicateAnswerError(question_id)

        question = session.current_question
        if question is None or question.question_id != question_id:
            raise NotFoundError("Question")

        assessment = await self._get_assessment(tenant_id, session.assessment_id)
        is_correct = grade_answer(answer, question.correct_answer)

        response = QuestionResponse(
            question_id=question.question_id,
            knowledge_area=question.knowledge_area,
            difficulty=question.difficulty,
            answer=answer,
            is_correct=is_correct,
            time_spent_seconds=time_spent_seconds,
            answered_at=self.clock(),
            question_text=question.question_text,
            question_type=question.question_type,
            options=question.options,
            correct_answer=question.correct_answer,
            explanation=question.explanation,
        )
        responses = (*session.questions_answered, response)
        difficulties = self.adjuster.update_area(
            session.current_difficulty,
            question.knowledge_area,
            responses,
            default=assessment.initial_difficulty,
        )

        await self.sessions.update(
            tenant_id,
            session_id,
            {
                "questions_answered": responses,
                "current_difficulty": difficulties,
                "current_question": None,
            },
            expected_version=session.version,
        )

        previous = session.current_difficulty.get(question.knowledge_area)
        if previous != difficulties[question.knowledge_area]:
            logger.info(
                f"Session {session_id}: {question.knowledge_area.value} difficulty "
                f"{previous} -> {difficulties[question.knowledge_area]}"
            )

        return AnswerResult(
            is_correct=is_correct,
            explanation=question.explanation,
            next_question_available=len(responses) < assessment.max_questions,
            questions_answered=len(responses),
            max_questions=assessment.max_questions,
        )

    async def submit(self, tenant_id: str, session_id: str) -> SessionResults:
        """Score the session, mark it COMPLETED and persist metrics.

        The COMPLETED transition is version-checked before anything else is
        written, so a submission that loses a race leaves no metrics behind.
        Insights are generated best-effort after the metrics are stored;
        an insights failure is logged and does not fail the submission.

        Raises:
            NotFoundError: Unknown session or assessment
            SessionNotActiveError: Session already COMPLETED or ABANDONED
            ConcurrentModificationError: Session changed while submitting
        """
        session = await self._get_active_session(tenant_id, session_id)
        assessment = await self._get_assessment(tenant_id, session.assessment_id)

        completed_at = self.clock()
        metrics = self.scorer.score(
            session_id=session_id,
            assessment=assessment,
            responses=session.questions_answered,
            completed_at=completed_at,
        )

        completed = await self.sessions.update(
            tenant_id,
            session_id,
            {
                "status": SessionStatus.COMPLETED,
                "submitted_at": completed_at,
                "current_question": None,
            },
            expected_version=session.version,
        )

        await self.metrics.put(metrics)
        insights = await self._generate_insights(metrics, assessment)

        logger.info(
            f"Session {session_id} completed: overall={metrics.overall_score:.1f} "
            f"role_fit={metrics.role_fit_score} passed={metrics.passed}"
        )
        return SessionResults(session=completed, metrics=metrics, insights=insights)

    async def abandon(self, tenant_id: str, session_id: str) -> CandidateSession:
        """Move an IN_PROGRESS session to ABANDONED without scoring it."""
        session = await self._get_active_session(tenant_id, session_id)
        abandoned = await self.sessions.update(
            tenant_id,
            session_id,
            {"status": SessionStatus.ABANDONED, "current_question": None},
            expected_version=session.version,
        )
        logger.info(
            f"Session {session_id} abandoned after {len(session.questions_answered)} answers"
        )
        return abandoned

    async def get_results(self, tenant_id: str, session_id: str) -> SessionResults:
        """Session document plus metrics and insights, where they exist."""
        session = await self.sessions.get(tenant_id, session_id)
        if session is None:
            raise NotFoundError("Session")

        return SessionResults(
            session=session,
            metrics=await self.metrics.get(tenant_id, session_id),
            insights=await self.metrics.get_insights(tenant_id, session_id),
        )

    # ========================================================================
    # Helpers
    # ========================================================================

    async def _get_active_session(self, tenant_id: str, session_id: str) -> CandidateSession:
        session = await self.sessions.get(tenant_id, session_id)
        if session is None:
            raise NotFoundError("Session")
        if session.status.is_terminal:
            raise SessionNotActiveError(session_id, session.status.value)
        return session

    async def _get_assessment(self, tenant_id: str, assessment_id: str) -> AssessmentConfig:
        assessment = await self.assessments.get(tenant_id, assessment_id)
        if assessment is None:
            raise NotFoundError("Assessment")
        return assessment

    async def _generate_insights(
        self, metrics: PerformanceMetrics, assessment: AssessmentConfig
    ) -> AIInsight | None:
        if self.insights is None:
            return None

        try:
            insight = await self.insights.generate(metrics, assessment)
            await self.metrics.put_insights(insight)
        except Exception as e:
            logger.warning(f"Insights generation failed for session {metrics.session_id}: {e}")
            return None

        return insight
