"""
Question Providers

Generates one question for a knowledge area at a given difficulty.
- AIQuestionProvider: LLM generation through AIClient (QGEN-001 / QGEN-002 prompts)
- TemplateQuestionProvider: built-in rule-based bank for local runs and tests

Provider output is validated here so the engine only ever sees a typed Question.
"""

from __future__ import annotations

import json
import logging
import re
from typing import TYPE_CHECKING, Any, Protocol

from adaptassess.core.errors import ContentFilteredError, QuestionGenerationError

from .types import (
    DIFFICULTY_DESCRIPTIONS,
    KNOWLEDGE_AREA_DESCRIPTIONS,
    KNOWLEDGE_AREA_QUESTION_TYPES,
    KnowledgeArea,
    Question,
    QuestionType,
)

if TYPE_CHECKING:
    from adaptassess.ai.client import AIClient
    from adaptassess.ai.prompt_loader import PromptLibrary

    from .types import AssessmentConfig, RecentPerformance

logger = logging.getLogger(__name__)


class QuestionProvider(Protocol):
    """Source of adaptive questions."""

    async def generate_question(
        self,
        assessment: AssessmentConfig,
        area: KnowledgeArea,
        difficulty: int,
        recent_performance: RecentPerformance | None = None,
        *,
        strict: bool = False,
    ) -> Question:
        """Return one question.

        Raises:
            ContentFilteredError: Output rejected by the content filter
            QuestionGenerationError: Any other generation failure
        """
        ...


async def generate_with_retry(
    provider: QuestionProvider,
    assessment: AssessmentConfig,
    area: KnowledgeArea,
    difficulty: int,
    recent_performance: RecentPerformance | None = None,
) -> Question:
    """Generate a question, retrying once with the strict directive if filtered.

    Raises:
        QuestionGenerationError: If generation fails or is filtered twice
    """
    try:
        return await provider.generate_question(assessment, area, difficulty, recent_performance)
    except ContentFilteredError as e:
        logger.warning(f"Question filtered for {area.value}, retrying with strict prompt: {e}")

    try:
        return await provider.generate_question(
            assessment, area, difficulty, recent_performance, strict=True
        )
    except ContentFilteredError as e:
        raise QuestionGenerationError(
            f"Question was filtered out even after retry: {e.message}"
        ) from e


# ============================================================================
# Output normalization
# ============================================================================

COMPLEXITY_KEYWORDS = (
    "time complexity",
    "space complexity",
    "big-o",
    "big o",
    "o(n)",
    "o(log n)",
    "o(1)",
    "asymptotic",
    "complexity of",
    "what is the complexity",
    "complexity analysis",
    "time and space",
    "runtime complexity",
)

_QUESTION_TYPE_ALIASES = {
    "MCQ": QuestionType.MCQ,
    "MULTIPLE_CHOICE": QuestionType.MCQ,
    "MULTIPLECHOICE": QuestionType.MCQ,
    "CODING": QuestionType.CODING,
    "NUMERICAL": QuestionType.NUMERICAL,
    "PROBLEM_SOLVING": QuestionType.PROBLEM_SOLVING,
    "PROBLEMSOLVING": QuestionType.PROBLEM_SOLVING,
    "SCENARIO_BASED": QuestionType.SCENARIO_BASED,
    "SCENARIOBASED": QuestionType.SCENARIO_BASED,
}

_OPTION_KEY_ORDER = "ABCDEF0123456789"


def is_complexity_question(question_text: str) -> bool:
    """True if the question is primarily about complexity analysis."""
    lower = question_text.lower()
    return any(keyword in lower for keyword in COMPLEXITY_KEYWORDS)


def normalize_question_type(raw: Any) -> QuestionType:
    """Map free-form type strings ("mcq", "Multiple Choice") onto QuestionType.

    Unknown or missing values default to MCQ.
    """
    if not raw or not isinstance(raw, str):
        return QuestionType.MCQ
    key = re.sub(r"[\s-]+", "_", raw.strip().upper())
    return _QUESTION_TYPE_ALIASES.get(key, QuestionType.MCQ)


def normalize_options(raw: Any) -> tuple[str, ...] | None:
    """Normalize options given as a list or as an ``{"A": ..., "B": ...}`` mapping."""
    if raw is None:
        return None

    if isinstance(raw, list):
        values = [str(o).strip() for o in raw if o is not None]
    elif isinstance(raw, dict):

        def sort_key(key: Any) -> tuple[int, str]:
            first = str(key).upper()[:1]
            index = _OPTION_KEY_ORDER.find(first) if first else -1
            return (index if index >= 0 else len(_OPTION_KEY_ORDER), str(key))

        values = [
            str(raw[k]).strip() for k in sorted(raw, key=sort_key) if raw[k] is not None
        ]
    else:
        return None

    values = [v for v in values if v]
    return tuple(values) if values else None


def normalize_correct_answer(raw: Any) -> str | list[str]:
    if isinstance(raw, list):
        values = [str(v).strip() for v in raw if v is not None and str(v).strip()]
        if not values:
            raise QuestionGenerationError("Generated question has an empty answer key")
        return values
    if raw is None or str(raw).strip() == "":
        raise QuestionGenerationError("Generated question has no correct answer")
    return str(raw).strip()


def parse_question_payload(
    payload: Any,
    area: KnowledgeArea,
    difficulty: int,
    *,
    source: str,
) -> Question:
    """Build a Question from provider JSON.

    Accepts either a single question object or ``{"questions": [...]}``.

    Raises:
        ContentFilteredError: Complexity question for the algorithms area
        QuestionGenerationError: Malformed payload
    """
    if isinstance(payload, dict) and isinstance(payload.get("questions"), list):
        payload = payload["questions"][0] if payload["questions"] else None

    if not isinstance(payload, dict):
        raise QuestionGenerationError("Invalid question format from provider")

    text = payload.get("questionText")
    if not isinstance(text, str) or not text.strip():
        raise QuestionGenerationError("Generated question has empty questionText")

    if area is KnowledgeArea.ALGORITHMS_DATA_STRUCTURES and is_complexity_question(text):
        raise ContentFilteredError(f"Complexity question filtered: {text[:100]}")

    return Question(
        knowledge_area=area,
        question_text=text,
        question_type=normalize_question_type(payload.get("questionType")),
        # Recorded at the requested level even if the provider reports another
        difficulty=difficulty,
        options=normalize_options(payload.get("options")),
        correct_answer=normalize_correct_answer(payload.get("correctAnswer")),
        explanation=str(payload.get("explanation") or ""),
        metadata={"generated_by": source},
    )


# ============================================================================
# AI provider
# ============================================================================


class AIQuestionProvider:
    """Generates questions with an LLM.

    Uses QGEN-001, or QGEN-002 (explicit no-complexity directive) when strict.
    """

    PROMPT_ID = "QGEN-001"
    STRICT_PROMPT_ID = "QGEN-002"

    def __init__(self, client: AIClient, prompts: PromptLibrary, *, model: str):
        """Initialize provider.

        Args:
            client: AI client with provider fallback
            prompts: Prompt library holding the QGEN prompts
            model: Model identifier for generation
        """
        self.client = client
        self.prompts = prompts
        self.model = model

    async def generate_question(
        self,
        assessment: AssessmentConfig,
        area: KnowledgeArea,
        difficulty: int,
        recent_performance: RecentPerformance | None = None,
        *,
        strict: bool = False,
    ) -> Question:
        prompt_id = self.STRICT_PROMPT_ID if strict else self.PROMPT_ID
        system, user_message = self.prompts.render(
            prompt_id, self._build_context(assessment, area, difficulty, recent_performance)
        )
        config = self.prompts.get_prompt_config(prompt_id)

        content = await self.client.generate_completion(
            model=self.model,
            system=system,
            messages=[{"role": "user", "content": user_message}],
            max_tokens=config["max_tokens"],
            temperature=config["temperature"],
        )
        if content is None:
            raise QuestionGenerationError("No response from AI providers")

        try:
            payload = json.loads(strip_code_fence(content))
        except json.JSONDecodeError as e:
            raise QuestionGenerationError(f"AI returned invalid JSON: {e}") from e

        question = parse_question_payload(payload, area, difficulty, source="ai")
        return question.model_copy(
            update={"metadata": {**question.metadata, "model": self.model, "prompt": prompt_id}}
        )

    @staticmethod
    def _build_context(
        assessment: AssessmentConfig,
        area: KnowledgeArea,
        difficulty: int,
        recent_performance: RecentPerformance | None,
    ) -> dict[str, str]:
        language = assessment.programming_language
        return {
            "role": assessment.target_role.name,
            "seniority": assessment.target_role.seniority_level.value,
            "area": area.value,
            "area_description": KNOWLEDGE_AREA_DESCRIPTIONS[area],
            "language": f"\nProgramming Language: {language}" if language else "",
            "difficulty": str(difficulty),
            "difficulty_description": DIFFICULTY_DESCRIPTIONS[difficulty],
            "performance": (
                f"\nRecent performance: {recent_performance.correct}/{recent_performance.total}"
                if recent_performance
                else ""
            ),
            "question_types": ",".join(t.value for t in KNOWLEDGE_AREA_QUESTION_TYPES[area]),
        }


def strip_code_fence(content: str) -> str:
    """Remove a surrounding ```json fence some models add."""
    stripped = content.strip()
    match = re.match(r"^```(?:json)?\s*(.*?)\s*```$", stripped, re.DOTALL)
    return match.group(1) if match else stripped


# ============================================================================
# Template provider
# ============================================================================


class TemplateQuestionProvider:
    """Serves questions from a built-in bank.

    Bank entries are cycled per area so consecutive calls
    vary. Every question gets a fresh id.
    """

    # Format: (question_text, question_type, options, correct_answer)
    TEMPLATES: dict[KnowledgeArea, list[tuple[str, QuestionType, list[str] | None, Any]]] = {
        KnowledgeArea.PROGRAMMING_LANGUAGE: [
            (
                "Which keyword defines a function in Python?",
                QuestionType.MCQ,
                ["func", "def", "function", "lambda"],
                "def",
            ),
            (
                "What does `len([1, 2, 3])` return?",
                QuestionType.MCQ,
                ["2", "3", "4", "An error"],
                "3",
            ),
            (
                "Which of these are immutable built-in types? Select all that apply.",
                QuestionType.MCQ,
                ["tuple", "list", "str", "dict"],
                ["tuple", "str"],
            ),
        ],
        KnowledgeArea.ALGORITHMS_DATA_STRUCTURES: [
            (
                "Which data structure serves elements in last-in, first-out order?",
                QuestionType.MCQ,
                ["Queue", "Stack", "Heap", "Linked list"],
                "Stack",
            ),
            (
                "Which traversal visits a binary search tree's keys in sorted order?",
                QuestionType.MCQ,
                ["Preorder", "Inorder", "Postorder", "Level order"],
                "Inorder",
            ),
            (
                "Which graph traversal finds the shortest path in an unweighted graph?",
                QuestionType.PROBLEM_SOLVING,
                ["BFS", "DFS"],
                "BFS",
            ),
        ],
        KnowledgeArea.ANALYTICAL_REASONING: [
            (
                "What comes next: 2, 4, 8, 16, ...?",
                QuestionType.MCQ,
                ["18", "24", "32", "64"],
                "32",
            ),
            (
                "All widgets are gadgets. Some gadgets are blue. Must some widgets be blue?",
                QuestionType.MCQ,
                ["Yes", "No"],
                "No",
            ),
        ],
        KnowledgeArea.QUANTITATIVE_MATH: [
            ("What is 15% of 240?", QuestionType.NUMERICAL, None, "36"),
            (
                "A train travels 180 km in 2 hours. What is its average speed in km/h?",
                QuestionType.NUMERICAL,
                None,
                "90",
            ),
        ],
        KnowledgeArea.SYSTEM_SCENARIO_DESIGN: [
            (
                "A read-heavy service has a slow database. What is the first component to add?",
                QuestionType.SCENARIO_BASED,
                ["A cache", "A second load balancer", "A message queue", "A CDN for writes"],
                "A cache",
            ),
            (
                "Which technique lets a client safely retry a payment request?",
                QuestionType.SCENARIO_BASED,
                ["Idempotency keys", "Longer timeouts", "Sticky sessions", "Larger thread pools"],
                "Idempotency keys",
            ),
        ],
        KnowledgeArea.PSYCHOMETRIC_BEHAVIORAL: [
            (
                "A teammate's change breaks the build before a release. What do you do first?",
                QuestionType.SCENARIO_BASED,
                [
                    "Revert and notify the teammate",
                    "Wait for them to notice",
                    "Ship anyway",
                    "Escalate to management",
                ],
                "Revert and notify the teammate",
            ),
        ],
    }

    def __init__(self) -> None:
        self._served: dict[KnowledgeArea, int] = {}

    async def generate_question(
        self,
        assessment: AssessmentConfig,
        area: KnowledgeArea,
        difficulty: int,
        recent_performance: RecentPerformance | None = None,
        *,
        strict: bool = False,
    ) -> Question:
        templates = self.TEMPLATES.get(area)
        if not templates:
            raise QuestionGenerationError(f"No question templates for {area.value}")

        index = self._served.get(area, 0)
        self._served[area] = index + 1
        text, question_type, options, answer = templates[index % len(templates)]

        return Question(
            knowledge_area=area,
            question_text=text,
            question_type=question_type,
            difficulty=difficulty,
            options=tuple(options) if options else None,
            correct_answer=answer,
            explanation=f"Template question for {KNOWLEDGE_AREA_DESCRIPTIONS[area].lower()}.",
            metadata={"generated_by": "template"},
        )
