"""
Input validation functions for assessment configuration.

All validation functions follow the pattern:
1. Accept raw user input
2. Normalize/clean the input
3. Validate against business rules
4. Return cleaned value or raise ValidationError

Assessments are validated once, at creation. Nothing downstream re-validates.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from adaptassess.assessment.types import (
    MAX_DIFFICULTY,
    MIN_DIFFICULTY,
    KnowledgeArea,
    KnowledgeAreaConfig,
)
from adaptassess.core.errors import ValidationError

PERCENTAGE_TOLERANCE = 0.01
MIN_QUESTIONS = 1
MAX_QUESTIONS = 50


# ============================================================================
# Knowledge Area Mix Validation
# ============================================================================


def validate_knowledge_area_mix(
    mix: Sequence[KnowledgeAreaConfig] | None,
) -> tuple[KnowledgeAreaConfig, ...]:
    """
    Validate an assessment's knowledge-area mix.

    Rules:
    - At least one area
    - No area listed twice
    - Every percentage strictly positive
    - Percentages sum to 100 (within 0.01)

    Args:
        mix: Raw knowledge-area configuration list

    Returns:
        Mix as an immutable tuple, in configuration order

    Raises:
        ValidationError: If any rule is violated
    """
    if not mix:
        raise ValidationError("knowledge_area_mix must be a non-empty list")

    seen: set[KnowledgeArea] = set()
    for config in mix:
        if config.area in seen:
            raise ValidationError(f"Knowledge area {config.area.value} listed more than once")
        seen.add(config.area)

        # Zero-weight areas could still be answered and would have no scoring weight
        if config.percentage <= 0:
            raise ValidationError(
                f"Knowledge area {config.area.value} must have a positive percentage"
            )

        if config.programming_language is not None and not config.programming_language.strip():
            raise ValidationError("programming_language cannot be blank")

    total = sum(config.percentage for config in mix)
    if abs(total - 100) > PERCENTAGE_TOLERANCE:
        raise ValidationError(f"Knowledge area percentages must sum to 100 (got {total:g})")

    return tuple(mix)


# ============================================================================
# Numeric Range Validation
# ============================================================================


def validate_difficulty(difficulty: int | None) -> int:
    """
    Validate a difficulty level.

    Args:
        difficulty: Difficulty (1-5)

    Returns:
        The difficulty

    Raises:
        ValidationError: If not an integer in [1, 5]
    """
    if difficulty is None or isinstance(difficulty, bool) or not isinstance(difficulty, int):
        raise ValidationError("Difficulty must be an integer")

    if not MIN_DIFFICULTY <= difficulty <= MAX_DIFFICULTY:
        raise ValidationError(
            f"Difficulty must be between {MIN_DIFFICULTY} and {MAX_DIFFICULTY}"
        )

    return difficulty


def validate_max_questions(max_questions: int | None, default: int = 10) -> int:
    """
    Validate the question cap.

    Args:
        max_questions: Requested cap, or None for the default
        default: Cap used when none is given

    Returns:
        Question cap (1-50)

    Raises:
        ValidationError: If outside [1, 50]
    """
    if max_questions is None:
        return default

    if isinstance(max_questions, bool) or not isinstance(max_questions, int):
        raise ValidationError("max_questions must be an integer")

    if not MIN_QUESTIONS <= max_questions <= MAX_QUESTIONS:
        raise ValidationError(
            f"max_questions must be a number between {MIN_QUESTIONS} and {MAX_QUESTIONS}"
        )

    return max_questions


def validate_pass_threshold(threshold: float | None) -> float | None:
    """
    Validate an explicit pass threshold.

    Args:
        threshold: Pass mark (0-100), or None for the seniority default

    Returns:
        Threshold, or None

    Raises:
        ValidationError: If outside [0, 100]
    """
    if threshold is None:
        return None

    if not 0 <= threshold <= 100:
        raise ValidationError("pass_threshold must be between 0 and 100")

    return float(threshold)


# ============================================================================
# Text Validation
# ============================================================================


def validate_required_text(value: str | None, field_name: str, max_length: int = 200) -> str:
    """
    Validate a required free-text field.

    Args:
        value: Raw input
        field_name: Field name used in error messages
        max_length: Maximum length after trimming

    Returns:
        Trimmed value

    Raises:
        ValidationError: If empty or too long
    """
    cleaned = (value or "").strip()

    if cleaned == "":
        raise ValidationError(f"{field_name} cannot be empty")

    if len(cleaned) > max_length:
        raise ValidationError(f"{field_name} cannot exceed {max_length} characters")

    return cleaned


def validate_tenant_id(tenant_id: str | None) -> str:
    """Tenant ids key every store lookup and must never be blank."""
    return validate_required_text(tenant_id, "Tenant ID", max_length=128)


def validate_answer(answer: str | Iterable[str] | None) -> str | list[str]:
    """
    Validate a candidate's raw answer.

    Args:
        answer: String, or list of strings for multi-value answers

    Returns:
        Answer as a string or a list of strings

    Raises:
        ValidationError: If missing
    """
    if answer is None:
        raise ValidationError("Answer is required")

    if isinstance(answer, str):
        return answer

    return [str(item) for item in answer]
