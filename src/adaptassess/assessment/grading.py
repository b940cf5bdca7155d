"""
Answer Grading

Compares a candidate's raw answer with a question's answer key.
"""

from __future__ import annotations

from .types import Answer


def normalize_answer(answer: str) -> str:
    """Normalize answer for comparison.

    Args:
        answer: Raw answer string

    Returns:
        Trimmed, lowercased answer
    """
    return str(answer).strip().lower()


def grade_answer(submitted: Answer, expected: Answer) -> bool:
    """Check a submitted answer against the expected answer.

    Single expected value: trimmed, case-insensitive equality.
    Multiple expected values: the submitted list must contain exactly the
    same set of values.

    Args:
        submitted: Candidate's answer (string or list of strings)
        expected: Answer key (string or list of strings)

    Returns:
        True if the answer is correct
    """
    if isinstance(expected, list):
        if not isinstance(submitted, list):
            return False
        return set(submitted) == set(expected)

    if isinstance(submitted, list):
        # A single-element list is the same answer as its element
        if len(submitted) != 1:
            return False
        submitted = submitted[0]

    return normalize_answer(submitted) == normalize_answer(expected)
