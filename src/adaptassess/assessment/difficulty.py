"""
Difficulty Adjuster

Raises or lowers a knowledge area's difficulty from a rolling accuracy window.
Each area is adjusted independently, one level at a time.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from .types import MAX_DIFFICULTY, MIN_DIFFICULTY

if TYPE_CHECKING:
    from collections.abc import Sequence

    from .types import KnowledgeArea, QuestionResponse


@dataclass(frozen=True)
class AdaptiveConfig:
    """Tunables for difficulty adjustment."""

    stable_window: int = 3
    increase_threshold: float = 0.8
    decrease_threshold: float = 0.4


class DifficultyAdjuster:
    """Computes the next difficulty for a knowledge area.

    Algorithm:
    1. Fewer than ``stable_window`` responses in the area: keep difficulty
    2. Take the last ``stable_window`` responses in the area
    3. Recent accuracy >= increase threshold: +1 (capped at 5)
    4. Recent accuracy < decrease threshold: -1 (floored at 1)
    5. Otherwise hold
    """

    def __init__(self, config: AdaptiveConfig | None = None):
        self.config = config or AdaptiveConfig()

    def next_difficulty(
        self,
        current_difficulty: int,
        area: KnowledgeArea,
        responses: Sequence[QuestionResponse],
    ) -> int:
        """Return the difficulty to use for the next question in ``area``.

        Args:
            current_difficulty: Area's current difficulty (1-5)
            area: Knowledge area being evaluated
            responses: Ordered answer log (any areas; filtered here)

        Returns:
            Next difficulty, always within [1, 5]
        """
        current = min(MAX_DIFFICULTY, max(MIN_DIFFICULTY, current_difficulty))
        window = self.config.stable_window

        area_responses = [r for r in responses if r.knowledge_area == area]
        if len(area_responses) < window:
            return current

        recent = area_responses[-window:]
        recent_accuracy = sum(1 for r in recent if r.is_correct) / window

        if recent_accuracy >= self.config.increase_threshold and current < MAX_DIFFICULTY:
            return current + 1
        if recent_accuracy < self.config.decrease_threshold and current > MIN_DIFFICULTY:
            return current - 1

        return current

    def update_area(
        self,
        difficulties: dict[KnowledgeArea, int],
        area: KnowledgeArea,
        responses: Sequence[QuestionResponse],
        default: int,
    ) -> dict[KnowledgeArea, int]:
        """Return a copy of ``difficulties`` with only ``area`` re-evaluated."""
        updated = dict(difficulties)
        updated[area] = self.next_difficulty(difficulties.get(area, default), area, responses)
        return updated
