"""
Knowledge Area Selector

Chooses which knowledge area to probe next so the answered-question
distribution converges on the assessment's configured mix.
"""

from __future__ import annotations

import logging
import random
from collections import Counter
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Sequence

    from .types import KnowledgeArea, KnowledgeAreaConfig, QuestionResponse

logger = logging.getLogger(__name__)


class KnowledgeAreaSelector:
    """Picks the next knowledge area.

    Algorithm:
    1. For each configured area: deficit = target% - actual% of answers so far
    2. Any positive deficit: return the largest one; ties go to the area
       listed first in the mix
    3. Otherwise: weighted random draw over the configured percentages
    """

    def __init__(self, rng: random.Random | None = None):
        """Initialize selector.

        Args:
            rng: Random source for the weighted fallback (seedable in tests)
        """
        self.rng = rng or random.Random()

    def select(
        self,
        knowledge_area_mix: Sequence[KnowledgeAreaConfig],
        responses: Sequence[QuestionResponse],
    ) -> KnowledgeArea:
        """Return the area to ask the next question from.

        Args:
            knowledge_area_mix: Configured areas with target percentages
            responses: Answer log so far

        Returns:
            One of the configured areas

        Raises:
            ValueError: If the mix is empty
        """
        if not knowledge_area_mix:
            raise ValueError("knowledge_area_mix must not be empty")

        deficits = self.deficits(knowledge_area_mix, responses)

        best: KnowledgeArea | None = None
        best_deficit = 0.0
        for config in knowledge_area_mix:
            deficit = deficits[config.area]
            # Strict comparison keeps the first area in configuration order on ties
            if deficit > best_deficit:
                best, best_deficit = config.area, deficit

        if best is not None:
            return best

        logger.debug("All knowledge areas on target, using weighted random selection")
        return self._weighted_random(knowledge_area_mix)

    @staticmethod
    def deficits(
        knowledge_area_mix: Sequence[KnowledgeAreaConfig],
        responses: Sequence[QuestionResponse],
    ) -> dict[KnowledgeArea, float]:
        """Target percentage minus actual percentage for every configured area."""
        configured = {config.area for config in knowledge_area_mix}
        counts = Counter(r.knowledge_area for r in responses if r.knowledge_area in configured)
        total = len(responses)

        result: dict[KnowledgeArea, float] = {}
        for config in knowledge_area_mix:
            actual = (counts[config.area] / total) * 100 if total > 0 else 0.0
            result[config.area] = config.percentage - actual
        return result

    def _weighted_random(self, knowledge_area_mix: Sequence[KnowledgeAreaConfig]) -> KnowledgeArea:
        total_weight = sum(config.percentage for config in knowledge_area_mix)
        remainder = self.rng.random() * total_weight

        for config in knowledge_area_mix:
            remainder -= config.percentage
            if remainder <= 0:
                return config.area

        # Floating point residue
        return knowledge_area_mix[-1].area
