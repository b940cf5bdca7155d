"""
Unit Tests for Knowledge Area Selector

Deficit-first selection and the weighted random fallback.
"""

import random

import pytest
from conftest import make_assessment, make_response

from adaptassess.assessment.selector import KnowledgeAreaSelector
from adaptassess.assessment.types import KnowledgeArea

LANG = KnowledgeArea.PROGRAMMING_LANGUAGE
ALGO = KnowledgeArea.ALGORITHMS_DATA_STRUCTURES
MATH = KnowledgeArea.QUANTITATIVE_MATH


@pytest.fixture
def selector() -> KnowledgeAreaSelector:
    return KnowledgeAreaSelector(random.Random(42))


class TestDeficitSelection:
    """Areas below their target share are filled first."""

    def test_empty_log_picks_largest_target(self, selector):
        """With nothing answered every deficit equals its target."""
        assessment = make_assessment({LANG: 30, ALGO: 70})

        assert selector.select(assessment.knowledge_area_mix, []) == ALGO

    def test_all_answers_in_one_area_picks_the_other(self, selector):
        """Mix {A:60, B:40} with 5 answers all in A must return B."""
        assessment = make_assessment({LANG: 60, ALGO: 40})
        responses = [make_response(LANG, True) for _ in range(5)]

        assert selector.select(assessment.knowledge_area_mix, responses) == ALGO

    def test_tie_goes_to_first_configured_area(self, selector):
        assessment = make_assessment({MATH: 50, LANG: 50})

        assert selector.select(assessment.knowledge_area_mix, []) == MATH

    def test_returns_a_maximal_deficit_area(self, selector):
        assessment = make_assessment({LANG: 50, ALGO: 30, MATH: 20})
        responses = [make_response(LANG, True), make_response(LANG, False)]

        deficits = KnowledgeAreaSelector.deficits(assessment.knowledge_area_mix, responses)
        chosen = selector.select(assessment.knowledge_area_mix, responses)

        assert deficits[chosen] == max(deficits.values())
        assert chosen == ALGO

    def test_deficits_use_total_answer_count(self):
        assessment = make_assessment({LANG: 60, ALGO: 40})
        responses = [make_response(LANG, True)] * 3 + [make_response(ALGO, True)]

        deficits = KnowledgeAreaSelector.deficits(assessment.knowledge_area_mix, responses)

        assert deficits[LANG] == pytest.approx(-15.0)
        assert deficits[ALGO] == pytest.approx(15.0)

    def test_empty_mix_is_rejected(self, selector):
        with pytest.raises(ValueError):
            selector.select([], [])


class TestWeightedFallback:
    """When every area is on target the draw follows the configured weights."""

    def test_on_target_distribution_uses_weighted_draw(self):
        assessment = make_assessment({LANG: 50, ALGO: 50})
        responses = [make_response(LANG, True), make_response(ALGO, True)]
        rng = random.Random(0)
        selector = KnowledgeAreaSelector(rng)

        picks = {selector.select(assessment.knowledge_area_mix, responses) for _ in range(50)}

        assert picks == {LANG, ALGO}

    def test_draw_walks_areas_in_order(self):
        """A draw in the first 60% of the weight lands on the first area."""
        assessment = make_assessment({LANG: 60, ALGO: 40})
        responses = [make_response(LANG, True)] * 3 + [make_response(ALGO, True)] * 2

        low = random.Random()
        low.random = lambda: 0.10  # type: ignore[method-assign]
        high = random.Random()
        high.random = lambda: 0.95  # type: ignore[method-assign]

        assert KnowledgeAreaSelector(low).select(assessment.knowledge_area_mix, responses) == LANG
        assert KnowledgeAreaSelector(high).select(assessment.knowledge_area_mix, responses) == ALGO

    def test_never_returns_an_unconfigured_area(self, selector):
        assessment = make_assessment({LANG: 25, ALGO: 25, MATH: 50})
        responses = []
        for _ in range(40):
            area = selector.select(assessment.knowledge_area_mix, responses)
            assert area in assessment.areas
            responses.append(make_response(area, True))

    def test_long_run_converges_on_mix(self, selector):
        assessment = make_assessment({LANG: 60, ALGO: 40})
        responses = []
        for _ in range(20):
            area = selector.select(assessment.knowledge_area_mix, responses)
            responses.append(make_response(area, True))

        lang_share = sum(1 for r in responses if r.knowledge_area == LANG) / len(responses)
        assert lang_share == pytest.approx(0.6, abs=0.1)
