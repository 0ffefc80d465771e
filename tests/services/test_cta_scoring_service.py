"""
Tests for the CTA priority scoring service: section classification,
score_cta, primary selection with tie-breaks and threshold gate,
distribution summary, and quick analysis.
"""

import math
import pytest

from ctalocator.core.config import ScoringConfig, SectionRange
from ctalocator.core.models import ElementCoordinates, ImageSize
from ctalocator.services.cta_priority import (
    CTACandidate,
    ScoringContext,
    analyze_cta_distribution,
    build_scoring_context,
    determine_page_section,
    find_primary_cta,
    group_by_section,
    quick_cta_analysis,
    score_cta,
    select_primary_cta,
)

DESKTOP = ImageSize(width=1920, height=1080)


def _cand(text="Buy Now", x=100, y=300, width=120, height=40, **overrides):
    """Create a CTACandidate with sensible defaults."""
    defaults = {
        "text": text,
        "coordinates": ElementCoordinates(x=x, y=y, width=width, height=height),
        "kind": "button",
        "has_button_appearance": True,
    }
    defaults.update(overrides)
    return CTACandidate(**defaults)


def _context(candidates, page_height=3000, **overrides):
    return build_scoring_context(candidates, page_height, **overrides)


# ============================================================================
# Section classification
# ============================================================================

class TestDeterminePageSection:
    """Half-open ranges, header and hero tested first, below-fold as catch-all."""

    @pytest.mark.parametrize("y,expected", [
        (0, "header"),
        (149, "header"),
        (150, "hero"),
        (799, "hero"),
        (800, "features"),
        (1000, "features"),
        (1499, "features"),
        (1500, "testimonials"),
        (1999, "testimonials"),
        (2000, "footer"),
        (50000, "footer"),
    ])
    def test_boundaries(self, y, expected):
        assert determine_page_section(y, 3000) == expected

    def test_unmatched_falls_to_below_fold(self):
        assert determine_page_section(-20, 3000) == "below-fold"

    def test_custom_table(self):
        config = ScoringConfig(sections=(
            SectionRange("header", 0, 100, 8),
            SectionRange("hero", 100, 600, 10),
            SectionRange("below-fold", 600, math.inf, 3),
        ))
        assert determine_page_section(99, config=config) == "header"
        assert determine_page_section(100, config=config) == "hero"
        assert determine_page_section(600, config=config) == "below-fold"

    def test_deterministic(self):
        assert all(determine_page_section(420, 3000) == "hero" for _ in range(5))


class TestGroupBySection:

    def test_preserves_first_seen_order(self):
        footer = _cand(text="Privacy", y=2100)
        hero_a = _cand(text="Sign Up", y=300)
        header = _cand(text="Login", y=20)
        hero_b = _cand(text="Learn More", y=500)

        grouped = group_by_section([footer, hero_a, header, hero_b], 3000)

        assert list(grouped.keys()) == ["footer", "hero", "header"]
        assert grouped["hero"] == [hero_a, hero_b]


# ============================================================================
# score_cta
# ============================================================================

class TestScoreCTA:

    def test_single_hero_shop_link(self):
        shop = _cand(text="Shop", x=900, y=400, kind="link", has_button_appearance=False)
        context = _context([shop])

        scored = score_cta(shop, [shop], [shop], context, DESKTOP)

        assert scored.section == "hero"
        assert scored.breakdown.to_dict() == {
            "location": 2,
            "text_intent": 3,
            "visual_prominence": 0,
            "singularity": 2,
            "context_alignment": 1,
            "adjustments": 0,
        }
        assert scored.base_score == 8
        assert scored.adjusted_score == 8

    def test_adjusted_equals_base_plus_adjustments(self):
        candidate = _cand(text="Start free trial", x=100, y=100)
        context = _context([candidate], has_value_proposition=True, has_urgency_text=True)

        scored = score_cta(candidate, [candidate], [candidate], context, DESKTOP)

        assert scored.adjusted_score == scored.base_score + scored.breakdown.adjustments
        assert 0 <= scored.breakdown.adjustments <= 5

    def test_accepts_dict_image_size(self):
        candidate = _cand()
        context = _context([candidate])
        scored = score_cta(candidate, [candidate], [candidate], context, {"width": 1920, "height": 1080})
        assert scored.text == "Buy Now"


# ============================================================================
# select_primary_cta / find_primary_cta
# ============================================================================

class TestFindPrimaryCTA:

    def test_empty_candidates(self):
        context = ScoringContext(page_height=3000)
        result = select_primary_cta([], context, DESKTOP)
        assert result.empty
        assert result.reason == "no_candidates"
        assert find_primary_cta([], context, DESKTOP) is None

    def test_single_hero_candidate_is_primary(self):
        shop = _cand(text="Shop", x=900, y=400, kind="link", has_button_appearance=False, is_above_fold=True)
        primary = find_primary_cta([shop], _context([shop]), DESKTOP)

        assert primary is not None
        assert primary.section == "hero"
        assert primary.candidate is shop

    def test_footer_only_page_has_no_primary(self):
        texts = ["Privacy Policy", "Terms of Use", "Cookie Settings", "Sitemap"]
        candidates = [
            _cand(text=t, x=100 + i * 150, y=2100, kind="link", has_button_appearance=False)
            for i, t in enumerate(texts)
        ]
        image = ImageSize(width=1920, height=2500)
        context = _context(candidates, page_height=2500)

        result = select_primary_cta(candidates, context, image)

        assert result.primary is None
        assert result.empty
        assert result.reason == "below_threshold"
        assert all(s.breakdown.location == 0 for s in result.scored)
        assert all(s.adjusted_score < 6 for s in result.scored)

    def test_threshold_gate_applies_regardless_of_count(self):
        candidates = [_cand(text="Buy Now", y=300 + i * 10) for i in range(10)]
        config = ScoringConfig(min_score_threshold=100)
        result = select_primary_cta(candidates, _context(candidates), DESKTOP, config)
        assert result.primary is None
        assert result.reason == "below_threshold"
        assert len(result.scored) == 10

    def test_strong_hero_beats_navigation(self):
        nav = [_cand(text=t, x=100 + i * 100, y=40, kind="link", has_button_appearance=False)
               for i, t in enumerate(["Mac", "iPad", "Support"])]
        hero = _cand(text="Get Started", x=860, y=450, width=200, height=60,
                     has_prominent_appearance=True)
        candidates = nav + [hero]

        primary = find_primary_cta(candidates, _context(candidates, has_value_proposition=True), DESKTOP)

        assert primary is not None
        assert primary.candidate is hero

    def test_tie_in_section_goes_to_first_encountered(self):
        first = _cand(text="Sign Up", x=100, y=300)
        second = _cand(text="Sign Up", x=100, y=500)

        result = select_primary_cta([first, second], _context([first, second]), DESKTOP)
        assert result.scored[0].adjusted_score == result.scored[1].adjusted_score
        assert result.primary.candidate is first

        result = select_primary_cta([second, first], _context([second, first]), DESKTOP)
        assert result.primary.candidate is second

    def test_tie_across_sections_goes_to_first_encountered(self):
        header = _cand(text="Sign Up", x=100, y=50)
        hero = _cand(text="Sign Up", x=100, y=300)

        result = select_primary_cta([header, hero], _context([header, hero]), DESKTOP)
        assert result.section_champions["header"].adjusted_score == \
            result.section_champions["hero"].adjusted_score
        assert result.primary.candidate is header

        result = select_primary_cta([hero, header], _context([hero, header]), DESKTOP)
        assert result.primary.candidate is hero

    def test_section_champions_recorded(self):
        header = _cand(text="Login", x=1700, y=40, kind="link", has_button_appearance=False)
        hero = _cand(text="Get Started", x=860, y=450)
        result = select_primary_cta([header, hero], _context([header, hero]), DESKTOP)

        assert set(result.section_champions) == {"header", "hero"}
        assert result.primary.section == "hero"
        assert not result.empty
        assert result.reason is None

    def test_idempotent(self):
        candidates = [
            _cand(text="Get Started", x=860, y=450),
            _cand(text="Learn More", x=400, y=900, kind="link", has_button_appearance=False),
            _cand(text="Contact", x=100, y=1700),
        ]
        context = _context(candidates, has_value_proposition=True)

        first = select_primary_cta(candidates, context, DESKTOP)
        second = select_primary_cta(candidates, context, DESKTOP)

        assert [s.breakdown for s in first.scored] == [s.breakdown for s in second.scored]
        assert first.primary.candidate is second.primary.candidate


# ============================================================================
# analyze_cta_distribution
# ============================================================================

class TestAnalyzeCTADistribution:

    def test_distribution(self):
        candidates = [
            _cand(text="Get Started", x=860, y=450),
            _cand(text="Learn More", x=400, y=500, kind="link", has_button_appearance=False),
            _cand(text="Contact", x=100, y=1700),
        ]
        result = select_primary_cta(candidates, _context(candidates), DESKTOP)
        summary = analyze_cta_distribution(result.scored)

        assert summary["section_distribution"] == {"hero": 2, "testimonials": 1}
        scores = [s.adjusted_score for s in result.scored]
        assert summary["score_distribution"]["min"] == min(scores)
        assert summary["score_distribution"]["max"] == max(scores)
        assert summary["score_distribution"]["avg"] == pytest.approx(sum(scores) / 3)
        assert summary["top_candidates_by_section"]["hero"].text == "Get Started"

    def test_empty(self):
        summary = analyze_cta_distribution([])
        assert summary["section_distribution"] == {}
        assert summary["score_distribution"] == {"min": 0, "max": 0, "avg": 0.0}


# ============================================================================
# quick_cta_analysis
# ============================================================================

class TestQuickCTAAnalysis:

    def test_builds_context(self):
        hero = _cand(text="Start free trial", x=860, y=450)
        primary = quick_cta_analysis([hero], 3000, DESKTOP, has_value_proposition=True)
        assert primary is not None
        assert primary.breakdown.context_alignment == 2

    def test_empty(self):
        assert quick_cta_analysis([], 3000, DESKTOP) is None
