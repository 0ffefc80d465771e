"""
CTA Matcher - anchors an AI-produced CTA guess to a concrete DOM element.

Similarity scoring, a location/text/visual prominence model distinct from
the priority scorer, and a hero-first selection cascade.
"""

from ctalocator.services.cta_matcher.matcher_service import CTAMatcher
from ctalocator.services.cta_matcher.models import (
    FORM_WITH_BUTTON,
    DebugMatch,
    MatchedElement,
    MatchResult,
)
from ctalocator.services.cta_matcher.prominence import (
    calculate_priority,
    calculate_visual_prominence,
    detect_supporting_text,
    estimate_color_prominence,
    score_match_text_intent,
)
from ctalocator.services.cta_matcher.similarity import (
    best_similarity,
    calculate_similarity,
)

__all__ = [
    "CTAMatcher",
    "MatchedElement",
    "DebugMatch",
    "MatchResult",
    "FORM_WITH_BUTTON",
    "calculate_similarity",
    "best_similarity",
    "calculate_priority",
    "score_match_text_intent",
    "calculate_visual_prominence",
    "detect_supporting_text",
    "estimate_color_prominence",
]
