"""
CTA Priority Rules — five base scorers plus the adjustment layer.

Base scorers (max 12 points):
    LocationRule            0-2   step function of y
    TextIntentRule         -1-3   lexical intent of the label
    VisualProminenceRule    0-3   size vs. page average + button/prominent styling
    SingularityRule         0-2   how alone the candidate is in its section
    ContextAlignmentRule    0-2   label matches the page's value proposition

Adjustment layer (additive, capped at ScoringConfig.max_adjustments):
    motivation, upper-left side bias, Z-pattern endpoint, call-to-value,
    long-page below-fold relief.

Each rule is stateless: score(candidate, ctx) -> int. All inputs live in
the candidate or in RuleContext.
"""

import logging
from abc import ABC, abstractmethod
from typing import Optional, Tuple

import numpy as np

from ctalocator.core.config import ScoringConfig

from .models import CTACandidate, RuleContext

logger = logging.getLogger(__name__)


# ============================================================================
# Score tables
# ============================================================================

LOCATION_SCORES = {
    "above-fold": 2,
    "mid-page": 1,
    "below-fold": 0,
}

TEXT_INTENT_SCORES = {
    "strong": 3,    # "Buy Now", "Start Trial", "Sign Up"
    "medium": 2,    # "Request Demo", "Contact Sales"
    "low": 1,       # any other label
    "passive": 0,   # "Click Here", "More Info"
    "navigation": -1,
}

VISUAL_PROMINENCE_SCORES = {
    "high": 3,
    "medium": 2,
    "low": 1,
    "hidden": 0,
}

SINGULARITY_SCORES = {
    "unique": 2,
    "primary": 1,
    "competing": 0,
}

CONTEXT_ALIGNMENT_SCORES = {
    "perfect": 2,
    "partial": 1,
    "none": 0,
}


# ============================================================================
# Shared helpers
# ============================================================================

def score_text_intent(text: str, config: Optional[ScoringConfig] = None) -> int:
    """Priority-scorer text intent on a -1..3 scale.

    Checked in strict order: navigation terms, strong verbs, medium verbs,
    passive phrases, then any other non-empty label.
    """
    config = config or ScoringConfig()
    lower_text = (text or "").lower().strip()

    if any(lower_text == term or term in lower_text for term in config.navigation_terms):
        return TEXT_INTENT_SCORES["navigation"]

    if any(verb in lower_text for verb in config.strong_action_verbs):
        return TEXT_INTENT_SCORES["strong"]

    if any(verb in lower_text for verb in config.medium_action_verbs):
        return TEXT_INTENT_SCORES["medium"]

    if any(phrase in lower_text for phrase in config.passive_phrases):
        return TEXT_INTENT_SCORES["passive"]

    if lower_text and "click here" not in lower_text:
        return TEXT_INTENT_SCORES["low"]

    return TEXT_INTENT_SCORES["passive"]


def detect_button_appearance(
    class_name: str,
    kind: str,
    has_button_styling: bool = False,
    config: Optional[ScoringConfig] = None,
) -> bool:
    """Capability predicate: does the element look like a button?"""
    config = config or ScoringConfig()
    lower = (class_name or "").lower()
    return (
        has_button_styling
        or kind == "button"
        or any(hint in lower for hint in config.button_class_hints)
    )


def detect_prominent_appearance(class_name: str, config: Optional[ScoringConfig] = None) -> bool:
    """Capability predicate: does the element carry a primary/cta/action style hint?"""
    config = config or ScoringConfig()
    lower = (class_name or "").lower()
    return any(hint in lower for hint in config.prominent_class_hints)


# ============================================================================
# Rule interface
# ============================================================================

class CTARule(ABC):
    """Base class for CTA scoring rules.

    Each rule implements one method: score(candidate, ctx) -> int.
    """
    name: str
    max_score: int

    @abstractmethod
    def score(self, candidate: CTACandidate, ctx: RuleContext) -> int:
        ...


class LocationRule(CTARule):
    """Above the fold line → 2, up to the mid-page line → 1, else 0."""
    name = "location"
    max_score = 2

    def score(self, candidate: CTACandidate, ctx: RuleContext) -> int:
        y = candidate.coordinates.y
        if y <= ctx.config.fold_line:
            return LOCATION_SCORES["above-fold"]
        if y <= ctx.config.mid_page_line:
            return LOCATION_SCORES["mid-page"]
        return LOCATION_SCORES["below-fold"]


class TextIntentRule(CTARule):
    """Lexical intent of the label. Navigation terms score below passive copy."""
    name = "text_intent"
    max_score = 3

    def score(self, candidate: CTACandidate, ctx: RuleContext) -> int:
        return score_text_intent(candidate.text, ctx.config)


class VisualProminenceRule(CTARule):
    """Size relative to the mean candidate area, combined with styling.

    sizeRatio > 1.5 and button and prominent → 3
    sizeRatio > 1.2 and button               → 2
    button or sizeRatio > 1.0                → 1
    otherwise                                → 0
    """
    name = "visual_prominence"
    max_score = 3

    def score(self, candidate: CTACandidate, ctx: RuleContext) -> int:
        pool = ctx.all_candidates or [candidate]
        mean_area = float(np.mean([c.coordinates.area for c in pool]))
        size_ratio = candidate.coordinates.area / mean_area if mean_area > 0 else 0.0

        is_button = candidate.has_button_appearance
        is_prominent = candidate.has_prominent_appearance

        if size_ratio > 1.5 and is_button and is_prominent:
            return VISUAL_PROMINENCE_SCORES["high"]
        if size_ratio > 1.2 and is_button:
            return VISUAL_PROMINENCE_SCORES["medium"]
        if is_button or size_ratio > 1.0:
            return VISUAL_PROMINENCE_SCORES["low"]
        return VISUAL_PROMINENCE_SCORES["hidden"]


class SingularityRule(CTARule):
    """Alone in its section → 2. Among 2-3, above-average text intent → 1. Crowded → 0."""
    name = "singularity"
    max_score = 2

    def score(self, candidate: CTACandidate, ctx: RuleContext) -> int:
        section_candidates = ctx.section_candidates or [candidate]
        count = len(section_candidates)

        if count == 1:
            return SINGULARITY_SCORES["unique"]

        if count <= 3:
            this_score = score_text_intent(candidate.text, ctx.config)
            avg_score = sum(score_text_intent(c.text, ctx.config) for c in section_candidates) / count
            if this_score > avg_score:
                return SINGULARITY_SCORES["primary"]

        return SINGULARITY_SCORES["competing"]


class ContextAlignmentRule(CTARule):
    """Perfect-alignment phrase on a page with a value proposition → 2; strong/medium intent → 1."""
    name = "context_alignment"
    max_score = 2

    def score(self, candidate: CTACandidate, ctx: RuleContext) -> int:
        lower_text = candidate.text.lower()
        has_perfect = any(phrase in lower_text for phrase in ctx.config.perfect_alignment_phrases)

        if has_perfect and ctx.scoring.has_value_proposition:
            return CONTEXT_ALIGNMENT_SCORES["perfect"]

        if score_text_intent(candidate.text, ctx.config) >= TEXT_INTENT_SCORES["medium"]:
            return CONTEXT_ALIGNMENT_SCORES["partial"]

        return CONTEXT_ALIGNMENT_SCORES["none"]


DEFAULT_RULES: Tuple[CTARule, ...] = (
    LocationRule(),
    TextIntentRule(),
    VisualProminenceRule(),
    SingularityRule(),
    ContextAlignmentRule(),
)


# ============================================================================
# Adjustment layer
# ============================================================================

def calculate_adjustments(candidate: CTACandidate, ctx: RuleContext) -> int:
    """Additive +1 boosts, capped at config.max_adjustments.

    1. Motivation: value proposition and urgency copy both present.
    2. Side bias: candidate center in the upper-left quadrant of the image.
    3. Z-pattern endpoint: x beyond 70% of the width, in the upper half or bottom 20%.
    4. Call-to-value: label mentions save / free / trial / %.
    5. Long page: page taller than the long-page threshold and candidate below the fold.
    """
    coords = candidate.coordinates
    width = ctx.image_size.width
    height = ctx.image_size.height
    adjustments = 0

    if ctx.scoring.has_value_proposition and ctx.scoring.has_urgency_text:
        adjustments += 1

    if coords.center_x < width / 2 and coords.center_y < height / 2:
        adjustments += 1

    upper_half = coords.y < height / 2
    bottom_band = coords.y > height * 0.8
    if coords.x > width * 0.7 and (upper_half or bottom_band):
        adjustments += 1

    lower_text = candidate.text.lower()
    if any(keyword in lower_text for keyword in ctx.config.value_keywords):
        adjustments += 1

    if ctx.scoring.page_height > ctx.config.long_page_threshold and coords.y > ctx.config.fold_line:
        adjustments += 1

    return min(adjustments, ctx.config.max_adjustments)
