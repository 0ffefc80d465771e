"""
Services layer for CTA Locator.

Provides the primary CTA scorer (cta_priority) and the AI-guess
matcher (cta_matcher).
"""

from .cta_priority import (
    CTACandidate,
    ScoringContext,
    ScoredCandidate,
    PrimaryCTAResult,
    find_primary_cta,
    select_primary_cta,
    quick_cta_analysis,
)
from .cta_matcher import (
    CTAMatcher,
    MatchedElement,
    MatchResult,
)

__all__ = [
    "CTACandidate",
    "ScoringContext",
    "ScoredCandidate",
    "PrimaryCTAResult",
    "find_primary_cta",
    "select_primary_cta",
    "quick_cta_analysis",
    "CTAMatcher",
    "MatchedElement",
    "MatchResult",
]
