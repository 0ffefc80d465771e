"""
CTA Priority Scoring - Primary CTA detection from DOM candidates.

Scores every interactive element on five rules (location, text intent,
visual prominence, singularity, context alignment) plus an adjustment
layer, then picks a per-section champion and a global champion gated by
a minimum score.
"""

from ctalocator.services.cta_priority.candidates import (
    build_scoring_context,
    candidates_from_dom,
    make_candidate,
)
from ctalocator.services.cta_priority.models import (
    CTACandidate,
    PrimaryCTAResult,
    RuleContext,
    ScoreBreakdown,
    ScoredCandidate,
    ScoringContext,
)
from ctalocator.services.cta_priority.rules import (
    DEFAULT_RULES,
    ContextAlignmentRule,
    CTARule,
    LocationRule,
    SingularityRule,
    TextIntentRule,
    VisualProminenceRule,
    calculate_adjustments,
    score_text_intent,
)
from ctalocator.services.cta_priority.scoring_service import (
    analyze_cta_distribution,
    find_primary_cta,
    quick_cta_analysis,
    score_cta,
    select_primary_cta,
)
from ctalocator.services.cta_priority.sections import (
    determine_page_section,
    group_by_section,
)

__all__ = [
    "CTACandidate",
    "PrimaryCTAResult",
    "RuleContext",
    "ScoreBreakdown",
    "ScoredCandidate",
    "ScoringContext",
    "CTARule",
    "DEFAULT_RULES",
    "LocationRule",
    "TextIntentRule",
    "VisualProminenceRule",
    "SingularityRule",
    "ContextAlignmentRule",
    "calculate_adjustments",
    "score_text_intent",
    "determine_page_section",
    "group_by_section",
    "make_candidate",
    "candidates_from_dom",
    "build_scoring_context",
    "score_cta",
    "select_primary_cta",
    "find_primary_cta",
    "analyze_cta_distribution",
    "quick_cta_analysis",
]
