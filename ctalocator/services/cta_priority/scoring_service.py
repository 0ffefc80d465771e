"""
CTA Priority Scoring Service — picks the page's primary call-to-action.

Usage:
    from ctalocator.services.cta_priority import (
        candidates_from_dom, build_scoring_context, select_primary_cta,
    )

    candidates = candidates_from_dom(snapshot)
    context = build_scoring_context(candidates, page_height=snapshot.page_height)

    result = select_primary_cta(candidates, context, ImageSize(width=1920, height=1080))
    if result.empty:
        print(result.reason)            # "no_candidates" | "below_threshold"
    else:
        print(result.primary.text, result.primary.breakdown.to_dict())
"""

import logging
from typing import Any, Dict, List, Optional, Sequence, Union

from ctalocator.core.config import ScoringConfig
from ctalocator.core.models import ImageSize

from .candidates import build_scoring_context
from .models import (
    CTACandidate,
    PrimaryCTAResult,
    RuleContext,
    ScoreBreakdown,
    ScoredCandidate,
    ScoringContext,
)
from .rules import DEFAULT_RULES, calculate_adjustments
from .sections import determine_page_section, group_by_section

logger = logging.getLogger(__name__)

ImageSizeLike = Union[ImageSize, Dict[str, float]]


def _as_image_size(image_size: ImageSizeLike) -> ImageSize:
    if isinstance(image_size, ImageSize):
        return image_size
    return ImageSize(**image_size)


def score_cta(
    candidate: CTACandidate,
    all_candidates: Sequence[CTACandidate],
    section_candidates: Sequence[CTACandidate],
    context: ScoringContext,
    image_size: ImageSizeLike,
    config: Optional[ScoringConfig] = None,
) -> ScoredCandidate:
    """Score a single candidate.

    Visual prominence is measured against all_candidates; singularity only
    against section_candidates.

    Returns:
        ScoredCandidate with base score (sum of the five rules), adjusted
        score (base + adjustments) and per-rule breakdown.
    """
    config = config or ScoringConfig()
    ctx = RuleContext(
        scoring=context,
        all_candidates=all_candidates,
        section_candidates=section_candidates,
        image_size=_as_image_size(image_size),
        config=config,
    )

    rule_scores = {rule.name: rule.score(candidate, ctx) for rule in DEFAULT_RULES}
    breakdown = ScoreBreakdown(
        **rule_scores,
        adjustments=calculate_adjustments(candidate, ctx),
    )

    base_score = breakdown.base_score
    return ScoredCandidate(
        candidate=candidate,
        base_score=base_score,
        adjusted_score=base_score + breakdown.adjustments,
        section=determine_page_section(candidate.coordinates.y, context.page_height, config),
        breakdown=breakdown,
    )


def _champion(scored: Sequence[ScoredCandidate]) -> ScoredCandidate:
    """Highest adjusted score; ties go to the first encountered."""
    best = scored[0]
    for current in scored[1:]:
        if current.adjusted_score > best.adjusted_score:
            best = current
    return best


def select_primary_cta(
    candidates: Sequence[CTACandidate],
    context: ScoringContext,
    image_size: ImageSizeLike,
    config: Optional[ScoringConfig] = None,
) -> PrimaryCTAResult:
    """Score every candidate and pick the primary CTA.

    Algorithm:
        1. Group candidates by section (stable, first-seen order)
        2. Score each candidate against the full list and its section
        3. Pick a champion per section by adjusted score
        4. Pick the global champion among section champions
        5. Gate: below config.min_score_threshold → no primary CTA

    Ties at steps 3 and 4 go to the first-encountered candidate.

    Args:
        candidates: Candidates in document order.
        context: Page-level scoring context.
        image_size: Screenshot dimensions (width, height).
        config: Scoring configuration.

    Returns:
        PrimaryCTAResult. Check `empty`; `reason` explains why nothing was picked.
    """
    config = config or ScoringConfig()

    if not candidates:
        return PrimaryCTAResult(empty=True, reason="no_candidates")

    image_size = _as_image_size(image_size)
    grouped = group_by_section(candidates, context.page_height, config)

    scored: List[ScoredCandidate] = []
    section_champions: Dict[str, ScoredCandidate] = {}

    for section, section_candidates in grouped.items():
        section_scored = [
            score_cta(candidate, candidates, section_candidates, context, image_size, config)
            for candidate in section_candidates
        ]
        scored.extend(section_scored)
        section_champions[section] = _champion(section_scored)
        logger.debug(
            f"Section '{section}' champion: '{section_champions[section].text}' "
            f"(adjusted={section_champions[section].adjusted_score})"
        )

    primary = _champion(list(section_champions.values()))

    if primary.adjusted_score < config.min_score_threshold:
        logger.info(
            f"No primary CTA: best candidate '{primary.text}' scored "
            f"{primary.adjusted_score} < {config.min_score_threshold}"
        )
        return PrimaryCTAResult(
            scored=scored,
            section_champions=section_champions,
            empty=True,
            reason="below_threshold",
        )

    logger.info(
        f"Primary CTA: '{primary.text}' in {primary.section} "
        f"(base={primary.base_score}, adjusted={primary.adjusted_score})"
    )
    return PrimaryCTAResult(
        primary=primary,
        scored=scored,
        section_champions=section_champions,
        empty=False,
    )


def find_primary_cta(
    candidates: Sequence[CTACandidate],
    context: ScoringContext,
    image_size: ImageSizeLike,
    config: Optional[ScoringConfig] = None,
) -> Optional[ScoredCandidate]:
    """Return the primary CTA, or None when there is no clear winner."""
    return select_primary_cta(candidates, context, image_size, config).primary


def analyze_cta_distribution(scored_candidates: Sequence[ScoredCandidate]) -> Dict[str, Any]:
    """Summarize how scored candidates spread across sections.

    Returns:
        {section_distribution: {section: count},
         score_distribution: {min, max, avg},
         top_candidates_by_section: {section: ScoredCandidate}}
    """
    section_distribution: Dict[str, int] = {}
    top_candidates_by_section: Dict[str, ScoredCandidate] = {}

    for candidate in scored_candidates:
        section = candidate.section
        section_distribution[section] = section_distribution.get(section, 0) + 1

        top = top_candidates_by_section.get(section)
        if top is None or candidate.adjusted_score > top.adjusted_score:
            top_candidates_by_section[section] = candidate

    scores = [c.adjusted_score for c in scored_candidates]
    if scores:
        score_distribution = {
            "min": min(scores),
            "max": max(scores),
            "avg": sum(scores) / len(scores),
        }
    else:
        score_distribution = {"min": 0, "max": 0, "avg": 0.0}

    return {
        "section_distribution": section_distribution,
        "score_distribution": score_distribution,
        "top_candidates_by_section": top_candidates_by_section,
    }


def quick_cta_analysis(
    candidates: Sequence[CTACandidate],
    page_height: Optional[float],
    image_size: ImageSizeLike,
    has_value_proposition: bool = False,
    has_urgency_text: bool = False,
    config: Optional[ScoringConfig] = None,
) -> Optional[ScoredCandidate]:
    """Build the scoring context from raw page facts and find the primary CTA."""
    config = config or ScoringConfig()
    context = build_scoring_context(
        candidates,
        page_height,
        has_value_proposition=has_value_proposition,
        has_urgency_text=has_urgency_text,
        config=config,
    )
    return find_primary_cta(candidates, context, image_size, config)
