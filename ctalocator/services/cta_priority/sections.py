"""Page section classification and order-preserving grouping."""

import logging
from typing import Dict, List, Optional, Sequence

from ctalocator.core.config import BELOW_FOLD_SECTION, ScoringConfig

from .models import CTACandidate

logger = logging.getLogger(__name__)


def determine_page_section(
    y: float,
    page_height: Optional[float] = None,
    config: Optional[ScoringConfig] = None,
) -> str:
    """Map a vertical pixel position to a page zone.

    Ranges are tested in table order (header, hero, features, testimonials,
    footer). The catch-all is only used when no other range matches, so
    boundary values always land in the range that starts at them.

    Args:
        y: Scroll-adjusted top edge of the element.
        page_height: Accepted for signature parity; the canonical table does
            not depend on it.
        config: Scoring configuration carrying the section table.

    Returns:
        Section name.
    """
    config = config or ScoringConfig()

    for section in config.sections:
        if section.name == BELOW_FOLD_SECTION:
            continue
        if section.contains(y):
            return section.name

    return BELOW_FOLD_SECTION


def group_by_section(
    candidates: Sequence[CTACandidate],
    page_height: Optional[float] = None,
    config: Optional[ScoringConfig] = None,
) -> Dict[str, List[CTACandidate]]:
    """Stable group-by: sections appear in first-seen order, members keep input order."""
    config = config or ScoringConfig()

    grouped: Dict[str, List[CTACandidate]] = {}
    for candidate in candidates:
        section = determine_page_section(candidate.coordinates.y, page_height, config)
        grouped.setdefault(section, []).append(candidate)

    counts = {name: len(members) for name, members in grouped.items()}
    logger.debug(f"Grouped {len(candidates)} candidates into sections: {counts}")
    return grouped
