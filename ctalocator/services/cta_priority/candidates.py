"""Adapters from a captured DOM snapshot to CTA candidates and scoring context."""

import logging
from typing import List, Optional, Sequence

from ctalocator.core.config import ScoringConfig
from ctalocator.core.models import DOMSnapshot, ElementCoordinates

from .models import CTACandidate, ScoringContext
from .rules import detect_button_appearance, detect_prominent_appearance
from .sections import group_by_section

logger = logging.getLogger(__name__)


def make_candidate(
    text: str,
    coordinates: ElementCoordinates,
    kind: str = "button",
    class_name: str = "",
    has_button_styling: bool = False,
    is_visible: bool = True,
    is_above_fold: bool = False,
    form_action: Optional[str] = None,
    config: Optional[ScoringConfig] = None,
) -> CTACandidate:
    """Build a candidate, deriving the appearance predicates once from its style hints."""
    config = config or ScoringConfig()
    return CTACandidate(
        text=text,
        coordinates=coordinates,
        kind=kind,
        class_name=class_name,
        has_button_appearance=detect_button_appearance(class_name, kind, has_button_styling, config),
        has_prominent_appearance=detect_prominent_appearance(class_name, config),
        is_visible=is_visible,
        is_above_fold=is_above_fold,
        form_action=form_action,
    )


def candidates_from_dom(
    snapshot: DOMSnapshot,
    config: Optional[ScoringConfig] = None,
) -> List[CTACandidate]:
    """Convert a DOM snapshot into candidates in document order.

    Buttons first, then links, then forms (labelled by their submit button).
    Invisible elements and elements without text are skipped.

    Args:
        snapshot: Validated DOM snapshot from the capture layer.
        config: Scoring configuration (style hint vocabularies).

    Returns:
        List of CTACandidate.
    """
    config = config or ScoringConfig()
    candidates: List[CTACandidate] = []

    for button in snapshot.buttons:
        if not button.is_visible or not button.text.strip():
            continue
        candidates.append(make_candidate(
            text=button.text.strip(),
            coordinates=button.coordinates,
            kind="button",
            class_name=button.class_name,
            is_visible=button.is_visible,
            is_above_fold=button.is_above_fold,
            form_action=button.form_action,
            config=config,
        ))

    for link in snapshot.links:
        if not link.is_visible or not link.text.strip():
            continue
        candidates.append(make_candidate(
            text=link.text.strip(),
            coordinates=link.coordinates,
            kind="link",
            class_name=link.class_name,
            has_button_styling=link.has_button_styling,
            is_visible=link.is_visible,
            is_above_fold=link.is_above_fold,
            config=config,
        ))

    for form in snapshot.forms:
        label = form.submit_button_text.strip()
        if not label:
            continue
        candidates.append(make_candidate(
            text=label,
            coordinates=form.coordinates,
            kind="form",
            has_button_styling=form.has_submit_button,
            is_above_fold=form.is_above_fold,
            form_action=form.action or None,
            config=config,
        ))

    logger.debug(
        f"Extracted {len(candidates)} candidates from DOM snapshot "
        f"({len(snapshot.buttons)} buttons, {len(snapshot.links)} links, {len(snapshot.forms)} forms)"
    )
    return candidates


def build_scoring_context(
    candidates: Sequence[CTACandidate],
    page_height: Optional[float],
    has_value_proposition: bool = False,
    has_urgency_text: bool = False,
    config: Optional[ScoringConfig] = None,
) -> ScoringContext:
    """Compute total and per-section candidate counts for a page.

    When the capture layer did not report a page height, the lowest
    candidate bottom edge stands in for it (0 for an empty page).
    """
    config = config or ScoringConfig()
    if page_height is None:
        page_height = max(
            (c.coordinates.y + c.coordinates.height for c in candidates),
            default=0.0,
        )
        logger.debug(f"No page height reported, using lowest candidate edge: {page_height}")
    grouped = group_by_section(candidates, page_height, config)
    return ScoringContext(
        page_height=page_height,
        total_candidates=len(candidates),
        section_candidates={name: len(members) for name, members in grouped.items()},
        has_value_proposition=has_value_proposition,
        has_urgency_text=has_urgency_text,
    )
