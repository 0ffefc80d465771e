"""Data classes produced by the text-to-element matcher."""

from dataclasses import dataclass, field
from typing import List, Optional

from ctalocator.core.models import ElementCoordinates

SECTION_TIERS = ("hero", "header", "below-fold")

FORM_WITH_BUTTON = "form-with-button"


@dataclass(frozen=True)
class MatchedElement:
    """A DOM element anchored to the AI's CTA guess.

    Attributes:
        coordinates: Bounding box (merged with the nearby form for form-with-button).
        text: Element label.
        kind: "button" | "link" | "form-with-button".
        confidence: max(similarity, enhanced_score / divisor), clamped to [0, 1].
        priority: Section tier ("hero" | "header" | "below-fold").
        priority_score: Raw location priority score.
        enhanced_score: priority + text intent + visual prominence + bonuses.
        similarity: Best similarity against the guess and its alternatives.
    """
    coordinates: ElementCoordinates
    text: str
    kind: str
    confidence: float
    priority: str
    priority_score: float
    enhanced_score: float = 0.0
    similarity: float = 0.0


@dataclass(frozen=True)
class DebugMatch:
    """One evaluated element, recorded whether or not it was admitted."""
    text: str
    similarity: float
    coordinates: ElementCoordinates
    kind: str
    priority: str
    priority_score: float
    enhanced_score: float
    visual_prominence: int = 0
    text_intent: int = 0
    admitted: bool = False


@dataclass
class MatchResult:
    """Structured matcher output. The debug trace is always populated.

    Attributes:
        match: Selected element, or None.
        debug: One entry per evaluated element, in evaluation order.
        candidates: Admitted elements, in evaluation order.
        selected_from: Bucket the match came from
            ("hero" | "header" | "other-above-fold" | "all"), None when empty.
        empty: True when nothing matched.
        reason: "no_candidates" when empty.
    """
    match: Optional[MatchedElement] = None
    debug: List[DebugMatch] = field(default_factory=list)
    candidates: List[MatchedElement] = field(default_factory=list)
    selected_from: Optional[str] = None
    empty: bool = True
    reason: Optional[str] = None
