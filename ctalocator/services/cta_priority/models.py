"""
Data classes for the CTA priority scoring pipeline.

All state lives in these objects; the rules themselves are stateless.
"""

from dataclasses import dataclass, field, asdict
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional, Sequence

from ctalocator.core.config import ScoringConfig
from ctalocator.core.models import ElementCoordinates, ImageSize

CANDIDATE_KINDS = ("button", "link", "form")


@dataclass(frozen=True)
class CTACandidate:
    """An interactive element that could be the page's primary CTA.

    Attributes:
        text: Visible label.
        coordinates: Scroll-adjusted bounding box.
        kind: "button" | "link" | "form".
        class_name: Raw class attribute, kept for explainability.
        has_button_appearance: Looks like a button (class hint, explicit
            button styling, or a button element). Computed once upstream.
        has_prominent_appearance: Carries a primary/cta/action style hint.
        is_visible: Rendered and not hidden.
        is_above_fold: Capture layer's own above-fold flag.
        form_action: Action URL of the owning form, if any.
    """
    text: str
    coordinates: ElementCoordinates
    kind: str = "button"
    class_name: str = ""
    has_button_appearance: bool = False
    has_prominent_appearance: bool = False
    is_visible: bool = True
    is_above_fold: bool = False
    form_action: Optional[str] = None

    def __post_init__(self):
        if self.kind not in CANDIDATE_KINDS:
            raise ValueError(f"Invalid candidate kind: {self.kind} (expected one of {CANDIDATE_KINDS})")

    @property
    def has_form_action(self) -> bool:
        return bool(self.form_action)


@dataclass(frozen=True)
class ScoringContext:
    """Page-level facts computed upstream, read-only during scoring.

    Attributes:
        page_height: Full page height in pixels.
        total_candidates: Number of candidates on the page.
        section_candidates: Candidate count per section name.
        has_value_proposition: A headline / value proposition was detected.
        has_urgency_text: Urgency copy ("today only", "limited") was detected.
    """
    page_height: float
    total_candidates: int = 0
    section_candidates: Mapping[str, int] = field(default_factory=dict)
    has_value_proposition: bool = False
    has_urgency_text: bool = False

    def __post_init__(self):
        if self.page_height is None:
            raise ValueError("page_height is required for scoring")
        object.__setattr__(self, "section_candidates", MappingProxyType(dict(self.section_candidates)))


@dataclass(frozen=True)
class RuleContext:
    """Everything a rule may look at besides the candidate itself."""
    scoring: ScoringContext
    all_candidates: Sequence[CTACandidate]
    section_candidates: Sequence[CTACandidate]
    image_size: ImageSize
    config: ScoringConfig = field(default_factory=ScoringConfig)


@dataclass(frozen=True)
class ScoreBreakdown:
    location: int
    text_intent: int
    visual_prominence: int
    singularity: int
    context_alignment: int
    adjustments: int

    @property
    def base_score(self) -> int:
        return (
            self.location
            + self.text_intent
            + self.visual_prominence
            + self.singularity
            + self.context_alignment
        )

    def to_dict(self) -> Dict[str, int]:
        return asdict(self)


@dataclass(frozen=True)
class ScoredCandidate:
    candidate: CTACandidate
    base_score: int
    adjusted_score: int
    section: str
    breakdown: ScoreBreakdown

    @property
    def text(self) -> str:
        return self.candidate.text

    @property
    def coordinates(self) -> ElementCoordinates:
        return self.candidate.coordinates


@dataclass
class PrimaryCTAResult:
    """Structured result from primary CTA selection.

    Always structured. Check `empty` to see whether a primary CTA was found.

    Attributes:
        primary: Winning candidate, or None.
        scored: Every scored candidate, in section-grouped input order.
        section_champions: Best candidate per section, in first-seen section order.
        empty: True when no primary CTA was selected.
        reason: "no_candidates" or "below_threshold" when empty.
    """
    primary: Optional[ScoredCandidate] = None
    scored: List[ScoredCandidate] = field(default_factory=list)
    section_champions: Dict[str, ScoredCandidate] = field(default_factory=dict)
    empty: bool = True
    reason: Optional[str] = None
