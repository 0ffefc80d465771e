"""
Configuration management for CTA Locator
"""

import os
import math
import yaml
from pathlib import Path
from typing import Optional, Dict, Tuple, Any, Union
from dataclasses import dataclass, field, fields, replace
from dotenv import load_dotenv

# Load environment variables
load_dotenv()


class Config:
    """Application configuration"""

    # Page geometry (pixels, scroll-adjusted)
    FOLD_LINE: int = int(os.getenv('CTA_FOLD_LINE', '1000'))
    HEADER_THRESHOLD: int = int(os.getenv('CTA_HEADER_THRESHOLD', '150'))
    HERO_MAX_Y: int = int(os.getenv('CTA_HERO_MAX_Y', '800'))
    FOOTER_THRESHOLD: int = int(os.getenv('CTA_FOOTER_THRESHOLD', '1500'))
    LONG_PAGE_THRESHOLD: int = int(os.getenv('CTA_LONG_PAGE_THRESHOLD', '2000'))

    # Primary CTA selection
    MIN_SCORE_THRESHOLD: float = float(os.getenv('CTA_MIN_SCORE_THRESHOLD', '6'))
    MAX_ADJUSTMENTS: int = int(os.getenv('CTA_MAX_ADJUSTMENTS', '5'))

    # Text-to-element matching
    # NOTE: admission bars and tie gap are uncalibrated, see DESIGN.md
    MATCH_SIMILARITY_THRESHOLD: float = float(os.getenv('CTA_MATCH_SIMILARITY_THRESHOLD', '0.5'))
    BUTTON_ADMISSION_SCORE: float = float(os.getenv('CTA_BUTTON_ADMISSION_SCORE', '8'))
    LINK_ADMISSION_SCORE: float = float(os.getenv('CTA_LINK_ADMISSION_SCORE', '6'))
    TIE_GAP_TOLERANCE: float = float(os.getenv('CTA_TIE_GAP_TOLERANCE', '0.5'))
    FORM_MERGE_DISTANCE: float = float(os.getenv('CTA_FORM_MERGE_DISTANCE', '200'))
    SUPPORTING_TEXT_RADIUS: float = float(os.getenv('CTA_SUPPORTING_TEXT_RADIUS', '100'))
    CONFIDENCE_SCORE_DIVISOR: float = float(os.getenv('CTA_CONFIDENCE_SCORE_DIVISOR', '20'))

    @classmethod
    def get(cls, key: str, default: Optional[Any] = None) -> Optional[Any]:
        """Get configuration value"""
        return getattr(cls, key, default)


# ============================================================================
# Lexical tables
# ============================================================================

STRONG_ACTION_VERBS: Tuple[str, ...] = (
    "buy", "purchase", "order",
    "shop",  # e-commerce storefronts
    "get", "start", "begin", "try", "download",
    "sign up", "signup", "register", "join", "subscribe",
    "book", "schedule", "request", "claim", "unlock",
    "access", "upgrade", "activate",
)

MEDIUM_ACTION_VERBS: Tuple[str, ...] = (
    "learn", "discover", "explore", "view", "see", "watch", "read",
    "contact", "call", "email", "demo", "preview", "browse",
)

PASSIVE_PHRASES: Tuple[str, ...] = (
    "click here", "more info", "details", "continue", "next", "back",
)

# Site navigation, never a primary CTA
NAVIGATION_TERMS: Tuple[str, ...] = (
    "mac", "ipad", "iphone", "watch", "airpods", "tv",
    "home", "about", "support", "store", "products", "services",
    "solutions", "company", "news", "blog", "help", "faq",
    "resources", "documentation", "guides", "tutorials",
)

PERFECT_ALIGNMENT_PHRASES: Tuple[str, ...] = (
    "get started", "start free", "try free", "sign up free",
    "book demo", "request demo", "start trial",
)

VALUE_KEYWORDS: Tuple[str, ...] = ("save", "free", "trial", "%")

BUTTON_CLASS_HINTS: Tuple[str, ...] = ("btn", "button")
PROMINENT_CLASS_HINTS: Tuple[str, ...] = ("primary", "cta", "action")

# Matcher vocabulary
PRODUCT_VALUE_PHRASES: Tuple[str, ...] = (
    "for free", "free trial", "try free", "download free", "get free", "start free",
)

MATCHER_STRONG_ACTIONS: Tuple[str, ...] = (
    "buy", "purchase", "get", "start", "try", "download",
    "sign up", "signup", "register", "book", "request",
)

MATCHER_MEDIUM_ACTIONS: Tuple[str, ...] = ("learn", "discover", "contact", "demo", "preview")

MATCHER_PASSIVE_PHRASES: Tuple[str, ...] = ("click here", "more info")

MATCHER_BUTTON_CLASS_HINTS: Tuple[str, ...] = ("btn", "button", "cta")
MATCHER_PROMINENT_CLASS_HINTS: Tuple[str, ...] = (
    "primary", "main", "hero", "action", "call-to-action",
)

SUPPORTING_TEXT_PATTERNS: Tuple[str, ...] = (
    "no credit card", "no credit card required", "free forever",
    "cancel anytime", "no commitment", "risk free", "money back",
    "guarantee", "instant access", "immediate access",
)

HIGH_PROMINENCE_COLOR_CLASSES: Tuple[str, ...] = (
    "primary", "accent", "highlight", "featured",
    "standout", "bright", "bold", "vibrant",
)
MEDIUM_PROMINENCE_COLOR_CLASSES: Tuple[str, ...] = (
    "secondary", "outlined", "bordered", "colored",
)


# ============================================================================
# Section table
# ============================================================================

BELOW_FOLD_SECTION = "below-fold"

# Number of +1 boosts in the adjustment layer
ADJUSTMENT_BOOST_COUNT = 5


@dataclass(frozen=True)
class SectionRange:
    """A page zone covering the half-open Y-range [min_y, max_y)."""
    name: str
    min_y: float
    max_y: float
    priority: int

    def contains(self, y: float) -> bool:
        return self.min_y <= y < self.max_y


def default_section_table() -> Tuple[SectionRange, ...]:
    """Canonical section table, in evaluation order.

    Header and hero are tested before the wider ranges; below-fold is the
    catch-all and is consulted last.
    """
    return (
        SectionRange("header", 0, Config.HEADER_THRESHOLD, 8),
        SectionRange("hero", Config.HEADER_THRESHOLD, Config.HERO_MAX_Y, 15),
        SectionRange("features", Config.HERO_MAX_Y, Config.FOOTER_THRESHOLD, 6),
        SectionRange("testimonials", Config.FOOTER_THRESHOLD, Config.LONG_PAGE_THRESHOLD, 4),
        SectionRange("footer", Config.LONG_PAGE_THRESHOLD, math.inf, 2),
        SectionRange(BELOW_FOLD_SECTION, Config.FOLD_LINE, math.inf, 3),
    )


# ============================================================================
# Scoring / matching configuration
# ============================================================================

@dataclass(frozen=True)
class ScoringConfig:
    """Immutable configuration for the CTA priority scorer.

    Passed explicitly to every scoring call so concurrent analyses
    (desktop + mobile) never share mutable state.
    """
    fold_line: float = field(default_factory=lambda: Config.FOLD_LINE)
    mid_page_line: float = field(default_factory=lambda: Config.FOOTER_THRESHOLD)
    long_page_threshold: float = field(default_factory=lambda: Config.LONG_PAGE_THRESHOLD)
    min_score_threshold: float = field(default_factory=lambda: Config.MIN_SCORE_THRESHOLD)
    max_adjustments: int = field(default_factory=lambda: Config.MAX_ADJUSTMENTS)
    sections: Tuple[SectionRange, ...] = field(default_factory=default_section_table)

    strong_action_verbs: Tuple[str, ...] = STRONG_ACTION_VERBS
    medium_action_verbs: Tuple[str, ...] = MEDIUM_ACTION_VERBS
    passive_phrases: Tuple[str, ...] = PASSIVE_PHRASES
    navigation_terms: Tuple[str, ...] = NAVIGATION_TERMS
    perfect_alignment_phrases: Tuple[str, ...] = PERFECT_ALIGNMENT_PHRASES
    value_keywords: Tuple[str, ...] = VALUE_KEYWORDS
    button_class_hints: Tuple[str, ...] = BUTTON_CLASS_HINTS
    prominent_class_hints: Tuple[str, ...] = PROMINENT_CLASS_HINTS

    def __post_init__(self):
        if not self.sections:
            raise ValueError("Section table must not be empty")
        for section in self.sections:
            if section.min_y >= section.max_y:
                raise ValueError(
                    f"Invalid section range for {section.name}: "
                    f"[{section.min_y}, {section.max_y})"
                )
        if BELOW_FOLD_SECTION not in {s.name for s in self.sections}:
            raise ValueError(f"Section table must define the '{BELOW_FOLD_SECTION}' catch-all")
        if self.min_score_threshold < 0:
            raise ValueError(f"min_score_threshold must be >= 0, got {self.min_score_threshold}")
        if not 0 <= self.max_adjustments <= ADJUSTMENT_BOOST_COUNT:
            raise ValueError(
                f"max_adjustments must be between 0 and {ADJUSTMENT_BOOST_COUNT}, "
                f"got {self.max_adjustments}"
            )

    def section(self, name: str) -> SectionRange:
        for section in self.sections:
            if section.name == name:
                return section
        raise KeyError(name)


@dataclass(frozen=True)
class MatcherConfig:
    """Immutable configuration for the text-to-element matcher."""
    fold_line: float = field(default_factory=lambda: Config.FOLD_LINE)
    header_threshold: float = field(default_factory=lambda: Config.HEADER_THRESHOLD)
    hero_max_y: float = field(default_factory=lambda: Config.HERO_MAX_Y)
    similarity_threshold: float = field(default_factory=lambda: Config.MATCH_SIMILARITY_THRESHOLD)
    button_admission_score: float = field(default_factory=lambda: Config.BUTTON_ADMISSION_SCORE)
    link_admission_score: float = field(default_factory=lambda: Config.LINK_ADMISSION_SCORE)
    tie_gap_tolerance: float = field(default_factory=lambda: Config.TIE_GAP_TOLERANCE)
    form_merge_distance: float = field(default_factory=lambda: Config.FORM_MERGE_DISTANCE)
    supporting_text_radius: float = field(default_factory=lambda: Config.SUPPORTING_TEXT_RADIUS)
    confidence_score_divisor: float = field(default_factory=lambda: Config.CONFIDENCE_SCORE_DIVISOR)
    max_visual_prominence: int = 12

    product_value_phrases: Tuple[str, ...] = PRODUCT_VALUE_PHRASES
    strong_actions: Tuple[str, ...] = MATCHER_STRONG_ACTIONS
    medium_actions: Tuple[str, ...] = MATCHER_MEDIUM_ACTIONS
    passive_phrases: Tuple[str, ...] = MATCHER_PASSIVE_PHRASES
    button_class_hints: Tuple[str, ...] = MATCHER_BUTTON_CLASS_HINTS
    prominent_class_hints: Tuple[str, ...] = MATCHER_PROMINENT_CLASS_HINTS
    supporting_text_patterns: Tuple[str, ...] = SUPPORTING_TEXT_PATTERNS
    high_prominence_color_classes: Tuple[str, ...] = HIGH_PROMINENCE_COLOR_CLASSES
    medium_prominence_color_classes: Tuple[str, ...] = MEDIUM_PROMINENCE_COLOR_CLASSES

    def __post_init__(self):
        for name in (
            "similarity_threshold", "button_admission_score", "link_admission_score",
            "tie_gap_tolerance", "form_merge_distance", "supporting_text_radius",
        ):
            value = getattr(self, name)
            if not (isinstance(value, (int, float)) and math.isfinite(value) and value >= 0):
                raise ValueError(f"Invalid {name}: {value} (must be finite and >= 0)")
        if self.confidence_score_divisor <= 0:
            raise ValueError(
                f"confidence_score_divisor must be > 0, got {self.confidence_score_divisor}"
            )
        if not self.header_threshold <= self.hero_max_y <= self.fold_line:
            raise ValueError(
                f"Expected header_threshold <= hero_max_y <= fold_line, got "
                f"{self.header_threshold}, {self.hero_max_y}, {self.fold_line}"
            )


# ============================================================================
# YAML loading
# ============================================================================

def _apply_overrides(base, overrides: Dict[str, Any], section_name: str):
    """Return a copy of a frozen config with YAML overrides applied."""
    allowed = {f.name for f in fields(base)}
    unknown = set(overrides) - allowed
    if unknown:
        raise ValueError(
            f"Unknown {section_name} config keys: {', '.join(sorted(unknown))}"
        )

    coerced: Dict[str, Any] = {}
    for key, value in overrides.items():
        if key == "sections":
            coerced[key] = tuple(
                SectionRange(
                    name=item['name'],
                    min_y=float(item.get('min_y', 0)),
                    max_y=float(item['max_y']) if item.get('max_y') is not None else math.inf,
                    priority=int(item.get('priority', 0)),
                )
                for item in value
            )
        elif isinstance(value, list):
            coerced[key] = tuple(str(v).lower() for v in value)
        else:
            coerced[key] = value

    return replace(base, **coerced)


def load_cta_config(config_path: Union[str, Path]) -> Tuple[ScoringConfig, MatcherConfig]:
    """
    Load scoring and matcher configuration from a YAML file.

    Expected layout (both mappings optional):

        scoring:
          min_score_threshold: 7
          sections:
            - {name: header, min_y: 0, max_y: 150, priority: 8}
            ...
        matcher:
          button_admission_score: 9

    Args:
        config_path: Path to the YAML file

    Returns:
        (ScoringConfig, MatcherConfig) tuple

    Raises:
        FileNotFoundError: If the file doesn't exist
        ValueError: If the configuration is invalid
    """
    config_path = Path(config_path)

    if not config_path.exists():
        raise FileNotFoundError(f"CTA configuration not found at {config_path}")

    with open(config_path, 'r') as f:
        raw_config = yaml.safe_load(f) or {}

    if not isinstance(raw_config, dict):
        raise ValueError(f"CTA configuration at {config_path} must be a mapping")

    scoring = _apply_overrides(ScoringConfig(), raw_config.get('scoring') or {}, "scoring")
    matcher = _apply_overrides(MatcherConfig(), raw_config.get('matcher') or {}, "matcher")

    return scoring, matcher
