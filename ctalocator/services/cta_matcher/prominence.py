"""
Matcher scoring model: location priority, text intent (0-4) and visual prominence (0-12).

This text-intent scale is separate from the priority scorer's -1..3 scale
in cta_priority.rules: the matcher rewards product-value phrases
("free trial", "start free") above plain strong verbs.
"""

import logging
import math
from typing import Optional, Sequence, Tuple

from ctalocator.core.config import MatcherConfig
from ctalocator.core.models import DOMSnapshot, ElementCoordinates, ImageSize

logger = logging.getLogger(__name__)

MATCHER_TEXT_INTENT_SCORES = {
    "product_value": 4,
    "strong": 3,
    "medium": 2,
    "low": 1,
    "passive": 0,
}


def calculate_priority(
    coordinates: ElementCoordinates,
    image_size: ImageSize,
    config: Optional[MatcherConfig] = None,
) -> Tuple[str, float]:
    """Section tier and location priority score.

    below the fold line      → ("below-fold", 1)
    above the header line    → ("header", 2 + x / width)      rightmost wins
    otherwise                → ("hero", 10 + centering)       centered wins
    """
    config = config or MatcherConfig()
    x, y, width = coordinates.x, coordinates.y, coordinates.width

    if y > config.fold_line:
        return "below-fold", 1.0

    if y < config.header_threshold:
        return "header", 2 + x / image_size.width

    center_x = image_size.width / 2
    distance_from_center = abs(x + width / 2 - center_x)
    return "hero", 10 + (1 - distance_from_center / center_x)


def score_match_text_intent(text: str, config: Optional[MatcherConfig] = None) -> int:
    """Matcher text intent on a 0-4 scale."""
    config = config or MatcherConfig()
    lower_text = (text or "").lower().strip()

    if any(phrase in lower_text for phrase in config.product_value_phrases):
        return MATCHER_TEXT_INTENT_SCORES["product_value"]

    if any(action in lower_text for action in config.strong_actions):
        return MATCHER_TEXT_INTENT_SCORES["strong"]

    if any(action in lower_text for action in config.medium_actions):
        return MATCHER_TEXT_INTENT_SCORES["medium"]

    if any(phrase in lower_text for phrase in config.passive_phrases):
        return MATCHER_TEXT_INTENT_SCORES["passive"]

    return MATCHER_TEXT_INTENT_SCORES["low"]


def estimate_color_prominence(class_name: str, config: Optional[MatcherConfig] = None) -> int:
    """Infer color emphasis from class names: 2 for accent classes, 1 for secondary styling."""
    config = config or MatcherConfig()
    lower = (class_name or "").lower()

    if any(cls in lower for cls in config.high_prominence_color_classes):
        return 2
    if any(cls in lower for cls in config.medium_prominence_color_classes):
        return 1
    return 0


def detect_supporting_text(
    coordinates: ElementCoordinates,
    text: str,
    snapshot: DOMSnapshot,
    config: Optional[MatcherConfig] = None,
) -> int:
    """Count trust copy ("no credit card", "money back") near the element, capped at 2.

    Searches visible buttons, links and text nodes whose top-left corner lies
    within config.supporting_text_radius of the element's. The element itself
    (same label) is skipped.
    """
    config = config or MatcherConfig()
    nearby = [
        *((b.text, b.coordinates) for b in snapshot.buttons if b.is_visible),
        *((l.text, l.coordinates) for l in snapshot.links if l.is_visible),
        *((t.text, t.coordinates) for t in snapshot.texts if t.is_visible),
    ]

    supporting_score = 0
    for other_text, other_coords in nearby:
        if other_text == text:
            continue

        distance = math.hypot(other_coords.x - coordinates.x, other_coords.y - coordinates.y)
        if distance > config.supporting_text_radius:
            continue

        lower = (other_text or "").lower()
        if any(pattern in lower for pattern in config.supporting_text_patterns):
            supporting_score += 1

    return min(supporting_score, 2)


def calculate_visual_prominence(
    coordinates: ElementCoordinates,
    text: str,
    kind: str,
    class_name: str,
    image_size: ImageSize,
    snapshot: DOMSnapshot,
    peer_areas: Sequence[float] = (),
    config: Optional[MatcherConfig] = None,
) -> int:
    """Six additive signals, capped at config.max_visual_prominence (12).

    1. Size vs. viewport              0-3
    2. Centering, horizontal-weighted 0-2
    3. Button / prominent classes     0-2
    4. Supporting trust text nearby   0-2
    5. Color prominence classes       0-2
    6. Size vs. average peer          0-1
    """
    config = config or MatcherConfig()
    score = 0

    size_ratio = coordinates.area / (image_size.width * image_size.height)
    if size_ratio > 0.01:
        score += 3
    elif size_ratio > 0.005:
        score += 2
    elif size_ratio > 0.002:
        score += 1

    center_x = image_size.width / 2
    distance_from_center_x = abs(coordinates.center_x - center_x) / center_x
    if distance_from_center_x < 0.1:
        score += 2
    elif distance_from_center_x < 0.3:
        score += 1

    lower = (class_name or "").lower()
    has_button_class = kind == "button" or any(hint in lower for hint in config.button_class_hints)
    has_prominent_class = any(hint in lower for hint in config.prominent_class_hints)
    if has_button_class and has_prominent_class:
        score += 2
    elif has_button_class:
        score += 1

    supporting_bonus = detect_supporting_text(coordinates, text, snapshot, config)
    score += supporting_bonus

    color_bonus = estimate_color_prominence(class_name, config)
    score += color_bonus

    if len(peer_areas) > 1:
        avg_area = sum(peer_areas) / len(peer_areas)
        if coordinates.area > avg_area * 1.5:
            score += 1

    logger.debug(
        f"Visual prominence for '{text}': size_ratio={size_ratio:.6f}, "
        f"center_distance={distance_from_center_x:.3f}, button={has_button_class}, "
        f"prominent={has_prominent_class}, supporting={supporting_bonus}, "
        f"color={color_bonus}, total={score}"
    )
    return min(score, config.max_visual_prominence)
