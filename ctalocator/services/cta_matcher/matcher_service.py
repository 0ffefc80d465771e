"""
CTA Matcher Service — anchors the AI's free-text CTA guess to a real DOM element.

Usage:
    from ctalocator.services.cta_matcher import CTAMatcher

    matcher = CTAMatcher(ImageSize(width=1920, height=1080))
    result = matcher.find_matching_element(insight, snapshot)

    if result.match:
        print(result.match.text, result.match.confidence)
    for entry in result.debug:
        print(entry.text, entry.similarity, entry.enhanced_score, entry.priority)
"""

import logging
from dataclasses import replace
from typing import Dict, List, Optional, Sequence, Tuple, Union

from ctalocator.core.config import MatcherConfig
from ctalocator.core.models import (
    CTAInsight,
    DOMSnapshot,
    ElementCoordinates,
    FormData,
    ImageSize,
)

from .models import FORM_WITH_BUTTON, DebugMatch, MatchedElement, MatchResult
from .prominence import (
    calculate_priority,
    calculate_visual_prominence,
    score_match_text_intent,
)
from .similarity import best_similarity

logger = logging.getLogger(__name__)


class CTAMatcher:
    """Reconcile an AI CTA guess against captured buttons and links.

    Stateless per call: the same insight and snapshot always produce the
    same match and debug trace.
    """

    def __init__(
        self,
        image_size: Union[ImageSize, Dict[str, float]],
        config: Optional[MatcherConfig] = None,
    ):
        self.image_size = image_size if isinstance(image_size, ImageSize) else ImageSize(**image_size)
        self.config = config or MatcherConfig()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def find_matching_element(self, insight: CTAInsight, snapshot: DOMSnapshot) -> MatchResult:
        """Find the DOM element the AI's guess refers to.

        Steps:
            1. Score every visible, labelled button and link (debug trace entry each)
            2. Admit elements by similarity or type-specific enhanced score bar
            3. Hero-first cascade over above-fold candidates
            4. Merge with a nearby form when the AI flagged a form

        Args:
            insight: AI-produced CTA guess (text + alternatives).
            snapshot: Captured DOM snapshot.

        Returns:
            MatchResult. `match` is None when nothing was admitted.
        """
        search_texts = [t.lower().strip() for t in insight.search_texts]
        logger.debug(f"Searching for CTA texts: {search_texts}")

        debug, candidates = self._evaluate_elements(search_texts, snapshot)

        best, selected_from = self._select(candidates)
        if best is None:
            logger.info(f"No CTA match for '{insight.text}' ({len(debug)} elements evaluated)")
            return MatchResult(
                debug=debug,
                candidates=candidates,
                empty=True,
                reason="no_candidates",
            )

        if insight.has_form and snapshot.forms:
            best = self._merge_with_form(best, snapshot.forms)

        logger.info(
            f"Matched '{insight.text}' → '{best.text}' ({best.kind}, {best.priority}, "
            f"confidence={best.confidence:.2f}, from {selected_from})"
        )
        return MatchResult(
            match=best,
            debug=debug,
            candidates=candidates,
            selected_from=selected_from,
            empty=False,
        )

    # ------------------------------------------------------------------
    # Scoring
    # ------------------------------------------------------------------

    def _evaluate_elements(
        self,
        search_texts: Sequence[str],
        snapshot: DOMSnapshot,
    ) -> Tuple[List[DebugMatch], List[MatchedElement]]:
        """Score buttons then links, in document order."""
        elements = []
        for button in snapshot.buttons:
            if button.is_visible and button.text.strip():
                bonus = 2 if button.form_action else 0
                elements.append((button, "button", bonus, self.config.button_admission_score))
        for link in snapshot.links:
            if link.is_visible and link.text.strip():
                bonus = 1 if link.has_button_styling else 0
                elements.append((link, "link", bonus, self.config.link_admission_score))

        peer_areas = [element.coordinates.area for element, _, _, _ in elements]

        debug: List[DebugMatch] = []
        candidates: List[MatchedElement] = []

        for index, (element, kind, context_bonus, admission_score) in enumerate(elements):
            similarity = best_similarity(element.text, search_texts)
            priority, priority_score = calculate_priority(element.coordinates, self.image_size, self.config)
            text_intent = score_match_text_intent(element.text, self.config)
            visual_prominence = calculate_visual_prominence(
                element.coordinates,
                element.text,
                kind,
                element.class_name,
                self.image_size,
                snapshot,
                peer_areas=peer_areas,
                config=self.config,
            )

            enhanced_score = priority_score + text_intent + visual_prominence + context_bonus
            if element.is_above_fold:
                enhanced_score += 1

            admitted = (
                similarity > self.config.similarity_threshold
                or enhanced_score > admission_score
            )

            debug.append(DebugMatch(
                text=element.text,
                similarity=similarity,
                coordinates=element.coordinates,
                kind=kind,
                priority=priority,
                priority_score=priority_score,
                enhanced_score=enhanced_score,
                visual_prominence=visual_prominence,
                text_intent=text_intent,
                admitted=admitted,
            ))

            logger.debug(
                f"{kind.capitalize()} #{index} '{element.text}': similarity={similarity:.2f}, "
                f"enhanced={enhanced_score:.2f}, visual={visual_prominence}, admitted={admitted}"
            )

            if admitted:
                confidence = max(similarity, enhanced_score / self.config.confidence_score_divisor)
                candidates.append(MatchedElement(
                    coordinates=element.coordinates,
                    text=element.text,
                    kind=kind,
                    confidence=min(confidence, 1.0),
                    priority=priority,
                    priority_score=priority_score,
                    enhanced_score=enhanced_score,
                    similarity=similarity,
                ))

        return debug, candidates

    # ------------------------------------------------------------------
    # Selection
    # ------------------------------------------------------------------

    def rank_candidates(self, candidates: Sequence[MatchedElement]) -> List[MatchedElement]:
        """Order by enhanced score; scores within the gap tolerance of the leader
        are decided by confidence. Remaining ties keep input order."""
        remaining = list(candidates)
        ranked: List[MatchedElement] = []

        while remaining:
            top_score = max(c.enhanced_score for c in remaining)
            contenders = [
                c for c in remaining
                if top_score - c.enhanced_score <= self.config.tie_gap_tolerance
            ]
            leader = contenders[0]
            for contender in contenders[1:]:
                if contender.confidence > leader.confidence:
                    leader = contender
            ranked.append(leader)
            remaining.remove(leader)

        return ranked

    def _select(self, candidates: Sequence[MatchedElement]) -> Tuple[Optional[MatchedElement], Optional[str]]:
        """Hero-first cascade. Hero outranks header regardless of raw score."""
        fold_line = self.config.fold_line
        above_fold = [c for c in candidates if c.coordinates.y < fold_line]

        logger.debug(f"Candidate distribution: above_fold={len(above_fold)}, total={len(candidates)}")

        if not above_fold:
            if candidates:
                logger.warning("No above-fold candidates found, using all candidates")
                return self.rank_candidates(candidates)[0], "all"
            return None, None

        header_threshold = self.config.header_threshold
        hero_max_y = self.config.hero_max_y
        hero = [c for c in above_fold if header_threshold <= c.coordinates.y < hero_max_y]
        header = [c for c in above_fold if c.coordinates.y < header_threshold]
        other = [c for c in above_fold if c.coordinates.y >= hero_max_y]

        logger.debug(f"Section distribution: hero={len(hero)}, header={len(header)}, other={len(other)}")

        for bucket_name, bucket in (("hero", hero), ("header", header), ("other-above-fold", other)):
            if bucket:
                return self.rank_candidates(bucket)[0], bucket_name

        return None, None

    # ------------------------------------------------------------------
    # Form association
    # ------------------------------------------------------------------

    def _merge_with_form(self, match: MatchedElement, forms: Sequence[FormData]) -> MatchedElement:
        """Merge the match with the vertically nearest form when close enough."""
        match_y = match.coordinates.y
        closest = forms[0]
        min_distance = abs(closest.coordinates.y - match_y)
        for form in forms[1:]:
            distance = abs(form.coordinates.y - match_y)
            if distance < min_distance:
                min_distance = distance
                closest = form

        if min_distance >= self.config.form_merge_distance:
            logger.debug(f"Nearest form is {min_distance:.0f}px away, not merging")
            return match

        a, b = match.coordinates, closest.coordinates
        min_x = min(a.x, b.x)
        min_y = min(a.y, b.y)
        max_x = max(a.x + a.width, b.x + b.width)
        max_y = max(a.y + a.height, b.y + b.height)

        return replace(
            match,
            coordinates=ElementCoordinates(x=min_x, y=min_y, width=max_x - min_x, height=max_y - min_y),
            kind=FORM_WITH_BUTTON,
        )
