"""
Tests for DOM snapshot → CTA candidate conversion and scoring context building.
"""

import pytest
from pydantic import ValidationError

from ctalocator.core.models import DOMSnapshot, ImageSize
from ctalocator.services.cta_priority import (
    build_scoring_context,
    candidates_from_dom,
    make_candidate,
    ScoringContext,
    select_primary_cta,
)


def _snapshot():
    return DOMSnapshot.model_validate({
        "buttons": [
            {
                "text": "  Start Free Trial ",
                "className": "btn btn-primary",
                "isVisible": True,
                "isAboveFold": True,
                "formAction": "/signup",
                "coordinates": {"x": 860, "y": 420, "width": 200, "height": 56},
            },
            {
                "text": "Hidden",
                "isVisible": False,
                "coordinates": {"x": 0, "y": 0, "width": 10, "height": 10},
            },
            {
                "text": "   ",
                "coordinates": {"x": 0, "y": 0, "width": 10, "height": 10},
            },
        ],
        "links": [
            {
                "text": "Pricing",
                "href": "/pricing",
                "className": "nav-link",
                "isAboveFold": True,
                "coordinates": {"x": 1500, "y": 30, "width": 80, "height": 20},
            },
            {
                "text": "Book a demo",
                "href": "/demo",
                "hasButtonStyling": True,
                "coordinates": {"x": 900, "y": 1800, "width": 160, "height": 48},
            },
        ],
        "forms": [
            {
                "action": "/subscribe",
                "hasSubmitButton": True,
                "submitButtonText": "Subscribe",
                "coordinates": {"x": 700, "y": 2200, "width": 500, "height": 120},
            },
            {
                "action": "/search",
                "coordinates": {"x": 10, "y": 10, "width": 200, "height": 30},
            },
        ],
        "pageHeight": 3200,
    })


class TestCandidatesFromDom:

    def test_document_order_and_filtering(self):
        candidates = candidates_from_dom(_snapshot())
        assert [c.text for c in candidates] == ["Start Free Trial", "Pricing", "Book a demo", "Subscribe"]
        assert [c.kind for c in candidates] == ["button", "link", "link", "form"]

    def test_button_appearance_predicates(self):
        button = candidates_from_dom(_snapshot())[0]
        assert button.has_button_appearance is True
        assert button.has_prominent_appearance is True
        assert button.form_action == "/signup"
        assert button.has_form_action
        assert button.is_above_fold

    def test_link_appearance_predicates(self):
        _, pricing, demo, _ = candidates_from_dom(_snapshot())
        assert pricing.has_button_appearance is False
        assert demo.has_button_appearance is True

    def test_form_candidate(self):
        form = candidates_from_dom(_snapshot())[-1]
        assert form.form_action == "/subscribe"
        assert form.has_button_appearance is True
        assert form.coordinates.width == 500

    def test_empty_snapshot(self):
        assert candidates_from_dom(DOMSnapshot()) == []


class TestMakeCandidate:

    def test_invalid_kind_rejected(self):
        from ctalocator.core.models import ElementCoordinates
        with pytest.raises(ValueError):
            make_candidate("Go", ElementCoordinates(x=0, y=0, width=1, height=1), kind="image")


class TestBuildScoringContext:

    def test_counts(self):
        candidates = candidates_from_dom(_snapshot())
        context = build_scoring_context(candidates, 3200, has_value_proposition=True)

        assert context.total_candidates == 4
        assert dict(context.section_candidates) == {"hero": 1, "header": 1, "testimonials": 1, "footer": 1}
        assert context.has_value_proposition is True
        assert context.has_urgency_text is False
        assert context.page_height == 3200


class TestSnapshotValidation:

    def test_negative_dimensions_rejected(self):
        with pytest.raises(ValidationError):
            DOMSnapshot.model_validate({
                "buttons": [{"text": "Go", "coordinates": {"x": 0, "y": 0, "width": -5, "height": 10}}],
            })


class TestScoringContextGuards:

    def test_counts_are_read_only(self):
        context = build_scoring_context(candidates_from_dom(_snapshot()), 3200)
        with pytest.raises(TypeError):
            context.section_candidates["hero"] = 5

    def test_missing_page_height_uses_lowest_edge(self):
        candidates = candidates_from_dom(_snapshot())
        context = build_scoring_context(candidates, None)
        # Subscribe form: y=2200, height=120
        assert context.page_height == 2320

    def test_missing_page_height_empty_page(self):
        assert build_scoring_context([], None).page_height == 0

    def test_scoring_context_requires_page_height(self):
        with pytest.raises(ValueError):
            ScoringContext(page_height=None)


class TestSnapshotWithoutPageHeight:

    def test_end_to_end_selection(self):
        snapshot = DOMSnapshot.model_validate({
            "buttons": [{
                "text": "Get Started",
                "className": "btn btn-primary",
                "isAboveFold": True,
                "coordinates": {"x": 860, "y": 420, "width": 200, "height": 56},
            }],
        })
        assert snapshot.page_height is None

        candidates = candidates_from_dom(snapshot)
        context = build_scoring_context(candidates, page_height=snapshot.page_height)
        result = select_primary_cta(candidates, context, ImageSize(width=1920, height=1080))

        assert not result.empty
        assert result.primary.text == "Get Started"
        assert result.primary.section == "hero"
