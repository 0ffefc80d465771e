"""
Pydantic models for the capture-layer contract.

The capture pipeline hands over a DOM snapshot (scroll-adjusted element
geometry) and the AI layer hands over a free-text CTA guess. Both are
validated here before reaching the scoring and matching services.
"""

from typing import List, Optional
from pydantic import BaseModel, Field


class ElementCoordinates(BaseModel):
    """Bounding box in page pixels, scroll-adjusted."""
    x: float = 0.0
    y: float = 0.0
    width: float = Field(default=0.0, ge=0)
    height: float = Field(default=0.0, ge=0)

    @property
    def area(self) -> float:
        return self.width * self.height

    @property
    def center_x(self) -> float:
        return self.x + self.width / 2

    @property
    def center_y(self) -> float:
        return self.y + self.height / 2


class ImageSize(BaseModel):
    """Screenshot / viewport dimensions."""
    width: float = Field(gt=0)
    height: float = Field(gt=0)


# ============================================================================
# DOM snapshot
# ============================================================================

class ButtonData(BaseModel):
    text: str = ""
    type: str = "button"
    class_name: str = Field(default="", alias="className")
    id: str = ""
    is_visible: bool = Field(default=True, alias="isVisible")
    is_above_fold: bool = Field(default=False, alias="isAboveFold")
    form_action: Optional[str] = Field(default=None, alias="formAction")
    coordinates: ElementCoordinates

    model_config = {"populate_by_name": True}


class LinkData(BaseModel):
    text: str = ""
    href: str = ""
    class_name: str = Field(default="", alias="className")
    id: str = ""
    is_visible: bool = Field(default=True, alias="isVisible")
    is_above_fold: bool = Field(default=False, alias="isAboveFold")
    has_button_styling: bool = Field(default=False, alias="hasButtonStyling")
    coordinates: ElementCoordinates

    model_config = {"populate_by_name": True}


class FormData(BaseModel):
    action: str = ""
    method: str = "get"
    inputs: int = 0
    input_types: List[str] = Field(default_factory=list, alias="inputTypes")
    has_submit_button: bool = Field(default=False, alias="hasSubmitButton")
    submit_button_text: str = Field(default="", alias="submitButtonText")
    is_above_fold: bool = Field(default=False, alias="isAboveFold")
    coordinates: ElementCoordinates

    model_config = {"populate_by_name": True}


class TextData(BaseModel):
    """Visible text node (used for supporting trust copy near CTAs)."""
    text: str = ""
    tag_name: str = Field(default="", alias="tagName")
    is_visible: bool = Field(default=True, alias="isVisible")
    coordinates: ElementCoordinates

    model_config = {"populate_by_name": True}


class DOMSnapshot(BaseModel):
    """Ordered interactive-element lists captured from a page."""
    buttons: List[ButtonData] = Field(default_factory=list)
    links: List[LinkData] = Field(default_factory=list)
    forms: List[FormData] = Field(default_factory=list)
    texts: List[TextData] = Field(default_factory=list)
    page_height: Optional[float] = Field(default=None, alias="pageHeight")

    model_config = {"populate_by_name": True}


# ============================================================================
# AI guess
# ============================================================================

class CTAInsight(BaseModel):
    """Probabilistic CTA guess produced by the vision model. Never authoritative."""
    text: str
    confidence: float = Field(default=0.0, ge=0, le=1)
    has_form: bool = Field(default=False, alias="hasForm")
    reasoning: str = ""
    element_type: str = Field(default="button", alias="elementType", description="button | link | form")
    alternative_texts: List[str] = Field(default_factory=list, alias="alternativeTexts")

    model_config = {"populate_by_name": True}

    @property
    def search_texts(self) -> List[str]:
        return [self.text, *self.alternative_texts]
