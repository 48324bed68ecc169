# =============================================================================
# core/models/analysis.py - AI Analysis Schemas
# =============================================================================
# These models define the API contract for the AI helpers:
# - AnalysisResult: structured reading of a free-text poster request
# - TextBlock: one piece of text found on a poster, positioned in percent
# - Request/response bodies for analyze-request, analyze-image,
#   extract-text and transcribe-audio
# =============================================================================

from typing import Any

from pydantic import BaseModel, Field, field_validator

from .base import CamelModel


class ExtractedInfo(CamelModel):
    """Facts pulled out of the user's request. Every field is optional."""
    title: str | None = None
    dates: str | None = None
    prices: str | None = None
    contact: str | None = None
    location: str | None = None
    organizer: str | None = None
    speakers: str | None = None
    menu: str | None = None
    products: str | None = None
    target_audience: str | None = None
    additional_details: str | None = None

    @field_validator("*", mode="before")
    @classmethod
    def flatten_lists(cls, value: Any) -> Any:
        """Models sometimes answer with lists; keep the display string form."""
        if isinstance(value, list):
            return " · ".join(str(item) for item in value if item)
        if value is not None and not isinstance(value, str):
            return str(value)
        return value


class AnalysisResult(CamelModel):
    """
    Structured reading of a poster request.

    Example:
        {
            "suggestedDomain": "church",
            "extractedInfo": {"title": "Grande croisade", "dates": "12/03"},
            "missingInfo": [],
            "summary": "Affiche pour une croisade..."
        }
    """
    suggested_domain: str | None = None
    extracted_info: ExtractedInfo = Field(default_factory=ExtractedInfo)
    missing_info: list[str] = Field(default_factory=list)
    summary: str = ""

    @field_validator("extracted_info", mode="before")
    @classmethod
    def null_info(cls, value: Any) -> Any:
        return value or {}

    @field_validator("missing_info", mode="before")
    @classmethod
    def null_missing(cls, value: Any) -> Any:
        return value or []

    @field_validator("summary", mode="before")
    @classmethod
    def null_summary(cls, value: Any) -> Any:
        return value or ""


class AnalyzeRequest(CamelModel):
    user_text: str = Field(..., description="Free-text description of the poster")


class AnalyzeResponse(CamelModel):
    success: bool = True
    analysis: AnalysisResult
    warning: str | None = None


class ImageDataRequest(CamelModel):
    image_data: str = Field(..., min_length=1, description="Image URL or data URL")


class ImageDescriptionResponse(CamelModel):
    success: bool = True
    description: str


class TextBlock(CamelModel):
    """Text found on a poster. Positions and sizes are percentages (0-100)."""
    text: str
    x: float
    y: float
    width: float
    height: float
    confidence: float = 95
    font_size: float = 32


class ExtractTextResponse(CamelModel):
    success: bool = True
    text_blocks: list[TextBlock] = Field(default_factory=list)


class TranscribeRequest(CamelModel):
    audio_base64: str = Field(..., min_length=1)


class TranscriptionResponse(BaseModel):
    text: str
