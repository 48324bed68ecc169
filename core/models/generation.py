# =============================================================================
# core/models/generation.py - Poster Generation Schemas
# =============================================================================
# These models define the API contract for poster generation:
# - AspectRatio / Resolution / OutputFormat / Domain: closed value sets
# - GenerateImageRequest: input of POST /generate-image
# - GenerationResult: what the poster generator returns
# - GeneratedImage / SaveImageRequest: history rows (generated_images table)
# =============================================================================

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field, field_validator

from .base import CamelModel, check_image_reference


class AspectRatio(str, Enum):
    """Output aspect ratios supported by the image generator."""
    SQUARE = "1:1"
    PORTRAIT_2_3 = "2:3"
    LANDSCAPE_3_2 = "3:2"
    PORTRAIT_3_4 = "3:4"
    LANDSCAPE_4_3 = "4:3"
    PORTRAIT_4_5 = "4:5"
    LANDSCAPE_5_4 = "5:4"
    STORY = "9:16"
    WIDESCREEN = "16:9"
    ULTRAWIDE = "21:9"
    BANNER_4_1 = "4:1"
    BANNER_3_1 = "3:1"
    TALL_1_3 = "1:3"


class Resolution(str, Enum):
    """
    Output resolution. Also the unit of credit pricing:
    1K costs 1 credit, 2K costs 2, 4K costs 4.
    """
    K1 = "1K"
    K2 = "2K"
    K4 = "4K"


class OutputFormat(str, Enum):
    PNG = "png"
    JPG = "jpg"


class Domain(str, Enum):
    """Business domain of a poster. Drives prompt styling and template lookup."""
    CHURCH = "church"
    EVENT = "event"
    EDUCATION = "education"
    RESTAURANT = "restaurant"
    FASHION = "fashion"
    MUSIC = "music"
    SPORT = "sport"
    TECHNOLOGY = "technology"
    HEALTH = "health"
    REALESTATE = "realestate"
    FORMATION = "formation"
    YOUTUBE = "youtube"
    SERVICE = "service"
    OTHER = "other"


class GenerateImageRequest(CamelModel):
    """
    Schema for a poster generation request.

    Example:
        {
            "prompt": "Affiche pour un concert gospel le 12 mars à Cotonou",
            "aspectRatio": "3:4",
            "resolution": "2K",
            "outputFormat": "png"
        }
    """

    prompt: str = Field(
        ...,
        max_length=20000,
        description="What the poster should say and show"
    )

    aspect_ratio: AspectRatio = Field(
        default=AspectRatio.PORTRAIT_3_4,
        description="Output aspect ratio"
    )

    resolution: Resolution = Field(
        default=Resolution.K2,
        description="Output resolution (drives credit cost)"
    )

    output_format: OutputFormat = Field(
        default=OutputFormat.PNG,
        description="Image file format"
    )

    reference_image: str | None = Field(
        default=None,
        description="URL or data URL of an existing poster whose style should be reproduced"
    )

    content_image: str | None = Field(
        default=None,
        description="URL or data URL of an image (product, person) to integrate in the poster"
    )

    domain: Domain | None = Field(
        default=None,
        description="Poster domain; detected from the prompt when omitted"
    )

    @field_validator("prompt")
    @classmethod
    def prompt_not_blank(cls, value: str) -> str:
        if not value or not value.strip():
            raise ValueError("Le prompt est requis")
        return value

    @field_validator("reference_image", "content_image")
    @classmethod
    def image_is_url_or_data_url(cls, value: str | None) -> str | None:
        return check_image_reference(value)


class GenerationResult(BaseModel):
    """Outcome of one call to the image generator."""
    success: bool
    image_url: str | None = None
    task_id: str | None = None
    provider: str = "nano-banana-pro"
    prompt: str | None = None
    error: str | None = None


class GenerateImageResponse(CamelModel):
    """
    Response of POST /generate-image.

    Example:
        {"success": true, "imageUrl": "https://...", "provider": "nano-banana-pro",
         "taskId": "task_123", "imageId": "660e8400-..."}
    """
    success: bool = True
    image_url: str
    provider: str
    task_id: str | None = None
    image_id: str | None = None


# =============================================================================
# History
# =============================================================================

class SaveImageRequest(CamelModel):
    """Parameters of a generation stored in the user's history."""

    image_url: str = Field(..., min_length=1)
    prompt: str = Field(..., min_length=1)
    aspect_ratio: AspectRatio = AspectRatio.PORTRAIT_3_4
    resolution: Resolution = Resolution.K2
    domain: Domain | None = None
    reference_image_url: str | None = None
    content_image_url: str | None = None
    logo_urls: list[str] | None = None
    logo_positions: list[str] | None = None
    color_palette: list[str] | None = None


class GeneratedImage(BaseModel):
    """A row of the generated_images table."""
    id: str
    user_id: str | None = None
    image_url: str
    prompt: str
    aspect_ratio: str
    resolution: str
    domain: str | None = None
    reference_image_url: str | None = None
    content_image_url: str | None = None
    logo_urls: list[str] | None = None
    logo_positions: list[str] | None = None
    color_palette: list[str] | None = None
    is_free_plan: bool | None = None
    is_showcase: bool | None = None
    created_at: datetime | None = None
