# =============================================================================
# core/models/conversation.py - Conversation Wizard Schemas
# =============================================================================
# The poster wizard walks the user through a fixed sequence of steps:
#
#   greeting -> domain -> details -> reference -> colors -> content_image
#            -> generating -> complete
#
# ConversationState is the flat record mutated by each step; Conversation
# wraps it with the chat transcript and the generation outcome. Conversations
# are stored as JSON (see core/services/conversation_store.py).
# =============================================================================

from datetime import datetime
from enum import Enum
from typing import Any
from uuid import uuid4

from pydantic import BaseModel, Field, field_validator

from .base import check_image_reference
from .generation import AspectRatio, Domain, OutputFormat, Resolution
from lib.utils import utc_now


class ConversationStep(str, Enum):
    """
    Steps of the poster wizard, in order.

    - greeting: waiting for the first project description
    - domain: waiting for the domain selection
    - details: waiting for extra details (texts, mood)
    - reference: waiting for a style reference image (or skip)
    - colors: waiting for the color palette
    - content_image: waiting for an image to integrate (or skip)
    - generating: poster generation queued / running / failed (retryable)
    - complete: poster ready; a new message requests a modification
    """
    GREETING = "greeting"
    DOMAIN = "domain"
    DETAILS = "details"
    REFERENCE = "reference"
    COLORS = "colors"
    CONTENT_IMAGE = "content_image"
    GENERATING = "generating"
    COMPLETE = "complete"


class MessageRole(str, Enum):
    USER = "user"
    ASSISTANT = "assistant"


class ConversationMessage(BaseModel):
    """One entry of the chat transcript."""
    id: str = Field(default_factory=lambda: str(uuid4()))
    role: MessageRole
    content: str
    image: str | None = Field(
        default=None,
        description="Image attached to the message (reference or content upload)"
    )
    created_at: datetime = Field(default_factory=utc_now)


class ConversationState(BaseModel):
    """
    Flat state record of the wizard.

    Every field except `step` is optional and filled in as the user
    progresses. Output format defaults to 3:4 / 1K / png.
    """
    step: ConversationStep = ConversationStep.GREETING
    domain: Domain | None = None
    description: str | None = None
    suggested_domain: Domain | None = None
    extracted_info: dict[str, Any] = Field(default_factory=dict)
    reference_image: str | None = None
    reference_description: str | None = None
    color_palette: list[str] | None = None
    content_image: str | None = None
    needs_content_image: bool | None = None
    modification_request: str | None = None
    aspect_ratio: AspectRatio = AspectRatio.PORTRAIT_3_4
    resolution: Resolution = Resolution.K1
    output_format: OutputFormat = OutputFormat.PNG


class Conversation(BaseModel):
    """A wizard session owned by one user."""
    id: str = Field(default_factory=lambda: str(uuid4()))
    user_id: str
    state: ConversationState = Field(default_factory=ConversationState)
    messages: list[ConversationMessage] = Field(default_factory=list)
    generated_image: str | None = None
    generated_image_id: str | None = None
    generation_task_id: str | None = None
    last_error: str | None = None
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)


# =============================================================================
# Request Models
# =============================================================================

class UserMessageRequest(BaseModel):
    """Free-text message typed by the user."""
    content: str = Field(..., min_length=1, max_length=5000)


class DomainSelectRequest(BaseModel):
    domain: Domain


class ImageSubmitRequest(BaseModel):
    """Reference or content image, as URL or data URL."""
    image: str = Field(..., min_length=1)

    @field_validator("image")
    @classmethod
    def image_is_url_or_data_url(cls, value: str) -> str:
        return check_image_reference(value)


class ColorsConfirmRequest(BaseModel):
    """Palette chosen by the user, dominant color first."""
    colors: list[str] = Field(..., min_length=1, max_length=6)

    @field_validator("colors")
    @classmethod
    def colors_not_blank(cls, value: list[str]) -> list[str]:
        cleaned = [color.strip() for color in value if color and color.strip()]
        if not cleaned:
            raise ValueError("At least one color is required")
        return cleaned


class FormatRequest(BaseModel):
    """Output format override, allowed before generation starts."""
    aspect_ratio: AspectRatio | None = None
    resolution: Resolution | None = None
    output_format: OutputFormat | None = None


# =============================================================================
# Response Models
# =============================================================================

class GenerationQueuedResponse(BaseModel):
    """Returned when a conversation's poster generation is enqueued."""
    conversation_id: str
    task_id: str
    status: str = "PENDING"
    message: str = "Generation queued. Use GET /api/v1/tasks/{task_id} or the WebSocket to follow it."
