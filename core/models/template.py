# =============================================================================
# core/models/template.py - Reference Template Schemas
# =============================================================================
# Reference templates are stored example posters used to seed the style of
# a generation (reference_templates table). Contributed templates arrive
# as base64 data URLs; legacy templates are migrated from a site origin.
# =============================================================================

from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from .base import CamelModel, is_remote_url


class ReferenceTemplate(BaseModel):
    """A row of reference_templates."""
    id: str
    domain: str
    design_category: str
    image_url: str
    description: str | None = None
    tags: list[str] | None = None
    designer_id: str | None = None
    earnings: float | None = None
    is_active: bool | None = True
    usage_count: int | None = 0
    created_at: datetime | None = None


class TemplateInput(CamelModel):
    """
    A template to add.

    Example:
        {"domain": "church", "designCategory": "crusade", "imageUrl": "https://..."}
    """
    domain: str = Field(..., min_length=1)
    design_category: str = Field(..., min_length=1)
    image_url: str = Field(..., min_length=1)
    description: str | None = None
    tags: list[str] | None = None


class AddTemplatesRequest(BaseModel):
    """Single or batch insert."""
    templates: list[TemplateInput] = Field(..., min_length=1, max_length=200)


class TemplateStats(BaseModel):
    """Count of templates per domain."""
    by_domain: dict[str, int]
    total: int


class RandomTemplateResponse(BaseModel):
    template: ReferenceTemplate | None = None
    message: str | None = None


class TemplateUploadRequest(CamelModel):
    """
    A contributed template sent as a base64 data URL.

    Example:
        {"imageData": "data:image/jpeg;base64,...", "domain": "restaurant"}
    """
    image_data: str = Field(..., min_length=1, description="data:image/...;base64,...")
    domain: str = Field(..., min_length=1)
    description: str | None = None
    design_category: str = "general"
    tags: list[str] | None = None


class TemplateUploadResponse(BaseModel):
    """Result of a contributed template upload."""
    success: bool = True
    is_duplicate: bool
    message: str
    existing_id: str | None = None
    template: ReferenceTemplate | None = None


class MigrateTemplatesRequest(CamelModel):
    """Origin serving the legacy /reference-templates/... paths."""
    source_origin: str = Field(..., min_length=1, description="e.g. https://graphiste-gpt.app")

    @field_validator("source_origin")
    @classmethod
    def origin_is_http_url(cls, value: str) -> str:
        value = value.strip().rstrip("/")
        if not is_remote_url(value):
            raise ValueError("sourceOrigin doit être une URL http(s)")
        return value


class MigratedTemplate(BaseModel):
    path: str
    success: bool
    new_url: str | None = None
    error: str | None = None


class MigrationReport(BaseModel):
    success: bool = True
    message: str
    results: list[MigratedTemplate]
