# =============================================================================
# core/models/base.py - Shared Model Configuration
# =============================================================================
# The web client talks camelCase (aspectRatio, checkoutUrl, userText) while
# the database and Python code use snake_case. CamelModel accepts both on
# input and serializes camelCase in responses.
#
# Also holds the image reference check shared by the request models.
# =============================================================================

import re

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model for request/response bodies exchanged with the web client."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )


# Images travel as public http(s) URLs or as base64 data URLs
# (data:image/png;base64,...) that the API hosts in Supabase storage.
DATA_URL_PATTERN = re.compile(r"^data:image/([a-z0-9.+-]+);base64,(.+)$", re.IGNORECASE | re.DOTALL)


def is_remote_url(value: str | None) -> bool:
    return bool(value) and value.startswith(("http://", "https://"))


def is_data_url(value: str | None) -> bool:
    return bool(value) and DATA_URL_PATTERN.match(value) is not None


def check_image_reference(value: str | None) -> str | None:
    """Field validator body: None, an http(s) URL or an image data URL."""
    if value is None:
        return None
    value = value.strip()
    if not (is_remote_url(value) or is_data_url(value)):
        raise ValueError("L'image doit être une URL http(s) ou une image encodée en base64")
    return value
