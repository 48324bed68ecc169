# =============================================================================
# core/services/storage_service.py - Image Storage (Supabase Storage)
# =============================================================================
# Kie AI only downloads images from public URLs, so images sent as base64
# data URLs (data:image/png;base64,...) are written to the public
# `reference-templates` bucket first.
#
# Object names are the SHA-256 of the decoded bytes: the same image uploaded
# twice lands on the same object.
#
# Usage:
#   from core.services.storage_service import StorageService
#   url = StorageService.host_image("data:image/png;base64,iVBOR...", "uploads/<user_id>")
# =============================================================================

import base64
import binascii
import hashlib
import logging

from app.exceptions import InvalidImageError, StorageUploadError
from core.models.base import DATA_URL_PATTERN, is_remote_url
from lib.supabase_client import SupabaseClient

logger = logging.getLogger(__name__)

BUCKET = "reference-templates"

# image/<subtype> -> file extension
EXTENSIONS = {
    "jpeg": "jpg",
    "jpg": "jpg",
    "png": "png",
    "webp": "webp",
    "gif": "gif",
}


def decode_data_url(data_url: str) -> tuple[bytes, str]:
    """
    Split a base64 image data URL into bytes and a file extension.

    Raises:
        InvalidImageError: Not an image data URL, unsupported type or bad base64
    """
    match = DATA_URL_PATTERN.match(data_url or "")
    if not match:
        raise InvalidImageError()

    subtype = match.group(1).lower()
    extension = EXTENSIONS.get(subtype)
    if extension is None:
        raise InvalidImageError(f"Format d'image non supporté: {subtype}")

    try:
        content = base64.b64decode("".join(match.group(2).split()), validate=True)
    except (binascii.Error, ValueError):
        raise InvalidImageError("Image encodée invalide")

    if not content:
        raise InvalidImageError("Image vide")
    return content, extension


def image_hash(content: bytes) -> str:
    return hashlib.sha256(content).hexdigest()


class StorageService:
    """Uploads to and removes from the reference-templates bucket."""

    @staticmethod
    def upload(
        path: str,
        content: bytes,
        extension: str,
        upsert: bool = True,
        content_type: str | None = None,
    ) -> str:
        """
        Write an object and return its public URL.

        content_type defaults to the type implied by `extension`.

        Raises:
            StorageUploadError: If Supabase refuses the upload
        """
        bucket = SupabaseClient.get_client().storage.from_(BUCKET)
        if content_type is None:
            content_type = "image/jpeg" if extension == "jpg" else f"image/{extension}"

        try:
            bucket.upload(
                path,
                content,
                file_options={"content-type": content_type, "upsert": "true" if upsert else "false"},
            )
        except Exception as e:
            logger.error(f"Storage upload failed for {path}: {e}")
            raise StorageUploadError(path, str(e))

        logger.info(f"Uploaded {len(content)} bytes to {BUCKET}/{path}")
        return bucket.get_public_url(path)

    @staticmethod
    def remove(path: str) -> None:
        """Best-effort cleanup of an object written by upload()."""
        try:
            SupabaseClient.get_client().storage.from_(BUCKET).remove([path])
        except Exception as e:
            logger.warning(f"Failed to remove {BUCKET}/{path}: {e}")

    @staticmethod
    def host_image(image: str | None, folder: str) -> str | None:
        """
        Return a public URL for `image`.

        http(s) URLs are returned unchanged; data URLs are uploaded to
        `<folder>/<sha256>.<ext>`.

        Raises:
            InvalidImageError: Neither a URL nor an image data URL
            StorageUploadError: Upload refused
        """
        if not image or is_remote_url(image):
            return image

        content, extension = decode_data_url(image)
        return StorageService.upload(f"{folder}/{image_hash(content)}.{extension}", content, extension)
