# =============================================================================
# core/services/template_service.py - Reference Template Library
# =============================================================================
# CRUD over reference_templates plus the two lookups used by the product:
# a random template for a domain (style seed) and per-domain counts.
#
# Contributed images are deduplicated on the SHA-256 of their bytes, kept
# as a [HASH:...] prefix of the description.
# =============================================================================

import logging
import random
from collections import Counter
from typing import Any

import httpx

from app.exceptions import StorageUploadError, TemplateNotFoundError
from core.models.template import (
    MigratedTemplate,
    MigrationReport,
    RandomTemplateResponse,
    ReferenceTemplate,
    TemplateInput,
    TemplateStats,
    TemplateUploadRequest,
    TemplateUploadResponse,
)
from core.services.storage_service import StorageService, decode_data_url, image_hash
from lib.supabase_client import SupabaseClient

logger = logging.getLogger(__name__)

TABLE = "reference_templates"

# image_url of templates still served by the web app
LEGACY_PREFIX = "/reference-templates/"


def hash_prefix(digest: str) -> str:
    return f"[HASH:{digest[:32]}]"


class TemplateService:
    """Service for reference template operations."""

    @staticmethod
    def list_templates(
        domain: str | None = None,
        category: str | None = None,
        limit: int = 50,
    ) -> list[ReferenceTemplate]:
        """Newest templates first, optionally filtered by domain and category."""
        client = SupabaseClient.get_client()

        try:
            query = client.table(TABLE).select("*")
            if domain:
                query = query.eq("domain", domain)
            if category:
                query = query.eq("design_category", category)
            response = query.order("created_at", desc=True).limit(limit).execute()
        except Exception as e:
            logger.error(f"Failed to fetch templates: {e}")
            raise

        return [ReferenceTemplate.model_validate(row) for row in response.data or []]

    @staticmethod
    def add_templates(templates: list[TemplateInput]) -> list[ReferenceTemplate]:
        """Insert one or more templates and return the stored rows."""
        client = SupabaseClient.get_client()
        rows = [template.model_dump(exclude_none=True) for template in templates]

        try:
            response = client.table(TABLE).insert(rows).execute()
        except Exception as e:
            logger.error(f"Failed to insert templates: {e}")
            raise

        logger.info(f"Inserted {len(response.data or [])} templates")
        return [ReferenceTemplate.model_validate(row) for row in response.data or []]

    @staticmethod
    def delete_template(template_id: str) -> str:
        """
        Delete a template.

        Raises:
            TemplateNotFoundError: If no template has this id
        """
        client = SupabaseClient.get_client()

        try:
            response = client.table(TABLE).delete().eq("id", template_id).execute()
        except Exception as e:
            logger.error(f"Failed to delete template: {e}")
            raise

        if not response.data:
            raise TemplateNotFoundError(template_id)

        logger.info(f"Deleted template: {template_id}")
        return template_id

    @staticmethod
    def random_template(domain: str) -> RandomTemplateResponse:
        """Pick a random template of `domain` (None when the domain has none)."""
        client = SupabaseClient.get_client()

        try:
            response = client.table(TABLE).select("*").eq("domain", domain).execute()
        except Exception as e:
            logger.error(f"Failed to fetch templates: {e}")
            raise

        rows: list[dict[str, Any]] = response.data or []
        if not rows:
            return RandomTemplateResponse(message=f"No templates found for domain: {domain}")

        return RandomTemplateResponse(template=ReferenceTemplate.model_validate(random.choice(rows)))

    @staticmethod
    def stats() -> TemplateStats:
        """Number of templates per domain."""
        client = SupabaseClient.get_client()

        try:
            response = client.table(TABLE).select("domain").execute()
        except Exception as e:
            logger.error(f"Failed to fetch stats: {e}")
            raise

        rows = response.data or []
        counts = Counter(row.get("domain") for row in rows)
        return TemplateStats(by_domain=dict(counts), total=len(rows))

    # -------------------------------------------------------------------------
    # Storage
    # -------------------------------------------------------------------------

    @staticmethod
    def upload_template(data: TemplateUploadRequest) -> TemplateUploadResponse:
        """
        Store a contributed template image and register it.

        An image whose bytes were already contributed is not stored again:
        the response carries is_duplicate=True and the existing id.

        Raises:
            InvalidImageError: image_data is not a supported image data URL
            StorageUploadError: Upload refused
        """
        content, extension = decode_data_url(data.image_data)
        digest = image_hash(content)
        prefix = hash_prefix(digest)
        client = SupabaseClient.get_client()

        try:
            existing = client.table(TABLE).select("id, description").like("description", f"{prefix}%").execute()
        except Exception as e:
            logger.error(f"Failed to check for duplicate template: {e}")
            raise

        if existing.data:
            logger.info(f"Duplicate template image {digest[:16]}, existing id {existing.data[0]['id']}")
            return TemplateUploadResponse(
                is_duplicate=True,
                message="Cette image existe déjà dans la base de données",
                existing_id=existing.data[0]["id"],
            )

        path = f"user-contributed/{data.domain}/{digest[:16]}.{extension}"
        image_url = StorageService.upload(path, content, extension, upsert=False)

        row = {
            "domain": data.domain,
            "design_category": data.design_category or "general",
            "image_url": image_url,
            "description": f"{prefix} {data.description or f'Template {data.domain} contribué par utilisateur'}",
            "tags": data.tags or [data.domain, "user-contributed"],
        }
        try:
            response = client.table(TABLE).insert(row).execute()
        except Exception as e:
            logger.error(f"Failed to save template {path}: {e}")
            StorageService.remove(path)
            raise

        template = ReferenceTemplate.model_validate(response.data[0])
        logger.info(f"Contributed template saved: {template.id} ({path})")
        return TemplateUploadResponse(
            is_duplicate=False,
            message="Image de référence ajoutée à la base de données",
            template=template,
        )

    @staticmethod
    def migrate_to_storage(source_origin: str) -> MigrationReport:
        """
        Copy templates still pointing at /reference-templates/... on the web
        app into the storage bucket and repoint their image_url.

        Each template is migrated independently; failures are reported in
        the results and do not stop the run.
        """
        client = SupabaseClient.get_client()

        try:
            response = client.table(TABLE).select("id, image_url").like("image_url", f"{LEGACY_PREFIX}%").execute()
        except Exception as e:
            logger.error(f"Failed to fetch templates to migrate: {e}")
            raise

        rows = response.data or []
        logger.info(f"Migrating {len(rows)} templates from {source_origin}")

        results: list[MigratedTemplate] = []
        for row in rows:
            path = row["image_url"][len(LEGACY_PREFIX):]
            results.append(TemplateService._migrate_one(client, row["id"], path, source_origin))

        succeeded = sum(1 for result in results if result.success)
        message = f"Migration terminée: {succeeded} succès, {len(results) - succeeded} échecs"
        logger.info(message)
        return MigrationReport(message=message, results=results)

    @staticmethod
    def _migrate_one(client: Any, template_id: str, path: str, source_origin: str) -> MigratedTemplate:
        try:
            download = httpx.get(f"{source_origin}{LEGACY_PREFIX}{path}", timeout=30.0, follow_redirects=True)
        except httpx.HTTPError as e:
            return MigratedTemplate(path=path, success=False, error=str(e))

        if download.status_code >= 400:
            return MigratedTemplate(path=path, success=False, error=f"HTTP {download.status_code}")

        content_type = download.headers.get("content-type", "")
        if not content_type.startswith("image/"):
            return MigratedTemplate(path=path, success=False, error=f"Not an image: {content_type}")

        extension = path.rsplit(".", 1)[-1].lower() if "." in path else "jpg"
        try:
            new_url = StorageService.upload(path, download.content, extension, upsert=True, content_type=content_type)
        except StorageUploadError as e:
            return MigratedTemplate(path=path, success=False, error=e.details.get("error"))

        try:
            client.table(TABLE).update({"image_url": new_url}).eq("id", template_id).execute()
        except Exception as e:
            logger.warning(f"Template {template_id} uploaded but not repointed: {e}")
            return MigratedTemplate(path=path, success=False, new_url=new_url, error=str(e))

        logger.info(f"Migrated template {template_id}: {path}")
        return MigratedTemplate(path=path, success=True, new_url=new_url)
