# =============================================================================
# app/routers/templates.py - Reference Templates
# =============================================================================
# Curated posters users can pick as a style reference.
#
# Reads are public. Writes need the `templates.manage` permission
# (content managers) or an admin role. Migrating legacy templates to
# storage is admin only.
# =============================================================================

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Path, Query

from app.auth import AuthUser, require_admin, require_permission
from core.models.template import (
    AddTemplatesRequest,
    MigrateTemplatesRequest,
    MigrationReport,
    RandomTemplateResponse,
    ReferenceTemplate,
    TemplateStats,
    TemplateUploadRequest,
    TemplateUploadResponse,
)
from core.services.template_service import TemplateService

logger = logging.getLogger(__name__)

router = APIRouter()

MANAGE_PERMISSION = "templates.manage"


@router.get("", response_model=list[ReferenceTemplate])
async def list_templates(
    domain: Annotated[str | None, Query(description="Filter by domain")] = None,
    category: Annotated[str | None, Query(description="Filter by design category")] = None,
    limit: Annotated[int, Query(ge=1, le=200)] = 50,
):
    return TemplateService.list_templates(domain=domain, category=category, limit=limit)


@router.get("/random", response_model=RandomTemplateResponse)
async def random_template(
    domain: Annotated[str, Query(min_length=1, description="Domain to pick from")],
):
    """A random template of the domain; `template` is null when the domain has none."""
    return TemplateService.random_template(domain)


@router.get("/stats", response_model=TemplateStats)
async def template_stats():
    """Number of templates per domain."""
    return TemplateService.stats()


@router.post("", response_model=list[ReferenceTemplate])
async def add_templates(
    request: AddTemplatesRequest,
    user: AuthUser = Depends(require_permission(MANAGE_PERMISSION)),
):
    """Add one or more templates (domain, designCategory and imageUrl required)."""
    logger.info(f"User {user.id} adding {len(request.templates)} templates")
    return TemplateService.add_templates(request.templates)


@router.post("/upload", response_model=TemplateUploadResponse)
async def upload_template(
    request: TemplateUploadRequest,
    user: AuthUser = Depends(require_permission(MANAGE_PERMISSION)),
):
    """
    Add a template from a base64 image (imageData).

    The image is stored in the reference-templates bucket. An image already
    contributed returns is_duplicate=true with the existing template id.
    """
    logger.info(f"User {user.id} uploading a {request.domain} template")
    return TemplateService.upload_template(request)


@router.post("/migrate", response_model=MigrationReport)
async def migrate_templates(
    request: MigrateTemplatesRequest,
    admin: AuthUser = Depends(require_admin),
):
    """Copy templates served by the web app (/reference-templates/...) into storage."""
    logger.info(f"Admin {admin.id} migrating templates from {request.source_origin}")
    return TemplateService.migrate_to_storage(request.source_origin)


@router.delete("/{template_id}")
async def delete_template(
    template_id: Annotated[str, Path(description="Template UUID")],
    user: AuthUser = Depends(require_permission(MANAGE_PERMISSION)),
):
    TemplateService.delete_template(template_id)
    return {"success": True, "template_id": template_id}
