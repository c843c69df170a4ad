# =============================================================================
# app/routers/resources.py - Public Resource Endpoints
# =============================================================================
# Listing and file delivery for the public site.
#
# All endpoints accept an optional bearer token; without one the viewer is
# anonymous and sees public resources only.
# =============================================================================

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Query

from app.auth import ViewerDep
from app.dependencies import SettingsDep, get_delivery_broker, get_resource_directory
from core.models.resource import (
    AuthSummary,
    ResourceListResponse,
    ResourcePageResponse,
    ResourceUrlRequest,
    ResourceUrlResponse,
)
from core.models.viewer import Viewer
from core.services.delivery_broker import DeliveryBroker
from core.services.resource_directory import ResourceDirectory

logger = logging.getLogger(__name__)

router = APIRouter()

DirectoryDep = Annotated[ResourceDirectory, Depends(get_resource_directory)]
BrokerDep = Annotated[DeliveryBroker, Depends(get_delivery_broker)]


def _auth_summary(viewer: Viewer) -> AuthSummary:
    return AuthSummary(
        is_logged_in=viewer.is_logged_in,
        approved=viewer.approved,
        role=viewer.role,
    )


# =============================================================================
# Endpoints
# =============================================================================

@router.get("/list", response_model=ResourceListResponse)
async def list_resources(
    viewer: ViewerDep,
    directory: DirectoryDep,
    cat: Annotated[str | None, Query(description="Board slug")] = None,
    board_slug: Annotated[str | None, Query(alias="boardSlug")] = None,
):
    """
    List resources visible to the caller, newest first.

    `cat` (or `boardSlug`) restricts the list to one board; an unknown
    slug returns an empty list. Each item says whether the caller may
    download it.
    """
    items = directory.list_resources(cat or board_slug, viewer)
    return ResourceListResponse(auth=_auth_summary(viewer), items=items)


@router.get("/page", response_model=ResourcePageResponse)
async def list_resources_page(
    viewer: ViewerDep,
    directory: DirectoryDep,
    settings: SettingsDep,
    cat: Annotated[str | None, Query(description="Board slug")] = None,
    page: Annotated[int, Query(ge=1)] = 1,
    q: Annotated[str, Query(max_length=200, description="Title search")] = "",
):
    """
    One page of a board's resources with optional title search.

    Used by the category detail view; page size is fixed by configuration.
    """
    page_size = settings.RESOURCE_PAGE_SIZE
    items, total = directory.list_page(cat, viewer, page=page, page_size=page_size, q=q)
    return ResourcePageResponse(
        auth=_auth_summary(viewer),
        items=items,
        total=total,
        page=page,
        page_size=page_size,
    )


@router.post("/url", response_model=ResourceUrlResponse)
async def get_resource_url(
    body: ResourceUrlRequest,
    viewer: ViewerDep,
    broker: BrokerDep,
):
    """
    Get a URL for viewing or downloading one resource.

    Public files get their stable public URL. Member and admin files get a
    signed URL that expires after a short TTL.

    Errors:
        401: Login required (anonymous on gated resource or download)
        403: Not approved / not admin
        404: Resource missing, deleted, or without a file
    """
    link = broker.resolve(body.resource_id, body.mode, viewer)
    return ResourceUrlResponse(url=link.url)
