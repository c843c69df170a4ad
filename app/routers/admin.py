# =============================================================================
# app/routers/admin.py - Admin Endpoints
# =============================================================================
# Resource ingestion and maintenance, plus member administration.
#
# Every endpoint requires an approved admin (require_admin): a missing or
# invalid token is 401, any other identity is 403. The check runs before
# the request body is looked at.
# =============================================================================

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile

from app.auth import AdminDep
from app.dependencies import (
    get_ingestion_service,
    get_member_service,
    get_resource_admin_service,
)
from core.models.member import (
    MemberListResponse,
    MemberProfile,
    MemberUpdateRequest,
    MemberUpdateResponse,
)
from core.models.resource import (
    DeleteRequest,
    DeleteResponse,
    DisplaynameUpdateRequest,
    DisplaynameUpdateResponse,
    ReplaceResponse,
    UploadResponse,
)
from core.services.ingestion_service import IngestionService, UploadedFile, UploadForm
from core.services.member_service import MemberService
from core.services.resource_admin_service import ResourceAdminService

logger = logging.getLogger(__name__)

router = APIRouter()

IngestionDep = Annotated[IngestionService, Depends(get_ingestion_service)]
ResourceAdminDep = Annotated[ResourceAdminService, Depends(get_resource_admin_service)]
MemberServiceDep = Annotated[MemberService, Depends(get_member_service)]


async def _read_upload(file: UploadFile | None) -> UploadedFile | None:
    """Read a multipart file fully into memory."""
    if file is None or not file.filename:
        return None
    data = await file.read()
    return UploadedFile(filename=file.filename, data=data, content_type=file.content_type)


# =============================================================================
# Resources
# =============================================================================

@router.post("/upload", response_model=UploadResponse)
async def upload_resource(
    admin: AdminDep,
    service: IngestionDep,
    board_slug: Annotated[str, Form(alias="boardSlug")] = "",
    title: Annotated[str, Form()] = "",
    displayname: Annotated[str | None, Form()] = None,
    visibility: Annotated[str, Form()] = "public",
    published_at: Annotated[str | None, Form(alias="publishedAt")] = None,
    file: Annotated[UploadFile | None, File(description="Resource file")] = None,
):
    """
    Upload a file and create a resource.

    Multipart fields: boardSlug, title, displayname, visibility
    (public/member/admin), publishedAt (YYYY-MM-DD, defaults to today UTC),
    file. The kind is inferred from the file extension.

    Returns the inserted row and, for public resources, its public URL.
    """
    form = UploadForm(
        board_slug=board_slug,
        title=title,
        displayname=displayname,
        visibility=visibility,
        published_at=published_at,
    )
    upload = await _read_upload(file)

    result = service.ingest(form, upload, admin)
    return UploadResponse(resource=result.resource, public_url=result.public_url)


@router.post("/resources/replace", response_model=ReplaceResponse)
async def replace_resource_file(
    admin: AdminDep,
    service: IngestionDep,
    resource_id: Annotated[int, Form(alias="resourceId")] = 0,
    file: Annotated[UploadFile | None, File(description="Replacement file")] = None,
):
    """
    Replace the file behind a resource, keeping its id, board and visibility.

    The new file must be of the same kind as the current one.
    """
    upload = await _read_upload(file)
    result = service.replace_file(resource_id, upload, admin)
    return ReplaceResponse(
        resource=result.resource,
        old_key=result.old_key,
        new_key=result.new_key,
    )


@router.post(
    "/resources/delete",
    response_model=DeleteResponse,
    response_model_exclude_none=True,
)
async def delete_resource(
    body: DeleteRequest,
    admin: AdminDep,
    service: ResourceAdminDep,
):
    """
    Soft-delete a resource.

    Deleting twice is not an error: the second call reports
    alreadyDeleted and changes nothing.
    """
    result = service.soft_delete(body.resource_id, admin)
    return DeleteResponse(already_deleted=True if result.already_deleted else None)


@router.post("/resources/update", response_model=DisplaynameUpdateResponse)
async def update_resource(
    body: DisplaynameUpdateRequest,
    admin: AdminDep,
    service: ResourceAdminDep,
):
    """Set or clear a resource's display title."""
    resource = service.update_displayname(body.resource_id, body.displayname, admin)
    return DisplaynameUpdateResponse(resource=resource)


# =============================================================================
# Members
# =============================================================================

@router.get("/users/list", response_model=MemberListResponse)
async def list_users(
    admin: AdminDep,
    service: MemberServiceDep,
    page: Annotated[int, Query()] = 1,
    per_page: Annotated[int, Query(alias="perPage")] = 50,
    q: Annotated[str, Query()] = "",
):
    """
    List auth users with their role and approval.

    perPage is clamped to 1..200; q filters the page by email substring.
    """
    members, page, per_page = service.list_members(admin, page=page, per_page=per_page, q=q)
    return MemberListResponse(
        users=members,
        page=page,
        per_page=per_page,
        total=len(members),
    )


@router.post("/users/update", response_model=MemberUpdateResponse)
async def update_user(
    body: MemberUpdateRequest,
    admin: AdminDep,
    service: MemberServiceDep,
):
    """Change a member's role and/or approval. Omitted fields are kept."""
    profile = service.update_member(
        body.user_id,
        admin,
        role=body.role,
        approved=body.approved,
    )
    return MemberUpdateResponse(
        profile=MemberProfile(id=profile.id, role=profile.role, approved=profile.approved)
    )
