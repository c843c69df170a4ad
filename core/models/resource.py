# =============================================================================
# core/models/resource.py - Resource & Board Schemas
# =============================================================================
# Two families of models live here:
# - Records: typed views of database rows (boards, resources, profiles).
#   Rows returned by the Supabase SDK are parsed into these at the data
#   access seam so services never deal with raw dicts.
# - API models: request/response contracts. They serialize with camelCase
#   aliases (canDownload, boardSlug, ...) to match what the web client reads.
# =============================================================================

from datetime import date, datetime
from enum import Enum
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from .viewer import Role


# =============================================================================
# Enums
# =============================================================================

class Visibility(str, Enum):
    """
    Privilege level required to see a resource.

    Strictly ordered: admin requires everything member does, member
    requires everything public does.
    """
    PUBLIC = "public"
    MEMBER = "member"
    ADMIN = "admin"


class ResourceKind(str, Enum):
    """File-type classification, inferred from the filename at ingestion."""
    PDF = "pdf"
    IMAGE = "image"
    VIDEO = "video"
    SLIDE = "slide"
    DOC = "doc"
    ZIP = "zip"
    LINK = "link"


class AccessMode(str, Enum):
    """What the viewer wants to do with the file."""
    VIEW = "view"
    DOWNLOAD = "download"


# =============================================================================
# Records
# =============================================================================

class BoardRecord(BaseModel):
    """A category (board) row. Slug is immutable once published in URLs."""

    id: int | None = None
    slug: str
    title: str = ""


class ResourceRecord(BaseModel):
    """
    A resources row.

    kind and visibility are kept as plain strings: rows written by older
    tooling may carry values outside the enums, and the access policy must
    deny those rather than fail to parse them.
    """

    model_config = ConfigDict(populate_by_name=True)

    id: int
    board_id: int | None = None
    title: str = ""
    displayname: str | None = None
    kind: str = ""
    visibility: str = Visibility.PUBLIC.value
    published_at: date | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    r2_key: str | None = None
    mime: str | None = None
    size_bytes: int | None = None
    original_filename: str | None = None
    deleted_at: datetime | None = None
    deleted_by: UUID | None = None

    # Joined board (select "boards:boards ( slug, title )")
    board: BoardRecord | None = Field(default=None, alias="boards")

    @field_validator("kind", "visibility", mode="before")
    @classmethod
    def _null_to_empty(cls, value: object) -> object:
        # NULL reads as ""; an empty visibility is denied by the policy
        return "" if value is None else value

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None

    @property
    def storage_key(self) -> str | None:
        return self.r2_key or None

    @property
    def display_date(self) -> str:
        """published_at, falling back to the creation date."""
        if self.published_at:
            return self.published_at.isoformat()
        if self.created_at:
            return self.created_at.date().isoformat()
        return ""


class ProfileRecord(BaseModel):
    """A profiles row: role and membership approval of an auth user."""

    id: UUID
    role: Role = Role.MEMBER
    approved: bool = False

    @field_validator("role", mode="before")
    @classmethod
    def _parse_role(cls, value: object) -> Role:
        return Role.parse(value)

    @field_validator("approved", mode="before")
    @classmethod
    def _strict_approved(cls, value: object) -> bool:
        # Only an explicit true approves; null or "yes" do not
        return value is True


# =============================================================================
# API Models
# =============================================================================

class ApiModel(BaseModel):
    """Base for API contracts: camelCase on the wire, snake_case in Python."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class AuthSummary(ApiModel):
    """Who the listing was computed for."""
    is_logged_in: bool
    approved: bool
    role: Role


class ResourceListItem(ApiModel):
    """
    One row of a resource listing.

    Metadata only - storage keys never leave the server.

    Example:
        {
            "id": 42, "title": "ATM Vol.1", "kind": "pdf",
            "displayname": null, "date": "2026-01-08",
            "visibility": "public", "canView": true, "canDownload": false,
            "boardSlug": "atm", "boardTitle": "ATM",
            "originalFilename": "atm-vol1.pdf"
        }
    """
    id: int
    title: str
    kind: str
    displayname: str | None = None
    date: str = ""
    visibility: str
    can_view: bool = True
    can_download: bool = False
    board_slug: str = ""
    board_title: str = ""
    original_filename: str | None = None


class ResourceListResponse(ApiModel):
    """Response of GET /resources/list."""
    ok: bool = True
    auth: AuthSummary
    items: list[ResourceListItem] = Field(default_factory=list)


class ResourcePageResponse(ResourceListResponse):
    """Response of GET /resources/page (category detail view)."""
    total: int = Field(default=0, ge=0)
    page: int = Field(default=1, ge=1)
    page_size: int = Field(default=10, ge=1)


class ResourceUrlRequest(ApiModel):
    """Body of POST /resources/url. Anything but "download" means view."""
    resource_id: int = Field(..., gt=0, description="Resource id")
    mode: AccessMode = Field(default=AccessMode.VIEW)

    @field_validator("mode", mode="before")
    @classmethod
    def _default_to_view(cls, value: object) -> AccessMode:
        return AccessMode.DOWNLOAD if value == AccessMode.DOWNLOAD.value else AccessMode.VIEW


class ResourceUrlResponse(ApiModel):
    ok: bool = True
    url: str


class UploadResponse(ApiModel):
    """Response of POST /admin/upload."""
    ok: bool = True
    resource: ResourceRecord
    public_url: str | None = None


class ReplaceResponse(ApiModel):
    """Response of POST /admin/resources/replace."""
    ok: bool = True
    resource: ResourceRecord
    old_key: str | None = None
    new_key: str


class DeleteRequest(ApiModel):
    resource_id: int = Field(..., gt=0)


class DeleteResponse(ApiModel):
    ok: bool = True
    already_deleted: bool | None = None


class DisplaynameUpdateRequest(ApiModel):
    """Body of POST /admin/resources/update. Blank or null clears the override."""
    resource_id: int = Field(..., gt=0)
    displayname: str | None = None


class DisplaynameUpdateResponse(ApiModel):
    ok: bool = True
    resource: ResourceRecord


class BoardSummary(ApiModel):
    slug: str
    title: str


class BoardListResponse(ApiModel):
    ok: bool = True
    boards: list[BoardSummary] = Field(default_factory=list)
