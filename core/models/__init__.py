# =============================================================================
# core/models/ - Pydantic Data Models
# =============================================================================
# This package contains Pydantic schemas for data validation:
# - viewer.py: Viewer identity and roles
# - resource.py: Board/resource records and resource API contracts
# - member.py: Member administration contracts
#
# These models define the "contract" between API and clients.
# =============================================================================

# -----------------------------------------------------------------------------
# Viewer Models - who is asking
# -----------------------------------------------------------------------------
from .viewer import Role, Viewer

# -----------------------------------------------------------------------------
# Resource Models - boards, resources, listings, delivery
# -----------------------------------------------------------------------------
from .resource import (
    AccessMode,
    ApiModel,
    AuthSummary,
    BoardListResponse,
    BoardRecord,
    BoardSummary,
    DeleteRequest,
    DeleteResponse,
    DisplaynameUpdateRequest,
    DisplaynameUpdateResponse,
    ProfileRecord,
    ReplaceResponse,
    ResourceKind,
    ResourceListItem,
    ResourceListResponse,
    ResourcePageResponse,
    ResourceRecord,
    ResourceUrlRequest,
    ResourceUrlResponse,
    UploadResponse,
    Visibility,
)

# -----------------------------------------------------------------------------
# Member Models - admin member screens
# -----------------------------------------------------------------------------
from .member import (
    MemberListResponse,
    MemberProfile,
    MemberSummary,
    MemberUpdateRequest,
    MemberUpdateResponse,
)

__all__ = [
    # Viewer
    "Role",
    "Viewer",
    # Resource
    "AccessMode",
    "ApiModel",
    "AuthSummary",
    "BoardListResponse",
    "BoardRecord",
    "BoardSummary",
    "DeleteRequest",
    "DeleteResponse",
    "DisplaynameUpdateRequest",
    "DisplaynameUpdateResponse",
    "ProfileRecord",
    "ReplaceResponse",
    "ResourceKind",
    "ResourceListItem",
    "ResourceListResponse",
    "ResourcePageResponse",
    "ResourceRecord",
    "ResourceUrlRequest",
    "ResourceUrlResponse",
    "UploadResponse",
    "Visibility",
    # Member
    "MemberListResponse",
    "MemberProfile",
    "MemberSummary",
    "MemberUpdateRequest",
    "MemberUpdateResponse",
]
