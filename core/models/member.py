# =============================================================================
# core/models/member.py - Member Administration Schemas
# =============================================================================
# Contracts for the admin member screens: auth users joined with their
# profile (role + approval), and partial profile updates.
# =============================================================================

from datetime import datetime
from uuid import UUID

from pydantic import Field, field_validator

from .resource import ApiModel
from .viewer import Role


class MemberSummary(ApiModel):
    """One auth user as shown on the member list."""
    id: UUID
    email: str | None = None
    created_at: datetime | None = None
    last_sign_in_at: datetime | None = None
    role: Role = Role.MEMBER
    approved: bool = False


class MemberListResponse(ApiModel):
    ok: bool = True
    users: list[MemberSummary] = Field(default_factory=list)
    page: int = 1
    per_page: int = 50
    total: int = 0


class MemberUpdateRequest(ApiModel):
    """
    Partial profile update. Omitted fields keep their stored value.

    Example:
        {"userId": "550e8400-...", "approved": true}
    """
    user_id: UUID
    # Checked by the service so an unknown role reads "invalid role"
    role: str | None = None
    approved: bool | None = None

    @field_validator("approved", mode="before")
    @classmethod
    def _must_be_boolean(cls, value: object) -> object:
        if value is not None and not isinstance(value, bool):
            raise ValueError("approved must be boolean")
        return value


class MemberProfile(ApiModel):
    id: UUID
    role: Role
    approved: bool


class MemberUpdateResponse(ApiModel):
    ok: bool = True
    profile: MemberProfile
