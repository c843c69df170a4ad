# =============================================================================
# core/models/viewer.py - Viewer Identity
# =============================================================================
# A Viewer is who is asking, resolved fresh on every request:
# - anonymous (no or invalid credential)
# - logged in but untrusted (no profile / not approved)
# - approved member or approved admin
#
# Viewers are never persisted here; role and approval come from the
# profiles table of the auth platform.
# =============================================================================

from enum import Enum
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class Role(str, Enum):
    """
    Role stored on a profile.

    Role alone grants nothing: membership approval is a separate gate.
    """
    MEMBER = "member"
    ADMIN = "admin"

    @classmethod
    def parse(cls, value: object) -> "Role":
        """Read a stored role; anything unrecognised counts as member."""
        try:
            return cls(str(value))
        except ValueError:
            return cls.MEMBER


class Viewer(BaseModel):
    """
    Identity of the requester.

    Example:
        Viewer.anonymous()
        -> {is_logged_in: False, role: member, approved: False}
    """

    model_config = ConfigDict(frozen=True)

    is_logged_in: bool = Field(
        default=False,
        description="True when a valid access token was presented"
    )

    role: Role = Field(
        default=Role.MEMBER,
        description="Profile role (member unless the profile says admin)"
    )

    approved: bool = Field(
        default=False,
        description="Membership approval flag, independent of role"
    )

    user_id: UUID | None = Field(
        default=None,
        description="Auth user id when logged in"
    )

    email: str | None = Field(
        default=None,
        description="Email claim from the access token"
    )

    @classmethod
    def anonymous(cls) -> "Viewer":
        """The low-privilege identity used whenever auth is missing or invalid."""
        return cls()

    @property
    def is_approved_member(self) -> bool:
        return self.is_logged_in and self.approved

    @property
    def is_admin(self) -> bool:
        """Approved admin - the only identity allowed to mutate resources."""
        return self.is_approved_member and self.role == Role.ADMIN
