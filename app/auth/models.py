# =============================================================================
# app/auth/models.py - Authentication Models
# =============================================================================
# Pydantic models for authentication data.
# =============================================================================

from uuid import UUID

from pydantic import BaseModel, ConfigDict

from core.models.resource import ApiModel
from core.models.viewer import Role


class AuthUser(BaseModel):
    """
    Authenticated user extracted from Supabase JWT.

    This is the minimal user info available from the token itself,
    without querying the database.
    """
    model_config = ConfigDict(frozen=True)

    id: UUID
    email: str | None = None


class MeUser(ApiModel):
    id: UUID
    email: str | None = None


class MeResponse(ApiModel):
    """
    Response of GET /me.

    Always 200: an invalid token is reported in `error` with the
    anonymous identity, not as a 401.
    """
    ok: bool = True
    is_logged_in: bool
    approved: bool
    role: Role
    user: MeUser | None = None
    error: str | None = None
