# =============================================================================
# app/auth/routes.py - Authentication Routes
# =============================================================================
# API endpoints for authentication-related operations.
#
# Note: Actual signup/login is handled by Supabase Auth client-side.
# These routes only report who the current token belongs to.
# =============================================================================

import logging

from fastapi import APIRouter, Depends

from app.auth.dependencies import get_identity
from app.auth.identity import Identity
from app.auth.models import MeResponse, MeUser

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Auth"])


@router.get("/me", response_model=MeResponse, response_model_by_alias=True)
async def get_me(identity: Identity = Depends(get_identity)) -> MeResponse:
    """
    Get the current viewer's identity.

    Always returns 200. Without a token (or with an invalid one) the
    anonymous identity is returned; an unreadable profile yields an
    unapproved member. Problems are reported in `error`.
    """
    viewer = identity.viewer
    user = None
    if viewer.is_logged_in and viewer.user_id is not None:
        user = MeUser(id=viewer.user_id, email=viewer.email)

    return MeResponse(
        is_logged_in=viewer.is_logged_in,
        approved=viewer.approved,
        role=viewer.role,
        user=user,
        error=identity.error,
    )
