# =============================================================================
# app/auth/__init__.py - Authentication Module
# =============================================================================
# Provides JWT-based authentication using Supabase Auth, and resolves the
# requester into a Viewer (anonymous, member or admin).
#
# Usage:
#   from app.auth import get_viewer, require_admin
#
#   @router.get("/resources/list")
#   async def listing(viewer: Viewer = Depends(get_viewer)):
#       ...
# =============================================================================

from app.auth.dependencies import (
    AdminDep,
    ViewerDep,
    get_bearer_token,
    get_identity,
    get_identity_resolver,
    get_token_verifier,
    get_viewer,
    require_admin,
)
from app.auth.identity import Identity, IdentityResolver
from app.auth.models import AuthUser, MeResponse
from app.auth.verifier import InvalidTokenError, TokenVerifier

__all__ = [
    "AdminDep",
    "ViewerDep",
    "get_bearer_token",
    "get_identity",
    "get_identity_resolver",
    "get_token_verifier",
    "get_viewer",
    "require_admin",
    "Identity",
    "IdentityResolver",
    "AuthUser",
    "MeResponse",
    "InvalidTokenError",
    "TokenVerifier",
]
