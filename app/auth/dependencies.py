# =============================================================================
# app/auth/dependencies.py - FastAPI Auth Dependencies
# =============================================================================
# Provides dependency injection for authentication.
#
# Usage:
#   from app.auth import get_viewer, require_admin
#
#   @router.get("/list")
#   async def listing(viewer: Viewer = Depends(get_viewer)):
#       ...
#
#   @router.post("/admin/thing")
#   async def admin_only(admin: Viewer = Depends(require_admin)):
#       ...
# =============================================================================

from typing import Annotated

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from app.auth.identity import Identity, IdentityResolver
from app.auth.verifier import TokenVerifier
from app.dependencies import SupabaseDep
from core.models.viewer import Viewer

# HTTP Bearer token extractor. Missing or non-Bearer headers yield None so
# public endpoints keep working for anonymous viewers.
security_optional = HTTPBearer(auto_error=False)


def get_token_verifier(request: Request) -> TokenVerifier:
    """Get the verifier created in the lifespan (it owns the JWKS cache)."""
    return request.app.state.token_verifier


def get_identity_resolver(
    db: SupabaseDep,
    verifier: Annotated[TokenVerifier, Depends(get_token_verifier)],
) -> IdentityResolver:
    return IdentityResolver(verifier, db)


ResolverDep = Annotated[IdentityResolver, Depends(get_identity_resolver)]


def get_bearer_token(
    credentials: HTTPAuthorizationCredentials | None = Depends(security_optional),
) -> str | None:
    if credentials is None:
        return None
    return credentials.credentials or None


def get_identity(
    resolver: ResolverDep,
    token: str | None = Depends(get_bearer_token),
) -> Identity:
    return resolver.identify(token)


def get_viewer(identity: Identity = Depends(get_identity)) -> Viewer:
    """
    Resolve the requester, falling back to anonymous.

    Never fails on bad credentials: listing and delivery decide what an
    anonymous viewer may do.
    """
    return identity.viewer


def require_admin(
    resolver: ResolverDep,
    token: str | None = Depends(get_bearer_token),
) -> Viewer:
    """
    Resolve the requester and insist on an approved admin.

    Raises:
        AuthenticationRequiredError: 401 for missing/invalid token
        ForbiddenError: 403 for anyone but an approved admin
    """
    return resolver.require_admin(token)


ViewerDep = Annotated[Viewer, Depends(get_viewer)]
AdminDep = Annotated[Viewer, Depends(require_admin)]
