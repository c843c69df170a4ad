# =============================================================================
# app/auth/identity.py - Identity Resolver
# =============================================================================
# Turns an optional bearer token into a Viewer.
#
#   no token          -> anonymous
#   invalid token     -> anonymous (logged, never surfaced)
#   valid, no profile -> logged in, member, not approved
#   valid + profile   -> role / approved from the profile
#
# Read-only. Resolved fresh on every request; nothing is cached.
# =============================================================================

import logging
from dataclasses import dataclass

from app.auth.verifier import InvalidTokenError, TokenVerifier
from app.exceptions import AuthenticationRequiredError, ForbiddenError
from core.models.viewer import Role, Viewer
from lib.supabase_client import SupabaseClient, SupabaseClientError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Identity:
    """A resolved viewer plus the non-fatal problem met on the way, if any."""
    viewer: Viewer
    error: str | None = None


class IdentityResolver:
    """
    Resolves viewers from Supabase access tokens and profiles.

    Example:
        resolver = IdentityResolver(verifier, db)
        viewer = resolver.resolve(token)
        admin = resolver.require_admin(token)  # raises 401/403
    """

    def __init__(self, verifier: TokenVerifier, db: SupabaseClient):
        self.verifier = verifier
        self.db = db

    def identify(self, token: str | None) -> Identity:
        """
        Resolve a viewer, never raising for bad credentials.

        Profile lookup failures degrade to an unapproved member and are
        reported in Identity.error.
        """
        if not token:
            return Identity(Viewer.anonymous())

        try:
            user = self.verifier.verify(token)
        except InvalidTokenError as e:
            logger.warning(f"Ignoring invalid access token: {e}")
            return Identity(Viewer.anonymous(), error="invalid token")

        try:
            profile = self.db.fetch_profile(user.id)
        except SupabaseClientError as e:
            logger.warning(f"Profile lookup failed for {user.id}: {e.message}")
            profile = None
            error = e.message
        else:
            error = None if profile else "profile not found"

        if profile is None:
            return Identity(
                Viewer(is_logged_in=True, role=Role.MEMBER, approved=False,
                       user_id=user.id, email=user.email),
                error=error,
            )

        return Identity(Viewer(
            is_logged_in=True,
            role=profile.role,
            approved=profile.approved,
            user_id=user.id,
            email=user.email,
        ))

    def resolve(self, token: str | None) -> Viewer:
        return self.identify(token).viewer

    def require_admin(self, token: str | None) -> Viewer:
        """
        Resolve a viewer that must be an approved admin.

        Unlike resolve(), credential problems are errors here.

        Raises:
            AuthenticationRequiredError: Missing or invalid token (401)
            SupabaseClientError: Profile lookup failed (500)
            ForbiddenError: Not an approved admin (403)
        """
        if not token:
            raise AuthenticationRequiredError("missing auth token")

        try:
            user = self.verifier.verify(token)
        except InvalidTokenError as e:
            logger.warning(f"Rejected admin request with invalid token: {e}")
            raise AuthenticationRequiredError("invalid token")

        profile = self.db.fetch_profile(user.id)
        if profile is None or profile.role != Role.ADMIN or not profile.approved:
            logger.info(f"Admin access denied for {user.id}")
            raise ForbiddenError("forbidden")

        return Viewer(
            is_logged_in=True,
            role=profile.role,
            approved=True,
            user_id=user.id,
            email=user.email,
        )
