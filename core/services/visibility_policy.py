# =============================================================================
# core/services/visibility_policy.py - Resource Access Rules
# =============================================================================
# The single place that decides whether a viewer may see or download a
# resource. Listing, delivery and the admin gate all consult it.
#
# Visibility tiers are strictly ordered:
#
#   public  < member (logged in + approved) < admin (+ role admin)
#
# The policy is pure: no I/O, no caching, identity is passed in.
# =============================================================================

import logging
from dataclasses import dataclass
from enum import Enum

from core.models.resource import AccessMode, Visibility
from core.models.viewer import Viewer

logger = logging.getLogger(__name__)


class Denial(str, Enum):
    """Why access was refused. Maps onto 401 / 403 / 404."""
    AUTHENTICATION_REQUIRED = "authentication_required"
    FORBIDDEN = "forbidden"
    NOT_FOUND = "not_found"


@dataclass(frozen=True)
class AccessDecision:
    """
    Outcome of a policy check.

    Example:
        AccessDecision(allowed=False, denial=Denial.FORBIDDEN, reason="approved required")
    """
    allowed: bool
    denial: Denial | None = None
    reason: str = ""

    @classmethod
    def allow(cls) -> "AccessDecision":
        return cls(allowed=True)

    @classmethod
    def deny(cls, denial: Denial, reason: str) -> "AccessDecision":
        return cls(allowed=False, denial=denial, reason=reason)

    def __bool__(self) -> bool:
        return self.allowed


class VisibilityPolicy:
    """
    Decides access for (visibility, viewer, mode).

    Args:
        allow_anonymous_public_download: Let anonymous viewers download
            public files too (by default they may only view them)
    """

    def __init__(self, allow_anonymous_public_download: bool = False):
        self.allow_anonymous_public_download = allow_anonymous_public_download

    def can_access(
        self,
        visibility: str,
        viewer: Viewer,
        mode: AccessMode = AccessMode.VIEW,
        *,
        deleted: bool = False,
    ) -> AccessDecision:
        """
        Check one access.

        Args:
            visibility: Stored visibility of the resource (may be garbage)
            viewer: Resolved identity of the requester
            mode: view or download
            deleted: Whether the resource is soft-deleted

        Returns:
            AccessDecision with the denial kind and a client-facing reason
        """
        if deleted:
            return AccessDecision.deny(Denial.NOT_FOUND, "resource not found")

        if visibility == Visibility.PUBLIC.value:
            if mode != AccessMode.DOWNLOAD:
                return AccessDecision.allow()
            if viewer.is_logged_in or self.allow_anonymous_public_download:
                return AccessDecision.allow()
            return AccessDecision.deny(
                Denial.AUTHENTICATION_REQUIRED, "login required for download"
            )

        if visibility == Visibility.MEMBER.value:
            if not viewer.is_logged_in:
                return AccessDecision.deny(Denial.AUTHENTICATION_REQUIRED, "login required")
            if not viewer.approved:
                return AccessDecision.deny(Denial.FORBIDDEN, "approved required")
            return AccessDecision.allow()

        if visibility == Visibility.ADMIN.value:
            if not viewer.is_logged_in:
                return AccessDecision.deny(Denial.AUTHENTICATION_REQUIRED, "login required")
            if not viewer.is_admin:
                return AccessDecision.deny(Denial.FORBIDDEN, "admin required")
            return AccessDecision.allow()

        logger.warning(f"Unknown visibility value denied: {visibility!r}")
        return AccessDecision.deny(Denial.FORBIDDEN, "forbidden")

    def allowed_visibilities(self, viewer: Viewer) -> list[Visibility]:
        """Tiers a viewer may list, least privileged first."""
        tiers = [Visibility.PUBLIC]
        if viewer.is_approved_member:
            tiers.append(Visibility.MEMBER)
            if viewer.is_admin:
                tiers.append(Visibility.ADMIN)
        return tiers

    def can_download(self, visibility: str, viewer: Viewer) -> bool:
        return self.can_access(visibility, viewer, AccessMode.DOWNLOAD).allowed
