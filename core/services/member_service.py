# =============================================================================
# core/services/member_service.py - Member Administration
# =============================================================================
# Lists auth users with their profile and changes role / approval.
#
# Auth users live in the auth platform; role and approval live in the
# profiles table. Users without a profile row show up as unapproved members.
# =============================================================================

import logging
from uuid import UUID

from app.exceptions import ForbiddenError, RequestValidationFailed
from core.models.member import MemberSummary
from core.models.resource import ProfileRecord
from core.models.viewer import Role, Viewer
from lib.supabase_client import SupabaseClient

logger = logging.getLogger(__name__)

MAX_PER_PAGE = 200


class MemberService:
    """Service for the admin member screens."""

    def __init__(self, db: SupabaseClient):
        self.db = db

    def list_members(
        self,
        admin: Viewer,
        page: int = 1,
        per_page: int = 50,
        q: str = "",
    ) -> tuple[list[MemberSummary], int, int]:
        """
        One page of auth users joined with their profiles.

        Args:
            page: 1-based page (clamped to >= 1)
            per_page: Page size (clamped to 1..200)
            q: Case-insensitive email substring filter, applied to the page

        Returns:
            Tuple of (members, page, per_page) after clamping
        """
        if not admin.is_admin:
            raise ForbiddenError()

        page = max(1, page)
        per_page = min(MAX_PER_PAGE, max(1, per_page))
        needle = (q or "").strip().lower()

        users = self.db.list_auth_users(page=page, per_page=per_page)
        if needle:
            users = [u for u in users if needle in (u.get("email") or "").lower()]

        profiles = {
            str(profile.id): profile
            for profile in self.db.fetch_profiles(u["id"] for u in users)
        }

        members = []
        for user in users:
            profile = profiles.get(str(user["id"]))
            members.append(MemberSummary(
                id=user["id"],
                email=user.get("email"),
                created_at=user.get("created_at"),
                last_sign_in_at=user.get("last_sign_in_at"),
                role=profile.role if profile else Role.MEMBER,
                approved=profile.approved if profile else False,
            ))

        return members, page, per_page

    def update_member(
        self,
        user_id: UUID,
        admin: Viewer,
        role: str | None = None,
        approved: bool | None = None,
    ) -> ProfileRecord:
        """
        Partially update a member's profile, creating it if missing.

        Omitted fields keep their stored value (or member / unapproved
        when there is no profile yet).

        Raises:
            RequestValidationFailed: role is not member/admin
        """
        if not admin.is_admin:
            raise ForbiddenError()

        if role is not None and role not in {r.value for r in Role}:
            raise RequestValidationFailed("invalid role", field="role")

        current = self.db.fetch_profile(user_id)
        next_role = role or (current.role.value if current else Role.MEMBER.value)
        next_approved = approved if approved is not None else (current.approved if current else False)

        profile = self.db.upsert_profile(user_id, next_role, next_approved)
        logger.info(
            f"Profile {user_id} set to role={next_role} approved={next_approved} "
            f"by {admin.user_id}"
        )
        return profile
