# =============================================================================
# tests/test_member_service.py - Member Administration Tests
# =============================================================================
# Run with: pytest tests/test_member_service.py -v
# =============================================================================

from datetime import datetime, timezone

import pytest

from app.exceptions import ForbiddenError, RequestValidationFailed
from core.models.viewer import Role
from core.services.member_service import MemberService
from tests.conftest import ADMIN_ID, MEMBER_ID, NO_PROFILE_ID, PENDING_ID


@pytest.fixture
def service(db):
    created = datetime(2026, 1, 1, tzinfo=timezone.utc)
    db.auth_users = [
        {"id": str(ADMIN_ID), "email": "admin@example.com", "created_at": created, "last_sign_in_at": None},
        {"id": str(MEMBER_ID), "email": "Member@Example.com", "created_at": created, "last_sign_in_at": created},
        {"id": str(PENDING_ID), "email": "pending@example.com", "created_at": created, "last_sign_in_at": None},
        {"id": str(NO_PROFILE_ID), "email": None, "created_at": created, "last_sign_in_at": None},
    ]
    return MemberService(db)


class TestListMembers:
    """Tests for list_members."""

    def test_joins_profiles(self, service, admin_viewer):
        members, page, per_page = service.list_members(admin_viewer)
        by_id = {m.id: m for m in members}

        assert (page, per_page) == (1, 50)
        assert by_id[ADMIN_ID].role == Role.ADMIN
        assert by_id[MEMBER_ID].approved is True
        assert by_id[PENDING_ID].approved is False

    def test_user_without_profile_is_unapproved_member(self, service, admin_viewer):
        members, _, _ = service.list_members(admin_viewer)
        orphan = next(m for m in members if m.id == NO_PROFILE_ID)
        assert orphan.role == Role.MEMBER
        assert orphan.approved is False

    def test_email_filter_is_case_insensitive(self, service, admin_viewer):
        members, _, _ = service.list_members(admin_viewer, q="  MEMBER@ ")
        assert [m.id for m in members] == [MEMBER_ID]

    @pytest.mark.parametrize("requested,clamped", [(0, 1), (-5, 1), (500, 200), (20, 20)])
    def test_per_page_clamped(self, service, admin_viewer, requested, clamped):
        _, _, per_page = service.list_members(admin_viewer, per_page=requested)
        assert per_page == clamped

    def test_requires_admin(self, service, member_viewer):
        with pytest.raises(ForbiddenError):
            service.list_members(member_viewer)


class TestUpdateMember:
    """Tests for update_member."""

    def test_approve_keeps_role(self, service, db, admin_viewer):
        profile = service.update_member(PENDING_ID, admin_viewer, approved=True)
        assert profile.approved is True
        assert profile.role == Role.MEMBER

    def test_role_change_keeps_approval(self, service, admin_viewer):
        profile = service.update_member(MEMBER_ID, admin_viewer, role="admin")
        assert profile.role == Role.ADMIN
        assert profile.approved is True

    def test_creates_missing_profile(self, service, db, admin_viewer):
        profile = service.update_member(NO_PROFILE_ID, admin_viewer, approved=True)
        assert str(NO_PROFILE_ID) in db.profiles
        assert profile.role == Role.MEMBER

    def test_invalid_role(self, service, admin_viewer):
        with pytest.raises(RequestValidationFailed) as exc_info:
            service.update_member(MEMBER_ID, admin_viewer, role="owner")
        assert exc_info.value.message == "invalid role"

    def test_requires_admin(self, service, member_viewer):
        with pytest.raises(ForbiddenError):
            service.update_member(MEMBER_ID, member_viewer, approved=False)
