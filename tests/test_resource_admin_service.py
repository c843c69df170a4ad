# =============================================================================
# tests/test_resource_admin_service.py - Soft Delete & Display Title Tests
# =============================================================================
# Run with: pytest tests/test_resource_admin_service.py -v
# =============================================================================

import pytest

from app.exceptions import ForbiddenError, RequestValidationFailed, ResourceNotFoundError
from core.services.resource_admin_service import ResourceAdminService
from tests.conftest import ADMIN_ID


@pytest.fixture
def service(db):
    return ResourceAdminService(db)


class TestSoftDelete:
    """Tests for soft_delete."""

    def test_marks_deleted(self, service, db, admin_viewer):
        result = service.soft_delete(1, admin_viewer)

        assert result.already_deleted is False
        assert db.resources[1]["deleted_at"] is not None
        assert db.resources[1]["deleted_by"] == str(ADMIN_ID)

    def test_second_delete_reports_already_deleted(self, service, db, admin_viewer):
        service.soft_delete(1, admin_viewer)
        first_stamp = db.resources[1]["deleted_at"]

        result = service.soft_delete(1, admin_viewer)

        assert result.already_deleted is True
        assert db.resources[1]["deleted_at"] == first_stamp

    def test_lost_race_reports_already_deleted(self, service, db, admin_viewer, monkeypatch):
        monkeypatch.setattr(db, "mark_resource_deleted", lambda resource_id, deleted_by: False)
        assert service.soft_delete(1, admin_viewer).already_deleted is True

    def test_missing_resource(self, service, admin_viewer):
        with pytest.raises(ResourceNotFoundError):
            service.soft_delete(999, admin_viewer)

    def test_bad_id(self, service, admin_viewer):
        with pytest.raises(RequestValidationFailed):
            service.soft_delete(0, admin_viewer)

    def test_non_admin_forbidden(self, service, db, member_viewer):
        with pytest.raises(ForbiddenError):
            service.soft_delete(1, member_viewer)
        assert db.resources[1]["deleted_at"] is None


class TestUpdateDisplayname:
    """Tests for update_displayname."""

    def test_sets_trimmed_value(self, service, admin_viewer):
        resource = service.update_displayname(1, "  Volume One  ", admin_viewer)
        assert resource.displayname == "Volume One"

    @pytest.mark.parametrize("value", ["", "   ", None])
    def test_blank_clears(self, service, db, admin_viewer, value):
        db.resources[1]["displayname"] = "Old"
        assert service.update_displayname(1, value, admin_viewer).displayname is None

    def test_deleted_resource_not_found(self, service, admin_viewer):
        with pytest.raises(ResourceNotFoundError):
            service.update_displayname(4, "x", admin_viewer)

    def test_title_untouched(self, service, admin_viewer):
        assert service.update_displayname(1, "Short", admin_viewer).title == "ATM Vol.1"
