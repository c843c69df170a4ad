# =============================================================================
# core/services/resource_admin_service.py - Resource Admin Operations
# =============================================================================
# Soft delete and display-title edits. Resources are never hard-deleted:
# deleting stamps deleted_at/deleted_by and the row drops out of every
# listing and delivery path.
# =============================================================================

import logging
from dataclasses import dataclass

from app.exceptions import ForbiddenError, RequestValidationFailed, ResourceNotFoundError
from core.models.resource import ResourceRecord
from core.models.viewer import Viewer
from lib.supabase_client import SupabaseClient

logger = logging.getLogger(__name__)


@dataclass
class DeleteResult:
    already_deleted: bool = False


class ResourceAdminService:
    """Service for admin-side resource maintenance."""

    def __init__(self, db: SupabaseClient):
        self.db = db

    @staticmethod
    def _check(resource_id: int, admin: Viewer) -> None:
        if not admin.is_admin:
            raise ForbiddenError()
        if resource_id <= 0:
            raise RequestValidationFailed("resourceId is required", field="resourceId")

    def soft_delete(self, resource_id: int, admin: Viewer) -> DeleteResult:
        """
        Mark a resource deleted.

        Idempotent: deleting an already-deleted resource reports
        already_deleted and leaves the original deleted_at/deleted_by alone.

        Raises:
            ResourceNotFoundError: No such resource
        """
        self._check(resource_id, admin)

        resource = self.db.fetch_resource(resource_id)
        if resource is None:
            raise ResourceNotFoundError(resource_id)
        if resource.is_deleted:
            return DeleteResult(already_deleted=True)

        if not self.db.mark_resource_deleted(resource_id, admin.user_id):
            # Lost the race to a concurrent delete
            return DeleteResult(already_deleted=True)

        logger.info(f"Resource {resource_id} deleted by {admin.user_id}")
        return DeleteResult()

    def update_displayname(
        self,
        resource_id: int,
        displayname: str | None,
        admin: Viewer,
    ) -> ResourceRecord:
        """
        Set or clear the display title override.

        Blank values clear it (stored as null).

        Raises:
            ResourceNotFoundError: No non-deleted resource with this id
        """
        self._check(resource_id, admin)

        value = (displayname or "").strip() or None
        updated = self.db.update_resource(
            resource_id, {"displayname": value}, only_active=True
        )
        if updated is None:
            raise ResourceNotFoundError(resource_id)

        logger.info(f"Resource {resource_id} displayname updated by {admin.user_id}")
        return updated
