# =============================================================================
# core/services/delivery_broker.py - File URL Delivery
# =============================================================================
# Turns (resource id, mode, viewer) into a URL the browser can open.
#
# Flow:
#   1. Load the resource; missing or soft-deleted -> 404
#   2. Ask the visibility policy; denial -> 401 / 403 with its reason
#   3. Public tier  -> stable public URL
#      Private tier -> signed URL valid for a short TTL, scoped to the key
#
# Download mode adds an attachment filename derived from the title so the
# saved file is named after the resource rather than its storage key.
# Nothing here is persisted, and URLs are never logged.
# =============================================================================

import logging
from dataclasses import dataclass

from app.exceptions import (
    AuthenticationRequiredError,
    ForbiddenError,
    ResourceNotFoundError,
)
from core.models.resource import AccessMode, ResourceRecord, Visibility
from core.models.viewer import Viewer
from core.services.storage_service import StorageService
from core.services.visibility_policy import Denial, VisibilityPolicy
from lib.files import attachment_filename
from lib.supabase_client import SupabaseClient

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DeliveryLink:
    """A URL handed to the client. expires_in is None for public URLs."""
    url: str
    mode: AccessMode
    expires_in: int | None = None

    @property
    def is_signed(self) -> bool:
        return self.expires_in is not None


class DeliveryBroker:
    """
    Service that authorizes and mints file URLs.

    Example:
        broker = DeliveryBroker(db, storage, VisibilityPolicy(), signed_url_ttl=60)
        link = broker.resolve(42, AccessMode.DOWNLOAD, viewer)
    """

    def __init__(
        self,
        db: SupabaseClient,
        storage: StorageService,
        policy: VisibilityPolicy,
        signed_url_ttl: int = 60,
    ):
        self.db = db
        self.storage = storage
        self.policy = policy
        self.signed_url_ttl = signed_url_ttl

    def resolve(self, resource_id: int, mode: AccessMode, viewer: Viewer) -> DeliveryLink:
        """
        Authorize `viewer` for `mode` on a resource and return its URL.

        Raises:
            ResourceNotFoundError: Resource missing, deleted, or has no file
            AuthenticationRequiredError: Anonymous viewer on a gated resource
            ForbiddenError: Logged in but lacking approval or role
            StorageUrlError: Signing failed
        """
        resource = self.db.fetch_resource(resource_id)
        if resource is None:
            raise ResourceNotFoundError(resource_id)

        decision = self.policy.can_access(
            resource.visibility, viewer, mode, deleted=resource.is_deleted
        )
        if not decision.allowed:
            logger.info(
                f"Delivery denied for resource {resource_id} "
                f"({mode.value}, {decision.denial.value}): {decision.reason}"
            )
            if decision.denial == Denial.NOT_FOUND:
                raise ResourceNotFoundError(resource_id)
            if decision.denial == Denial.AUTHENTICATION_REQUIRED:
                raise AuthenticationRequiredError(decision.reason)
            raise ForbiddenError(decision.reason)

        key = resource.storage_key
        if key is None:
            raise ResourceNotFoundError(resource_id, message="resource has no file")

        return self._link_for(resource, key, mode)

    def _link_for(self, resource: ResourceRecord, key: str, mode: AccessMode) -> DeliveryLink:
        filename = None
        if mode == AccessMode.DOWNLOAD:
            filename = attachment_filename(resource.title, resource.original_filename)

        if resource.visibility == Visibility.PUBLIC.value:
            return DeliveryLink(url=self.storage.public_url(key, filename), mode=mode)

        url = self.storage.signed_url(key, self.signed_url_ttl, filename)
        return DeliveryLink(url=url, mode=mode, expires_in=self.signed_url_ttl)
