# =============================================================================
# core/services/resource_directory.py - Resource Listings
# =============================================================================
# Builds the resource lists shown on category pages.
#
# Filtering happens in the database (visibility IN allowed tiers,
# deleted_at IS NULL), so a viewer is never sent a row they may not see.
# Each item also carries the per-viewer canDownload flag computed by the
# visibility policy. Storage keys never leave this module.
# =============================================================================

import logging

from core.models.resource import ResourceListItem, ResourceRecord
from core.models.viewer import Viewer
from core.services.visibility_policy import VisibilityPolicy
from lib.supabase_client import SupabaseClient

logger = logging.getLogger(__name__)


class ResourceDirectory:
    """
    Service for listing resources a viewer may see.

    Example:
        directory = ResourceDirectory(db, VisibilityPolicy())
        items = directory.list_resources("atm", viewer)
    """

    def __init__(
        self,
        db: SupabaseClient,
        policy: VisibilityPolicy,
        list_limit: int = 200,
    ):
        self.db = db
        self.policy = policy
        self.list_limit = list_limit

    def to_item(self, resource: ResourceRecord, viewer: Viewer) -> ResourceListItem:
        """Project a record onto the public listing shape."""
        board = resource.board
        return ResourceListItem(
            id=resource.id,
            title=resource.title,
            kind=resource.kind,
            displayname=resource.displayname,
            date=resource.display_date,
            visibility=resource.visibility,
            can_view=True,
            can_download=(
                resource.storage_key is not None
                and self.policy.can_download(resource.visibility, viewer)
            ),
            board_slug=board.slug if board else "",
            board_title=board.title if board else "",
            original_filename=resource.original_filename,
        )

    def _visibility_filter(self, viewer: Viewer) -> list[str]:
        return [tier.value for tier in self.policy.allowed_visibilities(viewer)]

    def _resolve_board_id(self, board_slug: str | None) -> tuple[bool, int | None]:
        """
        (known, board_id) for an optional slug.

        A blank slug means "all boards"; an unknown slug is reported as
        unknown so the caller can return an empty list.
        """
        slug = (board_slug or "").strip()
        if not slug:
            return True, None
        board = self.db.fetch_board_by_slug(slug)
        if board is None:
            logger.debug(f"Unknown board slug requested: {slug}")
            return False, None
        return True, board.id

    def list_resources(
        self,
        board_slug: str | None,
        viewer: Viewer,
    ) -> list[ResourceListItem]:
        """
        Resources visible to `viewer`, newest publication first.

        Args:
            board_slug: Restrict to one category (None/blank = all)
            viewer: Resolved identity of the requester

        Returns:
            Up to `list_limit` items; empty for an unknown slug
        """
        known, board_id = self._resolve_board_id(board_slug)
        if not known:
            return []

        resources = self.db.list_resources(
            visibilities=self._visibility_filter(viewer),
            board_id=board_id,
            limit=self.list_limit,
        )
        return [self.to_item(resource, viewer) for resource in resources]

    def list_page(
        self,
        board_slug: str | None,
        viewer: Viewer,
        page: int = 1,
        page_size: int = 10,
        q: str = "",
    ) -> tuple[list[ResourceListItem], int]:
        """
        One page of the category view, with optional title search.

        Returns:
            Tuple of (items, total matching resources)
        """
        known, board_id = self._resolve_board_id(board_slug)
        if not known:
            return [], 0

        page = max(page, 1)
        page_size = max(page_size, 1)

        resources, total = self.db.list_resources_page(
            visibilities=self._visibility_filter(viewer),
            board_id=board_id,
            offset=(page - 1) * page_size,
            limit=page_size,
            search=(q or "").strip(),
        )
        return [self.to_item(resource, viewer) for resource in resources], total
