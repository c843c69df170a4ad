# =============================================================================
# lib/supabase_client.py - Supabase Client Wrapper
# =============================================================================
# This module provides a typed wrapper for Supabase database operations on:
# - boards (categories)
# - resources (file metadata, soft-deleted via deleted_at)
# - profiles (role + membership approval per auth user)
# - auth users (admin member list)
#
# One wrapper is built at startup (see app/main.py lifespan) around a
# service-role client and handed to services through FastAPI dependencies.
# Rows are parsed into records from core.models so callers never see the
# SDK's raw dicts.
#
# Usage:
#   db = SupabaseClient.from_settings(settings)
#   board = db.fetch_board_by_slug("atm")
# =============================================================================

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Iterable
from uuid import UUID

from supabase import Client, create_client

from core.models.resource import BoardRecord, ProfileRecord, ResourceRecord

# Set up logging for this module
logger = logging.getLogger(__name__)

# Columns returned for listings: everything except the audit fields
RESOURCE_LIST_COLUMNS = (
    "id, board_id, title, kind, displayname, published_at, created_at, "
    "visibility, r2_key, original_filename, boards:boards ( slug, title )"
)

RESOURCE_COLUMNS = (
    "id, board_id, title, displayname, kind, visibility, published_at, created_at, "
    "updated_at, r2_key, mime, size_bytes, original_filename, deleted_at, deleted_by"
)


class SupabaseClientError(Exception):
    """
    Error during Supabase operations.

    Provides actionable error messages:
    "Errors should tell HOW to fix, not just WHAT failed."
    """

    def __init__(
        self,
        message: str,
        code: str = "SUPABASE_ERROR",
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.code = code
        self.message = message
        self.suggestion = suggestion
        self.details = details or {}

    def __str__(self) -> str:
        result = f"[{self.code}] {self.message}"
        if self.suggestion:
            result += f" Suggestion: {self.suggestion}"
        return result


def _first_row(response: Any) -> dict[str, Any] | None:
    """
    Row from a maybe_single()/insert()/update() response, or None.

    Depending on the SDK version maybe_single() yields None or a response
    whose data is None when nothing matched.
    """
    if response is None:
        return None
    data = response.data
    if isinstance(data, list):
        return data[0] if data else None
    return data or None


def _like_pattern(search: str) -> str:
    """Substring pattern for ilike with the user's wildcards taken literally."""
    escaped = search.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


class SupabaseClient:
    """
    Typed wrapper for Supabase database operations.

    Example:
        db = SupabaseClient(create_client(url, service_key))
        resource = db.fetch_resource(42)
        if resource and not resource.is_deleted:
            ...
    """

    def __init__(self, client: Client):
        self.client = client

    @classmethod
    def from_settings(cls, settings: Any) -> "SupabaseClient":
        """
        Build the wrapper around a service-role client.

        Uses the service_role key, which bypasses Row Level Security.
        This is appropriate for server-side operations only.

        Raises:
            SupabaseClientError: If client creation fails
        """
        try:
            client = create_client(settings.SUPABASE_URL, settings.SUPABASE_SERVICE_KEY)
        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to create Supabase client: {e}",
                code="CLIENT_INIT_FAILED",
                suggestion="Check SUPABASE_URL and SUPABASE_SERVICE_KEY in your .env file"
            )
        logger.info("Supabase client initialized successfully")
        return cls(client)

    # -------------------------------------------------------------------------
    # Boards
    # -------------------------------------------------------------------------

    def fetch_board_by_slug(self, slug: str) -> BoardRecord | None:
        """
        Fetch a board by its slug.

        Returns:
            BoardRecord, or None if the slug is blank or unknown

        Raises:
            SupabaseClientError: If query fails
        """
        slug = (slug or "").strip()
        if not slug:
            return None

        try:
            response = (
                self.client.table("boards")
                .select("id, slug, title")
                .eq("slug", slug)
                .maybe_single()
                .execute()
            )
        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to fetch board: {e}",
                code="FETCH_BOARD_FAILED",
                details={"slug": slug}
            )

        row = _first_row(response)
        return BoardRecord.model_validate(row) if row else None

    def fetch_board(self, board_id: int) -> BoardRecord | None:
        """Fetch a board by id, or None if it doesn't exist."""
        try:
            response = (
                self.client.table("boards")
                .select("id, slug, title")
                .eq("id", board_id)
                .maybe_single()
                .execute()
            )
        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to fetch board: {e}",
                code="FETCH_BOARD_FAILED",
                details={"board_id": board_id}
            )

        row = _first_row(response)
        return BoardRecord.model_validate(row) if row else None

    def list_boards(self) -> list[BoardRecord]:
        """All boards ordered by title."""
        try:
            response = (
                self.client.table("boards")
                .select("slug, title")
                .order("title")
                .execute()
            )
        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to list boards: {e}",
                code="LIST_BOARDS_FAILED",
            )

        return [BoardRecord.model_validate(row) for row in response.data or []]

    # -------------------------------------------------------------------------
    # Profiles
    # -------------------------------------------------------------------------

    def fetch_profile(self, user_id: UUID | str) -> ProfileRecord | None:
        """
        Fetch role/approval for an auth user.

        Returns:
            ProfileRecord, or None if the user has no profile row

        Raises:
            SupabaseClientError: If query fails
        """
        user_id_str = str(user_id)

        try:
            response = (
                self.client.table("profiles")
                .select("id, role, approved")
                .eq("id", user_id_str)
                .maybe_single()
                .execute()
            )
        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to fetch profile: {e}",
                code="FETCH_PROFILE_FAILED",
                details={"user_id": user_id_str}
            )

        row = _first_row(response)
        return ProfileRecord.model_validate(row) if row else None

    def fetch_profiles(self, user_ids: Iterable[UUID | str]) -> list[ProfileRecord]:
        """Profiles for several users at once (missing users are skipped)."""
        ids = [str(user_id) for user_id in user_ids]
        if not ids:
            return []

        try:
            response = (
                self.client.table("profiles")
                .select("id, role, approved")
                .in_("id", ids)
                .execute()
            )
        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to fetch profiles: {e}",
                code="FETCH_PROFILES_FAILED",
                details={"count": len(ids)}
            )

        return [ProfileRecord.model_validate(row) for row in response.data or []]

    def upsert_profile(self, user_id: UUID | str, role: str, approved: bool) -> ProfileRecord:
        """Insert or update a profile row keyed by user id."""
        data = {"id": str(user_id), "role": role, "approved": approved}

        try:
            response = (
                self.client.table("profiles")
                .upsert(data, on_conflict="id")
                .execute()
            )
        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to update profile: {e}",
                code="UPSERT_PROFILE_FAILED",
                details={"user_id": str(user_id)}
            )

        row = _first_row(response)
        if not row:
            raise SupabaseClientError(
                message="Profile upsert returned no data",
                code="UPSERT_NO_DATA",
            )
        return ProfileRecord.model_validate(row)

    # -------------------------------------------------------------------------
    # Resources
    # -------------------------------------------------------------------------

    def fetch_resource(self, resource_id: int) -> ResourceRecord | None:
        """
        Fetch a resource by id, deleted or not.

        Callers decide what a soft-deleted row means for them.

        Raises:
            SupabaseClientError: If query fails
        """
        try:
            response = (
                self.client.table("resources")
                .select(RESOURCE_COLUMNS)
                .eq("id", resource_id)
                .maybe_single()
                .execute()
            )
        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to fetch resource: {e}",
                code="FETCH_RESOURCE_FAILED",
                details={"resource_id": resource_id}
            )

        row = _first_row(response)
        return ResourceRecord.model_validate(row) if row else None

    def _active_resources_query(
        self,
        visibilities: list[str],
        board_id: int | None,
        count: str | None = None,
    ):
        query = self.client.table("resources").select(RESOURCE_LIST_COLUMNS, count=count)
        query = query.in_("visibility", visibilities).is_("deleted_at", "null")
        if board_id is not None:
            query = query.eq("board_id", board_id)
        # Newest publication first; undated rows go last
        return (
            query.order("published_at", desc=True, nullsfirst=False)
            .order("created_at", desc=True)
        )

    def list_resources(
        self,
        visibilities: list[str],
        board_id: int | None = None,
        limit: int = 200,
    ) -> list[ResourceRecord]:
        """
        Non-deleted resources whose visibility is in `visibilities`.

        Args:
            visibilities: Visibility tiers the viewer may see
            board_id: Restrict to one board (None = all boards)
            limit: Maximum rows returned

        Raises:
            SupabaseClientError: If query fails
        """
        try:
            response = self._active_resources_query(visibilities, board_id).limit(limit).execute()
        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to list resources: {e}",
                code="LIST_RESOURCES_FAILED",
                details={"board_id": board_id}
            )

        rows = response.data or []
        logger.debug(f"Fetched {len(rows)} resources (board_id={board_id})")
        return [ResourceRecord.model_validate(row) for row in rows]

    def list_resources_page(
        self,
        visibilities: list[str],
        board_id: int | None,
        offset: int,
        limit: int,
        search: str = "",
    ) -> tuple[list[ResourceRecord], int]:
        """
        One page of non-deleted resources plus the exact total count.

        Args:
            search: Case-insensitive substring matched against the title

        Returns:
            Tuple of (resources on this page, total matching rows)
        """
        query = self._active_resources_query(visibilities, board_id, count="exact")
        if search:
            query = query.ilike("title", _like_pattern(search))

        try:
            response = query.range(offset, offset + limit - 1).execute()
        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to list resources: {e}",
                code="LIST_RESOURCES_FAILED",
                details={"board_id": board_id, "offset": offset}
            )

        rows = response.data or []
        return [ResourceRecord.model_validate(row) for row in rows], response.count or 0

    def insert_resource(self, data: dict[str, Any]) -> ResourceRecord:
        """
        Insert a resource row and return it.

        Raises:
            SupabaseClientError: If insert fails
        """
        try:
            response = self.client.table("resources").insert(data).execute()
        except Exception as e:
            raise SupabaseClientError(
                message=f"db insert failed: {e}",
                code="INSERT_RESOURCE_FAILED",
                details={"r2_key": data.get("r2_key")}
            )

        row = _first_row(response)
        if not row:
            raise SupabaseClientError(
                message="Insert returned no data",
                code="INSERT_NO_DATA"
            )
        return ResourceRecord.model_validate(row)

    def update_resource(
        self,
        resource_id: int,
        data: dict[str, Any],
        only_active: bool = False,
    ) -> ResourceRecord | None:
        """
        Update a resource row in place.

        Args:
            only_active: Leave soft-deleted rows untouched

        Returns:
            The updated row, or None if no row matched
        """
        query = self.client.table("resources").update(data).eq("id", resource_id)
        if only_active:
            query = query.is_("deleted_at", "null")

        try:
            response = query.execute()
        except Exception as e:
            raise SupabaseClientError(
                message=f"db update failed: {e}",
                code="UPDATE_RESOURCE_FAILED",
                details={"resource_id": resource_id}
            )

        row = _first_row(response)
        return ResourceRecord.model_validate(row) if row else None

    def mark_resource_deleted(self, resource_id: int, deleted_by: UUID | str) -> bool:
        """
        Soft-delete a resource.

        The update is conditional on deleted_at being null, so a concurrent
        second delete changes nothing and keeps the first actor/timestamp.

        Returns:
            True if this call performed the delete
        """
        try:
            response = (
                self.client.table("resources")
                .update({
                    "deleted_at": datetime.now(timezone.utc).isoformat(),
                    "deleted_by": str(deleted_by),
                })
                .eq("id", resource_id)
                .is_("deleted_at", "null")
                .execute()
            )
        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to delete resource: {e}",
                code="DELETE_RESOURCE_FAILED",
                details={"resource_id": resource_id}
            )

        return bool(response.data)

    # -------------------------------------------------------------------------
    # Auth users (admin)
    # -------------------------------------------------------------------------

    def list_auth_users(self, page: int, per_page: int) -> list[dict[str, Any]]:
        """
        One page of auth users as plain dicts (id, email, timestamps).

        Raises:
            SupabaseClientError: If the auth admin API fails
        """
        try:
            users = self.client.auth.admin.list_users(page=page, per_page=per_page)
        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to list users: {e}",
                code="LIST_USERS_FAILED",
                details={"page": page, "per_page": per_page}
            )

        return [
            {
                "id": user.id,
                "email": user.email,
                "created_at": user.created_at,
                "last_sign_in_at": user.last_sign_in_at,
            }
            for user in users or []
        ]

    # -------------------------------------------------------------------------
    # Health
    # -------------------------------------------------------------------------

    def ping(self) -> None:
        """Cheap query used by the readiness check."""
        self.client.table("boards").select("id").limit(1).execute()
