# =============================================================================
# core/services/ingestion_service.py - Resource Upload & File Replacement
# =============================================================================
# Admin-only write path for resource files.
#
# Upload:
#   validate form -> resolve board -> validate file -> infer kind
#   -> write object to the tier bucket -> insert metadata row
#
# Replace:
#   validate file -> load resource -> same kind? -> write a new object
#   under the resource's own key prefix -> point the row at it
#
# Kinds come from the filename extension only; content bytes are never
# sniffed. Object write and row write are not transactional: if the insert
# fails after the upload, the object is orphaned and the key is logged.
# =============================================================================

import logging
from dataclasses import dataclass
from datetime import datetime, timezone

from app.exceptions import (
    FileTooLargeError,
    ForbiddenError,
    KindMismatchError,
    RequestValidationFailed,
    ResourceDeletedError,
    ResourceNotFoundError,
    ResourcePortalException,
    UnsupportedFileTypeError,
)
from core.models.resource import ResourceRecord, Visibility
from core.models.viewer import Viewer
from core.services.storage_service import StorageService
from lib.files import (
    build_storage_key,
    infer_kind,
    normalize_published_at,
    supported_extensions,
)
from lib.supabase_client import SupabaseClient, SupabaseClientError

logger = logging.getLogger(__name__)

DEFAULT_CONTENT_TYPE = "application/octet-stream"


# =============================================================================
# Inputs / Results
# =============================================================================

@dataclass
class UploadForm:
    """Text fields of the admin upload form, as submitted."""
    board_slug: str = ""
    title: str = ""
    displayname: str | None = None
    visibility: str = Visibility.PUBLIC.value
    published_at: str | None = None


@dataclass
class UploadedFile:
    """An uploaded file read fully into memory."""
    filename: str
    data: bytes
    content_type: str | None = None

    @property
    def size(self) -> int:
        return len(self.data)


@dataclass
class IngestResult:
    resource: ResourceRecord
    public_url: str | None = None


@dataclass
class ReplaceResult:
    resource: ResourceRecord
    old_key: str | None
    new_key: str


def _clean_displayname(value: str | None) -> str | None:
    value = (value or "").strip()
    return value or None


# =============================================================================
# Service
# =============================================================================

class IngestionService:
    """
    Service for creating resources and swapping their files.

    Example:
        service = IngestionService(db, storage, max_upload_bytes=200 * 1024 * 1024)
        result = service.ingest(form, upload, admin)
    """

    def __init__(
        self,
        db: SupabaseClient,
        storage: StorageService,
        max_upload_bytes: int,
    ):
        self.db = db
        self.storage = storage
        self.max_upload_bytes = max_upload_bytes

    # -------------------------------------------------------------------------
    # Shared checks
    # -------------------------------------------------------------------------

    @staticmethod
    def _require_admin(viewer: Viewer) -> None:
        if not viewer.is_admin:
            raise ForbiddenError()

    def _check_file(self, upload: UploadedFile | None) -> UploadedFile:
        """File present, within size limit, with a supported extension."""
        if upload is None or not upload.filename:
            raise RequestValidationFailed("file is required", field="file")

        if upload.size > self.max_upload_bytes:
            raise FileTooLargeError(
                upload.size / (1024 * 1024),
                self.max_upload_bytes // (1024 * 1024),
            )

        if infer_kind(upload.filename) is None:
            raise UnsupportedFileTypeError(upload.filename, supported_extensions())

        return upload

    # -------------------------------------------------------------------------
    # Upload
    # -------------------------------------------------------------------------

    def ingest(self, form: UploadForm, upload: UploadedFile | None, admin: Viewer) -> IngestResult:
        """
        Create a resource from an uploaded file.

        Checks run in a fixed order so the first problem reported is
        predictable: admin, title, visibility, board, file, size, kind.

        Returns:
            IngestResult with the inserted row and, for public uploads,
            the object's public URL

        Raises:
            ForbiddenError: Viewer is not an approved admin
            RequestValidationFailed: Missing/invalid form field
            FileTooLargeError: File over the upload limit
            UnsupportedFileTypeError: Extension not in the kind table
            StorageUploadError: Object write failed
            SupabaseClientError: Metadata insert failed (object orphaned)
        """
        self._require_admin(admin)

        title = (form.title or "").strip()
        if not title:
            raise RequestValidationFailed("title is required", field="title")

        visibility = (form.visibility or "").strip()
        if visibility not in {tier.value for tier in Visibility}:
            raise RequestValidationFailed("invalid visibility", field="visibility")

        board = self.db.fetch_board_by_slug(form.board_slug)
        if board is None:
            raise RequestValidationFailed("invalid boardSlug", field="boardSlug")

        upload = self._check_file(upload)
        kind = infer_kind(upload.filename)

        key = build_storage_key(board.slug, upload.filename)
        content_type = upload.content_type or DEFAULT_CONTENT_TYPE
        self.storage.upload(key, upload.data, content_type, visibility)

        row = {
            "board_id": board.id,
            "title": title,
            "displayname": _clean_displayname(form.displayname),
            "kind": kind.value,
            "visibility": visibility,
            "published_at": normalize_published_at(form.published_at),
            "r2_key": key,
            "mime": content_type,
            "size_bytes": upload.size,
            "original_filename": upload.filename,
        }

        try:
            resource = self.db.insert_resource(row)
        except SupabaseClientError:
            logger.error(f"Metadata insert failed, object left orphaned: {key}")
            raise

        logger.info(
            f"Resource {resource.id} uploaded by {admin.user_id} "
            f"({kind.value}, {visibility}, {upload.size} bytes)"
        )

        public_url = None
        if visibility == Visibility.PUBLIC.value:
            public_url = self.storage.public_url(key)

        return IngestResult(resource=resource, public_url=public_url)

    # -------------------------------------------------------------------------
    # Replace
    # -------------------------------------------------------------------------

    def replace_file(
        self,
        resource_id: int,
        upload: UploadedFile | None,
        admin: Viewer,
    ) -> ReplaceResult:
        """
        Swap the file behind an existing resource.

        Only the file columns change (r2_key, mime, size_bytes,
        original_filename, updated_at); visibility, board and kind stay as
        they are. The new kind must equal the stored kind. The old object
        is kept in storage.

        Raises:
            ForbiddenError: Viewer is not an approved admin
            RequestValidationFailed: Bad id or missing file
            FileTooLargeError / UnsupportedFileTypeError: File checks
            ResourceNotFoundError: No such resource
            ResourceDeletedError: Resource is soft-deleted
            KindMismatchError: New file is of a different kind
        """
        self._require_admin(admin)

        if resource_id <= 0:
            raise RequestValidationFailed("resourceId is required", field="resourceId")

        upload = self._check_file(upload)
        new_kind = infer_kind(upload.filename)

        resource = self.db.fetch_resource(resource_id)
        if resource is None:
            raise ResourceNotFoundError(resource_id)
        if resource.is_deleted:
            raise ResourceDeletedError(resource_id)
        if resource.kind != new_kind.value:
            raise KindMismatchError(resource.kind, new_kind.value)

        board = self.db.fetch_board(resource.board_id) if resource.board_id is not None else None
        if board is None:
            raise ResourcePortalException(
                message="board not found for resource",
                code="BOARD_NOT_FOUND",
                status_code=500,
                details={"resource_id": resource_id},
            )

        old_key = resource.storage_key
        new_key = build_storage_key(board.slug, upload.filename, resource_id=resource.id)
        content_type = upload.content_type or DEFAULT_CONTENT_TYPE
        self.storage.upload(new_key, upload.data, content_type, resource.visibility)

        try:
            updated = self.db.update_resource(resource_id, {
                "r2_key": new_key,
                "mime": content_type,
                "size_bytes": upload.size,
                "original_filename": upload.filename,
                "updated_at": datetime.now(timezone.utc).isoformat(),
            })
        except SupabaseClientError:
            logger.error(f"Metadata update failed, object left orphaned: {new_key}")
            raise

        if updated is None:
            raise ResourceNotFoundError(resource_id)

        logger.info(f"Resource {resource_id} file replaced by {admin.user_id}")
        return ReplaceResult(resource=updated, old_key=old_key, new_key=new_key)
