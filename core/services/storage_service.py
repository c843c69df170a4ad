# =============================================================================
# core/services/storage_service.py - Supabase Storage Operations
# =============================================================================
# Handles object storage for resource files with Supabase Storage.
#
# Two buckets back the portal:
# - public bucket: objects are served from a stable public URL
# - private bucket: objects are only reachable through short-lived
#   signed URLs minted per request
#
# The bucket is chosen from the resource's visibility at ingestion time.
# Both the public base URL and the signed URL can carry a download
# filename so the browser saves the file under the resource title.
# =============================================================================

import logging
from urllib.parse import quote

from supabase import Client

from app.exceptions import StorageUploadError, StorageUrlError
from core.models.resource import Visibility

logger = logging.getLogger(__name__)


class StorageService:
    """
    Service for Supabase Storage operations.

    Example:
        storage = StorageService(client, "public", "private")
        storage.upload("atm/1767830400000-atm.pdf", data, "application/pdf", "public")
        url = storage.signed_url("atm/1767830400000-atm.pdf", 60, "ATM.pdf")
    """

    def __init__(
        self,
        client: Client,
        public_bucket: str,
        private_bucket: str,
        public_base_url: str | None = None,
    ):
        self.client = client
        self.public_bucket = public_bucket
        self.private_bucket = private_bucket
        self.public_base_url = public_base_url.rstrip("/") if public_base_url else None

    def bucket_for(self, visibility: str) -> str:
        """Public resources live in the public bucket, everything else is private."""
        if visibility == Visibility.PUBLIC.value:
            return self.public_bucket
        return self.private_bucket

    # -------------------------------------------------------------------------
    # Upload
    # -------------------------------------------------------------------------

    def upload(self, key: str, data: bytes, content_type: str, visibility: str) -> str:
        """
        Store an object under `key`.

        Keys are never reused, so uploads don't upsert: an existing object
        with the same key is an error rather than silently overwritten.

        Returns:
            The key the object was stored under

        Raises:
            StorageUploadError: If upload fails
        """
        bucket = self.bucket_for(visibility)

        try:
            self.client.storage.from_(bucket).upload(
                path=key,
                file=data,
                file_options={"content-type": content_type, "upsert": "false"}
            )
        except Exception as e:
            logger.error(f"Storage upload failed for {bucket}/{key}: {e}")
            raise StorageUploadError(key, str(e))

        logger.info(f"Uploaded {len(data)} bytes to {bucket}/{key}")
        return key

    # -------------------------------------------------------------------------
    # URLs
    # -------------------------------------------------------------------------

    def public_url(self, key: str, download_filename: str | None = None) -> str:
        """
        Stable URL of an object in the public bucket.

        When PUBLIC_BASE_URL is configured (a CDN or custom domain in front
        of the bucket) the URL is built from it, otherwise Supabase's own
        public object URL is used.
        """
        if self.public_base_url:
            url = f"{self.public_base_url}/{quote(key)}"
            if download_filename:
                url += f"?download={quote(download_filename)}"
            return url

        options = {"download": download_filename} if download_filename else None
        try:
            if options:
                return self.client.storage.from_(self.public_bucket).get_public_url(key, options)
            return self.client.storage.from_(self.public_bucket).get_public_url(key)
        except Exception as e:
            raise StorageUrlError(str(e))

    def signed_url(
        self,
        key: str,
        expires_in: int,
        download_filename: str | None = None,
    ) -> str:
        """
        Mint a signed URL for an object in the private bucket.

        Args:
            key: Object key
            expires_in: Lifetime in seconds
            download_filename: If set, the URL forces an attachment download
                under this name

        Raises:
            StorageUrlError: If signing fails
        """
        options = {"download": download_filename} if download_filename else None

        try:
            if options:
                response = self.client.storage.from_(self.private_bucket).create_signed_url(
                    key, expires_in, options
                )
            else:
                response = self.client.storage.from_(self.private_bucket).create_signed_url(
                    key, expires_in
                )
        except Exception as e:
            logger.error(f"Failed to sign URL for {key}: {e}")
            raise StorageUrlError(str(e))

        # Key casing differs between storage client versions
        url = (response or {}).get("signedURL") or (response or {}).get("signedUrl")
        if not url:
            raise StorageUrlError("storage returned no signed URL")
        return url

    # -------------------------------------------------------------------------
    # Health
    # -------------------------------------------------------------------------

    def check_buckets(self) -> dict[str, bool]:
        """Which of the configured buckets exist."""
        names = {bucket.name for bucket in self.client.storage.list_buckets()}
        return {
            self.public_bucket: self.public_bucket in names,
            self.private_bucket: self.private_bucket in names,
        }
