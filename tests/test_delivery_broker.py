# =============================================================================
# tests/test_delivery_broker.py - File URL Delivery Tests
# =============================================================================
# Unit tests for DeliveryBroker: authorization outcomes, public vs signed
# URLs, attachment filenames.
#
# Run with: pytest tests/test_delivery_broker.py -v
# =============================================================================

from unittest.mock import MagicMock

import pytest

from app.exceptions import (
    AuthenticationRequiredError,
    ForbiddenError,
    ResourceNotFoundError,
)
from core.models.resource import AccessMode
from core.services.delivery_broker import DeliveryBroker
from core.services.storage_service import StorageService
from core.services.visibility_policy import VisibilityPolicy


@pytest.fixture
def broker(db, storage):
    return DeliveryBroker(db, storage, VisibilityPolicy(), signed_url_ttl=60)


class TestPublicDelivery:
    """Tests for public-tier resources."""

    def test_anonymous_view_gets_public_url(self, broker, storage, anonymous):
        link = broker.resolve(1, AccessMode.VIEW, anonymous)

        assert link.url == "https://cdn.example.test/atm/1767830400000-atm-vol1.pdf"
        assert link.expires_in is None
        assert not link.is_signed
        assert storage.signed == []

    def test_anonymous_download_requires_login(self, broker, anonymous):
        with pytest.raises(AuthenticationRequiredError) as exc_info:
            broker.resolve(1, AccessMode.DOWNLOAD, anonymous)
        assert exc_info.value.message == "login required for download"
        assert exc_info.value.status_code == 401

    def test_logged_in_download_names_file_after_title(self, broker, pending_viewer):
        link = broker.resolve(1, AccessMode.DOWNLOAD, pending_viewer)
        assert link.url.endswith("?download=ATM_Vol.1.pdf")

    def test_anonymous_download_allowed_when_flag_on(self, db, storage, anonymous):
        broker = DeliveryBroker(db, storage, VisibilityPolicy(allow_anonymous_public_download=True))
        assert broker.resolve(1, AccessMode.DOWNLOAD, anonymous).url


class TestPrivateDelivery:
    """Tests for member/admin-tier resources."""

    def test_member_download_gets_signed_url(self, broker, storage, member_viewer):
        link = broker.resolve(2, AccessMode.DOWNLOAD, member_viewer)

        assert link.is_signed
        assert link.expires_in == 60
        assert storage.signed == [("atm/2-notes.pdf", 60, "Member_Notes.pdf")]

    def test_view_is_inline(self, broker, storage, member_viewer):
        broker.resolve(2, AccessMode.VIEW, member_viewer)
        assert storage.signed == [("atm/2-notes.pdf", 60, None)]

    def test_signed_url_ttl_is_configurable(self, db, storage, admin_viewer):
        broker = DeliveryBroker(db, storage, VisibilityPolicy(), signed_url_ttl=15)
        assert broker.resolve(3, AccessMode.VIEW, admin_viewer).expires_in == 15

    def test_anonymous_on_member_resource(self, broker, anonymous):
        with pytest.raises(AuthenticationRequiredError) as exc_info:
            broker.resolve(2, AccessMode.VIEW, anonymous)
        assert exc_info.value.message == "login required"

    def test_unapproved_member(self, broker, pending_viewer):
        with pytest.raises(ForbiddenError) as exc_info:
            broker.resolve(2, AccessMode.VIEW, pending_viewer)
        assert exc_info.value.message == "approved required"

    def test_member_on_admin_resource(self, broker, storage, member_viewer):
        with pytest.raises(ForbiddenError) as exc_info:
            broker.resolve(3, AccessMode.DOWNLOAD, member_viewer)
        assert exc_info.value.message == "admin required"
        assert storage.signed == []

    def test_admin_download_keeps_original_extension(self, broker, storage, admin_viewer):
        broker.resolve(3, AccessMode.DOWNLOAD, admin_viewer)
        assert storage.signed[0][2] == "Board_Minutes.docx"


class TestNotFound:
    """Tests for missing, deleted and file-less resources."""

    def test_missing_resource(self, broker, admin_viewer):
        with pytest.raises(ResourceNotFoundError):
            broker.resolve(999, AccessMode.VIEW, admin_viewer)

    @pytest.mark.parametrize("mode", list(AccessMode))
    def test_deleted_resource_is_not_found_even_for_admin(self, broker, admin_viewer, mode):
        with pytest.raises(ResourceNotFoundError):
            broker.resolve(4, mode, admin_viewer)

    def test_deleted_resource_is_not_found_for_anonymous(self, broker, anonymous):
        with pytest.raises(ResourceNotFoundError):
            broker.resolve(4, AccessMode.VIEW, anonymous)

    def test_link_without_file(self, broker, anonymous):
        with pytest.raises(ResourceNotFoundError) as exc_info:
            broker.resolve(5, AccessMode.VIEW, anonymous)
        assert exc_info.value.message == "resource has no file"


class TestStorageOptions:
    """What the broker asks Supabase Storage for, per mode."""

    @pytest.fixture
    def sdk(self):
        sdk = MagicMock()
        sdk.storage.from_.return_value.create_signed_url.return_value = {
            "signedURL": "https://signed.example/k"
        }
        return sdk

    @pytest.fixture
    def real_broker(self, db, sdk):
        storage = StorageService(sdk, public_bucket="public", private_bucket="private")
        return DeliveryBroker(db, storage, VisibilityPolicy(), signed_url_ttl=60)

    def test_view_signs_without_download_option(self, real_broker, sdk, member_viewer):
        real_broker.resolve(2, AccessMode.VIEW, member_viewer)

        bucket = sdk.storage.from_.return_value
        bucket.create_signed_url.assert_called_once_with("atm/2-notes.pdf", 60)

    def test_download_signs_with_attachment_name(self, real_broker, sdk, member_viewer):
        real_broker.resolve(2, AccessMode.DOWNLOAD, member_viewer)

        bucket = sdk.storage.from_.return_value
        bucket.create_signed_url.assert_called_once_with(
            "atm/2-notes.pdf", 60, {"download": "Member_Notes.pdf"}
        )

    def test_public_view_has_no_download_option(self, real_broker, sdk, anonymous):
        real_broker.resolve(1, AccessMode.VIEW, anonymous)

        bucket = sdk.storage.from_.return_value
        bucket.get_public_url.assert_called_once_with("atm/1767830400000-atm-vol1.pdf")
