# =============================================================================
# tests/test_resource_directory.py - Listing Tests
# =============================================================================
# Unit tests for ResourceDirectory against the in-memory database.
#
# Run with: pytest tests/test_resource_directory.py -v
# =============================================================================

import pytest

from core.services.resource_directory import ResourceDirectory
from core.services.visibility_policy import VisibilityPolicy


@pytest.fixture
def directory(db):
    return ResourceDirectory(db, VisibilityPolicy())


def ids(items):
    return [item.id for item in items]


class TestListResources:
    """Tests for list_resources."""

    def test_anonymous_sees_only_public(self, directory, anonymous):
        items = directory.list_resources("atm", anonymous)
        assert ids(items) == [1]
        assert all(item.visibility == "public" for item in items)

    def test_pending_member_sees_only_public(self, directory, pending_viewer):
        assert ids(directory.list_resources("atm", pending_viewer)) == [1]

    def test_member_sees_public_and_member(self, directory, member_viewer):
        assert ids(directory.list_resources("atm", member_viewer)) == [1, 2]

    def test_admin_sees_everything_but_deleted(self, directory, admin_viewer):
        assert ids(directory.list_resources("atm", admin_viewer)) == [1, 2, 3]

    def test_unknown_slug_is_empty(self, directory, admin_viewer):
        assert directory.list_resources("nope", admin_viewer) == []

    def test_blank_slug_lists_all_boards(self, directory, anonymous):
        # Undated resource 6 sorts after every dated one
        assert ids(directory.list_resources(None, anonymous)) == [1, 5, 6]

    def test_deleted_never_listed(self, directory, admin_viewer):
        assert 4 not in ids(directory.list_resources(None, admin_viewer))

    def test_list_limit(self, db, admin_viewer):
        directory = ResourceDirectory(db, VisibilityPolicy(), list_limit=1)
        assert ids(directory.list_resources(None, admin_viewer)) == [1]


class TestListItems:
    """Tests for the listing item shape."""

    def test_item_fields(self, directory, member_viewer):
        item = directory.list_resources("atm", member_viewer)[0]

        assert item.title == "ATM Vol.1"
        assert item.date == "2026-01-08"
        assert item.board_slug == "atm"
        assert item.board_title == "ATM"
        assert item.original_filename == "atm-vol1.pdf"
        assert item.can_view is True

    def test_date_falls_back_to_created_at(self, directory, anonymous):
        photo = next(i for i in directory.list_resources("news", anonymous) if i.id == 6)
        assert photo.date == "2026-01-02"

    def test_storage_key_not_exposed(self, directory, admin_viewer):
        payload = directory.list_resources(None, admin_viewer)[0].model_dump(by_alias=True)
        assert "r2_key" not in payload
        assert "r2Key" not in payload
        assert "atm/1767830400000-atm-vol1.pdf" not in str(payload)

    def test_anonymous_cannot_download_public(self, directory, anonymous):
        item = directory.list_resources("atm", anonymous)[0]
        assert item.can_download is False

    def test_logged_in_can_download_public(self, directory, pending_viewer):
        item = directory.list_resources("atm", pending_viewer)[0]
        assert item.can_download is True

    def test_link_without_file_cannot_be_downloaded(self, directory, admin_viewer):
        link = next(i for i in directory.list_resources("news", admin_viewer) if i.id == 5)
        assert link.can_download is False

    def test_camel_case_serialization(self, directory, member_viewer):
        payload = directory.list_resources("atm", member_viewer)[0].model_dump(by_alias=True)
        assert {"canView", "canDownload", "boardSlug", "boardTitle", "originalFilename"} <= set(payload)


class TestListPage:
    """Tests for the paged category view."""

    def test_pages_and_total(self, db, admin_viewer):
        for n in range(12):
            db.add_resource(id=100 + n, title=f"Report {n}", visibility="member",
                            published_at=f"2025-12-{n + 1:02d}")
        directory = ResourceDirectory(db, VisibilityPolicy())

        first, total = directory.list_page("atm", admin_viewer, page=1, page_size=10)
        second, _ = directory.list_page("atm", admin_viewer, page=2, page_size=10)

        assert total == 15
        assert len(first) == 10
        assert len(second) == 5
        assert not set(ids(first)) & set(ids(second))

    def test_search_filters_titles(self, directory, admin_viewer):
        items, total = directory.list_page("atm", admin_viewer, q="minutes")
        assert ids(items) == [3]
        assert total == 1

    def test_page_respects_visibility(self, directory, anonymous):
        items, total = directory.list_page("atm", anonymous)
        assert ids(items) == [1]
        assert total == 1

    def test_unknown_slug(self, directory, anonymous):
        assert directory.list_page("nope", anonymous) == ([], 0)
