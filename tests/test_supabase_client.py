# =============================================================================
# tests/test_supabase_client.py - Supabase Wrapper Tests
# =============================================================================
# Unit tests for lib/supabase_client.py with a mocked SDK client:
# - query construction (filters, ordering, conditional updates)
# - row parsing into records
# - SDK failures wrapped in SupabaseClientError
#
# Run with: pytest tests/test_supabase_client.py -v
# =============================================================================

from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest

from lib.supabase_client import SupabaseClient, SupabaseClientError


def response(data=None, count=None):
    return SimpleNamespace(data=data, count=count)


@pytest.fixture
def sdk():
    return MagicMock()


@pytest.fixture
def query(sdk):
    """
    The chained query builder.

    Every builder method returns the same mock, so filters can be asserted
    on it and execute() configured once.
    """
    builder = MagicMock()
    for name in ("select", "eq", "in_", "is_", "order", "limit", "range",
                 "ilike", "maybe_single", "insert", "update", "upsert"):
        getattr(builder, name).return_value = builder
    sdk.table.return_value = builder
    return builder


@pytest.fixture
def db(sdk):
    return SupabaseClient(sdk)


class TestBoards:
    def test_fetch_board_by_slug(self, db, sdk, query):
        query.execute.return_value = response({"id": 1, "slug": "atm", "title": "ATM"})

        board = db.fetch_board_by_slug(" atm ")

        assert board.id == 1 and board.slug == "atm"
        sdk.table.assert_called_with("boards")
        query.eq.assert_called_with("slug", "atm")

    def test_blank_slug_skips_query(self, db, sdk):
        assert db.fetch_board_by_slug("  ") is None
        sdk.table.assert_not_called()

    @pytest.mark.parametrize("result", [None, response(None)])
    def test_missing_board(self, db, query, result):
        query.execute.return_value = result
        assert db.fetch_board_by_slug("nope") is None


class TestResources:
    def test_list_resources_filters_and_orders(self, db, query):
        query.execute.return_value = response([
            {"id": 1, "title": "A", "kind": "pdf", "visibility": "public",
             "published_at": "2026-01-08", "created_at": "2026-01-08T00:00:00+00:00",
             "r2_key": "atm/1.pdf", "boards": {"slug": "atm", "title": "ATM"}},
        ])

        resources = db.list_resources(["public", "member"], board_id=1, limit=200)

        assert resources[0].board.slug == "atm"
        query.in_.assert_called_with("visibility", ["public", "member"])
        query.is_.assert_called_with("deleted_at", "null")
        query.eq.assert_called_with("board_id", 1)
        query.order.assert_any_call("published_at", desc=True, nullsfirst=False)
        query.order.assert_any_call("created_at", desc=True)
        query.limit.assert_called_with(200)

    def test_list_without_board_has_no_board_filter(self, db, query):
        query.execute.return_value = response([])
        db.list_resources(["public"])
        query.eq.assert_not_called()

    def test_page_uses_range_and_count(self, db, query):
        query.execute.return_value = response([], count=42)

        items, total = db.list_resources_page(["public"], None, offset=20, limit=10, search="atm")

        assert (items, total) == ([], 42)
        query.range.assert_called_with(20, 29)
        query.ilike.assert_called_with("title", "%atm%")

    @pytest.mark.parametrize("search,pattern", [
        ("100%", "%100\\%%"),
        ("a_b", "%a\\_b%"),
        ("c:\\docs", "%c:\\\\docs%"),
    ])
    def test_search_wildcards_are_literal(self, db, query, search, pattern):
        query.execute.return_value = response([], count=0)

        db.list_resources_page(["public"], None, offset=0, limit=10, search=search)

        query.ilike.assert_called_with("title", pattern)

    def test_mark_deleted_is_conditional(self, db, query):
        query.execute.return_value = response([{"id": 7}])

        assert db.mark_resource_deleted(7, "11111111-1111-4111-8111-111111111111") is True
        query.eq.assert_called_with("id", 7)
        query.is_.assert_called_with("deleted_at", "null")

    def test_mark_deleted_no_row(self, db, query):
        query.execute.return_value = response([])
        assert db.mark_resource_deleted(7, "11111111-1111-4111-8111-111111111111") is False

    def test_insert_without_data(self, db, query):
        query.execute.return_value = response([])
        with pytest.raises(SupabaseClientError) as exc_info:
            db.insert_resource({"title": "x"})
        assert exc_info.value.code == "INSERT_NO_DATA"

    def test_sdk_error_wrapped(self, db, query):
        query.execute.side_effect = RuntimeError("boom")
        with pytest.raises(SupabaseClientError) as exc_info:
            db.fetch_resource(1)
        assert exc_info.value.code == "FETCH_RESOURCE_FAILED"
        assert "boom" in exc_info.value.message


class TestProfiles:
    def test_fetch_profile_parses_role(self, db, query):
        query.execute.return_value = response(
            {"id": "22222222-2222-4222-8222-222222222222", "role": "admin", "approved": True}
        )
        profile = db.fetch_profile("22222222-2222-4222-8222-222222222222")
        assert profile.role.value == "admin"
        assert profile.approved is True

    def test_fetch_profiles_empty_skips_query(self, db, sdk):
        assert db.fetch_profiles([]) == []
        sdk.table.assert_not_called()


class TestAuthUsers:
    def test_list_auth_users(self, db, sdk):
        sdk.auth.admin.list_users.return_value = [
            SimpleNamespace(id="u1", email="a@example.com", created_at=None, last_sign_in_at=None),
        ]
        users = db.list_auth_users(page=2, per_page=10)

        assert users == [{"id": "u1", "email": "a@example.com", "created_at": None, "last_sign_in_at": None}]
        sdk.auth.admin.list_users.assert_called_once_with(page=2, per_page=10)
