"""Unit tests for the Supabase-backed VehicleStore."""

from __future__ import annotations

from unittest.mock import MagicMock, patch

import pytest
from postgrest.exceptions import APIError

from inventory_mcp.config import Settings
from inventory_mcp.data.filters import Predicate
from inventory_mcp.data.store import SupabaseVehicleStore, VehicleStore, apply_predicate
from inventory_mcp.errors import ConfigurationError, StoreReadFailed, StoreWriteFailed


@pytest.fixture()
def mock_supabase() -> MagicMock:
    """A supabase client whose query builder methods chain back to one query mock."""
    client = MagicMock()
    query = MagicMock()
    client.table.return_value = query
    for method in (
        "select", "eq", "ilike", "gte", "lte", "is_", "in_",
        "order", "range", "update", "delete",
    ):
        getattr(query, method).return_value = query
    query.not_.is_.return_value = query
    query.execute.return_value = MagicMock(data=[{"id": 1}])
    return client


@pytest.fixture()
def query(mock_supabase: MagicMock) -> MagicMock:
    return mock_supabase.table.return_value


@pytest.fixture()
def supabase_store(mock_supabase: MagicMock) -> SupabaseVehicleStore:
    return SupabaseVehicleStore(mock_supabase)


def _api_error(message: str) -> APIError:
    return APIError({"message": message, "code": "42P01", "hint": None, "details": None})


class TestProtocol:
    def test_supabase_store_satisfies_protocol(self, supabase_store: SupabaseVehicleStore):
        assert isinstance(supabase_store, VehicleStore)


class TestApplyPredicate:
    @pytest.mark.parametrize(
        ("predicate", "method", "args"),
        [
            (Predicate("year", "eq", 2019), "eq", ("year", 2019)),
            (Predicate("make", "ilike", "%fer%"), "ilike", ("make", "%fer%")),
            (Predicate("price", "gte", 100), "gte", ("price", 100)),
            (Predicate("odometer", "lte", 500), "lte", ("odometer", 500)),
            (Predicate("deleted_at", "is_null"), "is_", ("deleted_at", "null")),
            (Predicate("id", "in", (1, 2)), "in_", ("id", [1, 2])),
        ],
    )
    def test_operator_mapping(self, query: MagicMock, predicate, method, args):
        apply_predicate(query, predicate)
        getattr(query, method).assert_called_once_with(*args)

    def test_not_null_uses_negated_is(self, query: MagicMock):
        apply_predicate(query, Predicate("price", "not_null"))
        query.not_.is_.assert_called_once_with("price", "null")

    def test_unknown_operator(self, query: MagicMock):
        with pytest.raises(ValueError):
            apply_predicate(query, Predicate("price", "between", (1, 2)))  # type: ignore[arg-type]


class TestSelect:
    def test_defaults_to_all_columns(
        self, supabase_store: SupabaseVehicleStore, mock_supabase: MagicMock, query: MagicMock
    ):
        rows = supabase_store.select([])
        mock_supabase.table.assert_called_once_with("vehicles")
        query.select.assert_called_once_with("*")
        query.order.assert_not_called()
        query.range.assert_not_called()
        assert rows == [{"id": 1}]

    def test_projection_order_and_range(
        self, supabase_store: SupabaseVehicleStore, query: MagicMock
    ):
        supabase_store.select(
            [Predicate("deleted_at", "is_null")],
            columns=("id", "vin"),
            order_by="price",
            descending=True,
            limit=5,
            offset=10,
        )
        query.select.assert_called_once_with("id, vin")
        query.is_.assert_called_once_with("deleted_at", "null")
        query.order.assert_called_once_with("price", desc=True)
        query.range.assert_called_once_with(10, 14)

    def test_none_data_is_empty(self, supabase_store: SupabaseVehicleStore, query: MagicMock):
        query.execute.return_value = MagicMock(data=None)
        assert supabase_store.select([]) == []

    def test_api_error_wrapped(self, supabase_store: SupabaseVehicleStore, query: MagicMock):
        query.execute.side_effect = _api_error('relation "vehicles" does not exist')
        with pytest.raises(StoreReadFailed) as exc_info:
            supabase_store.select([])
        assert str(exc_info.value) == 'Store read failed: relation "vehicles" does not exist'


class TestWrites:
    def test_update_by_ids(self, supabase_store: SupabaseVehicleStore, query: MagicMock):
        supabase_store.update_by_ids([2, 3], {"price": 1})
        query.update.assert_called_once_with({"price": 1})
        query.in_.assert_called_once_with("id", [2, 3])

    def test_delete_by_ids(self, supabase_store: SupabaseVehicleStore, query: MagicMock):
        supabase_store.delete_by_ids([4])
        query.delete.assert_called_once_with()
        query.in_.assert_called_once_with("id", [4])

    def test_empty_ids_skip_client(
        self, supabase_store: SupabaseVehicleStore, mock_supabase: MagicMock
    ):
        assert supabase_store.update_by_ids([], {"price": 1}) == []
        assert supabase_store.delete_by_ids([]) == []
        mock_supabase.table.assert_not_called()

    def test_write_error_wrapped(self, supabase_store: SupabaseVehicleStore, query: MagicMock):
        query.execute.side_effect = _api_error("permission denied")
        with pytest.raises(StoreWriteFailed) as exc_info:
            supabase_store.update_by_ids([1], {"price": 1})
        assert exc_info.value.store_message == "permission denied"


class TestFromSettings:
    def test_missing_credentials(self):
        with pytest.raises(ConfigurationError):
            SupabaseVehicleStore.from_settings(Settings())

    def test_creates_client(self):
        settings = Settings(supabase_url="https://x.supabase.co", supabase_service_role_key="k")
        with patch("inventory_mcp.data.store.create_client") as create:
            built = SupabaseVehicleStore.from_settings(settings)
        create.assert_called_once_with("https://x.supabase.co", "k")
        assert isinstance(built, SupabaseVehicleStore)
