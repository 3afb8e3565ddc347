"""VehicleStore protocol and the Supabase (PostgREST) implementation."""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import (
    Any,
    Protocol,
    runtime_checkable,
)

from postgrest.exceptions import APIError
from supabase import Client, create_client

from inventory_mcp.config import Settings
from inventory_mcp.constants import VEHICLES_TABLE
from inventory_mcp.data.filters import Predicate
from inventory_mcp.errors import StoreReadFailed, StoreWriteFailed

logger = logging.getLogger(__name__)


@runtime_checkable
class VehicleStore(Protocol):
    """Minimal table access needed by the tools.

    Visibility rules are not applied here; callers pass them as predicates.
    """

    def select(
        self,
        predicates: Sequence[Predicate],
        *,
        columns: Sequence[str] | None = None,
        order_by: str | None = None,
        descending: bool = False,
        limit: int | None = None,
        offset: int = 0,
    ) -> list[dict[str, Any]]: ...

    def update_by_ids(
        self,
        ids: Sequence[int],
        values: Mapping[str, Any],
    ) -> list[dict[str, Any]]: ...

    def delete_by_ids(self, ids: Sequence[int]) -> list[dict[str, Any]]: ...


def _error_message(exc: APIError) -> str:
    return exc.message or str(exc)


def apply_predicate(query: Any, p: Predicate) -> Any:
    """Apply a single predicate to a PostgREST query builder."""
    match p.op:
        case "eq":
            return query.eq(p.column, p.value)
        case "ilike":
            return query.ilike(p.column, p.value)
        case "gte":
            return query.gte(p.column, p.value)
        case "lte":
            return query.lte(p.column, p.value)
        case "is_null":
            return query.is_(p.column, "null")
        case "not_null":
            return query.not_.is_(p.column, "null")
        case "in":
            return query.in_(p.column, list(p.value))
    raise ValueError(f"Unsupported predicate operator: {p.op}")


class SupabaseVehicleStore:
    """Vehicle table access through a supabase-py client."""

    def __init__(self, client: Client, *, table: str = VEHICLES_TABLE) -> None:
        self._client = client
        self._table = table

    @classmethod
    def from_settings(cls, settings: Settings) -> SupabaseVehicleStore:
        url, key = settings.require_supabase()
        return cls(create_client(url, key))

    def select(
        self,
        predicates: Sequence[Predicate],
        *,
        columns: Sequence[str] | None = None,
        order_by: str | None = None,
        descending: bool = False,
        limit: int | None = None,
        offset: int = 0,
    ) -> list[dict[str, Any]]:
        select_clause = ", ".join(columns) if columns else "*"
        query = self._client.table(self._table).select(select_clause)
        for p in predicates:
            query = apply_predicate(query, p)
        if order_by:
            query = query.order(order_by, desc=descending)
        if limit is not None:
            query = query.range(offset, offset + limit - 1)
        try:
            response = query.execute()
        except APIError as exc:
            raise StoreReadFailed(_error_message(exc)) from exc
        return list(response.data or [])

    def update_by_ids(
        self,
        ids: Sequence[int],
        values: Mapping[str, Any],
    ) -> list[dict[str, Any]]:
        if not ids:
            return []
        try:
            response = (
                self._client.table(self._table)
                .update(dict(values))
                .in_("id", list(ids))
                .execute()
            )
        except APIError as exc:
            raise StoreWriteFailed(_error_message(exc)) from exc
        logger.info("Updated %d %s row(s): ids=%s", len(ids), self._table, list(ids))
        return list(response.data or [])

    def delete_by_ids(self, ids: Sequence[int]) -> list[dict[str, Any]]:
        if not ids:
            return []
        try:
            response = (
                self._client.table(self._table)
                .delete()
                .in_("id", list(ids))
                .execute()
            )
        except APIError as exc:
            raise StoreWriteFailed(_error_message(exc)) from exc
        logger.info("Deleted %d %s row(s): ids=%s", len(ids), self._table, list(ids))
        return list(response.data or [])
