"""Row lookup and mutate-by-id helpers, plus the process-wide store accessor.

Tool implementations take the store as an explicit argument; only the MCP
wrappers in ``server`` go through :func:`get_store`.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

from inventory_mcp.config import Settings
from inventory_mcp.data.filters import (
    VISIBLE_ONLY,
    Assignment,
    Predicate,
    assignments_to_values,
)
from inventory_mcp.data.store import SupabaseVehicleStore, VehicleStore
from inventory_mcp.errors import MultipleMatches

logger = logging.getLogger(__name__)

_store: VehicleStore | None = None


def get_store() -> VehicleStore:
    """Return the active VehicleStore singleton, building it from the environment.

    Raises ``ConfigurationError`` when Supabase credentials are missing.
    """
    global _store  # noqa: PLW0603
    if _store is None:
        _store = SupabaseVehicleStore.from_settings(Settings.from_env())
    return _store


def set_store(store: VehicleStore | None) -> None:
    """Inject a store instance for testing."""
    global _store  # noqa: PLW0603
    _store = store


# ── Row lookup ─────────────────────────────────────────────────────


def _scoped(predicates: Sequence[Predicate], include_deleted: bool) -> list[Predicate]:
    scoped = list(predicates)
    if not include_deleted:
        scoped.append(VISIBLE_ONLY)
    return scoped


def find_vehicles(
    store: VehicleStore,
    predicates: Sequence[Predicate],
    *,
    columns: Sequence[str] | None = None,
    include_deleted: bool = False,
    order_by: str | None = None,
    descending: bool = False,
    limit: int | None = None,
    offset: int = 0,
) -> list[dict[str, Any]]:
    """All rows matching *predicates*. Soft-deleted rows are excluded unless asked for."""
    return store.select(
        _scoped(predicates, include_deleted),
        columns=columns,
        order_by=order_by,
        descending=descending,
        limit=limit,
        offset=offset,
    )


def find_one_vehicle(
    store: VehicleStore,
    predicates: Sequence[Predicate],
    *,
    columns: Sequence[str] | None = None,
    include_deleted: bool = False,
) -> dict[str, Any] | None:
    """The single matching row, ``None`` for no match.

    Raises ``MultipleMatches`` rather than picking one of several rows.
    """
    rows = find_vehicles(
        store,
        predicates,
        columns=columns,
        include_deleted=include_deleted,
    )
    if len(rows) > 1:
        logger.warning(
            "Expected one vehicle, found %d (ids=%s)",
            len(rows),
            [row.get("id") for row in rows],
        )
        raise MultipleMatches(len(rows))
    return rows[0] if rows else None


# ── Mutation by captured ids ───────────────────────────────────────


def row_ids(rows: Sequence[dict[str, Any]]) -> list[int]:
    return [row["id"] for row in rows]


def update_vehicles_by_id(
    store: VehicleStore,
    rows: Sequence[dict[str, Any]],
    assignments: Sequence[Assignment],
) -> list[dict[str, Any]]:
    """Apply *assignments* to exactly the rows returned by a previous lookup."""
    ids = row_ids(rows)
    if not ids:
        return []
    return store.update_by_ids(ids, assignments_to_values(assignments))


def delete_vehicles_by_id(
    store: VehicleStore,
    rows: Sequence[dict[str, Any]],
) -> list[dict[str, Any]]:
    """Permanently delete exactly the rows returned by a previous lookup."""
    ids = row_ids(rows)
    if not ids:
        return []
    return store.delete_by_ids(ids)
