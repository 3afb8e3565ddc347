"""Shared test fixtures — in-memory vehicle store and mocked object storage injection."""

from __future__ import annotations

import copy
import re
from collections.abc import Callable, Mapping, Sequence
from typing import Any
from unittest.mock import MagicMock

import pytest

from inventory_mcp.clients.object_storage import (
    ObjectStorage,
    reset_object_storage,
    set_object_storage,
)
from inventory_mcp.data.filters import Predicate
from inventory_mcp.data.inventory import set_store

SEED_VEHICLES: list[dict[str, Any]] = [
    {
        "id": 1, "year": 2014, "make": "Porsche", "model": "911 Turbo S", "series": "991",
        "vin": "WP0AB2A99EXXXXXXX", "stock_number": "P100", "price": 189_000,
        "colour": "GT Silver", "interior_color": "Black", "odometer": 21_500,
        "body": "Coupe", "fuel": "Gasoline", "transmission": "PDK", "drivetrain": "AWD",
        "new_used": "Used", "certified": "Yes", "dealer_name": "Sport Cars Lux",
        "notes": None, "ai_video": None,
        "created_at": "2024-01-02T00:00:00+00:00", "updated_at": "2024-03-01T00:00:00+00:00",
        "deleted_at": None,
    },
    {
        "id": 2, "year": 2019, "make": "Ferrari", "model": "488 GTB", "series": None,
        "vin": "ZFF79ALA0K0000001", "stock_number": "F200", "price": 265_000,
        "colour": "Rosso Corsa", "interior_color": "Nero", "odometer": 8_900,
        "body": "Coupe", "fuel": "Gasoline", "transmission": "Automatic", "drivetrain": "RWD",
        "new_used": "Used", "certified": "No", "dealer_name": "Sport Cars Lux",
        "notes": "Ceramic coated",
        "ai_video": "https://cdn.example.com/vehicles/F200/ai-video.mp4",
        "created_at": "2024-01-05T00:00:00+00:00", "updated_at": "2024-03-05T00:00:00+00:00",
        "deleted_at": None,
    },
    {
        "id": 3, "year": 2021, "make": "Ferrari", "model": "F8 Tributo", "series": None,
        "vin": "ZFF92LLA0M0000002", "stock_number": "F201", "price": None,
        "colour": "Giallo Modena", "interior_color": "Nero", "odometer": 3_200,
        "body": "Coupe", "fuel": "Gasoline", "transmission": "Automatic", "drivetrain": "RWD",
        "new_used": "Used", "certified": None, "dealer_name": "Miami Exotics",
        "notes": None, "ai_video": None,
        "created_at": "2024-02-01T00:00:00+00:00", "updated_at": "2024-02-20T00:00:00+00:00",
        "deleted_at": None,
    },
    {
        "id": 4, "year": 2020, "make": "Lamborghini", "model": "Huracan EVO", "series": None,
        "vin": "ZHWUF4ZF0LLA00003", "stock_number": "L300", "price": 230_000,
        "colour": "Verde Mantis", "interior_color": "Nero Ade", "odometer": 5_400,
        "body": "Coupe", "fuel": "Gasoline", "transmission": "Automatic", "drivetrain": "AWD",
        "new_used": "Used", "certified": None, "dealer_name": "Sport Cars Lux",
        "notes": "Sold at auction",
        "ai_video": "https://cdn.example.com/vehicles/L300/ai-video.mp4",
        "created_at": "2024-01-10T00:00:00+00:00", "updated_at": "2024-03-10T00:00:00+00:00",
        "deleted_at": "2024-03-10T00:00:00+00:00",
    },
    {
        "id": 5, "year": 2018, "make": "McLaren", "model": "720S", "series": "Performance",
        "vin": "SBM14DCA0JW000005", "stock_number": "M500", "price": 215_000,
        "colour": "Papaya Spark", "interior_color": "Carbon Black", "odometer": 12_000,
        "body": "Coupe", "fuel": "Gasoline", "transmission": "Automatic", "drivetrain": "RWD",
        "new_used": "Used", "certified": "No", "dealer_name": "Sport Cars Lux",
        "notes": "Needs detail", "ai_video": None,
        "created_at": "2024-01-15T00:00:00+00:00", "updated_at": "2024-02-15T00:00:00+00:00",
        "deleted_at": None,
    },
    {
        "id": 7, "year": 2022, "make": "Porsche", "model": "Taycan", "series": "Turbo",
        "vin": "WP0AB2Y10NSA00007", "stock_number": None, "price": 155_000,
        "colour": "Frozen Blue", "interior_color": "Black", "odometer": 4_100,
        "body": "Sedan", "fuel": "Electric", "transmission": "Automatic", "drivetrain": "AWD",
        "new_used": "Used", "certified": "Yes", "dealer_name": "Miami Exotics",
        "notes": None, "ai_video": "https://cdn.example.com/ai-video.mp4",
        "created_at": "2024-02-10T00:00:00+00:00", "updated_at": "2024-02-25T00:00:00+00:00",
        "deleted_at": None,
    },
    {
        "id": 8, "year": 2017, "make": "Aston Martin", "model": "DB11", "series": "V12",
        "vin": "SCFRMFAV0HGL00008", "stock_number": "A800", "price": 129_000,
        "colour": "Skyfall Silver", "interior_color": "Obsidian Black", "odometer": 18_700,
        "body": "Coupe", "fuel": "Gasoline", "transmission": "Automatic", "drivetrain": "RWD",
        "new_used": "Used", "certified": None, "dealer_name": "Sport Cars Lux",
        "notes": None,
        "ai_video": "https://cdn.example.com/vehicles/A800/ai-video.mp4",
        "created_at": "2024-01-20T00:00:00+00:00", "updated_at": "2024-03-02T00:00:00+00:00",
        "deleted_at": None,
    },
]


def _like_to_regex(pattern: str) -> re.Pattern[str]:
    parts = [".*" if ch == "%" else "." if ch == "_" else re.escape(ch) for ch in pattern]
    return re.compile("^" + "".join(parts) + "$", re.IGNORECASE | re.DOTALL)


def _matches(row: dict[str, Any], p: Predicate) -> bool:
    value = row.get(p.column)
    if p.op == "is_null":
        return value is None
    if p.op == "not_null":
        return value is not None
    if value is None:
        return False
    if p.op == "eq":
        return value == p.value
    if p.op == "ilike":
        return bool(_like_to_regex(p.value).match(str(value)))
    if p.op == "gte":
        return value >= p.value
    if p.op == "lte":
        return value <= p.value
    if p.op == "in":
        return value in p.value
    raise ValueError(f"unsupported op {p.op}")


class FakeVehicleStore:
    """In-memory VehicleStore that evaluates predicates like PostgREST would."""

    def __init__(self, rows: Sequence[dict[str, Any]] = ()) -> None:
        self.rows: dict[int, dict[str, Any]] = {r["id"]: copy.deepcopy(r) for r in rows}
        self.calls: list[tuple[str, Any]] = []
        self.after_select: Callable[[FakeVehicleStore], None] | None = None
        self.write_error: Exception | None = None

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
        self.calls.append(("select", list(predicates)))
        matched = [
            row for row in self.rows.values()
            if all(_matches(row, p) for p in predicates)
        ]
        if order_by:
            # Postgres: NULLS FIRST for DESC, NULLS LAST for ASC.
            present = [r for r in matched if r.get(order_by) is not None]
            missing = [r for r in matched if r.get(order_by) is None]
            present.sort(key=lambda r: r[order_by], reverse=descending)
            matched = missing + present if descending else present + missing
        if limit is not None:
            matched = matched[offset:offset + limit]
        result = [
            {c: row.get(c) for c in columns} if columns else copy.deepcopy(row)
            for row in matched
        ]
        if self.after_select is not None:
            hook, self.after_select = self.after_select, None
            hook(self)
        return result

    def update_by_ids(
        self,
        ids: Sequence[int],
        values: Mapping[str, Any],
    ) -> list[dict[str, Any]]:
        self.calls.append(("update", (list(ids), dict(values))))
        if self.write_error is not None:
            raise self.write_error
        updated = []
        for vehicle_id in ids:
            if vehicle_id in self.rows:
                self.rows[vehicle_id].update(values)
                updated.append(copy.deepcopy(self.rows[vehicle_id]))
        return updated

    def delete_by_ids(self, ids: Sequence[int]) -> list[dict[str, Any]]:
        self.calls.append(("delete", list(ids)))
        if self.write_error is not None:
            raise self.write_error
        return [self.rows.pop(vehicle_id) for vehicle_id in ids if vehicle_id in self.rows]

    def writes(self) -> list[tuple[str, Any]]:
        return [call for call in self.calls if call[0] in {"update", "delete"}]


@pytest.fixture()
def store() -> FakeVehicleStore:
    """A fresh store seeded with sample inventory for each test."""
    return FakeVehicleStore(SEED_VEHICLES)


@pytest.fixture()
def s3_client() -> MagicMock:
    return MagicMock()


@pytest.fixture()
def storage(s3_client: MagicMock) -> ObjectStorage:
    return ObjectStorage(s3_client, "inventory-media")


@pytest.fixture(autouse=True)
def _inject_test_services(store: FakeVehicleStore, storage: ObjectStorage):
    """Route the MCP wrappers to the fake store and mocked storage for every test."""
    set_store(store)
    set_object_storage(storage)
    yield
    set_store(None)
    reset_object_storage()
