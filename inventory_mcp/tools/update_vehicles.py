"""update-vehicles: single-row or make/model batch field updates."""

from __future__ import annotations

import logging
from typing import Any

from inventory_mcp.constants import IDENTITY_COLUMNS, UPDATED_AT
from inventory_mcp.data.filters import (
    VEHICLE_UPDATES,
    assignments_to_values,
    build_assignments,
    select_update_target,
)
from inventory_mcp.data.inventory import (
    find_one_vehicle,
    find_vehicles,
    update_vehicles_by_id,
)
from inventory_mcp.data.store import VehicleStore
from inventory_mcp.tools.formatting import format_assignments, or_na, vehicle_label

logger = logging.getLogger(__name__)


def _stored_values(row: dict[str, Any], values: dict[str, Any]) -> str:
    """Post-update values as returned by the store, for the columns we wrote."""
    return format_assignments(
        {column: row.get(column) for column in values},
        skip=(UPDATED_AT,),
    )


def update_vehicles_impl(
    store: VehicleStore,
    *,
    id: int | None = None,  # noqa: A002
    vin: str | None = None,
    stock_number: str | None = None,
    make: str | None = None,
    model: str | None = None,
    price: float | None = None,
    custom_price: float | None = None,
    colour: str | None = None,
    interior_color: str | None = None,
    description: str | None = None,
    ai_description: str | None = None,
    odometer: int | None = None,
    new_used: str | None = None,
    certified: str | None = None,
    dealer_name: str | None = None,
    tags: str | None = None,
    inventory_date: str | None = None,
) -> str:
    """Update one vehicle (by id, vin or stock_number) or every visible make/model match.

    Identifiers take precedence in that order and make/model are then ignored.
    """
    fields = {
        name: value
        for name, value in {
            "price": price,
            "custom_price": custom_price,
            "colour": colour,
            "interior_color": interior_color,
            "description": description,
            "ai_description": ai_description,
            "odometer": odometer,
            "new_used": new_used,
            "certified": certified,
            "dealer_name": dealer_name,
            "tags": tags,
            "inventory_date": inventory_date,
        }.items()
        if value is not None
    }
    assignments = build_assignments(VEHICLE_UPDATES, fields)
    target = select_update_target(
        {
            "id": id,
            "vin": vin,
            "stock_number": stock_number,
            "make": make,
            "model": model,
        }
    )

    if target.identifier is not None:
        vehicle = find_one_vehicle(store, target.predicates, columns=IDENTITY_COLUMNS)
        if vehicle is None:
            return f"No vehicle found with {target.identifier.label}."
        matched = [vehicle]
    else:
        matched = find_vehicles(store, target.predicates, columns=IDENTITY_COLUMNS)
        if not matched:
            return "No vehicles found matching the specified criteria."

    updated = update_vehicles_by_id(store, matched, assignments)
    values = assignments_to_values(assignments)
    logger.info(
        "update-vehicles wrote %s to %d row(s)",
        sorted(values),
        len(updated),
    )

    vehicle_list = "\n   ".join(
        f"{i}. {vehicle_label(v)} (ID: {v.get('id')}, VIN: {or_na(v.get('vin'))}) "
        f"→ {_stored_values(v, values)}"
        for i, v in enumerate(updated, start=1)
    )
    return (
        f"Successfully updated {len(updated)} vehicle(s).\n\n"
        f"Updated fields: {format_assignments(values, skip=(UPDATED_AT,))}\n"
        f"Updated at: {values[UPDATED_AT]}\n\n"
        f"Vehicles updated:\n   {vehicle_list}"
    )
