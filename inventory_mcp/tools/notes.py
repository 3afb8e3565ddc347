"""add-notes: set, replace or clear the free-text notes on one vehicle."""

from __future__ import annotations

from inventory_mcp.constants import NOTES_COLUMNS
from inventory_mcp.data.filters import (
    NOTES_UPDATE,
    assignments_to_values,
    build_assignments,
    resolve_identifier,
)
from inventory_mcp.data.inventory import find_one_vehicle, update_vehicles_by_id
from inventory_mcp.data.store import VehicleStore
from inventory_mcp.tools.formatting import or_na, vehicle_label


def add_notes_impl(
    store: VehicleStore,
    *,
    notes: str | None,
    id: int | None = None,  # noqa: A002
    vin: str | None = None,
    stock_number: str | None = None,
) -> str:
    """Write *notes* for one vehicle. ``None`` or an empty string deletes them."""
    identifier = resolve_identifier({"id": id, "vin": vin, "stock_number": stock_number})
    assignments = build_assignments(NOTES_UPDATE, {"notes": notes})
    new_notes = assignments_to_values(assignments)["notes"]

    vehicle = find_one_vehicle(store, [identifier.predicate], columns=NOTES_COLUMNS)
    if vehicle is None:
        return f"No vehicle found with {identifier.label}."

    updated = update_vehicles_by_id(store, [vehicle], assignments)
    result = updated[0] if updated else vehicle

    if new_notes is None:
        action = "deleted"
    elif vehicle.get("notes"):
        action = "updated"
    else:
        action = "added"

    return (
        f"Successfully {action} notes for vehicle:\n\n"
        f"Vehicle: {vehicle_label(vehicle)}\n"
        f"ID: {result.get('id', vehicle['id'])}\n"
        f"VIN: {or_na(result.get('vin', vehicle.get('vin')))}\n"
        f"Notes: {'No notes' if new_notes is None else new_notes}"
    )
