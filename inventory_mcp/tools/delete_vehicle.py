"""delete-vehicle: permanent removal by VIN or stock number."""

from __future__ import annotations

from inventory_mcp.constants import IDENTITY_COLUMNS, UPSTREAM_SYNC_WARNING
from inventory_mcp.data.filters import resolve_identifier
from inventory_mcp.data.inventory import delete_vehicles_by_id, find_one_vehicle
from inventory_mcp.data.store import VehicleStore
from inventory_mcp.tools.formatting import or_na, vehicle_label

_DELETE_IDENTIFIERS = ("vin", "stock_number")


def delete_vehicle_impl(
    store: VehicleStore,
    *,
    vin: str | None = None,
    stock_number: str | None = None,
) -> str:
    """Hard-delete one vehicle, including rows that are already soft-deleted."""
    identifier = resolve_identifier(
        {"vin": vin, "stock_number": stock_number},
        _DELETE_IDENTIFIERS,
    )

    vehicle = find_one_vehicle(
        store,
        [identifier.predicate],
        columns=IDENTITY_COLUMNS,
        include_deleted=True,
    )
    if vehicle is None:
        return (
            f"No vehicle found with {identifier.label}. "
            "It may have already been deleted or doesn't exist."
        )

    delete_vehicles_by_id(store, [vehicle])

    return (
        "Successfully deleted vehicle:\n\n"
        f"Vehicle: {vehicle_label(vehicle)}\n"
        f"ID: {vehicle['id']}\n"
        f"VIN: {or_na(vehicle.get('vin'))}\n"
        f"Stock Number: {or_na(vehicle.get('stock_number'))}\n\n"
        f"{UPSTREAM_SYNC_WARNING}"
    )
