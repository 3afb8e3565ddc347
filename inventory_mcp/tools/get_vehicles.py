"""get-vehicles: filtered read of visible inventory."""

from __future__ import annotations

from typing import Any

from inventory_mcp.constants import (
    DEFAULT_LIMIT,
    MAX_LIMIT,
    SORT_FIELDS,
    SORT_ORDERS,
)
from inventory_mcp.data.filters import VEHICLE_FILTERS, build_predicates
from inventory_mcp.data.inventory import find_vehicles
from inventory_mcp.data.store import VehicleStore
from inventory_mcp.errors import ValidationError
from inventory_mcp.tools.formatting import (
    format_mileage,
    format_price,
    or_na,
    vehicle_label,
)


def _format_vehicle(index: int, v: dict[str, Any]) -> str:
    title = " ".join(part for part in (vehicle_label(v), str(v.get("series") or "")) if part)
    lines = [
        f"{index}. {title or 'Unknown vehicle'}",
        f"   - ID: {or_na(v.get('id'))}",
        f"   - Price: {format_price(v.get('price'))}",
        f"   - Mileage: {format_mileage(v.get('odometer'))}",
        f"   - Color: {or_na(v.get('colour'))}",
        f"   - VIN: {or_na(v.get('vin'))}",
        f"   - Stock Number: {or_na(v.get('stock_number'))}",
    ]
    if v.get("notes"):
        lines.append(f"   - Notes: {v['notes']}")
    return "\n".join(lines)


def get_vehicles_impl(
    store: VehicleStore,
    *,
    make: str | None = None,
    model: str | None = None,
    year: int | None = None,
    min_year: int | None = None,
    max_year: int | None = None,
    min_price: float | None = None,
    max_price: float | None = None,
    has_price: bool | None = None,
    colour: str | None = None,
    interior_color: str | None = None,
    new_used: str | None = None,
    certified: str | None = None,
    transmission: str | None = None,
    drivetrain: str | None = None,
    fuel: str | None = None,
    max_odometer: int | None = None,
    body: str | None = None,
    dealer_name: str | None = None,
    sort_by: str = "updated_at",
    sort_order: str = "desc",
    limit: int = DEFAULT_LIMIT,
    offset: int = 0,
) -> str:
    """Search visible vehicles. Text filters are case-insensitive substring matches."""
    if sort_by not in SORT_FIELDS:
        raise ValidationError(
            f"Invalid sort_by '{sort_by}'. Must be one of: {', '.join(sorted(SORT_FIELDS))}."
        )
    if sort_order not in SORT_ORDERS:
        raise ValidationError("Invalid sort_order. Must be 'asc' or 'desc'.")
    if limit <= 0:
        raise ValidationError("Please provide a positive limit.")
    if limit > MAX_LIMIT:
        raise ValidationError(f"Please use a limit of {MAX_LIMIT} or fewer results per request.")
    if offset < 0:
        raise ValidationError("Please provide an offset greater than or equal to 0.")

    provided = {
        name: value
        for name, value in {
            "make": make,
            "model": model,
            "year": year,
            "min_year": min_year,
            "max_year": max_year,
            "min_price": min_price,
            "max_price": max_price,
            "has_price": has_price,
            "colour": colour,
            "interior_color": interior_color,
            "new_used": new_used,
            "certified": certified,
            "transmission": transmission,
            "drivetrain": drivetrain,
            "fuel": fuel,
            "max_odometer": max_odometer,
            "body": body,
            "dealer_name": dealer_name,
        }.items()
        if value is not None
    }
    predicates = build_predicates(VEHICLE_FILTERS, provided)

    vehicles = find_vehicles(
        store,
        predicates,
        order_by=sort_by,
        descending=sort_order == "desc",
        limit=limit,
        offset=offset,
    )
    if not vehicles:
        return "No vehicles found matching the specified criteria."

    vehicle_list = "\n\n".join(
        _format_vehicle(offset + i, v) for i, v in enumerate(vehicles, start=1)
    )
    return f"Found {len(vehicles)} vehicle(s):\n\n{vehicle_list}"
