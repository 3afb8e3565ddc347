"""Inventory MCP server — FastMCP entry point for the vehicle CRUD tools."""

from __future__ import annotations

import logging
from typing import Literal

from mcp.server.fastmcp import FastMCP
from mcp.types import ToolAnnotations

from inventory_mcp.clients.object_storage import get_object_storage
from inventory_mcp.config import load_env_file
from inventory_mcp.constants import DEFAULT_LIMIT
from inventory_mcp.data.inventory import get_store
from inventory_mcp.errors import VehicleToolError, log_and_return_tool_error
from inventory_mcp.tools.ai_video import delete_ai_video_impl
from inventory_mcp.tools.delete_vehicle import delete_vehicle_impl
from inventory_mcp.tools.get_vehicles import get_vehicles_impl
from inventory_mcp.tools.notes import add_notes_impl
from inventory_mcp.tools.update_vehicles import update_vehicles_impl

load_env_file()

mcp = FastMCP("inventory-mcp")
logger = logging.getLogger(__name__)


def _tool_error(exc: VehicleToolError) -> str:
    logger.info("Tool call rejected (%s): %s", type(exc).__name__, exc)
    return f"Error: {exc}"


# ── Tool registrations ──────────────────────────────────────────────


@mcp.tool(
    name="get-vehicles",
    annotations=ToolAnnotations(
        title="Get Vehicles",
        readOnlyHint=True,
        destructiveHint=False,
        idempotentHint=True,
    ),
)
def get_vehicles(
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
    sort_by: Literal["updated_at", "created_at", "year", "price", "odometer"] = "updated_at",
    sort_order: Literal["asc", "desc"] = "desc",
    limit: int = DEFAULT_LIMIT,
    offset: int = 0,
) -> str:
    """Search vehicles in the inventory database.

    Text filters (make, model, colour, ...) are case-insensitive partial matches.
    year is exact; min_/max_ fields are inclusive bounds. has_price=true keeps
    only priced vehicles, false only unpriced ones. Deleted vehicles are never
    returned.
    """
    try:
        return get_vehicles_impl(
            get_store(),
            make=make,
            model=model,
            year=year,
            min_year=min_year,
            max_year=max_year,
            min_price=min_price,
            max_price=max_price,
            has_price=has_price,
            colour=colour,
            interior_color=interior_color,
            new_used=new_used,
            certified=certified,
            transmission=transmission,
            drivetrain=drivetrain,
            fuel=fuel,
            max_odometer=max_odometer,
            body=body,
            dealer_name=dealer_name,
            sort_by=sort_by,
            sort_order=sort_order,
            limit=limit,
            offset=offset,
        )
    except VehicleToolError as exc:
        return _tool_error(exc)
    except Exception as exc:
        return log_and_return_tool_error(
            tool_name="get-vehicles",
            exc=exc,
            user_message=(
                "I am having trouble searching vehicles right now. "
                "Please try again in a moment."
            ),
        )


@mcp.tool(
    name="update-vehicles",
    annotations=ToolAnnotations(
        title="Update Vehicles",
        readOnlyHint=False,
        destructiveHint=False,
        idempotentHint=False,
    ),
)
def update_vehicles(
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
    """Update one or multiple vehicles.

    Target one vehicle with id, vin or stock_number (checked in that order), or
    every vehicle matching make and/or model (partial, case-insensitive). At
    least one field to update is required. Empty description, ai_description,
    tags or inventory_date clears that field.
    """
    try:
        return update_vehicles_impl(
            get_store(),
            id=id,
            vin=vin,
            stock_number=stock_number,
            make=make,
            model=model,
            price=price,
            custom_price=custom_price,
            colour=colour,
            interior_color=interior_color,
            description=description,
            ai_description=ai_description,
            odometer=odometer,
            new_used=new_used,
            certified=certified,
            dealer_name=dealer_name,
            tags=tags,
            inventory_date=inventory_date,
        )
    except VehicleToolError as exc:
        return _tool_error(exc)
    except Exception as exc:
        return log_and_return_tool_error(
            tool_name="update-vehicles",
            exc=exc,
            user_message=(
                "I am having trouble updating vehicles right now. "
                "Please try again in a moment."
            ),
        )


@mcp.tool(
    name="delete-vehicle",
    annotations=ToolAnnotations(
        title="Delete Vehicle",
        readOnlyHint=False,
        destructiveHint=True,
        idempotentHint=False,
    ),
)
def delete_vehicle(vin: str | None = None, stock_number: str | None = None) -> str:
    """Permanently delete a vehicle by VIN or stock number (exactly one).

    The vehicle is re-added by the next vAuto sync (about every 2 hours) if it
    is still present in vAuto's inventory.
    """
    try:
        return delete_vehicle_impl(get_store(), vin=vin, stock_number=stock_number)
    except VehicleToolError as exc:
        return _tool_error(exc)
    except Exception as exc:
        return log_and_return_tool_error(
            tool_name="delete-vehicle",
            exc=exc,
            user_message=(
                "I am having trouble deleting that vehicle right now. "
                "Please try again in a moment."
            ),
        )


@mcp.tool(
    name="add-notes",
    annotations=ToolAnnotations(
        title="Add Notes to Vehicle",
        readOnlyHint=False,
        destructiveHint=False,
        idempotentHint=False,
    ),
)
def add_notes(
    notes: str | None,
    id: int | None = None,  # noqa: A002
    vin: str | None = None,
    stock_number: str | None = None,
) -> str:
    """Add, replace or delete notes for one vehicle (by id, vin or stock_number).

    Set notes to null or an empty string to delete existing notes.
    """
    try:
        return add_notes_impl(
            get_store(),
            id=id,
            vin=vin,
            stock_number=stock_number,
            notes=notes,
        )
    except VehicleToolError as exc:
        return _tool_error(exc)
    except Exception as exc:
        return log_and_return_tool_error(
            tool_name="add-notes",
            exc=exc,
            user_message=(
                "I am having trouble saving those notes right now. "
                "Please try again in a moment."
            ),
        )


@mcp.tool(
    name="delete-ai-video",
    annotations=ToolAnnotations(
        title="Delete AI Video",
        readOnlyHint=False,
        destructiveHint=True,
        idempotentHint=False,
    ),
)
def delete_ai_video(
    id: int | None = None,  # noqa: A002
    vin: str | None = None,
    stock_number: str | None = None,
) -> str:
    """Delete the AI video for one vehicle so the next batch regenerates it.

    Sets ai_video to null and deletes the file from object storage when
    storage credentials are configured.
    """
    try:
        return delete_ai_video_impl(
            get_store(),
            get_object_storage(),
            id=id,
            vin=vin,
            stock_number=stock_number,
        )
    except VehicleToolError as exc:
        return _tool_error(exc)
    except Exception as exc:
        return log_and_return_tool_error(
            tool_name="delete-ai-video",
            exc=exc,
            user_message=(
                "I am having trouble deleting that AI video right now. "
                "Please try again in a moment."
            ),
        )


if __name__ == "__main__":
    mcp.run()
