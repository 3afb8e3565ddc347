"""Plain-text rendering helpers shared by the tool implementations."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any


def vehicle_label(row: dict[str, Any]) -> str:
    """``"2014 Porsche 911"``, skipping missing parts."""
    parts = [str(row[key]) for key in ("year", "make", "model") if row.get(key)]
    return " ".join(parts)


def or_na(value: Any) -> str:
    if value is None or value == "":
        return "N/A"
    return str(value)


def format_price(value: Any) -> str:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return "N/A"
    return f"${value:,.0f}"


def format_mileage(value: Any) -> str:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return "N/A"
    return f"{value:,.0f} miles"


def display_key(column: str) -> str:
    """``"interior_color"`` → ``"Interior Color"``."""
    return column.replace("_", " ").title()


def format_assignments(values: dict[str, Any], *, skip: Sequence[str] = ()) -> str:
    return ", ".join(
        f"{display_key(column)}: {'null' if value is None else value}"
        for column, value in values.items()
        if column not in skip
    )
