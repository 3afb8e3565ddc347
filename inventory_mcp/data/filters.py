"""Declarative request-field → query translation.

Tools describe their optional parameters in static tables (``FilterField`` /
``AssignmentField``) and fold the provided values over them.  Nothing here
touches a store, so the identification and precedence rules can be tested on
their own.

A request is passed as a mapping of *provided* fields only: a key that is
missing is "absent", while a key mapped to ``""`` or ``None`` was sent
explicitly.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Literal

from inventory_mcp.constants import DELETED_AT, UPDATED_AT
from inventory_mcp.errors import (
    AmbiguousIdentifier,
    NoFieldsToUpdate,
    NoIdentifier,
    NoTargetCriteria,
)

Operator = Literal["eq", "ilike", "gte", "lte", "is_null", "not_null", "in"]


@dataclass(frozen=True)
class Predicate:
    column: str
    op: Operator
    value: Any = None


@dataclass(frozen=True)
class Assignment:
    column: str
    value: Any


VISIBLE_ONLY = Predicate(DELETED_AT, "is_null")


# ── Identifier resolution ──────────────────────────────────────────

# Priority order matters for update targeting: id, then vin, then stock_number.
IDENTIFIER_FIELDS: dict[str, tuple[str, str]] = {
    "id": ("id", "ID"),
    "vin": ("vin", "VIN"),
    "stock_number": ("stock_number", "Stock Number"),
}


@dataclass(frozen=True)
class Identifier:
    field: str
    value: Any

    @property
    def column(self) -> str:
        return IDENTIFIER_FIELDS[self.field][0]

    @property
    def label(self) -> str:
        return f"{IDENTIFIER_FIELDS[self.field][1]}: {self.value}"

    @property
    def predicate(self) -> Predicate:
        return Predicate(self.column, "eq", self.value)


def _is_supplied(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, str):
        return bool(value.strip())
    return True


def _quote_list(fields: Sequence[str]) -> str:
    quoted = [f"'{f}'" for f in fields]
    if len(quoted) <= 2:
        return " or ".join(quoted)
    return ", ".join(quoted[:-1]) + f", or {quoted[-1]}"


def supplied_identifiers(
    candidates: Mapping[str, Any],
    allowed: Sequence[str],
) -> list[Identifier]:
    """Identifiers from *allowed* that carry a value, in priority order."""
    found: list[Identifier] = []
    for field in IDENTIFIER_FIELDS:
        if field not in allowed:
            continue
        value = candidates.get(field)
        if _is_supplied(value):
            found.append(
                Identifier(field, value.strip() if isinstance(value, str) else value)
            )
    return found


def resolve_identifier(
    candidates: Mapping[str, Any],
    allowed: Sequence[str] = tuple(IDENTIFIER_FIELDS),
) -> Identifier:
    """Return the single identifier supplied, or raise.

    Two identifiers are rejected even when they would resolve to the same row.
    """
    unknown = [f for f in allowed if f not in IDENTIFIER_FIELDS]
    if unknown:
        raise ValueError(f"Unsupported identifier field(s): {', '.join(unknown)}")

    found = supplied_identifiers(candidates, allowed)
    if not found:
        raise NoIdentifier(
            f"Please provide one identifier ({_quote_list(allowed)}) "
            "to identify the vehicle."
        )
    if len(found) > 1:
        raise AmbiguousIdentifier(
            f"Please provide only one identifier ({_quote_list(allowed)}), "
            "not multiple."
        )
    return found[0]


# ── Predicate building (read path) ─────────────────────────────────


@dataclass(frozen=True)
class FilterField:
    """``param`` → predicate on ``column``.

    ``kind`` is one of ``contains`` (case-insensitive substring), ``eq``,
    ``min``, ``max`` or ``presence`` (boolean → IS [NOT] NULL).
    """

    param: str
    column: str
    kind: Literal["contains", "eq", "min", "max", "presence"]


def _to_predicate(entry: FilterField, value: Any) -> Predicate:
    match entry.kind:
        case "contains":
            return Predicate(entry.column, "ilike", f"%{value}%")
        case "eq":
            return Predicate(entry.column, "eq", value)
        case "min":
            return Predicate(entry.column, "gte", value)
        case "max":
            return Predicate(entry.column, "lte", value)
        case "presence":
            return Predicate(entry.column, "not_null" if value else "is_null")
    raise ValueError(f"Unknown filter kind: {entry.kind}")


def build_predicates(
    fields: Sequence[FilterField],
    values: Mapping[str, Any],
) -> list[Predicate]:
    """Translate provided *values* into predicates, in table order."""
    return [
        _to_predicate(entry, values[entry.param])
        for entry in fields
        if entry.param in values
    ]


VEHICLE_FILTERS: tuple[FilterField, ...] = (
    FilterField("make", "make", "contains"),
    FilterField("model", "model", "contains"),
    FilterField("year", "year", "eq"),
    FilterField("min_year", "year", "min"),
    FilterField("max_year", "year", "max"),
    FilterField("min_price", "price", "min"),
    FilterField("max_price", "price", "max"),
    FilterField("has_price", "price", "presence"),
    FilterField("colour", "colour", "contains"),
    FilterField("interior_color", "interior_color", "contains"),
    FilterField("new_used", "new_used", "contains"),
    FilterField("certified", "certified", "contains"),
    FilterField("transmission", "transmission", "contains"),
    FilterField("drivetrain", "drivetrain", "contains"),
    FilterField("fuel", "fuel", "contains"),
    FilterField("max_odometer", "odometer", "max"),
    FilterField("body", "body", "contains"),
    FilterField("dealer_name", "dealer_name", "contains"),
)

BATCH_FILTERS: tuple[FilterField, ...] = (
    FilterField("make", "make", "contains"),
    FilterField("model", "model", "contains"),
)


# ── Assignment building (write path) ───────────────────────────────


@dataclass(frozen=True)
class AssignmentField:
    """``param`` → new value for ``column``.

    For ``nullable`` fields an explicit empty string means "clear", so it is
    written as NULL.
    """

    param: str
    column: str
    nullable: bool = False


def _normalize(entry: AssignmentField, value: Any) -> Any:
    if entry.nullable and (value is None or value == ""):
        return None
    return value


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def build_assignments(
    fields: Sequence[AssignmentField],
    values: Mapping[str, Any],
    *,
    now: str | None = None,
) -> list[Assignment]:
    """Translate provided *values* into assignments and stamp ``updated_at``.

    Raises ``NoFieldsToUpdate`` when nothing but the timestamp would be written.
    """
    assignments = [
        Assignment(entry.column, _normalize(entry, values[entry.param]))
        for entry in fields
        if entry.param in values
    ]
    if not assignments:
        raise NoFieldsToUpdate(
            "No fields provided to update. Please specify at least one field to update."
        )
    assignments.append(Assignment(UPDATED_AT, now or utc_now_iso()))
    return assignments


def assignments_to_values(assignments: Sequence[Assignment]) -> dict[str, Any]:
    return {a.column: a.value for a in assignments}


VEHICLE_UPDATES: tuple[AssignmentField, ...] = (
    AssignmentField("price", "price"),
    AssignmentField("custom_price", "custom_price"),
    AssignmentField("colour", "colour"),
    AssignmentField("interior_color", "interior_color"),
    AssignmentField("description", "description", nullable=True),
    AssignmentField("ai_description", "ai_description", nullable=True),
    AssignmentField("odometer", "odometer"),
    AssignmentField("new_used", "new_used"),
    AssignmentField("certified", "certified"),
    AssignmentField("dealer_name", "dealer_name"),
    AssignmentField("tags", "tags", nullable=True),
    AssignmentField("inventory_date", "inventory_date", nullable=True),
)

NOTES_UPDATE: tuple[AssignmentField, ...] = (
    AssignmentField("notes", "notes", nullable=True),
)

AI_VIDEO_CLEAR: tuple[AssignmentField, ...] = (
    AssignmentField("ai_video", "ai_video", nullable=True),
)


# ── Update targeting ───────────────────────────────────────────────


@dataclass(frozen=True)
class UpdateTarget:
    """Predicates selecting the rows to update.

    ``identifier`` is set for single-row targeting; otherwise the target is a
    batch described by ``predicates``.
    """

    predicates: tuple[Predicate, ...]
    identifier: Identifier | None = None

    @property
    def single_row(self) -> bool:
        return self.identifier is not None


def select_update_target(values: Mapping[str, Any]) -> UpdateTarget:
    """Pick identifier targeting over batch filters, never defaulting to all rows.

    Unlike ``resolve_identifier``, several identifiers are tolerated here: the
    highest-priority one wins and descriptive filters are ignored.
    """
    identifiers = supplied_identifiers(values, tuple(IDENTIFIER_FIELDS))
    if identifiers:
        chosen = identifiers[0]
        return UpdateTarget(predicates=(chosen.predicate,), identifier=chosen)

    batch = build_predicates(
        BATCH_FILTERS,
        {k: v for k, v in values.items() if _is_supplied(v)},
    )
    if batch:
        return UpdateTarget(predicates=tuple(batch))

    raise NoTargetCriteria(
        "Please specify at least one identifier (id, vin, stock_number) or filter "
        "(make, model) to identify which vehicle(s) to update."
    )
