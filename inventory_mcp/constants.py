"""Shared constants used across multiple tool modules.

Single source of truth for the table name, column projections and object keys.
"""

from __future__ import annotations

VEHICLES_TABLE = "vehicles"

DELETED_AT = "deleted_at"
UPDATED_AT = "updated_at"

# Lookup projections: identity plus whatever the mutation reports on.
IDENTITY_COLUMNS: tuple[str, ...] = ("id", "year", "make", "model", "vin", "stock_number")
NOTES_COLUMNS: tuple[str, ...] = (*IDENTITY_COLUMNS, "notes")
AI_VIDEO_COLUMNS: tuple[str, ...] = (*IDENTITY_COLUMNS, "ai_video")

SORT_FIELDS: frozenset[str] = frozenset({
    "updated_at",
    "created_at",
    "year",
    "price",
    "odometer",
})
SORT_ORDERS: frozenset[str] = frozenset({"asc", "desc"})

DEFAULT_LIMIT = 5
MAX_LIMIT = 100

AI_VIDEO_KEY_TEMPLATE = "vehicles/{stock_number}/ai-video.mp4"

UPSTREAM_SYNC_WARNING = (
    "Warning: This vehicle will be automatically re-added by vAuto during the next "
    "sync/refresh (approximately every 2 hours) IF it is still present in vAuto's "
    "inventory."
)


def ai_video_key(stock_number: str) -> str:
    return AI_VIDEO_KEY_TEMPLATE.format(stock_number=stock_number)
