"""delete-ai-video: clear ``ai_video`` and best-effort delete the stored file.

The object deletion and the database update are independent results. The
field is cleared even when the storage delete fails.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

from inventory_mcp.clients.object_storage import ObjectStorage
from inventory_mcp.constants import AI_VIDEO_COLUMNS, ai_video_key
from inventory_mcp.data.filters import AI_VIDEO_CLEAR, build_assignments, resolve_identifier
from inventory_mcp.data.inventory import find_one_vehicle, update_vehicles_by_id
from inventory_mcp.data.store import VehicleStore
from inventory_mcp.errors import MissingStockNumber, ObjectCleanupFailed
from inventory_mcp.tools.formatting import or_na, vehicle_label

logger = logging.getLogger(__name__)


class CleanupOutcome(str, Enum):
    DELETED = "deleted"
    FAILED = "failed"
    SKIPPED = "skipped"


@dataclass(frozen=True)
class CleanupResult:
    outcome: CleanupOutcome
    key: str
    error: str = ""

    def describe(self) -> str:
        if self.outcome is CleanupOutcome.DELETED:
            return f"File deleted from object storage ({self.key})"
        if self.outcome is CleanupOutcome.FAILED:
            return (
                f"Warning: Could not delete file from object storage: {self.error}\n"
                "   (Database field has been set to null)"
            )
        return (
            "Note: Object storage credentials not configured. "
            "Only database field was updated."
        )


def delete_stored_video(storage: ObjectStorage | None, key: str) -> CleanupResult:
    """Try to delete *key*; never raises."""
    if storage is None:
        return CleanupResult(CleanupOutcome.SKIPPED, key)
    try:
        storage.delete(key)
    except ObjectCleanupFailed as exc:
        logger.warning("AI video cleanup failed for %s: %s", key, exc.reason)
        return CleanupResult(CleanupOutcome.FAILED, key, exc.reason)
    return CleanupResult(CleanupOutcome.DELETED, key)


def delete_ai_video_impl(
    store: VehicleStore,
    storage: ObjectStorage | None,
    *,
    id: int | None = None,  # noqa: A002
    vin: str | None = None,
    stock_number: str | None = None,
) -> str:
    """Null the vehicle's ``ai_video`` and remove ``vehicles/{stock_number}/ai-video.mp4``."""
    identifier = resolve_identifier({"id": id, "vin": vin, "stock_number": stock_number})

    vehicle = find_one_vehicle(store, [identifier.predicate], columns=AI_VIDEO_COLUMNS)
    if vehicle is None:
        return f"No vehicle found with {identifier.label}."

    label = vehicle_label(vehicle)
    previous_url = vehicle.get("ai_video")
    if not previous_url:
        return f"Vehicle {label} (ID: {vehicle['id']}) does not have an AI video to delete."

    stock = vehicle.get("stock_number")
    if not stock:
        raise MissingStockNumber(
            f"Vehicle {label} (ID: {vehicle['id']}) does not have a stock number. "
            "Cannot determine object storage path."
        )

    cleanup = delete_stored_video(storage, ai_video_key(stock))

    assignments = build_assignments(AI_VIDEO_CLEAR, {"ai_video": None})
    updated = update_vehicles_by_id(store, [vehicle], assignments)
    result = updated[0] if updated else vehicle

    return (
        "Successfully deleted AI video for vehicle:\n\n"
        f"Vehicle: {label}\n"
        f"ID: {result.get('id', vehicle['id'])}\n"
        f"VIN: {or_na(result.get('vin', vehicle.get('vin')))}\n"
        f"Previous AI Video URL: {previous_url}\n\n"
        f"{cleanup.describe()}\n\n"
        "Database field 'ai_video' set to null. "
        "Video will be regenerated in the next batch."
    )
