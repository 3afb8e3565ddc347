"""Error taxonomy shared by the vehicle tools.

Every tool call converts these into a returned ``Error: ...`` message; none of
them is allowed to escape the MCP wrapper.
"""

from __future__ import annotations

import logging

logger = logging.getLogger(__name__)


class VehicleToolError(Exception):
    """Base class for failures that are reported back to the caller verbatim."""


class ConfigurationError(VehicleToolError):
    """Required store credentials are missing."""


# ── Validation (raised before any store call) ──────────────────────


class ValidationError(VehicleToolError):
    """The request parameters cannot be turned into a query."""


class NoIdentifier(ValidationError):
    pass


class AmbiguousIdentifier(ValidationError):
    pass


class NoFieldsToUpdate(ValidationError):
    pass


class NoTargetCriteria(ValidationError):
    pass


# ── Integrity (raised after lookup, before mutation) ───────────────


class IntegrityError(VehicleToolError):
    """Stored rows violate an assumption the tool relies on."""


class MultipleMatches(IntegrityError):
    def __init__(self, count: int) -> None:
        super().__init__(
            f"Multiple vehicles ({count}) found with the same identifier. "
            "This shouldn't happen. Please contact support."
        )
        self.count = count


class MissingStockNumber(IntegrityError):
    pass


# ── Store / object storage ─────────────────────────────────────────


class StoreError(VehicleToolError):
    """The database rejected a call. ``store_message`` is the raw store text."""

    action = "call"

    def __init__(self, store_message: str) -> None:
        super().__init__(f"Store {self.action} failed: {store_message}")
        self.store_message = store_message


class StoreReadFailed(StoreError):
    action = "read"


class StoreWriteFailed(StoreError):
    action = "write"


class ObjectCleanupFailed(VehicleToolError):
    """Deleting an object from storage failed. Reported as a warning only."""

    def __init__(self, key: str, reason: str) -> None:
        super().__init__(reason)
        self.key = key
        self.reason = reason


def log_and_return_tool_error(
    *,
    tool_name: str,
    exc: BaseException,
    user_message: str,
) -> str:
    """Log an unexpected tool failure with its traceback and return a safe message."""
    logger.error(
        "Tool %s failed with %s: %s",
        tool_name,
        type(exc).__name__,
        exc,
        exc_info=exc,
    )
    return f"Error: {user_message}"
