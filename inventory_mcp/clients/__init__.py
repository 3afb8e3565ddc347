"""Shared external service clients."""

from inventory_mcp.clients.object_storage import (
    ObjectStorage,
    get_object_storage,
    reset_object_storage,
    set_object_storage,
)

__all__ = [
    "ObjectStorage",
    "get_object_storage",
    "reset_object_storage",
    "set_object_storage",
]
