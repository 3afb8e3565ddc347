"""S3-compatible object storage client (Cloudflare R2)."""

from __future__ import annotations

import logging
from typing import Any

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from inventory_mcp.config import Settings
from inventory_mcp.errors import ObjectCleanupFailed

logger = logging.getLogger(__name__)


class ObjectStorage:
    """Deletes objects from a single bucket."""

    def __init__(self, s3_client: Any, bucket: str) -> None:
        self._s3 = s3_client
        self.bucket = bucket

    @classmethod
    def from_settings(cls, settings: Settings) -> ObjectStorage | None:
        """Build a client for R2, or ``None`` when credentials are incomplete."""
        if not settings.object_storage_configured:
            return None
        s3_client = boto3.client(
            "s3",
            region_name="auto",
            endpoint_url=settings.r2_endpoint,
            aws_access_key_id=settings.r2_access_key_id,
            aws_secret_access_key=settings.r2_secret_access_key,
            config=Config(retries={"max_attempts": 1, "mode": "standard"}),
        )
        return cls(s3_client, settings.r2_bucket_name)

    def delete(self, key: str) -> None:
        """Delete *key* from the bucket. Raises ``ObjectCleanupFailed``."""
        try:
            self._s3.delete_object(Bucket=self.bucket, Key=key)
        except ClientError as exc:
            error = exc.response.get("Error", {})
            reason = error.get("Message") or error.get("Code") or str(exc)
            raise ObjectCleanupFailed(key, reason) from exc
        except BotoCoreError as exc:
            raise ObjectCleanupFailed(key, str(exc)) from exc
        logger.info("Deleted s3://%s/%s", self.bucket, key)


_storage: ObjectStorage | None = None
_storage_resolved = False


def get_object_storage() -> ObjectStorage | None:
    """Return the configured ObjectStorage singleton, or ``None`` when R2 is not set up."""
    global _storage, _storage_resolved  # noqa: PLW0603
    if not _storage_resolved:
        _storage = ObjectStorage.from_settings(Settings.from_env())
        _storage_resolved = True
    return _storage


def set_object_storage(storage: ObjectStorage | None) -> None:
    """Inject object storage for testing. ``None`` means "not configured"."""
    global _storage, _storage_resolved  # noqa: PLW0603
    _storage = storage
    _storage_resolved = True


def reset_object_storage() -> None:
    """Forget the cached client so the next access re-reads the environment."""
    global _storage, _storage_resolved  # noqa: PLW0603
    _storage = None
    _storage_resolved = False
