"""Runtime settings for the inventory MCP server, read from the environment."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from inventory_mcp.errors import ConfigurationError

ENV_FILE = Path(__file__).resolve().parent.parent / ".env"

MISSING_SUPABASE_MESSAGE = (
    "Missing Supabase credentials. Please set SUPABASE_URL and "
    "SUPABASE_SERVICE_ROLE_KEY in .env file"
)


def load_env_file(path: Path = ENV_FILE) -> None:
    """Copy ``KEY=value`` lines from *path* into ``os.environ`` without overriding."""
    if not path.is_file():
        return
    for line in path.read_text().splitlines():
        line = line.strip()
        if line and not line.startswith("#") and "=" in line:
            k, _, v = line.partition("=")
            os.environ.setdefault(k.strip(), v.strip().strip("\"'"))


@dataclass(frozen=True)
class Settings:
    supabase_url: str = ""
    supabase_service_role_key: str = ""
    r2_endpoint: str = ""
    r2_access_key_id: str = ""
    r2_secret_access_key: str = ""
    r2_bucket_name: str = ""
    api_key: str = ""
    port: int = 3000
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> Settings:
        env = os.environ if environ is None else environ
        raw_port = env.get("PORT", "").strip()
        return cls(
            supabase_url=env.get("SUPABASE_URL", "").strip(),
            supabase_service_role_key=env.get("SUPABASE_SERVICE_ROLE_KEY", "").strip(),
            r2_endpoint=env.get("R2_ENDPOINT", "").strip(),
            r2_access_key_id=env.get("R2_ACCESS_KEY_ID", "").strip(),
            r2_secret_access_key=env.get("R2_SECRET_ACCESS_KEY", "").strip(),
            r2_bucket_name=env.get("R2_BUCKET_NAME", "").strip(),
            api_key=env.get("API_KEY", "").strip(),
            port=int(raw_port) if raw_port.isdigit() else 3000,
            log_level=(env.get("LOG_LEVEL", "").strip() or "INFO").upper(),
        )

    @property
    def object_storage_configured(self) -> bool:
        """All four R2 values are present. Partial configuration counts as absent."""
        return all((
            self.r2_endpoint,
            self.r2_access_key_id,
            self.r2_secret_access_key,
            self.r2_bucket_name,
        ))

    def require_supabase(self) -> tuple[str, str]:
        if not self.supabase_url or not self.supabase_service_role_key:
            raise ConfigurationError(MISSING_SUPABASE_MESSAGE)
        return self.supabase_url, self.supabase_service_role_key
