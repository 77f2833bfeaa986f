"""
Configuration management for AppDiff.

Provides centralized, type-safe configuration with environment variable overrides
and sensible defaults for the store client and the dashboard views.
"""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from typing import Literal

from dotenv import load_dotenv
from pydantic import BaseModel, Field, SecretStr

# Load .env file if it exists (looks in cwd and parent directories)
load_dotenv()


class StoreConfig(BaseModel):
    """Backing store configuration."""

    backend: Literal["rest", "local"] = Field(default="rest", description="Store backend")
    url: str | None = Field(default=None, description="Base URL of the hosted store")
    api_key: SecretStr | None = Field(default=None, description="API key sent with every request")
    base_path: Path = Field(
        default=Path("./data"), description="Directory holding JSON tables for the local backend"
    )
    versions_table: str = Field(default="app_versions", description="Table holding version records")
    waitlist_table: str = Field(default="waitlist", description="Table holding waitlist signups")
    timeout_seconds: float = Field(default=10.0, gt=0, description="Request timeout")


class DisplayConfig(BaseModel):
    """Dashboard view configuration."""

    strings_per_page: int = Field(default=20, ge=1, description="String rows per page")
    preview_versions: int = Field(default=5, ge=1, description="Versions shown per app in the list")
    preview_permissions: int = Field(default=5, ge=1, description="Permissions shown per app in the list")


class Config(BaseModel):
    """Root configuration for AppDiff."""

    project_name: str = Field(default="AppDiff", description="Project identifier")
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO", description="Logging level"
    )
    store: StoreConfig = Field(default_factory=StoreConfig)
    display: DisplayConfig = Field(default_factory=DisplayConfig)

    model_config = {"extra": "ignore"}

    @classmethod
    def from_env(cls) -> Config:
        """Create configuration from environment variables."""
        api_key = os.environ.get("SUPABASE_KEY") or os.environ.get("SUPABASE_ANON_KEY")
        return cls(
            log_level=os.environ.get("APPDIFF_LOG_LEVEL", "INFO"),  # type: ignore
            store=StoreConfig(
                backend=os.environ.get("APPDIFF_STORE_BACKEND", "rest"),  # type: ignore
                url=os.environ.get("SUPABASE_URL"),
                api_key=SecretStr(api_key) if api_key else None,
                base_path=Path(os.environ.get("APPDIFF_STORE_PATH", "./data")),
                timeout_seconds=float(os.environ.get("APPDIFF_TIMEOUT_SECONDS", "10")),
            ),
            display=DisplayConfig(
                strings_per_page=int(os.environ.get("APPDIFF_STRINGS_PER_PAGE", "20")),
            ),
        )


@lru_cache(maxsize=1)
def get_config() -> Config:
    """Get cached configuration instance."""
    return Config.from_env()
