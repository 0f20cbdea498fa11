"""Application configuration helpers."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path


def _default_data_root() -> Path:
    """Return the platform specific directory used for persistent data."""

    if os.name == "nt":
        base = Path(os.environ.get("LOCALAPPDATA", Path.home()))
        return base / "RetailInventory"
    return Path.home() / ".retail_inventory"


def _default_database_path() -> Path:
    """Resolve the database path taking overrides into account."""

    override = os.environ.get("RETAIL_INVENTORY_DB")
    if override:
        return Path(override).expanduser()
    return _default_data_root() / "inventory.sqlite3"


def _default_cors_origins() -> list[str]:
    raw = os.environ.get("RETAIL_INVENTORY_CORS_ORIGINS", "*")
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


def _env_flag(name: str, default: str) -> bool:
    return os.environ.get(name, default).lower() == "true"


@dataclass(slots=True)
class Settings:
    """Runtime configuration loaded from environment variables."""

    app_name: str = field(default_factory=lambda: os.environ.get("RETAIL_INVENTORY_APP_NAME", "Retail Inventory"))
    host: str = field(default_factory=lambda: os.environ.get("RETAIL_INVENTORY_HOST", "127.0.0.1"))
    port: int = field(default_factory=lambda: int(os.environ.get("RETAIL_INVENTORY_PORT", "8000")))
    reload: bool = field(default_factory=lambda: _env_flag("RETAIL_INVENTORY_RELOAD", "false"))
    log_level: str = field(default_factory=lambda: os.environ.get("RETAIL_INVENTORY_LOG_LEVEL", "info"))
    database_path: Path = field(default_factory=_default_database_path)
    cors_origins: list[str] = field(default_factory=_default_cors_origins)
    include_purchase_orders: bool = field(
        default_factory=lambda: _env_flag("RETAIL_INVENTORY_INCLUDE_PURCHASE_ORDERS", "true")
    )

    @property
    def database_url(self) -> str:
        return f"sqlite:///{self.database_path}"

    def ensure_storage(self) -> None:
        """Ensure that the database directory exists."""

        self.database_path.parent.mkdir(parents=True, exist_ok=True)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached application settings."""

    settings = Settings()
    settings.ensure_storage()
    return settings
