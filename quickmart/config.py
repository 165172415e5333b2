from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field


def _env_path(name: str, default: str) -> Path:
    return Path(os.getenv(name, default))


def _env_optional_path(name: str) -> Path | None:
    value = os.getenv(name)
    return Path(value) if value else None


class StoreConfig(BaseModel):
    """File locations used by one register.

    Every field defaults from a ``QUICKMART_*`` environment variable.
    """

    model_config = ConfigDict(extra="forbid")

    inventory_file: Path = Field(
        default_factory=lambda: _env_path("QUICKMART_INVENTORY_FILE", "inventory.txt"),
        description="Flat-text product catalog",
    )
    counter_file: Path = Field(
        default_factory=lambda: _env_path("QUICKMART_COUNTER_FILE", "transaction_counter.txt"),
        description="Next transaction number",
    )
    receipts_dir: Path = Field(
        default_factory=lambda: _env_path("QUICKMART_RECEIPTS_DIR", "."),
        description="Directory receiving printed receipts",
    )
    journal_dir: Path | None = Field(
        default_factory=lambda: _env_optional_path("QUICKMART_JOURNAL_DIR"),
        description="Directory receiving YAML transaction entries; disabled when unset",
    )

    @classmethod
    def from_yaml(cls, path: str | Path) -> StoreConfig:
        """Load settings from a YAML mapping, falling back to the environment.

        Relative paths in the file are resolved against the file's directory.

        Raises:
            ValueError: When the file is not a mapping or has unknown keys.
        """
        config_path = Path(path)
        with config_path.open("r", encoding="utf-8") as f:
            raw: Any = yaml.safe_load(f)
        if raw is None:
            raw = {}
        if not isinstance(raw, dict):
            raise ValueError(f"{config_path} must contain a mapping")

        base_dir = config_path.parent
        resolved: dict[str, Any] = {}
        for key, value in raw.items():
            if isinstance(value, str) and key in cls.model_fields:
                candidate = Path(value)
                value = candidate if candidate.is_absolute() else base_dir / candidate
            resolved[key] = value
        return cls(**resolved)
