"""
PROJECTAPP - Settings
=====================
Settings read from PROJECTAPP_* environment variables.
Command-line flags override them (see projectapp.cli).
"""

import os
from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator

ENV_PREFIX = "PROJECTAPP"

DEFAULT_DATA_FILE = Path(".projectapp") / "projects.json"
DEFAULT_LOG_LEVEL = "WARNING"


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _env_path(name: str, default: Optional[Path]) -> Optional[Path]:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


class Settings(BaseModel):
    model_config = ConfigDict(frozen=True)

    data_file: Path = DEFAULT_DATA_FILE
    log_level: str = DEFAULT_LOG_LEVEL
    log_file: Optional[Path] = None

    @field_validator("log_level")
    @classmethod
    def normalize_level(cls, value: str) -> str:
        level = value.strip().upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"unknown log level {value!r}")
        return level

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            data_file=_env_path(_k("DATA_FILE"), DEFAULT_DATA_FILE),
            log_level=os.getenv(_k("LOG_LEVEL")) or DEFAULT_LOG_LEVEL,
            log_file=_env_path(_k("LOG_FILE"), None),
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings.from_env()
