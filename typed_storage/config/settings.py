"""Storage settings and configuration schema."""

import os
from typing import List, Optional

from pydantic import BaseModel, field_validator

ENV_PREFIX = "TYPED_STORAGE_"

JOURNAL_MODES = {"DELETE", "TRUNCATE", "PERSIST", "MEMORY", "WAL", "OFF"}
SYNCHRONOUS_MODES = {"OFF", "NORMAL", "FULL", "EXTRA"}


class StorageSettings(BaseModel):
    """Configuration for the SQLite-backed durable map engine."""
    db_path: str = "data/storage/storage.db"
    timeout: float = 10.0
    journal_mode: str = "WAL"
    synchronous: str = "NORMAL"
    allowed_modules: Optional[List[str]] = None
    log_level: str = "WARNING"

    @field_validator("journal_mode")
    @classmethod
    def _check_journal_mode(cls, value: str) -> str:
        value = value.upper()
        if value not in JOURNAL_MODES:
            raise ValueError(f"journal_mode must be one of {sorted(JOURNAL_MODES)}")
        return value

    @field_validator("synchronous")
    @classmethod
    def _check_synchronous(cls, value: str) -> str:
        value = value.upper()
        if value not in SYNCHRONOUS_MODES:
            raise ValueError(f"synchronous must be one of {sorted(SYNCHRONOUS_MODES)}")
        return value

    @field_validator("log_level")
    @classmethod
    def _check_log_level(cls, value: str) -> str:
        return value.upper()

    @classmethod
    def from_env(cls, environ: Optional[dict] = None) -> "StorageSettings":
        """
        Build settings from TYPED_STORAGE_* environment variables.

        TYPED_STORAGE_ALLOWED_MODULES is a comma-separated list of
        module prefixes. Unset variables keep their defaults.
        """
        environ = os.environ if environ is None else environ
        data = {}
        for name in cls.model_fields:
            raw = environ.get(ENV_PREFIX + name.upper())
            if raw is None:
                continue
            if name == "allowed_modules":
                data[name] = [m.strip() for m in raw.split(",") if m.strip()]
            else:
                data[name] = raw
        return cls(**data)


class Settings(BaseModel):
    """Main application settings."""
    storage: StorageSettings = StorageSettings()
