"""Application settings loaded from environment variables.

Uses pydantic-settings for validation and type coercion. All keys use the
``COMPLAINTBOX_`` prefix and may also be supplied through a ``.env`` file.
"""

from __future__ import annotations

import logging
from enum import StrEnum
from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from src.models.enums import Department


class StorageBackend(StrEnum):
    MEMORY = "memory"
    FILE = "file"
    REDIS = "redis"


class Settings(BaseSettings):
    """Central configuration for the complaint box.

    Environment variables are loaded from a ``.env`` file when present.
    """

    model_config = SettingsConfigDict(
        env_prefix="COMPLAINTBOX_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    # ── App ────────────────────────────────────────────────────────────
    env: Literal["development", "production"] = "development"

    # ── Storage ────────────────────────────────────────────────────────
    storage_backend: StorageBackend = StorageBackend.FILE
    data_dir: Path = Path(".complaintbox")
    redis_url: str = "redis://localhost:6379/0"
    storage_namespace: str = "complaintbox:"

    # ── Logging ────────────────────────────────────────────────────────
    log_level: str = "INFO"
    log_format: Literal["json", "console"] = "json"

    # ── Complaints ─────────────────────────────────────────────────────
    complaint_id_prefix: str = Field(default="CMP", min_length=1, max_length=8)

    # ── Accounts ───────────────────────────────────────────────────────
    admin_access_code: str = "SECE_ADMIN_2025"
    super_admin_email: str = "superadmin@college.edu"
    super_admin_name: str = "Super Administrator"
    super_admin_department: Department = Department.INFRASTRUCTURE

    @field_validator("log_level")
    @classmethod
    def _known_log_level(cls, value: str) -> str:
        level = value.upper()
        if level not in logging.getLevelNamesMapping():
            raise ValueError(f"unknown log level: {value!r}")
        return level


# Module-level singleton; import ``settings`` everywhere.
settings = Settings()
