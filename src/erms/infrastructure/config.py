"""Runtime settings, read from ``ERMS_*`` environment variables or ``.env``."""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from erms.domain.service.availability_calculator import OverlapPolicy

# When installed in editable mode the project root is the repo root.
_PROJECT_ROOT = Path(__file__).resolve().parents[3]


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="ERMS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    data_dir: Path = _PROJECT_ROOT / "data"
    log_level: str = "WARNING"

    # "sum" adds every overlapping booking; "peak" sweeps for the true maximum.
    overlap_policy: OverlapPolicy = "sum"

    lock_timeout_seconds: float = Field(default=10.0, gt=0)
    default_currency: Literal["LKR", "USD", "EUR"] = "LKR"
