# config.py

"""Application configuration utilities.

Values are primarily loaded from ``config.json`` and may be overridden by
environment variables. The :func:`get_settings` helper merges the two sources
and caches the result.
"""

from __future__ import annotations

import json
import os
from decimal import Decimal
from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from gstpos.app.tax.gstin import normalize_state_code, state_code, validate_gstin


class Settings(BaseSettings):
    """Application settings merged from JSON and environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    hotel_name: str = "Hotel Management System"
    hotel_address: str = ""
    gst_number: str | None = None
    home_state_code: str | None = None
    service_charge_rate: Decimal = Field(default=Decimal("0"), ge=0)
    default_tax_rate: Decimal = Field(default=Decimal("18"), ge=0)
    bill_prefix: str = "BILL"
    log_level: str = "INFO"
    error_dsn: str | None = None
    env: str = "dev"

    @field_validator("gst_number")
    @classmethod
    def _check_gstin(cls, value: str | None) -> str | None:
        if value and not validate_gstin(value):
            raise ValueError(f"invalid GST number: {value}")
        return value.strip() if value else None

    @field_validator("home_state_code")
    @classmethod
    def _check_state(cls, value: str | None) -> str | None:
        return normalize_state_code(value) if value else None

    @property
    def supplier_state_code(self) -> str | None:
        """Configured home state, falling back to the GSTIN's state code."""

        if self.home_state_code:
            return self.home_state_code
        if self.gst_number:
            return state_code(self.gst_number)
        return None


# Cached singleton to avoid repeated file reads
@lru_cache
def get_settings() -> Settings:
    """Return merged settings with environment variable precedence.

    The configuration is read from ``config.json`` located alongside this file
    and fed into :class:`Settings`. Environment variables override any values
    from the JSON file. The result is cached to prevent repeated disk reads.
    """

    config_path = Path(__file__).with_name("config.json")
    data = json.loads(config_path.read_text()) if config_path.exists() else {}
    env_override = {
        k.lower(): v
        for k, v in os.environ.items()
        if k.lower() in Settings.model_fields
    }
    merged = {**data, **env_override}
    # Environment variables override values from the JSON file.
    return Settings(**merged)
