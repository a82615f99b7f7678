"""
app/config.py

Application-level configuration helpers.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache

from db.config import load_env_files


@lru_cache(maxsize=1)
def _load_env_once() -> None:
    """
    Ensure project `.env` files are loaded once before reading app settings.
    """

    load_env_files()


def _get_bool_env(name: str, default: bool) -> bool:
    """
    Read a boolean from environment variables with safe fallback.
    """

    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    return raw_value.strip().lower() in {"1", "true", "yes", "on"}


def _get_int_env(name: str, default: int) -> int:
    """
    Read an integer from environment variables with safe fallback.
    """

    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    try:
        return int(raw_value)
    except ValueError:
        return default


@dataclass(frozen=True)
class PriceImportSettings:
    """
    Runtime settings for price archive uploads.
    """

    max_upload_bytes: int = 50 * 1024 * 1024
    max_validation_errors: int = 500
    log_validation_errors: bool = True


@lru_cache(maxsize=1)
def get_price_import_settings() -> PriceImportSettings:
    """
    Return cached price import settings from environment variables.
    """

    return PriceImportSettings(
        max_upload_bytes=max(1, _get_int_env("PRICE_UPLOAD_MAX_BYTES", 50 * 1024 * 1024)),
        max_validation_errors=max(1, _get_int_env("PRICE_IMPORT_MAX_VALIDATION_ERRORS", 500)),
        log_validation_errors=_get_bool_env("PRICE_IMPORT_LOG_VALIDATION_ERRORS", True),
    )
