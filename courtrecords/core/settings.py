"""Runtime settings resolved from secrets, env files, and the environment."""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from courtrecords.core.utils import get_config_value, load_env_file

logger = logging.getLogger(__name__)

DEFAULT_ENV_FILE = Path("secrets/crms.env")
DEFAULT_API_URL = "http://localhost:5000/api"
_ENV_LOADED = False


def _ensure_env() -> None:
    """Populate API settings from secrets/crms.env once per process."""

    global _ENV_LOADED
    if _ENV_LOADED:
        return
    _ENV_LOADED = True

    env_path = Path(os.getenv("CRMS_ENV_FILE", DEFAULT_ENV_FILE))
    loaded = load_env_file(env_path)
    if loaded:
        logger.debug("Loaded %s from %s", ", ".join(sorted(loaded)), env_path)


def _int_setting(key: str, default: int) -> int:
    raw = get_config_value(key, str(default)).strip()
    try:
        return int(raw)
    except ValueError:
        logger.warning("Ignoring invalid %s=%r; using %d", key, raw, default)
        return default


def _float_setting(key: str, default: float) -> float:
    raw = get_config_value(key, str(default)).strip()
    try:
        return float(raw)
    except ValueError:
        logger.warning("Ignoring invalid %s=%r; using %s", key, raw, default)
        return default


@dataclass
class Settings:
    """Connection and display settings for the CLI and dashboard."""

    api_url: str = DEFAULT_API_URL
    api_token: Optional[str] = None
    api_timeout: float = 30.0
    page_size: int = 10
    maturity_days: int = 21
    stages_file: Optional[Path] = None

    @classmethod
    def from_env(cls) -> "Settings":
        _ensure_env()
        stages_file = get_config_value("CRMS_STAGES_FILE").strip()
        page_size = _int_setting("CRMS_PAGE_SIZE", 10)
        if page_size < 1:
            logger.warning("CRMS_PAGE_SIZE must be positive; using 10")
            page_size = 10
        return cls(
            api_url=get_config_value("CRMS_API_URL", DEFAULT_API_URL).rstrip("/"),
            api_token=get_config_value("CRMS_API_TOKEN").strip() or None,
            api_timeout=_float_setting("CRMS_API_TIMEOUT", 30.0),
            page_size=page_size,
            maturity_days=_int_setting("CRMS_MATURITY_DAYS", 21),
            stages_file=Path(stages_file) if stages_file else None,
        )
