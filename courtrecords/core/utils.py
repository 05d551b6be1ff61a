"""Config lookups shared by the CLI and the dashboard."""
import logging
import os
from pathlib import Path
from typing import List

logger = logging.getLogger(__name__)


def get_config_value(key: str, default: str = "") -> str:
    """Read a ``CRMS_*`` setting from Streamlit secrets, then the environment.

    A dashboard deployment keeps the API URL and staff token in
    ``.streamlit/secrets.toml``; the CLI only sees the process environment.
    """
    try:
        import streamlit as st
        if hasattr(st, "secrets") and key in st.secrets:
            return str(st.secrets[key])
    except (ImportError, FileNotFoundError, KeyError):
        pass

    return os.getenv(key, default)


def load_env_file(path: Path) -> List[str]:
    """Copy ``KEY=value`` lines from ``path`` into ``os.environ``.

    Variables already set in the environment win over the file, and an
    ``export`` prefix is accepted so shell-sourced files work unchanged.
    Returns the keys that were loaded.
    """
    loaded: List[str] = []
    if not path.exists():
        return loaded

    try:
        with path.open(encoding="utf-8") as handle:
            for raw_line in handle:
                line = raw_line.strip()
                if line.startswith("export "):
                    line = line[len("export "):].lstrip()
                if not line or line.startswith("#") or "=" not in line:
                    continue
                key, value = line.split("=", 1)
                key = key.strip()
                if not key or key in os.environ:
                    continue
                os.environ[key] = value.strip().strip('"').strip("'")
                loaded.append(key)
    except OSError as exc:
        logger.warning("Could not read env file %s: %s", path, exc)
    return loaded
