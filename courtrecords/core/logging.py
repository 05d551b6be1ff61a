"""Logging setup shared by the review CLI and the Streamlit console."""
from __future__ import annotations

import logging
import os

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

# urllib3 logs every API connection at DEBUG.
_HTTP_LOGGERS = ("urllib3",)


def configure_logging(level: str | None = None) -> None:
    """Configure root logging once per CLI run or dashboard session.

    An explicit ``level`` (the CLI's ``--log-level``) wins over ``LOG_LEVEL``;
    both default to ``INFO``. Connection chatter from the HTTP stack is kept
    at WARNING unless DEBUG was asked for.
    """

    resolved_level = (level or os.getenv("LOG_LEVEL", "INFO")).upper()
    logging.basicConfig(level=resolved_level, format=LOG_FORMAT)
    if resolved_level != "DEBUG":
        for name in _HTTP_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)
