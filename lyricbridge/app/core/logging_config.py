from __future__ import annotations

from logging.config import dictConfig
from typing import Any, Dict
import logging
import os


APP_LOGGERS = ("lyricbridge", "lyricbridge.app")


def _resolve_level(level: int | str | None) -> int:
    if level is None:
        level = os.environ.get("APP_LOG_LEVEL", "INFO")
    if isinstance(level, str):
        resolved = getattr(logging, level.upper(), None)
        return resolved if isinstance(resolved, int) else logging.INFO
    return level


def get_uvicorn_log_config(level: int | str = logging.INFO) -> Dict[str, Any]:
    """Return a logging dictConfig for uvicorn and the lyric bridge loggers.

    - Time format: HH:MM:SS
    - Lookup progress (strategy attempts, chosen candidate) goes through lyricbridge.* loggers.
    """
    level = _resolve_level(level)

    time_format = "%H:%M:%S"
    default_fmt = "%(asctime)s %(levelprefix)s [%(name)s] %(message)s"
    access_fmt = "%(asctime)s %(levelprefix)s %(client_addr)s - \"%(request_line)s\" %(status_code)s"
    use_colors = os.environ.get("APP_LOG_COLORS", "1") == "1"

    app_loggers = {
        name: {"handlers": ["default"], "level": level, "propagate": False}
        for name in APP_LOGGERS
    }
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "default": {
                "()": "uvicorn.logging.DefaultFormatter",
                "fmt": default_fmt,
                "datefmt": time_format,
                "use_colors": use_colors,
            },
            "access": {
                "()": "uvicorn.logging.AccessFormatter",
                "fmt": access_fmt,
                "datefmt": time_format,
                "use_colors": use_colors,
            },
        },
        "handlers": {
            "default": {
                "class": "logging.StreamHandler",
                "formatter": "default",
                "level": level,
                "stream": "ext://sys.stdout",
            },
            "access": {
                "class": "logging.StreamHandler",
                "formatter": "access",
                "level": level,
                "stream": "ext://sys.stdout",
            },
        },
        "loggers": {
            "uvicorn": {"handlers": ["default"], "level": level, "propagate": False},
            "uvicorn.error": {"handlers": ["default"], "level": level, "propagate": False},
            "uvicorn.access": {"handlers": ["access"], "level": level, "propagate": False},
            **app_loggers,
        },
        "root": {"handlers": ["default"], "level": level},
    }


def configure_logging(level: int | str | None = None) -> int:
    """Apply the dictConfig above; fall back to a plain timestamped format.

    Returns the numeric level that was applied.
    """
    resolved = _resolve_level(level)
    try:
        dictConfig(get_uvicorn_log_config(resolved))
    except (ValueError, TypeError, AttributeError, ImportError):
        logging.basicConfig(
            level=resolved,
            format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
            datefmt="%H:%M:%S",
        )
        for name in APP_LOGGERS:
            logging.getLogger(name).setLevel(resolved)
    return resolved
