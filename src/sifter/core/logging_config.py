"""Centralised logging configuration utilities."""

from __future__ import annotations

import logging
import os

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DEFAULT_LEVEL = logging.INFO


def _level_from_env() -> int:
    raw = os.getenv("SIFTER_LOG_LEVEL", "").strip().upper()
    level = logging.getLevelName(raw) if raw else DEFAULT_LEVEL
    return level if isinstance(level, int) else DEFAULT_LEVEL


def configure_logging(level: int | None = None) -> None:
    """Configure root logging if it has not been configured yet."""

    if logging.getLogger().handlers:
        return

    logging.basicConfig(level=level if level is not None else _level_from_env(), format=LOG_FORMAT)


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a module specific logger with shared configuration."""

    configure_logging()
    return logging.getLogger(name)


def apply_log_level(level: str | int, name: str = "sifter") -> None:
    """Set the package logger level from configuration; unknown names are ignored."""

    resolved = logging.getLevelName(str(level).strip().upper()) if isinstance(level, str) else level
    if isinstance(resolved, int):
        logging.getLogger(name).setLevel(resolved)
