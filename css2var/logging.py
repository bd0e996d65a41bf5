"""Logging utilities for css2var commands."""

from __future__ import annotations

import logging
from pathlib import Path

_LOGGER_NAME = "css2var"


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a module-scoped logger under the css2var hierarchy."""
    full_name = f"{_LOGGER_NAME}.{name}" if name else _LOGGER_NAME
    return logging.getLogger(full_name)


def configure_logging(
    *, verbose: bool = False, log_file: Path | None = None
) -> logging.Logger:
    """Configure the css2var logger with console output and optional file sink."""
    level = logging.DEBUG if verbose else logging.INFO
    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(level)
    logger.propagate = False

    # Reset handlers to avoid duplicate output when the CLI is invoked multiple times.
    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    stream_handler = logging.StreamHandler()
    stream_handler.setLevel(level)
    stream_handler.setFormatter(logging.Formatter("[css2var] %(levelname)s %(message)s"))
    logger.addHandler(stream_handler)

    if log_file is not None:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
        )
        logger.addHandler(file_handler)

    return logger


def log_progress(logger: logging.Logger, index: int, total: int, label: str) -> None:
    """Log ``[NN%] label`` for the ``index``-th (1-based) of ``total`` processed items."""
    percent = round(index / total * 100) if total else 100
    logger.info("[%d%%] %s", percent, label)


__all__ = ["configure_logging", "get_logger", "log_progress"]
