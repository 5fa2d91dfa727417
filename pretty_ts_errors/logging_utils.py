from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

ROOT_LOGGER_NAME = "PrettyTsErrors"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def build_rotating_file_handler(
    log_dir: Path,
    filename: str,
    *,
    retention: int = 3,
    max_bytes: int = 512 * 1024,
    formatter: Optional[logging.Formatter] = None,
) -> logging.Handler:
    """Construct a rotating file handler for the plugin log."""
    retention = max(1, retention)
    log_dir.mkdir(parents=True, exist_ok=True)
    handler = RotatingFileHandler(
        log_dir / filename,
        maxBytes=max_bytes,
        backupCount=max(0, retention - 1),
        encoding="utf-8",
    )
    if formatter is not None:
        handler.setFormatter(formatter)
    handler.setLevel(logging.DEBUG)
    return handler


def configure_logging(level: int = logging.INFO, log_dir: Optional[Path] = None) -> logging.Logger:
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel(level)
    formatter = logging.Formatter(LOG_FORMAT)
    if not any(getattr(handler, "_pretty_ts_errors", False) for handler in logger.handlers):
        stream = logging.StreamHandler()
        stream.setFormatter(formatter)
        stream._pretty_ts_errors = True  # type: ignore[attr-defined]
        logger.addHandler(stream)
        if log_dir is not None:
            file_handler = build_rotating_file_handler(Path(log_dir), "pretty-ts-errors.log", formatter=formatter)
            file_handler._pretty_ts_errors = True  # type: ignore[attr-defined]
            logger.addHandler(file_handler)
    return logger
