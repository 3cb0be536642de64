"""Logging setup for StepsTimer.

Modules log through ``logging.getLogger(__name__)``; ``get_logger()``
attaches handlers to the package logger once per process.  Handlers are
named, so calling it again never duplicates output.
"""

from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s:%(filename)s:%(lineno)d] %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def get_logger(
    name: str = "stepstimer",
    level: int | str = logging.INFO,
    *,
    console: bool = True,
    log_dir: Path | None = None,
    max_bytes: int = 1024 * 1024,
    backup_count: int = 3,
) -> logging.Logger:
    """Configure and return the ``name`` logger.

    ``log_dir`` enables a rotating ``<name>.log`` file in that directory.
    """
    logger = logging.getLogger(name)
    logger.setLevel(level)

    fmt = logging.Formatter(LOG_FORMAT, LOG_DATE_FORMAT)

    console_handler_name = f"{name}:console"
    if console and not any(h.get_name() == console_handler_name for h in logger.handlers):
        console_handler = logging.StreamHandler()
        console_handler.setLevel(level)
        console_handler.setFormatter(fmt)
        console_handler.set_name(console_handler_name)
        logger.addHandler(console_handler)

    file_handler_name = f"{name}:file"
    if log_dir is not None and not any(h.get_name() == file_handler_name for h in logger.handlers):
        log_dir.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            filename=log_dir / f"{name}.log",
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding="utf-8",
        )
        file_handler.setLevel(level)
        file_handler.setFormatter(fmt)
        file_handler.set_name(file_handler_name)
        logger.addHandler(file_handler)

    return logger
