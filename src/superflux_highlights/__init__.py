"""Superflux highlights - persistent text highlighting for the Superflux reader.

Relocates stored highlights inside re-fetched article HTML and wraps them
in marker elements, and turns reader selections into new highlight drafts.
"""

from __future__ import annotations

import logging
import os
from logging.handlers import RotatingFileHandler
from pathlib import Path

__version__ = "0.1.0"


def setup_logging(log_dir: Path | None = None) -> Path:
    """Configure logging to both console and rotating file.

    The library never installs handlers on import; host applications call
    this once at startup.

    Args:
        log_dir: Directory for the log file. Defaults to
            ``Settings.app.log_dir``.

    Returns:
        Path of the log file.
    """
    from superflux_highlights.config import get_settings

    settings = get_settings()
    log_dir = log_dir if log_dir is not None else settings.app.log_dir
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / f"superflux_highlights.{os.getpid()}.log"

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)

    # File handler - detailed logging with rotation (10MB, keep 5 backups)
    file_handler = RotatingFileHandler(
        log_file,
        maxBytes=10 * 1024 * 1024,
        backupCount=5,
        encoding="utf-8",
    )
    file_handler.setLevel(logging.DEBUG)
    file_formatter = logging.Formatter(
        "%(asctime)s | %(levelname)-8s | %(name)s:%(lineno)d | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    file_handler.setFormatter(file_formatter)

    # Console handler - less verbose
    console_handler = logging.StreamHandler()
    console_handler.setLevel(settings.app.log_level.upper())
    console_formatter = logging.Formatter("%(levelname)s: %(message)s")
    console_handler.setFormatter(console_formatter)

    root_logger.addHandler(file_handler)
    root_logger.addHandler(console_handler)

    logging.info("Logging configured. Log file: %s", log_file.absolute())
    return log_file
