"""
Logging setup for report-artifact runs.

Modules log through ``logging.getLogger(__name__)``; this configures the
``src`` package logger once with a console handler and, optionally, a
daily log file.
"""

from __future__ import annotations

import logging
import sys
from datetime import datetime
from pathlib import Path

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
PACKAGE_LOGGER = "src"

_configured = False


def configure_logging(level: str = "INFO", log_dir: Path | str | None = None) -> logging.Logger:
    """
    Configure the package logger.  Repeated calls are no-ops.

    Args:
        level: Console log level name.
        log_dir: When given, DEBUG and above also go to
            ``report_artifacts_YYYYMMDD.log`` in this directory.

    Returns:
        The configured package logger.
    """
    global _configured
    logger = logging.getLogger(PACKAGE_LOGGER)
    if _configured:
        return logger

    logger.setLevel(logging.DEBUG)
    logger.handlers.clear()
    formatter = logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(getattr(logging, level.upper()))
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_dir is not None:
        log_dir = Path(log_dir)
        log_dir.mkdir(parents=True, exist_ok=True)
        log_file = log_dir / f"report_artifacts_{datetime.now():%Y%m%d}.log"
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    _configured = True
    return logger
