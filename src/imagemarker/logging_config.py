"""
Logging setup for ImageMarker.

Installs a file handler under the data root and a console handler on the
root logger. Safe to call more than once.
"""
from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Optional

LOG_FILE_NAME = "imagemarker.log"

_log_file_path: Optional[Path] = None


def setup_logging(log_dir: Path, level: str = "INFO") -> Path:
    """Configure root logging once and return the log file path."""
    global _log_file_path
    if _log_file_path is not None:
        return _log_file_path

    log_dir.mkdir(parents=True, exist_ok=True)
    log_path = log_dir / LOG_FILE_NAME

    logger = logging.getLogger()
    logger.setLevel(logging.DEBUG)

    file_handler = logging.FileHandler(log_path, encoding="utf-8")
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(
        logging.Formatter(
            "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )
    logger.addHandler(file_handler)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(getattr(logging, str(level).upper(), logging.INFO))
    console_handler.setFormatter(logging.Formatter("[%(levelname)s] %(message)s"))
    logger.addHandler(console_handler)

    _log_file_path = log_path
    logger.info("Logging initialized at %s", log_path)
    return log_path
