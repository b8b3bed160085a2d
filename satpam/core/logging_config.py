"""
Logging configuration for the API process and maintenance scripts.
"""

import logging
import os
from typing import Optional


def setup_logging(level: Optional[int] = None, log_file: Optional[str] = None) -> None:
    """Configure the root logger with the service's standard format.

    ``level`` defaults to ``SATPAM_LOG_LEVEL`` (INFO when unset) and
    ``log_file`` to ``SATPAM_LOG_FILE``; when a file is given, records are
    written to both stderr and that file.
    """
    if level is None:
        level = getattr(logging, os.getenv("SATPAM_LOG_LEVEL", "INFO").upper(), logging.INFO)
    log_file = log_file or os.getenv("SATPAM_LOG_FILE") or None
    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if log_file:
        handlers.append(logging.FileHandler(log_file))
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        handlers=handlers,
    )
