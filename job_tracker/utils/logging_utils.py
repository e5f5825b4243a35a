"""
Logging setup for the command line interface.

Library code only creates loggers (one per class); handlers are attached
here, once, by the entry point.
"""

from logging.handlers import TimedRotatingFileHandler
from pathlib import Path
from typing import Optional
import logging
import sys


LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(
    verbose: bool = False,
    log_file: Optional[str] = None,
    retention_days: int = 14,
) -> logging.Logger:
    """
    Configure the root logger.

    Args:
        verbose: Log at DEBUG instead of INFO
        log_file: Optional file that is rotated daily
        retention_days: Number of rotated log files to keep

    Returns:
        The configured root logger
    """
    root = logging.getLogger()
    root.setLevel(logging.DEBUG if verbose else logging.INFO)

    for handler in list(root.handlers):
        root.removeHandler(handler)

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    console = logging.StreamHandler(sys.stderr)
    console.setFormatter(formatter)
    root.addHandler(console)

    if log_file:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = TimedRotatingFileHandler(
            path, when="midnight", backupCount=retention_days, encoding="utf-8"
        )
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)

    # Third-party HTTP clients are chatty at DEBUG
    for noisy in ("urllib3", "httpx", "httpcore", "anthropic", "pdfminer"):
        logging.getLogger(noisy).setLevel(logging.WARNING)

    return root
