"""Logging setup for the git-switch command."""

import logging
import sys
from pathlib import Path

from .context import LOG_FILE

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

_log_to_file = False


def configure_logging() -> None:
    """Send warnings to stderr and enable the store's log file.

    The log file is opened by ``attach_log_file`` once the store root is
    known, so nothing is created here.
    """
    global _log_to_file

    stderr_handler = logging.StreamHandler(sys.stderr)
    stderr_handler.setLevel(logging.WARNING)
    logging.basicConfig(
        level=logging.INFO,
        format=LOG_FORMAT,
        handlers=[stderr_handler],
    )
    _log_to_file = True


def attach_log_file(root: Path) -> None:
    """Log everything to ``<root>/git-switch.log`` if file logging is enabled."""
    if not _log_to_file:
        return

    log_path = (root / LOG_FILE).absolute()
    root_logger = logging.getLogger()
    for handler in root_logger.handlers:
        if isinstance(handler, logging.FileHandler) and handler.baseFilename == str(log_path):
            return

    root.mkdir(parents=True, exist_ok=True)
    file_handler = logging.FileHandler(log_path)
    file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root_logger.addHandler(file_handler)
