"""Main entry point for direct module execution."""

import logging
import sys

from .cli import cli
from .logs import configure_logging
from .ui_common import print_error

logger = logging.getLogger(__name__)


def main() -> None:
    """Main entry point."""
    try:
        configure_logging()
        logger.debug("Starting git-switch")
        cli()
    except Exception as e:
        logger.error("Fatal error", exc_info=True)
        print_error(f"Unexpected error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
