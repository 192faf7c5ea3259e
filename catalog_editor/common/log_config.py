"""
Logging Configuration

Configures logging for the application.
Output goes to stderr to keep stdout clean for user-facing reports.
"""

import logging
import sys

ROOT_LOGGER = "catalog_editor"


def setup_logging(verbose: bool = False, quiet: bool = False) -> None:
    """
    Configure logging for the application.

    Args:
        verbose: If True, set level to DEBUG
        quiet: If True, set level to WARNING
    """
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.WARNING
    else:
        level = logging.INFO

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)-8s %(name)s: %(message)s"))

    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(level)

    # Streamlit reruns the script on every interaction; keep a single handler
    logger.handlers.clear()
    logger.addHandler(handler)
