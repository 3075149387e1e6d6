"""
Logging Configuration

Log records from every feed_reconciler module go to stderr. Stdout is left
to the CLI's run summaries (row counts, output paths, truncation warnings)
so they can be piped or captured separately.
"""

import logging
import sys

PACKAGE_LOGGER = "feed_reconciler"
LOG_FORMAT = "%(levelname)-8s %(name)s: %(message)s"


def _resolve_level(verbose: bool, quiet: bool) -> int:
    if verbose:
        return logging.DEBUG
    if quiet:
        return logging.WARNING
    return logging.INFO


def setup_logging(verbose: bool = False, quiet: bool = False) -> None:
    """
    Attach a single stderr handler to the package logger.

    Args:
        verbose: DEBUG level (per-item skips, image uploads, requests)
        quiet: WARNING level (failed requests, truncated feeds only)
    """
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))

    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(_resolve_level(verbose, quiet))

    # Repeated calls replace the handler instead of stacking them
    logger.handlers.clear()
    logger.addHandler(handler)
