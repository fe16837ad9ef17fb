"""
Logging setup for the workflowdoc command line.

Only the CLI calls setup_logger. Library code takes a logger argument or
uses a module-level logger and never installs handlers itself.
"""

import logging
import sys
from typing import Optional, TextIO

LOGGER_NAME = "workflowdoc"
LOG_FORMAT = "[workflowdoc] %(levelname)s: %(message)s"


def level_for(verbose: bool = False, quiet: bool = False) -> int:
    """WARNING by default, INFO when verbose, ERROR when quiet."""
    if quiet:
        return logging.ERROR
    if verbose:
        return logging.INFO
    return logging.WARNING


def setup_logger(
    verbose: bool = False,
    quiet: bool = False,
    stream: Optional[TextIO] = None,
) -> logging.Logger:
    """
    Configure and return the workflowdoc logger.

    Calling this again replaces the previous handler, so repeated CLI
    invocations in one process do not duplicate output.

    Args:
        verbose: Log progress at INFO level
        quiet: Only log errors
        stream: Where to write (defaults to stderr at call time)

    Returns:
        The configured logger
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level_for(verbose, quiet))

    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)
    logger.propagate = False

    return logger
