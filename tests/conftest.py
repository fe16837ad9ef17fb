"""Shared pytest fixtures."""

import logging

import pytest

from workflowdoc.log import LOGGER_NAME


@pytest.fixture(autouse=True)
def reset_workflowdoc_logger():
    """Undo handlers installed by setup_logger during a test."""
    yield
    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)
    logger.propagate = True
