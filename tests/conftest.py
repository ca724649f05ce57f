"""Shared fixtures for imgtag tests."""

import logging

import pytest

from imgtag import logging as imgtag_logging


@pytest.fixture(autouse=True)
def reset_logger():
    """Reset the logger state between tests."""
    logger = logging.getLogger("imgtag")
    imgtag_logging._logger = None
    logger.handlers.clear()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)
    yield
    imgtag_logging._logger = None
    logger.handlers.clear()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)
