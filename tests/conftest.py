"""Root test configuration: logging isolation between tests"""

import logging

import pytest

from postpress.log import LOGGER_NAME


@pytest.fixture(autouse=True)
def reset_package_logger():
    """Drop handlers installed by setup_logging so they never outlive a test's streams."""
    yield
    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        if getattr(handler, "_postpress", False):
            logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)
