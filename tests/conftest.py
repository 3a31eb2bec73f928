"""
Shared pytest fixtures for dts tests.

Values in tests are built with ``loads`` so numbers are Number instances,
exactly as a decoded document would hold them.
"""

import logging

import pytest

from dts.transform import definitions
from dts.value import loads


@pytest.fixture
def registry():
    """The builtin transformation definitions."""
    return definitions()


@pytest.fixture
def doc():
    """Decode JSON text into a Value."""
    return loads


@pytest.fixture
def clean_loggers():
    """
    Detach handlers from the dts loggers before and after a test.

    configure_logging and get_debug_trace_logger only attach handlers once,
    so tests that inspect them need a fresh logger state.
    """
    names = ["dts", "dts.debug_trace", "dts.tests.trace"]

    def reset():
        for name in names:
            logger = logging.getLogger(name)
            for handler in list(logger.handlers):
                logger.removeHandler(handler)
                handler.close()
            logger.setLevel(logging.NOTSET)
            logger.propagate = True

    reset()
    yield
    reset()
