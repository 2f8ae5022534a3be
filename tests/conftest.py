import logging

import pytest

from dfa_animator.config import EXAMPLE_PAYLOAD, build_session_from_payload
from dfa_animator.logging_config import PACKAGE_LOGGER


@pytest.fixture
def example():
    return build_session_from_payload(EXAMPLE_PAYLOAD).automaton


@pytest.fixture(autouse=True)
def _reset_package_logger():
    yield
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)
