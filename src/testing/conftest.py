import logging

import pytest


@pytest.fixture(autouse=True)
def _restore_sdk_logger():
    """Restores the 'influxkit' logger after tests that reconfigure it."""
    logger = logging.getLogger("influxkit")
    handlers = list(logger.handlers)
    level, propagate = logger.level, logger.propagate
    yield
    logger.handlers[:] = handlers
    logger.setLevel(level)
    logger.propagate = propagate
