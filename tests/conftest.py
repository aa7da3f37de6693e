import logging

import pytest


@pytest.fixture(autouse=True)
def _reset_cidrplan_logger():
    # init_logging rewires the shared logger; undo it between tests
    logger = logging.getLogger("cidrplan")
    handlers, propagate, level = list(logger.handlers), logger.propagate, logger.level
    yield
    for h in list(logger.handlers):
        if h not in handlers:
            logger.removeHandler(h)
            h.close()
    logger.propagate = propagate
    logger.setLevel(level)
