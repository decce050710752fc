from __future__ import annotations

import logging

from loguru import logger

from frontdesk.core.logging import InterceptHandler


def test_stdlib_records_reach_loguru():
    captured = []
    sink_id = logger.add(lambda message: captured.append(message.record), level="DEBUG")
    stdlib_logger = logging.getLogger("frontdesk.intercept-check")
    stdlib_logger.addHandler(InterceptHandler())
    stdlib_logger.propagate = False
    stdlib_logger.setLevel(logging.INFO)
    try:
        stdlib_logger.warning("bed %s freed", "B-1")
        stdlib_logger.debug("below the logger level")
    finally:
        logger.remove(sink_id)
        stdlib_logger.handlers.clear()

    assert [(r["level"].name, r["message"]) for r in captured] == [("WARNING", "bed B-1 freed")]
