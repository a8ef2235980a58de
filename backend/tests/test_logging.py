from __future__ import annotations

import logging

from backpack.core.logging import RecentLogBuffer, setup_logging


def test_buffer_keeps_only_latest_records() -> None:
    buffer = RecentLogBuffer(capacity=3)
    buffer.setFormatter(logging.Formatter("%(message)s"))
    logger = logging.getLogger("backpack.tests.buffer")
    logger.addHandler(buffer)
    logger.setLevel(logging.INFO)
    try:
        for i in range(5):
            logger.info(f"line {i}")
    finally:
        logger.removeHandler(buffer)

    assert list(buffer.records) == ["line 2", "line 3", "line 4"]
    assert buffer.tail(2) == ["line 3", "line 4"]
    assert buffer.tail(0) == []


def test_setup_logging_installs_buffer_on_root() -> None:
    buffer = setup_logging(log_file="", buffer_size=10)

    logging.getLogger("backpack.tests.setup").info("hello from test")

    assert buffer in logging.getLogger().handlers
    assert buffer.tail(1)[0].endswith("hello from test")
