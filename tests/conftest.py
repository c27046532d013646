from __future__ import annotations

from typing import Any

import pytest
from loguru import logger


@pytest.fixture()
def log_records():
    """Loguru records emitted during the test."""
    records: list[dict[str, Any]] = []
    handler_id = logger.add(lambda message: records.append(message.record), level="DEBUG")
    yield records
    logger.remove(handler_id)
