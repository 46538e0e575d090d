"""Root conftest for all tests.

This file makes shared fixtures available across all test modules.
"""

import itertools
from collections.abc import Callable
from datetime import UTC, date, datetime

import pytest
from loguru import logger

from curator_board.scheduling.types import CuratorGroup, CuratorTask

# Board offset used throughout the tests (UTC+5, no DST)
UTC_OFFSET_MINUTES = 300


@pytest.fixture
def utc_offset() -> int:
    return UTC_OFFSET_MINUTES


@pytest.fixture
def now() -> datetime:
    """Wednesday 2024-01-17 11:00 local time, inside ISO week 2024-W03."""
    return datetime(2024, 1, 17, 6, 0, tzinfo=UTC)


@pytest.fixture
def make_task() -> Callable[..., CuratorTask]:
    """Factory for CuratorTask records with sensible defaults and unique ids."""
    counter = itertools.count(1)

    def _make(**overrides: object) -> CuratorTask:
        data: dict[str, object] = {
            "id": next(counter),
            "template_id": 7,
            "template_title": "ОС ученику",
            "curator_id": 1,
            "scope": "student",
            "status": "pending",
        }
        data.update(overrides)
        return CuratorTask(**data)

    return _make


@pytest.fixture
def group() -> CuratorGroup:
    """Ten-week group starting on Monday 2024-01-01."""
    return CuratorGroup(id=2, name="Group A", start_date=date(2024, 1, 1), total_weeks=10)


@pytest.fixture
def log_records():
    """Capture loguru records emitted during a test."""
    records: list[dict] = []
    handler_id = logger.add(lambda message: records.append(message.record), level="DEBUG")
    yield records
    logger.remove(handler_id)
