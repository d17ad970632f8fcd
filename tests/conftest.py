"""Shared pytest fixtures for timexpr tests."""

import logging
from datetime import UTC, datetime

import pytest

from timexpr.core.ir.values import Instant


@pytest.fixture(autouse=True)
def _restore_timexpr_log_level():
    """CLI runs set the package logger level; put it back after each test."""
    logger = logging.getLogger("timexpr")
    level = logger.level
    yield
    logger.setLevel(level)


@pytest.fixture
def fixed_now() -> Instant:
    """2024-08-25T17:27:47Z, the instant used throughout the examples."""
    return Instant(seconds=1724606867)


@pytest.fixture
def fixed_now_datetime() -> datetime:
    return datetime(2024, 8, 25, 17, 27, 47, tzinfo=UTC)
