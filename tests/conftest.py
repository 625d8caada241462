"""Shared test fixtures."""

import asyncio
from datetime import UTC, datetime

import pytest

from jobcron.scheduler import Scheduler


class RecordingLogger:
    """CronLogger that keeps every message, grouped by level."""

    def __init__(self) -> None:
        self.logs: dict[str, list[str]] = {"trace": [], "debug": [], "error": []}

    def trace(self, msg) -> None:
        self.logs["trace"].append(msg)

    def debug(self, msg) -> None:
        self.logs["debug"].append(msg)

    def error(self, msg) -> None:
        self.logs["error"].append(msg)


@pytest.fixture
def log() -> RecordingLogger:
    return RecordingLogger()


@pytest.fixture
async def scheduler():
    """A fast-polling Scheduler, closed after the test."""
    s = Scheduler(poll_interval=0.01)
    yield s
    await s.aclose()


@pytest.fixture
async def mid_second() -> None:
    """Wait until the wall clock is 0.2-0.5s into a second.

    Timed tests count whole-second cron firings; starting away from a second
    boundary keeps those counts deterministic.
    """
    fraction = datetime.now(UTC).microsecond / 1_000_000
    if not 0.2 <= fraction < 0.5:
        await asyncio.sleep((1.25 - fraction) % 1)
