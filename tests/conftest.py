"""Shared fixtures."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING

import pytest

from screen_stack.history.log import HistoryLog

if TYPE_CHECKING:
    from collections.abc import AsyncIterator
    from pathlib import Path


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2026, 2, 17, 12, 34, 56, 789000, tzinfo=UTC)


@pytest.fixture
async def history_log(tmp_path: Path, fixed_now: datetime) -> AsyncIterator[HistoryLog]:
    """History log rooted in a temporary workspace with a frozen clock."""
    log = HistoryLog(tmp_path, retention_days=14, clock=lambda: fixed_now)
    yield log
    await log.sweeper.wait()
