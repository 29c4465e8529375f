"""Retention sweep for day-bucketed history directories."""

from __future__ import annotations

import asyncio
import logging
import re
import shutil
from datetime import UTC, date, datetime, timedelta
from typing import TYPE_CHECKING

import aiofiles.os

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path

logger = logging.getLogger(__name__)

DEFAULT_RETENTION_DAYS = 21
MIN_RETENTION_DAYS = 1
MAX_RETENTION_DAYS = 365
SWEEP_INTERVAL = timedelta(hours=1)

_DAY_KEY_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def utcnow() -> datetime:
    return datetime.now(UTC)


def clamp_retention_days(value: object) -> int:
    try:
        days = int(value)  # type: ignore[call-overload]
    except (TypeError, ValueError):
        days = DEFAULT_RETENTION_DAYS
    return max(MIN_RETENTION_DAYS, min(MAX_RETENTION_DAYS, days))


def as_utc(moment: datetime) -> datetime:
    """Return ``moment`` in UTC, treating naive datetimes as UTC."""
    if moment.tzinfo is None:
        return moment.replace(tzinfo=UTC)
    return moment.astimezone(UTC)


def day_key(moment: datetime) -> str:
    """Return the UTC ``YYYY-MM-DD`` bucket for ``moment``."""
    return as_utc(moment).date().isoformat()


def parse_day_key(name: str) -> date | None:
    """Return the date of a bucket name, or None for anything malformed."""
    if not _DAY_KEY_RE.match(name):
        return None
    try:
        return date.fromisoformat(name)
    except ValueError:
        return None


async def prune_expired_days(history_root: Path, retention_days: int, now: datetime) -> int:
    """Delete day buckets strictly older than the retention window.

    Returns the number of removed buckets. A missing history root is not an
    error.
    """
    oldest_kept = day_key(now - timedelta(days=max(0, retention_days - 1)))
    try:
        names = await aiofiles.os.listdir(history_root)
    except FileNotFoundError:
        return 0

    removed = 0
    for name in sorted(names):
        if parse_day_key(name) is None or name >= oldest_kept:
            continue
        bucket = history_root / name
        if not await aiofiles.os.path.isdir(bucket):
            continue
        await asyncio.to_thread(shutil.rmtree, bucket, ignore_errors=True)
        removed += 1
    if removed:
        logger.info(
            "History retention sweep — removed=%d oldest_kept=%s", removed, oldest_kept
        )
    return removed


class RetentionSweeper:
    """Throttled, non-overlapping background retention sweeps.

    Holds the in-flight flag and last-sweep timestamp for one history root so
    several workspaces can sweep independently.
    """

    def __init__(
        self,
        retention_days: int = DEFAULT_RETENTION_DAYS,
        *,
        interval: timedelta = SWEEP_INTERVAL,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self.retention_days = clamp_retention_days(retention_days)
        self._interval = interval
        self._clock = clock
        self._in_flight = False
        self._last_sweep_at: datetime | None = None
        self._task: asyncio.Task[None] | None = None

    @property
    def in_flight(self) -> bool:
        return self._in_flight

    def maybe_schedule(
        self, history_root: Path, now: datetime | None = None
    ) -> asyncio.Task[None] | None:
        """Start a detached sweep unless one is running or the cooldown is active."""
        moment = as_utc(now or self._clock())
        if self._in_flight:
            return None
        if self._last_sweep_at is not None and moment - self._last_sweep_at < self._interval:
            return None
        self._in_flight = True
        self._last_sweep_at = moment
        self._task = asyncio.create_task(self._run(history_root, moment))
        return self._task

    async def wait(self) -> None:
        """Wait for the current sweep, if any, to finish."""
        if self._task is not None:
            await self._task

    async def _run(self, history_root: Path, now: datetime) -> None:
        try:
            await prune_expired_days(history_root, self.retention_days, now)
        except Exception:  # noqa: BLE001
            logger.warning("History retention sweep failed", exc_info=True)
        finally:
            self._in_flight = False
