"""Read access to persisted history for audit and replay."""

from __future__ import annotations

import json
import logging
from pathlib import Path

import aiofiles
import aiofiles.os
from pydantic import ValidationError

from screen_stack.history.log import EVENTS_FILE_NAME, HISTORY_DIR_NAME
from screen_stack.history.retention import parse_day_key
from screen_stack.models.history import HistoryEvent

logger = logging.getLogger(__name__)


class SnapshotPathError(ValueError):
    """Raised for snapshot paths that point outside the history directory."""


async def list_days(workspace_root: str | Path) -> list[str]:
    """Return valid day buckets, newest first."""
    history_root = Path(workspace_root).resolve() / HISTORY_DIR_NAME
    try:
        names = await aiofiles.os.listdir(history_root)
    except FileNotFoundError:
        return []
    days = [
        name
        for name in names
        if parse_day_key(name) is not None
        and await aiofiles.os.path.isdir(history_root / name)
    ]
    return sorted(days, reverse=True)


async def read_events(workspace_root: str | Path, day: str) -> list[HistoryEvent]:
    """Parse one day's ``events.jsonl`` in append order.

    Unparseable lines are skipped with a warning; a missing bucket yields an
    empty list.
    """
    if parse_day_key(day) is None:
        raise ValueError(f"Invalid history day '{day}' (expected YYYY-MM-DD).")
    path = Path(workspace_root).resolve() / HISTORY_DIR_NAME / day / EVENTS_FILE_NAME
    if not await aiofiles.os.path.exists(path):
        return []

    events: list[HistoryEvent] = []
    bad_lines = 0
    async with aiofiles.open(path, encoding="utf-8") as f:
        async for line in f:
            line = line.strip()
            if not line:
                continue
            try:
                events.append(HistoryEvent.model_validate(json.loads(line)))
            except (json.JSONDecodeError, ValidationError):
                bad_lines += 1
    if bad_lines:
        logger.warning("History events skipped — day=%s bad_lines=%d", day, bad_lines)
    return events


async def read_snapshot(workspace_root: str | Path, html_path: str) -> str:
    """Load the snapshot referenced by an event's ``htmlPath``."""
    history_root = (Path(workspace_root).resolve() / HISTORY_DIR_NAME).resolve()
    snapshot = (Path(workspace_root).resolve() / html_path).resolve()
    if not snapshot.is_relative_to(history_root):
        raise SnapshotPathError(f"Snapshot path escapes history root: {html_path}")
    if not await aiofiles.os.path.isfile(snapshot):
        raise FileNotFoundError(f"Snapshot not found: {html_path}")
    async with aiofiles.open(snapshot, encoding="utf-8", newline="") as f:
        return await f.read()
