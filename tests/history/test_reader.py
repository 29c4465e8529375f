"""Tests for history read access."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from screen_stack.history.reader import (
    SnapshotPathError,
    list_days,
    read_events,
    read_snapshot,
)

if TYPE_CHECKING:
    from pathlib import Path

    from screen_stack.history.log import HistoryLog


class TestListDays:
    """Test day bucket discovery."""

    async def test_newest_first(self, tmp_path: Path) -> None:
        """Only valid day directories are listed."""
        history_root = tmp_path / ".history"
        for name in ("2026-02-10", "2026-02-17", "invalid-folder"):
            (history_root / name).mkdir(parents=True)
        (history_root / "2026-02-12").write_text("", encoding="utf-8")

        assert await list_days(tmp_path) == ["2026-02-17", "2026-02-10"]

    async def test_no_history(self, tmp_path: Path) -> None:
        """A workspace without history lists nothing."""
        assert await list_days(tmp_path) == []


class TestReadEvents:
    """Test event log parsing."""

    async def test_round_trip(self, tmp_path: Path, history_log: HistoryLog) -> None:
        """Persisted events read back in append order."""
        await history_log.persist(1, "<p>one</p>")
        await history_log.persist(2, "<p>two</p>")

        events = await read_events(tmp_path, "2026-02-17")

        assert [event.emit_revision for event in events] == [1, 2]

    async def test_bad_lines_skipped(self, tmp_path: Path, history_log: HistoryLog) -> None:
        """Corrupt lines do not hide valid ones."""
        await history_log.persist(1, "<p>one</p>")
        events_file = tmp_path / ".history" / "2026-02-17" / "events.jsonl"
        with events_file.open("a", encoding="utf-8") as f:
            f.write("{not json\n\n")
            f.write('{"event": "emit_screen_revision"}\n')

        events = await read_events(tmp_path, "2026-02-17")

        assert len(events) == 1

    async def test_missing_day(self, tmp_path: Path) -> None:
        """Days without a bucket have no events."""
        assert await read_events(tmp_path, "2026-01-01") == []

    async def test_invalid_day(self, tmp_path: Path) -> None:
        """Malformed day names are rejected."""
        with pytest.raises(ValueError, match="Invalid history day"):
            await read_events(tmp_path, "../etc")


class TestReadSnapshot:
    """Test snapshot loading."""

    async def test_reads_persisted_snapshot(
        self, tmp_path: Path, history_log: HistoryLog
    ) -> None:
        """The htmlPath of an event resolves to its snapshot."""
        result = await history_log.persist(1, "<p>one</p>\r\n")
        assert result.event is not None

        assert await read_snapshot(tmp_path, result.event.html_path) == "<p>one</p>\r\n"

    async def test_directory_is_not_a_snapshot(
        self, tmp_path: Path, history_log: HistoryLog
    ) -> None:
        """Directories inside the history root read as missing snapshots."""
        await history_log.persist(1, "<p>one</p>")

        with pytest.raises(FileNotFoundError):
            await read_snapshot(tmp_path, ".history/2026-02-17/snapshots")

    async def test_rejects_escape(self, tmp_path: Path) -> None:
        """Paths outside the history directory are refused."""
        with pytest.raises(SnapshotPathError):
            await read_snapshot(tmp_path, ".history/../secrets.txt")
