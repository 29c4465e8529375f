"""Durable, day-bucketed history of accepted screen revisions.

Layout under the workspace root::

    .history/<YYYY-MM-DD>/events.jsonl
    .history/<YYYY-MM-DD>/snapshots/<timestamp>_r<NNNNNN>_<hash8>.html

Persistence is best effort: failures are logged and reported in the result,
never raised into the mutation path.
"""

from __future__ import annotations

import hashlib
import logging
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from pathlib import Path, PurePosixPath
from typing import TYPE_CHECKING

import aiofiles
import aiofiles.os

from screen_stack.history.retention import (
    DEFAULT_RETENTION_DAYS,
    RetentionSweeper,
    as_utc,
    day_key,
    utcnow,
)
from screen_stack.models.history import HistoryEvent, RevisionMetadata

if TYPE_CHECKING:
    from collections.abc import Callable

logger = logging.getLogger(__name__)

HISTORY_DIR_NAME = ".history"
EVENTS_FILE_NAME = "events.jsonl"
SNAPSHOTS_DIR_NAME = "snapshots"
MAX_REVISION = 999_999
MAX_REVISION_NOTE_CHARS = 200

_EPOCH = datetime(1970, 1, 1, tzinfo=UTC)


@dataclass(frozen=True, slots=True)
class PersistResult:
    persisted: bool
    reason: str | None = None
    event: HistoryEvent | None = None


def iso_timestamp(moment: datetime) -> str:
    """Millisecond-precision UTC timestamp with a ``Z`` suffix."""
    return as_utc(moment).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def snapshot_file_name(timestamp_iso: str, revision: int, sha256: str) -> str:
    safe_timestamp = timestamp_iso.replace(":", "-").replace(".", "-")
    return f"{safe_timestamp}_r{revision:06d}_{sha256[:8]}.html"


def _clean(value: str | None) -> str | None:
    text = (value or "").strip()
    return text or None


class HistoryLog:
    """Writes one snapshot plus one JSONL event per accepted revision."""

    def __init__(
        self,
        workspace_root: str | Path,
        *,
        retention_days: int = DEFAULT_RETENTION_DAYS,
        enabled: bool = True,
        clock: Callable[[], datetime] = utcnow,
        sweeper: RetentionSweeper | None = None,
    ) -> None:
        self.workspace_root = Path(workspace_root or ".").resolve()
        self.history_root = self.workspace_root / HISTORY_DIR_NAME
        self.enabled = enabled
        self._clock = clock
        self.sweeper = sweeper or RetentionSweeper(retention_days, clock=clock)

    @property
    def retention_days(self) -> int:
        return self.sweeper.retention_days

    def day_dir(self, day: str) -> Path:
        return self.history_root / day

    async def persist(
        self,
        revision: int,
        document: str,
        metadata: RevisionMetadata | None = None,
        now: datetime | None = None,
    ) -> PersistResult:
        """Record ``document`` as ``revision`` and schedule a retention sweep."""
        if not self.enabled:
            return PersistResult(persisted=False, reason="disabled")
        html = document if isinstance(document, str) else ""
        if not html.strip():
            return PersistResult(persisted=False, reason="empty_html")

        meta = metadata or RevisionMetadata()
        moment = as_utc(now or self._clock())
        timestamp_iso = iso_timestamp(moment)
        day = day_key(moment)
        emit_revision = max(1, min(MAX_REVISION, int(revision)))
        try:
            encoded = html.encode("utf-8")
        except UnicodeEncodeError:
            logger.warning(
                "Screen revision is not encodable as UTF-8 — revision=%d", emit_revision
            )
            return PersistResult(persisted=False, reason="io_error")
        sha256 = hashlib.sha256(encoded).hexdigest()
        file_name = snapshot_file_name(timestamp_iso, emit_revision, sha256)
        snapshots_dir = self.day_dir(day) / SNAPSHOTS_DIR_NAME
        relative_path = PurePosixPath(HISTORY_DIR_NAME, day, SNAPSHOTS_DIR_NAME, file_name)

        interaction = meta.interaction
        try:
            event = HistoryEvent(
                timestamp_iso=timestamp_iso,
                created_at_ms=(moment - _EPOCH) // timedelta(milliseconds=1),
                session_id=_clean(meta.session_id),
                trace_id=_clean(interaction.trace_id),
                interaction_id=_clean(interaction.interaction_id),
                ui_session_id=_clean(interaction.ui_session_id),
                event_seq=interaction.event_seq,
                app_context=_clean(meta.app_context) or _clean(interaction.app_context),
                emit_revision=emit_revision,
                is_final=meta.is_final,
                revision_note=_clean(
                    (meta.revision_note or "").strip()[:MAX_REVISION_NOTE_CHARS]
                ),
                tool_call_id=_clean(meta.tool_call_id),
                html_chars=len(html),
                html_sha256=sha256,
                html_path=str(relative_path),
            )
            line = event.to_json_line()
            await aiofiles.os.makedirs(snapshots_dir, exist_ok=True)
            async with aiofiles.open(snapshots_dir / file_name, "wb") as f:
                await f.write(encoded)
            async with aiofiles.open(
                self.day_dir(day) / EVENTS_FILE_NAME, "a", encoding="utf-8"
            ) as f:
                await f.write(line)
        except (OSError, ValueError):
            logger.warning(
                "Failed to persist screen revision — revision=%d day=%s",
                emit_revision,
                day,
                exc_info=True,
            )
            return PersistResult(persisted=False, reason="io_error")

        logger.debug(
            "Screen revision persisted — revision=%d chars=%d path=%s",
            emit_revision,
            len(html),
            relative_path,
        )
        self.sweeper.maybe_schedule(self.history_root, moment)
        return PersistResult(persisted=True, event=event)
