"""Durable history of accepted screen revisions."""

from screen_stack.history.log import HistoryLog, PersistResult
from screen_stack.history.reader import list_days, read_events, read_snapshot
from screen_stack.history.retention import RetentionSweeper, prune_expired_days

__all__ = [
    "HistoryLog",
    "PersistResult",
    "RetentionSweeper",
    "list_days",
    "prune_expired_days",
    "read_events",
    "read_snapshot",
]
