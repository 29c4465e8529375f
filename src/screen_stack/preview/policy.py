"""Streaming preview policy.

Pure functions deciding whether partial HTML arriving mid-stream is safe to
surface, and whether it should replace what is already on screen. Callers feed
candidates in arrival order.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Sequence

MIN_VISIBLE_TEXT_CHARS = 2
MIN_RENDERABLE_HTML_CHARS = 80
MIN_VISIBLE_TEXT_CHARS_ON_REPLACE = 6
MIN_BASELINE_HTML_CHARS_ON_REPLACE = 140
MIN_LENGTH_RATIO_ON_REPLACE = 0.35

SYSTEM_FRAME_PREFIX = "[System]"

_TAG_RE = re.compile(r"<[^>]*>")
_WHITESPACE_RE = re.compile(r"\s+")
_BLOCK_OPEN_RE = re.compile(
    r"<(div|section|main|article|aside|header|footer|ul|ol|table|form|p|h[1-6]"
    r"|button|input|textarea|select|canvas|svg)\b",
    re.IGNORECASE,
)
_BLOCK_CLOSE_RE = re.compile(
    r"</(div|section|main|article|aside|header|footer|ul|ol|table|form|p|h[1-6]"
    r"|button|textarea|select|canvas|svg)>",
    re.IGNORECASE,
)


@dataclass(frozen=True, slots=True)
class TimelineFrame:
    """One entry of a generation timeline (stream chunk, thought, tool call...)."""

    type: str
    detail: str = ""


def visible_text_length(html: str) -> int:
    stripped = _TAG_RE.sub(" ", html)
    return len(_WHITESPACE_RE.sub(" ", stripped).strip())


def should_show_raw_preview(
    *, is_loading: bool, replay_active: bool, html_changed_this_turn: bool
) -> bool:
    """Decide whether to render in-flight markup instead of the settled screen."""
    if replay_active:
        return True
    # The previous screen stays up at turn start until this turn's HTML arrives.
    return is_loading and html_changed_this_turn


def is_renderable(html: str) -> bool:
    source = html.strip() if isinstance(html, str) else ""
    if not source:
        return False
    if visible_text_length(source) >= MIN_VISIBLE_TEXT_CHARS:
        return True
    if len(source) < MIN_RENDERABLE_HTML_CHARS:
        return False
    return bool(_BLOCK_OPEN_RE.search(source)) and bool(_BLOCK_CLOSE_RE.search(source))


def should_replace_preview(candidate: str, previous: str) -> bool:
    """Decide whether ``candidate`` may replace the ``previous`` preview.

    Rejects unchanged or unrenderable candidates, and candidates that would
    visibly regress a substantial screen to a near-empty one.
    """
    candidate = candidate if isinstance(candidate, str) else ""
    previous = previous if isinstance(previous, str) else ""
    if candidate == previous:
        return False
    if not is_renderable(candidate):
        return False

    candidate_trimmed = candidate.strip()
    previous_trimmed = previous.strip()
    if not previous_trimmed:
        return True

    if (
        visible_text_length(previous_trimmed) >= MIN_VISIBLE_TEXT_CHARS_ON_REPLACE
        and visible_text_length(candidate_trimmed) < MIN_VISIBLE_TEXT_CHARS_ON_REPLACE
    ):
        return False

    return not (
        len(previous_trimmed) >= MIN_BASELINE_HTML_CHARS_ON_REPLACE
        and len(candidate_trimmed) < len(previous_trimmed) * MIN_LENGTH_RATIO_ON_REPLACE
    )


def latest_reasoning_preview(
    frames: Sequence[TimelineFrame], max_chars: int = 320
) -> str:
    """Return the newest non-system thought, truncated for a loading placeholder."""
    for frame in reversed(frames or ()):
        if frame.type != "thought":
            continue
        detail = (frame.detail or "").strip()
        if not detail or detail.startswith(SYSTEM_FRAME_PREFIX):
            continue
        if len(detail) <= max_chars:
            return detail
        return f"{detail[: max(80, max_chars - 3)].rstrip()}..."
    return ""
