"""Streaming preview decisions over in-flight generator output."""

from screen_stack.preview.policy import (
    TimelineFrame,
    is_renderable,
    latest_reasoning_preview,
    should_replace_preview,
    should_show_raw_preview,
)

__all__ = [
    "TimelineFrame",
    "is_renderable",
    "latest_reasoning_preview",
    "should_replace_preview",
    "should_show_raw_preview",
]
