"""Heuristic quality gate for finalized screen documents."""

from screen_stack.quality.gate import DESKTOP_CONTEXT, evaluate_document

__all__ = ["DESKTOP_CONTEXT", "evaluate_document"]
