"""Application services built on the screen core."""

from screen_stack.services.screens import EmitOutcome, ScreenRegistry, ScreenSession

__all__ = ["EmitOutcome", "ScreenRegistry", "ScreenSession"]
