"""Data models for screen mutations, quality results and history events."""

from screen_stack.models.history import HistoryEvent, InteractionMetadata, RevisionMetadata
from screen_stack.models.mutation import (
    PATCH_OPS,
    ApplyErrorCode,
    Mutation,
    MutationOp,
    RenderOutputEvent,
)
from screen_stack.models.quality import QualityResult, ReasonCode

__all__ = [
    "PATCH_OPS",
    "ApplyErrorCode",
    "HistoryEvent",
    "InteractionMetadata",
    "Mutation",
    "MutationOp",
    "QualityResult",
    "ReasonCode",
    "RenderOutputEvent",
    "RevisionMetadata",
]
