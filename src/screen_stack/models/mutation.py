"""Mutation request and render-output event models for the emit_screen tool."""

from __future__ import annotations

from enum import StrEnum
from typing import Literal

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class MutationOp(StrEnum):
    """Enumerate the mutation kinds accepted against a screen document."""

    REPLACE = "replace"
    APPEND_CHILD = "append_child"
    PREPEND_CHILD = "prepend_child"
    REPLACE_NODE = "replace_node"
    REMOVE_NODE = "remove_node"
    SET_TEXT = "set_text"
    SET_ATTR = "set_attr"


FRAGMENT_OPS = frozenset(
    {MutationOp.APPEND_CHILD, MutationOp.PREPEND_CHILD, MutationOp.REPLACE_NODE}
)
PATCH_OPS = frozenset(op for op in MutationOp if op is not MutationOp.REPLACE)


class ApplyErrorCode(StrEnum):
    """Apply-time failure codes. State is unchanged whenever one is reported."""

    SCREEN_STATE_UNAVAILABLE = "SCREEN_STATE_UNAVAILABLE"
    REVISION_MISMATCH = "REVISION_MISMATCH"
    PATCH_APPLY_FAILED = "PATCH_APPLY_FAILED"


class Mutation(BaseModel):
    """A validated mutation. Build through ``validate_mutation`` for raw payloads."""

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, frozen=True
    )

    op: MutationOp = MutationOp.REPLACE
    html: str | None = None
    html_fragment: str | None = None
    text: str | None = None
    attr_name: str | None = None
    attr_value: str | None = None
    base_revision: int | None = None
    target_id: str | None = None
    app_context: str | None = None
    revision_note: str | None = None
    is_final: bool = False

    @property
    def is_patch(self) -> bool:
        return self.op in PATCH_OPS


class RenderOutputEvent(BaseModel):
    """Event handed to the renderer after a mutation is accepted."""

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, frozen=True
    )

    type: Literal["render_output"] = "render_output"
    tool_name: str = "emit_screen"
    tool_call_id: str | None = None
    revision: int
    document: str
    is_final: bool = False
    app_context: str | None = None
    revision_note: str | None = None
    op: MutationOp = MutationOp.REPLACE
    base_revision: int | None = None
    target_id: str | None = None
