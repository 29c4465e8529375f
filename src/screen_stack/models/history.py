"""History log event model: one immutable record per accepted revision."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

_CAMEL = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


class InteractionMetadata(BaseModel):
    """Identifiers of the user interaction that produced a revision."""

    model_config = _CAMEL

    interaction_id: str | None = Field(default=None, alias="id")
    trace_id: str | None = None
    ui_session_id: str | None = None
    app_context: str | None = None
    event_seq: int | float | None = None


class RevisionMetadata(BaseModel):
    """Caller-supplied context recorded alongside a persisted revision."""

    model_config = _CAMEL

    session_id: str | None = None
    tool_call_id: str | None = None
    app_context: str | None = None
    is_final: bool = False
    revision_note: str | None = None
    interaction: InteractionMetadata = Field(default_factory=InteractionMetadata)


class HistoryEvent(BaseModel):
    """One line of a day bucket's ``events.jsonl``."""

    model_config = _CAMEL

    timestamp_iso: str
    created_at_ms: int
    event: Literal["emit_screen_revision"] = "emit_screen_revision"
    session_id: str | None = None
    trace_id: str | None = None
    interaction_id: str | None = None
    ui_session_id: str | None = None
    event_seq: int | float | None = None
    app_context: str | None = None
    emit_revision: int
    is_final: bool = False
    revision_note: str | None = None
    tool_call_id: str | None = None
    html_chars: int
    html_sha256: str
    html_path: str

    def to_json_line(self) -> str:
        return self.model_dump_json(by_alias=True, exclude_none=True) + "\n"
