"""Screen routes: emit_screen mutations and read_screen snapshots."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from screen_stack.models.history import InteractionMetadata
from screen_stack.routes.errors import api_error
from screen_stack.screen.ledger import MutationAccepted
from screen_stack.screen.validation import MutationValidationError

router = APIRouter(prefix="/api/screens", tags=["screens"])


class EmitRequest(BaseModel):
    """Body of an emit_screen call: the tool arguments plus call metadata."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    args: dict[str, Any] = Field(default_factory=dict)
    tool_call_id: str | None = None
    interaction: InteractionMetadata | None = None


@router.post("/{session_id}/emit")
async def emit_screen(request: Request, session_id: str, body: EmitRequest) -> JSONResponse:
    """Apply one mutation to the session's screen."""
    session = request.app.state.screens.get_or_create(session_id)
    try:
        outcome = await session.emit(
            body.args,
            tool_call_id=body.tool_call_id,
            interaction=body.interaction,
        )
    except MutationValidationError as exc:
        return api_error(status.HTTP_400_BAD_REQUEST, "INVALID_MUTATION", str(exc))

    result = outcome.result
    if not isinstance(result, MutationAccepted):
        return api_error(status.HTTP_409_CONFLICT, result.code, result.message)

    return JSONResponse(
        {
            "ok": True,
            "event": result.event.model_dump(mode="json", by_alias=True),
            "toolResultText": result.acknowledgment,
            "persisted": bool(outcome.persisted and outcome.persisted.persisted),
            "quality": outcome.quality.model_dump(mode="json", by_alias=True)
            if outcome.quality
            else None,
        }
    )


@router.get("/{session_id}")
async def read_screen(request: Request, session_id: str, mode: str = "meta") -> JSONResponse:
    """Return the session's current revision and, depending on mode, its content."""
    session = request.app.state.screens.get(session_id)
    if session is None:
        return api_error(
            status.HTTP_404_NOT_FOUND,
            "SCREEN_NOT_FOUND",
            f"No screen for session '{session_id}'.",
        )
    try:
        screen = session.read_screen(mode)
    except ValueError as exc:
        return api_error(status.HTTP_400_BAD_REQUEST, "INVALID_READ_MODE", str(exc))
    return JSONResponse({"ok": True, **screen})
