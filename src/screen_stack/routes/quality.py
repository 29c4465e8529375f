"""Quality gate and streaming preview decision routes."""

from __future__ import annotations

from fastapi import APIRouter
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from screen_stack.models.quality import QualityResult
from screen_stack.preview.policy import (
    is_renderable,
    should_replace_preview,
    should_show_raw_preview,
)
from screen_stack.quality.gate import evaluate_document

router = APIRouter(prefix="/api", tags=["quality"])

_CAMEL = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class QualityRequest(BaseModel):
    model_config = _CAMEL

    html: str = ""
    app_context: str | None = None


class PreviewRequest(BaseModel):
    model_config = _CAMEL

    candidate: str = ""
    previous: str = ""
    is_loading: bool = True
    replay_active: bool = False
    html_changed_this_turn: bool = False


class PreviewDecision(BaseModel):
    model_config = _CAMEL

    show_raw: bool
    renderable: bool
    replace: bool


@router.post("/quality", response_model=QualityResult, response_model_by_alias=True)
async def score_document(body: QualityRequest) -> QualityResult:
    """Score a finalized document with the quality gate."""
    return evaluate_document(body.html, body.app_context)


@router.post("/preview/decide", response_model=PreviewDecision, response_model_by_alias=True)
async def decide_preview(body: PreviewRequest) -> PreviewDecision:
    """Evaluate the streaming preview policy for one candidate."""
    return PreviewDecision(
        show_raw=should_show_raw_preview(
            is_loading=body.is_loading,
            replay_active=body.replay_active,
            html_changed_this_turn=body.html_changed_this_turn,
        ),
        renderable=is_renderable(body.candidate),
        replace=should_replace_preview(body.candidate, body.previous),
    )
