"""Quality gate result model."""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ReasonCode(StrEnum):
    MISSING_HTML_STRUCTURE = "missing_html_structure"
    MISSING_VIEWPORT_FILL = "missing_viewport_fill"
    MISSING_LAUNCHER_COVERAGE = "missing_launcher_coverage"
    EMPTY_DARK_SURFACE = "empty_dark_surface"
    SPARSE_INTERACTIVITY = "sparse_interactivity"
    EMOJI_HEAVY_DEFAULT = "emoji_heavy_default"
    CONTENT_TOO_SHORT = "content_too_short"


class QualityResult(BaseModel):
    """Outcome of scoring one finalized document."""

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, frozen=True
    )

    passed: bool = Field(alias="pass")
    score: float
    reason_codes: list[ReasonCode] = Field(default_factory=list)
    corrective_hint: str = ""
