"""Quality gate: scores a finalized document and builds a retry hint."""

from __future__ import annotations

import re

from screen_stack.models.quality import QualityResult, ReasonCode

DESKTOP_CONTEXT = "desktop_env"
# Media players are legitimately static screens.
NON_INTERACTIVE_CONTEXTS = frozenset({"videos_app"})

DESKTOP_REQUIRED_APP_IDS = (
    "documents",
    "notepad_app",
    "web_browser_app",
    "gallery_app",
    "videos_app",
    "calculator_app",
    "calendar_app",
    "gaming_app",
    "trash_bin",
    "insights_app",
    "system_settings_page",
)
MIN_LAUNCHER_COVERAGE = 8
MIN_LAUNCHER_INTERACTIONS = 8
MIN_APP_CONTENT_CHARS = 120
MAX_LAUNCHER_EMOJI = 3
MIN_BLACK_HINTS = 2
PASS_THRESHOLD = 0.55

REASON_WEIGHTS: dict[ReasonCode, float] = {
    ReasonCode.MISSING_HTML_STRUCTURE: 0.6,
    ReasonCode.MISSING_VIEWPORT_FILL: 0.25,
    ReasonCode.MISSING_LAUNCHER_COVERAGE: 0.25,
    ReasonCode.EMPTY_DARK_SURFACE: 0.2,
    ReasonCode.SPARSE_INTERACTIVITY: 0.2,
    ReasonCode.EMOJI_HEAVY_DEFAULT: 0.1,
    ReasonCode.CONTENT_TOO_SHORT: 0.2,
}

HINT_SENTENCES: dict[ReasonCode, str] = {
    ReasonCode.MISSING_VIEWPORT_FILL: (
        "Use a root container with min-height:100%, height:100%, or "
        "min-height:100vh that fills the full window."
    ),
    ReasonCode.MISSING_LAUNCHER_COVERAGE: (
        "Render a full desktop launcher with clear tiles for all core apps "
        "and data-interaction-id values."
    ),
    ReasonCode.SPARSE_INTERACTIVITY: (
        "Add more meaningful interactive controls; avoid static-only output."
    ),
    ReasonCode.EMPTY_DARK_SURFACE: (
        "Avoid plain black empty surfaces; add wallpaper, gradients, or "
        "filled content regions."
    ),
    ReasonCode.EMOJI_HEAVY_DEFAULT: (
        "Use text/symbol icon labels by default; avoid emoji-only icon sets "
        "unless explicitly requested."
    ),
    ReasonCode.CONTENT_TOO_SHORT: (
        "Provide a complete screen layout with structure, spacing, and "
        "functional controls."
    ),
}
FALLBACK_HINT = (
    "Regenerate with a complete, interactive, viewport-filling layout and "
    "stronger visual hierarchy."
)

_HTML_TAG_RE = re.compile(r"<[a-zA-Z]")
_INTERACTION_RE = re.compile(r"data-interaction-id\s*=\s*[\"']", re.IGNORECASE)
_FULL_HEIGHT_RE = re.compile(r"(?:min-height|height)\s*:\s*(?:100vh|100%)", re.IGNORECASE)
_BACKGROUND_VISUAL_RE = re.compile(
    r"background(?:-image)?\s*:[^;]*(?:url\(|gradient)", re.IGNORECASE
)
_BLACK_HINT_RE = re.compile(
    r"(?:#000(?:000)?|\bblack\b|rgb\(\s*0\s*,\s*0\s*,\s*0\s*\))", re.IGNORECASE
)
_EMOJI_RE = re.compile("[\U0001f300-\U0001faff\u2600-\u27bf]")


def _launcher_coverage(html: str) -> int:
    return sum(
        1
        for app_id in DESKTOP_REQUIRED_APP_IDS
        if f'data-interaction-id="{app_id}"' in html
        or f"data-interaction-id='{app_id}'" in html
    )


def is_launcher_context(app_context: str | None) -> bool:
    return not app_context or app_context == DESKTOP_CONTEXT


def build_corrective_hint(
    reason_codes: list[ReasonCode], app_context: str | None
) -> str:
    if not reason_codes:
        return ""
    sentences = [
        sentence for code, sentence in HINT_SENTENCES.items() if code in reason_codes
    ] or [FALLBACK_HINT]
    return f"Quality retry hint for {app_context or 'unknown_app'}: {' '.join(sentences)}"


def evaluate_document(html: str | None, app_context: str | None = None) -> QualityResult:
    """Score ``html`` for the given screen context. Never raises."""
    normalized = (html or "").strip()
    reasons: list[ReasonCode] = []

    if not _HTML_TAG_RE.search(normalized):
        reasons.append(ReasonCode.MISSING_HTML_STRUCTURE)

    interactions = len(_INTERACTION_RE.findall(normalized))
    if is_launcher_context(app_context):
        if _launcher_coverage(normalized) < MIN_LAUNCHER_COVERAGE:
            reasons.append(ReasonCode.MISSING_LAUNCHER_COVERAGE)
        if not _FULL_HEIGHT_RE.search(normalized):
            reasons.append(ReasonCode.MISSING_VIEWPORT_FILL)
        if interactions < MIN_LAUNCHER_INTERACTIONS:
            reasons.append(ReasonCode.SPARSE_INTERACTIVITY)
        if len(_BLACK_HINT_RE.findall(normalized)) >= MIN_BLACK_HINTS and not (
            _BACKGROUND_VISUAL_RE.search(normalized)
        ):
            reasons.append(ReasonCode.EMPTY_DARK_SURFACE)
        if len(_EMOJI_RE.findall(normalized)) > MAX_LAUNCHER_EMOJI:
            reasons.append(ReasonCode.EMOJI_HEAVY_DEFAULT)
    else:
        if len(normalized) < MIN_APP_CONTENT_CHARS:
            reasons.append(ReasonCode.CONTENT_TOO_SHORT)
        if interactions < 1 and app_context not in NON_INTERACTIVE_CONTEXTS:
            reasons.append(ReasonCode.SPARSE_INTERACTIVITY)

    score = round(1.0 - sum(REASON_WEIGHTS[code] for code in reasons), 3)
    passed = (
        score >= PASS_THRESHOLD and ReasonCode.MISSING_HTML_STRUCTURE not in reasons
    )
    return QualityResult(
        passed=passed,
        score=max(0.0, score),
        reason_codes=reasons,
        corrective_hint=build_corrective_hint(reasons, app_context),
    )
