"""Validation of raw emit_screen tool-call arguments."""

from __future__ import annotations

import math
from collections.abc import Mapping
from typing import Any

from screen_stack.config import DEFAULT_MAX_HTML_CHARS, DEFAULT_MAX_REVISION_NOTE_CHARS
from screen_stack.models.mutation import FRAGMENT_OPS, Mutation, MutationOp

_MIN_HTML_CHARS_CAP = 1_000
_MIN_REVISION_NOTE_CAP = 32


class MutationValidationError(ValueError):
    """Raised for malformed mutation requests before any state is touched."""


def _as_text(value: object) -> str:
    if isinstance(value, str):
        return value
    if value is None:
        return ""
    return str(value)


def _as_positive_revision(value: object) -> int:
    """Coerce a JSON-ish number to a positive integer revision, 0 when invalid."""
    if isinstance(value, bool):
        number = float(value)
    elif isinstance(value, int | float):
        try:
            number = float(value)
        except OverflowError:
            return 0
    elif isinstance(value, str):
        try:
            number = float(value.strip() or "0")
        except ValueError:
            return 0
    else:
        return 0
    if not math.isfinite(number) or number <= 0:
        return 0
    return math.floor(number)


def validate_mutation(
    payload: Mapping[str, Any] | None,
    *,
    max_html_chars: int = DEFAULT_MAX_HTML_CHARS,
    max_revision_note_chars: int = DEFAULT_MAX_REVISION_NOTE_CHARS,
) -> Mutation:
    """Turn raw tool-call arguments into a ``Mutation``.

    Field names follow the wire format (``baseRevision``, ``targetId``, ...).
    A missing ``op`` means ``replace``. Raises ``MutationValidationError`` with a
    message suitable for returning to the content generator.
    """
    source: Mapping[str, Any] = payload if isinstance(payload, Mapping) else {}
    html_cap = max(_MIN_HTML_CHARS_CAP, int(max_html_chars))
    note_cap = max(_MIN_REVISION_NOTE_CAP, int(max_revision_note_chars))

    raw_op = _as_text(source.get("op")).strip().lower() or MutationOp.REPLACE.value
    try:
        op = MutationOp(raw_op)
    except ValueError:
        allowed = ", ".join(item.value for item in MutationOp)
        raise MutationValidationError(
            f"emit_screen op must be one of: {allowed}."
        ) from None

    common: dict[str, Any] = {
        "op": op,
        "app_context": _as_text(source.get("appContext")).strip() or None,
        "revision_note": _as_text(source.get("revisionNote")).strip()[:note_cap] or None,
        "is_final": bool(source.get("isFinal")),
    }

    if op is MutationOp.REPLACE:
        html = _as_text(source.get("html"))
        if not html.strip():
            raise MutationValidationError(
                "emit_screen replace requires a non-empty html field."
            )
        if len(html) > html_cap:
            raise MutationValidationError(
                f"emit_screen html exceeds max length ({html_cap} chars)."
            )
        return Mutation(html=html, **common)

    base_revision = _as_positive_revision(source.get("baseRevision"))
    if not base_revision:
        raise MutationValidationError(
            "emit_screen patch operations require baseRevision (positive integer)."
        )
    target_id = _as_text(source.get("targetId")).strip()
    if not target_id:
        raise MutationValidationError(
            "emit_screen patch operations require targetId (maps to data-ui-id)."
        )
    common.update(base_revision=base_revision, target_id=target_id)

    if op in FRAGMENT_OPS:
        fragment = _as_text(source.get("htmlFragment"))
        if not fragment.strip():
            raise MutationValidationError(f"emit_screen {op} requires non-empty htmlFragment.")
        if len(fragment) > html_cap:
            raise MutationValidationError(
                f"emit_screen htmlFragment exceeds max length ({html_cap} chars)."
            )
        return Mutation(html_fragment=fragment, **common)

    if op is MutationOp.SET_TEXT:
        text = source.get("text")
        if not isinstance(text, str):
            raise MutationValidationError("emit_screen set_text requires text (string).")
        return Mutation(text=text, **common)

    if op is MutationOp.SET_ATTR:
        attr_name = _as_text(source.get("attrName")).strip()
        if not attr_name:
            raise MutationValidationError("emit_screen set_attr requires attrName.")
        attr_value = source.get("attrValue")
        if not isinstance(attr_value, str):
            raise MutationValidationError(
                "emit_screen set_attr requires attrValue (string)."
            )
        return Mutation(attr_name=attr_name, attr_value=attr_value, **common)

    return Mutation(**common)
