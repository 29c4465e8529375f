"""Targeted patch operations over a screen document."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import TYPE_CHECKING

from screen_stack.models.mutation import MutationOp
from screen_stack.screen.scanner import MARKER_ATTRIBUTE, locate

if TYPE_CHECKING:
    from screen_stack.models.mutation import Mutation

ATTRIBUTE_NAME_RE = re.compile(r"^[A-Za-z_:][A-Za-z0-9:._-]*$")
_SELF_CLOSE_TAIL_RE = re.compile(r"/\s*>$")
_OPEN_TAIL_RE = re.compile(r"\s*>$")


class PatchApplyError(ValueError):
    """Raised when a patch cannot be applied to the current document."""


@dataclass(frozen=True, slots=True)
class PatchOutcome:
    document: str
    summary: str


def escape_html_text(value: str) -> str:
    return value.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")


def escape_html_attribute(value: str) -> str:
    return escape_html_text(value).replace('"', "&quot;")


def set_attribute(open_tag: str, name: str, value: str) -> str:
    """Set ``name`` on a raw open tag, replacing an existing value in place."""
    attr_name = (name or "").strip()
    if not ATTRIBUTE_NAME_RE.match(attr_name):
        raise PatchApplyError(f"Invalid attribute name '{attr_name}'.")

    escaped = escape_html_attribute(value)
    existing = re.compile(
        rf"(\s{re.escape(attr_name)}\s*=\s*)(?:\"[^\"]*\"|'[^']*'|[^\s>]+)",
        re.IGNORECASE,
    )
    if existing.search(open_tag):
        return existing.sub(lambda m: f'{m.group(1)}"{escaped}"', open_tag, count=1)
    valueless = re.compile(rf"(\s{re.escape(attr_name)})(?=[\s/>])", re.IGNORECASE)
    if valueless.search(open_tag):
        return valueless.sub(lambda m: f'{m.group(1)}="{escaped}"', open_tag, count=1)
    if _SELF_CLOSE_TAIL_RE.search(open_tag):
        return _SELF_CLOSE_TAIL_RE.sub(
            lambda _: f' {attr_name}="{escaped}" />', open_tag, count=1
        )
    return _OPEN_TAIL_RE.sub(lambda _: f' {attr_name}="{escaped}">', open_tag, count=1)


def apply_patch(document: str, mutation: Mutation) -> PatchOutcome:
    """Apply a non-replace mutation to ``document`` and return the new text.

    Raises ``PatchApplyError`` when the target cannot be resolved or the
    operation does not fit the resolved node.
    """
    target_id = mutation.target_id or ""
    node = locate(document, target_id)
    if node is None:
        raise PatchApplyError(f"Target {MARKER_ATTRIBUTE}='{target_id}' not found.")

    op = mutation.op
    summary = f"{op}:{target_id}"
    if op in {MutationOp.APPEND_CHILD, MutationOp.PREPEND_CHILD, MutationOp.SET_TEXT}:
        if node.self_closing:
            raise PatchApplyError(f"{op} requires a non-void target element.")

    match op:
        case MutationOp.APPEND_CHILD:
            at = node.content_end
            patched = document[:at] + (mutation.html_fragment or "") + document[at:]
        case MutationOp.PREPEND_CHILD:
            at = node.content_start
            patched = document[:at] + (mutation.html_fragment or "") + document[at:]
        case MutationOp.REPLACE_NODE:
            patched = (
                document[: node.node_start]
                + (mutation.html_fragment or "")
                + document[node.node_end :]
            )
        case MutationOp.REMOVE_NODE:
            patched = document[: node.node_start] + document[node.node_end :]
        case MutationOp.SET_TEXT:
            patched = (
                document[: node.content_start]
                + escape_html_text(mutation.text or "")
                + document[node.content_end :]
            )
        case MutationOp.SET_ATTR:
            open_tag = document[node.open_start : node.open_end]
            updated = set_attribute(
                open_tag, mutation.attr_name or "", mutation.attr_value or ""
            )
            patched = document[: node.open_start] + updated + document[node.open_end :]
            summary = f"{summary}.{mutation.attr_name}"
        case _:
            raise PatchApplyError(f"Unsupported patch op '{op}'.")

    return PatchOutcome(document=patched, summary=summary)
