"""Single-pass tag scanner that resolves ``data-ui-id`` markers to node spans.

The scanner walks start/end tags with an explicit stack of open elements. It
does not validate well-formedness; unbalanced markup is traversed on a best
effort basis.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterator

MARKER_ATTRIBUTE = "data-ui-id"

VOID_ELEMENTS = frozenset(
    {
        "area",
        "base",
        "br",
        "col",
        "embed",
        "hr",
        "img",
        "input",
        "link",
        "meta",
        "param",
        "source",
        "track",
        "wbr",
    }
)
OPAQUE_ELEMENTS = frozenset({"script", "style"})

_TAG_NAME_RE = re.compile(r"^<\s*(/?)\s*([A-Za-z][A-Za-z0-9:-]*)")
_SELF_CLOSE_RE = re.compile(r"/\s*>$")


@dataclass(frozen=True, slots=True)
class Tag:
    """A start or end tag. ``end`` is the index of the closing ``>``."""

    start: int
    end: int
    name: str
    closing: bool = False
    self_closing: bool = False
    attributes: str = ""
    marker: str = ""
    # Start of the matching close tag for script/style bodies, -1 otherwise.
    opaque_close: int = -1


@dataclass(frozen=True, slots=True)
class NodeSpan:
    """Half-open spans of a resolved node within the scanned document."""

    target_id: str
    name: str
    self_closing: bool
    open_start: int
    open_end: int
    node_start: int
    node_end: int
    content_start: int
    content_end: int


def extract_attribute(attributes: str, name: str) -> str:
    """Return the trimmed value of ``name`` within a tag's attribute text."""
    pattern = re.compile(
        rf"\b{re.escape(name)}\s*=\s*(?:\"([^\"]*)\"|'([^']*)'|([^\s\"'=<>`]+))",
        re.IGNORECASE,
    )
    match = pattern.search(attributes or "")
    if not match:
        return ""
    value = next((group for group in match.groups() if group is not None), "")
    return value.strip()


def find_tag_end(source: str, start: int) -> int:
    """Return the index of the ``>`` closing the tag at ``start``, or -1.

    Quoted attribute values may contain ``>``.
    """
    quote = ""
    for index in range(start + 1, len(source)):
        char = source[index]
        if quote:
            if char == quote and source[index - 1] != "\\":
                quote = ""
            continue
        if char in {'"', "'"}:
            quote = char
            continue
        if char == ">":
            return index
    return -1


def iter_tags(source: str) -> Iterator[Tag]:
    """Yield element tags left to right.

    Comments and other markup (doctype, stray ``<``) are skipped. The body of a
    script/style element is skipped as one unit when its close tag exists; the
    close tag itself is not yielded.
    """
    lower = source.lower()
    cursor = 0
    length = len(source)
    while cursor < length:
        start = source.find("<", cursor)
        if start < 0:
            return
        if source.startswith("<!--", start):
            comment_end = source.find("-->", start + 4)
            cursor = comment_end + 3 if comment_end >= 0 else length
            continue
        end = find_tag_end(source, start)
        if end < 0:
            cursor = start + 1
            continue
        cursor = end + 1
        raw = source[start : end + 1]
        name_match = _TAG_NAME_RE.match(raw)
        if not name_match:
            continue

        closing = bool(name_match.group(1))
        name = name_match.group(2).lower()
        if closing:
            yield Tag(start=start, end=end, name=name, closing=True)
            continue

        attributes = raw[name_match.end() : -1]
        self_closing = name in VOID_ELEMENTS or bool(_SELF_CLOSE_RE.search(raw))
        opaque_close = -1
        if not self_closing and name in OPAQUE_ELEMENTS:
            opaque_close = lower.find(f"</{name}>", end + 1)
        yield Tag(
            start=start,
            end=end,
            name=name,
            self_closing=self_closing,
            attributes=attributes,
            marker=extract_attribute(attributes, MARKER_ATTRIBUTE),
            opaque_close=opaque_close,
        )
        if opaque_close >= 0:
            cursor = opaque_close + len(name) + 3


def _pop_matching(stack: list[Tag], name: str) -> Tag | None:
    while stack:
        candidate = stack.pop()
        if candidate.name == name:
            return candidate
    return None


def locate(document: str, target_id: str) -> NodeSpan | None:
    """Resolve the first fully closed element whose marker equals ``target_id``."""
    target = (target_id or "").strip()
    if not target:
        return None

    stack: list[Tag] = []
    for tag in iter_tags(document or ""):
        if tag.closing:
            opener = _pop_matching(stack, tag.name)
            if opener is None or opener.marker != target:
                continue
            return NodeSpan(
                target_id=target,
                name=opener.name,
                self_closing=False,
                open_start=opener.start,
                open_end=opener.end + 1,
                node_start=opener.start,
                node_end=tag.end + 1,
                content_start=opener.end + 1,
                content_end=tag.start,
            )

        if tag.self_closing:
            if tag.marker != target:
                continue
            return NodeSpan(
                target_id=target,
                name=tag.name,
                self_closing=True,
                open_start=tag.start,
                open_end=tag.end + 1,
                node_start=tag.start,
                node_end=tag.end + 1,
                content_start=tag.end + 1,
                content_end=tag.end + 1,
            )

        if tag.opaque_close >= 0:
            if tag.marker != target:
                continue
            return NodeSpan(
                target_id=target,
                name=tag.name,
                self_closing=False,
                open_start=tag.start,
                open_end=tag.end + 1,
                node_start=tag.start,
                node_end=tag.opaque_close + len(tag.name) + 3,
                content_start=tag.end + 1,
                content_end=tag.opaque_close,
            )

        stack.append(tag)
    return None


def list_markers(document: str) -> list[dict[str, str]]:
    """Return every marked start tag in document order as ``{id, tag}`` pairs."""
    return [
        {"id": tag.marker, "tag": tag.name}
        for tag in iter_tags(document or "")
        if not tag.closing and tag.marker
    ]
