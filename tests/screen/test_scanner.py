"""Tests for the data-ui-id tag scanner."""

from __future__ import annotations

import pytest

from screen_stack.screen.scanner import extract_attribute, list_markers, locate

LIST_DOCUMENT = (
    '<section data-ui-id="root"><div data-ui-id="list"><p>One</p></div></section>'
)


def _content(document: str, target_id: str) -> str:
    node = locate(document, target_id)
    assert node is not None
    return document[node.content_start : node.content_end]


class TestLocate:
    """Test node resolution by marker."""

    def test_resolves_nested_node_spans(self) -> None:
        """Node and content spans cover the element and its children."""
        node = locate(LIST_DOCUMENT, "list")

        assert node is not None
        assert node.name == "div"
        assert node.self_closing is False
        assert LIST_DOCUMENT[node.node_start : node.node_end] == (
            '<div data-ui-id="list"><p>One</p></div>'
        )
        assert LIST_DOCUMENT[node.content_start : node.content_end] == "<p>One</p>"
        assert LIST_DOCUMENT[node.open_start : node.open_end] == '<div data-ui-id="list">'

    def test_resolves_outer_node(self) -> None:
        """The root element spans the whole document."""
        node = locate(LIST_DOCUMENT, "root")

        assert node is not None
        assert (node.node_start, node.node_end) == (0, len(LIST_DOCUMENT))

    def test_missing_target_returns_none(self) -> None:
        """Unknown markers do not resolve."""
        assert locate(LIST_DOCUMENT, "nope") is None

    @pytest.mark.parametrize("target_id", ["", "   "])
    def test_blank_target_returns_none(self, target_id: str) -> None:
        """Blank targets never resolve."""
        assert locate(LIST_DOCUMENT, target_id) is None

    def test_target_is_trimmed(self) -> None:
        """Surrounding whitespace in the target id is ignored."""
        assert _content(LIST_DOCUMENT, "  list ") == "<p>One</p>"

    def test_void_element_resolves_as_self_closing(self) -> None:
        """Void elements resolve immediately with an empty content span."""
        document = '<div><img data-ui-id="hero" src="a.png"><br></div>'
        node = locate(document, "hero")

        assert node is not None
        assert node.self_closing is True
        assert node.content_start == node.content_end == node.node_end
        assert document[node.node_start : node.node_end] == (
            '<img data-ui-id="hero" src="a.png">'
        )

    def test_explicit_self_close_syntax(self) -> None:
        """Non-void tags written with ``/>`` are self-closing."""
        node = locate('<div><widget data-ui-id="w" /></div>', "w")

        assert node is not None
        assert node.self_closing is True

    def test_comments_are_skipped(self) -> None:
        """Markers inside comments are not addressable."""
        document = '<!-- <div data-ui-id="x">old</div> --><div data-ui-id="x">real</div>'

        assert _content(document, "x") == "real"

    def test_opaque_body_is_not_scanned(self) -> None:
        """Markup inside script bodies is skipped as one unit."""
        document = (
            '<div data-ui-id="a"><script>var s = "<div data-ui-id=\'b\'>x</div>";'
            "</script></div>"
        )

        assert locate(document, "b") is None
        assert _content(document, "a").startswith("<script>")

    def test_marked_opaque_element_resolves(self) -> None:
        """A marked style/script element resolves to its raw body."""
        document = '<style data-ui-id="css">a > b { color: red }</style><p>after</p>'

        assert _content(document, "css") == "a > b { color: red }"

    def test_quoted_angle_bracket_in_attribute(self) -> None:
        """A ``>`` inside a quoted attribute does not end the tag."""
        assert _content('<div data-ui-id="q" title="a>b">text</div>', "q") == "text"

    def test_single_quoted_and_unquoted_markers(self) -> None:
        """Markers may use single quotes or no quotes."""
        document = "<div data-ui-id='sq'>a</div><div data-ui-id=uq>b</div>"

        assert _content(document, "sq") == "a"
        assert _content(document, "uq") == "b"

    def test_tag_names_are_case_insensitive(self) -> None:
        """Upper-case open tags match lower-case close tags."""
        assert _content('<DIV data-ui-id="c">x</div>', "c") == "x"

    def test_inner_duplicate_closes_first(self) -> None:
        """With nested duplicates, the first fully closed node wins."""
        document = '<div data-ui-id="dup"><span data-ui-id="dup">inner</span></div>'

        assert _content(document, "dup") == "inner"

    def test_first_sibling_duplicate_wins(self) -> None:
        """With sibling duplicates, the earlier node wins."""
        document = '<p data-ui-id="d">first</p><p data-ui-id="d">second</p>'

        assert _content(document, "d") == "first"

    def test_unclosed_children_are_discarded(self) -> None:
        """A close tag pops past unclosed children to its own opener."""
        assert _content('<div data-ui-id="x"><span>text</div>', "x") == "<span>text"


class TestAttributes:
    """Test attribute extraction helpers."""

    def test_extract_attribute_is_case_insensitive(self) -> None:
        """Attribute names match regardless of case."""
        assert extract_attribute(' DATA-UI-ID = " spaced " ', "data-ui-id") == "spaced"

    def test_extract_missing_attribute(self) -> None:
        """Missing attributes yield an empty string."""
        assert extract_attribute(' class="x"', "data-ui-id") == ""

    def test_list_markers_in_document_order(self) -> None:
        """Outline lists marked start tags only."""
        document = LIST_DOCUMENT + '<img data-ui-id="logo"><script data-ui-id="js">1</script>'

        assert list_markers(document) == [
            {"id": "root", "tag": "section"},
            {"id": "list", "tag": "div"},
            {"id": "logo", "tag": "img"},
            {"id": "js", "tag": "script"},
        ]
