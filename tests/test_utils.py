"""Tests for svg_sprite.utils module."""

import pytest
from pathlib import Path
from xml.etree import ElementTree as ET

import sys
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from svg_sprite.parse import parse_svg_bytes
from svg_sprite.utils import (
    collect_ids,
    format_number,
    is_element,
    iter_elements,
    referenced_ids,
    serialize,
)


class TestIsElement:
    """Tests for is_element and iter_elements functions."""

    def test_element(self):
        assert is_element(ET.Element("path")) is True

    def test_comment(self):
        assert is_element(ET.Comment("x")) is False

    def test_processing_instruction(self):
        assert is_element(ET.ProcessingInstruction("app", "x")) is False

    def test_iter_skips_non_elements(self):
        root = parse_svg_bytes(b"<svg><!-- c --><g><?pi x?><path/></g></svg>")
        assert [elem.tag for elem in iter_elements(root)] == ["svg", "g", "path"]


class TestReferencedIds:
    """Tests for referenced_ids function."""

    def test_url_references(self):
        root = parse_svg_bytes(
            b"<svg><path fill=\"url(#a)\" mask=\"url('#b')\" clip-path='url(\"#c\")'/></svg>"
        )
        assert referenced_ids(root) == {"a", "b", "c"}

    def test_href_references(self):
        root = parse_svg_bytes(b'<svg><use href="#a"/><use xlink:href="#b"/></svg>')
        assert referenced_ids(root) == {"a", "b"}

    def test_style_references(self):
        root = parse_svg_bytes(b'<svg><path style="fill:url(#g);stroke:url( #h )"/></svg>')
        assert referenced_ids(root) == {"g", "h"}

    def test_external_references_ignored(self):
        root = parse_svg_bytes(b'<svg><use href="other.svg#a"/><path fill="url(x.svg#b)"/></svg>')
        assert referenced_ids(root) == set()

    def test_no_references(self):
        assert referenced_ids(parse_svg_bytes(b"<svg><path/></svg>")) == set()


class TestCollectIds:
    """Tests for collect_ids function."""

    def test_document_order(self):
        root = parse_svg_bytes(b'<svg><g id="b"><path id="a"/></g><path id="c"/></svg>')
        assert collect_ids(root) == ["b", "a", "c"]

    def test_root_id_excluded(self):
        root = parse_svg_bytes(b'<svg id="root"><path id="a"/></svg>')
        assert collect_ids(root) == ["a"]

    def test_repeats_kept(self):
        root = parse_svg_bytes(b'<svg><path id="a"/><path id="a"/></svg>')
        assert collect_ids(root) == ["a", "a"]


class TestFormatNumber:
    """Tests for format_number function."""

    @pytest.mark.parametrize(
        "value,expected",
        [(24.0, "24"), (0.0, "0"), (-3.0, "-3"), (16.5, "16.5"), (0.1, "0.1"), (24, "24")],
    )
    def test_values(self, value, expected):
        assert format_number(value) == expected


class TestSerialize:
    """Tests for serialize function."""

    def test_no_declaration(self):
        assert serialize(ET.Element("svg")) == "<svg />"

    def test_attribute_escaping(self):
        elem = ET.Element("text", {"data-x": 'a"<b>&'})
        elem.text = "1 < 2"
        assert serialize(elem) == '<text data-x="a&quot;&lt;b&gt;&amp;">1 &lt; 2</text>'

    def test_non_ascii_kept(self):
        elem = ET.Element("title")
        elem.text = "café"
        assert serialize(elem) == "<title>café</title>"
