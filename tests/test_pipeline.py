"""Tests for svg_sprite.pipeline module."""

import pytest
from pathlib import Path

import sys
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from svg_sprite.config import SpriteOptions
from svg_sprite.diagnostics import Diagnostics, ParseError, SpriteError, ValidationError
from svg_sprite.parse import parse_svg_bytes
from svg_sprite.pipeline import (
    SourceIcon,
    SpriteReport,
    build_sprite,
    check_content,
    find_scripting,
    format_sprite_report,
    normalize_icon,
    serialize_icon,
)

PLAIN = b'<svg viewBox="0 0 24 24"><path d="M0 0h24v24H0z" /></svg>'

EDITOR_EXPORT = b"""<?xml version="1.0" encoding="UTF-8" standalone="no"?>
<!-- Generator: Some Editor 1.0 -->
<!DOCTYPE svg PUBLIC "-//W3C//DTD SVG 1.1//EN" "http://www.w3.org/Graphics/SVG/1.1/DTD/svg11.dtd">
<SVG version="1.1" xmlns="http://www.w3.org/2000/svg" width="24px" height="24px">
  <!-- layer -->
  <G>
    <Title></Title>
    <Path D="M0 0h24v24H0z" Style="fill:#000;fill-rule:evenodd"/>
  </G>
  <Defs/>
</SVG>
"""


def source(name: str, data: bytes = PLAIN) -> SourceIcon:
    return SourceIcon(Path(name), data)


class TestNormalizeIcon:
    """Tests for normalize_icon function."""

    def test_editor_export_cleaned(self):
        icon = normalize_icon(source("export.svg", EDITOR_EXPORT))
        assert serialize_icon(icon) == (
            b'<svg version="1.1" xmlns="http://www.w3.org/2000/svg" viewBox="0 0 24 24">'
            b'<g><path d="M0 0h24v24H0z" fill="#000" fill-rule="evenodd" /></g></svg>'
        )
        assert str(icon.viewbox) == "0 0 24 24"
        assert icon.icon_id is None

    def test_idempotent(self):
        first = serialize_icon(normalize_icon(source("a.svg", EDITOR_EXPORT)))
        second = serialize_icon(normalize_icon(source("a.svg", first)))
        assert first == second

    def test_canonical_input_unchanged(self):
        assert serialize_icon(normalize_icon(source("a.svg", PLAIN))) == PLAIN

    def test_wrong_root(self):
        with pytest.raises(ParseError, match="expected <svg>"):
            normalize_icon(source("a.svg", b"<html><body/></html>"))

    def test_malformed(self):
        with pytest.raises(ParseError):
            normalize_icon(source("a.svg", b"<svg><path></svg>"))

    def test_missing_viewbox(self):
        with pytest.raises(ValidationError):
            normalize_icon(source("a.svg", b"<svg><path /></svg>"))

    def test_no_content(self):
        with pytest.raises(ValidationError, match="no content"):
            normalize_icon(source("a.svg", b'<svg viewBox="0 0 1 1"><g><defs /></g></svg>'))

    def test_text_only_content_kept(self):
        icon = normalize_icon(source("a.svg", b'<svg viewBox="0 0 1 1">A</svg>'))
        assert icon.root.text == "A"

    def test_invalid_viewbox_warning(self):
        diagnostics = Diagnostics()
        data = b'<svg viewBox="1 1 24 24" width="24" height="24"><path /></svg>'
        normalize_icon(source("a.svg", data), diagnostics)
        assert [d.kind for d in diagnostics] == ["invalid-viewbox"]

    def test_custom_drop_set(self):
        data = b'<svg viewBox="0 0 1 1"><g /><path /></svg>'
        icon = normalize_icon(source("a.svg", data), drop_if_empty=frozenset(["defs"]))
        assert [child.tag for child in icon.root] == ["g", "path"]

    @pytest.mark.parametrize(
        "body,found",
        [
            (b"<script>alert(1)</script><path />", "<script> tags"),
            (b'<path onclick="evil()" />', "inline scripts"),
            (b'<a href="javascript:evil()"><path /></a>', "script links"),
        ],
    )
    def test_scripting_rejected(self, body, found):
        data = b'<svg viewBox="0 0 1 1">' + body + b"</svg>"
        with pytest.raises(ValidationError, match=found):
            normalize_icon(source("a.svg", data))


class TestCheckContent:
    """Tests for check_content function."""

    def check(self, raw: bytes) -> Diagnostics:
        diagnostics = Diagnostics()
        check_content(parse_svg_bytes(raw), diagnostics, Path("a.svg"))
        return diagnostics

    def test_clean(self):
        assert len(self.check(PLAIN)) == 0

    def test_single_summary(self):
        diagnostics = self.check(
            b'<svg><style>.a{}</style><path class="a" /><path style="foo:bar" /></svg>'
        )
        assert len(diagnostics) == 1
        detail = diagnostics.of_kind("suspicious-content")[0].detail
        assert detail == "Contains <style> tags, classes and inline styles"


class TestFindScripting:
    """Tests for find_scripting function."""

    def test_clean(self):
        assert find_scripting(parse_svg_bytes(PLAIN)) == []

    def test_all_kinds(self):
        root = parse_svg_bytes(
            b'<svg><script>x()</script><path onclick="x()" />'
            b'<a href=" JavaScript:alert(1)"><path /></a></svg>'
        )
        assert find_scripting(root) == ["<script> tags", "inline scripts", "script links"]

    def test_xlink_javascript_link(self):
        root = parse_svg_bytes(b'<svg><a xlink:href="javascript:x()"><path /></a></svg>')
        assert find_scripting(root) == ["script links"]

    def test_only_attribute_named_on(self):
        assert find_scripting(parse_svg_bytes(b'<svg><path on="1" /></svg>')) == []

    def test_fragment_link_allowed(self):
        assert find_scripting(parse_svg_bytes(b'<svg><a href="#x"><path /></a></svg>')) == []


class TestBuildSprite:
    """Tests for build_sprite function."""

    def test_basic_map(self):
        report = build_sprite([source("home.svg"), source("user.svg")])
        assert not report.has_errors
        assert report.sprite.ids == ["i-home", "i-user"]
        assert report.symbols == [("i-home", 24.0, 24.0), ("i-user", 24.0, 24.0)]
        assert report.to_bytes().startswith(b'<svg xmlns="http://www.w3.org/2000/svg"')

    def test_accepts_path_byte_pairs(self):
        report = build_sprite([("icons/home.svg", PLAIN)])
        assert report.sprite.ids == ["i-home"]

    def test_scripted_icon_excluded(self):
        scripted = b'<svg viewBox="0 0 1 1"><script>alert(1)</script><path onclick="evil()" /></svg>'
        report = build_sprite([source("x.svg", scripted), source("home.svg")])
        assert report.sprite.ids == ["i-home"]
        assert b"script" not in report.to_bytes()
        assert b"onclick" not in report.to_bytes()
        error = report.diagnostics.errors[0]
        assert (error.kind, error.source) == ("validation-error", Path("x.svg"))
        assert error.detail == "Icon contains <script> tags and inline scripts"

    def test_report_icons_keep_content(self):
        report = build_sprite([source("home.svg")])
        assert serialize_icon(report.icons[0]) == PLAIN
        assert report.icons[0].icon_id == "i-home"

    def test_symbol_count_matches_survivors(self):
        sources = [
            source("a.svg"),
            source("broken.svg", b"<svg><g></svg>"),
            source("b.svg"),
            source("nobox.svg", b"<svg><path /></svg>"),
            source("c.svg"),
        ]
        report = build_sprite(sources)
        assert report.source_count == 5
        assert len(report.sprite) == 3
        assert len(report.sprite.root) == 3
        assert report.error_count == 2
        errors = report.diagnostics.errors
        assert [d.kind for d in errors] == ["parse-error", "validation-error"]
        assert errors[0].detail.startswith("Unable to parse: ")
        assert errors[0].source == Path("broken.svg")

    def test_order_follows_input(self):
        names = ["zeta.svg", "alpha.svg", "mid.svg"]
        report = build_sprite([source(name) for name in names])
        assert report.sprite.ids == ["i-zeta", "i-alpha", "i-mid"]

    def test_ids_unique(self):
        names = ["a/icon.svg", "b/icon.svg", "Icon-Big.svg", "icon2.svg"]
        report = build_sprite([source(name) for name in names])
        ids = report.sprite.ids
        assert ids == ["i-icon", "i-icon-2", "i-icon-3", "i-icon2"]
        assert len(report.diagnostics.of_kind("duplicate-identifier")) == 2
        assert report.error_count == 0

    def test_no_survivors(self):
        report = build_sprite([source("bad.svg", b"not xml")])
        assert report.has_errors
        assert report.sprite is None
        assert report.symbols == []
        with pytest.raises(SpriteError):
            report.to_bytes()

    def test_empty_input(self):
        report = build_sprite([])
        assert report.has_errors
        assert report.source_count == 0

    def test_options_applied(self):
        options = SpriteOptions(prefix="icon", map_id="sprites", hidden=True)
        report = build_sprite([source("home.svg")], options)
        root = report.sprite.root
        assert root.get("id") == "sprites"
        assert root.get("hidden") == "hidden"
        assert root[0].get("id") == "icon-home"

    def test_workers_do_not_change_output(self):
        sources = [source(f"icon{n}.svg", EDITOR_EXPORT) for n in range(12)]
        sources.insert(5, source("broken.svg", b"<svg"))
        serial = build_sprite(sources)
        threaded = build_sprite(sources, SpriteOptions(workers=4))
        assert serial.to_bytes() == threaded.to_bytes()
        assert [str(d) for d in serial.diagnostics] == [str(d) for d in threaded.diagnostics]

    def test_inner_id_warnings(self):
        data = b'<svg viewBox="0 0 1 1"><path id="i-b" d="M0 0" /></svg>'
        report = build_sprite([source("a.svg", data), source("b.svg")])
        assert len(report.diagnostics.of_kind("suspicious-id")) == 1
        assert not report.has_errors


class TestFormatSpriteReport:
    """Tests for format_sprite_report function."""

    def test_success(self):
        data = b'<svg viewBox="0 0 32 16"><path /></svg>'
        report = build_sprite([source("wide.svg", data), source("bad.svg", b"<svg")])
        text = format_sprite_report(report)
        assert "[ERROR] bad.svg: Unable to parse:" in text
        assert "i-wide  { aspect-ratio: 32 / 16; }" in text
        assert "Sources: 2" in text
        assert "Symbols: 1" in text
        assert "Errors: 1" in text
        assert "NO ICONS SURVIVED" not in text

    def test_warning_lines(self):
        data = b'<svg viewBox="0 0 1 1"><path class="x" /></svg>'
        text = format_sprite_report(build_sprite([source("a.svg", data)]))
        assert "[WARNING] a.svg: Contains classes" in text
        assert "Warnings: 1" in text

    def test_failure(self):
        text = format_sprite_report(SpriteReport(source_count=1))
        assert "Symbols: 0" in text
        assert "*** NO ICONS SURVIVED" in text
