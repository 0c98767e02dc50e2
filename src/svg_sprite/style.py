"""Promotion of inline ``style`` declarations to presentation attributes."""

import re
from dataclasses import dataclass
from pathlib import Path
from xml.etree import ElementTree as ET

from .diagnostics import Diagnostics
from .utils import is_element

# CSS properties promoted to presentation attributes; display stays inline
PRESENTATION_ATTRIBUTES = frozenset(
    [
        "alignment-baseline",
        "baseline-shift",
        "clip",
        "clip-path",
        "clip-rule",
        "color",
        "color-interpolation",
        "color-interpolation-filters",
        "color-profile",
        "color-rendering",
        "cursor",
        "direction",
        "dominant-baseline",
        "enable-background",
        "fill",
        "fill-opacity",
        "fill-rule",
        "filter",
        "flood-color",
        "flood-opacity",
        "font-family",
        "font-size",
        "font-size-adjust",
        "font-stretch",
        "font-style",
        "font-variant",
        "font-weight",
        "glyph-orientation-horizontal",
        "glyph-orientation-vertical",
        "image-rendering",
        "kerning",
        "letter-spacing",
        "lighting-color",
        "marker-end",
        "marker-mid",
        "marker-start",
        "mask",
        "opacity",
        "overflow",
        "paint-order",
        "pointer-events",
        "shape-rendering",
        "stop-color",
        "stop-opacity",
        "stroke",
        "stroke-dasharray",
        "stroke-dashoffset",
        "stroke-linecap",
        "stroke-linejoin",
        "stroke-miterlimit",
        "stroke-opacity",
        "stroke-width",
        "text-anchor",
        "text-decoration",
        "text-rendering",
        "unicode-bidi",
        "vector-effect",
        "visibility",
        "word-spacing",
        "writing-mode",
    ]
)

# Values that can load or run something outside the icon
SUSPICIOUS_VALUE_RE = re.compile(
    r"""expression\s*\(|javascript:|@import|url\(\s*['"]?(?!#)""",
    re.IGNORECASE,
)

IMPORTANT_RE = re.compile(r"!\s*important\s*$", re.IGNORECASE)


@dataclass(frozen=True)
class StyleDeclaration:
    """A single ``property: value`` pair from a style attribute."""

    property: str
    value: str

    @property
    def important(self) -> bool:
        return IMPORTANT_RE.search(self.value) is not None

    def __str__(self) -> str:
        return f"{self.property}:{self.value}"


def split_style(text: str) -> list[str]:
    """Split a style attribute into declaration chunks.

    Splits on ``;`` except inside quotes or after a backslash. Empty chunks
    are dropped.

    Example:
        >>> split_style('fill: red; font-family: "a;b";')
        ['fill: red', 'font-family: "a;b"']
    """
    chunks: list[str] = []
    current: list[str] = []
    quote: str | None = None
    escaped = False
    for char in text:
        if escaped:
            current.append(char)
            escaped = False
            continue
        if char == "\\":
            current.append(char)
            escaped = True
            continue
        if quote is not None:
            if char == quote:
                quote = None
        elif char in ("'", '"'):
            quote = char
        elif char == ";":
            chunks.append("".join(current))
            current = []
            continue
        current.append(char)
    chunks.append("".join(current))
    return [chunk.strip() for chunk in chunks if chunk.strip()]


def parse_style(text: str) -> tuple[list[StyleDeclaration], list[str]]:
    """Parse a style attribute into ordered declarations.

    Args:
        text: Raw ``style`` attribute value.

    Returns:
        Tuple of (declarations in source order, malformed chunks).
    """
    declarations: list[StyleDeclaration] = []
    malformed: list[str] = []
    for chunk in split_style(text):
        prop, sep, value = chunk.partition(":")
        prop = prop.strip().lower()
        value = value.strip()
        if not sep or not prop or not value:
            malformed.append(chunk)
            continue
        declarations.append(StyleDeclaration(prop, value))
    return declarations, malformed


def collapse_declarations(
    declarations: list[StyleDeclaration],
) -> dict[str, StyleDeclaration]:
    """Apply last-write-wins per property, honouring ``!important``.

    The result keeps the position of each property's first occurrence.
    """
    result: dict[str, StyleDeclaration] = {}
    for decl in declarations:
        current = result.get(decl.property)
        if current is not None and current.important and not decl.important:
            continue
        result[decl.property] = decl
    return result


def inline_element_style(
    element: ET.Element,
    diagnostics: Diagnostics,
    source: Path | None = None,
) -> int:
    """Promote one element's inline style to attributes.

    Args:
        element: Element carrying a ``style`` attribute.
        diagnostics: Collector for findings.
        source: Source file for diagnostics.

    Returns:
        Number of declarations promoted.
    """
    raw = element.get("style")
    if raw is None:
        return 0

    declarations, malformed = parse_style(raw)
    for chunk in malformed:
        diagnostics.add(
            "invalid-style", source, f"Skipped malformed style {chunk!r} on <{element.tag}>"
        )

    explicit = set(element.attrib) - {"style"}
    promoted: dict[str, str] = {}
    kept: list[StyleDeclaration] = []
    unsupported: list[str] = []

    for decl in collapse_declarations(declarations).values():
        if SUSPICIOUS_VALUE_RE.search(decl.value):
            diagnostics.add(
                "suspicious-style",
                source,
                f"Style value {str(decl)!r} on <{element.tag}> may load external content",
            )
        if decl.property not in PRESENTATION_ATTRIBUTES:
            unsupported.append(decl.property)
            kept.append(decl)
        elif decl.property in explicit:
            diagnostics.add(
                "suspicious-style",
                source,
                f"Style {str(decl)!r} on <{element.tag}> overrides the "
                f"{decl.property}={element.get(decl.property)!r} attribute",
            )
            kept.append(decl)
        elif decl.important:
            kept.append(decl)
        else:
            promoted[decl.property] = decl.value

    if unsupported:
        diagnostics.add(
            "unsupported-style",
            source,
            f"Kept inline style on <{element.tag}>: {', '.join(unsupported)}",
        )

    fixed: dict[str, str] = {}
    for key, value in element.attrib.items():
        if key != "style":
            fixed[key] = value
        elif kept:
            fixed[key] = ";".join(str(decl) for decl in kept)
    fixed.update(promoted)
    element.attrib.clear()
    element.attrib.update(fixed)
    return len(promoted)


def inline_styles(
    root: ET.Element,
    diagnostics: Diagnostics,
    source: Path | None = None,
) -> int:
    """Promote inline styles throughout a tree.

    Returns:
        Total number of declarations promoted.
    """
    promoted = 0
    for elem in root.iter():
        if is_element(elem) and "style" in elem.attrib:
            promoted += inline_element_style(elem, diagnostics, source)
    return promoted
