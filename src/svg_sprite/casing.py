"""Canonical casing for SVG tag and attribute names.

SVG is case-sensitive, but hand-edited and exported files regularly contain
``viewbox``, ``SVG`` or ``XLink:href``. Names with a known canonical form are
rewritten to it; anything not in the tables is left alone.
"""

from xml.etree import ElementTree as ET

from .utils import is_element


def _table(names: list[str]) -> dict[str, str]:
    return {name.lower(): name for name in names}


TAG_NAMES = _table(
    [
        "a",
        "altGlyph",
        "altGlyphDef",
        "altGlyphItem",
        "animate",
        "animateColor",
        "animateMotion",
        "animateTransform",
        "circle",
        "clipPath",
        "color-profile",
        "cursor",
        "defs",
        "desc",
        "ellipse",
        "feBlend",
        "feColorMatrix",
        "feComponentTransfer",
        "feComposite",
        "feConvolveMatrix",
        "feDiffuseLighting",
        "feDisplacementMap",
        "feDistantLight",
        "feDropShadow",
        "feFlood",
        "feFuncA",
        "feFuncB",
        "feFuncG",
        "feFuncR",
        "feGaussianBlur",
        "feImage",
        "feMerge",
        "feMergeNode",
        "feMorphology",
        "feOffset",
        "fePointLight",
        "feSpecularLighting",
        "feSpotLight",
        "feTile",
        "feTurbulence",
        "filter",
        "font",
        "font-face",
        "font-face-format",
        "font-face-name",
        "font-face-src",
        "font-face-uri",
        "foreignObject",
        "g",
        "glyph",
        "glyphRef",
        "hkern",
        "image",
        "line",
        "linearGradient",
        "marker",
        "mask",
        "metadata",
        "missing-glyph",
        "mpath",
        "path",
        "pattern",
        "polygon",
        "polyline",
        "radialGradient",
        "rect",
        "script",
        "set",
        "stop",
        "style",
        "svg",
        "switch",
        "symbol",
        "text",
        "textPath",
        "title",
        "tref",
        "tspan",
        "use",
        "view",
        "vkern",
    ]
)

ATTRIBUTE_NAMES = _table(
    [
        # Core, styling and conditional processing
        "class",
        "id",
        "lang",
        "style",
        "tabindex",
        "requiredExtensions",
        "requiredFeatures",
        "systemLanguage",
        "externalResourcesRequired",
        "xml:base",
        "xml:lang",
        "xml:space",
        "xmlns",
        "xmlns:xlink",
        # XLink
        "xlink:actuate",
        "xlink:arcrole",
        "xlink:href",
        "xlink:role",
        "xlink:show",
        "xlink:title",
        "xlink:type",
        # Geometry and structure
        "baseProfile",
        "contentScriptType",
        "contentStyleType",
        "cx",
        "cy",
        "d",
        "dx",
        "dy",
        "fr",
        "fx",
        "fy",
        "height",
        "href",
        "pathLength",
        "points",
        "preserveAspectRatio",
        "r",
        "rx",
        "ry",
        "transform",
        "version",
        "viewBox",
        "width",
        "x",
        "x1",
        "x2",
        "y",
        "y1",
        "y2",
        "zoomAndPan",
        # Gradients, patterns, clipping, masking, markers
        "clipPathUnits",
        "gradientTransform",
        "gradientUnits",
        "markerHeight",
        "markerUnits",
        "markerWidth",
        "maskContentUnits",
        "maskUnits",
        "offset",
        "orient",
        "patternContentUnits",
        "patternTransform",
        "patternUnits",
        "refX",
        "refY",
        "spreadMethod",
        # Text
        "glyphRef",
        "lengthAdjust",
        "method",
        "rotate",
        "side",
        "spacing",
        "startOffset",
        "textLength",
        # Filters
        "amplitude",
        "azimuth",
        "baseFrequency",
        "bias",
        "diffuseConstant",
        "divisor",
        "edgeMode",
        "elevation",
        "exponent",
        "filterRes",
        "filterUnits",
        "in",
        "in2",
        "intercept",
        "k1",
        "k2",
        "k3",
        "k4",
        "kernelMatrix",
        "kernelUnitLength",
        "limitingConeAngle",
        "mode",
        "numOctaves",
        "operator",
        "order",
        "pointsAtX",
        "pointsAtY",
        "pointsAtZ",
        "preserveAlpha",
        "primitiveUnits",
        "radius",
        "result",
        "scale",
        "seed",
        "slope",
        "specularConstant",
        "specularExponent",
        "stdDeviation",
        "stitchTiles",
        "surfaceScale",
        "tableValues",
        "targetX",
        "targetY",
        "type",
        "values",
        "xChannelSelector",
        "yChannelSelector",
        "z",
        # Animation
        "accumulate",
        "additive",
        "attributeName",
        "attributeType",
        "begin",
        "by",
        "calcMode",
        "dur",
        "end",
        "from",
        "keyPoints",
        "keySplines",
        "keyTimes",
        "max",
        "min",
        "path",
        "repeatCount",
        "repeatDur",
        "restart",
        "to",
        # Presentation attributes
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
        "display",
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
        # Accessibility
        "aria-hidden",
        "aria-label",
        "aria-labelledby",
        "focusable",
        "role",
    ]
)


def normalize_tag_case(name: str) -> str:
    """Return the canonical casing of a tag name, or the name unchanged."""
    return TAG_NAMES.get(name.lower(), name)


def normalize_attribute_case(name: str) -> str:
    """Return the canonical casing of an attribute name, or the name unchanged.

    Example:
        >>> normalize_attribute_case("VIEWBOX")
        'viewBox'
        >>> normalize_attribute_case("data-Foo")
        'data-Foo'
    """
    return ATTRIBUTE_NAMES.get(name.lower(), name)


def _correct_attributes(element: ET.Element) -> int:
    changed = 0
    fixed: dict[str, str] = {}
    for key, value in element.attrib.items():
        canonical = normalize_attribute_case(key)
        if canonical == key:
            fixed[key] = value
            continue
        changed += 1
        # An explicitly canonical attribute beats a miscased duplicate
        if canonical in element.attrib:
            continue
        fixed[canonical] = value
    if changed:
        element.attrib.clear()
        element.attrib.update(fixed)
    return changed


def correct_casing(root: ET.Element) -> int:
    """Rewrite known tag and attribute names to their canonical casing.

    Args:
        root: Root element, modified in place.

    Returns:
        Number of names rewritten (or dropped as miscased duplicates).
    """
    changed = 0
    for elem in root.iter():
        if not is_element(elem):
            continue
        canonical = normalize_tag_case(elem.tag)
        if canonical != elem.tag:
            elem.tag = canonical
            changed += 1
        changed += _correct_attributes(elem)
    return changed
