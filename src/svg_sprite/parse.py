"""Markup parsing for SVG sources.

The parser keeps qualified names exactly as written (``xlink:href`` stays
``xlink:href``) so that later stages can correct casing and hoist namespace
declarations themselves. Comments and processing instructions inside the
document element are kept as ``ET.Comment``/``ET.ProcessingInstruction``
nodes for the sanitizer; the XML declaration and DOCTYPE are dropped here.
"""

import codecs
from xml.etree import ElementTree as ET
from xml.parsers import expat

from .diagnostics import ParseError
from .utils import is_element


def _strip_whitespace_text(root: ET.Element) -> None:
    """Drop whitespace-only text and tail strings throughout the tree."""
    for node in root.iter():
        if node.text is not None and not node.text.strip():
            node.text = None
        if node.tail is not None and not node.tail.strip():
            node.tail = None


def _build_parser(builder: ET.TreeBuilder) -> expat.XMLParserType:
    parser = expat.ParserCreate()
    parser.ordered_attributes = True
    parser.buffer_text = True

    def start(name: str, attrs: list[str]) -> None:
        builder.start(name, dict(zip(attrs[0::2], attrs[1::2])))

    parser.StartElementHandler = start
    parser.EndElementHandler = builder.end
    parser.CharacterDataHandler = builder.data
    parser.CommentHandler = builder.comment
    parser.ProcessingInstructionHandler = builder.pi
    return parser


def parse_svg_bytes(data: bytes | str) -> ET.Element:
    """Parse raw SVG source into an element tree.

    Args:
        data: Raw file content. Bytes honour the declared encoding; strings
            are parsed as-is.

    Returns:
        The document element. Attribute order matches the source.

    Raises:
        ParseError: If the source is not well-formed XML.
    """
    # expat rejects whitespace before the XML declaration
    if isinstance(data, bytes):
        body = data.removeprefix(codecs.BOM_UTF8).lstrip()
        skipped = len(data) - len(body)
    else:
        body = data.lstrip("\ufeff").lstrip()
        skipped = len(data[: len(data) - len(body)].encode("utf-8"))

    if not body:
        raise ParseError("no element found", line=1, column=1, offset=skipped)

    builder = ET.TreeBuilder(insert_comments=True, insert_pis=True)
    parser = _build_parser(builder)
    try:
        parser.Parse(body, True)
    except expat.ExpatError as e:
        offset = parser.ErrorByteIndex
        raise ParseError(
            expat.ErrorString(e.code),
            line=parser.ErrorLineNumber,
            column=parser.ErrorColumnNumber + 1,
            offset=offset + skipped if offset >= 0 else None,
        ) from e

    root = builder.close()
    if root is None or not is_element(root):
        raise ParseError("no element found")
    _strip_whitespace_text(root)
    return root
