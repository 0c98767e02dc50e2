"""Utility functions shared by the sprite pipeline stages."""

import math
import re
from typing import Iterator
from xml.etree import ElementTree as ET

# Namespace URIs written into the map
SVG_NAMESPACES = {
    "svg": "http://www.w3.org/2000/svg",
    "xlink": "http://www.w3.org/1999/xlink",
}

# Fragment references: url(#id), url('#id')
URL_REFERENCE_RE = re.compile(r"""url\(\s*['"]?#([^)'"\s]+)""")

# Attributes holding a plain IRI reference
HREF_ATTRIBUTES = frozenset(["href", "xlink:href"])


def is_element(node: ET.Element) -> bool:
    """Check if a node is a real element (not a comment or instruction).

    Args:
        node: A node from a parsed tree.

    Returns:
        True if the node's tag is a string.
    """
    return isinstance(node.tag, str)


def iter_elements(root: ET.Element) -> Iterator[ET.Element]:
    """Iterate over all elements in document order, skipping other nodes."""
    for node in root.iter():
        if is_element(node):
            yield node


def referenced_ids(root: ET.Element) -> set[str]:
    """Collect every ID referenced from inside a tree.

    Both ``url(#id)`` values (in any attribute, inline styles included) and
    ``href``/``xlink:href`` fragment values are considered.

    Args:
        root: Root element.

    Returns:
        Set of referenced IDs.
    """
    refs: set[str] = set()
    for elem in iter_elements(root):
        for key, value in elem.attrib.items():
            refs.update(URL_REFERENCE_RE.findall(value))
            if key.lower() in HREF_ATTRIBUTES and value.startswith("#"):
                refs.add(value[1:].strip())
    return refs


def collect_ids(root: ET.Element) -> list[str]:
    """Collect explicit ``id`` attributes below the root, in document order."""
    ids: list[str] = []
    for elem in iter_elements(root):
        if elem is root:
            continue
        elem_id = elem.get("id")
        if elem_id is not None:
            ids.append(elem_id)
    return ids


def format_number(value: float) -> str:
    """Format a number compactly for use in an attribute.

    Example:
        >>> format_number(24.0)
        '24'
        >>> format_number(3.333)
        '3.333'
    """
    value = float(value)
    if math.isfinite(value) and value.is_integer():
        return str(int(value))
    return repr(value)


def serialize(element: ET.Element) -> str:
    """Serialize an element tree without an XML declaration or added whitespace."""
    return ET.tostring(element, encoding="unicode")
