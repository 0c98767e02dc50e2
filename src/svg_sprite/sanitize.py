"""Removal of comments, instructions and semantically empty elements."""

from xml.etree import ElementTree as ET

from .utils import is_element, referenced_ids

# Wrapper/container tags that mean nothing once they are empty
DROP_IF_EMPTY_TAGS = frozenset(
    [
        "a",
        "defs",
        "desc",
        "g",
        "glyph",
        "marker",
        "mask",
        "metadata",
        "missing-glyph",
        "pattern",
        "style",
        "switch",
        "symbol",
        "title",
    ]
)

# Attributes an empty element may carry and still be dropped
EMPTY_SAFE_ATTRIBUTES = frozenset(["id", "class", "type", "lang", "xml:lang", "xml:space"])


def remove_node(parent: ET.Element, child: ET.Element) -> None:
    """Remove a child node, keeping any text that followed it.

    Args:
        parent: Parent element.
        child: Child node to remove.
    """
    if child.tail:
        index = list(parent).index(child)
        if index > 0:
            previous = parent[index - 1]
            previous.tail = (previous.tail or "") + child.tail
        else:
            parent.text = (parent.text or "") + child.tail
    parent.remove(child)


def strip_markup_nodes(element: ET.Element) -> int:
    """Recursively remove comment and processing-instruction nodes.

    Returns:
        Number of nodes removed.
    """
    removed = 0
    for child in list(element):
        if not is_element(child):
            remove_node(element, child)
            removed += 1
        else:
            removed += strip_markup_nodes(child)
    return removed


def _element_id(element: ET.Element) -> str | None:
    for key, value in element.attrib.items():
        if key.lower() == "id":
            return value
    return None


def is_empty_element(
    element: ET.Element,
    drop_if_empty: frozenset[str],
    protected_ids: set[str],
) -> bool:
    """Check whether an element can be dropped without changing the icon.

    Args:
        element: Element to check (its children already sanitized).
        drop_if_empty: Tag names eligible for removal.
        protected_ids: IDs referenced elsewhere in the icon.

    Returns:
        True if the element is droppable.
    """
    if not is_element(element) or element.tag.lower() not in drop_if_empty:
        return False
    if len(element) or (element.text and element.text.strip()):
        return False
    if any(key.lower() not in EMPTY_SAFE_ATTRIBUTES for key in element.attrib):
        return False
    return _element_id(element) not in protected_ids


def drop_empty_elements(
    element: ET.Element,
    drop_if_empty: frozenset[str],
    protected_ids: set[str],
) -> int:
    """Remove empty wrapper elements bottom-up.

    Children are processed first, so a parent that only held empty wrappers
    becomes empty itself and is removed in the same pass.

    Returns:
        Number of elements removed.
    """
    removed = 0
    for child in list(element):
        removed += drop_empty_elements(child, drop_if_empty, protected_ids)
        if is_empty_element(child, drop_if_empty, protected_ids):
            remove_node(element, child)
            removed += 1
    return removed


def _drop_style_type(root: ET.Element) -> None:
    for elem in root.iter():
        if is_element(elem) and elem.tag.lower() == "style":
            if elem.get("type", "").strip().lower() == "text/css":
                del elem.attrib["type"]


def sanitize_tree(
    root: ET.Element,
    drop_if_empty: frozenset[str] = DROP_IF_EMPTY_TAGS,
) -> int:
    """Sanitize a parsed icon in place.

    Args:
        root: Document element of the icon. The root itself is never removed.
        drop_if_empty: Tag names removed when empty (compared lower-cased).

    Returns:
        Number of nodes removed.
    """
    removed = strip_markup_nodes(root)
    _drop_style_type(root)
    drop_if_empty = frozenset(tag.lower() for tag in drop_if_empty)
    removed += drop_empty_elements(root, drop_if_empty, referenced_ids(root))
    return removed
