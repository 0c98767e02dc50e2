"""Assembly of normalized icons into one sprite map document."""

import copy
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING
from xml.etree import ElementTree as ET

from .diagnostics import SpriteError
from .utils import SVG_NAMESPACES, iter_elements, serialize
from .viewbox import ViewBox

if TYPE_CHECKING:
    from .config import SpriteOptions
    from .pipeline import NormalizedIcon

logger = logging.getLogger(__name__)

# Inline style that keeps the map out of sight and out of layout
OFFSCREEN_STYLE = "position:fixed;top:0;left:-100px;width:1px;height:1px;overflow:hidden"

# Icon root attributes that make no sense on a <symbol>
ROOT_ONLY_ATTRIBUTES = frozenset(
    ["id", "width", "height", "xmlns", "version", "baseProfile", "x", "y", "viewBox"]
)


@dataclass(frozen=True)
class SpriteEntry:
    """One symbol in the map."""

    icon_id: str
    viewbox: ViewBox
    source: Path

    @property
    def width(self) -> float:
        return self.viewbox.width

    @property
    def height(self) -> float:
        return self.viewbox.height


@dataclass
class SpriteMap:
    """An assembled sprite map."""

    root: ET.Element
    entries: list[SpriteEntry] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.entries)

    @property
    def ids(self) -> list[str]:
        """Symbol IDs in document order."""
        return [entry.icon_id for entry in self.entries]

    def to_string(self) -> str:
        return serialize(self.root)

    def to_bytes(self) -> bytes:
        """Serialize the map as UTF-8 without an XML declaration."""
        return self.to_string().encode("utf-8")


def _uses_prefix(element: ET.Element, prefix: str) -> bool:
    marker = f"{prefix}:"
    for elem in iter_elements(element):
        if elem.tag.startswith(marker):
            return True
        if any(key.startswith(marker) for key in elem.attrib):
            return True
    return False


def build_symbol(icon: "NormalizedIcon", namespaces: dict[str, str]) -> ET.Element:
    """Convert a normalized icon root into a ``<symbol>``.

    ``xmlns:*`` declarations are collected into ``namespaces`` for the map
    root; a declaration that conflicts with one already collected stays on
    the symbol.

    Args:
        icon: Normalized icon with an assigned ID.
        namespaces: Prefix declarations gathered so far, updated in place.

    Returns:
        The symbol element, holding copies of the icon's children.
    """
    if icon.icon_id is None:
        raise SpriteError(f"Icon {icon.source} has no assigned ID")

    attrib: dict[str, str] = {"id": icon.icon_id, "viewBox": str(icon.viewbox)}
    for key, value in icon.root.attrib.items():
        if key in ROOT_ONLY_ATTRIBUTES:
            continue
        if key.startswith("xmlns:"):
            if namespaces.setdefault(key, value) == value:
                continue
        attrib[key] = value

    symbol = ET.Element("symbol", attrib)
    symbol.text = icon.root.text
    symbol.extend([copy.deepcopy(child) for child in icon.root])
    return symbol


def build_map_root(options: "SpriteOptions", namespaces: dict[str, str]) -> ET.Element:
    """Create the outer ``<svg>`` element of the map."""
    attrib: dict[str, str] = {"xmlns": SVG_NAMESPACES["svg"]}
    attrib.update(namespaces)
    attrib["aria-hidden"] = "true"
    if options.map_id:
        attrib["id"] = options.map_id
    if options.map_class:
        attrib["class"] = options.map_class
    for key, value in options.attributes:
        attrib[key] = "" if value is None else value

    if options.hide == "hidden":
        attrib["hidden"] = "hidden"
    elif options.hide == "offscreen":
        extra = attrib.get("style", "").strip().strip(";")
        attrib["style"] = f"{OFFSCREEN_STYLE};{extra}" if extra else OFFSCREEN_STYLE
    return ET.Element("svg", attrib)


def assemble_map(icons: list["NormalizedIcon"], options: "SpriteOptions") -> SpriteMap:
    """Combine normalized icons into a sprite map.

    Args:
        icons: Icons with assigned IDs, in output order.
        options: Map-level settings.

    Returns:
        The assembled SpriteMap.

    Raises:
        SpriteError: If there are no icons.
    """
    if not icons:
        raise SpriteError("No icons to assemble")

    namespaces: dict[str, str] = {}
    symbols: list[ET.Element] = []
    entries: list[SpriteEntry] = []
    for icon in icons:
        symbols.append(build_symbol(icon, namespaces))
        entries.append(SpriteEntry(icon.icon_id, icon.viewbox, icon.source))

    if "xmlns:xlink" not in namespaces and any(_uses_prefix(s, "xlink") for s in symbols):
        namespaces["xmlns:xlink"] = SVG_NAMESPACES["xlink"]

    root = build_map_root(options, namespaces)
    root.extend(symbols)
    logger.debug("Assembled sprite map with %d symbols", len(symbols))
    return SpriteMap(root=root, entries=entries)
