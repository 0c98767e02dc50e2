"""ViewBox validation and reconstruction for icon roots."""

import math
import re
from dataclasses import dataclass
from xml.etree import ElementTree as ET

from .diagnostics import ValidationError
from .utils import format_number

VIEWBOX_SEPARATOR_RE = re.compile(r"[\s,]+")

NUMBER_PATTERN = r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?"
NUMBER_RE = re.compile(NUMBER_PATTERN)

# A number with an optional trailing unit such as "px" or "pt"
LENGTH_RE = re.compile(rf"^\s*({NUMBER_PATTERN})\s*[A-Za-z]*\s*$")


@dataclass(frozen=True)
class ViewBox:
    """The four numbers of an SVG viewBox."""

    min_x: float
    min_y: float
    width: float
    height: float

    @property
    def is_normalized(self) -> bool:
        """True for ``0 0 W H`` with positive, finite W and H."""
        return (
            self.min_x == 0
            and self.min_y == 0
            and math.isfinite(self.width)
            and math.isfinite(self.height)
            and self.width > 0
            and self.height > 0
        )

    def __str__(self) -> str:
        return " ".join(
            format_number(v) for v in (self.min_x, self.min_y, self.width, self.height)
        )


def parse_viewbox(text: str) -> ViewBox | None:
    """Parse a viewBox attribute value.

    Args:
        text: Attribute value; numbers may be separated by whitespace and/or
            commas.

    Returns:
        Parsed ViewBox, or None if the value is not exactly four numbers.

    Example:
        >>> parse_viewbox(" 0, 0 24 24")
        ViewBox(min_x=0.0, min_y=0.0, width=24.0, height=24.0)
    """
    parts = [p for p in VIEWBOX_SEPARATOR_RE.split(text.strip()) if p]
    if len(parts) != 4:
        return None
    if not all(NUMBER_RE.fullmatch(p) for p in parts):
        return None
    return ViewBox(*(float(p) for p in parts))


def parse_length(text: str | None) -> float | None:
    """Parse a positive, finite width/height value.

    Args:
        text: Attribute value such as ``"24"`` or ``"24px"``.

    Returns:
        The numeric value, or None if missing, malformed or not positive.
    """
    if text is None:
        return None
    match = LENGTH_RE.match(text)
    if match is None:
        return None
    value = float(match.group(1))
    if not math.isfinite(value) or value <= 0:
        return None
    return value


def _set_viewbox(root: ET.Element, viewbox: ViewBox) -> None:
    """Write the viewBox in place (or last), dropping width and height."""
    fixed: dict[str, str] = {}
    for key, value in root.attrib.items():
        if key in ("width", "height"):
            continue
        fixed[key] = str(viewbox) if key == "viewBox" else value
    fixed.setdefault("viewBox", str(viewbox))
    root.attrib.clear()
    root.attrib.update(fixed)


def resolve_viewbox(root: ET.Element) -> tuple[ViewBox, list[str]]:
    """Validate or reconstruct the viewBox of an icon root.

    A valid ``0 0 W H`` viewBox is kept. Otherwise one is synthesized from
    the ``width`` and ``height`` attributes. Either way the root's
    ``width``/``height`` are removed afterwards.

    Args:
        root: Icon root element, modified in place.

    Returns:
        Tuple of (resolved ViewBox, warning messages).

    Raises:
        ValidationError: If neither source yields a usable viewBox.
    """
    warnings: list[str] = []
    raw = root.get("viewBox")
    if raw is not None:
        viewbox = parse_viewbox(raw)
        if viewbox is not None and viewbox.is_normalized:
            _set_viewbox(root, viewbox)
            return viewbox, warnings

    width = parse_length(root.get("width"))
    height = parse_length(root.get("height"))
    if width is None or height is None:
        if raw is not None:
            raise ValidationError(
                f"Invalid viewBox {raw!r}: expected '0 0 width height' with positive size"
            )
        raise ValidationError("Missing viewBox and no positive width/height to build one")

    viewbox = ViewBox(0.0, 0.0, width, height)
    if raw is not None:
        warnings.append(f"Replaced invalid viewBox {raw!r} with '{viewbox}' from width/height")
    _set_viewbox(root, viewbox)
    return viewbox, warnings
