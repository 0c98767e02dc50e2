"""Sprite compilation pipeline.

This module ties the stages together:
- parse: raw bytes to element tree
- sanitize: drop comments, instructions and empty wrappers
- casing: canonical tag/attribute names
- style: promote inline styles to presentation attributes
- viewbox: validate or rebuild the root viewBox

Each icon goes through those stages independently (optionally in worker
threads). IDs are then assigned in input order and the map is assembled.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable
from xml.etree import ElementTree as ET

from .assemble import SpriteMap, assemble_map
from .casing import correct_casing
from .config import SpriteOptions
from .diagnostics import Diagnostic, Diagnostics, ParseError, SpriteError, ValidationError
from .ids import assign_ids, check_source_ids
from .parse import parse_svg_bytes
from .sanitize import DROP_IF_EMPTY_TAGS, sanitize_tree
from .style import inline_styles
from .utils import format_number, is_element, iter_elements, serialize
from .viewbox import ViewBox, resolve_viewbox

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SourceIcon:
    """One input file."""

    path: Path
    data: bytes


@dataclass
class NormalizedIcon:
    """An icon after all per-icon stages."""

    source: Path
    root: ET.Element
    viewbox: ViewBox
    icon_id: str | None = None


@dataclass
class IconResult:
    """Outcome of normalizing one source."""

    source: Path
    icon: NormalizedIcon | None = None
    diagnostics: list[Diagnostic] = field(default_factory=list)


@dataclass
class SpriteReport:
    """Complete result of a sprite build."""

    source_count: int = 0
    icons: list[NormalizedIcon] = field(default_factory=list)
    sprite: SpriteMap | None = None
    diagnostics: Diagnostics = field(default_factory=Diagnostics)

    @property
    def has_errors(self) -> bool:
        """True when the build failed (no icon survived)."""
        return self.sprite is None

    @property
    def error_count(self) -> int:
        return len(self.diagnostics.errors)

    @property
    def warning_count(self) -> int:
        return len(self.diagnostics.warnings)

    @property
    def symbols(self) -> list[tuple[str, float, float]]:
        """Symbol IDs with their viewBox width and height."""
        if self.sprite is None:
            return []
        return [(e.icon_id, e.width, e.height) for e in self.sprite.entries]

    def to_bytes(self) -> bytes:
        """Serialized sprite map.

        Raises:
            SpriteError: If the build produced no map.
        """
        if self.sprite is None:
            raise SpriteError("No icons survived; there is no sprite map")
        return self.sprite.to_bytes()


def _describe(items: list[str]) -> str:
    if len(items) == 1:
        return items[0]
    return f"{', '.join(items[:-1])} and {items[-1]}"


def find_scripting(root: ET.Element) -> list[str]:
    """List the kinds of scripting found in a tree.

    Returns:
        Descriptions such as ``"<script> tags"``, in first-seen order.
    """
    found: dict[str, None] = {}
    for elem in iter_elements(root):
        if elem.tag == "script":
            found["<script> tags"] = None
        for key, value in elem.attrib.items():
            lowered = key.lower()
            if lowered.startswith("on") and len(lowered) > 2:
                found["inline scripts"] = None
            elif lowered in ("href", "xlink:href") and value.strip().lower().startswith(
                "javascript:"
            ):
                found["script links"] = None
    return list(found)


def check_content(root: ET.Element, diagnostics: Diagnostics, source: Path | None = None) -> None:
    """Warn about stylesheets, classes and leftover inline styles.

    These tend to clash inside a shared sprite map. Scripting is rejected
    by ``normalize_icon`` and IDs are checked once map IDs are known.
    """
    found: dict[str, None] = {}
    for elem in iter_elements(root):
        if elem.tag == "style":
            found["<style> tags"] = None
        for key in elem.attrib:
            lowered = key.lower()
            if lowered == "class":
                found["classes"] = None
            elif lowered == "style":
                found["inline styles"] = None
    if found:
        diagnostics.add("suspicious-content", source, f"Contains {_describe(list(found))}")


def _has_content(root: ET.Element) -> bool:
    return bool((root.text and root.text.strip()) or any(is_element(c) for c in root))


def normalize_icon(
    source: SourceIcon,
    diagnostics: Diagnostics | None = None,
    drop_if_empty: frozenset[str] = DROP_IF_EMPTY_TAGS,
) -> NormalizedIcon:
    """Run one icon through every per-icon stage.

    Pipeline order: parse -> sanitize -> casing -> style -> viewbox

    Args:
        source: Input file.
        diagnostics: Collector for warnings (a throwaway one by default).
        drop_if_empty: Tags the sanitizer removes when empty.

    Returns:
        The normalized icon (no ID assigned yet).

    Raises:
        ParseError: If the source is malformed or its root is not ``<svg>``.
        ValidationError: If the icon contains scripting, has no usable
            viewBox or is empty.
    """
    if diagnostics is None:
        diagnostics = Diagnostics()
    path = Path(source.path)

    root = parse_svg_bytes(source.data)
    sanitize_tree(root, drop_if_empty)
    correct_casing(root)
    if root.tag != "svg":
        raise ParseError(f"Root element is <{root.tag}>, expected <svg>")

    inline_styles(root, diagnostics, path)
    scripting = find_scripting(root)
    if scripting:
        raise ValidationError(f"Icon contains {_describe(scripting)}")
    check_content(root, diagnostics, path)

    viewbox, warnings = resolve_viewbox(root)
    for warning in warnings:
        diagnostics.add("invalid-viewbox", path, warning)

    if not _has_content(root):
        raise ValidationError("Icon has no content")

    return NormalizedIcon(source=path, root=root, viewbox=viewbox)


def _normalize_result(source: SourceIcon, drop_if_empty: frozenset[str]) -> IconResult:
    """Normalize one icon, turning per-file failures into diagnostics."""
    path = Path(source.path)
    collector = Diagnostics()
    result = IconResult(source=path)
    try:
        result.icon = normalize_icon(source, collector, drop_if_empty)
    except ParseError as e:
        collector.add("parse-error", path, f"Unable to parse: {e}")
    except ValidationError as e:
        collector.add("validation-error", path, str(e))
    result.diagnostics = list(collector)
    return result


def _as_source(item: SourceIcon | tuple[Path | str, bytes]) -> SourceIcon:
    if isinstance(item, SourceIcon):
        return item
    path, data = item
    return SourceIcon(Path(path), data)


def build_sprite(
    sources: Iterable[SourceIcon | tuple[Path | str, bytes]],
    options: SpriteOptions | None = None,
) -> SpriteReport:
    """Compile a sprite map from in-memory sources.

    Per-icon normalization may run in worker threads; ID assignment and
    assembly always follow the input order, so the output does not depend
    on scheduling.

    Args:
        sources: ``SourceIcon``s or ``(path, bytes)`` pairs, in output order.
        options: Build settings (defaults if omitted).

    Returns:
        SpriteReport with the map (if any icon survived) and all diagnostics.
    """
    if options is None:
        options = SpriteOptions()
    items = [_as_source(item) for item in sources]
    report = SpriteReport(source_count=len(items))

    def normalize(item: SourceIcon) -> IconResult:
        return _normalize_result(item, options.drop_if_empty)

    if options.workers > 1 and len(items) > 1:
        with ThreadPoolExecutor(max_workers=options.workers) as executor:
            results = list(executor.map(normalize, items))
    else:
        results = [normalize(item) for item in items]

    for result in results:
        report.diagnostics.extend(result.diagnostics)
    icons = [result.icon for result in results if result.icon is not None]
    logger.debug("Normalized %d of %d icons", len(icons), len(items))

    report.icons = assign_ids(icons, options.prefix, report.diagnostics)
    check_source_ids(report.icons, options.prefix, report.diagnostics, options.map_id)

    if report.icons:
        report.sprite = assemble_map(report.icons, options)
    return report


def serialize_icon(icon: NormalizedIcon) -> bytes:
    """Serialize a normalized (not yet assembled) icon as a standalone SVG."""
    return serialize(icon.root).encode("utf-8")


def format_sprite_report(report: SpriteReport) -> str:
    """Format a sprite report as text.

    Args:
        report: Sprite report.

    Returns:
        Formatted text.
    """
    lines: list[str] = []

    if report.diagnostics:
        for diagnostic in report.diagnostics:
            lines.append(str(diagnostic))
        lines.append("")

    if report.symbols:
        width = max(len(icon_id) for icon_id, _, _ in report.symbols)
        lines.append("Symbols:")
        for icon_id, w, h in report.symbols:
            ratio = f"{format_number(w)} / {format_number(h)}"
            lines.append(f"  {icon_id:<{width}}  {{ aspect-ratio: {ratio}; }}")
        lines.append("")

    lines.append("Summary:")
    lines.append(f"  Sources: {report.source_count}")
    lines.append(f"  Symbols: {len(report.symbols)}")
    lines.append(f"  Errors: {report.error_count}")
    lines.append(f"  Warnings: {report.warning_count}")

    if report.has_errors:
        lines.append("")
        lines.append("*** NO ICONS SURVIVED - Sprite map will not be generated ***")

    return "\n".join(lines)
