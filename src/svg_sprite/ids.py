"""Sprite-level identifier assignment."""

import re
from pathlib import Path
from typing import TYPE_CHECKING, Iterable

from .diagnostics import Diagnostics, ValidationError
from .utils import collect_ids

if TYPE_CHECKING:
    from .pipeline import NormalizedIcon

DEFAULT_PREFIX = "i"

STEM_RE = re.compile(r"^[A-Za-z0-9]+")


def derive_stem(path: Path) -> str:
    """Derive the ID stem from a file path.

    The stem is the leading ASCII alphanumeric run of the file name without
    its extension, lower-cased.

    Args:
        path: Source file path.

    Returns:
        The stem.

    Raises:
        ValidationError: If the file name does not start with a letter or digit.

    Example:
        >>> derive_stem(Path("icons/Arrow-Left.svg"))
        'arrow'
    """
    match = STEM_RE.match(Path(path).stem)
    if match is None:
        raise ValidationError(f"Cannot derive an ID from file name {Path(path).name!r}")
    return match.group(0).lower()


def make_icon_id(prefix: str, stem: str) -> str:
    """Join a prefix and stem into a candidate ID."""
    return f"{prefix}-{stem}"


class IdRegistry:
    """Map-wide registry of assigned IDs and the files that own them."""

    def __init__(self) -> None:
        self._owners: dict[str, Path] = {}
        self._paths: set[Path] = set()

    def __contains__(self, icon_id: str) -> bool:
        return icon_id in self._owners

    def __len__(self) -> int:
        return len(self._owners)

    def owner(self, icon_id: str) -> Path | None:
        """Return the path that registered an ID, if any."""
        return self._owners.get(icon_id)

    def register(self, icon_id: str, path: Path) -> None:
        if icon_id in self._owners:
            raise ValueError(f"ID {icon_id!r} is already registered")
        self._owners[icon_id] = path
        self._paths.add(path)

    def next_free(self, candidate: str) -> str:
        """Return the first unregistered ``candidate-N`` with N >= 2."""
        counter = 2
        while f"{candidate}-{counter}" in self._owners:
            counter += 1
        return f"{candidate}-{counter}"

    def claim(self, candidate: str, path: Path) -> str | None:
        """Register an ID for a file.

        Args:
            candidate: Preferred ID.
            path: File claiming the ID.

        Returns:
            The candidate if it was free, the first free ``candidate-N`` if
            another file holds it, or None if this path already holds an ID.
        """
        if path in self._paths:
            return None
        icon_id = candidate if candidate not in self._owners else self.next_free(candidate)
        self.register(icon_id, path)
        return icon_id


def assign_ids(
    icons: Iterable["NormalizedIcon"],
    prefix: str,
    diagnostics: Diagnostics,
    registry: IdRegistry | None = None,
) -> list["NormalizedIcon"]:
    """Assign map-unique IDs to icons, in order.

    The first icon to claim a candidate ID keeps it. A later icon from a
    different path is renamed ``candidate-2``, ``candidate-3``, and so on. A
    later icon from the same path is a repeated input and is dropped.

    Args:
        icons: Normalized icons in stable input order.
        prefix: ID prefix.
        diagnostics: Collector for collision and file name findings.
        registry: Registry to claim IDs in (a new one by default).

    Returns:
        Icons that received an ID, in input order.
    """
    if registry is None:
        registry = IdRegistry()

    assigned: list["NormalizedIcon"] = []
    for icon in icons:
        try:
            stem = derive_stem(icon.source)
        except ValidationError as e:
            diagnostics.add("validation-error", icon.source, str(e))
            continue

        candidate = make_icon_id(prefix, stem)
        owner = registry.owner(candidate)
        icon_id = registry.claim(candidate, icon.source)
        if icon_id is None:
            diagnostics.add(
                "duplicate-identifier",
                icon.source,
                f"File listed more than once; skipped repeat of {candidate!r}",
            )
            continue
        if icon_id != candidate:
            diagnostics.add(
                "duplicate-identifier",
                icon.source,
                f"ID {candidate!r} already used by {owner}; renamed to {icon_id!r}",
            )

        icon.icon_id = icon_id
        assigned.append(icon)
    return assigned


def check_source_ids(
    icons: list["NormalizedIcon"],
    prefix: str,
    diagnostics: Diagnostics,
    map_id: str | None = None,
) -> None:
    """Warn about explicit IDs inside icon sources.

    IDs inside icons share the page's ID namespace with the map IDs, so any
    of them can clash once the map is embedded.

    Args:
        icons: Icons with assigned IDs.
        prefix: ID prefix used for map IDs.
        diagnostics: Collector for findings.
        map_id: The map root's own ID, if configured.
    """
    reserved = {icon.icon_id for icon in icons if icon.icon_id}
    if map_id:
        reserved.add(map_id)

    seen: dict[str, Path] = {}
    for icon in icons:
        inner = collect_ids(icon.root)
        if not inner:
            continue
        diagnostics.add("suspicious-content", icon.source, "Contains IDs")
        for inner_id in dict.fromkeys(inner):
            if inner_id in reserved:
                diagnostics.add(
                    "suspicious-id",
                    icon.source,
                    f"Inner ID {inner_id!r} collides with a sprite map ID",
                )
            elif inner_id.startswith(f"{prefix}-"):
                diagnostics.add(
                    "suspicious-id",
                    icon.source,
                    f"Inner ID {inner_id!r} uses the sprite ID prefix {prefix!r}",
                )
            other = seen.get(inner_id)
            if other is not None and other != icon.source:
                diagnostics.add(
                    "suspicious-id",
                    icon.source,
                    f"Inner ID {inner_id!r} is also defined in {other.name}",
                )
            else:
                seen.setdefault(inner_id, icon.source)
