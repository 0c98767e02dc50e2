"""Sprite map options and YAML configuration loading."""

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Literal

import yaml

from .casing import normalize_attribute_case
from .ids import DEFAULT_PREFIX
from .sanitize import DROP_IF_EMPTY_TAGS

HideType = Literal["none", "hidden", "offscreen"]

PREFIX_RE = re.compile(r"^[A-Za-z][A-Za-z0-9_-]*$")
ATTRIBUTE_NAME_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_.:-]*$")

# Attributes without a value that default to their own name
BOOLEAN_ATTRIBUTES = frozenset(["hidden", "disabled"])

# Map root attributes controlled by dedicated options
RESERVED_ATTRIBUTES = frozenset(["xmlns"])

CONFIG_KEYS = frozenset(
    [
        "prefix",
        "map_id",
        "map_class",
        "attributes",
        "hidden",
        "offscreen",
        "workers",
        "drop_if_empty",
    ]
)


def _strip_quotes(value: str) -> str:
    """Strip one pair of matching outer quotes (not escaped)."""
    if len(value) >= 2 and value[0] == value[-1] and value[0] in ("'", '"'):
        if len(value) == 2 or value[-2] != "\\":
            return value[1:-1]
    return value


def normalize_map_attribute(key: str, value: str | None) -> tuple[str, str]:
    """Validate and normalize one map-level attribute.

    Args:
        key: Attribute name; known SVG names are case-corrected.
        value: Attribute value, or None for a bare key.

    Returns:
        Tuple of (key, value).

    Raises:
        ValueError: If the key is not a valid attribute name or is reserved.
    """
    key = normalize_attribute_case(key.strip())
    if not ATTRIBUTE_NAME_RE.match(key) or key.startswith("xmlns:"):
        raise ValueError(f"Invalid map attribute name: {key!r}")
    if key in RESERVED_ATTRIBUTES:
        raise ValueError(f"The {key!r} attribute cannot be overridden")

    if value is None:
        return key, key if key in BOOLEAN_ATTRIBUTES else ""
    return key, _strip_quotes(value.strip())


def parse_map_attribute(text: str) -> tuple[str, str]:
    """Parse a ``key`` or ``key=value`` attribute argument.

    Example:
        >>> parse_map_attribute('data-kind="icons"')
        ('data-kind', 'icons')
        >>> parse_map_attribute("hidden")
        ('hidden', 'hidden')
    """
    key, sep, value = text.partition("=")
    return normalize_map_attribute(key, value if sep else None)


@dataclass
class SpriteOptions:
    """Settings for one sprite map build."""

    prefix: str = DEFAULT_PREFIX
    map_id: str | None = None
    map_class: str | None = None
    attributes: list[tuple[str, str | None]] = field(default_factory=list)
    hidden: bool = False
    offscreen: bool = False
    workers: int = 1
    drop_if_empty: frozenset[str] = DROP_IF_EMPTY_TAGS

    def __post_init__(self) -> None:
        if not PREFIX_RE.match(self.prefix):
            raise ValueError(
                f"Invalid prefix {self.prefix!r}: must start with a letter and "
                "contain only letters, digits, '-' or '_'"
            )
        if self.workers < 1:
            raise ValueError(f"workers must be >= 1, got {self.workers}")

        seen: set[str] = set()
        if self.map_id:
            seen.add("id")
        if self.map_class:
            seen.add("class")
        normalized: list[tuple[str, str | None]] = []
        for key, value in self.attributes:
            key, value = normalize_map_attribute(key, value)
            if key in seen:
                raise ValueError(f"Duplicate map attribute: {key!r}")
            seen.add(key)
            normalized.append((key, value))
        self.attributes = normalized
        self.drop_if_empty = frozenset(tag.lower() for tag in self.drop_if_empty)

    @property
    def hide(self) -> HideType:
        """Visibility strategy; ``hidden`` takes precedence over ``offscreen``."""
        if self.hidden:
            return "hidden"
        if self.offscreen:
            return "offscreen"
        return "none"


def _parse_attributes_section(data: object) -> list[tuple[str, str | None]]:
    if data is None:
        return []
    if isinstance(data, dict):
        return [
            (str(key), None if value is None else str(value)) for key, value in data.items()
        ]
    if isinstance(data, list):
        result: list[tuple[str, str | None]] = []
        for item in data:
            if isinstance(item, dict) and len(item) == 1:
                key, value = next(iter(item.items()))
                result.append((str(key), None if value is None else str(value)))
            elif isinstance(item, str):
                key, sep, value = item.partition("=")
                result.append((key, value if sep else None))
            else:
                raise ValueError(f"Invalid attribute entry: {item!r}")
        return result
    raise ValueError("'attributes' must be a mapping or a list")


def parse_sprite_config_data(data: object) -> SpriteOptions:
    """Build options from a loaded YAML document.

    Raises:
        ValueError: If the structure or a value is invalid.
    """
    if data is None:
        return SpriteOptions()
    if not isinstance(data, dict):
        raise ValueError("Config file must be a YAML dictionary")

    unknown = sorted(set(map(str, data)) - CONFIG_KEYS)
    if unknown:
        raise ValueError(f"Unknown config keys: {', '.join(unknown)}")

    options: dict = {}
    if "prefix" in data:
        options["prefix"] = str(data["prefix"])
    for key in ("map_id", "map_class"):
        if data.get(key) is not None:
            options[key] = str(data[key])
    for key in ("hidden", "offscreen"):
        if key in data:
            if not isinstance(data[key], bool):
                raise ValueError(f"'{key}' must be true or false")
            options[key] = data[key]
    if "workers" in data:
        options["workers"] = int(data["workers"])
    if "drop_if_empty" in data:
        tags = data["drop_if_empty"]
        if not isinstance(tags, list):
            raise ValueError("'drop_if_empty' must be a list of tag names")
        options["drop_if_empty"] = frozenset(str(tag) for tag in tags)
    options["attributes"] = _parse_attributes_section(data.get("attributes"))

    return SpriteOptions(**options)


def parse_sprite_config_file(config_path: Path) -> SpriteOptions:
    """Parse a YAML sprite configuration file.

    Args:
        config_path: Path to the YAML file.

    Returns:
        Parsed SpriteOptions.

    Raises:
        FileNotFoundError: If the file does not exist.
        yaml.YAMLError: If the file is not valid YAML.
        ValueError: If the configuration is invalid.
    """
    with open(config_path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f)
    return parse_sprite_config_data(data)
