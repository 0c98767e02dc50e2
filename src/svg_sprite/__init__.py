"""SVG Sprite - Compile standalone SVG icons into one sprite map."""

__version__ = "0.1.0"

from .assemble import (
    SpriteEntry,
    SpriteMap,
    assemble_map,
)
from .casing import correct_casing
from .config import (
    SpriteOptions,
    parse_map_attribute,
    parse_sprite_config_file,
)
from .diagnostics import (
    Diagnostic,
    Diagnostics,
    ParseError,
    SpriteError,
    ValidationError,
)
from .ids import (
    IdRegistry,
    assign_ids,
    derive_stem,
)
from .parse import parse_svg_bytes
from .pipeline import (
    NormalizedIcon,
    SourceIcon,
    SpriteReport,
    build_sprite,
    format_sprite_report,
    normalize_icon,
)
from .sanitize import sanitize_tree
from .style import StyleDeclaration, inline_styles, parse_style
from .viewbox import ViewBox, resolve_viewbox

__all__ = [
    # Stages
    "parse_svg_bytes",
    "sanitize_tree",
    "correct_casing",
    "StyleDeclaration",
    "parse_style",
    "inline_styles",
    "ViewBox",
    "resolve_viewbox",
    "IdRegistry",
    "derive_stem",
    "assign_ids",
    "SpriteEntry",
    "SpriteMap",
    "assemble_map",
    # Configuration
    "SpriteOptions",
    "parse_map_attribute",
    "parse_sprite_config_file",
    # Diagnostics
    "Diagnostic",
    "Diagnostics",
    "SpriteError",
    "ParseError",
    "ValidationError",
    # Pipeline
    "SourceIcon",
    "NormalizedIcon",
    "SpriteReport",
    "normalize_icon",
    "build_sprite",
    "format_sprite_report",
]
