#!/usr/bin/env python3
"""Compile SVG files into a single sprite map of <symbol> elements."""

import argparse
import dataclasses
import sys
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from svg_sprite.config import SpriteOptions, parse_map_attribute, parse_sprite_config_file
from svg_sprite.files import collect_svg_paths, read_path_list, read_sources, write_atomic
from svg_sprite.pipeline import build_sprite, format_sprite_report


def build_options(args: argparse.Namespace) -> SpriteOptions:
    """Merge the optional config file with command-line overrides.

    Raises:
        ValueError: If an option is invalid.
    """
    options = parse_sprite_config_file(args.config) if args.config else SpriteOptions()

    overrides: dict = {}
    if args.prefix is not None:
        overrides["prefix"] = args.prefix
    if args.map_id is not None:
        overrides["map_id"] = args.map_id
    if args.map_class is not None:
        overrides["map_class"] = args.map_class
    if args.hidden:
        overrides["hidden"] = True
    if args.offscreen:
        overrides["offscreen"] = True
    if args.workers is not None:
        overrides["workers"] = args.workers
    if args.attribute:
        overrides["attributes"] = list(options.attributes) + [
            parse_map_attribute(text) for text in args.attribute
        ]
    return dataclasses.replace(options, **overrides)


def main() -> int:
    """Main entry point.

    Returns:
        Exit code:
        - 0: Success
        - 1: I/O error or no SVG files found
        - 2: Config or option error
        - 3: No icons survived (or any error with --strict)
    """
    parser = argparse.ArgumentParser(
        description="Compile SVG files into a single sprite map of <symbol> elements.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Print a map of every SVG under icons/
  %(prog)s icons/

  # Save a hidden map with a custom prefix
  %(prog)s icons/ --prefix icon --hidden --output sprite.svg

  # Read paths from a list file and add attributes to the map
  %(prog)s --list icons.txt -a data-sprite -a class=sprite -o sprite.svg
""",
    )
    parser.add_argument(
        "paths", type=Path, nargs="*", help="SVG files or directories to crawl"
    )
    parser.add_argument(
        "--list", "-l", type=Path, action="append", default=[],
        help="Read file paths from this list (one per line)",
    )
    parser.add_argument(
        "--output", "-o", type=Path, help="Save the map here (default: stdout)"
    )
    parser.add_argument("--prefix", "-p", help="ID prefix for symbols (default: i)")
    parser.add_argument("--map-id", help="ID for the map itself")
    parser.add_argument("--map-class", help="Class for the map itself")
    parser.add_argument(
        "--attribute", "-a", action="append", default=[], metavar="KEY[=VALUE]",
        help="Extra attribute for the map (repeatable)",
    )
    parser.add_argument(
        "--hidden", action="store_true",
        help='Hide the map with the "hidden" attribute (overrides --offscreen)',
    )
    parser.add_argument(
        "--offscreen", action="store_true",
        help="Hide the map by positioning it offscreen with inline styles",
    )
    parser.add_argument("--config", "-c", type=Path, help="YAML config file")
    parser.add_argument(
        "--workers", "-j", type=int, help="Worker threads for normalization"
    )
    parser.add_argument(
        "--strict", action="store_true",
        help="Fail if any file could not be included",
    )

    args = parser.parse_args()

    if args.config and not args.config.exists():
        print(f"Error: Config file not found: {args.config}", file=sys.stderr)
        return 1

    try:
        options = build_options(args)
    except Exception as e:
        print(f"Error: Invalid options: {e}", file=sys.stderr)
        return 2

    # Collect input files
    try:
        inputs = list(args.paths)
        for list_path in args.list:
            inputs.extend(read_path_list(list_path))
        sources = read_sources(collect_svg_paths(inputs))
    except OSError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if not sources:
        print("Error: No SVGs were found.", file=sys.stderr)
        return 1

    report = build_sprite(sources, options)
    print(format_sprite_report(report), file=sys.stderr)

    if report.has_errors or (args.strict and report.error_count):
        return 3

    data = report.to_bytes()
    if args.output:
        try:
            write_atomic(args.output, data)
        except OSError as e:
            print(f"Error: Failed to write output: {e}", file=sys.stderr)
            return 1
        print(
            f"\nA sprite with {len(report.symbols)} images has been saved to "
            f"{args.output.resolve()}",
            file=sys.stderr,
        )
    else:
        sys.stdout.write(data.decode("utf-8"))
        sys.stdout.write("\n")

    return 0


if __name__ == "__main__":
    sys.exit(main())
