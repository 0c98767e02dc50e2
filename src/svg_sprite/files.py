"""Input collection and output writing for the command-line tool."""

import os
import tempfile
from pathlib import Path
from typing import Iterable

from .pipeline import SourceIcon

SVG_SUFFIX = ".svg"


def is_svg_path(path: Path) -> bool:
    """Check for an ``.svg`` extension, case-insensitively."""
    return path.suffix.lower() == SVG_SUFFIX


def read_path_list(list_path: Path) -> list[Path]:
    """Read paths from a list file, one per line.

    Blank lines and lines starting with ``#`` are ignored. Relative paths are
    taken as given (relative to the working directory).

    Raises:
        OSError: If the list file cannot be read.
    """
    paths: list[Path] = []
    with open(list_path, "r", encoding="utf-8") as f:
        for line in f:
            line = line.strip()
            if line and not line.startswith("#"):
                paths.append(Path(line))
    return paths


def collect_svg_paths(paths: Iterable[Path]) -> list[Path]:
    """Expand files and directories into a list of SVG files.

    Files are kept in the order given; directories are walked recursively
    with entries sorted by name. Files without an ``.svg`` extension are
    skipped.

    Args:
        paths: Files and/or directories.

    Returns:
        SVG file paths in stable order.
    """
    found: list[Path] = []
    for path in paths:
        if path.is_dir():
            found.extend(
                sorted(p for p in path.rglob("*") if p.is_file() and is_svg_path(p))
            )
        elif is_svg_path(path):
            found.append(path)
    return found


def read_sources(paths: Iterable[Path]) -> list[SourceIcon]:
    """Read SVG files into sources.

    Raises:
        OSError: If a file cannot be read.
    """
    return [SourceIcon(path=path, data=path.read_bytes()) for path in paths]


def write_atomic(path: Path, data: bytes) -> None:
    """Write a file by renaming a fully written temporary file over it.

    Raises:
        OSError: If the file cannot be written.
    """
    directory = path.parent if str(path.parent) else Path(".")
    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", dir=directory)
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(data)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise
