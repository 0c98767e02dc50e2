"""Diagnostics and error types for sprite compilation."""

from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Iterator, Literal


DiagnosticKind = Literal[
    "parse-error",
    "validation-error",
    "unsupported-style",
    "invalid-style",
    "suspicious-style",
    "suspicious-content",
    "suspicious-id",
    "invalid-viewbox",
    "duplicate-identifier",
]

# Kinds that exclude the icon from the map
ERROR_KINDS: frozenset[str] = frozenset(["parse-error", "validation-error"])


class SpriteError(Exception):
    """Base error for sprite compilation."""


class ParseError(SpriteError):
    """Raised when an SVG source is not well-formed.

    Attributes:
        line: 1-based line number of the offending position, if known.
        column: 1-based column number, if known.
        offset: Byte offset into the input, if known.
    """

    def __init__(
        self,
        message: str,
        line: int | None = None,
        column: int | None = None,
        offset: int | None = None,
    ) -> None:
        self.message = message
        self.line = line
        self.column = column
        self.offset = offset
        super().__init__(str(self))

    def __str__(self) -> str:
        if self.line is None:
            return self.message
        location = f"line {self.line}, column {self.column}"
        if self.offset is not None:
            location += f", byte {self.offset}"
        return f"{self.message} ({location})"


class ValidationError(SpriteError):
    """Raised when a parsed icon cannot be used in a sprite map."""


@dataclass(frozen=True)
class Diagnostic:
    """A single non-fatal finding about one source file (or the map)."""

    kind: DiagnosticKind
    source: Path | None
    detail: str

    @property
    def is_error(self) -> bool:
        """True if the finding excluded the icon from the map."""
        return self.kind in ERROR_KINDS

    def __str__(self) -> str:
        label = "ERROR" if self.is_error else "WARNING"
        if self.source is None:
            return f"[{label}] {self.detail}"
        return f"[{label}] {self.source.name}: {self.detail}"


class Diagnostics:
    """Append-only collection of diagnostics."""

    def __init__(self, items: Iterable[Diagnostic] = ()) -> None:
        self._items: list[Diagnostic] = list(items)

    def add(self, kind: DiagnosticKind, source: Path | None, detail: str) -> Diagnostic:
        """Record a new diagnostic and return it."""
        diagnostic = Diagnostic(kind=kind, source=source, detail=detail)
        self._items.append(diagnostic)
        return diagnostic

    def extend(self, items: Iterable[Diagnostic]) -> None:
        """Append existing diagnostics, keeping their order."""
        self._items.extend(items)

    def of_kind(self, kind: DiagnosticKind) -> list[Diagnostic]:
        return [d for d in self._items if d.kind == kind]

    @property
    def errors(self) -> list[Diagnostic]:
        return [d for d in self._items if d.is_error]

    @property
    def warnings(self) -> list[Diagnostic]:
        return [d for d in self._items if not d.is_error]

    def __iter__(self) -> Iterator[Diagnostic]:
        return iter(tuple(self._items))

    def __len__(self) -> int:
        return len(self._items)

    def __bool__(self) -> bool:
        return bool(self._items)
