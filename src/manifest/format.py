# src/manifest/format.py — v1
"""Checksum manifest line format.

One entry per line::

    <hex digest><whitespace>[*]<file name>

Lines whose first non-whitespace character is ``#`` or ``;`` are comments and
blank lines are ignored. The digest is case-insensitive on read and written
upper-case. File names are relative to the manifest's own directory.

Each line is classified by a small scanner into Blank, Comment, Entry or
Malformed; parse_manifest() turns the first Malformed line into a
ManifestFormatError for the whole file.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Union

from confvault.core.errors import ManifestFormatError
from confvault.core.models import ManifestEntry

COMMENT_MARKERS = ("#", ";")
BINARY_MARKER = "*"
_HEX_DIGITS = frozenset("0123456789abcdefABCDEF")


@dataclass(frozen=True)
class Blank:
    line_number: int


@dataclass(frozen=True)
class Comment:
    line_number: int
    text: str


@dataclass(frozen=True)
class Entry:
    line_number: int
    hash: str
    name: str


@dataclass(frozen=True)
class Malformed:
    line_number: int
    raw: str


Token = Union[Blank, Comment, Entry, Malformed]


def tokenize_line(raw: str, line_number: int = 0) -> Token:
    """Classify a single manifest line."""
    line = raw.rstrip("\r\n")
    text = line.strip()
    if not text:
        return Blank(line_number)
    if text[0] in COMMENT_MARKERS:
        return Comment(line_number, text)

    n = len(text)
    pos = 0
    while pos < n and text[pos] in _HEX_DIGITS:
        pos += 1
    if pos == 0:
        return Malformed(line_number, line)
    digest = text[:pos]

    gap = pos
    while pos < n and text[pos].isspace():
        pos += 1
    if pos == gap:
        return Malformed(line_number, line)

    if pos < n and text[pos] == BINARY_MARKER:
        pos += 1

    name = text[pos:].strip()
    if not name:
        return Malformed(line_number, line)
    return Entry(line_number, digest, name)


def tokenize(lines: Iterable[str]) -> list[Token]:
    return [tokenize_line(raw, i) for i, raw in enumerate(lines, start=1)]


def parse_manifest(
    lines: Iterable[str],
    algorithm: str,
    source: Path | None = None,
) -> list[ManifestEntry]:
    """Parse manifest lines into entries.

    Raises:
        ManifestFormatError: On the first line that is neither blank, a
            comment, nor a well-formed entry.
    """
    entries: list[ManifestEntry] = []
    for token in tokenize(lines):
        if isinstance(token, Malformed):
            raise ManifestFormatError(token.raw, token.line_number, source)
        if isinstance(token, Entry):
            entries.append(
                ManifestEntry(
                    expected_hash=token.hash,
                    algorithm=algorithm,
                    file_name=token.name,
                    line_number=token.line_number,
                )
            )
    return entries


def read_manifest(path: Path, algorithm: str) -> list[ManifestEntry]:
    """Read and parse a manifest file (UTF-8, optional BOM)."""
    text = Path(path).read_text(encoding="utf-8-sig")
    return parse_manifest(text.splitlines(), algorithm, source=Path(path))


def format_entry(digest: str, file_name: str) -> str:
    """Render one manifest line, without trailing newline."""
    return f"{digest.upper()} {BINARY_MARKER}{file_name}"
