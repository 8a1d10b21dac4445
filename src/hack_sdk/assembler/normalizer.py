"""
Hack Assembly Line Normalizer
=============================

First stage of the assembler. Whitespace carries no meaning in Hack
assembly (there are no string literals), so every whitespace character is
removed before the comment marker is searched for:

    "  D = M   // load x"   ->   "D=M"
    "// comment only"       ->   (dropped)
    ""                      ->   (dropped)

Each surviving line keeps the location of the physical line it came from,
which is used only for error messages and listings.
"""

import re
from dataclasses import dataclass

from hack_sdk.errors import SourceLocation

COMMENT_MARKER = "//"

_WHITESPACE = re.compile(r"\s+")


@dataclass(frozen=True)
class SourceLine:
    """
    A normalized, non-empty instruction candidate.

    Attributes:
        text: Line content with whitespace and comments removed
        location: Physical line the text came from
        raw: The original line, for error context
    """
    text: str
    location: SourceLocation
    raw: str = ""


def clean_line(line: str) -> str:
    """Strip whitespace and any trailing comment from a single line."""
    stripped = _WHITESPACE.sub("", line)
    return stripped.split(COMMENT_MARKER, 1)[0]


def normalize_source(text: str, filename: str = "<input>") -> list[SourceLine]:
    """
    Normalize assembly source into ordered instruction candidates.

    Args:
        text: Raw source text
        filename: Virtual filename recorded in each location

    Returns:
        Non-empty cleaned lines in source order
    """
    lines = []
    for lineno, raw in enumerate(text.splitlines(), start=1):
        cleaned = clean_line(raw)
        if cleaned:
            lines.append(SourceLine(
                text=cleaned,
                location=SourceLocation(filename, lineno, 1),
                raw=raw.strip(),
            ))
    return lines


def normalize_lines(text: str) -> list[str]:
    """Return just the cleaned text of each non-empty line."""
    return [line.text for line in normalize_source(text)]
