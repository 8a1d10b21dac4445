"""
Hack Assembly Language Parser
=============================

This module classifies normalized source lines into statements. Each line
is classified once; later stages work on the resulting dataclasses and
never re-split the text.

Statement Types
---------------
1. **LabelDef**: label definition
   ```asm
   (LOOP)
   ```

2. **AddressingInstruction**: A-instruction with a literal or symbol
   ```asm
   @17
   @LOOP
   @i
   ```

3. **ComputeInstruction**: C-instruction with optional dest and jump
   ```asm
   D=M
   M=M+1
   0;JMP
   AMD=D|A;JNE
   ```

Symbol Syntax
-------------
Symbols are sequences of letters, digits, underscore (_), dot (.),
dollar sign ($) and colon (:) that do not begin with a digit.

Only the structure of compute instructions is checked here; whether the
mnemonics exist is decided by the encoder.
"""

import re
from dataclasses import dataclass
from typing import Optional, Union

from hack_sdk.errors import AssemblySyntaxError, SourceLocation
from hack_sdk.assembler.normalizer import SourceLine, normalize_source


SYMBOL_PATTERN = re.compile(r"[A-Za-z_.$:][A-Za-z0-9_.$:]*")
DECIMAL_PATTERN = re.compile(r"[0-9]+")


# =============================================================================
# Statement Data Classes
# =============================================================================

@dataclass
class Statement:
    """
    Base class for all parsed statements.

    Attributes:
        location: Source position for error reporting
        text: Normalized source text of the statement
    """
    location: SourceLocation
    text: str


@dataclass
class LabelDef(Statement):
    """Label definition ``(NAME)``."""
    name: str


@dataclass
class AddressingInstruction(Statement):
    """
    A-instruction ``@TOKEN``.

    Attributes:
        token: Decimal literal or symbol name
    """
    token: str

    @property
    def is_literal(self) -> bool:
        return DECIMAL_PATTERN.fullmatch(self.token) is not None


@dataclass
class ComputeInstruction(Statement):
    """
    C-instruction ``[DEST=]COMP[;JUMP]``.

    Attributes:
        comp: Computation mnemonic (always present)
        dest: Destination mnemonic, "" when omitted
        jump: Jump mnemonic, "" when omitted
    """
    comp: str
    dest: str = ""
    jump: str = ""


Instruction = Union[AddressingInstruction, ComputeInstruction]


# =============================================================================
# Parser
# =============================================================================

def is_symbol(name: str) -> bool:
    """Return True if name is a syntactically valid symbol."""
    return SYMBOL_PATTERN.fullmatch(name) is not None


def _syntax_error(message: str, line: SourceLine, hint: Optional[str] = None):
    return AssemblySyntaxError(
        message,
        location=line.location,
        hint=hint,
        source_line=line.raw or line.text,
    )


def parse_line(line: SourceLine) -> Statement:
    """
    Classify one normalized line.

    Raises:
        AssemblySyntaxError: If the line matches no statement form
    """
    text = line.text

    if text.startswith("("):
        return _parse_label(line)

    if text.startswith("@"):
        return _parse_addressing(line)

    return _parse_compute(line)


def _parse_label(line: SourceLine) -> LabelDef:
    text = line.text
    if not text.endswith(")") or len(text) < 2:
        raise _syntax_error(
            f"unterminated label definition '{text}'",
            line,
            hint="label definitions have the form (NAME)",
        )
    name = text[1:-1]
    if not name:
        raise _syntax_error("empty label name", line)
    if not is_symbol(name):
        raise _syntax_error(
            f"invalid label name '{name}'",
            line,
            hint="symbols use letters, digits, _ . $ : and cannot start with a digit",
        )
    return LabelDef(location=line.location, text=text, name=name)


def _parse_addressing(line: SourceLine) -> AddressingInstruction:
    text = line.text
    token = text[1:]
    if not token:
        raise _syntax_error(
            "missing address after '@'",
            line,
            hint="use @VALUE or @SYMBOL",
        )
    if not (DECIMAL_PATTERN.fullmatch(token) or is_symbol(token)):
        raise _syntax_error(
            f"invalid address '{token}'",
            line,
            hint="addresses are unsigned decimal numbers or symbol names",
        )
    return AddressingInstruction(location=line.location, text=text, token=token)


def _parse_compute(line: SourceLine) -> ComputeInstruction:
    text = line.text

    if text.count(";") > 1:
        raise _syntax_error(f"more than one ';' in '{text}'", line)
    body, has_jump, jump = text.partition(";")
    if has_jump and not jump:
        raise _syntax_error(f"missing jump after ';' in '{text}'", line)

    if body.count("=") > 1:
        raise _syntax_error(f"more than one '=' in '{text}'", line)
    if "=" in body:
        dest, _, comp = body.partition("=")
        if not dest:
            raise _syntax_error(f"missing destination before '=' in '{text}'", line)
    else:
        dest, comp = "", body

    if not comp:
        raise _syntax_error(
            f"missing computation in '{text}'",
            line,
            hint="compute instructions have the form [DEST=]COMP[;JUMP]",
        )

    return ComputeInstruction(
        location=line.location, text=text, comp=comp, dest=dest, jump=jump,
    )


def parse_lines(lines: list[SourceLine]) -> list[Statement]:
    """Classify a list of normalized lines, preserving order."""
    return [parse_line(line) for line in lines]


def parse_source(text: str, filename: str = "<input>") -> list[Statement]:
    """
    Normalize and parse assembly source.

    Args:
        text: Raw source text
        filename: Virtual filename for error messages

    Returns:
        Statements in source order

    Raises:
        AssemblySyntaxError: On the first malformed line
    """
    return parse_lines(normalize_source(text, filename))
