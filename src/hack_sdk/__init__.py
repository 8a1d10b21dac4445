"""
Hack SDK - Assembler Toolchain for the Hack Computer
====================================================

This package provides the assembler for the Hack platform, the 16-bit
teaching computer with a 15-bit address space, two registers (A and D)
and memory-mapped screen and keyboard.

Main Components
---------------
- **assembler**: Hack assembler (hackasm)
    Converts assembly source files (.asm) to machine code text (.hack)

Quick Start
-----------
Assemble a program:
    >>> from hack_sdk.assembler import Assembler
    >>> asm = Assembler()
    >>> words = asm.assemble_file("Max.asm")
    >>> asm.write_hack("Max.hack")

Or use the command-line tool:
    $ hackasm Max.asm
"""

__version__ = "1.0.0"

from hack_sdk.assembler import Assembler, assemble, assemble_file
from hack_sdk.errors import (
    HackError,
    AssemblerError,
    AssemblySyntaxError,
    EncodingError,
    AddressRangeError,
    DuplicateSymbolError,
    SourceLocation,
)

__all__ = [
    "__version__",
    # Assembler
    "Assembler",
    "assemble",
    "assemble_file",
    # Exception hierarchy
    "HackError",
    "AssemblerError",
    "AssemblySyntaxError",
    "EncodingError",
    "AddressRangeError",
    "DuplicateSymbolError",
    "SourceLocation",
]
