"""
Hack Assembler
==============

This package translates Hack assembly (.asm) into Hack machine code (.hack),
the text format read by the CPU emulator: one 16-character binary word per
line.

Main Components
---------------
- **Assembler**: Main assembler class that orchestrates the assembly process
- **normalize_source**: Strips whitespace and comments, drops blank lines
- **parse_source**: Classifies lines into labels, A- and C-instructions
- **SymbolTable**: Predefined, label and variable namespaces for one run
- **resolve_labels**: Pass 1, binds labels to instruction indices
- **InstructionEncoder**: Pass 2, encodes instructions to binary

Assembly Process
----------------
1. **Normalization**: whitespace and ``//`` comments removed, blank lines
   dropped.
2. **Parsing**: each line becomes a LabelDef, AddressingInstruction or
   ComputeInstruction.
3. **Pass 1**: labels bound to the index of the next real instruction.
4. **Pass 2**: instructions encoded; unknown symbols become variables
   from address 16 upward.

Example Usage
-------------
>>> from hack_sdk.assembler import assemble
>>> assemble("@0\\nD=D+1")
['0000000000000000', '1110011111010000']
"""

from hack_sdk.assembler.assembler import Assembler, assemble, assemble_file
from hack_sdk.assembler.normalizer import SourceLine, normalize_lines, normalize_source
from hack_sdk.assembler.parser import (
    Statement,
    LabelDef,
    AddressingInstruction,
    ComputeInstruction,
    parse_line,
    parse_source,
)
from hack_sdk.assembler.symbols import Symbol, SymbolKind, SymbolTable
from hack_sdk.assembler.codegen import (
    InstructionEncoder,
    ResolvedProgram,
    encode_program,
    resolve_labels,
)
from hack_sdk.assembler.opcodes import (
    COMP_TABLE,
    DEST_TABLE,
    JUMP_TABLE,
    PREDEFINED_SYMBOLS,
)

__all__ = [
    # Main class and functions
    "Assembler",
    "assemble",
    "assemble_file",
    # Normalizer
    "SourceLine",
    "normalize_lines",
    "normalize_source",
    # Parser
    "Statement",
    "LabelDef",
    "AddressingInstruction",
    "ComputeInstruction",
    "parse_line",
    "parse_source",
    # Symbols
    "Symbol",
    "SymbolKind",
    "SymbolTable",
    # Code generator
    "InstructionEncoder",
    "ResolvedProgram",
    "encode_program",
    "resolve_labels",
    # Tables
    "COMP_TABLE",
    "DEST_TABLE",
    "JUMP_TABLE",
    "PREDEFINED_SYMBOLS",
]
