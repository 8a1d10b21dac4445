"""
Hack Code Generator
===================

This module implements the two assembler passes over parsed statements.

Pass 1 (resolve_labels)
-----------------------
Walks the statements with an instruction counter starting at 0. Each
label definition is bound to the current counter and dropped from the
stream; every other statement is kept and advances the counter. The
result is a ResolvedProgram: the label-free instruction stream plus the
symbol table holding the label bindings.

Because pass 1 completes before anything is encoded, forward and backward
label references resolve identically.

Pass 2 (InstructionEncoder)
---------------------------
Encodes each instruction into a 16-character binary string:

    @value          0vvvvvvvvvvvvvvv
    dest=comp;jump  111accccccdddjjj

Addressing tokens go through SymbolTable.resolve_or_allocate(), so new
variables receive addresses in the order they are first referenced here.
"""

import difflib
import logging
from dataclasses import dataclass, field
from typing import Iterable

from hack_sdk.errors import AssemblerError, EncodingError
from hack_sdk.assembler.opcodes import (
    A_INSTRUCTION_PREFIX,
    C_INSTRUCTION_HEADER,
    COMP_TABLE,
    DEST_TABLE,
    JUMP_TABLE,
    to_address_bits,
)
from hack_sdk.assembler.parser import (
    AddressingInstruction,
    ComputeInstruction,
    Instruction,
    LabelDef,
    Statement,
)
from hack_sdk.assembler.symbols import SymbolTable

logger = logging.getLogger(__name__)


# =============================================================================
# Pass 1: Label Resolution
# =============================================================================

@dataclass
class ResolvedProgram:
    """
    Output of pass 1.

    Attributes:
        instructions: Instruction stream with label definitions removed;
                      list position is the instruction index
        symbols: Symbol table holding the label bindings
    """
    instructions: list[Instruction]
    symbols: SymbolTable = field(default_factory=SymbolTable)

    def __len__(self) -> int:
        return len(self.instructions)


def resolve_labels(
    statements: Iterable[Statement],
    symbols: SymbolTable,
) -> ResolvedProgram:
    """
    Bind every label to the index of the next real instruction.

    Args:
        statements: Parsed statements in source order
        symbols: Fresh per-run symbol table; labels are bound into it

    Returns:
        The label-free instruction stream and the populated table

    Raises:
        DuplicateSymbolError: If a label is defined twice and the table
                              does not allow redefinition
        AddressRangeError: If a label would point past address 32767
    """
    instructions: list[Instruction] = []

    for stmt in statements:
        if isinstance(stmt, LabelDef):
            symbols.define_label(
                stmt.name,
                len(instructions),
                location=stmt.location,
                source_line=stmt.text,
            )
        elif isinstance(stmt, (AddressingInstruction, ComputeInstruction)):
            instructions.append(stmt)
        else:
            raise AssemblerError(
                f"unexpected statement type {type(stmt).__name__}",
                location=stmt.location,
            )

    logger.debug(
        f"pass 1: {len(instructions)} instructions, "
        f"{len(symbols.labels)} labels"
    )
    return ResolvedProgram(instructions=instructions, symbols=symbols)


# =============================================================================
# Pass 2: Instruction Encoding
# =============================================================================

class InstructionEncoder:
    """
    Encodes instructions against a symbol table.

    The encoder holds no state of its own; the only mutation it causes is
    variable allocation inside the symbol table it was given.
    """

    def __init__(self, symbols: SymbolTable):
        self._symbols = symbols

    @property
    def symbols(self) -> SymbolTable:
        return self._symbols

    def encode(self, instruction: Instruction) -> str:
        """
        Encode one instruction as a 16-character binary string.

        Raises:
            EncodingError: Unknown computation, destination or jump mnemonic
            AddressRangeError: Address literal or variable out of range
        """
        if isinstance(instruction, AddressingInstruction):
            return self._encode_addressing(instruction)
        if isinstance(instruction, ComputeInstruction):
            return self._encode_compute(instruction)
        raise AssemblerError(
            f"cannot encode statement type {type(instruction).__name__}",
            location=instruction.location,
        )

    def encode_all(self, instructions: Iterable[Instruction]) -> list[str]:
        """Encode a stream of instructions, preserving order."""
        words = [self.encode(inst) for inst in instructions]
        logger.debug(
            f"pass 2: {len(words)} words, "
            f"{len(self._symbols.variables)} variables"
        )
        return words

    def _encode_addressing(self, inst: AddressingInstruction) -> str:
        address = self._symbols.resolve_or_allocate(
            inst.token,
            location=inst.location,
            source_line=inst.text,
        )
        return A_INSTRUCTION_PREFIX + to_address_bits(address)

    def _encode_compute(self, inst: ComputeInstruction) -> str:
        comp = COMP_TABLE.get(inst.comp)
        if comp is None:
            raise self._unknown("computation", inst.comp, COMP_TABLE, inst)

        dest = DEST_TABLE.get(inst.dest)
        if dest is None:
            raise self._unknown("destination", inst.dest, DEST_TABLE, inst)

        jump = JUMP_TABLE.get(inst.jump)
        if jump is None:
            raise self._unknown("jump", inst.jump, JUMP_TABLE, inst)

        return C_INSTRUCTION_HEADER + comp.a_bit + comp.bits + dest + jump

    @staticmethod
    def _unknown(kind: str, mnemonic: str, table: dict, inst: Instruction) -> EncodingError:
        candidates = [name for name in table if name]
        return EncodingError(
            kind,
            mnemonic,
            location=inst.location,
            source_line=inst.text,
            similar=difflib.get_close_matches(mnemonic, candidates, n=3),
        )


def encode_program(program: ResolvedProgram) -> list[str]:
    """Run pass 2 over a resolved program."""
    return InstructionEncoder(program.symbols).encode_all(program.instructions)
