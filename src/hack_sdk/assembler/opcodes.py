"""
Hack Instruction Set Definition
===============================

This module defines the lookup tables used to encode Hack instructions.
Every Hack instruction is one 16-bit word, written as 16 ASCII '0'/'1'
characters in the .hack file.

Instruction Formats
-------------------
1. **A-instruction** (addressing): ``@value``

       0 vvvvvvvvvvvvvvv
       |  15-bit address or constant

2. **C-instruction** (compute): ``dest=comp;jump``

       1 1 1 a c1 c2 c3 c4 c5 c6 d1 d2 d3 j1 j2 j3
       |header| |   computation  | dest  | jump  |

   The ``a`` bit selects the ALU's second operand: 0 for the A register,
   1 for M (the memory cell at address A). Computations that differ only
   in A versus M share their six c-bits.

Memory Map
----------
| Address     | Use                          |
|-------------|------------------------------|
| 0-15        | virtual registers R0..R15    |
| 16-255      | static variables             |
| 16384-24575 | screen memory map (SCREEN)   |
| 24576       | keyboard memory map (KBD)    |
"""

from dataclasses import dataclass


# =============================================================================
# Word Layout
# =============================================================================

WORD_BITS = 16
ADDRESS_BITS = 15
MAX_ADDRESS = (1 << ADDRESS_BITS) - 1  # 32767

A_INSTRUCTION_PREFIX = "0"
C_INSTRUCTION_HEADER = "111"

# First address handed out to variable symbols
VARIABLE_BASE = 16


# =============================================================================
# Computation Table
# =============================================================================

@dataclass(frozen=True)
class CompCode:
    """
    Encoding of one computation mnemonic.

    Attributes:
        a_bit: '1' when the computation reads M, '0' when it reads A or neither
        bits: Six c-bits selecting the ALU function
    """
    a_bit: str
    bits: str

    def __str__(self) -> str:
        return self.a_bit + self.bits


COMP_TABLE: dict[str, CompCode] = {
    # Constants
    "0":   CompCode("0", "101010"),
    "1":   CompCode("0", "111111"),
    "-1":  CompCode("0", "111010"),
    # Register pass-through
    "D":   CompCode("0", "001100"),
    "A":   CompCode("0", "110000"),
    "M":   CompCode("1", "110000"),
    # Bitwise not
    "!D":  CompCode("0", "001101"),
    "!A":  CompCode("0", "110001"),
    "!M":  CompCode("1", "110001"),
    # Negation
    "-D":  CompCode("0", "001111"),
    "-A":  CompCode("0", "110011"),
    "-M":  CompCode("1", "110011"),
    # Increment
    "D+1": CompCode("0", "011111"),
    "A+1": CompCode("0", "110111"),
    "M+1": CompCode("1", "110111"),
    # Decrement
    "D-1": CompCode("0", "001110"),
    "A-1": CompCode("0", "110010"),
    "M-1": CompCode("1", "110010"),
    # Two-operand arithmetic
    "D+A": CompCode("0", "000010"),
    "D+M": CompCode("1", "000010"),
    "D-A": CompCode("0", "010011"),
    "D-M": CompCode("1", "010011"),
    "A-D": CompCode("0", "000111"),
    "M-D": CompCode("1", "000111"),
    # Two-operand logic
    "D&A": CompCode("0", "000000"),
    "D&M": CompCode("1", "000000"),
    "D|A": CompCode("0", "010101"),
    "D|M": CompCode("1", "010101"),
}


# =============================================================================
# Destination Table
# =============================================================================
# d1 = A register, d2 = D register, d3 = M (RAM[A])

DEST_TABLE: dict[str, str] = {
    "":    "000",  # value is not stored
    "M":   "001",
    "D":   "010",
    "MD":  "011",
    "A":   "100",
    "AM":  "101",
    "AD":  "110",
    "AMD": "111",
}


# =============================================================================
# Jump Table
# =============================================================================
# j1 = out < 0, j2 = out == 0, j3 = out > 0

JUMP_TABLE: dict[str, str] = {
    "":    "000",  # no jump
    "JGT": "001",
    "JEQ": "010",
    "JGE": "011",
    "JLT": "100",
    "JNE": "101",
    "JLE": "110",
    "JMP": "111",
}


# =============================================================================
# Predefined Symbols
# =============================================================================

SCREEN_ADDRESS = 16384
KBD_ADDRESS = 24576

PREDEFINED_SYMBOLS: dict[str, int] = {
    **{f"R{n}": n for n in range(16)},
    "SP": 0,
    "LCL": 1,
    "ARG": 2,
    "THIS": 3,
    "THAT": 4,
    "SCREEN": SCREEN_ADDRESS,
    "KBD": KBD_ADDRESS,
}


def to_address_bits(value: int) -> str:
    """Format a 0-32767 value as a 15-character binary string."""
    return format(value, f"0{ADDRESS_BITS}b")
