"""
Hack Assembler - Main Interface
===============================

This module provides the main Assembler class, which is the primary interface
for assembling Hack source code. It coordinates the normalizer, parser and
the two code generation passes to produce .hack files.

Example Usage
-------------
>>> from hack_sdk.assembler import Assembler
>>>
>>> asm = Assembler()
>>> asm.assemble_string('''
... // Computes R0 = 2 + 3
...     @2
...     D=A
...     @3
...     D=D+A
...     @0
...     M=D
... ''')
>>>
>>> words = asm.get_code()
>>> asm.write_hack("Add.hack")

Command-Line Usage
------------------
    $ hackasm Add.asm                 # writes Add.hack
    $ hackasm Add.asm -o out.hack -s Add.sym -l Add.lst

Each call to assemble_string() or assemble_file() starts with a fresh
symbol table. Output is only available after both passes succeed, so a
failed run never leaves a partial .hack file behind.
"""

import logging
from pathlib import Path
from typing import Optional

from hack_sdk.assembler.codegen import (
    InstructionEncoder,
    ResolvedProgram,
    resolve_labels,
)
from hack_sdk.assembler.parser import parse_source
from hack_sdk.assembler.symbols import SymbolTable
from hack_sdk.errors import AssemblerError

logger = logging.getLogger(__name__)

HACK_SUFFIX = ".hack"


class Assembler:
    """
    Main Hack assembler class.

    Attributes:
        verbose: If True, log progress at INFO level
        allow_duplicate_labels: If True, a repeated label definition
            overwrites the earlier one instead of raising DuplicateSymbolError
    """

    def __init__(self, verbose: bool = False, allow_duplicate_labels: bool = False):
        self._verbose = verbose
        self._allow_duplicate_labels = allow_duplicate_labels
        self._source_file: Optional[Path] = None
        self._program: Optional[ResolvedProgram] = None
        self._code: Optional[list[str]] = None

    # =========================================================================
    # Assembly Methods
    # =========================================================================

    def assemble_string(self, source: str, filename: str = "<input>") -> list[str]:
        """
        Assemble source code from a string.

        The pipeline is:
        1. Normalize and classify lines (parser)
        2. Bind labels (pass 1)
        3. Encode instructions, allocating variables (pass 2)

        Args:
            source: Assembly source code
            filename: Virtual filename for error messages

        Returns:
            Encoded instructions, one 16-character string each

        Raises:
            AssemblerError: If assembly fails
        """
        self._program = None
        self._code = None

        statements = parse_source(source, filename)
        self._log(f"Parsed {len(statements)} statements from {filename}")

        symbols = SymbolTable(allow_redefinition=self._allow_duplicate_labels)
        program = resolve_labels(statements, symbols)
        self._log(
            f"Pass 1: {len(program)} instructions, "
            f"{len(symbols.labels)} labels"
        )

        code = InstructionEncoder(symbols).encode_all(program.instructions)
        self._log(
            f"Pass 2: {len(code)} words, "
            f"{len(symbols.variables)} variables"
        )

        self._program = program
        self._code = code
        return list(code)

    def assemble_file(self, filepath: str | Path) -> list[str]:
        """
        Assemble source code from a file.

        Raises:
            AssemblerError: If assembly fails
            FileNotFoundError: If source file not found
        """
        filepath = Path(filepath)
        self._source_file = filepath
        self._log(f"Assembling {filepath}...")

        source = filepath.read_text(encoding="utf-8-sig")
        return self.assemble_string(source, str(filepath))

    # =========================================================================
    # Results
    # =========================================================================

    def _require_program(self) -> ResolvedProgram:
        if self._program is None or self._code is None:
            raise AssemblerError("no successful assembly to report on")
        return self._program

    def get_code(self) -> list[str]:
        """Return the encoded instructions of the last successful run."""
        self._require_program()
        return list(self._code)

    def get_hack_text(self) -> str:
        """Return the .hack file contents: one word per line, newline-terminated."""
        return "".join(f"{word}\n" for word in self.get_code())

    def get_symbols(self) -> dict[str, int]:
        """Return label and variable bindings (predefined symbols excluded)."""
        symbols = self._require_program().symbols
        return {sym.name: sym.value for sym in symbols.user_symbols()}

    def get_symbol_table(self) -> SymbolTable:
        return self._require_program().symbols

    def get_symbols_text(self) -> str:
        """Return the symbol file contents: name and address, sorted by address."""
        symbols = self._require_program().symbols
        lines = ["# Symbol table", "# Generated by hackasm"]
        lines.extend(f"{sym.name} {sym.value}" for sym in symbols.user_symbols())
        return "\n".join(lines) + "\n"

    def get_listing(self) -> str:
        """
        Get the assembly listing as a string.

        Returns:
            Instruction index, binary word and source text per instruction,
            followed by the label and variable table.
        """
        program = self._require_program()
        lines = []
        lines.append("Hack Assembler Listing")
        lines.append("=" * 60)
        lines.append("")
        lines.append("Addr   Code              Line  Source")
        lines.append("-" * 60)
        for index, (inst, word) in enumerate(zip(program.instructions, self._code)):
            lines.append(f"{index:5d}  {word}  {inst.location.line:4d}  {inst.text}")
        lines.append("")
        lines.append("Symbol Table")
        lines.append("-" * 30)
        for sym in program.symbols.user_symbols():
            lines.append(f"{sym.name:20s} = {sym.value:5d}  ({sym.kind.value})")
        return "\n".join(lines) + "\n"

    # =========================================================================
    # Output Methods
    # =========================================================================

    @staticmethod
    def default_output_path(input_path: str | Path) -> Path:
        """Derive the output path by replacing the source suffix with .hack."""
        return Path(input_path).with_suffix(HACK_SUFFIX)

    def write_hack(self, filepath: str | Path) -> None:
        """Write the encoded program in .hack text format."""
        text = self.get_hack_text()
        Path(filepath).write_text(text, encoding="utf-8")
        self._log(f"Wrote {len(self._code)} words to {filepath}")

    def write_symbols(self, filepath: str | Path) -> None:
        """
        Write symbol table file.

        Format: name address (one per line, sorted by address)
        """
        text = self.get_symbols_text()
        Path(filepath).write_text(text, encoding="utf-8")
        self._log(f"Wrote symbols to {filepath}")

    def write_listing(self, filepath: str | Path) -> None:
        """Write assembly listing file."""
        text = self.get_listing()
        Path(filepath).write_text(text, encoding="utf-8")
        self._log(f"Wrote listing to {filepath}")

    def write_outputs(
        self,
        hack_path: str | Path,
        symbols_path: str | Path | None = None,
        listing_path: str | Path | None = None,
    ) -> None:
        """
        Write the .hack file and any requested companion files together.

        All file contents are built before the first write. If any write
        fails, files already written by this call are removed and the
        error is re-raised, so no partial set of outputs is left behind.

        Raises:
            OSError: If an output file cannot be written
        """
        outputs = [(Path(hack_path), self.get_hack_text())]
        if symbols_path is not None:
            outputs.append((Path(symbols_path), self.get_symbols_text()))
        if listing_path is not None:
            outputs.append((Path(listing_path), self.get_listing()))

        written: list[Path] = []
        try:
            for path, text in outputs:
                path.write_text(text, encoding="utf-8")
                written.append(path)
                self._log(f"Wrote {path}")
        except OSError:
            for path in written:
                path.unlink(missing_ok=True)
            raise

    def _log(self, message: str) -> None:
        logger.log(logging.INFO if self._verbose else logging.DEBUG, message)


# =============================================================================
# Convenience Functions
# =============================================================================

def assemble(source: str, filename: str = "<input>") -> list[str]:
    """
    Convenience function to assemble source code.

    Returns:
        Encoded instructions

    Raises:
        AssemblerError: If assembly fails
    """
    return Assembler().assemble_string(source, filename)


def assemble_file(filepath: str | Path) -> list[str]:
    """
    Convenience function to assemble a file.

    Raises:
        AssemblerError: If assembly fails
    """
    return Assembler().assemble_file(filepath)
