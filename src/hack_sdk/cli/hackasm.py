"""
hackasm - Hack Assembler Command-Line Interface
===============================================

This module implements the command-line interface for the Hack assembler.

Usage Examples
--------------
Basic assembly (writes Max.hack next to the source):
    $ hackasm Max.asm

With output file:
    $ hackasm Max.asm -o build/Max.hack

Generate all output files:
    $ hackasm Max.asm -s Max.sym -l Max.lst

Verbose mode:
    $ hackasm -v Max.asm

On success nothing is written to stderr. On failure a single error message
is written to stderr and no output file is created.
"""

import logging
from pathlib import Path
from typing import Optional

import click

from hack_sdk import __version__
from hack_sdk.assembler import Assembler
from hack_sdk.cli.errors import handle_cli_exception


def setup_logging(verbose: bool) -> None:
    """Configure logging based on verbosity."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s" if verbose else "%(message)s",
    )


# =============================================================================
# CLI Definition
# =============================================================================

@click.command()
@click.argument(
    "input_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "-o", "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Output .hack file (default: input with .hack suffix)",
)
@click.option(
    "-s", "--symbols",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Generate symbol file (labels and variables)",
)
@click.option(
    "-l", "--listing",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Generate listing file",
)
@click.option(
    "--allow-duplicate-labels",
    is_flag=True,
    help="Let a repeated (LABEL) definition overwrite the earlier one "
         "instead of failing.",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Verbose output",
)
@click.version_option(version=__version__, prog_name="hackasm")
def main(
    input_file: Path,
    output: Optional[Path],
    symbols: Optional[Path],
    listing: Optional[Path],
    allow_duplicate_labels: bool,
    verbose: bool,
) -> None:
    """
    Assemble Hack assembly source into Hack machine code.

    INPUT_FILE is the assembly source file (.asm) to assemble.

    \b
    Examples:
        hackasm Max.asm              # Outputs Max.hack
        hackasm Max.asm -o out.hack  # Specify output file
        hackasm -s Max.sym Max.asm   # Also write the symbol table
    """
    setup_logging(verbose)

    output_file = output if output is not None else Assembler.default_output_path(input_file)

    asm = Assembler(verbose=verbose, allow_duplicate_labels=allow_duplicate_labels)

    try:
        if verbose:
            click.echo(f"Assembling {input_file}...")

        code = asm.assemble_file(input_file)

        asm.write_outputs(output_file, symbols_path=symbols, listing_path=listing)
        if verbose:
            click.echo(f"Wrote {len(code)} instructions to {output_file}")
            if symbols:
                click.echo(f"Wrote symbols to {symbols}")
            if listing:
                click.echo(f"Wrote listing to {listing}")

        if verbose:
            table = asm.get_symbol_table()
            click.echo(
                f"Assembly complete: {len(code)} instructions, "
                f"{len(table.labels)} labels, {len(table.variables)} variables"
            )

    except Exception as e:
        handle_cli_exception(e, verbose=verbose)


if __name__ == "__main__":
    main()
