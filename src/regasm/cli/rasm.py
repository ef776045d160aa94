"""
rasm - Assembler Front-End Command-Line Interface
=================================================

This module implements the command-line interface for the front-end.
It scans and resolves a source file and prints the annotated token
stream, one token per line.

Usage Examples
--------------
Basic run:
    $ rasm program.s

Smaller register file:
    $ rasm --max-register 15 program.s

Only check for errors:
    $ rasm -q program.s

Verbose mode:
    $ rasm -v program.s

The register bound can also come from the REGASM_MAX_REGISTER
environment variable; --max-register takes precedence.
"""

from pathlib import Path
from typing import Optional
import logging
import sys

import click

from regasm import __version__
from regasm.assembler import Assembler, AssemblerConfig
from regasm.assembler.instructions import UINT32_MAX
from regasm.cli.errors import ExitCode, handle_cli_exception

logger = logging.getLogger(__name__)


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
    "--max-register",
    type=click.IntRange(0, UINT32_MAX),
    default=None,
    help="Highest valid register index (default: 31, or REGASM_MAX_REGISTER)",
)
@click.option(
    "-q", "--quiet",
    is_flag=True,
    help="Do not print the token stream, only diagnostics",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Verbose output",
)
@click.version_option(version=__version__, prog_name="rasm")
def main(
    input_file: Path,
    max_register: Optional[int],
    quiet: bool,
    verbose: bool,
) -> None:
    """
    Tokenize and resolve register-machine assembly source.

    INPUT_FILE is the assembly source file to process.

    Every token is printed with its kind, text, length and resolved
    value (opcode, register index, immediate or label line).

    \b
    Examples:
        rasm prog.s                    # Print the annotated tokens
        rasm --max-register 15 prog.s  # Allow only r0..r15
        rasm -q prog.s                 # Diagnostics only
    """
    setup_logging(verbose)

    try:
        config = AssemblerConfig.from_env()
        if max_register is not None:
            config.max_register = max_register

        asm = Assembler(config)
        asm.tokenize_file(input_file)
    except Exception as e:
        handle_cli_exception(e, verbose=verbose, error_type="Tokenize")

    if not quiet:
        click.echo(asm.get_token_dump())

    if asm.has_errors():
        click.echo(asm.get_error_report(), err=True)
        sys.exit(ExitCode.BUILD_ERROR)

    logger.debug("%s: no diagnostics", input_file)


if __name__ == "__main__":
    main()
