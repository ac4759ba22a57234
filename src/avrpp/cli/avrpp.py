"""
avrpp - Pseudo-Assembly Preprocessor Command-Line Interface
===========================================================

Custom-assembly preprocessor for AVR devices (ATmega328P and similar).
Reads a source mixing native AVR assembly with ``$`` DSL sentences and
writes plain AVR assembly.

Usage Examples
--------------
Basic run:
    $ avrpp -i main.pasm -o main.asm

Options in any order:
    $ avrpp --out main.asm --in main.pasm

Use the Y pointer pair for memory operands, no report:
    $ avrpp -i main.pasm -o main.asm -p y -q

Verbose mode:
    $ avrpp -v -i main.pasm -o main.asm
"""

from pathlib import Path
from typing import Optional
import logging
import sys

import click

from avrpp import __version__
from avrpp.cli.errors import ExitCode, handle_cli_exception
from avrpp.config import POINTER_PAIRS, ScratchRegisters, TranspilerConfig
from avrpp.report import format_report
from avrpp.transpiler import Transpiler

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool) -> None:
    """Configure logging based on verbosity."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s" if verbose else "%(message)s",
    )


# =============================================================================
# CLI Definition
# =============================================================================

@click.command(
    context_settings={"help_option_names": ["-h", "--help"]},
    no_args_is_help=True,
)
@click.option(
    "-i", "--in", "input_file",
    required=True,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Source file mixing AVR assembly and $ sentences",
)
@click.option(
    "-o", "--out", "output_file",
    required=True,
    type=click.Path(dir_okay=False, path_type=Path),
    help="Output AVR assembly file (replaced atomically)",
)
@click.option(
    "-p", "--pointer",
    type=click.Choice(sorted(POINTER_PAIRS), case_sensitive=False),
    default=None,
    help="Pointer pair for mem[...] operands. Default: X (r27:r26), "
         "or AVRPP_POINTER from the environment.",
)
@click.option(
    "-q", "--quiet",
    is_flag=True,
    help="Do not print the statistics report",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Verbose output",
)
@click.version_option(version=__version__, prog_name="avrpp")
def main(
    input_file: Path,
    output_file: Path,
    pointer: Optional[str],
    quiet: bool,
    verbose: bool,
) -> None:
    """
    Expand $ pseudo-assembly sentences into AVR instructions.

    Every other line (comments, blank lines, native instructions) is copied
    to the output unchanged and in order.

    \b
    Sentences:
        $ op1 -> dest                       move / store
        $ op1 <+ - * & | ^> op2 -> dest     compute and store
        $ if op1 <cmp> op2 goto label       branch

    \b
    Examples:
        avrpp -i main.pasm -o main.asm
        avrpp --out main.asm --in main.pasm -q
    """
    setup_logging(verbose)

    config = TranspilerConfig.from_env()
    if pointer is not None:
        config.scratch = ScratchRegisters.for_pointer(pointer)
    if quiet:
        config.report = False

    tp = Transpiler(config, verbose=verbose)

    try:
        logger.debug(f"Transpiling {input_file} (pointer pair {config.scratch.pointer})")
        tp.transpile_file(input_file)

        if tp.has_errors():
            click.echo(tp.get_error_report(), err=True)
            sys.exit(ExitCode.BUILD_ERROR)

        for warning in tp.get_warnings():
            click.echo(f"Warning: {warning}", err=True)

        tp.write_output(output_file)

        if config.report:
            click.echo(format_report(tp.get_statistics()))

    except Exception as e:
        handle_cli_exception(e, verbose=verbose, error_type="Transpile")


if __name__ == "__main__":
    main()
