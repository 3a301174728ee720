"""
acetap2tzx - TAP to TZX Converter Command-Line Interface
========================================================

This module implements the command-line interface for the converter.

Usage Examples
--------------
Convert a tape (writes game.tap.tzx):
    $ acetap2tzx game.tap

Choose the output file:
    $ acetap2tzx game.tap -o game.tzx

Refuse truncated tapes:
    $ acetap2tzx --strict game.tap

Show per-block progress:
    $ acetap2tzx -v game.tap
"""

import logging
from pathlib import Path
from typing import Optional

import click

from acetap import __version__
from acetap.cli.errors import handle_cli_exception
from acetap.converter import ConversionConfig, convert_file, derive_output_path


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
    type=click.Path(dir_okay=False, path_type=Path),
)
@click.option(
    "-o", "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Output TZX file (default: INPUT_FILE with .tzx appended)",
)
@click.option(
    "--strict",
    is_flag=True,
    help="Fail on a truncated final block instead of ignoring it",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Verbose output",
)
@click.version_option(version=__version__, prog_name="acetap2tzx")
def main(
    input_file: Path,
    output: Optional[Path],
    strict: bool,
    verbose: bool,
) -> None:
    """
    Convert a Jupiter ACE TAP file to TZX.

    INPUT_FILE is the TAP file to convert. The TZX file is written next
    to it with ".tzx" appended to the name.

    \b
    Examples:
      acetap2tzx game.tap
      acetap2tzx game.tap -o game.tzx
      acetap2tzx --strict game.tap
    """
    setup_logging(verbose)

    config = ConversionConfig(strict=strict)
    if output is None:
        output = derive_output_path(input_file, config.output_suffix)

    try:
        if verbose:
            click.echo(f"Input file: {input_file}", err=True)
            click.echo(f"Output file: {output}", err=True)

        result = convert_file(input_file, output, config)

        if verbose:
            click.echo(f"Created {output}")
            click.echo(f"  Header blocks: {result.header_blocks}")
            click.echo(f"  Data blocks:   {result.data_blocks}")
            click.echo(f"  Size: {result.bytes_written} bytes written")
            if result.truncated:
                click.echo("  Note: input ended inside a block; the partial block was skipped")
        else:
            click.echo(
                f"Created {output} ({result.blocks_written} blocks, "
                f"{result.bytes_written} bytes)"
            )

    except Exception as e:
        handle_cli_exception(e, verbose=verbose)


# =============================================================================
# Entry Point
# =============================================================================

if __name__ == "__main__":
    main()
