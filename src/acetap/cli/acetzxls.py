"""
acetzxls - TZX Listing Command-Line Interface
=============================================

Lists the turbo data blocks of a TZX file written by acetap2tzx.

Usage Examples
--------------
    $ acetzxls game.tap.tzx
    $ acetzxls -v game.tap.tzx

Output format:
      #  Role     Flag   Length   Pilot
      0  header   0x00       25    8192
      1  data     0xFF      512    1024
"""

from pathlib import Path

import click

from acetap import __version__
from acetap.cli.errors import handle_cli_exception
from acetap.tzx import ACE_TIMINGS, TzxParser


@click.command()
@click.argument(
    "tzx_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Show pulse timings for every block",
)
@click.version_option(version=__version__, prog_name="acetzxls")
def main(tzx_file: Path, verbose: bool) -> None:
    """
    List the blocks of a Jupiter ACE TZX file.

    \b
    Example:
      acetzxls game.tap.tzx
    """
    try:
        parser = TzxParser.from_file(tzx_file)
        info = parser.get_info()

        if verbose:
            click.echo(f"TZX version {info['version']}: {tzx_file}")
            native = ACE_TIMINGS.to_native()
            click.echo(
                "ACE timings (3.25 MHz T-states): "
                + ", ".join(f"{name} {value}" for name, value in native.items())
            )
            click.echo("-" * 40)

        click.echo(f"{'#':>3}  {'Role':<8} {'Flag':<6} {'Length':>6} {'Pilot':>7}")
        click.echo("-" * 34)

        for index, block in enumerate(parser.blocks):
            role = block.role.name.lower() if block.role is not None else "?"
            click.echo(
                f"{index:>3}  {role:<8} 0x{block.flag:02X}   "
                f"{len(block.payload):>6} {block.record.pilot_pulses:>7}"
            )
            if verbose:
                record = block.record
                click.echo(
                    f"       pilot {record.pilot}  sync {record.sync1}/{record.sync2}  "
                    f"bits {record.zero}/{record.one}  (TZX T-states)"
                )
                if block.end_mark is not None:
                    pulses = "/".join(str(p) for p in block.end_mark.pulses)
                    click.echo(f"       end mark {pulses}")

        if verbose:
            click.echo("-" * 34)
            click.echo(f"Total: {info['block_count']} blocks "
                       f"({info['header_blocks']} header, {info['data_blocks']} data)")
            click.echo(f"Payload: {info['payload_bytes']} bytes")

    except Exception as e:
        handle_cli_exception(e, verbose=verbose)


if __name__ == "__main__":
    main()
