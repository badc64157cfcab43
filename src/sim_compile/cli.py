"""bin2sim - convert a firmware binary into an IAR Simple Code file."""
from __future__ import annotations

from pathlib import Path

import click

from sim_core.errors import SimError
from sim_core.protocol import U32_MAX
from sim_compile.pipeline import convert_file


@click.command()
@click.argument("input_file", metavar="INPUT", type=click.Path(path_type=Path))
@click.argument("output_file", metavar="OUTPUT", type=click.Path(path_type=Path))
@click.option(
    "-s",
    "--start-address",
    type=click.IntRange(0, U32_MAX),
    default=0,
    show_default=True,
    help="Decimal address where the binary data should be loaded.",
)
def main(input_file: Path, output_file: Path, start_address: int) -> None:
    """Convert a firmware binary (.bin) into an IAR Simple Code (.sim) file."""
    try:
        convert_file(input_file, output_file, load_address=start_address)
    except (SimError, OSError) as e:
        # Fail closed with a single-line reason, no stack trace.
        print(f"FATAL: {e}")
        raise SystemExit(1)


if __name__ == "__main__":
    main()
