"""hookscope CLI entry point."""

import logging

import click


@click.group()
@click.option("--verbose", "-v", is_flag=True, default=False, help="Enable debug logging.")
def cli(verbose: bool):
    """hookscope — lifecycle callback analysis CLI."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


# Register commands
from hookscope.cli.report_cmd import callbacks, report  # noqa: E402

cli.add_command(report)
cli.add_command(callbacks)
