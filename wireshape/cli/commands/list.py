"""CLI command for listing available formats."""

import click

from wireshape.formats import list_format_kinds


@click.command("list-formats")
def list_formats():
    """List available formats.

    Shows all registered format kinds usable in format rules.
    """
    click.echo("Available Formats:")
    for kind in list_format_kinds():
        click.echo(f"  - {kind}")
