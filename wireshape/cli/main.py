"""Main CLI entry point for wireshape."""

import click

from wireshape import __version__
from wireshape.cli.commands.list import list_formats
from wireshape.cli.commands.render import render
from wireshape.cli.commands.validate import validate


@click.group()
@click.version_option(version=__version__)
def main():
    """Wireshape - declarative object-to-output transformation."""
    pass


main.add_command(render)
main.add_command(validate)
main.add_command(list_formats)


if __name__ == "__main__":
    main()
