"""Shared parsing of --vars options."""

import sys

import click


def parse_cli_vars(vars: tuple) -> dict[str, str] | None:
    """Parse key=value pairs, exiting with an error on malformed input."""
    cli_vars = {}
    for var in vars:
        if "=" not in var:
            click.echo(f"Error: Invalid variable format: {var}. Use key=value", err=True)
            sys.exit(1)
        key, value = var.split("=", 1)
        cli_vars[key] = value
    return cli_vars or None
