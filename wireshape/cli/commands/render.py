"""CLI command for rendering JSON data through a transformer definition."""

import json
import sys

import click

from wireshape import render_from_yaml
from wireshape.cli.commands._vars import parse_cli_vars
from wireshape.core.exceptions import DefinitionError, FormatError, SpecError
from wireshape.core.logging import configure_logging


@click.command()
@click.argument("definitions_path", type=click.Path(exists=True))
@click.argument("name")
@click.option(
    "--input",
    "input_file",
    type=click.File("r"),
    default="-",
    help="JSON file with the source object or list of objects (default: stdin)",
)
@click.option("--minimal", is_flag=True, help="Use the minimal structure variant")
@click.option(
    "--vars",
    multiple=True,
    help="CLI variables in key=value format (can be used multiple times)",
)
@click.option("--indent", type=int, default=2, help="JSON indentation (default: 2)")
@click.option(
    "--log-level",
    default="WARNING",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]),
    help="Log level (default: WARNING)",
)
@click.option(
    "--json-logs",
    is_flag=True,
    help="Use JSON format for logs",
)
def render(
    definitions_path: str,
    name: str,
    input_file,
    minimal: bool,
    vars: tuple,
    indent: int,
    log_level: str,
    json_logs: bool,
):
    """Render JSON data with the transformer NAME from DEFINITIONS_PATH.

    Examples:

        wireshape render transformers.yaml post --input posts.json
        cat post.json | wireshape render transformers.yaml post --minimal
        wireshape render transformers.yaml user --input users.json --vars admin=true
    """
    configure_logging(level=log_level, json_format=json_logs, transformer_name=name)

    cli_vars = parse_cli_vars(vars)

    try:
        data = json.load(input_file)
    except json.JSONDecodeError as e:
        click.echo(f"Invalid JSON input: {e}", err=True)
        sys.exit(1)

    try:
        result = render_from_yaml(
            definitions_path, name, data, minimal=minimal, cli_vars=cli_vars
        )
    except DefinitionError as e:
        click.echo(f"Definition error: {e}", err=True)
        sys.exit(1)
    except (SpecError, FormatError) as e:
        click.echo(f"Transform error: {e}", err=True)
        sys.exit(1)

    click.echo(json.dumps(result, indent=indent or None, default=str))
