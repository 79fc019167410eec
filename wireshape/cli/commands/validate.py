"""CLI command for validating definition files."""

import sys

import click

from wireshape import from_yaml
from wireshape.cli.commands._vars import parse_cli_vars
from wireshape.core.exceptions import DefinitionError


@click.command()
@click.argument("definitions_path", type=click.Path(exists=True))
@click.option(
    "--vars",
    multiple=True,
    help="CLI variables in key=value format (can be used multiple times)",
)
def validate(definitions_path: str, vars: tuple):
    """Validate a transformer definitions YAML file.

    Checks:
    - YAML syntax
    - Definition schema validation
    - Template variable resolution
    - Transformer references and cycles
    - Structure specs, format kinds, ordering and preloads

    Examples:

        wireshape validate transformers.yaml
        wireshape validate transformers.yaml --vars admin=false
    """
    cli_vars = parse_cli_vars(vars)

    try:
        catalog = from_yaml(definitions_path, cli_vars=cli_vars)
    except DefinitionError as e:
        click.echo(f"✗ Definitions validation failed: {e}", err=True)
        sys.exit(1)

    label = f" '{catalog.name}'" if catalog.name else ""
    click.echo(f"✓ Definitions{label} are valid")
    for name in catalog.names():
        definition = catalog.get_definition(name)
        minimal = len(definition.minimal) if definition.minimal is not None else "same"
        click.echo(
            f"  {name}: {len(definition.field_specs)} field(s), minimal: {minimal}"
        )
