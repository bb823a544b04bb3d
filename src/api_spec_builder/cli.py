"""CLI entry point for api-spec-builder."""

import logging
from pathlib import Path

import click
import yaml

from api_spec_builder.config import Configuration, load_configuration
from api_spec_builder.errors import SpecificationError
from api_spec_builder.inventory.loader import load_inventory
from api_spec_builder.spec.models import Specification
from api_spec_builder.spec.service import SpecificationAssembler


def _load_configuration(config_path: Path | None, merge: Path | None) -> Configuration:
    overrides = {"merge_specification_path": merge} if merge else {}
    if config_path:
        return load_configuration(config_path, **overrides)
    return Configuration(**overrides)


def dump_specification(specification: Specification, fmt: str) -> str:
    """Serialize a specification as JSON or YAML."""
    if fmt == "yaml":
        return yaml.safe_dump(specification.model_dump(mode="json"), sort_keys=False, allow_unicode=True)
    return specification.model_dump_json(indent=2)


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Log resolution details.")
def main(verbose: bool):
    """API Spec Builder: assemble an API specification from an endpoint inventory."""
    logging.basicConfig(level=logging.DEBUG if verbose else logging.WARNING)


@main.command()
@click.argument("inventory_path", type=click.Path(exists=True, path_type=Path))
@click.option("-o", "--output", required=True, type=click.Path(path_type=Path), help="Output file for the specification.")
@click.option("-c", "--config", "config_path", default=None, type=click.Path(exists=True, path_type=Path), help="YAML settings file.")
@click.option("--format", "fmt", default="json", type=click.Choice(["json", "yaml"]), help="Output format.")
@click.option("--merge", default=None, type=click.Path(exists=True, path_type=Path), help="Previously generated specification to merge with.")
def generate(inventory_path: Path, output: Path, config_path: Path | None, fmt: str, merge: Path | None):
    """Generate a specification document from an inventory file."""
    try:
        click.echo(f"Loading {inventory_path}...")
        inventory = load_inventory(inventory_path)
        click.echo(f"Found {len(inventory.endpoints)} endpoints.")

        configuration = _load_configuration(config_path, merge)
        specification = SpecificationAssembler(inventory, configuration).generate()
    except SpecificationError as e:
        raise click.ClickException(str(e)) from e

    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(dump_specification(specification, fmt), encoding="utf-8")
    click.echo(
        f"Specification saved to {output} "
        f"({len(specification.modules)} modules, {len(specification.types)} types)"
    )


@main.command()
@click.argument("inventory_path", type=click.Path(exists=True, path_type=Path))
@click.option("-c", "--config", "config_path", default=None, type=click.Path(exists=True, path_type=Path), help="YAML settings file.")
def types(inventory_path: Path, config_path: Path | None):
    """List the type catalog reachable from the inventory's endpoints."""
    try:
        inventory = load_inventory(inventory_path)
        configuration = _load_configuration(config_path, None)
        assembler = SpecificationAssembler(inventory, configuration)
        mappings = assembler.orphans.resolve(inventory.endpoints)
        catalog = assembler.types.catalog([m.endpoint for m in mappings])
    except SpecificationError as e:
        raise click.ClickException(str(e)) from e

    for type_ in catalog:
        click.echo(f"{type_.id}\t{type_.name}")
