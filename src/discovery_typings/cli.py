"""CLI entry point for discovery-typings."""

from pathlib import Path

import click

from discovery_typings.config import load_config
from discovery_typings.errors import DiscoveryTypingsError
from discovery_typings.generator.service import ServiceGenerator
from discovery_typings.naming import get_revision
from discovery_typings.parser.detect import detect_format
from discovery_typings.parser.discovery import load_rest_description


def _build_generator(config_path: Path | None, output: Path, **overrides) -> ServiceGenerator:
    try:
        config = load_config(config_path, types_directory=output, **overrides)
    except DiscoveryTypingsError as e:
        raise click.UsageError(str(e))
    return ServiceGenerator(config)


@click.group()
def main():
    """Discovery Typings — generate TypeScript declarations from Google API Discovery documents."""
    pass


@main.command()
@click.argument("doc_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("-o", "--output", required=True, type=click.Path(file_okay=False, path_type=Path), help="Directory that receives one package directory per API.")
@click.option("--source", default=None, help="URL the document was fetched from (defaults to the file URI).")
@click.option("--new-revisions-only", is_flag=True, help="Skip the API when the existing output has a newer revision.")
@click.option("--config", "config_path", default=None, type=click.Path(exists=True, dir_okay=False, path_type=Path), help="YAML configuration file.")
@click.option("--max-line-length", default=None, type=int, help="Maximum comment line length.")
@click.option("--owner", "owners", multiple=True, help="Attribution line for the header (repeatable).")
def generate(doc_path: Path, output: Path, source: str | None, new_revisions_only: bool, config_path: Path | None, max_line_length: int | None, owners: tuple[str, ...]):
    """Generate typings from a local discovery document."""
    if detect_format(doc_path) != "rest":
        raise click.UsageError(f"{doc_path} is not a REST description")

    generator = _build_generator(config_path, output, max_line_length=max_line_length, owners=list(owners) or None)

    click.echo(f"Parsing {doc_path}...")
    try:
        description = load_rest_description(doc_path)
    except DiscoveryTypingsError as e:
        raise click.ClickException(str(e))
    source = source or doc_path.resolve().as_uri()

    try:
        written = generator.process_service(description, source, new_revisions_only)
    except DiscoveryTypingsError as e:
        raise click.ClickException(f"{description.id}: {e}")

    if written:
        click.echo(f"Done! Typings for {description.id} saved in {output}")


@main.command()
@click.option("-o", "--output", required=True, type=click.Path(file_okay=False, path_type=Path), help="Directory that receives one package directory per API.")
@click.option("--service", default=None, help="Only process the API with this name.")
@click.option("--new-revisions-only", is_flag=True, help="Skip APIs whose existing output has a newer revision.")
@click.option("--proxy", default=None, help="HTTP(S) proxy for the discovery service.")
@click.option("--discovery-json-dir", "discovery_json_directory", default=None, type=click.Path(file_okay=False, path_type=Path), help="Also save every processed discovery document here.")
@click.option("--config", "config_path", default=None, type=click.Path(exists=True, dir_okay=False, path_type=Path), help="YAML configuration file.")
def discover(output: Path, service: str | None, new_revisions_only: bool, proxy: str | None, discovery_json_directory: Path | None, config_path: Path | None):
    """Fetch APIs from the discovery service and generate typings for each."""
    generator = _build_generator(config_path, output, proxy=proxy, discovery_json_directory=discovery_json_directory)
    click.echo(f"types directory: {output}")

    try:
        written = generator.discover(service, new_revisions_only)
    except DiscoveryTypingsError as e:
        cause = f" ({e.__cause__})" if e.__cause__ else ""
        raise click.ClickException(f"{e}{cause}")

    click.echo(f"Done! Generated typings for {written} APIs in {output}")


@main.command()
@click.argument("file_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
def revision(file_path: Path):
    """Print the revision embedded in a generated file."""
    value = get_revision(file_path)
    if value is None:
        raise click.ClickException(f"No revision marker found in {file_path}")
    click.echo(str(value))
