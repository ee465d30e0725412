"""Service generator — turns REST descriptions into published typings packages."""

import json
import os
import tempfile
from pathlib import Path

import click

from discovery_typings.client import DiscoveryClient
from discovery_typings.config import Configuration
from discovery_typings.errors import DiscoveryTypingsError, MalformedDocumentError, ServiceProcessingError, ValidationError
from discovery_typings.generator.declarations import DeclarationGenerator
from discovery_typings.generator.stubs import StubFileGenerator
from discovery_typings.generator.templates import TEMPLATES, TemplateData, render_template
from discovery_typings.generator.validator import validate_files
from discovery_typings.naming import check_exists, get_package_name, get_revision, parse_version
from discovery_typings.parser.base import RestDescription
from discovery_typings.parser.discovery import get_all_namespaces

DECLARATION_FILE = "index.d.ts"
TESTS_FILE = "tests.ts"


def publish_files(destination: Path, files: dict[str, str]) -> None:
    """Write files into destination, each one replaced atomically."""
    destination.mkdir(parents=True, exist_ok=True)
    for filename, content in files.items():
        fd, tmp_name = tempfile.mkstemp(prefix=f".{filename}.", dir=destination)
        try:
            with os.fdopen(fd, "w", encoding="utf-8", newline="\n") as f:
                f.write(content)
            os.replace(tmp_name, destination / filename)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise


class ServiceGenerator:
    """Generates one typings package per API, one API at a time."""

    def __init__(self, config: Configuration, client: DiscoveryClient | None = None):
        self.config = config
        self.client = client
        self.declarations = DeclarationGenerator(config)
        self.stubs = StubFileGenerator(config)
        config.types_directory.mkdir(parents=True, exist_ok=True)

    def render_files(self, description: RestDescription, source: str, namespaces: list[str]) -> dict[str, str]:
        """Render every file of the package into memory.

        Returns dict of {filename: content}.
        """
        files: dict[str, str] = {}
        files[DECLARATION_FILE] = self.declarations.generate(description, source, namespaces)

        data = TemplateData(
            description=description,
            source=source,
            namespaces=namespaces,
            major_and_minor_version=parse_version(check_exists(description.version)),
            package_name=get_package_name(description),
            npm_scope=self.config.npm_scope,
            owners=self.config.owners,
            max_line_length=self.config.max_line_length,
        )
        for name in TEMPLATES:
            files[name] = render_template(name, data)

        files[TESTS_FILE] = self.stubs.generate(description, source, namespaces)
        return files

    def _revision_is_current(self, description: RestDescription, index_path: Path) -> bool:
        """False when the already generated file is more recent than description."""
        existing = get_revision(index_path)
        if existing is None:
            # regenerate rather than get stuck on a file we cannot read
            click.echo(f"Can't find previous revision in {DECLARATION_FILE}: {description.id}", err=True)
            return True

        new = int(description.revision)
        if existing > new:
            click.echo(
                f"Local revision {existing} is more recent than fetched {new}, skipping {description.id}",
                err=True,
            )
            return False
        return True

    def process_service(self, description: RestDescription, source: str, new_revisions_only: bool = False) -> bool:
        """Generate and publish the typings package of one API.

        Returns True when files were written, False when the API was skipped.
        """
        api_id = check_exists(description.id)
        check_exists(description.name)
        package_name = get_package_name(description)

        click.echo(f"Processing service with ID {api_id}...")

        documentation_link = description.documentation_link or self.config.fallback_documentation_links.get(api_id)
        if not documentation_link:
            raise MalformedDocumentError(
                f"No documentationLink found for service with ID {api_id}, can't write required Project header"
            )
        description = description.model_copy(update={"documentation_link": documentation_link})

        if not (description.revision or "").isdigit():
            click.echo(f"There's no revision in JSON of service with ID: {api_id}", err=True)
            return False

        destination = self.config.types_directory / package_name
        index_path = destination / DECLARATION_FILE
        if new_revisions_only and index_path.exists() and not self._revision_is_current(description, index_path):
            return False

        if self.config.discovery_json_directory:
            self.config.discovery_json_directory.mkdir(parents=True, exist_ok=True)
            dump_path = self.config.discovery_json_directory / f"{package_name}.json"
            document = {**description.document, "documentationLink": documentation_link}
            dump_path.write_text(json.dumps(document), encoding="utf-8")

        namespaces = get_all_namespaces(description)
        click.echo(f"Generating {api_id} definitions... {', '.join(description.labels)}")
        files = self.render_files(description, source, namespaces)

        errors = validate_files(files)
        if errors:
            raise ValidationError(errors)

        publish_files(destination, files)
        click.echo(f"  Created {destination}")
        return True

    def discover(self, service: str | None = None, new_revisions_only: bool = False) -> int:
        """Fetch APIs from the discovery service and process them.

        APIs are fetched and processed strictly one after another; the
        discovery service no longer copes with parallel requests.
        Returns the number of APIs written.
        """
        client = self.client or DiscoveryClient(proxy=self.config.proxy)
        click.echo("Discovering Google services...")

        found = 0
        written = 0
        for description, source in client.iter_rest_descriptions(service):
            if description.id in self.config.excluded_ids:
                continue
            found += 1
            try:
                if self.process_service(description, source, new_revisions_only):
                    written += 1
            except Exception as e:
                raise ServiceProcessingError(f"Error processing service: {description.name}") from e

        if found == 0:
            raise DiscoveryTypingsError("Can't find services")
        return written
