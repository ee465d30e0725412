"""Naming, version and revision helpers shared by the generators."""

import re
from pathlib import Path
from typing import TypeVar

from discovery_typings.errors import MalformedDocumentError
from discovery_typings.parser.base import RestDescription

T = TypeVar("T")

TYPE_NAMESPACE = "gapi.client"
REVISION_PREFIX = "// Revision: "

_VERSION_RE = re.compile(r"^v(\d+)(?:\.(\d+))?")
_WORD_SEPARATOR_RE = re.compile(r"[-_\s]+")


def check_exists(value: T | None) -> T:
    """Return value, raising MalformedDocumentError when it is missing."""
    if value is None:
        raise MalformedDocumentError("Expected value to be defined, but got None")
    return value


def parse_version(version: str) -> str:
    """Derive the "major.minor" version from an API version string.

    ``v1`` -> ``1.0``, ``v1.2beta3`` -> ``1.2``, anything else -> ``0.0``.
    """
    match = _VERSION_RE.match(version)
    if not match:
        return "0.0"
    major, minor = match.group(1), match.group(2) or "0"
    return f"{major}.{minor}"


def get_resource_type_name(resource_name: str) -> str:
    """Interface name used for a resource, e.g. ``files`` -> ``FilesResource``."""
    parts = [p for p in _WORD_SEPARATOR_RE.split(resource_name) if p]
    return "".join(p[0].upper() + p[1:] for p in parts) + "Resource"


def get_type_directory_name(api_name: str) -> str:
    return f"{TYPE_NAMESPACE}.{api_name}"


def get_package_name(description: RestDescription) -> str:
    """Package (and output directory) name, e.g. ``gapi.client.drive-v3``."""
    name = check_exists(description.name)
    version = check_exists(description.version)
    return get_type_directory_name(f"{name}-{version}")


def format_property_name(name: str) -> str:
    """Quote property names that are not valid bare identifiers."""
    if "." in name or "-" in name or "@" in name:
        return f'"{name}"'
    return name


def format_revision(revision: str | int | None) -> str:
    return f"{REVISION_PREFIX}{revision}"


def parse_revision(line: str) -> int | None:
    """Parse a revision marker line back into its revision number."""
    if not line.startswith(REVISION_PREFIX):
        return None
    value = line[len(REVISION_PREFIX):].strip()
    return int(value) if value.isdigit() else None


def get_revision(file_path: Path) -> int | None:
    """Read the revision embedded in a previously generated file."""
    for line in file_path.read_text(encoding="utf-8").splitlines():
        revision = parse_revision(line)
        if revision is not None:
            return revision
    return None
