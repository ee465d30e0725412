"""Google API Discovery document loader.

Loads REST descriptions from disk into RestDescription models and discovers
the namespaces their methods live in.
"""

import json
from pathlib import Path

import yaml

from discovery_typings.errors import MalformedDocumentError
from discovery_typings.naming import check_exists
from discovery_typings.parser.base import RestDescription, RestMethod, RestResource


def sort_keys(value):
    """Recursively sort mapping keys so generated output is deterministic."""
    if isinstance(value, dict):
        return {key: sort_keys(value[key]) for key in sorted(value)}
    if isinstance(value, list):
        return [sort_keys(item) for item in value]
    return value


def parse_rest_description(data: dict) -> RestDescription:
    """Build a RestDescription from a decoded discovery document."""
    return RestDescription.from_document(sort_keys(data))


def load_rest_description(file_path: Path) -> RestDescription:
    """Parse a discovery document file (JSON, or YAML for hand-written fixtures)."""
    text = file_path.read_text(encoding="utf-8")
    if file_path.suffix in (".yaml", ".yml"):
        data = yaml.safe_load(text)
    else:
        data = json.loads(text)
    if not isinstance(data, dict):
        raise MalformedDocumentError(f"{file_path} does not contain a discovery document")
    return parse_rest_description(data)


def get_namespace(method_key: str, method: RestMethod) -> str:
    """Return the first dot-segment of a method ID."""
    if method.id is None:
        raise MalformedDocumentError(f"Method {method_key} has no ID")
    if "." not in method.id:
        raise MalformedDocumentError(f"Malformed method ID: {method.id} (no dots)")
    namespace = method.id.split(".")[0]
    if not namespace:
        raise MalformedDocumentError(f"Can't get namespace from {method.id}")
    return namespace


def method_in_namespace(method: RestMethod, namespace: str) -> bool:
    return check_exists(method.id).startswith(f"{namespace}.")


def get_all_namespaces(description: RestDescription | RestResource) -> list[str]:
    """Collect every namespace used by the methods of a document, in first-seen order."""
    namespaces: list[str] = []
    _collect_namespaces(description.methods, description.resources, namespaces)
    return namespaces


def _collect_namespaces(
    methods: dict[str, RestMethod] | None,
    resources: dict[str, RestResource] | None,
    namespaces: list[str],
) -> None:
    for key, method in (methods or {}).items():
        namespace = get_namespace(key, method)
        if namespace not in namespaces:
            namespaces.append(namespace)
    for resource in (resources or {}).values():
        _collect_namespaces(resource.methods, resource.resources, namespaces)
