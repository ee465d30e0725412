"""Generator configuration.

Defaults live on the model; a YAML file can override them and CLI options
override the file.
"""

from pathlib import Path

import pydantic
import yaml
from pydantic import BaseModel, Field

from discovery_typings.errors import ConfigurationError

DEFAULT_BANNED_TYPES = ["Object", "Function", "Boolean", "Number", "String", "Symbol"]


class Configuration(BaseModel):
    """Settings shared by every API processed in one run."""

    types_directory: Path
    max_line_length: int = Field(default=200, gt=20)
    banned_types: list[str] = DEFAULT_BANNED_TYPES
    owners: list[str] = Field(default=["discovery-typings contributors"], min_length=1)
    discovery_json_directory: Path | None = None  # dump of every processed document
    proxy: str | None = None
    excluded_ids: list[str] = ["apigee"]
    fallback_documentation_links: dict[str, str] = {}
    npm_scope: str = "discovery-typings"


def load_config(file_path: Path | None, **overrides) -> Configuration:
    """Load configuration from an optional YAML file, then apply non-None overrides."""
    data: dict = {}
    if file_path is not None:
        try:
            loaded = yaml.safe_load(file_path.read_text(encoding="utf-8"))
        except (OSError, yaml.YAMLError) as e:
            raise ConfigurationError(f"Cannot read configuration {file_path}: {e}") from e
        if loaded is not None and not isinstance(loaded, dict):
            raise ConfigurationError(f"Configuration {file_path} must be a mapping")
        data.update(loaded or {})

    data.update({key: value for key, value in overrides.items() if value is not None})

    try:
        return Configuration(**data)
    except pydantic.ValidationError as e:
        raise ConfigurationError(str(e)) from e
