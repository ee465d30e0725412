"""Auto-detect the kind of discovery document in a file."""

import json
from pathlib import Path

import yaml


def _detect_data(data) -> str:
    if isinstance(data, dict):
        kind = data.get("kind", "")
        if kind == "discovery#directoryList" or ("items" in data and "resources" not in data):
            return "directory"
        if kind == "discovery#restDescription" or "resources" in data or "schemas" in data:
            return "rest"
    return "unknown"


def detect_format(file_path: Path) -> str:
    """Detect the kind of a discovery file.

    Returns: 'rest', 'directory', or 'unknown'.
    """
    text = file_path.read_text(encoding="utf-8")

    try:
        return _detect_data(json.loads(text))
    except (json.JSONDecodeError, ValueError):
        pass

    # Hand-written fixtures may be YAML
    try:
        return _detect_data(yaml.safe_load(text))
    except yaml.YAMLError:
        pass

    return "unknown"
