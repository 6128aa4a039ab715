"""Reading rule and stream files given on the command line.

Files ending in .yaml or .yml are parsed with PyYAML, everything else as
JSON.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import yaml

YAML_SUFFIXES = frozenset({".yaml", ".yml"})


class InputFileError(Exception):
    """Raised when an input file cannot be read or parsed."""

    def __init__(self, path: Path, message: str) -> None:
        self.path = path
        super().__init__(f"{path}: {message}")


def load_structured_file(path: Path) -> Any:
    """Parse a JSON or YAML file.

    Raises:
        InputFileError: If the file cannot be read or parsed.
    """
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise InputFileError(path, f"cannot read file ({e})") from e

    try:
        if path.suffix.lower() in YAML_SUFFIXES:
            return yaml.safe_load(text)
        return json.loads(text)
    except (yaml.YAMLError, json.JSONDecodeError) as e:
        raise InputFileError(path, f"cannot parse file ({e})") from e


def as_rules_document(data: Any) -> dict[str, Any]:
    """Accept either a full rule document or a bare list of rules."""
    if isinstance(data, list):
        return {"rules": data}
    if isinstance(data, dict):
        return data
    if data is None:
        return {}
    raise ValueError("expected a rule document object or a list of rules")


def as_stream_list(data: Any) -> list[dict[str, Any]]:
    """Accept a list of streams or an item object carrying MediaStreams."""
    if isinstance(data, dict):
        data = data.get("MediaStreams", data.get("media_streams"))
    if not isinstance(data, list):
        raise ValueError("expected a list of media streams")
    if not all(isinstance(entry, dict) for entry in data):
        raise ValueError("every media stream must be an object")
    return data
