"""Config Loader - Reads ClientConfig from a YAML file.

String values may reference environment variables as ``${NAME}``, which keeps
tokens out of checked-in files:

    base_url: https://api.example.com/
    headers:
      Authorization: Bearer ${API_TOKEN}

URL placeholders such as ``{tenant}`` have no ``$`` and are left alone.
"""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from request_builder.models import ClientConfig


class ConfigError(Exception):
    """Raised when a client config file cannot be loaded."""


_ENV_REFERENCE = re.compile(r"\$\{(\w+)\}")


def load_client_config(path: Path | str) -> ClientConfig:
    """Load and validate a client config file.

    Raises:
        ConfigError: If the file is missing, is not a YAML mapping, references
                     an unset environment variable, or fails validation.
    """
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError as e:
        raise ConfigError(f"Config file not found: {path}") from e

    try:
        document = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if document is None:
        document = {}
    if not isinstance(document, dict):
        raise ConfigError(f"{path} must hold a YAML mapping, got {type(document).__name__}")

    expanded = _expand(document)
    try:
        return ClientConfig.model_validate(expanded)
    except ValidationError as e:
        raise ConfigError(f"Invalid config structure in {path}: {e}") from e


def _expand(node: Any) -> Any:
    """Expand ${NAME} references in every string of a parsed YAML document."""
    if isinstance(node, str):
        return _ENV_REFERENCE.sub(_environment_value, node)
    if isinstance(node, dict):
        return {key: _expand(value) for key, value in node.items()}
    if isinstance(node, list):
        return [_expand(item) for item in node]
    return node


def _environment_value(match: re.Match[str]) -> str:
    name = match.group(1)
    if name not in os.environ:
        raise ConfigError(f"Environment variable '{name}' is not set")
    return os.environ[name]
