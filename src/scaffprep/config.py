import os
import tomllib
from pathlib import Path
from typing import Any

import yaml

from .errors import ConfigError


def read_toml(path: Path) -> dict:
    with path.open("rb") as f:
        return tomllib.load(f)


def load_yaml(path: Path) -> dict[str, Any]:
    data = yaml.safe_load(path.read_text(encoding="utf-8"))
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Expected mapping YAML at {path}, got {type(data).__name__}")
    return data


def read_document(path: Path) -> dict[str, Any]:
    """Read a TOML or YAML mapping, picked by file suffix."""
    try:
        if path.suffix == ".toml":
            return read_toml(path)
        return load_yaml(path)
    except (tomllib.TOMLDecodeError, yaml.YAMLError) as e:
        raise ConfigError(f"Could not parse {path}: {e}") from e


def env_key(key: str) -> str:
    return key.upper().replace(".", "_").replace("/", "_")


class Config:
    """Read-only nested configuration addressed by dotted keys.

    Keys missing from the data fall back to an environment variable named
    after the key, e.g. ``scaffolder.bitbucket.api.token`` ->
    ``SCAFFOLDER_BITBUCKET_API_TOKEN``.
    """

    def __init__(self, data: dict[str, Any] | None = None, environ=None) -> None:
        self._data = data or {}
        self._environ = os.environ if environ is None else environ

    @classmethod
    def empty(cls) -> "Config":
        return cls({}, environ={})

    @classmethod
    def load(cls, path: Path | None) -> "Config":
        if path is None:
            return cls({})
        if not path.is_file():
            raise ConfigError(f"Config file not found: {path}")
        return cls(read_document(path))

    def get_optional(self, key: str) -> Any:
        node: Any = self._data
        for part in key.split("."):
            if not isinstance(node, dict) or part not in node:
                return self._environ.get(env_key(key))
            node = node[part]
        return node

    def get_optional_string(self, key: str) -> str | None:
        value = self.get_optional(key)
        if value is None:
            return None
        if not isinstance(value, str):
            raise ConfigError(
                f"Invalid type in config for key '{key}', got {type(value).__name__}, wanted string"
            )
        return value
