"""Configuration file parsing utilities."""

import json
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from extdev.config.schemas import WorkflowConfig

CONFIG_FILENAME = "extdev.yaml"


class ConfigError(Exception):
    """Error loading or parsing configuration."""

    def __init__(self, message: str, path: Path | None = None):
        self.path = path
        super().__init__(message)


def load_json(path: Path) -> dict[str, Any]:
    """Load and parse a JSON file.

    Args:
        path: Path to the JSON file

    Returns:
        Parsed JSON as a dictionary

    Raises:
        ConfigError: If the file cannot be read or parsed
    """
    if not path.exists():
        raise ConfigError(f"File not found: {path}", path)

    try:
        with open(path, encoding="utf-8") as f:
            result = json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigError(f"Invalid JSON in {path}: {e}", path) from e
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}", path) from e

    if not isinstance(result, dict):
        raise ConfigError(f"JSON file must contain an object: {path}", path)
    return result


def load_yaml(path: Path) -> dict[str, Any]:
    """Load and parse a YAML file.

    Args:
        path: Path to the YAML file

    Returns:
        Parsed YAML as a dictionary

    Raises:
        ConfigError: If the file cannot be read or parsed
    """
    if not path.exists():
        raise ConfigError(f"File not found: {path}", path)

    try:
        with open(path, encoding="utf-8") as f:
            result = yaml.safe_load(f)
            if result is None:
                return {}
            if not isinstance(result, dict):
                raise ConfigError(f"YAML file must contain a mapping: {path}", path)
            return result
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}", path) from e
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}", path) from e


def save_yaml(path: Path, data: dict[str, Any]) -> None:
    """Save data to a YAML file.

    Args:
        path: Path to write to
        data: Data to serialize
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        yaml.safe_dump(data, f, default_flow_style=False, sort_keys=False, allow_unicode=True)


def load_workflow_config(config_path: Path) -> WorkflowConfig:
    """Load workflow configuration from a YAML file.

    Args:
        config_path: Path to the extdev.yaml file

    Returns:
        Parsed WorkflowConfig

    Raises:
        ConfigError: If the file is missing or invalid
    """
    data = load_yaml(config_path)

    try:
        return WorkflowConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid workflow config: {e}", config_path) from e


def save_workflow_config(config_path: Path, config: WorkflowConfig) -> None:
    """Save workflow configuration, omitting values left at their defaults."""
    save_yaml(config_path, config.model_dump(exclude_defaults=True))


def find_project_root(start_path: Path | None = None) -> Path | None:
    """Find the project root by looking for extdev.yaml.

    Args:
        start_path: Directory to start searching from (defaults to cwd)

    Returns:
        Path to project root, or None if not found
    """
    if start_path is None:
        start_path = Path.cwd()

    current = start_path.resolve()
    while current != current.parent:
        if (current / CONFIG_FILENAME).exists():
            return current
        current = current.parent

    # Check root
    if (current / CONFIG_FILENAME).exists():
        return current

    return None


def config_from_package_json(project_root: Path) -> WorkflowConfig:
    """Build a starting configuration from the extension's package.json.

    Args:
        project_root: Extension project directory

    Returns:
        WorkflowConfig whose extension identity matches package.json

    Raises:
        ConfigError: If package.json is missing or has invalid fields
    """
    manifest_path = project_root / "package.json"
    data = load_json(manifest_path)
    identity = {key: data[key] for key in ("publisher", "name", "version") if key in data}

    try:
        return WorkflowConfig.model_validate({"extension": identity})
    except ValidationError as e:
        raise ConfigError(f"Invalid extension manifest: {e}", manifest_path) from e
