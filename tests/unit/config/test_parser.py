"""Tests for extdev.config.parser module."""

from pathlib import Path

import pytest

from extdev.config.parser import (
    ConfigError,
    config_from_package_json,
    find_project_root,
    load_json,
    load_workflow_config,
    load_yaml,
    save_workflow_config,
    save_yaml,
)
from extdev.config.schemas import ExtensionConfig, WorkflowConfig


class TestLoadYaml:
    """Tests for load_yaml function."""

    def test_loads_mapping(self, temp_dir: Path):
        """Loads a YAML mapping."""
        path = temp_dir / "test.yaml"
        path.write_text("key: value\nnumber: 42\n")

        assert load_yaml(path) == {"key": "value", "number": 42}

    def test_empty_file_returns_empty_dict(self, temp_dir: Path):
        """Empty file yields an empty mapping."""
        path = temp_dir / "empty.yaml"
        path.write_text("")

        assert load_yaml(path) == {}

    def test_missing_file_raises(self, temp_dir: Path):
        """Raises ConfigError for missing file."""
        with pytest.raises(ConfigError, match="File not found"):
            load_yaml(temp_dir / "missing.yaml")

    def test_invalid_yaml_raises(self, temp_dir: Path):
        """Raises ConfigError for invalid YAML."""
        path = temp_dir / "bad.yaml"
        path.write_text("key: [unclosed\n")

        with pytest.raises(ConfigError, match="Invalid YAML"):
            load_yaml(path)

    def test_non_mapping_raises(self, temp_dir: Path):
        """Raises ConfigError when the document isn't a mapping."""
        path = temp_dir / "list.yaml"
        path.write_text("- a\n- b\n")

        with pytest.raises(ConfigError, match="must contain a mapping") as exc_info:
            load_yaml(path)

        assert exc_info.value.path == path


class TestSaveYaml:
    """Tests for save_yaml function."""

    def test_creates_parent_directories(self, temp_dir: Path):
        """Creates parent directories when saving."""
        path = temp_dir / "nested" / "out.yaml"

        save_yaml(path, {"key": "value"})

        assert load_yaml(path) == {"key": "value"}


class TestLoadWorkflowConfig:
    """Tests for load_workflow_config function."""

    def test_loads_config(self, temp_dir: Path):
        """Loads and validates a workflow config."""
        path = temp_dir / "extdev.yaml"
        path.write_text(
            """\
extension:
  publisher: acme
  name: sample
  version: 1.2.0
editor:
  process_name: code-insiders
  command: code-insiders
restart_delay: 0.5
fail_on_tool_error: true
"""
        )

        config = load_workflow_config(path)

        assert config.extension.directory_name == "acme.sample-1.2.0"
        assert config.editor.process_name == "code-insiders"
        assert config.restart_delay == 0.5
        assert config.fail_on_tool_error is True
        assert config.install_command == ["npm", "install"]

    def test_empty_file_gives_defaults(self, temp_dir: Path):
        """An empty extdev.yaml means all defaults."""
        path = temp_dir / "extdev.yaml"
        path.write_text("")

        assert load_workflow_config(path) == WorkflowConfig()

    def test_invalid_config_raises(self, temp_dir: Path):
        """Raises ConfigError on validation failure."""
        path = temp_dir / "extdev.yaml"
        path.write_text("extension:\n  version: not-a-version\n")

        with pytest.raises(ConfigError, match="Invalid workflow config"):
            load_workflow_config(path)


class TestSaveWorkflowConfig:
    """Tests for save_workflow_config function."""

    def test_round_trip_keeps_overrides(self, temp_dir: Path):
        """Only non-default values are written, and they load back."""
        path = temp_dir / "extdev.yaml"
        config = WorkflowConfig(extension=ExtensionConfig(name="sample"), restart_delay=1.0)

        save_workflow_config(path, config)

        assert "install_command" not in path.read_text()
        assert load_workflow_config(path) == config


class TestFindProjectRoot:
    """Tests for find_project_root function."""

    def test_finds_in_current_directory(self, temp_dir: Path):
        """Finds extdev.yaml in the start directory."""
        (temp_dir / "extdev.yaml").write_text("")

        assert find_project_root(temp_dir) == temp_dir.resolve()

    def test_finds_in_parent_directory(self, temp_dir: Path):
        """Walks up to find extdev.yaml."""
        (temp_dir / "extdev.yaml").write_text("")
        nested = temp_dir / "src" / "deep"
        nested.mkdir(parents=True)

        assert find_project_root(nested) == temp_dir.resolve()

    def test_returns_none_when_absent(self, temp_dir: Path):
        """Returns None if no extdev.yaml exists up the tree."""
        nested = temp_dir / "nowhere"
        nested.mkdir()

        result = find_project_root(nested)

        assert result is None or not str(result).startswith(str(temp_dir.resolve()))


class TestLoadJson:
    """Tests for load_json function."""

    def test_loads_object(self, temp_dir: Path):
        path = temp_dir / "package.json"
        path.write_text('{"name": "sample"}')

        assert load_json(path) == {"name": "sample"}

    def test_invalid_json_raises(self, temp_dir: Path):
        path = temp_dir / "package.json"
        path.write_text("{not json")

        with pytest.raises(ConfigError, match="Invalid JSON"):
            load_json(path)

    def test_non_object_raises(self, temp_dir: Path):
        path = temp_dir / "package.json"
        path.write_text("[1, 2]")

        with pytest.raises(ConfigError, match="must contain an object"):
            load_json(path)


class TestConfigFromPackageJson:
    """Tests for config_from_package_json function."""

    def test_takes_identity(self, temp_dir: Path):
        """Publisher, name and version come from package.json."""
        (temp_dir / "package.json").write_text(
            '{"name": "sample", "publisher": "acme", "version": "2.1.0", "main": "./out/x.js"}'
        )

        config = config_from_package_json(temp_dir)

        assert config.extension == ExtensionConfig(publisher="acme", name="sample", version="2.1.0")

    def test_missing_publisher_uses_default(self, temp_dir: Path):
        (temp_dir / "package.json").write_text('{"name": "sample", "version": "2.1.0"}')

        assert config_from_package_json(temp_dir).extension.publisher == "local"

    def test_invalid_manifest_raises(self, temp_dir: Path):
        (temp_dir / "package.json").write_text('{"name": "Sample", "version": "2.1"}')

        with pytest.raises(ConfigError, match="Invalid extension manifest"):
            config_from_package_json(temp_dir)

    def test_missing_manifest_raises(self, temp_dir: Path):
        with pytest.raises(ConfigError, match="File not found"):
            config_from_package_json(temp_dir)
