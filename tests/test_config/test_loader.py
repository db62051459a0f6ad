"""Tests for shared YAML loader utilities."""

from pathlib import Path

import pytest
import yaml

from log_rotator.config.loader import ConfigLoadError, load_yaml_file, write_yaml_file


class CustomError(Exception):
    """Error type used to check error_class propagation."""


class TestLoadYamlFile:
    """Test shared YAML loading utility."""

    def test_load_valid_yaml(self, tmp_path: Path) -> None:
        """Test loading a valid YAML file."""
        yaml_file = tmp_path / "test.yaml"
        yaml_file.write_text(
            """
rotation_enabled: true
global_rules:
  - job_name_pattern: "rotator-.*"
    discarder: specific
"""
        )

        result = load_yaml_file(yaml_file)

        assert result == {
            "rotation_enabled": True,
            "global_rules": [{"job_name_pattern": "rotator-.*", "discarder": "specific"}],
        }

    def test_load_empty_file(self, tmp_path: Path) -> None:
        """Test that empty file returns empty dict."""
        yaml_file = tmp_path / "empty.yaml"
        yaml_file.write_text("")

        assert load_yaml_file(yaml_file) == {}

    def test_load_none_content(self, tmp_path: Path) -> None:
        """Test that file with only comments returns empty dict."""
        yaml_file = tmp_path / "comments.yaml"
        yaml_file.write_text("# Just comments\n# No actual content")

        assert load_yaml_file(yaml_file) == {}

    def test_load_missing_file(self, tmp_path: Path) -> None:
        """Test that missing file raises ConfigLoadError."""
        with pytest.raises(ConfigLoadError, match="not found"):
            load_yaml_file(tmp_path / "nonexistent.yaml")

    def test_load_invalid_yaml(self, tmp_path: Path) -> None:
        """Test that malformed YAML raises ConfigLoadError with the path."""
        yaml_file = tmp_path / "invalid.yaml"
        yaml_file.write_text("key: [unclosed")

        with pytest.raises(ConfigLoadError, match="Failed to parse YAML") as exc_info:
            load_yaml_file(yaml_file)

        assert str(yaml_file) in str(exc_info.value)

    def test_load_non_mapping(self, tmp_path: Path) -> None:
        """Test that a scalar or list document is rejected."""
        yaml_file = tmp_path / "list.yaml"
        yaml_file.write_text("- one\n- two\n")

        with pytest.raises(ConfigLoadError, match="got list"):
            load_yaml_file(yaml_file)

    def test_custom_error_class(self, tmp_path: Path) -> None:
        """Test that the caller's error class is raised."""
        with pytest.raises(CustomError):
            load_yaml_file(tmp_path / "nonexistent.yaml", CustomError)


class TestWriteYamlFile:
    """Test atomic YAML writes."""

    def test_write_then_load(self, tmp_path: Path) -> None:
        """Test that written documents load back unchanged."""
        yaml_file = tmp_path / "out.yaml"
        data = {"update_interval_hours": 12, "global_rules": []}

        write_yaml_file(yaml_file, data)

        assert load_yaml_file(yaml_file) == data

    def test_key_order_preserved(self, tmp_path: Path) -> None:
        """Test that keys are written in insertion order."""
        yaml_file = tmp_path / "out.yaml"

        write_yaml_file(yaml_file, {"zeta": 1, "alpha": 2})

        assert yaml_file.read_text().splitlines() == ["zeta: 1", "alpha: 2"]

    def test_creates_parent_directories(self, tmp_path: Path) -> None:
        """Test that missing parent directories are created."""
        yaml_file = tmp_path / "a" / "b" / "out.yaml"

        write_yaml_file(yaml_file, {"key": "value"})

        assert yaml.safe_load(yaml_file.read_text()) == {"key": "value"}

    def test_replaces_existing_file(self, tmp_path: Path) -> None:
        """Test that an existing file is replaced and no temp file remains."""
        yaml_file = tmp_path / "out.yaml"
        yaml_file.write_text("old: true\n")

        write_yaml_file(yaml_file, {"new": True})

        assert load_yaml_file(yaml_file) == {"new": True}
        assert [p.name for p in tmp_path.iterdir()] == ["out.yaml"]

    def test_unserialisable_data_leaves_target_untouched(self, tmp_path: Path) -> None:
        """Test that a failed dump does not clobber the existing file."""
        yaml_file = tmp_path / "out.yaml"
        yaml_file.write_text("old: true\n")

        with pytest.raises(yaml.YAMLError):
            write_yaml_file(yaml_file, {"bad": object()})

        assert yaml_file.read_text() == "old: true\n"
        assert [p.name for p in tmp_path.iterdir()] == ["out.yaml"]
