"""Shared YAML loading utilities for configuration files.

This module provides the YAML read/write helpers used by the file-backed
rotation config store.
"""

import os
import tempfile
from pathlib import Path
from typing import Any

import structlog
import yaml

log = structlog.get_logger(__name__)


class ConfigLoadError(Exception):
    """Base exception for configuration loading errors."""

    pass


def load_yaml_file(
    file_path: Path, error_class: type[Exception] = ConfigLoadError
) -> dict[str, Any]:
    """Load and parse a YAML file.

    Args:
        file_path: Path to the YAML file.
        error_class: Exception class to raise on errors. Defaults to ConfigLoadError.

    Returns:
        Parsed YAML content as a dictionary. Returns empty dict if file is empty or None.

    Raises:
        error_class: If file cannot be read or parsed, or if the top level is
            not a mapping. The error message includes the file path.

    Example:
        >>> from pathlib import Path
        >>> data = load_yaml_file(Path("config/rotation.yaml"))
        >>> print(data.get("global_rules", []))
    """
    try:
        with file_path.open("r", encoding="utf-8") as f:
            content: Any = yaml.safe_load(f)
    except FileNotFoundError:
        raise error_class(f"Configuration file not found: {file_path}") from None
    except yaml.YAMLError as e:
        raise error_class(f"Failed to parse YAML file {file_path}: {e}") from None
    except Exception as e:
        raise error_class(f"Unexpected error reading {file_path}: {e}") from None

    if content is None:
        log.debug("yaml_file_empty", file_path=str(file_path))
        return {}
    if not isinstance(content, dict):
        raise error_class(
            f"Expected a mapping at the top of {file_path}, got {type(content).__name__}"
        )
    return content


def write_yaml_file(
    file_path: Path, data: dict[str, Any], error_class: type[Exception] = ConfigLoadError
) -> None:
    """Atomically write a mapping to a YAML file.

    The document is written to a temporary file in the same directory and then
    moved over the target, so readers never observe a half-written file.

    Args:
        file_path: Destination path.
        data: Mapping to serialise.
        error_class: Exception class to raise on errors.

    Raises:
        error_class: If the file cannot be written.
    """
    try:
        file_path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{file_path.name}.", suffix=".tmp", dir=str(file_path.parent)
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                yaml.safe_dump(data, f, sort_keys=False, default_flow_style=False)
            os.replace(tmp_name, file_path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
    except OSError as e:
        raise error_class(f"Failed to write configuration file {file_path}: {e}") from None
