"""Config stores: where the rotation configuration lives between passes.

The host normally owns persistence. Two stores are provided: an in-memory one
for embedding and tests, and a YAML file store for standalone use.
"""

import threading
from pathlib import Path
from typing import Any, Protocol

from pydantic import ValidationError

from log_rotator.config.loader import ConfigLoadError, load_yaml_file, write_yaml_file
from log_rotator.rotation.models import RotationConfig
from log_rotator.telemetry import (
    ROTATION_CONFIG_INVALID,
    ROTATION_CONFIG_LOADED,
    ROTATION_CONFIG_SAVED,
    ROTATION_TIMESTAMP_UPDATED,
    get_logger,
)

log = get_logger(__name__)


class ConfigStoreError(ConfigLoadError):
    """Raised when rotation configuration cannot be loaded, validated or saved."""

    pass


class ConfigStore(Protocol):
    """Loads and persists the rotation configuration."""

    def load(self) -> RotationConfig: ...

    def save(self, config: RotationConfig) -> None: ...

    def mark_rotated(self, epoch_millis: int) -> None: ...


def parse_config(data: dict[str, Any], source: str = "<memory>") -> RotationConfig:
    """Validate a raw mapping into a RotationConfig.

    Args:
        data: Raw configuration mapping (e.g. parsed YAML).
        source: Where the data came from, for error messages.

    Returns:
        Validated RotationConfig.

    Raises:
        ConfigStoreError: If validation fails. The message lists every
            offending field.
    """
    try:
        return RotationConfig.model_validate(data)
    except ValidationError as e:
        error_messages = []
        for error in e.errors():
            field_path = " -> ".join(str(loc) for loc in error["loc"]) or "config"
            error_messages.append(f"{field_path}: {error['msg']}")
        error_summary = "\n".join(error_messages)
        log.error(ROTATION_CONFIG_INVALID, source=source, errors=error_messages)
        raise ConfigStoreError(
            f"Rotation configuration validation failed ({source}):\n{error_summary}"
        ) from None


def _advance(config: RotationConfig, epoch_millis: int) -> RotationConfig:
    # The timestamp never moves backwards, even if the wall clock does.
    if epoch_millis <= config.last_rotated_epoch_millis:
        log.warning(
            ROTATION_TIMESTAMP_UPDATED,
            advanced=False,
            requested=epoch_millis,
            current=config.last_rotated_epoch_millis,
        )
        return config
    log.info(ROTATION_TIMESTAMP_UPDATED, advanced=True, last_rotated_epoch_millis=epoch_millis)
    return config.model_copy(update={"last_rotated_epoch_millis": epoch_millis})


class InMemoryConfigStore:
    """Config store holding the configuration in memory."""

    def __init__(self, config: RotationConfig | None = None) -> None:
        self._config = config or RotationConfig()
        self._lock = threading.Lock()

    def load(self) -> RotationConfig:
        with self._lock:
            return self._config

    def save(self, config: RotationConfig) -> None:
        with self._lock:
            self._config = config

    def mark_rotated(self, epoch_millis: int) -> None:
        with self._lock:
            self._config = _advance(self._config, epoch_millis)


class YamlConfigStore:
    """Config store backed by a YAML file.

    A missing file yields the default configuration. Writes go through a
    temporary file so a crash never leaves a truncated config behind.
    """

    def __init__(self, path: Path | str) -> None:
        """Initialize the store.

        Args:
            path: YAML file holding the rotation configuration.
        """
        self.path = Path(path)
        self._lock = threading.Lock()

    def _read(self) -> RotationConfig:
        if not self.path.exists():
            log.debug(ROTATION_CONFIG_LOADED, path=str(self.path), defaults=True)
            return RotationConfig()
        try:
            data = load_yaml_file(self.path, error_class=ConfigStoreError)
        except ConfigStoreError as e:
            log.error(ROTATION_CONFIG_INVALID, source=str(self.path), errors=[str(e)])
            raise
        config = parse_config(data, source=str(self.path))
        log.debug(
            ROTATION_CONFIG_LOADED,
            path=str(self.path),
            rotation_enabled=config.rotation_enabled,
            rules_count=len(config.global_rules),
        )
        return config

    def _write(self, config: RotationConfig) -> None:
        write_yaml_file(self.path, config.to_document(), error_class=ConfigStoreError)
        log.info(ROTATION_CONFIG_SAVED, path=str(self.path), rules_count=len(config.global_rules))

    def load(self) -> RotationConfig:
        """Read and validate the configuration file.

        Raises:
            ConfigStoreError: If the file cannot be parsed or is invalid.
        """
        with self._lock:
            return self._read()

    def save(self, config: RotationConfig) -> None:
        """Persist a configuration, replacing the file atomically."""
        with self._lock:
            self._write(config)

    def mark_rotated(self, epoch_millis: int) -> None:
        """Record a completed pass without clobbering concurrent edits.

        Re-reads the file under the lock so rule edits saved during the pass
        are kept; only the timestamp changes.
        """
        with self._lock:
            current = self._read()
            updated = _advance(current, epoch_millis)
            if updated is not current:
                self._write(updated)
