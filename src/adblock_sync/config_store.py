"""YAML-file backed key-value configuration store."""

import logging
from pathlib import Path
from typing import Any

import yaml

from .exceptions import ArtifactWriteError
from .exceptions import ConfigFileError
from .utils import atomic_write_text

logger = logging.getLogger(__name__)


class YamlConfigStore:
    """Persists JSON-compatible values under string keys in one YAML file.

    Every ``set`` rewrites the whole file atomically, so a crash mid-write
    leaves the previous contents in place.

    Args:
        path: Path to the YAML file (created on first write)
    """

    def __init__(self, path: Path):
        """Initialize store backed by the YAML file at ``path``."""
        self.path = path

    def get(self, key: str) -> Any | None:
        """Get the value stored under ``key``.

        Args:
            key: Store key

        Returns:
            Stored value or None if absent (or the file is unreadable)
        """
        data = self._read_yaml()
        if not data:
            return None
        return data.get(key)

    def set(self, key: str, value: Any) -> None:
        """Store ``value`` under ``key``.

        Args:
            key: Store key
            value: JSON-compatible value

        Raises:
            ConfigFileError: If the write fails
        """
        data = self._read_yaml() or {}
        data[key] = value
        self._write_yaml(data)
        logger.debug(f"Stored '{key}' in {self.path}")

    def delete(self, key: str) -> bool:
        """Remove ``key``.

        Returns:
            True if removed, False if not found
        """
        data = self._read_yaml()
        if not data or key not in data:
            return False
        del data[key]
        self._write_yaml(data)
        return True

    # ===== Private Helpers =====

    def _read_yaml(self) -> dict[str, Any] | None:
        if not self.path.exists():
            return None

        try:
            with open(self.path) as f:
                data = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            logger.warning(f"Failed to read store from {self.path}: {e}")
            return None

        if data is None:
            return {}
        if not isinstance(data, dict):
            logger.warning(f"Store {self.path} does not contain a mapping, ignoring it")
            return None
        return data

    def _write_yaml(self, data: dict[str, Any]) -> None:
        try:
            atomic_write_text(self.path, yaml.safe_dump(data, default_flow_style=False, sort_keys=False))
        except ArtifactWriteError as e:
            raise ConfigFileError(f"Failed to write store to {self.path}: {e}") from e
