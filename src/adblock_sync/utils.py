"""Utility functions for adblock-sync."""

import contextlib
import os
from pathlib import Path
from typing import Any

from .exceptions import ArtifactWriteError

TMP_SUFFIX = ".tmp"


def deep_merge(base: dict[str, Any], overlay: dict[str, Any]) -> dict[str, Any]:
    """Deep merge two dictionaries with overlay precedence.

    Nested dictionaries are merged recursively; any other overlay value
    replaces the base value.

    Args:
        base: Base dictionary
        overlay: Overlay dictionary (takes precedence)

    Returns:
        New merged dictionary (base and overlay are not modified)

    Examples:
        >>> base = {"feature": "adblock", "paths": {"config_dir": "/a", "network_root": "/b"}}
        >>> deep_merge(base, {"paths": {"config_dir": "/c"}})
        {'feature': 'adblock', 'paths': {'config_dir': '/c', 'network_root': '/b'}}

        >>> deep_merge({}, {"a": 1})
        {'a': 1}
    """
    result = base.copy()

    for key, value in overlay.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value

    return result


def tmp_path_for(path: Path) -> Path:
    """Sibling path content is staged in before being renamed into place."""
    return path.with_name(path.name + TMP_SUFFIX)


def atomic_write_text(path: Path, content: str) -> None:
    """Write a file so readers only ever see the old or the new content.

    Content goes to a sibling ``.tmp`` file first, which is checked for
    existence and then renamed over the final name. When any step fails the
    staged file is removed and the previous file is left as it was.

    Args:
        path: Final file path
        content: Full file content

    Raises:
        ArtifactWriteError: If writing or renaming fails
    """
    staged = tmp_path_for(path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(staged, "w") as f:
            f.write(content)
        if not staged.exists():
            raise ArtifactWriteError(f"Staged file {staged} vanished before rename")
        os.replace(staged, path)
    except ArtifactWriteError:
        _discard(staged)
        raise
    except OSError as e:
        _discard(staged)
        raise ArtifactWriteError(f"Failed to write {path}: {e}") from e


def _discard(staged: Path) -> None:
    with contextlib.suppress(OSError):
        remove_if_exists(staged)


def remove_if_exists(path: Path) -> bool:
    """Delete a file, treating an already-absent file as success.

    Args:
        path: File to delete

    Returns:
        True if a file was removed, False if there was nothing to remove

    Raises:
        OSError: If the file exists but cannot be removed
    """
    try:
        path.unlink()
    except FileNotFoundError:
        return False
    return True
