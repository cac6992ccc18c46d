"""Static settings for adblock-sync, loaded from YAML."""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from .exceptions import ConfigFileError
from .utils import deep_merge

logger = logging.getLogger(__name__)

RELOAD_INTERVAL_SECONDS = 24 * 3600

DEFAULT_SETTINGS: dict[str, Any] = {
    "feature": "adblock",
    "paths": {
        "config_dir": "/var/lib/adblock-sync/dnsmasq",
        "network_root": "/var/lib/adblock-sync/dnsmasq/networks",
    },
    "refresh": {
        "interval_seconds": RELOAD_INTERVAL_SECONDS,
    },
    "catalog": {
        "list_key": "ads.list",
        "default_list": "ads",
    },
}


@dataclass(frozen=True)
class FilterSettings:
    """Where artifacts live and how the feature is named.

    Attributes:
        config_dir: Directory holding per-scope and per-list-key artifacts
        network_root: Parent of the per-network dnsmasq directories
        feature: Feature name used as the dnsmasq tag and in file names
        reload_interval: Seconds between periodic blocklist refreshes
        catalog_list_key: Catalog key listing every available blocklist
        default_list: Blocklist enabled when no feature config is stored
        config_key: Store key the feature config is persisted under
            (defaults to ``ext.<feature>.config``)
    """

    config_dir: Path
    network_root: Path
    feature: str = "adblock"
    reload_interval: float = RELOAD_INTERVAL_SECONDS
    catalog_list_key: str = "ads.list"
    default_list: str = "ads"
    config_key: str | None = None

    @property
    def store_key(self) -> str:
        return self.config_key or f"ext.{self.feature}.config"

    def network_dir(self, network_id: str) -> Path:
        """Directory the resolver reads for one network segment."""
        return self.network_root / network_id

    def list_artifact(self, list_key: str) -> Path:
        """Artifact path for one blocklist key."""
        return self.config_dir / f"{list_key}_{self.feature}.conf"


def load_settings(path: Path | None = None, overrides: dict[str, Any] | None = None) -> FilterSettings:
    """Build settings from defaults, an optional YAML file and overrides.

    Merge order (later overrides earlier):
    1. Built-in defaults
    2. YAML file at ``path`` (skipped when missing)
    3. ``overrides``

    Args:
        path: Optional YAML settings file
        overrides: Optional dictionary merged last

    Returns:
        Frozen FilterSettings

    Raises:
        ConfigFileError: If the file cannot be parsed or a value is invalid
    """
    merged = DEFAULT_SETTINGS
    if path is not None and path.exists():
        try:
            with open(path) as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            raise ConfigFileError(f"Failed to read settings from {path}: {e}") from e
        if not isinstance(data, dict):
            raise ConfigFileError(f"Settings file {path} must contain a mapping")
        merged = deep_merge(merged, data)
        logger.debug(f"Loaded settings from {path}")
    if overrides:
        merged = deep_merge(merged, overrides)

    for section in ("paths", "refresh", "catalog"):
        if not isinstance(merged.get(section), dict):
            raise ConfigFileError(f"Settings section '{section}' must be a mapping")
    if not isinstance(merged.get("feature"), str) or not merged["feature"]:
        raise ConfigFileError("Settings value 'feature' must be a non-empty string")

    try:
        return FilterSettings(
            config_dir=Path(merged["paths"]["config_dir"]),
            network_root=Path(merged["paths"]["network_root"]),
            feature=merged["feature"],
            reload_interval=float(merged["refresh"]["interval_seconds"]),
            catalog_list_key=merged["catalog"]["list_key"],
            default_list=merged["catalog"]["default_list"],
            config_key=merged["catalog"].get("config_key"),
        )
    except (KeyError, TypeError, ValueError) as e:
        raise ConfigFileError(f"Invalid settings: {e!r}") from e
