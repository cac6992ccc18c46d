"""Blocklist feature configuration and per-list-key artifact refresh."""

import json
import logging
from typing import Any

from .exceptions import AdblockError
from .exceptions import ArtifactWriteError
from .exceptions import CatalogFetchError
from .exceptions import CatalogParseError
from .interfaces import CatalogFetcher
from .interfaces import ConfigStore
from .models import ReconcileReport
from .models import UnitOutcome
from .settings import FilterSettings
from .utils import atomic_write_text
from .utils import remove_if_exists

logger = logging.getLogger(__name__)

LIST_ON = "on"
LIST_OFF = "off"


def parse_entries(payload: Any) -> list[str]:
    """Decode a catalog payload into a list of entries.

    Args:
        payload: JSON text (or an already decoded list)

    Returns:
        List of string entries

    Raises:
        CatalogParseError: If the payload is not a JSON array of strings
    """
    if isinstance(payload, (str, bytes)):
        try:
            payload = json.loads(payload)
        except ValueError as e:
            raise CatalogParseError(f"Invalid JSON from catalog: {e}") from e
    if not isinstance(payload, list) or not all(isinstance(entry, str) for entry in payload):
        raise CatalogParseError("Catalog payload is not an array of strings")
    return payload


async def fetch_entries(fetcher: CatalogFetcher, list_key: str) -> list[str]:
    """Fetch and decode one catalog list.

    Raises:
        CatalogFetchError: If the fetcher fails
        CatalogParseError: If the payload cannot be decoded
    """
    try:
        payload = await fetcher.fetch(list_key)
    except CatalogFetchError:
        raise
    except Exception as e:
        raise CatalogFetchError(f"Failed to fetch '{list_key}' from catalog: {e}") from e
    return parse_entries(payload)


class FeatureConfig:
    """Which blocklists are switched on, persisted in the config store.

    The config maps each list key to ``"on"`` or ``"off"``. When nothing has
    been stored yet it is seeded from the catalog's index of lists, with only
    the default list switched on.

    Args:
        settings: Store key, catalog index key and default list
        store: Key-value configuration store
        fetcher: Remote catalog
    """

    def __init__(self, settings: FilterSettings, store: ConfigStore, fetcher: CatalogFetcher):
        """Initialize feature config over the store and catalog."""
        self.settings = settings
        self.store = store
        self.fetcher = fetcher

    async def load(self) -> dict[str, str]:
        """Get the feature config, seeding it from the catalog if needed.

        Returns:
            Mapping of list key to "on"/"off" (empty when loading fails)
        """
        key = self.settings.store_key
        try:
            stored = self.store.get(key)
            if stored is not None:
                return self._decode(stored)

            logger.info(f"Load config list from catalog: {self.settings.catalog_list_key}")
            keys = await fetch_entries(self.fetcher, self.settings.catalog_list_key)
            config = {
                list_key: LIST_ON if list_key == self.settings.default_list else LIST_OFF for list_key in keys
            }
            self.store.set(key, config)
            return config
        except AdblockError as e:
            logger.error(f"Got error when loading config from {key}: {e}")
            return {}

    def save(self, config: dict[str, str]) -> None:
        """Persist a new feature config.

        Raises:
            ConfigFileError: If the store cannot be written
        """
        self.store.set(self.settings.store_key, dict(config))
        logger.info(f"Saved {self.settings.feature} config with {len(config)} lists")

    def _decode(self, stored: Any) -> dict[str, str]:
        if isinstance(stored, str):
            try:
                stored = json.loads(stored)
            except ValueError as e:
                raise CatalogParseError(f"Stored config is not valid JSON: {e}") from e
        if not isinstance(stored, dict):
            raise CatalogParseError("Stored config is not a mapping")
        return {str(list_key): str(state) for list_key, state in stored.items()}


class BlocklistRefresher:
    """Regenerates or removes the per-list-key blocklist artifacts.

    Failures are isolated per key: a key that cannot be fetched, decoded or
    written keeps its previous artifact and the remaining keys carry on.

    Args:
        settings: Artifact locations and feature name
        feature_config: Source of the list keys and their on/off state
        fetcher: Remote catalog
    """

    def __init__(self, settings: FilterSettings, feature_config: FeatureConfig, fetcher: CatalogFetcher):
        """Initialize refresher writing artifacts under the settings' config dir."""
        self.settings = settings
        self.feature_config = feature_config
        self.fetcher = fetcher

    async def refresh(self) -> ReconcileReport:
        """Fetch every switched-on list and rewrite its artifact.

        Lists switched off have their artifact deleted instead.

        Returns:
            Per-key outcomes
        """
        report = ReconcileReport()
        config = await self.feature_config.load()

        for list_key, state in config.items():
            if state == LIST_OFF:
                report.add(self._delete(list_key))
                continue
            report.add(await self._update(list_key))

        return report

    async def clean_up(self) -> ReconcileReport:
        """Delete the artifact of every configured list key."""
        report = ReconcileReport()
        config = await self.feature_config.load()
        for list_key in config:
            report.add(self._delete(list_key))
        return report

    def render(self, entries: list[str]) -> str:
        """Artifact content for a list of catalog entries."""
        feature = self.settings.feature
        return "".join(f"hash-address=/{entry.replace('/', '.')}/${feature}\n" for entry in entries)

    async def _update(self, list_key: str) -> UnitOutcome:
        path = self.settings.list_artifact(list_key)
        try:
            entries = await fetch_entries(self.fetcher, list_key)
        except CatalogFetchError as e:
            logger.error(f"Error when load blocklist '{list_key}' from catalog: {e}")
            return UnitOutcome(list_key, "write", ok=False, error=str(e))
        except CatalogParseError as e:
            logger.error(f"Error when parse blocklist '{list_key}': {e}")
            return UnitOutcome(list_key, "write", ok=False, error=str(e))

        try:
            logger.info(f"Writing blocklist file: {path}")
            atomic_write_text(path, self.render(entries))
        except ArtifactWriteError as e:
            logger.error(f"Error when write to file: '{path}': {e}")
            return UnitOutcome(list_key, "write", ok=False, error=str(e))

        logger.info(f"Finished writing blocklist file {path} ({len(entries)} entries)")
        return UnitOutcome(list_key, "write")

    def _delete(self, list_key: str) -> UnitOutcome:
        path = self.settings.list_artifact(list_key)
        try:
            remove_if_exists(path)
        except OSError as e:
            logger.error(f"Failed to remove file: '{path}': {e}")
            return UnitOutcome(list_key, "delete", ok=False, error=str(e))
        return UnitOutcome(list_key, "delete")
