"""Narrow interfaces for the collaborators adblock-sync depends on."""

from typing import Any
from typing import Protocol


class ConfigStore(Protocol):
    """Key-value store holding JSON-compatible values."""

    def get(self, key: str) -> Any | None: ...

    def set(self, key: str, value: Any) -> None: ...


class CatalogFetcher(Protocol):
    """Remote catalog of named blocklists.

    ``fetch`` returns the raw payload (a JSON array of strings) or raises.
    """

    async def fetch(self, list_key: str) -> str: ...


class RestartNotifier(Protocol):
    """Requests a restart of the downstream resolver.

    Must be cheap and safe to call many times in a row; coalescing is the
    notifier's job.
    """

    def request_restart(self) -> None: ...


class FeatureFlags(Protocol):
    """Pre-existing global feature toggles."""

    def is_feature_on(self, name: str) -> bool: ...

    def enable_dynamic_feature(self, name: str) -> None: ...


class ScopeDirectory(Protocol):
    """Lookup of the entities non-global scopes refer to."""

    def group_exists(self, uid: str) -> bool: ...

    def network_exists(self, uuid: str) -> bool: ...

    def network_interface(self, uuid: str) -> str | None: ...

    def profile_exists(self, cn: str) -> bool: ...
