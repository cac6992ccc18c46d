"""adblock-sync: per-scope content-filter reconciliation for dnsmasq.

This library turns the desired enablement of an ad-blocking feature across
scopes into dnsmasq directive files:
- Global (the whole system)
- Device (one MAC address)
- Group (a device group tag)
- Network (one network segment)
- Remote access profile (a VPN profile)

It also keeps the blocklist files themselves fresh, refreshing them from a
remote catalog once a day or as soon as the feature is toggled.

Applications inject the collaborators (scope directory, catalog fetcher,
restart notifier, configuration store). The library provides the mechanism
for tracking settings, writing artifacts atomically and scheduling refreshes.

Public API:
    AdblockController: Main entry point owning the reconciler state
    FilterSettings, load_settings: Artifact locations and feature naming
    PolicyTarget, Scope, ScopeKind, SettingValue: Data model
    ReconcileReport, UnitOutcome: Per-unit results of a pass or refresh
    RefreshScheduler: Debounced single-flight refresh state machine
    YamlConfigStore: YAML-backed key-value configuration store
    InMemoryScopeDirectory: Registry of existing groups/networks/profiles
    CoalescingRestarter: Restart notifier collapsing bursts of requests
    AdblockError and subclasses: Exception types

Example:
    ```python
    from pathlib import Path
    from adblock_sync import AdblockController, PolicyTarget, YamlConfigStore, load_settings

    settings = load_settings(Path("/etc/adblock-sync/settings.yaml"))
    controller = AdblockController(
        settings, directory, notifier, fetcher, YamlConfigStore(Path("/var/lib/adblock-sync/store.yaml"))
    )

    await controller.global_on()
    await controller.submit_policy(PolicyTarget.group("7"), True)
    ```
"""

from .config_store import YamlConfigStore
from .controller import AdblockController
from .directory import InMemoryScopeDirectory
from .emitter import DirectiveEmitter
from .exceptions import AdblockError
from .exceptions import ArtifactWriteError
from .exceptions import CatalogFetchError
from .exceptions import CatalogParseError
from .exceptions import ConfigFileError
from .exceptions import PolicyClassificationError
from .exceptions import ScopeResolutionError
from .models import GLOBAL_ADDRESS
from .models import PolicyTarget
from .models import ReconcileReport
from .models import Scope
from .models import ScopeKind
from .models import SettingValue
from .models import UnitOutcome
from .restart import CoalescingRestarter
from .scheduler import RefreshScheduler
from .settings import FilterSettings
from .settings import load_settings
from .store import ScopeSettingsStore

__version__ = "0.1.0"

__all__ = [
    "AdblockController",
    "FilterSettings",
    "load_settings",
    "PolicyTarget",
    "Scope",
    "ScopeKind",
    "SettingValue",
    "GLOBAL_ADDRESS",
    "ReconcileReport",
    "UnitOutcome",
    "ScopeSettingsStore",
    "DirectiveEmitter",
    "RefreshScheduler",
    "YamlConfigStore",
    "InMemoryScopeDirectory",
    "CoalescingRestarter",
    "AdblockError",
    "ArtifactWriteError",
    "CatalogFetchError",
    "CatalogParseError",
    "ConfigFileError",
    "PolicyClassificationError",
    "ScopeResolutionError",
]
