"""Entry point tying settings, policies, artifacts and refreshes together."""

import logging
from typing import Any

from .blocklist import BlocklistRefresher
from .blocklist import FeatureConfig
from .emitter import DirectiveEmitter
from .interfaces import CatalogFetcher
from .interfaces import ConfigStore
from .interfaces import FeatureFlags
from .interfaces import RestartNotifier
from .interfaces import ScopeDirectory
from .models import ReconcileReport
from .policy import PolicyApplier
from .reconcile import ReconcilerState
from .reconcile import ReconciliationPass
from .scheduler import RefreshScheduler
from .settings import FilterSettings

logger = logging.getLogger(__name__)


class AdblockController:
    """Owns the reconciler state; the only way callers change it.

    All methods must be called from the event loop that drives the refresh
    scheduler. Each call runs to completion before the next one starts, so
    the settings store only ever has one writer.

    Args:
        settings: Artifact locations, feature name and refresh interval
        directory: Lookup of existing groups, networks and profiles
        notifier: Resolver restart notifier
        fetcher: Remote blocklist catalog
        config_store: Persistent store for the feature config
        feature_flags: Optional pre-existing global toggle

    Example:
        ```python
        controller = AdblockController(settings, directory, notifier, fetcher, store)
        await controller.global_on()
        await controller.submit_policy(PolicyTarget.device("aa:bb:cc:dd:ee:ff"), True)
        ```
    """

    def __init__(
        self,
        settings: FilterSettings,
        directory: ScopeDirectory,
        notifier: RestartNotifier,
        fetcher: CatalogFetcher,
        config_store: ConfigStore,
        feature_flags: FeatureFlags | None = None,
    ):
        """Wire the emitter, reconciliation pass, policy applier and refresh scheduler."""
        self.settings = settings
        self.state = ReconcilerState()
        self.feature_config = FeatureConfig(settings, config_store, fetcher)
        self.scheduler = RefreshScheduler(
            BlocklistRefresher(settings, self.feature_config, fetcher),
            notifier,
            interval=settings.reload_interval,
        )
        self.emitter = DirectiveEmitter(settings, directory, notifier)
        self.reconciliation = ReconciliationPass(self.state, self.emitter, directory, self.scheduler)
        self.policy = PolicyApplier(self.state, self.reconciliation, settings.feature, feature_flags)

    # ===== Policies =====

    async def submit_policy(self, target: object, policy: object) -> ReconcileReport:
        """Apply a policy assignment; see ``PolicyApplier.apply_policy``."""
        return self.policy.apply_policy(target, policy)

    # ===== Global Switch =====

    async def global_on(self) -> ReconcileReport:
        """Turn the feature on administratively and run a full pass."""
        self.state.admin_switch = True
        logger.info(f"{self.settings.feature} turned on globally")
        return self.reconciliation.apply_all()

    async def global_off(self) -> ReconcileReport:
        """Turn the feature off administratively and run a full pass."""
        self.state.admin_switch = False
        logger.info(f"{self.settings.feature} turned off globally")
        return self.reconciliation.apply_all()

    def set_desired(self, desired: bool) -> None:
        """Request blocklists on or off without a full pass."""
        self.scheduler.set_desired(desired)

    # ===== Feature Config =====

    async def get_feature_config(self) -> dict[str, str]:
        return await self.feature_config.load()

    async def set_feature_config(self, config: dict[str, Any]) -> ReconcileReport:
        """Persist a new per-list on/off config and reconcile with it.

        Raises:
            ConfigFileError: If the config cannot be stored
        """
        self.feature_config.save(config)
        return self.reconciliation.apply_all()

    # ===== Lifecycle =====

    async def job(self) -> ReconcileReport:
        """Periodic full reconciliation."""
        return self.reconciliation.apply_all()

    async def join(self) -> None:
        """Wait for in-flight and immediately pending refresh cycles."""
        await self.scheduler.join()

    def close(self) -> None:
        """Stop scheduling refresh cycles."""
        self.scheduler.close()
