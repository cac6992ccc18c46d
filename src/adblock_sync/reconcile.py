"""Full and single-scope reconciliation of settings into artifacts."""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from dataclasses import field

from .emitter import DirectiveEmitter
from .interfaces import ScopeDirectory
from .models import ReconcileReport
from .models import Scope
from .models import ScopeKind
from .models import SettingValue
from .models import UnitOutcome
from .scheduler import RefreshScheduler
from .store import ScopeSettingsStore

logger = logging.getLogger(__name__)


@dataclass
class ReconcilerState:
    """Everything the reconciler mutates, owned by a single controller.

    Attributes:
        store: Per-scope tri-state settings
        policy_switch: Global on/off set by a policy on the global marker
        admin_switch: Administrative gate for the whole feature
    """

    store: ScopeSettingsStore = field(default_factory=ScopeSettingsStore)
    policy_switch: bool = False
    admin_switch: bool = False

    @property
    def global_value(self) -> SettingValue:
        if self.policy_switch and self.admin_switch:
            return SettingValue.ENABLE
        return SettingValue.DISABLE


class ReconciliationPass:
    """Applies stored settings to disk and garbage-collects deleted scopes.

    Args:
        state: Shared reconciler state
        emitter: Writes the per-scope artifacts
        directory: Tells which groups, networks and profiles still exist
        scheduler: Receives the administrative switch as its desired state
    """

    def __init__(
        self,
        state: ReconcilerState,
        emitter: DirectiveEmitter,
        directory: ScopeDirectory,
        scheduler: RefreshScheduler,
    ):
        """Initialize pass over the shared state."""
        self.state = state
        self.emitter = emitter
        self.directory = directory
        self.scheduler = scheduler

    def apply_all(self) -> ReconcileReport:
        """Run one full pass.

        Kinds are visited in the order global, device, group, network,
        remote access profile. A failure in one scope is logged and recorded
        without stopping the pass.

        Deleted groups and profiles are reset (artifact removed) and then
        forgotten. Deleted networks are only forgotten; their artifact stays
        on disk.

        Returns:
            Per-scope outcomes
        """
        store = self.state.store
        report = ReconcileReport()

        self.scheduler.set_desired(self.state.admin_switch)

        report.add(self.apply_global())

        for mac in store.keys(ScopeKind.DEVICE):
            report.add(self.apply_scope(ScopeKind.DEVICE, mac))

        for uid in store.keys(ScopeKind.GROUP):
            report.add(self._collect_or_apply(ScopeKind.GROUP, uid, self.directory.group_exists))

        for uuid in store.keys(ScopeKind.NETWORK):
            scope = Scope(ScopeKind.NETWORK, uuid)
            try:
                exists = self.directory.network_exists(uuid)
            except Exception as e:
                logger.error(f"Failed to look up {scope}: {e}")
                report.add(UnitOutcome(str(scope), "lookup", ok=False, error=str(e)))
                continue
            if not exists:
                store.remove(ScopeKind.NETWORK, uuid)
                logger.info(f"Dropped settings of deleted {scope}")
                continue
            report.add(self.apply_scope(ScopeKind.NETWORK, uuid))

        for cn in store.keys(ScopeKind.REMOTE_ACCESS_PROFILE):
            report.add(self._collect_or_apply(ScopeKind.REMOTE_ACCESS_PROFILE, cn, self.directory.profile_exists))

        if report.failures:
            logger.warning(f"Reconciliation pass finished with {len(report.failures)} failed scopes")
        return report

    def apply_global(self) -> UnitOutcome:
        return self._emit(Scope.global_scope(), self.state.global_value)

    def apply_scope(self, kind: ScopeKind, scope_id: str) -> UnitOutcome:
        """Apply the stored setting of one scope.

        Args:
            kind: Scope kind (not GLOBAL)
            scope_id: Scope id

        Returns:
            Outcome for the scope
        """
        if kind is ScopeKind.GLOBAL:
            return self.apply_global()
        return self._emit(Scope(kind, scope_id), self.state.store.get(kind, scope_id))

    def _collect_or_apply(self, kind: ScopeKind, scope_id: str, exists: Callable[[str], bool]) -> UnitOutcome:
        scope = Scope(kind, scope_id)
        try:
            present = exists(scope_id)
        except Exception as e:
            logger.error(f"Failed to look up {scope}: {e}")
            return UnitOutcome(str(scope), "lookup", ok=False, error=str(e))

        if present:
            return self.apply_scope(kind, scope_id)

        # reset first so the artifact of the deleted scope is removed
        self.state.store.set(kind, scope_id, SettingValue.RESET)
        outcome = self.apply_scope(kind, scope_id)
        self.state.store.remove(kind, scope_id)
        logger.info(f"Reset and dropped settings of deleted {scope}")
        return outcome

    def _emit(self, scope: Scope, value: SettingValue) -> UnitOutcome:
        try:
            return self.emitter.emit(scope, value)
        except Exception as e:
            logger.error(f"Failed to apply {value.name} to {scope}: {e}")
            return UnitOutcome(str(scope), value.name.lower(), ok=False, error=str(e))
