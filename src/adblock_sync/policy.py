"""Translation of policy assignments into per-scope settings."""

import logging

from .exceptions import PolicyClassificationError
from .interfaces import FeatureFlags
from .models import PolicyTarget
from .models import ReconcileReport
from .models import ScopeKind
from .models import SettingValue
from .models import UnitOutcome
from .reconcile import ReconcilerState
from .reconcile import ReconciliationPass

logger = logging.getLogger(__name__)


def classify(target: object) -> PolicyTarget:
    """Check that ``target`` is a policy target of a known kind.

    Raises:
        PolicyClassificationError: If it is not
    """
    if not isinstance(target, PolicyTarget) or not isinstance(target.kind, ScopeKind):
        raise PolicyClassificationError(f"Unrecognized policy target {target!r}")
    return target


class PolicyApplier:
    """Updates settings from policy assignments and applies them.

    A policy on the global marker flips the global policy switch and triggers
    a full pass. It does not touch the administrative switch, which only
    ``AdblockController.global_on/global_off`` drive and which alone decides
    whether blocklists are refreshed; the global directive is positive only
    when both switches are on.

    A policy on any other target updates that scope only and applies it
    right away.

    Args:
        state: Shared reconciler state
        reconciliation: Pass used to apply the updated settings
        feature: Feature name, checked against ``feature_flags``
        feature_flags: Optional pre-existing global toggle that takes over
            when it already forces the feature on
    """

    def __init__(
        self,
        state: ReconcilerState,
        reconciliation: ReconciliationPass,
        feature: str,
        feature_flags: FeatureFlags | None = None,
    ):
        """Initialize applier over the shared state and reconciliation pass."""
        self.state = state
        self.reconciliation = reconciliation
        self.feature = feature
        self.feature_flags = feature_flags

    def apply_policy(self, target: object, policy: object) -> ReconcileReport:
        """Apply one policy assignment.

        Never raises: errors are logged and reported.

        Args:
            target: PolicyTarget the assignment is made against
            policy: True, False or None (see ``SettingValue.from_policy``)

        Returns:
            Outcomes of whatever was applied
        """
        logger.info(f"Applying {self.feature} policy: {target} {policy}")
        try:
            target = classify(target)
        except PolicyClassificationError as e:
            logger.debug(f"Ignoring {self.feature} policy: {e}")
            return ReconcileReport()

        try:
            if target.kind is ScopeKind.GLOBAL:
                return self._apply_global(policy)
            return self._apply_scoped(target, policy)
        except Exception as e:
            logger.error(f"Got error when applying {self.feature} policy: {e}")
            report = ReconcileReport()
            report.add(UnitOutcome(f"{target.kind.value}:{target.scope_id}", "policy", ok=False, error=str(e)))
            return report

    def _apply_global(self, policy: object) -> ReconcileReport:
        if policy is True:
            if self.feature_flags is not None and self.feature_flags.is_feature_on(self.feature):
                # the older global toggle already forces the feature on, let it handle enabling
                logger.info(f"Feature flag '{self.feature}' is on, deferring to its enable path")
                self.feature_flags.enable_dynamic_feature(self.feature)
                return ReconcileReport()
            self.state.policy_switch = True
        else:
            self.state.policy_switch = False
        return self.reconciliation.apply_all()

    def _apply_scoped(self, target: PolicyTarget, policy: object) -> ReconcileReport:
        report = ReconcileReport()
        if not target.scope_id:
            logger.warning(f"Cannot resolve {target.kind.value} id, skipping {self.feature} policy")
            return report

        value = SettingValue.from_policy(policy)
        if value is not None:
            self.state.store.set(target.kind, target.scope_id, value)
        report.add(self.reconciliation.apply_scope(target.kind, target.scope_id))
        return report
