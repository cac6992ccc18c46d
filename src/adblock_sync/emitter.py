"""Generation and removal of per-scope dnsmasq directive artifacts."""

import logging
from pathlib import Path

from .exceptions import ArtifactWriteError
from .exceptions import ScopeResolutionError
from .interfaces import RestartNotifier
from .interfaces import ScopeDirectory
from .models import Action
from .models import Scope
from .models import ScopeKind
from .models import SettingValue
from .models import UnitOutcome
from .settings import FilterSettings
from .utils import atomic_write_text
from .utils import remove_if_exists

logger = logging.getLogger(__name__)

BROADCAST_MAC = "FF:FF:FF:FF:FF:FF"
ANY_MAC = "00:00:00:00:00:00"


class DirectiveEmitter:
    """Writes, negates or deletes the directive artifact of one scope.

    Each artifact holds a single line ``<directive>=<match>$[!]<feature>``.
    A leading ``!`` on the feature tag is the explicit "never match" form.

    Args:
        settings: Artifact locations and feature name
        directory: Resolves network ids to interface names
        notifier: Receives a restart request after every change on disk
    """

    def __init__(self, settings: FilterSettings, directory: ScopeDirectory, notifier: RestartNotifier):
        """Initialize emitter with injected settings and collaborators."""
        self.settings = settings
        self.directory = directory
        self.notifier = notifier

    def emit(self, scope: Scope, value: SettingValue) -> UnitOutcome:
        """Bring the artifact of ``scope`` in line with ``value``.

        Never raises for resolution or I/O failures; those are logged and
        reported as a failed (or skipped) outcome, and the previous artifact
        stays in place.

        Args:
            scope: Target scope
            value: Resolved setting

        Returns:
            Outcome for this scope
        """
        action = Action.for_value(value)
        try:
            path = self.artifact_path(scope)
        except ScopeResolutionError as e:
            logger.warning(f"Skipping {scope}: {e}")
            return UnitOutcome(str(scope), "skip", ok=True, error=str(e))

        if action is Action.RESET:
            try:
                removed = remove_if_exists(path)
            except OSError as e:
                logger.error(f"Failed to remove {path} for {scope}: {e}")
                return UnitOutcome(str(scope), action.value, ok=False, error=str(e))
            if removed:
                logger.info(f"Removed {self.settings.feature} directive for {scope}")
        else:
            content = self.directive(scope, negate=action is Action.STOP)
            try:
                atomic_write_text(path, content)
            except ArtifactWriteError as e:
                logger.error(f"Failed to write {self.settings.feature} directive for {scope}: {e}")
                return UnitOutcome(str(scope), action.value, ok=False, error=str(e))
            logger.info(f"Wrote {action.value} {self.settings.feature} directive for {scope} to {path}")

        self.notifier.request_restart()
        return UnitOutcome(str(scope), action.value)

    def artifact_path(self, scope: Scope) -> Path:
        """Deterministic artifact location for ``scope``.

        Raises:
            ScopeResolutionError: If a network's interface cannot be found
        """
        feature = self.settings.feature
        config_dir = self.settings.config_dir

        if scope.kind is ScopeKind.GLOBAL:
            return config_dir / f"{feature}_system.conf"
        if scope.id is None:
            raise ScopeResolutionError(f"{scope.kind.value} scope has no id")
        if scope.kind is ScopeKind.DEVICE:
            return config_dir / f"{feature}_{scope.id}.conf"
        if scope.kind is ScopeKind.GROUP:
            return config_dir / f"tag_{scope.id}_{feature}.conf"
        if scope.kind is ScopeKind.REMOTE_ACCESS_PROFILE:
            return config_dir / f"vpn_prof_{scope.id}_{feature}.conf"
        if scope.kind is ScopeKind.NETWORK:
            interface = self.directory.network_interface(scope.id)
            if not interface:
                raise ScopeResolutionError(f"Interface name is not found on {scope.id}")
            return self.settings.network_dir(scope.id) / f"{feature}_{interface}.conf"
        raise ScopeResolutionError(f"Unknown scope kind {scope.kind}")

    def directive(self, scope: Scope, negate: bool = False) -> str:
        """Directive line for ``scope``, positive or negated."""
        tag = f"!{self.settings.feature}" if negate else self.settings.feature

        if scope.kind is ScopeKind.GLOBAL:
            return f"mac-address-tag=%{BROADCAST_MAC}${tag}\n"
        if scope.kind is ScopeKind.DEVICE:
            return f"mac-address-tag=%{scope.id.upper()}${tag}\n"
        if scope.kind is ScopeKind.NETWORK:
            return f"mac-address-tag=%{ANY_MAC}${tag}\n"
        # groups and remote access profiles share the group-tag form
        return f"group-tag=@{scope.id}${tag}\n"
