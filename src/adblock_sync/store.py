"""In-memory per-scope settings."""

from .models import ScopeKind
from .models import SettingValue


class ScopeSettingsStore:
    """Tri-state setting per scope id, one mapping per scope kind.

    The global scope is not kept here; it is driven by the controller's
    switches. Absence of an entry reads as ``SettingValue.RESET``.
    """

    def __init__(self) -> None:
        """Create an empty mapping for every non-global scope kind."""
        self._settings: dict[ScopeKind, dict[str, SettingValue]] = {
            kind: {} for kind in ScopeKind if kind is not ScopeKind.GLOBAL
        }

    def set(self, kind: ScopeKind, scope_id: str, value: SettingValue) -> None:
        """Store ``value`` for one scope, replacing any previous value."""
        self._mapping(kind)[scope_id] = value

    def get(self, kind: ScopeKind, scope_id: str) -> SettingValue:
        """Get the setting of one scope (RESET when absent)."""
        return self._mapping(kind).get(scope_id, SettingValue.RESET)

    def remove(self, kind: ScopeKind, scope_id: str) -> None:
        """Forget one scope; absent ids are ignored."""
        self._mapping(kind).pop(scope_id, None)

    def keys(self, kind: ScopeKind) -> list[str]:
        """Snapshot of ids for ``kind``; safe to iterate while removing."""
        return list(self._mapping(kind))

    def __contains__(self, item: tuple[ScopeKind, str]) -> bool:
        """Whether a ``(kind, id)`` pair has an entry."""
        kind, scope_id = item
        return scope_id in self._mapping(kind)

    def _mapping(self, kind: ScopeKind) -> dict[str, SettingValue]:
        if kind is ScopeKind.GLOBAL:
            raise ValueError("The global scope has no per-id settings")
        return self._settings[kind]
