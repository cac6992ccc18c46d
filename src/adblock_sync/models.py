"""Data models for adblock-sync."""

from dataclasses import dataclass
from dataclasses import field
from enum import Enum

# Address a policy is assigned to when it targets the whole system.
GLOBAL_ADDRESS = "0.0.0.0"


class ScopeKind(Enum):
    """Kind of target a setting is attached to.

    Members are declared in reconciliation order: a full pass visits
    kinds in exactly this sequence.
    """

    GLOBAL = "global"
    DEVICE = "device"
    GROUP = "group"
    NETWORK = "network"
    REMOTE_ACCESS_PROFILE = "vpn_profile"


class SettingValue(Enum):
    """Tri-state per-scope setting.

    ENABLE writes a positive directive, DISABLE writes an explicit negative
    match, RESET removes the artifact so the scope inherits the default.
    """

    ENABLE = 1
    DISABLE = -1
    RESET = 0

    @classmethod
    def from_policy(cls, policy: object) -> "SettingValue | None":
        """Map a raw policy value onto a setting.

        The mapping is the legacy one: ``False`` means "no override" and
        ``None`` means "explicitly disabled".

        Args:
            policy: Value carried by the policy assignment

        Returns:
            The setting, or None when the value carries no setting at all
        """
        if policy is True:
            return cls.ENABLE
        if policy is False:
            return cls.RESET
        if policy is None:
            return cls.DISABLE
        return None


class Action(Enum):
    """What the emitter did (or would do) for one scope."""

    START = "start"
    STOP = "stop"
    RESET = "reset"

    @classmethod
    def for_value(cls, value: SettingValue) -> "Action":
        """Emitter action for a resolved setting."""
        if value is SettingValue.ENABLE:
            return cls.START
        if value is SettingValue.DISABLE:
            return cls.STOP
        return cls.RESET


@dataclass(frozen=True)
class Scope:
    """Reconciliation target.

    Attributes:
        kind: Scope kind
        id: MAC address, group uid, network uuid or profile common name
            (None for the global scope)
    """

    kind: ScopeKind
    id: str | None = None

    @classmethod
    def global_scope(cls) -> "Scope":
        """The system-wide scope."""
        return cls(ScopeKind.GLOBAL)

    def __str__(self) -> str:
        if self.id is None:
            return self.kind.value
        return f"{self.kind.value}:{self.id}"


@dataclass(frozen=True)
class PolicyTarget:
    """Entity a policy assignment is made against.

    The caller builds the target from whatever entity it holds; ``scope_id``
    may be empty when the entity is malformed, in which case the policy is
    skipped.
    """

    kind: ScopeKind
    scope_id: str | None = None

    @classmethod
    def global_marker(cls) -> "PolicyTarget":
        """Target for a policy assigned to the whole system."""
        return cls(ScopeKind.GLOBAL, GLOBAL_ADDRESS)

    @classmethod
    def device(cls, mac: str | None) -> "PolicyTarget":
        """Target for a device, identified by MAC address."""
        return cls(ScopeKind.DEVICE, mac)

    @classmethod
    def group(cls, uid: str | None) -> "PolicyTarget":
        """Target for a device group, identified by its uid."""
        return cls(ScopeKind.GROUP, uid)

    @classmethod
    def network(cls, uuid: str | None) -> "PolicyTarget":
        """Target for a network segment, identified by its uuid."""
        return cls(ScopeKind.NETWORK, uuid)

    @classmethod
    def remote_access_profile(cls, cn: str | None) -> "PolicyTarget":
        """Target for a remote access profile, identified by its common name."""
        return cls(ScopeKind.REMOTE_ACCESS_PROFILE, cn)


@dataclass(frozen=True)
class UnitOutcome:
    """Result of applying one scope or refreshing one list key.

    Attributes:
        unit: Scope label or list key
        action: What was attempted ("start", "stop", "reset", "write", "delete", "skip")
        ok: Whether the unit completed
        error: Error message when the unit failed
    """

    unit: str
    action: str
    ok: bool = True
    error: str | None = None


@dataclass
class ReconcileReport:
    """Aggregate of per-unit outcomes for one pass or refresh cycle."""

    outcomes: list[UnitOutcome] = field(default_factory=list)

    def add(self, outcome: UnitOutcome) -> None:
        """Record one unit outcome."""
        self.outcomes.append(outcome)

    @property
    def ok(self) -> bool:
        """True when every unit succeeded."""
        return all(outcome.ok for outcome in self.outcomes)

    @property
    def failures(self) -> list[UnitOutcome]:
        """Outcomes of the units that failed."""
        return [outcome for outcome in self.outcomes if not outcome.ok]

    def units(self) -> list[str]:
        """Unit labels in the order they were processed."""
        return [outcome.unit for outcome in self.outcomes]
