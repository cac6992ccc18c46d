"""In-memory scope directory."""

import logging

logger = logging.getLogger(__name__)


class InMemoryScopeDirectory:
    """Registry of the groups, networks and remote-access profiles that exist.

    Applications mirror their entity managers into this registry; the
    reconciler only ever asks whether an id still exists.
    """

    def __init__(self) -> None:
        """Create an empty directory."""
        self._groups: set[str] = set()
        self._networks: dict[str, str | None] = {}
        self._profiles: set[str] = set()

    # ===== Groups =====

    def add_group(self, uid: str) -> None:
        """Register a device group."""
        self._groups.add(uid)

    def remove_group(self, uid: str) -> None:
        """Forget a device group."""
        self._groups.discard(uid)
        logger.debug(f"Group {uid} removed from directory")

    def group_exists(self, uid: str) -> bool:
        """Whether the group is registered."""
        return uid in self._groups

    # ===== Networks =====

    def add_network(self, uuid: str, interface: str | None) -> None:
        """Register a network segment.

        Args:
            uuid: Network identifier
            interface: Interface name, or None when not yet known
        """
        self._networks[uuid] = interface

    def remove_network(self, uuid: str) -> None:
        """Forget a network segment."""
        self._networks.pop(uuid, None)
        logger.debug(f"Network {uuid} removed from directory")

    def network_exists(self, uuid: str) -> bool:
        """Whether the network is registered."""
        return uuid in self._networks

    def network_interface(self, uuid: str) -> str | None:
        """Interface name of a network, or None when unknown."""
        return self._networks.get(uuid)

    # ===== Remote Access Profiles =====

    def add_profile(self, cn: str) -> None:
        """Register a remote access profile."""
        self._profiles.add(cn)

    def remove_profile(self, cn: str) -> None:
        """Forget a remote access profile."""
        self._profiles.discard(cn)
        logger.debug(f"Remote access profile {cn} removed from directory")

    def profile_exists(self, cn: str) -> bool:
        """Whether the profile is registered."""
        return cn in self._profiles
