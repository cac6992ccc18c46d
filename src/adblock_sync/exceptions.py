"""Exceptions for adblock-sync."""


class AdblockError(Exception):
    """Base exception for adblock reconciliation errors."""

    pass


class ConfigFileError(AdblockError):
    """Error reading or writing a settings or store file."""

    pass


class ScopeResolutionError(AdblockError):
    """Scope id cannot be mapped to a concrete resource (e.g. missing interface)."""

    pass


class ArtifactWriteError(AdblockError):
    """I/O failure while writing or renaming a directive artifact."""

    pass


class CatalogFetchError(AdblockError):
    """Remote catalog could not return a blocklist."""

    pass


class CatalogParseError(AdblockError):
    """Remote catalog returned something that is not a list of entries."""

    pass


class PolicyClassificationError(AdblockError):
    """Policy target does not carry a recognized capability."""

    pass
