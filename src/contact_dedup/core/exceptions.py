class DedupError(Exception):
    """Base exception for duplicate detection and merge failures."""


class ConfigError(DedupError):
    """Raised when the configuration file cannot be used."""


class MasterNotFoundError(DedupError, LookupError):
    """Raised when a merge names a master id that is not in the record list."""


class ScanExecutionError(DedupError):
    """Raised when a duplicate scan fails; carries the original message."""


class ScanCancelledError(DedupError):
    """Raised when a duplicate scan is cancelled between stages."""
