"""Exceptions raised by trajtrust collaborators (config, ingestion).

The reputation engine itself never raises for numeric degeneracies; it falls
back to fixed values instead.
"""


class TrajTrustError(Exception):
    """Base class for trajtrust errors."""


class ConfigError(TrajTrustError):
    """Configuration file missing, unparsable or out of range."""


class IngestError(TrajTrustError):
    """Trajectory or interaction input could not be read."""
