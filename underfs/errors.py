"""
Exceptions raised by under file system factories and clients.
"""


class UnderFSError(Exception):
    """Base class for under file system errors."""


class ConfigurationError(UnderFSError):
    """Raised when required credentials or settings are not available."""


class BackendConstructionError(UnderFSError):
    """Raised when the backend client library fails to initialize."""


class UnsupportedPathError(UnderFSError, ValueError):
    """Raised when no registered factory supports a path."""
