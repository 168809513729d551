"""
Under file system module for pluggable storage backends.

Supports OpenStack Swift and the local filesystem, selected by URI.
"""
from underfs.base import UnderFileSystem, UnderFileSystemFactory
from underfs.config import Configuration, PropertyKey, SystemProperties
from underfs.errors import (
    BackendConstructionError,
    ConfigurationError,
    UnderFSError,
    UnsupportedPathError,
)
from underfs.registry import UnderFileSystemRegistry, create_default_registry
from underfs.uri import UnderFSURI

__all__ = [
    "BackendConstructionError",
    "Configuration",
    "ConfigurationError",
    "PropertyKey",
    "SystemProperties",
    "UnderFSError",
    "UnderFSURI",
    "UnderFileSystem",
    "UnderFileSystemFactory",
    "UnderFileSystemRegistry",
    "UnsupportedPathError",
    "create_default_registry",
]
