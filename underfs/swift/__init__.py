"""
OpenStack Swift under file system.
"""
from underfs.swift.factory import (
    SWIFT_CREDENTIAL_KEYS,
    ConstructionFailed,
    Created,
    CreateResult,
    InvalidConfiguration,
    MissingCredentials,
    SwiftUnderFileSystemFactory,
    swift_credentials_ready,
)
from underfs.swift.ufs import HEADER_SWIFT, SwiftUnderFileSystem

__all__ = [
    "HEADER_SWIFT",
    "SWIFT_CREDENTIAL_KEYS",
    "ConstructionFailed",
    "Created",
    "CreateResult",
    "InvalidConfiguration",
    "MissingCredentials",
    "SwiftUnderFileSystem",
    "SwiftUnderFileSystemFactory",
    "swift_credentials_ready",
]
