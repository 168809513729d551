"""
Factory for creating SwiftUnderFileSystem.

Credentials are read from the injected Configuration after filling any gaps
from the process-level override source. The factory keeps no state between
calls apart from that merge, which only ever sets missing keys to values fixed
for the life of the process, so concurrent calls need no locking here.
"""
from dataclasses import dataclass
from typing import Any, Callable, List, Mapping, Optional, Union

import structlog

from underfs.base import UnderFileSystem, UnderFileSystemFactory
from underfs.config import Configuration, PropertyKey, SystemProperties
from underfs.errors import BackendConstructionError, ConfigurationError
from underfs.swift.ufs import HEADER_SWIFT, SwiftUnderFileSystem
from underfs.uri import UnderFSURI

logger = structlog.get_logger()

SWIFT_CREDENTIAL_KEYS = (
    PropertyKey.SWIFT_API_KEY,
    PropertyKey.SWIFT_TENANT_KEY,
    PropertyKey.SWIFT_USER_KEY,
    PropertyKey.SWIFT_AUTH_URL_KEY,
    PropertyKey.SWIFT_AUTH_METHOD_KEY,
    PropertyKey.SWIFT_PASSWORD_KEY,
    PropertyKey.SWIFT_SIMULATION,
)

CREDENTIALS_UNAVAILABLE = (
    "Swift Credentials not available, cannot create Swift Under File System."
)


def missing_swift_credentials(configuration: Configuration) -> List[str]:
    """
    List the credential properties that keep Swift from being usable.

    Returns an empty list in simulation mode. Either the API key or the
    password satisfies the secret requirement.
    """
    if configuration.get_boolean(PropertyKey.SWIFT_SIMULATION):
        return []

    missing = []
    if not (
        configuration.is_set(PropertyKey.SWIFT_API_KEY)
        or configuration.is_set(PropertyKey.SWIFT_PASSWORD_KEY)
    ):
        missing.append(f"{PropertyKey.SWIFT_API_KEY} or {PropertyKey.SWIFT_PASSWORD_KEY}")
    for key in (
        PropertyKey.SWIFT_TENANT_KEY,
        PropertyKey.SWIFT_AUTH_URL_KEY,
        PropertyKey.SWIFT_USER_KEY,
    ):
        if not configuration.is_set(key):
            missing.append(str(key))
    return missing


def swift_credentials_ready(configuration: Configuration) -> bool:
    """True in simulation mode or when a full credential set is configured."""
    return not missing_swift_credentials(configuration)


@dataclass(frozen=True)
class Created:
    ufs: UnderFileSystem

    def unwrap(self) -> UnderFileSystem:
        return self.ufs


@dataclass(frozen=True)
class MissingCredentials:
    message: str
    missing: tuple = ()

    def unwrap(self) -> UnderFileSystem:
        raise ConfigurationError(self.message)


@dataclass(frozen=True)
class InvalidConfiguration:
    message: str

    def unwrap(self) -> UnderFileSystem:
        raise ConfigurationError(self.message)


@dataclass(frozen=True)
class ConstructionFailed:
    path: str
    cause: BaseException

    def unwrap(self) -> UnderFileSystem:
        raise BackendConstructionError(
            f"Failed to create SwiftUnderFileSystem for {self.path}: {self.cause}"
        ) from self.cause


CreateResult = Union[Created, MissingCredentials, InvalidConfiguration, ConstructionFailed]


class SwiftUnderFileSystemFactory(UnderFileSystemFactory):
    """Factory for creating SwiftUnderFileSystem."""

    def __init__(
        self,
        configuration: Configuration,
        overrides: Optional[Mapping[str, str]] = None,
        ufs_class: Optional[Callable[[UnderFSURI, Configuration], UnderFileSystem]] = None,
    ):
        """
        Args:
            configuration: Persistent configuration, updated in place by create
            overrides: Override source keyed by property name, defaults to
                SystemProperties over the process environment
            ufs_class: Callable building the client, defaults to SwiftUnderFileSystem
        """
        self.configuration = configuration
        self.overrides = SystemProperties() if overrides is None else overrides
        self.ufs_class = ufs_class or SwiftUnderFileSystem

    def supports_path(self, path: Optional[str]) -> bool:
        return path is not None and path.startswith(HEADER_SWIFT)

    def create(self, path: str, extra_config: Any = None) -> UnderFileSystem:
        """
        Create a SwiftUnderFileSystem for path.

        Raises:
            TypeError: If path is None
            ConfigurationError: If Swift credentials are not available
            BackendConstructionError: If the Swift client fails to initialize
        """
        return self.try_create(path, extra_config).unwrap()

    def try_create(self, path: str, extra_config: Any = None) -> CreateResult:
        """
        Create a SwiftUnderFileSystem for path, reporting failures as values.

        Overrides merged into the configuration stay there whatever the outcome.

        Raises:
            TypeError: If path is None
        """
        if path is None:
            raise TypeError("path must not be None")

        self.configuration.merge(self.overrides, SWIFT_CREDENTIAL_KEYS)

        try:
            missing = missing_swift_credentials(self.configuration)
        except ConfigurationError as e:
            logger.error("Invalid Swift configuration", path=path, error=str(e))
            return InvalidConfiguration(str(e))

        if missing:
            logger.error(CREDENTIALS_UNAVAILABLE, path=path, missing=missing)
            return MissingCredentials(CREDENTIALS_UNAVAILABLE, tuple(missing))

        try:
            ufs = self.ufs_class(UnderFSURI.parse(path), self.configuration)
        except Exception as e:
            logger.error("Failed to create SwiftUnderFileSystem", path=path, exc_info=e)
            return ConstructionFailed(path, e)

        return Created(ufs)
