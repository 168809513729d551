"""
Registry of under file system factories.
"""
from importlib.metadata import entry_points
from typing import Any, List, Mapping, Optional

import structlog

from underfs.base import UnderFileSystem, UnderFileSystemFactory
from underfs.config import Configuration
from underfs.errors import UnsupportedPathError

logger = structlog.get_logger()

ENTRY_POINT_GROUP = "underfs.factories"


class UnderFileSystemRegistry:
    """Holds factories in registration order and picks the first that supports a path."""

    def __init__(self, configuration: Optional[Configuration] = None):
        self.configuration = configuration if configuration is not None else Configuration()
        self._factories: List[UnderFileSystemFactory] = []

    @property
    def factories(self) -> List[UnderFileSystemFactory]:
        return list(self._factories)

    def register(self, factory: UnderFileSystemFactory) -> None:
        self._factories.append(factory)
        logger.debug("Registered under file system factory", factory=type(factory).__name__)

    def discover(self, group: str = ENTRY_POINT_GROUP) -> int:
        """
        Register factories advertised as entry points.

        Each entry point must load a factory class taking the registry's
        configuration as its only argument.

        Returns:
            Number of factories registered
        """
        count = 0
        for entry_point in entry_points(group=group):
            factory_class = entry_point.load()
            self.register(factory_class(self.configuration))
            count += 1
        return count

    def find(self, path: Optional[str]) -> Optional[UnderFileSystemFactory]:
        for factory in self._factories:
            if factory.supports_path(path):
                return factory
        return None

    def create(self, path: str, extra_config: Any = None) -> UnderFileSystem:
        """
        Create an under file system with the first factory supporting path.

        Raises:
            UnsupportedPathError: If no registered factory supports path
        """
        factory = self.find(path)
        if factory is None:
            raise UnsupportedPathError(f"No under file system factory supports path: {path}")
        return factory.create(path, extra_config)


def create_default_registry(
    configuration: Optional[Configuration] = None,
    overrides: Optional[Mapping[str, str]] = None,
) -> UnderFileSystemRegistry:
    """Registry with the Swift and local factories, in that order."""
    from underfs.local import LocalUnderFileSystemFactory
    from underfs.swift.factory import SwiftUnderFileSystemFactory

    registry = UnderFileSystemRegistry(configuration)
    registry.register(SwiftUnderFileSystemFactory(registry.configuration, overrides))
    registry.register(LocalUnderFileSystemFactory())
    return registry
