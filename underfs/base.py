"""
Abstract base classes for under file systems and their factories.
"""
from abc import ABC, abstractmethod
from typing import Any, AsyncIterator, Dict, List, Optional, Union

from underfs.uri import UnderFSURI


class UnderFileSystem(ABC):
    """Abstract base class for under file systems."""

    def __init__(self, uri: UnderFSURI):
        """
        Initialize under file system.

        Args:
            uri: Root URI this under file system is bound to
        """
        self.uri = uri
        self.name = str(uri)

    @abstractmethod
    async def exists(self, path: str) -> bool:
        """
        Check if a file exists.

        Args:
            path: File path relative to the root URI

        Returns:
            True if file exists, False otherwise
        """
        pass

    @abstractmethod
    async def read(self, path: str) -> AsyncIterator[bytes]:
        """
        Read file contents as an async iterator of chunks.

        Args:
            path: File path relative to the root URI

        Yields:
            File content chunks as bytes
        """
        pass

    @abstractmethod
    async def write(self, path: str, data: Union[bytes, AsyncIterator[bytes]]) -> int:
        """
        Write data to a file.

        Args:
            path: File path relative to the root URI
            data: File content as bytes or async iterator of chunks

        Returns:
            Number of bytes written
        """
        pass

    @abstractmethod
    async def delete(self, path: str) -> bool:
        """
        Delete a file.

        Returns:
            True if deleted, False if not found
        """
        pass

    @abstractmethod
    async def list(self, path: str = "", recursive: bool = False) -> List[str]:
        """
        List files in a directory.

        Args:
            path: Directory path relative to the root URI
            recursive: Whether to list recursively

        Returns:
            List of file paths, directories carry a trailing slash
        """
        pass

    @abstractmethod
    async def ensure_dir(self, path: str) -> None:
        """Ensure a directory exists, creating it if necessary."""
        pass

    async def get_file_info(self, path: str) -> Optional[Dict[str, Any]]:
        """
        Get file metadata.

        Returns:
            Dictionary with file info or None if not found
        """
        if not await self.exists(path):
            return None
        return {
            "path": path,
            "exists": True,
        }

    async def get_size(self, path: str) -> int:
        """Get file size in bytes."""
        info = await self.get_file_info(path)
        return info.get("size", 0) if info else 0

    async def get_status(self) -> Dict[str, Any]:
        """Get under file system status."""
        return {
            "name": self.name,
            "type": self.__class__.__name__,
            "available": True,
        }

    async def cleanup(self) -> None:
        """Clean up client resources."""
        pass

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} uri={self.name}>"


class UnderFileSystemFactory(ABC):
    """
    Creates under file systems for the paths it supports.

    A registry asks each factory ``supports_path`` in turn and calls ``create``
    on the first one that accepts the path.
    """

    @abstractmethod
    def supports_path(self, path: Optional[str]) -> bool:
        """
        Check whether this factory can create an under file system for a path.

        Args:
            path: Resource identifier, possibly None

        Returns:
            True if the path is handled by this factory
        """
        pass

    @abstractmethod
    def create(self, path: str, extra_config: Any = None) -> UnderFileSystem:
        """
        Create an under file system bound to a path.

        Args:
            path: Resource identifier, must not be None
            extra_config: Opaque factory-specific configuration

        Returns:
            A ready UnderFileSystem owned by the caller
        """
        pass
