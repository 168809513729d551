"""
Local filesystem under file system.

Handles ``file://`` URIs and absolute paths, mainly for tests and single-node
deployments.
"""
import asyncio
import os
import shutil
from pathlib import Path
from typing import Any, AsyncIterator, Dict, List, Optional, Union

import aiofiles
import aiofiles.os

from underfs.base import UnderFileSystem, UnderFileSystemFactory
from underfs.config import Configuration
from underfs.uri import UnderFSURI

LOCAL_SCHEME = "file"
HEADER_LOCAL = "file://"

CHUNK_SIZE = 8192


class LocalUnderFileSystem(UnderFileSystem):
    """Under file system rooted at a local directory."""

    def __init__(self, uri: UnderFSURI):
        """
        Initialize local under file system.

        Args:
            uri: ``file://`` URI or plain path of the root directory
        """
        if uri.scheme not in (None, LOCAL_SCHEME):
            raise ValueError(f"Not a local URI: {uri}")
        super().__init__(uri)
        self.base_path = Path(uri.path).resolve()
        self.base_path.mkdir(parents=True, exist_ok=True)

    def _resolve_path(self, path: str) -> Path:
        """
        Resolve a relative path against the root.

        Raises:
            ValueError: If path would escape the root directory
        """
        if not path:
            return self.base_path

        full_path = (self.base_path / path.lstrip("/")).resolve()

        try:
            full_path.relative_to(self.base_path)
        except ValueError:
            raise ValueError(f"Path '{path}' would escape {self.base_path}")

        return full_path

    async def exists(self, path: str) -> bool:
        try:
            full_path = self._resolve_path(path)
        except ValueError:
            return False
        return await aiofiles.os.path.exists(full_path)

    async def read(self, path: str) -> AsyncIterator[bytes]:
        full_path = self._resolve_path(path)

        if not await aiofiles.os.path.isfile(full_path):
            raise FileNotFoundError(f"File not found: {path}")

        async with aiofiles.open(full_path, "rb") as f:
            while True:
                chunk = await f.read(CHUNK_SIZE)
                if not chunk:
                    break
                yield chunk

    async def write(self, path: str, data: Union[bytes, AsyncIterator[bytes]]) -> int:
        full_path = self._resolve_path(path)
        await aiofiles.os.makedirs(full_path.parent, exist_ok=True)

        bytes_written = 0
        async with aiofiles.open(full_path, "wb") as f:
            if isinstance(data, bytes):
                await f.write(data)
                bytes_written = len(data)
            else:
                async for chunk in data:
                    await f.write(chunk)
                    bytes_written += len(chunk)

        return bytes_written

    async def delete(self, path: str) -> bool:
        try:
            full_path = self._resolve_path(path)
        except ValueError:
            return False

        if not await aiofiles.os.path.exists(full_path):
            return False

        if await aiofiles.os.path.isdir(full_path):
            await asyncio.to_thread(shutil.rmtree, full_path)
        else:
            await aiofiles.os.remove(full_path)
        return True

    async def list(self, path: str = "", recursive: bool = False) -> List[str]:
        full_path = self._resolve_path(path)

        if not await aiofiles.os.path.isdir(full_path):
            return []

        files = []
        if recursive:
            for root, _dirs, filenames in await asyncio.to_thread(
                lambda: list(os.walk(full_path))
            ):
                for filename in filenames:
                    files.append(str((Path(root) / filename).relative_to(self.base_path)))
        else:
            for entry in await aiofiles.os.listdir(full_path):
                rel_path = str((full_path / entry).relative_to(self.base_path))
                if await aiofiles.os.path.isdir(full_path / entry):
                    rel_path += "/"
                files.append(rel_path)

        return sorted(files)

    async def ensure_dir(self, path: str) -> None:
        full_path = self._resolve_path(path)
        await aiofiles.os.makedirs(full_path, exist_ok=True)

    async def get_file_info(self, path: str) -> Optional[Dict[str, Any]]:
        try:
            full_path = self._resolve_path(path)
            stat = await aiofiles.os.stat(full_path)
        except (OSError, ValueError):
            return None

        return {
            "path": path,
            "exists": True,
            "size": stat.st_size,
            "modified": stat.st_mtime,
            "is_dir": await aiofiles.os.path.isdir(full_path),
        }

    async def get_status(self) -> Dict[str, Any]:
        try:
            usage = await asyncio.to_thread(shutil.disk_usage, self.base_path)
            disk_info = {
                "total": usage.total,
                "used": usage.used,
                "free": usage.free,
            }
        except OSError:
            disk_info = {"error": "Unable to get disk usage"}

        return {
            "name": self.name,
            "type": "local",
            "base_path": str(self.base_path),
            "available": self.base_path.exists(),
            "disk": disk_info,
        }


class LocalUnderFileSystemFactory(UnderFileSystemFactory):
    """Factory for creating LocalUnderFileSystem."""

    def __init__(self, configuration: Optional[Configuration] = None):
        # Unused: local paths need no credentials.
        self.configuration = configuration

    def supports_path(self, path: Optional[str]) -> bool:
        return path is not None and (path.startswith(HEADER_LOCAL) or path.startswith("/"))

    def create(self, path: str, extra_config: Any = None) -> LocalUnderFileSystem:
        if path is None:
            raise TypeError("path must not be None")
        return LocalUnderFileSystem(UnderFSURI.parse(path))
