"""
OpenStack Swift under file system.

Wraps python-swiftclient. The client is blocking, so each operation runs in a
worker thread.
"""
import asyncio
from typing import Any, AsyncIterator, Dict, List, Optional, Union

import structlog
from swiftclient.client import Connection
from swiftclient.exceptions import ClientException

from underfs.base import UnderFileSystem
from underfs.config import Configuration, PropertyKey, Settings, get_settings
from underfs.swift.simulation import SimulatedConnection
from underfs.uri import UnderFSURI

logger = structlog.get_logger()

SWIFT_SCHEME = "swift"
HEADER_SWIFT = "swift://"

DIRECTORY_CONTENT_TYPE = "application/directory"
CHUNK_SIZE = 8192

AUTH_VERSIONS = {
    "keystone": "2.0",
    "keystonev3": "3",
    "tempauth": "1.0",
    "swiftauth": "1.0",
}


def resolve_auth_version(auth_method: Optional[str], tenant: Optional[str]) -> str:
    """
    Map an fs.swift.auth.method value to a swiftclient auth version.

    Raises:
        ValueError: If the auth method is not recognized
    """
    if not auth_method:
        return "2.0" if tenant else "1.0"
    try:
        return AUTH_VERSIONS[auth_method.lower()]
    except KeyError:
        raise ValueError(
            f"Unknown Swift auth method: {auth_method!r}. "
            f"Supported: {', '.join(sorted(AUTH_VERSIONS))}"
        ) from None


def _is_not_found(e: ClientException) -> bool:
    return e.http_status == 404


class SwiftUnderFileSystem(UnderFileSystem):
    """Swift under file system bound to one container."""

    def __init__(
        self,
        uri: UnderFSURI,
        configuration: Configuration,
        settings: Optional[Settings] = None,
    ):
        """
        Connect to Swift and make sure the container exists.

        Args:
            uri: ``swift://container/prefix`` URI
            configuration: Configuration holding the Swift credentials
            settings: Application settings, defaults to get_settings()

        Raises:
            ValueError: If the URI names no container or the auth method is unknown
            ClientException: If authentication or the container check fails
        """
        if uri.scheme != SWIFT_SCHEME or not uri.authority:
            raise ValueError(f"Swift URI must look like swift://container/path, got {uri}")

        super().__init__(uri)
        self.container = uri.authority
        self.prefix = uri.key.rstrip("/")
        self.simulation = configuration.get_boolean(PropertyKey.SWIFT_SIMULATION)

        settings = settings or get_settings()
        if self.simulation:
            self._connection = SimulatedConnection()
        else:
            tenant = configuration.get(PropertyKey.SWIFT_TENANT_KEY)
            self._connection = Connection(
                authurl=configuration.get(PropertyKey.SWIFT_AUTH_URL_KEY),
                user=configuration.get(PropertyKey.SWIFT_USER_KEY),
                key=(
                    configuration.get(PropertyKey.SWIFT_API_KEY)
                    or configuration.get(PropertyKey.SWIFT_PASSWORD_KEY)
                ),
                tenant_name=tenant,
                auth_version=resolve_auth_version(
                    configuration.get(PropertyKey.SWIFT_AUTH_METHOD_KEY), tenant
                ),
                retries=settings.SWIFT_RETRIES,
                timeout=settings.SWIFT_TIMEOUT,
            )

        self._ensure_container()

    def _ensure_container(self) -> None:
        try:
            self._connection.head_container(self.container)
        except ClientException as e:
            if not _is_not_found(e):
                raise
            logger.info("Creating Swift container", container=self.container)
            self._connection.put_container(self.container)

    def _object_key(self, path: str) -> str:
        return self.uri.join(path)

    def _relative(self, key: str) -> str:
        if self.prefix:
            return key[len(self.prefix):].lstrip("/")
        return key

    async def _call(self, method: str, *args, **kwargs):
        return await asyncio.to_thread(getattr(self._connection, method), *args, **kwargs)

    async def exists(self, path: str) -> bool:
        """Check for an object, or a pseudo-directory created by ensure_dir."""
        key = self._object_key(path)
        if await self._head_exists(key):
            return True
        if key and not key.endswith("/"):
            return await self._head_exists(key + "/")
        return False

    async def _head_exists(self, key: str) -> bool:
        try:
            await self._call("head_object", self.container, key)
            return True
        except ClientException as e:
            if _is_not_found(e):
                return False
            raise

    async def read(self, path: str) -> AsyncIterator[bytes]:
        try:
            _headers, body = await self._call(
                "get_object",
                self.container,
                self._object_key(path),
                resp_chunk_size=CHUNK_SIZE,
            )
        except ClientException as e:
            if _is_not_found(e):
                raise FileNotFoundError(f"Object not found: {path}") from e
            raise

        chunks = iter(body)
        while True:
            chunk = await asyncio.to_thread(next, chunks, None)
            if not chunk:
                break
            yield chunk

    async def write(self, path: str, data: Union[bytes, AsyncIterator[bytes]]) -> int:
        if isinstance(data, bytes):
            content = data
        else:
            chunks = []
            async for chunk in data:
                chunks.append(chunk)
            content = b"".join(chunks)

        await self._call(
            "put_object",
            self.container,
            self._object_key(path),
            contents=content,
        )
        return len(content)

    async def delete(self, path: str) -> bool:
        try:
            await self._call("delete_object", self.container, self._object_key(path))
            return True
        except ClientException as e:
            if _is_not_found(e):
                return False
            raise

    async def list(self, path: str = "", recursive: bool = False) -> List[str]:
        prefix = self._object_key(path)
        if prefix and not prefix.endswith("/"):
            prefix += "/"

        _headers, objects = await self._call(
            "get_container",
            self.container,
            prefix=prefix,
            delimiter=None if recursive else "/",
            full_listing=True,
        )

        files = []
        for obj in objects:
            if "subdir" in obj:
                files.append(self._relative(obj["subdir"]))
            elif obj["name"] != prefix:
                files.append(self._relative(obj["name"]))
        return sorted(files)

    async def ensure_dir(self, path: str) -> None:
        """Create a zero-byte pseudo-directory object ending in '/'."""
        key = self._object_key(path)
        if not key:
            return
        await self._call(
            "put_object",
            self.container,
            key.rstrip("/") + "/",
            contents=b"",
            content_type=DIRECTORY_CONTENT_TYPE,
        )

    async def get_file_info(self, path: str) -> Optional[Dict[str, Any]]:
        try:
            headers = await self._call("head_object", self.container, self._object_key(path))
        except ClientException as e:
            if _is_not_found(e):
                return None
            raise

        return {
            "path": path,
            "exists": True,
            "size": int(headers.get("content-length", 0)),
            "modified": headers.get("last-modified"),
            "etag": headers.get("etag", "").strip('"'),
            "content_type": headers.get("content-type"),
        }

    async def get_status(self) -> Dict[str, Any]:
        try:
            await self._call("head_container", self.container)
            available = True
        except ClientException as e:
            logger.warning("Swift container unavailable", container=self.container, error=str(e))
            available = False

        return {
            "name": self.name,
            "type": "swift",
            "container": self.container,
            "prefix": self.prefix,
            "simulation": self.simulation,
            "available": available,
        }

    async def cleanup(self) -> None:
        await self._call("close")
