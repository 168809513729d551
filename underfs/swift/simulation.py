"""
In-memory stand-in for a Swift cluster, used when fs.swift.simulation is true.

Objects live for the life of the process and are shared by every
SimulatedConnection, so separate clients see each other's writes.
"""
import hashlib
import threading
from email.utils import formatdate
from typing import Any, Dict, Iterator, List, Optional, Tuple

from swiftclient.exceptions import ClientException

_lock = threading.Lock()
_containers: Dict[str, Dict[str, Dict[str, Any]]] = {}


def reset_simulation() -> None:
    """Drop every simulated container."""
    with _lock:
        _containers.clear()


def _not_found(container: str, obj: Optional[str] = None) -> ClientException:
    path = f"/{container}/{obj}" if obj is not None else f"/{container}"
    return ClientException(
        f"Not found: {path}",
        http_path=path,
        http_status=404,
        http_reason="Not Found",
    )


class SimulatedConnection:
    """Subset of swiftclient.client.Connection backed by process memory."""

    def head_container(self, container: str) -> Dict[str, str]:
        with _lock:
            if container not in _containers:
                raise _not_found(container)
            objects = _containers[container]
            return {
                "x-container-object-count": str(len(objects)),
                "x-container-bytes-used": str(sum(len(o["body"]) for o in objects.values())),
            }

    def put_container(self, container: str) -> None:
        with _lock:
            _containers.setdefault(container, {})

    def head_object(self, container: str, obj: str) -> Dict[str, str]:
        with _lock:
            return dict(self._get(container, obj)["headers"])

    def get_object(
        self, container: str, obj: str, resp_chunk_size: Optional[int] = None
    ) -> Tuple[Dict[str, str], Any]:
        with _lock:
            stored = self._get(container, obj)
            headers, body = dict(stored["headers"]), stored["body"]

        if resp_chunk_size is None:
            return headers, body
        return headers, self._chunks(body, resp_chunk_size)

    def put_object(
        self,
        container: str,
        obj: str,
        contents: bytes,
        content_type: Optional[str] = None,
    ) -> str:
        etag = hashlib.md5(contents).hexdigest()
        with _lock:
            if container not in _containers:
                raise _not_found(container)
            _containers[container][obj] = {
                "body": bytes(contents),
                "headers": {
                    "content-length": str(len(contents)),
                    "content-type": content_type or "application/octet-stream",
                    "etag": etag,
                    "last-modified": formatdate(usegmt=True),
                },
            }
        return etag

    def delete_object(self, container: str, obj: str) -> None:
        with _lock:
            self._get(container, obj)
            del _containers[container][obj]

    def get_container(
        self,
        container: str,
        prefix: Optional[str] = None,
        delimiter: Optional[str] = None,
        full_listing: bool = False,
    ) -> Tuple[Dict[str, str], List[Dict[str, Any]]]:
        headers = self.head_container(container)
        prefix = prefix or ""

        with _lock:
            names = sorted(n for n in _containers[container] if n.startswith(prefix))
            listing: List[Dict[str, Any]] = []
            subdirs = set()
            for name in names:
                rest = name[len(prefix):]
                if delimiter and delimiter in rest:
                    subdir = prefix + rest.split(delimiter, 1)[0] + delimiter
                    if subdir not in subdirs:
                        subdirs.add(subdir)
                        listing.append({"subdir": subdir})
                    continue
                stored = _containers[container][name]
                listing.append({"name": name, "bytes": len(stored["body"])})

        return headers, listing

    def close(self) -> None:
        pass

    @staticmethod
    def _get(container: str, obj: str) -> Dict[str, Any]:
        try:
            return _containers[container][obj]
        except KeyError:
            raise _not_found(container, obj) from None

    @staticmethod
    def _chunks(body: bytes, size: int) -> Iterator[bytes]:
        for start in range(0, len(body), size):
            yield body[start:start + size]
