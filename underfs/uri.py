"""
Resource identifiers for under file systems.
"""
from dataclasses import dataclass
from typing import Optional

SCHEME_SEPARATOR = "://"


@dataclass(frozen=True)
class UnderFSURI:
    """A parsed ``scheme://authority/path`` identifier."""

    scheme: Optional[str]
    authority: Optional[str]
    path: str

    @classmethod
    def parse(cls, text: str) -> "UnderFSURI":
        """
        Parse a URI or plain path.

        Args:
            text: Identifier such as ``swift://container/dir/obj`` or ``/tmp/data``

        Returns:
            Parsed UnderFSURI

        Raises:
            ValueError: If text is empty
        """
        if not text:
            raise ValueError("URI must not be empty")

        if SCHEME_SEPARATOR not in text:
            return cls(scheme=None, authority=None, path=text)

        scheme, rest = text.split(SCHEME_SEPARATOR, 1)
        if not scheme:
            raise ValueError(f"URI has an empty scheme: {text!r}")

        authority, slash, path = rest.partition("/")
        return cls(
            scheme=scheme.lower(),
            authority=authority or None,
            path=slash + path if slash else "/",
        )

    @property
    def key(self) -> str:
        """Path without its leading slash, as used for object keys."""
        return self.path.lstrip("/")

    def join(self, relative: str) -> str:
        """Join a relative path onto this URI's key."""
        relative = relative.lstrip("/")
        if not self.key:
            return relative
        if not relative:
            return self.key.rstrip("/")
        return f"{self.key.rstrip('/')}/{relative}"

    def __str__(self) -> str:
        if self.scheme is None:
            return self.path
        return f"{self.scheme}{SCHEME_SEPARATOR}{self.authority or ''}{self.path}"
