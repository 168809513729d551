"""
Configuration for under file systems.

Holds the persistent property store that factories read credentials from, the
process-level override source that seeds it, and application settings loaded
from the environment.
"""
import os
import threading
from collections.abc import Mapping
from enum import Enum
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Iterable, Iterator, Optional, Union

import yaml
from pydantic import Field, validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from underfs.errors import ConfigurationError


class PropertyKey(str, Enum):
    """Property keys understood by the under file systems."""

    SWIFT_API_KEY = "fs.swift.apikey"
    SWIFT_TENANT_KEY = "fs.swift.tenant"
    SWIFT_USER_KEY = "fs.swift.user"
    SWIFT_AUTH_URL_KEY = "fs.swift.auth.url"
    SWIFT_AUTH_METHOD_KEY = "fs.swift.auth.method"
    SWIFT_PASSWORD_KEY = "fs.swift.password"
    SWIFT_SIMULATION = "fs.swift.simulation"

    def __str__(self) -> str:
        return self.value

    @property
    def env_name(self) -> str:
        """Environment variable name carrying an override for this key."""
        return property_env_name(self.value)


def property_env_name(name: str) -> str:
    return name.upper().replace(".", "_")


def _should_fill(current: Any, override: Any) -> bool:
    """An override fills a key only when it has a value and the key has none."""
    return override is not None and current is None


def merge_overrides(
    overrides: Mapping,
    persistent: Mapping,
    keys: Iterable[PropertyKey],
) -> Dict[PropertyKey, Any]:
    """
    Merge override values into a copy of the persistent properties.

    An override only fills a key that is missing from ``persistent`` or maps
    to None. Neither input is modified.

    Args:
        overrides: Override values looked up by property name
        persistent: Current persistent properties keyed by PropertyKey
        keys: Keys eligible for merging

    Returns:
        The merged properties
    """
    merged = dict(persistent)
    for key in keys:
        value = overrides.get(str(key))
        if _should_fill(merged.get(key), value):
            merged[key] = value
    return merged


class Configuration:
    """
    Persistent property store.

    Single reads and writes, including ``set_if_absent``, are serialized by an
    internal lock. ``merge`` applies one ``set_if_absent`` per key and is not
    atomic across keys.
    """

    def __init__(self, properties: Optional[Mapping] = None):
        self._lock = threading.RLock()
        self._properties: Dict[PropertyKey, Any] = {}
        for key, value in (properties or {}).items():
            self._properties[PropertyKey(key)] = value

    @classmethod
    def from_yaml(cls, path: Union[str, Path]) -> "Configuration":
        """
        Load properties from a YAML site file.

        Args:
            path: File holding a mapping of property names to values

        Returns:
            Configuration seeded from the file

        Raises:
            ConfigurationError: If the file does not hold a mapping or names an
                unknown property
        """
        with open(path, "r") as f:
            data = yaml.safe_load(f) or {}

        if not isinstance(data, dict):
            raise ConfigurationError(f"Expected a mapping of properties in {path}")

        try:
            return cls(data)
        except ValueError as e:
            raise ConfigurationError(f"Unknown property in {path}: {e}") from e

    def contains_key(self, key: PropertyKey) -> bool:
        with self._lock:
            return key in self._properties

    def get(self, key: PropertyKey) -> Any:
        with self._lock:
            return self._properties.get(key)

    def set(self, key: PropertyKey, value: Any) -> None:
        with self._lock:
            self._properties[key] = value

    def set_if_absent(self, key: PropertyKey, value: Any) -> bool:
        """Set a non-null value only if the key is missing or None. Returns True if it was set."""
        with self._lock:
            if not _should_fill(self._properties.get(key), value):
                return False
            self._properties[key] = value
            return True

    def is_set(self, key: PropertyKey) -> bool:
        """Whether the key is present with a non-null value."""
        with self._lock:
            return self._properties.get(key) is not None

    def get_boolean(self, key: PropertyKey) -> bool:
        """
        Read a boolean property.

        Missing and null values read as False.

        Raises:
            ConfigurationError: If the value is not a boolean or "true"/"false"
        """
        value = self.get(key)
        if value is None:
            return False
        if isinstance(value, bool):
            return value
        if isinstance(value, str) and value.strip().lower() in ("true", "false"):
            return value.strip().lower() == "true"
        raise ConfigurationError(f"Property {key} is not a boolean: {value!r}")

    def merge(self, overrides: Mapping, keys: Iterable[PropertyKey]) -> None:
        """Fill missing or null keys from overrides, never replacing set values."""
        for key in keys:
            self.set_if_absent(key, overrides.get(str(key)))

    def as_dict(self) -> Dict[str, Any]:
        with self._lock:
            return {str(key): value for key, value in self._properties.items()}

    def __repr__(self) -> str:
        return f"<Configuration keys={sorted(self.as_dict())}>"


class SystemProperties(Mapping):
    """
    Read-only override source looked up by property name.

    Explicit values take precedence over the process environment, where a
    property such as ``fs.swift.apikey`` is read from ``FS_SWIFT_APIKEY``.
    """

    def __init__(
        self,
        values: Optional[Mapping[str, str]] = None,
        environ: Optional[Mapping[str, str]] = None,
    ):
        self._values = dict(values or {})
        self._environ = os.environ if environ is None else environ

    def __getitem__(self, name: str) -> str:
        if name in self._values:
            return self._values[name]
        return self._environ[property_env_name(name)]

    def __iter__(self) -> Iterator[str]:
        names = set(self._values)
        for key in PropertyKey:
            if key.env_name in self._environ:
                names.add(str(key))
        return iter(sorted(names))

    def __len__(self) -> int:
        return sum(1 for _ in self)


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    VERSION: str = "0.1.0"
    DEBUG: bool = False

    # Logging
    LOG_LEVEL: str = "info"
    LOG_JSON: bool = False

    # Site properties file seeding the persistent configuration
    UNDERFS_CONFIG: Optional[str] = None

    # Swift client
    SWIFT_TIMEOUT: float = Field(default=30.0, gt=0)
    SWIFT_RETRIES: int = Field(default=5, ge=0)

    @validator("LOG_LEVEL")
    def validate_log_level(cls, v):
        level = v.lower()
        if level not in ("debug", "info", "warning", "error", "critical"):
            raise ValueError(f"Invalid log level: {v}")
        return level

    def load_configuration(self) -> Configuration:
        """Build the persistent configuration, seeded from UNDERFS_CONFIG if set."""
        if self.UNDERFS_CONFIG:
            return Configuration.from_yaml(self.UNDERFS_CONFIG)
        return Configuration()


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
