"""
In-memory property stores.

MappingPropertyStore is a frozen view over a mapping, handy for tests and for
one-off queries. SecurityProperties is the mutable process-wide store that
other code writes to at runtime.
"""

import threading
from typing import Dict, Mapping, Optional

from ctpolicy.stores.base import PropertyStore, check_property
from ctpolicy.utils.logging import get_logger


class MappingPropertyStore(PropertyStore):
    """Read-only store backed by a copy of a mapping."""

    def __init__(self, properties: Optional[Mapping[str, str]] = None) -> None:
        self._properties: Dict[str, str] = {}
        for key, value in (properties or {}).items():
            check_property(key, value)
            self._properties[key] = value

    def get(self, key: str) -> Optional[str]:
        return self._properties.get(key)

    def __len__(self) -> int:
        return len(self._properties)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._properties!r})"


class SecurityProperties(PropertyStore):
    """Mutable, thread-safe store of process-wide security properties.

    Readers and writers are serialized by a single lock. Each get() is an
    independent snapshot; callers that read several keys may observe writes
    made in between.
    """

    def __init__(self, properties: Optional[Mapping[str, str]] = None) -> None:
        self._lock = threading.Lock()
        self._properties: Dict[str, str] = {}
        self.logger = get_logger()
        if properties:
            self.update(properties)

    def get(self, key: str) -> Optional[str]:
        with self._lock:
            return self._properties.get(key)

    def set(self, key: str, value: str) -> None:
        """Set a property, replacing any previous value.

        Args:
            key: Property name
            value: Property value

        Raises:
            TypeError: If key or value is not a str
        """
        check_property(key, value)
        if value is None:
            raise TypeError(f"Property value for {key!r} must be a str, not NoneType")
        with self._lock:
            self._properties[key] = value
        self.logger.debug(f"Set security property {key} = {value!r}")

    def remove(self, key: str) -> Optional[str]:
        """Remove a property.

        Returns:
            The value that was removed, or None if the property was not set
        """
        check_property(key)
        with self._lock:
            value = self._properties.pop(key, None)
        if value is not None:
            self.logger.debug(f"Removed security property {key}")
        return value

    def update(self, properties: Mapping[str, str]) -> None:
        """Set several properties at once under a single lock acquisition."""
        for key, value in properties.items():
            check_property(key, value)
            if value is None:
                raise TypeError(f"Property value for {key!r} must be a str, not NoneType")
        with self._lock:
            self._properties.update(properties)
        self.logger.debug(f"Updated {len(properties)} security properties")

    def clear(self) -> None:
        with self._lock:
            self._properties.clear()

    def snapshot(self) -> Dict[str, str]:
        """Return a point-in-time copy of every property."""
        with self._lock:
            return dict(self._properties)

    def __len__(self) -> int:
        with self._lock:
            return len(self._properties)
