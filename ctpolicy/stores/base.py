"""
Base interface for security property stores.

This module defines the abstract base class that every property store must
implement. The policy resolver only ever reads through this interface.
"""

from abc import ABC, abstractmethod
from typing import Optional


class PropertyStore(ABC):
    """Abstract base class for read-only security property lookups.

    Implementations must be safe to call from several threads at once. A
    missing key is reported as None, never as an exception.
    """

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """Return the current value for a property.

        Args:
            key: Property name, matched byte-exact

        Returns:
            The property value, or None when the property is not set
        """
        pass

    def __contains__(self, key: str) -> bool:
        return self.get(key) is not None


def check_property(key: str, value: Optional[str] = None) -> None:
    """Reject keys and values that are not strings.

    Raises:
        TypeError: If the key, or a given value, is not a str
    """
    if not isinstance(key, str):
        raise TypeError(f"Property key must be a str, not {type(key).__name__}")
    if value is not None and not isinstance(value, str):
        raise TypeError(f"Property value for {key!r} must be a str, not {type(value).__name__}")
