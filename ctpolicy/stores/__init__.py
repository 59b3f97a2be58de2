"""
Security property stores.

The resolver reads configuration only through PropertyStore.get(). The
process-wide default store is seeded from the file named by the
CTPOLICY_PROPERTIES environment variable, when it is set.
"""

import os
import threading
from typing import Optional

from ctpolicy.stores.base import PropertyStore
from ctpolicy.stores.file import FilePropertyStore, load_properties, parse_properties
from ctpolicy.stores.memory import MappingPropertyStore, SecurityProperties
from ctpolicy.utils.logging import get_logger

PROPERTIES_ENV_VAR = 'CTPOLICY_PROPERTIES'

__all__ = [
    'FilePropertyStore',
    'MappingPropertyStore',
    'PROPERTIES_ENV_VAR',
    'PropertyStore',
    'SecurityProperties',
    'get_default_store',
    'load_properties',
    'parse_properties',
    'reset_default_store',
]

_default_store: Optional[SecurityProperties] = None
_default_lock = threading.Lock()


def get_default_store() -> SecurityProperties:
    """Return the process-wide security properties, creating them on first use.

    Returns:
        The shared SecurityProperties instance

    Raises:
        OSError: If CTPOLICY_PROPERTIES names a file that cannot be read
    """
    global _default_store

    with _default_lock:
        if _default_store is None:
            store = SecurityProperties()
            path = os.environ.get(PROPERTIES_ENV_VAR, '').strip()
            if path:
                get_logger().debug(f"Seeding security properties from {PROPERTIES_ENV_VAR}={path}")
                store.update(load_properties(path))
            _default_store = store
        return _default_store


def reset_default_store() -> None:
    """Drop the process-wide store so the next access rebuilds it."""
    global _default_store

    with _default_lock:
        _default_store = None
