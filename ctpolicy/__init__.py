"""
Certificate Transparency enforcement policy for TLS clients.

Decides, from a store of security properties, whether SCT verification must be
enforced for connections to a given hostname.
"""

import logging

from ctpolicy.policy.resolver import (
    CTEnforcementResolver,
    is_ct_verification_required,
    parse_bool,
)
from ctpolicy.stores import (
    MappingPropertyStore,
    PropertyStore,
    SecurityProperties,
    get_default_store,
)

__version__ = '0.1.0'

__all__ = [
    'CTEnforcementResolver',
    'MappingPropertyStore',
    'PropertyStore',
    'SecurityProperties',
    'get_default_store',
    'is_ct_verification_required',
    'parse_bool',
]

logging.getLogger(__name__).addHandler(logging.NullHandler())
