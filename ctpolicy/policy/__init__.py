"""
Certificate Transparency enforcement policy.

This package contains the hostname label tokenizer and the resolver that walks
the reversed label path against a property store.
"""

from ctpolicy.policy.labels import reversed_labels, split_labels
from ctpolicy.policy.resolver import (
    CT_ENABLE_PROPERTY,
    CT_ENFORCE_PREFIX,
    CTEnforcementResolver,
    PolicyTrace,
    PropertyLookup,
    candidate_keys,
    is_ct_verification_required,
    parse_bool,
)

__all__ = [
    'CT_ENABLE_PROPERTY',
    'CT_ENFORCE_PREFIX',
    'CTEnforcementResolver',
    'PolicyTrace',
    'PropertyLookup',
    'candidate_keys',
    'is_ct_verification_required',
    'parse_bool',
    'reversed_labels',
    'split_labels',
]
