"""
Certificate Transparency enforcement resolver.

Decides whether SCT verification is required for a hostname. Enforcement is
configured through security properties:

    conscrypt.ct.enable                      global switch, must be "true"
    conscrypt.ct.enforce.*                   default for every hostname
    conscrypt.ct.enforce.com.*               every name under .com
    conscrypt.ct.enforce.com.bar.*           every name under .bar.com
    conscrypt.ct.enforce.com.bar.foo         foo.bar.com exactly

Keys are looked up from the broadest wildcard down to the exact key and the
last one present wins. For foo.bar.com that means:

    1. conscrypt.ct.enforce.*
    2. conscrypt.ct.enforce.com.*
    3. conscrypt.ct.enforce.com.bar.*
    4. conscrypt.ct.enforce.com.bar.foo

The walk never stops early, so a deeper key can always override a broader
one. A present key whose value is anything other than "true" (any case)
disables enforcement; an absent key changes nothing. Only values are
case-folded: keys, and therefore hostnames, are matched byte-exact, so callers
that want case-insensitive matching must lowercase the hostname first.
"""

from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Tuple

from ctpolicy.policy.labels import reversed_labels
from ctpolicy.stores import PropertyStore, get_default_store
from ctpolicy.utils.logging import get_logger, log_lookup

CT_ENABLE_PROPERTY = 'conscrypt.ct.enable'
CT_ENFORCE_PREFIX = 'conscrypt.ct.enforce'
WILDCARD_SUFFIX = '.*'


def parse_bool(value: Optional[str]) -> bool:
    """Interpret a property value as a boolean.

    Only the word "true", in any case, is true. None, the empty string, "1",
    "yes" and " true" are all false.
    """
    return value is not None and value.lower() == 'true'


def candidate_keys(hostname: str) -> List[str]:
    """Return the property keys inspected for a hostname, in inspection order.

    Args:
        hostname: Hostname to build keys for

    Returns:
        One wildcard key per label, broadest first, followed by the exact key
    """
    keys = []
    path = CT_ENFORCE_PREFIX
    for label in reversed_labels(hostname):
        keys.append(path + WILDCARD_SUFFIX)
        path = f"{path}.{label}"
    keys.append(path)
    return keys


@dataclass(frozen=True)
class PropertyLookup:
    """A single property read made while resolving a hostname."""
    key: str
    value: Optional[str]
    is_wildcard: bool = False

    @property
    def present(self) -> bool:
        return self.value is not None


@dataclass
class PolicyTrace:
    """Record of every lookup behind one enforcement decision.

    Attributes:
        hostname: Hostname that was resolved
        enabled: Whether the global conscrypt.ct.enable switch is on
        lookups: Property reads in the order they were made, starting with
            the global switch
        decision: Final enforcement decision
        deciding_key: Last present enforce key, i.e. the one that set the
            decision, or None if no enforce key was present
        deciding_index: Position of that lookup in lookups, or None
    """
    hostname: Optional[str]
    enabled: bool = False
    lookups: List[PropertyLookup] = field(default_factory=list)
    decision: bool = False
    deciding_key: Optional[str] = None
    deciding_index: Optional[int] = None


class CTEnforcementResolver:
    """Resolves CT enforcement decisions against an explicit property store.

    The resolver keeps no state of its own. Every call reads the store afresh,
    so it may be shared between threads and sees configuration changes on the
    next call.
    """

    def __init__(self, store: PropertyStore) -> None:
        self.store = store
        self.logger = get_logger()

    def is_enabled(self) -> bool:
        """Return whether the global CT switch is on."""
        return parse_bool(self.store.get(CT_ENABLE_PROPERTY))

    def _walk(self, hostname: str) -> Iterator[Tuple[str, Optional[str], bool]]:
        keys = candidate_keys(hostname)
        last = len(keys) - 1
        for index, key in enumerate(keys):
            value = self.store.get(key)
            log_lookup(self.logger, key, value)
            # The exact key comes last and may itself end in '.*' for a name like '*.foo'
            yield key, value, index != last

    def is_ct_verification_required(self, hostname: Optional[str]) -> bool:
        """Check whether SCT verification is required for a hostname.

        Args:
            hostname: Hostname of the peer, or None if unknown

        Returns:
            True if CT must be enforced for connections to hostname
        """
        if hostname is None:
            return False

        if not self.is_enabled():
            return False

        self.logger.debug(f"Resolving CT enforcement for {hostname!r}")
        decision = False
        for _, value, _ in self._walk(hostname):
            if value is not None:
                decision = parse_bool(value)

        self.logger.debug(f"CT enforcement for {hostname!r}: {decision}")
        return decision

    def explain(self, hostname: Optional[str]) -> PolicyTrace:
        """Resolve a hostname and record every property lookup made.

        The decision in the returned trace is always the one
        is_ct_verification_required() gives for the same store contents.
        """
        trace = PolicyTrace(hostname=hostname)
        if hostname is None:
            return trace

        switch = self.store.get(CT_ENABLE_PROPERTY)
        trace.lookups.append(PropertyLookup(CT_ENABLE_PROPERTY, switch))
        trace.enabled = parse_bool(switch)
        if not trace.enabled:
            return trace

        for key, value, is_wildcard in self._walk(hostname):
            trace.lookups.append(PropertyLookup(key, value, is_wildcard=is_wildcard))
            if value is not None:
                trace.decision = parse_bool(value)
                trace.deciding_key = key
                trace.deciding_index = len(trace.lookups) - 1

        return trace


def is_ct_verification_required(
    hostname: Optional[str],
    store: Optional[PropertyStore] = None,
) -> bool:
    """Check whether SCT verification is required for a hostname.

    Args:
        hostname: Hostname of the peer, or None if unknown
        store: Property store to consult; defaults to the process-wide store

    Returns:
        True if CT must be enforced for connections to hostname
    """
    if store is None:
        store = get_default_store()
    return CTEnforcementResolver(store).is_ct_verification_required(hostname)
