"""
TLS platform utilities.

This module provides the helpers that sit around the CT policy on the
connection path: default policy flags, SNI hostname validation, marshalling of
TLS parameters to and from an ssl.SSLContext, and file descriptor extraction.
"""

import ipaddress
import ssl
from dataclasses import dataclass, field
from typing import Any, List, Optional, Tuple

from ctpolicy.policy.resolver import CT_ENABLE_PROPERTY, parse_bool
from ctpolicy.stores import PropertyStore, get_default_store
from ctpolicy.utils.logging import get_logger

# Server name type for host names, as in the TLS server_name extension
SNI_HOST_NAME = 0

ENDPOINT_IDENTIFICATION_HTTPS = 'HTTPS'


def is_sni_enabled_by_default() -> bool:
    """SNI is always sent unless explicitly turned off."""
    return True


def is_ct_enabled_by_default(store: Optional[PropertyStore] = None) -> bool:
    """Return whether CT is switched on globally.

    Only the conscrypt.ct.enable switch is consulted; whether a given host is
    enforced is decided by the resolver.

    Args:
        store: Property store to consult; defaults to the process-wide store
    """
    if store is None:
        store = get_default_store()
    return parse_bool(store.get(CT_ENABLE_PROPERTY))


def is_literal_ip_address(hostname: Optional[str]) -> bool:
    """Return whether a hostname is an IPv4 or IPv6 address literal.

    IPv6 literals may be wrapped in brackets and may carry a %zone suffix.
    """
    if not hostname:
        return False

    candidate = hostname
    if candidate.startswith('[') and candidate.endswith(']'):
        candidate = candidate[1:-1]
    candidate = candidate.split('%', 1)[0]

    try:
        ipaddress.ip_address(candidate)
    except ValueError:
        return False
    return True


def is_valid_sni_hostname(hostname: Optional[str]) -> bool:
    """Return whether a hostname may be sent in the SNI extension.

    It must be a fully qualified name without a trailing dot (or 'localhost'),
    must not be an IP literal and must not contain NUL.
    """
    if hostname is None:
        return False
    return (
        (hostname.lower() == 'localhost' or '.' in hostname)
        and not is_literal_ip_address(hostname)
        and not hostname.endswith('.')
        and '\0' not in hostname
    )


@dataclass
class TLSParameters:
    """Connection parameters carried between callers and an SSLContext.

    Attributes:
        endpoint_identification_algorithm: 'HTTPS' to verify the peer's
            hostname against its certificate, None to leave the context's
            own setting alone
        use_cipher_suites_order: Prefer our cipher suite order over the peer's
        server_names: (type, name) pairs; type 0 is a host name
        use_sni: Whether to send SNI at all
        alpn_protocols: Protocols to advertise via ALPN, if any
    """
    endpoint_identification_algorithm: Optional[str] = None
    use_cipher_suites_order: bool = False
    server_names: List[Tuple[int, str]] = field(default_factory=list)
    use_sni: bool = field(default_factory=is_sni_enabled_by_default)
    alpn_protocols: Optional[List[str]] = None

    @property
    def sni_hostname(self) -> Optional[str]:
        """The first server name of host name type, or None."""
        for name_type, name in self.server_names:
            if name_type == SNI_HOST_NAME:
                return name
        return None

    @property
    def server_hostname(self) -> Optional[str]:
        """The name to pass as server_hostname when wrapping a socket, or None."""
        hostname = self.sni_hostname
        if self.use_sni and is_valid_sni_hostname(hostname):
            return hostname
        return None

    def apply_to_context(self, context: ssl.SSLContext) -> ssl.SSLContext:
        """Copy these parameters onto an SSL context.

        Hostname checking is only ever switched on, never off: an 'HTTPS'
        algorithm enables it on a verifying context, anything else leaves the
        context as it was.

        Args:
            context: Context to configure in place

        Returns:
            The same context, for chaining
        """
        algorithm = self.endpoint_identification_algorithm
        # Setting check_hostname on a CERT_NONE context would raise it to CERT_REQUIRED
        if (
            algorithm is not None
            and algorithm.upper() == ENDPOINT_IDENTIFICATION_HTTPS
            and context.verify_mode != ssl.CERT_NONE
        ):
            context.check_hostname = True

        if self.use_cipher_suites_order:
            context.options |= ssl.OP_CIPHER_SERVER_PREFERENCE
        else:
            context.options &= ~ssl.OP_CIPHER_SERVER_PREFERENCE

        if self.alpn_protocols:
            context.set_alpn_protocols(self.alpn_protocols)

        return context

    @classmethod
    def from_context(
        cls,
        context: ssl.SSLContext,
        hostname: Optional[str] = None,
        use_sni: Optional[bool] = None,
    ) -> 'TLSParameters':
        """Read parameters back from an SSL context.

        Args:
            context: Context to read from
            hostname: Peer hostname of the connection, if known
            use_sni: Whether SNI is in use; defaults to is_sni_enabled_by_default()

        Returns:
            Parameters describing the context; hostname is only reported as a
            server name when SNI is in use and it is a valid SNI hostname
        """
        if use_sni is None:
            use_sni = is_sni_enabled_by_default()

        params = cls(
            endpoint_identification_algorithm=(
                ENDPOINT_IDENTIFICATION_HTTPS if context.check_hostname else None
            ),
            use_cipher_suites_order=bool(context.options & ssl.OP_CIPHER_SERVER_PREFERENCE),
            use_sni=use_sni,
        )
        if use_sni and is_valid_sni_hostname(hostname):
            params.server_names = [(SNI_HOST_NAME, hostname)]
        return params


def create_ssl_context(
    alpn_protocols: Optional[List[str]] = None,
    verify: bool = True,
    params: Optional[TLSParameters] = None,
) -> ssl.SSLContext:
    """Create an SSL context for client connections.

    Args:
        alpn_protocols: List of ALPN protocols to advertise (e.g., ['h2', 'http/1.1'])
        verify: Whether to verify server certificates
        params: Optional parameters applied before verification is settled;
            verify=False always wins over them

    Returns:
        Configured SSL context
    """
    context = ssl.create_default_context(ssl.Purpose.SERVER_AUTH)

    if alpn_protocols:
        context.set_alpn_protocols(alpn_protocols)

    if params is not None:
        params.apply_to_context(context)

    if not verify:
        context.check_hostname = False
        context.verify_mode = ssl.CERT_NONE

    return context


def get_file_descriptor(conn: Any) -> int:
    """Get the OS file descriptor behind a connection.

    Tries the object's own fileno() first, then the socket exposed by
    get_extra_info('socket') as on asyncio transports and stream writers.

    Args:
        conn: Socket, SSL socket, asyncio transport or stream writer

    Returns:
        File descriptor number

    Raises:
        ValueError: If no open file descriptor can be found
    """
    logger = get_logger()

    fileno = getattr(conn, 'fileno', None)
    if callable(fileno):
        try:
            fd = fileno()
        except (OSError, ValueError) as e:
            logger.debug(f"fileno() failed on {type(conn).__name__}: {e}")
        else:
            if isinstance(fd, int) and fd >= 0:
                return fd

    get_extra_info = getattr(conn, 'get_extra_info', None)
    if callable(get_extra_info):
        sock = get_extra_info('socket')
        if sock is not None:
            fd = sock.fileno()
            if isinstance(fd, int) and fd >= 0:
                return fd

    raise ValueError(f"Can't get file descriptor from {type(conn).__name__}")
