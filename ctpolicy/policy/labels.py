"""
Hostname label tokenizer.

Hostnames are split on the literal '.' only. Nothing is lowercased, trimmed or
validated, and empty labels are kept where they occur.
"""

from typing import List

LABEL_SEPARATOR = '.'


def split_labels(hostname: str) -> List[str]:
    """Split a hostname into its DNS labels, keeping empty ones.

    Args:
        hostname: Hostname as given by the caller

    Returns:
        Labels in their original order, e.g. 'foo..bar' -> ['foo', '', 'bar']
    """
    return hostname.split(LABEL_SEPARATOR)


def reversed_labels(hostname: str) -> List[str]:
    """Return the labels of a hostname, most significant first.

    'foo.bar.com' -> ['com', 'bar', 'foo'], 'foo.' -> ['', 'foo'] and
    '' -> [''].
    """
    labels = split_labels(hostname)
    labels.reverse()
    return labels
