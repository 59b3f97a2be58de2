"""
Properties file loading.

Reads security properties from a java.security style file: one key/value pair
per logical line, separated by '=', ':' or whitespace, with '#' and '!'
comments, backslash line continuations and backslash escapes.
"""

import os
import string
from typing import Dict, Iterable, Iterator, Optional, Tuple

from ctpolicy.stores.base import PropertyStore
from ctpolicy.utils.logging import get_logger

WHITESPACE = ' \t\f'
SEPARATORS = '=:'
COMMENT_MARKERS = '#!'

_ESCAPES = {'t': '\t', 'n': '\n', 'r': '\r', 'f': '\f'}


def _logical_lines(lines: Iterable[str]) -> Iterator[str]:
    """Join continued natural lines into logical lines, dropping comments and blanks."""
    buffer = ''
    continuing = False
    for raw in lines:
        line = raw.rstrip('\r\n').lstrip(WHITESPACE)
        if not continuing and (not line or line[0] in COMMENT_MARKERS):
            continue

        # An odd run of trailing backslashes escapes the line break
        trailing = len(line) - len(line.rstrip('\\'))
        if trailing % 2 == 1:
            buffer += line[:-1]
            continuing = True
            continue

        yield buffer + line
        buffer = ''
        continuing = False

    if continuing:
        yield buffer


def _unescape(text: str) -> str:
    if '\\' not in text:
        return text

    out = []
    index = 0
    length = len(text)
    while index < length:
        char = text[index]
        if char != '\\':
            out.append(char)
            index += 1
            continue

        index += 1
        if index >= length:
            break
        char = text[index]
        if char == 'u':
            digits = text[index + 1:index + 5]
            if len(digits) != 4 or any(d not in string.hexdigits for d in digits):
                raise ValueError(f"Malformed \\uxxxx encoding in {text!r}")
            out.append(chr(int(digits, 16)))
            index += 5
        else:
            out.append(_ESCAPES.get(char, char))
            index += 1

    return ''.join(out)


def parse_entry(line: str) -> Tuple[str, str]:
    """Split one logical line into an unescaped (key, value) pair.

    Args:
        line: Logical line with leading whitespace already removed

    Returns:
        Tuple of (key, value); the value is empty when the line holds only a key

    Raises:
        ValueError: If the line contains a malformed \\uxxxx escape
    """
    index = 0
    length = len(line)
    while index < length:
        char = line[index]
        if char == '\\':
            index += 2
            continue
        if char in SEPARATORS or char in WHITESPACE:
            break
        index += 1

    key = line[:index]
    rest = line[index:].lstrip(WHITESPACE)
    if rest[:1] and rest[0] in SEPARATORS:
        rest = rest[1:].lstrip(WHITESPACE)

    return _unescape(key), _unescape(rest)


def parse_properties(lines: Iterable[str]) -> Dict[str, str]:
    """Parse properties from an iterable of text lines.

    Later duplicates of a key override earlier ones.
    """
    properties: Dict[str, str] = {}
    for line in _logical_lines(lines):
        key, value = parse_entry(line)
        properties[key] = value
    return properties


def load_properties(path: str) -> Dict[str, str]:
    """Load a properties file from disk.

    Args:
        path: Path to the properties file

    Returns:
        Dictionary of property names to values

    Raises:
        OSError: If the file cannot be read
        ValueError: If the file contains a malformed escape
    """
    logger = get_logger()
    path = os.path.expanduser(path)

    # java.security files are ISO-8859-1; anything else uses \\u escapes
    with open(path, 'r', encoding='latin-1') as f:
        properties = parse_properties(f)

    logger.info(f"Loaded {len(properties)} security properties from {path}")
    return properties


class FilePropertyStore(PropertyStore):
    """Read-only store holding the properties read from a file at construction.

    The file is read once; later edits are not picked up. Build a new store
    to reload.
    """

    def __init__(self, path: str) -> None:
        self.path = path
        self._properties = load_properties(path)

    def get(self, key: str) -> Optional[str]:
        return self._properties.get(key)

    def __len__(self) -> int:
        return len(self._properties)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.path!r})"
