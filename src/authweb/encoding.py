"""Percent-encoding for ``application/x-www-form-urlencoded`` values.

Login endpoints compare the submitted values byte for byte, so the encoding
is fixed rather than delegated to :func:`urllib.parse.quote_plus` (which
also leaves ``~`` alone and emits uppercase hex):

* ASCII letters, digits, ``-``, ``_`` and ``.`` pass through unchanged.
* A space becomes ``+``.
* Every other byte of the UTF-8 encoding becomes ``%xx`` with two
  lowercase hex digits.

Text that Python decoded from argv or the environment with
``surrogateescape`` is encoded back to its original bytes, so a Latin-1
password is sent exactly as it was typed.
"""

from __future__ import annotations

import string

_SAFE_BYTES = frozenset((string.ascii_letters + string.digits + "-_.").encode("ascii"))
_SPACE = 0x20


def urlencode(value: str) -> str:
    """Percent-encode *value* for use as a form field value.

    Args:
        value: Arbitrary text, e.g. a username or password.

    Returns:
        The encoded string. Its length is always
        ``len(raw) + 2 * escaped`` where ``raw`` is the UTF-8 encoding of
        *value* and ``escaped`` is the number of bytes outside the safe set.

    Example::

        >>> urlencode("a b&c")
        'a+b%26c'
    """
    parts: list[str] = []
    for byte in value.encode("utf-8", "surrogateescape"):
        if byte in _SAFE_BYTES:
            parts.append(chr(byte))
        elif byte == _SPACE:
            parts.append("+")
        else:
            parts.append(f"%{byte:02x}")
    return "".join(parts)


def escaped_length(value: str) -> int:
    """Return the length :func:`urlencode` will produce for *value*."""
    raw = value.encode("utf-8", "surrogateescape")
    escaped = sum(1 for byte in raw if byte not in _SAFE_BYTES and byte != _SPACE)
    return len(raw) + 2 * escaped
