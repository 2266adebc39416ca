"""
hashcore.utils.bytes
====================

Lightweight, dependency-free helpers around byte handling:

- Hex helpers: to_hex/from_hex, 0x-prefix management
- Zero-copy views: as_view() / writable_view() flatten any buffer-protocol
  object (bytes, bytearray, memoryview, array.array, numpy arrays) into a
  contiguous unsigned-byte ``memoryview`` without copying
- Length guards: ensure_len / ensure_min_len

Examples
--------
>>> to_hex(b"\\x01\\x02")
'0102'
>>> from_hex('0xdeadbeef')
b'\\xde\\xad\\xbe\\xef'
>>> as_view(b"abc").nbytes
3
"""

from __future__ import annotations

from typing import Any

from ..errors import InvalidSizeError, NullArgumentError


# -----------------------
# Basic bytes/hex helpers
# -----------------------

def strip0x(s: str) -> str:
    return s[2:] if s.startswith(("0x", "0X")) else s


def to_hex(data: Any, *, prefix: bool = False) -> str:
    """Return lowercase hex string of data, most significant nibble first."""
    h = as_view(data).hex()
    return f"0x{h}" if prefix else h


def from_hex(h: str) -> bytes:
    """Parse hex string with or without 0x prefix; ignores surrounding whitespace."""
    if not isinstance(h, str):
        raise TypeError("from_hex expects str")
    h = strip0x(h.strip())
    try:
        return bytes.fromhex(h)
    except ValueError as e:
        raise ValueError(f"invalid hex string: {e}") from e


# -----------------
# Zero-copy views
# -----------------

def as_view(data: Any, *, name: str = "data") -> memoryview:
    """
    Return a flat, read-only, unsigned-byte view over ``data``.

    Multi-byte item types are exposed as their raw in-memory bytes, so an
    ``array('I', ...)`` contributes ``4 * len(array)`` bytes. Non-contiguous
    buffers are rejected by ``memoryview.cast``.
    """
    if data is None:
        raise NullArgumentError(name)
    if isinstance(data, str):
        raise TypeError(f"{name} must be bytes-like, not str (encode it first)")
    view = data if isinstance(data, memoryview) else memoryview(data)
    if view.format != "B" or view.ndim != 1:
        view = view.cast("B")
    return view.toreadonly()


def writable_view(buffer: Any, *, name: str = "output") -> memoryview:
    """Flat unsigned-byte view over a *writable* buffer (bytearray, memoryview, ...)."""
    if buffer is None:
        raise NullArgumentError(name)
    view = buffer if isinstance(buffer, memoryview) else memoryview(buffer)
    if view.readonly:
        raise TypeError(f"{name} must be a writable buffer")
    if view.format != "B" or view.ndim != 1:
        view = view.cast("B")
    return view


# ---------------------
# Length/shape guarding
# ---------------------

def ensure_len(data: Any, n: int, *, name: str = "data") -> bytes:
    """Return ``data`` as immutable bytes after validating exact length ``n``."""
    view = as_view(data, name=name)
    if view.nbytes != n:
        raise InvalidSizeError(view.nbytes, expected=n, name=name)
    return view.tobytes()


def ensure_min_len(buffer: Any, n: int, *, name: str = "output") -> memoryview:
    """Return a writable view over ``buffer`` after validating it holds at least ``n`` bytes."""
    view = writable_view(buffer, name=name)
    if view.nbytes < n:
        raise InvalidSizeError(view.nbytes, expected=n, name=name, at_least=True)
    return view


__all__ = [
    "strip0x",
    "to_hex",
    "from_hex",
    "as_view",
    "writable_view",
    "ensure_len",
    "ensure_min_len",
]
