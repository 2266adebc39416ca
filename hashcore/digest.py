"""
hashcore.digest
===============

`Digest` is the immutable 32-byte result of a BLAKE3 finalization.

It behaves like a small value type: hashable, comparable (in constant time via
:func:`hmac.compare_digest`), convertible to ``bytes`` and rendered as 64
lowercase hex characters.

>>> d = Digest.from_hex("f890484173e516bfd935ef3d22b912dc9738de38743993cfedf2c9473b3216a4")
>>> str(d)[:8]
'f8904841'
>>> len(d)
32
"""

from __future__ import annotations

import hmac
from typing import Any

from .errors import InvalidSizeError
from .utils.bytes import ensure_len, ensure_min_len, from_hex


class Digest:
    """Fixed 32-byte hash value."""

    SIZE = 32

    __slots__ = ("_b",)

    def __init__(self, data: Any) -> None:
        self._b: bytes = ensure_len(data, self.SIZE, name="digest")

    # ---- construction -------------------------------------------------

    @classmethod
    def from_bytes(cls, data: Any) -> "Digest":
        """Copy exactly 32 bytes from any buffer-protocol object."""
        return cls(data)

    @classmethod
    def copy_from(cls, data: Any) -> "Digest":
        return cls(data)

    @classmethod
    def from_hex(cls, text: str) -> "Digest":
        raw = from_hex(text)
        if len(raw) != cls.SIZE:
            raise InvalidSizeError(len(raw), expected=cls.SIZE, name="digest")
        return cls(raw)

    @classmethod
    def zero(cls) -> "Digest":
        return cls(bytes(cls.SIZE))

    # ---- access -------------------------------------------------------

    def copy_into(self, destination: Any) -> int:
        """Write the digest into the first 32 bytes of ``destination``."""
        view = ensure_min_len(destination, self.SIZE, name="destination")
        view[: self.SIZE] = self._b
        return self.SIZE

    def as_bytes(self) -> bytes:
        return self._b

    def hex(self) -> str:
        return self._b.hex()

    def __bytes__(self) -> bytes:
        return self._b

    def __len__(self) -> int:
        return self.SIZE

    # ---- comparison ---------------------------------------------------

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Digest):
            return NotImplemented
        return hmac.compare_digest(self._b, other._b)

    def __ne__(self, other: object) -> bool:
        if not isinstance(other, Digest):
            return NotImplemented
        return not hmac.compare_digest(self._b, other._b)

    def __hash__(self) -> int:
        """Stable within one process only (bytes hashing is salted per process); do not persist it."""
        return hash(self._b)

    def __str__(self) -> str:
        return self._b.hex()

    def __repr__(self) -> str:
        return f"Digest({self._b.hex()})"


__all__ = ["Digest"]
