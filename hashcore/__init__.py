"""
hashcore: incremental BLAKE3 hashing.

The compression core is the ``blake3`` extension; this package layers the
orchestration on top of it:

- `Hasher` - incremental state in default, keyed or derive-key mode, with
  sequential, large-buffer and join (multi-threaded) update paths and fixed
  or extendable-output finalization
- `Digest` - immutable 32-byte result with hex rendering
- `HashingStream` - binary stream wrapper hashing everything read or written
- `Blake3HashAlgorithm` - block-chunked ``transform_block`` style adapter

One-shot helpers: `blake3_hash`, `blake3_hash_into`, `keyed_hash`,
`derive_key`.

>>> str(blake3_hash(b"BLAKE3"))
'f890484173e516bfd935ef3d22b912dc9738de38743993cfedf2c9473b3216a4'
"""

from __future__ import annotations

from .version import __version__
from .algorithm import AlgorithmState, Blake3HashAlgorithm, HashAlgorithm
from .config import DEFAULT_JOIN_THRESHOLD, Config
from .digest import Digest
from .errors import (
    HashCoreError,
    InvalidKeyLengthError,
    InvalidSizeError,
    InvalidStateError,
    NullArgumentError,
)
from .hasher import (
    Hasher,
    HasherMode,
    HasherState,
    UpdateStrategy,
    blake3_hash,
    blake3_hash_into,
    derive_key,
    keyed_hash,
    select_strategy,
)
from .stream import HashingStream


def get_version() -> str:
    """Return the semantic version string for this package."""
    return __version__


__all__ = [
    "__version__",
    "get_version",
    "Digest",
    "Hasher",
    "HasherMode",
    "HasherState",
    "UpdateStrategy",
    "select_strategy",
    "blake3_hash",
    "blake3_hash_into",
    "keyed_hash",
    "derive_key",
    "HashingStream",
    "HashAlgorithm",
    "Blake3HashAlgorithm",
    "AlgorithmState",
    "Config",
    "DEFAULT_JOIN_THRESHOLD",
    "HashCoreError",
    "InvalidSizeError",
    "InvalidKeyLengthError",
    "InvalidStateError",
    "NullArgumentError",
]
