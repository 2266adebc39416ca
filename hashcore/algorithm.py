"""
hashcore.algorithm
==================

Block-chunked hash algorithm interface and its BLAKE3 implementation.

Frameworks that drive a hash through ``initialize`` / ``transform_block``\\* /
``transform_final_block`` (the classic "hash algorithm" shape) can use
`Blake3HashAlgorithm`. State is an explicit three-state machine:

    RESET --transform_block--> ACCUMULATING --transform_final_block--> FINALIZED
      ^                                                                    |
      +------------------------------ initialize --------------------------+

A ``transform_block`` in FINALIZED state starts a new message.
"""

from __future__ import annotations

import abc
from enum import Enum
from typing import Any, Optional, Tuple

from .config import DEFAULT_STREAM_READ_SIZE, Config
from .digest import Digest
from .errors import InvalidStateError, NullArgumentError
from .hasher import Hasher
from .utils.bytes import as_view, writable_view


class AlgorithmState(str, Enum):
    RESET = "reset"
    ACCUMULATING = "accumulating"
    FINALIZED = "finalized"


def _is_buffer(obj: Any) -> bool:
    try:
        memoryview(obj)
    except TypeError:
        return False
    return True


def _window(data: Any, offset: int, count: Optional[int], name: str = "input") -> memoryview:
    view = as_view(data, name=name)
    if count is None:
        count = view.nbytes - offset
    if offset < 0 or count < 0 or offset + count > view.nbytes:
        raise ValueError(
            f"{name}[{offset}:{offset}+{count}] is out of range for {view.nbytes} bytes"
        )
    return view[offset : offset + count]


class HashAlgorithm(abc.ABC):
    """Generic block-chunked hash algorithm."""

    #: Output size in bits.
    hash_size: int = 0

    def __init__(self) -> None:
        self._state = AlgorithmState.RESET
        self._hash_value: Optional[bytes] = None
        self.read_size = DEFAULT_STREAM_READ_SIZE

    # ---- implementation hooks -------------------------------------------

    @abc.abstractmethod
    def _initialize_core(self) -> None: ...

    @abc.abstractmethod
    def _hash_core(self, data: memoryview) -> None: ...

    @abc.abstractmethod
    def _hash_final(self) -> bytes: ...

    def _dispose(self) -> None:
        pass

    # ---- public surface ---------------------------------------------------

    @property
    def hash_size_bytes(self) -> int:
        return self.hash_size // 8

    @property
    def state(self) -> AlgorithmState:
        return self._state

    @property
    def hash_value(self) -> bytes:
        if self._hash_value is None:
            raise InvalidStateError("no hash value yet; call transform_final_block or compute_hash")
        return self._hash_value

    def initialize(self) -> None:
        self._initialize_core()
        self._state = AlgorithmState.RESET

    def transform_block(
        self,
        input: Any,
        offset: int,
        count: int,
        output: Any = None,
        output_offset: int = 0,
    ) -> int:
        """
        Absorb ``input[offset:offset+count]``. When ``output`` is given the
        same bytes are copied there at ``output_offset``. Returns ``count``.
        """
        view = _window(input, offset, count)
        dest = None
        if output is not None:
            dest = writable_view(output)
            if output_offset < 0 or output_offset + count > dest.nbytes:
                raise ValueError(f"output[{output_offset}:{output_offset}+{count}] is out of range")
        if self._state is AlgorithmState.FINALIZED:
            self.initialize()
        self._hash_core(view)
        self._state = AlgorithmState.ACCUMULATING
        if dest is not None:
            dest[output_offset : output_offset + count] = view
        return count

    def transform_final_block(self, input: Any, offset: int, count: int) -> bytes:
        """Absorb the last (possibly empty) chunk and finalize. Returns a copy of the chunk."""
        view = _window(input, offset, count)
        if self._state is AlgorithmState.FINALIZED:
            self.initialize()
        if view.nbytes:
            self._hash_core(view)
        self._finish()
        return view.tobytes()

    def compute_hash(self, data: Any, offset: int = 0, count: Optional[int] = None) -> bytes:
        """Hash a whole buffer (or the window of it), or a readable stream to EOF."""
        if data is None:
            raise NullArgumentError("data")
        self.initialize()
        if not _is_buffer(data) and hasattr(data, "read"):
            while True:
                chunk = data.read(self.read_size)
                if not chunk:
                    break
                self._hash_core(as_view(chunk))
        else:
            self._hash_core(_window(data, offset, count, name="data"))
        return self._finish()

    def try_compute_hash(self, source: Any, destination: Any) -> Tuple[bool, int]:
        """
        Hash ``source`` into ``destination``. Returns ``(False, 0)`` without
        writing anything when ``destination`` is too small.
        """
        view = as_view(source, name="source")
        dest = writable_view(destination, name="destination")
        size = self.hash_size_bytes
        if dest.nbytes < size:
            return False, 0
        self.initialize()
        self._hash_core(view)
        dest[:size] = self._finish()
        return True, size

    def _finish(self) -> bytes:
        self._hash_value = self._hash_final()
        self._state = AlgorithmState.FINALIZED
        return self._hash_value

    def close(self) -> None:
        self._dispose()

    def __enter__(self) -> "HashAlgorithm":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


class Blake3HashAlgorithm(HashAlgorithm):
    """BLAKE3 (default mode, 256-bit output) behind the block-chunked interface."""

    hash_size = Digest.SIZE * 8

    def __init__(self, *, config: Optional[Config] = None) -> None:
        super().__init__()
        self._hasher = Hasher(config=config)
        self.read_size = self._hasher.config.stream_read_size

    def _initialize_core(self) -> None:
        self._hasher.reset()

    def _hash_core(self, data: memoryview) -> None:
        self._hasher.update(data)

    def _hash_final(self) -> bytes:
        return self._hasher.finalize().as_bytes()

    def _dispose(self) -> None:
        self._hasher.release()


__all__ = ["AlgorithmState", "HashAlgorithm", "Blake3HashAlgorithm"]
