"""
hashcore.engine
===============

Boundary to the BLAKE3 compression core.

The tree-structured chunk compression lives in the compiled ``blake3``
extension (Rust, via PyO3). This module is the only place that touches it:
everything above works with an opaque `EngineHandle` and the free functions
below, mirroring a C-style create / update / finalize / destroy surface.

Operations
----------
- ``create_default`` / ``create_keyed`` / ``create_derive_key`` -> handle
- ``reset``, ``update``, ``update_parallel``
- ``finalize`` (32 bytes), ``finalize_xof`` (any length, optional seek),
  ``finalize_into`` (fills a caller buffer)
- ``clone``, ``destroy``

The only failure path crossing this boundary is the liveness precondition:
any call on a destroyed handle raises `InvalidStateError`.

Threading
---------
The engine decides per state whether it may fan work out across its worker
pool. A handle created with ``max_threads == 1`` never does; otherwise
``update_parallel`` hands the whole buffer over and the engine splits it into
independent subtrees and joins them before returning. ``update`` on such a
handle feeds the buffer in `SEQUENTIAL_SLICE` pieces, which is no wider than
the narrowest SIMD batch the engine compresses without forking, so the
sequential path stays on the calling thread.
"""

from __future__ import annotations

from importlib import import_module
from typing import Any, Optional

from .errors import DependencyMissing, InvalidStateError
from .logging import get_logger

log = get_logger(__name__)

#: Size of the fixed digest produced by `finalize`.
OUT_LEN = 32

#: Size of a keyed-mode key.
KEY_LEN = 32

#: BLAKE3 chunk size; the unit the engine's tree is built from.
CHUNK_LEN = 1024

#: Per-call slice for sequential absorption into a join-capable state.
SEQUENTIAL_SLICE = 4 * CHUNK_LEN

#: Worker count meaning "let the engine decide".
AUTO = -1

# ---------------------------------------------------------------------------
# Load the native extension
# ---------------------------------------------------------------------------

_blake3: Any = None


def _load_native() -> Any:
    """
    Import the compiled ``blake3`` extension once. On failure, raise an
    informative `DependencyMissing` with an actionable hint.
    """
    global _blake3
    if _blake3 is None:
        try:
            _blake3 = import_module("blake3")
        except ImportError as exc:
            raise DependencyMissing(
                "blake3",
                "pip install blake3; wheels exist for CPython on Linux/macOS/Windows",
            ) from exc
    return _blake3


def engine_version() -> str:
    """Version string of the loaded ``blake3`` extension."""
    return str(getattr(_load_native(), "__version__", "0.0.0"))


# ---------------------------------------------------------------------------
# Handle
# ---------------------------------------------------------------------------


class EngineHandle:
    """
    Opaque reference to one live engine state.

    Holders must treat it as exclusively owned and call `destroy` exactly once.
    Its attributes are private to this module.
    """

    __slots__ = ("_state", "_max_threads", "_mode")

    def __init__(self, state: Any, max_threads: int, mode: str) -> None:
        self._state: Optional[Any] = state
        self._max_threads = max_threads
        self._mode = mode

    @property
    def live(self) -> bool:
        return self._state is not None

    @property
    def max_threads(self) -> int:
        return self._max_threads

    @property
    def parallel(self) -> bool:
        return self._max_threads != 1

    def __repr__(self) -> str:
        status = "live" if self.live else "destroyed"
        return f"<EngineHandle mode={self._mode} threads={self._max_threads} {status}>"


def _state(handle: EngineHandle) -> Any:
    state = handle._state
    if state is None:
        raise InvalidStateError(mode=handle._mode)
    return state


def _threads(max_threads: int) -> int:
    native = _load_native()
    return native.blake3.AUTO if max_threads == AUTO else max_threads


def _new(mode: str, max_threads: int, **kwargs: Any) -> EngineHandle:
    native = _load_native()
    state = native.blake3(max_threads=_threads(max_threads), **kwargs)
    handle = EngineHandle(state, max_threads, mode)
    log.debug("engine handle created", extra={"mode": mode, "max_threads": max_threads})
    return handle


def create_default(max_threads: int = AUTO) -> EngineHandle:
    return _new("default", max_threads)


def create_keyed(key: bytes, max_threads: int = AUTO) -> EngineHandle:
    """Keyed state; ``key`` must already be validated to `KEY_LEN` bytes."""
    return _new("keyed", max_threads, key=key)


def create_derive_key(context: str | bytes, max_threads: int = AUTO) -> EngineHandle:
    """Derive-key state. Byte contexts are decoded as UTF-8, replacing invalid sequences."""
    if isinstance(context, (bytes, bytearray, memoryview)):
        context = bytes(context).decode("utf-8", errors="replace")
    return _new("derive_key", max_threads, derive_key_context=context)


# ---------------------------------------------------------------------------
# Operations
# ---------------------------------------------------------------------------


def reset(handle: EngineHandle) -> None:
    _state(handle).reset()


def update(handle: EngineHandle, data: memoryview) -> None:
    """Absorb ``data`` on the calling thread."""
    state = _state(handle)
    n = data.nbytes
    if not handle.parallel or n <= SEQUENTIAL_SLICE:
        state.update(data)
        return
    for start in range(0, n, SEQUENTIAL_SLICE):
        state.update(data[start : start + SEQUENTIAL_SLICE])


def update_parallel(handle: EngineHandle, data: memoryview) -> None:
    """
    Absorb ``data``, letting the engine fan out across its workers. Returns
    only after every worker has been joined.
    """
    _state(handle).update(data)


def finalize(handle: EngineHandle) -> bytes:
    return _state(handle).digest(OUT_LEN)


def finalize_xof(handle: EngineHandle, length: int, seek: int = 0) -> bytes:
    if length < 0:
        raise ValueError(f"output length must be >= 0, got {length}")
    if seek < 0:
        raise ValueError(f"seek must be >= 0, got {seek}")
    if length == 0:
        _state(handle)
        return b""
    return _state(handle).digest(length, seek=seek)


def finalize_into(handle: EngineHandle, output: memoryview, seek: int = 0) -> int:
    """Fill the writable byte view ``output`` completely; returns its length."""
    n = output.nbytes
    output[:] = finalize_xof(handle, n, seek=seek)
    return n


def clone(handle: EngineHandle) -> EngineHandle:
    """Independent handle holding a copy of the absorbed state."""
    copy = EngineHandle(_state(handle).copy(), handle._max_threads, handle._mode)
    log.debug("engine handle cloned", extra={"mode": handle._mode})
    return copy


def destroy(handle: EngineHandle) -> None:
    """Release the engine state. Destroying an already destroyed handle is a no-op."""
    if handle._state is None:
        return
    handle._state = None
    log.debug("engine handle destroyed", extra={"mode": handle._mode})


__all__ = [
    "OUT_LEN",
    "KEY_LEN",
    "CHUNK_LEN",
    "SEQUENTIAL_SLICE",
    "AUTO",
    "EngineHandle",
    "engine_version",
    "create_default",
    "create_keyed",
    "create_derive_key",
    "reset",
    "update",
    "update_parallel",
    "finalize",
    "finalize_xof",
    "finalize_into",
    "clone",
    "destroy",
]
