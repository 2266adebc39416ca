"""
hashcore.hasher
===============

Incremental BLAKE3 hasher over one engine handle.

A `Hasher` owns exactly one `EngineHandle` for its whole life and moves
through ``UNINITIALIZED -> LIVE -> RELEASED``. Three construction modes:

- ``Hasher()`` / ``Hasher.new()`` - default, general-purpose content hashing
- ``Hasher.new_keyed(key)`` - keyed (MAC-style) hashing with a 32-byte key
- ``Hasher.new_derive_key(context)`` - key derivation, domain separated by a
  context string

Update strategies
-----------------
``update`` picks a path purely on input length (see `select_strategy`):

- ``SEQUENTIAL`` - length <= threshold (64 KiB by default): one engine call.
- ``LARGE`` - length > threshold: absorbed in threshold-sized zero-copy
  slices of the caller's buffer, one engine call per slice, so no single
  call holds more than one slice. Apart from the slicing it does the same
  engine work as ``SEQUENTIAL``, plus a DEBUG "large update" record.
- ``JOIN`` - only via ``update_with_join``: the engine fans the buffer out
  across its workers and joins them before returning. Worth it from roughly
  128 KiB upwards.

Every path yields the same digest for the same bytes, and calls may be freely
interleaved: absorption order is call order.

Usage
-----
>>> with Hasher() as h:
...     h.update(b"BLAKE3").hexdigest()
'f890484173e516bfd935ef3d22b912dc9738de38743993cfedf2c9473b3216a4'

One-shot helpers: `blake3_hash`, `blake3_hash_into`, `keyed_hash`,
`derive_key`.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Optional

from . import engine
from .config import DEFAULT_JOIN_THRESHOLD, Config, get_config
from .digest import Digest
from .errors import InvalidKeyLengthError, InvalidStateError, NullArgumentError
from .logging import get_logger
from .utils.bytes import as_view, writable_view

log = get_logger(__name__)


class HasherMode(str, Enum):
    DEFAULT = "default"
    KEYED = "keyed"
    DERIVE_KEY = "derive_key"


class HasherState(str, Enum):
    UNINITIALIZED = "uninitialized"
    LIVE = "live"
    RELEASED = "released"


class UpdateStrategy(str, Enum):
    SEQUENTIAL = "sequential"
    LARGE = "large"
    JOIN = "join"


def select_strategy(
    length: int,
    explicit_join: bool = False,
    threshold: int = DEFAULT_JOIN_THRESHOLD,
) -> UpdateStrategy:
    """Choose the update path for one call's input."""
    if explicit_join:
        return UpdateStrategy.JOIN
    if length <= threshold:
        return UpdateStrategy.SEQUENTIAL
    return UpdateStrategy.LARGE


class Hasher:
    """
    Incremental BLAKE3 state.

    Not thread-safe: callers sharing one instance across threads must
    serialize access. The worker fan-out inside `update_with_join` is the
    engine's own business.
    """

    name = "blake3"
    digest_size = Digest.SIZE
    block_size = 64

    def __init__(self, *, config: Optional[Config] = None) -> None:
        self._open(HasherMode.DEFAULT, config)

    # ------------------------------------------------------------------ #
    # Construction
    # ------------------------------------------------------------------ #

    def _open(
        self,
        mode: HasherMode,
        config: Optional[Config],
        key: Optional[bytes] = None,
        context: Any = None,
    ) -> None:
        self._state = HasherState.UNINITIALIZED
        self._handle: Optional[engine.EngineHandle] = None
        self._mode = mode
        self._config = config if config is not None else get_config()
        self._join_warned = False
        threads = self._config.max_threads
        if mode is HasherMode.KEYED:
            self._handle = engine.create_keyed(key, threads)  # type: ignore[arg-type]
        elif mode is HasherMode.DERIVE_KEY:
            self._handle = engine.create_derive_key(context, threads)
        else:
            self._handle = engine.create_default(threads)
        self._state = HasherState.LIVE

    @classmethod
    def new(cls, *, config: Optional[Config] = None) -> "Hasher":
        return cls(config=config)

    @classmethod
    def new_keyed(cls, key: Any, *, config: Optional[Config] = None) -> "Hasher":
        """Keyed mode. ``key`` must be exactly 32 bytes."""
        view = as_view(key, name="key")
        if view.nbytes != engine.KEY_LEN:
            raise InvalidKeyLengthError(view.nbytes, expected=engine.KEY_LEN)
        obj = cls.__new__(cls)
        obj._open(HasherMode.KEYED, config, key=view.tobytes())
        return obj

    @classmethod
    def new_derive_key(cls, context: Any, *, config: Optional[Config] = None) -> "Hasher":
        """Derive-key mode. ``context`` is a ``str`` or UTF-8 bytes."""
        if context is None:
            raise NullArgumentError("context")
        if not isinstance(context, str):
            context = as_view(context, name="context").tobytes()
        obj = cls.__new__(cls)
        obj._open(HasherMode.DERIVE_KEY, config, context=context)
        return obj

    # ------------------------------------------------------------------ #
    # Introspection
    # ------------------------------------------------------------------ #

    @property
    def mode(self) -> HasherMode:
        return self._mode

    @property
    def state(self) -> HasherState:
        return self._state

    @property
    def config(self) -> Config:
        return self._config

    def _live(self) -> engine.EngineHandle:
        if self._state is not HasherState.LIVE or self._handle is None:
            raise InvalidStateError(state=self._state.value, mode=self._mode.value)
        return self._handle

    # ------------------------------------------------------------------ #
    # Update
    # ------------------------------------------------------------------ #

    def update(self, data: Any) -> "Hasher":
        """Absorb ``data`` (any buffer-protocol object). Returns ``self``."""
        view = as_view(data)
        handle = self._live()
        n = view.nbytes
        threshold = self._config.join_threshold
        if select_strategy(n, False, threshold) is UpdateStrategy.SEQUENTIAL:
            engine.update(handle, view)
            return self
        if log.isEnabledFor(logging.DEBUG):
            log.debug("large update", extra={"bytes": n, "slice": threshold})
        for start in range(0, n, threshold):
            engine.update(handle, view[start : start + threshold])
        return self

    def update_with_join(self, data: Any) -> "Hasher":
        """
        Absorb ``data`` on the engine's parallel path. Synchronous: returns
        after all workers have joined. Output is identical to `update`.
        """
        view = as_view(data)
        handle = self._live()
        if not handle.parallel and not self._join_warned:
            self._join_warned = True
            log.warning(
                "join update requested on a single-threaded engine; absorbing sequentially",
                extra={"max_threads": handle.max_threads},
            )
        engine.update_parallel(handle, view)
        return self

    # ------------------------------------------------------------------ #
    # Finalize
    # ------------------------------------------------------------------ #

    def finalize(self) -> Digest:
        return Digest(engine.finalize(self._live()))

    def finalize_into(self, output: Any) -> int:
        """
        Fill ``output`` (a writable buffer of any length) with output bytes.
        32 bytes equals `finalize`; other lengths are the extendable output.
        """
        view = writable_view(output)
        handle = self._live()
        if view.nbytes == 0:
            return 0
        return engine.finalize_into(handle, view)

    def finalize_xof(self, length: int, *, seek: int = 0) -> bytes:
        """``length`` bytes of extendable output starting at byte ``seek``."""
        return engine.finalize_xof(self._live(), length, seek)

    def digest(self, length: int = Digest.SIZE) -> bytes:
        return self.finalize_xof(length)

    def hexdigest(self, length: int = Digest.SIZE) -> str:
        return self.finalize_xof(length).hex()

    # ------------------------------------------------------------------ #
    # Lifecycle
    # ------------------------------------------------------------------ #

    def reset(self) -> None:
        """Discard absorbed bytes; mode, key and context are kept."""
        engine.reset(self._live())

    def copy(self) -> "Hasher":
        """Independent live hasher with the same mode and absorbed state."""
        handle = self._live()
        other = type(self).__new__(type(self))
        other._mode = self._mode
        other._config = self._config
        other._join_warned = self._join_warned
        other._handle = engine.clone(handle)
        other._state = HasherState.LIVE
        return other

    def release(self) -> None:
        """Free the engine handle. Calling it again is a no-op."""
        if self._handle is not None:
            engine.destroy(self._handle)
            self._handle = None
        self._state = HasherState.RELEASED

    def __enter__(self) -> "Hasher":
        self._live()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.release()

    def __repr__(self) -> str:
        return f"<Hasher mode={self._mode.value} state={self._state.value}>"


# ---------------------------------------------------------------------------
# One-shot helpers
# ---------------------------------------------------------------------------


def blake3_hash(data: Any) -> Digest:
    """Default-mode digest of ``data``."""
    with Hasher() as h:
        return h.update(data).finalize()


def blake3_hash_into(data: Any, output: Any) -> int:
    """Hash ``data`` into ``output`` (any length); returns bytes written."""
    with Hasher() as h:
        return h.update(data).finalize_into(output)


def keyed_hash(key: Any, data: Any) -> Digest:
    with Hasher.new_keyed(key) as h:
        return h.update(data).finalize()


def derive_key(context: Any, key_material: Any, length: int = Digest.SIZE) -> bytes:
    """Derive ``length`` bytes of key material bound to ``context``."""
    with Hasher.new_derive_key(context) as h:
        return h.update(key_material).finalize_xof(length)


__all__ = [
    "HasherMode",
    "HasherState",
    "UpdateStrategy",
    "select_strategy",
    "Hasher",
    "blake3_hash",
    "blake3_hash_into",
    "keyed_hash",
    "derive_key",
]
