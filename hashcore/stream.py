"""
hashcore.stream
===============

`HashingStream` is a pass-through binary stream that hashes every byte it
reads or writes.

It wraps any file-like object (``io.BytesIO``, an open file, a socket
file, ...) and forwards each call unchanged. Whatever bytes actually cross
the read/write boundary are absorbed into an owned `Hasher`, once each, in
transfer order. Seeking, ``tell`` and friends pass straight through and do
not touch the hash.

Asynchronous wrapped objects are supported through the ``a*`` methods
(`aread`, `areadinto`, `awrite`, `aflush`, `aclose`): a method of the wrapped
object that returns an awaitable (aiofiles handles, ``asyncio.StreamReader``)
is awaited, a plain one is used as is. ``aflush`` prefers ``drain()`` when the
wrapped object has one (``asyncio.StreamWriter``).

Example
-------
>>> import io
>>> with HashingStream(io.BytesIO(b"BLAKE3")) as s:
...     _ = s.read()
...     str(s.compute_hash())[:16]
'f890484173e516bf'
"""

from __future__ import annotations

import inspect
import io
from typing import Any, Optional, Union

from .config import Config
from .digest import Digest
from .errors import InvalidStateError, NullArgumentError
from .hasher import Hasher
from .logging import get_logger
from .utils.bytes import as_view, writable_view

log = get_logger(__name__)


async def _maybe_await(value: Any) -> Any:
    if inspect.isawaitable(value):
        return await value
    return value


def _sync(value: Any, op: str) -> Any:
    if inspect.isawaitable(value):
        if inspect.iscoroutine(value):
            value.close()
        raise TypeError(f"wrapped stream {op}() is asynchronous; use HashingStream.a{op}()")
    return value


class HashingStream(io.BufferedIOBase):
    """
    Transparent hashing wrapper around a binary stream.

    Parameters
    ----------
    stream:
        The wrapped file-like object.
    close_stream:
        Close ``stream`` when this wrapper is closed (default ``True``).
    hasher:
        Use this hasher instead of a fresh default-mode one. The wrapper takes
        ownership and releases it on close.
    config:
        Configuration for the default hasher.
    """

    def __init__(
        self,
        stream: Any,
        *,
        close_stream: bool = True,
        hasher: Optional[Hasher] = None,
        config: Optional[Config] = None,
    ) -> None:
        super().__init__()
        self._closing = False
        self._stream: Any = None
        self._hasher: Optional[Hasher] = None
        self._close_stream = bool(close_stream)
        if stream is None:
            raise NullArgumentError("stream")
        self._stream = stream
        self._hasher = hasher if hasher is not None else Hasher(config=config)

    # ------------------------------------------------------------------ #
    # Internals
    # ------------------------------------------------------------------ #

    @property
    def wrapped(self) -> Any:
        return self._stream

    @property
    def hasher(self) -> Hasher:
        if self._hasher is None:  # pragma: no cover - only after a failed __init__
            raise InvalidStateError("stream was not initialized")
        return self._hasher

    def _check_open(self) -> None:
        if self.closed:
            raise ValueError("I/O operation on closed stream")

    def _absorb(self, data: Any, n: Optional[int] = None) -> None:
        view = as_view(data)
        if n is not None:
            view = view[:n]
        if view.nbytes:
            self.hasher.update(view)

    # ------------------------------------------------------------------ #
    # Capabilities (pass-through)
    # ------------------------------------------------------------------ #

    def readable(self) -> bool:
        fn = getattr(self._stream, "readable", None)
        return bool(fn()) if fn is not None else hasattr(self._stream, "read")

    def writable(self) -> bool:
        fn = getattr(self._stream, "writable", None)
        return bool(fn()) if fn is not None else hasattr(self._stream, "write")

    def seekable(self) -> bool:
        fn = getattr(self._stream, "seekable", None)
        return bool(fn()) if fn is not None else False

    def fileno(self) -> int:
        return self._stream.fileno()

    def isatty(self) -> bool:
        fn = getattr(self._stream, "isatty", None)
        return bool(fn()) if fn is not None else False

    # ------------------------------------------------------------------ #
    # Positioning (pass-through, no effect on the hash)
    # ------------------------------------------------------------------ #

    def seek(self, offset: int, whence: int = io.SEEK_SET) -> int:
        self._check_open()
        return self._stream.seek(offset, whence)

    def tell(self) -> int:
        self._check_open()
        return self._stream.tell()

    def truncate(self, size: Optional[int] = None) -> int:
        self._check_open()
        return self._stream.truncate(size)

    @property
    def position(self) -> int:
        return self.tell()

    @position.setter
    def position(self, value: int) -> None:
        self.seek(value, io.SEEK_SET)

    @property
    def length(self) -> int:
        """Size of the wrapped stream; the current position is preserved."""
        self._check_open()
        current = self._stream.tell()
        try:
            return self._stream.seek(0, io.SEEK_END)
        finally:
            self._stream.seek(current, io.SEEK_SET)

    # ------------------------------------------------------------------ #
    # Reads
    # ------------------------------------------------------------------ #

    def read(self, size: Optional[int] = -1) -> Optional[bytes]:
        self._check_open()
        data = _sync(self._stream.read(-1 if size is None else size), "read")
        if data:
            self._absorb(data)
        return data

    def read1(self, size: int = -1) -> Optional[bytes]:
        self._check_open()
        reader = getattr(self._stream, "read1", None) or self._stream.read
        data = _sync(reader(size), "read")
        if data:
            self._absorb(data)
        return data

    def _readinto(self, b: Any, method: str) -> Optional[int]:
        self._check_open()
        view = writable_view(b, name="b")
        fn = getattr(self._stream, method, None) or getattr(self._stream, "readinto", None)
        if fn is not None:
            n = _sync(fn(b), "readinto")
        else:
            data = _sync(self._stream.read(view.nbytes), "read")
            if data is None:
                return None
            n = len(data)
            view[:n] = data
        if n:
            self._absorb(view, n)
        return n

    def readinto(self, b: Any) -> Optional[int]:
        return self._readinto(b, "readinto")

    def readinto1(self, b: Any) -> Optional[int]:
        return self._readinto(b, "readinto1")

    def read_byte(self) -> Optional[int]:
        """Next byte as an ``int``, or ``None`` at end of stream."""
        data = self.read(1)
        return data[0] if data else None

    # ------------------------------------------------------------------ #
    # Writes
    # ------------------------------------------------------------------ #

    def write(self, b: Any) -> Optional[int]:
        """
        Forward ``b`` and absorb the bytes the wrapped stream reports as
        written. ``None`` (a non-blocking raw stream that would block) absorbs
        nothing.
        """
        self._check_open()
        view = as_view(b, name="b")
        n = _sync(self._stream.write(b), "write")
        if n:
            self._absorb(view, n)
        return n

    def write_byte(self, value: int) -> None:
        self.write(bytes((value,)))

    def flush(self) -> None:
        if self._closing:
            return
        self._check_open()
        self._flush_wrapped()

    def _flush_wrapped(self) -> None:
        if self._stream is None or getattr(self._stream, "closed", False):
            return
        fn = getattr(self._stream, "flush", None)
        if fn is not None:
            _sync(fn(), "flush")

    # ------------------------------------------------------------------ #
    # Async variants
    # ------------------------------------------------------------------ #

    async def aread(self, size: int = -1) -> bytes:
        self._check_open()
        data = await _maybe_await(self._stream.read(size))
        if data:
            self._absorb(data)
        return data

    async def areadinto(self, b: Any) -> int:
        self._check_open()
        view = writable_view(b, name="b")
        fn = getattr(self._stream, "readinto", None)
        if fn is not None:
            n = await _maybe_await(fn(b))
        else:
            data = await _maybe_await(self._stream.read(view.nbytes))
            n = len(data) if data else 0
            view[:n] = data[:n] if data else b""
        if n:
            self._absorb(view, n)
        return n or 0

    async def awrite(self, b: Any) -> int:
        """
        Forward ``b`` and absorb what was accepted. A ``None`` result means
        the whole buffer was accepted (``asyncio.StreamWriter.write``).
        """
        self._check_open()
        view = as_view(b, name="b")
        n = await _maybe_await(self._stream.write(b))
        if n is None:
            n = view.nbytes
        if n:
            self._absorb(view, n)
        return n

    async def aflush(self) -> None:
        self._check_open()
        drain = getattr(self._stream, "drain", None)
        if drain is not None:
            await _maybe_await(drain())
            return
        fn = getattr(self._stream, "flush", None)
        if fn is not None:
            await _maybe_await(fn())

    async def aclose(self) -> None:
        if self.closed or self._closing:
            return
        try:
            await self.aflush()
        finally:
            self._closing = True
            try:
                self._release_hasher()
                if self._close_stream:
                    await _maybe_await(self._stream.close())
                    wait_closed = getattr(self._stream, "wait_closed", None)
                    if wait_closed is not None:
                        await _maybe_await(wait_closed())
            finally:
                super().close()
                self._closing = False
                log.debug("hashing stream closed", extra={"owned": self._close_stream, "mode": "async"})

    async def __aenter__(self) -> "HashingStream":
        self._check_open()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    # ------------------------------------------------------------------ #
    # Hash access
    # ------------------------------------------------------------------ #

    def compute_hash(self, output: Any = None) -> Union[Digest, int]:
        """
        Digest of every byte transferred so far. With ``output``, fill it
        (any length, extendable output) and return the count. Non-destructive.
        """
        if output is None:
            return self.hasher.finalize()
        return self.hasher.finalize_into(output)

    def reset_hash(self) -> None:
        """Start a new digest; the wrapped stream is left alone."""
        self.hasher.reset()

    # ------------------------------------------------------------------ #
    # Close
    # ------------------------------------------------------------------ #

    def _release_hasher(self) -> None:
        if self._hasher is not None:
            self._hasher.release()

    def close(self) -> None:
        if self.closed or self._closing:
            return
        self._closing = True
        try:
            self._flush_wrapped()
        finally:
            try:
                self._release_hasher()
                if self._close_stream and self._stream is not None:
                    _sync(self._stream.close(), "close")
            finally:
                super().close()
                self._closing = False
                log.debug("hashing stream closed", extra={"owned": self._close_stream})

    def __repr__(self) -> str:
        status = "closed" if self.closed else "open"
        return f"<HashingStream {status} wrapped={self._stream!r}>"


__all__ = ["HashingStream"]
