from __future__ import annotations

import blake3
import pytest

from hashcore import engine
from hashcore.errors import InvalidStateError

from tests.unit import BLAKE3_HEX, KEYED_ZERO_HEX


def _view(b: bytes) -> memoryview:
    return memoryview(b)


@pytest.mark.parametrize("threads", [1, 4, engine.AUTO])
def test_default_vector(threads: int) -> None:
    h = engine.create_default(threads)
    engine.update(h, _view(b"BLAKE3"))
    assert engine.finalize(h).hex() == BLAKE3_HEX
    engine.destroy(h)


def test_keyed_vector() -> None:
    h = engine.create_keyed(bytes(32), 1)
    engine.update(h, _view(b"BLAKE3"))
    assert engine.finalize(h).hex() == KEYED_ZERO_HEX


def test_derive_key_matches_blake3_context() -> None:
    ctx = "hashcore 2024-01-01 engine test"
    want = blake3.blake3(b"material", derive_key_context=ctx).digest()
    for context in (ctx, ctx.encode()):
        h = engine.create_derive_key(context, 1)
        engine.update(h, _view(b"material"))
        assert engine.finalize(h) == want


def test_derive_key_bytes_context_is_decoded_lossily() -> None:
    raw = b"ctx-\xff"
    want = blake3.blake3(b"m", derive_key_context=raw.decode("utf-8", errors="replace")).digest()
    h = engine.create_derive_key(raw, 1)
    engine.update(h, _view(b"m"))
    assert engine.finalize(h) == want


def test_sequential_slicing_on_parallel_handle(mib_inc: bytes) -> None:
    seq = engine.create_default(1)
    par = engine.create_default(engine.AUTO)
    engine.update(seq, _view(mib_inc))
    engine.update(par, _view(mib_inc))
    assert engine.finalize(seq) == engine.finalize(par)


def test_update_parallel_matches_update(mib_inc: bytes) -> None:
    a = engine.create_default(4)
    b = engine.create_default(4)
    engine.update(a, _view(mib_inc))
    engine.update_parallel(b, _view(mib_inc))
    assert engine.finalize(a) == engine.finalize(b)


def test_finalize_xof_prefix_and_seek() -> None:
    h = engine.create_default(1)
    engine.update(h, _view(b"abc"))
    long = engine.finalize_xof(h, 200)
    assert long[:32] == engine.finalize(h)
    assert engine.finalize_xof(h, 10, seek=100) == long[100:110]
    assert engine.finalize_xof(h, 0) == b""


def test_finalize_into_fills_view() -> None:
    h = engine.create_default(1)
    out = bytearray(48)
    assert engine.finalize_into(h, memoryview(out)) == 48
    assert bytes(out) == engine.finalize_xof(h, 48)


def test_finalize_xof_rejects_negative() -> None:
    h = engine.create_default(1)
    with pytest.raises(ValueError):
        engine.finalize_xof(h, -1)
    with pytest.raises(ValueError):
        engine.finalize_xof(h, 1, seek=-1)


def test_reset_and_clone() -> None:
    h = engine.create_default(1)
    engine.update(h, _view(b"BLA"))
    c = engine.clone(h)
    engine.update(c, _view(b"KE3"))
    assert engine.finalize(c).hex() == BLAKE3_HEX
    engine.reset(h)
    engine.update(h, _view(b"BLAKE3"))
    assert engine.finalize(h).hex() == BLAKE3_HEX
    assert repr(c).startswith("<EngineHandle mode=default")


def test_destroyed_handle_rejects_everything() -> None:
    h = engine.create_default(1)
    engine.destroy(h)
    assert not h.live
    engine.destroy(h)  # no-op
    for call in (
        lambda: engine.update(h, _view(b"x")),
        lambda: engine.update_parallel(h, _view(b"x")),
        lambda: engine.finalize(h),
        lambda: engine.finalize_xof(h, 0),
        lambda: engine.reset(h),
        lambda: engine.clone(h),
    ):
        with pytest.raises(InvalidStateError):
            call()


def test_engine_version() -> None:
    assert engine.engine_version() == blake3.__version__
