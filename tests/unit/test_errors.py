from __future__ import annotations

import json
import sys

import pytest

from hashcore import errors
from hashcore.errors import (
    ConfigError,
    DependencyMissing,
    ErrorCode,
    HashCoreError,
    InvalidKeyLengthError,
    InvalidSizeError,
    InvalidStateError,
    NullArgumentError,
)


@pytest.mark.parametrize(
    "exc,builtin,code",
    [
        (InvalidSizeError(31), ValueError, "HASH/INVALID_SIZE"),
        (InvalidKeyLengthError(16), ValueError, "HASH/INVALID_KEY_LENGTH"),
        (InvalidStateError(), RuntimeError, "HASH/INVALID_STATE"),
        (NullArgumentError("data"), TypeError, "HASH/NULL_ARGUMENT"),
        (DependencyMissing("blake3", "pip install blake3"), ImportError, "CORE/DEPENDENCY_MISSING"),
        (ConfigError("bad", key="x"), ValueError, "CORE/CONFIG"),
    ],
)
def test_taxonomy(exc: HashCoreError, builtin: type, code: str) -> None:
    assert isinstance(exc, HashCoreError)
    assert isinstance(exc, builtin)
    assert exc.to_dict()["code"] == code
    assert str(exc).startswith(code)
    json.dumps(exc.to_dict())


def test_invalid_size_message() -> None:
    e = InvalidSizeError(5, expected=32, name="output", at_least=True)
    assert "expecting at least 32" in e.message
    assert e.data == {"size": 5, "expected": 32, "name": "output"}


def test_with_context_returns_new_error() -> None:
    e = InvalidStateError(state="released")
    e2 = e.with_context(op="update", raw=b"\x01\x02")
    assert e2 is not e
    assert type(e2) is InvalidStateError
    assert e2.data == {"state": "released", "op": "update", "raw": "0102"}
    assert e.data == {"state": "released"}
    assert e2.code is ErrorCode.INVALID_STATE


def test_to_dict_cause() -> None:
    try:
        raise KeyError("k")
    except KeyError as k:
        e = HashCoreError(code=ErrorCode.INTERNAL, message="wrapped", cause=k)
    d = e.to_dict(include_cause=True)
    assert d["cause"]["type"] == "KeyError"
    assert "cause" not in e.to_dict()


def test_data_is_json_safe() -> None:
    e = ConfigError("x", path=errors, n=1)
    assert isinstance(e.data["path"], str)
    assert e.data["n"] == 1


def test_missing_engine_raises_dependency_error(monkeypatch: pytest.MonkeyPatch) -> None:
    from hashcore import engine

    monkeypatch.setattr(engine, "_blake3", None)
    monkeypatch.setitem(sys.modules, "blake3", None)
    with pytest.raises(DependencyMissing) as ei:
        engine.create_default()
    assert ei.value.data["package"] == "blake3"
    assert isinstance(ei.value.__cause__, ImportError)
