"""
Shared pytest fixtures:
- The 1 MiB ``i % 256`` buffer (session scoped, built once)
- Configs pinning the engine to one worker or to the automatic pool
- Isolation of the cached process-wide config from HASHCORE_* env vars
"""
from __future__ import annotations

from typing import Iterator

import pytest

from hashcore import config as hconfig
from tests.unit import MIB


@pytest.fixture(scope="session")
def mib_inc() -> bytes:
    """1,048,576 bytes where byte i is ``i % 256``."""
    return bytes(range(256)) * (MIB // 256)


@pytest.fixture(scope="session")
def zero_key() -> bytes:
    return bytes(32)


# ---------- CONFIG ----------

@pytest.fixture(autouse=True)
def _isolate_config(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Drop HASHCORE_* env vars and the cached default config around every test."""
    for name in (
        "HASHCORE_JOIN_THRESHOLD",
        "HASHCORE_MAX_THREADS",
        "HASHCORE_STREAM_READ_SIZE",
        "HASHCORE_LOG_LEVEL",
        "HASHCORE_LOG_FORMAT",
    ):
        monkeypatch.delenv(name, raising=False)
    hconfig.reset_config()
    yield
    hconfig.reset_config()


@pytest.fixture
def single_thread() -> hconfig.Config:
    return hconfig.load(max_threads=1)


@pytest.fixture
def multi_thread() -> hconfig.Config:
    return hconfig.load(max_threads=4)


@pytest.fixture
def small_threshold() -> hconfig.Config:
    """Smallest permitted threshold so modest inputs take the large-buffer path."""
    return hconfig.load(join_threshold=hconfig.MIN_JOIN_THRESHOLD)
