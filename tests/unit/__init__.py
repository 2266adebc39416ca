"""
tests.unit
==========

Small shared helpers for unit-test modules. Import from this package to keep
tests concise and consistent:

    from tests.unit import in_ci, env_flag, gen_data, chunkify, TEST_SEED

Knobs
-----
- ``HASHCORE_TEST_SEED``: fixes the RNG used for generated data.
- ``HASHCORE_SKIP_HEAVY=1``: skips the multi-megabyte cases.
"""

from __future__ import annotations

import os
import random
from pathlib import Path
from typing import Iterator, Optional

# Resolve repository root: tests/unit/__init__.py -> tests -> <root>
ROOT: Path = Path(__file__).resolve().parents[2]

# Known-answer vectors
BLAKE3_HEX = "f890484173e516bfd935ef3d22b912dc9738de38743993cfedf2c9473b3216a4"
MIB_INC_HEX = "64479cf7293960210547db8d982359e0c4ce054525ed7086cf93030828fc0533"
KEYED_ZERO_HEX = "52a1c5369af0590e26ccbb31d052485addcfe2599e858711579fb25aa878c6b8"
EMPTY_HEX = "af1349b9f5f9a1a6a0404dea36dcc9499bcb25c9adc112b7cc9a93cae41f3262"

MIB = 1024 * 1024

__all__ = [
    "ROOT",
    "BLAKE3_HEX",
    "MIB_INC_HEX",
    "KEYED_ZERO_HEX",
    "EMPTY_HEX",
    "MIB",
    "TEST_SEED",
    "SKIP_HEAVY",
    "in_ci",
    "env_flag",
    "rng",
    "gen_data",
    "chunkify",
]


def in_ci() -> bool:
    """Return True when running under a CI environment."""
    return os.getenv("CI", "").lower() in {"1", "true", "yes", "on"}


def env_flag(name: str, default: bool = False) -> bool:
    """
    Read a boolean-like environment variable.

    Truthy values: 1, true, yes, on (case-insensitive)
    Falsy values:  0, false, no, off (case-insensitive)
    If unset, returns `default`.
    """
    val = os.getenv(name)
    if val is None:
        return default
    v = val.strip().lower()
    if v in {"1", "true", "yes", "on", "y"}:
        return True
    if v in {"0", "false", "no", "off", "n"}:
        return False
    return bool(v)


TEST_SEED: Optional[int] = int(os.environ["HASHCORE_TEST_SEED"]) if os.getenv("HASHCORE_TEST_SEED") else None
SKIP_HEAVY: bool = env_flag("HASHCORE_SKIP_HEAVY")


def rng(seed: Optional[int] = TEST_SEED) -> random.Random:
    """Deterministic RNG if a seed is given, otherwise freshly seeded."""
    if seed is None:
        seed = int.from_bytes(os.urandom(8), "little")
    return random.Random(seed)


def gen_data(pattern: str, size: int, r: Optional[random.Random] = None) -> bytes:
    if pattern == "zeros":
        return b"\x00" * size
    if pattern == "ones":
        return b"\xff" * size
    if pattern == "inc":
        return bytes(i % 256 for i in range(size))
    if pattern == "random":
        return (r or rng()).randbytes(size)
    raise ValueError(f"unknown pattern {pattern}")


def chunkify(b: bytes, r: Optional[random.Random] = None) -> Iterator[bytes]:
    """Split into variable chunk sizes to exercise incremental paths."""
    r = r or rng()
    i = 0
    n = len(b)
    while i < n:
        # Favor small-to-medium chunks, sometimes large
        step = min(n - i, max(1, int(r.expovariate(1 / 64))))
        yield b[i : i + step]
        i += step
