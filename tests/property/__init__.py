"""
tests.property package bootstrap.

Shared configuration for property-based tests (Hypothesis), kept intentionally
lightweight so importing this package has no external deps beyond Hypothesis.

What this does on import:
- Registers a few named Hypothesis profiles (dev/ci/fast/stress).
- Selects the active profile using HYPOTHESIS_PROFILE, otherwise "ci" on CI
  (CI env var present/truthy) and "dev" locally.
- Re-exports common Hypothesis imports (given, strategies as st) plus the
  byte/partition strategies the hashing properties share.

Usage in tests:
    from tests.property import st, given, partitions

    @given(partitions())
    def test_chunking(data_and_cuts):
        ...

Environment knobs:
- HYPOTHESIS_PROFILE=dev|ci|fast|stress
- CI=true (auto-pick the 'ci' profile if HYPOTHESIS_PROFILE not set)
"""
from __future__ import annotations

import os
from typing import Final, List, Tuple

from hypothesis import HealthCheck, Verbosity, given, settings
from hypothesis import strategies as st

# ---- profile registry --------------------------------------------------------


def _hc(*items: HealthCheck) -> Tuple[HealthCheck, ...]:
    return items


# No deadlines; large-buffer examples hash megabytes.
settings.register_profile(
    "dev",
    settings(
        max_examples=100,
        deadline=None,
        suppress_health_check=_hc(
            HealthCheck.too_slow,
            HealthCheck.data_too_large,
        ),
        verbosity=Verbosity.normal,
        derandomize=False,
    ),
)

settings.register_profile(
    "ci",
    settings(
        max_examples=200,
        deadline=None,
        suppress_health_check=_hc(
            HealthCheck.too_slow,
            HealthCheck.data_too_large,
        ),
        verbosity=Verbosity.verbose,
        derandomize=True,
    ),
)

settings.register_profile(
    "fast",
    settings(
        max_examples=25,
        deadline=None,
        suppress_health_check=_hc(HealthCheck.too_slow, HealthCheck.data_too_large),
        verbosity=Verbosity.normal,
        derandomize=False,
    ),
)

settings.register_profile(
    "stress",
    settings(
        max_examples=1000,
        deadline=None,
        suppress_health_check=_hc(
            HealthCheck.too_slow,
            HealthCheck.filter_too_much,
            HealthCheck.data_too_large,
        ),
        verbosity=Verbosity.normal,
        derandomize=True,
    ),
)


def _env_truthy(name: str) -> bool:
    v = os.getenv(name)
    return (v or "").lower() not in ("", "0", "false", "no", "off")


# Choose active profile (env overrides CI detection)
_active: Final[str] = os.getenv("HYPOTHESIS_PROFILE") or (
    "ci" if _env_truthy("CI") else "dev"
)
settings.load_profile(_active)

# ---- shared strategies -------------------------------------------------------


def is_ci() -> bool:
    """Return True if we appear to be running under CI."""
    return _env_truthy("CI")


def active_profile() -> str:
    """Return the name of the active Hypothesis profile."""
    return _active


def payloads(max_size: int = 4096) -> st.SearchStrategy[bytes]:
    """Arbitrary byte strings, empty included."""
    return st.binary(min_size=0, max_size=max_size)


def large_payloads() -> st.SearchStrategy[bytes]:
    """
    Buffers straddling the 64 KiB threshold. Built from a short random seed
    repeated, so Hypothesis does not have to draw every byte.
    """
    return st.builds(
        lambda seed, size: (seed * (size // len(seed) + 1))[:size],
        st.binary(min_size=1, max_size=97),
        st.integers(min_value=60 * 1024, max_value=300 * 1024),
    )


@st.composite
def partitions(draw, max_size: int = 4096) -> Tuple[bytes, List[bytes]]:
    """A payload and one way of cutting it into consecutive pieces."""
    data = draw(payloads(max_size))
    cuts = sorted(draw(st.lists(st.integers(0, len(data)), max_size=12)))
    bounds = [0, *cuts, len(data)]
    return data, [data[a:b] for a, b in zip(bounds, bounds[1:])]


__all__ = [
    "st",
    "given",
    "is_ci",
    "active_profile",
    "payloads",
    "large_payloads",
    "partitions",
]
