"""
hashcore configuration loader.

Goals
-----
- Zero external deps (stdlib only).
- Layered config with clear precedence:
    1) Explicit overrides passed to `load()` (highest)
    2) Environment variables (HASHCORE_*)
    3) Config file (TOML or JSON)
    4) Built-in defaults (lowest)
- A typed, validated dataclass.

This module configures only engine-orchestration concerns:
  - the update-strategy threshold (sequential vs. large-buffer path)
  - the worker count handed to the engine for join updates
  - the read size used when hashing readable streams
  - logging level / format
"""

from __future__ import annotations

import json
import os
import threading
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any, Dict, Optional

from .errors import ConfigError

try:  # py311+
    import tomllib as _toml  # type: ignore[import-not-found]
except ImportError:  # pragma: no cover - py310
    _toml = None  # type: ignore[assignment]


# ------------------------------
# Defaults & helpers
# ------------------------------

#: Inputs at or below this size are absorbed in one sequential engine call.
DEFAULT_JOIN_THRESHOLD = 64 * 1024

#: Smallest accepted threshold: one BLAKE3 chunk.
MIN_JOIN_THRESHOLD = 1024

#: Let the engine pick its worker count (maps to ``blake3.AUTO``).
MAX_THREADS_AUTO = -1

DEFAULT_STREAM_READ_SIZE = 8 * 1024

_LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG", "NOTSET")
_LOG_FORMATS = ("text", "json")


def _expand(p: str | Path) -> Path:
    return Path(p).expanduser().resolve()


def _env_int(name: str) -> Optional[int]:
    v = os.environ.get(name)
    if v is None or v.strip() == "":
        return None
    try:
        return int(v, 0)
    except ValueError as e:
        raise ConfigError(f"{name} must be int, got {v!r}", variable=name) from e


def _env_str(name: str) -> Optional[str]:
    v = os.environ.get(name)
    if v is None or v.strip() == "":
        return None
    return v.strip()


# ------------------------------
# Typed configuration model
# ------------------------------

@dataclass(frozen=True)
class Config:
    join_threshold: int = DEFAULT_JOIN_THRESHOLD
    max_threads: int = MAX_THREADS_AUTO
    stream_read_size: int = DEFAULT_STREAM_READ_SIZE
    log_level: str = "WARNING"
    log_format: str = "text"

    def validate(self) -> "Config":
        if int(self.join_threshold) < MIN_JOIN_THRESHOLD:
            raise ConfigError(
                f"join_threshold must be >= {MIN_JOIN_THRESHOLD}",
                join_threshold=self.join_threshold,
            )
        if self.max_threads != MAX_THREADS_AUTO and self.max_threads < 1:
            raise ConfigError(
                "max_threads must be -1 (auto) or a positive worker count",
                max_threads=self.max_threads,
            )
        if self.stream_read_size < 1:
            raise ConfigError("stream_read_size must be positive", stream_read_size=self.stream_read_size)
        if self.log_level.upper() not in _LOG_LEVELS:
            raise ConfigError(f"log_level must be one of {', '.join(_LOG_LEVELS)}", log_level=self.log_level)
        if self.log_format.lower() not in _LOG_FORMATS:
            raise ConfigError("log_format must be 'text' or 'json'", log_format=self.log_format)
        return self

    @property
    def parallel_enabled(self) -> bool:
        return self.max_threads != 1

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


# ------------------------------
# File loader (TOML / JSON)
# ------------------------------

def _load_file(path: Path) -> Dict[str, Any]:
    if not path.exists():
        raise FileNotFoundError(str(path))
    suffix = path.suffix.lower()
    with path.open("rb") as f:
        if suffix in {".toml", ".tml"}:
            if not _toml:
                raise ConfigError("tomllib is unavailable (Python < 3.11). Use JSON config or upgrade Python.")
            data = _toml.load(f)
        elif suffix == ".json":
            data = json.load(f)
        else:
            raise ConfigError(f"Unsupported config format: {suffix}. Use .toml or .json", path=str(path))
    # Accept either a flat table or a [hashcore] section.
    section = data.get("hashcore", data) if isinstance(data, dict) else None
    if not isinstance(section, dict):
        raise ConfigError("config file must contain a table of settings", path=str(path))
    return section


def _from_env() -> Dict[str, Any]:
    out: Dict[str, Any] = {}
    for key, name in (
        ("join_threshold", "HASHCORE_JOIN_THRESHOLD"),
        ("max_threads", "HASHCORE_MAX_THREADS"),
        ("stream_read_size", "HASHCORE_STREAM_READ_SIZE"),
    ):
        v = _env_int(name)
        if v is not None:
            out[key] = v
    for key, name in (
        ("log_level", "HASHCORE_LOG_LEVEL"),
        ("log_format", "HASHCORE_LOG_FORMAT"),
    ):
        s = _env_str(name)
        if s is not None:
            out[key] = s
    return out


def _coerce(values: Dict[str, Any]) -> Dict[str, Any]:
    known = {f.name for f in fields(Config)}
    unknown = sorted(set(values) - known)
    if unknown:
        raise ConfigError(f"unknown config keys: {', '.join(unknown)}", keys=unknown)
    out: Dict[str, Any] = {}
    for k, v in values.items():
        try:
            out[k] = int(v) if k in ("join_threshold", "max_threads", "stream_read_size") else str(v)
        except (TypeError, ValueError) as e:
            raise ConfigError(f"{k} has invalid value {v!r}", key=k) from e
    return out


# ------------------------------
# Main loader
# ------------------------------

def load(config_file: Optional[str | Path] = None, **overrides: Any) -> Config:
    """
    Load the hashcore configuration.

    Precedence: overrides > env > file > defaults.

    Parameters
    ----------
    config_file : str | Path | None
        Optional path to a TOML or JSON file with keys (flat, or under a
        ``hashcore`` table): join_threshold, max_threads, stream_read_size,
        log_level, log_format.
    overrides : Any
        Keyword overrides, e.g. ``load(max_threads=1)``.
    """
    base: Dict[str, Any] = asdict(Config())

    if config_file:
        base.update(_coerce(_load_file(_expand(config_file))))

    base.update(_coerce(_from_env()))

    if overrides:
        base.update(_coerce(overrides))

    return Config(**base).validate()


_DEFAULT: Optional[Config] = None
_DEFAULT_LOCK = threading.Lock()


def get_config() -> Config:
    """Process-wide default configuration (defaults + environment), loaded once."""
    global _DEFAULT
    with _DEFAULT_LOCK:
        if _DEFAULT is None:
            _DEFAULT = load()
        return _DEFAULT


def reset_config() -> None:
    """Forget the cached default so the next `get_config()` re-reads the environment."""
    global _DEFAULT
    with _DEFAULT_LOCK:
        _DEFAULT = None


__all__ = [
    "DEFAULT_JOIN_THRESHOLD",
    "MIN_JOIN_THRESHOLD",
    "MAX_THREADS_AUTO",
    "DEFAULT_STREAM_READ_SIZE",
    "Config",
    "load",
    "get_config",
    "reset_config",
]
