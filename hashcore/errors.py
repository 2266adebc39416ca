"""
hashcore.errors
---------------

A small, consistent error system for the hash engine layer.

Design goals
------------
- One root `HashCoreError` with a machine-friendly `code` and optional `data`.
- Concrete subclasses for the four caller-visible failure classes
  (size, key length, handle state, missing argument) plus dependency and
  configuration failures.
- Every subclass also derives from the matching builtin (`ValueError`,
  `RuntimeError`, `TypeError`, `ImportError`) so callers can catch either.
- Safe JSON representation (`to_dict`) suitable for logs.

None of these failures are transient: they are programming errors or bad
caller input, so nothing here is marked retryable.

This module uses only stdlib to avoid import cycles.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Mapping, Optional


class ErrorCode(str, Enum):
    # Generic
    INTERNAL = "CORE/INTERNAL"
    DEP_MISSING = "CORE/DEPENDENCY_MISSING"
    CONFIG = "CORE/CONFIG"

    # Hash engine
    INVALID_SIZE = "HASH/INVALID_SIZE"
    INVALID_KEY_LENGTH = "HASH/INVALID_KEY_LENGTH"
    INVALID_STATE = "HASH/INVALID_STATE"
    NULL_ARGUMENT = "HASH/NULL_ARGUMENT"


@dataclass(eq=False)
class HashCoreError(Exception):
    """
    Root error for hashcore components.

    Attributes
    ----------
    code: str
        Machine-stable error code (see ErrorCode).
    message: str
        Human hint suitable for logs; never includes key material.
    data: dict
        Optional machine data (sizes, names). Must be JSON-serializable.
    cause: Optional[BaseException]
        Wrapped original exception; not included in equality comparison.
    """

    code: str
    message: str
    data: Dict[str, Any] = field(default_factory=dict)
    cause: Optional[BaseException] = field(default=None, compare=False, repr=False)

    def __post_init__(self) -> None:
        # Make Exception(args) meaningful for interop
        super().__init__(f"{_code_str(self.code)}: {self.message}")

    def with_context(self, **ctx: Any) -> "HashCoreError":
        """Return a *new* error with extra context merged (does not mutate)."""
        err = type(self).__new__(type(self))
        err.__dict__.update(self.__dict__)
        err.data = {**self.data, **_jsonmap(ctx)}
        err.args = self.args
        return err

    def to_dict(self, include_cause: bool = False) -> Dict[str, Any]:
        """JSON-safe shape suitable for structured logs."""
        out: Dict[str, Any] = {
            "code": _code_str(self.code),
            "message": self.message,
            "data": _jsonmap(self.data),
        }
        if include_cause and self.cause is not None:
            out["cause"] = {
                "type": type(self.cause).__name__,
                "message": str(self.cause),
            }
        return out

    def __str__(self) -> str:  # pragma: no cover - human formatting
        parts = [f"{_code_str(self.code)}: {self.message}"]
        if self.data:
            preview = ", ".join(f"{k}={_preview(v)}" for k, v in self.data.items())
            parts.append(f"[{preview}]")
        return " ".join(parts)


class InvalidSizeError(HashCoreError, ValueError):
    """A digest buffer that is not 32 bytes, or a destination that is too small."""

    def __init__(self, size: int, expected: int = 32, name: str = "data", at_least: bool = False) -> None:
        qualifier = "at least " if at_least else ""
        super().__init__(
            code=ErrorCode.INVALID_SIZE,
            message=f"invalid size {size} of {name}, expecting {qualifier}{expected}",
            data={"size": size, "expected": expected, "name": name},
        )


class InvalidKeyLengthError(HashCoreError, ValueError):
    def __init__(self, size: int, expected: int = 32) -> None:
        super().__init__(
            code=ErrorCode.INVALID_KEY_LENGTH,
            message=f"key must be exactly {expected} bytes, got {size}",
            data={"size": size, "expected": expected},
        )


class InvalidStateError(HashCoreError, RuntimeError):
    def __init__(self, message: str = "the hasher is not initialized or already released", **data: Any) -> None:
        super().__init__(
            code=ErrorCode.INVALID_STATE,
            message=message,
            data=_jsonmap(data),
        )


class NullArgumentError(HashCoreError, TypeError):
    def __init__(self, argument: str) -> None:
        super().__init__(
            code=ErrorCode.NULL_ARGUMENT,
            message=f"argument {argument!r} must not be None",
            data={"argument": argument},
        )


class DependencyMissing(HashCoreError, ImportError):
    def __init__(self, package: str, hint: str = "") -> None:
        msg = f"missing dependency: {package}"
        if hint:
            msg += f" ({hint})"
        super().__init__(
            code=ErrorCode.DEP_MISSING,
            message=msg,
            data={"package": package, "hint": hint},
        )


class ConfigError(HashCoreError, ValueError):
    def __init__(self, message: str = "invalid configuration", **data: Any) -> None:
        super().__init__(
            code=ErrorCode.CONFIG,
            message=message,
            data=_jsonmap(data),
        )


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _code_str(code: Any) -> str:
    return str(code.value) if isinstance(code, Enum) else str(code)


def _jsonmap(data: Mapping[str, Any]) -> Dict[str, Any]:
    return {k: _coerce_json(v) for k, v in data.items()}


def _coerce_json(v: Any) -> Any:
    # Keep JSON primitives; stringify the rest; hex-encode bytes.
    if v is None or isinstance(v, (bool, int, float, str, list, dict)):
        return v
    if isinstance(v, (bytes, bytearray)):
        return v.hex()
    try:
        return str(v)
    except Exception:
        return "<unprintable>"


def _preview(v: Any, limit: int = 96) -> str:
    s = str(_coerce_json(v))
    return s if len(s) <= limit else s[:limit] + "…"


__all__ = [
    "ErrorCode",
    "HashCoreError",
    "InvalidSizeError",
    "InvalidKeyLengthError",
    "InvalidStateError",
    "NullArgumentError",
    "DependencyMissing",
    "ConfigError",
]
