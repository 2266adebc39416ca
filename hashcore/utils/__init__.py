"""
hashcore.utils
--------------

Utility toolkit used across the package (pure-stdlib).

This package *lazily* exposes its submodules so importing `hashcore.utils`
is cheap:

    from hashcore import utils
    view = utils.bytes.as_view(b"hello")

Notes
-----
- `bytes` shadows the Python builtin if imported directly; prefer the
  module-qualified access (`utils.bytes`) or the `bytes_utils` alias.
"""

from __future__ import annotations

from importlib import import_module
from types import ModuleType
from typing import TYPE_CHECKING, Any, Dict, Iterable, List

__all__: List[str] = [
    "bytes",
    "bytes_utils",
]

_SUBMODS: Dict[str, str] = {
    "bytes": "hashcore.utils.bytes",
}

_ALIASES: Dict[str, str] = {
    "bytes_utils": "bytes",
}

if TYPE_CHECKING:  # pragma: no cover - type-checking only
    from . import bytes as bytes  # type: ignore

    bytes_utils: ModuleType


def __getattr__(name: str) -> Any:
    """Lazy attribute resolution for submodules and their aliases."""
    canonical = _ALIASES.get(name, name)
    if canonical in _SUBMODS:
        mod = import_module(_SUBMODS[canonical])
        globals()[canonical] = mod
        if name != canonical:
            globals()[name] = mod
        return mod

    raise AttributeError(f"module 'hashcore.utils' has no attribute '{name}'")


def __dir__() -> Iterable[str]:  # pragma: no cover - sugar for REPLs
    return sorted(set(list(globals().keys()) + list(__all__)))
