"""
Version helpers for hashcore.

``__version__`` is the in-tree release tag; `version_info()` adds the version
of the loaded ``blake3`` engine for diagnostics.
"""

from __future__ import annotations

from typing import Dict

__version__ = "0.1.0"


def version_info() -> Dict[str, str]:
    """Package and engine versions, e.g. for a bug report."""
    from .engine import engine_version

    return {"hashcore": __version__, "blake3": engine_version()}


__all__ = ["__version__", "version_info"]
