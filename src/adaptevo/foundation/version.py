"""
The installed adaptevo version, resolved lazily.

``adaptevo.__version__`` reads the ``adaptevo`` distribution metadata on first
access so that importing the engine does not touch package metadata. A source
tree used without ``pip install -e .`` reports ``0.0.0+unknown``.
"""

from __future__ import annotations

from functools import lru_cache
from importlib import metadata

_DISTRIBUTION = "adaptevo"
_UNKNOWN = "0.0.0+unknown"


@lru_cache(maxsize=None)
def get_version() -> str:
    try:
        return metadata.version(_DISTRIBUTION)
    except metadata.PackageNotFoundError:  # pragma: no cover - uninstalled source tree
        return _UNKNOWN


def __getattr__(name: str) -> str:
    if name == "__version__":
        return get_version()
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = ["__version__", "get_version"]
