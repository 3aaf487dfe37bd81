"""
deflation.version — installed package version.

The version comes from the distribution metadata written at install time
(``importlib.metadata``). A source checkout that was never installed reports
``BASE_VERSION`` with a ``+local`` suffix.
"""

from __future__ import annotations

import platform
from functools import lru_cache
from importlib.metadata import PackageNotFoundError, version as _pkg_version
from typing import Dict

BASE_VERSION = "0.1.0"

_PKG_NAME = "deflation"


@lru_cache(maxsize=1)
def get_version() -> str:
    try:
        return _pkg_version(_PKG_NAME)
    except PackageNotFoundError:
        return f"{BASE_VERSION}+local"


def version_metadata() -> Dict[str, str]:
    """Version info for the CLI and diagnostics."""
    return {
        "package": _PKG_NAME,
        "version": get_version(),
        "python": platform.python_version(),
    }


__version__ = get_version()
__all__ = ["__version__", "BASE_VERSION", "get_version", "version_metadata"]
