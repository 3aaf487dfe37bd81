"""
deflation.state — journaled state store, balance helpers and event sinks.

Common symbols are lazily re-exported from their submodules on first access to
keep import-time overhead low and avoid circulars.

Submodules:
- journal:        namespaced key/value journal with checkpoints
- apply_balance:  credit/debit/move and tax-split application
- events:         event sinks (in-memory, null)
"""

from __future__ import annotations

from importlib import import_module as _imp
from typing import Any, Dict, Tuple

# Map of public attributes → (submodule, symbol)
_exports: Dict[str, Tuple[str, str]] = {
    "Journal": ("journal", "Journal"),
    "credit": ("apply_balance", "credit"),
    "debit": ("apply_balance", "debit"),
    "move": ("apply_balance", "move"),
    "apply_tax_split": ("apply_balance", "apply_tax_split"),
    "EventSink": ("events", "EventSink"),
    "InMemoryEventSink": ("events", "InMemoryEventSink"),
    "NullEventSink": ("events", "NullEventSink"),
}

__all__ = tuple(_exports.keys())


def __getattr__(name: str) -> Any:
    """
    Lazy attribute loader to avoid import-time dependency tangles.
    """
    if name in _exports:
        submod, symbol = _exports[name]
        mod = _imp(f"{__name__}.{submod}")
        return getattr(mod, symbol)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


def __dir__() -> list[str]:  # pragma: no cover
    return sorted(list(globals().keys()) + list(__all__))
