"""
deflation.state.journal — journaling writes, checkpoints, revert/commit.

All ledger state (balances, supply, rates, lock deadlines, allowlist, airdrop
fields, referral bonuses, allowances) lives in one namespaced key/value store
wrapped by this journal. Writes go to the top overlay; reads consult overlays
from top → base. `commit()` merges the top overlay into the next layer (or the
base when it is the last one). `revert()` discards the top overlay.

Key properties
--------------
- Pure Python, no I/O; safe for unit tests and simulations.
- Values are treated as immutable (ints, bools, bytes, Address, tuples);
  callers never mutate a value in place, they `set` a new one.
- Deletions are explicit markers so a delete in an overlay can hide a base
  value until commit.
- Nested checkpoints (begin/commit/revert) with O(changes) merge cost.
- Deterministic iteration: `items(ns)` yields keys in sorted order.

Intended usage
--------------
    j = Journal()
    with j.atomic():              # begin; commit on success, revert on error
        j.set("bal", addr, 100)
        j.set("meta", "supply", 100)

Notes
-----
- The journal does not enforce economic rules; callers validate first and
  write second.
"""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import (Any, Dict, Hashable, Iterator, List, MutableMapping,
                    Optional, Tuple)


class _Deleted:
    __slots__ = ()

    def __repr__(self) -> str:  # pragma: no cover - debugging aid
        return "<deleted>"


_DELETED = _Deleted()

Store = MutableMapping[str, Dict[Hashable, Any]]


# =============================================================================
# Overlay model
# =============================================================================


@dataclass
class _Overlay:
    """
    A single journal layer: `writes[ns][key]` holds a staged value or the
    `_DELETED` marker.
    """

    writes: Dict[str, Dict[Hashable, Any]] = field(default_factory=dict)

    def lookup(self, ns: str, key: Hashable) -> Any:
        m = self.writes.get(ns)
        if m is None:
            return None
        return m.get(key, None)

    def has(self, ns: str, key: Hashable) -> bool:
        m = self.writes.get(ns)
        return m is not None and key in m

    def put(self, ns: str, key: Hashable, value: Any) -> None:
        self.writes.setdefault(ns, {})[key] = value


# =============================================================================
# Journal
# =============================================================================


class Journal:
    """
    A write journal with nested checkpoints over a namespaced base store.

    Parameters
    ----------
    base : MutableMapping[str, Dict[Hashable, Any]] | None
        The base (committed) store; a fresh dict when omitted.

    API highlights
    --------------
    - begin() / commit() / revert() / atomic()
    - get(), set(), delete(), contains(), items()

    With no open checkpoint, writes go straight to the base store.
    """

    def __init__(self, base: Optional[Store] = None) -> None:
        self._base: Store = {} if base is None else base
        self._layers: List[_Overlay] = []

    # --------------------------------------------------------------------- #
    # Checkpointing
    # --------------------------------------------------------------------- #

    def depth(self) -> int:
        """Number of open checkpoints (0 = writing to base)."""
        return len(self._layers)

    def begin(self) -> int:
        """Start a new checkpoint. Returns the new depth marker."""
        self._layers.append(_Overlay())
        return len(self._layers)

    def commit(self) -> None:
        """Merge the top overlay into its parent, or into the base store."""
        if not self._layers:
            raise RuntimeError("commit without an open checkpoint")
        top = self._layers.pop()
        if self._layers:
            parent = self._layers[-1]
            for ns, m in top.writes.items():
                for key, value in m.items():
                    parent.put(ns, key, value)
        else:
            self._apply_to_base(top)

    def revert(self) -> None:
        """Discard the top overlay."""
        if not self._layers:
            raise RuntimeError("revert without an open checkpoint")
        self._layers.pop()

    def revert_to(self, marker: int) -> None:
        """Revert repeatedly until the current depth equals `marker`."""
        if marker < 0:
            raise ValueError("marker must be >= 0")
        while len(self._layers) > marker:
            self.revert()

    @contextmanager
    def atomic(self) -> Iterator[int]:
        """
        Run a block as one checkpoint: commit if it returns, revert and
        re-raise if it raises. Nests.
        """
        marker = self.begin()
        try:
            yield marker
        except BaseException:
            self.revert_to(marker - 1)
            raise
        else:
            self.commit()

    def _apply_to_base(self, top: _Overlay) -> None:
        for ns, m in top.writes.items():
            target = self._base.setdefault(ns, {})
            for key, value in m.items():
                if value is _DELETED:
                    target.pop(key, None)
                else:
                    target[key] = value

    # --------------------------------------------------------------------- #
    # Key/value API
    # --------------------------------------------------------------------- #

    def get(self, ns: str, key: Hashable, default: Any = None) -> Any:
        for layer in reversed(self._layers):
            if layer.has(ns, key):
                value = layer.lookup(ns, key)
                return default if value is _DELETED else value
        return self._base.get(ns, {}).get(key, default)

    def contains(self, ns: str, key: Hashable) -> bool:
        sentinel = object()
        return self.get(ns, key, sentinel) is not sentinel

    def set(self, ns: str, key: Hashable, value: Any) -> None:
        if value is None:
            raise ValueError("use delete() to remove a key; None is not a storable value")
        if self._layers:
            self._layers[-1].put(ns, key, value)
        else:
            self._base.setdefault(ns, {})[key] = value

    def delete(self, ns: str, key: Hashable) -> None:
        if self._layers:
            self._layers[-1].put(ns, key, _DELETED)
        else:
            self._base.get(ns, {}).pop(key, None)

    def items(self, ns: str) -> List[Tuple[Hashable, Any]]:
        """Merged (key, value) pairs of a namespace, sorted by key."""
        merged: Dict[Hashable, Any] = dict(self._base.get(ns, {}))
        for layer in self._layers:
            for key, value in layer.writes.get(ns, {}).items():
                if value is _DELETED:
                    merged.pop(key, None)
                else:
                    merged[key] = value
        return sorted(merged.items(), key=lambda kv: kv[0])


__all__ = ["Journal"]
