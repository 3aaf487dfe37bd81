"""
deflation.state.events — pluggable event sinks.

The token buffers the events of a call and hands them to its sink only after
the call's journal checkpoint has committed. A sink is therefore the one
external collaborator that may run arbitrary code, and it only ever sees a
fully applied ledger.

Backends
--------
- InMemoryEventSink: test/dev friendly; keeps all events in RAM.
- NullEventSink: no-op sink for benchmarks or setups that ignore events.
"""

from __future__ import annotations

import logging
import threading
from typing import Iterable, List, Optional, Protocol, runtime_checkable

from ..types.events import LedgerEvent

log = logging.getLogger(__name__)


@runtime_checkable
class EventSink(Protocol):
    def append(self, event: LedgerEvent) -> None: ...


class InMemoryEventSink:
    """Append-only, in-order event store."""

    def __init__(self) -> None:
        self._events: List[LedgerEvent] = []
        self._lock = threading.RLock()

    def append(self, event: LedgerEvent) -> None:
        with self._lock:
            self._events.append(event)

    def extend(self, events: Iterable[LedgerEvent]) -> None:
        with self._lock:
            self._events.extend(events)

    def all(self) -> List[LedgerEvent]:
        with self._lock:
            return list(self._events)

    def named(self, name: str) -> List[LedgerEvent]:
        with self._lock:
            return [e for e in self._events if e.name == name]

    def last(self, name: Optional[str] = None) -> Optional[LedgerEvent]:
        with self._lock:
            for e in reversed(self._events):
                if name is None or e.name == name:
                    return e
        return None

    def clear(self) -> None:
        with self._lock:
            self._events.clear()

    def __len__(self) -> int:
        return len(self._events)


class NullEventSink:
    def append(self, event: LedgerEvent) -> None:
        return None


def deliver(sink: EventSink, events: Iterable[LedgerEvent]) -> int:
    """Hand buffered events to `sink` in order; returns how many were delivered."""
    n = 0
    for ev in events:
        sink.append(ev)
        n += 1
    if n:
        log.debug("delivered events", extra={"count": n})
    return n


__all__ = ["EventSink", "InMemoryEventSink", "NullEventSink", "deliver"]
