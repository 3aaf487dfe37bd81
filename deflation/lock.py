"""
deflation.lock — anti-dump time lock with an allowlist.

Per-account states
------------------
    NeverTransferred --(first positive receipt)--> Armed(deadline = now + window)
    Armed            --(now > deadline)----------> Locked
    Armed | Locked   --(balance spent to zero)---> NeverTransferred

- A receipt only arms an account that is NeverTransferred; an existing
  deadline is never extended, so dribbling small transfers in or out cannot
  postpone the lock.
- A partial spend keeps the deadline as it is.
- Spending the whole balance clears the deadline: an empty account has
  nothing left to dump.
- Allowlisted addresses (the treasury, liquidity pool, router) are checked
  first and always read as never locked; their deadlines are never armed.

Time is the caller-supplied logical timestamp; the lock becomes active only
strictly after the deadline.
"""

from __future__ import annotations

import logging
from typing import List, Optional

from .state.journal import Journal
from .types.address import Address
from .types.uint import U256_MAX

log = logging.getLogger(__name__)

_DEADLINE = "lock"
_ALLOW = "allow"

LOCK_NEVER: int = U256_MAX
"""`time_till_locked` sentinel for accounts that can never lock (the "infinite" value)."""


class LockManager:
    def __init__(self, journal: Journal, *, window_seconds: int) -> None:
        if window_seconds <= 0:
            raise ValueError("window_seconds must be > 0")
        self._j = journal
        self.window_seconds = window_seconds

    # -- allowlist --------------------------------------------------------------

    def is_allowlisted(self, address: Address) -> bool:
        return self._j.get(_ALLOW, address, False)

    def allow(self, address: Address) -> None:
        self._j.set(_ALLOW, address, True)
        # an exempt account carries no deadline
        self._j.delete(_DEADLINE, address)

    def disallow(self, address: Address) -> None:
        self._j.delete(_ALLOW, address)

    def allowlist(self) -> List[Address]:
        return [addr for addr, _ in self._j.items(_ALLOW)]

    # -- reads ------------------------------------------------------------------

    def deadline(self, address: Address) -> Optional[int]:
        """Absolute deadline, or None when the account is NeverTransferred."""
        return self._j.get(_DEADLINE, address)

    def is_locked(self, address: Address, now: int) -> bool:
        if self.is_allowlisted(address):
            return False
        deadline = self.deadline(address)
        if deadline is None:
            return False
        return now > deadline

    def time_till_locked(self, address: Address, now: int) -> int:
        if self.is_allowlisted(address):
            return LOCK_NEVER
        deadline = self.deadline(address)
        if deadline is None:
            return LOCK_NEVER
        return deadline - now if deadline > now else 0

    # -- refresh ----------------------------------------------------------------

    def on_receive(self, address: Address, now: int) -> Optional[int]:
        """Arm a NeverTransferred, non-exempt account. Returns the deadline if armed."""
        if self.is_allowlisted(address) or self.deadline(address) is not None:
            return None
        deadline = now + self.window_seconds
        self._j.set(_DEADLINE, address, deadline)
        log.debug("lock armed", extra={"address": address.hex(), "deadline": deadline})
        return deadline

    def on_spend(self, address: Address, remaining_balance: int) -> bool:
        """Reset to NeverTransferred when the balance hit zero. Returns True if reset."""
        if remaining_balance != 0 or self.deadline(address) is None:
            return False
        self._j.delete(_DEADLINE, address)
        log.debug("lock cleared", extra={"address": address.hex()})
        return True

    def deadlines(self) -> List[tuple]:
        return self._j.items(_DEADLINE)


__all__ = ["LOCK_NEVER", "LockManager"]
