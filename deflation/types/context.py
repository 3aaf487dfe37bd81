"""
deflation.types.context — the evaluated context of one ledger call.

Every mutating operation receives a `Call` carrying who is calling and the
logical time of the call. The clock is never read implicitly: lock deadlines
and the airdrop window are evaluated against `Call.timestamp` only, so tests
and simulations can supply arbitrary timestamps.

Conventions
-----------
* `timestamp` is Unix time in seconds (int >= 0).
* `sender` is an `Address`; hex strings and raw bytes are normalized.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict

from .address import Address, AddressLike, to_address


@dataclass(frozen=True)
class Call:
    """
    Attributes:
        sender:    Address — the account executing the call
        timestamp: int >= 0 — logical time of the call (seconds)
    """
    sender: Address
    timestamp: int

    def __init__(self, sender: AddressLike, timestamp: int):
        if not isinstance(timestamp, int) or isinstance(timestamp, bool):
            raise TypeError("timestamp must be int")
        if timestamp < 0:
            raise ValueError("timestamp must be >= 0")
        object.__setattr__(self, "sender", to_address(sender))
        object.__setattr__(self, "timestamp", timestamp)

    def to_dict(self) -> Dict[str, Any]:
        """Log-friendly view: hex sender and timestamp."""
        return {"sender": self.sender.hex(), "timestamp": self.timestamp}


__all__ = ["Call"]
