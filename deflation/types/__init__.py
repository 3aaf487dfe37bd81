"""
deflation.types — small value types shared across the ledger.

- address: `Address`, `ZERO_ADDRESS`, `to_address`
- uint:    u256 bounds and float-free percent arithmetic
- context: `Call` (sender + logical timestamp) passed to every mutator
- events:  `LedgerEvent` records delivered to event sinks
"""

from __future__ import annotations

from .address import ZERO_ADDRESS, Address, to_address
from .context import Call
from .events import LedgerEvent
from .uint import U256_MAX, ensure_u256, is_u256, mul_div_floor

__all__ = [
    "Address",
    "ZERO_ADDRESS",
    "to_address",
    "Call",
    "LedgerEvent",
    "U256_MAX",
    "ensure_u256",
    "is_u256",
    "mul_div_floor",
]
