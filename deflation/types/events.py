"""
deflation.types.events — event records emitted by the ledger.

`LedgerEvent` is a compact, immutable container: an event name, a mapping of
arguments and the logical timestamp of the call that produced it. Addresses in
`args` are kept as `Address` objects; `to_dict()` renders them as hex so the
record is JSON-friendly.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Mapping

from .address import Address

# Event names
TRANSFER = "Transfer"
BURN = "Burn"
APPROVAL = "Approval"
RATES_UPDATED = "RatesUpdated"
DEV_ADDRESS_UPDATED = "DevAddressUpdated"
REWARD_ADDRESS_UPDATED = "RewardAddressUpdated"
ALLOWLIST_UPDATED = "AllowlistUpdated"
MERKLE_ROOT_UPDATED = "MerkleRootUpdated"
AIRDROP_AMOUNT_UPDATED = "AirdropAmountUpdated"
AIRDROP_ACTIVATED = "AirdropActivated"
AIRDROP_CLAIMED = "AirdropClaimed"
REFERRAL_BONUS_CLAIMED = "ReferralBonusClaimed"


def _render(v: Any) -> Any:
    if isinstance(v, Address):
        return v.hex()
    if isinstance(v, (bytes, bytearray)):
        return "0x" + bytes(v).hex()
    return v


@dataclass(frozen=True)
class LedgerEvent:
    """
    Attributes:
        name:      str — event name (see module constants)
        args:      read-only mapping of event arguments
        timestamp: int — logical time of the emitting call
    """
    name: str
    args: Mapping[str, Any] = field(default_factory=dict)
    timestamp: int = 0

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("event name must not be empty")
        object.__setattr__(self, "args", MappingProxyType(dict(self.args)))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "args": {k: _render(v) for k, v in self.args.items()},
            "timestamp": self.timestamp,
        }


__all__ = [
    "LedgerEvent",
    "TRANSFER",
    "BURN",
    "APPROVAL",
    "RATES_UPDATED",
    "DEV_ADDRESS_UPDATED",
    "REWARD_ADDRESS_UPDATED",
    "ALLOWLIST_UPDATED",
    "MERKLE_ROOT_UPDATED",
    "AIRDROP_AMOUNT_UPDATED",
    "AIRDROP_ACTIVATED",
    "AIRDROP_CLAIMED",
    "REFERRAL_BONUS_CLAIMED",
]
