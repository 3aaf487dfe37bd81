"""
deflation.errors — ledger-level exceptions.

Every rejected call raises one of these *typed exceptions*; higher layers (CLI,
tests, integrations) assert on the stable `code` rather than on message text.
A rejection always aborts the whole call: the journal is reverted before the
exception leaves the token facade.

Hierarchy
---------
LedgerError (base)
 ├─ NotOwner              : caller is not the owner
 ├─ RateTooHigh           : dev + burn + reward exceeds the tax ceiling
 ├─ InsufficientBalance   : debit larger than the balance
 ├─ InsufficientAllowance : transfer_from larger than the approved allowance
 ├─ Locked                : sender/receiver/caller is past its lock deadline
 │   └─ RefererLocked     : the referer of an airdrop claim is locked
 ├─ AirdropNotConfigured  : activation attempted without a Merkle root
 ├─ AirdropAlreadyStarted : configuration/activation after activation
 ├─ AirdropNotStarted     : claim before activation
 ├─ AirdropFinished       : claim after the airdrop window
 ├─ NotEligible           : bad proof or already claimed
 ├─ SelfReferral          : claimant named itself as referer
 ├─ NothingToClaim        : no pending referral bonus
 ├─ NoTokensLeft          : treasury cannot fund another claim
 └─ InvalidArgument       : malformed amount/address/rate

These classes avoid importing other package modules so they can be used from
the lowest layers (journal, balance helpers) without cycles.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional


@dataclass
class LedgerError(Exception):
    """
    Base ledger error.

    Attributes:
        message: Human-readable explanation (stable revert text).
        code:    Stable machine code string (e.g., 'NOT_OWNER', 'LOCKED').
        data:    Optional structured details (kept JSON-serializable).
    """
    message: str = "ledger error"
    code: str = "LEDGER_ERROR"
    data: Optional[Dict[str, Any]] = field(default=None)

    def __str__(self) -> str:  # pragma: no cover - trivial
        if self.data:
            return f"{self.code}: {self.message} ({self.data})"
        return f"{self.code}: {self.message}"

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to a JSON-safe dict for logs/CLI output."""
        out: Dict[str, Any] = {"code": self.code, "message": self.message}
        if self.data is not None:
            out["data"] = self.data
        return out


def _details(data: Optional[Dict[str, Any]], **fields: Any) -> Optional[Dict[str, Any]]:
    d: Dict[str, Any] = {}
    if data:
        d.update(data)
    for k, v in fields.items():
        if v is not None:
            d.setdefault(k, v)
    return d or None


class NotOwner(LedgerError):
    """Administrative call by anyone other than the owner."""
    def __init__(self, message: str = "caller is not the owner", *, caller: Optional[str] = None,
                 data: Optional[Dict[str, Any]] = None):
        super().__init__(message=message, code="NOT_OWNER", data=_details(data, caller=caller))


class RateTooHigh(LedgerError):
    """Proposed dev + burn + reward rates exceed the aggregate ceiling."""
    def __init__(self, message: str = "too greedy", *, total: Optional[int] = None,
                 ceiling: Optional[int] = None, data: Optional[Dict[str, Any]] = None):
        super().__init__(message=message, code="RATE_TOO_HIGH",
                         data=_details(data, total=total, ceiling=ceiling))


class InsufficientBalance(LedgerError):
    """Raised when a debit would make an account balance negative."""
    def __init__(self, message: str = "insufficient balance", *, address: Optional[str] = None,
                 balance: Optional[int] = None, amount: Optional[int] = None,
                 data: Optional[Dict[str, Any]] = None):
        super().__init__(message=message, code="INSUFFICIENT_BALANCE",
                         data=_details(data, address=address, balance=balance, amount=amount))


class InsufficientAllowance(LedgerError):
    def __init__(self, message: str = "insufficient allowance", *, allowance: Optional[int] = None,
                 amount: Optional[int] = None, data: Optional[Dict[str, Any]] = None):
        super().__init__(message=message, code="INSUFFICIENT_ALLOWANCE",
                         data=_details(data, allowance=allowance, amount=amount))


class Locked(LedgerError):
    """
    An account involved in the call is past its lock deadline.

    `data["side"]` tells which party tripped the lock: "sender", "receiver"
    or "caller" (airdrop/referral claims).
    """
    def __init__(self, message: str = "account is locked", *, side: Optional[str] = None,
                 address: Optional[str] = None, data: Optional[Dict[str, Any]] = None,
                 code: str = "LOCKED"):
        super().__init__(message=message, code=code, data=_details(data, side=side, address=address))


class RefererLocked(Locked):
    def __init__(self, message: str = "referer is locked", *, address: Optional[str] = None,
                 data: Optional[Dict[str, Any]] = None):
        super().__init__(message=message, side="referer", address=address, data=data,
                         code="REFERER_LOCKED")


class AirdropNotConfigured(LedgerError):
    def __init__(self, message: str = "merkle root not set", *, data: Optional[Dict[str, Any]] = None):
        super().__init__(message=message, code="NOT_CONFIGURED", data=data)


class AirdropAlreadyStarted(LedgerError):
    def __init__(self, message: str = "airdrop already started", *, data: Optional[Dict[str, Any]] = None):
        super().__init__(message=message, code="ALREADY_STARTED", data=data)


class AirdropNotStarted(LedgerError):
    def __init__(self, message: str = "airdrop not started", *, data: Optional[Dict[str, Any]] = None):
        super().__init__(message=message, code="NOT_STARTED", data=data)


class AirdropFinished(LedgerError):
    def __init__(self, message: str = "airdrop finished", *, ended_at: Optional[int] = None,
                 data: Optional[Dict[str, Any]] = None):
        super().__init__(message=message, code="FINISHED", data=_details(data, ended_at=ended_at))


class NotEligible(LedgerError):
    """Merkle proof does not bind the caller to the root, or the caller already claimed."""
    def __init__(self, message: str = "not eligible", *, address: Optional[str] = None,
                 data: Optional[Dict[str, Any]] = None):
        super().__init__(message=message, code="NOT_ELIGIBLE", data=_details(data, address=address))


class SelfReferral(LedgerError):
    def __init__(self, message: str = "cannot refer yourself", *, data: Optional[Dict[str, Any]] = None):
        super().__init__(message=message, code="SELF_REFERRAL", data=data)


class NothingToClaim(LedgerError):
    def __init__(self, message: str = "nothing to claim", *, data: Optional[Dict[str, Any]] = None):
        super().__init__(message=message, code="NOTHING_TO_CLAIM", data=data)


class NoTokensLeft(LedgerError):
    def __init__(self, message: str = "no token left", *, available: Optional[int] = None,
                 required: Optional[int] = None, data: Optional[Dict[str, Any]] = None):
        super().__init__(message=message, code="NO_TOKENS_LEFT",
                         data=_details(data, available=available, required=required))


class InvalidArgument(LedgerError):
    """Malformed input: negative or non-integer amounts, out-of-range rates, null addresses."""
    def __init__(self, message: str = "invalid argument", *, field_name: Optional[str] = None,
                 data: Optional[Dict[str, Any]] = None):
        super().__init__(message=message, code="INVALID_ARGUMENT", data=_details(data, field=field_name))


__all__ = [
    "LedgerError",
    "NotOwner",
    "RateTooHigh",
    "InsufficientBalance",
    "InsufficientAllowance",
    "Locked",
    "RefererLocked",
    "AirdropNotConfigured",
    "AirdropAlreadyStarted",
    "AirdropNotStarted",
    "AirdropFinished",
    "NotEligible",
    "SelfReferral",
    "NothingToClaim",
    "NoTokensLeft",
    "InvalidArgument",
]
