"""
deflation.airdrop — one-shot, time-boxed, Merkle-gated distribution.

Phases
------
    UNCONFIGURED --set_root--> CONFIGURED --activate--> ACTIVE --(window ends)--> FINISHED

ACTIVE covers ``start <= now <= start + duration``. The root and the per-claim
amount can only change before activation; activation happens once.

Claims
------
A claim pays out of the treasury (the token's own balance):

* 90% of the per-claim amount is moved to the claimant, untaxed;
* 10% is recorded as the referer's pending bonus. The bonus tokens stay in the
  treasury until the referer withdraws them, and the pending total is reserved:
  the treasury only funds a new claim from ``balance - pending_total``.
* with no referer the 10% stays in the treasury unreserved.

Both payouts count as a qualifying receipt for the lock timer of the account
that receives tokens.

State layout (journal namespaces)
---------------------------------
    "airdrop"  : root, amount, start, count, pending
    "claimed"  : Address -> True
    "referral" : Address -> pending bonus
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence

from . import merkle
from .errors import (AirdropAlreadyStarted, AirdropFinished, AirdropNotConfigured,
                     AirdropNotStarted, InvalidArgument, Locked, NoTokensLeft,
                     NotEligible, NothingToClaim, RefererLocked, SelfReferral)
from .ledger import Ledger
from .lock import LockManager
from .state.journal import Journal
from .tax import PERCENT_BASE, percent_of
from .types.address import Address
from .types.uint import ensure_u256, saturating_sub

log = logging.getLogger(__name__)

_NS = "airdrop"
_CLAIMED = "claimed"
_REFERRAL = "referral"


class AirdropPhase(str, Enum):
    UNCONFIGURED = "unconfigured"
    CONFIGURED = "configured"
    ACTIVE = "active"
    FINISHED = "finished"


@dataclass(frozen=True)
class ClaimResult:
    claimant: Address
    amount: int
    claimant_share: int
    referral_share: int
    referer: Optional[Address]
    deadline: Optional[int]


class AirdropManager:
    """
    Airdrop state machine over the shared journal.

    Parameters
    ----------
    journal : Journal
    ledger : Ledger
        Balance owner; claims and withdrawals move tokens through it.
    locks : LockManager
        Used to refuse locked claimants/referers and to arm recipients.
    treasury : Address
        The account that funds claims.
    duration_seconds : int
        Length of the ACTIVE window.
    default_amount : int
        Per-claim amount until the owner sets another one.
    referral_percent : int
        Share of each claim set aside for the referer.
    """

    def __init__(
        self,
        journal: Journal,
        ledger: Ledger,
        locks: LockManager,
        *,
        treasury: Address,
        duration_seconds: int,
        default_amount: int,
        referral_percent: int = 10,
    ) -> None:
        if duration_seconds <= 0:
            raise ValueError("duration_seconds must be > 0")
        if not (0 <= referral_percent <= PERCENT_BASE):
            raise ValueError("referral_percent must be in [0,100]")
        self._j = journal
        self._ledger = ledger
        self._locks = locks
        self.treasury = treasury
        self.duration_seconds = duration_seconds
        self.default_amount = default_amount
        self.referral_percent = referral_percent

    # ---- reads ----------------------------------------------------------------

    def root(self) -> Optional[bytes]:
        return self._j.get(_NS, "root")

    def amount(self) -> int:
        return self._j.get(_NS, "amount", self.default_amount)

    def started_at(self) -> Optional[int]:
        return self._j.get(_NS, "start")

    def ends_at(self) -> Optional[int]:
        start = self.started_at()
        return None if start is None else start + self.duration_seconds

    def activated(self) -> bool:
        return self.started_at() is not None

    def phase(self, now: int) -> AirdropPhase:
        start = self.started_at()
        if start is None:
            return AirdropPhase.CONFIGURED if self.root() is not None else AirdropPhase.UNCONFIGURED
        if now < start:
            # timestamps before activation only show up in replays
            return AirdropPhase.CONFIGURED
        if now <= start + self.duration_seconds:
            return AirdropPhase.ACTIVE
        return AirdropPhase.FINISHED

    def has_claimed(self, address: Address) -> bool:
        return self._j.contains(_CLAIMED, address)

    def claimed_count(self) -> int:
        return self._j.get(_NS, "count", 0)

    def claimed_addresses(self) -> List[Address]:
        return [addr for addr, _ in self._j.items(_CLAIMED)]

    def referral_bonus(self, address: Address) -> int:
        return self._j.get(_REFERRAL, address, 0)

    def referrals(self) -> List[tuple]:
        return self._j.items(_REFERRAL)

    def pending_total(self) -> int:
        return self._j.get(_NS, "pending", 0)

    def free_treasury(self) -> int:
        return saturating_sub(self._ledger.balance_of(self.treasury), self.pending_total())

    def eligible(self, address: Address, proof: Sequence[merkle.NodeLike]) -> bool:
        root = self.root()
        if root is None or self.has_claimed(address):
            return False
        try:
            return merkle.verify_address(proof, root, address)
        except (TypeError, ValueError):
            return False

    # ---- configuration --------------------------------------------------------

    def set_root(self, root: merkle.NodeLike) -> bytes:
        if self.activated():
            raise AirdropAlreadyStarted()
        try:
            node = merkle.to_node(root)
        except (TypeError, ValueError) as e:
            raise InvalidArgument(str(e), field_name="root") from e
        self._j.set(_NS, "root", node)
        return node

    def set_amount(self, amount: int) -> int:
        if self.activated():
            raise AirdropAlreadyStarted()
        ensure_u256("amount", amount)
        if amount == 0:
            raise InvalidArgument("amount must be > 0", field_name="amount")
        self._j.set(_NS, "amount", amount)
        return amount

    def activate(self, now: int) -> int:
        if self.activated():
            raise AirdropAlreadyStarted()
        if self.root() is None:
            raise AirdropNotConfigured()
        self._j.set(_NS, "start", now)
        log.info("airdrop activated", extra={"start": now, "ends_at": now + self.duration_seconds})
        return now

    # ---- claims ---------------------------------------------------------------

    def _require_window(self, now: int) -> None:
        phase = self.phase(now)
        if phase is AirdropPhase.FINISHED:
            raise AirdropFinished(ended_at=self.ends_at())
        if phase is not AirdropPhase.ACTIVE:
            raise AirdropNotStarted()

    def claim(
        self,
        claimant: Address,
        now: int,
        proof: Sequence[merkle.NodeLike],
        referer: Optional[Address] = None,
    ) -> ClaimResult:
        self._require_window(now)
        if not self.eligible(claimant, proof):
            raise NotEligible(address=claimant.hex())

        if referer is not None and referer.is_zero():
            referer = None
        if referer is not None and referer == claimant:
            raise SelfReferral()
        if self._locks.is_locked(claimant, now):
            raise Locked("user is locked", side="caller", address=claimant.hex())
        if referer is not None and self._locks.is_locked(referer, now):
            raise RefererLocked(address=referer.hex())

        amount = self.amount()
        available = self.free_treasury()
        if available < amount:
            raise NoTokensLeft(available=available, required=amount)

        referral_share = percent_of(amount, self.referral_percent)
        claimant_share = amount - referral_share

        self._ledger.move(self.treasury, claimant, claimant_share)
        if referer is not None and referral_share:
            self._j.set(_REFERRAL, referer, self.referral_bonus(referer) + referral_share)
            self._j.set(_NS, "pending", self.pending_total() + referral_share)

        self._j.set(_CLAIMED, claimant, True)
        self._j.set(_NS, "count", self.claimed_count() + 1)
        deadline = self._locks.on_receive(claimant, now) if claimant_share else None

        log.debug(
            "airdrop claimed",
            extra={"claimant": claimant.hex(), "amount": claimant_share, "referral": referral_share},
        )
        return ClaimResult(
            claimant=claimant,
            amount=amount,
            claimant_share=claimant_share,
            referral_share=referral_share if referer is not None else 0,
            referer=referer,
            deadline=deadline,
        )

    def claim_referral_bonus(self, caller: Address, now: int) -> int:
        self._require_window(now)
        bonus = self.referral_bonus(caller)
        if bonus == 0:
            raise NothingToClaim()
        if self._locks.is_locked(caller, now):
            raise Locked("user is locked", side="caller", address=caller.hex())

        self._j.delete(_REFERRAL, caller)
        self._j.set(_NS, "pending", self.pending_total() - bonus)
        self._ledger.move(self.treasury, caller, bonus)
        self._locks.on_receive(caller, now)

        log.debug("referral bonus claimed", extra={"referer": caller.hex(), "amount": bonus})
        return bonus

    # ---- snapshot -------------------------------------------------------------

    def to_dict(self, now: Optional[int] = None) -> Dict[str, Any]:
        root = self.root()
        out: Dict[str, Any] = {
            "root": None if root is None else "0x" + root.hex(),
            "amount": self.amount(),
            "start": self.started_at(),
            "duration": self.duration_seconds,
            "claimed_count": self.claimed_count(),
            "claimed": [a.hex() for a in self.claimed_addresses()],
            "referrals": {a.hex(): v for a, v in self.referrals()},
            "pending_total": self.pending_total(),
        }
        if now is not None:
            out["phase"] = self.phase(now).value
        return out


__all__ = ["AirdropManager", "AirdropPhase", "ClaimResult"]
