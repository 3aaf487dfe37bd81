"""
deflation.token
===============

`DeflationToken` is the public facade. It wires the ledger, the tax policy, the
lock manager, the airdrop and the owner gate over one journaled state store and
exposes every read and mutator.

Call discipline
---------------
Every mutator takes a :class:`~deflation.types.context.Call` as its first
argument and runs as one journal checkpoint:

1. checks (owner gate, locks, window, proofs, balances);
2. effects (journal writes through Ledger / LockManager / AirdropManager);
3. commit, and only then interactions: buffered events are handed to the sink.

Any exception reverts the checkpoint, so a rejected call leaves the state
byte-identical (see :meth:`DeflationToken.state_digest`) and emits nothing.

Usage
-----
    from deflation.token import DeflationToken
    from deflation.types import Call

    tok = DeflationToken(owner="0x" + "11" * 20)
    tok.transfer(Call(tok.owner, 1_700_000_000), "0x" + "22" * 20, 200)
"""

from __future__ import annotations

import hashlib
import json
import logging
from contextlib import contextmanager
from typing import Any, Dict, Iterable, Iterator, List, Optional, Sequence

from . import merkle
from .access import AccessControl
from .airdrop import AirdropManager, AirdropPhase, ClaimResult
from .config import TokenConfig, get_config
from .errors import InsufficientAllowance, InsufficientBalance, InvalidArgument, LedgerError, Locked
from .ledger import Ledger
from .lock import LockManager
from .state.events import EventSink, NullEventSink, deliver
from .state.journal import Journal
from .tax import Rates, TaxPolicy, TaxSplit, untaxed
from .types import events as ev
from .types.address import ZERO_ADDRESS, Address, AddressLike, to_address
from .types.context import Call
from .types.events import LedgerEvent
from .types.uint import U256_MAX, ensure_u256

log = logging.getLogger(__name__)

_META = "meta"
_ALLOWANCE = "allowance"

_TOKEN_ADDRESS_DOMAIN = b"deflation:token"


def derive_token_address(owner: AddressLike) -> Address:
    """Deterministic treasury address for a token deployed by `owner`."""
    return Address(merkle.keccak256(_TOKEN_ADDRESS_DOMAIN + to_address(owner).raw)[-20:])


def _nonzero(field_name: str, value: AddressLike) -> Address:
    addr = to_address(value)
    if addr.is_zero():
        raise InvalidArgument(f"{field_name} must not be the zero address", field_name=field_name)
    return addr


class DeflationToken:
    """
    Parameters
    ----------
    owner : AddressLike
        The single privileged account.
    config : TokenConfig | None
        Genesis parameters; defaults to :func:`deflation.config.get_config`.
    sink : EventSink | None
        Receives events after each committed call.
    allowlist : Iterable[AddressLike]
        Extra lock- and tax-exempt accounts (pool, router). The treasury is always exempt.
    address : AddressLike | None
        Treasury address; derived from the owner when omitted.
    dev, reward : AddressLike | None
        Fee recipients; both default to the owner.
    """

    def __init__(
        self,
        *,
        owner: AddressLike,
        config: Optional[TokenConfig] = None,
        sink: Optional[EventSink] = None,
        allowlist: Iterable[AddressLike] = (),
        address: Optional[AddressLike] = None,
        dev: Optional[AddressLike] = None,
        reward: Optional[AddressLike] = None,
    ) -> None:
        self.config = config or get_config()
        self._access = AccessControl(owner)
        self._sink: EventSink = sink if sink is not None else NullEventSink()
        self.address = _nonzero("address", address) if address is not None else derive_token_address(owner)

        self._journal = Journal()
        self._ledger = Ledger(self._journal)
        self._tax = TaxPolicy(self._journal, max_total_percent=self.config.tax.max_total_percent)
        self._locks = LockManager(self._journal, window_seconds=self.config.lock.window_seconds)
        self._airdrop = AirdropManager(
            self._journal,
            self._ledger,
            self._locks,
            treasury=self.address,
            duration_seconds=self.config.airdrop.duration_seconds,
            default_amount=self.config.airdrop.amount,
            referral_percent=self.config.airdrop.referral_percent,
        )

        genesis: List[LedgerEvent] = []
        with self._journal.atomic():
            t = self.config.tax
            self._tax.init(t.dev_percent, t.burn_percent, t.reward_percent)
            self._journal.set(_META, "dev", _nonzero("dev", dev) if dev is not None else self.owner)
            self._journal.set(_META, "reward", _nonzero("reward", reward) if reward is not None else self.owner)
            self._locks.allow(self.address)
            for extra in allowlist:
                self._locks.allow(_nonzero("allowlist", extra))
            self._mint(self.address, self.config.initial_supply, genesis)
            self._mint(self.owner, self.config.owner_supply, genesis)
        deliver(self._sink, genesis)
        log.info(
            "token created",
            extra={"token": self.address.hex(), "owner": self.owner.hex(), "supply": self.total_supply()},
        )

    # ------------------------------------------------------------------ #
    # Call plumbing
    # ------------------------------------------------------------------ #

    @contextmanager
    def _call(self, op: str, call: Call) -> Iterator[List[LedgerEvent]]:
        """One atomic call: buffer events, commit or revert, then deliver."""
        buffered: List[LedgerEvent] = []
        try:
            with self._journal.atomic():
                yield buffered
        except LedgerError as e:
            log.debug(
                "call rejected",
                extra={"op": op, "code": e.code, "error": e.to_dict(), **call.to_dict()},
            )
            raise
        deliver(self._sink, buffered)

    @staticmethod
    def _event(buffer: List[LedgerEvent], name: str, call: Call, **args: Any) -> None:
        buffer.append(LedgerEvent(name, args, call.timestamp))

    def _mint(self, to: Address, amount: int, buffer: List[LedgerEvent]) -> None:
        if amount:
            self._ledger.mint(to, amount)
            buffer.append(LedgerEvent(ev.TRANSFER, {"from": ZERO_ADDRESS, "to": to, "value": amount}))

    # ------------------------------------------------------------------ #
    # Reads
    # ------------------------------------------------------------------ #

    @property
    def owner(self) -> Address:
        return self._access.owner

    @property
    def name(self) -> str:
        return self.config.meta.name

    @property
    def symbol(self) -> str:
        return self.config.meta.symbol

    @property
    def decimals(self) -> int:
        return self.config.meta.decimals

    @property
    def lock_timer_seconds(self) -> int:
        return self._locks.window_seconds

    @property
    def sink(self) -> EventSink:
        return self._sink

    def balance_of(self, address: AddressLike) -> int:
        return self._ledger.balance_of(to_address(address))

    def total_supply(self) -> int:
        return self._ledger.total_supply()

    def rates(self) -> Rates:
        return self._tax.rates()

    def dev_percent(self) -> int:
        return self._tax.rates().dev

    def burn_percent(self) -> int:
        return self._tax.rates().burn

    def reward_percent(self) -> int:
        return self._tax.rates().reward

    def dev_address(self) -> Address:
        return self._journal.get(_META, "dev")

    def reward_address(self) -> Address:
        return self._journal.get(_META, "reward")

    def is_allowlisted(self, address: AddressLike) -> bool:
        return self._locks.is_allowlisted(to_address(address))

    def is_locked(self, address: AddressLike, now: int) -> bool:
        return self._locks.is_locked(to_address(address), now)

    def time_till_locked(self, address: AddressLike, now: int) -> int:
        return self._locks.time_till_locked(to_address(address), now)

    def allowance(self, owner: AddressLike, spender: AddressLike) -> int:
        return self._journal.get(_ALLOWANCE, (to_address(owner), to_address(spender)), 0)

    def airdrop_active(self) -> bool:
        """True once the owner activated the airdrop (the window may have ended since)."""
        return self._airdrop.activated()

    def airdrop_phase(self, now: int) -> AirdropPhase:
        return self._airdrop.phase(now)

    def airdrop_amount(self) -> int:
        return self._airdrop.amount()

    def merkle_root(self) -> Optional[bytes]:
        return self._airdrop.root()

    def claimed_users(self) -> int:
        return self._airdrop.claimed_count()

    def has_claimed(self, address: AddressLike) -> bool:
        return self._airdrop.has_claimed(to_address(address))

    def referral_bonus(self, address: AddressLike) -> int:
        return self._airdrop.referral_bonus(to_address(address))

    def airdrop_eligible(self, address: AddressLike, proof: Sequence[merkle.NodeLike]) -> bool:
        return self._airdrop.eligible(to_address(address), proof)

    # ------------------------------------------------------------------ #
    # Transfers
    # ------------------------------------------------------------------ #

    def _transfer(
        self, sender: Address, recipient: Address, amount: int, call: Call, buffer: List[LedgerEvent]
    ) -> TaxSplit:
        now = call.timestamp
        ensure_u256("amount", amount)
        if recipient.is_zero():
            raise InvalidArgument("transfer to the zero address", field_name="to")
        if self._locks.is_locked(sender, now):
            raise Locked("sender is locked", side="sender", address=sender.hex())
        if self._locks.is_locked(recipient, now):
            raise Locked("receiver is locked", side="receiver", address=recipient.hex())
        balance = self._ledger.balance_of(sender)
        if balance < amount:
            raise InsufficientBalance(address=sender.hex(), balance=balance, amount=amount)

        # either party on the allowlist makes the transfer untaxed
        if self._locks.is_allowlisted(sender) or self._locks.is_allowlisted(recipient):
            split = untaxed(amount)
        else:
            split = self._tax.split(amount)
        dev, reward = self.dev_address(), self.reward_address()
        self._ledger.apply_split(sender, recipient, split, dev=dev, reward=reward)

        self._locks.on_spend(sender, self._ledger.balance_of(sender))
        if split.net:
            self._locks.on_receive(recipient, now)

        self._event(buffer, ev.TRANSFER, call, **{"from": sender, "to": recipient, "value": split.net})
        if split.dev_cut:
            self._event(buffer, ev.TRANSFER, call, **{"from": sender, "to": dev, "value": split.dev_cut})
        if split.reward_cut:
            self._event(buffer, ev.TRANSFER, call, **{"from": sender, "to": reward, "value": split.reward_cut})
        if split.burn_cut:
            self._event(buffer, ev.BURN, call, **{"from": sender, "value": split.burn_cut})
        return split

    def transfer(self, call: Call, to: AddressLike, amount: int) -> TaxSplit:
        """Transfer from `call.sender` to `to`, taxed unless a party is allowlisted. Returns the applied split."""
        recipient = to_address(to)
        with self._call("transfer", call) as buffer:
            split = self._transfer(call.sender, recipient, amount, call, buffer)
        log.debug(
            "transfer",
            extra={"from": call.sender.hex(), "to": recipient.hex(), "amount": amount, "net": split.net},
        )
        return split

    def approve(self, call: Call, spender: AddressLike, amount: int) -> bool:
        spender_addr = to_address(spender)
        with self._call("approve", call) as buffer:
            ensure_u256("amount", amount)
            if spender_addr.is_zero():
                raise InvalidArgument("approve to the zero address", field_name="spender")
            key = (call.sender, spender_addr)
            if amount:
                self._journal.set(_ALLOWANCE, key, amount)
            else:
                self._journal.delete(_ALLOWANCE, key)
            self._event(buffer, ev.APPROVAL, call, owner=call.sender, spender=spender_addr, value=amount)
        return True

    def transfer_from(self, call: Call, owner: AddressLike, to: AddressLike, amount: int) -> TaxSplit:
        """Spend `call.sender`'s allowance over `owner` and run a normal transfer."""
        holder, recipient = to_address(owner), to_address(to)
        with self._call("transfer_from", call) as buffer:
            ensure_u256("amount", amount)
            key = (holder, call.sender)
            allowed = self._journal.get(_ALLOWANCE, key, 0)
            if allowed < amount:
                raise InsufficientAllowance(allowance=allowed, amount=amount)
            # an allowance of U256_MAX never decreases
            if allowed != U256_MAX:
                if allowed - amount:
                    self._journal.set(_ALLOWANCE, key, allowed - amount)
                else:
                    self._journal.delete(_ALLOWANCE, key)
            split = self._transfer(holder, recipient, amount, call, buffer)
        return split

    # ------------------------------------------------------------------ #
    # Administration (owner only)
    # ------------------------------------------------------------------ #

    def update_percentage(self, call: Call, dev: int, burn: int, reward: int) -> Rates:
        with self._call("update_percentage", call) as buffer:
            self._access.require_owner(call.sender)
            rates = self._tax.set_rates(dev, burn, reward)
            self._event(buffer, ev.RATES_UPDATED, call, dev=rates.dev, burn=rates.burn, reward=rates.reward)
        log.info("rates updated", extra={"dev": rates.dev, "burn": rates.burn, "reward": rates.reward})
        return rates

    def set_dev_address(self, call: Call, address: AddressLike) -> Address:
        with self._call("set_dev_address", call) as buffer:
            self._access.require_owner(call.sender)
            addr = _nonzero("dev", address)
            self._journal.set(_META, "dev", addr)
            self._event(buffer, ev.DEV_ADDRESS_UPDATED, call, address=addr)
        log.info("dev address updated", extra={"address": addr.hex()})
        return addr

    def set_reward_address(self, call: Call, address: AddressLike) -> Address:
        with self._call("set_reward_address", call) as buffer:
            self._access.require_owner(call.sender)
            addr = _nonzero("reward", address)
            self._journal.set(_META, "reward", addr)
            self._event(buffer, ev.REWARD_ADDRESS_UPDATED, call, address=addr)
        log.info("reward address updated", extra={"address": addr.hex()})
        return addr

    def allowlist_add(self, call: Call, address: AddressLike) -> None:
        with self._call("allowlist_add", call) as buffer:
            self._access.require_owner(call.sender)
            addr = _nonzero("address", address)
            self._locks.allow(addr)
            self._event(buffer, ev.ALLOWLIST_UPDATED, call, address=addr, allowed=True)
        log.info("allowlist updated", extra={"address": addr.hex(), "allowed": True})

    def allowlist_remove(self, call: Call, address: AddressLike) -> None:
        with self._call("allowlist_remove", call) as buffer:
            self._access.require_owner(call.sender)
            addr = to_address(address)
            if addr == self.address:
                raise InvalidArgument("the treasury is always allowlisted", field_name="address")
            self._locks.disallow(addr)
            self._event(buffer, ev.ALLOWLIST_UPDATED, call, address=addr, allowed=False)
        log.info("allowlist updated", extra={"address": addr.hex(), "allowed": False})

    def set_merkle_root(self, call: Call, root: merkle.NodeLike) -> bytes:
        with self._call("set_merkle_root", call) as buffer:
            self._access.require_owner(call.sender)
            node = self._airdrop.set_root(root)
            self._event(buffer, ev.MERKLE_ROOT_UPDATED, call, root=node)
        log.info("merkle root set", extra={"root": "0x" + node.hex()})
        return node

    def set_airdrop_amount(self, call: Call, amount: int) -> int:
        with self._call("set_airdrop_amount", call) as buffer:
            self._access.require_owner(call.sender)
            self._airdrop.set_amount(amount)
            self._event(buffer, ev.AIRDROP_AMOUNT_UPDATED, call, amount=amount)
        log.info("airdrop amount set", extra={"amount": amount})
        return amount

    def activate_airdrop(self, call: Call) -> int:
        """Open the claim window at `call.timestamp`. Returns the window end."""
        with self._call("activate_airdrop", call) as buffer:
            self._access.require_owner(call.sender)
            start = self._airdrop.activate(call.timestamp)
            ends_at = start + self._airdrop.duration_seconds
            self._event(buffer, ev.AIRDROP_ACTIVATED, call, start=start, ends_at=ends_at)
        return ends_at

    # ------------------------------------------------------------------ #
    # Airdrop claims
    # ------------------------------------------------------------------ #

    def claim_airdrop(
        self,
        call: Call,
        proof: Sequence[merkle.NodeLike],
        referer: Optional[AddressLike] = None,
    ) -> ClaimResult:
        ref = to_address(referer) if referer is not None else None
        with self._call("claim_airdrop", call) as buffer:
            res = self._airdrop.claim(call.sender, call.timestamp, proof, ref)
            self._event(
                buffer, ev.TRANSFER, call, **{"from": self.address, "to": res.claimant, "value": res.claimant_share}
            )
            self._event(
                buffer,
                ev.AIRDROP_CLAIMED,
                call,
                claimant=res.claimant,
                amount=res.claimant_share,
                referer=res.referer if res.referer is not None else ZERO_ADDRESS,
                referral=res.referral_share,
            )
        return res

    def claim_referral_bonus(self, call: Call) -> int:
        with self._call("claim_referral_bonus", call) as buffer:
            bonus = self._airdrop.claim_referral_bonus(call.sender, call.timestamp)
            self._event(buffer, ev.TRANSFER, call, **{"from": self.address, "to": call.sender, "value": bonus})
            self._event(buffer, ev.REFERRAL_BONUS_CLAIMED, call, referer=call.sender, amount=bonus)
        return bonus

    # ------------------------------------------------------------------ #
    # Snapshot
    # ------------------------------------------------------------------ #

    def snapshot(self) -> Dict[str, Any]:
        """JSON-safe view of the full ledger state (no time-dependent fields)."""
        rates = self._tax.rates()
        return {
            "token": self.address.hex(),
            "owner": self.owner.hex(),
            "total_supply": self.total_supply(),
            "balances": {a.hex(): v for a, v in self._ledger.holders()},
            "rates": {"dev": rates.dev, "burn": rates.burn, "reward": rates.reward},
            "dev_address": self.dev_address().hex(),
            "reward_address": self.reward_address().hex(),
            "locks": {a.hex(): d for a, d in self._locks.deadlines()},
            "allowlist": [a.hex() for a in self._locks.allowlist()],
            "allowances": {f"{o.hex()}:{s.hex()}": v for (o, s), v in self._journal.items(_ALLOWANCE)},
            "airdrop": self._airdrop.to_dict(),
        }

    def state_digest(self) -> str:
        """sha3-256 over the canonical JSON of :meth:`snapshot`."""
        blob = json.dumps(self.snapshot(), sort_keys=True, separators=(",", ":")).encode("utf-8")
        return hashlib.sha3_256(blob).hexdigest()


__all__ = ["DeflationToken", "derive_token_address"]
