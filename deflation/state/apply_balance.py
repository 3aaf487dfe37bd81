"""
deflation.state.apply_balance — safe balance ops and tax-split accounting.

This module provides:
- credit(...) / debit(...): range-checked balance updates.
- move(...): from → to value transfer with a sufficient-funds guard.
- apply_tax_split(...): debit the sender once for the full amount and credit
  the dev, reward and recipient shares; burn the burn share.

It assumes the state exposes a minimal balance API:

    class State(Protocol):
        def get_balance(self, address: Address) -> int: ...
        def set_balance(self, address: Address, value: int) -> None: ...
        def reduce_supply(self, amount: int) -> None: ...

`deflation.ledger.Ledger` is the production implementation. All amounts are
integers in the smallest unit.
"""

from __future__ import annotations

from typing import Dict, Protocol

from ..errors import InsufficientBalance, InvalidArgument
from ..types.address import Address
from ..types.uint import U256_MAX


# =============================================================================
# Balance access protocol
# =============================================================================

class BalanceAccess(Protocol):
    def get_balance(self, address: Address) -> int: ...
    def set_balance(self, address: Address, value: int) -> None: ...
    def reduce_supply(self, amount: int) -> None: ...


class SplitLike(Protocol):
    amount: int
    dev_cut: int
    burn_cut: int
    reward_cut: int
    net: int


# =============================================================================
# Internal helpers
# =============================================================================

def _ensure_non_negative(amount: int) -> None:
    if amount < 0:
        raise InvalidArgument(f"amount must be >= 0, got {amount}", field_name="amount")


def _safe_add(a: int, b: int) -> int:
    res = a + b
    if res > U256_MAX:
        raise OverflowError("balance exceeds u256")
    return res


# =============================================================================
# Public balance operations
# =============================================================================

def credit(state: BalanceAccess, address: Address, amount: int) -> int:
    """
    Increase `address` balance by `amount` and return the new balance.
    """
    _ensure_non_negative(amount)
    cur = state.get_balance(address)
    if amount == 0:
        return cur
    new = _safe_add(cur, amount)
    state.set_balance(address, new)
    return new


def debit(state: BalanceAccess, address: Address, amount: int) -> int:
    """
    Decrease `address` balance by `amount` and return the new balance.
    Raises InsufficientBalance if the account cannot cover the debit.
    """
    _ensure_non_negative(amount)
    cur = state.get_balance(address)
    if amount == 0:
        return cur
    if cur < amount:
        raise InsufficientBalance(address=address.hex(), balance=cur, amount=amount)
    new = cur - amount
    state.set_balance(address, new)
    return new


def move(state: BalanceAccess, sender: Address, recipient: Address, amount: int) -> int:
    """
    Untaxed transfer of `amount` from `sender` to `recipient`.
    Returns the amount moved.
    """
    debit(state, sender, amount)
    credit(state, recipient, amount)
    return amount


# =============================================================================
# Tax split
# =============================================================================

def apply_tax_split(
    state: BalanceAccess,
    *,
    sender: Address,
    recipient: Address,
    split: SplitLike,
    dev: Address,
    reward: Address,
) -> Dict[str, int]:
    """
    Apply a computed tax split.

    Semantics
    ---------
    - sender     -= split.amount
    - dev        += split.dev_cut
    - reward     += split.reward_cut
    - recipient  += split.net
    - supply     -= split.burn_cut (credited to nobody)

    The sender is debited for the *total* first, so an insufficient balance
    fails before any credit is made.

    Returns
    -------
    {"debited", "dev_cut", "reward_cut", "burned", "net"}
    """
    if split.dev_cut + split.burn_cut + split.reward_cut + split.net != split.amount:
        raise ValueError("inconsistent tax split")

    debit(state, sender, split.amount)
    if split.burn_cut:
        state.reduce_supply(split.burn_cut)
    credit(state, dev, split.dev_cut)
    credit(state, reward, split.reward_cut)
    credit(state, recipient, split.net)

    return {
        "debited": split.amount,
        "dev_cut": split.dev_cut,
        "reward_cut": split.reward_cut,
        "burned": split.burn_cut,
        "net": split.net,
    }


__all__ = [
    "BalanceAccess",
    "credit",
    "debit",
    "move",
    "apply_tax_split",
]
