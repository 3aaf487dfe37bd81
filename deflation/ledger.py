"""
deflation.ledger — balances and total supply.

`Ledger` is the only component that writes balances ("bal" namespace) or the
total supply ("meta"/"supply"). It implements the `BalanceAccess` protocol of
`deflation.state.apply_balance`, so all arithmetic guards live in one place.

Invariant: sum(balance_of(a) for every a) == total_supply() after every call.
Zero balances are deleted from the store, so `holders()` only lists accounts
that actually hold tokens.
"""

from __future__ import annotations

from typing import Dict, List, Tuple

from .state import apply_balance
from .state.journal import Journal
from .tax import TaxSplit
from .types.address import Address
from .types.uint import ensure_u256

_BAL = "bal"
_META = "meta"


class Ledger:
    def __init__(self, journal: Journal) -> None:
        self._j = journal

    # -- BalanceAccess --------------------------------------------------------

    def get_balance(self, address: Address) -> int:
        return self._j.get(_BAL, address, 0)

    def set_balance(self, address: Address, value: int) -> None:
        ensure_u256("balance", value)
        if value == 0:
            self._j.delete(_BAL, address)
        else:
            self._j.set(_BAL, address, value)

    def reduce_supply(self, amount: int) -> None:
        supply = self.total_supply()
        if amount > supply:
            raise ValueError("burn exceeds total supply")
        self._j.set(_META, "supply", supply - amount)

    # -- reads ----------------------------------------------------------------

    def balance_of(self, address: Address) -> int:
        return self.get_balance(address)

    def total_supply(self) -> int:
        return self._j.get(_META, "supply", 0)

    def holders(self) -> List[Tuple[Address, int]]:
        """(address, balance) for every non-zero balance, sorted by address."""
        return self._j.items(_BAL)

    def sum_of_balances(self) -> int:
        return sum(bal for _, bal in self.holders())

    # -- writes ---------------------------------------------------------------

    def mint(self, address: Address, amount: int) -> None:
        """Genesis-only issuance; the token never mints after construction."""
        ensure_u256("amount", amount)
        apply_balance.credit(self, address, amount)
        self._j.set(_META, "supply", self.total_supply() + amount)

    def move(self, sender: Address, recipient: Address, amount: int) -> int:
        return apply_balance.move(self, sender, recipient, amount)

    def apply_split(
        self,
        sender: Address,
        recipient: Address,
        split: TaxSplit,
        *,
        dev: Address,
        reward: Address,
    ) -> Dict[str, int]:
        return apply_balance.apply_tax_split(
            self, sender=sender, recipient=recipient, split=split, dev=dev, reward=reward
        )


__all__ = ["Ledger"]
