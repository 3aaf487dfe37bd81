"""
deflation.tax — transfer tax rates and the burn/dev/reward split.

A qualifying transfer of `amount` (neither party allowlisted) is decomposed as

    dev_cut    = floor(amount * dev_percent    / 100)
    burn_cut   = floor(amount * burn_percent   / 100)
    reward_cut = floor(amount * reward_percent / 100)
    net        = amount - dev_cut - burn_cut - reward_cut

Truncation remainders stay in `net`; nothing is redistributed. Amounts small
enough that every cut floors to zero therefore move untaxed.

Rates are stored in the journal (namespace "tax") so a rate update is reverted
together with everything else if the surrounding call fails. The only guard on
updates is the aggregate ceiling: dev + burn + reward <= max_total_percent.
"""

from __future__ import annotations

from dataclasses import dataclass

from .errors import InvalidArgument, RateTooHigh
from .state.journal import Journal
from .types.uint import ensure_u256, mul_div_floor

_NS = "tax"
PERCENT_BASE = 100


def percent_of(amount: int, percent: int) -> int:
    """floor(amount * percent / 100), float-free and u256-checked."""
    return mul_div_floor(amount, percent, PERCENT_BASE)


@dataclass(frozen=True)
class Rates:
    dev: int
    burn: int
    reward: int

    @property
    def total(self) -> int:
        return self.dev + self.burn + self.reward


@dataclass(frozen=True)
class TaxSplit:
    amount: int
    dev_cut: int
    burn_cut: int
    reward_cut: int
    net: int

    @property
    def taxed(self) -> bool:
        return self.net != self.amount


def compute_split(amount: int, rates: Rates) -> TaxSplit:
    """Pure split of `amount` under `rates`."""
    ensure_u256("amount", amount)
    dev_cut = percent_of(amount, rates.dev)
    burn_cut = percent_of(amount, rates.burn)
    reward_cut = percent_of(amount, rates.reward)
    return TaxSplit(
        amount=amount,
        dev_cut=dev_cut,
        burn_cut=burn_cut,
        reward_cut=reward_cut,
        net=amount - dev_cut - burn_cut - reward_cut,
    )


def untaxed(amount: int) -> TaxSplit:
    """The whole `amount` as net; used when an allowlisted account is a party."""
    ensure_u256("amount", amount)
    return TaxSplit(amount=amount, dev_cut=0, burn_cut=0, reward_cut=0, net=amount)


def _check_rate(name: str, value: object) -> int:
    if not isinstance(value, int) or isinstance(value, bool):
        raise InvalidArgument(f"{name} must be int", field_name=name)
    if not (0 <= value <= PERCENT_BASE):
        raise InvalidArgument(f"{name} must be in [0,{PERCENT_BASE}]", field_name=name)
    return value


class TaxPolicy:
    """Journal-backed rates with the aggregate-ceiling invariant."""

    def __init__(self, journal: Journal, *, max_total_percent: int = 10) -> None:
        self._j = journal
        self.max_total_percent = max_total_percent

    def init(self, dev: int, burn: int, reward: int) -> None:
        self.set_rates(dev, burn, reward)

    def rates(self) -> Rates:
        return Rates(
            dev=self._j.get(_NS, "dev", 0),
            burn=self._j.get(_NS, "burn", 0),
            reward=self._j.get(_NS, "reward", 0),
        )

    def validate(self, dev: int, burn: int, reward: int) -> Rates:
        proposed = Rates(_check_rate("dev", dev), _check_rate("burn", burn), _check_rate("reward", reward))
        if proposed.total > self.max_total_percent:
            raise RateTooHigh(total=proposed.total, ceiling=self.max_total_percent)
        return proposed

    def set_rates(self, dev: int, burn: int, reward: int) -> Rates:
        """Replace all three rates; nothing is written unless all checks pass."""
        r = self.validate(dev, burn, reward)
        self._j.set(_NS, "dev", r.dev)
        self._j.set(_NS, "burn", r.burn)
        self._j.set(_NS, "reward", r.reward)
        return r

    def split(self, amount: int) -> TaxSplit:
        return compute_split(amount, self.rates())


__all__ = ["PERCENT_BASE", "Rates", "TaxSplit", "TaxPolicy", "compute_split", "percent_of", "untaxed"]
