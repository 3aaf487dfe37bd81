from __future__ import annotations

import pytest

from deflation.errors import InvalidArgument, NotOwner, RateTooHigh
from deflation.state.journal import Journal
from deflation.tax import Rates, TaxPolicy, compute_split, percent_of

from .conftest import DEV, OWNER, REWARD, USER, USER2, at


def test_split_200_at_default_rates():
    s = compute_split(200, Rates(dev=2, burn=5, reward=3))
    assert (s.dev_cut, s.burn_cut, s.reward_cut, s.net) == (4, 10, 6, 180)
    assert s.taxed


@pytest.mark.parametrize("amount", [0, 1, 9, 19])
def test_dust_below_every_cut_moves_untaxed(amount):
    s = compute_split(amount, Rates(2, 5, 3))
    # the largest rate (5%) floors to zero below 20
    assert s.burn_cut == 0 and s.dev_cut == 0 and s.reward_cut == 0
    assert s.net == amount
    assert not s.taxed


def test_truncation_remainder_stays_with_recipient():
    s = compute_split(99, Rates(2, 5, 3))
    assert (s.dev_cut, s.burn_cut, s.reward_cut) == (1, 4, 2)
    assert s.net == 92


def test_percent_of_floors():
    assert percent_of(800, 10) == 80
    assert percent_of(7, 50) == 3
    assert percent_of(0, 100) == 0


def test_policy_rejects_rates_over_ceiling_without_writing():
    j = Journal()
    p = TaxPolicy(j, max_total_percent=10)
    p.init(2, 5, 3)
    with pytest.raises(RateTooHigh) as ei:
        p.set_rates(5, 5, 1)
    assert ei.value.message == "too greedy"
    assert ei.value.data == {"total": 11, "ceiling": 10}
    assert p.rates() == Rates(2, 5, 3)


@pytest.mark.parametrize("bad", [-1, 101, "3", 2.5, True])
def test_policy_rejects_malformed_rate(bad):
    p = TaxPolicy(Journal())
    with pytest.raises(InvalidArgument):
        p.set_rates(bad, 0, 0)


def test_update_percentage_by_owner(token, sink):
    rates = token.update_percentage(at(OWNER), 2, 3, 5)
    assert (token.dev_percent(), token.burn_percent(), token.reward_percent()) == (2, 3, 5)
    assert rates.total == 10
    ev = sink.last("RatesUpdated")
    assert ev is not None and dict(ev.args) == {"dev": 2, "burn": 3, "reward": 5}


def test_update_percentage_ceiling(token):
    with pytest.raises(RateTooHigh):
        token.update_percentage(at(OWNER), 4, 4, 4)
    assert (token.dev_percent(), token.burn_percent(), token.reward_percent()) == (2, 5, 3)


def test_owner_gate_runs_before_rate_validation(token):
    with pytest.raises(NotOwner) as ei:
        token.update_percentage(at(USER), 50, 50, 50)
    assert ei.value.message == "Ownable: caller is not the owner"


def test_zero_rates_disable_tax(token):
    token.update_percentage(at(OWNER), 0, 0, 0)
    supply = token.total_supply()
    token.transfer(at(OWNER), USER, 1_000)
    assert token.balance_of(USER) == 1_000
    assert token.total_supply() == supply
    assert token.balance_of(DEV) == 0 and token.balance_of(REWARD) == 0


def test_new_rates_apply_to_next_transfer(token):
    token.update_percentage(at(OWNER), 0, 10, 0)
    split = token.transfer(at(OWNER), USER2, 100)
    assert split.burn_cut == 10 and split.net == 90
    assert token.balance_of(USER2) == 90
