from __future__ import annotations

import pytest

from deflation.errors import (InsufficientAllowance, InsufficientBalance, InvalidArgument,
                              Locked)
from deflation.types.address import ZERO_ADDRESS
from deflation.types.uint import U256_MAX

from deflation.config import load_config
from deflation.token import DeflationToken

from .conftest import DEV, HOUR, OWNER, OWNER_SUPPLY, POOL, REWARD, T0, USER, USER2, at


def test_genesis_state(token):
    assert token.balance_of(token.address) == 800
    assert token.balance_of(OWNER) == OWNER_SUPPLY
    assert token.total_supply() == 800 + OWNER_SUPPLY
    assert token.dev_address() == DEV
    assert token.reward_address() == REWARD
    assert token.is_allowlisted(token.address)
    assert (token.name, token.symbol, token.decimals) == ("Deflation Labs Token", "DLT", 18)


def test_transfer_splits_and_burns(token, sink):
    supply = token.total_supply()
    split = token.transfer(at(OWNER), USER, 200)

    assert token.balance_of(USER) == 180
    assert token.balance_of(DEV) == 4
    assert token.balance_of(REWARD) == 6
    assert token.balance_of(OWNER) == OWNER_SUPPLY - 200
    assert token.total_supply() == supply - 10
    assert split.burn_cut == 10

    names = [e.name for e in sink.all()[-4:]]
    assert names == ["Transfer", "Transfer", "Transfer", "Burn"]
    assert sink.last("Burn").args["value"] == 10


def test_transfer_accepts_hex_recipient(token):
    token.transfer(at(OWNER), USER.hex(), 20)
    assert token.balance_of(USER) == 19


def test_insufficient_balance_is_atomic(token, sink):
    before, n_events = token.state_digest(), len(sink)
    with pytest.raises(InsufficientBalance) as ei:
        token.transfer(at(USER), USER2, 1)
    assert ei.value.code == "INSUFFICIENT_BALANCE"
    assert token.state_digest() == before
    assert len(sink) == n_events


def test_transfer_to_zero_address_rejected(token):
    with pytest.raises(InvalidArgument):
        token.transfer(at(OWNER), ZERO_ADDRESS, 10)


@pytest.mark.parametrize("amount", [-1, 1.5, U256_MAX + 1])
def test_malformed_amount_rejected(token, amount):
    before = token.state_digest()
    with pytest.raises(InvalidArgument):
        token.transfer(at(OWNER), USER, amount)
    assert token.state_digest() == before


def test_locked_rejection_leaves_state_untouched(token, sink):
    token.transfer(at(OWNER), USER, 1_000)
    late = T0 + 37 * HOUR
    before, n_events = token.state_digest(), len(sink)
    with pytest.raises(Locked):
        token.transfer(at(USER, late), USER2, 10)
    assert token.state_digest() == before
    assert len(sink) == n_events


def test_approve_and_transfer_from(token, sink):
    token.approve(at(OWNER), USER, 500)
    assert token.allowance(OWNER, USER) == 500
    assert sink.last("Approval").args["value"] == 500

    split = token.transfer_from(at(USER), OWNER, USER2, 200)
    assert split.net == 180
    assert token.balance_of(USER2) == 180
    assert token.allowance(OWNER, USER) == 300


def test_transfer_from_over_allowance_is_atomic(token):
    token.approve(at(OWNER), USER, 100)
    before = token.state_digest()
    with pytest.raises(InsufficientAllowance):
        token.transfer_from(at(USER), OWNER, USER2, 101)
    assert token.state_digest() == before


def test_transfer_from_failure_restores_allowance(token):
    token.approve(at(USER), USER2, 50)
    with pytest.raises(InsufficientBalance):
        token.transfer_from(at(USER2), USER, OWNER, 50)
    assert token.allowance(USER, USER2) == 50


def test_unlimited_allowance_is_not_spent(token):
    token.approve(at(OWNER), USER, U256_MAX)
    token.transfer_from(at(USER), OWNER, USER2, 100)
    assert token.allowance(OWNER, USER) == U256_MAX


def test_supply_equals_sum_of_balances_after_mixed_calls(token):
    token.transfer(at(OWNER), USER, 12_345)
    token.transfer(at(USER, T0 + HOUR), USER2, 4_321)
    token.transfer(at(USER2, T0 + 2 * HOUR), OWNER, 999)
    snap = token.snapshot()
    assert sum(snap["balances"].values()) == token.total_supply()


def test_dust_transfer_moves_untaxed(token):
    supply = token.total_supply()
    split = token.transfer(at(OWNER), USER, 19)
    assert not split.taxed
    assert token.balance_of(USER) == 19
    assert token.balance_of(DEV) == token.balance_of(REWARD) == 0
    assert token.total_supply() == supply


def test_transfer_to_allowlisted_is_untaxed(token, sink):
    supply = token.total_supply()
    split = token.transfer(at(OWNER), POOL, 1_000)
    assert split.net == 1_000
    assert token.balance_of(POOL) == 1_000
    assert token.balance_of(OWNER) == OWNER_SUPPLY - 1_000
    assert token.total_supply() == supply
    assert sink.last("Burn") is None


def test_huge_amount_from_poor_sender_is_insufficient_balance(token):
    before = token.state_digest()
    with pytest.raises(InsufficientBalance) as ei:
        token.transfer(at(USER), USER2, 2**255)
    assert ei.value.data == {"address": USER.hex(), "balance": 0, "amount": 2**255}
    assert token.state_digest() == before


def test_transfer_near_u256_max():
    cfg = load_config(env={}, overrides={"initial_supply": 800, "owner_supply": U256_MAX - 800})
    tok = DeflationToken(owner=OWNER, config=cfg, dev=DEV, reward=REWARD)
    amount = U256_MAX // 2
    split = tok.transfer(at(OWNER), USER, amount)
    assert split.burn_cut == amount * 5 // 100
    assert tok.balance_of(USER) == split.net
    assert tok.total_supply() == U256_MAX - split.burn_cut
    assert sum(tok.snapshot()["balances"].values()) == tok.total_supply()


def test_dev_sending_to_reward_keeps_its_own_cut(token):
    token.transfer(at(OWNER), USER, 1_000_000)
    assert token.balance_of(DEV) == 20_000
    assert token.balance_of(REWARD) == 30_000

    token.transfer(at(DEV), REWARD, 20_000)
    assert token.balance_of(DEV) == 400
    assert token.balance_of(REWARD) == 30_000 + 18_000 + 600
    assert sum(token.snapshot()["balances"].values()) == token.total_supply()
