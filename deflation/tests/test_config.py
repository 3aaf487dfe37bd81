from __future__ import annotations

import pytest

from deflation.config import HOUR, TokenConfig, load_config, summary


def test_defaults():
    cfg = load_config(env={})
    assert isinstance(cfg, TokenConfig)
    assert (cfg.tax.dev_percent, cfg.tax.burn_percent, cfg.tax.reward_percent) == (2, 5, 3)
    assert cfg.tax.max_total_percent == 10
    assert cfg.lock.window_seconds == 36 * HOUR
    assert cfg.airdrop.duration_seconds == 36 * HOUR
    assert cfg.airdrop.referral_percent == 10
    assert cfg.owner_supply == 0
    assert "tax=2/5/3 max=10%" in summary(cfg)


@pytest.mark.parametrize(
    "raw,seconds",
    [("36h", 36 * HOUR), ("90m", 5400), ("2d", 48 * HOUR), ("129600", 129600), ("45s", 45)],
)
def test_duration_formats(raw, seconds):
    cfg = load_config(env={"DEFLATION_LOCK_WINDOW": raw})
    assert cfg.lock.window_seconds == seconds


def test_env_and_overrides():
    env = {"DEFLATION_SYMBOL": "DFL", "DEFLATION_INITIAL_SUPPLY": "1_000", "DEFLATION_DEV_PERCENT": "1"}
    cfg = load_config(env=env, overrides={"initial_supply": 800})
    assert cfg.meta.symbol == "DFL"
    assert cfg.initial_supply == 800
    assert cfg.tax.dev_percent == 1
    assert cfg.to_dict()["meta"]["symbol"] == "DFL"


@pytest.mark.parametrize(
    "env",
    [
        {"DEFLATION_DEV_PERCENT": "8"},
        {"DEFLATION_LOCK_WINDOW": "0"},
        {"DEFLATION_LOCK_WINDOW": "soon"},
        {"DEFLATION_AIRDROP_AMOUNT": "0"},
        {"DEFLATION_DECIMALS": "eighteen"},
        {"DEFLATION_REFERRAL_PERCENT": "101"},
    ],
)
def test_invalid_values(env):
    with pytest.raises(ValueError):
        load_config(env=env)
