"""
deflation.config — runtime configuration for the token ledger.

This module centralizes knobs for:
  • Token metadata (name, symbol, decimals) and genesis supply
  • Default tax rates and the aggregate tax ceiling
  • Lock window and airdrop parameters (duration, per-claim amount, referral share)

Configuration may be provided via environment variables. Defaults reproduce the
canonical token: rates 2/5/3 under a 10% ceiling, 36-hour lock window, 36-hour
airdrop window, 10% referral share.

Environment variables (all optional):
  DEFLATION_NAME                 -> token name (default: "Deflation Labs Token")
  DEFLATION_SYMBOL               -> token symbol (default: "DLT")
  DEFLATION_DECIMALS             -> integer (default: 18)
  DEFLATION_INITIAL_SUPPLY       -> raw units credited to the treasury at genesis
  DEFLATION_OWNER_SUPPLY         -> raw units credited to the owner at genesis (default: 0)
  DEFLATION_DEV_PERCENT          -> integer (default: 2)
  DEFLATION_BURN_PERCENT         -> integer (default: 5)
  DEFLATION_REWARD_PERCENT       -> integer (default: 3)
  DEFLATION_MAX_TAX_PERCENT      -> integer (default: 10)
  DEFLATION_LOCK_WINDOW          -> e.g. "36h", "90m", "2d", "129600" (default: 36h)
  DEFLATION_AIRDROP_DURATION     -> same format (default: 36h)
  DEFLATION_AIRDROP_AMOUNT       -> raw units per claim
  DEFLATION_REFERRAL_PERCENT     -> integer (default: 10)

Programmatic usage:
    from deflation.config import get_config, load_config
    cfg = load_config(overrides={"initial_supply": 800, "airdrop_amount": 800})

Note: This module does not perform any I/O beyond reading env vars.
"""

from __future__ import annotations

import os
import re
from dataclasses import asdict, dataclass
from functools import lru_cache
from typing import Dict, Mapping, Optional, Union

from .types.uint import U256_MAX

# ----------------------------- helpers -------------------------------------

HOUR = 60 * 60
DEFAULT_INITIAL_SUPPLY = 1_000_000_000 * 10**18

_DURATION_RE = re.compile(r"^\s*(\d+)\s*([smhdSMHD])?\s*$")
_UNIT_SECONDS = {"s": 1, "m": 60, "h": HOUR, "d": 24 * HOUR}


def _parse_duration_seconds(s: Union[str, int]) -> int:
    """
    Parse human-friendly durations:
      "36h", "90m", "2d", "45s", "129600", 129600 -> seconds (int)
    """
    if isinstance(s, int) and not isinstance(s, bool):
        if s < 0:
            raise ValueError("duration must be non-negative")
        return s

    m = _DURATION_RE.match(str(s))
    if not m:
        raise ValueError(f"invalid duration: {s!r}")
    num = int(m.group(1))
    unit = (m.group(2) or "s").lower()
    return num * _UNIT_SECONDS[unit]


def _int_value(name: str, v: Union[str, int]) -> int:
    if isinstance(v, bool):
        raise ValueError(f"{name} must be an integer")
    if isinstance(v, int):
        return v
    s = str(v).strip().replace("_", "")
    try:
        return int(s, 0) if s.lower().startswith("0x") else int(s)
    except ValueError as e:
        raise ValueError(f"{name} must be an integer, got {v!r}") from e


# ------------------------------ dataclasses ---------------------------------


@dataclass(frozen=True)
class TokenMeta:
    name: str = "Deflation Labs Token"
    symbol: str = "DLT"
    decimals: int = 18


@dataclass(frozen=True)
class TaxDefaults:
    dev_percent: int = 2
    burn_percent: int = 5
    reward_percent: int = 3
    max_total_percent: int = 10


@dataclass(frozen=True)
class LockParams:
    window_seconds: int = 36 * HOUR


@dataclass(frozen=True)
class AirdropParams:
    duration_seconds: int = 36 * HOUR
    amount: int = 1_000 * 10**18
    referral_percent: int = 10


@dataclass(frozen=True)
class TokenConfig:
    meta: TokenMeta
    tax: TaxDefaults
    lock: LockParams
    airdrop: AirdropParams
    initial_supply: int = DEFAULT_INITIAL_SUPPLY
    owner_supply: int = 0

    def to_dict(self) -> Dict[str, object]:
        return asdict(self)


# ------------------------------ loader --------------------------------------


def _validate(cfg: TokenConfig) -> TokenConfig:
    t = cfg.tax
    for name in ("dev_percent", "burn_percent", "reward_percent", "max_total_percent"):
        v = getattr(t, name)
        if not (0 <= v <= 100):
            raise ValueError(f"{name} must be in [0,100]")
    if t.dev_percent + t.burn_percent + t.reward_percent > t.max_total_percent:
        raise ValueError("default rates exceed max_total_percent")
    if cfg.lock.window_seconds <= 0:
        raise ValueError("lock window must be > 0")
    if cfg.airdrop.duration_seconds <= 0:
        raise ValueError("airdrop duration must be > 0")
    if cfg.airdrop.amount <= 0:
        raise ValueError("airdrop amount must be > 0")
    if not (0 <= cfg.airdrop.referral_percent <= 100):
        raise ValueError("referral_percent must be in [0,100]")
    if cfg.initial_supply < 0 or cfg.owner_supply < 0:
        raise ValueError("genesis supply must be non-negative")
    if cfg.initial_supply + cfg.owner_supply > U256_MAX:
        raise ValueError("genesis supply exceeds u256")
    if cfg.meta.decimals < 0:
        raise ValueError("decimals must be ≥ 0")
    if not cfg.meta.symbol:
        raise ValueError("symbol must not be empty")
    return cfg


def load_config(
    env: Optional[Mapping[str, str]] = None,
    *,
    overrides: Optional[Mapping[str, Union[str, int]]] = None,
) -> TokenConfig:
    """
    Build a TokenConfig from environment and optional overrides.

    Args:
        env: mapping to read variables from (default: os.environ)
        overrides: explicit field overrides (win over env); keys support:
          'name', 'symbol', 'decimals', 'initial_supply', 'owner_supply',
          'dev_percent', 'burn_percent', 'reward_percent', 'max_total_percent',
          'lock_window', 'airdrop_duration', 'airdrop_amount', 'referral_percent'
    """
    env = os.environ if env is None else env
    overrides = dict(overrides or {})

    def pick(key: str, var: str, default: Union[str, int]) -> Union[str, int]:
        if key in overrides:
            return overrides[key]
        return env.get(var, default)

    d_meta, d_tax, d_lock, d_air = TokenMeta(), TaxDefaults(), LockParams(), AirdropParams()

    meta = TokenMeta(
        name=str(pick("name", "DEFLATION_NAME", d_meta.name)),
        symbol=str(pick("symbol", "DEFLATION_SYMBOL", d_meta.symbol)),
        decimals=_int_value("decimals", pick("decimals", "DEFLATION_DECIMALS", d_meta.decimals)),
    )
    tax = TaxDefaults(
        dev_percent=_int_value("dev_percent", pick("dev_percent", "DEFLATION_DEV_PERCENT", d_tax.dev_percent)),
        burn_percent=_int_value("burn_percent", pick("burn_percent", "DEFLATION_BURN_PERCENT", d_tax.burn_percent)),
        reward_percent=_int_value(
            "reward_percent", pick("reward_percent", "DEFLATION_REWARD_PERCENT", d_tax.reward_percent)
        ),
        max_total_percent=_int_value(
            "max_total_percent", pick("max_total_percent", "DEFLATION_MAX_TAX_PERCENT", d_tax.max_total_percent)
        ),
    )
    lock = LockParams(
        window_seconds=_parse_duration_seconds(pick("lock_window", "DEFLATION_LOCK_WINDOW", d_lock.window_seconds)),
    )
    airdrop = AirdropParams(
        duration_seconds=_parse_duration_seconds(
            pick("airdrop_duration", "DEFLATION_AIRDROP_DURATION", d_air.duration_seconds)
        ),
        amount=_int_value("airdrop_amount", pick("airdrop_amount", "DEFLATION_AIRDROP_AMOUNT", d_air.amount)),
        referral_percent=_int_value(
            "referral_percent", pick("referral_percent", "DEFLATION_REFERRAL_PERCENT", d_air.referral_percent)
        ),
    )
    cfg = TokenConfig(
        meta=meta,
        tax=tax,
        lock=lock,
        airdrop=airdrop,
        initial_supply=_int_value(
            "initial_supply", pick("initial_supply", "DEFLATION_INITIAL_SUPPLY", DEFAULT_INITIAL_SUPPLY)
        ),
        owner_supply=_int_value("owner_supply", pick("owner_supply", "DEFLATION_OWNER_SUPPLY", 0)),
    )
    return _validate(cfg)


@lru_cache(maxsize=1)
def get_config() -> TokenConfig:
    """
    Cached global config. Suitable for application bootstraps and module-level consumers.
    """
    return load_config()


# ----------------------------- pretty-print ---------------------------------


def _fmt_duration(n: int) -> str:
    for unit, div in (("d", 24 * HOUR), ("h", HOUR), ("m", 60)):
        if n >= div and n % div == 0:
            return f"{n // div}{unit}"
    return f"{n}s"


def summary(cfg: Optional[TokenConfig] = None) -> str:
    """
    Return a human-friendly one-line summary of the most important knobs.
    """
    cfg = cfg or get_config()
    t = cfg.tax
    return (
        "token{"
        f"{cfg.meta.symbol}/{cfg.meta.decimals}, "
        f"supply={cfg.initial_supply}+{cfg.owner_supply}, "
        f"tax={t.dev_percent}/{t.burn_percent}/{t.reward_percent} max={t.max_total_percent}%, "
        f"lock={_fmt_duration(cfg.lock.window_seconds)}, "
        f"airdrop={_fmt_duration(cfg.airdrop.duration_seconds)}x{cfg.airdrop.amount}, "
        f"referral={cfg.airdrop.referral_percent}%"
        "}"
    )


__all__ = [
    "HOUR",
    "TokenMeta",
    "TaxDefaults",
    "LockParams",
    "AirdropParams",
    "TokenConfig",
    "load_config",
    "get_config",
    "summary",
]
