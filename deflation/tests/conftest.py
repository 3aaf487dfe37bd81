from __future__ import annotations

import pytest

from deflation.config import TokenConfig, load_config
from deflation.state.events import InMemoryEventSink
from deflation.token import DeflationToken
from deflation.types.address import Address
from deflation.types.context import Call

HOUR = 60 * 60
T0 = 1_700_000_000


def addr(byte: int) -> Address:
    return Address(bytes([byte]) * 20)


OWNER = addr(0x11)
DEV = addr(0xDE)
REWARD = addr(0xEE)
USER = addr(0x21)
USER2 = addr(0x22)
POOL = addr(0x50)

# Three-leaf airdrop tree (sorted pairs, keccak256 leaves of the raw address bytes).
X1 = Address.from_hex("0xe65c4E7739879C61E6B07f8d92fC5dc744793A82")
X2 = Address.from_hex("0xBA9b7aEB59522C6f9d83449d1615EF848DB6Ba7c")
X3 = Address.from_hex("0xF20f881915B3923c2E6D7d0e5666fe3F99b5F246")
ROOT = "0x0db2dd7b4532d2869c573c38ecca8e59b28091d4a9c44144914b2846af51cfc6"
PROOFS = {
    X1: [
        "0x7f99d3cdc43cc49e3b7cdb78878d42defbce61ed624fc845d1f70c539bb0a7fc",
        "0x581e7cdfd5dfa863466d6df455c919bf4156c5c6cae3afc7d333277e77416a50",
    ],
    X2: [
        "0xd7c85f6ad652e618ae9639b3b91e509015977c61a5432a1648b173cb75d02ee5",
        "0x581e7cdfd5dfa863466d6df455c919bf4156c5c6cae3afc7d333277e77416a50",
    ],
    X3: ["0x4e974b5d9bb8c04c9c7271c6fe2b950e596b8ea7d11ab92adcf8e9d938556559"],
}

OWNER_SUPPLY = 1_000_000


def at(sender: Address, ts: int = T0) -> Call:
    return Call(sender, ts)


@pytest.fixture
def config() -> TokenConfig:
    return load_config(
        env={},
        overrides={
            "initial_supply": 800,
            "owner_supply": OWNER_SUPPLY,
            "airdrop_amount": 800,
            "lock_window": "36h",
            "airdrop_duration": "36h",
        },
    )


@pytest.fixture
def sink() -> InMemoryEventSink:
    return InMemoryEventSink()


@pytest.fixture
def token(config: TokenConfig, sink: InMemoryEventSink) -> DeflationToken:
    return DeflationToken(owner=OWNER, config=config, sink=sink, dev=DEV, reward=REWARD, allowlist=[POOL])


@pytest.fixture
def airdrop_token(token: DeflationToken) -> DeflationToken:
    """Token with the three-address root configured (not yet active)."""
    token.set_merkle_root(at(OWNER), ROOT)
    return token
