"""
deflation.merkle
================

Membership proofs for the airdrop allowlist.

Hashing
-------
* keccak256 (pre-SHA3 Keccak, as used by Ethereum), via pycryptodome.
* leaf  = keccak256(address.raw)                    (the 20 raw address bytes)
* node  = keccak256(min(a, b) || max(a, b))         (sorted pairs)

Because pairs are sorted before hashing, a proof is just the list of sibling
hashes from the leaf up to the root; no left/right direction bits are needed.
Roots produced by common off-chain tooling configured with sorted pairs (and
an odd trailing node promoted unchanged) verify here without modification.

Verification is pure: it never raises on a wrong proof, it returns False.
Malformed inputs (wrong lengths, bad hex) raise ValueError.
"""

from __future__ import annotations

from typing import Sequence, Union

from Crypto.Hash import keccak as _keccak

from .types.address import AddressLike, to_address

HASH_LEN = 32

NodeLike = Union[bytes, bytearray, memoryview, str]


def keccak256(data: bytes | bytearray | memoryview) -> bytes:
    h = _keccak.new(digest_bits=256)
    h.update(bytes(data))
    return h.digest()


def to_node(value: NodeLike) -> bytes:
    """Coerce a 32-byte hash given as bytes or 0x-hex into bytes."""
    if isinstance(value, str):
        s = value.strip()
        if s.startswith(("0x", "0X")):
            s = s[2:]
        try:
            raw = bytes.fromhex(s)
        except ValueError as e:
            raise ValueError(f"invalid hex hash: {value!r}") from e
    elif isinstance(value, (bytes, bytearray, memoryview)):
        raw = bytes(value)
    else:
        raise TypeError(f"expected bytes or hex string, got {type(value).__name__}")
    if len(raw) != HASH_LEN:
        raise ValueError(f"hash must be {HASH_LEN} bytes, got {len(raw)}")
    return raw


def leaf_hash(address: AddressLike) -> bytes:
    return keccak256(to_address(address).raw)


def hash_pair(a: bytes, b: bytes) -> bytes:
    return keccak256(a + b) if a <= b else keccak256(b + a)


def process_proof(proof: Sequence[NodeLike], leaf: bytes) -> bytes:
    """Fold `proof` over `leaf` and return the computed root."""
    computed = to_node(leaf)
    for sibling in proof:
        computed = hash_pair(computed, to_node(sibling))
    return computed


def verify(proof: Sequence[NodeLike], root: NodeLike, leaf: bytes) -> bool:
    """True iff `proof` connects `leaf` to `root`."""
    return process_proof(proof, leaf) == to_node(root)


def verify_address(proof: Sequence[NodeLike], root: NodeLike, address: AddressLike) -> bool:
    return verify(proof, root, leaf_hash(address))


__all__ = [
    "HASH_LEN",
    "NodeLike",
    "keccak256",
    "to_node",
    "leaf_hash",
    "hash_pair",
    "process_proof",
    "verify",
    "verify_address",
]
