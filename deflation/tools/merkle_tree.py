"""
deflation.tools.merkle_tree
===========================

Build airdrop trees and proofs for a list of addresses.

Layout
------
* leaves are ``keccak256(address.raw)`` in input order (optionally sorted);
* each level pairs nodes left to right and hashes each pair sorted;
* an odd trailing node is promoted to the next level unchanged.

This matches the layout of the JS ``merkletreejs`` library with
``{sortPairs: true}`` over keccak256-hashed leaves, so roots and proofs made
with either tool are interchangeable. Verification lives in
:mod:`deflation.merkle`; this module only builds.

Usage
-----
    tree = MerkleTree(load_addresses("airdrop.txt"))
    tree.root_hex()
    tree.proof_hex("0x...")
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, List, Sequence

from ..merkle import hash_pair, leaf_hash
from ..types.address import Address, AddressLike, to_address


def load_addresses(path: str | Path) -> List[Address]:
    """One hex address per line; blanks and ``#`` comments are skipped."""
    out: List[Address] = []
    for raw in Path(path).read_text(encoding="utf-8").splitlines():
        line = raw.split("#", 1)[0].strip()
        if line:
            out.append(to_address(line))
    return out


class MerkleTree:
    def __init__(self, addresses: Iterable[AddressLike], *, sort_leaves: bool = False) -> None:
        self.addresses: List[Address] = [to_address(a) for a in addresses]
        if not self.addresses:
            raise ValueError("cannot build a tree without addresses")
        if len(set(self.addresses)) != len(self.addresses):
            raise ValueError("duplicate address in airdrop list")
        leaves = [leaf_hash(a) for a in self.addresses]
        if sort_leaves:
            leaves.sort()
        self.layers: List[List[bytes]] = [leaves]
        while len(self.layers[-1]) > 1:
            self.layers.append(self._next_layer(self.layers[-1]))

    @staticmethod
    def _next_layer(nodes: Sequence[bytes]) -> List[bytes]:
        out: List[bytes] = []
        for i in range(0, len(nodes), 2):
            if i + 1 < len(nodes):
                out.append(hash_pair(nodes[i], nodes[i + 1]))
            else:
                out.append(nodes[i])
        return out

    @property
    def leaves(self) -> List[bytes]:
        return list(self.layers[0])

    @property
    def root(self) -> bytes:
        return self.layers[-1][0]

    def root_hex(self) -> str:
        return "0x" + self.root.hex()

    def proof(self, address: AddressLike) -> List[bytes]:
        """Sibling hashes from the leaf of `address` up to the root."""
        leaf = leaf_hash(address)
        try:
            index = self.layers[0].index(leaf)
        except ValueError:
            raise KeyError(f"{to_address(address).hex()} is not in the tree") from None
        proof: List[bytes] = []
        for layer in self.layers[:-1]:
            sibling = index - 1 if index % 2 else index + 1
            if sibling < len(layer):
                proof.append(layer[sibling])
            index //= 2
        return proof

    def proof_hex(self, address: AddressLike) -> List[str]:
        return ["0x" + p.hex() for p in self.proof(address)]

    def __len__(self) -> int:
        return len(self.addresses)

    def __contains__(self, address: object) -> bool:
        try:
            return leaf_hash(address) in self.layers[0]  # type: ignore[arg-type]
        except (TypeError, ValueError):
            return False


__all__ = ["MerkleTree", "load_addresses"]
