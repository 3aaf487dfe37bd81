"""
deflation.tools — off-ledger helpers (airdrop tree building).
"""

from .merkle_tree import MerkleTree, load_addresses

__all__ = ["MerkleTree", "load_addresses"]
