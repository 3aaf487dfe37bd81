"""
deflation — deterministic taxed token ledger with anti-dump time locks and a
Merkle-gated airdrop.

This package exposes only lightweight metadata at import time. The ledger
facade lives in `deflation.token`; import it explicitly.
"""

from .version import __version__, get_version

__all__ = ["__version__", "get_version"]
