"""
deflation - command-line tooling for the airdrop tree and token config.

Commands:
  root FILE                 Print the Merkle root for an address list
  proof FILE ADDRESS        Print the proof for one address of the list
  verify --root --address --proof ...
                            Check a proof against a root (exit 1 if invalid)
  config                    Show the effective token configuration
  version                   Show version metadata

Address files hold one hex address per line; blank lines and `#` comments are
ignored.

Examples:
  deflation root airdrop.txt
  deflation proof airdrop.txt 0xe65c4E7739879C61E6B07f8d92fC5dc744793A82 --json
  deflation verify --root 0x0db2... --address 0xF20f... --proof 0x4e97...
"""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

import typer

from .. import config as cfgmod
from .. import logging as dlog
from .. import merkle
from ..tools.merkle_tree import MerkleTree, load_addresses
from ..types.address import to_address
from ..version import version_metadata

log = logging.getLogger(__name__)

app = typer.Typer(
    name="deflation",
    help="Airdrop tree tooling and configuration for the deflation token ledger",
    no_args_is_help=True,
    add_completion=False,
)


class GlobalContext:
    def __init__(self) -> None:
        self.json_output: bool = False
        self.verbose: bool = False


_ctx = GlobalContext()


@app.callback()
def main_callback(
    json_output: bool = typer.Option(False, "--json", help="Output JSON instead of human-readable text"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log at DEBUG level"),
) -> None:
    """
    deflation CLI — build and check airdrop proofs, inspect configuration.
    """
    _ctx.json_output = json_output
    _ctx.verbose = verbose
    if verbose:
        dlog.configure(level="DEBUG", stream=sys.stderr)


def _emit(payload: dict, text: str) -> None:
    if _ctx.json_output:
        typer.echo(json.dumps(payload, indent=2, sort_keys=True))
    else:
        typer.echo(text)


def _tree(file: Path, sort_leaves: bool) -> MerkleTree:
    try:
        return MerkleTree(load_addresses(file), sort_leaves=sort_leaves)
    except ValueError as e:
        typer.secho(f"error: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=2)


@app.command()
def root(
    file: Path = typer.Argument(..., exists=True, dir_okay=False, readable=True, help="Address list"),
    sort_leaves: bool = typer.Option(False, "--sort-leaves", help="Sort leaf hashes before building"),
) -> None:
    """Print the Merkle root for an address list."""
    tree = _tree(file, sort_leaves)
    log.debug("tree built", extra={"leaves": len(tree)})
    _emit({"root": tree.root_hex(), "leaves": len(tree)}, tree.root_hex())


@app.command()
def proof(
    file: Path = typer.Argument(..., exists=True, dir_okay=False, readable=True, help="Address list"),
    address: str = typer.Argument(..., help="Address to prove"),
    sort_leaves: bool = typer.Option(False, "--sort-leaves", help="Sort leaf hashes before building"),
) -> None:
    """Print the proof for one address of the list."""
    tree = _tree(file, sort_leaves)
    try:
        addr = to_address(address)
        siblings = tree.proof_hex(addr)
    except (KeyError, ValueError) as e:
        typer.secho(f"error: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)
    _emit(
        {"address": addr.hex(), "root": tree.root_hex(), "proof": siblings},
        "\n".join(siblings) if siblings else "(empty proof: single-leaf tree)",
    )


@app.command()
def verify(
    root_hex: str = typer.Option(..., "--root", help="Merkle root (0x-hex)"),
    address: str = typer.Option(..., "--address", help="Claimant address"),
    proof_items: Optional[List[str]] = typer.Option(None, "--proof", help="Sibling hash; repeat per level"),
) -> None:
    """Check a proof against a root; exit code 1 when it does not verify."""
    try:
        ok = merkle.verify_address(proof_items or [], root_hex, address)
    except (TypeError, ValueError) as e:
        typer.secho(f"error: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=2)
    _emit({"valid": ok}, "valid" if ok else "invalid")
    if not ok:
        raise typer.Exit(code=1)


@app.command("config")
def show_config() -> None:
    """Show the effective configuration (environment + defaults)."""
    try:
        cfg = cfgmod.load_config()
    except ValueError as e:
        typer.secho(f"error: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=2)
    _emit(cfg.to_dict(), cfgmod.summary(cfg))


@app.command()
def version() -> None:
    """Show version metadata."""
    meta = version_metadata()
    _emit(meta, f"deflation {meta['version']} (python {meta['python']})")


def main() -> None:  # pragma: no cover
    app()


if __name__ == "__main__":  # pragma: no cover
    main()
