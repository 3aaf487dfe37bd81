from __future__ import annotations

import json

import typer.testing

from deflation.cli.main import app
from deflation.version import __version__

from .conftest import PROOFS, ROOT, X1, X2, X3

runner = typer.testing.CliRunner()


def _address_file(tmp_path):
    f = tmp_path / "airdrop.txt"
    f.write_text("# three wallets\n" + "\n".join(a.hex() for a in (X1, X2, X3)) + "\n", encoding="utf-8")
    return f


def test_help():
    result = runner.invoke(app, ["--help"])
    assert result.exit_code == 0
    assert "root" in result.stdout and "verify" in result.stdout


def test_root(tmp_path):
    result = runner.invoke(app, ["root", str(_address_file(tmp_path))])
    assert result.exit_code == 0, result.output
    assert result.stdout.strip() == ROOT


def test_proof_json(tmp_path):
    result = runner.invoke(app, ["--json", "proof", str(_address_file(tmp_path)), X1.hex()])
    assert result.exit_code == 0, result.output
    payload = json.loads(result.stdout)
    assert payload["root"] == ROOT
    assert payload["proof"] == PROOFS[X1]


def test_proof_unknown_address(tmp_path):
    result = runner.invoke(app, ["proof", str(_address_file(tmp_path)), "0x" + "33" * 20])
    assert result.exit_code == 1


def test_verify_valid_and_invalid():
    args = ["verify", "--root", ROOT, "--address", X3.hex()]
    ok = runner.invoke(app, args + ["--proof", PROOFS[X3][0]])
    assert ok.exit_code == 0
    assert ok.stdout.strip() == "valid"

    bad = runner.invoke(app, args + ["--proof", PROOFS[X1][0]])
    assert bad.exit_code == 1
    assert bad.stdout.strip() == "invalid"


def test_verify_multi_level_proof():
    args = ["verify", "--root", ROOT, "--address", X2.hex()]
    for p in PROOFS[X2]:
        args += ["--proof", p]
    assert runner.invoke(app, args).exit_code == 0


def test_config_summary(monkeypatch):
    monkeypatch.setenv("DEFLATION_SYMBOL", "DFL")
    result = runner.invoke(app, ["config"])
    assert result.exit_code == 0
    assert "DFL" in result.stdout


def test_version_json():
    result = runner.invoke(app, ["--json", "version"])
    assert result.exit_code == 0
    meta = json.loads(result.stdout)
    assert meta["version"] == __version__
    assert meta["package"] == "deflation"


def test_version_text():
    result = runner.invoke(app, ["version"])
    assert result.exit_code == 0
    assert result.stdout.startswith(f"deflation {__version__} ")
