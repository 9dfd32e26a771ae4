"""Tests for dynamic_status_list.cli.main — CLI commands via Click test runner."""
from __future__ import annotations

import json
from pathlib import Path

import pytest
from click.testing import CliRunner, Result

from dynamic_status_list.cli.main import cli

T0 = 1_700_000_040


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture()
def data_dir(tmp_path: Path) -> Path:
    return tmp_path


def _invoke(runner: CliRunner, data_dir: Path, *args: str) -> Result:
    return runner.invoke(cli, ["--data-dir", str(data_dir), *args])


@pytest.fixture()
def enrolled(runner: CliRunner, data_dir: Path) -> Path:
    assert _invoke(runner, data_dir, "issue").exit_code == 0
    assert _invoke(runner, data_dir, "new", "-i", "mock-jwt.json", "-t", str(T0)).exit_code == 0
    return data_dir / "mock-jwt.json"


# ---------------------------------------------------------------------------
# Root CLI
# ---------------------------------------------------------------------------


class TestRootCLI:
    def test_help_exits_zero(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["--help"])
        assert result.exit_code == 0
        assert "wallet" in result.output

    def test_version_option(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert "dynamic-status-list" in result.output

    def test_invalid_period(self, runner: CliRunner, data_dir: Path) -> None:
        result = runner.invoke(cli, ["--data-dir", str(data_dir), "--period", "0", "recompute"])
        assert result.exit_code == 1
        assert "Error" in result.output


# ---------------------------------------------------------------------------
# Issuer commands
# ---------------------------------------------------------------------------


class TestIssueAndNew:
    def test_issue_writes_bundle(self, runner: CliRunner, data_dir: Path) -> None:
        result = _invoke(runner, data_dir, "issue")
        assert result.exit_code == 0
        bundle = json.loads((data_dir / "mock-jwt.json").read_text(encoding="utf-8"))
        assert bundle["jwt"].count(".") == 2
        assert (data_dir / "issuer-key.pem").exists()

    def test_new_enrolls_credential(self, enrolled: Path, data_dir: Path) -> None:
        bundle = json.loads(enrolled.read_text(encoding="utf-8"))
        assert bundle["private_metadata"]
        registry = json.loads((data_dir / "dsl-map.json").read_text(encoding="utf-8"))
        assert list(registry.values()) == [True]
        assert (data_dir / "dsl.json").exists()

    def test_new_detached(self, runner: CliRunner, data_dir: Path) -> None:
        _invoke(runner, data_dir, "issue")
        result = _invoke(runner, data_dir, "new", "-i", "mock-jwt.json", "-d")
        assert result.exit_code == 0
        bundle = json.loads((data_dir / "mock-jwt.json").read_text(encoding="utf-8"))
        assert bundle["detached_dsl_jwt"]

    def test_new_missing_file(self, runner: CliRunner, data_dir: Path) -> None:
        result = _invoke(runner, data_dir, "new", "-i", "absent.json")
        assert result.exit_code == 1
        assert "not found" in result.output

    def test_recompute_reports_entry_count(
        self, runner: CliRunner, data_dir: Path, enrolled: Path
    ) -> None:
        result = _invoke(runner, data_dir, "recompute", "-t", str(T0 + 5))
        assert result.exit_code == 0
        assert "1 entries" in result.output

    def test_revoke_unknown_jti(self, runner: CliRunner, data_dir: Path) -> None:
        result = _invoke(runner, data_dir, "revoke", "-j", "missing")
        assert result.exit_code == 1
        assert "not found" in result.output


# ---------------------------------------------------------------------------
# Holder and verifier
# ---------------------------------------------------------------------------


class TestWalletAndVerify:
    def test_wallet_writes_proof(
        self, runner: CliRunner, data_dir: Path, enrolled: Path
    ) -> None:
        result = _invoke(runner, data_dir, "wallet", "-i", "mock-jwt.json", "-t", str(T0 + 1))
        assert result.exit_code == 0
        proof = json.loads(
            (data_dir / "holder_status-list-identifier.json").read_text(encoding="utf-8")
        )
        assert proof["sid"] in result.output
        assert proof["revoked"] is False

    def test_wallet_without_metadata(self, runner: CliRunner, data_dir: Path) -> None:
        _invoke(runner, data_dir, "issue")
        result = _invoke(runner, data_dir, "wallet", "-i", "mock-jwt.json")
        assert result.exit_code == 1
        assert "private metadata missing" in result.output

    def test_valid_then_revoked(
        self, runner: CliRunner, data_dir: Path, enrolled: Path
    ) -> None:
        _invoke(runner, data_dir, "wallet", "-i", "mock-jwt.json", "-t", str(T0 + 1))
        result = _invoke(runner, data_dir, "verify")
        assert result.exit_code == 0
        assert "Revoked: false" in result.output

        proof = json.loads(
            (data_dir / "holder_status-list-identifier.json").read_text(encoding="utf-8")
        )
        result = _invoke(runner, data_dir, "revoke", "-j", proof["jti"], "-t", str(T0 + 2))
        assert result.exit_code == 0

        result = _invoke(runner, data_dir, "verify")
        assert result.exit_code == 0
        assert "Revoked: true" in result.output

    def test_verify_stale_proof(
        self, runner: CliRunner, data_dir: Path, enrolled: Path
    ) -> None:
        _invoke(runner, data_dir, "wallet", "-i", "mock-jwt.json", "-t", str(T0 + 600))
        result = _invoke(runner, data_dir, "verify")
        assert result.exit_code == 1
        assert "not found" in result.output

    def test_verify_pinned_issuer_mismatch(
        self, runner: CliRunner, data_dir: Path, enrolled: Path
    ) -> None:
        _invoke(runner, data_dir, "wallet", "-i", "mock-jwt.json", "-t", str(T0 + 1))
        result = _invoke(runner, data_dir, "verify", "--issuer-thumbprint", "00" * 32)
        assert result.exit_code == 1

    def test_verify_missing_files(self, runner: CliRunner, data_dir: Path) -> None:
        result = _invoke(runner, data_dir, "verify")
        assert result.exit_code == 1
        assert "Error" in result.output


# ---------------------------------------------------------------------------
# serve / print / printjwt
# ---------------------------------------------------------------------------


class TestUtilities:
    def test_serve_with_zero_iterations(
        self, runner: CliRunner, data_dir: Path, enrolled: Path
    ) -> None:
        result = _invoke(runner, data_dir, "serve", "--iterations", "0")
        assert result.exit_code == 0
        assert "stopped after 0" in result.output

    def test_print_json(self, runner: CliRunner, data_dir: Path, enrolled: Path) -> None:
        result = _invoke(runner, data_dir, "print", "-i", "dsl-map.json")
        assert result.exit_code == 0
        assert "true" in result.output

    def test_printjwt_from_bundle(
        self, runner: CliRunner, data_dir: Path, enrolled: Path
    ) -> None:
        result = _invoke(runner, data_dir, "printjwt", "-i", "mock-jwt.json")
        assert result.exit_code == 0
        assert "Payload" in result.output
        assert "ES256" in result.output

    def test_printjwt_from_publication(
        self, runner: CliRunner, data_dir: Path, enrolled: Path
    ) -> None:
        result = _invoke(runner, data_dir, "printjwt", "-i", "dsl.json")
        assert result.exit_code == 0
        assert "dsl/v1" in result.output

    def test_printjwt_rejects_garbage(self, runner: CliRunner, data_dir: Path) -> None:
        (data_dir / "bad.txt").write_text("not a jwt", encoding="utf-8")
        result = _invoke(runner, data_dir, "printjwt", "-i", "bad.txt")
        assert result.exit_code == 1
