"""CLI entry point for dynamic-status-list.

Invoked as::

    dsl [OPTIONS] COMMAND [ARGS]...

or, during development::

    python -m dynamic_status_list.cli.main

Commands
--------
issue       Issue a mock credential
new         Enroll a credential in the status list
wallet      Derive a status list identifier (holder)
recompute   Recompute and sign the status list
revoke      Revoke a credential
verify      Verify a holder proof against a publication
serve       Republish the status list every epoch
print       Pretty-print a JSON file
printjwt    Decode and print a JWT
"""
from __future__ import annotations

import json
import logging
import sys
from pathlib import Path
from typing import NoReturn

import click
import jwt
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from dynamic_status_list import __version__
from dynamic_status_list.artifacts import CredentialBundleFile, read_model
from dynamic_status_list.config import StatusListSettings
from dynamic_status_list.errors import (
    AmbiguousResultError,
    CryptoFailure,
    IdentifierNotFoundError,
    InputError,
    StatusListError,
)
from dynamic_status_list.holder.proof import HolderProof, HolderProofBuilder, PrivateMetadata
from dynamic_status_list.issuance.credentials import EntryCapability
from dynamic_status_list.publication.models import Publication
from dynamic_status_list.service import StatusListService
from dynamic_status_list.storage import load_json
from dynamic_status_list.verification.verifier import Verifier

console = Console()

EXIT_FAILURE = 1
EXIT_FATAL = 2


# ------------------------------------------------------------------
# Root group
# ------------------------------------------------------------------


@click.group()
@click.version_option(version=__version__, prog_name="dynamic-status-list")
@click.option(
    "--data-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Directory holding the key, registry and publication files.",
)
@click.option(
    "--period",
    type=int,
    default=None,
    help="Epoch length in seconds (default 60).",
)
@click.option("--verbose", "-v", is_flag=True, default=False, help="Enable debug logging.")
@click.pass_context
def cli(ctx: click.Context, data_dir: Path | None, period: int | None, verbose: bool) -> None:
    """Dynamic status list: privacy-preserving credential revocation"""
    _configure_logging(verbose)
    try:
        ctx.obj = StatusListSettings.from_env(data_dir=data_dir, period_seconds=period)
    except InputError as exc:
        _fail(exc)


# ------------------------------------------------------------------
# issue
# ------------------------------------------------------------------


@cli.command(name="issue")
@click.option("--out", "-o", default="mock-jwt.json", show_default=True, help="Path to the output file.")
@click.pass_obj
def issue_command(settings: StatusListSettings, out: str) -> None:
    """Issue a mock credential."""
    console.print("> Issuing a mock JWT")
    out_path = settings.resolve(out)
    try:
        service = StatusListService.open(settings)
        service.issue_credential(out_path)
    except StatusListError as exc:
        _fail(exc)
    console.print(f"> Mock JWT issued and stored to {escape(str(out_path))}")


# ------------------------------------------------------------------
# new
# ------------------------------------------------------------------


@cli.command(name="new")
@click.option("--in", "-i", "in_file", required=True, help="Path to the credential bundle to enroll.")
@click.option(
    "--detached",
    "-d",
    is_flag=True,
    default=False,
    help="Also create a detached revocation metadata JWT.",
)
@click.option("--timestamp", "-t", type=int, default=None, help="Unix timestamp to publish at.")
@click.pass_obj
def new_command(
    settings: StatusListSettings,
    in_file: str,
    detached: bool,
    timestamp: int | None,
) -> None:
    """Create a new status list entry for a credential."""
    console.print(f"> Creating a new status list entry for JWT: {escape(in_file)}")
    capabilities = EntryCapability.DETACHED if detached else EntryCapability.NONE
    try:
        service = StatusListService.open(settings)
        service.create_entry(settings.resolve(in_file), capabilities, now=timestamp)
    except StatusListError as exc:
        _fail(exc)
    console.print(
        f"> New status list entry created and stored in {settings.publication_file}. "
        f"JWT jti entries are in {settings.registry_file}"
    )


# ------------------------------------------------------------------
# wallet
# ------------------------------------------------------------------


@cli.command(name="wallet")
@click.option("--in", "-i", "in_file", required=True, help="Path to the credential bundle.")
@click.option(
    "--revoked",
    "-r",
    is_flag=True,
    default=False,
    help="Derive the identifier under the revoked hypothesis.",
)
@click.option(
    "--timestamp",
    "-t",
    type=int,
    default=None,
    help="Unix timestamp when the holder computes the identifier.",
)
@click.option("--out", "-o", default=None, help="Where to write the holder proof.")
@click.pass_obj
def wallet_command(
    settings: StatusListSettings,
    in_file: str,
    revoked: bool,
    timestamp: int | None,
    out: str | None,
) -> None:
    """Derive a status list identifier (holder/wallet)."""
    console.print("> Deriving status list identifier")
    out_path = settings.resolve(out) if out else settings.holder_proof_path
    try:
        bundle = read_model(CredentialBundleFile, settings.resolve(in_file))
        metadata = PrivateMetadata.from_bundle(bundle)
        builder = HolderProofBuilder(period=settings.period_seconds)
        proof = builder.build_proof(metadata, timestamp=timestamp, valid=not revoked)
        proof.save(out_path)
    except StatusListError as exc:
        _fail(exc)
    console.print("> Status list identifier:")
    console.print(proof.identifier, highlight=False)


# ------------------------------------------------------------------
# recompute
# ------------------------------------------------------------------


@cli.command(name="recompute")
@click.option("--timestamp", "-t", type=int, default=None, help="Unix timestamp to publish at.")
@click.pass_obj
def recompute_command(settings: StatusListSettings, timestamp: int | None) -> None:
    """Recompute and sign the status list."""
    console.print("> Recomputing the DSL")
    try:
        service = StatusListService.open(settings)
        publication = service.republish(timestamp)
    except CryptoFailure as exc:
        _fail(exc, EXIT_FATAL)
    except StatusListError as exc:
        _fail(exc)
    console.print(
        f"> DSL recomputed with {len(publication)} entries and stored in "
        f"{settings.publication_file}"
    )


# ------------------------------------------------------------------
# revoke
# ------------------------------------------------------------------


@cli.command(name="revoke")
@click.option("--jti", "-j", required=True, help="jti of the credential to revoke.")
@click.option("--timestamp", "-t", type=int, default=None, help="Unix timestamp to publish at.")
@click.pass_obj
def revoke_command(settings: StatusListSettings, jti: str, timestamp: int | None) -> None:
    """Revoke a credential and republish."""
    console.print(f"> Revoking JWT with jti: {escape(jti)}")
    try:
        service = StatusListService.open(settings)
        service.revoke(jti, now=timestamp)
    except CryptoFailure as exc:
        _fail(exc, EXIT_FATAL)
    except StatusListError as exc:
        _fail(exc)
    console.print(f"> JWT successfully revoked. DSL stored in {settings.publication_file}")


# ------------------------------------------------------------------
# verify
# ------------------------------------------------------------------


@cli.command(name="verify")
@click.option("--status-list", "-s", default=None, help="Path to the status list publication.")
@click.option("--holder-proof", "-p", default=None, help="Path to the holder's proof.")
@click.option(
    "--issuer-thumbprint",
    default=None,
    help="Hex JWK thumbprint the publication must be issued by.",
)
@click.pass_obj
def verify_command(
    settings: StatusListSettings,
    status_list: str | None,
    holder_proof: str | None,
    issuer_thumbprint: str | None,
) -> None:
    """Verify the holder's proof against a publication."""
    status_path = settings.resolve(status_list) if status_list else settings.publication_path
    proof_path = settings.resolve(holder_proof) if holder_proof else settings.holder_proof_path
    console.print(f"> Verifying proof: {escape(str(proof_path))}")
    try:
        publication = Publication.load(status_path, expected_thumbprint=issuer_thumbprint)
        proof = HolderProof.load(proof_path)
        valid = Verifier().verify(publication, proof)
    except AmbiguousResultError as exc:
        _fail(exc, EXIT_FATAL)
    except IdentifierNotFoundError as exc:
        _fail(exc)
    except StatusListError as exc:
        _fail(exc)
    console.print(f"> Proof successfully verified. Revoked: {str(not valid).lower()}")


# ------------------------------------------------------------------
# serve
# ------------------------------------------------------------------


@cli.command(name="serve")
@click.option(
    "--iterations",
    type=int,
    default=None,
    help="Stop after this many scheduled republishes (default: run until interrupted).",
)
@click.pass_obj
def serve_command(settings: StatusListSettings, iterations: int | None) -> None:
    """Republish the status list at every epoch boundary."""
    try:
        service = StatusListService.open(settings)
        service.republish()
    except StatusListError as exc:
        _fail(exc)

    scheduler = service.scheduler()
    console.print(f"> Republishing every {settings.period_seconds}s. Press Ctrl+C to stop.")
    scheduler.start()
    try:
        while iterations is None or scheduler.runs < iterations:
            if scheduler.wait(0.5):
                break
    except KeyboardInterrupt:
        pass
    finally:
        scheduler.stop()

    if isinstance(scheduler.last_error, CryptoFailure):
        _fail(scheduler.last_error, EXIT_FATAL)
    console.print(f"> Scheduler stopped after {scheduler.runs} republish(es)")


# ------------------------------------------------------------------
# print / printjwt
# ------------------------------------------------------------------


@cli.command(name="print")
@click.option("--in", "-i", "in_file", required=True, help="Path to the JSON file.")
@click.pass_obj
def print_command(settings: StatusListSettings, in_file: str) -> None:
    """Print information from a JSON file."""
    console.print(f"> Printing information from file: {escape(in_file)}")
    try:
        data = load_json(settings.resolve(in_file))
    except StatusListError as exc:
        _fail(exc)
    console.print_json(json.dumps(data))


@cli.command(name="printjwt")
@click.option("--in", "-i", "in_file", required=True, help="Path to a JWT or a JSON file containing one.")
@click.pass_obj
def print_jwt_command(settings: StatusListSettings, in_file: str) -> None:
    """Decode and print a JWT without verifying it."""
    console.print(f"> Printing JWT from file: {escape(in_file)}")
    path = settings.resolve(in_file)
    try:
        content = path.read_text(encoding="utf-8").strip()
    except OSError as exc:
        _fail(InputError(f"failed to read file {path}: {exc}"))

    if content.startswith("{"):
        try:
            container = json.loads(content)
        except json.JSONDecodeError as exc:
            _fail(InputError(f"failed to parse JSON: {exc}"))
        content = str(container.get("jwt") or container.get("dsl_jwt") or "")

    try:
        header = jwt.get_unverified_header(content)
        payload = jwt.decode(content, options={"verify_signature": False})
    except jwt.PyJWTError as exc:
        _fail(InputError(f"invalid JWT format: {exc}"))

    table = Table(show_header=False)
    table.add_column("Part", style="cyan")
    table.add_column("Value")
    table.add_row("Header", escape(json.dumps(header, indent=2)))
    table.add_row("Payload", escape(json.dumps(payload, indent=2)))
    table.add_row("Signature", content.rsplit(".", 1)[-1])
    console.print(table)


# ------------------------------------------------------------------
# Helpers
# ------------------------------------------------------------------


def _configure_logging(verbose: bool) -> None:
    """Route package logs through rich; debug level with --verbose."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _fail(exc: Exception, code: int = EXIT_FAILURE) -> NoReturn:
    """Report *exc* on the console and exit with *code*."""
    console.print(f"[red]Error:[/red] {escape(str(exc))}")
    sys.exit(code)


if __name__ == "__main__":
    cli()
