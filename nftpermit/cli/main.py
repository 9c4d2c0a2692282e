"""
nftpermit.cli.main — developer tooling for permit digests and signatures.

Implements:
  - nftpermit domain-separator           Domain separator of the configured domain
  - nftpermit digest                     EIP-712 digest of a permit
  - nftpermit typed-data                 eth_signTypedData_v4 JSON for wallets
  - nftpermit recover                    Signer of a digest/signature pair

Domain options fall back to the NFTPERMIT_* environment (see nftpermit.config).

Examples:
  nftpermit digest --spender 0xabc… --asset-id 0 --nonce 0 --deadline 1900000000
  nftpermit recover --digest 0x… --signature 0x…
"""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, Optional

import typer

from .. import logging as plog
from ..config import load_config
from ..crypto.recover import recover as recover_signer
from ..encoding.typed_data import domain_separator as compute_domain_separator
from ..encoding.typed_data import permit_digest, permit_typed_data
from ..errors import ConfigError, SignatureError
from ..types.domain import DomainContext
from ..types.permit import PermitMessage
from ..utils.hash import from_hex, to_hex
from ..version import version_string

log = logging.getLogger(__name__)

app = typer.Typer(
    name="nftpermit",
    help="Permit digest, typed-data and signature tooling",
    no_args_is_help=True,
    add_completion=False,
)


class GlobalContext:
    def __init__(self) -> None:
        self.overrides: Dict[str, Any] = {}
        self.json_output: bool = False


_ctx = GlobalContext()


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(version_string())
        raise typer.Exit()


@app.callback()
def main_callback(
    name: Optional[str] = typer.Option(None, "--name", help="Domain name"),
    version: Optional[str] = typer.Option(None, "--domain-version", help="Domain version"),
    chain_id: Optional[int] = typer.Option(None, "--chain-id", help="Chain id"),
    verifying_contract: Optional[str] = typer.Option(
        None, "--verifying-contract", help="Registry / token address"
    ),
    json_output: bool = typer.Option(False, "--json", help="Output JSON"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
    show_version: bool = typer.Option(
        False, "--version", callback=_version_callback, is_eager=True, help="Print version"
    ),
) -> None:
    """
    Offline permit tooling. Domain flags override NFTPERMIT_* environment values.
    """
    overrides: Dict[str, Any] = {}
    if name is not None:
        overrides["name"] = name
    if version is not None:
        overrides["version"] = version
    if chain_id is not None:
        overrides["chain_id"] = chain_id
    if verifying_contract is not None:
        overrides["verifying_contract"] = verifying_contract
    if verbose:
        overrides["log_level"] = "DEBUG"
    _ctx.overrides = overrides
    _ctx.json_output = json_output


def _domain() -> DomainContext:
    try:
        cfg = load_config(overrides=_ctx.overrides)
    except ConfigError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(2)
    plog.configure_from_config(cfg)
    return cfg.domain()


def _message(spender: str, asset_id: int, nonce: int, deadline: int) -> PermitMessage:
    try:
        return PermitMessage(spender=spender, asset_id=asset_id, nonce=nonce, deadline=deadline)
    except (TypeError, ValueError) as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(2)


def _emit(key: str, value: str) -> None:
    if _ctx.json_output:
        typer.echo(json.dumps({key: value}))
    else:
        typer.echo(value)


@app.command("domain-separator")
def domain_separator_cmd() -> None:
    """Print the EIP-712 domain separator."""
    domain = _domain()
    _emit("domainSeparator", to_hex(compute_domain_separator(domain)))


@app.command()
def digest(
    spender: str = typer.Option(..., "--spender", help="Identity being approved"),
    asset_id: int = typer.Option(..., "--asset-id", help="Asset (token) id"),
    nonce: int = typer.Option(..., "--nonce", help="Current asset nonce"),
    deadline: int = typer.Option(..., "--deadline", help="Unix timestamp"),
) -> None:
    """Print the 32-byte digest a permit signature must cover."""
    domain = _domain()
    msg = _message(spender, asset_id, nonce, deadline)
    out = to_hex(permit_digest(domain, msg))
    log.debug("digest computed", extra={"asset_id": asset_id})
    _emit("digest", out)


@app.command("typed-data")
def typed_data(
    spender: str = typer.Option(..., "--spender", help="Identity being approved"),
    asset_id: int = typer.Option(..., "--asset-id", help="Asset (token) id"),
    nonce: int = typer.Option(..., "--nonce", help="Current asset nonce"),
    deadline: int = typer.Option(..., "--deadline", help="Unix timestamp"),
) -> None:
    """Print the eth_signTypedData_v4 document for a permit."""
    domain = _domain()
    msg = _message(spender, asset_id, nonce, deadline)
    typer.echo(json.dumps(permit_typed_data(domain, msg), indent=2))


@app.command()
def recover(
    digest_hex: str = typer.Option(..., "--digest", help="32-byte digest (hex)"),
    signature: str = typer.Option(..., "--signature", help="65- or 64-byte signature (hex)"),
) -> None:
    """Print the identity that signed DIGEST."""
    try:
        raw = from_hex(digest_hex)
    except ValueError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(2)
    try:
        signer = recover_signer(raw, signature)
    except SignatureError as e:
        typer.echo(f"Error: {type(e).__name__}: {e}", err=True)
        raise typer.Exit(1)
    _emit("signer", signer)


def main() -> None:
    """Entry point for the nftpermit CLI."""
    app()


if __name__ == "__main__":
    main()
