"""
Agora CLI

Command-line client for the on-chain marketplace contract.

Commands:
  create-product  - List a product (sends a transaction)
  get-product     - Show a product record (read-only call)
  run             - List "Old Phone" for 1 ETH, then fetch product 1
  whoami          - Show the signing address
  abi             - Show the contract interface and selectors
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Optional

import click

from .config import LOG_LEVEL_VAR
from .errors import MarketplaceError
from .log import configure_logging
from .pneuma.abi import describe, load_interface
from .pneuma.marketplace import marketplace_interface
from .sigil.eth import SigningIdentity, load_private_key
from .theurgy.session import Session


# ============ Constants ============

VERSION = "0.1.0"


# ============ Main CLI Group ============


@click.group()
@click.version_option(version=VERSION, prog_name="agora")
@click.option(
    "--env-file",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Load settings from this .env file",
)
@click.option("--rpc-url", help="JSON-RPC endpoint (default: $INFURA_URL)")
@click.option("--contract", "contract_address", help="Marketplace address (default: $MARKETPLACE_ADDRESS)")
@click.option(
    "--abi",
    "abi_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Interface JSON (ABI list or compiler artifact)",
)
@click.option(
    "--log-level",
    envvar=LOG_LEVEL_VAR,
    default="WARNING",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    help="Log verbosity",
)
@click.option("--json-logs", is_flag=True, help="Emit logs as JSON lines")
@click.pass_context
def cli(
    ctx: click.Context,
    env_file: Optional[Path],
    rpc_url: Optional[str],
    contract_address: Optional[str],
    abi_path: Optional[Path],
    log_level: str,
    json_logs: bool,
) -> None:
    """Agora: marketplace contract client."""
    configure_logging(log_level, format_json=json_logs)
    session = ctx.ensure_object(Session)
    session.env_path = env_file
    session.rpc_url = rpc_url
    session.contract_address = contract_address
    session.abi_path = abi_path


# ============ Top-level Commands ============

from .theurgy.fetch import fetch_product, get_product
from .theurgy.submit import create_product, submit_product

cli.add_command(create_product)
cli.add_command(get_product)


@cli.command()
@click.option("--name", default="Old Phone", show_default=True, help="Product name")
@click.option("--price", default="1", show_default=True, help="Price in ETH")
@click.option("--product-id", default=1, show_default=True, type=click.IntRange(min=0))
@click.pass_obj
def run(session: Session, name: str, price: str, product_id: int) -> None:
    """List a product, then fetch a product record."""
    try:
        marketplace = session.marketplace()
        submit_product(marketplace, name, price)
        fetch_product(marketplace, product_id)
    except MarketplaceError as exc:
        click.secho(f"ERROR: {exc}", fg="red")
        sys.exit(exc.exit_code)


# ============ Identity ============


@cli.command()
@click.option("--balance", is_flag=True, help="Also query the balance (network call)")
@click.pass_obj
def whoami(session: Session, balance: bool) -> None:
    """Show the signing address and redacted key."""
    try:
        if not balance:
            identity = SigningIdentity.from_key(load_private_key(session.env_path))
            click.echo(f"Address: {identity.address}")
            click.echo(f"Key: {identity.redacted()}")
            return
        client = session.marketplace().client
        click.echo(f"Address: {client.address}")
        click.echo(f"Key: {client.identity.redacted()}")
        wei = client.balance()
        click.echo(f"Balance: {wei} wei")
    except MarketplaceError as exc:
        click.secho(f"ERROR: {exc}", fg="red")
        sys.exit(exc.exit_code)


# ============ Interface ============


@cli.command()
@click.pass_obj
def abi(session: Session) -> None:
    """Show the contract interface."""
    try:
        interface = load_interface(session.abi_path) if session.abi_path else marketplace_interface()
    except MarketplaceError as exc:
        click.secho(f"ERROR: {exc}", fg="red")
        sys.exit(exc.exit_code)

    for row in describe(interface):
        line = f"  {row['selector']}  {row['signature']}  [{row['mutability']}]"
        if row["returns"]:
            line += f" -> {row['returns']}"
        click.echo(line)


# ============ Entry Points ============


def main() -> None:
    """Agora CLI entry point."""
    cli()


if __name__ == "__main__":
    main()
