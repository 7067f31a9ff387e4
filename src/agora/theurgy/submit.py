"""
Theurgy Submit - list a product on the marketplace.

Flow:
1. Convert the human price (ether units) to wei
2. Call Marketplace.createProduct(name, price), paying gas
3. Report the transaction hash (no confirmation wait)
"""

from __future__ import annotations

import sys
from decimal import Decimal
from typing import Callable, Union

import click
import structlog

from ..errors import EncodingError, MarketplaceError
from ..models import PendingTransaction
from ..pneuma.marketplace import CREATE_PRODUCT, Marketplace
from ..utils import format_ether, parse_ether
from .session import Session

logger = structlog.get_logger(__name__)


def submit_product(
    marketplace: Marketplace,
    name: str,
    price: Union[str, int, Decimal],
    report: Callable[[str], None] = click.echo,
) -> PendingTransaction:
    """
    List a product priced in native currency units.

    Args:
        marketplace: Marketplace binding
        name: Product name
        price: Price in ether, e.g. "1" or "0.25"
        report: Status line sink

    Returns:
        PendingTransaction for the listing

    Raises:
        EncodingError: If the price cannot be expressed in wei
        MarketplaceError: Any failure from the binding or the node
    """
    try:
        price_wei = parse_ether(price)
    except ValueError as exc:
        raise EncodingError(str(exc), function=CREATE_PRODUCT, stage="convert") from exc

    logger.info("creating_product", name=name, price_wei=price_wei)
    report(f"Creating product: {name}, price: {format_ether(price_wei)} ETH ({price_wei} wei)")

    pending = marketplace.create_product(name, price_wei)

    logger.info("product_submitted", tx_hash=pending.tx_hash, nonce=pending.nonce)
    report(f"Transaction submitted. Tx Hash: {pending.tx_hash}")
    return pending


@click.command("create-product")
@click.argument("name")
@click.argument("price")
@click.pass_obj
def create_product(session: Session, name: str, price: str) -> None:
    """
    List a product for PRICE ether.

    Submits createProduct(NAME, PRICE in wei) from your EOA and prints the
    transaction hash.  Confirmation is not awaited.
    """
    try:
        marketplace = session.marketplace()
        click.echo(f"  Seller: {marketplace.client.address}")
        click.echo(f"  Contract: {marketplace.address}")
        click.echo("")
        submit_product(marketplace, name, price)
    except MarketplaceError as exc:
        click.secho(f"Submission failed: {exc}", fg="red")
        sys.exit(exc.exit_code)
