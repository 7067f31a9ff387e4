"""
Theurgy Fetch - read a product record from the marketplace.

Read-only: no gas, no signature beyond the eth_call sender field.
"""

from __future__ import annotations

import json
import sys
from typing import Callable

import click
import structlog

from ..errors import MarketplaceError
from ..models import Product
from ..pneuma.marketplace import Marketplace
from .session import Session

logger = structlog.get_logger(__name__)


def fetch_product(
    marketplace: Marketplace,
    product_id: int,
    report: Callable[[str], None] = click.echo,
) -> Product:
    """
    Fetch and report a product record.

    Raises:
        MarketplaceError: Any failure from the binding or the node; no
            partial record is ever reported
    """
    logger.info("fetching_product", product_id=product_id)
    report(f"Fetching details for product ID: {product_id}")

    product = marketplace.get_product(product_id)

    logger.info("product_fetched", product_id=product.id, sold=product.sold)
    report(
        f"Product details - ID: {product.id}, Name: {product.name}, "
        f"Price: {product.price} wei ({product.price_ether} ETH), "
        f"Seller: {product.seller}, Sold: {product.sold}"
    )
    return product


def _print_product(product: Product) -> None:
    click.echo(f"  Description: {product.description or '-'}")
    click.echo(f"  Category: {product.category or '-'}")
    listed_at = product.listed_at
    click.echo(f"  Listed: {listed_at.isoformat() if listed_at else product.timestamp}")
    if product.sold:
        click.echo(f"  Buyer: {product.buyer}")


@click.command("get-product")
@click.argument("product_id", type=click.IntRange(min=0))
@click.option("--json", "as_json", is_flag=True, help="Print the record as JSON")
@click.pass_obj
def get_product(session: Session, product_id: int, as_json: bool) -> None:
    """Show the on-chain record for PRODUCT_ID."""
    try:
        marketplace = session.marketplace()
        if as_json:
            product = marketplace.get_product(product_id)
            click.echo(json.dumps(product.to_dict(), indent=2))
            return
        product = fetch_product(marketplace, product_id)
        _print_product(product)
    except MarketplaceError as exc:
        click.secho(f"Fetch failed: {exc}", fg="red")
        sys.exit(exc.exit_code)
