import logging

import click

from bundle_pricing.infrastructure.cli.bundle_commands import (
    bundle_add,
    bundle_delete,
    bundle_list,
    bundle_show,
    bundle_update,
)
from bundle_pricing.infrastructure.cli.cart_commands import cart_detect, cart_price
from bundle_pricing.infrastructure.cli.product_commands import (
    product_add,
    product_categories,
    product_list,
    product_update,
)

_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


@click.group()
@click.option("-v", "--verbose", count=True, help="Log more (-v info, -vv debug).")
def cli(verbose: int) -> None:
    """Bundle Pricing: combo discounts for shopping carts"""
    if verbose:
        level = logging.DEBUG if verbose > 1 else logging.INFO
        logging.basicConfig(level=level, format=_LOG_FORMAT)


@cli.group()
def cart() -> None:
    """Price carts."""


@cli.group()
def bundle() -> None:
    """Manage bundle rules."""


@cli.group()
def product() -> None:
    """Manage products."""


# Register subcommands
cart.add_command(cart_price)
cart.add_command(cart_detect)
bundle.add_command(bundle_add)
bundle.add_command(bundle_list)
bundle.add_command(bundle_show)
bundle.add_command(bundle_update)
bundle.add_command(bundle_delete)
product.add_command(product_add)
product.add_command(product_list)
product.add_command(product_categories)
product.add_command(product_update)
