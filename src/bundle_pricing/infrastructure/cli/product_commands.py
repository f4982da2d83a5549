"""CLI commands for the Product aggregate."""

from __future__ import annotations

import click

from bundle_pricing.application.add_product import AddProductHandler
from bundle_pricing.application.update_product import UpdateProductHandler
from bundle_pricing.domain.exceptions import DomainException
from bundle_pricing.infrastructure.bootstrap import product_repository


@click.command("add")
@click.option("--name", required=True, help="Product name.")
@click.option("--category", required=True, help="Product category.")
@click.option("--price", required=True, help="Price (e.g. 150000).")
def product_add(name: str, category: str, price: str) -> None:
    """Add a new product to the catalog."""
    handler = AddProductHandler(product_repo=product_repository())

    try:
        product = handler.handle(name=name, category=category, price=price)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Product #{product.id} '{product.name}' ({product.category}) added at {product.price}")


@click.command("list")
def product_list() -> None:
    """List all products in the catalog."""
    repo = product_repository()
    products = repo.list_all()

    if not products:
        click.echo("No products found.")
        return

    click.echo(f"{'ID':<6} {'Name':<20} {'Category':<12} {'Price':>16} {'Available':>10}")
    click.echo("-" * 68)
    for p in products:
        available = "yes" if p.available else "no"
        click.echo(
            f"{p.id:<6} {p.name:<20} {p.category:<12} {str(p.price):>16} {available:>10}"
        )


@click.command("categories")
def product_categories() -> None:
    """List the categories bundle rules can refer to."""
    categories = product_repository().list_categories()
    if not categories:
        click.echo("No categories found.")
        return
    for category in categories:
        click.echo(category)


@click.command("update")
@click.option("--id", "product_id", required=True, help="Product ID.")
@click.option("--price", default=None, help="New price (e.g. 99000).")
@click.option("--available/--unavailable", "available", default=None, help="Set availability.")
def product_update(product_id: str, price: str | None, available: bool | None) -> None:
    """Update a product's price or availability."""
    if price is None and available is None:
        raise click.UsageError("Nothing to update: pass --price and/or --available/--unavailable")

    handler = UpdateProductHandler(product_repo=product_repository())

    try:
        handler.handle(product_id=product_id, new_price=price, available=available)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Product #{product_id} updated.")
