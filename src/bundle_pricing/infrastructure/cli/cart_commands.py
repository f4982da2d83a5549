"""CLI commands for pricing carts."""

from __future__ import annotations

import dataclasses
import json

import click

from bundle_pricing.application.detect_bundles import DetectBundlesHandler
from bundle_pricing.application.dto import CartItemSpec, PricingDTO
from bundle_pricing.application.price_cart import PriceCartHandler
from bundle_pricing.domain.exceptions import DomainException
from bundle_pricing.infrastructure.bootstrap import (
    bundle_rule_repository,
    product_repository,
)
from bundle_pricing.infrastructure.cli.parsing import parse_pairs


def _parse_items(raw: str) -> list[CartItemSpec]:
    return [CartItemSpec(product_name=name, quantity=qty) for name, qty in parse_pairs(raw)]


def _display_pricing(dto: PricingDTO) -> None:
    for bundle in dto.bundles:
        click.echo(
            f"Bundle #{bundle.rule_id} '{bundle.bundle_name}' x{bundle.applications}"
            f"  (charged {bundle.total_charged}, saved {bundle.savings})"
        )
        for item in bundle.items:
            click.echo(
                f"    {item.product_name:<20} {item.category:<12} {item.quantity:>5} {item.unit_price:>16}"
            )
    if dto.bundles:
        click.echo()

    if dto.remaining_items:
        click.echo(f"  {'Product':<20} {'Qty':>5} {'Price':>16} {'Subtotal':>16}")
        click.echo(f"  {'-'*60}")
        for item in dto.remaining_items:
            click.echo(
                f"  {item.product_name:<20} {item.quantity:>5} {item.unit_price:>16} {item.subtotal:>16}"
            )
        click.echo(f"  {'-'*60}")

    click.echo(f"  {'Original Total':<27} {dto.original_total:>32}")
    click.echo(f"  {'Savings':<27} {dto.total_savings:>32}")
    click.echo(f"  {'Final Total':<27} {dto.final_total:>32}")


@click.command("price")
@click.option("--items", required=True, help="Items as 'Product:Qty,Product:Qty'.")
@click.option("--json", "as_json", is_flag=True, default=False, help="Print the result as JSON.")
def cart_price(items: str, as_json: bool) -> None:
    """Price a cart, applying the best bundle combination."""
    specs = _parse_items(items)

    handler = PriceCartHandler(
        product_repo=product_repository(),
        rule_repo=bundle_rule_repository(),
    )

    try:
        dto = handler.handle(specs)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if as_json:
        click.echo(json.dumps(dataclasses.asdict(dto), indent=2, ensure_ascii=False))
        return
    _display_pricing(dto)


@click.command("detect")
@click.option("--items", required=True, help="Items as 'Product:Qty,Product:Qty'.")
def cart_detect(items: str) -> None:
    """List the bundles a cart qualifies for, best deal first."""
    specs = _parse_items(items)

    handler = DetectBundlesHandler(
        product_repo=product_repository(),
        rule_repo=bundle_rule_repository(),
    )

    try:
        offers = handler.handle(specs)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if not offers:
        click.echo("No applicable bundles.")
        return

    click.echo(f"{'ID':<6} {'Bundle':<24} {'Times':>6} {'Per bundle':>16} {'Total':>16}")
    click.echo("-" * 72)
    for offer in offers:
        marker = "" if offer.is_better_deal else "  (no saving)"
        click.echo(
            f"{offer.rule_id:<6} {offer.bundle_name:<24} {offer.max_applications:>6} "
            f"{offer.savings_per_application:>16} {offer.total_savings:>16}{marker}"
        )
