"""CLI commands for the BundleRule aggregate."""

from __future__ import annotations

import click

from bundle_pricing.application.add_bundle_rule import AddBundleRuleHandler
from bundle_pricing.application.delete_bundle_rule import DeleteBundleRuleHandler
from bundle_pricing.application.dto import BundleRuleDTO, RequirementSpec
from bundle_pricing.application.show_bundle_rules import (
    ListBundleRulesHandler,
    ShowBundleRuleHandler,
)
from bundle_pricing.application.update_bundle_rule import UpdateBundleRuleHandler
from bundle_pricing.domain.exceptions import DomainException
from bundle_pricing.infrastructure.bootstrap import (
    bundle_rule_repository,
    product_repository,
)
from bundle_pricing.infrastructure.cli.parsing import parse_pairs


def _parse_requirements(raw: str) -> list[RequirementSpec]:
    """Parse 'Shirt:2,Hat:1' into RequirementSpec list."""
    return [
        RequirementSpec(category=category, quantity=qty)
        for category, qty in parse_pairs(raw, label="Category")
    ]


def _format_requirements(dto: BundleRuleDTO) -> str:
    return " + ".join(f"{r.quantity}x{r.category}" for r in dto.requirements)


@click.command("add")
@click.option("--name", required=True, help="Bundle name.")
@click.option("--price", required=True, help="Bundle price (e.g. 200000).")
@click.option("--requires", required=True, help="Requirements as 'Category:Qty,Category:Qty'.")
@click.option("--priority", default=0, type=int, show_default=True, help="Tie-break priority.")
@click.option("--description", default="", help="Free-text description.")
def bundle_add(name: str, price: str, requires: str, priority: int, description: str) -> None:
    """Add a new bundle rule."""
    requirements = _parse_requirements(requires)
    handler = AddBundleRuleHandler(
        rule_repo=bundle_rule_repository(),
        product_repo=product_repository(),
    )

    try:
        rule = handler.handle(
            name=name,
            price=price,
            requirements=requirements,
            priority=priority,
            description=description,
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Bundle #{rule.id} '{rule.name}' added at {rule.price}")


@click.command("list")
@click.option("--active", "active_only", is_flag=True, default=False, help="Only active rules.")
def bundle_list(active_only: bool) -> None:
    """List bundle rules, highest priority first."""
    handler = ListBundleRulesHandler(rule_repo=bundle_rule_repository())
    rules = handler.handle(active_only=active_only)

    if not rules:
        click.echo("No bundle rules found.")
        return

    click.echo(f"{'ID':<6} {'Name':<24} {'Price':>16} {'Prio':>5} {'Active':>7}  Requires")
    click.echo("-" * 80)
    for rule in rules:
        active = "yes" if rule.active else "no"
        click.echo(
            f"{rule.id:<6} {rule.name:<24} {rule.price:>16} {rule.priority:>5} {active:>7}  "
            f"{_format_requirements(rule)}"
        )


@click.command("show")
@click.option("--id", "rule_id", required=True, help="Bundle rule ID.")
def bundle_show(rule_id: str) -> None:
    """Show a single bundle rule."""
    handler = ShowBundleRuleHandler(rule_repo=bundle_rule_repository())

    try:
        rule = handler.handle(rule_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Bundle #{rule.id}  '{rule.name}'  ({'active' if rule.active else 'inactive'})")
    if rule.description:
        click.echo(f"  {rule.description}")
    click.echo(f"  Price:    {rule.price}")
    click.echo(f"  Priority: {rule.priority}")
    click.echo(f"  Requires: {_format_requirements(rule)}")


@click.command("update")
@click.option("--id", "rule_id", required=True, help="Bundle rule ID.")
@click.option("--name", default=None, help="New name.")
@click.option("--description", default=None, help="New description.")
@click.option("--price", default=None, help="New bundle price.")
@click.option("--priority", default=None, type=int, help="New priority.")
@click.option("--requires", default=None, help="New requirements as 'Category:Qty,...'.")
@click.option("--active/--inactive", "active", default=None, help="Activate or deactivate.")
def bundle_update(
    rule_id: str,
    name: str | None,
    description: str | None,
    price: str | None,
    priority: int | None,
    requires: str | None,
    active: bool | None,
) -> None:
    """Update a bundle rule."""
    handler = UpdateBundleRuleHandler(
        rule_repo=bundle_rule_repository(),
        product_repo=product_repository(),
    )
    requirements = _parse_requirements(requires) if requires else None

    try:
        handler.handle(
            rule_id,
            name=name,
            description=description,
            price=price,
            priority=priority,
            requirements=requirements,
            active=active,
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Bundle #{rule_id} updated.")


@click.command("delete")
@click.option("--id", "rule_id", required=True, help="Bundle rule ID.")
def bundle_delete(rule_id: str) -> None:
    """Delete a bundle rule."""
    handler = DeleteBundleRuleHandler(rule_repo=bundle_rule_repository())

    try:
        handler.handle(rule_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Bundle #{rule_id} deleted.")
