"""Pricing outcome: what the allocation engine hands back to its caller.

Everything here is immutable and created fresh per pricing call.
"""

from __future__ import annotations

from dataclasses import dataclass

from bundle_pricing.domain.model.bundle_rule import BundleRule, ConsumedItem
from bundle_pricing.domain.model.value_objects import Money


@dataclass(frozen=True)
class AppliedBundle:
    """A bundle rule applied ``applications`` times to the cart."""

    rule: BundleRule
    applications: int
    items_consumed: tuple[ConsumedItem, ...]
    total_charged: Money
    savings: Money

    @property
    def consumed_value(self) -> Money:
        return self.total_charged + self.savings

    @property
    def consumed_quantity(self) -> int:
        return sum(item.quantity for item in self.items_consumed)


@dataclass(frozen=True)
class RemainingItem:
    """Cart units left over after all bundles, priced individually."""

    product_id: str
    name: str
    category: str
    unit_price: Money
    quantity: int

    @property
    def subtotal(self) -> Money:
        return self.unit_price * self.quantity


@dataclass(frozen=True)
class RuleEvaluation:
    """How a single rule scores against a cart."""

    rule: BundleRule
    max_applications: int
    savings_per_application: Money
    savings_at_max_applications: Money

    @property
    def is_beneficial(self) -> bool:
        return self.max_applications > 0 and not self.savings_at_max_applications.is_zero


@dataclass(frozen=True)
class PricedLine:
    """One product quantity as it should appear on an order record.

    ``bundle_rule_id`` is None for units priced individually.
    """

    product_id: str
    name: str
    unit_price: Money
    quantity: int
    bundle_rule_id: str | None = None
    bundle_name: str | None = None


@dataclass(frozen=True)
class PricingResult:
    """Itemized result of pricing one cart.

    Invariants:
    - ``original_total == final_total + total_savings``
    - ``final_total`` is the sum of every bundle charge plus every
      remaining subtotal
    """

    original_total: Money
    final_total: Money
    total_savings: Money
    applied_bundles: tuple[AppliedBundle, ...]
    remaining_items: tuple[RemainingItem, ...]

    @property
    def has_bundles(self) -> bool:
        return bool(self.applied_bundles)

    @property
    def bundles_total(self) -> Money:
        total = Money.zero(self.final_total.currency)
        for bundle in self.applied_bundles:
            total = total + bundle.total_charged
        return total

    @property
    def remaining_total(self) -> Money:
        total = Money.zero(self.final_total.currency)
        for item in self.remaining_items:
            total = total + item.subtotal
        return total

    def expand(self) -> list[PricedLine]:
        """Flatten bundles back into per-product lines.

        Bundle units come first, in application order, tagged with the rule
        that consumed them; individually priced units follow.
        """
        lines: list[PricedLine] = []
        for bundle in self.applied_bundles:
            for item in bundle.items_consumed:
                lines.append(
                    PricedLine(
                        product_id=item.product_id,
                        name=item.name,
                        unit_price=item.unit_price,
                        quantity=item.quantity,
                        bundle_rule_id=bundle.rule.id,
                        bundle_name=bundle.rule.name,
                    )
                )
        for item in self.remaining_items:
            lines.append(
                PricedLine(
                    product_id=item.product_id,
                    name=item.name,
                    unit_price=item.unit_price,
                    quantity=item.quantity,
                )
            )
        return lines
