"""Domain service: Allocation Engine.

Carves a cart into bundle applications plus individually priced leftovers.

The algorithm is a greedy covering with full re-evaluation:

  1. Score every active rule against the current remainder.
  2. Keep only rules that fit at least once *and* save money.
  3. Apply the best one as many times as the remainder allows.
  4. Repeat on the smaller remainder until nothing beneficial is left.

Rules may compete for the same categories, so the scores are recomputed
after each application instead of planned up front. The result is not
guaranteed to be the global optimum (that problem is NP-hard); it is the
deterministic greedy answer.

The engine does no I/O and keeps no state between calls.
"""

from __future__ import annotations

import logging
from typing import Iterable, Mapping, Sequence

from bundle_pricing.domain.model.bundle_rule import BundleRule
from bundle_pricing.domain.model.cart import CartLine, Remainder
from bundle_pricing.domain.model.pricing import (
    AppliedBundle,
    PricingResult,
    RemainingItem,
    RuleEvaluation,
)
from bundle_pricing.domain.model.product import Product
from bundle_pricing.domain.model.value_objects import DEFAULT_CURRENCY, Money

logger = logging.getLogger("bundle_pricing.engine")


class AllocationEngine:

    def allocate(
        self,
        cart_lines: Sequence[CartLine],
        resolved_products: Mapping[str, Product],
        active_rules: Iterable[BundleRule],
    ) -> PricingResult:
        """Price a cart, applying bundle rules greedily.

        Lines whose product is not in *resolved_products* (or is not
        available) are dropped silently; reporting them is the caller's
        job. Inactive rules, and rules priced in another currency than the
        cart, are ignored.
        """
        remainder = Remainder.from_cart(cart_lines, resolved_products)
        currency = self._currency_of(remainder)
        original_total = remainder.total_value(currency)
        rules = self._usable_rules(active_rules, currency)

        applied: list[AppliedBundle] = []
        while remainder:
            candidates = self.beneficial(self.evaluate_rules(remainder, rules))
            if not candidates:
                break
            best = self.select_best(candidates)
            bundle, remainder = self._apply(best, remainder)
            applied.append(bundle)
            logger.debug(
                "Applied bundle '%s' x%d (charged %s, saved %s); %d units left",
                bundle.rule.name,
                bundle.applications,
                bundle.total_charged,
                bundle.savings,
                remainder.total_quantity,
            )

        remaining = tuple(
            RemainingItem(
                product_id=entry.product.id,
                name=entry.product.name,
                category=entry.product.category,
                unit_price=entry.unit_price,
                quantity=entry.quantity,
            )
            for entry in remainder
        )

        final_total = Money.zero(currency)
        for bundle in applied:
            final_total = final_total + bundle.total_charged
        for item in remaining:
            final_total = final_total + item.subtotal

        # Raises if final > original, which would be an engine defect.
        total_savings = original_total - final_total

        logger.debug(
            "Priced cart: original %s, final %s, savings %s, %d bundle(s)",
            original_total,
            final_total,
            total_savings,
            len(applied),
        )
        return PricingResult(
            original_total=original_total,
            final_total=final_total,
            total_savings=total_savings,
            applied_bundles=tuple(applied),
            remaining_items=remaining,
        )

    def evaluate(
        self,
        cart_lines: Sequence[CartLine],
        resolved_products: Mapping[str, Product],
        rules: Iterable[BundleRule],
    ) -> list[RuleEvaluation]:
        """Score every active rule that fits the whole cart at least once.

        Best deals first, using the same ordering ``allocate`` uses to pick
        its first bundle.
        """
        remainder = Remainder.from_cart(cart_lines, resolved_products)
        usable = self._usable_rules(rules, self._currency_of(remainder))
        evaluations = [
            evaluation
            for evaluation in self.evaluate_rules(remainder, usable)
            if evaluation.max_applications > 0
        ]
        return sorted(evaluations, key=self._rank_key)

    # --- Ranking --------------------------------------------------------------

    @staticmethod
    def evaluate_rules(
        remainder: Remainder, rules: Iterable[BundleRule]
    ) -> list[RuleEvaluation]:
        return [
            RuleEvaluation(
                rule=rule,
                max_applications=rule.max_applications(remainder),
                savings_per_application=rule.savings_per_application(remainder),
                savings_at_max_applications=rule.savings_at_max_applications(remainder),
            )
            for rule in rules
        ]

    @staticmethod
    def beneficial(evaluations: Iterable[RuleEvaluation]) -> list[RuleEvaluation]:
        """Drop rules that cannot be applied or would not save anything."""
        return [e for e in evaluations if e.is_beneficial]

    @classmethod
    def select_best(cls, candidates: Sequence[RuleEvaluation]) -> RuleEvaluation:
        """Greatest savings, then greatest priority, then lowest rule id."""
        if not candidates:
            raise ValueError("select_best() requires at least one candidate")
        return min(candidates, key=cls._rank_key)

    @staticmethod
    def _rank_key(evaluation: RuleEvaluation) -> tuple:
        return (
            -evaluation.savings_at_max_applications.amount,
            -evaluation.rule.priority,
            evaluation.rule.ordering_key,
        )

    # --- Internal helpers -----------------------------------------------------

    @staticmethod
    def _apply(
        evaluation: RuleEvaluation, remainder: Remainder
    ) -> tuple[AppliedBundle, Remainder]:
        rule = evaluation.rule
        applications = evaluation.max_applications
        consumed = rule.select_items(remainder, applications)

        taken: dict[str, int] = {}
        consumed_value = Money.zero(rule.price.currency)
        for item in consumed:
            taken[item.product_id] = taken.get(item.product_id, 0) + item.quantity
            consumed_value = consumed_value + item.value

        total_charged = rule.price * applications
        bundle = AppliedBundle(
            rule=rule,
            applications=applications,
            items_consumed=tuple(consumed),
            total_charged=total_charged,
            savings=consumed_value - total_charged,
        )
        return bundle, remainder.without(taken)

    @staticmethod
    def _usable_rules(rules: Iterable[BundleRule], currency: str) -> list[BundleRule]:
        """Active rules priced in the cart's currency."""
        usable = []
        for rule in rules:
            if not rule.active:
                continue
            if rule.price.currency != currency:
                logger.warning(
                    "Skipping bundle rule #%s: priced in %s, cart is in %s",
                    rule.id,
                    rule.price.currency,
                    currency,
                )
                continue
            usable.append(rule)
        return usable

    @staticmethod
    def _currency_of(remainder: Remainder) -> str:
        for entry in remainder:
            return entry.unit_price.currency
        return DEFAULT_CURRENCY
