"""Application service: Price Cart use case.

Resolves the cart against the catalog, loads the currently active bundle
rules and lets the allocation engine produce the breakdown. Only the
outcome is returned; nothing is persisted.
"""

from __future__ import annotations

import logging

from bundle_pricing.application.cart_resolution import resolve_cart
from bundle_pricing.application.dto import (
    AppliedBundleDTO,
    BundleItemDTO,
    CartItemSpec,
    PricedLineDTO,
    PricingDTO,
    RemainingItemDTO,
)
from bundle_pricing.domain.model.pricing import PricingResult
from bundle_pricing.domain.repository.bundle_rule_repository import (
    BundleRuleRepository,
)
from bundle_pricing.domain.repository.product_repository import ProductRepository
from bundle_pricing.domain.service.allocation_engine import AllocationEngine

logger = logging.getLogger("bundle_pricing.application")


class PriceCartHandler:

    def __init__(
        self,
        product_repo: ProductRepository,
        rule_repo: BundleRuleRepository,
        engine: AllocationEngine | None = None,
    ) -> None:
        self._product_repo = product_repo
        self._rule_repo = rule_repo
        self._engine = engine or AllocationEngine()

    def handle(self, item_specs: list[CartItemSpec]) -> PricingDTO:
        """Price a cart.

        Steps:
        1. Resolve each product name (fail if unknown or unavailable).
        2. Snapshot the active bundle rules.
        3. Let the allocation engine carve the cart into bundles.
        4. Return a DTO.
        """
        result = self.price(item_specs)
        return self._to_dto(result)

    def price(self, item_specs: list[CartItemSpec]) -> PricingResult:
        """Same as ``handle`` but returns the domain result."""
        lines, products = resolve_cart(self._product_repo, item_specs)
        rules = self._rule_repo.list_active()

        result = self._engine.allocate(lines, products, rules)
        logger.info(
            "Priced %d cart line(s): %s -> %s with %d bundle(s)",
            len(lines),
            result.original_total,
            result.final_total,
            len(result.applied_bundles),
        )
        return result

    # --- Mapping --------------------------------------------------------------

    @staticmethod
    def _to_dto(result: PricingResult) -> PricingDTO:
        return PricingDTO(
            original_total=str(result.original_total),
            final_total=str(result.final_total),
            total_savings=str(result.total_savings),
            bundles=[
                AppliedBundleDTO(
                    rule_id=bundle.rule.id,
                    bundle_name=bundle.rule.name,
                    applications=bundle.applications,
                    bundle_price=str(bundle.rule.price),
                    total_charged=str(bundle.total_charged),
                    savings=str(bundle.savings),
                    items=[
                        BundleItemDTO(
                            product_name=item.name,
                            category=item.category,
                            quantity=item.quantity,
                            unit_price=str(item.unit_price),
                        )
                        for item in bundle.items_consumed
                    ],
                )
                for bundle in result.applied_bundles
            ],
            remaining_items=[
                RemainingItemDTO(
                    product_name=item.name,
                    quantity=item.quantity,
                    unit_price=str(item.unit_price),
                    subtotal=str(item.subtotal),
                )
                for item in result.remaining_items
            ],
            lines=[
                PricedLineDTO(
                    product_id=line.product_id,
                    product_name=line.name,
                    quantity=line.quantity,
                    unit_price=str(line.unit_price),
                    bundle_name=line.bundle_name,
                )
                for line in result.expand()
            ],
        )
