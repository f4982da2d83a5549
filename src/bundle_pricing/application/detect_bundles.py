"""Application service: Detect Bundles use case (query).

Lists every active bundle rule the cart could use, best deal first,
without committing to an allocation.
"""

from __future__ import annotations

from bundle_pricing.application.cart_resolution import resolve_cart
from bundle_pricing.application.dto import BundleOfferDTO, CartItemSpec
from bundle_pricing.domain.model.pricing import RuleEvaluation
from bundle_pricing.domain.repository.bundle_rule_repository import (
    BundleRuleRepository,
)
from bundle_pricing.domain.repository.product_repository import ProductRepository
from bundle_pricing.domain.service.allocation_engine import AllocationEngine


class DetectBundlesHandler:

    def __init__(
        self,
        product_repo: ProductRepository,
        rule_repo: BundleRuleRepository,
        engine: AllocationEngine | None = None,
    ) -> None:
        self._product_repo = product_repo
        self._rule_repo = rule_repo
        self._engine = engine or AllocationEngine()

    def handle(self, item_specs: list[CartItemSpec]) -> list[BundleOfferDTO]:
        lines, products = resolve_cart(self._product_repo, item_specs)
        evaluations = self._engine.evaluate(
            lines, products, self._rule_repo.list_active()
        )
        return [self._to_dto(e) for e in evaluations]

    @staticmethod
    def _to_dto(evaluation: RuleEvaluation) -> BundleOfferDTO:
        rule = evaluation.rule
        return BundleOfferDTO(
            rule_id=rule.id,
            bundle_name=rule.name,
            bundle_price=str(rule.price),
            priority=rule.priority,
            max_applications=evaluation.max_applications,
            savings_per_application=str(evaluation.savings_per_application),
            total_savings=str(evaluation.savings_at_max_applications),
            is_better_deal=evaluation.is_beneficial,
        )
