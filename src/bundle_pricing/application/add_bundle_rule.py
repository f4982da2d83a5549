"""Application service: Add Bundle Rule use case."""

from __future__ import annotations

import logging

from bundle_pricing.application.dto import RequirementSpec
from bundle_pricing.domain.exceptions import ValidationError
from bundle_pricing.domain.model.bundle_rule import BundleRule, CategoryRequirement
from bundle_pricing.domain.model.value_objects import Money
from bundle_pricing.domain.repository.bundle_rule_repository import (
    BundleRuleRepository,
)
from bundle_pricing.domain.repository.product_repository import ProductRepository

logger = logging.getLogger("bundle_pricing.application")


def build_requirements(
    product_repo: ProductRepository,
    specs: list[RequirementSpec],
) -> list[CategoryRequirement]:
    """Turn specs into requirements, rejecting categories the catalog lacks."""
    known = {p.category for p in product_repo.list_all()}
    unknown = [spec.category for spec in specs if spec.category not in known]
    if unknown:
        raise ValidationError(f"Unknown categories: {', '.join(unknown)}")
    return [CategoryRequirement(spec.category, spec.quantity) for spec in specs]


class AddBundleRuleHandler:

    def __init__(
        self,
        rule_repo: BundleRuleRepository,
        product_repo: ProductRepository,
    ) -> None:
        self._rule_repo = rule_repo
        self._product_repo = product_repo

    def handle(
        self,
        name: str,
        price: str,
        requirements: list[RequirementSpec],
        priority: int = 0,
        description: str = "",
    ) -> BundleRule:
        """Add a new, active bundle rule."""
        if not name or not name.strip():
            raise ValidationError("Bundle name is required")

        # Auto-assign ID based on existing rules
        numeric_ids = [
            int(r.id) for r in self._rule_repo.list_all() if r.id.isascii() and r.id.isdigit()
        ]
        next_id = str(max(numeric_ids) + 1) if numeric_ids else "1"

        rule = BundleRule(
            id=next_id,
            name=name.strip(),
            price=Money.of(price),
            requirements=build_requirements(self._product_repo, requirements),
            priority=priority,
            description=description.strip(),
        )
        self._rule_repo.save(rule)
        logger.info("Added bundle rule #%s '%s' at %s", rule.id, rule.name, rule.price)
        return rule
