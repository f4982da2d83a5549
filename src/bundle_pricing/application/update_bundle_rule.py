"""Application service: Update Bundle Rule use case.

Only the fields that are passed are changed. Deactivating a rule takes it
out of every subsequent pricing call; already priced carts are unaffected.
"""

from __future__ import annotations

import logging

from bundle_pricing.application.add_bundle_rule import build_requirements
from bundle_pricing.application.dto import RequirementSpec
from bundle_pricing.domain.exceptions import EntityNotFoundError
from bundle_pricing.domain.model.value_objects import Money
from bundle_pricing.domain.repository.bundle_rule_repository import (
    BundleRuleRepository,
)
from bundle_pricing.domain.repository.product_repository import ProductRepository

logger = logging.getLogger("bundle_pricing.application")


class UpdateBundleRuleHandler:

    def __init__(
        self,
        rule_repo: BundleRuleRepository,
        product_repo: ProductRepository,
    ) -> None:
        self._rule_repo = rule_repo
        self._product_repo = product_repo

    def handle(
        self,
        rule_id: str,
        name: str | None = None,
        description: str | None = None,
        price: str | None = None,
        priority: int | None = None,
        requirements: list[RequirementSpec] | None = None,
        active: bool | None = None,
    ) -> None:
        rule = self._rule_repo.get_by_id(rule_id)
        if rule is None:
            raise EntityNotFoundError(f"Bundle rule with ID '{rule_id}' not found")

        if name is not None:
            rule.rename(name)
        if description is not None:
            rule.set_description(description)
        if price is not None:
            rule.update_price(Money.of(price))
        if priority is not None:
            rule.set_priority(priority)
        if requirements is not None:
            rule.replace_requirements(build_requirements(self._product_repo, requirements))
        if active is True:
            rule.activate()
        elif active is False:
            rule.deactivate()

        self._rule_repo.save(rule)
        logger.info("Updated bundle rule #%s", rule.id)
