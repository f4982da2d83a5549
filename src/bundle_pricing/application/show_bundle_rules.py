"""Application service: Show Bundle Rules use cases (queries)."""

from __future__ import annotations

from bundle_pricing.application.dto import BundleRuleDTO, RequirementSpec
from bundle_pricing.domain.exceptions import EntityNotFoundError
from bundle_pricing.domain.model.bundle_rule import BundleRule
from bundle_pricing.domain.repository.bundle_rule_repository import (
    BundleRuleRepository,
)


def to_rule_dto(rule: BundleRule) -> BundleRuleDTO:
    return BundleRuleDTO(
        id=rule.id,
        name=rule.name,
        description=rule.description,
        price=str(rule.price),
        priority=rule.priority,
        active=rule.active,
        requirements=[
            RequirementSpec(category=req.category, quantity=req.quantity)
            for req in rule.requirements
        ],
    )


class ListBundleRulesHandler:

    def __init__(self, rule_repo: BundleRuleRepository) -> None:
        self._rule_repo = rule_repo

    def handle(self, active_only: bool = False) -> list[BundleRuleDTO]:
        if active_only:
            rules = self._rule_repo.list_active()
        else:
            rules = sorted(self._rule_repo.list_all(), key=lambda r: -r.priority)
        return [to_rule_dto(rule) for rule in rules]


class ShowBundleRuleHandler:

    def __init__(self, rule_repo: BundleRuleRepository) -> None:
        self._rule_repo = rule_repo

    def handle(self, rule_id: str) -> BundleRuleDTO:
        rule = self._rule_repo.get_by_id(rule_id)
        if rule is None:
            raise EntityNotFoundError(f"Bundle rule with ID '{rule_id}' not found")
        return to_rule_dto(rule)
