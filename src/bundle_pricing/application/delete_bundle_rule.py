"""Application service: Delete Bundle Rule use case."""

from __future__ import annotations

from bundle_pricing.domain.exceptions import EntityNotFoundError
from bundle_pricing.domain.repository.bundle_rule_repository import (
    BundleRuleRepository,
)


class DeleteBundleRuleHandler:

    def __init__(self, rule_repo: BundleRuleRepository) -> None:
        self._rule_repo = rule_repo

    def handle(self, rule_id: str) -> None:
        if not self._rule_repo.delete(rule_id):
            raise EntityNotFoundError(f"Bundle rule with ID '{rule_id}' not found")
