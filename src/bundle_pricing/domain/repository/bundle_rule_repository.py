"""Abstract repository for BundleRule aggregate."""

from __future__ import annotations

from abc import ABC, abstractmethod

from bundle_pricing.domain.model.bundle_rule import BundleRule


class BundleRuleRepository(ABC):

    @abstractmethod
    def get_by_id(self, rule_id: str) -> BundleRule | None:
        """Return a rule by its ID, or None if not found."""

    @abstractmethod
    def list_all(self) -> list[BundleRule]:
        """Return every rule, active or not, in storage order."""

    @abstractmethod
    def save(self, rule: BundleRule) -> None:
        """Persist a new or updated rule."""

    @abstractmethod
    def delete(self, rule_id: str) -> bool:
        """Remove a rule. Returns False if it did not exist."""

    def list_active(self) -> list[BundleRule]:
        """Active rules, highest priority first (stable for equal priority)."""
        active = [rule for rule in self.list_all() if rule.active]
        return sorted(active, key=lambda rule: -rule.priority)
