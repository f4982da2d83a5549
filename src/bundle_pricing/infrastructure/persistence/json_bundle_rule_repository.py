"""JSON-file-backed implementation of BundleRuleRepository."""

from __future__ import annotations

import json
import logging
from decimal import Decimal
from pathlib import Path

from bundle_pricing.domain.model.bundle_rule import BundleRule, CategoryRequirement
from bundle_pricing.domain.model.value_objects import DEFAULT_CURRENCY, Money
from bundle_pricing.domain.repository.bundle_rule_repository import (
    BundleRuleRepository,
)

logger = logging.getLogger("bundle_pricing.persistence")


class JsonBundleRuleRepository(BundleRuleRepository):

    def __init__(self, file_path: Path) -> None:
        self._file_path = file_path
        self._ensure_file()

    # --- BundleRuleRepository interface ---------------------------------------

    def get_by_id(self, rule_id: str) -> BundleRule | None:
        for raw in self._load_raw():
            if raw["id"] == rule_id:
                return self._to_domain(raw)
        return None

    def list_all(self) -> list[BundleRule]:
        return [self._to_domain(raw) for raw in self._load_raw()]

    def save(self, rule: BundleRule) -> None:
        records = self._load_raw()

        # Upsert: replace if exists, otherwise append
        replaced = False
        for i, raw in enumerate(records):
            if raw["id"] == rule.id:
                records[i] = self._to_raw(rule)
                replaced = True
                break
        if not replaced:
            records.append(self._to_raw(rule))

        self._persist_raw(records)

    def delete(self, rule_id: str) -> bool:
        records = self._load_raw()
        kept = [raw for raw in records if raw["id"] != rule_id]
        if len(kept) == len(records):
            return False
        self._persist_raw(kept)
        logger.info("Deleted bundle rule #%s from %s", rule_id, self._file_path)
        return True

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(rule: BundleRule) -> dict:
        return {
            "id": rule.id,
            "name": rule.name,
            "description": rule.description,
            "price": str(rule.price.amount),
            "currency": rule.price.currency,
            "priority": rule.priority,
            "active": rule.active,
            "requirements": [
                {"category": req.category, "quantity": req.quantity}
                for req in rule.requirements
            ],
        }

    @staticmethod
    def _to_domain(raw: dict) -> BundleRule:
        return BundleRule(
            id=raw["id"],
            name=raw["name"],
            description=raw.get("description", ""),
            price=Money(Decimal(raw["price"]), raw.get("currency", DEFAULT_CURRENCY)),
            priority=raw.get("priority", 0),
            active=raw.get("active", True),
            requirements=[
                CategoryRequirement(r["category"], r["quantity"])
                for r in raw["requirements"]
            ],
        )

    # --- File helpers ---------------------------------------------------------

    def _load_raw(self) -> list[dict]:
        return json.loads(self._file_path.read_text(encoding="utf-8"))

    def _persist_raw(self, records: list[dict]) -> None:
        self._file_path.write_text(
            json.dumps(records, indent=2, ensure_ascii=False) + "\n", encoding="utf-8"
        )

    def _ensure_file(self) -> None:
        if not self._file_path.exists():
            self._file_path.parent.mkdir(parents=True, exist_ok=True)
            self._file_path.write_text("[]", encoding="utf-8")
