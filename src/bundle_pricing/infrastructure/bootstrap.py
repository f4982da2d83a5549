"""Composition root: wires concrete implementations to domain interfaces.

This is the only place in the codebase that knows about *all* layers.
Every other module depends only on abstractions.
"""

from __future__ import annotations

import os
from pathlib import Path

from bundle_pricing.infrastructure.persistence.json_bundle_rule_repository import (
    JsonBundleRuleRepository,
)
from bundle_pricing.infrastructure.persistence.json_product_repository import (
    JsonProductRepository,
)

DATA_DIR_ENV = "BUNDLE_PRICING_DATA_DIR"

# Resolve data directory relative to the project root.
# When installed in editable mode the project root is the repo root.
_DEFAULT_DATA_DIR = Path(__file__).resolve().parents[3] / "data"


def data_dir() -> Path:
    """Data directory, overridable through ``BUNDLE_PRICING_DATA_DIR``."""
    override = os.environ.get(DATA_DIR_ENV)
    if override:
        return Path(override).expanduser()
    return _DEFAULT_DATA_DIR


def product_repository() -> JsonProductRepository:
    return JsonProductRepository(data_dir() / "products.json")


def bundle_rule_repository() -> JsonBundleRuleRepository:
    return JsonBundleRuleRepository(data_dir() / "bundle_rules.json")
