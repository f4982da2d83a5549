"""Data Transfer Objects: plain containers that cross layer boundaries.

DTOs carry data between the CLI and application layers without
exposing domain internals to the outside world. Money values are
pre-formatted strings.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class CartItemSpec:
    """Input: what the customer put in the cart (product name + quantity)."""

    product_name: str
    quantity: int


@dataclass(frozen=True)
class RequirementSpec:
    """Input: one category requirement of a bundle rule."""

    category: str
    quantity: int


@dataclass(frozen=True)
class BundleItemDTO:
    product_name: str
    category: str
    quantity: int
    unit_price: str


@dataclass(frozen=True)
class AppliedBundleDTO:
    rule_id: str
    bundle_name: str
    applications: int
    bundle_price: str
    total_charged: str
    savings: str
    items: list[BundleItemDTO]


@dataclass(frozen=True)
class RemainingItemDTO:
    product_name: str
    quantity: int
    unit_price: str
    subtotal: str


@dataclass(frozen=True)
class PricedLineDTO:
    """Output: one per-product line for an order record."""

    product_id: str
    product_name: str
    quantity: int
    unit_price: str
    bundle_name: str | None


@dataclass(frozen=True)
class PricingDTO:
    """Output: a priced cart as displayed to the user."""

    original_total: str
    final_total: str
    total_savings: str
    bundles: list[AppliedBundleDTO]
    remaining_items: list[RemainingItemDTO]
    lines: list[PricedLineDTO]


@dataclass(frozen=True)
class BundleOfferDTO:
    """Output: how one bundle rule scores against a cart."""

    rule_id: str
    bundle_name: str
    bundle_price: str
    priority: int
    max_applications: int
    savings_per_application: str
    total_savings: str
    is_better_deal: bool


@dataclass(frozen=True)
class BundleRuleDTO:
    id: str
    name: str
    description: str
    price: str
    priority: int
    active: bool
    requirements: list[RequirementSpec]
