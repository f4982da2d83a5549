"""Resolve a customer's cart against the catalog.

Unknown and unavailable products are reported here, before the
allocation engine ever sees the cart.
"""

from __future__ import annotations

from bundle_pricing.application.dto import CartItemSpec
from bundle_pricing.domain.exceptions import EntityNotFoundError, ValidationError
from bundle_pricing.domain.model.cart import CartLine
from bundle_pricing.domain.model.product import Product
from bundle_pricing.domain.repository.product_repository import ProductRepository


def resolve_cart(
    product_repo: ProductRepository,
    item_specs: list[CartItemSpec],
) -> tuple[list[CartLine], dict[str, Product]]:
    lines: list[CartLine] = []
    products: dict[str, Product] = {}

    for spec in item_specs:
        product = product_repo.get_by_name(spec.product_name)
        if product is None:
            raise EntityNotFoundError(f"Product not found: '{spec.product_name}'")
        if not product.available:
            raise ValidationError(f"Product '{product.name}' is not available")

        lines.append(CartLine.of(product.id, spec.quantity))
        products[product.id] = product

    return lines, products
