"""Application service: Update Product use case."""

from __future__ import annotations

from bundle_pricing.domain.exceptions import EntityNotFoundError
from bundle_pricing.domain.model.value_objects import Money
from bundle_pricing.domain.repository.product_repository import ProductRepository


class UpdateProductHandler:

    def __init__(self, product_repo: ProductRepository) -> None:
        self._product_repo = product_repo

    def handle(
        self,
        product_id: str,
        new_price: str | None = None,
        available: bool | None = None,
    ) -> None:
        """Update a product's price and/or availability.

        This does NOT affect carts that were already priced; their
        results captured the unit price at pricing time.
        """
        product = self._product_repo.get_by_id(product_id)
        if product is None:
            raise EntityNotFoundError(f"Product with ID '{product_id}' not found")

        if new_price is not None:
            product.update_price(Money.of(new_price))
        if available is True:
            product.mark_available()
        elif available is False:
            product.mark_unavailable()
        self._product_repo.save(product)
