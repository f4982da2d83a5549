"""Product aggregate.

Products live independently of bundle rules. They have their own lifecycle:
prices change, products go in and out of stock. The pricing engine only ever
reads them.
"""

from __future__ import annotations

from dataclasses import dataclass

from bundle_pricing.domain.exceptions import ValidationError
from bundle_pricing.domain.model.value_objects import Money


@dataclass
class Product:
    """A product in the catalog.

    ``category`` is the key bundle rules match on. ``available`` is False
    for products that cannot currently be sold; such products are treated
    as absent when a cart is priced.
    """

    id: str
    name: str
    category: str
    price: Money
    available: bool = True

    def __post_init__(self) -> None:
        if not self.category or not self.category.strip():
            raise ValidationError(f"Product '{self.name}' must have a category")

    def update_price(self, new_price: Money) -> None:
        """Change the product price.

        Already-computed pricing results are unaffected; they captured the
        unit price at pricing time.
        """
        if new_price.amount <= 0:
            raise ValidationError("Product price must be greater than zero")
        self.price = new_price

    def mark_available(self) -> None:
        self.available = True

    def mark_unavailable(self) -> None:
        self.available = False
