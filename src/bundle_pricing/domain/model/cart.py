"""Cart lines and the remainder snapshot the allocation engine works on.

A ``Remainder`` is never mutated: consuming items from it returns a new
snapshot. The engine rebinds its local reference after every bundle
application, so earlier snapshots stay valid for inspection.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Mapping

from bundle_pricing.domain.model.product import Product
from bundle_pricing.domain.model.value_objects import Money, Quantity


@dataclass(frozen=True)
class CartLine:
    """What the customer put in the cart: a product reference and a quantity."""

    product_id: str
    quantity: Quantity

    @staticmethod
    def of(product_id: str, quantity: int) -> CartLine:
        return CartLine(product_id=product_id, quantity=Quantity(quantity))


@dataclass(frozen=True)
class RemainderEntry:
    product: Product
    quantity: int
    position: int  # first position of the product in the cart

    @property
    def unit_price(self) -> Money:
        return self.product.price

    @property
    def subtotal(self) -> Money:
        return self.product.price * self.quantity


class Remainder:
    """The part of a cart not yet consumed by any bundle application.

    Keyed by product id, in cart order. Entries always hold a positive
    quantity; consuming an entry down to zero removes it.
    """

    def __init__(self, entries: Iterable[RemainderEntry] = ()) -> None:
        self._entries: dict[str, RemainderEntry] = {}
        for entry in entries:
            if entry.quantity > 0:
                self._entries[entry.product.id] = entry

    # --- Construction ---------------------------------------------------------

    @classmethod
    def from_cart(
        cls,
        lines: Iterable[CartLine],
        products: Mapping[str, Product],
    ) -> Remainder:
        """Resolve cart lines against *products*.

        Lines whose product is missing or unavailable are dropped. Repeated
        lines for the same product are merged and keep the position of the
        first occurrence.
        """
        merged: dict[str, RemainderEntry] = {}
        for position, line in enumerate(lines):
            product = products.get(line.product_id)
            if product is None or not product.available:
                continue
            existing = merged.get(product.id)
            if existing is None:
                merged[product.id] = RemainderEntry(
                    product=product, quantity=line.quantity.value, position=position
                )
            else:
                merged[product.id] = RemainderEntry(
                    product=product,
                    quantity=existing.quantity + line.quantity.value,
                    position=existing.position,
                )
        return cls(merged.values())

    # --- Queries --------------------------------------------------------------

    def __iter__(self):
        return iter(self._entries.values())

    def __len__(self) -> int:
        return len(self._entries)

    def __bool__(self) -> bool:
        return bool(self._entries)

    def get(self, product_id: str) -> RemainderEntry | None:
        return self._entries.get(product_id)

    @property
    def total_quantity(self) -> int:
        return sum(entry.quantity for entry in self._entries.values())

    def total_value(self, currency: str) -> Money:
        total = Money.zero(currency)
        for entry in self._entries.values():
            total = total + entry.subtotal
        return total

    def quantity_in_category(self, category: str) -> int:
        return sum(
            entry.quantity
            for entry in self._entries.values()
            if entry.product.category == category
        )

    def entries_in_category(self, category: str) -> list[RemainderEntry]:
        """Entries of *category*, most expensive first, then by cart position."""
        matching = [e for e in self._entries.values() if e.product.category == category]
        return sorted(matching, key=lambda e: (-e.unit_price.amount, e.position))

    # --- Copy-on-write --------------------------------------------------------

    def without(self, taken: Mapping[str, int]) -> Remainder:
        """Return a new snapshot with *taken* quantities removed per product id."""
        entries = []
        for entry in self._entries.values():
            qty = taken.get(entry.product.id, 0)
            if qty > entry.quantity:
                raise ValueError(
                    f"Cannot take {qty} of product '{entry.product.id}' "
                    f"- only {entry.quantity} left"
                )
            entries.append(
                RemainderEntry(
                    product=entry.product,
                    quantity=entry.quantity - qty,
                    position=entry.position,
                )
            )
        return Remainder(entries)
