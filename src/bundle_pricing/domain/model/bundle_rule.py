"""BundleRule aggregate: a combo discount offer.

A rule says: "supply N items of category A and M items of category B and
pay this flat price instead". Rules are created and edited by an
administrator; the allocation engine only reads them.

All queries here are pure functions of a ``Remainder``. Item selection is
always most-expensive-first, so the savings a rule *reports* for ranking
are exactly the savings it *realizes* when applied.
"""

from __future__ import annotations

from dataclasses import dataclass

from bundle_pricing.domain.exceptions import ValidationError
from bundle_pricing.domain.model.cart import Remainder
from bundle_pricing.domain.model.value_objects import Money

MAX_NAME_LENGTH = 100
MAX_DESCRIPTION_LENGTH = 500

@dataclass(frozen=True)
class CategoryRequirement:
    """``quantity`` items of ``category`` per bundle application."""

    category: str
    quantity: int

    def __post_init__(self) -> None:
        if not isinstance(self.category, str) or not self.category.strip():
            raise ValidationError("Requirement category is required")
        if (
            not isinstance(self.quantity, int)
            or isinstance(self.quantity, bool)
            or self.quantity < 1
        ):
            raise ValidationError(
                f"Requirement quantity for '{self.category}' must be >= 1, "
                f"got {self.quantity!r}"
            )


@dataclass(frozen=True)
class ConsumedItem:
    """Units of one product taken from the cart by a bundle."""

    product_id: str
    name: str
    category: str
    unit_price: Money
    quantity: int

    @property
    def value(self) -> Money:
        return self.unit_price * self.quantity


@dataclass
class BundleRule:
    """Aggregate root for bundle (combo) discount rules.

    Invariants:
    - at least one requirement, each with quantity >= 1
    - no category listed twice
    - ``price`` is a non-negative Money
    - ``priority`` is an int
    - name at most 100 characters, description at most 500
    """

    id: str
    name: str
    price: Money
    requirements: list[CategoryRequirement]
    priority: int = 0
    active: bool = True
    description: str = ""

    def __post_init__(self) -> None:
        if not isinstance(self.id, str) or not self.id.strip():
            raise ValidationError("Bundle id is required")
        self._validate_name(self.name)
        self._validate_description(self.description)
        self._validate_price(self.price)
        self._validate_priority(self.priority)
        self.requirements = list(self.requirements)
        self._validate_requirements(self.requirements)

    # --- Queries --------------------------------------------------------------

    @property
    def total_required_quantity(self) -> int:
        return sum(req.quantity for req in self.requirements)

    @property
    def ordering_key(self) -> tuple:
        """Sort key for the final tie-break: ids ascending, numeric ids numerically."""
        if self.id.isascii() and self.id.isdigit():
            return (0, int(self.id), self.id)
        return (1, 0, self.id)

    def is_applicable(self, remainder: Remainder) -> bool:
        return all(
            remainder.quantity_in_category(req.category) >= req.quantity
            for req in self.requirements
        )

    def max_applications(self, remainder: Remainder) -> int:
        """How many complete bundles *remainder* supports at once."""
        if not self.requirements:
            return 0
        return min(
            remainder.quantity_in_category(req.category) // req.quantity
            for req in self.requirements
        )

    def select_items(self, remainder: Remainder, applications: int) -> list[ConsumedItem]:
        """Pick the items *applications* bundles would consume.

        For each requirement, in order, the most expensive entries of the
        category are taken first; equal prices fall back to cart order.
        The caller must ensure *applications* does not exceed
        ``max_applications(remainder)``.
        """
        consumed: list[ConsumedItem] = []
        for req in self.requirements:
            needed = req.quantity * applications
            for entry in remainder.entries_in_category(req.category):
                if needed <= 0:
                    break
                take = min(entry.quantity, needed)
                consumed.append(
                    ConsumedItem(
                        product_id=entry.product.id,
                        name=entry.product.name,
                        category=req.category,
                        unit_price=entry.unit_price,
                        quantity=take,
                    )
                )
                needed -= take
        return consumed

    def savings_per_application(self, remainder: Remainder) -> Money:
        if self.max_applications(remainder) == 0:
            return Money.zero(self.price.currency)
        return self._displaced_value(remainder, 1).saturating_sub(self.price)

    def savings_at_max_applications(self, remainder: Remainder) -> Money:
        applications = self.max_applications(remainder)
        if applications == 0:
            return Money.zero(self.price.currency)
        return self._displaced_value(remainder, applications).saturating_sub(
            self.price * applications
        )

    # --- Administrative mutations ---------------------------------------------

    def update_price(self, new_price: Money) -> None:
        self._validate_price(new_price)
        self.price = new_price

    def set_priority(self, priority: int) -> None:
        self._validate_priority(priority)
        self.priority = priority

    def set_description(self, description: str) -> None:
        description = description.strip()
        self._validate_description(description)
        self.description = description

    def replace_requirements(self, requirements: list[CategoryRequirement]) -> None:
        requirements = list(requirements)
        self._validate_requirements(requirements)
        self.requirements = requirements

    def rename(self, name: str) -> None:
        self._validate_name(name)
        self.name = name.strip()

    def activate(self) -> None:
        self.active = True

    def deactivate(self) -> None:
        self.active = False

    # --- Internal helpers -----------------------------------------------------

    def _displaced_value(self, remainder: Remainder, applications: int) -> Money:
        total = Money.zero(self.price.currency)
        for item in self.select_items(remainder, applications):
            total = total + item.value
        return total

    @staticmethod
    def _validate_name(name: str) -> None:
        if not isinstance(name, str) or not name.strip():
            raise ValidationError("Bundle name is required")
        if len(name.strip()) > MAX_NAME_LENGTH:
            raise ValidationError(
                f"Bundle name cannot exceed {MAX_NAME_LENGTH} characters"
            )

    @staticmethod
    def _validate_description(description: str) -> None:
        if not isinstance(description, str):
            raise ValidationError(
                f"Bundle description must be a string, got {description!r}"
            )
        if len(description) > MAX_DESCRIPTION_LENGTH:
            raise ValidationError(
                f"Bundle description cannot exceed {MAX_DESCRIPTION_LENGTH} characters"
            )

    @staticmethod
    def _validate_price(price: Money) -> None:
        if not isinstance(price, Money):
            raise ValidationError(f"Bundle price must be Money, got {price!r}")

    @staticmethod
    def _validate_priority(priority: int) -> None:
        if not isinstance(priority, int) or isinstance(priority, bool):
            raise ValidationError(f"Priority must be an integer, got {priority!r}")

    @staticmethod
    def _validate_requirements(requirements: list[CategoryRequirement]) -> None:
        if not requirements:
            raise ValidationError("Bundle must have at least one category requirement")
        seen: set[str] = set()
        for req in requirements:
            if not isinstance(req, CategoryRequirement):
                raise ValidationError(f"Invalid category requirement: {req!r}")
            if req.category in seen:
                raise ValidationError(
                    f"Category '{req.category}' is listed more than once"
                )
            seen.add(req.category)
