"""
Item data model.

Represents a sellable catalog item. One dataclass covers both variants;
the ItemKind tag selects discount and best-before behaviour.
"""

from dataclasses import dataclass, replace
from datetime import date, datetime, time
from decimal import Decimal, ROUND_HALF_UP
from enum import Enum
from typing import Callable, Optional

from catalog.models.rating import Rating

DISCOUNT_RATE = Decimal("0.1")
MONEY_STEP = Decimal("0.01")

# Perishable items are discounted only inside [start, end) local time
DISCOUNT_WINDOW_START = time(17, 30)
DISCOUNT_WINDOW_END = time(18, 30)

Clock = Callable[[], datetime]


class ItemKind(Enum):
    """Item variant tag."""
    STANDARD = "D"
    PERISHABLE = "F"


@dataclass(frozen=True, eq=False)
class Item:
    """
    Immutable catalog item.

    Identity is (id, name): two items with the same id and name are the
    same catalog entry regardless of price, rating or kind.
    """
    id: int
    name: str
    price: Decimal
    rating: Rating = Rating.NOT_RATED
    kind: ItemKind = ItemKind.STANDARD
    best_before: Optional[date] = None

    def __post_init__(self):
        if not isinstance(self.price, Decimal):
            raise ValueError(f"Invalid price: {self.price!r}. Must be a Decimal")
        if not self.price.is_finite() or self.price < 0:
            raise ValueError(f"Invalid price: {self.price}. Must be a non-negative amount")
        if not isinstance(self.rating, Rating):
            raise ValueError(f"Invalid rating: {self.rating!r}. Must be a Rating")

        if self.kind is ItemKind.PERISHABLE:
            if not isinstance(self.best_before, date):
                raise ValueError(f"Perishable item {self.id} requires a best-before date")
        elif self.best_before is not None:
            raise ValueError(f"Standard item {self.id} cannot carry a best-before date")

    @classmethod
    def standard(
        cls,
        item_id: int,
        name: str,
        price: Decimal,
        rating: Rating = Rating.NOT_RATED
    ) -> "Item":
        """Create a non-perishable item with a flat discount."""
        return cls(id=item_id, name=name, price=price, rating=rating,
                   kind=ItemKind.STANDARD)

    @classmethod
    def perishable(
        cls,
        item_id: int,
        name: str,
        price: Decimal,
        rating: Rating,
        best_before: date
    ) -> "Item":
        """Create a perishable item with a best-before date."""
        return cls(id=item_id, name=name, price=price, rating=rating,
                   kind=ItemKind.PERISHABLE, best_before=best_before)

    def apply_rating(self, rating: Rating) -> "Item":
        """Return a copy of this item carrying the new rating."""
        return replace(self, rating=rating)

    def discount(self, clock: Optional[Clock] = None) -> Decimal:
        """
        Compute the discount for this item.

        Args:
            clock: Time source, defaults to datetime.now. Only consulted
                   for perishable items.

        Returns:
            Discount amount rounded half-up to 2 decimal places
        """
        flat = (self.price * DISCOUNT_RATE).quantize(MONEY_STEP, rounding=ROUND_HALF_UP)

        if self.kind is ItemKind.STANDARD:
            return flat

        if self.kind is ItemKind.PERISHABLE:
            now = (clock or datetime.now)().time()
            if DISCOUNT_WINDOW_START <= now < DISCOUNT_WINDOW_END:
                return flat
            return Decimal("0.00")

        raise ValueError(f"Unknown item kind: {self.kind}")

    def __eq__(self, other):
        if self is other:
            return True
        if isinstance(other, Item):
            return self.id == other.id and self.name == other.name
        return NotImplemented

    def __hash__(self):
        return hash((self.id, self.name))

    def __str__(self):
        """Plain one-line form; the discount is evaluated against the wall clock."""
        return (
            f"{self.id}, {self.name}, {self.price}, {self.discount()}, "
            f"{self.rating.stars} {self.best_before}"
        )
