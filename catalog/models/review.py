"""
Review data model.

Represents a single customer review of a catalog item.
"""

from dataclasses import dataclass

from catalog.models.rating import Rating


@dataclass(frozen=True)
class Review:
    """
    Customer review: a rating plus free-text comment.
    Reviews sort by rating only, so sorting keeps the relative order
    of equally rated reviews.
    """
    rating: Rating
    comment: str = ""

    def __post_init__(self):
        if not isinstance(self.rating, Rating):
            raise ValueError(f"Invalid rating: {self.rating!r}. Must be a Rating")

    def __lt__(self, other: "Review") -> bool:
        if not isinstance(other, Review):
            return NotImplemented
        return self.rating < other.rating
