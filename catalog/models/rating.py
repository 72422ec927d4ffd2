"""
Rating data model.

Star rating shared by items and reviews.
"""

from enum import IntEnum

STAR_GLYPH = "★"


class Rating(IntEnum):
    """
    Star rating from NOT_RATED (0) to FIVE_STAR (5).
    Ordered by ordinal value.
    """
    NOT_RATED = 0
    ONE_STAR = 1
    TWO_STAR = 2
    THREE_STAR = 3
    FOUR_STAR = 4
    FIVE_STAR = 5

    @property
    def stars(self) -> str:
        """Display form: one glyph per star, empty for NOT_RATED."""
        return STAR_GLYPH * self.value

    @classmethod
    def from_int(cls, stars: int) -> "Rating":
        """
        Convert an integer star count to a Rating.

        Out-of-range values fall back to NOT_RATED instead of raising.
        """
        if 0 <= stars <= 5:
            return cls(int(stars))
        return cls.NOT_RATED
