"""
Data models for the catalog.

- Rating: star rating enumeration
- Review: rating plus customer comment
- Item: sellable item (standard or perishable)
"""

from catalog.models.rating import Rating
from catalog.models.review import Review
from catalog.models.item import Item, ItemKind

__all__ = ["Rating", "Review", "Item", "ItemKind"]
