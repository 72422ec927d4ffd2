"""
Item Registry - In-memory store of catalog items and their reviews.

Keyed by item identity (id, name). Items are immutable, so a rating
change replaces the key while the review list carries forward.
"""

import logging
from typing import Dict, List, Iterable, Optional, Tuple

from catalog.exceptions import ItemNotFoundError
from catalog.models.item import Item
from catalog.models.review import Review

logger = logging.getLogger(__name__)


class ItemRegistry:
    """
    Mapping of Item -> ordered list of Review.

    Keys keep insertion order. Review lists only grow by append.
    Not thread-safe: callers sharing a registry must hold one lock
    around every call.
    """

    def __init__(self, entries: Optional[Iterable[Tuple[Item, List[Review]]]] = None):
        """
        Initialize registry.

        Args:
            entries: Optional initial (item, reviews) pairs; the first
                     occurrence of an identity wins
        """
        self._entries: Dict[Item, List[Review]] = {}
        self._keys: Dict[Item, Item] = {}
        if entries is not None:
            self.replace_all(entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, item: Item) -> bool:
        return item in self._entries

    def add_if_absent(self, item: Item) -> bool:
        """
        Insert item with an empty review list unless its identity exists.

        Returns:
            True if the item was inserted, False if an entry already existed
        """
        if item in self._entries:
            logger.debug(f"Item {item.id} '{item.name}' already in catalog, keeping existing entry")
            return False

        self._entries[item] = []
        self._keys[item] = item
        logger.debug(f"Added item {item.id} '{item.name}'")
        return True

    def get_item(self, item: Item) -> Optional[Item]:
        """Return the stored key equal to item, or None if absent."""
        return self._keys.get(item)

    def find_by_id(self, item_id: int) -> Item:
        """
        Find the first item with the given id (linear scan).

        Raises:
            ItemNotFoundError: If no item carries this id
        """
        for item in self._entries:
            if item.id == item_id:
                return item
        raise ItemNotFoundError(item_id)

    def get_reviews(self, item: Item) -> List[Review]:
        """
        Return the review list stored for item.

        Raises:
            ItemNotFoundError: If the item's identity is not in the registry
        """
        if item not in self._entries:
            raise ItemNotFoundError(item.id)
        return self._entries[item]

    def append_review(self, item: Item, review: Review) -> List[Review]:
        """Append review to item's list and return the list."""
        reviews = self.get_reviews(item)
        reviews.append(review)
        return reviews

    def replace_identity(self, old: Item, new: Item) -> None:
        """
        Replace the key old with new, keeping its review list and position.

        The replacement mapping is built aside and then swapped in, so the
        registry never holds both keys or neither.

        Raises:
            ItemNotFoundError: If old is not in the registry
        """
        if old not in self._entries:
            raise ItemNotFoundError(old.id)

        self._set_entries({
            (new if key == old else key): reviews
            for key, reviews in self._entries.items()
        })

    def items(self) -> List[Item]:
        """Return all items in insertion order."""
        return list(self._entries)

    def entries(self) -> List[Tuple[Item, List[Review]]]:
        """Return (item, reviews copy) pairs in insertion order."""
        return [(item, list(reviews)) for item, reviews in self._entries.items()]

    def replace_all(self, entries: Iterable[Tuple[Item, List[Review]]]) -> None:
        """
        Replace the whole registry content.

        Duplicated identities keep their first occurrence.
        """
        rebuilt: Dict[Item, List[Review]] = {}
        for item, reviews in entries:
            if item in rebuilt:
                logger.warning(f"Duplicate item {item.id} '{item.name}' ignored")
                continue
            rebuilt[item] = list(reviews)

        self._set_entries(rebuilt)

    def clear(self) -> None:
        """Remove every entry."""
        self._set_entries({})

    def _set_entries(self, entries: Dict[Item, List[Review]]) -> None:
        self._entries = entries
        self._keys = {item: item for item in entries}
