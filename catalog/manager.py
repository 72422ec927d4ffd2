"""
Catalog Manager.

Entry point for all catalog operations: item creation, reviews, reports,
listings, discount aggregation and persistence.
"""

import logging
from functools import cmp_to_key
from datetime import date, datetime
from decimal import Decimal, ROUND_HALF_UP
from pathlib import Path
from typing import Callable, Dict, List, Optional, Union, Any

import pandas as pd

from catalog.exceptions import ItemNotFoundError, RestoreNotFoundError
from catalog.models.item import Clock, Item
from catalog.models.rating import Rating
from catalog.models.review import Review
from catalog.registry.item_registry import ItemRegistry
from catalog.utils import codec
from catalog.utils.formatter import LocaleFormatter, get_formatter, supported_locales
from catalog.utils.storage import StorageManager
import config.settings as settings

logger = logging.getLogger(__name__)

ItemRef = Union[int, Item]


class CatalogManager:
    """
    Manages the product catalog.

    Owns the item registry and coordinates:
    - Creation and lookup of items
    - Reviews and rating recomputation
    - Reports, listings and discount totals via the locale formatter
    - Bulk load from text files, snapshot dump and restore via storage

    Not thread-safe; serialize all calls on one instance.
    """

    def __init__(
        self,
        locale_tag: str = settings.DEFAULT_LOCALE,
        data_root: str = str(settings.DATA_ROOT),
        reports_root: str = str(settings.REPORTS_ROOT),
        temp_root: str = str(settings.TEMP_ROOT),
        storage: Optional[StorageManager] = None,
        formatter_factory: Callable[[str], LocaleFormatter] = get_formatter,
        clock: Clock = datetime.now,
        log: Optional[logging.Logger] = None,
        load_data: bool = True
    ):
        """
        Initialize catalog manager.

        Args:
            locale_tag: Locale for rendered output (falls back to en-GB)
            data_root: Directory of item data files
            reports_root: Directory of reports and review files
            temp_root: Directory of snapshot files
            storage: Storage manager, built from the roots if omitted
            formatter_factory: Maps a locale tag to a formatter
            clock: Time source for time-dependent discounts
            log: Logging sink, defaults to this module's logger
            load_data: Load all data files on startup
        """
        self.log = log or logger
        self.storage = storage or StorageManager(data_root, reports_root, temp_root)
        self.formatter_factory = formatter_factory
        self.clock = clock
        self.registry = ItemRegistry()

        self.change_locale(locale_tag)

        if load_data:
            self.load_all()

    @staticmethod
    def supported_locales() -> List[str]:
        """Return the locale tags with dedicated formatting rules."""
        return supported_locales()

    def change_locale(self, locale_tag: str) -> None:
        """Switch output formatting to another locale."""
        self.formatter = self.formatter_factory(locale_tag)
        self.log.info(f"Using locale {self.formatter.locale_tag}")

    def create_standard(
        self,
        item_id: int,
        name: str,
        price: Decimal,
        rating: Rating = Rating.NOT_RATED
    ) -> Item:
        """
        Create a standard (non-perishable) item.

        The item is stored only if no entry with the same (id, name)
        exists; an existing entry and its reviews are kept unchanged.

        Returns:
            The newly constructed item
        """
        item = Item.standard(item_id, name, price, rating)
        self.registry.add_if_absent(item)
        return item

    def create_perishable(
        self,
        item_id: int,
        name: str,
        price: Decimal,
        rating: Rating,
        best_before: date
    ) -> Item:
        """
        Create a perishable item with a best-before date.

        Same insert-if-absent behaviour as create_standard.
        """
        item = Item.perishable(item_id, name, price, rating, best_before)
        self.registry.add_if_absent(item)
        return item

    def find_by_id(self, item_id: int) -> Item:
        """
        Find an item by id.

        Raises:
            ItemNotFoundError: If no item has this id
        """
        return self.registry.find_by_id(item_id)

    def _resolve(self, ref: ItemRef) -> Item:
        """Resolve an id or item to the stored item."""
        if isinstance(ref, Item):
            stored = self.registry.get_item(ref)
            if stored is None:
                raise ItemNotFoundError(ref.id)
            return stored
        return self.find_by_id(ref)

    def review(self, ref: ItemRef, rating: Union[Rating, int], comment: str) -> Optional[Item]:
        """
        Add a review to an item and recompute its rating.

        The new rating is the mean of all review ratings, rounded half-up.

        Args:
            ref: Item id or item
            rating: Rating or integer star count (out-of-range -> NOT_RATED)
            comment: Review text

        Returns:
            The updated item, or None if the item is not in the catalog
        """
        try:
            item = self._resolve(ref)
        except ItemNotFoundError as e:
            self.log.info(str(e))
            return None

        reviews = self.registry.append_review(
            item, Review(rating=Rating.from_int(rating), comment=comment)
        )

        updated = item.apply_rating(average_rating(reviews))
        self.registry.replace_identity(item, updated)

        self.log.debug(
            f"Reviewed item {item.id}: {len(reviews)} reviews, rating {updated.rating.name}"
        )
        return updated

    def reviews(self, ref: ItemRef) -> List[Review]:
        """
        Return a copy of an item's reviews in insertion order.

        Raises:
            ItemNotFoundError: If the item is not in the catalog
        """
        return list(self.registry.get_reviews(self._resolve(ref)))

    def report(self, ref: ItemRef) -> Optional[Path]:
        """
        Write a report file for one item: the item line followed by its
        reviews sorted by rating, or a "no reviews" line.

        Returns:
            Path of the report file, or None if it could not be written
        """
        try:
            item = self._resolve(ref)
        except ItemNotFoundError as e:
            self.log.info(str(e))
            return None

        reviews = sorted(self.registry.get_reviews(item))

        lines = [self.formatter.format_item(item)]
        if reviews:
            lines.extend(self.formatter.format_review(r) for r in reviews)
        else:
            lines.append(self.formatter.text("no.reviews"))

        report_path = self.storage.report_path(item.id)
        try:
            self.storage.write_lines(report_path, lines)
        except OSError as e:
            self.log.error(f"Error printing product report {e}", exc_info=True)
            return None

        self.log.info(f"Report for item {item.id} written to {report_path}")
        return report_path

    def list_items(
        self,
        predicate: Optional[Callable[[Item], bool]] = None,
        key: Optional[Callable[[Item], Any]] = None,
        reverse: bool = False,
        compare: Optional[Callable[[Item, Item], int]] = None
    ) -> str:
        """
        Render a filtered, sorted listing of catalog items.

        Args:
            predicate: Keep only items for which this returns True
            key: Sort key; without one, catalog order is kept
            reverse: Sort descending
            compare: Two-argument comparator returning a negative, zero or
                     positive int; used instead of key

        Returns:
            One formatted item per line

        Raises:
            ValueError: If both key and compare are given
        """
        if key is not None and compare is not None:
            raise ValueError("Pass either key or compare, not both")
        if compare is not None:
            key = cmp_to_key(compare)

        selected = [item for item in self.registry.items() if predicate is None or predicate(item)]
        if key is not None:
            selected = sorted(selected, key=key, reverse=reverse)

        return "\n".join(self.formatter.format_item(item) for item in selected)

    def discount_totals(self) -> Dict[str, str]:
        """
        Sum item discounts grouped by star rating.

        Returns:
            Mapping of star string -> total discount formatted as currency
        """
        rows = [
            {"stars": item.rating.stars, "discount": item.discount(self.clock)}
            for item in self.registry.items()
        ]

        if not rows:
            return {}

        # Decimal discounts stay in an object column so totals remain exact
        df = pd.DataFrame(rows)
        totals = df.groupby("stars", sort=False)["discount"].agg(
            lambda values: sum(values, Decimal("0.00"))
        )

        return {
            stars: self.formatter.format_currency(total)
            for stars, total in totals.items()
        }

    def dump(self) -> Optional[Path]:
        """
        Write the whole catalog to a snapshot file, then clear it.

        On failure the catalog is left untouched.

        Returns:
            Snapshot path, or None if the dump failed
        """
        try:
            snapshot_path = self.storage.save_snapshot(self.registry.entries())
        except Exception as e:
            self.log.error(f"Error dumping data {e}", exc_info=True)
            return None

        self.registry.clear()
        self.log.info(f"Catalog dumped to {snapshot_path}")
        return snapshot_path

    def restore(self) -> bool:
        """
        Replace the catalog with the first snapshot file found, deleting
        the file once restored.

        Returns:
            True if a snapshot was restored
        """
        try:
            snapshot_path = self.storage.find_snapshot()
        except RestoreNotFoundError as e:
            self.log.warning(f"Error restoring data {e}")
            return False

        try:
            entries = self.storage.load_snapshot(snapshot_path)
        except Exception as e:
            self.log.error(f"Error restoring data {e}", exc_info=True)
            return False

        self.registry.replace_all(entries)

        try:
            self.storage.delete(snapshot_path)
        except OSError as e:
            self.log.warning(f"Restored snapshot {snapshot_path} could not be deleted: {e}")

        self.log.info(f"Restored {len(self.registry)} items from {snapshot_path}")
        return True

    def load_all(self) -> int:
        """
        Rebuild the catalog from the item data files and their review files.

        Malformed files and review lines are skipped.

        Returns:
            Number of items loaded
        """
        try:
            item_files = self.storage.item_files()
        except OSError as e:
            self.log.error(f"Error loading data {e}", exc_info=True)
            return len(self.registry)

        entries = []
        for path in item_files:
            item = self._load_item(path)
            if item is None:
                continue
            entries.append((item, self._load_reviews(item)))

        self.registry.replace_all(entries)
        self.log.info(f"Loaded {len(self.registry)} items from {len(item_files)} data files")
        return len(self.registry)

    def _load_item(self, path: Path) -> Optional[Item]:
        try:
            line = self.storage.read_first_line(path)
        except (OSError, UnicodeDecodeError) as e:
            self.log.warning(f"Error loading product {path}: {e}")
            return None

        if line is None:
            self.log.warning(f"Error loading product {path}: empty file")
            return None

        return codec.parse_item(line)

    def _load_reviews(self, item: Item) -> List[Review]:
        try:
            lines = self.storage.load_review_lines(item.id)
        except (OSError, UnicodeDecodeError) as e:
            self.log.warning(f"Error loading reviews for item {item.id}: {e}")
            return []

        if lines is None:
            return []

        reviews = []
        for line in lines:
            review = codec.parse_review(line)
            if review is not None:
                reviews.append(review)
        return reviews

    def save_all(self) -> int:
        """
        Write every item to its data file and its reviews to its review
        file, in the format load_all reads.

        Returns:
            Number of items written
        """
        written = 0
        for item, reviews in self.registry.entries():
            try:
                self.storage.write_lines(self.storage.item_path(item.id), [codec.format_item(item)])
                self.storage.write_lines(
                    self.storage.reviews_path(item.id),
                    [codec.format_review(r) for r in reviews]
                )
                written += 1
            except (OSError, ValueError) as e:
                self.log.error(f"Error saving product {item.id}: {e}")

        self.log.info(f"Saved {written} of {len(self.registry)} items")
        return written


def average_rating(reviews: List[Review]) -> Rating:
    """
    Mean of the review ratings rounded half-up, as a Rating.
    An empty list gives NOT_RATED.
    """
    if not reviews:
        return Rating.NOT_RATED

    total = sum(review.rating.value for review in reviews)
    mean = (Decimal(total) / Decimal(len(reviews))).quantize(Decimal(1), rounding=ROUND_HALF_UP)
    return Rating.from_int(int(mean))
