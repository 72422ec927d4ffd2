"""
Record codec.

Encodes items and reviews as delimited text lines and decodes them back.

Item record:   TYPE|ID|NAME|PRICE|RATING[|BESTBEFORE]
Review record: RATING|COMMENT
"""

import logging
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Optional

from catalog.exceptions import RecordParseError
from catalog.models.item import Item, ItemKind
from catalog.models.rating import Rating
from catalog.models.review import Review
import config.settings as settings

logger = logging.getLogger(__name__)

DELIMITER = settings.RECORD_DELIMITER


def _parse_int(value: str, field_name: str, text: str) -> int:
    try:
        return int(value.strip())
    except ValueError:
        raise RecordParseError(text, f"{field_name} is not an integer: '{value}'")


def _parse_price(value: str, text: str) -> Decimal:
    try:
        price = Decimal(value.strip())
    except InvalidOperation:
        raise RecordParseError(text, f"price is not a number: '{value}'")

    if not price.is_finite() or price < 0:
        raise RecordParseError(text, f"price out of range: '{value}'")
    return price


def _parse_date(value: str, text: str) -> date:
    try:
        return date.fromisoformat(value.strip())
    except ValueError:
        raise RecordParseError(text, f"invalid best-before date: '{value}'")


def decode_item(text: str) -> Item:
    """
    Decode an item record.

    Args:
        text: One record line (trailing newline allowed)

    Returns:
        Decoded Item

    Raises:
        RecordParseError: If the record is malformed
    """
    line = text.rstrip("\r\n")
    values = line.split(DELIMITER)

    tag = values[0].strip()
    try:
        kind = ItemKind(tag)
    except ValueError:
        raise RecordParseError(line, f"unknown item type '{tag}'")

    if kind is ItemKind.STANDARD:
        # A trailing empty best-before field is tolerated
        if len(values) == 6 and not values[5].strip():
            values = values[:5]
        expected = 5
    else:
        expected = 6

    if len(values) != expected:
        raise RecordParseError(
            line, f"expected {expected} fields for type {tag}, got {len(values)}"
        )

    item_id = _parse_int(values[1], "id", line)
    name = values[2]
    price = _parse_price(values[3], line)
    rating = Rating.from_int(_parse_int(values[4], "rating", line))

    if kind is ItemKind.PERISHABLE:
        best_before = _parse_date(values[5], line)
        return Item.perishable(item_id, name, price, rating, best_before)
    return Item.standard(item_id, name, price, rating)


def decode_review(text: str) -> Review:
    """
    Decode a review record. Only the first delimiter splits, so the
    comment may itself contain the delimiter.

    Raises:
        RecordParseError: If the record is malformed
    """
    line = text.rstrip("\r\n")
    values = line.split(DELIMITER, 1)

    if len(values) != 2:
        raise RecordParseError(line, "expected 2 fields for review")

    rating = Rating.from_int(_parse_int(values[0], "rating", line))
    return Review(rating=rating, comment=values[1])


def parse_item(text: str) -> Optional[Item]:
    """Decode an item record, returning None (and logging) if malformed."""
    try:
        return decode_item(text)
    except RecordParseError as e:
        logger.warning(f"Error parsing product: {e}")
        return None


def parse_review(text: str) -> Optional[Review]:
    """Decode a review record, returning None (and logging) if malformed."""
    try:
        return decode_review(text)
    except RecordParseError as e:
        logger.warning(f"Error parsing review: {e}")
        return None


def format_item(item: Item) -> str:
    """
    Encode an item as a record line (no trailing newline).

    Raises:
        ValueError: If the name cannot be represented in the record format
    """
    if DELIMITER in item.name or "\n" in item.name or "\r" in item.name:
        raise ValueError(f"Item name cannot contain '{DELIMITER}' or line breaks: '{item.name}'")

    values = [
        item.kind.value,
        str(item.id),
        item.name,
        str(item.price),
        str(item.rating.value),
    ]
    if item.kind is ItemKind.PERISHABLE:
        values.append(item.best_before.isoformat())

    return DELIMITER.join(values)


def format_review(review: Review) -> str:
    """Encode a review as a record line; line breaks in the comment become spaces."""
    comment = " ".join(review.comment.splitlines())
    return f"{review.rating.value}{DELIMITER}{comment}"
