"""
Locale formatter.

Renders items, reviews and amounts for a given locale tag using
per-locale currency, date and message templates.
"""

import logging
from datetime import date
from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, List, Optional

from catalog.models.item import Item
from catalog.models.review import Review
import config.settings as settings

logger = logging.getLogger(__name__)

FALLBACK_LOCALE = "en-GB"

NBSP = "\u00a0"
NARROW_NBSP = "\u202f"

# Currency and date conventions per locale tag
LOCALE_RULES: Dict[str, Dict[str, str]] = {
    "en-GB": {
        "currency": "£{amount}",
        "decimal": ".",
        "group": ",",
        "date": "%d/%m/%Y",
    },
    "en-US": {
        "currency": "${amount}",
        "decimal": ".",
        "group": ",",
        "date": "%m/%d/%Y",
    },
    "fr-FR": {
        "currency": "{amount}" + NBSP + "€",
        "decimal": ",",
        "group": NARROW_NBSP,
        "date": "%d/%m/%Y",
    },
    "ru-RU": {
        "currency": "{amount}" + NBSP + "₽",
        "decimal": ",",
        "group": NBSP,
        "date": "%d.%m.%Y",
    },
    "zh-CN": {
        "currency": "¥{amount}",
        "decimal": ".",
        "group": ",",
        "date": "%Y/%m/%d",
    },
}

# Message templates per locale tag
MESSAGES: Dict[str, Dict[str, str]] = {
    "en-GB": {
        "product": "{name}, Price: {price}, Rating: {rating}, Best Before: {best_before}",
        "review": "Review: {rating}\t{comment}",
        "no.reviews": "Not reviewed",
        "no.best.before": "n/a",
    },
    "en-US": {
        "product": "{name}, Price: {price}, Rating: {rating}, Best Before: {best_before}",
        "review": "Review: {rating}\t{comment}",
        "no.reviews": "Not reviewed",
        "no.best.before": "n/a",
    },
    "fr-FR": {
        "product": "{name}, Prix : {price}, Note : {rating}, À consommer avant : {best_before}",
        "review": "Avis : {rating}\t{comment}",
        "no.reviews": "Aucun avis",
        "no.best.before": "s.o.",
    },
    "ru-RU": {
        "product": "{name}, Цена: {price}, Рейтинг: {rating}, Годен до: {best_before}",
        "review": "Отзыв: {rating}\t{comment}",
        "no.reviews": "Нет отзывов",
        "no.best.before": "н/д",
    },
    "zh-CN": {
        "product": "{name}, 价格: {price}, 评分: {rating}, 保质期: {best_before}",
        "review": "评论: {rating}\t{comment}",
        "no.reviews": "暂无评论",
        "no.best.before": "无",
    },
}


class LocaleFormatter:
    """
    Formats catalog output for one locale.

    Unsupported tags fall back to en-GB.
    """

    def __init__(self, locale_tag: str = settings.DEFAULT_LOCALE):
        """
        Initialize formatter.

        Args:
            locale_tag: BCP 47 style tag, e.g. "en-GB" or "fr-FR"
        """
        if locale_tag not in LOCALE_RULES:
            logger.info(f"Locale '{locale_tag}' not supported, using {FALLBACK_LOCALE}")
            locale_tag = FALLBACK_LOCALE

        self.locale_tag = locale_tag
        self.rules = LOCALE_RULES[locale_tag]
        self.messages = MESSAGES[locale_tag]

    def text(self, key: str) -> str:
        """
        Look up a message template by key.

        Raises:
            KeyError: If neither this locale nor the fallback defines key
        """
        if key in self.messages:
            return self.messages[key]
        return MESSAGES[FALLBACK_LOCALE][key]

    def format_currency(self, amount: Decimal) -> str:
        """Format an amount as local currency, rounded half-up to 2 places."""
        value = Decimal(amount).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
        sign = "-" if value < 0 else ""

        separators = str.maketrans({",": self.rules["group"], ".": self.rules["decimal"]})
        digits = format(abs(value), ",.2f").translate(separators)

        return sign + self.rules["currency"].format(amount=digits)

    def format_date(self, value: Optional[date]) -> str:
        """Format a date in the local short style; None renders as n/a."""
        if value is None:
            return self.text("no.best.before")
        return value.strftime(self.rules["date"])

    def format_item(self, item: Item) -> str:
        """Render one item line."""
        return self.text("product").format(
            name=item.name,
            price=self.format_currency(item.price),
            rating=item.rating.stars,
            best_before=self.format_date(item.best_before),
        )

    def format_review(self, review: Review) -> str:
        """Render one review line."""
        return self.text("review").format(
            rating=review.rating.stars,
            comment=review.comment,
        )


def supported_locales() -> List[str]:
    """Return the supported locale tags."""
    return list(LOCALE_RULES)


def get_formatter(locale_tag: str) -> LocaleFormatter:
    """Select the formatter for locale_tag, falling back to en-GB."""
    return LocaleFormatter(locale_tag)
