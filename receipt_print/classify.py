"""Special line-item detection."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Iterable

from receipt_print.data import CategoryMarkers, markers_for_locale
from receipt_print.errors import ItemRenderFault
from receipt_print.models import Item

logger = logging.getLogger(__name__)


class ItemCategory(str, Enum):
    REGULAR = "regular"
    DISCOUNT = "discount"
    CREDIT = "credit"
    PAYMENT_METHOD = "payment_method"
    CHANGE = "change"
    TENDERED = "tendered"

    @property
    def is_special(self) -> bool:
        return self is not ItemCategory.REGULAR


def _fold(text: str) -> str:
    return text.strip().casefold()


class CategoryMatcher:
    """
    Map an item name to its category.

    Names and markers are compared after strip() + casefold(). Discount and
    credit markers match anywhere in the name; payment-method, change and
    tendered labels must equal the whole name.
    """

    def __init__(self, markers: CategoryMarkers) -> None:
        self._discount = tuple(_fold(m) for m in markers.discount)
        self._credit = tuple(_fold(m) for m in markers.credit)
        self._exact: dict[str, ItemCategory] = {}
        for category, labels in (
            (ItemCategory.PAYMENT_METHOD, markers.payment_method),
            (ItemCategory.CHANGE, markers.change),
            (ItemCategory.TENDERED, markers.tendered),
        ):
            for label in labels:
                self._exact.setdefault(_fold(label), category)

    @classmethod
    def for_locale(cls, locale: str | None = None) -> "CategoryMatcher":
        return cls(markers_for_locale(locale))

    def __call__(self, name: str) -> ItemCategory:
        folded = _fold(name)
        if any(marker in folded for marker in self._discount):
            return ItemCategory.DISCOUNT
        if any(marker in folded for marker in self._credit):
            return ItemCategory.CREDIT
        return self._exact.get(folded, ItemCategory.REGULAR)


@dataclass(frozen=True)
class ClassifiedItem:
    item: Item
    category: ItemCategory


@dataclass(frozen=True)
class Classification:
    """Items tagged with a category, in input order, plus the ones that were skipped."""

    items: tuple[ClassifiedItem, ...]
    skipped: tuple[ItemRenderFault, ...]

    @property
    def has_special(self) -> bool:
        return any(entry.category.is_special for entry in self.items)

    def of(self, *categories: ItemCategory) -> list[ClassifiedItem]:
        """Return entries in any of the given categories, preserving input order."""
        wanted = set(categories)
        return [entry for entry in self.items if entry.category in wanted]


def check_item(item: Item) -> None:
    """Raise ItemRenderFault if the item cannot be printed."""
    if not isinstance(item.name, str) or not item.name.strip():
        raise ItemRenderFault(item.index, "missing name")
    if not isinstance(item.price, str):
        raise ItemRenderFault(item.index, "missing price")


def classify_items(items: Iterable[Item], matcher: Callable[[str], ItemCategory]) -> Classification:
    """Tag every valid item with its category; malformed items are skipped and logged."""
    classified: list[ClassifiedItem] = []
    skipped: list[ItemRenderFault] = []
    for item in items:
        try:
            check_item(item)
            classified.append(ClassifiedItem(item=item, category=matcher(item.name)))  # type: ignore[arg-type]
        except ItemRenderFault as exc:
            logger.warning("Skipping line item: %s", exc)
            skipped.append(exc)
    return Classification(items=tuple(classified), skipped=tuple(skipped))
