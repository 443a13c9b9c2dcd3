from __future__ import annotations

import pytest

from receipt_print.classify import CategoryMatcher, ItemCategory, classify_items
from receipt_print.data import CategoryMarkers
from receipt_print.errors import ItemRenderFault
from receipt_print.models import Item


@pytest.mark.parametrize(
    ("name", "category"),
    [
        ("Coffee", ItemCategory.REGULAR),
        ("Discount 10%", ItemCategory.DISCOUNT),
        ("Staff DISCOUNT", ItemCategory.DISCOUNT),
        ("Store Credit", ItemCategory.CREDIT),
        ("Payment method", ItemCategory.PAYMENT_METHOD),
        ("  payment METHOD ", ItemCategory.PAYMENT_METHOD),
        ("Change", ItemCategory.CHANGE),
        ("Amount tendered", ItemCategory.TENDERED),
        # Exact labels do not match as substrings.
        ("Change due later", ItemCategory.REGULAR),
        ("Payment method fee", ItemCategory.REGULAR),
    ],
)
def test_english_matcher(matcher, name, category):
    assert matcher(name) is category


@pytest.mark.parametrize(
    ("name", "category"),
    [
        ("Rabatt 5%", ItemCategory.DISCOUNT),
        ("Gutschrift", ItemCategory.CREDIT),
        ("Zahlungsart", ItemCategory.PAYMENT_METHOD),
        ("Rückgeld", ItemCategory.CHANGE),
        ("RÜCKGELD", ItemCategory.CHANGE),
        ("Brezel", ItemCategory.REGULAR),
    ],
)
def test_german_matcher(name, category):
    assert CategoryMatcher.for_locale("de")(name) is category


def test_custom_markers():
    markers = CategoryMarkers(
        discount=("remise",),
        credit=("avoir",),
        payment_method=("mode de paiement",),
        change=("monnaie",),
        tendered=("reçu",),
    )
    matcher = CategoryMatcher(markers)
    assert matcher("Remise fidélité") is ItemCategory.DISCOUNT
    assert matcher("Monnaie") is ItemCategory.CHANGE


def test_classification_preserves_order_and_skips_malformed(matcher):
    items = [
        Item("Coffee", "3.00", index=0),
        Item("", "1.00", index=1),
        Item("Discount", "-1.00", index=2),
        Item("Tea", None, index=3),
        Item("Cake", "4.00", index=4),
    ]
    result = classify_items(items, matcher)

    assert [entry.item.index for entry in result.items] == [0, 2, 4]
    assert [entry.item.name for entry in result.of(ItemCategory.REGULAR)] == ["Coffee", "Cake"]
    assert result.has_special
    assert [fault.index for fault in result.skipped] == [1, 3]
    assert all(isinstance(fault, ItemRenderFault) for fault in result.skipped)


def test_pluggable_matcher_function():
    result = classify_items([Item("anything", "1", index=0)], lambda name: ItemCategory.CHANGE)
    assert result.items[0].category is ItemCategory.CHANGE


def test_no_special_items(matcher):
    result = classify_items([Item("Coffee", "3.00")], matcher)
    assert not result.has_special
