"""Receipt, deposit-slip and barcode layouts."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Callable, Iterable

from receipt_print.barcode import check_qr_data, normalize_barcode, qr_payload
from receipt_print.classify import (
    CategoryMatcher,
    ClassifiedItem,
    ItemCategory,
    check_item,
    classify_items,
)
from receipt_print.commands import Command, CommandBuilder, CommandSequence, PrintBarcode, PrintQR
from receipt_print.data import ReceiptLabels, labels_for_locale
from receipt_print.errors import DecorationFault, InvalidBarcodeInput, ItemRenderFault, PrintError, ValidationFault
from receipt_print.models import Item, Order

logger = logging.getLogger(__name__)

# Special items print in three passes, each separated by a drawn line.
_SPECIAL_PASSES: tuple[tuple[ItemCategory, ...], ...] = (
    (ItemCategory.DISCOUNT, ItemCategory.CREDIT),
    (ItemCategory.PAYMENT_METHOD,),
    (ItemCategory.CHANGE, ItemCategory.TENDERED),
)


@dataclass(frozen=True)
class RenderResult:
    """A finished command sequence and the faults recovered while building it."""

    sequence: CommandSequence
    skipped: tuple[PrintError, ...] = ()


def _header(builder: CommandBuilder, order: Order, labels: ReceiptLabels) -> None:
    builder.align_center()
    builder.text_size(1, 1)
    builder.bold(True)
    builder.println(order.title)
    builder.bold(False)
    builder.text_normal()
    builder.new_line()

    builder.align_left()
    if order.order_number:
        builder.println(f"{labels.order_number} {order.order_number}")
    if order.date:
        builder.println(f"{labels.date} {order.date}")
    builder.draw_line()


def _item_lines(builder: CommandBuilder, item: Item) -> None:
    builder.left_right(item.name, item.price)  # type: ignore[arg-type]
    if item.description:
        builder.text_size(0, 0)
        builder.println(f"  {item.description}")
        builder.text_normal()


def _company_block(builder: CommandBuilder, labels: ReceiptLabels) -> None:
    builder.new_line()
    builder.align_center()
    for line in labels.company_lines:
        builder.println(line)


def _special_passes(builder: CommandBuilder, entries: list[ClassifiedItem], total: str | None, labels: ReceiptLabels) -> None:
    builder.draw_line()
    builder.bold(True)
    builder.left_right(labels.subtotal, total or "")
    builder.bold(False)

    for pass_idx, categories in enumerate(_SPECIAL_PASSES):
        if pass_idx > 0:
            builder.draw_line()
        wanted = set(categories)
        for entry in entries:
            if entry.category in wanted:
                builder.left_right(entry.item.name, entry.item.price)  # type: ignore[arg-type]


def _qr_block(order_number: str, labels: ReceiptLabels, build_payload: Callable[[str], str]) -> list[Command]:
    """Return the QR block commands, or raise DecorationFault."""
    try:
        data = build_payload(order_number)
    except DecorationFault:
        raise
    except Exception as exc:
        raise DecorationFault(f"QR payload failed: {exc}") from exc
    check_qr_data(data)

    block = CommandBuilder()
    block.new_line()
    block.align_center()
    block.append(PrintQR(data))
    block.new_line()
    block.println(labels.qr_hint)
    block.new_line()
    return list(block.finish())


def render_receipt(
    order: Order,
    labels: ReceiptLabels | None = None,
    matcher: Callable[[str], ItemCategory] | None = None,
    build_qr_payload: Callable[[str], str] = qr_payload,
) -> RenderResult:
    """Render a sales receipt with discount and payment lines deferred below the subtotal."""
    labels = labels or labels_for_locale()
    matcher = matcher or CategoryMatcher.for_locale()
    builder = CommandBuilder()
    skipped: list[PrintError] = []

    _header(builder, order, labels)

    classification = classify_items(order.items, matcher)
    skipped.extend(classification.skipped)

    for entry in classification.of(ItemCategory.REGULAR):
        _item_lines(builder, entry.item)

    if classification.has_special:
        _special_passes(builder, list(classification.items), order.total, labels)

    builder.draw_line()
    if order.total:
        builder.bold(True)
        builder.text_size(0, 1)
        builder.left_right(labels.total, order.total)
        builder.text_normal()
        builder.bold(False)

    builder.new_line()
    builder.align_center()
    builder.println(labels.tax_note)
    builder.new_line()
    for line in labels.company_lines:
        builder.println(line)

    if order.footer_text:
        builder.new_line()
        builder.align_center()
        builder.bold(True)
        builder.println(order.footer_text)
        builder.bold(False)

    if order.order_number:
        try:
            builder.extend(_qr_block(order.order_number, labels, build_qr_payload))
        except DecorationFault as exc:
            logger.warning("Omitting receipt QR code: %s", exc)
            skipped.append(exc)

    builder.cut()
    return RenderResult(sequence=builder.finish(), skipped=tuple(skipped))


def _flat_items(builder: CommandBuilder, items: Iterable[Item]) -> list[PrintError]:
    skipped: list[PrintError] = []
    for item in items:
        try:
            check_item(item)
        except ItemRenderFault as exc:
            logger.warning("Skipping line item: %s", exc)
            skipped.append(exc)
            continue
        _item_lines(builder, item)
    return skipped


def render_deposit_slip(order: Order, labels: ReceiptLabels | None = None) -> RenderResult:
    """Render a deposit slip: flat item list, deposit total and a trailing barcode."""
    labels = labels or labels_for_locale()
    builder = CommandBuilder()

    _header(builder, order, labels)
    skipped = _flat_items(builder, order.items)

    builder.draw_line()
    if order.total:
        builder.bold(True)
        builder.left_right(labels.deposit_total, order.total)
        builder.bold(False)

    _company_block(builder, labels)

    if order.order_number:
        try:
            barcode = normalize_barcode(order.order_number)
        except InvalidBarcodeInput as exc:
            fault = DecorationFault(str(exc))
            logger.warning("Omitting deposit slip barcode: %s", fault)
            skipped.append(fault)
        else:
            builder.new_line()
            builder.align_center()
            builder.append(PrintBarcode(barcode.digits, options=barcode.options))
            builder.new_line()

    builder.cut()
    return RenderResult(sequence=builder.finish(), skipped=tuple(skipped))


def render_barcode(identifier: object) -> CommandSequence:
    """Render a standalone EAN-13 barcode; raises InvalidBarcodeInput when there are no digits."""
    barcode = normalize_barcode(identifier)
    builder = CommandBuilder()
    builder.align_center()
    builder.append(PrintBarcode(barcode.digits, options=barcode.options))
    builder.new_line()
    builder.cut()
    return builder.finish()


def render_content(content: Any) -> CommandSequence:
    """Render a free-form print request (text, alignment, title, item strings)."""
    if not isinstance(content, Mapping) or not content:
        raise ValidationFault("No content provided for printing")
    items = content.get("items")
    if items is not None and not isinstance(items, list):
        raise ValidationFault("Field 'items' must be a list")

    builder = CommandBuilder()
    if content.get("text"):
        builder.println(str(content["text"]))
    if content.get("alignCenter"):
        builder.align_center()
    if content.get("alignLeft"):
        builder.align_left()
    if content.get("alignRight"):
        builder.align_right()
    if content.get("drawLine"):
        builder.draw_line()
    if content.get("title"):
        builder.align_center()
        builder.bold(True)
        builder.println(str(content["title"]))
        builder.bold(False)
        builder.draw_line()
    for entry in items or []:
        builder.println(str(entry))
    if content.get("cut", True) is not False:
        builder.cut()
    return builder.finish()
