"""EAN-13 normalization and QR payload checks."""

from __future__ import annotations

import re
from dataclasses import dataclass, field

from receipt_print.config import (
    BARCODE_DIGITS,
    BARCODE_HEIGHT,
    BARCODE_HRI_FONT,
    BARCODE_HRI_POSITION,
    BARCODE_WIDTH,
    QR_CELL_SIZE,
    QR_CORRECTION,
    QR_MAX_BYTES,
    QR_MODEL,
    QR_PREFIX,
)
from receipt_print.errors import DecorationFault, InvalidBarcodeInput

EAN13 = "EAN13"

_NON_DIGITS = re.compile(r"[^0-9]")


@dataclass(frozen=True)
class BarcodeOptions:
    hri_position: str = BARCODE_HRI_POSITION
    hri_font: str = BARCODE_HRI_FONT
    width: int = BARCODE_WIDTH
    height: int = BARCODE_HEIGHT


@dataclass(frozen=True)
class QROptions:
    model: int = QR_MODEL
    cell_size: int = QR_CELL_SIZE
    correction: str = QR_CORRECTION


@dataclass(frozen=True)
class NormalizedBarcode:
    """Twelve EAN-13 data digits; the printer appends the check digit."""

    digits: str
    options: BarcodeOptions = field(default_factory=BarcodeOptions)


def normalize_barcode(value: object) -> NormalizedBarcode:
    """
    Reduce an arbitrary identifier to the 12 data digits of an EAN-13 code.

    Non-digits are dropped. Exactly 13 digits lose the trailing check digit,
    shorter values are zero-padded on the left and longer values keep their
    first 12 digits. Raises InvalidBarcodeInput when no digit is left.
    """
    text = "" if value is None else str(value)
    digits = _NON_DIGITS.sub("", text)
    if not digits:
        raise InvalidBarcodeInput(value)
    if len(digits) < BARCODE_DIGITS:
        digits = digits.rjust(BARCODE_DIGITS, "0")
    return NormalizedBarcode(digits=digits[:BARCODE_DIGITS])


def qr_payload(order_number: str) -> str:
    """Build the digital-receipt QR content for an order number."""
    return f"{QR_PREFIX}{order_number}"


def check_qr_data(data: str) -> str:
    """Return data unchanged if it fits a QR symbol, else raise DecorationFault."""
    if not data:
        raise DecorationFault("QR data is empty")
    size = len(data.encode("utf-8"))
    if size > QR_MAX_BYTES:
        raise DecorationFault(f"QR data too long ({size} bytes, max {QR_MAX_BYTES})")
    return data
