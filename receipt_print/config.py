"""Runtime configuration defaults for rendering and printing."""

from __future__ import annotations

import os
from dataclasses import dataclass

DEFAULT_LOCALE = "en"

PRINTER_TYPE = "usb"
PRINTER_USB_VENDOR_ID = 0x28E9
PRINTER_USB_PRODUCT_ID = 0x0289
PRINTER_NETWORK_PORT = 9100
PRINTER_SERIAL_BAUDRATE = 9600
# Characters per line in font A on 80mm paper.
PRINTER_LINE_WIDTH = 48
PRINTER_LINE_CHARACTER = "-"
# Printable dots per line on 80mm paper.
PRINTER_MEDIA_WIDTH_PX = 576
PRINTER_TIMEOUT_SECONDS = 30.0

PREVIEW_WIDTH_PX = 384
PREVIEW_FONT_SIZE = 13
PREVIEW_FONT_PATH = "/System/Library/Fonts/Menlo.ttc"

QR_PREFIX = "RECEIPT:"
QR_MODEL = 2
QR_CELL_SIZE = 6
QR_CORRECTION = "M"
# Byte-mode capacity of a version 40 symbol at correction level M.
QR_MAX_BYTES = 2331

BARCODE_DIGITS = 12
BARCODE_HRI_POSITION = "BELOW"
BARCODE_HRI_FONT = "A"
BARCODE_WIDTH = 3
BARCODE_HEIGHT = 64

_ENV_PREFIX = "RECEIPT_PRINTER_"


def _env(name: str, default: str | None = None) -> str | None:
    value = os.environ.get(f"{_ENV_PREFIX}{name}", "").strip()
    return value or default


def _env_int(name: str, default: int) -> int:
    raw = _env(name)
    if raw is None:
        return default
    # Accept hex USB ids like 0x28E9.
    return int(raw, 0)


@dataclass(frozen=True)
class PrinterSettings:
    """Connection and layout settings for one printer."""

    type: str = PRINTER_TYPE
    usb_vendor_id: int = PRINTER_USB_VENDOR_ID
    usb_product_id: int = PRINTER_USB_PRODUCT_ID
    host: str | None = None
    port: int = PRINTER_NETWORK_PORT
    serial_device: str = "/dev/ttyS0"
    baudrate: int = PRINTER_SERIAL_BAUDRATE
    file_path: str = "/dev/usb/lp0"
    profile: str | None = None
    line_width: int = PRINTER_LINE_WIDTH
    media_width_px: int = PRINTER_MEDIA_WIDTH_PX
    timeout: float = PRINTER_TIMEOUT_SECONDS
    qr_native: bool = False

    @classmethod
    def from_env(cls) -> "PrinterSettings":
        """Build settings from RECEIPT_PRINTER_* environment variables."""
        return cls(
            type=(_env("TYPE", PRINTER_TYPE) or PRINTER_TYPE).lower(),
            usb_vendor_id=_env_int("USB_VENDOR_ID", PRINTER_USB_VENDOR_ID),
            usb_product_id=_env_int("USB_PRODUCT_ID", PRINTER_USB_PRODUCT_ID),
            host=_env("HOST"),
            port=_env_int("PORT", PRINTER_NETWORK_PORT),
            serial_device=_env("SERIAL_DEVICE", "/dev/ttyS0") or "/dev/ttyS0",
            baudrate=_env_int("BAUDRATE", PRINTER_SERIAL_BAUDRATE),
            file_path=_env("FILE", "/dev/usb/lp0") or "/dev/usb/lp0",
            profile=_env("PROFILE"),
            line_width=_env_int("LINE_WIDTH", PRINTER_LINE_WIDTH),
            media_width_px=_env_int("MEDIA_WIDTH", PRINTER_MEDIA_WIDTH_PX),
            timeout=float(_env("TIMEOUT", str(PRINTER_TIMEOUT_SECONDS)) or PRINTER_TIMEOUT_SECONDS),
            qr_native=(_env("QR_NATIVE", "0") or "0").lower() in {"1", "true", "yes"},
        )


def resolve_locale() -> str:
    """Return RECEIPT_LOCALE if set, otherwise the default locale."""
    return os.environ.get("RECEIPT_LOCALE", "").strip().lower() or DEFAULT_LOCALE
