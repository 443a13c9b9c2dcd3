"""ESC/POS printer driver built on python-escpos."""

from __future__ import annotations

import copy
import errno
import logging
from typing import Protocol

from escpos import printer as escpos_printer
from escpos.constants import QR_ECLEVEL_H, QR_ECLEVEL_L, QR_ECLEVEL_M, QR_ECLEVEL_Q, QR_MODEL_1, QR_MODEL_2
from escpos.escpos import Escpos
from escpos.exceptions import Error as EscposError

from receipt_print.commands import (
    AlignCenter,
    AlignLeft,
    AlignRight,
    Bold,
    Command,
    CommandSequence,
    Cut,
    DrawLine,
    LeftRight,
    NewLine,
    PrintBarcode,
    PrintQR,
    Println,
    TextNormal,
    TextSize,
    justify,
)
from receipt_print.config import PRINTER_LINE_CHARACTER, PRINTER_LINE_WIDTH, PRINTER_MEDIA_WIDTH_PX, PrinterSettings
from receipt_print.errors import ConnectionRefused, PermissionDenied, PrinterFault, UnknownPrinterFault

logger = logging.getLogger(__name__)

_QR_EC_LEVELS = {"L": QR_ECLEVEL_L, "M": QR_ECLEVEL_M, "Q": QR_ECLEVEL_Q, "H": QR_ECLEVEL_H}
_QR_MODELS = {1: QR_MODEL_1, 2: QR_MODEL_2}


class PrinterDriver(Protocol):
    """What the print queue needs from a printer."""

    def execute(self, sequence: CommandSequence) -> None: ...

    def reset(self) -> None: ...

    def is_online(self) -> bool: ...

    def set_character_set(self, name: str) -> None: ...


def translate_fault(exc: BaseException) -> PrinterFault:
    """Map a transport exception onto the printer fault taxonomy."""
    if isinstance(exc, PrinterFault):
        return exc
    if isinstance(exc, ConnectionRefusedError):
        return ConnectionRefused(str(exc))
    if isinstance(exc, PermissionError):
        return PermissionDenied(str(exc))
    code = getattr(exc, "errno", None)
    if code == errno.ECONNREFUSED:
        return ConnectionRefused(str(exc))
    if code in (errno.EPERM, errno.EACCES):
        return PermissionDenied(str(exc))
    return UnknownPrinterFault(str(exc) or type(exc).__name__)


class EscposDriver:
    """
    Execute command sequences on a python-escpos printer.

    The whole sequence is first encoded into an in-memory Dummy printer and
    only then written to the device in one call, so an encoding error never
    leaves a half-printed job on the paper.
    """

    def __init__(
        self,
        printer: Escpos,
        line_width: int = PRINTER_LINE_WIDTH,
        line_character: str = PRINTER_LINE_CHARACTER,
        qr_native: bool = False,
        profile: str | None = None,
        media_width_px: int = PRINTER_MEDIA_WIDTH_PX,
    ) -> None:
        self._printer = printer
        self._line_width = line_width
        self._line_character = line_character
        self._qr_native = qr_native
        self._profile = profile
        self._media_width_px = media_width_px
        self._width_multiplier = 1

    @classmethod
    def from_settings(cls, settings: PrinterSettings) -> "EscposDriver":
        return cls(
            create_printer(settings),
            line_width=settings.line_width,
            qr_native=settings.qr_native,
            profile=settings.profile,
            media_width_px=settings.media_width_px,
        )

    def encode(self, sequence: CommandSequence) -> bytes:
        """Encode a sequence to raw ESC/POS bytes without touching the device."""
        buffer = escpos_printer.Dummy(profile=self._profile)
        self._fill_media_width(buffer)
        self._width_multiplier = 1
        for command in sequence:
            self._apply(buffer, command)
        return buffer.output

    def execute(self, sequence: CommandSequence) -> None:
        try:
            payload = self.encode(sequence)
            self._printer._raw(payload)
        except (EscposError, OSError, ValueError, KeyError) as exc:
            raise translate_fault(exc) from exc
        logger.debug("Sent %d bytes (%d commands) to printer", len(payload), len(sequence))

    def reset(self) -> None:
        """Re-initialize the printer (ESC @)."""
        try:
            self._printer.hw("INIT")
        except (EscposError, OSError) as exc:
            raise translate_fault(exc) from exc

    def is_online(self) -> bool:
        if isinstance(self._printer, escpos_printer.Dummy):
            return True
        try:
            return bool(self._printer.is_online())
        except Exception as exc:
            logger.debug("Printer status query failed: %s", exc)
            return False

    def set_character_set(self, name: str) -> None:
        try:
            self._printer.charcode(name)
        except (EscposError, OSError, ValueError) as exc:
            raise translate_fault(exc) from exc

    def close(self) -> None:
        self._printer.close()

    def _fill_media_width(self, buffer: Escpos) -> None:
        # Profile data is shared by every printer using the profile; patch a copy.
        data = buffer.profile.profile_data
        if data.get("media", {}).get("width", {}).get("pixels", "Unknown") != "Unknown":
            return
        data = copy.deepcopy(data)
        data.setdefault("media", {}).setdefault("width", {})["pixels"] = self._media_width_px
        buffer.profile.profile_data = data

    def _chars_per_line(self) -> int:
        return max(1, self._line_width // self._width_multiplier)

    def _apply(self, p: Escpos, command: Command) -> None:
        if isinstance(command, AlignLeft):
            p.set(align="left")
        elif isinstance(command, AlignCenter):
            p.set(align="center")
        elif isinstance(command, AlignRight):
            p.set(align="right")
        elif isinstance(command, Bold):
            p.set(bold=command.on)
        elif isinstance(command, TextSize):
            p.set(custom_size=True, width=command.width + 1, height=command.height + 1)
            self._width_multiplier = command.width + 1
        elif isinstance(command, TextNormal):
            p.set(normal_textsize=True)
            self._width_multiplier = 1
        elif isinstance(command, Println):
            p.textln(command.text)
        elif isinstance(command, LeftRight):
            p.textln(justify(command.left, command.right, self._chars_per_line()))
        elif isinstance(command, DrawLine):
            p.textln(self._line_character * self._chars_per_line())
        elif isinstance(command, NewLine):
            p.ln()
        elif isinstance(command, Cut):
            p.cut()
        elif isinstance(command, PrintBarcode):
            opts = command.options
            p.barcode(
                command.data,
                command.symbology,
                height=opts.height,
                width=opts.width,
                pos=opts.hri_position,
                font=opts.hri_font,
                align_ct=False,
            )
        elif isinstance(command, PrintQR):
            opts = command.options
            p.qr(
                command.data,
                ec=_QR_EC_LEVELS[opts.correction],
                size=opts.cell_size,
                model=_QR_MODELS[opts.model],
                native=self._qr_native,
            )
        else:
            raise ValueError(f"Unsupported printer command: {command!r}")


def create_printer(settings: PrinterSettings) -> Escpos:
    """Open the python-escpos printer described by settings."""
    kind = settings.type
    profile = settings.profile
    if kind == "usb":
        return escpos_printer.Usb(settings.usb_vendor_id, settings.usb_product_id, profile=profile)
    if kind == "network":
        if not settings.host:
            raise ValueError("Network printer needs RECEIPT_PRINTER_HOST")
        return escpos_printer.Network(settings.host, port=settings.port, timeout=settings.timeout, profile=profile)
    if kind == "serial":
        return escpos_printer.Serial(devfile=settings.serial_device, baudrate=settings.baudrate, profile=profile)
    if kind == "file":
        return escpos_printer.File(settings.file_path, profile=profile)
    if kind == "dummy":
        return escpos_printer.Dummy(profile=profile)
    raise ValueError(f"Unknown printer type {kind!r}")


def check_printer_dependencies(settings: PrinterSettings) -> tuple[bool, str]:
    """Check whether the configured printer backend is importable."""
    try:
        if settings.type == "usb":
            import usb.core  # noqa: F401
        elif settings.type == "serial":
            import serial  # noqa: F401
    except ImportError as exc:
        return (False, f"Printer deps unavailable: {exc}")
    return (True, "Printer ready")
