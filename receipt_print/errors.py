"""Fault taxonomy for rendering and printing."""

from __future__ import annotations


class PrintError(Exception):
    """Base class for every fault raised by receipt-print."""


class ValidationFault(PrintError):
    """The request itself is malformed and cannot be rendered."""


class InvalidBarcodeInput(ValidationFault):
    """A barcode identifier contains no digits."""

    def __init__(self, value: object) -> None:
        super().__init__(f"No digits in barcode input: {value!r}")
        self.value = value


class ItemRenderFault(PrintError):
    """A single line item could not be rendered and was skipped."""

    def __init__(self, index: int, reason: str) -> None:
        super().__init__(f"Item {index}: {reason}")
        self.index = index
        self.reason = reason


class DecorationFault(PrintError):
    """A QR code or barcode block could not be produced and was omitted."""

    def __init__(self, reason: str) -> None:
        super().__init__(reason)
        self.reason = reason


class PrinterFault(PrintError):
    """The printer driver failed to execute a job."""

    code = "unknown"


class ConnectionRefused(PrinterFault):
    code = "connection_refused"


class PermissionDenied(PrinterFault):
    code = "permission_denied"


class UnknownPrinterFault(PrinterFault):
    def __init__(self, detail: str) -> None:
        super().__init__(detail)
        self.detail = detail


class PrintTimeout(PrinterFault):
    code = "timeout"
