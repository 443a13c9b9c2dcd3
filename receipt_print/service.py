"""Render-and-print entry points used by callers such as an HTTP layer or the CLI."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable

from receipt_print import __version__
from receipt_print.classify import CategoryMatcher, ItemCategory
from receipt_print.data import ReceiptLabels, labels_for_locale
from receipt_print.errors import (
    ConnectionRefused,
    PermissionDenied,
    PrinterFault,
    PrintError,
    PrintTimeout,
    ValidationFault,
)
from receipt_print.jobs import JobOutcome, PrintQueue
from receipt_print.layout import (
    RenderResult,
    render_barcode,
    render_content,
    render_deposit_slip,
    render_receipt,
)
from receipt_print.models import DocumentType, Order, order_from_payload

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PrintResult:
    success: bool
    message: str
    skipped: tuple[PrintError, ...] = ()
    job: JobOutcome | None = None


@dataclass(frozen=True)
class PrinterStatus:
    online: bool
    message: str
    version: str = __version__


class PrintService:
    """Build command sequences from requests and send them through a PrintQueue."""

    def __init__(
        self,
        queue: PrintQueue,
        labels: ReceiptLabels | None = None,
        matcher: Callable[[str], ItemCategory] | None = None,
        timeout: float | None = None,
    ) -> None:
        self.queue = queue
        self.labels = labels or labels_for_locale()
        self.matcher = matcher or CategoryMatcher.for_locale()
        self.timeout = timeout

    def print_receipt(self, payload: Any, timeout: float | None = None) -> PrintResult:
        order = self._parse(payload, DocumentType.RECEIPT)
        rendered = render_receipt(order, labels=self.labels, matcher=self.matcher)
        return self._print(rendered, order, timeout)

    def print_deposit_slip(self, payload: Any, timeout: float | None = None) -> PrintResult:
        order = self._parse(payload, DocumentType.DEPOSIT_SLIP)
        rendered = render_deposit_slip(order, labels=self.labels)
        return self._print(rendered, order, timeout)

    def print_barcode(self, identifier: object, timeout: float | None = None) -> PrintResult:
        sequence = self._guard(lambda: render_barcode(identifier))
        return self._print(RenderResult(sequence), None, timeout)

    def print_content(self, content: Any, timeout: float | None = None) -> PrintResult:
        sequence = self._guard(lambda: render_content(content))
        return self._print(RenderResult(sequence), None, timeout)

    def status(self) -> PrinterStatus:
        online = self.queue.is_online(timeout=self.timeout)
        return PrinterStatus(online=online, message=self.labels.online if online else self.labels.offline)

    def describe_fault(self, fault: PrinterFault) -> str:
        """Return the user-facing message for a printer fault."""
        if isinstance(fault, ConnectionRefused):
            return self.labels.connection_refused
        if isinstance(fault, PermissionDenied):
            return self.labels.permission_denied
        if isinstance(fault, PrintTimeout):
            return self.labels.timeout
        return str(fault) or self.labels.print_failed

    def _parse(self, payload: Any, document: DocumentType) -> Order:
        return self._guard(lambda: order_from_payload(payload, document, labels=self.labels))

    def _guard(self, build: Callable[[], Any]) -> Any:
        """Run a render step; on a validation fault queue a printer reset, then re-raise."""
        try:
            return build()
        except ValidationFault as exc:
            logger.warning("Rejected print request: %s", exc)
            self.queue.schedule_reset()
            raise

    def _print(self, rendered: RenderResult, order: Order | None, timeout: float | None) -> PrintResult:
        character_set = order.printer_config.character_set if order and order.printer_config else None
        try:
            job = self.queue.submit(
                rendered.sequence,
                timeout=timeout if timeout is not None else self.timeout,
                character_set=character_set,
            )
        except PrinterFault as exc:
            logger.error("Printing failed: %s", self.describe_fault(exc))
            raise
        return PrintResult(success=True, message=self.labels.printed, skipped=rendered.skipped, job=job)
