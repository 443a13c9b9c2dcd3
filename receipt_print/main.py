"""Entry point for the receipt-print command line."""

from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from typing import Any

from escpos.exceptions import Error as EscposError
from rich.console import Console

from receipt_print import __version__
from receipt_print.classify import CategoryMatcher
from receipt_print.config import PrinterSettings, resolve_locale
from receipt_print.constant import LABELS_BY_LOCALE
from receipt_print.data import labels_for_locale
from receipt_print.errors import PrinterFault, ValidationFault
from receipt_print.jobs import PrintQueue
from receipt_print.layout import RenderResult, render_barcode, render_content, render_deposit_slip, render_receipt
from receipt_print.models import DocumentType, order_from_payload
from receipt_print.printer import EscposDriver, check_printer_dependencies
from receipt_print.rendering import preview_image, preview_text
from receipt_print.service import PrintService

EXIT_OK = 0
EXIT_PRINTER_FAULT = 1
EXIT_INVALID_REQUEST = 2


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="receipt-print", description="Render and print thermal receipts.")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "--locale",
        default=None,
        choices=sorted(LABELS_BY_LOCALE),
        help="label locale (default: RECEIPT_LOCALE or en)",
    )
    parser.add_argument("--log-level", default=os.environ.get("RECEIPT_LOG_LEVEL", "WARNING"))
    sub = parser.add_subparsers(dest="command", required=True)

    def add_output_flags(cmd: argparse.ArgumentParser) -> None:
        cmd.add_argument("--dry-run", action="store_true", help="show a preview instead of printing")
        cmd.add_argument("--png", metavar="PATH", help="write a raster preview instead of printing")
        cmd.add_argument("--timeout", type=float, default=None, help="seconds to wait for the printer")

    for name, help_text in (
        ("receipt", "print an itemized sales receipt"),
        ("deposit", "print a deposit slip"),
        ("print", "print free-form content"),
    ):
        cmd = sub.add_parser(name, help=help_text)
        cmd.add_argument("input", nargs="?", default="-", help="JSON file, or - for stdin")
        add_output_flags(cmd)

    barcode = sub.add_parser("barcode", help="print a standalone EAN-13 barcode")
    barcode.add_argument("identifier")
    add_output_flags(barcode)

    sub.add_parser("status", help="check whether the printer is reachable")
    return parser


def _read_json(source: str) -> Any:
    if source == "-":
        return json.load(sys.stdin)
    with open(source, encoding="utf-8") as fh:
        return json.load(fh)


def _render(args: argparse.Namespace, payload: Any) -> RenderResult:
    labels = labels_for_locale(args.locale)
    if args.command == "receipt":
        order = order_from_payload(payload, DocumentType.RECEIPT, labels=labels)
        return render_receipt(order, labels=labels, matcher=CategoryMatcher.for_locale(args.locale))
    if args.command == "deposit":
        order = order_from_payload(payload, DocumentType.DEPOSIT_SLIP, labels=labels)
        return render_deposit_slip(order, labels=labels)
    if args.command == "barcode":
        return RenderResult(render_barcode(args.identifier))
    return RenderResult(render_content(payload))


def _preview(args: argparse.Namespace, payload: Any, console: Console, width: int) -> int:
    rendered = _render(args, payload)
    for fault in rendered.skipped:
        console.print(f"[yellow]skipped:[/yellow] {fault}")
    if args.png:
        preview_image(rendered.sequence, width).save(args.png)
        console.print(f"Preview written to {args.png}")
    else:
        console.print(preview_text(rendered.sequence, width))
    return EXIT_OK


def _print(args: argparse.Namespace, payload: Any, service: PrintService) -> Any:
    if args.command == "receipt":
        return service.print_receipt(payload, timeout=args.timeout)
    if args.command == "deposit":
        return service.print_deposit_slip(payload, timeout=args.timeout)
    if args.command == "barcode":
        return service.print_barcode(args.identifier, timeout=args.timeout)
    return service.print_content(payload, timeout=args.timeout)


def main(argv: list[str] | None = None) -> int:
    """Run the receipt-print command line."""
    args = _build_parser().parse_args(argv)
    logging.basicConfig(level=args.log_level.upper(), format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    args.locale = args.locale or resolve_locale()
    console = Console()
    settings = PrinterSettings.from_env()

    payload: Any = None
    if args.command in {"receipt", "deposit", "print"}:
        try:
            payload = _read_json(args.input)
        except (OSError, json.JSONDecodeError) as exc:
            console.print(f"[red]Cannot read request:[/red] {exc}")
            return EXIT_INVALID_REQUEST

    if args.command != "status" and (args.dry_run or args.png):
        try:
            return _preview(args, payload, console, settings.line_width)
        except ValidationFault as exc:
            console.print(f"[red]Invalid request:[/red] {exc}")
            return EXIT_INVALID_REQUEST

    ready, detail = check_printer_dependencies(settings)
    if not ready:
        console.print(f"[red]Printer unavailable:[/red] {detail}")
        return EXIT_PRINTER_FAULT

    try:
        driver = EscposDriver.from_settings(settings)
    except (ValueError, OSError, EscposError) as exc:
        console.print(f"[red]Printer unavailable:[/red] {exc}")
        return EXIT_PRINTER_FAULT

    labels = labels_for_locale(args.locale)
    with PrintQueue(driver, name=settings.type) as queue:
        service = PrintService(
            queue,
            labels=labels,
            matcher=CategoryMatcher.for_locale(args.locale),
            timeout=settings.timeout,
        )
        if args.command == "status":
            status = service.status()
            console.print(f"{status.message} (receipt-print {status.version})")
            return EXIT_OK if status.online else EXIT_PRINTER_FAULT
        try:
            result = _print(args, payload, service)
        except ValidationFault as exc:
            console.print(f"[red]Invalid request:[/red] {exc}")
            return EXIT_INVALID_REQUEST
        except PrinterFault as exc:
            console.print(f"[red]{service.describe_fault(exc)}[/red]")
            return EXIT_PRINTER_FAULT

    for fault in result.skipped:
        console.print(f"[yellow]skipped:[/yellow] {fault}")
    console.print(result.message)
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
