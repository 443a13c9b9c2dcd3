from __future__ import annotations

import threading

import pytest
from escpos.printer import Dummy

from receipt_print.data import labels_for_locale
from receipt_print.errors import ConnectionRefused, InvalidBarcodeInput, PermissionDenied, PrintTimeout, UnknownPrinterFault, ValidationFault
from receipt_print.jobs import PrintQueue
from receipt_print.layout import render_barcode
from receipt_print.printer import EscposDriver, PrinterDriver
from receipt_print.service import PrintService


@pytest.fixture
def service(driver, labels, matcher):
    queue = PrintQueue(driver)
    yield PrintService(queue, labels=labels, matcher=matcher, timeout=5)
    queue.close()


def test_print_receipt(service, driver, receipt_payload):
    result = service.print_receipt(receipt_payload)

    assert result.success
    assert result.message == "Receipt printed successfully"
    assert result.skipped == ()
    assert result.job is not None
    assert len(driver.executed) == 1
    assert driver.resets == 1


def test_print_receipt_reports_skipped_items(service, receipt_payload):
    receipt_payload["items"].append({"price": "1.00"})
    result = service.print_receipt(receipt_payload)
    assert result.success
    assert len(result.skipped) == 1


def test_validation_fault_queues_reset(service, driver):
    with pytest.raises(ValidationFault):
        service.print_receipt({"items": "not a list"})
    service.queue.close()
    assert driver.executed == []
    assert driver.resets == 1


def test_invalid_barcode_is_surfaced(service, driver):
    with pytest.raises(InvalidBarcodeInput):
        service.print_barcode("N/A")
    service.queue.close()
    assert driver.resets == 1


def test_print_barcode_and_content(service, driver):
    assert service.print_barcode("4006381333931").success
    assert service.print_content({"text": "Hello"}).success
    assert len(driver.executed) == 2


def test_print_deposit_slip(service, driver):
    result = service.print_deposit_slip({"orderNumber": "12", "total": "10.00", "items": []})
    assert result.success
    assert len(driver.executed) == 1


def test_character_set_from_payload(service, driver, receipt_payload):
    receipt_payload["printerConfig"] = {"characterSet": "SLOVENIA"}
    service.print_receipt(receipt_payload)
    assert driver.character_sets == ["SLOVENIA"]


def test_printer_fault_propagates_after_reset(make_driver, labels, matcher, receipt_payload):
    driver = make_driver(fail_with=ConnectionRefused("refused"))
    with PrintQueue(driver) as queue:
        service = PrintService(queue, labels=labels, matcher=matcher)
        with pytest.raises(ConnectionRefused) as info:
            service.print_receipt(receipt_payload)
    assert driver.resets == 1
    assert service.describe_fault(info.value) == "Printer not reachable. Please check the connection."


def test_fault_messages_are_localized(driver, matcher):
    with PrintQueue(driver) as queue:
        service = PrintService(queue, labels=labels_for_locale("de"), matcher=matcher)
        assert service.describe_fault(PermissionDenied("x")) == "Keine Berechtigung zum Zugriff auf den Drucker."
        assert service.describe_fault(PrintTimeout("x")) == "Zeitüberschreitung beim Drucken."
        assert service.describe_fault(UnknownPrinterFault("paper jam")) == "paper jam"


def test_status(service, driver):
    status = service.status()
    assert status.online
    assert status.message == "Printer is connected"
    driver.online = False
    assert service.status().message == "Printer is not connected"


def test_end_to_end_with_dummy_printer(labels, matcher, receipt_payload):
    device = Dummy()
    escpos_driver: PrinterDriver = EscposDriver(device)
    receipt_payload.pop("orderNumber")
    with PrintQueue(escpos_driver) as queue:
        result = PrintService(queue, labels=labels, matcher=matcher).print_receipt(receipt_payload)

    assert result.success
    assert b"SUBTOTAL" in device.output
    assert b"Thank you!" in device.output
    assert device.output.endswith(b"\x1b@")


def test_busy_printer_does_not_hide_request_errors(make_driver, labels, matcher):
    release = threading.Event()
    driver = make_driver(gate=release)
    queue = PrintQueue(driver)
    service = PrintService(queue, labels=labels, matcher=matcher, timeout=0.05)
    busy = threading.Thread(target=queue.submit, args=(render_barcode("42"),))
    busy.start()
    assert driver.started.wait(5)

    with pytest.raises(ValidationFault):
        service.print_receipt({"items": "not a list"})
    assert service.status().online is False

    release.set()
    busy.join()
    queue.close()
    assert driver.resets == 2
