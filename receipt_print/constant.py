"""Editable static receipt text per locale."""

from __future__ import annotations

# Canonical label values consumed by receipt_print.data (which wraps these into ReceiptLabels instances).
LABELS_BY_LOCALE: dict[str, dict[str, str | list[str]]] = {
    "de": {
        "receipt_title": "KAUFBELEG",
        "deposit_title": "EINZAHLUNGSBELEG",
        "order_number": "Beleg-Nr.:",
        "date": "Datum:",
        "subtotal": "ZWISCHENSUMME:",
        "total": "GESAMTBETRAG:",
        "deposit_total": "EINZAHLUNG GESAMT:",
        "tax_note": "Enthaltene MwSt. 19%",
        "company_lines": [
            "BankLy LLC German Branch",
            "Mainzer Landstraße 55",
            "60325 Frankfurt, Germany",
        ],
        "qr_hint": "Scannen Sie für die digitale Quittung",
        "printed": "Beleg erfolgreich gedruckt",
        "print_failed": "Fehler beim Drucken",
        "connection_refused": "Drucker nicht erreichbar. Bitte überprüfen Sie die Verbindung.",
        "permission_denied": "Keine Berechtigung zum Zugriff auf den Drucker.",
        "timeout": "Zeitüberschreitung beim Drucken.",
        "online": "Drucker ist verbunden",
        "offline": "Drucker ist nicht verbunden",
    },
    "en": {
        "receipt_title": "RECEIPT",
        "deposit_title": "DEPOSIT SLIP",
        "order_number": "Receipt No.:",
        "date": "Date:",
        "subtotal": "SUBTOTAL",
        "total": "TOTAL",
        "deposit_total": "DEPOSIT TOTAL",
        "tax_note": "Includes VAT 19%",
        "company_lines": [
            "BankLy LLC German Branch",
            "Mainzer Landstraße 55",
            "60325 Frankfurt, Germany",
        ],
        "qr_hint": "Scan for your digital receipt",
        "printed": "Receipt printed successfully",
        "print_failed": "Printing failed",
        "connection_refused": "Printer not reachable. Please check the connection.",
        "permission_denied": "No permission to access the printer.",
        "timeout": "Printing timed out.",
        "online": "Printer is connected",
        "offline": "Printer is not connected",
    },
}

# Item-name markers. Discount/credit match by substring, the rest by equality.
CATEGORY_MARKERS_BY_LOCALE: dict[str, dict[str, list[str]]] = {
    "de": {
        "discount": ["Rabatt"],
        "credit": ["Gutschrift"],
        "payment_method": ["Zahlungsart"],
        "change": ["Rückgeld"],
        "tendered": ["Gegeben"],
    },
    "en": {
        "discount": ["Discount"],
        "credit": ["Credit"],
        "payment_method": ["Payment method"],
        "change": ["Change"],
        "tendered": ["Amount tendered"],
    },
}
