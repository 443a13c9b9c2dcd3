"""Locale label data."""

from __future__ import annotations

from dataclasses import dataclass, fields, replace

from receipt_print.config import resolve_locale
from receipt_print.constant import CATEGORY_MARKERS_BY_LOCALE, LABELS_BY_LOCALE


@dataclass(frozen=True)
class ReceiptLabels:
    """Static text printed on receipts and deposit slips."""

    receipt_title: str
    deposit_title: str
    order_number: str
    date: str
    subtotal: str
    total: str
    deposit_total: str
    tax_note: str
    company_lines: tuple[str, ...]
    qr_hint: str
    printed: str
    print_failed: str
    connection_refused: str
    permission_denied: str
    timeout: str
    online: str
    offline: str

    def with_overrides(self, **overrides: object) -> "ReceiptLabels":
        """Return a copy with the given labels replaced; None values are ignored."""
        known = {f.name for f in fields(self)}
        unknown = set(overrides) - known
        if unknown:
            raise TypeError(f"Unknown label(s): {', '.join(sorted(unknown))}")
        changes = {key: value for key, value in overrides.items() if value is not None}
        if "company_lines" in changes:
            changes["company_lines"] = tuple(changes["company_lines"])  # type: ignore[arg-type]
        return replace(self, **changes)


@dataclass(frozen=True)
class CategoryMarkers:
    """Item-name markers used to detect special line items."""

    discount: tuple[str, ...]
    credit: tuple[str, ...]
    payment_method: tuple[str, ...]
    change: tuple[str, ...]
    tendered: tuple[str, ...]


def _known_locale(locale: str | None) -> str:
    locale = (locale or resolve_locale()).lower()
    if locale not in LABELS_BY_LOCALE:
        raise KeyError(f"Unknown locale {locale!r}; known: {', '.join(sorted(LABELS_BY_LOCALE))}")
    return locale


def labels_for_locale(locale: str | None = None) -> ReceiptLabels:
    """Get the receipt labels for a locale (RECEIPT_LOCALE when omitted)."""
    raw = LABELS_BY_LOCALE[_known_locale(locale)]
    values = {key: (tuple(value) if isinstance(value, list) else value) for key, value in raw.items()}
    return ReceiptLabels(**values)  # type: ignore[arg-type]


def markers_for_locale(locale: str | None = None) -> CategoryMarkers:
    """Get special-item markers for a locale (RECEIPT_LOCALE when omitted)."""
    raw = CATEGORY_MARKERS_BY_LOCALE[_known_locale(locale)]
    return CategoryMarkers(**{key: tuple(value) for key, value in raw.items()})
