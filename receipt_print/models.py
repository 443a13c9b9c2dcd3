"""Domain models for receipt-print."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from receipt_print.data import ReceiptLabels, labels_for_locale
from receipt_print.errors import ValidationFault


class DocumentType(str, Enum):
    RECEIPT = "receipt"
    DEPOSIT_SLIP = "deposit_slip"


@dataclass(frozen=True)
class Item:
    """One line item as received; validity is checked when it is rendered."""

    name: str | None
    price: str | None
    description: str | None = None
    index: int = 0


@dataclass(frozen=True)
class PrinterConfig:
    """Per-request printer adjustments."""

    character_set: str | None = None


@dataclass(frozen=True)
class Order:
    """A normalized receipt or deposit-slip request."""

    title: str
    order_number: str | None = None
    date: str | None = None
    items: tuple[Item, ...] = field(default_factory=tuple)
    total: str | None = None
    footer_text: str | None = None
    printer_config: PrinterConfig | None = None


def _text(value: Any) -> Any:
    """Strings and numbers become text, blanks become None; anything else is left for pydantic to reject."""
    if value is None or isinstance(value, bool) or not isinstance(value, (str, int, float)):
        return value
    text = str(value)
    return text if text.strip() else None


def _loose_text(value: Any) -> str | None:
    """Like _text, but unusable values are dropped instead of rejected."""
    if isinstance(value, bool) or not isinstance(value, (str, int, float)):
        return None
    return str(value)


class PrinterConfigPayload(BaseModel):
    """The printerConfig object of a request."""

    model_config = ConfigDict(populate_by_name=True)

    character_set: Optional[str] = Field(default=None, alias="characterSet")

    @field_validator("character_set", mode="before")
    @classmethod
    def coerce_text(cls, v: Any) -> Any:
        return _text(v)


class ItemPayload(BaseModel):
    """
    One entry of the items list.

    Items are never rejected here: an entry that is not an object, or whose
    name or price is unusable, parses to a nameless item that the layout
    skips on its own.
    """

    name: Optional[str] = None
    price: Optional[str] = None
    description: Optional[str] = None

    @model_validator(mode="before")
    @classmethod
    def entry_as_object(cls, data: Any) -> Any:
        return data if isinstance(data, Mapping) else {}

    @field_validator("name", "price", "description", mode="before")
    @classmethod
    def coerce_loose_text(cls, v: Any) -> str | None:
        return _loose_text(v)


class OrderPayload(BaseModel):
    """A receipt or deposit-slip request body as sent by the client."""

    model_config = ConfigDict(populate_by_name=True)

    title: Optional[str] = None
    order_number: Optional[str] = Field(default=None, alias="orderNumber")
    date: Optional[str] = None
    items: Optional[List[ItemPayload]] = None
    total: Optional[str] = None
    footer_text: Optional[str] = Field(default=None, alias="footerText")
    printer_config: Optional[PrinterConfigPayload] = Field(default=None, alias="printerConfig")

    @field_validator("title", "order_number", "date", "total", "footer_text", mode="before")
    @classmethod
    def coerce_text(cls, v: Any) -> Any:
        return _text(v)


def _describe(exc: ValidationError) -> str:
    first = exc.errors()[0]
    where = ".".join(str(part) for part in first["loc"]) or "request"
    return f"Invalid field {where!r}: {first['msg']}"


def order_from_payload(
    payload: Any,
    document: DocumentType = DocumentType.RECEIPT,
    labels: ReceiptLabels | None = None,
) -> Order:
    """Build an Order from a request payload, filling in the per-document title."""
    try:
        parsed = OrderPayload.model_validate(payload)
    except ValidationError as exc:
        raise ValidationFault(_describe(exc)) from exc

    labels = labels or labels_for_locale()
    default_title = labels.receipt_title if document is DocumentType.RECEIPT else labels.deposit_title
    printer_config = None
    if parsed.printer_config is not None:
        printer_config = PrinterConfig(character_set=parsed.printer_config.character_set)

    return Order(
        title=parsed.title or default_title,
        order_number=parsed.order_number,
        date=parsed.date,
        items=tuple(
            Item(name=entry.name, price=entry.price, description=entry.description or None, index=idx)
            for idx, entry in enumerate(parsed.items or [])
        ),
        total=parsed.total,
        footer_text=parsed.footer_text,
        printer_config=printer_config,
    )
