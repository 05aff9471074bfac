"""Data models for parsed receipts."""

from __future__ import annotations

import uuid
from collections.abc import Mapping
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from typing import Any

MAX_ITEM_NAME_LENGTH = 60
UNKNOWN_ITEM_NAME = "Unknown Item"

ZERO = Decimal("0")


class ReceiptFormatError(ValueError):
    """Raised when a receipt or assignment payload cannot be decoded."""


def _new_item_id() -> str:
    return uuid.uuid4().hex


def json_number(value: Decimal) -> int | float:
    """Render a Decimal as a JSON number (int when integral)."""
    if value == value.to_integral_value():
        return int(value)
    return float(value)


def to_decimal(raw: Any, field_name: str) -> Decimal:
    """Decode a JSON number or numeric string into a Decimal."""
    if isinstance(raw, Decimal):
        return raw
    if isinstance(raw, bool) or raw is None:
        raise ReceiptFormatError(f"{field_name}: expected a number, got {raw!r}")
    try:
        # str() first so floats like 0.1 keep their short repr
        return Decimal(str(raw))
    except (InvalidOperation, ValueError) as exc:
        raise ReceiptFormatError(f"{field_name}: expected a number, got {raw!r}") from exc


@dataclass
class ReceiptItem:
    """A single line item on a receipt."""

    name: str
    total: Decimal
    qty: int = 1
    unit_price: Decimal = ZERO
    item_id: str = field(default_factory=_new_item_id)

    def __post_init__(self) -> None:
        if len(self.name) > MAX_ITEM_NAME_LENGTH:
            self.name = self.name[:MAX_ITEM_NAME_LENGTH]

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.item_id,
            "name": self.name,
            "qty": self.qty,
            "unitPrice": json_number(self.unit_price),
            "total": json_number(self.total),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ReceiptItem:
        try:
            name = str(data["name"])
            total = to_decimal(data["total"], "total")
        except KeyError as exc:
            raise ReceiptFormatError(f"receipt item is missing {exc.args[0]!r}") from exc
        qty = int(data.get("qty", 1) or 1)
        unit_price = to_decimal(data["unitPrice"], "unitPrice") if "unitPrice" in data else total
        item_id = str(data["id"]) if data.get("id") else _new_item_id()
        return cls(name=name, total=total, qty=qty, unit_price=unit_price, item_id=item_id)


@dataclass
class ParsedReceipt:
    """Structured receipt data produced by the OCR text parser or by hand.

    ``discount`` is stored as a positive magnitude. The target relation is
    ``grand_total ~= subtotal + tax + service_charge - discount``.
    """

    items: list[ReceiptItem] = field(default_factory=list)
    subtotal: Decimal = ZERO
    tax: Decimal = ZERO
    service_charge: Decimal = ZERO
    discount: Decimal = ZERO
    grand_total: Decimal = ZERO
    tax_inclusive: bool = False

    def computed_subtotal(self) -> Decimal:
        """Sum of item line totals."""
        return sum((item.total for item in self.items), ZERO)

    def expected_grand_total(self) -> Decimal:
        return self.subtotal + self.tax + self.service_charge - self.discount

    def find_item(self, item_id: str) -> ReceiptItem | None:
        for item in self.items:
            if item.item_id == item_id:
                return item
        return None

    def to_dict(self) -> dict[str, Any]:
        return {
            "items": [item.to_dict() for item in self.items],
            "subtotal": json_number(self.subtotal),
            "tax": json_number(self.tax),
            "serviceCharge": json_number(self.service_charge),
            "discount": json_number(self.discount),
            "grandTotal": json_number(self.grand_total),
            "taxInclusive": self.tax_inclusive,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ParsedReceipt:
        raw_items = data.get("items", [])
        if not isinstance(raw_items, list):
            raise ReceiptFormatError("items: expected a list")
        items = [ReceiptItem.from_dict(raw) for raw in raw_items]
        receipt = cls(
            items=items,
            subtotal=to_decimal(data.get("subtotal", 0), "subtotal"),
            tax=to_decimal(data.get("tax", 0), "tax"),
            service_charge=to_decimal(data.get("serviceCharge", 0), "serviceCharge"),
            discount=abs(to_decimal(data.get("discount", 0), "discount")),
            grand_total=to_decimal(data.get("grandTotal", 0), "grandTotal"),
            tax_inclusive=bool(data.get("taxInclusive", False)),
        )
        # Manually entered receipts often omit the summary block.
        if receipt.subtotal == ZERO:
            receipt.subtotal = receipt.computed_subtotal()
        if receipt.grand_total == ZERO:
            receipt.grand_total = receipt.expected_grand_total()
        return receipt
