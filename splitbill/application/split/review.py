"""Interactive receipt review and participant assignment state."""

from __future__ import annotations

import copy
import uuid
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any

from splitbill.domain.receipt import ZERO, ParsedReceipt, ReceiptItem, to_decimal
from splitbill.domain.split import (
    ParticipantAssignment,
    SplitResult,
    build_equal_share_assignments,
    calculate_split,
)

DEFAULT_NEW_ITEM_NAME = "New Item"

# Summary fields editable through update_totals; grand_total edits are taken as-is
SUMMARY_FIELDS = ("subtotal", "tax", "service_charge", "discount", "grand_total")


class ReviewError(ValueError):
    """Raised when a review edit references an unknown item or participant."""


@dataclass(frozen=True)
class Participant:
    participant_id: str
    name: str


@dataclass
class ReceiptReviewSession:
    """
    Editable copy of a parsed receipt plus who-ate-what assignments.

    Item edits keep the summary consistent: every add, update or removal
    recomputes the subtotal from the items and the grand total from
    ``subtotal + tax + service_charge - discount``. Editing a summary field
    other than the grand total recomputes the grand total as well; editing the
    grand total directly leaves it as typed.
    """

    receipt: ParsedReceipt = field(default_factory=ParsedReceipt)
    participants: list[Participant] = field(default_factory=list)
    item_assignments: dict[str, list[str]] = field(default_factory=dict)

    @classmethod
    def from_receipt(cls, receipt: ParsedReceipt) -> ReceiptReviewSession:
        """Start a review on a deep copy so the parser output is never mutated."""
        return cls(receipt=copy.deepcopy(receipt))

    # --- Items ---
    def _item(self, item_id: str) -> ReceiptItem:
        item = self.receipt.find_item(item_id)
        if item is None:
            raise ReviewError(f"Unknown item: {item_id}")
        return item

    def _recompute_from_items(self) -> None:
        self.receipt.subtotal = self.receipt.computed_subtotal()
        self.receipt.grand_total = self.receipt.expected_grand_total()

    def add_item(self, name: str = DEFAULT_NEW_ITEM_NAME, qty: int = 1, unit_price: Any = ZERO) -> ReceiptItem:
        price = to_decimal(unit_price, "unit_price")
        item = ReceiptItem(name=name, total=price * qty, qty=qty, unit_price=price)
        self.receipt.items.append(item)
        self._recompute_from_items()
        return item

    def update_item(
        self,
        item_id: str,
        *,
        name: str | None = None,
        qty: int | None = None,
        unit_price: Any = None,
        total: Any = None,
    ) -> ReceiptItem:
        """Edit one item; a new qty or unit price recomputes its line total."""
        item = self._item(item_id)
        if name is not None:
            item.name = name
        if total is not None:
            item.total = to_decimal(total, "total")
        if qty is not None:
            if qty < 1:
                raise ReviewError(f"qty must be at least 1, got {qty}")
            item.qty = qty
        if unit_price is not None:
            item.unit_price = to_decimal(unit_price, "unit_price")
        if qty is not None or unit_price is not None:
            item.total = item.unit_price * item.qty
        self._recompute_from_items()
        return item

    def remove_item(self, item_id: str) -> None:
        item = self._item(item_id)
        self.receipt.items.remove(item)
        self.item_assignments.pop(item_id, None)
        self._recompute_from_items()

    # --- Summary ---
    def update_totals(self, **fields: Any) -> None:
        """Set summary amounts, e.g. ``update_totals(tax=1000)``."""
        for name, raw in fields.items():
            if name not in SUMMARY_FIELDS:
                raise ReviewError(f"Unknown summary field: {name}")
            value = to_decimal(raw, name)
            setattr(self.receipt, name, abs(value) if name == "discount" else value)
        if "grand_total" not in fields:
            self.receipt.grand_total = self.receipt.expected_grand_total()

    def set_tax_inclusive(self, tax_inclusive: bool) -> None:
        self.receipt.tax_inclusive = tax_inclusive

    # --- Participants ---
    def add_participant(self, name: str) -> Participant | None:
        """Add a participant; blank names are ignored."""
        name = name.strip()
        if not name:
            return None
        participant = Participant(participant_id=uuid.uuid4().hex, name=name)
        self.participants.append(participant)
        return participant

    def remove_participant(self, participant_id: str) -> None:
        """Remove a participant and every item assignment that names them."""
        self.participants = [p for p in self.participants if p.participant_id != participant_id]
        for item_id, assigned in self.item_assignments.items():
            self.item_assignments[item_id] = [pid for pid in assigned if pid != participant_id]

    def toggle_assignment(self, item_id: str, participant_id: str) -> bool:
        """Flip whether a participant shares an item; returns the new state."""
        self._item(item_id)
        if not any(p.participant_id == participant_id for p in self.participants):
            raise ReviewError(f"Unknown participant: {participant_id}")

        assigned = self.item_assignments.setdefault(item_id, [])
        if participant_id in assigned:
            assigned.remove(participant_id)
            return False
        assigned.append(participant_id)
        return True

    # --- Results ---
    def build_assignments(self) -> list[ParticipantAssignment]:
        """Equal shares among everyone assigned to each item."""
        live = {item_id: ids for item_id, ids in self.item_assignments.items() if ids}
        return build_equal_share_assignments(
            ((p.participant_id, p.name) for p in self.participants),
            live,
        )

    def calculate(self, *, places: int = 2) -> SplitResult:
        return calculate_split(self.receipt, self.build_assignments(), places=places)

    def frozen_receipt(self) -> ParsedReceipt:
        """Snapshot of the reviewed receipt, independent of further edits."""
        return copy.deepcopy(self.receipt)

    def unassigned_items(self) -> list[ReceiptItem]:
        return [item for item in self.receipt.items if not self.item_assignments.get(item.item_id)]

    def assigned_total(self) -> Decimal:
        return sum(
            (item.total for item in self.receipt.items if self.item_assignments.get(item.item_id)),
            ZERO,
        )
