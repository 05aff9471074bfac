"""Pro-rata bill splitting over a reviewed receipt."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal
from typing import Any

from splitbill.domain.receipt import ZERO, ParsedReceipt, ReceiptFormatError, json_number, to_decimal

logger = logging.getLogger(__name__)

ONE = Decimal("1")


@dataclass(frozen=True)
class ItemShare:
    """Fraction of one item's total attributed to one participant."""

    item_id: str
    share: Decimal = ONE

    def to_dict(self) -> dict[str, Any]:
        return {"itemId": self.item_id, "share": float(self.share)}


@dataclass
class ParticipantAssignment:
    participant_id: str
    participant_name: str
    items: list[ItemShare] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "participantId": self.participant_id,
            "participantName": self.participant_name,
            "items": [share.to_dict() for share in self.items],
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ParticipantAssignment:
        try:
            participant_id = str(data["participantId"])
        except KeyError as exc:
            raise ReceiptFormatError("assignment is missing 'participantId'") from exc
        shares: list[ItemShare] = []
        for raw in data.get("items", []):
            if "itemId" not in raw:
                raise ReceiptFormatError("assignment item is missing 'itemId'")
            share = to_decimal(raw.get("share", 1), "share")
            if not ZERO < share <= ONE:
                raise ReceiptFormatError(f"share must be in (0, 1], got {share}")
            shares.append(ItemShare(item_id=str(raw["itemId"]), share=share))
        return cls(
            participant_id=participant_id,
            participant_name=str(data.get("participantName", participant_id)),
            items=shares,
        )


@dataclass(frozen=True)
class SplitItemAmount:
    item_id: str
    name: str
    amount: Decimal

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.item_id, "name": self.name, "amount": json_number(self.amount)}


@dataclass(frozen=True)
class SplitResultParticipant:
    participant_id: str
    name: str
    items: tuple[SplitItemAmount, ...]
    subtotal: Decimal
    tax_share: Decimal
    service_share: Decimal
    discount_share: Decimal
    total: Decimal

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.participant_id,
            "name": self.name,
            "items": [item.to_dict() for item in self.items],
            "subtotal": json_number(self.subtotal),
            "taxShare": json_number(self.tax_share),
            "serviceShare": json_number(self.service_share),
            "discountShare": json_number(self.discount_share),
            "total": json_number(self.total),
        }


@dataclass(frozen=True)
class SplitResult:
    participants: tuple[SplitResultParticipant, ...]
    unassigned_total: Decimal

    def to_dict(self) -> dict[str, Any]:
        return {
            "participants": [p.to_dict() for p in self.participants],
            "unassignedTotal": json_number(self.unassigned_total),
        }


def _money(value: Decimal, places: int) -> Decimal:
    return value.quantize(Decimal(1).scaleb(-places), rounding=ROUND_HALF_UP)


def calculate_split(
    receipt: ParsedReceipt,
    assignments: Sequence[ParticipantAssignment],
    *,
    places: int = 2,
) -> SplitResult:
    """
    Apportion a receipt across participants.

    Each participant pays ``item.total * share`` for their items plus a pro-rata
    slice (participant subtotal / receipt subtotal) of tax, service charge and
    discount. Tax is not distributed when the receipt is tax-inclusive.

    Assignments that reference an item no longer on the receipt are skipped.
    Inputs are never mutated. Reported amounts are rounded to ``places``
    decimal places; intermediate arithmetic keeps full precision.
    """
    results: list[SplitResultParticipant] = []
    assigned_total = ZERO

    for participant in assignments:
        item_amounts: list[SplitItemAmount] = []
        participant_subtotal = ZERO

        for assignment in participant.items:
            item = receipt.find_item(assignment.item_id)
            if item is None:
                logger.debug(
                    "Skipping assignment of unknown item %s for participant %s",
                    assignment.item_id,
                    participant.participant_id,
                )
                continue
            amount = item.total * Decimal(assignment.share)
            item_amounts.append(SplitItemAmount(item.item_id, item.name, _money(amount, places)))
            participant_subtotal += amount
            assigned_total += amount

        ratio = participant_subtotal / receipt.subtotal if receipt.subtotal > ZERO else ZERO
        tax_share = ZERO if receipt.tax_inclusive else receipt.tax * ratio
        service_share = receipt.service_charge * ratio
        discount_share = receipt.discount * ratio
        total = participant_subtotal + tax_share + service_share - discount_share

        results.append(
            SplitResultParticipant(
                participant_id=participant.participant_id,
                name=participant.participant_name,
                items=tuple(item_amounts),
                subtotal=_money(participant_subtotal, places),
                tax_share=_money(tax_share, places),
                service_share=_money(service_share, places),
                discount_share=_money(discount_share, places),
                total=_money(total, places),
            )
        )

    unassigned = max(ZERO, receipt.subtotal - assigned_total)
    return SplitResult(participants=tuple(results), unassigned_total=_money(unassigned, places))


def build_equal_share_assignments(
    participants: Iterable[tuple[str, str]],
    item_assignments: Mapping[str, Sequence[str]],
) -> list[ParticipantAssignment]:
    """
    Convert ``{item_id: [participant_id, ...]}`` into participant assignments.

    Every item is split equally among the participants assigned to it.
    Participants with no items still get an (empty) assignment.
    """
    assignments: list[ParticipantAssignment] = []
    for participant_id, participant_name in participants:
        shares: list[ItemShare] = []
        for item_id, assigned_ids in item_assignments.items():
            if participant_id in assigned_ids:
                shares.append(ItemShare(item_id=item_id, share=ONE / len(assigned_ids)))
        assignments.append(ParticipantAssignment(participant_id, participant_name, shares))
    return assignments


def parse_assignments(raw: Any) -> list[ParticipantAssignment]:
    """Decode a JSON list of participant assignments (or ``{"assignments": [...]}``)."""
    if isinstance(raw, Mapping):
        raw = raw.get("assignments", [])
    if not isinstance(raw, list):
        raise ReceiptFormatError("assignments: expected a list")
    return [ParticipantAssignment.from_dict(entry) for entry in raw]
