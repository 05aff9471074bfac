"""Tests for receipt and assignment JSON decoding."""

from __future__ import annotations

from decimal import Decimal

import pytest

from splitbill.domain.receipt import MAX_ITEM_NAME_LENGTH, ParsedReceipt, ReceiptFormatError, ReceiptItem
from splitbill.domain.split import ParticipantAssignment


def test_parsed_receipt_json_round_trip() -> None:
    receipt = ParsedReceipt(
        items=[ReceiptItem(name="Organic Eggs", total=Decimal("19.47"), qty=3, unit_price=Decimal("6.49"))],
        subtotal=Decimal("19.47"),
        tax=Decimal("1.70"),
        grand_total=Decimal("21.17"),
    )

    decoded = ParsedReceipt.from_dict(receipt.to_dict())

    assert decoded == receipt


def test_item_ids_survive_json() -> None:
    item = ReceiptItem(name="Teh", total=Decimal("5000"))

    assert ReceiptItem.from_dict(item.to_dict()).item_id == item.item_id


def test_from_dict_fills_missing_summary() -> None:
    receipt = ParsedReceipt.from_dict(
        {
            "items": [{"name": "Nasi", "total": 20000}, {"name": "Teh", "total": "5000"}],
            "serviceCharge": 1000,
            "discount": -500,
        }
    )

    assert receipt.subtotal == Decimal("25000")
    assert receipt.discount == Decimal("500")
    assert receipt.grand_total == Decimal("25500")
    assert receipt.items[0].unit_price == Decimal("20000")
    assert receipt.items[0].item_id != receipt.items[1].item_id


def test_from_dict_rejects_bad_payloads() -> None:
    with pytest.raises(ReceiptFormatError):
        ParsedReceipt.from_dict({"items": [{"name": "Nasi"}]})
    with pytest.raises(ReceiptFormatError):
        ParsedReceipt.from_dict({"items": [{"name": "Nasi", "total": "lots"}]})
    with pytest.raises(ReceiptFormatError):
        ParsedReceipt.from_dict({"items": "Nasi"})


def test_long_names_are_truncated() -> None:
    item = ReceiptItem(name="x" * 80, total=Decimal("1"))

    assert len(item.name) == MAX_ITEM_NAME_LENGTH


def test_assignment_from_dict_validates_share() -> None:
    assignment = ParticipantAssignment.from_dict(
        {"participantId": "p1", "items": [{"itemId": "a", "share": 0.25}]}
    )

    assert assignment.participant_name == "p1"
    assert assignment.items[0].share == Decimal("0.25")

    with pytest.raises(ReceiptFormatError):
        ParticipantAssignment.from_dict({"participantId": "p1", "items": [{"itemId": "a", "share": 0}]})
    with pytest.raises(ReceiptFormatError):
        ParticipantAssignment.from_dict({"items": []})
