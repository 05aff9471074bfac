"""Tests for pro-rata split calculation."""

from decimal import Decimal

from splitbill.domain.receipt import ParsedReceipt, ReceiptItem
from splitbill.domain.split import (
    ItemShare,
    ParticipantAssignment,
    build_equal_share_assignments,
    calculate_split,
)


def _receipt(**overrides: object) -> ParsedReceipt:
    fields: dict[str, object] = {
        "items": [
            ReceiptItem(name="Nasi Goreng", total=Decimal("30000"), item_id="a"),
            ReceiptItem(name="Es Teh", total=Decimal("20000"), item_id="b"),
        ],
        "subtotal": Decimal("50000"),
        "tax": Decimal("5000"),
        "service_charge": Decimal("2500"),
        "discount": Decimal("0"),
        "grand_total": Decimal("57500"),
    }
    fields.update(overrides)
    return ParsedReceipt(**fields)  # type: ignore[arg-type]


def test_tax_and_service_are_pro_rata() -> None:
    result = calculate_split(
        _receipt(),
        [
            ParticipantAssignment("p1", "Ani", [ItemShare("a")]),
            ParticipantAssignment("p2", "Budi", [ItemShare("b")]),
        ],
    )

    ani, budi = result.participants
    assert ani.subtotal == Decimal("30000")
    assert ani.tax_share == Decimal("3000")
    assert ani.service_share == Decimal("1500")
    assert ani.total == Decimal("34500")
    assert budi.total == Decimal("23000")
    assert ani.total + budi.total == Decimal("57500")
    assert result.unassigned_total == 0


def test_discount_reduces_share() -> None:
    receipt = _receipt(tax=Decimal("0"), service_charge=Decimal("0"), discount=Decimal("10000"))
    result = calculate_split(receipt, [ParticipantAssignment("p1", "Ani", [ItemShare("a")])])

    ani = result.participants[0]
    assert ani.discount_share == Decimal("6000")
    assert ani.total == Decimal("24000")
    assert result.unassigned_total == Decimal("20000")


def test_tax_inclusive_receipt_adds_no_tax() -> None:
    receipt = _receipt(tax_inclusive=True)
    result = calculate_split(receipt, [ParticipantAssignment("p1", "Ani", [ItemShare("a")])])

    ani = result.participants[0]
    assert ani.tax_share == 0
    assert ani.total == Decimal("31500")


def test_thirds_round_per_field_and_sum_to_item() -> None:
    receipt = ParsedReceipt(
        items=[ReceiptItem(name="Pizza", total=Decimal("30"), item_id="pizza")],
        subtotal=Decimal("30"),
        grand_total=Decimal("30"),
    )
    assignments = build_equal_share_assignments(
        [("p1", "A"), ("p2", "B"), ("p3", "C")],
        {"pizza": ["p1", "p2", "p3"]},
    )

    result = calculate_split(receipt, assignments)

    assert [p.total for p in result.participants] == [Decimal("10.00")] * 3
    assert sum(p.total for p in result.participants) == Decimal("30")
    assert result.unassigned_total == 0


def test_unknown_items_are_skipped() -> None:
    result = calculate_split(
        _receipt(),
        [ParticipantAssignment("p1", "Ani", [ItemShare("missing"), ItemShare("b")])],
    )

    ani = result.participants[0]
    assert [item.item_id for item in ani.items] == ["b"]
    assert ani.subtotal == Decimal("20000")


def test_zero_subtotal_gives_zero_ratio() -> None:
    receipt = ParsedReceipt(tax=Decimal("1000"))
    result = calculate_split(receipt, [ParticipantAssignment("p1", "Ani")])

    assert result.participants[0].total == 0
    assert result.unassigned_total == 0


def test_inputs_are_not_mutated() -> None:
    receipt = _receipt()
    before = receipt.to_dict()

    calculate_split(receipt, [ParticipantAssignment("p1", "Ani", [ItemShare("a", Decimal("0.5"))])])

    assert receipt.to_dict() == before


def test_equal_share_builder_keeps_participants_without_items() -> None:
    assignments = build_equal_share_assignments(
        [("p1", "Ani"), ("p2", "Budi")],
        {"a": ["p1", "p2"], "b": ["p1"]},
    )

    assert [a.participant_id for a in assignments] == ["p1", "p2"]
    assert assignments[0].items == [ItemShare("a", Decimal(1) / 2), ItemShare("b", Decimal(1))]
    assert assignments[1].items == [ItemShare("a", Decimal(1) / 2)]


def test_split_result_json_shape() -> None:
    result = calculate_split(_receipt(), [ParticipantAssignment("p1", "Ani", [ItemShare("a")])])
    payload = result.to_dict()

    assert payload["unassignedTotal"] == 20000
    assert payload["participants"][0]["name"] == "Ani"
    assert payload["participants"][0]["taxShare"] == 3000
    assert payload["participants"][0]["items"] == [{"id": "a", "name": "Nasi Goreng", "amount": 30000}]
