"""Tests for receipt line classification."""

import pytest

from splitbill.receipt.ocr_parser.classifiers import (
    classify_line,
    is_column_header_line,
    is_discount_line,
    is_footer_line,
    is_garbage_line,
    is_grand_total_line,
    is_item_count_line,
    is_leading_discount_line,
    is_named_payment_method,
    is_payment_or_change_line,
    is_separator_line,
    is_service_charge_line,
    is_subtotal_line,
    is_tax_line,
    is_tender_line,
    item_block_kind,
    strip_inclusive_note,
)
from splitbill.receipt.ocr_parser.keywords import build_receipt_keywords


@pytest.mark.parametrize(
    "line",
    ["================================", "--------------------------------", "..................", "__________"],
)
def test_separator_lines(line: str) -> None:
    assert is_separator_line(line)


@pytest.mark.parametrize("line", ["--", "hello world", "---- 10.000"])
def test_not_separator_lines(line: str) -> None:
    assert not is_separator_line(line)


@pytest.mark.parametrize(
    "line",
    [
        "Jl. Sudirman No. 12, Jakarta",
        "Kasir: Dewi",
        "Terima kasih telah berbelanja",
        "No. Order : ORD-6514",
        "Receipt#: #872246",
        "Date     : 01/01/2026 12:31 PM",
        "456 Oak Avenue, Los Angeles, CA 90001",
        "WARTEG BAHARI",
        "McDONALD'S",
        "ITEM DESCRIPTION          AMOUNT",
        "MENU        QTY    HARGA    TOTAL",
        "LUNAS",
    ],
)
def test_garbage_lines(line: str) -> None:
    assert is_garbage_line(line)


@pytest.mark.parametrize(
    "line",
    ["INDOMIE GORENG", "10.500", "1. Amoxicillin 500mg", "Ayam Bakar Madu", ""],
)
def test_not_garbage_lines(line: str) -> None:
    assert not is_garbage_line(line)


def test_column_header_needs_only_header_words() -> None:
    assert is_column_header_line("ITEM DESCRIPTION AMOUNT")
    assert not is_column_header_line("Item A 1x 100.000 100.000")
    assert not is_column_header_line("Menu Spesial Nasi Goreng")


def test_charge_detection() -> None:
    assert is_tax_line("PPN 11%")
    assert is_tax_line("Tax 10%")
    assert is_tax_line("PB1 10%")
    assert not is_tax_line("Ayam Goreng")
    assert is_service_charge_line("Service Charge 5%")
    assert is_service_charge_line("Srv.Chg 5%")
    assert is_service_charge_line("Svc 5%")
    assert is_discount_line("DISKON  -2.000")
    assert is_discount_line("Disc. 10%")
    assert is_discount_line("Voucher  -50.000")
    assert is_discount_line("Cashback  -10.000")


def test_keywords_match_whole_words_only() -> None:
    assert not is_tax_line("Taxi Fare 50.000")
    assert not is_payment_or_change_line("Ovomaltine 12.000")


def test_payment_and_change_lines() -> None:
    assert is_payment_or_change_line("TUNAI  50.000")
    assert is_payment_or_change_line("GOPAY  73.081")
    assert is_payment_or_change_line("KEMBALIAN  26.690")
    assert is_named_payment_method("VISA CREDIT $79.21")
    assert not is_named_payment_method("TUNAI 50.000")


def test_footer_lines() -> None:
    assert is_footer_line("Terima kasih telah berbelanja")
    assert is_footer_line("Thank you for visiting!")
    assert is_footer_line("PIN BENAR - TRANSAKSI BERHASIL")


def test_inclusive_note_does_not_count_as_tax() -> None:
    line = "Grand Total (Termasuk PPN)            110.250"

    assert "PPN" not in strip_inclusive_note(line)
    assert not is_tax_line(line)
    assert is_grand_total_line(line)


def test_subtotal_and_item_count() -> None:
    assert is_subtotal_line("Sub Total Rp 245.000")
    assert is_subtotal_line("SUBTOTAL 23.000")
    assert is_item_count_line("3 items")
    assert not is_item_count_line("3 x 3.500")


@pytest.mark.parametrize(
    ("line", "kind"),
    [
        ("=========", "separator"),
        ("MENU QTY HARGA TOTAL", "garbage"),
        ("PPN 11%  2.310", "tax"),
        ("Service Charge 5%  3.150", "service_charge"),
        ("DISKON  -2.000", "discount"),
        ("SUBTOTAL  23.000", "subtotal"),
        ("TOTAL BAYAR  Rp 285.547", "grand_total"),
        ("TOTAL  23.310", "total"),
        ("KEMBALIAN  26.690", "payment_or_change"),
        ("Thank you for shopping!", "footer"),
        ("Kasir: Dewi", "garbage"),
        ("INDOMIE GORENG  3 x 3.500  10.500", "content"),
    ],
)
def test_classify_line(line: str, kind: str) -> None:
    assert classify_line(line) == kind


def test_classify_line_uses_custom_keywords() -> None:
    keywords = build_receipt_keywords([{"tax": {"words": ["steuer"]}}])

    assert classify_line("Steuer 19%  1.900", keywords) == "tax"
    assert classify_line("PPN 11%  2.310", keywords) == "content"


def test_tender_lines_exclude_named_methods() -> None:
    assert is_tender_line("TUNAI  50.000")
    assert is_tender_line("Kembali  7.000")
    assert not is_tender_line("GOPAY  73.081")
    assert not is_tender_line("Mega Burger  35.000")


def test_leading_discount_needs_negative_amount() -> None:
    assert is_leading_discount_line("Voucher : -50.000")
    assert is_leading_discount_line("DISKON  Rp -2.000")
    assert not is_leading_discount_line("Promo Hemat 25.000")
    assert not is_leading_discount_line("Paket Promo -5.000")


@pytest.mark.parametrize(
    ("line", "expected"),
    [
        ("Mega Burger  35.000", "content"),
        ("Roti Bakar OVO  18.000", "content"),
        ("Paket Promo Hemat  25.000", "content"),
        ("Tax Free Lemonade  12.000", "content"),
        ("Voucher : -50.000", "discount"),
        ("TUNAI  50.000", "payment_or_change"),
        ("TOTAL  58.000", "total"),
        ("Ke Bank : BNI", "garbage"),
    ],
)
def test_item_block_kind(line: str, expected: str) -> None:
    assert item_block_kind(classify_line(line), line) == expected


def test_item_block_names_classify_as_summary_lines() -> None:
    assert classify_line("Mega Burger  35.000") == "payment_or_change"
    assert classify_line("Paket Promo Hemat  25.000") == "discount"
