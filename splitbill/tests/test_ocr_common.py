"""Tests for price, quantity and OCR digit helpers."""

from decimal import Decimal

import pytest

from splitbill.receipt.ocr_parser.common import (
    clean_item_name,
    correct_numeric_spans,
    extract_all_prices,
    extract_qty,
    fix_ocr_digits,
    has_formatted_price,
    parse_price,
    unit_price_for,
)


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("1O0", "100"),
        ("2O.OOO", "20.000"),
        ("l5.000", "l5.000"),
        ("1l5", "115"),
        ("5I0", "510"),
        ("1S0", "150"),
        ("O12", "012"),
    ],
)
def test_fix_ocr_digits(raw: str, expected: str) -> None:
    assert fix_ocr_digits(raw) == expected


def test_correct_numeric_spans_leaves_words_alone() -> None:
    assert correct_numeric_spans("SOTO AYAM 2O.OOO") == "SOTO AYAM 20.000"
    assert correct_numeric_spans("BOLOGNESE SOS") == "BOLOGNESE SOS"


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("Rp 15.000", Decimal("15000")),
        ("Rp15.000", Decimal("15000")),
        ("1.500.000", Decimal("1500000")),
        ("IDR 15000", Decimal("15000")),
        ("Rp 15.000,50", Decimal("15000.50")),
        ("$12.99", Decimal("12.99")),
        ("$ 12.99", Decimal("12.99")),
        ("USD 12.99", Decimal("12.99")),
        ("Rp 15,000", Decimal("15000")),
        ("1,500,000", Decimal("1500000")),
        ("15,000.50", Decimal("15000.50")),
        ("£ 9.50", Decimal("9.50")),
        ("¥ 1500", Decimal("1500")),
        ("-2.000", Decimal("-2000")),
        ("-50.000", Decimal("-50000")),
        ("(50.000)", Decimal("-50000")),
        ("Rp -2.000", Decimal("-2000")),
        ("-$5.00", Decimal("-5.00")),
        ("15-000", Decimal("15000")),
        ("15000", Decimal("15000")),
        ("", Decimal("0")),
    ],
)
def test_parse_price(raw: str, expected: Decimal) -> None:
    assert parse_price(raw) == expected


def test_parse_price_never_raises_on_junk() -> None:
    assert parse_price("Rp") == Decimal("0")
    assert parse_price("abc") == Decimal("0")


def test_extract_all_prices_prefers_grouped_tokens() -> None:
    assert extract_all_prices("Ayam Goreng    1x   25.000   25.000") == ["25.000", "25.000"]


def test_extract_all_prices_falls_back_to_decimal_then_bare() -> None:
    assert extract_all_prices("Coffee $12.99") == ["12.99"]
    assert extract_all_prices("Item 15000") == ["15000"]


def test_extract_all_prices_skips_years_and_short_numbers() -> None:
    assert extract_all_prices("Periode 2024") == []
    assert extract_all_prices("Meja 12") == []


def test_has_formatted_price() -> None:
    assert has_formatted_price("Nasi Goreng 25.000")
    assert has_formatted_price("Coffee 12.99")
    assert not has_formatted_price("Nomor Pompa 3")


@pytest.mark.parametrize(
    ("line", "expected"),
    [
        ("INDOMIE GORENG     3 x 3.500", 3),
        ("Croissant              2x      28.000", 2),
        ("Ayam Goreng    1x   25.000   25.000", 1),
        ("Item x2  50.000", 2),
        ("2 @ 55.000", 2),
        ("Nasi Goreng  85.000", 1),
        ("Jus Alpukat 3 Rp 18.000 Rp 54.000", 3),
        ("Ayam Bakar Madu 1 Rp 45.000 Rp 45.000", 1),
        ("Organic Eggs 3 $6.49 $19.47", 3),
        ("Route 66 Special 35.000", 1),
        ("Croissant              2      28.000", 2),
        ("Indomie 85 15.000", 1),
        ("Kopi Susu 12 Rp 18.000", 12),
    ],
)
def test_extract_qty(line: str, expected: int) -> None:
    assert extract_qty(line).qty == expected


def test_extract_qty_reports_token_span() -> None:
    line = "Es Teh         2x    8.000   16.000"
    qty = extract_qty(line)

    assert qty.token == "2x"
    assert qty.span is not None
    assert line[qty.span[0] : qty.span[1]].strip() == "2x"


def test_clean_item_name_strips_qty_prices_and_currency() -> None:
    line = "Jus Alpukat      3  Rp 18.000  Rp 54.000"
    prices = extract_all_prices(line)

    assert clean_item_name(line, prices, extract_qty(line)) == "Jus Alpukat"


def test_clean_item_name_keeps_digits_in_product_names() -> None:
    line = "Route 66 Special 35.000"

    assert clean_item_name(line, extract_all_prices(line), extract_qty(line)) == "Route 66 Special"


def test_clean_item_name_drops_list_numbering() -> None:
    line = "1. Amoxicillin 500mg      Rp  45.000"

    assert clean_item_name(line, extract_all_prices(line)) == "Amoxicillin 500mg"


def test_unit_price_for_rounds_to_cents() -> None:
    assert unit_price_for(Decimal("10"), 3) == Decimal("3.33")
    assert unit_price_for(Decimal("54000"), 3) == Decimal("18000.00")
    assert unit_price_for(Decimal("7.99"), 1) == Decimal("7.99")
