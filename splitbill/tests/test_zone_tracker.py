"""Tests for HEADER -> ITEMS -> TOTALS zone tracking."""

from splitbill.receipt.ocr_parser.classifiers import classify_line, item_block_kind
from splitbill.receipt.ocr_parser.zones import ZoneTracker


def test_starts_in_items_without_separator() -> None:
    tracker = ZoneTracker.for_lines(["WARUNG MAKAN PAK JOKO", "Nasi Campur 20.000"])

    assert tracker.zone == "items"


def test_header_ends_at_separator() -> None:
    tracker = ZoneTracker.for_lines(["STORE", "=====", "Item 10.000"])

    assert tracker.zone == "header"
    assert tracker.observe("garbage", "STORE", item_count=0) == "header"
    assert tracker.observe("separator", "=====", item_count=0) == "items"


def test_header_ends_at_priced_content_line() -> None:
    tracker = ZoneTracker(zone="header")

    assert tracker.observe("content", "ALFAMART", item_count=0) == "header"
    assert tracker.observe("content", "INDOMIE GORENG 3 x 3.500 10.500", item_count=0) == "items"


def test_subtotal_enters_totals_unconditionally() -> None:
    tracker = ZoneTracker()

    assert tracker.observe("subtotal", "SUBTOTAL 0", item_count=0) == "totals"


def test_total_enters_totals_only_after_items() -> None:
    tracker = ZoneTracker()

    assert tracker.observe("total", "Total : Rp 278.695", item_count=0) == "items"
    assert tracker.observe("total", "TOTAL 60.000", item_count=2) == "totals"


def test_totals_is_terminal() -> None:
    tracker = ZoneTracker(zone="totals")

    assert tracker.observe("separator", "=====", item_count=3) == "totals"
    assert tracker.observe("content", "Nasi Goreng 25.000", item_count=3) == "totals"


def test_footer_finishes_after_items() -> None:
    tracker = ZoneTracker()
    tracker.observe("footer", "Thank you!", item_count=1)

    assert tracker.finished


def test_footer_before_items_is_ignored() -> None:
    tracker = ZoneTracker(zone="header")
    tracker.observe("footer", "Selamat datang", item_count=0)

    assert not tracker.finished


def test_only_cash_or_change_ends_item_block() -> None:
    tracker = ZoneTracker()

    for line in ["Mega Burger 35.000", "Roti Bakar OVO 18.000"]:
        kind = item_block_kind(classify_line(line), line)
        assert tracker.observe(kind, line, item_count=1) == "items"

    line = "TUNAI 60.000"
    kind = item_block_kind(classify_line(line), line)
    assert tracker.observe(kind, line, item_count=2) == "totals"
