"""Line classifiers for OCR receipt text.

Every predicate takes one raw line and, optionally, the keyword tables (the
packaged defaults otherwise). ``classify_line`` combines them into a single
ranked decision: the first kind in ``CLASSIFICATION_ORDER`` whose predicate
accepts the line wins.
"""

from __future__ import annotations

import re
from collections.abc import Callable
from typing import Literal

from .keywords import ReceiptKeywords, default_receipt_keywords

LineKind = Literal[
    "separator",
    "tax",
    "service_charge",
    "discount",
    "subtotal",
    "grand_total",
    "total",
    "item_count",
    "payment_or_change",
    "footer",
    "garbage",
    "content",
]

SEPARATOR_CHARS = re.compile(r"^[-=*.~_:]{3,}$")
NUMBERED_ITEM = re.compile(r"^\d+\.\s+[a-zA-Z]")
DATE_LABEL = re.compile(r"^date\s*:", re.IGNORECASE)
ITEM_COUNT = re.compile(r"^\d+\s*(?:items?|item\(s\)|jenis\s*barang)\b", re.IGNORECASE)
NEGATIVE_AMOUNT = re.compile(r"(?:^|[\s:(])-\s*(?:rp\.?|idr|\$)?\s*\d", re.IGNORECASE)

# Summary kinds that need stricter evidence above the totals zone
ITEM_BLOCK_SUMMARY_KINDS: frozenset[LineKind] = frozenset({"tax", "service_charge", "discount", "payment_or_change"})


def _tables(keywords: ReceiptKeywords | None) -> ReceiptKeywords:
    return keywords or default_receipt_keywords()


def strip_inclusive_note(line: str, keywords: ReceiptKeywords | None = None) -> str:
    """Drop annotations like "(Termasuk PPN)" or "(incl. tax)" from a line."""
    return _tables(keywords).inclusive_note.sub(" ", line)


def is_separator_line(line: str, keywords: ReceiptKeywords | None = None) -> bool:
    """Return True for rules like "-----", "=====" or ". . . ."."""
    return bool(SEPARATOR_CHARS.match(re.sub(r"\s+", "", line)))


def is_column_header_line(line: str, keywords: ReceiptKeywords | None = None) -> bool:
    """Return True for table headers such as "ITEM DESCRIPTION AMOUNT"."""
    if any(ch.isdigit() for ch in line):
        return False
    tables = _tables(keywords)
    words = re.findall(r"[a-z]+", line.lower())
    if len(words) < 2 or words[0] not in tables.column_header_leading:
        return False
    return all(word in tables.column_header_words or len(word) <= 2 for word in words)


def is_garbage_line(line: str, keywords: ReceiptKeywords | None = None) -> bool:
    """
    Return True for metadata that is never an item or a total.

    Addresses, phone numbers, cashier/table/order metadata, store names and
    similar. Numbered item lines ("1. Amoxicillin 500mg") are never garbage.
    """
    tables = _tables(keywords)
    lower = line.strip().lower()
    if not lower:
        return False
    if NUMBERED_ITEM.match(lower):
        return False
    if lower in tables.garbage_exact:
        return True
    if DATE_LABEL.match(lower) or is_column_header_line(lower, tables):
        return True
    return any(keyword in lower for keyword in tables.garbage_keywords)


def is_tax_line(line: str, keywords: ReceiptKeywords | None = None) -> bool:
    return bool(_tables(keywords).tax.search(strip_inclusive_note(line, keywords)))


def is_service_charge_line(line: str, keywords: ReceiptKeywords | None = None) -> bool:
    return bool(_tables(keywords).service_charge.search(strip_inclusive_note(line, keywords)))


def is_discount_line(line: str, keywords: ReceiptKeywords | None = None) -> bool:
    return bool(_tables(keywords).discount.search(line))


def is_named_payment_method(line: str, keywords: ReceiptKeywords | None = None) -> bool:
    """Return True for banks, e-wallets and card brands ("GOPAY", "VISA CREDIT")."""
    return bool(_tables(keywords).payment_methods.search(line))


def is_payment_or_change_line(line: str, keywords: ReceiptKeywords | None = None) -> bool:
    """Return True for cash tendered, change given, or a named payment method."""
    tables = _tables(keywords)
    return bool(tables.payment_tender.search(line)) or is_named_payment_method(line, tables)


def is_tender_line(line: str, keywords: ReceiptKeywords | None = None) -> bool:
    """Return True for cash tendered or change given ("TUNAI", "KEMBALIAN")."""
    return bool(_tables(keywords).payment_tender.search(line))


def is_leading_discount_line(line: str, keywords: ReceiptKeywords | None = None) -> bool:
    """Return True for "Voucher : -50.000": a discount word first, then a negative amount."""
    stripped = line.strip()
    return bool(_tables(keywords).discount.match(stripped)) and bool(NEGATIVE_AMOUNT.search(stripped))


def is_footer_line(line: str, keywords: ReceiptKeywords | None = None) -> bool:
    return bool(_tables(keywords).footer.search(line))


def is_subtotal_line(line: str, keywords: ReceiptKeywords | None = None) -> bool:
    return bool(_tables(keywords).subtotal.search(line))


def is_grand_total_line(line: str, keywords: ReceiptKeywords | None = None) -> bool:
    """Return True for explicit final totals ("GRAND TOTAL", "TOTAL BAYAR", "Amount Due")."""
    return bool(_tables(keywords).grand_total.search(strip_inclusive_note(line, keywords)))


def is_total_line(line: str, keywords: ReceiptKeywords | None = None) -> bool:
    return bool(_tables(keywords).total.search(line))


def is_item_count_line(line: str, keywords: ReceiptKeywords | None = None) -> bool:
    """Return True for "3 items" style summary lines."""
    return bool(ITEM_COUNT.match(line.strip()))


CLASSIFICATION_ORDER: tuple[tuple[LineKind, Callable[[str, ReceiptKeywords | None], bool]], ...] = (
    ("separator", is_separator_line),
    # Column headers mention "total"/"jumlah" but are never totals
    ("garbage", is_column_header_line),
    ("tax", is_tax_line),
    ("service_charge", is_service_charge_line),
    ("discount", is_discount_line),
    ("subtotal", is_subtotal_line),
    ("grand_total", is_grand_total_line),
    ("total", is_total_line),
    ("item_count", is_item_count_line),
    ("payment_or_change", is_payment_or_change_line),
    ("footer", is_footer_line),
    ("garbage", is_garbage_line),
)


def classify_line(line: str, keywords: ReceiptKeywords | None = None) -> LineKind:
    """Classify a line by the first matching kind in ``CLASSIFICATION_ORDER``."""
    tables = _tables(keywords)
    for kind, predicate in CLASSIFICATION_ORDER:
        if predicate(line, tables):
            return kind
    return "content"


def item_block_kind(kind: LineKind, line: str, keywords: ReceiptKeywords | None = None) -> LineKind:
    """
    Re-read a classified line met before the totals zone.

    Menu names carry summary words ("Mega Burger", "Paket Promo Hemat"). Above
    the totals only cash/change lines and "Diskon -2.000"-style discounts keep
    their kind; other tax, service, discount and payment-method lines are
    content, or garbage when they match the metadata table ("Ke Bank : BNI").
    """
    if kind not in ITEM_BLOCK_SUMMARY_KINDS:
        return kind
    if kind == "payment_or_change" and is_tender_line(line, keywords):
        return kind
    if kind == "discount" and is_leading_discount_line(line, keywords):
        return kind
    return "garbage" if is_garbage_line(line, keywords) else "content"
