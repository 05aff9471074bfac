"""Shared constants and helpers for OCR receipt text parsing."""

import re
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

ZERO = Decimal("0")
CENTS = Decimal("0.01")

# Currency markers stripped from prices and item names.
# Alphabetic codes must not touch other letters ("Sharp" keeps its "rp").
CURRENCY_PATTERN = re.compile(
    r"(?<![A-Za-z])(?:rp\.?|idr|usd|eur|sgd|myr)(?![A-Za-z])|[$£¥€]",
    re.IGNORECASE,
)

# Digit lookalikes, applied repeatedly until the text stops changing.
# O needs numeric context on one side; l/I/S/B need it on both.
OCR_DIGIT_FIXES: tuple[tuple[re.Pattern[str], str], ...] = (
    (re.compile(r"(?<=[\d.,])[Oo](?=[\d.,OolISsB])"), "0"),
    (re.compile(r"(?<=[\d.,OolISsB])[Oo](?=[\d.,])"), "0"),
    (re.compile(r"(?<=[\d.,])[lI](?=[\d.,])"), "1"),
    (re.compile(r"(?<=[\d.,])[Ss](?=[\d.,])"), "5"),
    (re.compile(r"(?<=[\d.,])B(?=[\d.,])"), "8"),
)
LEADING_O = re.compile(r"^[Oo](?=\d{2,})")
TRAILING_O = re.compile(r"(?<=\d\d)[Oo]$")
NUMERIC_SPAN = re.compile(r"\S*\d\S*")

# Price formats, most specific first
ID_GROUPED_PRICE = re.compile(r"^\d{1,3}(?:\.\d{3})+(?:,\d{1,2})?$")  # 1.234.567,89
US_GROUPED_PRICE = re.compile(r"^\d{1,3}(?:,\d{3})+(?:\.\d{1,2})?$")  # 1,234,567.89
DOT_DECIMAL_PRICE = re.compile(r"^\d+\.\d{1,2}$")  # 12.99
COMMA_DECIMAL_PRICE = re.compile(r"^\d+,\d{1,2}$")  # 9,50
BARE_DIGITS = re.compile(r"^\d+$")

# Price tokens inside a line, in tier order
GROUPED_PRICE_TOKEN = re.compile(r"\b\d{1,3}(?:[.,]\d{3})+(?:[.,]\d{1,2})?\b")
DECIMAL_PRICE_TOKEN = re.compile(r"\b\d{1,6}\.\d{2}\b")
BARE_PRICE_TOKEN = re.compile(r"\b\d{4,}\b")
MAX_BARE_PRICE_DIGITS = 7
# Bare 20xx tokens are almost always years
YEAR_RANGE = range(2000, 2100)

_CURRENCY_AHEAD = r"(?=(?:rp\.?|idr|usd|eur|sgd|myr)(?![A-Za-z])|[$£¥€])"
_FORMATTED_PRICE_AHEAD = r"(?=\d{1,3}(?:[.,]\d{3})+\b|\d+\.\d{2}\b)"

# Quantity patterns, tried in order. The whole match is the quantity token.
QTY_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"\b(\d+)\s*[xX×](?![A-Za-z])"),  # 3 x / 2x
    re.compile(r"(?<![A-Za-z])[xX×]\s*(\d+)\b"),  # x2
    re.compile(r"\b(\d+)\s*@"),  # 3 @ $1.99
    re.compile(r"\bqty\s*:?\s*(\d+)\b", re.IGNORECASE),  # Qty: 2
    re.compile(r"\b(\d+)\s*pcs\b", re.IGNORECASE),  # 2 pcs
    re.compile(r"(?<=[A-Za-z)])\s+(\d{1,2})\s+" + _CURRENCY_AHEAD, re.IGNORECASE),  # Jus Alpukat 3 Rp 18.000
    # A bare price only follows a single-digit quantity: "Croissant  2  28.000", not "Indomie 85 15.000"
    re.compile(r"(?<=[A-Za-z)])\s+(\d)\s+" + _FORMATTED_PRICE_AHEAD),
)
MAX_QTY = 100

ITEM_NAME_ALLOWED = re.compile(r"[^A-Za-z0-9\s\-().+/]")
LEADING_LIST_NUMBER = re.compile(r"^\d{1,2}\.\s+")


@dataclass(frozen=True)
class QtyMatch:
    """Quantity found on an item line and where it was found."""

    qty: int = 1
    token: str = ""
    span: tuple[int, int] | None = None


def fix_ocr_digits(text: str) -> str:
    """Replace letters OCR commonly confuses with digits inside numeric runs.

    "2O.OOO" -> "20.000", "1l5" -> "115". A lookalike with numeric context on
    only one side ("l5.000") is left alone unless it is an O.
    """
    previous = None
    result = text
    while result != previous:
        previous = result
        for pattern, digit in OCR_DIGIT_FIXES:
            result = pattern.sub(digit, result)
    result = LEADING_O.sub("0", result)
    return TRAILING_O.sub("0", result)


def correct_numeric_spans(line: str) -> str:
    """Apply ``fix_ocr_digits`` to whitespace-separated tokens containing a digit."""
    return NUMERIC_SPAN.sub(lambda m: fix_ocr_digits(m.group(0)), line)


def _resolve_number(cleaned: str) -> Decimal:
    if ID_GROUPED_PRICE.match(cleaned):
        normalized = cleaned.replace(".", "").replace(",", ".")
    elif US_GROUPED_PRICE.match(cleaned):
        normalized = cleaned.replace(",", "")
    elif DOT_DECIMAL_PRICE.match(cleaned) or BARE_DIGITS.match(cleaned):
        normalized = cleaned
    elif COMMA_DECIMAL_PRICE.match(cleaned):
        normalized = cleaned.replace(",", ".")
    else:
        # Unknown shape: keep digits and the last dot only
        digits = re.sub(r"[^\d.]", "", cleaned)
        head, dot, tail = digits.rpartition(".")
        normalized = head.replace(".", "") + dot + tail if dot else digits

    try:
        return Decimal(normalized)
    except InvalidOperation:
        return ZERO


def parse_price(text: str) -> Decimal:
    """
    Parse a price token into a Decimal, never raising.

    Handles Indonesian grouping ("15.000", "1.234.567,89"), US grouping
    ("15,000.50"), plain decimals ("12.99", "9,50"), currency markers and
    negative amounts ("-2.000", "(5.000)"). Unparseable input gives 0.
    """
    if not text:
        return ZERO
    raw = text.strip()
    amount_text = CURRENCY_PATTERN.sub("", raw).strip()
    negative = amount_text.startswith("-") or (amount_text.startswith("(") and amount_text.endswith(")"))

    cleaned = re.sub(r"[\s()+\-]", "", amount_text)
    cleaned = fix_ocr_digits(cleaned)
    if not cleaned:
        return ZERO

    value = _resolve_number(cleaned)
    if negative and value:
        return -value
    return value


def extract_all_prices(line: str) -> list[str]:
    """
    Return the price tokens on a line, left to right.

    Thousands-grouped tokens win; otherwise two-decimal tokens ("12.99");
    otherwise bare runs of 4-7 digits that do not look like a year.
    """
    grouped = GROUPED_PRICE_TOKEN.findall(line)
    if grouped:
        return grouped

    decimals = DECIMAL_PRICE_TOKEN.findall(line)
    if decimals:
        return decimals

    return [
        token
        for token in BARE_PRICE_TOKEN.findall(line)
        if len(token) <= MAX_BARE_PRICE_DIGITS and int(token) not in YEAR_RANGE
    ]


def has_formatted_price(line: str) -> bool:
    """Return True if the line carries a grouped or two-decimal price token."""
    return bool(GROUPED_PRICE_TOKEN.search(line) or DECIMAL_PRICE_TOKEN.search(line))


def extract_qty(line: str) -> QtyMatch:
    """Find the item quantity on a line; defaults to 1 when none is printed."""
    for pattern in QTY_PATTERNS:
        for match in pattern.finditer(line):
            qty = int(match.group(1))
            if 0 < qty < MAX_QTY:
                return QtyMatch(qty=qty, token=match.group(0).strip(), span=match.span())
    return QtyMatch()


def count_letters(text: str) -> int:
    return sum(1 for ch in text if ch.isalpha())


def clean_item_name(line: str, prices: list[str], qty: QtyMatch | None = None) -> str:
    """Strip prices, the quantity token, currency markers and symbols from an item line."""
    text = line
    if qty is not None and qty.span is not None:
        start, end = qty.span
        text = f"{text[:start]} {text[end:]}"
    for price in prices:
        text = text.replace(price, " ", 1)
    text = CURRENCY_PATTERN.sub(" ", text)
    text = text.replace("@", " ")
    text = ITEM_NAME_ALLOWED.sub(" ", text)
    text = re.sub(r"\s+", " ", text).strip(" -+/.")
    return LEADING_LIST_NUMBER.sub("", text)


def unit_price_for(total: Decimal, qty: int) -> Decimal:
    """Estimate a unit price from a line total, rounded to cents."""
    if qty <= 1:
        return total
    return (total / qty).quantize(CENTS, rounding=ROUND_HALF_UP)
