"""Parse raw OCR text into a structured ParsedReceipt."""

import logging
import re
from dataclasses import dataclass, field
from decimal import Decimal

from splitbill.domain.receipt import ParsedReceipt

from .ocr_parser.classifiers import LineKind, classify_line, is_named_payment_method, item_block_kind
from .ocr_parser.common import correct_numeric_spans, extract_all_prices, parse_price
from .ocr_parser.fields_parser import TAX_INCLUSIVE_TOLERANCE, TotalsAccumulator, reconcile_totals
from .ocr_parser.items_text_parser import ItemAssembler, is_noise_line
from .ocr_parser.keywords import ReceiptKeywords, default_receipt_keywords
from .ocr_parser.zones import ZoneTracker

logger = logging.getLogger(__name__)

# Summary kinds booked from inside the item block without leaving it
IN_BLOCK_SUMMARY_KINDS: frozenset[LineKind] = frozenset({"discount", "total"})


@dataclass
class ParserContext:
    """Mutable state threaded through the per-line steps of one parse."""

    keywords: ReceiptKeywords
    zones: ZoneTracker
    assembler: ItemAssembler = field(default_factory=ItemAssembler)
    totals: TotalsAccumulator = field(default_factory=TotalsAccumulator)


def normalize_lines(text: str) -> list[str]:
    """Split OCR text into trimmed, non-empty lines with runs of spaces collapsed."""
    lines = text.replace("\r\n", "\n").replace("\r", "\n").split("\n")
    return [re.sub(r"[ \t]+", " ", line).strip() for line in lines if line.strip()]


def _add_total_line(context: ParserContext, kind: LineKind, line: str, prices: list[str]) -> None:
    amount = parse_price(prices[-1])
    payment_method = kind == "payment_or_change" and is_named_payment_method(line, context.keywords)
    context.totals.add(kind, amount, payment_method=payment_method)


def _process_items_line(context: ParserContext, kind: LineKind, line: str) -> None:
    if kind == "separator":
        context.assembler.clear_pending()
        return

    prices = extract_all_prices(line)
    if kind in IN_BLOCK_SUMMARY_KINDS:
        # "Voucher : -50.000" inside the item block, or a lone "Total : Rp 10.000"
        if prices:
            _add_total_line(context, kind, line, prices)
        return
    if kind != "content" or is_noise_line(line):
        return

    if prices:
        context.assembler.add_priced(line, prices)
    else:
        context.assembler.add_text(line)


def _process_line(context: ParserContext, line: str) -> None:
    kind = classify_line(line, context.keywords)
    if context.zones.zone != "totals":
        kind = item_block_kind(kind, line, context.keywords)
    zone = context.zones.observe(kind, line, item_count=len(context.assembler.items))
    if context.zones.finished or kind == "garbage" or zone == "header":
        return

    if zone == "items":
        _process_items_line(context, kind, line)
        return

    prices = extract_all_prices(line)
    if prices and kind != "separator":
        _add_total_line(context, kind, line, prices)


def parse_receipt_text(
    text: str,
    keywords: ReceiptKeywords | None = None,
    *,
    tax_inclusive_tolerance: Decimal = TAX_INCLUSIVE_TOLERANCE,
) -> ParsedReceipt:
    """
    Parse OCR text of a receipt into items and summary amounts.

    This is a best-effort parser and never raises: unreadable text yields an
    empty receipt, unnamed items are called "Unknown Item", and missing
    summary amounts are derived from the items.

    Args:
        text: Raw OCR text, one receipt line per text line
        keywords: Keyword tables; defaults to the packaged tables
        tax_inclusive_tolerance: Max gap between item sum and grand total for
            a receipt without tax or service lines to be flagged tax-inclusive

    Returns:
        ParsedReceipt ready for review
    """
    keywords = keywords or default_receipt_keywords()
    lines = [correct_numeric_spans(line) for line in normalize_lines(text or "")]
    if not lines:
        return ParsedReceipt()

    context = ParserContext(keywords=keywords, zones=ZoneTracker.for_lines(lines))
    for line in lines:
        _process_line(context, line)
        if context.zones.finished:
            break

    receipt = reconcile_totals(context.assembler.items, context.totals, tolerance=tax_inclusive_tolerance)
    logger.debug(
        "Parsed %d items, subtotal=%s grand_total=%s from %d lines",
        len(receipt.items),
        receipt.subtotal,
        receipt.grand_total,
        len(lines),
    )
    return receipt
