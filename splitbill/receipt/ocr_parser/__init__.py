"""Composable OCR receipt text parser components."""

from .classifiers import (
    CLASSIFICATION_ORDER,
    LineKind,
    classify_line,
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
    is_total_line,
    item_block_kind,
)
from .common import QtyMatch, clean_item_name, extract_all_prices, extract_qty, fix_ocr_digits, parse_price
from .fields_parser import TAX_INCLUSIVE_TOLERANCE, TotalsAccumulator, reconcile_totals
from .items_text_parser import MAX_PENDING_FRAGMENTS, ItemAssembler
from .keywords import ReceiptKeywords, build_receipt_keywords, default_receipt_keywords
from .zones import Zone, ZoneTracker

__all__ = [
    "CLASSIFICATION_ORDER",
    "MAX_PENDING_FRAGMENTS",
    "TAX_INCLUSIVE_TOLERANCE",
    "ItemAssembler",
    "LineKind",
    "QtyMatch",
    "ReceiptKeywords",
    "TotalsAccumulator",
    "Zone",
    "ZoneTracker",
    "build_receipt_keywords",
    "classify_line",
    "clean_item_name",
    "default_receipt_keywords",
    "extract_all_prices",
    "extract_qty",
    "fix_ocr_digits",
    "is_discount_line",
    "is_footer_line",
    "is_garbage_line",
    "is_grand_total_line",
    "is_item_count_line",
    "is_leading_discount_line",
    "is_named_payment_method",
    "is_payment_or_change_line",
    "is_separator_line",
    "is_service_charge_line",
    "is_subtotal_line",
    "is_tax_line",
    "is_tender_line",
    "is_total_line",
    "item_block_kind",
    "parse_price",
    "reconcile_totals",
]
