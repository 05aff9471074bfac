"""Receipt scan workflow orchestration."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Literal

from splitbill.domain.receipt import ParsedReceipt
from splitbill.receipt.ocr_text_parser import parse_receipt_text
from splitbill.runtime import get_logger, load_receipt_keywords
from splitbill.runtime.ocr_client import OCR_FAILED_MESSAGE, OCRServiceUnavailable, ocr_image_file

logger = get_logger(__name__)

ScanStatus = Literal[
    "file_not_found",
    "ocr_unavailable",
    "parsed",
]


@dataclass(frozen=True)
class ReceiptScanRequest:
    """Inputs for running receipt scan workflow."""

    image_path: Path
    ocr_url: str | None = None


@dataclass(frozen=True)
class ReceiptScanResult:
    """Outcome from receipt scan workflow."""

    status: ScanStatus
    receipt: ParsedReceipt | None = None
    ocr_text: str | None = None
    error: str | None = None


def run_text_parse(text: str) -> ParsedReceipt:
    """Parse already-extracted OCR text with the configured keyword tables."""
    return parse_receipt_text(text, load_receipt_keywords())


def run_receipt_scan(request: ReceiptScanRequest) -> ReceiptScanResult:
    """Run scan flow: OCR -> parse."""
    if not request.image_path.exists():
        return ReceiptScanResult(
            status="file_not_found",
            error=f"Receipt file not found: {request.image_path}",
        )

    try:
        ocr_text = ocr_image_file(request.image_path, request.ocr_url)
    except OCRServiceUnavailable as exc:
        logger.error("OCR failed for %s: %s", request.image_path, exc)
        return ReceiptScanResult(
            status="ocr_unavailable",
            error=OCR_FAILED_MESSAGE,
        )

    receipt = run_text_parse(ocr_text)
    logger.info("Parsed %d items from %s", len(receipt.items), request.image_path.name)
    return ReceiptScanResult(status="parsed", receipt=receipt, ocr_text=ocr_text)
