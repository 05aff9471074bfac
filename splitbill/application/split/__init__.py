"""Bill split workflows."""

from splitbill.application.split.calculate import SplitFilesRequest, SplitFilesResult, run_split_files
from splitbill.application.split.review import Participant, ReceiptReviewSession, ReviewError
from splitbill.application.split.scan import (
    OCR_FAILED_MESSAGE,
    ReceiptScanRequest,
    ReceiptScanResult,
    run_receipt_scan,
    run_text_parse,
)

__all__ = [
    "OCR_FAILED_MESSAGE",
    "ReceiptScanRequest",
    "ReceiptScanResult",
    "run_receipt_scan",
    "run_text_parse",
    "SplitFilesRequest",
    "SplitFilesResult",
    "run_split_files",
    "Participant",
    "ReceiptReviewSession",
    "ReviewError",
]
