"""Split workflow over receipt and assignment JSON files."""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Literal

from splitbill.domain.receipt import ParsedReceipt
from splitbill.domain.split import SplitResult, calculate_split, parse_assignments

SplitStatus = Literal[
    "file_not_found",
    "invalid_input",
    "ok",
]


@dataclass(frozen=True)
class SplitFilesRequest:
    """Inputs for splitting a saved receipt."""

    receipt_path: Path
    assignments_path: Path


@dataclass(frozen=True)
class SplitFilesResult:
    """Outcome from the split workflow."""

    status: SplitStatus
    receipt: ParsedReceipt | None = None
    result: SplitResult | None = None
    error: str | None = None


def run_split_files(request: SplitFilesRequest) -> SplitFilesResult:
    """Load receipt + assignments JSON and compute the split."""
    for path in (request.receipt_path, request.assignments_path):
        if not path.exists():
            return SplitFilesResult(status="file_not_found", error=f"File not found: {path}")

    try:
        receipt = ParsedReceipt.from_dict(json.loads(request.receipt_path.read_text()))
        assignments = parse_assignments(json.loads(request.assignments_path.read_text()))
    except (ValueError, AttributeError, TypeError) as exc:
        return SplitFilesResult(status="invalid_input", error=str(exc))

    return SplitFilesResult(
        status="ok",
        receipt=receipt,
        result=calculate_split(receipt, assignments),
    )
