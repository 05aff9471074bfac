"""Receipt and split command handlers used by the unified CLI."""

import argparse
import json
import sys
from pathlib import Path

from splitbill.receipt.formatter import format_parsed_receipt, format_split_result
from splitbill.runtime import get_logger

logger = get_logger(__name__)


def _print_json(payload: object) -> None:
    print(json.dumps(payload, indent=2, ensure_ascii=False))


def _read_text_source(source: str) -> str:
    if source == "-":
        return sys.stdin.read()
    return Path(source).read_text(encoding="utf-8")


def cmd_parse(args: argparse.Namespace) -> None:
    """Parse OCR text from a file (or stdin) and print the receipt."""
    from splitbill.application.split.scan import run_text_parse

    if args.source != "-" and not Path(args.source).exists():
        print(f"Error: Text file not found: {args.source}")
        sys.exit(1)

    receipt = run_text_parse(_read_text_source(args.source))
    if args.json:
        _print_json(receipt.to_dict())
    else:
        print(format_parsed_receipt(receipt))


def cmd_scan(args: argparse.Namespace) -> None:
    """Send a receipt image to the OCR service and print the parsed receipt."""
    from splitbill.application.split.scan import ReceiptScanRequest, run_receipt_scan

    result = run_receipt_scan(ReceiptScanRequest(image_path=Path(args.image), ocr_url=args.ocr_url))

    if result.status == "file_not_found":
        logger.error("%s", result.error)
        print(f"Error: {result.error}")
        sys.exit(1)

    if result.status == "ocr_unavailable":
        print(result.error)
        print("Make sure the OCR service is running, or use `splitbill parse` on typed text.")
        sys.exit(2)

    receipt = result.receipt
    if receipt is None:
        print("Scan failed: missing receipt output.")
        sys.exit(1)

    if args.json:
        _print_json(receipt.to_dict())
        return

    print("=" * 60)
    print("PARSED RECEIPT")
    print("=" * 60)
    print(format_parsed_receipt(receipt))


def cmd_split(args: argparse.Namespace) -> None:
    """Split a saved receipt according to an assignments file."""
    from splitbill.application.split.calculate import SplitFilesRequest, run_split_files

    result = run_split_files(
        SplitFilesRequest(
            receipt_path=Path(args.receipt),
            assignments_path=Path(args.assignments),
        )
    )

    if result.status == "file_not_found":
        print(f"Error: {result.error}")
        sys.exit(1)

    if result.status == "invalid_input":
        print(f"Invalid input: {result.error}")
        sys.exit(1)

    assert result.result is not None
    if args.json:
        _print_json(result.result.to_dict())
    else:
        print(format_split_result(result.result))


def cmd_serve(args: argparse.Namespace) -> None:
    """Start the FastAPI server for parsing and splitting."""
    from splitbill.runtime import split_server as server

    print(f"Starting split bill server on {args.host}:{args.port}")
    print(f"Endpoints: http://{args.host}:{args.port}/parse | /split | /scan")
    print("Press Ctrl+C to stop")

    server.serve(host=args.host, port=args.port)
