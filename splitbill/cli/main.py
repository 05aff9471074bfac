#!/usr/bin/env python3

import argparse
from collections.abc import Callable, Sequence

from splitbill.runtime.logging import LEVEL_NAMES, set_log_level
from splitbill.runtime.ocr_client import DEFAULT_OCR_URL
from splitbill.runtime.split_server import DEFAULT_HOST, DEFAULT_PORT

CommandHandler = Callable[[argparse.Namespace], None]

EPILOG = """
Commands:
  parse <file|->             Parse OCR text of a receipt
  scan <image>               OCR a receipt image and parse it
  split <receipt> <assign>   Split a receipt JSON by an assignments JSON
  serve [--host] [--port]    Start the HTTP API server

Exit codes:
  0 = success, 1 = bad input, 2 = OCR service unavailable
"""


def _exit_status(code: object) -> int:
    if code is None:
        return 0
    return code if isinstance(code, int) else 1


def _run_command(handler: CommandHandler, args: argparse.Namespace) -> int:
    """Call a handler and turn any SystemExit it raises into a return code."""
    try:
        handler(args)
    except SystemExit as exc:
        return _exit_status(exc.code)
    return 0


def _handler_for(command: str) -> CommandHandler | None:
    from splitbill.cli import receipt

    handlers: dict[str, CommandHandler] = {
        "parse": receipt.cmd_parse,
        "scan": receipt.cmd_scan,
        "split": receipt.cmd_split,
        "serve": receipt.cmd_serve,
    }
    return handlers.get(command)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="splitbill",
        description="Receipt parsing and bill splitting CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=EPILOG,
    )
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=sorted(LEVEL_NAMES),
        default=None,
        help="Override SPLITBILL_LOG_LEVEL for this run",
    )

    commands = parser.add_subparsers(dest="command", help="Available commands")

    parse_cmd = commands.add_parser("parse", help="Parse OCR text of a receipt")
    parse_cmd.add_argument("source", help="Text file with OCR output, or - for stdin")
    parse_cmd.add_argument("--json", action="store_true", help="Print receipt as JSON")

    scan_cmd = commands.add_parser("scan", help="OCR a receipt image and parse it")
    scan_cmd.add_argument("image", help="Path to receipt image")
    scan_cmd.add_argument(
        "--ocr-url",
        default=None,
        help=f"OCR service URL (default: $OCR_SERVICE_URL or {DEFAULT_OCR_URL})",
    )
    scan_cmd.add_argument("--json", action="store_true", help="Print receipt as JSON")

    split_cmd = commands.add_parser("split", help="Split a receipt among participants")
    split_cmd.add_argument("receipt", help="Receipt JSON file")
    split_cmd.add_argument("assignments", help="Participant assignments JSON file")
    split_cmd.add_argument("--json", action="store_true", help="Print split result as JSON")

    serve_cmd = commands.add_parser("serve", help="Start the HTTP API server")
    serve_cmd.add_argument("--host", default=DEFAULT_HOST, help=f"Host to bind to (default: {DEFAULT_HOST})")
    serve_cmd.add_argument("--port", type=int, default=DEFAULT_PORT, help=f"Port to bind to (default: {DEFAULT_PORT})")

    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Main entry point for the CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.log_level:
        set_log_level(args.log_level)

    handler = _handler_for(args.command) if args.command else None
    if handler is None:
        parser.print_help()
        return 1
    return _run_command(handler, args)


if __name__ == "__main__":
    raise SystemExit(main())
