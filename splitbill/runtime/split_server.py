"""FastAPI server for parsing receipts and splitting bills."""

import json
import re
from collections.abc import Awaitable, Callable
from typing import Any

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, Response
from starlette.middleware.base import BaseHTTPMiddleware

from splitbill.domain.receipt import ParsedReceipt
from splitbill.domain.split import calculate_split, parse_assignments
from splitbill.receipt.ocr_text_parser import parse_receipt_text
from splitbill.runtime.keyword_rules import load_receipt_keywords
from splitbill.runtime.logging import get_logger
from splitbill.runtime.ocr_client import OCR_FAILED_MESSAGE, OCRServiceUnavailable, call_ocr_service_async

logger = get_logger(__name__)

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 8000


def normalize_multipart_body(body: bytes, boundary: str) -> bytes:
    """Rewrite LF-only part headers to CRLF so the multipart parser accepts them.

    Phone shortcut apps sometimes post multipart bodies with bare ``\\n``
    between part headers. Part payloads are left untouched.
    """
    boundary_bytes = b"--" + boundary.encode()
    parts = body.split(boundary_bytes)
    fixed_parts = [parts[0]]

    for part in parts[1:]:
        if part.startswith(b"--") or not part:
            fixed_parts.append(part)
            continue

        leading = b""
        for newline in (b"\r\n", b"\n"):
            if part.startswith(newline):
                leading, part = newline, part[len(newline) :]
                break

        for separator in (b"\r\n\r\n", b"\n\n"):
            if separator in part:
                header, payload = part.split(separator, 1)
                break
        else:
            fixed_parts.append(leading + part)
            continue

        header = header.replace(b"\r\n", b"\n").replace(b"\n", b"\r\n")
        fixed_parts.append(leading + header + b"\r\n\r\n" + payload)

    return boundary_bytes.join(fixed_parts)


class MultipartLineEndingMiddleware(BaseHTTPMiddleware):
    """Normalize multipart header line endings before form parsing."""

    async def dispatch(self, request: Request, call_next: Callable[[Request], Awaitable[Response]]) -> Response:
        content_type = request.headers.get("content-type", "")
        if content_type.startswith("multipart/form-data"):
            boundary_match = re.search(r"boundary=([^;]+)", content_type)
            if boundary_match:
                body = await request.body()
                fixed_body = normalize_multipart_body(body, boundary_match.group(1).strip().strip('"'))
                logger.debug("Multipart body length %d -> %d", len(body), len(fixed_body))
                # The middleware replays the cached body to the endpoint
                request._body = fixed_body
            else:
                logger.info("Multipart request missing boundary; skipping normalization.")

        return await call_next(request)


def _error(message: str, status_code: int) -> JSONResponse:
    return JSONResponse({"status": "error", "message": message}, status_code=status_code)


async def _json_body(request: Request) -> dict[str, Any] | None:
    try:
        payload = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        return None
    return payload if isinstance(payload, dict) else None


app = FastAPI(title="Split Bill")
app.add_middleware(MultipartLineEndingMiddleware)


@app.post("/parse")
async def parse_text(request: Request) -> JSONResponse:
    """Parse OCR text posted as ``{"text": ...}``."""
    payload = await _json_body(request)
    if payload is None or not isinstance(payload.get("text"), str):
        return _error('Expected JSON body {"text": "..."}', 400)

    receipt = parse_receipt_text(payload["text"], load_receipt_keywords())
    return JSONResponse({"status": "ok", "receipt": receipt.to_dict()})


@app.post("/split")
async def split_bill(request: Request) -> JSONResponse:
    """Split a reviewed receipt posted with its participant assignments."""
    payload = await _json_body(request)
    if payload is None or not isinstance(payload.get("receipt"), dict):
        return _error('Expected JSON body {"receipt": {...}, "assignments": [...]}', 400)

    try:
        receipt = ParsedReceipt.from_dict(payload["receipt"])
        assignments = parse_assignments(payload.get("assignments", []))
    except (ValueError, AttributeError, TypeError) as exc:
        return _error(str(exc), 422)

    result = calculate_split(receipt, assignments)
    return JSONResponse({"status": "ok", "result": result.to_dict()})


@app.post("/scan")
async def scan_receipt(request: Request) -> JSONResponse:
    """Receive a receipt image, OCR it and return the parsed draft."""
    form = await request.form()

    file = None
    for key, value in form.items():
        logger.debug("Form field: key=%r, type=%s", key, type(value))
        if hasattr(value, "read"):
            file = value
            break

    if not file:
        return _error("No file found in request", 400)

    filename = getattr(file, "filename", None) or "receipt.jpg"
    contents = await file.read()

    try:
        text = await call_ocr_service_async(contents, filename)
    except OCRServiceUnavailable as exc:
        logger.error("OCR failed for %s: %s", filename, exc)
        return _error(OCR_FAILED_MESSAGE, 502)

    receipt = parse_receipt_text(text, load_receipt_keywords())
    logger.info("Parsed %d items from %s (%d bytes)", len(receipt.items), filename, len(contents))
    return JSONResponse({"status": "ok", "receipt": receipt.to_dict()})


@app.get("/health")
async def health() -> dict[str, str]:
    """Health check endpoint."""
    return {"status": "ok"}


def serve(host: str = DEFAULT_HOST, port: int = DEFAULT_PORT) -> None:
    import uvicorn

    uvicorn.run(app, host=host, port=port)


if __name__ == "__main__":
    serve()
