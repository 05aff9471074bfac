"""HTTP client for the external OCR service."""

from __future__ import annotations

import mimetypes
import os
import time
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any

import httpx

from splitbill.runtime.logging import get_logger

logger = get_logger(__name__)

DEFAULT_OCR_URL = "http://localhost:8001"
OCR_TIMEOUT_SECONDS = 60.0

# User-facing text for every OCR failure
OCR_FAILED_MESSAGE = "Could not process image. Enter details manually."

# Detections below this confidence are dropped before rows are rebuilt
MIN_DETECTION_CONFIDENCE = 0.5


class OCRServiceUnavailable(RuntimeError):
    """Raised when the OCR service cannot be reached or returns an error."""


def get_ocr_url(override: str | None = None) -> str:
    """Resolve the OCR service base URL (explicit value, OCR_SERVICE_URL, default)."""
    url = override or os.environ.get("OCR_SERVICE_URL") or DEFAULT_OCR_URL
    return url.rstrip("/")


def _detection_rows(detections: Sequence[Any]) -> list[str]:
    """
    Rebuild text rows from PaddleOCR-style detections.

    Each detection is ``[bbox, [text, confidence]]`` with a four-point bbox.
    Detections whose vertical center falls inside the span of a row's first
    detection join that row; rows read top to bottom, words left to right.
    """
    boxes: list[tuple[float, float, float, float, str]] = []
    for detection in detections:
        try:
            bbox, (text, confidence) = detection
            ys = [float(point[1]) for point in bbox]
            min_x = min(float(point[0]) for point in bbox)
        except (TypeError, ValueError, IndexError) as exc:
            raise OCRServiceUnavailable(f"Malformed OCR detection: {detection!r}") from exc

        if float(confidence) < MIN_DETECTION_CONFIDENCE or not str(text).strip():
            continue
        center_y = sum(ys) / len(ys)
        boxes.append((center_y, min(ys), max(ys), min_x, str(text).strip()))

    boxes.sort(key=lambda box: (box[0], box[3]))

    rows: list[list[tuple[float, float, float, float, str]]] = []
    for box in boxes:
        if rows:
            _, row_top, row_bottom, _, _ = rows[-1][0]
            if row_top <= box[0] <= row_bottom:
                rows[-1].append(box)
                continue
        rows.append([box])

    return [" ".join(box[4] for box in sorted(row, key=lambda b: b[3])) for row in rows]


def ocr_result_to_text(raw_result: Mapping[str, Any]) -> str:
    """
    Extract receipt text from an OCR service response.

    Accepts ``{"text": ...}`` / ``{"full_text": ...}`` payloads, or raw
    PaddleOCR ``{"detections": [...]}`` payloads whose rows are rebuilt from
    bounding boxes.
    """
    for key in ("text", "full_text"):
        value = raw_result.get(key)
        if isinstance(value, str):
            return value

    detections = raw_result.get("detections")
    if isinstance(detections, list):
        return "\n".join(_detection_rows(detections))

    raise OCRServiceUnavailable("OCR service response has no text")


def _image_upload(image_bytes: bytes, filename: str) -> dict[str, tuple[str, bytes, str]]:
    content_type = mimetypes.guess_type(filename)[0] or "image/jpeg"
    return {"file": (filename, image_bytes, content_type)}


def _unreachable(ocr_url: str, exc: httpx.RequestError) -> OCRServiceUnavailable:
    logger.error("OCR service at %s unreachable: %s", ocr_url, exc)
    return OCRServiceUnavailable(f"Could not reach OCR service at {ocr_url}: {exc}")


def _check_response(response: httpx.Response) -> str:
    if response.status_code != 200:
        # TODO(security): response body may include OCR text with PII; redact before non-localhost use.
        logger.error("OCR service error: %s - %s", response.status_code, response.text)
        raise OCRServiceUnavailable(f"OCR service error: {response.status_code}")
    try:
        payload = response.json()
    except ValueError as exc:
        raise OCRServiceUnavailable("OCR service returned invalid JSON") from exc
    if not isinstance(payload, Mapping):
        raise OCRServiceUnavailable("OCR service returned an unexpected payload")
    return ocr_result_to_text(payload)


def call_ocr_service(image_bytes: bytes, filename: str, ocr_url: str | None = None) -> str:
    """
    Send an image to the OCR service and return the recognized text.

    Raises:
        OCRServiceUnavailable: the service is unreachable or answered with an error.
    """
    ocr_url = get_ocr_url(ocr_url)
    logger.info("POST %s/ocr (%d bytes)", ocr_url, len(image_bytes))

    started = time.monotonic()
    try:
        response = httpx.post(
            f"{ocr_url}/ocr",
            files=_image_upload(image_bytes, filename),
            timeout=OCR_TIMEOUT_SECONDS,
        )
        logger.info("OCR service returned in %.2f seconds", time.monotonic() - started)
    except httpx.RequestError as exc:
        raise _unreachable(ocr_url, exc) from exc

    return _check_response(response)


async def call_ocr_service_async(image_bytes: bytes, filename: str, ocr_url: str | None = None) -> str:
    """Async variant of ``call_ocr_service`` for the HTTP server."""
    ocr_url = get_ocr_url(ocr_url)
    logger.info("POST %s/ocr (%d bytes)", ocr_url, len(image_bytes))

    try:
        async with httpx.AsyncClient(timeout=OCR_TIMEOUT_SECONDS) as client:
            response = await client.post(f"{ocr_url}/ocr", files=_image_upload(image_bytes, filename))
    except httpx.RequestError as exc:
        raise _unreachable(ocr_url, exc) from exc

    return _check_response(response)


def ocr_image_file(image_path: Path, ocr_url: str | None = None) -> str:
    """Read an image from disk and return its OCR text."""
    return call_ocr_service(image_path.read_bytes(), image_path.name, ocr_url)
