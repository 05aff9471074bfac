"""Runtime infrastructure for the splitbill project.

This package provides process/runtime services including:
- Logging setup via get_logger()
- Path resolution via get_paths(), ProjectPaths
- Keyword table loading via load_receipt_keywords()
- OCR service access via call_ocr_service()

Usage:
    from splitbill.runtime import get_logger, get_paths, load_receipt_keywords

    logger = get_logger(__name__)
    paths = get_paths()
    print(paths.root, paths.keyword_rules)
"""

from splitbill.runtime.keyword_rules import load_receipt_keywords
from splitbill.runtime.logging import (
    DEFAULT_LOG_LEVEL,
    LOG_FORMAT,
    LOG_FORMAT_DEBUG,
    configure_logging,
    get_logger,
    parse_log_level,
    set_log_level,
)
from splitbill.runtime.ocr_client import (
    OCR_FAILED_MESSAGE,
    OCRServiceUnavailable,
    call_ocr_service,
    call_ocr_service_async,
    get_ocr_url,
)
from splitbill.runtime.paths import (
    ProjectPaths,
    get_paths,
    set_project_root,
)

__all__ = [
    # Logging
    "get_logger",
    "configure_logging",
    "set_log_level",
    "parse_log_level",
    "DEFAULT_LOG_LEVEL",
    "LOG_FORMAT",
    "LOG_FORMAT_DEBUG",
    # Rules
    "load_receipt_keywords",
    # OCR
    "OCR_FAILED_MESSAGE",
    "OCRServiceUnavailable",
    "call_ocr_service",
    "call_ocr_service_async",
    "get_ocr_url",
    # Paths
    "get_paths",
    "set_project_root",
    "ProjectPaths",
]
