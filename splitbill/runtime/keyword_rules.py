"""Runtime loader for receipt keyword tables."""

from __future__ import annotations

import tomllib
from functools import lru_cache
from pathlib import Path
from typing import Any

from splitbill.receipt.ocr_parser.keywords import ReceiptKeywords, build_receipt_keywords
from splitbill.runtime.logging import get_logger
from splitbill.runtime.paths import get_paths

logger = get_logger(__name__)


def _load_toml(path: Path) -> dict[str, Any]:
    """Load TOML file and return parsed dict; missing files map to empty dict."""
    if not path.exists():
        return {}

    with open(path, "rb") as f:
        data = tomllib.load(f)
    return data if isinstance(data, dict) else {}


@lru_cache(maxsize=8)
def load_receipt_keywords(rule_paths: tuple[str, ...] | None = None) -> ReceiptKeywords:
    """Load keyword tables from runtime-configured files into compiled in-memory tables.

    With no explicit paths, the packaged defaults are extended by the project's
    config/receipt_keywords.toml when it exists.
    """
    if rule_paths is None:
        rule_files = get_paths().keyword_rule_files()
    else:
        rule_files = [Path(path) for path in rule_paths]

    configs = []
    for path in rule_files:
        config = _load_toml(path)
        if config:
            logger.debug("Loaded receipt keywords from %s", path)
        configs.append(config)
    return build_receipt_keywords(configs)
