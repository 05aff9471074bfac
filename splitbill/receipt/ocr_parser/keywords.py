"""Keyword tables used by the receipt line classifiers.

The tables are data: bilingual (Indonesian/English) lists shipped in
``receipt/rules/default_keywords.toml`` and extendable per project. This module
merges in-memory config mappings into a frozen ``ReceiptKeywords`` with the
regular expressions the classifiers need already compiled.

To add keywords:
1. Find the section in default_keywords.toml (or a project override file)
2. Append to its list; regex fragments are allowed outside ``garbage.keywords``
"""

from __future__ import annotations

import re
import tomllib
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from functools import lru_cache
from importlib import resources
from typing import Any

DEFAULT_KEYWORDS_RESOURCE = "default_keywords.toml"

# (section, key) pairs merged across config layers
KEYWORD_LISTS: tuple[tuple[str, str], ...] = (
    ("garbage", "keywords"),
    ("garbage", "exact"),
    ("column_headers", "leading"),
    ("column_headers", "words"),
    ("tax", "words"),
    ("service_charge", "words"),
    ("discount", "words"),
    ("payment", "tender"),
    ("payment", "methods"),
    ("footer", "phrases"),
    ("subtotal", "phrases"),
    ("grand_total", "patterns"),
    ("total", "words"),
    ("inclusive_note", "words"),
)


def _word_pattern(fragments: Sequence[str]) -> re.Pattern[str]:
    """Compile fragments into one case-insensitive whole-word alternation.

    An empty list compiles to a pattern that never matches.
    """
    if not fragments:
        return re.compile(r"(?!x)x")
    alternation = "|".join(f"(?:{fragment})" for fragment in fragments)
    return re.compile(rf"(?<!\w)(?:{alternation})(?!\w)", re.IGNORECASE)


@dataclass(frozen=True)
class ReceiptKeywords:
    """Merged keyword tables with compiled matchers."""

    garbage_keywords: tuple[str, ...]
    garbage_exact: frozenset[str]
    column_header_leading: frozenset[str]
    column_header_words: frozenset[str]
    tax: re.Pattern[str]
    service_charge: re.Pattern[str]
    discount: re.Pattern[str]
    payment_tender: re.Pattern[str]
    payment_methods: re.Pattern[str]
    footer: re.Pattern[str]
    subtotal: re.Pattern[str]
    grand_total: re.Pattern[str]
    total: re.Pattern[str]
    inclusive_note: re.Pattern[str]


def _normalize_entries(raw: Any) -> list[str]:
    """Normalize a TOML list (or single string) into lowercase entries."""
    if isinstance(raw, str):
        raw = [raw]
    if not isinstance(raw, list):
        return []
    # Leading/trailing spaces in substrings are significant ("jl ", "table ").
    return [str(value).lower() for value in raw if str(value).strip()]


def merge_keyword_configs(configs: Sequence[Mapping[str, Any]]) -> dict[tuple[str, str], list[str]]:
    """Merge keyword config layers; later layers extend earlier ones, duplicates dropped."""
    merged: dict[tuple[str, str], list[str]] = {key: [] for key in KEYWORD_LISTS}
    for config in configs:
        for section, key in KEYWORD_LISTS:
            table = config.get(section, {})
            if not isinstance(table, Mapping):
                continue
            bucket = merged[(section, key)]
            for entry in _normalize_entries(table.get(key)):
                if entry not in bucket:
                    bucket.append(entry)
    return merged


def build_receipt_keywords(configs: Sequence[Mapping[str, Any]] | None = None) -> ReceiptKeywords:
    """Build compiled keyword tables from in-memory config layers."""
    merged = merge_keyword_configs(configs or ())

    def words(section: str, key: str) -> list[str]:
        return [entry.strip() for entry in merged[(section, key)]]

    return ReceiptKeywords(
        garbage_keywords=tuple(merged[("garbage", "keywords")]),
        garbage_exact=frozenset(words("garbage", "exact")),
        column_header_leading=frozenset(words("column_headers", "leading")),
        column_header_words=frozenset(words("column_headers", "words")),
        tax=_word_pattern(words("tax", "words")),
        service_charge=_word_pattern(words("service_charge", "words")),
        discount=_word_pattern(words("discount", "words")),
        payment_tender=_word_pattern(words("payment", "tender")),
        payment_methods=_word_pattern(words("payment", "methods")),
        footer=_word_pattern(words("footer", "phrases")),
        subtotal=_word_pattern(words("subtotal", "phrases")),
        grand_total=_word_pattern(words("grand_total", "patterns")),
        total=_word_pattern(words("total", "words")),
        inclusive_note=re.compile(
            r"\([^)]*(?:" + "|".join(words("inclusive_note", "words") or ["(?!x)x"]) + r")[^)]*\)",
            re.IGNORECASE,
        ),
    )


def load_default_keyword_config() -> dict[str, Any]:
    """Read the keyword tables packaged with splitbill."""
    resource = resources.files("splitbill.receipt") / "rules" / DEFAULT_KEYWORDS_RESOURCE
    with resource.open("rb") as f:
        data = tomllib.load(f)
    return data if isinstance(data, dict) else {}


@lru_cache(maxsize=1)
def default_receipt_keywords() -> ReceiptKeywords:
    """Packaged keyword tables without project overrides."""
    return build_receipt_keywords([load_default_keyword_config()])
