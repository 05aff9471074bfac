"""Shared pytest fixtures for splitbill tests."""

from __future__ import annotations

from collections.abc import Iterator

import pytest


@pytest.fixture(autouse=True)
def _isolated_project_root(tmp_path_factory: pytest.TempPathFactory, monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Keep a developer's config/receipt_keywords.toml out of test runs."""
    from splitbill.runtime.keyword_rules import load_receipt_keywords
    from splitbill.runtime.paths import get_paths, set_project_root

    previous_root = get_paths().root
    monkeypatch.setenv("OCR_SERVICE_URL", "http://ocr.invalid")
    set_project_root(tmp_path_factory.mktemp("project"))
    load_receipt_keywords.cache_clear()
    yield
    set_project_root(previous_root)
    load_receipt_keywords.cache_clear()
