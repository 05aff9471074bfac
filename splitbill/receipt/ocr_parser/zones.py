"""Zone tracking for line-by-line receipt parsing.

A receipt is read top to bottom as HEADER -> ITEMS -> TOTALS. TOTALS is
terminal; a footer line additionally marks the document as finished.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Literal

from .classifiers import LineKind, is_separator_line
from .common import count_letters, has_formatted_price

logger = logging.getLogger(__name__)

Zone = Literal["header", "items", "totals"]

# Kinds that end the item block unconditionally; above the totals
# "payment_or_change" only survives item_block_kind for cash or change lines
TOTALS_ENTRY_KINDS: frozenset[LineKind] = frozenset({"subtotal", "grand_total", "payment_or_change"})
# Kinds that end the item block only once an item was read
TOTALS_ENTRY_KINDS_AFTER_ITEMS: frozenset[LineKind] = frozenset({"total", "item_count"})


@dataclass
class ZoneTracker:
    zone: Zone = "items"
    finished: bool = False

    @classmethod
    def for_lines(cls, lines: Sequence[str]) -> ZoneTracker:
        """Start in HEADER only when the document has a separator to leave it by."""
        has_separator = any(is_separator_line(line) for line in lines)
        return cls(zone="header" if has_separator else "items")

    def _move(self, zone: Zone, line: str) -> None:
        logger.debug("Zone %s -> %s at %r", self.zone, zone, line)
        self.zone = zone

    def observe(self, kind: LineKind, line: str, *, item_count: int) -> Zone:
        """Advance on a classified line and return the zone that line belongs to."""
        if self.finished:
            return self.zone

        if kind == "footer" and (item_count > 0 or self.zone == "totals"):
            logger.debug("Footer reached at %r", line)
            self.finished = True
            return self.zone

        if self.zone == "header":
            if kind == "separator":
                self._move("items", line)
            elif kind == "content" and has_formatted_price(line) and count_letters(line) >= 2:
                self._move("items", line)
        elif self.zone == "items":
            if kind in TOTALS_ENTRY_KINDS:
                self._move("totals", line)
            elif kind in TOTALS_ENTRY_KINDS_AFTER_ITEMS and item_count > 0:
                self._move("totals", line)

        return self.zone
