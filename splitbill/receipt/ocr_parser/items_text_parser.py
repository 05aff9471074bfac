"""Text-line based receipt item assembly."""

import logging
import re
from collections import deque
from dataclasses import dataclass, field

from splitbill.domain.receipt import MAX_ITEM_NAME_LENGTH, UNKNOWN_ITEM_NAME, ReceiptItem

from .common import (
    clean_item_name,
    count_letters,
    extract_qty,
    parse_price,
    unit_price_for,
)

logger = logging.getLogger(__name__)

# Name fragments waiting for a priced line; the oldest is dropped beyond this
MAX_PENDING_FRAGMENTS = 4

# Postal codes, phone numbers, order ids, lone short numbers
NON_TEXT_LINE = re.compile(r"^[\d\s.,:;\-/()+#]+$")
BARCODE_TEXT = re.compile(r"^\*[0-9*]+\*$")
# "- Less Sweet", "* Tidak pedas", "+ Extra cheese"
MODIFIER_LINE = re.compile(r"^[*\-+]\s*\S")
# "3x1 (sesudah makan)"
DOSAGE_LINE = re.compile(r"^\d+\s*[xX]\s*\d+")


def is_noise_line(line: str) -> bool:
    """Return True for lines that carry no item text (ids, phones, barcodes)."""
    stripped = line.strip()
    return bool(NON_TEXT_LINE.match(stripped) or BARCODE_TEXT.match(stripped))


def _truncate(name: str) -> str:
    return re.sub(r"\s+", " ", name).strip()[:MAX_ITEM_NAME_LENGTH]


@dataclass
class ItemAssembler:
    """
    Build receipt items from item-zone lines.

    Unpriced text lines are queued as name fragments; the next priced line
    emits an item named from the queued fragments plus whatever text is left
    on the priced line itself. Modifier lines ("- Less Sweet") attach to the
    previous item when nothing is queued.
    """

    items: list[ReceiptItem] = field(default_factory=list)
    pending: deque[str] = field(default_factory=deque)

    def clear_pending(self) -> None:
        self.pending.clear()

    def _queue(self, fragment: str) -> None:
        if len(self.pending) >= MAX_PENDING_FRAGMENTS:
            dropped = self.pending.popleft()
            logger.debug("Pending name buffer full, dropping %r", dropped)
        self.pending.append(fragment)

    def _append_to_last(self, suffix: str) -> None:
        last = self.items[-1]
        last.name = _truncate(f"{last.name} {suffix}")

    def add_text(self, line: str) -> None:
        """Handle an unpriced item-zone line."""
        text = line.strip()
        if is_noise_line(text) or count_letters(text) < 2:
            return

        if MODIFIER_LINE.match(text) and (text.startswith("*") or len(text) > 3):
            label = f"({text[1:].strip()})"
            if self.items and not self.pending:
                self._append_to_last(label)
            else:
                self._queue(label)
            return

        if DOSAGE_LINE.match(text) and self.items and not self.pending:
            self._append_to_last(f"[{text}]")
            return

        fragment = clean_item_name(text, [])
        if fragment:
            self._queue(fragment)

    def add_priced(self, line: str, prices: list[str]) -> ReceiptItem | None:
        """Emit an item from a priced line; returns None for non-positive amounts."""
        total = parse_price(prices[-1])
        if total <= 0:
            logger.debug("Skipping non-positive item line %r", line)
            self.clear_pending()
            return None

        qty = extract_qty(line)
        if len(prices) >= 2:
            unit_price = parse_price(prices[0])
        else:
            unit_price = unit_price_for(total, qty.qty)

        residual = clean_item_name(line, prices, qty)
        if self.pending:
            name = " ".join(self.pending)
            if len(residual) > 2 and count_letters(residual) > 0:
                name = f"{name} {residual}"
        elif len(residual) > 1 and count_letters(residual) > 0:
            name = residual
        else:
            name = UNKNOWN_ITEM_NAME

        item = ReceiptItem(name=_truncate(name), total=total, qty=qty.qty, unit_price=unit_price)
        self.items.append(item)
        self.clear_pending()
        return item
