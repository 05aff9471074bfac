"""Summary amount extraction and final reconciliation."""

import logging
from dataclasses import dataclass
from decimal import Decimal

from splitbill.domain.receipt import ParsedReceipt, ReceiptItem

from .classifiers import LineKind
from .common import ZERO

logger = logging.getLogger(__name__)

# Max gap between item sum and grand total for a receipt to count as tax-inclusive
TAX_INCLUSIVE_TOLERANCE = Decimal(100)

EXPLICIT_TOTAL_KINDS: frozenset[LineKind] = frozenset({"grand_total", "total"})


@dataclass
class TotalsAccumulator:
    """
    Running summary amounts for one receipt.

    Tax, service charge and discount lines add up; the last subtotal line wins;
    the grand total is the largest total printed. A named payment method
    (e-wallet, bank, card) only stands in for the grand total until an
    explicit total line is seen.
    """

    subtotal: Decimal = ZERO
    tax: Decimal = ZERO
    service_charge: Decimal = ZERO
    discount: Decimal = ZERO
    grand_total: Decimal = ZERO
    seen_explicit_total: bool = False

    def add(self, kind: LineKind, amount: Decimal, *, payment_method: bool = False) -> None:
        value = abs(amount)
        if kind == "tax":
            self.tax += value
        elif kind == "service_charge":
            self.service_charge += value
        elif kind == "discount":
            self.discount += value
        elif kind == "subtotal":
            self.subtotal = value
        elif kind in EXPLICIT_TOTAL_KINDS:
            self.seen_explicit_total = True
            self.grand_total = max(self.grand_total, value)
        elif kind == "payment_or_change" and payment_method and not self.seen_explicit_total:
            self.grand_total = max(self.grand_total, value)


def reconcile_totals(
    items: list[ReceiptItem],
    totals: TotalsAccumulator,
    *,
    tolerance: Decimal = TAX_INCLUSIVE_TOLERANCE,
) -> ParsedReceipt:
    """
    Fill missing summary amounts and build the final receipt.

    Missing subtotal falls back to the item sum, missing grand total to
    ``subtotal + tax + service_charge - discount``. Items with a non-positive
    total are dropped.
    """
    kept = [item for item in items if item.total > ZERO]
    if len(kept) != len(items):
        logger.debug("Dropped %d items with non-positive totals", len(items) - len(kept))

    receipt = ParsedReceipt(
        items=kept,
        subtotal=totals.subtotal,
        tax=totals.tax,
        service_charge=totals.service_charge,
        discount=totals.discount,
        grand_total=totals.grand_total,
    )
    computed = receipt.computed_subtotal()
    if receipt.subtotal == ZERO:
        receipt.subtotal = computed
    if receipt.grand_total == ZERO:
        receipt.grand_total = receipt.expected_grand_total()

    receipt.tax_inclusive = (
        abs(computed - receipt.grand_total) < tolerance and receipt.tax == ZERO and receipt.service_charge == ZERO
    )
    return receipt
