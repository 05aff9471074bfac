"""Format parsed receipts and split results as plain text."""

from decimal import Decimal

from splitbill.domain.receipt import ZERO, ParsedReceipt
from splitbill.domain.split import SplitResult


def format_amount(value: Decimal) -> str:
    """Render money with thousands grouping; cents only when present."""
    if value == value.to_integral_value():
        return f"{value:,.0f}"
    return f"{value:,.2f}"


def _format_rows_aligned(
    rows: list[tuple[str, str, str | None]],
    indent: str = "  ",
) -> list[str]:
    """
    Format label/amount rows with aligned amounts and comments.

    Args:
        rows: List of (label, amount, comment_or_none) tuples
        indent: Indentation prefix for each line

    Returns:
        List of formatted lines with right-aligned amounts
    """
    if not rows:
        return []

    max_label_len = max(len(label) for label, _, _ in rows)
    max_amount_len = max(len(amount) for _, amount, _ in rows)

    lines = []
    for label, amount, comment in rows:
        base = f"{indent}{label.ljust(max_label_len)}  {amount.rjust(max_amount_len)}"
        if comment:
            lines.append(f"{base}  # {comment}")
        else:
            lines.append(base)
    return lines


def format_parsed_receipt(receipt: ParsedReceipt) -> str:
    """
    Format a parsed receipt for review in a terminal.

    Items are listed with quantity and unit price, followed by the summary
    block. A mismatch between the printed grand total and the summary
    relation is flagged so the user knows to check the numbers.
    """
    lines = [f"Items ({len(receipt.items)}):"]
    item_rows: list[tuple[str, str, str | None]] = []
    for item in receipt.items:
        comment = f"{item.qty} x {format_amount(item.unit_price)}" if item.qty > 1 else None
        item_rows.append((item.name, format_amount(item.total), comment))
    lines.extend(_format_rows_aligned(item_rows) or ["  (none)"])
    lines.append("")

    summary_rows: list[tuple[str, str, str | None]] = [("Subtotal", format_amount(receipt.subtotal), None)]
    if receipt.tax:
        summary_rows.append(("Tax", format_amount(receipt.tax), None))
    elif receipt.tax_inclusive:
        summary_rows.append(("Tax", "incl.", "tax included in prices"))
    if receipt.service_charge:
        summary_rows.append(("Service charge", format_amount(receipt.service_charge), None))
    if receipt.discount:
        summary_rows.append(("Discount", f"-{format_amount(receipt.discount)}", None))

    expected = receipt.expected_grand_total()
    mismatch = None
    if not receipt.tax_inclusive and receipt.grand_total != expected:
        mismatch = f"CHECK: summary adds up to {format_amount(expected)}"
    summary_rows.append(("Grand total", format_amount(receipt.grand_total), mismatch))
    lines.extend(_format_rows_aligned(summary_rows))
    return "\n".join(lines)


def format_split_result(result: SplitResult) -> str:
    """Format per-participant split totals."""
    lines: list[str] = []
    for participant in result.participants:
        lines.append(f"{participant.name}: {format_amount(participant.total)}")
        rows: list[tuple[str, str, str | None]] = [
            (item.name, format_amount(item.amount), None) for item in participant.items
        ]
        if participant.tax_share:
            rows.append(("Tax share", format_amount(participant.tax_share), None))
        if participant.service_share:
            rows.append(("Service share", format_amount(participant.service_share), None))
        if participant.discount_share:
            rows.append(("Discount share", f"-{format_amount(participant.discount_share)}", None))
        lines.extend(_format_rows_aligned(rows))

    if result.unassigned_total > ZERO:
        lines.append(f"Unassigned: {format_amount(result.unassigned_total)}")
    return "\n".join(lines)
