"""Core domain models for the splitbill project.

This module provides the data models used throughout the project:
- ParsedReceipt, ReceiptItem: parsed receipt models
- ParticipantAssignment, ItemShare: who consumed what
- SplitResult, calculate_split: pro-rata split calculation

Usage:
    from splitbill.domain import ParsedReceipt, calculate_split
"""

from splitbill.domain.receipt import (
    UNKNOWN_ITEM_NAME,
    ParsedReceipt,
    ReceiptFormatError,
    ReceiptItem,
)
from splitbill.domain.split import (
    ItemShare,
    ParticipantAssignment,
    SplitItemAmount,
    SplitResult,
    SplitResultParticipant,
    build_equal_share_assignments,
    calculate_split,
    parse_assignments,
)

__all__ = [
    "ParsedReceipt",
    "ReceiptItem",
    "ReceiptFormatError",
    "UNKNOWN_ITEM_NAME",
    "ItemShare",
    "ParticipantAssignment",
    "SplitItemAmount",
    "SplitResult",
    "SplitResultParticipant",
    "build_equal_share_assignments",
    "calculate_split",
    "parse_assignments",
]
