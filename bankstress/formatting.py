"""
bankstress.formatting
=====================

Display helpers for hosts (CLI, notebooks).  Nothing here feeds back into the
engine: amounts are floored at zero *for display only*.
"""

from __future__ import annotations

import math

__all__ = ["format_currency"]


def _group_indian(digits: str) -> str:
    """12345678 -> 1,23,45,678 (lakh / crore grouping)."""
    if len(digits) <= 3:
        return digits
    head, tail = digits[:-3], digits[-3:]
    pairs = []
    while len(head) > 2:
        pairs.insert(0, head[-2:])
        head = head[:-2]
    if head:
        pairs.insert(0, head)
    return ",".join(pairs + [tail])


def format_currency(amount: float, symbol: str = "₹", indian_grouping: bool = True) -> str:
    """
    Zero‑decimal currency string, floored at zero.

    >>> format_currency(1234567.4)
    '₹12,34,567'
    >>> format_currency(-50)
    '₹0'
    >>> format_currency(1234567.5, symbol="$", indian_grouping=False)
    '$1,234,568'
    """
    value = int(math.floor(max(0.0, float(amount)) + 0.5))
    digits = _group_indian(str(value)) if indian_grouping else f"{value:,}"
    return f"{symbol}{digits}"
