"""Month names and issue-month helpers."""

from __future__ import annotations

import re
from typing import Optional

MONTH_NAMES = (
    "",
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
)

_MONTH_PATTERN = re.compile(r"\b(" + "|".join(MONTH_NAMES[1:]) + r")\b", re.IGNORECASE)


def month_name(month: int) -> str:
    """English name for a month number (1-12)."""
    if not 1 <= month <= 12:
        raise ValueError(f"month must be 1-12: {month}")
    return MONTH_NAMES[month]


def next_month(month: int) -> int:
    """Month number following `month`; December rolls to January."""
    month_name(month)
    return 1 if month == 12 else month + 1


def mentions_month(text: str, month: int) -> bool:
    """True if `text` contains the month's name as a whole word."""
    return re.search(rf"\b{month_name(month)}\b", text or "", re.IGNORECASE) is not None


def parse_issue_month(issue_name: str) -> Optional[int]:
    """
    Find the month in an issue name such as "April 2025".

    Returns:
        Month number, or None if no month name is present
    """
    match = _MONTH_PATTERN.search(issue_name or "")
    if not match:
        return None
    return MONTH_NAMES.index(match.group(1).capitalize())
