# -*- coding: utf-8 -*-
"""
Small parsing helpers for form values.
"""

import re
from datetime import datetime
from typing import Any

_DATE_ONLY = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_DIGITS = re.compile(r"^\d+$")

_FALLBACK_FORMATS = (
    "%d/%m/%Y",
    "%Y/%m/%d",
    "%B %d, %Y",
    "%d %B %Y",
)


def date_only(value: str | None) -> str:
    """
    Normalize a date or timestamp to ``YYYY-MM-DD``.

    Args:
        value: ``YYYY-MM-DD``, an ISO timestamp, or another date string

    Returns:
        str: The date part, or ``""`` when nothing parseable was given
    """
    if not value:
        return ""
    value = value.strip()
    if _DATE_ONLY.match(value):
        return value
    if "T" in value or " " in value:
        head = value[:10]
        if _DATE_ONLY.match(head):
            return head

    try:
        return datetime.fromisoformat(value).strftime("%Y-%m-%d")
    except ValueError:
        pass

    for fmt in _FALLBACK_FORMATS:
        try:
            return datetime.strptime(value, fmt).strftime("%Y-%m-%d")
        except ValueError:
            continue
    return ""


def to_pos_int(value: Any) -> int:
    """Positive integer from a route parameter, ``0`` when invalid."""
    if isinstance(value, (list, tuple)):
        value = value[0] if value else None
    if isinstance(value, bool) or value is None:
        return 0
    if isinstance(value, int):
        return value if value > 0 else 0
    if not _DIGITS.match(str(value)):
        return 0
    return int(value)
