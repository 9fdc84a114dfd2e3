from __future__ import annotations

import logging
import math
import re
from datetime import datetime, timezone
from typing import Any, Optional

logger = logging.getLogger(__name__)

_LEADING_INT = re.compile(r"(\d+)")
_STORAGE = re.compile(r"(\d+)\s*(GB|TB)", re.IGNORECASE)


def parse_leading_int(text: Any) -> Optional[int]:
    """
    First run of digits in a spec string:
      "16GB" => 16, "27\"" => 27, "144Hz" => 144, "DDR5 32 GB" => 5
    Returns None if there are no digits.
    """
    if text is None:
        return None
    m = _LEADING_INT.search(str(text))
    if not m:
        return None
    return int(m.group(1))


def parse_storage_gb(text: Any) -> Optional[int]:
    """
    Storage size normalized to GB:
      "512GB" => 512, "1TB" => 1024, "2 tb NVMe" => 2048
    A number without a GB/TB unit is not treated as storage (None).
    """
    if text is None:
        return None
    m = _STORAGE.search(str(text))
    if not m:
        return None
    value = int(m.group(1))
    if m.group(2).upper() == "TB":
        value *= 1024
    return value


def parse_price(value: Any) -> float:
    """
    Stored prices are numbers, but older exports carry strings like "1,299".
    Anything unreadable counts as 0 so it sorts first and fails positive-price rules.
    NaN and infinities count as unreadable.
    """
    if isinstance(value, bool) or value is None:
        return 0.0
    text = value if isinstance(value, (int, float)) else str(value).replace(",", "").strip()
    try:
        price = float(text)
    except (ValueError, OverflowError):
        return 0.0
    return price if math.isfinite(price) else 0.0


def parse_datetime(value: Any) -> Optional[datetime]:
    """
    ISO 8601 => aware datetime. Naive values are taken as UTC.
    Unreadable values are treated as "not set".
    """
    if not value or not isinstance(value, str):
        return None
    try:
        dt = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        logger.warning("Ignoring unreadable date: %r", value)
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt
