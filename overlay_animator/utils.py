from __future__ import annotations

import math
import re
import uuid


def clamp(value: float, min_value: float, max_value: float) -> float:
    return max(min_value, min(value, max_value))


def round_half_up(value: float, ndigits: int = 0) -> float:
    """Round to nearest with ties going up, like JavaScript's Math.round.

    Python's round() uses banker's rounding, which would make 0.5 -> 0 and
    shift resize/rotation results by one unit on exact ties.
    """
    factor = 10 ** ndigits
    rounded = math.floor(value * factor + 0.5) / factor
    if ndigits == 0:
        return float(int(rounded))
    return rounded


def new_id() -> str:
    return uuid.uuid4().hex


def format_number(value: float) -> str:
    """Shortest text form of a number: 10.0 -> "10", 2.5 -> "2.5"."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return repr(value) if isinstance(value, float) else str(value)


def parse_dimension(text: str, previous: int, minimum: int = 1, maximum: int = 99999) -> int:
    """Parse a typed dimension, keeping the previous value on bad input.

    Non-digit characters are dropped first, so "12px" reads as 12.
    """
    digits = re.sub(r"[^0-9]", "", text or "")
    if not digits:
        return previous
    parsed = int(digits)
    if parsed < minimum:
        return previous
    return int(clamp(parsed, minimum, maximum))
