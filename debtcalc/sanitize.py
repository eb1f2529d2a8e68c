"""Parsing of loosely formatted, user-entered numbers."""

import math
import re

_DIGITS = "0123456789"
_FIELD_NOISE = re.compile(r"[,$%\s]")


def sanitize_number(raw) -> float:
    """Reduce a raw entry to a number, dropping everything that is not numeric.

    Only digits, the first decimal point and a leading minus sign survive.
    Thousands separators are dropped rather than interpreted, so "1,500.50"
    reads as 1500.5 and "1.500,50" reads as 1.5005. Empty or sign-only
    entries give 0. Never raises and always returns a finite float.

    Examples:
        >>> sanitize_number("$12,345.67")
        12345.67
        >>> sanitize_number("-4.5%")
        -4.5
        >>> sanitize_number("1.2.3")
        1.23
    """
    if isinstance(raw, (int, float)) and not isinstance(raw, bool):
        return float(raw) if math.isfinite(raw) else 0.0

    text = "" if raw is None else str(raw)
    sign = "-" if text.startswith("-") else ""

    kept = []
    seen_point = False
    for char in text:
        if char in _DIGITS:
            kept.append(char)
        elif char == "." and not seen_point:
            kept.append(char)
            seen_point = True

    digits = "".join(kept)
    if not digits.strip("."):
        return 0.0

    number = float(sign + digits)
    # A long enough run of digits overflows to inf
    return number if math.isfinite(number) else 0.0


def parse_number(value) -> float:
    """Parse a form value, stripping currency symbols, commas, spaces and percent signs.

    Returns nan when the value cannot be read as a finite number.
    """
    if value is None:
        return math.nan
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return float(value)

    text = _FIELD_NOISE.sub("", str(value))
    if not text or "_" in text:
        return math.nan
    try:
        number = float(text)
    except ValueError:
        return math.nan
    return number if math.isfinite(number) else math.nan


def safe_number(value, fallback: float = 0.0) -> float:
    """Parsed value if it is a finite number, otherwise ``fallback``."""
    number = parse_number(value)
    return number if math.isfinite(number) else fallback
