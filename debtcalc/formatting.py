"""Rounding and display formatting for calculator results."""

import math
from typing import Optional

from .config import DEFAULT_FORMAT, FormatSettings


def round_number(num: float, decimals: int) -> Optional[float]:
    """Round to ``decimals`` places with halves going up (2.5 -> 3, -2.5 -> -2).

    Returns None for non-finite input.
    """
    if num is None or not math.isfinite(num):
        return None
    factor = 10 ** decimals
    return math.floor(num * factor + 0.5) / factor


def format_number(num: float, places: Optional[int] = None, comma: bool = True) -> str:
    """Fixed-decimal text with optional thousands separators.

    Halves round away from zero, so -1.005 formats like 1.005 with a sign.
    """
    if num is None or not math.isfinite(num):
        return ""
    if places is None:
        places = DEFAULT_FORMAT.number_decimals

    factor = 10 ** places
    magnitude = math.floor(abs(num) * factor + 0.5) / factor
    text = f"{magnitude:,.{places}f}" if comma else f"{magnitude:.{places}f}"

    if num < 0 and magnitude != 0:
        return "-" + text
    return text


def format_currency(
    value: float,
    decimals: Optional[int] = None,
    settings: FormatSettings = DEFAULT_FORMAT,
) -> str:
    """Currency text such as "$1,234"; the placeholder for non-positive amounts."""
    if value is None or not math.isfinite(value) or value <= 0:
        return settings.empty_placeholder
    if decimals is None:
        decimals = settings.currency_decimals
    return settings.currency_symbol + format_number(value, decimals)


def format_percent(value: float, decimals: int = 0, assume_fraction: bool = False) -> str:
    """Percent text; 0.125 -> "12.5%" with ``assume_fraction`` and one decimal."""
    if value is None or not math.isfinite(value):
        return ""
    pct = value * 100 if assume_fraction else value
    return f"{pct:.{decimals}f}%"
