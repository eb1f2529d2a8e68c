"""Input checks shared by the calculators and simulators."""

import math

from .errors import InvalidInput


def require_finite(field: str, value) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise InvalidInput(field, value, "must be a number") from None
    if not math.isfinite(number):
        raise InvalidInput(field, value, "must be finite")
    return number


def require_positive(field: str, value) -> float:
    number = require_finite(field, value)
    if number <= 0:
        raise InvalidInput(field, value, "must be greater than zero")
    return number


def require_non_negative(field: str, value) -> float:
    number = require_finite(field, value)
    if number < 0:
        raise InvalidInput(field, value, "must not be negative")
    return number
