"""Numeric coercion and summary statistics for layer properties."""

import math
from dataclasses import dataclass
from decimal import Context, Decimal, ROUND_HALF_UP
from typing import Any, Iterable, Optional, Sequence

# Wide enough to quantize any finite float
_WIDE = Context(prec=400)


@dataclass(frozen=True)
class StatsResult:
    """Min, max and rounded mean of a numeric sample."""

    min: float
    max: float
    avg: float


def to_number(value: Any) -> Optional[float]:
    """
    Coerce a raw property value to a finite float.

    Numbers pass through, strings are parsed as decimals. Anything else
    (None, booleans, blanks, NaN/inf, containers) yields None.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        try:
            number = float(value)
        except OverflowError:
            # Integers beyond float range read as infinite
            return None
    elif isinstance(value, str):
        text = value.strip()
        # float() accepts digit separators, GeoJSON producers never emit them
        if not text or "_" in text:
            return None
        try:
            number = float(text)
        except ValueError:
            return None
    else:
        return None
    return number if math.isfinite(number) else None


def numeric_values(values: Iterable[Any]) -> list[float]:
    """Keep the values that coerce to finite numbers, in order."""
    numbers = []
    for value in values:
        number = to_number(value)
        if number is not None:
            numbers.append(number)
    return numbers


def round_half_up(value: float, digits: int = 0) -> float:
    """Round on the shortest decimal representation, ties away from zero."""
    quantum = Decimal(1).scaleb(-digits)
    exact = Decimal(repr(float(value)))
    return float(exact.quantize(quantum, rounding=ROUND_HALF_UP, context=_WIDE))


def clamp(value: float, low: float = 0.0, high: float = 100.0) -> float:
    return max(low, min(high, value))


def stats(values: Sequence[float]) -> Optional[StatsResult]:
    """
    Summarise a numeric sample.

    Returns None for an empty sample. The mean is rounded to 2 decimals and
    kept within [min, max] so rounding never pushes it past an extreme.
    """
    if not values:
        return None
    low = min(values)
    high = max(values)
    mean = sum(values) / len(values)
    if not math.isfinite(mean):
        # Sum overflowed; scale first
        mean = sum(value / len(values) for value in values)
    avg = round_half_up(mean, 2)
    return StatsResult(min=low, max=high, avg=clamp(avg, low, high))


def format_number(value: float) -> str:
    """
    Render a number the way the dashboard does: 80, 80.5, 0.35, 1e-7, 1e+21.

    Shortest round-trip digits, positional between 1e-7 and 1e21 and
    exponent form outside that range.
    """
    try:
        number = float(value)
    except OverflowError:
        number = math.copysign(math.inf, value)
    if math.isnan(number):
        return "NaN"
    if math.isinf(number):
        return "Infinity" if number > 0 else "-Infinity"
    if number == 0:
        return "0"
    sign, digit_tuple, exponent = Decimal(repr(number)).normalize(_WIDE).as_tuple()
    digits = "".join(str(d) for d in digit_tuple)
    size = len(digits)
    # number == 0.<digits> * 10 ** point
    point = exponent + size
    if size <= point <= 21:
        text = digits + "0" * (point - size)
    elif 0 < point <= 21:
        text = f"{digits[:point]}.{digits[point:]}"
    elif -6 < point <= 0:
        text = "0." + "0" * -point + digits
    else:
        mantissa = digits[0] + (f".{digits[1:]}" if size > 1 else "")
        text = f"{mantissa}e{'+' if point > 0 else '-'}{abs(point - 1)}"
    return f"-{text}" if sign else text
