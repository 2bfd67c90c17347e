import math
from typing import Any


def coerce_value(raw: Any) -> float:
    """Selector output as a plottable number; None, NaN and junk count as zero."""
    if raw is None or isinstance(raw, bool):
        return 0.0
    try:
        value = float(raw)
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(value):
        return 0.0
    return value


def scale(value: float, domain_max: float, range_min: float, range_max: float) -> float:
    """
    Linear map of [0, domain_max] onto [range_min, range_max]. The range may
    be inverted (page y grows downward). A zero domain collapses every value
    onto range_min.
    """
    if not domain_max:
        return range_min
    return range_min + (coerce_value(value) / domain_max) * (range_max - range_min)


def category_position(index: int, count: int, range_min: float, range_max: float) -> float:
    if count <= 1:
        return (range_min + range_max) / 2
    return scale(index, count - 1, range_min, range_max)


def abbreviate(value: float) -> str:
    if value > 1000:
        return f"{value / 1000:.1f}k"
    if float(value).is_integer():
        return str(int(value))
    return f"{value:g}"
