"""
Statistical helpers shared by the factor scorers and the scanner.

All functions are total: empty input returns 0 (or an empty list) rather
than raising.
"""
import math
from typing import List, Sequence


def mean(values: Sequence[float]) -> float:
    if not values:
        return 0.0
    return sum(values) / len(values)


def median(values: Sequence[float]) -> float:
    if not values:
        return 0.0
    ordered = sorted(values)
    mid = len(ordered) // 2
    if len(ordered) % 2:
        return float(ordered[mid])
    return (ordered[mid - 1] + ordered[mid]) / 2


def std_dev(values: Sequence[float]) -> float:
    """Population standard deviation (0 for fewer than two values)."""
    if len(values) <= 1:
        return 0.0
    m = mean(values)
    return math.sqrt(sum((v - m) ** 2 for v in values) / len(values))


def percentile(values: Sequence[float], p: float) -> float:
    """Percentile with linear interpolation between closest ranks."""
    if not values:
        return 0.0
    ordered = sorted(values)
    index = (p / 100) * (len(ordered) - 1)
    lower = math.floor(index)
    upper = math.ceil(index)
    if lower == upper:
        return float(ordered[lower])
    return ordered[lower] + (ordered[upper] - ordered[lower]) * (index - lower)


def round_half_up(value: float) -> int:
    """Round .5 away from zero for positives (Python's round() is banker's)."""
    return int(math.floor(value + 0.5))


def clamp(value: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, value))


def compute_volatility(values: Sequence[float]) -> int:
    """
    Volatility score 1-10 from the coefficient of variation.

    1 = very consistent, 10 = extremely volatile. CV ~0.3 (points) lands
    around 4, CV ~1.0 (home runs) pins at 10.
    """
    if len(values) <= 1:
        return 1
    m = mean(values)
    if m == 0:
        return 1
    cv = std_dev(values) / m
    return int(clamp(round_half_up(cv * 12), 1, 10))


def moving_average(values: Sequence[float], window: int) -> List[float]:
    """Trailing mean over [max(0, i-window+1), i] for every index."""
    result = []
    for i in range(len(values)):
        start = max(0, i - window + 1)
        result.append(mean(values[start:i + 1]))
    return result


def ewma(values: Sequence[float], alpha: float) -> float:
    """
    Exponentially weighted moving average.

    Values MUST be oldest-first; the last element gets weight ``alpha``.
    """
    if not values:
        return 0.0
    acc = float(values[0])
    for v in values[1:]:
        acc = alpha * v + (1 - alpha) * acc
    return acc


def ewma_vs_line(values: Sequence[float], alpha: float, line: float) -> float:
    """Percent the EWMA sits above (+) or below (-) the line."""
    if line == 0:
        return 0.0
    return (ewma(values, alpha) - line) / line * 100


def fmt_num(value) -> str:
    """Render a number the way it reads on a prop card (24.5, 30, 8.25)."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return str(value)
    if float(value).is_integer():
        return str(int(value))
    return f"{value:g}"
