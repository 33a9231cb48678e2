from __future__ import annotations

import math
from collections.abc import Iterable, Sequence


def average(values: Sequence[float]) -> float | None:
    if not values:
        return None
    return sum(values) / len(values)


def standard_deviation(values: Sequence[float]) -> float | None:
    """Population standard deviation (divides by N)."""
    mean = average(values)
    if mean is None:
        return None
    variance = sum((v - mean) ** 2 for v in values) / len(values)
    return math.sqrt(variance)


def to_percent(numerator: float, denominator: float) -> float | None:
    if denominator <= 0:
        return None
    return numerator / denominator * 100


def jaccard_similarity(a: Iterable[int], b: Iterable[int]) -> float | None:
    a, b = set(a), set(b)
    if not a and not b:
        return None
    union = len(a | b)
    if union == 0:
        return None
    return len(a & b) / union
