"""Math utilities: safe division and percentage normalization."""

import math
from typing import Dict, Mapping


def safe_div(a: float, b: float) -> float:
    """Return a/b or 0.0 if b is zero."""
    return a / b if b else 0.0


def normalize_percentages(scores: Mapping[str, float], decimals: int = 2) -> Dict[str, float]:
    """
    Scale non-negative scores to percentages rounded to `decimals` places that sum to exactly 100.

    Uses largest-remainder rounding: every value is within one rounding unit of
    round(score / total * 100, decimals). Returns {} when the total is not positive.
    Remainder ties go to the alphabetically first key so output is deterministic.
    A value can therefore differ from plain round(x, decimals) by up to 0.01 at two decimals.
    """
    total = sum(scores.values())
    if total <= 0:
        return {}
    scale = 10 ** decimals
    units = 100 * scale
    exact = {k: v / total * units for k, v in scores.items()}
    floors = {k: math.floor(x) for k, x in exact.items()}
    leftover = max(units - sum(floors.values()), 0)
    by_remainder = sorted(exact, key=lambda k: (-(exact[k] - floors[k]), k))
    for k in by_remainder[:leftover]:
        floors[k] += 1
    return {k: floors[k] / scale for k in sorted(scores)}
