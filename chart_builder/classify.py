"""Classification helpers: Jenks natural breaks, quantiles."""
from __future__ import annotations

from bisect import bisect_left
from typing import List, Optional, Sequence, Tuple

import numpy as np


def _jenks_matrices(data: Sequence[float], n_classes: int) -> Tuple[List[List[int]], List[List[float]]]:
    n = len(data)
    lower_class_limits = [[0] * (n_classes + 1) for _ in range(n + 1)]
    variance_combinations = [[0.0] * (n_classes + 1) for _ in range(n + 1)]

    for i in range(1, n_classes + 1):
        lower_class_limits[1][i] = 1
        variance_combinations[1][i] = 0.0
        for j in range(2, n + 1):
            variance_combinations[j][i] = float("inf")

    for l in range(2, n + 1):
        s1 = 0.0  # running sum
        s2 = 0.0  # running sum of squares
        w = 0
        variance = 0.0
        for m in range(1, l + 1):
            lower_class_limit = l - m + 1
            val = data[lower_class_limit - 1]
            w += 1
            s1 += val
            s2 += val * val
            # sum of squared deviations, not divided by w
            variance = s2 - (s1 * s1) / w
            i4 = lower_class_limit - 1
            if i4 != 0:
                for j in range(2, n_classes + 1):
                    if variance_combinations[l][j] >= variance + variance_combinations[i4][j - 1]:
                        lower_class_limits[l][j] = lower_class_limit
                        variance_combinations[l][j] = variance + variance_combinations[i4][j - 1]
        lower_class_limits[l][1] = 1
        variance_combinations[l][1] = variance

    return lower_class_limits, variance_combinations


def jenks_breaks(values: Sequence[float], class_count: int) -> List[float]:
    """Jenks natural breaks: ascending upper bound of each class.

    class_count is clamped to the number of distinct values, so the result
    has min(class_count, distinct) entries. Empty input gives [].
    """
    if class_count < 1:
        raise ValueError(f"class_count must be >= 1, got {class_count}")
    data = sorted(float(v) for v in values)
    if not data:
        return []
    k = min(class_count, len(set(data)))

    lower_class_limits, _ = _jenks_matrices(data, k)

    n = len(data)
    kclass = [0.0] * (k + 1)
    kclass[k] = data[n - 1]
    kclass[0] = data[0]
    count_num = k
    row = n
    while count_num > 1:
        elt = lower_class_limits[row][count_num] - 2
        kclass[count_num - 1] = data[elt]
        row = lower_class_limits[row][count_num] - 1
        count_num -= 1

    return kclass[1:]


def classify(value: float, breaks: Sequence[float]) -> int:
    """0-based class of `value` given ascending upper bounds (values above the last go in the last class)."""
    if not breaks:
        raise ValueError("breaks must not be empty")
    return min(bisect_left(breaks, value), len(breaks) - 1)


def quantile(values: Sequence[float], q: float) -> Optional[float]:
    if not 0.0 <= q <= 1.0:
        raise ValueError(f"q must be in [0, 1], got {q}")
    arr = np.asarray(list(values), dtype=float)
    if arr.size == 0:
        return None
    return float(np.quantile(arr, q))


def median(values: Sequence[float]) -> Optional[float]:
    return quantile(values, 0.5)
