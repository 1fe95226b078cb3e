"""
Equal-frequency discretization of continuous columns.
"""

from typing import Dict

import numpy as np


def equal_frequency_breakpoints(values: np.ndarray, num_categories: int) -> np.ndarray:
    """
    Bin edges splitting ``values`` into ``num_categories`` equally filled bins.

    Returns ``num_categories - 1`` non-decreasing edges.
    """
    if num_categories < 1:
        raise ValueError("num_categories must be positive")
    data = np.sort(np.asarray(values, dtype=float))
    n = len(data)
    if n == 0:
        raise ValueError("Cannot discretize an empty column")
    idx = [(n * (j + 1)) // num_categories for j in range(num_categories - 1)]
    return data[np.minimum(idx, n - 1)] if idx else np.empty(0)


def bucket(value: float, breakpoints: np.ndarray) -> int:
    """Smallest j with ``value < breakpoints[j]``; the last bucket if there is none."""
    for j, edge in enumerate(breakpoints):
        if value < edge:
            return j
    return len(breakpoints)


def bucket_column(values: np.ndarray, breakpoints: np.ndarray) -> np.ndarray:
    """Vectorised :func:`bucket` over a whole column."""
    return np.searchsorted(breakpoints, values, side="right").astype(np.int64)


class BreakpointCache:
    """Breakpoints per continuous column, computed on first use."""

    def __init__(self):
        self._breakpoints: Dict[str, np.ndarray] = {}

    def __contains__(self, column: str) -> bool:
        return column in self._breakpoints

    def get_breakpoints(self, column: str, values: np.ndarray, num_categories: int) -> np.ndarray:
        breakpoints = self._breakpoints.get(column)
        if breakpoints is None:
            breakpoints = equal_frequency_breakpoints(values, num_categories)
            self._breakpoints[column] = breakpoints
        return breakpoints
