"""
Topological sampler for conditional Gaussian mixed data.

Nodes are visited in causal order and each node's column is filled for every
row before any child reads it.

Discrete nodes draw from their conditional probability row, with continuous
parents resolved through the equal-frequency bucket of their ersatz proxy.

Continuous nodes are sampled in two passes. The first computes

    value = mean + sum_x [ x * coef + beta * sin(x / gamma_x) ]

over continuous parents x, with mean, coef and beta cached per discrete parent
assignment. The second adds Gaussian noise scaled by the empirical standard
deviation of the first pass (or by 1 for nodes without continuous parents).
"""

import logging
import math
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

import networkx as nx
import numpy as np
import pandas as pd

from .bayes import BayesIm
from .discretizer import BreakpointCache, bucket_column
from .ersatz import ErsatzMapping
from .graph import causal_ordering, get_variable, parents, variables
from .parameters import Combination, ParameterCache, ParameterRanges
from .sem import SemPm

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Moments:
    """Running sums of a continuous column's first pass."""
    total: float = 0.0
    total_sq: float = 0.0
    count: int = 0

    def add(self, value: float) -> "Moments":
        return Moments(self.total + value, self.total_sq + value * value, self.count + 1)

    @property
    def mean(self) -> float:
        return self.total / self.count if self.count else 0.0

    def std(self) -> float:
        """sqrt(E[x^2] - E[x]^2), clamped at 0 against rounding."""
        if not self.count:
            return 0.0
        var = self.total_sq / self.count - self.mean ** 2
        return math.sqrt(max(var, 0.0))


def draw_category(probabilities: np.ndarray, r: float) -> int:
    """
    Inverse-CDF categorical draw.

    Returns the smallest k whose cumulative probability reaches ``r``. If
    rounding keeps the cumulative sum below ``r``, the last category is used.
    """
    total = 0.0
    for k, p in enumerate(probabilities):
        total += p
        if total >= r:
            return k
    return len(probabilities) - 1


def noise_deviation(has_continuous_parents: bool, moments: Moments) -> float:
    """Base noise scale: the empirical std, or 1 for nodes without continuous parents."""
    if not has_continuous_parents:
        return 1.0
    return moments.std()


def gamma_scale(column: np.ndarray, u: float) -> float:
    """
    Period scale for the sine term of one (node, parent) pair.

    gamma = ((max - min) / 2) / (2 * pi * u). A constant parent column gives
    ``inf``, which removes the sine contribution.
    """
    half_range = (float(np.max(column)) - float(np.min(column))) / 2.0
    if half_range == 0.0:
        return math.inf
    return half_range / (2.0 * math.pi * u)


class TopologicalSampler:
    """
    Samples one data table from a working mixed graph.

    A sampler owns the parameter and breakpoint caches of exactly one data
    set; build a new sampler for every data set.
    """

    def __init__(
        self,
        graph: nx.DiGraph,
        bayes_im: BayesIm,
        sem_pm: SemPm,
        ersatz: ErsatzMapping,
        ranges: ParameterRanges,
        rng: np.random.Generator,
        sample_size: int,
        gamma_low: float = 0.5,
        gamma_high: float = 1.5,
    ):
        if sample_size < 1:
            raise ValueError("sample_size must be positive")
        self.graph = graph
        self.bayes_im = bayes_im
        self.sem_pm = sem_pm
        self.ersatz = ersatz
        self.rng = rng
        self.sample_size = sample_size
        self.gamma_low = gamma_low
        self.gamma_high = gamma_high

        self.parameter_cache = ParameterCache(ranges, rng)
        self.breakpoints = BreakpointCache()
        self.gammas: Dict[Tuple[str, str], float] = {}
        self.completion_order: List[str] = []

        self._columns: Dict[str, np.ndarray] = {}
        for var in variables(graph):
            dtype = np.int64 if var.is_discrete else np.float64
            self._columns[var.name] = np.zeros(sample_size, dtype=dtype)
        self._complete = set()

    def column(self, name: str) -> np.ndarray:
        """A finished column; reading an unfinished one is a construction bug."""
        if name not in self._columns:
            raise KeyError(f"Node {name!r} is not in the working graph")
        if name not in self._complete:
            raise RuntimeError(f"Column {name!r} read before it was fully sampled")
        return self._columns[name]

    def run(self) -> pd.DataFrame:
        """Sample every node in causal order and return the full table."""
        for name in causal_ordering(self.graph):
            var = get_variable(self.graph, name)
            if var.is_discrete:
                self._columns[name] = self._sample_discrete(name)
            else:
                values, moments = self._sample_continuous(name)
                self._columns[name] = self._add_noise(name, values, moments)
            self._complete.add(name)
            self.completion_order.append(name)

        return pd.DataFrame({name: self._columns[name] for name in self.graph.nodes})

    def _discrete_parents(self, name: str) -> List[str]:
        return [p for p in parents(self.graph, name) if get_variable(self.graph, p).is_discrete]

    def _continuous_parents(self, name: str) -> List[str]:
        return [p for p in parents(self.graph, name) if get_variable(self.graph, p).is_continuous]

    def _bayes_parent_values(self, node_index: int) -> List[np.ndarray]:
        """Category codes of each CPT parent for every row."""
        out = []
        for p in self.bayes_im.get_parents(node_index):
            parent = self.bayes_im.variables[p]
            original = self.ersatz.original_of(parent.name)
            if original is not None:
                values = self.column(original)
                edges = self.breakpoints.get_breakpoints(original, values, parent.num_categories)
                out.append(bucket_column(values, edges))
            else:
                out.append(self.column(parent.name))
        return out

    def _sample_discrete(self, name: str) -> np.ndarray:
        node_index = self.bayes_im.node_index(name)
        parent_values = self._bayes_parent_values(node_index)

        out = np.zeros(self.sample_size, dtype=np.int64)
        for i in range(self.sample_size):
            values = [int(col[i]) for col in parent_values]
            row = self.bayes_im.get_row_index(node_index, values)
            r = self.rng.random()
            out[i] = draw_category(self.bayes_im.get_probabilities(node_index, row), r)
        return out

    def _gamma(self, child: str, parent: str) -> float:
        key = (child, parent)
        if key not in self.gammas:
            u = float(self.rng.uniform(self.gamma_low, self.gamma_high))
            self.gammas[key] = gamma_scale(self.column(parent), u)
        return self.gammas[key]

    def _row_assignment(self, discrete_parents: List[str], i: int) -> List[Tuple[str, int]]:
        return [(d, int(self.column(d)[i])) for d in discrete_parents]

    def _sample_continuous(self, name: str) -> Tuple[np.ndarray, Moments]:
        """First pass: structural value per row, plus the accumulated moments."""
        discrete_parents = self._discrete_parents(name)
        continuous_parents = self._continuous_parents(name)
        gammas = {x: self._gamma(name, x) for x in continuous_parents}
        parent_columns = {x: self.column(x) for x in continuous_parents}

        mean_param = self.sem_pm.get_mean_parameter(name)
        coef_params = {x: self.sem_pm.get_coef_parameter(x, name) for x in continuous_parents}
        beta_params = {x: self.sem_pm.get_beta_parameter(x, name) for x in continuous_parents}

        values = np.zeros(self.sample_size, dtype=np.float64)
        moments = Moments()
        for i in range(self.sample_size):
            assignment = self._row_assignment(discrete_parents, i)
            value = 0.0
            for x in continuous_parents:
                parent_value = float(parent_columns[x][i])
                coef = self.parameter_cache.get_param_value(Combination.of(coef_params[x], assignment))
                beta = self.parameter_cache.get_param_value(Combination.of(beta_params[x], assignment))
                value += parent_value * coef + beta * math.sin(parent_value / gammas[x])
            value += self.parameter_cache.get_param_value(Combination.of(mean_param, assignment))
            values[i] = value
            moments = moments.add(value)
        return values, moments

    def _add_noise(self, name: str, values: np.ndarray, moments: Moments) -> np.ndarray:
        """Second pass: add deviation * N(0, s) with s cached per discrete parent assignment."""
        discrete_parents = self._discrete_parents(name)
        deviation = noise_deviation(bool(self._continuous_parents(name)), moments)
        var_param = self.sem_pm.get_variance_parameter(name)

        out = values.copy()
        for i in range(self.sample_size):
            assignment = self._row_assignment(discrete_parents, i)
            scale = self.parameter_cache.get_param_value(Combination.of(var_param, assignment))
            out[i] += deviation * self.rng.normal(0.0, scale)
        logger.debug(f"Sampled {name}: deviation={deviation:.4f}")
        return out
