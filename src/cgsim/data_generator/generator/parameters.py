"""
Parameter cache keyed by (parameter, discrete parent values) combinations.

Rows that share the same discrete parent assignment share the same drawn
structural constant, which is what makes each discrete configuration its own
parametric structural equation.
"""

from dataclasses import dataclass
from typing import Dict, Iterable, Tuple

import numpy as np

from .sem import Parameter, ParamType


@dataclass(frozen=True)
class Combination:
    """A parameter together with a sorted tuple of (parent name, category) pairs."""
    parameter: Parameter
    values: Tuple[Tuple[str, int], ...] = ()

    @classmethod
    def of(cls, parameter: Parameter, values: Iterable[Tuple[str, int]] = ()) -> "Combination":
        return cls(parameter, tuple(sorted((str(name), int(value)) for name, value in values)))


@dataclass(frozen=True)
class ParameterRanges:
    var_low: float = 1.0
    var_high: float = 3.0
    coef_low: float = 0.05
    coef_high: float = 1.5
    coef_symmetric: bool = True
    mean_low: float = -1.0
    mean_high: float = 1.0
    beta_low: float = 1.0
    beta_high: float = 3.0

    @classmethod
    def from_config(cls, config) -> "ParameterRanges":
        return cls(
            var_low=config.var_low, var_high=config.var_high,
            coef_low=config.coef_low, coef_high=config.coef_high,
            coef_symmetric=config.coef_symmetric,
            mean_low=config.mean_low, mean_high=config.mean_high,
            beta_low=config.beta_low, beta_high=config.beta_high,
        )


class ParameterCache:
    """Write-once map from combination to drawn value."""

    def __init__(self, ranges: ParameterRanges, rng: np.random.Generator):
        self.ranges = ranges
        self.rng = rng
        self._values: Dict[Combination, float] = {}

    def __len__(self):
        return len(self._values)

    def __contains__(self, combination: Combination) -> bool:
        return combination in self._values

    def get_param_value(self, combination: Combination) -> float:
        value = self._values.get(combination)
        if value is None:
            value = self._draw(combination.parameter)
            self._values[combination] = value
        return value

    def _draw(self, parameter: Parameter) -> float:
        r = self.ranges
        if parameter.type == ParamType.VAR:
            return float(self.rng.uniform(r.var_low, r.var_high))
        if parameter.type == ParamType.COEF:
            value = float(self.rng.uniform(r.coef_low, r.coef_high))
            if r.coef_symmetric and self.rng.uniform(0, 1) < 0.5:
                value = -value
            return value
        if parameter.type == ParamType.MEAN:
            return float(self.rng.uniform(r.mean_low, r.mean_high))
        return float(self.rng.uniform(r.beta_low, r.beta_high))

    def values_for(self, parameter: Parameter) -> Dict[Tuple[Tuple[str, int], ...], float]:
        """All cached values of one parameter, keyed by parent assignment."""
        return {c.values: v for c, v in self._values.items() if c.parameter == parameter}
