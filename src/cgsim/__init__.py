"""cgsim: conditional Gaussian simulation of mixed discrete/continuous data.

Main entrypoint: `ConditionalGaussianSimulation().create_data(SimulationConfig(...))`.
"""

from .data_generator.config_schema import RandomGraphConfig, SimulationConfig
from .data_generator.generator.graph import Variable, VariableKind
from .data_generator.generator.random_graph import RandomForwardGraph
from .data_generator.generator.simulation import (
    ConditionalGaussianSimulation,
    DataType,
    SimulatedDataset,
)

__all__ = [
    "ConditionalGaussianSimulation",
    "DataType",
    "RandomForwardGraph",
    "RandomGraphConfig",
    "SimulatedDataset",
    "SimulationConfig",
    "Variable",
    "VariableKind",
]
