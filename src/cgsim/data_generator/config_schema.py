"""
Configuration schema and validation for the conditional Gaussian simulation.

This module defines the complete configuration structure with validation,
defaults, and type checking for the graph generator and the simulation. Keys
are accepted in snake_case or under their camelCase parameter names.
"""

from typing import Dict, List, Optional, Union, Any
from dataclasses import dataclass, field, fields, asdict
from pathlib import Path
import yaml
import json


DATA_TYPES = ("continuous", "discrete", "mixed")
KIND_ORDER_SCOPES = ("simulation", "run")

# camelCase parameter name -> dataclass field
GRAPH_PARAMETER_KEYS: Dict[str, str] = {
    "numMeasures": "num_measures",
    "numLatents": "num_latents",
    "avgDegree": "avg_degree",
    "maxDegree": "max_degree",
    "maxIndegree": "max_indegree",
    "maxOutdegree": "max_outdegree",
    "connected": "connected",
}

SIMULATION_PARAMETER_KEYS: Dict[str, str] = {
    "dataType": "data_type",
    "minCategories": "min_categories",
    "maxCategories": "max_categories",
    "percentDiscrete": "percent_discrete",
    "numRuns": "num_runs",
    "differentGraphsPerRun": "different_graphs",
    "sampleSize": "sample_size",
    "varLow": "var_low",
    "varHigh": "var_high",
    "coefLow": "coef_low",
    "coefHigh": "coef_high",
    "coefSymmetric": "coef_symmetric",
    "meanLow": "mean_low",
    "meanHigh": "mean_high",
    "betaLow": "beta_low",
    "betaHigh": "beta_high",
    "gammaLow": "gamma_low",
    "gammaHigh": "gamma_high",
    "saveLatentVariables": "save_latent_vars",
    "randomizeColumnOrder": "randomize_columns",
    "seed": "seed",
    "kindOrderScope": "kind_order_scope",
}


def _normalize_keys(raw: Dict[str, Any], aliases: Dict[str, str], allowed: List[str], section: str) -> Dict[str, Any]:
    """Map camelCase aliases onto field names and reject unknown keys."""
    out = {}
    for key, value in raw.items():
        name = aliases.get(key, key)
        if name not in allowed:
            raise ValueError(f"Unknown {section} parameter: {key}")
        out[name] = value
    return out


@dataclass
class RandomGraphConfig:
    """Configuration for the random forward graph generator."""
    num_measures: int = 10
    num_latents: int = 0
    avg_degree: float = 2.0
    max_degree: int = 100
    max_indegree: int = 100
    max_outdegree: int = 100
    connected: bool = False

    def __post_init__(self):
        """Validate graph parameters."""
        if self.num_measures < 1:
            raise ValueError("num_measures must be at least 1")
        if self.num_latents < 0:
            raise ValueError("num_latents must be >= 0")
        if self.avg_degree < 0:
            raise ValueError("avg_degree must be >= 0")
        for name in ("max_degree", "max_indegree", "max_outdegree"):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must be >= 0")

    @classmethod
    def from_dict(cls, config_dict: Dict[str, Any]) -> 'RandomGraphConfig':
        names = [f.name for f in fields(cls)]
        return cls(**_normalize_keys(config_dict, GRAPH_PARAMETER_KEYS, names, "graph"))


@dataclass
class SimulationConfig:
    """Main configuration for a conditional Gaussian simulation."""
    data_type: str = "mixed"
    percent_discrete: float = 50.0
    min_categories: int = 3
    max_categories: int = 3
    num_runs: int = 1
    different_graphs: bool = False
    sample_size: int = 1000

    # Parameter ranges
    var_low: float = 1.0
    var_high: float = 3.0
    coef_low: float = 0.05
    coef_high: float = 1.5
    coef_symmetric: bool = True
    mean_low: float = -1.0
    mean_high: float = 1.0
    beta_low: float = 1.0
    beta_high: float = 3.0
    gamma_low: float = 0.5
    gamma_high: float = 1.5

    # Output
    save_latent_vars: bool = False
    randomize_columns: bool = False

    # Additional settings
    seed: Optional[int] = 42
    kind_order_scope: str = "simulation"  # simulation, run
    graph: RandomGraphConfig = field(default_factory=RandomGraphConfig)

    def __post_init__(self):
        """Validate the complete configuration."""
        if isinstance(self.graph, dict):
            self.graph = RandomGraphConfig.from_dict(self.graph)
        self.validate()

    def validate(self):
        """Validate the configuration; raises ValueError on any contradiction."""
        if self.data_type not in DATA_TYPES:
            raise ValueError(f"data_type must be one of {DATA_TYPES}, got {self.data_type!r}")
        if not (0.0 <= self.percent_discrete <= 100.0):
            raise ValueError("percent_discrete must be between 0 and 100")
        if self.data_type == "discrete" and self.percent_discrete != 100.0:
            raise ValueError("To simulate discrete data, 'percentDiscrete' must be set to 100.0")
        if self.data_type == "continuous" and self.percent_discrete != 0.0:
            raise ValueError("To simulate continuous data, 'percentDiscrete' must be set to 0.0")

        if self.min_categories < 2:
            raise ValueError("min_categories must be at least 2")
        if self.max_categories < self.min_categories:
            raise ValueError("max_categories must be >= min_categories")
        if self.num_runs < 1:
            raise ValueError("num_runs must be positive")
        if self.sample_size < 1:
            raise ValueError("sample_size must be positive")

        for low, high in [("var_low", "var_high"), ("coef_low", "coef_high"),
                          ("mean_low", "mean_high"), ("beta_low", "beta_high"),
                          ("gamma_low", "gamma_high")]:
            if getattr(self, low) > getattr(self, high):
                raise ValueError(f"{low} must be <= {high}")
        if self.gamma_low <= 0:
            raise ValueError("gamma_low must be positive")

        if self.kind_order_scope not in KIND_ORDER_SCOPES:
            raise ValueError(f"kind_order_scope must be one of {KIND_ORDER_SCOPES}")

    @classmethod
    def from_dict(cls, config_dict: Dict[str, Any]) -> 'SimulationConfig':
        """Create configuration from a flat or nested dictionary."""
        config_dict = dict(config_dict or {})
        graph_raw = dict(config_dict.pop("graph", None) or {})

        # Graph keys may also sit at the top level, as flat parameter maps do.
        graph_names = [f.name for f in fields(RandomGraphConfig)]
        for key in list(config_dict):
            if key in GRAPH_PARAMETER_KEYS or key in graph_names:
                graph_raw[key] = config_dict.pop(key)

        names = [f.name for f in fields(cls) if f.name != "graph"]
        kwargs = _normalize_keys(config_dict, SIMULATION_PARAMETER_KEYS, names, "simulation")
        kwargs["graph"] = RandomGraphConfig.from_dict(graph_raw)
        return cls(**kwargs)

    @classmethod
    def from_yaml(cls, yaml_path: Union[str, Path]) -> 'SimulationConfig':
        """Load configuration from YAML file."""
        yaml_path = Path(yaml_path)
        if not yaml_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {yaml_path}")

        with open(yaml_path, 'r') as f:
            config_dict = yaml.safe_load(f)

        return cls.from_dict(config_dict or {})

    @classmethod
    def from_json(cls, json_path: Union[str, Path]) -> 'SimulationConfig':
        """Load configuration from JSON file."""
        json_path = Path(json_path)
        if not json_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {json_path}")

        with open(json_path, 'r') as f:
            config_dict = json.load(f)

        return cls.from_dict(config_dict)

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to a nested dictionary."""
        return asdict(self)

    def to_parameters(self) -> Dict[str, Any]:
        """Flat camelCase parameter map, as listed by ``get_parameters``."""
        params = {key: getattr(self.graph, name) for key, name in GRAPH_PARAMETER_KEYS.items()}
        params.update({key: getattr(self, name) for key, name in SIMULATION_PARAMETER_KEYS.items()})
        return params

    def to_yaml(self, yaml_path: Union[str, Path]) -> None:
        """Save configuration to YAML file."""
        yaml_path = Path(yaml_path)
        yaml_path.parent.mkdir(parents=True, exist_ok=True)

        with open(yaml_path, 'w') as f:
            yaml.dump(self.to_dict(), f, default_flow_style=False, indent=2, sort_keys=False)

    def to_json(self, json_path: Union[str, Path]) -> None:
        """Save configuration to JSON file."""
        json_path = Path(json_path)
        json_path.parent.mkdir(parents=True, exist_ok=True)

        with open(json_path, 'w') as f:
            json.dump(self.to_dict(), f, indent=2)


def create_default_config() -> SimulationConfig:
    """Create a default configuration."""
    return SimulationConfig()


def create_minimal_config() -> SimulationConfig:
    """Create a minimal configuration for quick testing."""
    config = SimulationConfig()
    config.sample_size = 200
    config.graph.num_measures = 5
    return config
