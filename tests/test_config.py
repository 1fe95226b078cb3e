import pytest
import yaml

from cgsim import ConditionalGaussianSimulation
from cgsim.data_generator.config_schema import (
    RandomGraphConfig,
    SimulationConfig,
    create_minimal_config,
)
from cgsim.data_generator.simple_config import load_config, save_config_template


def test_defaults():
    config = SimulationConfig()
    assert (config.var_low, config.var_high) == (1.0, 3.0)
    assert (config.coef_low, config.coef_high) == (0.05, 1.5)
    assert (config.mean_low, config.mean_high) == (-1.0, 1.0)
    assert (config.beta_low, config.beta_high) == (1.0, 3.0)
    assert (config.gamma_low, config.gamma_high) == (0.5, 1.5)
    assert config.coef_symmetric


def test_from_dict_accepts_camel_case_and_flat_graph_keys():
    config = SimulationConfig.from_dict({
        "percentDiscrete": 25,
        "sampleSize": 50,
        "differentGraphsPerRun": True,
        "saveLatentVariables": True,
        "numMeasures": 6,
        "graph": {"avgDegree": 1.5},
    })
    assert config.percent_discrete == 25
    assert config.sample_size == 50
    assert config.different_graphs
    assert config.save_latent_vars
    assert config.graph.num_measures == 6
    assert config.graph.avg_degree == 1.5


def test_unknown_keys_are_rejected():
    with pytest.raises(ValueError):
        SimulationConfig.from_dict({"percentDiscreet": 10})
    with pytest.raises(ValueError):
        SimulationConfig.from_dict({"graph": {"numNodes": 3}})


@pytest.mark.parametrize("kwargs", [
    {"percent_discrete": 120},
    {"min_categories": 1},
    {"min_categories": 4, "max_categories": 3},
    {"num_runs": 0},
    {"sample_size": 0},
    {"var_low": 3, "var_high": 1},
    {"gamma_low": 0.0},
    {"data_type": "ordinal"},
    {"kind_order_scope": "global"},
])
def test_invalid_values(kwargs):
    with pytest.raises(ValueError):
        SimulationConfig(**kwargs)


def test_invalid_graph_values():
    with pytest.raises(ValueError):
        RandomGraphConfig(num_measures=0)
    with pytest.raises(ValueError):
        RandomGraphConfig(num_latents=-1)


def test_yaml_round_trip(tmp_path):
    config = create_minimal_config()
    config.percent_discrete = 40
    path = tmp_path / "nested" / "config.yaml"
    config.to_yaml(path)
    loaded = SimulationConfig.from_yaml(path)
    assert loaded == config


def test_json_round_trip(tmp_path):
    config = SimulationConfig(seed=None, num_runs=3)
    path = tmp_path / "config.json"
    config.to_json(path)
    assert SimulationConfig.from_json(path) == config


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        SimulationConfig.from_yaml(tmp_path / "missing.yaml")
    assert load_config(str(tmp_path / "missing.yaml")) == SimulationConfig()


def test_load_config_and_template(tmp_path):
    path = tmp_path / "template.yaml"
    save_config_template(str(path))
    raw = yaml.safe_load(path.read_text())
    assert raw["percent_discrete"] == 50.0
    assert raw["graph"]["num_measures"] == 10
    assert load_config(str(path)) == SimulationConfig()


def test_parameters_match_simulation_keys():
    params = SimulationConfig().to_parameters()
    assert set(params) == set(ConditionalGaussianSimulation().get_parameters())
    assert params["percentDiscrete"] == 50.0
    assert params["numMeasures"] == 10
