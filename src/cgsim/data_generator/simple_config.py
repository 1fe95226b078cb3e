"""
Simple configuration loading for dataset generation.
Load YAML into a SimulationConfig, or fall back to defaults.
"""

import logging
from pathlib import Path
from typing import Optional

import yaml

from .config_schema import SimulationConfig

logger = logging.getLogger(__name__)


def load_config(config_path: Optional[str] = None) -> SimulationConfig:
    """
    Load configuration from YAML file or use defaults.

    Args:
        config_path: Path to YAML config file

    Returns:
        Validated simulation configuration
    """
    if config_path and Path(config_path).exists():
        with open(config_path, 'r') as f:
            raw_config = yaml.safe_load(f)
        return SimulationConfig.from_dict(raw_config or {})

    if config_path:
        logger.warning(f"Config file {config_path} not found, using defaults")
    return SimulationConfig()


def save_config_template(output_path: str, config: Optional[SimulationConfig] = None) -> None:
    """
    Save a configuration template to file.

    Args:
        output_path: Path to save config
        config: Configuration to save (uses default if None)
    """
    if config is None:
        config = load_config()

    Path(output_path).parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, 'w') as f:
        yaml.dump(config.to_dict(), f, default_flow_style=False, indent=2, sort_keys=False)
