"""
Main entry point for conditional Gaussian dataset generation.
Generate mixed discrete/continuous datasets from a config file.
"""

import argparse
import logging
import sys

from .generator.dataset_generator import generate_all_datasets
from .generator.simulation import ConditionalGaussianSimulation
from .simple_config import load_config, save_config_template

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Generate synthetic mixed datasets under the conditional Gaussian model",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  cgsim-generate                                      # Use default config
  cgsim-generate --config configs/simulation.yaml     # Use specific config
  cgsim-generate --num-runs 5 --seed 7 --mlflow       # Override and track runs

  cgsim-generate --save-config my_config.yaml         # Create config template
        """
    )

    parser.add_argument('--config', '-c', type=str, default='configs/simulation.yaml',
                        help='Path to configuration file (default: configs/simulation.yaml)')
    parser.add_argument('--output-dir', '-o', type=str, default='cg_datasets',
                        help='Directory for generated datasets (default: cg_datasets)')
    parser.add_argument('--seed', type=int, help='Override the configured random seed')
    parser.add_argument('--num-runs', type=int, help='Override the configured number of datasets')
    parser.add_argument('--train-ratio', type=float,
                        help='Also write train/test splits with this training fraction')
    parser.add_argument('--save-config', type=str,
                        help='Save a configuration template and exit')
    parser.add_argument('--mlflow', action='store_true',
                        help='Log each generated dataset as an MLflow run')
    parser.add_argument('--experiment', type=str, default='conditional_gaussian_simulation',
                        help='MLflow experiment name')
    parser.add_argument('--verbose', action='store_true',
                        help='Enable verbose output')
    return parser


def main(argv=None):
    """Main entry point for the data generator."""
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format='%(asctime)s - %(levelname)s - %(message)s'
    )

    if args.save_config:
        save_config_template(args.save_config)
        logger.info(f"Configuration template saved to: {args.save_config}")
        return 0

    try:
        config = load_config(args.config)
        if args.seed is not None:
            config.seed = args.seed
        if args.num_runs is not None:
            config.num_runs = args.num_runs
        config.validate()

        logger.info(f"Number of datasets: {config.num_runs}")
        logger.info(f"Output directory: {args.output_dir}")
        logger.info(f"Seed: {config.seed}")
        logger.info(f"Data type: {config.data_type} ({config.percent_discrete}% discrete)")

        simulation = ConditionalGaussianSimulation()
        generate_all_datasets(config, args.output_dir, train_ratio=args.train_ratio, simulation=simulation)

        if args.mlflow:
            from .tracking import log_simulation
            log_simulation(simulation, config, args.experiment)

        logger.info("Generation complete!")
        return 0

    except Exception as e:
        logger.error(f"Error during generation: {e}", exc_info=args.verbose)
        return 1


if __name__ == "__main__":
    sys.exit(main())
