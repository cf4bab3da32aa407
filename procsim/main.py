"""Main entry point for running procsim scenarios."""

import argparse
import sys
from pathlib import Path

import yaml

from procsim.utils.logger import setup_logger
from procsim.workload.scenario import Scenario
from configs import DEFAULT_CONFIG_PATH, load_config, merge_configs


def parse_args(argv=None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="procsim: run a producer/consumer discrete-event scenario"
    )
    parser.add_argument(
        "--config",
        type=str,
        default=str(DEFAULT_CONFIG_PATH),
        help="Path to configuration file",
    )
    parser.add_argument(
        "--override",
        type=str,
        default=None,
        help="Optional configuration file merged on top of --config",
    )
    parser.add_argument(
        "--output-dir",
        type=str,
        default="results",
        help="Directory to save results",
    )
    parser.add_argument(
        "--blocking",
        action="store_true",
        help="Producers wait until their item is consumed",
    )
    parser.add_argument(
        "--until",
        type=float,
        default=None,
        help="Stop dispatching events due after this virtual time",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )
    return parser.parse_args(argv)


def main(argv=None):
    """Main function."""
    args = parse_args(argv)

    logger = setup_logger("procsim", level="INFO")

    try:
        config = load_config(args.config)
        if args.override:
            config = merge_configs(config, load_config(args.override))

        cli_overrides = {}
        if args.blocking:
            cli_overrides['scenario'] = {'blocking': True}
        if args.until is not None:
            cli_overrides['simulation'] = {'until': args.until}
        config = merge_configs(config, cli_overrides)

        log_level = "DEBUG" if args.verbose else (config.get('logging') or {}).get('level', "INFO")
        logger = setup_logger("procsim", level=log_level)
        logger.info(f"Loaded configuration from {args.config}")

        scenario = Scenario(config)
        results = scenario.run()

        logger.info("=== Simulation Results ===")
        logger.info(f"Final time: {results['final_time']}")
        logger.info(f"Wall-clock duration: {results['duration']:.4f}s")
        logger.info(f"Completed events: {results['completed_events']}/{results['total_events']}")
        logger.info(f"Unclaimed deposits: {results['put_requests']}")
        logger.info(f"Waiting consumers: {results['get_requests']}")

        output_dir = Path(args.output_dir)
        output_dir.mkdir(parents=True, exist_ok=True)

        results_file = output_dir / "results.yaml"
        with open(results_file, 'w') as f:
            yaml.safe_dump(results, f, default_flow_style=False, sort_keys=False)
        logger.info(f"Results saved to {results_file}")
        return 0

    except Exception as e:
        logger.error(f"Simulation failed: {str(e)}", exc_info=True)
        return 1


if __name__ == "__main__":
    sys.exit(main())
