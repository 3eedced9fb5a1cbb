import os
import sys
import logging
import argparse

import uvloop

# Add the current directory to Python path for imports
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from configuration import DEFAULT_CONFIG_FILE, LOG_FORMAT
from common.config_loader import ConfigurationError, load_config, resolve_targets

# Set up logging (only if not already configured)
if not logging.root.handlers:
    logging.basicConfig(level=logging.INFO, format=LOG_FORMAT)
logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_CONFIG_ERROR = 2


class TransferBenchmarkCLI:
    """CLI interface for the upload/download transfer benchmark."""

    def __init__(self):
        self.parser = self._create_parser()

    def _create_parser(self):
        """Create the main argument parser."""
        parser = argparse.ArgumentParser(
            description='Object storage and HTTP transfer benchmark',
            formatter_class=argparse.RawDescriptionHelpFormatter,
            epilog="""
Examples:
  # Run the upload and download tests described in ./config.json
  python cli.py
  python cli.py run

  # Use another config file with debug logging
  python cli.py run --config bench/config.json --verbose

  # Validate the config and verify every enabled bucket is reachable
  python cli.py check --config bench/config.json
            """
        )

        subparsers = parser.add_subparsers(dest='command', help='Available commands (default: run)')

        for name, help_text in (
            ('run', 'Run the configured upload and download tests'),
            ('check', 'Validate the config and verify storage access'),
        ):
            sub = subparsers.add_parser(name, help=help_text)
            sub.add_argument('--config', type=str, default=DEFAULT_CONFIG_FILE,
                             help=f'Path to the JSON config file (default: {DEFAULT_CONFIG_FILE})')
            sub.add_argument('--verbose', '-v', action='store_true',
                             help='Enable debug logging')

        return parser

    def _load(self, config_path):
        """Load the config and resolve its targets relative to the config file."""
        from benchmark import BenchmarkRunner

        config = load_config(config_path)
        base_dir = os.path.dirname(os.path.abspath(config_path))
        targets = resolve_targets(config, base_dir)
        return BenchmarkRunner(config, targets, base_dir=base_dir)

    async def run_benchmark(self, args):
        """Run the benchmark and report where the results went."""
        runner = self._load(args.config)
        summary = await runner.run()

        for name, path in summary.written_reports.items():
            logger.info(f"{name.capitalize()} results saved to: {path}")

        if not summary.ok:
            logger.error(f"Failed to save reports: {', '.join(summary.failed_reports)}")
            return EXIT_FAILURE

        logger.info("Benchmark completed successfully")
        return EXIT_OK

    async def run_check(self, args):
        """Validate the config and check storage access."""
        runner = self._load(args.config)
        logger.info("=== Storage Check ===")
        if await runner.check_storages():
            logger.info("All storages reachable")
            return EXIT_OK
        logger.error("One or more storages are not reachable")
        return EXIT_FAILURE

    def run(self, args=None):
        """Run the CLI with the given arguments."""
        if args is None:
            args = sys.argv[1:]

        parsed_args = self.parser.parse_args(args)

        if not parsed_args.command:
            # no subcommand: run with ./config.json
            parsed_args = self.parser.parse_args(['run'])

        if parsed_args.verbose:
            logging.getLogger().setLevel(logging.DEBUG)

        try:
            if parsed_args.command == 'run':
                return uvloop.run(self.run_benchmark(parsed_args))
            elif parsed_args.command == 'check':
                return uvloop.run(self.run_check(parsed_args))
            else:
                logger.error(f"Unknown command: {parsed_args.command}")
                return EXIT_FAILURE

        except ConfigurationError as e:
            logger.error(f"Configuration error: {e}")
            return EXIT_CONFIG_ERROR
        except KeyboardInterrupt:
            logger.info("Operation interrupted by user")
            return EXIT_FAILURE
        except Exception as e:
            logger.error(f"Unexpected error: {e}", exc_info=True)
            return EXIT_FAILURE


def main():
    """Main entry point."""
    cli = TransferBenchmarkCLI()
    sys.exit(cli.run())


if __name__ == '__main__':
    main()
