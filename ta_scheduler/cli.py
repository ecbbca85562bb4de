"""
Command-line interface for the TA lab scheduler.
Runs the scheduling service over a directory of CSV files.
"""
import argparse
import logging
import json
import sys
from pathlib import Path

from .config import AppSettings
from .scheduler import ScheduleService


def parse_args(argv=None):
    """Parse command-line arguments."""
    settings = AppSettings.from_env()

    parser = argparse.ArgumentParser(
        description='TA Lab Scheduler CLI',
        formatter_class=argparse.ArgumentDefaultsHelpFormatter
    )

    parser.add_argument(
        '--input-dir',
        type=str,
        default='input',
        help='Directory containing Labs.csv, TAs.csv and optional Locked_Assignments.csv'
    )

    parser.add_argument(
        '--output-dir',
        type=str,
        default='output',
        help='Directory to save output CSV files'
    )

    parser.add_argument(
        '--seed',
        type=int,
        default=settings.default_seed,
        help='Global seed for reproducible schedules (random when omitted)'
    )

    parser.add_argument(
        '--log-level',
        type=str,
        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'],
        default=settings.log_level,
        help='Logging level'
    )

    parser.add_argument(
        '--json-output',
        action='store_true',
        help='Output results as JSON'
    )

    return parser.parse_args(argv)


def setup_logging(log_level):
    """Configure logging."""
    numeric_level = getattr(logging, log_level.upper(), None)
    if not isinstance(numeric_level, int):
        raise ValueError(f'Invalid log level: {log_level}')

    logging.basicConfig(
        level=numeric_level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )


def print_summary(results):
    print("\nScheduling Results:")

    if results['success']:
        summary = results['schedule_summary']
        print(f"  Seed: {results['seed']}")
        print(f"  Labs assigned: {summary['assigned_labs']}/{summary['total_labs']}")
        print(f"  Locked assignments: {summary['locked_assignments']}")
        print(f"  Unassigned labs: {summary['unassigned_labs']}")

        if results['violations']:
            print("\nViolations:")
            for violation in results['violations']:
                print(f"  {violation}")

        print("\nOutput files:")
        for name, path in results['output_files'].items():
            print(f"  {name}: {path}")
    else:
        print(f"  Error: {results['error']}")

    print("\nPerformance metrics:")
    for metric, value in results['metrics'].items():
        print(f"  {metric}: {value:.2f} seconds")


def main(argv=None):
    """Main entry point for the CLI."""
    args = parse_args(argv)

    setup_logging(args.log_level)

    input_dir = Path(args.input_dir)
    if not input_dir.exists():
        print(f"Error: Input directory does not exist: {input_dir}")
        sys.exit(1)

    output_dir = Path(args.output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    service = ScheduleService(
        input_dir=str(input_dir),
        output_dir=str(output_dir),
        seed=args.seed
    )
    results = service.run()

    if args.json_output:
        print(json.dumps(results, indent=2))
    else:
        print_summary(results)

    if not results['success']:
        sys.exit(1)


if __name__ == '__main__':
    main()
