#!/usr/bin/env python3
"""
Main entry point for the TA lab scheduler.
Provides options to run the scheduler in different modes:
- CLI mode: Run the scheduler from the command line
- API mode: Start a REST API server
"""
import sys
import argparse
import logging

from ta_scheduler.config import AppSettings


def parse_args():
    """Parse command-line arguments for the main entry point."""
    settings = AppSettings.from_env()

    parser = argparse.ArgumentParser(
        description='TA Lab Scheduler',
        formatter_class=argparse.ArgumentDefaultsHelpFormatter
    )

    parser.add_argument(
        '--mode',
        type=str,
        choices=['cli', 'api'],
        default='cli',
        help='Mode to run the scheduler in'
    )

    parser.add_argument(
        '--port',
        type=int,
        default=settings.port,
        help='Port to run the API server on (only in API mode)'
    )

    parser.add_argument(
        '--host',
        type=str,
        default=settings.host,
        help='Host to bind the API server to (only in API mode)'
    )

    # Parse known args and pass the rest to the appropriate mode
    return parser.parse_known_args()


def main():
    """Main entry point."""
    args, remaining = parse_args()

    if args.mode == 'cli':
        from ta_scheduler.cli import main as cli_main
        cli_main(remaining)

    elif args.mode == 'api':
        from ta_scheduler.api import app as api_app, settings

        logging.basicConfig(level=settings.log_level,
                            format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')
        print(f"Starting API server on {args.host}:{args.port}")
        api_app.run(host=args.host, port=args.port)

    else:
        print(f"Invalid mode: {args.mode}")
        sys.exit(1)


if __name__ == '__main__':
    main()
