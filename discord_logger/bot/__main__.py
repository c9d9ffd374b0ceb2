"""CLI entry point for discord_logger.bot.

Usage:
    python -m discord_logger.bot                  # Run the bot and query API
    python -m discord_logger.bot --no-api         # Run the bot only
    python -m discord_logger.bot --verbose        # Show more details
    python -m discord_logger.bot --debug          # Show debug info
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys

from discord_logger.bot.run import run_bot
from discord_logger.ingest.logger import logger
from discord_logger.utils.logging import setup_logging


def main() -> None:
    """CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Discord Message Logger",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m discord_logger.bot
      Log messages and serve the query API as configured in config.json

  python -m discord_logger.bot --no-api
      Log messages without starting the query API

  python -m discord_logger.bot --config /path/to/config.json
      Use a custom config file

  python -m discord_logger.bot --debug
      Enable debug logging including third-party libraries
        """,
    )

    parser.add_argument(
        "--config",
        type=str,
        default="config.json",
        help="Path to config.json (default: config.json)",
    )
    parser.add_argument(
        "--no-api",
        action="store_true",
        help="Do not start the HTTP query API",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose output (DEBUG level)",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug mode with third-party library logs",
    )
    parser.add_argument(
        "--log-file",
        type=str,
        help="Optional file to write logs to",
    )

    args = parser.parse_args()

    # Configure logging based on CLI flags
    if args.debug:
        log_level = logging.DEBUG
        debug_third_party = True
    elif args.verbose:
        log_level = logging.DEBUG
        debug_third_party = False
    else:
        log_level = logging.INFO
        debug_third_party = False

    setup_logging(
        level=log_level,
        log_file=args.log_file,
        debug_third_party=debug_third_party,
    )

    logger.info("Starting Discord Message Logger")

    try:
        asyncio.run(run_bot(config_path=args.config, api_enabled=not args.no_api))
    except KeyboardInterrupt:
        logger.warning("Interrupted by user")
        sys.exit(1)
    except Exception as e:
        logger.error(f"Fatal error: {e}")
        raise


if __name__ == "__main__":
    main()
