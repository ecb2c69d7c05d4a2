"""
TrailSwap entry point
=====================

Loads settings, configures logging, wires the Solana/Jupiter (or paper)
collaborators into the swap monitor and runs it until SIGINT/SIGTERM.

Usage:
  python -m trailswap                    # Live trading with .env settings
  python -m trailswap --dry-run          # Paper trading against live prices
  python -m trailswap --env-file prod.env --log-level DEBUG
"""

import argparse
import asyncio
import logging
import signal
import sys
from typing import List, Optional

from trailswap import __version__
from trailswap.config import Settings, build_strategy_config
from trailswap.exceptions import ConfigurationError, StartupError
from trailswap.exchange_clients.factory import create_collaborators
from trailswap.logging_config import configure_logging
from trailswap.services.shutdown_manager import ShutdownManager
from trailswap.services.swap_monitor import SwapMonitor

logger = logging.getLogger(__name__)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="trailswap",
        description="Hold one of two assets and swap on (trailing) stop-loss crossings.",
    )
    parser.add_argument("--env-file", default=".env", help="Settings file (default: .env)")
    parser.add_argument("--dry-run", action="store_true", help="Paper trade instead of sending transactions")
    parser.add_argument("--log-level", default=None, help="Override LOG_LEVEL (DEBUG, INFO, ...)")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser.parse_args(argv)


def load_settings(args: argparse.Namespace) -> Settings:
    overrides = {}
    if args.dry_run:
        overrides["dry_run"] = True
    if args.log_level:
        overrides["log_level"] = args.log_level
    return Settings(_env_file=args.env_file, **overrides)


def install_signal_handlers(shutdown: ShutdownManager):
    """Route SIGINT/SIGTERM to the shutdown manager"""
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, shutdown.request_shutdown)
        except (NotImplementedError, RuntimeError):
            # Windows event loops have no add_signal_handler
            signal.signal(sig, lambda *_: loop.call_soon_threadsafe(shutdown.request_shutdown))


async def run(settings: Settings) -> int:
    """
    Run the agent until shutdown.

    Returns:
        Process exit code (0 after a clean shutdown, 1 on startup failure)
    """
    try:
        config = build_strategy_config(settings)
        collaborators = create_collaborators(settings, config)
    except ConfigurationError as e:
        logger.error(f"Invalid configuration: {e}")
        return 1

    shutdown = ShutdownManager()
    install_signal_handlers(shutdown)

    monitor = SwapMonitor(
        config=config,
        price_source=collaborators.price_source,
        balance_reader=collaborators.balance_reader,
        executor=collaborators.executor,
    )

    try:
        logger.info("Starting swap monitoring service")
        await monitor.start(shutdown)
    except (ConfigurationError, StartupError) as e:
        logger.error(f"Swap service error: {e}")
        return 1
    finally:
        await shutdown.wait_until_idle()
        if collaborators.wallet is not None:
            await collaborators.wallet.close()

    logger.info(f"Swap service stopped: {monitor.get_status()}")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    settings = load_settings(args)
    configure_logging(settings.log_dir, settings.log_level)
    logger.info(f"Starting TrailSwap {__version__}{' (paper trading)' if settings.dry_run else ''}")
    return asyncio.run(run(settings))


if __name__ == "__main__":
    sys.exit(main())
