#!/usr/bin/env python3
"""
NHL ingest script.

Polls NHL standings and schedules, keeps each team's recent results and
writes games and team profiles to the database. Runs continuously by
default, or a single cycle with --once.
"""

import sys
import os
import argparse
import logging
import signal

# Add src directory to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from config import settings
from collectors import NHLCollector
from database import create_tables
from services import CycleRunner, GameStore, HistoryAggregator, Scheduler

# Set up logging
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper()),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

# Global scheduler instance for signal handling
scheduler = None


def signal_handler(signum, frame):
    """Handle shutdown signals."""
    if scheduler:
        logger.info(f"Received signal {signum}, stopping scheduler...")
        scheduler.stop()


def build_scheduler(reset_history_every_cycle=None) -> Scheduler:
    history = HistoryAggregator()
    runner = CycleRunner(NHLCollector(), GameStore(), history)
    return Scheduler(runner, history, reset_history_every_cycle=reset_history_every_cycle)


def main():
    """Main function for the NHL ingestor."""
    global scheduler

    parser = argparse.ArgumentParser(description='Ingest NHL games and team profiles')
    parser.add_argument('--once', action='store_true', help='Run a single cycle and exit')
    parser.add_argument('--full', action='store_true', help="Use the full day window for --once (default: today only)")
    parser.add_argument('--reset-history-every-cycle', action='store_true', default=None,
                        help='Clear team history before every cycle, not only full fetches')

    args = parser.parse_args()

    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)

    try:
        create_tables()
        logger.info("Database tables initialized")
    except Exception as e:
        logger.error(f"Failed to initialize database: {e}")
        return 1

    scheduler = build_scheduler(args.reset_history_every_cycle)

    if args.once:
        try:
            radius = scheduler.full_fetch_radius if args.full else scheduler.partial_fetch_radius
            result = scheduler.runner.run(radius)
        except Exception as e:
            logger.error(f"Ingest cycle failed: {e}")
            return 1

        print("\n🏒 NHL Ingest Results")
        print("=" * 25)
        print(f"Games updated: {result.games_saved}")
        print(f"Teams updated: {result.teams_saved}")
        print(f"Live game: {result.live_found}")
        print(f"Pending start: {result.pending_found}")
        print(f"Next start: {result.next_start.isoformat() if result.next_start else '-'}")
        return 0

    scheduler.run_forever()
    return 0


if __name__ == '__main__':
    sys.exit(main())
