#!/usr/bin/env python
"""Run the Kite batch sync.

Without flags this starts the daily scheduler and blocks. ``--once`` runs a
single batch immediately and exits (useful from cron or for re-running a
failed day by hand).

Usage:
    python -m scripts.run_daily_sync
    python -m scripts.run_daily_sync --once
    python -m scripts.run_daily_sync --once --user alice --user bob
"""

import argparse
import sys

from database import init_db, session_scope
from logging_config import setup_logging
from scheduler import DailySyncScheduler
from services.batch_sync_service import BatchSyncResult, BatchSyncService


def print_result(result: BatchSyncResult) -> None:
    """Print a one-line-per-user summary of a batch run."""
    print(f"Users: {result.users_total}")
    print(f"  Synced:  {result.users_synced}")
    print(f"  Failed:  {result.users_failed}")
    print(f"  Skipped: {result.users_skipped}")
    for error in result.errors:
        print(f"  ! {error}")


def main(argv: list[str] | None = None) -> None:
    """Entry point: parse args and run the batch or the scheduler."""
    parser = argparse.ArgumentParser(
        description="Sync Kite holdings, positions and orders for all users.",
    )
    parser.add_argument(
        "--once",
        action="store_true",
        help="Run one batch now and exit instead of starting the scheduler",
    )
    parser.add_argument(
        "--user",
        action="append",
        dest="users",
        metavar="USERNAME",
        help="Only sync this user (repeatable; requires --once)",
    )

    args = parser.parse_args(argv)

    if args.users and not args.once:
        parser.error("--user requires --once")

    setup_logging()
    init_db()

    if not args.once:
        DailySyncScheduler().start()
        return

    with session_scope() as db:
        result = BatchSyncService().run(db, usernames=args.users)

    print_result(result)
    if result.users_failed:
        sys.exit(1)


if __name__ == "__main__":
    main()
