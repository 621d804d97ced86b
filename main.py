import sys
import asyncio
import argparse
import json
from datetime import datetime
from typing import Optional

# --- Settings/Logging ---
from standings_kiosk.logging.setup import setup_logging
from standings_kiosk.config.settings import settings

setup_logging()

from loguru import logger

from rich import print
from rich.panel import Panel

from standings_kiosk.api.payload import (
    build_error_payload,
    build_standings_payload,
    status_for_error,
)
from standings_kiosk.models.snapshot import StandingsSnapshot
from standings_kiosk.pipeline.cycle import build_pipeline
from standings_kiosk.pipeline.scheduler import StandingsScheduler
from standings_kiosk.pipeline.session import RefreshSession
from standings_kiosk.render.console import ConsoleRenderer


class CapturingRenderer:
    """Keeps the snapshot instead of drawing it (used for --json)."""

    def __init__(self):
        self.snapshot: Optional[StandingsSnapshot] = None

    def render(self, snapshot: StandingsSnapshot) -> None:
        self.snapshot = snapshot

    def show_error(self, message: str) -> None:
        pass

    def set_connection_status(self, online: bool) -> None:
        pass

    def update_status(self, last_update: Optional[datetime]) -> None:
        pass


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Conference standings kiosk")
    parser.add_argument("--once", action="store_true", help="Run a single refresh cycle and exit.")
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the standings as JSON instead of drawing the board (implies --once).",
    )
    return parser.parse_args(argv)


async def run_json() -> int:
    """Single cycle, JSON on stdout. Exit code 1 on failure."""
    renderer = CapturingRenderer()
    pipeline = build_pipeline(renderer)
    try:
        outcome = await pipeline.run_cycle(RefreshSession())
    finally:
        await pipeline.close()

    if outcome.success:
        sys.stdout.write(json.dumps(build_standings_payload(outcome.snapshot.records), indent=2) + "\n")
        return 0

    payload = build_error_payload("Failed to fetch standings", str(outcome.error))
    logger.error(f"Standings unavailable (status {status_for_error(outcome.error)})")
    sys.stdout.write(json.dumps(payload, indent=2) + "\n")
    return 1


async def main(argv=None) -> int:
    """Main entry point for the application."""
    args = parse_args(argv)
    if args.json:
        return await run_json()

    logger.info(f"Starting Conference Standings Kiosk (source: {settings.data_source.value})")
    print(Panel(f"Loading standings from [bold]{settings.data_source.value}[/bold]..."))

    pipeline = build_pipeline(ConsoleRenderer())
    scheduler = StandingsScheduler(pipeline, RefreshSession())
    outcomes = await scheduler.run(max_cycles=1 if args.once else None)
    return 0 if outcomes and outcomes[-1].success else 1


def cli() -> None:
    try:
        sys.exit(asyncio.run(main()))
    except KeyboardInterrupt:
        logger.info("Execution interrupted by user (KeyboardInterrupt).")
        sys.exit(0)
    except Exception as e:
        logger.exception(f"Unhandled exception in main execution: {e}")
        sys.exit(1)


if __name__ == "__main__":
    cli()
