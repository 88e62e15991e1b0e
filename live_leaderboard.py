#!/usr/bin/env python3
"""
CTF Live Leaderboard CLI

Polls the CTFd API every 30 seconds, ranks the teams and prints the
podium plus ranks 4-13. Each snapshot can also be written to a JSON file
for the dashboard page to pick up.

Usage:
    python live_leaderboard.py --once
    python live_leaderboard.py --interval 15 --output web/data/leaderboard.json
    python live_leaderboard.py --proxy-url http://localhost:3000/api/ctfd
"""

import argparse
import logging
import sys
from pathlib import Path

from ctfboard import DashboardConfig, LeaderboardSnapshot, PollController, build_client, load_config
from ctfboard.config import DEFAULT_CONFIG_PATH
from ctfboard.logging_config import setup_logging
from ctfboard.ranking import format_team_name, podium_slots
from ctfboard.utils import save_json


def print_snapshot(snapshot: LeaderboardSnapshot) -> None:
    """Print the podium and the 4-13 list."""
    print("\n" + "="*60)
    print(f"LEADERBOARD  ({snapshot.fetched_at:%H:%M:%S} UTC)")
    print("="*60)

    if snapshot.error:
        print(f"  ⚠️  {snapshot.error}")
        return

    for place, team in enumerate(podium_slots(snapshot.teams), 1):
        if team is None:
            print(f"  {place}. ---")
        else:
            print(f"  {team.place}. {format_team_name(team.name)}: {team.score} pts ({team.solves} solves)")

    if snapshot.teams_ranked_4_to_13:
        print("-"*60)
        for team in snapshot.teams_ranked_4_to_13:
            print(f"  {team.place}. {format_team_name(team.name)}: {team.score} pts ({team.solves} solves)")

    print("-"*60)
    print(
        f"  Teams: {len(snapshot.teams)}  Challenges: {len(snapshot.challenges)}  "
        f"Awards: {len(snapshot.awards)}  Solves: {snapshot.total_solves}"
    )


def main():
    parser = argparse.ArgumentParser(description="Live CTF leaderboard backed by the CTFd API")
    parser.add_argument(
        "--config", "-c",
        default=str(DEFAULT_CONFIG_PATH),
        help="Path to dashboard config JSON",
    )
    parser.add_argument(
        "--once",
        action="store_true",
        help="Run a single poll cycle and exit",
    )
    parser.add_argument(
        "--interval", "-i",
        type=float,
        default=None,
        help="Seconds between poll cycles (defaults to the config value, 30)",
    )
    parser.add_argument(
        "--proxy-url",
        default=None,
        help="Poll through the ?endpoint= proxy at this URL instead of CTFd directly",
    )
    parser.add_argument(
        "--no-fallback",
        action="store_true",
        help="Don't substitute placeholder data when a request fails",
    )
    parser.add_argument(
        "--output", "-o",
        default=None,
        help="Write each snapshot as JSON to this path",
    )
    parser.add_argument(
        "--log-dir",
        default=None,
        help="Directory for log files (file logging is off unless set)",
    )
    parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Only log warnings and errors",
    )

    args = parser.parse_args()

    logger = setup_logging(
        log_dir=Path(args.log_dir) if args.log_dir else None,
        level=logging.WARNING if args.quiet else logging.INFO,
        log_to_file=args.log_dir is not None,
    )

    overrides = {}
    if args.proxy_url:
        overrides["proxy_url"] = args.proxy_url
    if args.no_fallback:
        overrides["use_fallback"] = False
    if args.interval is not None:
        overrides["poll_interval"] = args.interval

    try:
        config = load_config(args.config)
        if overrides:
            config = DashboardConfig.model_validate({**config.model_dump(), **overrides})
        client = build_client(config)
    except (FileNotFoundError, ValueError) as e:
        print(f"❌ {e}")
        sys.exit(1)

    output_path = Path(args.output) if args.output else None

    def publish(snapshot: LeaderboardSnapshot) -> None:
        print_snapshot(snapshot)
        if output_path:
            save_json(output_path, snapshot.to_dict())
            logger.info(f"Snapshot written to {output_path}")

    poller = PollController(client, interval=config.poll_interval, on_update=publish)

    if args.once:
        snapshot = poller.refetch()
        sys.exit(1 if snapshot.error else 0)

    try:
        with poller:
            poller.wait()
    except KeyboardInterrupt:
        print("\nStopping...")


if __name__ == "__main__":
    main()
