#!/usr/bin/env python3
"""
Schedule Preview Script.

Generates a doubles schedule from a JSON roster file and prints it as a table,
together with how many matches each player got.

Usage:
    python preview_schedule.py roster.json --courts 2 --matches-per-court 5

The JSON file holds {"players": [...]} and optionally "teammate_history" and
"opponent_history", either as {"a|b": count} objects or as lists of
{"player_a", "player_b", "pair_count"} rows.
"""

import argparse
import json
import logging
import sys
from datetime import date, datetime

from app_types import ScheduleConfig
from constants import DATE_SEED_FORMAT, DEFAULT_COURTS, DEFAULT_MATCHES_PER_COURT
from exceptions import SchedulerError, ValidationError
from history import normalize_history
from logger import level_from_env, parse_level, setup_logging
from pairing_stats import play_counts, schedule_to_dataframe
from scheduler import generate_schedule

logger = logging.getLogger("app.preview_schedule")


def load_config(path: str, args: argparse.Namespace) -> ScheduleConfig:
    """Reads the roster file and combines it with the command-line options."""
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise ValidationError(f"{path} must contain a JSON object with a \"players\" list")

    return ScheduleConfig(
        players=data.get("players"),
        courts=args.courts,
        matches_per_court=args.matches_per_court,
        teammate_history=normalize_history(data.get("teammate_history")),
        opponent_history=normalize_history(data.get("opponent_history")),
        date_seed=args.date,
        randomize=args.randomize,
        no_double_rest=args.no_double_rest,
    )


def seed_date(value: str) -> str:
    """argparse type for --date: must be a YYYY-MM-DD date."""
    try:
        datetime.strptime(value, DATE_SEED_FORMAT)
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"{value!r} is not a YYYY-MM-DD date") from e
    return value


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    ap = argparse.ArgumentParser(description="Club doubles scheduler - schedule preview")
    ap.add_argument("input", help="JSON file with players and optional history")
    ap.add_argument("--courts", type=int, default=DEFAULT_COURTS, help="courts per round")
    ap.add_argument(
        "--matches-per-court",
        type=int,
        default=DEFAULT_MATCHES_PER_COURT,
        help="rounds to schedule per court",
    )
    ap.add_argument("--date", type=seed_date, default=date.today().isoformat(), help="seed date (YYYY-MM-DD)")
    ap.add_argument("--randomize", action="store_true", help="different schedule on every call")
    ap.add_argument("--no-double-rest", action="store_true", help="nobody rests twice per cycle")
    ap.add_argument("--log-level", default=None, help="app log level (default: $LOG_LEVEL or INFO)")
    return ap.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    level = parse_level(args.log_level) if args.log_level else level_from_env()
    setup_logging(level)

    try:
        config = load_config(args.input, args)
        matches = generate_schedule(config)
    except (OSError, json.JSONDecodeError) as e:
        logger.error("Cannot read %s: %s", args.input, e)
        return 1
    except SchedulerError as e:
        logger.error("Cannot generate schedule: %s", e)
        return 1

    if not matches:
        logger.warning("No matches generated (at least 4 players are needed)")
        return 0

    print(schedule_to_dataframe(matches).to_string(index=False))
    print()
    print(play_counts(matches, config.players).to_frame().to_string())
    return 0


if __name__ == "__main__":
    sys.exit(main())
