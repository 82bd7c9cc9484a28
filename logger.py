# logger.py
"""
Logging configuration for the Club Doubles Scheduler.

This module provides centralized logging setup. The setup_logging() function
should be called once at program startup (e.g., in preview_schedule.py).

All scheduler modules should use the "app" namespace:
    import logging
    logger = logging.getLogger("app.module_name")

This keeps third-party library logs quiet while allowing granular control
over the scheduler's own logging level via the LOG_LEVEL environment variable.
"""

import logging
import os
import sys

from constants import DEFAULT_LOG_LEVEL

# App namespace prefix - all scheduler loggers should use this
APP_LOGGER_NAME = "app"


def parse_level(name: str) -> int:
    """Maps a level name such as "debug" to its logging constant (INFO if unknown)."""
    level = logging.getLevelName(name.upper())
    return level if isinstance(level, int) else logging.INFO


def level_from_env(default: str = DEFAULT_LOG_LEVEL) -> int:
    """Reads LOG_LEVEL from the environment, falling back to default."""
    return parse_level(os.environ.get("LOG_LEVEL", default))


def setup_logging(app_level: int = logging.INFO) -> None:
    """
    Configure logging for the application.

    - Root logger is set to WARNING (keeps third-party libraries quiet)
    - App namespace logger ("app.*") is set to the specified level

    This should be called ONCE at application startup (entry point).

    Args:
        app_level: The logging level for app modules (default: INFO)
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.WARNING)

    # Avoid adding duplicate handlers if setup is called multiple times
    if not root_logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setLevel(logging.DEBUG)  # Handler accepts all; loggers filter

        formatter = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%H:%M:%S",
        )
        handler.setFormatter(formatter)

        root_logger.addHandler(handler)

    app_logger = logging.getLogger(APP_LOGGER_NAME)
    app_logger.setLevel(app_level)


def log_schedule_debug(
    logger: logging.Logger,
    seed: str,
    num_courts: int,
    matches: list,
    play_counts: dict,
    rest_streaks: dict | None = None,
    usage_summary: dict | None = None,
) -> None:
    """
    Log schedule debug information in a consistent format.

    Args:
        logger: Logger instance to use
        seed: Seed string the RNG was built from
        num_courts: Number of courts
        matches: Generated Match objects
        play_counts: Dict of matches played per player
        rest_streaks: Optional dict of rest streaks (no-double-rest mode only)
        usage_summary: Optional within-run repeat counters
    """
    if not logger.isEnabledFor(logging.DEBUG):
        return

    logger.debug("Seed: %r, courts: %s, matches: %s", seed, num_courts, len(matches))
    for match in matches:
        logger.debug(
            "Match %s (round %s, court %s): %s vs %s",
            match.match_index,
            match.round,
            match.court,
            match.team_1,
            match.team_2,
        )
    logger.debug("Play Counts: %s", play_counts)
    if play_counts:
        logger.debug(
            "Play Count Spread: %s",
            max(play_counts.values()) - min(play_counts.values()),
        )
    if rest_streaks is not None:
        logger.debug("Rest Streaks: %s", rest_streaks)
    if usage_summary is not None:
        logger.debug("Within-run Repeats: %s", usage_summary)
