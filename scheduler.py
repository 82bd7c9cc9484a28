# scheduler.py
"""
Schedule generation for a club doubles session.

generate_schedule() is the only entry point the rest of the system needs: it
takes a roster, court/round counts and the persisted teammate/opponent history
and returns the list of matches for the session. The computation is pure and
synchronous; every piece of state (RNG, fairness counters, within-run usage)
lives only for the duration of one call.
"""

import logging
import math
from typing import Any

from app_types import Match, MatchList, PlayerId, ScheduleConfig
from constants import PLAYERS_PER_MATCH
from exceptions import ValidationError
from fairness import FairnessTracker
from history import HistoryModel
from logger import log_schedule_debug
from match_builder import MatchBuilder
from rng import SeededRandom, make_seed

logger = logging.getLogger("app.scheduler")


def validate_config(config: ScheduleConfig) -> None:
    """
    Checks the configuration before any work is done.

    Raises:
        ValidationError: If the roster is not a list or a count is not positive.
    """
    if not isinstance(config.players, (list, tuple)):
        raise ValidationError(
            f"players must be a list of player ids, got {type(config.players).__name__}"
        )
    for name in ("courts", "matches_per_court"):
        value = getattr(config, name)
        if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
            raise ValidationError(f"{name} must be a positive integer, got {value!r}")
    for name in ("randomize", "no_double_rest"):
        if not isinstance(getattr(config, name), bool):
            raise ValidationError(f"{name} must be a boolean, got {getattr(config, name)!r}")
    if not isinstance(config.date_seed, str):
        raise ValidationError(f"date_seed must be a string, got {config.date_seed!r}")


def _unique_roster(players: list[PlayerId]) -> list[PlayerId]:
    roster = list(dict.fromkeys(players))
    if len(roster) != len(players):
        logger.warning(
            "Roster contains %d duplicate id(s); each player is scheduled once per slot",
            len(players) - len(roster),
        )
    return roster


class ScheduleDriver:
    """
    Runs the round/court loops for one generate_schedule() call.

    A driver instance is single-use: build it, call run(), discard it.
    """

    def __init__(self, config: ScheduleConfig):
        validate_config(config)
        self.config = config
        self.roster = _unique_roster(list(config.players))
        self.seed = make_seed(config.date_seed, config.randomize)
        self.rng = SeededRandom(self.seed)
        self.fairness = FairnessTracker(self.roster, no_double_rest=config.no_double_rest)
        self.builder = MatchBuilder(
            roster=self.roster,
            history=HistoryModel(config.teammate_history, config.opponent_history),
            fairness=self.fairness,
            rng=self.rng,
            weights=config.weights,
        )

    def run(self) -> MatchList:
        courts = self.config.courts
        total_matches = self.config.total_matches

        if len(self.roster) < PLAYERS_PER_MATCH:
            logger.info(
                "Only %d player(s) available, at least %d needed; nothing to schedule",
                len(self.roster),
                PLAYERS_PER_MATCH,
            )
            return []

        # Seeded starting order so schedules don't always follow roster order
        order = self.rng.shuffle(self.roster)
        max_rounds = math.ceil(total_matches / courts)

        matches: MatchList = []
        for round_num in range(1, max_rounds + 1):
            assigned: set[PlayerId] = set()

            for court in range(1, courts + 1):
                if len(matches) >= total_matches:
                    break

                pool = [p for p in order if p not in assigned]
                players = self.builder.build(pool)
                if players is None:
                    break

                matches.append(
                    Match(
                        match_index=len(matches) + 1,
                        round=round_num,
                        court=court,
                        players=players,
                    )
                )
                self.fairness.record_played(players)
                assigned.update(players)

            self.fairness.record_rested_round([p for p in order if p not in assigned])
            if len(matches) >= total_matches:
                break

        matches = matches[:total_matches]

        logger.info(
            "Generated %d of %d requested matches for %d players on %d court(s)",
            len(matches),
            total_matches,
            len(self.roster),
            courts,
        )
        log_schedule_debug(
            logger,
            seed=self.seed,
            num_courts=courts,
            matches=matches,
            play_counts=self.fairness.play_counts(),
            rest_streaks=self.fairness.rest_streaks() if self.config.no_double_rest else None,
            usage_summary=self.builder.usage.summary(),
        )
        return matches


def generate_schedule(config: ScheduleConfig) -> MatchList:
    """
    Generates a doubles schedule.

    Args:
        config: Roster, court/round counts, history and seeding options

    Returns:
        Matches with contiguous match_index values starting at 1. Empty when the
        roster has fewer than four players.

    Raises:
        ValidationError: If the configuration is invalid.
    """
    return ScheduleDriver(config).run()


def generate_schedule_from_options(**options: Any) -> MatchList:
    """
    Keyword-argument form of generate_schedule().

    Accepts the ScheduleConfig field names (players, courts, matches_per_court,
    teammate_history, opponent_history, date_seed, randomize, no_double_rest,
    weights).
    """
    try:
        config = ScheduleConfig(**options)
    except TypeError as e:
        raise ValidationError(f"Invalid schedule options: {e}") from e
    return generate_schedule(config)
