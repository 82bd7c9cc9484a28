# match_builder.py
"""
Greedy construction of a single doubles match.

For each court slot the builder picks four players from the pool of players
not yet used this round:

1. rank the pool by fairness (seeded shuffle breaks remaining ties)
2. first: uniform pick from the top FIRST_PICK_WINDOW of the ranking
3. second (first's teammate): lowest teammate/local-repeat/fairness cost
4. third (first opponent): lowest opponent/clash/fairness cost
5. fourth (third's teammate): lowest teammate/matchup-repeat/opponent cost

The four are then re-split into the best of the three possible team
arrangements, and the within-run usage counters are updated so later slots
avoid the same partnerships and matchups.
"""

import logging
from collections.abc import Callable, Iterable, Sequence

from app_types import MatchupKey, PairKey, PlayerId, Weights
from constants import DEFAULT_WEIGHTS, FIRST_PICK_WINDOW, PLAYERS_PER_MATCH
from exceptions import MatchBuildError, ValidationError
from fairness import FairnessTracker
from history import HistoryModel, matchup_key, pair_key
from rng import SeededRandom

logger = logging.getLogger("app.match_builder")

# Scores closer than this are treated as a tie
_TIE_TOLERANCE = 1e-9

MatchPlayers = tuple[PlayerId, PlayerId, PlayerId, PlayerId]


def resolve_weights(overrides: Weights | None = None) -> Weights:
    """
    Merges penalty weight overrides over DEFAULT_WEIGHTS.

    Raises:
        ValidationError: On unknown weight names or negative/non-numeric values.
    """
    weights = dict(DEFAULT_WEIGHTS)
    if not overrides:
        return weights

    unknown = set(overrides) - set(DEFAULT_WEIGHTS)
    if unknown:
        raise ValidationError(
            f"Unknown penalty weight(s): {sorted(unknown)}. Known: {sorted(DEFAULT_WEIGHTS)}"
        )
    for name, value in overrides.items():
        if isinstance(value, bool) or not isinstance(value, (int, float)) or value < 0:
            raise ValidationError(f"Weight {name!r} must be a non-negative number, got {value!r}")
        weights[name] = float(value)
    return weights


class UsageCounters:
    """Teammate pairs, opponent pairs and matchups created during this run."""

    def __init__(self):
        self.pairs: dict[PairKey, int] = {}
        self.opponents: dict[PairKey, int] = {}
        self.matchups: dict[MatchupKey, int] = {}

    def pair_usage(self, a: PlayerId, b: PlayerId) -> int:
        return self.pairs.get(pair_key(a, b), 0)

    def opponent_usage(self, a: PlayerId, b: PlayerId) -> int:
        return self.opponents.get(pair_key(a, b), 0)

    def matchup_usage(self, team_a: tuple[PlayerId, PlayerId], team_b: tuple[PlayerId, PlayerId]) -> int:
        return self.matchups.get(matchup_key(team_a, team_b), 0)

    def record(self, players: Sequence[PlayerId]) -> None:
        team_a = (players[0], players[1])
        team_b = (players[2], players[3])
        for team in (team_a, team_b):
            key = pair_key(*team)
            self.pairs[key] = self.pairs.get(key, 0) + 1
        for a in team_a:
            for b in team_b:
                key = pair_key(a, b)
                self.opponents[key] = self.opponents.get(key, 0) + 1
        key = matchup_key(team_a, team_b)
        self.matchups[key] = self.matchups.get(key, 0) + 1

    def summary(self) -> dict[str, int]:
        """Number of repeated teammate pairs and matchups so far."""
        return {
            "repeated_pairs": sum(c - 1 for c in self.pairs.values() if c > 1),
            "repeated_matchups": sum(c - 1 for c in self.matchups.values() if c > 1),
        }


class MatchBuilder:
    """
    Builds one match at a time for a single scheduling run.

    The builder owns the within-run usage counters; history, fairness and the
    RNG are shared with the driver for the duration of the run.
    """

    def __init__(
        self,
        roster: Sequence[PlayerId],
        history: HistoryModel,
        fairness: FairnessTracker,
        rng: SeededRandom,
        weights: Weights | None = None,
    ):
        self.roster = list(dict.fromkeys(roster))
        self.history = history
        self.fairness = fairness
        self.rng = rng
        self.weights = resolve_weights(weights)
        self.usage = UsageCounters()

    # -------------------------------------------------------------------------
    # Public API
    # -------------------------------------------------------------------------

    def build(self, pool: Iterable[PlayerId]) -> MatchPlayers | None:
        """
        Picks and arranges four players for one court slot.

        Args:
            pool: Players not yet assigned in the current round

        Returns:
            Four distinct player ids ([0, 1] vs [2, 3]), or None when the whole
            roster has fewer than four players.
        """
        if len(self.roster) < PLAYERS_PER_MATCH:
            return None

        roster_set = set(self.roster)
        available = [p for p in dict.fromkeys(pool) if p in roster_set]

        if len(available) < PLAYERS_PER_MATCH:
            group = self._fallback_group(available)
        else:
            group = self._greedy_group(available)

        players = self._best_arrangement(group)
        if len(set(players)) != PLAYERS_PER_MATCH:
            raise MatchBuildError(f"Built a match with duplicate players: {players}")

        self.usage.record(players)
        return players

    def rank(self, players: Iterable[PlayerId]) -> list[PlayerId]:
        """Fairness ordering; a seeded shuffle decides between equal keys."""
        return sorted(self.rng.shuffle(list(players)), key=self.fairness.rank_key)

    def match_penalty(self, players: Sequence[PlayerId]) -> float:
        """Full penalty of a concrete arrangement [0, 1] vs [2, 3]."""
        w = self.weights
        team_a = (players[0], players[1])
        team_b = (players[2], players[3])

        penalty = 0.0
        for team in (team_a, team_b):
            penalty += w["team"] * self.history.teammate_penalty(*team)
            penalty += w["local"] * self.usage.pair_usage(*team)
        for a in team_a:
            for b in team_b:
                penalty += w["opponent"] * self.history.opponent_penalty(a, b)
                penalty += w["opponent"] * self.usage.opponent_usage(a, b)
        penalty += w["matchup"] * self.usage.matchup_usage(team_a, team_b)
        penalty += sum(self._fairness_cost(p) for p in players)
        return penalty

    # -------------------------------------------------------------------------
    # Selection
    # -------------------------------------------------------------------------

    def _greedy_group(self, available: list[PlayerId]) -> list[PlayerId]:
        w = self.weights
        ranked = self.rank(available)

        window = ranked[: min(FIRST_PICK_WINDOW, len(ranked))]
        first = self.rng.choice(window)
        remaining = [p for p in ranked if p != first]

        second = self._pick_lowest(
            remaining,
            lambda c: (
                w["team"] * self.history.teammate_penalty(first, c)
                + w["local"] * self.usage.pair_usage(first, c)
                + self._fairness_cost(c)
            ),
        )
        remaining = [p for p in remaining if p != second]

        # Having partnered first or second this run stands in for "these
        # groups already clashed"
        third = self._pick_lowest(
            remaining,
            lambda c: (
                w["opponent"] * (self.history.opponent_penalty(first, c) + self.history.opponent_penalty(second, c))
                + w["local"] * (self.usage.pair_usage(first, c) + self.usage.pair_usage(second, c))
                + self._fairness_cost(c)
            ),
        )
        remaining = [p for p in remaining if p != third]

        fourth = self._pick_lowest(
            remaining,
            lambda c: (
                w["team"] * self.history.teammate_penalty(third, c)
                + w["local"] * self.usage.pair_usage(third, c)
                + w["matchup"] * self.usage.matchup_usage((first, second), (third, c))
                + w["opponent"] * (self.history.opponent_penalty(first, c) + self.history.opponent_penalty(second, c))
                + self._fairness_cost(c)
            ),
        )

        picks = [first, second, third, fourth]
        logger.debug("Picked %s from a pool of %d", picks, len(available))
        return self._fill_distinct(picks, ranked)

    def _fallback_group(self, available: list[PlayerId]) -> list[PlayerId]:
        """Tops up a short pool with already-assigned players from the roster."""
        logger.warning(
            "Only %d unassigned players left for this slot; reusing players from the roster",
            len(available),
        )
        return self._fill_distinct(self.rank(available), [])

    def _fill_distinct(self, picks: list[PlayerId], ranked_pool: list[PlayerId]) -> list[PlayerId]:
        """Drops colliding picks and fills up from the ranked pool, then the roster."""
        group = list(dict.fromkeys(picks))[:PLAYERS_PER_MATCH]
        if len(group) == PLAYERS_PER_MATCH:
            return group

        for source in (ranked_pool, self.rank(self.roster)):
            for player in source:
                if len(group) == PLAYERS_PER_MATCH:
                    return group
                if player not in group:
                    group.append(player)
        return group

    def _pick_lowest(self, candidates: list[PlayerId], cost: Callable[[PlayerId], float]) -> PlayerId:
        """Lowest cost plus jitter; exact ties are settled by the RNG."""
        scored = [(cost(c) + self.rng.jitter(self.weights["jitter"]), c) for c in candidates]
        best = min(score for score, _ in scored)
        tied = [c for score, c in scored if score - best <= _TIE_TOLERANCE]
        return tied[0] if len(tied) == 1 else self.rng.choice(tied)

    def _fairness_cost(self, player: PlayerId) -> float:
        w = self.weights
        cost = w["fair"] * self.fairness.play_count(player)
        if self.fairness.no_double_rest:
            # Players who already sat out this cycle are pulled forward
            cost -= w["rest"] * self.fairness.rest_streak(player)
        return cost

    # -------------------------------------------------------------------------
    # Arrangement
    # -------------------------------------------------------------------------

    def _best_arrangement(self, group: list[PlayerId]) -> MatchPlayers:
        a, b, c, d = group
        options: list[MatchPlayers] = [(a, b, c, d), (a, c, b, d), (a, d, b, c)]
        scored = [(self.match_penalty(option), option) for option in options]
        best = min(score for score, _ in scored)
        tied = [option for score, option in scored if score - best <= _TIE_TOLERANCE]
        return tied[0] if len(tied) == 1 else self.rng.choice(tied)
