# pair_scheduler.py
"""
Schedules for fixed pairs.

Some sessions are played with teams that stay together all night. Each
FixedPair is treated as an atomic team and the pairs meet in circle-method
round-robin order (a bye is added for an odd number of pairs). Matches fill the
courts in ascending order; a new round starts when every court is taken or when
one of the next match's pairs is already playing in the current round.
"""

import logging
import math
from collections.abc import Sequence

from app_types import FixedPair, Match, MatchList
from exceptions import ValidationError
from rng import SeededRandom, make_seed

logger = logging.getLogger("app.pair_scheduler")


def _validate_pairs(pairs: Sequence[FixedPair]) -> None:
    seen_ids: set[str] = set()
    seen_players: set[str] = set()
    for pair in pairs:
        if pair.pair_id in seen_ids:
            raise ValidationError(f"Duplicate pair id {pair.pair_id!r}")
        seen_ids.add(pair.pair_id)

        if len(pair.players) != 2 or pair.players[0] == pair.players[1]:
            raise ValidationError(f"Pair {pair.pair_id!r} needs two distinct players, got {pair.players}")
        for player in pair.players:
            if player in seen_players:
                raise ValidationError(f"Player {player!r} appears in more than one pair")
            seen_players.add(player)


class _RoundLayout:
    """Assigns round and court numbers so no pair plays twice in one round."""

    def __init__(self, courts: int):
        self.courts = courts
        self.round = 1
        self.court = 0
        self._busy: set[str] = set()

    def place(self, index: int, pair_a: FixedPair, pair_b: FixedPair) -> Match:
        if self.court == self.courts or {pair_a.pair_id, pair_b.pair_id} & self._busy:
            self.round += 1
            self.court = 0
            self._busy.clear()
        self.court += 1
        self._busy.update((pair_a.pair_id, pair_b.pair_id))
        return Match(
            match_index=index + 1,
            round=self.round,
            court=self.court,
            players=(*pair_a.players, *pair_b.players),
        )


def generate_pair_schedule(
    pairs: Sequence[FixedPair],
    courts: int = 1,
    matches_per_court: int = 5,
    date_seed: str = "",
    randomize: bool = False,
) -> MatchList:
    """
    Generates a round-robin schedule between fixed pairs.

    Once every pair has met every other pair the rotation starts over, so
    small groups of pairs meet repeatedly until the schedule is full.

    Args:
        pairs: Teams that always play together
        courts: Number of parallel courts
        matches_per_court: Rounds to schedule per court
        date_seed: Deterministic seed basis
        randomize: Mix ephemeral entropy into the seed

    Returns:
        At most courts * matches_per_court matches; empty for fewer than 2 pairs.

    Raises:
        ValidationError: If counts are not positive or the pairs overlap.
    """
    for name, value in (("courts", courts), ("matches_per_court", matches_per_court)):
        if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
            raise ValidationError(f"{name} must be a positive integer, got {value!r}")
    _validate_pairs(pairs)

    if len(pairs) < 2:
        logger.info("Fewer than 2 pairs; nothing to schedule")
        return []

    total_matches = courts * matches_per_court
    rng = SeededRandom(make_seed(date_seed, randomize))

    order: list[FixedPair | None] = list(rng.shuffle(pairs))
    if len(order) % 2 == 1:
        order.append(None)  # bye

    n = len(order)
    # The bye slot yields no match
    per_rotation = len(pairs) // 2
    rotations = math.ceil(total_matches / per_rotation)

    matches: MatchList = []
    layout = _RoundLayout(courts)
    rotation = list(order)
    for _ in range(rotations):
        if len(matches) >= total_matches:
            break

        round_pairings = [
            (rotation[i], rotation[n - 1 - i])
            for i in range(n // 2)
            if rotation[i] is not None and rotation[n - 1 - i] is not None
        ]
        for pair_a, pair_b in rng.shuffle(round_pairings):
            if len(matches) >= total_matches:
                break
            matches.append(layout.place(len(matches), pair_a, pair_b))

        # Keep the first entry fixed, rotate the rest one step to the right
        if n > 2:
            rotation = [rotation[0], rotation[-1], *rotation[1:-1]]

    logger.info("Generated %d fixed-pair matches for %d pairs", len(matches), len(pairs))
    return matches
