# history.py
"""
Teammate and opponent history.

Persisted history comes in as two frequency tables keyed by unordered player
pairs. HistoryModel turns the counts into penalties for the match builder:
teammate repeats are penalized by the square of the count, opponent repeats
linearly.

The helpers at the bottom of the module are the pure half of the history
provider: they normalize the shapes the database hands back and fold a newly
played schedule into the tables for future runs.
"""

import logging
import numbers
from collections import defaultdict
from collections.abc import Iterable, Mapping
from typing import Any

from app_types import Match, MatchupKey, PairCounts, PlayerId, PairKey
from exceptions import HistoryError, ValidationError

logger = logging.getLogger("app.history")

# Separator used by the persisted "a|b" string keys
PAIR_KEY_SEPARATOR = "|"

# Count columns accepted on history rows
_COUNT_COLUMNS = ("pair_count", "opp_count", "count")


def pair_key(a: PlayerId, b: PlayerId) -> PairKey:
    """Canonical key for an unordered pair of distinct players."""
    if a == b:
        raise ValidationError(f"A pair needs two distinct players, got {a!r} twice")
    return (a, b) if a < b else (b, a)


def matchup_key(team_a: tuple[PlayerId, PlayerId], team_b: tuple[PlayerId, PlayerId]) -> MatchupKey:
    """Canonical key for a team-vs-team matchup, independent of side and order."""
    key_a = pair_key(*team_a)
    key_b = pair_key(*team_b)
    return (key_a, key_b) if key_a < key_b else (key_b, key_a)


class HistoryModel:
    """Read-only penalty lookups over copies of the persisted history tables."""

    def __init__(
        self,
        teammate_history: Mapping[PairKey, int] | None = None,
        opponent_history: Mapping[PairKey, int] | None = None,
    ):
        self._teammates = _copy_counts(teammate_history or {}, "teammate")
        self._opponents = _copy_counts(opponent_history or {}, "opponent")

    def teammate_count(self, a: PlayerId, b: PlayerId) -> int:
        return self._teammates.get(pair_key(a, b), 0)

    def opponent_count(self, a: PlayerId, b: PlayerId) -> int:
        return self._opponents.get(pair_key(a, b), 0)

    def teammate_penalty(self, a: PlayerId, b: PlayerId) -> float:
        """Squared teammate count: two prior pairings cost four times one."""
        count = self.teammate_count(a, b)
        return float(count * count)

    def opponent_penalty(self, a: PlayerId, b: PlayerId) -> float:
        return float(self.opponent_count(a, b))

    def __len__(self) -> int:
        return len(self._teammates) + len(self._opponents)


def _is_count(value: Any) -> bool:
    """Non-negative integer, including numpy integers from pandas aggregations."""
    return isinstance(value, numbers.Integral) and not isinstance(value, bool) and value >= 0


def _copy_counts(table: Mapping[PairKey, int], label: str) -> PairCounts:
    """Copies a history table, canonicalizing keys and rejecting bad counts."""
    copied: PairCounts = {}
    for raw_key, count in table.items():
        key = _coerce_key(raw_key)
        if not _is_count(count):
            raise ValidationError(
                f"{label.capitalize()} count for {key} must be a non-negative integer, got {count!r}"
            )
        copied[key] = copied.get(key, 0) + int(count)
    return copied


def _coerce_key(raw_key: Any) -> PairKey:
    if isinstance(raw_key, str):
        parts = raw_key.split(PAIR_KEY_SEPARATOR)
        if len(parts) != 2:
            raise HistoryError(f"Malformed pair key {raw_key!r}")
        return pair_key(parts[0], parts[1])
    if isinstance(raw_key, (tuple, list)) and len(raw_key) == 2:
        return pair_key(raw_key[0], raw_key[1])
    raise HistoryError(f"Malformed pair key {raw_key!r}")


# =============================================================================
# History Provider Helpers
# =============================================================================


def normalize_history(raw: Mapping[Any, int] | Iterable[Mapping[str, Any]] | None) -> PairCounts:
    """
    Converts persisted history into a PairCounts table.

    Accepts either a mapping keyed by (a, b) tuples or "a|b" strings, or an
    iterable of rows shaped like {"player_a", "player_b", "pair_count"}
    ("opp_count" or "count" are accepted as the count column). Duplicate keys
    are summed.

    Raises:
        HistoryError: If a key or row is malformed.
    """
    if raw is None:
        return {}

    if isinstance(raw, Mapping):
        try:
            return _copy_counts(raw, "history")
        except HistoryError:
            raise
        except ValidationError as e:
            raise HistoryError(str(e)) from e

    table: PairCounts = defaultdict(int)
    for row in raw:
        try:
            a, b = row["player_a"], row["player_b"]
        except (KeyError, TypeError) as e:
            raise HistoryError(f"History row is missing player columns: {row!r}") from e

        count = next((row[c] for c in _COUNT_COLUMNS if c in row), None)
        if count is None:
            raise HistoryError(f"History row has no count column: {row!r}")
        if not _is_count(count):
            raise HistoryError(f"History count must be a non-negative integer: {row!r}")

        try:
            table[pair_key(a, b)] += int(count)
        except ValidationError as e:
            raise HistoryError(str(e)) from e

    logger.debug("Normalized %d history rows", len(table))
    return dict(table)


def fold_matches_into_history(
    matches: Iterable[Match],
    teammate_history: Mapping[PairKey, int] | None = None,
    opponent_history: Mapping[PairKey, int] | None = None,
) -> tuple[PairCounts, PairCounts]:
    """
    Adds the pairings of the given matches to copies of the history tables.

    Each match contributes its two teammate pairs and four opponent pairs.
    The input tables are left untouched.

    Returns:
        (teammate_history, opponent_history) as new dicts.
    """
    teammates: PairCounts = dict(normalize_history(teammate_history or {}))
    opponents: PairCounts = dict(normalize_history(opponent_history or {}))

    for match in matches:
        for team in (match.team_1, match.team_2):
            key = pair_key(*team)
            teammates[key] = teammates.get(key, 0) + 1
        for a in match.team_1:
            for b in match.team_2:
                key = pair_key(a, b)
                opponents[key] = opponents.get(key, 0) + 1

    return teammates, opponents
