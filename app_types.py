# app_types.py
"""
Type aliases for the Club Doubles Scheduler.

This module defines type aliases and the small data classes that flow between
the scheduling modules, giving semantic meaning to complex type hints.
"""

from dataclasses import dataclass, field
from datetime import date
from typing import Any

# =============================================================================
# Basic Type Aliases
# =============================================================================

# An opaque player identifier (name, UUID, ...)
PlayerId = str

# Canonical unordered pair of player ids: always (smaller, larger)
PairKey = tuple[PlayerId, PlayerId]

# Canonical unordered pair of teams, each team itself a PairKey
MatchupKey = tuple[PairKey, PairKey]

# History of how often a pair played together (teammates) or against each other
PairCounts = dict[PairKey, int]

# Penalty weights by name (see constants.DEFAULT_WEIGHTS)
Weights = dict[str, float]


# =============================================================================
# Match Data Classes
# =============================================================================


@dataclass(frozen=True)
class Match:
    """A doubles match assignment.

    Attributes:
        match_index: Position in the whole schedule (1-indexed, contiguous)
        round: Round number (1-indexed)
        court: Court number (1-indexed)
        players: Exactly four player ids; [0, 1] is team 1, [2, 3] is team 2
    """

    match_index: int
    round: int
    court: int
    players: tuple[PlayerId, PlayerId, PlayerId, PlayerId]

    @property
    def team_1(self) -> tuple[PlayerId, PlayerId]:
        return self.players[0], self.players[1]

    @property
    def team_2(self) -> tuple[PlayerId, PlayerId]:
        return self.players[2], self.players[3]

    def to_dict(self) -> dict[str, Any]:
        """Record shape consumed by the persistence layer."""
        return {
            "match_index": self.match_index,
            "round": self.round,
            "court": self.court,
            "players": list(self.players),
        }


# List of match assignments for a whole schedule
MatchList = list[Match]


@dataclass(frozen=True)
class FixedPair:
    """A team that always plays together (fixed-pair schedules)."""

    pair_id: str
    players: tuple[PlayerId, PlayerId]
    label: str = ""


# =============================================================================
# Configuration Data Classes
# =============================================================================


def _today() -> str:
    return date.today().isoformat()


@dataclass
class ScheduleConfig:
    """Input to generate_schedule().

    Attributes:
        players: Roster available for this run (needs at least 4 entries)
        courts: Number of parallel courts per round
        matches_per_court: Rounds to schedule per court
        teammate_history: Persisted teammate frequencies
        opponent_history: Persisted opponent frequencies
        date_seed: Deterministic seed basis, normally the session's ISO date
        randomize: Mix ephemeral entropy into the seed so repeated calls differ
        no_double_rest: Enable the rest-streak fairness cycle
        weights: Optional overrides for constants.DEFAULT_WEIGHTS
    """

    players: list[PlayerId]
    courts: int = 1
    matches_per_court: int = 5
    teammate_history: PairCounts = field(default_factory=dict)
    opponent_history: PairCounts = field(default_factory=dict)
    date_seed: str = field(default_factory=_today)
    randomize: bool = False
    no_double_rest: bool = False
    weights: Weights | None = None

    @property
    def total_matches(self) -> int:
        return self.courts * self.matches_per_court
