# fairness.py
"""
Per-player fairness counters for one scheduling run.

The tracker counts how many matches each player has been placed into and, in
no-double-rest mode, how many rounds each player has sat out during the current
rest cycle. A cycle ends once every player has rested at least once; all
streaks are then reset so nobody is asked to sit out twice before the whole
roster has had a turn.

The guarantee is best-effort: when the roster cannot fill every court with
fresh players the fallback path reuses players, and a player can rest twice.
"""

import logging
from collections.abc import Iterable

from app_types import PlayerId

logger = logging.getLogger("app.fairness")


class FairnessTracker:
    """Play counts and rest streaks, mutated only by the scheduler driver."""

    def __init__(self, players: Iterable[PlayerId], no_double_rest: bool = False):
        self.no_double_rest = no_double_rest
        self._play_counts: dict[PlayerId, int] = {p: 0 for p in players}
        self._rest_streaks: dict[PlayerId, int] = {p: 0 for p in self._play_counts}
        self.cycles_completed = 0

    def play_count(self, player: PlayerId) -> int:
        return self._play_counts[player]

    def rest_streak(self, player: PlayerId) -> int:
        """Rounds rested in the current cycle (always 0 when the mode is off)."""
        if not self.no_double_rest:
            return 0
        return self._rest_streaks[player]

    def rank_key(self, player: PlayerId) -> tuple[int, ...]:
        """
        Sort key favoring players who should play next.

        Players who already rested this cycle come first, then the least
        played. Without no-double-rest mode only the play count matters.
        """
        if self.no_double_rest:
            return (-self._rest_streaks[player], self._play_counts[player])
        return (self._play_counts[player],)

    def record_played(self, players: Iterable[PlayerId]) -> None:
        for player in players:
            self._play_counts[player] += 1

    def record_rested_round(self, players_not_playing: Iterable[PlayerId]) -> None:
        """Closes a round: bumps rest streaks and resets them once everyone rested."""
        if not self.no_double_rest:
            return

        for player in players_not_playing:
            self._rest_streaks[player] += 1

        if self._rest_streaks and all(s >= 1 for s in self._rest_streaks.values()):
            self.cycles_completed += 1
            logger.debug("Rest cycle %d complete, resetting streaks", self.cycles_completed)
            for player in self._rest_streaks:
                self._rest_streaks[player] = 0

    def play_count_spread(self) -> int:
        """Difference between the most and least played player."""
        if not self._play_counts:
            return 0
        return max(self._play_counts.values()) - min(self._play_counts.values())

    def play_counts(self) -> dict[PlayerId, int]:
        return dict(self._play_counts)

    def rest_streaks(self) -> dict[PlayerId, int]:
        return dict(self._rest_streaks)

    def __contains__(self, player: PlayerId) -> bool:
        return player in self._play_counts

    def __len__(self) -> int:
        return len(self._play_counts)
