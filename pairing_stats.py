# pairing_stats.py
"""
Tabular views of schedules and pairing history.

These helpers turn Match lists and PairCounts tables into pandas objects for
previews and heatmaps: one row per match, play counts per player, and
symmetric player x player matrices of teammate/opponent counts.
"""

from collections.abc import Iterable, Mapping, Sequence

import pandas as pd

from app_types import Match, PairCounts, PairKey, PlayerId
from history import fold_matches_into_history

SCHEDULE_COLUMNS = ["Match #", "Round", "Court", "Team 1", "Team 2"]


def _team_label(team: tuple[PlayerId, PlayerId]) -> str:
    return " & ".join(team)


def schedule_to_dataframe(matches: Sequence[Match]) -> pd.DataFrame:
    """Creates a DataFrame with one row per match, in schedule order."""
    df_data = {
        "Match #": [m.match_index for m in matches],
        "Round": [m.round for m in matches],
        "Court": [m.court for m in matches],
        "Team 1": [_team_label(m.team_1) for m in matches],
        "Team 2": [_team_label(m.team_2) for m in matches],
    }
    return pd.DataFrame(df_data, columns=SCHEDULE_COLUMNS)


def play_counts(matches: Iterable[Match], players: Sequence[PlayerId] | None = None) -> pd.Series:
    """
    Number of matches each player appears in.

    Args:
        matches: The schedule
        players: Optional roster; players without matches are reported as 0

    Returns:
        Series indexed by player id, in roster order when a roster is given.
    """
    counts = pd.Series(
        [p for m in matches for p in m.players], dtype="object"
    ).value_counts()
    if players is not None:
        counts = counts.reindex(list(players), fill_value=0)
    else:
        counts = counts.sort_index()
    return counts.astype(int).rename("Matches")


def pair_matrix(counts: Mapping[PairKey, int], players: Sequence[PlayerId]) -> pd.DataFrame:
    """
    Builds a symmetric player x player matrix from a PairCounts table.

    Pairs involving players outside the given roster are ignored. The diagonal
    is always 0.
    """
    roster = list(dict.fromkeys(players))
    matrix = pd.DataFrame(0, index=roster, columns=roster, dtype=int)
    known = set(roster)
    for (a, b), count in counts.items():
        if a in known and b in known:
            matrix.loc[a, b] = count
            matrix.loc[b, a] = count
    return matrix


def schedule_pair_counts(matches: Iterable[Match]) -> tuple[PairCounts, PairCounts]:
    """Teammate and opponent counts created by a schedule alone."""
    return fold_matches_into_history(matches)
