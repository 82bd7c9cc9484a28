from collections import Counter
from typing import Iterable

from app_types import Match, PairKey
from history import pair_key


def generate_players(n: int, prefix: str = "P") -> list[str]:
    """Generates N player ids named P1 to Pn."""
    return [f"{prefix}{i}" for i in range(1, n + 1)]


def teammate_counter(matches: Iterable[Match]) -> Counter[PairKey]:
    """Counts how often each pair appears as teammates in a schedule."""
    counter: Counter[PairKey] = Counter()
    for match in matches:
        counter[pair_key(*match.team_1)] += 1
        counter[pair_key(*match.team_2)] += 1
    return counter


def play_counter(matches: Iterable[Match]) -> Counter[str]:
    """Counts how many matches each player appears in."""
    return Counter(p for match in matches for p in match.players)


def assert_valid_schedule(matches: list[Match], players: list[str], courts: int) -> None:
    """Checks the structural invariants every schedule must satisfy."""
    roster = set(players)
    assert [m.match_index for m in matches] == list(range(1, len(matches) + 1))
    for match in matches:
        assert len(match.players) == 4
        assert len(set(match.players)) == 4, f"Duplicate player in {match}"
        assert set(match.players) <= roster, f"Unknown player in {match}"
        assert 1 <= match.court <= courts
        assert match.round >= 1
