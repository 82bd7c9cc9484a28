import pytest

from app_types import ScheduleConfig


@pytest.fixture
def eight_players():
    """Returns a roster of eight player ids."""
    return [f"P{i}" for i in range(1, 9)]


@pytest.fixture
def base_config(eight_players):
    """Two courts, two rounds, empty history, deterministic seed."""
    return ScheduleConfig(
        players=eight_players,
        courts=2,
        matches_per_court=2,
        date_seed="2025-01-01",
        randomize=False,
    )


@pytest.fixture
def sample_history():
    """History where P1 and P2 have partnered a lot and faced P3 twice."""
    teammate_history = {("P1", "P2"): 5, ("P3", "P4"): 1}
    opponent_history = {("P1", "P3"): 2, ("P2", "P3"): 2}
    return teammate_history, opponent_history
