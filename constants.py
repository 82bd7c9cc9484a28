# Match Constants
PLAYERS_PER_MATCH = 4

# Schedule Defaults
DEFAULT_COURTS = 1
DEFAULT_MATCHES_PER_COURT = 5
DATE_SEED_FORMAT = "%Y-%m-%d"

# Match Builder Constants
# First pick is drawn uniformly from this many best-ranked players
FIRST_PICK_WINDOW = 3

# Penalty weights (team-history >> local-repeat >> fairness >= jitter).
# 'rest' is a bonus per rest streak point, only used with no_double_rest.
DEFAULT_WEIGHTS = {
    'team': 100.0,
    'opponent': 10.0,
    'local': 40.0,
    'matchup': 200.0,
    'fair': 60.0,
    'rest': 500.0,
    'jitter': 1.0,
}

# Preview Script Defaults
DEFAULT_LOG_LEVEL = "INFO"
