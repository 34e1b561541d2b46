"""
HeatCheck Configuration
Environment variables and constants for the convergence engine.
"""
import os
from dotenv import load_dotenv

load_dotenv()

# =============================================================================
# RUNTIME SETTINGS
# =============================================================================

LOG_LEVEL = os.getenv("HEATCHECK_LOG_LEVEL", "INFO")

API_HOST = os.getenv("HEATCHECK_API_HOST", "0.0.0.0")
API_PORT = int(os.getenv("HEATCHECK_API_PORT", "8000"))

# HeatCheck board
BOARD_CACHE_TTL_SECONDS = int(os.getenv("HEATCHECK_BOARD_TTL_SECONDS", "300"))  # 5 minutes
FETCH_CONCURRENCY = int(os.getenv("HEATCHECK_FETCH_CONCURRENCY", "5"))
MIN_PICK_CONFIDENCE = int(os.getenv("HEATCHECK_MIN_CONFIDENCE", "55"))
BOARD_SIZE = int(os.getenv("HEATCHECK_BOARD_SIZE", "15"))

# =============================================================================
# SPORTS
# =============================================================================

SUPPORTED_SPORTS = ["nba", "mlb", "nfl"]
DEFAULT_SPORT = "nba"  # unknown sports route through the NBA factor set

# EWMA decay per sport (higher = more weight on the latest game)
EWMA_ALPHA = {
    "nba": 0.85,
    "mlb": 0.70,
    "nfl": 0.90,
}

# Recent-trend lookback window (games)
LOOKBACK = {
    "nba": 10,
    "mlb": 7,
    "nfl": 4,
}

# Median game totals used by the game environment factor
MEDIAN_TOTALS = {
    "nba": 224.0,
    "mlb": 8.5,
    "nfl": 44.0,
}

GAME_ENVIRONMENT_THRESHOLD_PCT = {
    "nba": 0.04,
    "mlb": 0.05,
    "nfl": 0.05,
}

# Opponent defense rank bands: (top_threshold, bottom_threshold)
# rank <= top -> tough defense (under), rank >= bottom -> soft defense (over)
DEFENSE_THRESHOLDS = {
    "nba": (10, 21),
    "mlb": (10, 21),
    "nfl": (5, 21),
}
LEAGUE_SIZE = 30
NEUTRAL_DEFENSE_RANK = 15

# =============================================================================
# FACTOR WEIGHTS (each sport sums to 1.0)
# =============================================================================

SPORT_FACTOR_WEIGHTS = {
    "nba": {
        "recentTrend": 0.26,
        "seasonAvg": 0.20,
        "opponentDef": 0.18,
        "minutesTrend": 0.14,
        "restFatigue": 0.10,
        "gameEnvironment": 0.07,
        "homeAway": 0.03,
        "headToHead": 0.01,
        "momentum": 0.01,
    },
    "mlb": {
        "recentTrend": 0.20,
        "seasonAvg": 0.16,
        "opposingPitcher": 0.22,
        "platoonSplit": 0.15,
        "ballparkFactor": 0.11,
        "weatherWind": 0.11,
        "lineupPosition": 0.03,
        "gameEnvironment": 0.01,
        "momentum": 0.01,
    },
    "nfl": {
        "recentTrend": 0.25,
        "seasonAvg": 0.18,
        "opponentDef": 0.17,
        "snapTargetShare": 0.15,
        "restGameScript": 0.10,
        "gameEnvironment": 0.08,
        "weatherDome": 0.05,
        "homeAwayDiv": 0.01,
        "momentum": 0.01,
    },
}

# =============================================================================
# LEAN / VERDICT
# =============================================================================

LEAN_THRESHOLDS = {
    "toss_up": 10,      # |weighted score| below this is a toss-up
    "strong": 65,
    "moderate": 50,
}

# A factor "fires" when it has a direction and strength above this
FIRE_STRENGTH = 0.1

VERDICT_COLORS = {
    "strongOver": "#16A34A",
    "leanOver": "#4ADE80",
    "tossUp": "#FACC15",
    "leanUnder": "#FB923C",
    "strongUnder": "#EF4444",
}

# =============================================================================
# MLB LEAGUE AVERAGES
# =============================================================================

MLB_LEAGUE_AVG = {
    "era": 4.20,
    "k_per_9": 8.9,
    "whip": 1.30,
    "wrc_plus": 100,
}

# =============================================================================
# HEATCHECK SCANNER
# =============================================================================

CORE_STATS = {
    "nba": ["points", "rebounds", "assists"],
    "mlb": ["hits", "strikeouts_pitcher", "total_bases"],
    "nfl": ["passing_yards", "rushing_yards", "receiving_yards"],
}

RELEVANT_POSITIONS = {
    "nba": ["PG", "SG", "SF", "PF", "C", "G", "F"],
    "mlb": ["SP", "RP", "P", "C", "1B", "2B", "3B", "SS", "LF", "CF", "RF", "DH", "OF"],
    "nfl": ["QB", "RB", "WR", "TE"],
}

# Roster cap per team when building the slate
MAX_PLAYERS_PER_TEAM = {
    "nba": 8,
    "mlb": 10,
    "nfl": 6,
}

COMPOSITE_MULTIPLIERS = {
    "trend_aligned": 1.15,
    "weak_defense": 1.10,     # opponent rank >= 26
    "soft_defense": 1.05,     # opponent rank >= 22
    "neutral_lean": 0.7,
}

# =============================================================================
# STAT LABELS
# =============================================================================

STAT_LABELS = {
    "nba": {
        "points": "Points",
        "rebounds": "Rebounds",
        "assists": "Assists",
        "threes": "3-Pointers Made",
        "steals": "Steals",
        "blocks": "Blocks",
        "pts_reb_ast": "Pts + Reb + Ast",
        "minutes": "Minutes",
    },
    "mlb": {
        "hits": "Hits",
        "runs": "Runs",
        "rbis": "RBIs",
        "home_runs": "Home Runs",
        "total_bases": "Total Bases",
        "strikeouts_pitcher": "Strikeouts (P)",
        "stolen_bases": "Stolen Bases",
        "walks": "Walks",
    },
    "nfl": {
        "passing_yards": "Passing Yards",
        "passing_tds": "Passing TDs",
        "completions": "Completions",
        "rushing_yards": "Rushing Yards",
        "rushing_tds": "Rushing TDs",
        "receiving_yards": "Receiving Yards",
        "receptions": "Receptions",
        "receiving_tds": "Receiving TDs",
    },
}


def get_stat_label(sport: str, stat: str) -> str:
    """Display label for a stat key, falling back to a title-cased key."""
    labels = STAT_LABELS.get((sport or "").lower(), {})
    if stat in labels:
        return labels[stat]
    return stat.replace("_", " ").title()
