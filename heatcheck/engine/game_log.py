"""
Game-log helpers: season stats, hit rates, heat ring and timeline.

All inputs are newest-first game logs, the order the engine receives
them in. Anything shown left-to-right in time is reversed explicitly.
"""
import logging
from datetime import date
from typing import List, Optional

from heatcheck.factors.universal import current_streak
from heatcheck.math_utils import mean, moving_average, compute_volatility
from heatcheck.models import GameLog, SeasonStats, as_recent_logs

logger = logging.getLogger(__name__)


def compute_season_stats(game_logs, stat: str, player_id: str = "") -> SeasonStats:
    values = as_recent_logs(game_logs).values(stat)
    if not values:
        return SeasonStats(player_id=player_id, stat=stat, average=0.0)
    return SeasonStats(
        player_id=player_id,
        stat=stat,
        average=mean(values),
        games_played=len(values),
        total=sum(values),
        high=max(values),
        low=min(values),
    )


def get_hit_rate(game_logs, stat: str, line: float, window: Optional[int] = None) -> float:
    """Share of games strictly over the line (a push is not a hit)."""
    logs = as_recent_logs(game_logs)
    if window:
        logs = logs.window(window)
    values = logs.values(stat)
    if not values:
        return 0.0
    return sum(1 for v in values if v > line) / len(values)


def get_avg_margin(game_logs, stat: str, line: float, window: Optional[int] = None) -> float:
    logs = as_recent_logs(game_logs)
    if window:
        logs = logs.window(window)
    return mean([v - line for v in logs.values(stat)])


def stat_volatility(game_logs, stat: str) -> int:
    """1 (metronome) to 10 (boom/bust) from the stat's coefficient of variation."""
    return compute_volatility(as_recent_logs(game_logs).values(stat))


# ─── Heat Ring ───

def compute_heat_ring(game_logs, stat: str, line: float, max_games: int = 10) -> dict:
    """
    Per-game hit/miss ring for the most recent ``max_games``.

    Returns dict with games (newest-first) and aggregates: hit_rate,
    hit_count, total_games, avg_margin, avg_value and streak (signed,
    + for consecutive overs).
    """
    recent = as_recent_logs(game_logs).window(max_games)
    games = []
    for g in recent:
        value = g.stat(stat)
        games.append({
            "game_id": g.game_id or "",
            "date": g.date,
            "opponent": g.opponent,
            "opponent_def_rank": g.opponent_def_rank,
            "is_home": g.is_home,
            "is_back_to_back": g.is_back_to_back,
            "actual_value": value,
            "line": line,
            "margin": value - line,
            "is_hit": value > line,
        })

    values = [g["actual_value"] for g in games]
    hit_count = sum(1 for g in games if g["is_hit"])
    total = len(games)

    return {
        "games": games,
        "aggregates": {
            "hit_rate": hit_count / total if total else 0.0,
            "hit_count": hit_count,
            "total_games": total,
            "avg_margin": mean([g["margin"] for g in games]),
            "avg_value": mean(values),
            "streak": current_streak(values, line),
        },
    }


# ─── Timeline ───

def _parse_date(value: str) -> Optional[date]:
    if not value:
        return None
    try:
        return date.fromisoformat(value[:10])
    except ValueError:
        return None


def detect_markers(game: GameLog, prev_game: Optional[GameLog]) -> List[dict]:
    """Context flags for one timeline point: B2B, rest advantage, return from absence."""
    markers = []
    if game.is_back_to_back:
        markers.append({"type": "back_to_back", "label": "B2B"})
    if game.rest_days is not None and game.rest_days >= 3:
        markers.append({"type": "rest_advantage", "label": f"{game.rest_days}d rest"})
    if prev_game is not None:
        current, previous = _parse_date(game.date), _parse_date(prev_game.date)
        if current and previous and abs((current - previous).days) >= 7:
            markers.append({"type": "injury_return", "label": "Return"})
    return markers


def build_game_log_timeline(game_logs, stat: str, moving_avg_window: int = 5) -> dict:
    """Oldest-first chart series with a trailing moving average."""
    chronological = as_recent_logs(game_logs).reversed()
    values = chronological.values(stat)

    points = []
    prev = None
    for game, value in zip(chronological, values):
        points.append({
            "date": game.date,
            "opponent": game.opponent,
            "value": value,
            "markers": detect_markers(game, prev),
        })
        prev = game

    return {
        "games": points,
        "moving_average": moving_average(values, moving_avg_window),
        "season_average": mean(values),
    }
