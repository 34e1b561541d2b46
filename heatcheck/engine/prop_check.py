"""
Prop Check

Runs the full analysis for one prop line: convergence, verdict, heat
ring and timeline, assembled into a single dict for the API.
"""
import logging
from typing import Optional

from heatcheck.config import get_stat_label
from heatcheck.engine.convergence import evaluate
from heatcheck.engine.game_log import (
    build_game_log_timeline,
    compute_heat_ring,
    compute_season_stats,
    get_avg_margin,
    get_hit_rate,
    stat_volatility,
)
from heatcheck.engine.verdict import synthesize_verdict
from heatcheck.models import (
    DefenseRanking,
    ExtraData,
    Game,
    Player,
    SeasonStats,
    as_recent_logs,
)

logger = logging.getLogger(__name__)


def check_prop(
    player: Player,
    game: Game,
    game_logs,
    stat: str,
    line: float,
    defense_ranking: Optional[DefenseRanking] = None,
    season_stats: Optional[SeasonStats] = None,
    extra: Optional[ExtraData] = None,
    heat_ring_games: int = 10,
) -> dict:
    """
    Analyze one prop.

    Season stats are derived from the game log when not supplied.
    Returns dict with player/game context, convergence, verdict,
    heat_ring, timeline and volatility.
    """
    logs = as_recent_logs(game_logs)
    if season_stats is None:
        season_stats = compute_season_stats(logs, stat, player.id)

    convergence = evaluate(player, game, logs, season_stats, defense_ranking, stat, line, extra)

    hit_rate_l10 = get_hit_rate(logs, stat, line, 10)
    avg_margin_l10 = get_avg_margin(logs, stat, line, 10)
    verdict = synthesize_verdict(
        convergence.factors,
        convergence.over_count,
        convergence.under_count,
        convergence.neutral_count,
        hit_rate_l10,
        avg_margin_l10,
        season_stats.average,
        weighted_factors=convergence.weighted_factors,
    )

    logger.info(
        f"[PropCheck] {player.name} {stat} {line}: {verdict.label} "
        f"({verdict.convergence_score}/9, confidence {verdict.confidence})"
    )

    return {
        "player": {"id": player.id, "name": player.name, "team": player.team.abbrev,
                   "position": player.position, "sport": player.sport},
        "game": {"id": game.id, "home_team": game.home_team.abbrev, "away_team": game.away_team.abbrev,
                 "venue": game.venue, "date": game.date, "spread": game.spread, "total": game.total},
        "stat": stat,
        "stat_label": get_stat_label(player.sport, stat),
        "line": line,
        "is_home": game.home_team.id == player.team.id,
        "season_stats": {
            "average": season_stats.average,
            "games_played": season_stats.games_played,
            "high": season_stats.high,
            "low": season_stats.low,
        },
        "convergence": convergence.to_dict(),
        "verdict": verdict.to_dict(),
        "heat_ring": compute_heat_ring(logs, stat, line, heat_ring_games),
        "timeline": build_game_log_timeline(logs, stat),
        "volatility": stat_volatility(logs, stat),
    }
