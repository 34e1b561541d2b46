"""
Convergence Router

Dispatches a prop to its sport's nine-factor set, tallies the votes and
computes the weighted lean.

Lean:
- raw = |Σ weight × direction × strength| × 100 across all nine factors
- raw < 10 is a toss-up, otherwise the sign of the sum picks over/under
- confidence = round(raw) clamped to 1-99
- tier: STRONG >= 65, MODERATE >= 50, else NEUTRAL

The router is pure: same inputs, same result, nothing mutated.
"""
import logging
from typing import List, Optional

from heatcheck.config import LEAN_THRESHOLDS
from heatcheck.factors import get_provider
from heatcheck.math_utils import clamp, round_half_up
from heatcheck.models import (
    ConvergenceResult,
    DefenseRanking,
    ExtraData,
    FactorInput,
    Game,
    Lean,
    Player,
    SeasonStats,
    WeightedFactor,
    as_recent_logs,
    OVER,
    UNDER,
    NEUTRAL,
    TOSS_UP,
)

logger = logging.getLogger(__name__)

FACTOR_COUNT = 9


class ConvergenceError(RuntimeError):
    """A factor provider broke the nine-factor contract."""


def weighted_score(factors: List[WeightedFactor]) -> float:
    """Signed weighted vote in [-1, 1]."""
    return sum(f.weight * f.direction * f.strength for f in factors)


def get_lean_tier(raw_confidence: float) -> str:
    if raw_confidence >= LEAN_THRESHOLDS["strong"]:
        return "STRONG"
    if raw_confidence >= LEAN_THRESHOLDS["moderate"]:
        return "MODERATE"
    return "NEUTRAL"


def compute_lean(factors: List[WeightedFactor]) -> Lean:
    score = weighted_score(factors)
    raw = abs(score) * 100

    if raw < LEAN_THRESHOLDS["toss_up"]:
        direction = TOSS_UP
    else:
        direction = OVER if score > 0 else UNDER

    return Lean(
        direction=direction,
        confidence=int(clamp(round_half_up(raw), 1, 99)),
        tier=get_lean_tier(raw),
        factors=list(factors),
    )


def count_signals(factors) -> dict:
    counts = {OVER: 0, UNDER: 0, NEUTRAL: 0}
    for f in factors:
        counts[f.signal] += 1
    return counts


def build_factor_input(
    player: Player,
    game: Game,
    game_logs,
    season_stats: SeasonStats,
    defense_ranking: Optional[DefenseRanking],
    stat: str,
    line: float,
) -> FactorInput:
    return FactorInput(
        player=player,
        game=game,
        game_logs=as_recent_logs(game_logs),
        season_stats=season_stats,
        defense_ranking=defense_ranking,
        stat=stat,
        line=float(line),
        is_home=game.home_team.id == player.team.id,
    )


def evaluate(
    player: Player,
    game: Game,
    game_logs,
    season_stats: SeasonStats,
    defense_ranking: Optional[DefenseRanking],
    stat: str,
    line: float,
    extra: Optional[ExtraData] = None,
) -> ConvergenceResult:
    """
    Score one prop line.

    Args:
        game_logs: newest-first list of GameLog (or a RecentGameLogs)
        extra: sport-specific auxiliary data (weather, pitcher, usage)

    Returns ConvergenceResult with legacy flat factors, weighted factors,
    over/under/neutral counts and the weighted lean.
    """
    factor_input = build_factor_input(player, game, game_logs, season_stats, defense_ranking, stat, line)
    provider = get_provider(player.sport)
    weighted = provider.get_factors(factor_input, extra)

    if len(weighted) != FACTOR_COUNT:
        raise ConvergenceError(
            f"{provider.sport} provider returned {len(weighted)} factors, expected {FACTOR_COUNT}"
        )

    counts = count_signals(weighted)
    lean = compute_lean(weighted)

    logger.debug(
        f"[Convergence] {player.name} {stat} {line} ({provider.sport}): "
        f"{counts[OVER]} over / {counts[UNDER]} under / {counts[NEUTRAL]} neutral, "
        f"lean {lean.direction} {lean.confidence} ({lean.tier})"
    )

    return ConvergenceResult(
        factors=[f.as_convergence_factor() for f in weighted],
        weighted_factors=weighted,
        over_count=counts[OVER],
        under_count=counts[UNDER],
        neutral_count=counts[NEUTRAL],
        lean=lean,
    )
