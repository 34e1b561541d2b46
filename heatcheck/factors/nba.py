"""
NBA 9-Factor Set

All nine universal factors apply to basketball unchanged. EWMA alpha 0.85
over the last 10 games. Weight leans on Recent Trend and Season Average,
the two most predictive signals over a dense 82-game schedule.

Weights (sum to 1.0):
- Recent Trend (L10 EWMA)         0.26
- Season Average vs Line          0.20
- Opponent Defense Rank           0.18
- Minutes & Usage Trend           0.14
- Rest / Fatigue (B2B)            0.10
- Game Environment (O/U + Pace)   0.07
- Home / Away Split               0.03
- H2H vs Opponent                 0.01
- Momentum / Streak               0.01
"""
from typing import List, Optional

from heatcheck.config import (
    EWMA_ALPHA,
    LOOKBACK,
    MEDIAN_TOTALS,
    GAME_ENVIRONMENT_THRESHOLD_PCT,
    DEFENSE_THRESHOLDS,
    SPORT_FACTOR_WEIGHTS,
)
from heatcheck.factors.base import SportFactorProvider, to_weighted
from heatcheck.factors.universal import (
    score_recent_trend,
    score_season_avg,
    score_opponent_def,
    score_home_away,
    score_rest_fatigue,
    score_h2h,
    score_momentum,
    score_minutes_trend,
    score_game_environment,
)
from heatcheck.models import ExtraData, FactorInput, WeightedFactor


def get_nba_factors(factor_input: FactorInput, extra: Optional[ExtraData] = None) -> List[WeightedFactor]:
    """NBA has no auxiliary inputs; ``extra`` is accepted and ignored."""
    w = SPORT_FACTOR_WEIGHTS["nba"]
    top, bottom = DEFENSE_THRESHOLDS["nba"]
    lookback = LOOKBACK["nba"]

    return [
        to_weighted("recentTrend", f"Recent Trend (L{lookback} EWMA)", w["recentTrend"],
                    score_recent_trend(factor_input, EWMA_ALPHA["nba"], lookback, 0.08)),
        to_weighted("seasonAvg", "Season Average vs Line", w["seasonAvg"],
                    score_season_avg(factor_input, True, 0.05)),
        to_weighted("opponentDef", "Opponent Defense Rank", w["opponentDef"],
                    score_opponent_def(factor_input, top, bottom)),
        to_weighted("minutesTrend", "Minutes & Usage Trend", w["minutesTrend"],
                    score_minutes_trend(factor_input, 2)),
        to_weighted("restFatigue", "Rest / Fatigue (B2B)", w["restFatigue"],
                    score_rest_fatigue(factor_input)),
        to_weighted("gameEnvironment", "Game Environment (O/U + Pace)", w["gameEnvironment"],
                    score_game_environment(factor_input, MEDIAN_TOTALS["nba"], GAME_ENVIRONMENT_THRESHOLD_PCT["nba"])),
        to_weighted("homeAway", "Home / Away Split", w["homeAway"],
                    score_home_away(factor_input, 0.10)),
        to_weighted("headToHead", "H2H vs Opponent", w["headToHead"],
                    score_h2h(factor_input, 3)),
        to_weighted("momentum", "Momentum / Streak", w["momentum"],
                    score_momentum(factor_input, 4)),
    ]


class NBAProvider(SportFactorProvider):
    sport = "nba"

    def get_factors(self, factor_input, extra=None):
        return get_nba_factors(factor_input, extra)
