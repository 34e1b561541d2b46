"""
MLB 9-Factor Set

Three basketball factors don't apply to baseball and are replaced:
- Rest / Fatigue   -> Opposing Pitcher Quality (highest single weight)
- H2H vs Team      -> Ballpark Factor
- Minutes Trend    -> Platoon / Handedness Split

Weather & Wind is a standalone factor. EWMA alpha 0.70 over L7 (daily
play means smaller per-game variance, so smoother averaging).

Weights (sum to 1.0):
- Recent Trend (L7 EWMA)          0.20
- Season Average vs Line          0.16
- Opposing Pitcher Quality        0.22
- Platoon / Handedness Split      0.15
- Ballpark Factor                 0.11
- Weather & Wind                  0.11
- Lineup Position                 0.03
- Game Environment (Run Total)    0.01
- Momentum / Streak               0.01
"""
import logging
from dataclasses import replace
from typing import List, Optional

from heatcheck.config import (
    EWMA_ALPHA,
    LOOKBACK,
    MEDIAN_TOTALS,
    GAME_ENVIRONMENT_THRESHOLD_PCT,
    DEFENSE_THRESHOLDS,
    SPORT_FACTOR_WEIGHTS,
    MLB_LEAGUE_AVG,
)
from heatcheck.factors.base import SportFactorProvider, signal_from_value, to_weighted
from heatcheck.factors.universal import (
    score_recent_trend,
    score_season_avg,
    score_momentum,
    score_game_environment,
    classify,
    neutral,
)
from heatcheck.factors.weather import get_weather_signal
from heatcheck.math_utils import fmt_num
from heatcheck.models import (
    ExtraData,
    FactorInput,
    FactorResult,
    MLBExtraData,
    WeatherData,
    WeightedFactor,
    OVER,
    UNDER,
    NEUTRAL,
)

logger = logging.getLogger(__name__)

# Park factors, 100 = neutral run environment
PARK_FACTORS = {
    "COL": 120, "CIN": 108, "TEX": 105, "BOS": 107, "CHC": 105,
    "NYY": 103, "ATL": 102, "PHI": 102, "MIL": 101, "MIN": 101,
    "CLE": 100, "STL": 100, "DET": 100, "BAL": 100, "WSH": 100,
    "KC": 99, "CWS": 99, "LAA": 98, "PIT": 98, "ARI": 97,
    "TOR": 97, "HOU": 97, "NYM": 96, "LAD": 96, "SEA": 95,
    "TB": 94, "SF": 93, "SD": 92, "MIA": 91, "OAK": 94,
}

WEATHER_FIRE_THRESHOLD = 0.2


# ─── Opposing Pitcher Quality ───

def _defense_proxy(factor_input: FactorInput) -> FactorResult:
    ranking = factor_input.defense_ranking
    if ranking is None:
        return neutral("No pitcher or team defense data available")

    top, bottom = DEFENSE_THRESHOLDS["mlb"]
    rank = ranking.rank
    if rank >= bottom:
        signal, strength = OVER, (rank - 20) / 10
    elif rank <= top:
        signal, strength = UNDER, (11 - rank) / 10
    else:
        signal, strength = NEUTRAL, 0.2
    return FactorResult(
        signal=signal,
        strength=strength,
        detail=f"Using team defense proxy (#{rank}), no pitcher data available",
        data_point=f"DEF #{rank}",
    )


def score_opposing_pitcher(factor_input: FactorInput, extra: Optional[MLBExtraData]) -> FactorResult:
    """
    Batter vs starting pitcher. FIP preferred over ERA since it strips out
    the defense behind the pitcher; K/9, WHIP and days of rest adjust.
    Falls back to the team defense rank when no pitcher line is known.
    """
    pitcher = extra.opposing_pitcher if extra else None
    if pitcher is None or pitcher.era is None:
        logger.debug(f"[MLB] No pitcher line for {factor_input.player.name}, using defense proxy")
        return _defense_proxy(factor_input)

    quality = pitcher.fip if pitcher.fip is not None else pitcher.era
    value = (quality - MLB_LEAGUE_AVG["era"]) * 0.4   # bad pitcher -> over

    if pitcher.k_per_9 is not None:
        if pitcher.k_per_9 > MLB_LEAGUE_AVG["k_per_9"] + 1.5:
            value -= 0.3
        if pitcher.k_per_9 < MLB_LEAGUE_AVG["k_per_9"] - 1.5:
            value += 0.2

    if pitcher.whip is not None:
        value += (pitcher.whip - MLB_LEAGUE_AVG["whip"]) * 0.5

    if pitcher.days_rest is not None:
        if pitcher.days_rest >= 5:
            value -= 0.2
        if pitcher.days_rest <= 3:
            value += 0.2

    whip = f"{pitcher.whip:.2f}" if pitcher.whip is not None else "N/A"
    k9 = f"{pitcher.k_per_9:.1f}" if pitcher.k_per_9 is not None else "N/A"
    name = pitcher.name or "Unknown"
    return FactorResult(
        signal=classify(value, 0.3),
        strength=abs(value) / 0.8,
        detail=f"{name} ({pitcher.hand or '?'}HP), ERA {pitcher.era:.2f}, WHIP {whip}",
        data_point=f"ERA {pitcher.era:.2f} | K/9 {k9}",
    )


# ─── Platoon / Handedness Split ───

def score_platoon_split(factor_input: FactorInput, extra: Optional[MLBExtraData]) -> FactorResult:
    splits = extra.splits if extra else None
    pitcher = extra.opposing_pitcher if extra else None
    hand = (pitcher.hand or "").upper() if pitcher else ""

    if splits is None or not hand or (splits.wrc_vs_lhp is None and splits.wrc_vs_rhp is None):
        return neutral("Platoon split data unavailable")

    league = MLB_LEAGUE_AVG["wrc_plus"]
    relevant = splits.wrc_vs_lhp if hand == "L" else splits.wrc_vs_rhp
    if relevant is None:
        relevant = league
    gap = relevant - league
    sign = "+" if gap > 0 else ""

    return FactorResult(
        signal=classify(gap, 15),
        strength=abs(gap) / 40,
        detail=f"wRC+ vs {hand}HP: {fmt_num(relevant)} (league avg: {league})",
        data_point=f"{sign}{fmt_num(gap)} wRC+",
    )


# ─── Ballpark Factor ───

def score_ballpark_factor(factor_input: FactorInput) -> FactorResult:
    """Home park run environment; Coors swings totals 20%+."""
    home = factor_input.game.home_team.abbrev
    park_factor = PARK_FACTORS.get(home, 100)
    deviation = (park_factor - 100) / 100

    if park_factor > 105:
        signal = OVER
    elif park_factor < 95:
        signal = UNDER
    else:
        signal = NEUTRAL

    venue = factor_input.game.venue or home
    return FactorResult(
        signal=signal,
        strength=abs(deviation) * 5,
        detail=f"{venue}, park factor: {park_factor}",
        data_point=f"PF {park_factor}",
    )


# ─── Lineup Position ───

def score_lineup_position(factor_input: FactorInput, extra: Optional[MLBExtraData]) -> FactorResult:
    spot = extra.lineup_spot if extra else None
    if spot is None:
        return neutral("Lineup position unavailable")

    expected_abs = 4.8 - spot * 0.15
    raw = (expected_abs - 3.9) / 0.5
    if spot <= 2:
        signal = OVER
    elif spot >= 7:
        signal = UNDER
    else:
        signal = NEUTRAL

    return FactorResult(
        signal=signal,
        strength=abs(raw),
        detail=f"Batting #{spot}, ~{expected_abs:.1f} expected ABs",
        data_point=f"#{spot} in order",
    )


# ─── Weather & Wind ───

def _mlb_weather(weather: Optional[WeatherData]) -> Optional[WeatherData]:
    if weather is None:
        return None
    if not weather.is_indoor and (weather.condition or "").lower() == "dome":
        return replace(weather, is_indoor=True)
    return weather


def score_weather_wind(factor_input: FactorInput, extra: Optional[MLBExtraData]) -> FactorResult:
    weather = _mlb_weather(extra.weather if extra else None)
    result = get_weather_signal(weather, "mlb", factor_input.stat, factor_input.game.home_team.abbrev)
    return signal_from_value(result["signal"], WEATHER_FIRE_THRESHOLD, result["detail"], result["data_point"])


def get_mlb_factors(factor_input: FactorInput, extra: Optional[ExtraData] = None) -> List[WeightedFactor]:
    mlb = extra.mlb if extra else None
    w = SPORT_FACTOR_WEIGHTS["mlb"]
    lookback = LOOKBACK["mlb"]

    return [
        to_weighted("recentTrend", f"Recent Trend (L{lookback} EWMA)", w["recentTrend"],
                    score_recent_trend(factor_input, EWMA_ALPHA["mlb"], lookback, 0.08)),
        to_weighted("seasonAvg", "Season Average vs Line", w["seasonAvg"],
                    score_season_avg(factor_input, True, 0.05)),
        to_weighted("opposingPitcher", "Opposing Pitcher Quality", w["opposingPitcher"],
                    score_opposing_pitcher(factor_input, mlb)),
        to_weighted("platoonSplit", "Platoon / Handedness Split", w["platoonSplit"],
                    score_platoon_split(factor_input, mlb)),
        to_weighted("ballparkFactor", "Ballpark Factor", w["ballparkFactor"],
                    score_ballpark_factor(factor_input)),
        to_weighted("weatherWind", "Weather & Wind", w["weatherWind"],
                    score_weather_wind(factor_input, mlb)),
        to_weighted("lineupPosition", "Lineup Position", w["lineupPosition"],
                    score_lineup_position(factor_input, mlb)),
        to_weighted("gameEnvironment", "Game Environment (Run Total)", w["gameEnvironment"],
                    score_game_environment(factor_input, MEDIAN_TOTALS["mlb"], GAME_ENVIRONMENT_THRESHOLD_PCT["mlb"])),
        to_weighted("momentum", "Momentum / Streak", w["momentum"],
                    score_momentum(factor_input, 4)),
    ]


class MLBProvider(SportFactorProvider):
    sport = "mlb"

    def get_factors(self, factor_input, extra=None):
        return get_mlb_factors(factor_input, extra)
