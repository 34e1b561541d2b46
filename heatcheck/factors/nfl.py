"""
NFL 9-Factor Set

Football replaces two basketball factors and adds weather:
- Minutes Trend  -> Snap % + Target Share Trend (carries share for RBs)
- Rest / Fatigue -> Rest & Game Script Risk (short weeks, blowout spreads)
- Weather & Dome Status, zero effect under a roof

EWMA alpha 0.90 over L4: a 17-game season means near-complete trust in
the latest game. Opponent defense fires under only for top-5 units.

Weights (sum to 1.0):
- Recent Trend (L4 EWMA)             0.25
- Season Average vs Line             0.18
- Opponent Defense (vs Position)     0.17
- Snap % + Target Share Trend        0.15
- Rest & Game Script Risk            0.10
- Game Environment (Implied Points)  0.08
- Weather & Dome Status              0.05
- Home / Away + Divisional           0.01
- Momentum / Streak                  0.01
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
)
from heatcheck.factors.base import SportFactorProvider, signal_from_value, to_weighted
from heatcheck.factors.universal import (
    score_recent_trend,
    score_season_avg,
    score_opponent_def,
    score_home_away,
    score_momentum,
    score_game_environment,
    classify,
    neutral,
)
from heatcheck.factors.weather import get_weather_signal
from heatcheck.math_utils import fmt_num, mean
from heatcheck.models import (
    ExtraData,
    FactorInput,
    FactorResult,
    NFLExtraData,
    WeatherData,
    WeightedFactor,
)

logger = logging.getLogger(__name__)

# Home stadiums with a roof (SoFi is technically open-air but covered)
NFL_INDOOR_STADIUMS = {
    "ARI", "ATL", "DAL", "DET", "HOU", "IND",
    "LV", "LAC", "LAR", "MIN", "NO",
}

WEATHER_FIRE_THRESHOLD = 0.15
SHARE_FIRE_THRESHOLD = 0.08
DEFAULT_NFL_REST_DAYS = 7


def is_indoor_stadium(team_abbrev: str) -> bool:
    return (team_abbrev or "").upper() in NFL_INDOOR_STADIUMS


# ─── Snap % + Target Share Trend ───

def _pct(value: float) -> str:
    return f"{value * 100:.0f}%"


def _signed_pct(value: float) -> str:
    sign = "+" if value > 0 else ""
    return f"{sign}{value * 100:.0f}%"


def score_snap_target_share(factor_input: FactorInput, extra: Optional[NFLExtraData]) -> FactorResult:
    """
    RBs: carries-share delta vs season. Pass catchers: 60/40 blend of
    target-share delta and snap-% delta. Without usage data, falls back
    to L3 vs prior play time from the game log.
    """
    position = (factor_input.player.position or "").upper()

    if extra and position == "RB" and extra.carries_share is not None and extra.season_avg_carries_share is not None:
        delta = extra.carries_share - extra.season_avg_carries_share
        return FactorResult(
            signal=classify(delta, SHARE_FIRE_THRESHOLD),
            strength=abs(delta) / 0.15,
            detail=f"Carries share: {_pct(extra.carries_share)} (season: {_pct(extra.season_avg_carries_share)})",
            data_point=f"{_signed_pct(delta)} carries share",
        )

    if extra and extra.target_share is not None and extra.season_avg_target_share is not None:
        snap_delta = (extra.snap_pct or 0) - (extra.season_avg_snap_pct or 0)
        target_delta = extra.target_share - extra.season_avg_target_share
        combined = target_delta * 0.60 + snap_delta * 0.40
        return FactorResult(
            signal=classify(combined, SHARE_FIRE_THRESHOLD),
            strength=abs(combined) / 0.15,
            detail=f"Target share: {_pct(extra.target_share)} (season: {_pct(extra.season_avg_target_share)})",
            data_point=f"{_signed_pct(target_delta)} target share",
        )

    minutes = [
        g.minutes_played for g in factor_input.game_logs.window(6)
        if g.minutes_played is not None and g.minutes_played > 0
    ]
    if len(minutes) >= 3 and minutes[3:]:
        recent = mean(minutes[:3])
        older = mean(minutes[3:])
        delta = recent - older
        sign = "+" if delta > 0 else ""
        return FactorResult(
            signal=classify(delta, 3),
            strength=abs(delta) / 8,
            detail=f"Snap data unavailable. Using play time proxy: L3 avg {recent:.0f} vs prior {older:.0f}",
            data_point=f"{sign}{delta:.0f} min shift",
        )

    return neutral("Snap % and target share data unavailable")


# ─── Rest & Game Script Risk ───

def score_rest_game_script(factor_input: FactorInput) -> FactorResult:
    latest = factor_input.game_logs.latest
    rest_days = latest.rest_days if latest is not None and latest.rest_days is not None else DEFAULT_NFL_REST_DAYS
    spread = factor_input.game.spread or 0.0
    spread_str = f"{'+' if spread > 0 else ''}{fmt_num(spread)}"

    value = 0.0
    details = []
    if rest_days <= 4:
        value -= 0.3
        details.append(f"Short week ({rest_days}d rest)")
    elif rest_days >= 10:
        value += 0.15
        details.append(f"Extended rest ({rest_days}d)")

    if abs(spread) > 14:
        favored = (factor_input.is_home and spread < -14) or (not factor_input.is_home and spread > 14)
        if favored:
            value -= 0.2
            details.append(f"Heavy favorite ({spread_str}), garbage time risk")
        else:
            value -= 0.1
            details.append("Heavy underdog, game script volatile")
    elif abs(spread) > 10:
        value -= 0.1
        details.append(f"Moderate spread ({spread_str})")

    return FactorResult(
        signal=classify(value, 0.15),
        strength=abs(value) / 0.5,
        detail=" | ".join(details) if details else f"{rest_days}d rest, spread {fmt_num(spread)}",
        data_point=f"{rest_days}d rest | Spread {spread_str}",
    )


# ─── Weather & Dome Status ───

def _nfl_weather(home_abbrev: str, weather: Optional[WeatherData]) -> Optional[WeatherData]:
    """The static stadium table decides indoor status; roofs get synthetic dome weather."""
    indoor = is_indoor_stadium(home_abbrev)
    if weather is not None:
        return replace(weather, is_indoor=indoor)
    if indoor:
        return WeatherData(wind_speed_mph=0, wind_direction="N/A", temp_f=72, humidity=45,
                           condition="Dome", is_indoor=True)
    return None


def score_weather_dome(factor_input: FactorInput, extra: Optional[NFLExtraData]) -> FactorResult:
    home = factor_input.game.home_team.abbrev
    weather = _nfl_weather(home, extra.weather if extra else None)
    result = get_weather_signal(weather, "nfl", factor_input.stat, home)
    data_point = "Indoor dome" if is_indoor_stadium(home) else result["data_point"]
    return signal_from_value(result["signal"], WEATHER_FIRE_THRESHOLD, result["detail"], data_point)


# ─── Home / Away + Divisional ───

def score_home_away_divisional(factor_input: FactorInput, extra: Optional[NFLExtraData]) -> FactorResult:
    base = score_home_away(factor_input, 0.10)
    if extra and extra.is_divisional:
        return replace(base, detail=f"{base.detail} | Divisional matchup (historically tighter)")
    return base


def get_nfl_factors(factor_input: FactorInput, extra: Optional[ExtraData] = None) -> List[WeightedFactor]:
    nfl = extra.nfl if extra else None
    w = SPORT_FACTOR_WEIGHTS["nfl"]
    top, bottom = DEFENSE_THRESHOLDS["nfl"]
    lookback = LOOKBACK["nfl"]

    return [
        to_weighted("recentTrend", f"Recent Trend (L{lookback} EWMA)", w["recentTrend"],
                    score_recent_trend(factor_input, EWMA_ALPHA["nfl"], lookback, 0.08)),
        to_weighted("seasonAvg", "Season Average vs Line", w["seasonAvg"],
                    score_season_avg(factor_input, True, 0.05)),
        to_weighted("opponentDef", "Opponent Defense (vs Position)", w["opponentDef"],
                    score_opponent_def(factor_input, top, bottom)),
        to_weighted("snapTargetShare", "Snap % + Target Share Trend", w["snapTargetShare"],
                    score_snap_target_share(factor_input, nfl)),
        to_weighted("restGameScript", "Rest & Game Script Risk", w["restGameScript"],
                    score_rest_game_script(factor_input)),
        to_weighted("gameEnvironment", "Game Environment (Implied Points)", w["gameEnvironment"],
                    score_game_environment(factor_input, MEDIAN_TOTALS["nfl"], GAME_ENVIRONMENT_THRESHOLD_PCT["nfl"])),
        to_weighted("weatherDome", "Weather & Dome Status", w["weatherDome"],
                    score_weather_dome(factor_input, nfl)),
        to_weighted("homeAwayDiv", "Home / Away + Divisional", w["homeAwayDiv"],
                    score_home_away_divisional(factor_input, nfl)),
        to_weighted("momentum", "Momentum / Streak", w["momentum"],
                    score_momentum(factor_input, 4)),
    ]


class NFLProvider(SportFactorProvider):
    sport = "nfl"

    def get_factors(self, factor_input, extra=None):
        return get_nfl_factors(factor_input, extra)
