"""
Weather Signal Calculator

Converts raw weather conditions into a bounded signal (-1 strong under,
+1 strong over) for outdoor sports.

- MLB: wind direction relative to the park's outfield matters most
- NFL: raw wind speed suppresses passing, helps the run game
- Cold and precipitation suppress scoring in both

Indoor/dome venues always return 0.
"""
import math
import logging
from typing import Optional

from heatcheck.math_utils import fmt_num as _fmt
from heatcheck.models import WeatherData

logger = logging.getLogger(__name__)

# Compass direction -> degrees
DIRECTION_DEGREES = {
    "N": 0, "NNE": 22.5, "NE": 45, "ENE": 67.5,
    "E": 90, "ESE": 112.5, "SE": 135, "SSE": 157.5,
    "S": 180, "SSW": 202.5, "SW": 225, "WSW": 247.5,
    "W": 270, "WNW": 292.5, "NW": 315, "NNW": 337.5,
}

# Approximate direction home plate faces toward center field (degrees).
# Retractable-roof and dome parks are listed as 0.
MLB_OUTFIELD_ORIENTATION = {
    "ARI": 0, "ATL": 225, "BAL": 225, "BOS": 200, "CHC": 220,
    "CWS": 210, "CIN": 225, "CLE": 175, "COL": 230, "DET": 195,
    "HOU": 0, "KC": 180, "LAA": 200, "LAD": 225, "MIA": 0,
    "MIL": 0, "MIN": 205, "NYM": 225, "NYY": 195, "OAK": 195,
    "PHI": 210, "PIT": 180, "SD": 195, "SF": 210, "SEA": 0,
    "STL": 200, "TB": 0, "TEX": 0, "TOR": 0, "WSH": 215,
}
DEFAULT_OUTFIELD_ORIENTATION = 200

NFL_PASSING_STATS = {
    "passing_yards", "passing_tds", "completions",
    "receiving_yards", "receptions", "receiving_tds",
}
NFL_RUSHING_STATS = {"rushing_yards", "rushing_tds"}

PRECIPITATION_KEYWORDS = ("rain", "drizzle", "thunderstorm", "snow")


def wind_direction_degrees(direction) -> float:
    """Resolve a compass string or numeric bearing to degrees (unknown -> 0)."""
    if direction is None:
        return 0.0
    if isinstance(direction, (int, float)):
        return float(direction) % 360
    text = str(direction).strip().upper()
    if text in DIRECTION_DEGREES:
        return float(DIRECTION_DEGREES[text])
    try:
        return float(text) % 360
    except ValueError:
        return 0.0


def effective_wind(speed_mph: float, wind_dir_deg: float, field_orientation_deg: float) -> float:
    """Wind component along the outfield axis. Positive = blowing out."""
    relative = ((wind_dir_deg - field_orientation_deg) + 360) % 360
    return speed_mph * math.cos(math.radians(relative))


def get_weather_signal(
    weather: Optional[WeatherData],
    sport: str,
    stat: str,
    home_team_abbrev: Optional[str] = None,
) -> dict:
    """
    Calculate the weather signal for a game.

    Returns dict with signal (-1..1), detail and data_point.
    """
    if weather is None:
        return {"signal": 0.0, "detail": "Weather data unavailable", "data_point": "N/A"}
    if weather.is_indoor:
        return {"signal": 0.0, "detail": "Indoor dome - no weather effect", "data_point": "Dome"}

    sport = (sport or "").lower()
    signal = 0.0
    details = []
    speed = weather.wind_speed_mph or 0.0
    temp = weather.temp_f

    # ─── Wind ───
    if sport == "mlb" and home_team_abbrev:
        orientation = MLB_OUTFIELD_ORIENTATION.get(home_team_abbrev.upper(), DEFAULT_OUTFIELD_ORIENTATION)
        wind = effective_wind(speed, wind_direction_degrees(weather.wind_direction), orientation)
        if wind > 15:
            signal += 0.7
            details.append("Strong wind blowing out")
        elif wind > 10:
            signal += 0.4
            details.append("Wind blowing out")
        elif wind > 5:
            signal += 0.2
            details.append("Mild wind out")
        elif wind < -15:
            signal -= 0.8
            details.append("Strong wind blowing in")
        elif wind < -10:
            signal -= 0.5
            details.append("Wind blowing in")
        elif wind < -5:
            signal -= 0.2
            details.append("Mild wind in")

    if sport == "nfl":
        if stat in NFL_PASSING_STATS:
            if speed > 30:
                signal -= 0.8
                details.append("Extreme wind, major passing impact")
            elif speed > 20:
                signal -= 0.5
                details.append("High wind, passing suppressed")
            elif speed > 15:
                signal -= 0.25
                details.append("Notable wind for passing")
        if stat in NFL_RUSHING_STATS and speed > 20:
            signal += 0.3
            details.append("High wind, teams run more")

    # ─── Temperature ───
    if sport == "mlb":
        if temp < 45:
            signal -= 0.35
            details.append(f"Cold ({_fmt(temp)}F)")
        elif temp < 55:
            signal -= 0.20
            details.append(f"Cool ({_fmt(temp)}F)")
        elif temp > 85:
            signal += 0.15
            details.append(f"Hot ({_fmt(temp)}F)")
    elif sport == "nfl":
        if temp < 30:
            signal -= 0.20
            details.append(f"Freezing ({_fmt(temp)}F)")
        elif temp < 40:
            signal -= 0.10
            details.append(f"Cold ({_fmt(temp)}F)")

    # ─── Precipitation ───
    condition = (weather.condition or "").lower()
    if any(keyword in condition for keyword in PRECIPITATION_KEYWORDS):
        signal -= 0.20 if sport == "mlb" else 0.15
        details.append(weather.condition)

    signal = max(-1.0, min(1.0, signal))

    direction = weather.wind_direction if weather.wind_direction is not None else ""
    wind_str = f"{_fmt(speed)} mph {_fmt(direction)}".strip()
    if details:
        detail = " | ".join(details)
    else:
        detail = f"{_fmt(temp)}F, {wind_str}, no significant impact"

    return {
        "signal": signal,
        "detail": detail,
        "data_point": f"{_fmt(temp)}F | {wind_str}",
    }
