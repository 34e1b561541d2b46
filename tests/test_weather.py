import pytest

from heatcheck.factors.weather import get_weather_signal, wind_direction_degrees
from heatcheck.models import WeatherData


def test_missing_and_indoor_weather_is_neutral():
    missing = get_weather_signal(None, "mlb", "hits", "NYY")
    assert missing == {"signal": 0.0, "detail": "Weather data unavailable", "data_point": "N/A"}

    dome = get_weather_signal(WeatherData(wind_speed_mph=30, is_indoor=True), "nfl", "passing_yards")
    assert dome["signal"] == 0.0
    assert dome["detail"] == "Indoor dome - no weather effect"
    assert dome["data_point"] == "Dome"


def test_mlb_wind_blowing_out():
    weather = WeatherData(wind_speed_mph=20, wind_direction=230)
    result = get_weather_signal(weather, "mlb", "total_bases", "COL")
    assert result["signal"] == pytest.approx(0.7)
    assert result["detail"] == "Strong wind blowing out"


def test_mlb_wind_in_and_cold_is_clamped():
    weather = WeatherData(wind_speed_mph=20, wind_direction=50, temp_f=40)
    result = get_weather_signal(weather, "mlb", "total_bases", "COL")
    assert result["signal"] == -1.0
    assert "Strong wind blowing in" in result["detail"]
    assert "Cold (40F)" in result["detail"]


def test_nfl_wind_hurts_passing_helps_rushing():
    weather = WeatherData(wind_speed_mph=25, wind_direction="NW", temp_f=25, condition="Light Rain")
    passing = get_weather_signal(weather, "nfl", "passing_yards", "GB")
    assert passing["signal"] == pytest.approx(-0.85)
    assert "Light Rain" in passing["detail"]

    rushing = get_weather_signal(WeatherData(wind_speed_mph=25), "nfl", "rushing_yards", "GB")
    assert rushing["signal"] == pytest.approx(0.3)


def test_calm_conditions_detail():
    weather = WeatherData(wind_speed_mph=3, wind_direction="N", temp_f=70)
    result = get_weather_signal(weather, "mlb", "hits", "NYY")
    assert result["signal"] == 0.0
    assert result["detail"] == "70F, 3 mph N, no significant impact"
    assert result["data_point"] == "70F | 3 mph N"


def test_wind_direction_degrees():
    assert wind_direction_degrees("sw") == 225
    assert wind_direction_degrees(405) == 45
    assert wind_direction_degrees("bogus") == 0
    assert wind_direction_degrees(None) == 0
