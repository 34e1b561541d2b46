import pytest

from heatcheck.factors.universal import (
    current_streak,
    implied_team_total,
    score_game_environment,
    score_h2h,
    score_home_away,
    score_minutes_trend,
    score_momentum,
    score_opponent_def,
    score_recent_trend,
    score_rest_fatigue,
    score_season_avg,
)
from heatcheck.models import GameLog, OVER, UNDER, NEUTRAL


def test_recent_trend_over_and_under(factor_input, make_logs):
    hot = score_recent_trend(factor_input(make_logs([30] * 10), 20), 0.85, 10)
    assert hot.signal == OVER
    assert hot.strength == 1.0
    assert hot.detail == "EWMA: 30.0 vs line 20 (100% hit rate L10)"
    assert hot.data_point == "10/10 over | EWMA 30.0"

    cold = score_recent_trend(factor_input(make_logs([10] * 10), 20), 0.85, 10)
    assert cold.signal == UNDER


def test_recent_trend_steady_scorer_above_the_line(factor_input, make_logs):
    logs = make_logs([30, 28, 32, 29, 31, 27, 33, 30, 29, 31])
    result = score_recent_trend(factor_input(logs, 25), 0.85, 10, 0.08)
    # EWMA 29.78 sits 19.1% over the line; past twice the 8% threshold the strength caps at 1
    assert result.signal == OVER
    assert result.strength == 1.0
    assert result.detail == "EWMA: 29.8 vs line 25 (100% hit rate L10)"
    assert result.data_point == "10/10 over | EWMA 29.8"


def test_recent_trend_needs_three_games(factor_input, make_logs):
    result = score_recent_trend(factor_input(make_logs([30, 30]), 20), 0.85)
    assert result.signal == NEUTRAL
    assert result.detail == "Insufficient recent data"


def test_every_scorer_is_neutral_without_logs(factor_input, defense, make_game):
    fi = factor_input([], 20, game=make_game(total=240), defense_ranking=defense(28))
    results = [
        score_recent_trend(fi, 0.85),
        score_season_avg(fi, True),
        score_opponent_def(fi),
        score_home_away(fi),
        score_rest_fatigue(fi),
        score_h2h(fi),
        score_momentum(fi),
        score_minutes_trend(fi),
        score_game_environment(fi, 224, 0.04),
    ]
    for result in results:
        assert result.signal == NEUTRAL
        assert result.strength == 0.0
        assert result.detail == "No game log data"


def test_season_median_above_line(factor_input, make_logs):
    result = score_season_avg(factor_input(make_logs([10, 20, 30]), 15), use_median=True)
    assert result.signal == OVER
    assert result.detail == "Season median: 20.0 vs line 15"
    assert result.data_point == "+5.0 above line"


def test_opponent_defense_bands(factor_input, make_logs, defense):
    logs = make_logs([20] * 5)
    soft = score_opponent_def(factor_input(logs, 20, defense_ranking=defense(25)), 10, 21)
    assert soft.signal == OVER
    assert soft.strength == pytest.approx(0.5)

    tough = score_opponent_def(factor_input(logs, 20, defense_ranking=defense(3)), 10, 21)
    assert tough.signal == UNDER
    assert tough.strength == pytest.approx(0.8)

    middle = score_opponent_def(factor_input(logs, 20, defense_ranking=defense(15)), 10, 21)
    assert middle.signal == NEUTRAL
    assert middle.strength == pytest.approx(0.2)

    missing = score_opponent_def(factor_input(logs, 20), 10, 21)
    assert missing.signal == NEUTRAL
    assert missing.detail == "Opponent defense ranking unavailable"


def test_home_away_uses_venue_split(factor_input, make_logs):
    logs = make_logs([30] * 5, is_home=True) + make_logs([10] * 5, is_home=False)
    result = score_home_away(factor_input(logs, 20))
    assert result.signal == OVER
    assert result.detail == "Home avg: 30.0 (H: 30.0 / A: 10.0)"


def test_rest_fatigue(factor_input, make_logs):
    logs = make_logs([20] * 5, rest_days=[3, 1, 1, 1, 1])
    rested = score_rest_fatigue(factor_input(logs, 20))
    assert rested.signal == OVER
    assert rested.data_point == "3d rest"

    b2b_logs = make_logs([20] * 5)
    b2b_logs[0] = GameLog(date=b2b_logs[0].date, opponent="BOS", is_home=True,
                          stats={"points": 14}, is_back_to_back=True, rest_days=0)
    b2b = score_rest_fatigue(factor_input(b2b_logs, 20))
    assert b2b.signal == UNDER

    default = score_rest_fatigue(factor_input(make_logs([20] * 5), 20))
    assert default.signal == NEUTRAL
    assert default.strength == pytest.approx(0.1)
    assert default.data_point == "1d rest"


def test_h2h_against_tonights_opponent(factor_input, make_logs):
    logs = make_logs([25, 25, 10], opponent="BOS") + make_logs([5, 5], opponent="NYK")
    result = score_h2h(factor_input(logs, 20))
    assert result.signal == OVER
    assert result.strength == pytest.approx(1 / 3)
    assert result.detail == "67% hit rate vs BOS (3 games)"

    thin = score_h2h(factor_input(make_logs([25, 25], opponent="BOS"), 20))
    assert thin.signal == NEUTRAL
    assert thin.detail == "Limited H2H data (2 games vs BOS)"


def test_current_streak_counts_ties_as_unders():
    assert current_streak([25, 25, 20, 25], 20) == 2
    assert current_streak([20, 19, 18, 25], 20) == -3
    assert current_streak([], 20) == 0


def test_momentum_with_values_on_the_line(factor_input, make_logs):
    result = score_momentum(factor_input(make_logs([20, 20, 20, 20, 25]), 20))
    assert result.signal == UNDER
    assert result.strength == pytest.approx(4 / 7)
    assert result.detail == "4-game under streak"


def test_minutes_trend(factor_input, make_logs):
    rising = make_logs([20] * 10, minutes=[36] * 5 + [30] * 5)
    result = score_minutes_trend(factor_input(rising, 20))
    assert result.signal == OVER
    assert result.data_point == "+6.0 min shift"

    short = make_logs([20] * 5, minutes=[36] * 5)
    assert score_minutes_trend(factor_input(short, 20)).detail == "Insufficient minutes data"

    minutes_prop = score_minutes_trend(factor_input(rising, 20, stat="minutes"))
    assert minutes_prop.detail == "N/A (analyzing minutes prop)"


def test_game_environment(factor_input, make_logs, make_game):
    fi = factor_input(make_logs([20] * 5), 20, game=make_game(total=240, spread=-5))
    result = score_game_environment(fi, 224, 0.04)
    assert result.signal == OVER
    assert result.strength == pytest.approx(16 / (224 * 0.04 * 3))
    assert result.data_point == "O/U 240 | Implied 122.5"

    no_total = score_game_environment(factor_input(make_logs([20] * 5), 20), 224, 0.04)
    assert no_total.detail == "Game total unavailable"


def test_implied_team_total():
    assert implied_team_total(224, -6, True) == 115
    assert implied_team_total(224, -6, False) == 109
