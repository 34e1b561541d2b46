import pytest

import heatcheck.factors as factors
from heatcheck.config import SPORT_FACTOR_WEIGHTS
from heatcheck.engine.convergence import ConvergenceError, compute_lean, evaluate, weighted_score
from heatcheck.engine.game_log import compute_season_stats
from heatcheck.factors.base import SportFactorProvider
from heatcheck.models import WeightedFactor, OVER, UNDER, TOSS_UP


def _run(player, game, logs, line, stat="points", defense_ranking=None, extra=None):
    season = compute_season_stats(logs, stat, player.id)
    return evaluate(player, game, logs, season, defense_ranking, stat, line, extra)


def _factor(direction, strength, weight=1.0):
    signal = {1: OVER, -1: UNDER, 0: "neutral"}[direction]
    return WeightedFactor(key="k", name="K", signal=signal, strength=strength, detail="", data_point="",
                          icon="", weight=weight, direction=direction, fired=strength > 0.1)


@pytest.mark.parametrize("sport,stat", [("nba", "points"), ("mlb", "hits"), ("nfl", "receiving_yards")])
def test_counts_always_sum_to_nine(sport, stat, make_player, make_game, make_logs):
    logs = make_logs([3, 1, 0, 2, 5, 1, 2], stat=stat)
    result = _run(make_player(sport=sport), make_game(sport=sport, total=9), logs, 1.5, stat=stat)
    assert result.over_count + result.under_count + result.neutral_count == 9
    assert len(result.factors) == len(result.weighted_factors) == 9


def test_empty_logs_nba_is_toss_up(make_player, make_game):
    result = _run(make_player(), make_game(), [], 20)
    assert result.neutral_count == 9
    assert result.lean.direction == TOSS_UP
    assert result.lean.confidence == 1
    assert result.lean.tier == "NEUTRAL"


@pytest.mark.parametrize("sport,stat", [("mlb", "hits"), ("nfl", "receiving_yards")])
def test_empty_logs_are_a_toss_up_in_every_sport(sport, stat, make_player, make_game):
    result = _run(make_player(sport=sport), make_game(sport=sport), [], 1.5, stat=stat)
    assert len(result.factors) == 9
    assert result.neutral_count == 9
    assert result.lean.direction == TOSS_UP
    assert result.lean.confidence == 1


def test_hot_scorer_leans_over(make_player, make_game, make_logs, defense):
    logs = make_logs([30] * 10, minutes=[36] * 10)
    result = _run(make_player(), make_game(total=235), logs, 20, defense_ranking=defense(25))
    assert result.over_count == 7
    assert result.under_count == 0
    assert result.lean.direction == OVER
    assert result.lean.confidence == 63
    assert result.lean.tier == "MODERATE"


def test_evaluate_is_pure(make_player, make_game, make_logs, defense):
    logs = make_logs([22, 31, 18, 25, 27, 19, 30], minutes=[34, 35, 30, 33, 36, 31, 32])
    player, game = make_player(), make_game(total=228, spread=-4)
    first = _run(player, game, logs, 24.5, defense_ranking=defense(8))
    second = _run(player, game, logs, 24.5, defense_ranking=defense(8))
    assert first.to_dict() == second.to_dict()
    assert logs[0].stats == {"points": 22}


def test_unknown_sport_uses_nba_factors(make_player, make_game, make_logs):
    result = _run(make_player(sport="nhl"), make_game(sport="nhl"), make_logs([2] * 5, stat="goals"), 1.5, "goals")
    assert [f.key for f in result.factors][:3] == ["recentTrend", "seasonAvg", "opponentDef"]


def test_lean_direction_and_tiers():
    strong_under = compute_lean([_factor(-1, 0.7)])
    assert strong_under.direction == UNDER
    assert strong_under.confidence == 70
    assert strong_under.tier == "STRONG"

    toss_up = compute_lean([_factor(1, 0.05)])
    assert toss_up.direction == TOSS_UP
    assert toss_up.confidence == 5
    assert toss_up.tier == "NEUTRAL"

    capped = compute_lean([_factor(1, 1.0), _factor(1, 1.0)])
    assert capped.confidence == 99


def test_wrong_factor_count_raises(monkeypatch, make_player, make_game):
    class Broken(SportFactorProvider):
        sport = "nba"

        def get_factors(self, factor_input, extra=None):
            return [_factor(0, 0.0)] * 8

    monkeypatch.setitem(factors.PROVIDERS, "nba", Broken())
    with pytest.raises(ConvergenceError):
        _run(make_player(), make_game(), [], 20)


@pytest.mark.parametrize("direction,expected", [(1, OVER), (-1, UNDER)])
def test_unanimous_full_strength_factors_with_nba_weights(direction, expected):
    factors_ = [_factor(direction, 1.0, weight) for weight in SPORT_FACTOR_WEIGHTS["nba"].values()]
    assert len(factors_) == 9

    assert abs(weighted_score(factors_)) * 100 == pytest.approx(100)
    lean = compute_lean(factors_)
    assert lean.direction == expected
    assert lean.confidence == 99
    assert lean.tier == "STRONG"
