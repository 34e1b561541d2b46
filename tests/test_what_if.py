import copy

import pytest

from heatcheck.engine.convergence import evaluate
from heatcheck.engine.game_log import compute_season_stats
from heatcheck.engine.what_if import WhatIfModification, _change_venue, simulate
from heatcheck.models import OVER, UNDER


@pytest.fixture
def scenario(make_player, make_game, make_logs, defense):
    logs = make_logs([30] * 10, minutes=[36] * 10)
    player = make_player()
    return {
        "player": player,
        "game": make_game(total=235, spread=-4),
        "game_logs": logs,
        "season_stats": compute_season_stats(logs, "points", player.id),
        "defense_ranking": defense(25),
        "stat": "points",
    }


def _simulate(scenario, line, modifications):
    return simulate(
        scenario["player"], scenario["game"], scenario["game_logs"], scenario["season_stats"],
        scenario["defense_ranking"], scenario["stat"], line, modifications,
    )


def _signals(scenario, line):
    result = evaluate(
        scenario["player"], scenario["game"], scenario["game_logs"], scenario["season_stats"],
        scenario["defense_ranking"], scenario["stat"], line,
    )
    return {f.key: f.signal for f in result.factors}


def test_line_change_reports_exactly_the_flipped_factors(scenario):
    result = _simulate(scenario, 20, [{"type": "change_line", "value": 40}])

    before, after = _signals(scenario, 20), _signals(scenario, 40)
    expected = {k for k in before if before[k] != after[k]}
    changed = {c.factor_key for c in result.factor_changes if c.changed}

    assert changed == expected
    assert changed == {"recentTrend", "seasonAvg", "homeAway", "headToHead", "momentum"}
    assert result.changed_count == 5
    assert result.original_direction == OVER
    assert result.modified_direction == UNDER
    assert result.summary.startswith("5 factors changed: ")
    assert "Direction moved from over (7/9) to under" in result.summary


def test_no_modifications(scenario):
    result = _simulate(scenario, 20, [])
    assert result.changed_count == 0
    assert result.summary == "No factor signals changed with these modifications."
    assert result.original_lean == result.modified_lean


def test_inputs_are_not_mutated(scenario):
    logs_before = copy.deepcopy(scenario["game_logs"])
    game_before = copy.deepcopy(scenario["game"])
    ranking_before = copy.deepcopy(scenario["defense_ranking"])

    _simulate(scenario, 20, [
        {"type": "toggle_b2b", "value": True},
        {"type": "change_venue", "value": "away"},
        {"type": "change_opponent", "value": {"rank": 2}},
        WhatIfModification(type="change_rest_days", value=0),
    ])

    assert scenario["game_logs"] == logs_before
    assert scenario["game"] == game_before
    assert scenario["defense_ranking"] == ranking_before


def test_back_to_back_flips_rest(scenario):
    result = _simulate(scenario, 20, [{"type": "toggle_b2b", "value": True}])
    rest = next(c for c in result.factor_changes if c.factor_key == "restFatigue")
    assert rest.original_signal == "neutral"
    assert rest.modified_signal == UNDER
    assert rest.changed


def test_tougher_opponent_flips_defense(scenario):
    result = _simulate(scenario, 20, [{"type": "change_opponent", "value": {"rank": 3}}])
    defense = next(c for c in result.factor_changes if c.factor_key == "opponentDef")
    assert (defense.original_signal, defense.modified_signal) == (OVER, UNDER)


def test_change_venue_swaps_sides(make_player, make_game):
    player, game = make_player(), make_game(spread=-4)
    moved = _change_venue(game, player, "away")
    assert moved.away_team.id == player.team.id
    assert moved.home_team.abbrev == "BOS"
    assert moved.spread == 4
    assert _change_venue(game, player, "home") is game


@pytest.mark.parametrize("mod", [
    {"type": "change_weather", "value": 1},
    {"type": "change_venue", "value": "road"},
    {"type": "change_opponent", "value": {"stats_allowed": 20}},
    {"value": 3},
])
def test_invalid_modifications_raise(scenario, mod):
    with pytest.raises(ValueError):
        _simulate(scenario, 20, [mod])


def test_back_to_back_false_strings_do_not_flag_rest(scenario):
    for value in ("false", "no", "0", 0, False):
        result = _simulate(scenario, 20, [{"type": "toggle_b2b", "value": value}])
        rest = next(c for c in result.factor_changes if c.factor_key == "restFatigue")
        assert not rest.changed

    flagged = _simulate(scenario, 20, [{"type": "toggle_b2b", "value": "true"}])
    rest = next(c for c in flagged.factor_changes if c.factor_key == "restFatigue")
    assert rest.modified_signal == UNDER


@pytest.mark.parametrize("mod", [
    {"type": "change_line", "value": None},
    {"type": "change_line", "value": "abc"},
    {"type": "change_line", "value": -3},
    {"type": "change_line", "value": "nan"},
    {"type": "change_rest_days", "value": None},
    {"type": "change_rest_days", "value": -1},
    {"type": "change_rest_days", "value": 1.5},
    {"type": "toggle_b2b", "value": None},
    {"type": "toggle_b2b", "value": "maybe"},
])
def test_malformed_values_raise_value_error(scenario, mod):
    with pytest.raises(ValueError):
        _simulate(scenario, 20, [mod])


def test_raising_the_line_on_a_hot_22_point_scorer(make_player, make_game, make_logs, defense):
    # last ten at home vs BOS around 27, ten earlier road games vs NYK at 16
    recent = make_logs([28, 27, 29, 26, 28, 27, 30, 26, 28, 27], minutes=[34] * 10)
    older = make_logs([16] * 10, opponent="NYK", is_home=False, minutes=[34] * 10, start=10)
    logs = recent + older
    player = make_player()
    scenario = {
        "player": player,
        "game": make_game(total=240),
        "game_logs": logs,
        "season_stats": compute_season_stats(logs, "points", player.id),
        "defense_ranking": defense(24),
        "stat": "points",
    }
    assert scenario["season_stats"].average == pytest.approx(21.8)

    result = _simulate(scenario, 24.5, [{"type": "change_line", "value": 30}])

    before, after = _signals(scenario, 24.5), _signals(scenario, 30)
    expected = {k for k in before if before[k] != after[k]}
    changed = {c.factor_key for c in result.factor_changes if c.changed}
    assert changed == expected
    assert changed == {"recentTrend", "homeAway", "headToHead", "momentum"}
    assert after["headToHead"] == UNDER
    assert after["momentum"] == UNDER

    assert result.original_direction == OVER
    assert result.original_convergence == 6
    assert result.modified_direction == UNDER
    names = [c.factor_name for c in result.factor_changes if c.changed]
    assert result.summary.startswith(f"4 factors changed: {', '.join(names)}.")
    assert "Direction moved from over (6/9) to under (3/9)" in result.summary
