import pytest

from heatcheck.engine.game_log import (
    build_game_log_timeline,
    compute_heat_ring,
    compute_season_stats,
    get_avg_margin,
    get_hit_rate,
    stat_volatility,
)
from heatcheck.models import GameLog, RecentGameLogs


def test_season_stats(make_logs):
    stats = compute_season_stats(make_logs([10, 20, 30]), "points", "p1")
    assert stats.average == 20
    assert stats.games_played == 3
    assert stats.total == 60
    assert (stats.high, stats.low) == (30, 10)

    empty = compute_season_stats([], "points")
    assert empty.average == 0.0
    assert empty.games_played == 0


def test_hit_rate_is_strictly_over(make_logs):
    logs = make_logs([20, 25, 15])
    assert get_hit_rate(logs, "points", 20) == pytest.approx(1 / 3)
    assert get_avg_margin(logs, "points", 20) == 0
    assert get_hit_rate([], "points", 20) == 0.0


def test_hit_rate_window_uses_most_recent_games(make_logs):
    logs = make_logs([30] * 10 + [0] * 5)
    assert get_hit_rate(logs, "points", 20, 10) == 1.0
    assert get_hit_rate(logs, "points", 20) == pytest.approx(10 / 15)


def test_heat_ring(make_logs):
    ring = compute_heat_ring(make_logs([25, 22, 18, 25]), "points", 20)
    agg = ring["aggregates"]
    assert agg["hit_count"] == 3
    assert agg["total_games"] == 4
    assert agg["hit_rate"] == 0.75
    assert agg["avg_value"] == 22.5
    assert agg["avg_margin"] == 2.5
    assert agg["streak"] == 2
    assert ring["games"][0]["actual_value"] == 25
    assert ring["games"][2]["is_hit"] is False


def test_heat_ring_caps_games(make_logs):
    ring = compute_heat_ring(make_logs(list(range(15))), "points", 5, max_games=10)
    assert len(ring["games"]) == 10


def test_timeline_is_oldest_first_with_markers():
    logs = RecentGameLogs([
        GameLog(date="2025-03-20", opponent="NYK", is_home=True, stats={"points": 30}, rest_days=3),
        GameLog(date="2025-03-10", opponent="MIA", is_home=False, stats={"points": 20}),
        GameLog(date="2025-03-09", opponent="BOS", is_home=True, stats={"points": 10}, is_back_to_back=True),
    ])
    timeline = build_game_log_timeline(logs, "points", moving_avg_window=2)
    assert [g["value"] for g in timeline["games"]] == [10, 20, 30]
    assert timeline["moving_average"] == [10, 15, 25]
    assert timeline["season_average"] == 20

    types = [[m["type"] for m in g["markers"]] for g in timeline["games"]]
    assert types[0] == ["back_to_back"]
    assert types[1] == []
    assert types[2] == ["rest_advantage", "injury_return"]


def test_volatility(make_logs):
    assert stat_volatility(make_logs([20, 20, 20]), "points") == 1
    assert stat_volatility(make_logs([0, 2]), "points") == 10
