from datetime import date, timedelta

import pytest

from heatcheck.engine.convergence import build_factor_input
from heatcheck.engine.game_log import compute_season_stats
from heatcheck.models import DefenseRanking, Game, GameLog, Player, Team


def _team(abbrev: str) -> Team:
    return Team(id=abbrev.lower(), abbrev=abbrev, name=abbrev)


@pytest.fixture
def make_player():
    def _make(sport="nba", team="LAL", position="SF", player_id="p1", name="Test Player"):
        return Player(id=player_id, name=name, team=_team(team), position=position, sport=sport)
    return _make


@pytest.fixture
def make_game():
    def _make(sport="nba", home="LAL", away="BOS", spread=None, total=None, venue="", game_id="g1"):
        return Game(
            id=game_id,
            sport=sport,
            home_team=_team(home),
            away_team=_team(away),
            venue=venue,
            date="2025-03-20",
            spread=spread,
            total=total,
        )
    return _make


@pytest.fixture
def make_logs():
    """Newest-first logs, one game every two days counting back from 2025-03-18."""
    def _make(values, stat="points", opponent="BOS", is_home=True, minutes=None, rest_days=None, start=0):
        logs = []
        for i, value in enumerate(values, start):
            logs.append(GameLog(
                date=(date(2025, 3, 18) - timedelta(days=2 * i)).isoformat(),
                opponent=opponent,
                is_home=is_home,
                stats={stat: value},
                minutes_played=minutes[i - start] if minutes else None,
                rest_days=rest_days[i - start] if rest_days else None,
                game_id=f"log{i}",
            ))
        return logs
    return _make


@pytest.fixture
def defense():
    def _make(rank, stats_allowed=22.5, stat="points"):
        return DefenseRanking(team_id="bos", team_abbrev="BOS", rank=rank,
                              stats_allowed=stats_allowed, position="SF", stat=stat)
    return _make


@pytest.fixture
def factor_input(make_player, make_game):
    """Build a FactorInput the same way the convergence router does."""
    def _make(logs, line, stat="points", player=None, game=None, defense_ranking=None):
        player = player or make_player()
        game = game or make_game()
        season = compute_season_stats(logs, stat, player.id)
        return build_factor_input(player, game, logs, season, defense_ranking, stat, line)
    return _make
