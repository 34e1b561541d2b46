"""
Slate data provider interface.

The scanner never talks to ESPN, MLB Stats or a weather API directly; it
asks a SlateProvider. Implementations own parsing, retries and auth.
Any method may raise; the scanner logs the failure and carries on with
whatever it has.
"""
from abc import ABC, abstractmethod
from typing import List, Optional

from heatcheck.models import DefenseRanking, Game, GameLog, Player, SlateExtraData, Team


class SlateProvider(ABC):

    @abstractmethod
    async def get_games(self, sport: str) -> List[Game]:
        """Tonight's games that have not started or finished."""

    @abstractmethod
    async def get_roster(self, team: Team, sport: str) -> List[Player]:
        """Active players for a team, in depth-chart order."""

    @abstractmethod
    async def get_game_logs(self, player: Player) -> List[GameLog]:
        """Season game logs, newest-first."""

    async def get_defense_ranking(self, player: Player, game: Game, stat: str) -> Optional[DefenseRanking]:
        """Opponent's rank defending the player's position for a stat."""
        return None

    async def get_extra_data(self, game: Game, players: List[Player]) -> Optional[SlateExtraData]:
        """
        Auxiliary data for one game: shared weather, per-player usage and
        splits for ``players``, and each team's probable starter.
        """
        return None
