"""
HeatCheck data model.

Plain dataclasses shared by the factor scorers, the convergence router and
the API layer. Every input type has a tolerant ``from_dict`` (missing
optional keys fall back to defaults, unknown keys are ignored) so request
bodies can be parsed without a schema library.

Game logs cross the engine boundary newest-first (``RecentGameLogs``).
Anything that needs oldest-first order (EWMA, timelines) converts with
``.reversed()`` into a ``ChronologicalGameLogs`` first.
"""
from dataclasses import dataclass, field, asdict, replace
from typing import Optional, Dict, List
import logging

logger = logging.getLogger(__name__)

OVER = "over"
UNDER = "under"
NEUTRAL = "neutral"
TOSS_UP = "toss-up"

SIGNALS = (OVER, UNDER, NEUTRAL)


def _float_or_none(value) -> Optional[float]:
    if value is None or value == "":
        return None
    return float(value)


def _int_or_none(value) -> Optional[int]:
    if value is None or value == "":
        return None
    return int(value)


def _require(data: dict, key: str, kind: str):
    if not isinstance(data, dict):
        raise ValueError(f"{kind} must be an object")
    if key not in data or data[key] is None:
        raise ValueError(f"{kind} is missing required field '{key}'")
    return data[key]


# ═══════════════════════════════════════════════════════════════════════
# CORE ENTITIES
# ═══════════════════════════════════════════════════════════════════════

@dataclass
class Team:
    id: str
    abbrev: str
    name: str = ""

    @classmethod
    def from_dict(cls, data: dict) -> "Team":
        return cls(
            id=str(_require(data, "id", "team")),
            abbrev=str(data.get("abbrev") or "").upper(),
            name=data.get("name") or "",
        )


@dataclass
class Player:
    id: str
    name: str
    team: Team
    position: str = ""
    sport: str = "nba"
    available_stats: List[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict) -> "Player":
        return cls(
            id=str(_require(data, "id", "player")),
            name=data.get("name") or "",
            team=Team.from_dict(_require(data, "team", "player")),
            position=data.get("position") or "",
            sport=(data.get("sport") or "nba").lower(),
            available_stats=list(data.get("available_stats") or []),
        )


@dataclass
class Game:
    id: str
    sport: str
    home_team: Team
    away_team: Team
    venue: str = ""
    date: str = ""
    spread: Optional[float] = None   # signed, negative favors home
    total: Optional[float] = None    # posted over/under

    @classmethod
    def from_dict(cls, data: dict) -> "Game":
        return cls(
            id=str(_require(data, "id", "game")),
            sport=(data.get("sport") or "nba").lower(),
            home_team=Team.from_dict(_require(data, "home_team", "game")),
            away_team=Team.from_dict(_require(data, "away_team", "game")),
            venue=data.get("venue") or "",
            date=data.get("date") or "",
            spread=_float_or_none(data.get("spread")),
            total=_float_or_none(data.get("total")),
        )


@dataclass
class GameLog:
    date: str
    opponent: str
    is_home: bool
    stats: Dict[str, float] = field(default_factory=dict)
    is_back_to_back: bool = False
    rest_days: Optional[int] = None
    minutes_played: Optional[float] = None
    opponent_def_rank: Optional[int] = None
    game_id: Optional[str] = None

    def stat(self, key: str) -> float:
        """Stat value for this game, 0 when not recorded."""
        value = self.stats.get(key)
        return float(value) if value is not None else 0.0

    @classmethod
    def from_dict(cls, data: dict) -> "GameLog":
        if not isinstance(data, dict):
            raise ValueError("game log must be an object")
        stats = {k: float(v) for k, v in (data.get("stats") or {}).items() if v is not None}
        return cls(
            date=data.get("date") or "",
            opponent=str(data.get("opponent") or "").upper(),
            is_home=bool(data.get("is_home", False)),
            stats=stats,
            is_back_to_back=bool(data.get("is_back_to_back", False)),
            rest_days=_int_or_none(data.get("rest_days")),
            minutes_played=_float_or_none(data.get("minutes_played")),
            opponent_def_rank=_int_or_none(data.get("opponent_def_rank")),
            game_id=data.get("game_id"),
        )


class _GameLogSequence:
    """Immutable, ordered view over a list of GameLog entries."""

    def __init__(self, games=None):
        self._games = tuple(games or ())

    def __len__(self):
        return len(self._games)

    def __iter__(self):
        return iter(self._games)

    def __bool__(self):
        return bool(self._games)

    def __getitem__(self, index):
        if isinstance(index, slice):
            return type(self)(self._games[index])
        return self._games[index]

    def __eq__(self, other):
        return type(self) is type(other) and self._games == other._games

    def __repr__(self):
        return f"{type(self).__name__}({len(self._games)} games)"

    def values(self, stat: str) -> List[float]:
        return [g.stat(stat) for g in self._games]

    def to_list(self) -> List[GameLog]:
        return list(self._games)


class RecentGameLogs(_GameLogSequence):
    """Game logs ordered newest-first (index 0 is the most recent game)."""

    @property
    def latest(self) -> Optional[GameLog]:
        return self._games[0] if self._games else None

    def window(self, n: int) -> "RecentGameLogs":
        """The n most recent games, still newest-first."""
        return RecentGameLogs(self._games[:max(0, n)])

    def reversed(self) -> "ChronologicalGameLogs":
        return ChronologicalGameLogs(reversed(self._games))


class ChronologicalGameLogs(_GameLogSequence):
    """Game logs ordered oldest-first, the order EWMA expects."""

    def reversed(self) -> RecentGameLogs:
        return RecentGameLogs(reversed(self._games))


def as_recent_logs(game_logs) -> RecentGameLogs:
    """Accept a RecentGameLogs or a newest-first list of GameLog/dict."""
    if isinstance(game_logs, RecentGameLogs):
        return game_logs
    if isinstance(game_logs, ChronologicalGameLogs):
        return game_logs.reversed()
    return RecentGameLogs(
        g if isinstance(g, GameLog) else GameLog.from_dict(g)
        for g in (game_logs or [])
    )


@dataclass
class SeasonStats:
    player_id: str
    stat: str
    average: float
    games_played: int = 0
    total: float = 0.0
    high: float = 0.0
    low: float = 0.0

    @classmethod
    def from_dict(cls, data: dict) -> "SeasonStats":
        return cls(
            player_id=str(data.get("player_id") or ""),
            stat=data.get("stat") or "",
            average=float(_require(data, "average", "season_stats")),
            games_played=int(data.get("games_played") or 0),
            total=float(data.get("total") or 0),
            high=float(data.get("high") or 0),
            low=float(data.get("low") or 0),
        )


@dataclass
class DefenseRanking:
    team_id: str
    team_abbrev: str
    rank: int                 # 1 = toughest defense, ascending = easier
    stats_allowed: float = 0.0
    position: str = ""
    stat: str = ""

    @classmethod
    def from_dict(cls, data: dict) -> "DefenseRanking":
        return cls(
            team_id=str(data.get("team_id") or ""),
            team_abbrev=str(data.get("team_abbrev") or "").upper(),
            rank=int(_require(data, "rank", "defense_ranking")),
            stats_allowed=float(data.get("stats_allowed") or 0),
            position=data.get("position") or "",
            stat=data.get("stat") or "",
        )


# ═══════════════════════════════════════════════════════════════════════
# SPORT EXTRA DATA
# ═══════════════════════════════════════════════════════════════════════

@dataclass
class WeatherData:
    wind_speed_mph: float = 0.0
    wind_direction: object = None   # 16-point compass string or degrees
    temp_f: float = 70.0
    humidity: Optional[float] = None
    condition: str = ""
    is_indoor: bool = False

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> Optional["WeatherData"]:
        if not data:
            return None
        return cls(
            wind_speed_mph=float(data.get("wind_speed_mph") or 0),
            wind_direction=data.get("wind_direction"),
            temp_f=float(data.get("temp_f") if data.get("temp_f") is not None else 70),
            humidity=_float_or_none(data.get("humidity")),
            condition=data.get("condition") or "",
            is_indoor=bool(data.get("is_indoor", False)),
        )


@dataclass
class OpposingPitcher:
    name: str = ""
    hand: str = "R"                 # throwing hand, "L" or "R"
    era: Optional[float] = None
    whip: Optional[float] = None
    fip: Optional[float] = None
    k_per_9: Optional[float] = None
    days_rest: Optional[int] = None

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> Optional["OpposingPitcher"]:
        if not data:
            return None
        return cls(
            name=data.get("name") or "",
            hand=(data.get("hand") or "R").upper()[:1],
            era=_float_or_none(data.get("era")),
            whip=_float_or_none(data.get("whip")),
            fip=_float_or_none(data.get("fip")),
            k_per_9=_float_or_none(data.get("k_per_9")),
            days_rest=_int_or_none(data.get("days_rest")),
        )


@dataclass
class PlatoonSplits:
    wrc_vs_lhp: Optional[float] = None   # wRC+ vs left-handed pitching
    wrc_vs_rhp: Optional[float] = None

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> Optional["PlatoonSplits"]:
        if not data:
            return None
        return cls(
            wrc_vs_lhp=_float_or_none(data.get("wrc_vs_lhp")),
            wrc_vs_rhp=_float_or_none(data.get("wrc_vs_rhp")),
        )


@dataclass
class MLBExtraData:
    weather: Optional[WeatherData] = None
    opposing_pitcher: Optional[OpposingPitcher] = None
    splits: Optional[PlatoonSplits] = None
    lineup_spot: Optional[int] = None

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> Optional["MLBExtraData"]:
        if not data:
            return None
        return cls(
            weather=WeatherData.from_dict(data.get("weather")),
            opposing_pitcher=OpposingPitcher.from_dict(data.get("opposing_pitcher")),
            splits=PlatoonSplits.from_dict(data.get("splits")),
            lineup_spot=_int_or_none(data.get("lineup_spot")),
        )


@dataclass
class NFLExtraData:
    weather: Optional[WeatherData] = None
    snap_pct: Optional[float] = None
    season_avg_snap_pct: Optional[float] = None
    target_share: Optional[float] = None
    season_avg_target_share: Optional[float] = None
    carries_share: Optional[float] = None
    season_avg_carries_share: Optional[float] = None
    is_divisional: bool = False

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> Optional["NFLExtraData"]:
        if not data:
            return None
        return cls(
            weather=WeatherData.from_dict(data.get("weather")),
            snap_pct=_float_or_none(data.get("snap_pct")),
            season_avg_snap_pct=_float_or_none(data.get("season_avg_snap_pct")),
            target_share=_float_or_none(data.get("target_share")),
            season_avg_target_share=_float_or_none(data.get("season_avg_target_share")),
            carries_share=_float_or_none(data.get("carries_share")),
            season_avg_carries_share=_float_or_none(data.get("season_avg_carries_share")),
            is_divisional=bool(data.get("is_divisional", False)),
        )


@dataclass
class ExtraData:
    """Sport-specific auxiliary inputs. Only the block matching the sport is read."""
    mlb: Optional[MLBExtraData] = None
    nfl: Optional[NFLExtraData] = None

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> Optional["ExtraData"]:
        if not data:
            return None
        return cls(
            mlb=MLBExtraData.from_dict(data.get("mlb")),
            nfl=NFLExtraData.from_dict(data.get("nfl")),
        )


@dataclass
class SlateExtraData:
    """
    Auxiliary data for one game as a SlateProvider returns it.

    - game: weather and the divisional flag, shared by both teams
    - players: usage, platoon splits and lineup spot keyed by player id
    - probable_pitchers: each team's starter keyed by that team's id

    ``for_player`` resolves the block a single player's factors read, so a
    batter always faces the other side's starter.
    """
    game: Optional[ExtraData] = None
    players: Dict[str, ExtraData] = field(default_factory=dict)
    probable_pitchers: Dict[str, OpposingPitcher] = field(default_factory=dict)

    def for_player(self, player: Player, game: Game) -> Optional[ExtraData]:
        own = self.players.get(player.id)
        shared = self.game
        is_home = player.team.id == game.home_team.id
        opponent_id = game.away_team.id if is_home else game.home_team.id

        mlb = _merge_mlb(
            shared.mlb if shared else None,
            own.mlb if own else None,
            self.probable_pitchers.get(opponent_id),
        )
        nfl = _merge_nfl(shared.nfl if shared else None, own.nfl if own else None)
        if mlb is None and nfl is None:
            return None
        return ExtraData(mlb=mlb, nfl=nfl)


def _merge_mlb(shared, own, opposing_pitcher) -> Optional[MLBExtraData]:
    if shared is None and own is None and opposing_pitcher is None:
        return None
    base = own or MLBExtraData()
    # a game-level pitcher is ambiguous between the two lineups and is ignored
    return replace(
        base,
        weather=(shared.weather if shared else None) or base.weather,
        opposing_pitcher=base.opposing_pitcher or opposing_pitcher,
    )


def _merge_nfl(shared, own) -> Optional[NFLExtraData]:
    if shared is None and own is None:
        return None
    base = own or NFLExtraData()
    return replace(
        base,
        weather=(shared.weather if shared else None) or base.weather,
        is_divisional=base.is_divisional or bool(shared and shared.is_divisional),
    )


# ═══════════════════════════════════════════════════════════════════════
# FACTOR + LEAN RESULTS
# ═══════════════════════════════════════════════════════════════════════

@dataclass
class FactorInput:
    player: Player
    game: Game
    game_logs: RecentGameLogs
    season_stats: SeasonStats
    defense_ranking: Optional[DefenseRanking]
    stat: str
    line: float
    is_home: bool


@dataclass
class FactorResult:
    signal: str         # over / under / neutral
    strength: float     # 0.0 to 1.0
    detail: str
    data_point: str

    def __post_init__(self):
        if self.signal not in SIGNALS:
            raise ValueError(f"invalid factor signal: {self.signal}")
        self.strength = min(1.0, max(0.0, float(self.strength)))


@dataclass
class ConvergenceFactor:
    """Flat factor shape kept for consumers that ignore weights."""
    key: str
    name: str
    signal: str
    strength: float
    detail: str
    data_point: str
    icon: str

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class WeightedFactor:
    key: str
    name: str
    signal: str
    strength: float
    detail: str
    data_point: str
    icon: str
    weight: float       # share of the sport's total, all nine sum to 1.0
    direction: int      # +1 over, -1 under, 0 neutral
    fired: bool         # has a direction and meaningful strength

    def to_dict(self) -> dict:
        return asdict(self)

    def as_convergence_factor(self) -> ConvergenceFactor:
        return ConvergenceFactor(
            key=self.key,
            name=self.name,
            signal=self.signal,
            strength=self.strength,
            detail=self.detail,
            data_point=self.data_point,
            icon=self.icon,
        )


@dataclass
class Lean:
    direction: str      # over / under / toss-up
    confidence: int     # 1-99
    tier: str           # STRONG / MODERATE / NEUTRAL
    factors: List[WeightedFactor] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "direction": self.direction,
            "confidence": self.confidence,
            "tier": self.tier,
            "factors": [f.to_dict() for f in self.factors],
        }


@dataclass
class ConvergenceResult:
    factors: List[ConvergenceFactor]
    weighted_factors: List[WeightedFactor]
    over_count: int
    under_count: int
    neutral_count: int
    lean: Lean

    def to_dict(self) -> dict:
        return {
            "factors": [f.to_dict() for f in self.factors],
            "weighted_factors": [f.to_dict() for f in self.weighted_factors],
            "over_count": self.over_count,
            "under_count": self.under_count,
            "neutral_count": self.neutral_count,
            "lean": {
                "direction": self.lean.direction,
                "confidence": self.lean.confidence,
                "tier": self.lean.tier,
            },
        }
