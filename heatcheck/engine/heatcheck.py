"""
HeatCheck Slate Scanner

Scans tonight's slate, projects every (player, core stat) pair, validates
it with the convergence engine and surfaces the strongest edges.

Flow: games -> rosters -> game logs -> extra data -> project -> converge -> rank

Per pick:
- projection = 0.4·season avg + 0.4·EWMA(L10) + 0.2·season avg·(1 + matchup adj)
  where matchup adj = (defense rank - 15) / 15 · 0.10
- convergence runs with the season average as the reference line, so the
  lean says whether tonight's context pushes above or below the baseline
- picks under MIN_PICK_CONFIDENCE are dropped
- composite = confidence × 1.15 (trend agrees with lean)
              × 1.10 / 1.05 (opponent rank >= 26 / >= 22)
              × 0.7 (no lean)
"""
import asyncio
import logging
from dataclasses import dataclass, field, replace, asdict
from datetime import datetime, timezone
from typing import Dict, List, Optional

from heatcheck.config import (
    BOARD_SIZE,
    COMPOSITE_MULTIPLIERS,
    CORE_STATS,
    EWMA_ALPHA,
    DEFAULT_SPORT,
    FETCH_CONCURRENCY,
    MAX_PLAYERS_PER_TEAM,
    MIN_PICK_CONFIDENCE,
    NEUTRAL_DEFENSE_RANK,
    RELEVANT_POSITIONS,
    get_stat_label,
)
from heatcheck.data_sources.cache import TTLCache
from heatcheck.data_sources.provider import SlateProvider
from heatcheck.engine.convergence import evaluate
from heatcheck.engine.game_log import compute_season_stats
from heatcheck.math_utils import ewma, mean, round_half_up
from heatcheck.models import (
    DefenseRanking,
    ExtraData,
    Game,
    GameLog,
    Player,
    as_recent_logs,
    OVER,
    UNDER,
    TOSS_UP,
)

logger = logging.getLogger(__name__)

MIN_GAMES = 5
MIN_SEASON_AVG = 0.5
MAX_NARRATIVES = 2


@dataclass
class HeatCheckPick:
    rank: int
    player: Player
    game: Game
    stat: str
    stat_label: str
    projection: float
    season_avg: float
    last5_avg: float
    ewma_recent: float
    matchup_adj: float          # percent, e.g. 6.7 = +6.7%
    defense_rank: int
    confidence: int
    composite_score: float
    convergence_over: int
    convergence_under: int
    convergence_lean: str       # over / under / toss-up
    trend: str                  # hot / cold / steady
    narratives: List[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class SlateCandidate:
    """One player's pre-fetched inputs for a pure (non-async) scan."""
    player: Player
    game: Game
    game_logs: List[GameLog]
    defense_rankings: Dict[str, DefenseRanking] = field(default_factory=dict)  # stat -> ranking
    extra: Optional[ExtraData] = None


@dataclass
class HeatCheckBoard:
    sport: str
    generated_at: str
    games_scanned: int
    players_scanned: int
    picks: List[HeatCheckPick] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "sport": self.sport,
            "generated_at": self.generated_at,
            "games_scanned": self.games_scanned,
            "players_scanned": self.players_scanned,
            "picks": [p.to_dict() for p in self.picks],
        }


def _round1(value: float) -> float:
    return round_half_up(value * 10) / 10


def project(season_avg: float, ewma_l10: float, defense_rank: int) -> float:
    matchup_adj = (defense_rank - NEUTRAL_DEFENSE_RANK) / NEUTRAL_DEFENSE_RANK * 0.10
    return season_avg * 0.4 + ewma_l10 * 0.4 + season_avg * (1 + matchup_adj) * 0.2


def detect_trend(last5_avg: float, season_avg: float) -> str:
    threshold = season_avg * 0.1
    if last5_avg > season_avg + threshold:
        return "hot"
    if last5_avg < season_avg - threshold:
        return "cold"
    return "steady"


def composite_score(confidence: float, trend: str, lean: str, defense_rank: int) -> float:
    score = float(confidence)
    if (trend == "hot" and lean == OVER) or (trend == "cold" and lean == UNDER):
        score *= COMPOSITE_MULTIPLIERS["trend_aligned"]
    if defense_rank >= 26:
        score *= COMPOSITE_MULTIPLIERS["weak_defense"]
    elif defense_rank >= 22:
        score *= COMPOSITE_MULTIPLIERS["soft_defense"]
    if lean == TOSS_UP:
        score *= COMPOSITE_MULTIPLIERS["neutral_lean"]
    return round_half_up(score * 100) / 100


def build_narratives(last5_values: List[float], season_avg: float, defense_rank: int, trend: str) -> List[str]:
    narratives = []
    above = sum(1 for v in last5_values if v > season_avg)
    if above >= 4:
        narratives.append(f"{above}/5 above avg")
    if defense_rank >= 26:
        narratives.append("vs weak DEF")
    elif defense_rank <= 5:
        narratives.append("vs elite DEF")
    if trend == "hot":
        narratives.append("trending up")
    elif trend == "cold":
        narratives.append("cooling off")
    return narratives[:MAX_NARRATIVES]


def evaluate_pick(
    player: Player,
    game: Game,
    game_logs,
    stat: str,
    defense_ranking: Optional[DefenseRanking] = None,
    extra: Optional[ExtraData] = None,
) -> Optional[HeatCheckPick]:
    """Project and validate one player × stat. Returns None when it doesn't qualify."""
    logs = as_recent_logs(game_logs)
    if len(logs) < MIN_GAMES:
        return None

    values = logs.values(stat)
    if all(v == 0 for v in values):
        return None

    season_stats = compute_season_stats(logs, stat, player.id)
    season_avg = season_stats.average
    if season_avg < MIN_SEASON_AVG:
        return None

    sport = (player.sport or DEFAULT_SPORT).lower()
    last5_values = logs.window(5).values(stat)
    last5_avg = mean(last5_values)
    ewma_l10 = ewma(logs.window(10).reversed().values(stat), EWMA_ALPHA.get(sport, EWMA_ALPHA[DEFAULT_SPORT]))

    if defense_ranking is None:
        defense_ranking = DefenseRanking(
            team_id="", team_abbrev="", rank=NEUTRAL_DEFENSE_RANK,
            position=player.position, stat=stat,
        )
    rank = defense_ranking.rank
    matchup_adj = (rank - NEUTRAL_DEFENSE_RANK) / NEUTRAL_DEFENSE_RANK * 0.10

    convergence = evaluate(player, game, logs, season_stats, defense_ranking, stat, season_avg, extra)
    confidence = convergence.lean.confidence
    if confidence < MIN_PICK_CONFIDENCE:
        return None

    lean = convergence.lean.direction
    trend = detect_trend(last5_avg, season_avg)

    return HeatCheckPick(
        rank=0,
        player=player,
        game=game,
        stat=stat,
        stat_label=get_stat_label(sport, stat),
        projection=_round1(project(season_avg, ewma_l10, rank)),
        season_avg=_round1(season_avg),
        last5_avg=_round1(last5_avg),
        ewma_recent=_round1(ewma_l10),
        matchup_adj=round_half_up(matchup_adj * 1000) / 10,
        defense_rank=rank,
        confidence=confidence,
        composite_score=composite_score(confidence, trend, lean, rank),
        convergence_over=convergence.over_count,
        convergence_under=convergence.under_count,
        convergence_lean=lean,
        trend=trend,
        narratives=build_narratives(last5_values, season_avg, rank, trend),
    )


def rank_picks(picks: List[HeatCheckPick], limit: int = BOARD_SIZE) -> List[HeatCheckPick]:
    ordered = sorted(picks, key=lambda p: p.composite_score, reverse=True)[:limit]
    return [replace(pick, rank=i + 1) for i, pick in enumerate(ordered)]


def scan_slate(candidates: List[SlateCandidate], sport: str, limit: int = BOARD_SIZE) -> List[HeatCheckPick]:
    """Evaluate every candidate × core stat and return the ranked top picks."""
    stats = CORE_STATS.get(sport.lower(), [])
    picks = []
    for candidate in candidates:
        for stat in stats:
            try:
                pick = evaluate_pick(
                    candidate.player,
                    candidate.game,
                    candidate.game_logs,
                    stat,
                    candidate.defense_rankings.get(stat),
                    candidate.extra,
                )
            except Exception as e:
                logger.warning(f"[HeatCheck] Skipping {candidate.player.name} {stat}: {e}")
                continue
            if pick:
                picks.append(pick)
    return rank_picks(picks, limit)


def find_game_for_player(player: Player, games: List[Game]) -> Optional[Game]:
    for game in games:
        if player.team.id in (game.home_team.id, game.away_team.id):
            return game
    return None


class HeatCheckScanner:
    """
    Builds the nightly board from a SlateProvider.

    Fetches are async and bounded by a semaphore; each provider failure is
    logged and the scan continues with partial input. Boards are cached
    per sport for the cache's TTL.
    """

    def __init__(
        self,
        provider: SlateProvider,
        cache: Optional[TTLCache] = None,
        concurrency: int = FETCH_CONCURRENCY,
        board_size: int = BOARD_SIZE,
    ):
        self.provider = provider
        self.cache = cache if cache is not None else TTLCache()
        self.concurrency = max(1, concurrency)
        self.board_size = board_size

    def _empty_board(self, sport: str, games_scanned: int = 0, players_scanned: int = 0) -> HeatCheckBoard:
        return HeatCheckBoard(
            sport=sport,
            generated_at=datetime.now(timezone.utc).isoformat(),
            games_scanned=games_scanned,
            players_scanned=players_scanned,
        )

    async def _bounded(self, semaphore, coro_fn, *args, label=""):
        async with semaphore:
            try:
                return await coro_fn(*args)
            except Exception as e:
                logger.warning(f"[HeatCheck] {label} failed: {e}")
                return None

    async def _fetch_players(self, sport: str, games: List[Game], semaphore) -> List[Player]:
        teams = {}
        for game in games:
            teams[game.home_team.id] = game.home_team
            teams[game.away_team.id] = game.away_team

        rosters = await asyncio.gather(*[
            self._bounded(semaphore, self.provider.get_roster, team, sport, label=f"roster {team.abbrev}")
            for team in teams.values()
        ])

        positions = RELEVANT_POSITIONS.get(sport, [])
        cap = MAX_PLAYERS_PER_TEAM.get(sport, 8)
        players = []
        for team, roster in zip(teams.values(), rosters):
            eligible = [p for p in (roster or []) if p.position in positions][:cap]
            # the game's team record is the canonical one
            players.extend(replace(p, team=team, sport=sport) for p in eligible)
        return players

    async def generate_board(self, sport: str) -> HeatCheckBoard:
        sport = sport.lower()
        cached = self.cache.get(sport)
        if cached is not None:
            logger.debug(f"[HeatCheck] Serving cached {sport} board")
            return cached

        semaphore = asyncio.Semaphore(self.concurrency)

        try:
            games = await self.provider.get_games(sport)
        except Exception as e:
            logger.warning(f"[HeatCheck] Could not load {sport} games: {e}")
            games = []
        if not games:
            return self._empty_board(sport)

        players = await self._fetch_players(sport, games, semaphore)
        if not players:
            return self._empty_board(sport, games_scanned=len(games))

        logs = await asyncio.gather(*[
            self._bounded(semaphore, self.provider.get_game_logs, p, label=f"game logs {p.name}")
            for p in players
        ])
        logs_by_player = {p.id: fetched for p, fetched in zip(players, logs) if fetched}

        extras = await asyncio.gather(*[
            self._bounded(
                semaphore, self.provider.get_extra_data, g,
                [p for p in players if p.team.id in (g.home_team.id, g.away_team.id)],
                label=f"extra data {g.id}",
            )
            for g in games
        ])
        extra_by_game = {g.id: e for g, e in zip(games, extras)}

        stats = CORE_STATS.get(sport, [])
        eligible = []
        for player in players:
            game_logs = logs_by_player.get(player.id)
            if not game_logs or len(game_logs) < MIN_GAMES:
                continue
            game = find_game_for_player(player, games)
            if game is not None:
                eligible.append((player, game, game_logs))

        rankings = await asyncio.gather(*[
            self._bounded(semaphore, self.provider.get_defense_ranking, player, game, stat,
                          label=f"defense ranking {player.name} {stat}")
            for player, game, _ in eligible
            for stat in stats
        ])

        candidates = []
        for i, (player, game, game_logs) in enumerate(eligible):
            player_rankings = rankings[i * len(stats):(i + 1) * len(stats)]
            slate_extra = extra_by_game.get(game.id)
            candidates.append(SlateCandidate(
                player=player,
                game=game,
                game_logs=game_logs,
                defense_rankings={s: r for s, r in zip(stats, player_rankings) if r is not None},
                extra=slate_extra.for_player(player, game) if slate_extra else None,
            ))

        board = HeatCheckBoard(
            sport=sport,
            generated_at=datetime.now(timezone.utc).isoformat(),
            games_scanned=len(games),
            players_scanned=len(players),
            picks=scan_slate(candidates, sport, self.board_size),
        )
        self.cache.set(sport, board)
        logger.info(
            f"[HeatCheck] {sport} board: {len(games)} games, {len(players)} players, {len(board.picks)} picks"
        )
        return board
