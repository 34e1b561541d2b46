"""
HeatCheck FastAPI Server

Provides REST API endpoints for the frontend:
- Sports, factor weights and EWMA alphas
- Single prop check (convergence + verdict + heat ring + timeline)
- What-if scenarios
- HeatCheck board from pre-resolved slate candidates
"""
from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from datetime import datetime, timezone
import logging

from heatcheck import __version__
from heatcheck.config import (
    BOARD_CACHE_TTL_SECONDS,
    BOARD_SIZE,
    EWMA_ALPHA,
    LOOKBACK,
    SPORT_FACTOR_WEIGHTS,
    SUPPORTED_SPORTS,
)
from heatcheck.data_sources.cache import TTLCache
from heatcheck.engine.heatcheck import HeatCheckBoard, SlateCandidate, scan_slate
from heatcheck.engine.prop_check import check_prop
from heatcheck.engine.what_if import simulate
from heatcheck.engine.game_log import compute_season_stats
from heatcheck.models import (
    DefenseRanking,
    ExtraData,
    Game,
    GameLog,
    Player,
    SeasonStats,
    as_recent_logs,
)

logger = logging.getLogger(__name__)

app = FastAPI(
    title="HeatCheck API",
    description="Sport-aware prop convergence engine",
    version=__version__,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Boards keyed by sport; a new POST with candidates always replaces the entry.
board_cache = TTLCache(ttl_seconds=BOARD_CACHE_TTL_SECONDS)


# =============================================================================
# REQUEST PARSING
# =============================================================================

def _require(request: dict, key: str):
    if not isinstance(request, dict):
        raise HTTPException(status_code=400, detail="Request body must be a JSON object")
    value = request.get(key)
    if value is None:
        raise HTTPException(status_code=400, detail=f"Missing required field '{key}'")
    return value


def _parse_line(request: dict, key: str = "line") -> float:
    try:
        return float(_require(request, key))
    except (TypeError, ValueError):
        raise HTTPException(status_code=400, detail=f"'{key}' must be a number")


def _parse_prop_context(request: dict) -> dict:
    """Shared parsing for check-prop and what-if bodies."""
    player = Player.from_dict(_require(request, "player"))
    game = Game.from_dict(_require(request, "game"))
    game_logs = as_recent_logs([GameLog.from_dict(g) for g in request.get("game_logs") or []])
    stat = str(_require(request, "stat"))

    ranking = request.get("defense_ranking")
    defense_ranking = DefenseRanking.from_dict(ranking) if ranking else None

    season = request.get("season_stats")
    season_stats = SeasonStats.from_dict(season) if season else None

    return {
        "player": player,
        "game": game,
        "game_logs": game_logs,
        "stat": stat,
        "defense_ranking": defense_ranking,
        "season_stats": season_stats,
        "extra": ExtraData.from_dict(request.get("extra")),
    }


def _parse_candidate(data: dict) -> SlateCandidate:
    rankings = data.get("defense_rankings") or {}
    return SlateCandidate(
        player=Player.from_dict(_require(data, "player")),
        game=Game.from_dict(_require(data, "game")),
        game_logs=[GameLog.from_dict(g) for g in data.get("game_logs") or []],
        defense_rankings={stat: DefenseRanking.from_dict(r) for stat, r in rankings.items() if r},
        extra=ExtraData.from_dict(data.get("extra")),
    )


# =============================================================================
# ENDPOINTS
# =============================================================================

@app.get("/")
def root():
    return {
        "status": "ok",
        "service": "HeatCheck API",
        "version": __version__,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


@app.get("/api/sports")
def get_sports():
    """Supported sports with their factor weights and EWMA settings."""
    return {
        "sports": [
            {
                "key": sport,
                "weights": SPORT_FACTOR_WEIGHTS[sport],
                "ewma_alpha": EWMA_ALPHA[sport],
                "lookback": LOOKBACK[sport],
            }
            for sport in SUPPORTED_SPORTS
        ]
    }


@app.post("/api/check-prop")
def check_prop_endpoint(request: dict):
    """
    Analyze a single prop line.

    Body: player, game, game_logs (newest-first), stat, line, and optional
    defense_ranking, season_stats, extra.
    """
    try:
        ctx = _parse_prop_context(request)
        line = _parse_line(request)
        return check_prop(
            ctx["player"],
            ctx["game"],
            ctx["game_logs"],
            ctx["stat"],
            line,
            defense_ranking=ctx["defense_ranking"],
            season_stats=ctx["season_stats"],
            extra=ctx["extra"],
        )
    except HTTPException:
        raise
    except (ValueError, TypeError, KeyError) as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error(f"Error checking prop: {e}")
        raise HTTPException(status_code=500, detail=str(e))


@app.post("/api/what-if")
def what_if_endpoint(request: dict):
    """
    Re-run a prop under hypothetical changes.

    Body: same as check-prop plus modifications: [{type, value}, ...].
    """
    try:
        ctx = _parse_prop_context(request)
        line = _parse_line(request)
        modifications = request.get("modifications") or []
        if not isinstance(modifications, list):
            raise HTTPException(status_code=400, detail="'modifications' must be a list")

        season_stats = ctx["season_stats"] or compute_season_stats(
            ctx["game_logs"], ctx["stat"], ctx["player"].id
        )
        result = simulate(
            ctx["player"],
            ctx["game"],
            ctx["game_logs"],
            season_stats,
            ctx["defense_ranking"],
            ctx["stat"],
            line,
            modifications,
            ctx["extra"],
        )
        return result.to_dict()
    except HTTPException:
        raise
    except (ValueError, TypeError, KeyError) as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error(f"Error running what-if: {e}")
        raise HTTPException(status_code=500, detail=str(e))


def _parse_limit(value) -> int:
    """Board size from the request: default BOARD_SIZE, capped at BOARD_SIZE."""
    if value is None:
        return BOARD_SIZE
    if isinstance(value, bool) or not isinstance(value, (int, float, str)):
        raise HTTPException(status_code=400, detail=f"'limit' must be an integer, got {value!r}")
    try:
        limit = int(value)
    except (ValueError, OverflowError):
        raise HTTPException(status_code=400, detail=f"'limit' must be an integer, got {value!r}")
    if limit < 1:
        raise HTTPException(status_code=400, detail=f"'limit' must be at least 1, got {limit}")
    return min(limit, BOARD_SIZE)


@app.post("/api/heatcheck/{sport}")
def heatcheck_endpoint(sport: str, request: dict):
    """
    Rank a slate of pre-resolved candidates into the HeatCheck board.

    Body: candidates: [{player, game, game_logs, defense_rankings, extra}],
    optional limit.
    """
    sport = sport.lower()
    if sport not in SUPPORTED_SPORTS:
        raise HTTPException(status_code=400, detail=f"Unsupported sport: {sport}")

    try:
        raw = request.get("candidates") if isinstance(request, dict) else None
        if not isinstance(raw, list):
            raise HTTPException(status_code=400, detail="'candidates' must be a list")
        limit = _parse_limit(request.get("limit"))

        candidates = [_parse_candidate(c) for c in raw]
        picks = scan_slate(candidates, sport, limit)

        board = HeatCheckBoard(
            sport=sport,
            generated_at=datetime.now(timezone.utc).isoformat(),
            games_scanned=len({c.game.id for c in candidates}),
            players_scanned=len({c.player.id for c in candidates}),
            picks=picks,
        )
        board_cache.set(sport, board)
        logger.info(f"[HeatCheck] API board for {sport}: {len(picks)} picks from {len(candidates)} candidates")
        return board.to_dict()
    except HTTPException:
        raise
    except (ValueError, TypeError, KeyError) as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error(f"Error generating HeatCheck board: {e}")
        raise HTTPException(status_code=500, detail=str(e))


@app.get("/api/heatcheck/{sport}")
def get_cached_board(sport: str):
    """Most recent board for a sport while it is still fresh."""
    board = board_cache.get(sport.lower())
    if board is None:
        raise HTTPException(
            status_code=404,
            detail=f"No fresh {sport} board. POST /api/heatcheck/{sport} to generate one.",
        )
    return board.to_dict()
