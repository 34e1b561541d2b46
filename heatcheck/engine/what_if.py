"""
What-If Simulator

Re-runs the convergence router under hypothetical changes (line,
opponent defense, venue, rest) and reports which factor signals flipped.

Supported modifications, applied in order:
- change_line       positive number: new prop line
- change_opponent   {rank, stats_allowed}: override the defense ranking
- change_venue      "home" | "away": put the player's team on that side
- toggle_b2b        bool or "true"/"false": newest game is (not) a back-to-back
- change_rest_days  non-negative int: rest before the newest game (0 means B2B)

Inputs are never mutated; modified copies are built with
dataclasses.replace.
"""
import logging
import math
from dataclasses import dataclass, field, replace, asdict
from typing import List, Optional

from heatcheck.engine.convergence import evaluate, FACTOR_COUNT
from heatcheck.models import (
    ConvergenceResult,
    DefenseRanking,
    ExtraData,
    Game,
    Player,
    SeasonStats,
    as_recent_logs,
    OVER,
    UNDER,
    TOSS_UP,
)

logger = logging.getLogger(__name__)

MODIFICATION_TYPES = (
    "change_line",
    "change_opponent",
    "change_venue",
    "toggle_b2b",
    "change_rest_days",
)


@dataclass
class WhatIfModification:
    type: str
    value: object

    @classmethod
    def from_dict(cls, data: dict) -> "WhatIfModification":
        if not isinstance(data, dict) or "type" not in data:
            raise ValueError("modification must be an object with a 'type'")
        return cls(type=data["type"], value=data.get("value"))


@dataclass
class FactorChange:
    factor_key: str
    factor_name: str
    original_signal: str
    modified_signal: str
    changed: bool


@dataclass
class WhatIfResult:
    original_convergence: int
    modified_convergence: int
    original_direction: str
    modified_direction: str
    original_lean: dict
    modified_lean: dict
    factor_changes: List[FactorChange] = field(default_factory=list)
    summary: str = ""

    @property
    def changed_count(self) -> int:
        return sum(1 for c in self.factor_changes if c.changed)

    def to_dict(self) -> dict:
        data = asdict(self)
        data["changed_count"] = self.changed_count
        return data


@dataclass
class _Scenario:
    game: Game
    game_logs: object
    defense_ranking: Optional[DefenseRanking]
    line: float


def count_direction(result: ConvergenceResult) -> str:
    if result.over_count > result.under_count:
        return OVER
    if result.under_count > result.over_count:
        return UNDER
    return TOSS_UP


def _convergence(result: ConvergenceResult) -> int:
    return max(result.over_count, result.under_count)


def _change_venue(game: Game, player: Player, venue: str) -> Game:
    if venue not in ("home", "away"):
        raise ValueError(f"change_venue expects 'home' or 'away', got {venue!r}")
    is_home = game.home_team.id == player.team.id
    if (venue == "home") == is_home:
        return game
    return replace(
        game,
        home_team=game.away_team,
        away_team=game.home_team,
        spread=-game.spread if game.spread is not None else None,
    )


def _modify_latest_log(game_logs, **changes):
    logs = as_recent_logs(game_logs).to_list()
    if not logs:
        return logs
    logs[0] = replace(logs[0], **changes)
    return logs


_TRUE_STRINGS = ("true", "yes", "1")
_FALSE_STRINGS = ("false", "no", "0")


def _parse_bool(value, mod_type: str) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)) and value in (0, 1):
        return bool(value)
    if isinstance(value, str):
        text = value.strip().lower()
        if text in _TRUE_STRINGS:
            return True
        if text in _FALSE_STRINGS:
            return False
    raise ValueError(f"{mod_type} expects true or false, got {value!r}")


def _parse_number(value, mod_type: str) -> float:
    if value is None or isinstance(value, bool):
        raise ValueError(f"{mod_type} expects a number, got {value!r}")
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValueError(f"{mod_type} expects a number, got {value!r}")
    if not math.isfinite(number):
        raise ValueError(f"{mod_type} expects a finite number, got {value!r}")
    return number


def apply_modification(scenario: _Scenario, player: Player, mod: WhatIfModification) -> _Scenario:
    if mod.type == "change_line":
        line = _parse_number(mod.value, mod.type)
        if line <= 0:
            raise ValueError(f"change_line expects a positive line, got {mod.value!r}")
        return replace(scenario, line=line)

    if mod.type == "change_opponent":
        value = mod.value or {}
        if not isinstance(value, dict) or value.get("rank") is None:
            raise ValueError("change_opponent expects an object with 'rank'")
        base = scenario.defense_ranking or DefenseRanking(team_id="", team_abbrev="", rank=15)
        ranking = replace(
            base,
            rank=int(value["rank"]),
            stats_allowed=float(value.get("stats_allowed", base.stats_allowed) or 0),
        )
        return replace(scenario, defense_ranking=ranking)

    if mod.type == "change_venue":
        return replace(scenario, game=_change_venue(scenario.game, player, mod.value))

    if mod.type == "toggle_b2b":
        is_b2b = _parse_bool(mod.value, mod.type)
        changes = {"is_back_to_back": is_b2b}
        if is_b2b:
            changes["rest_days"] = 0
        return replace(scenario, game_logs=_modify_latest_log(scenario.game_logs, **changes))

    if mod.type == "change_rest_days":
        rest = _parse_number(mod.value, mod.type)
        if rest < 0 or rest != int(rest):
            raise ValueError(f"change_rest_days expects a whole number of days, got {mod.value!r}")
        rest = int(rest)
        return replace(
            scenario,
            game_logs=_modify_latest_log(scenario.game_logs, rest_days=rest, is_back_to_back=rest == 0),
        )

    raise ValueError(f"Unknown modification type: {mod.type}")


def build_summary(changes: List[FactorChange], original: ConvergenceResult, modified: ConvergenceResult) -> str:
    changed = [c for c in changes if c.changed]
    if not changed:
        return "No factor signals changed with these modifications."
    plural = "s" if len(changed) > 1 else ""
    names = ", ".join(c.factor_name for c in changed)
    return (
        f"{len(changed)} factor{plural} changed: {names}. "
        f"Direction moved from {count_direction(original)} ({_convergence(original)}/{FACTOR_COUNT}) "
        f"to {count_direction(modified)} ({_convergence(modified)}/{FACTOR_COUNT})."
    )


def simulate(
    player: Player,
    game: Game,
    game_logs,
    season_stats: SeasonStats,
    defense_ranking: Optional[DefenseRanking],
    stat: str,
    original_line: float,
    modifications,
    extra: Optional[ExtraData] = None,
) -> WhatIfResult:
    """Evaluate the prop as given, then again with ``modifications`` applied."""
    mods = [m if isinstance(m, WhatIfModification) else WhatIfModification.from_dict(m) for m in modifications]

    original = evaluate(player, game, game_logs, season_stats, defense_ranking, stat, original_line, extra)

    scenario = _Scenario(game=game, game_logs=game_logs, defense_ranking=defense_ranking, line=float(original_line))
    for mod in mods:
        scenario = apply_modification(scenario, player, mod)

    modified = evaluate(
        player, scenario.game, scenario.game_logs, season_stats,
        scenario.defense_ranking, stat, scenario.line, extra,
    )

    changes = [
        FactorChange(
            factor_key=before.key,
            factor_name=before.name,
            original_signal=before.signal,
            modified_signal=after.signal,
            changed=before.signal != after.signal,
        )
        for before, after in zip(original.factors, modified.factors)
    ]

    result = WhatIfResult(
        original_convergence=_convergence(original),
        modified_convergence=_convergence(modified),
        original_direction=count_direction(original),
        modified_direction=count_direction(modified),
        original_lean=original.to_dict()["lean"],
        modified_lean=modified.to_dict()["lean"],
        factor_changes=changes,
        summary=build_summary(changes, original, modified),
    )
    logger.info(f"[WhatIf] {player.name} {stat}: {len(mods)} modification(s), {result.changed_count} factor(s) changed")
    return result
