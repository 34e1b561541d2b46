"""
Universal Factor Scorers

Nine sport-agnostic scorers shared by the NBA, MLB and NFL factor sets.
Each takes a FactorInput plus sport-tuned parameters and returns a
FactorResult(signal, strength, detail, data_point).

Scorers never raise on sparse data: anything missing degrades to a
neutral signal with strength 0 and a detail saying why.
"""
import logging

from heatcheck.config import LEAGUE_SIZE
from heatcheck.math_utils import ewma, mean, median, fmt_num, round_half_up
from heatcheck.models import FactorInput, FactorResult, OVER, UNDER, NEUTRAL

logger = logging.getLogger(__name__)


def classify(value: float, threshold: float) -> str:
    """over above +threshold, under below -threshold, otherwise neutral."""
    if value > threshold:
        return OVER
    if value < -threshold:
        return UNDER
    return NEUTRAL


def neutral(detail: str, data_point: str = "N/A") -> FactorResult:
    return FactorResult(signal=NEUTRAL, strength=0.0, detail=detail, data_point=data_point)


def no_game_logs() -> FactorResult:
    return neutral("No game log data")


# ─── Recent Trend (EWMA) ───

def score_recent_trend(
    factor_input: FactorInput,
    alpha: float,
    lookback: int = 10,
    fire_threshold: float = 0.08,
) -> FactorResult:
    """EWMA of the last ``lookback`` games against the line."""
    if not factor_input.game_logs:
        return no_game_logs()

    window = factor_input.game_logs.window(lookback).reversed()
    values = window.values(factor_input.stat)
    if len(values) < 3:
        return neutral("Insufficient recent data")

    line = factor_input.line
    ewma_val = ewma(values, alpha)
    deviation_pct = (ewma_val - line) / line * 100 if line > 0 else 0.0
    hit_count = sum(1 for v in values if v > line)
    hit_rate = hit_count / len(values)

    return FactorResult(
        signal=classify(deviation_pct, fire_threshold * 100),
        strength=abs(deviation_pct) / (fire_threshold * 100 * 2),
        detail=f"EWMA: {ewma_val:.1f} vs line {fmt_num(line)} ({round_half_up(hit_rate * 100)}% hit rate L{len(values)})",
        data_point=f"{hit_count}/{len(values)} over | EWMA {ewma_val:.1f}",
    )


# ─── Season Average vs Line ───

def score_season_avg(
    factor_input: FactorInput,
    use_median: bool = False,
    fire_threshold_pct: float = 0.05,
) -> FactorResult:
    if not factor_input.game_logs:
        return no_game_logs()

    line = factor_input.line
    if use_median:
        center = median(factor_input.game_logs.values(factor_input.stat))
    else:
        center = factor_input.season_stats.average
    gap = center - line
    deviation_pct = abs(gap) / line if line > 0 else 0.0
    threshold = max(0.5, line * fire_threshold_pct)

    label = "median" if use_median else "avg"
    position = "above" if gap > 0 else "below"
    sign = "+" if gap > 0 else ""
    return FactorResult(
        signal=classify(gap, threshold),
        strength=deviation_pct / (fire_threshold_pct * 2.5),
        detail=f"Season {label}: {center:.1f} vs line {fmt_num(line)}",
        data_point=f"{sign}{gap:.1f} {position} line",
    )


# ─── Opponent Defense Rank ───

def score_opponent_def(
    factor_input: FactorInput,
    top_threshold: int = 10,
    bottom_threshold: int = 21,
) -> FactorResult:
    """
    Opponent defense rank against the player's position.

    rank <= top_threshold is a tough defense (under), rank >=
    bottom_threshold is a soft one (over). Strength grows linearly to 1.0
    at rank 1 / rank 30.
    """
    if not factor_input.game_logs:
        return no_game_logs()
    ranking = factor_input.defense_ranking
    if ranking is None:
        return neutral("Opponent defense ranking unavailable")

    rank = ranking.rank
    if rank >= bottom_threshold:
        signal = OVER
        strength = (rank - bottom_threshold + 1) / (LEAGUE_SIZE - bottom_threshold + 1)
    elif rank <= top_threshold:
        signal = UNDER
        strength = (top_threshold + 1 - rank) / top_threshold
    else:
        signal = NEUTRAL
        strength = 0.2

    position = factor_input.player.position or "player"
    return FactorResult(
        signal=signal,
        strength=strength,
        detail=f"Opponent ranks #{rank} defending {position}s",
        data_point=f"{ranking.stats_allowed:.1f} {factor_input.stat}/game allowed",
    )


# ─── Home / Away Split ───

def score_home_away(factor_input: FactorInput, fire_threshold_pct: float = 0.10) -> FactorResult:
    logs = factor_input.game_logs
    if not logs:
        return no_game_logs()

    stat = factor_input.stat
    season_avg = factor_input.season_stats.average
    home_values = [g.stat(stat) for g in logs if g.is_home]
    away_values = [g.stat(stat) for g in logs if not g.is_home]
    home_avg = mean(home_values) if home_values else season_avg
    away_avg = mean(away_values) if away_values else season_avg

    venue = "Home" if factor_input.is_home else "Away"
    venue_avg = home_avg if factor_input.is_home else away_avg
    gap = venue_avg - factor_input.line
    threshold = max(0.8, factor_input.line * fire_threshold_pct)

    return FactorResult(
        signal=classify(gap, threshold),
        strength=abs(gap) / (threshold * 2.5),
        detail=f"{venue} avg: {venue_avg:.1f} (H: {home_avg:.1f} / A: {away_avg:.1f})",
        data_point=f"{venue} {venue_avg:.1f} avg",
    )


# ─── Rest / Fatigue ───

def score_rest_fatigue(factor_input: FactorInput) -> FactorResult:
    """Back-to-back leans under, 2+ days of rest leans over."""
    logs = factor_input.game_logs
    if not logs:
        return no_game_logs()

    stat = factor_input.stat
    latest = logs.latest
    is_b2b = latest.is_back_to_back
    rest_days = latest.rest_days if latest.rest_days is not None else 1
    season_avg = factor_input.season_stats.average

    b2b_values = [g.stat(stat) for g in logs if g.is_back_to_back]
    b2b_avg = mean(b2b_values) if b2b_values else season_avg
    rested_values = [g.stat(stat) for g in logs if (g.rest_days or 0) >= 2]
    rested_avg = mean(rested_values) if rested_values else season_avg

    if is_b2b:
        return FactorResult(
            signal=UNDER,
            strength=abs(season_avg - b2b_avg) / 4,
            detail=f"Back-to-back. B2B avg: {b2b_avg:.1f} vs season {season_avg:.1f}",
            data_point=f"B2B: {b2b_avg:.1f} avg",
        )
    if rest_days >= 2:
        return FactorResult(
            signal=OVER,
            strength=abs(rested_avg - season_avg) / 4,
            detail=f"{rest_days} days rest. Rested avg: {rested_avg:.1f}",
            data_point=f"{rest_days}d rest",
        )
    return FactorResult(
        signal=NEUTRAL,
        strength=0.1,
        detail=f"{rest_days} days rest. Rested avg: {rested_avg:.1f}",
        data_point=f"{rest_days}d rest",
    )


# ─── Head-to-Head ───

def score_h2h(factor_input: FactorInput, min_games: int = 3) -> FactorResult:
    logs = factor_input.game_logs
    if not logs:
        return no_game_logs()

    game = factor_input.game
    opponent = game.away_team.abbrev if factor_input.is_home else game.home_team.abbrev
    h2h_values = [g.stat(factor_input.stat) for g in logs if g.opponent == opponent]
    if len(h2h_values) < min_games:
        return neutral(f"Limited H2H data ({len(h2h_values)} games vs {opponent})")

    hits = sum(1 for v in h2h_values if v > factor_input.line)
    hit_rate = hits / len(h2h_values)
    if hit_rate > 0.6:
        signal = OVER
    elif hit_rate < 0.4:
        signal = UNDER
    else:
        signal = NEUTRAL

    return FactorResult(
        signal=signal,
        strength=abs(hit_rate - 0.5) * 2,
        detail=f"{round_half_up(hit_rate * 100)}% hit rate vs {opponent} ({len(h2h_values)} games)",
        data_point=f"{hits}/{len(h2h_values)} over",
    )


# ─── Momentum / Streak ───

def current_streak(values, line: float) -> int:
    """
    Signed run length from the newest game: +n consecutive overs, -n
    consecutive unders. A value equal to the line counts as an under.
    """
    streak = 0
    for value in values:
        if streak == 0:
            streak = 1 if value > line else -1
        elif streak > 0 and value > line:
            streak += 1
        elif streak < 0 and value <= line:
            streak -= 1
        else:
            break
    return streak


def score_momentum(factor_input: FactorInput, fire_threshold: int = 4) -> FactorResult:
    if not factor_input.game_logs:
        return no_game_logs()

    streak = current_streak(factor_input.game_logs.values(factor_input.stat), factor_input.line)
    if streak >= fire_threshold:
        signal = OVER
    elif streak <= -fire_threshold:
        signal = UNDER
    else:
        signal = NEUTRAL

    if streak > 0:
        detail = f"{streak}-game over streak"
    elif streak < 0:
        detail = f"{abs(streak)}-game under streak"
    else:
        detail = "No active streak"

    return FactorResult(
        signal=signal,
        strength=abs(streak) / 7,
        detail=detail,
        data_point=f"{abs(streak)} game streak",
    )


# ─── Minutes / Usage Trend ───

def score_minutes_trend(factor_input: FactorInput, fire_threshold: float = 2) -> FactorResult:
    """Five most recent games' minutes against the (up to) five before them."""
    if factor_input.stat == "minutes":
        return neutral("N/A (analyzing minutes prop)")
    if not factor_input.game_logs:
        return no_game_logs()

    minutes = [
        g.minutes_played for g in factor_input.game_logs.window(10)
        if g.minutes_played is not None and g.minutes_played > 0
    ]
    if len(minutes) < 5 or len(minutes[5:]) == 0:
        return neutral("Insufficient minutes data")

    recent = mean(minutes[:5])
    older = mean(minutes[5:])
    delta = recent - older
    sign = "+" if delta > 0 else ""

    return FactorResult(
        signal=classify(delta, fire_threshold),
        strength=abs(delta) / 5,
        detail=f"L5 avg: {recent:.1f} min vs prior: {older:.1f} min",
        data_point=f"{sign}{delta:.1f} min shift",
    )


# ─── Game Environment (O/U + Pace) ───

def implied_team_total(total: float, spread: float, is_home: bool) -> float:
    if is_home:
        return total / 2 - spread / 2
    return total / 2 + spread / 2


def score_game_environment(
    factor_input: FactorInput,
    median_total: float,
    threshold_pct: float = 0.05,
) -> FactorResult:
    if not factor_input.game_logs:
        return no_game_logs()

    total = factor_input.game.total
    if total is None or total <= 0:
        return neutral("Game total unavailable")

    delta = total - median_total
    pace_threshold = median_total * threshold_pct
    implied = implied_team_total(total, factor_input.game.spread or 0.0, factor_input.is_home)

    return FactorResult(
        signal=classify(delta, pace_threshold),
        strength=abs(delta) / (pace_threshold * 3),
        detail=f"Game total: {fmt_num(total)} (median: {fmt_num(median_total)}). Team implied: {implied:.1f}",
        data_point=f"O/U {fmt_num(total)} | Implied {implied:.1f}",
    )
