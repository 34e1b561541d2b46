"""
Verdict Synthesizer

Turns the factor tally into a display verdict: direction, convergence
score out of 9, confidence 1-99, label, sublabel, icon and color.

Two confidence modes:
- Weight-aware (weighted factors given): |Σ w·d·s|·100 plus up to 20
  points of L10 hit-rate reinforcement
- Legacy (counts only): 60% factor-count share, 40% aligned-strength share

Direction always comes from the over/under counts; a tie is a toss-up
and pins confidence to 50.
"""
import logging
from dataclasses import dataclass, asdict
from typing import List, Optional

from heatcheck.config import VERDICT_COLORS
from heatcheck.engine.convergence import weighted_score, FACTOR_COUNT
from heatcheck.math_utils import clamp, round_half_up
from heatcheck.models import WeightedFactor, OVER, UNDER, TOSS_UP

logger = logging.getLogger(__name__)


@dataclass
class Verdict:
    direction: str          # over / under / toss-up
    convergence_score: int  # factors agreeing with direction, out of 9
    confidence: int         # 1-99
    label: str
    sublabel: str
    icon: str
    color: str
    hit_rate_l10: float
    avg_margin_l10: float
    season_avg: float

    def to_dict(self) -> dict:
        return asdict(self)


def _side_colors(direction: str) -> dict:
    """Strong/lean colors for a side and for the side opposing it."""
    if direction == OVER:
        return {
            "strong": VERDICT_COLORS["strongOver"],
            "lean": VERDICT_COLORS["leanOver"],
            "against_strong": VERDICT_COLORS["strongUnder"],
            "against_lean": VERDICT_COLORS["leanUnder"],
            "icon": "🟢",
        }
    return {
        "strong": VERDICT_COLORS["strongUnder"],
        "lean": VERDICT_COLORS["leanUnder"],
        "against_strong": VERDICT_COLORS["strongOver"],
        "against_lean": VERDICT_COLORS["leanOver"],
        "icon": "🔴",
    }


def get_verdict_info(score: int, direction: str) -> dict:
    """Label, sublabel, icon and color for a convergence score out of 9."""
    if direction == TOSS_UP:
        return {
            "label": "TOSS-UP",
            "sublabel": "Data is split, no clear edge",
            "icon": "🟡",
            "color": VERDICT_COLORS["tossUp"],
        }

    side = _side_colors(direction)
    name = direction.upper()
    favor = f"{score}/{FACTOR_COUNT} factors favor {direction}"

    if score >= 9:
        return {"label": f"FULL CONVERGENCE {name}", "sublabel": "All signals aligned",
                "icon": "🔥", "color": side["strong"]}
    if score >= 8:
        return {"label": f"NEAR-FULL {name}", "sublabel": favor, "icon": "🔥", "color": side["strong"]}
    if score >= 6:
        return {"label": f"STRONG {name}", "sublabel": favor, "icon": side["icon"], "color": side["strong"]}
    if score == 5:
        return {"label": f"LEAN {name}", "sublabel": favor, "icon": side["icon"], "color": side["lean"]}
    if score == 4:
        return {"label": "SLIGHT LEAN", "sublabel": "Marginal edge detected",
                "icon": "🟡", "color": VERDICT_COLORS["tossUp"]}
    if score == 3:
        return {"label": "MIXED SIGNALS", "sublabel": "Data is split",
                "icon": "🟡", "color": VERDICT_COLORS["tossUp"]}
    if score == 2:
        return {"label": "LEAN AGAINST", "sublabel": "Factors favor the other side",
                "icon": "🟠", "color": side["against_lean"]}
    if score == 1:
        return {"label": "STRONG AGAINST", "sublabel": "Strong case against",
                "icon": "🔴", "color": side["against_strong"]}
    return {"label": "FADE", "sublabel": "All signals oppose", "icon": "🔴", "color": side["against_strong"]}


def _direction_from_counts(over_count: int, under_count: int):
    if over_count > under_count:
        return OVER, over_count
    if under_count > over_count:
        return UNDER, under_count
    return TOSS_UP, max(over_count, under_count)


def synthesize_verdict(
    factors,
    over_count: int,
    under_count: int,
    neutral_count: int,
    hit_rate_l10: float,
    avg_margin_l10: float,
    season_avg: float,
    weighted_factors: Optional[List[WeightedFactor]] = None,
) -> Verdict:
    """
    Build the display verdict.

    Args:
        factors: flat factors (anything with .signal and .strength)
        weighted_factors: enables weight-aware confidence when non-empty
    """
    direction, score = _direction_from_counts(over_count, under_count)

    if direction == TOSS_UP:
        confidence = 50
    elif weighted_factors:
        reinforcement = abs(hit_rate_l10 - 0.5) * 40
        confidence = round_half_up(abs(weighted_score(weighted_factors)) * 100 + reinforcement)
    else:
        total_strength = sum(f.strength for f in factors)
        aligned_strength = sum(f.strength for f in factors if f.signal == direction)
        count_confidence = score / FACTOR_COUNT * 100
        strength_confidence = aligned_strength / total_strength * 100 if total_strength > 0 else 50
        confidence = round_half_up(count_confidence * 0.6 + strength_confidence * 0.4)

    info = get_verdict_info(score, direction)
    return Verdict(
        direction=direction,
        convergence_score=score,
        confidence=int(clamp(confidence, 1, 99)),
        label=info["label"],
        sublabel=info["sublabel"],
        icon=info["icon"],
        color=info["color"],
        hit_rate_l10=hit_rate_l10,
        avg_margin_l10=avg_margin_l10,
        season_avg=season_avg,
    )
