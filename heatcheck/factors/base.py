"""
Shared plumbing for the per-sport factor sets.
"""
from typing import List, Optional

from heatcheck.config import FIRE_STRENGTH
from heatcheck.models import (
    ExtraData,
    FactorInput,
    FactorResult,
    WeightedFactor,
    OVER,
    UNDER,
    NEUTRAL,
)

ICONS = {OVER: "▲", UNDER: "▼", NEUTRAL: "—"}
DIRECTIONS = {OVER: 1, UNDER: -1, NEUTRAL: 0}


def to_weighted(key: str, label: str, weight: float, result: FactorResult) -> WeightedFactor:
    """Attach weight, icon and vote direction to a scorer result."""
    return WeightedFactor(
        key=key,
        name=label,
        signal=result.signal,
        strength=result.strength,
        detail=result.detail,
        data_point=result.data_point,
        icon=ICONS[result.signal],
        weight=weight,
        direction=DIRECTIONS[result.signal],
        fired=result.signal != NEUTRAL and result.strength > FIRE_STRENGTH,
    )


def signal_from_value(value: float, threshold: float, detail: str, data_point: str) -> FactorResult:
    """Wrap a bounded signal value (-1..1) as a FactorResult."""
    if value > threshold:
        signal = OVER
    elif value < -threshold:
        signal = UNDER
    else:
        signal = NEUTRAL
    return FactorResult(signal=signal, strength=abs(value), detail=detail, data_point=data_point)


class SportFactorProvider:
    """
    One sport's nine-factor set.

    Subclasses set ``sport`` and implement ``get_factors``; weights come
    from config.SPORT_FACTOR_WEIGHTS so every provider sums to 1.0.
    """

    sport = ""

    def get_factors(self, factor_input: FactorInput, extra: Optional[ExtraData] = None) -> List[WeightedFactor]:
        raise NotImplementedError

    def __repr__(self):
        return f"{type(self).__name__}(sport={self.sport!r})"
