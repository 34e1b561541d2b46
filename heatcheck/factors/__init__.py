"""
HeatCheck - 9 Factor Convergence Framework

Each sport scores a prop against exactly nine weighted factors:
- NBA: all nine universal factors (Recent Trend 0.26, Season Avg 0.20,
  Opponent Defense 0.18, Minutes Trend 0.14, Rest 0.10, Game Env 0.07,
  Home/Away 0.03, H2H 0.01, Momentum 0.01)
- MLB: Opposing Pitcher (0.22), Platoon Split (0.15), Ballpark (0.11),
  Weather & Wind (0.11) and Lineup Position (0.03) replace the
  basketball-only factors
- NFL: Snap/Target Share (0.15), Rest & Game Script (0.10) and
  Weather & Dome (0.05) replace them

Unknown sports fall back to the NBA factor set.
"""
import logging

from heatcheck.config import DEFAULT_SPORT
from .base import SportFactorProvider, to_weighted
from .weather import get_weather_signal
from .nba import NBAProvider, get_nba_factors
from .mlb import MLBProvider, get_mlb_factors
from .nfl import NFLProvider, get_nfl_factors

logger = logging.getLogger(__name__)

PROVIDERS = {
    "nba": NBAProvider(),
    "mlb": MLBProvider(),
    "nfl": NFLProvider(),
}


def get_provider(sport: str) -> SportFactorProvider:
    """Factor provider for a sport; anything unrecognized gets the NBA set."""
    key = (sport or "").lower()
    provider = PROVIDERS.get(key)
    if provider is None:
        logger.debug(f"[Factors] Unknown sport '{sport}', falling back to {DEFAULT_SPORT}")
        provider = PROVIDERS[DEFAULT_SPORT]
    return provider


__all__ = [
    "PROVIDERS",
    "get_provider",
    "SportFactorProvider",
    "NBAProvider",
    "MLBProvider",
    "NFLProvider",
    "get_nba_factors",
    "get_mlb_factors",
    "get_nfl_factors",
    "get_weather_signal",
    "to_weighted",
]
