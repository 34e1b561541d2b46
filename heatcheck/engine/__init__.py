"""HeatCheck Convergence Engine."""
from .convergence import (
    evaluate,
    compute_lean,
    weighted_score,
    ConvergenceError,
)
from .verdict import synthesize_verdict, get_verdict_info, Verdict
from .what_if import simulate, WhatIfModification, WhatIfResult
from .game_log import (
    compute_season_stats,
    get_hit_rate,
    get_avg_margin,
    compute_heat_ring,
    build_game_log_timeline,
)
from .prop_check import check_prop
from .heatcheck import (
    evaluate_pick,
    rank_picks,
    scan_slate,
    HeatCheckScanner,
    HeatCheckPick,
    HeatCheckBoard,
    SlateCandidate,
)

__all__ = [
    "evaluate",
    "compute_lean",
    "weighted_score",
    "ConvergenceError",
    "synthesize_verdict",
    "get_verdict_info",
    "Verdict",
    "simulate",
    "WhatIfModification",
    "WhatIfResult",
    "compute_season_stats",
    "get_hit_rate",
    "get_avg_margin",
    "compute_heat_ring",
    "build_game_log_timeline",
    "check_prop",
    "evaluate_pick",
    "rank_picks",
    "scan_slate",
    "HeatCheckScanner",
    "HeatCheckPick",
    "HeatCheckBoard",
    "SlateCandidate",
]
