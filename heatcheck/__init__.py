"""
HeatCheck - sport-aware prop convergence engine.

Scores an athlete prop line against nine weighted factors per sport
(NBA, MLB, NFL) and turns the result into a lean, a verdict, what-if
scenarios and a nightly ranked board.
"""
__version__ = "1.0.0"
